"""
CHASM - CHIP-8 Assembler and Disassembler
=========================================

This package converts between CHIP-8 assembly text and the 16-bit
opcodes a CHIP-8 interpreter executes.

Main Components
---------------
- **isa**: The CHIP-8 instruction table shared by both directions
- **assembler**: Source text (.chasm) to ROM image (.ch8)
- **disassembler**: ROM image (.ch8) back to source text (.chasm)
- **files**: File reading/writing and output path derivation

Quick Start
-----------
Assemble a program:
    >>> from chasm.assembler import Assembler
    >>> asm = Assembler()
    >>> rom = asm.assemble_file("pong.chasm")
    >>> asm.write_binary("pong_a.ch8")

Disassemble a ROM:
    >>> from chasm.disassembler import Chip8Disassembler
    >>> text = Chip8Disassembler().disassemble_to_text(rom)

Or use the command-line tools:
    $ c8asm pong.chasm
    $ c8disasm pong.ch8

Reference Documentation
-----------------------
- CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM

Version History
---------------
1.0.0 - Initial release with assembler and disassembler
"""

__version__ = "1.0.0"
__author__ = "CHASM Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chasm.assembler import Assembler, EncodedInstruction, Encoder, encode_line
from chasm.disassembler import Chip8Disassembler, DisassembledInstruction, decode_opcode
from chasm.config import ChasmConfig, DEFAULT_CONFIG
from chasm.isa import Opcode, OperandKind, INSTRUCTION_TABLE
from chasm.errors import (
    ChasmError,
    CodecError,
    MalformedOperandError,
    UnencodableLineError,
    RomError,
    Diagnostic,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Assembler
    "Assembler",
    "EncodedInstruction",
    "Encoder",
    "encode_line",
    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
    "decode_opcode",
    # Configuration
    "ChasmConfig",
    "DEFAULT_CONFIG",
    # Instruction set
    "Opcode",
    "OperandKind",
    "INSTRUCTION_TABLE",
    # Exception hierarchy
    "ChasmError",
    "CodecError",
    "MalformedOperandError",
    "UnencodableLineError",
    "RomError",
    "Diagnostic",
]
