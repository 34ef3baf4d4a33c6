"""
CHIP-8 Assembler
================

This package converts CHIP-8 assembly source into ROM images.

Main Components
---------------
- **Assembler**: Runs the encoder over a whole source file and collects
  the ROM bytes plus a diagnostic for every dropped line
- **Encoder**: Table-driven encoder for single instruction lines

Source Format
-------------
One instruction per line. Tokens are separated by spaces and/or commas.
Registers are written V0..V15 and numbers in decimal:

    CLS
    LD V0, 10
    LD I, 600
    DRW V0, V1, 5
    SE V3, V5
    JP 512

A line whose first word is not a known mnemonic must be a raw opcode
of exactly four hex digits (e.g. "00E0").

Example Usage
-------------
>>> from chasm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string("CLS\\nRET").hex()
'00e000ee'
"""

from chasm.assembler.assembler import Assembler, assemble, assemble_file
from chasm.assembler.encoder import (
    EncodedInstruction,
    Encoder,
    encode_instruction,
    encode_line,
    tokenize_line,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Encoder
    "EncodedInstruction",
    "Encoder",
    "encode_instruction",
    "encode_line",
    "tokenize_line",
]
