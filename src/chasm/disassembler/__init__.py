"""
CHASM Disassembler Module
=========================

This module turns CHIP-8 ROM images back into assembly source that the
assembler accepts.

Usage:
    from chasm.disassembler import Chip8Disassembler, decode_opcode

    # Decode a single opcode
    decode_opcode(0x8AB4)   # 'ADD V10, V11'

    # Disassemble a ROM loaded at 0x200
    disasm = Chip8Disassembler()
    text = disasm.disassemble_to_text(rom_bytes)
"""

from .decoder import (
    Chip8Disassembler,
    Decoder,
    DisassembledInstruction,
    decode_opcode,
)

__all__ = [
    "Chip8Disassembler",
    "Decoder",
    "DisassembledInstruction",
    "decode_opcode",
]
