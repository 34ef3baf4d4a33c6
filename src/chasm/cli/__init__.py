"""
CHASM Command-Line Interface
============================

This package provides the command-line tools:

- **c8asm**: CHIP-8 assembler (.chasm -> .ch8)
- **c8disasm**: CHIP-8 disassembler (.ch8 -> .chasm)

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c8asm", "c8disasm"]
