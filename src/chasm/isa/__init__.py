"""
CHASM Instruction Set Package
=============================

CHIP-8 instruction set definitions shared by the assembler and the
disassembler. Both directions read the same INSTRUCTION_TABLE, so an
opcode the assembler can produce is always one the disassembler can name.

Usage:
    from chasm.isa import (
        Opcode,
        INSTRUCTION_TABLE,
        classify_operand,
        get_forms,
    )
"""

from chasm.isa.chip8 import (
    # Core types
    Opcode,
    Operand,
    OperandKind,
    OperandSpec,
    InstructionForm,
    # Master instruction table
    INSTRUCTION_TABLE,
    MNEMONICS,
    KEYWORD_OPERANDS,
    FIELD_WIDTHS,
    REGISTER_SIGIL,
    # Token parsing
    parse_number,
    parse_register,
    classify_operand,
    # Lookup functions
    get_forms,
    get_signatures,
    is_valid_instruction,
    find_form,
)

__all__ = [
    "Opcode",
    "Operand",
    "OperandKind",
    "OperandSpec",
    "InstructionForm",
    "INSTRUCTION_TABLE",
    "MNEMONICS",
    "KEYWORD_OPERANDS",
    "FIELD_WIDTHS",
    "REGISTER_SIGIL",
    "parse_number",
    "parse_register",
    "classify_operand",
    "get_forms",
    "get_signatures",
    "is_valid_instruction",
    "find_form",
]
