"""
CHIP-8 Instruction Set Definition
=================================

This module defines the CHIP-8 instruction set as a single declarative
table shared by the assembler (which encodes instructions) and the
disassembler (which decodes them).

Every CHIP-8 instruction is one 16-bit big-endian word. The word splits
into four nibbles, and each instruction family fixes some nibbles and
packs operand fields into the others:

| Field | Bits | Meaning |
|-------|------|---------------------------------------|
| x     | 4    | register index in nibble 2 (Vx)       |
| y     | 4    | register index in nibble 3 (Vy)       |
| n     | 4    | low nibble (sprite height for DRW)    |
| kk    | 8    | low byte (immediate value)            |
| nnn   | 12   | low 12 bits (address)                 |

Table Layout
------------
Each row of INSTRUCTION_TABLE is an InstructionForm: a mnemonic, the
ordered operand shapes it accepts, and the opcode pattern those operands
produce. Patterns are written the way CHIP-8 references write them:
uppercase hex digits are fixed, lowercase letters are fields.

    InstructionForm("SE", (REG_X, REG_Y), "5xy0", ...)
    InstructionForm("SE", (REG_X, BYTE), "3xkk", ...)

The same mnemonic can appear several times; the operand shapes decide
which row an instruction line uses. Rows flagged canonical=False are
extra surface forms the assembler accepts but the disassembler never
prints.

Operand Kinds
-------------
Source tokens are classified into tagged variants before dispatch:

- REGISTER: "V" followed by an unsigned decimal index (V0..V15)
- IMMEDIATE: an unsigned decimal literal (address, byte or nibble)
- KEYWORD: one of I, DT, ST, F, B, K
- INVALID: anything else

Reference
---------
- Cowgod's CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
import string


# =============================================================================
# Opcode Value Type
# =============================================================================

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Opcode:
    """
    A 16-bit CHIP-8 instruction word.

    Opcodes are immutable values. The nibble and field accessors follow
    the usual CHIP-8 naming (x, y, n, kk, nnn).

    Attributes:
        value: The opcode as an unsigned 16-bit integer
    """
    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFF:
            raise ValueError(f"opcode out of range: {self.value}")

    @classmethod
    def from_bytes(cls, hi: int, lo: int) -> "Opcode":
        """Build an opcode from its high and low bytes (big-endian order)."""
        return cls(((hi & 0xFF) << 8) | (lo & 0xFF))

    @classmethod
    def from_hex(cls, text: str) -> "Opcode":
        """
        Decode exactly four hex digits into an opcode.

        Raises:
            ValueError: If text is not four hex digits
        """
        if len(text) != 4 or not all(c in _HEX_DIGITS for c in text):
            raise ValueError(f"expected 4 hex digits, got '{text}'")
        hi, lo = bytes.fromhex(text)
        return cls.from_bytes(hi, lo)

    @property
    def nibbles(self) -> tuple[int, int, int, int]:
        return (
            (self.value & 0xF000) >> 12,
            (self.value & 0x0F00) >> 8,
            (self.value & 0x00F0) >> 4,
            self.value & 0x000F,
        )

    @property
    def x(self) -> int:
        return (self.value & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.value & 0x00F0) >> 4

    @property
    def n(self) -> int:
        return self.value & 0x000F

    @property
    def kk(self) -> int:
        return self.value & 0x00FF

    @property
    def nnn(self) -> int:
        return self.value & 0x0FFF

    @property
    def hex(self) -> str:
        """Four uppercase hex digits, e.g. '00E0'."""
        return f"{self.value:04X}"

    def to_bytes(self) -> bytes:
        """Return the opcode as 2 bytes, high byte first."""
        return self.value.to_bytes(2, "big")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.hex


# =============================================================================
# Operand Classification
# =============================================================================

class OperandKind(Enum):
    """
    Tagged variants for source operand tokens.

    Dispatch inside SE/SNE/ADD/LD depends on these: "V5" and "5" are
    both valid second operands of SE, but select different opcodes.
    """
    REGISTER = auto()   # V0..V15
    IMMEDIATE = auto()  # Decimal literal
    KEYWORD = auto()    # I, DT, ST, F, B, K
    INVALID = auto()    # Anything else


REGISTER_SIGIL = "V"

# Operand keywords that name special registers or LD addressing forms
KEYWORD_OPERANDS = frozenset({"I", "DT", "ST", "F", "B", "K"})

# Literals are parsed as 16-bit unsigned values before field-width checks
MAX_LITERAL = 0xFFFF


@dataclass(frozen=True)
class Operand:
    """
    A classified operand token.

    Attributes:
        kind: The operand's tagged variant
        text: The token as written (keywords are uppercased)
        value: Register index or literal value; None for keywords and invalid tokens
    """
    kind: OperandKind
    text: str
    value: Optional[int] = None


def parse_number(token: str) -> Optional[int]:
    """
    Parse an unsigned decimal literal.

    Returns:
        The value, or None if the token is not a decimal number that fits
        16 bits
    """
    if not token or not token.isascii() or not token.isdigit():
        return None
    value = int(token)
    if value > MAX_LITERAL:
        return None
    return value


def parse_register(token: str) -> Optional[int]:
    """
    Parse a register reference such as "V3" or "V15".

    A token that is not register-shaped returns None rather than raising:
    callers use that to tell "SE V1, V2" apart from "SE V1, 2".
    The index is not range-checked here, so "V16" parses as 16.
    """
    if len(token) < 2 or token[0].upper() != REGISTER_SIGIL:
        return None
    return parse_number(token[1:])


def classify_operand(token: str) -> Operand:
    """Classify a source token into an Operand."""
    register = parse_register(token)
    if register is not None:
        return Operand(OperandKind.REGISTER, token, register)

    number = parse_number(token)
    if number is not None:
        return Operand(OperandKind.IMMEDIATE, token, number)

    if token.upper() in KEYWORD_OPERANDS:
        return Operand(OperandKind.KEYWORD, token.upper())

    return Operand(OperandKind.INVALID, token)


# =============================================================================
# Operand Specifications
# =============================================================================

# Field name -> width in bits
FIELD_WIDTHS = {"x": 4, "y": 4, "n": 4, "kk": 8, "nnn": 12}

# Placeholder text used in hints ("SE accepts: Vx, Vy | Vx, kk")
FIELD_PLACEHOLDERS = {"x": "Vx", "y": "Vy", "n": "n", "kk": "kk", "nnn": "addr"}


@dataclass(frozen=True)
class OperandSpec:
    """
    One operand position of an instruction form.

    Either a field (register or immediate packed into the opcode) or a
    fixed keyword that must appear literally. "V0" in "JP V0, addr" is a
    fixed keyword that matches the register token V0.

    Attributes:
        kind: Operand kind this position accepts
        field: Opcode field the operand fills (x, y, n, kk, nnn)
        keyword: Literal text required at this position
    """
    kind: OperandKind
    field: Optional[str] = None
    keyword: Optional[str] = None

    def matches(self, operand: Operand) -> bool:
        """Return True if the classified operand fits this position."""
        if self.keyword is None:
            return operand.kind == self.kind
        if self.kind == OperandKind.REGISTER:
            return (operand.kind == OperandKind.REGISTER
                    and operand.value == parse_register(self.keyword))
        return operand.kind == OperandKind.KEYWORD and operand.text == self.keyword

    def render(self, fields: dict[str, int]) -> str:
        """Format this operand for disassembly output."""
        if self.keyword is not None:
            return self.keyword
        if self.kind == OperandKind.REGISTER:
            return f"{REGISTER_SIGIL}{fields[self.field]}"
        return str(fields[self.field])

    def __str__(self) -> str:
        if self.keyword is not None:
            return self.keyword
        return FIELD_PLACEHOLDERS[self.field]


REG_X = OperandSpec(OperandKind.REGISTER, field="x")
REG_Y = OperandSpec(OperandKind.REGISTER, field="y")
BYTE = OperandSpec(OperandKind.IMMEDIATE, field="kk")
ADDR = OperandSpec(OperandKind.IMMEDIATE, field="nnn")
NIBBLE = OperandSpec(OperandKind.IMMEDIATE, field="n")
V0 = OperandSpec(OperandKind.REGISTER, keyword="V0")


def keyword(name: str) -> OperandSpec:
    """Create a fixed keyword operand position (I, DT, ST, F, B, K)."""
    return OperandSpec(OperandKind.KEYWORD, keyword=name)


KW_I = keyword("I")
KW_DT = keyword("DT")
KW_ST = keyword("ST")
KW_F = keyword("F")
KW_B = keyword("B")
KW_K = keyword("K")


# =============================================================================
# Instruction Forms
# =============================================================================

def _field_layout(pattern: str) -> dict[str, tuple[int, int]]:
    """
    Locate the fields of an opcode pattern.

    Returns:
        Dictionary mapping field name to (shift, width) in bits

    Example:
        >>> _field_layout("Dxyn")
        {'x': (8, 4), 'y': (4, 4), 'n': (0, 4)}
    """
    layout = {}
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char in "0123456789ABCDEF":
            i += 1
            continue
        run = 1
        while i + run < len(pattern) and pattern[i + run] == char:
            run += 1
        name = {"x": "x", "y": "y", "k": "kk"}.get(char)
        if name is None:
            name = "nnn" if run == 3 else "n"
        shift = 4 * (len(pattern) - (i + run))
        layout[name] = (shift, 4 * run)
        i += run
    return layout


@dataclass(frozen=True)
class InstructionForm:
    """
    One row of the instruction table.

    This dataclass is immutable (frozen) so the table cannot change at
    runtime.

    Attributes:
        mnemonic: Instruction keyword (e.g. "LD")
        operands: Ordered operand positions this form accepts
        pattern: Opcode pattern, e.g. "8xy4" (uppercase hex fixed, letters fields)
        description: One-line summary of what the instruction does
        canonical: False for alternate spellings the disassembler never prints
        decode_mask: Bits the disassembler checks, when fewer than the pattern
            fixes (None means the pattern mask)
    """
    mnemonic: str
    operands: tuple[OperandSpec, ...]
    pattern: str
    description: str = ""
    canonical: bool = True
    decode_mask: Optional[int] = None

    @property
    def mask(self) -> int:
        """Bits fixed by the pattern."""
        mask = 0
        for i, char in enumerate(self.pattern):
            if char in "0123456789ABCDEF":
                mask |= 0xF << (12 - 4 * i)
        return mask

    @property
    def value(self) -> int:
        """Opcode bits with every field set to zero."""
        value = 0
        for i, char in enumerate(self.pattern):
            if char in "0123456789ABCDEF":
                value |= int(char, 16) << (12 - 4 * i)
        return value

    @property
    def match_mask(self) -> int:
        """Bits an opcode must share with value to decode as this form."""
        return self.mask if self.decode_mask is None else self.decode_mask

    @property
    def fields(self) -> dict[str, tuple[int, int]]:
        return _field_layout(self.pattern)

    @property
    def signature(self) -> str:
        """Operand shape for messages, e.g. 'Vx, kk'."""
        return ", ".join(str(spec) for spec in self.operands)

    def accepts(self, operands: list[Operand]) -> bool:
        """Return True if the classified operands fit this form."""
        if len(operands) != len(self.operands):
            return False
        return all(spec.matches(op) for spec, op in zip(self.operands, operands))

    def matches_opcode(self, opcode: int) -> bool:
        return (opcode & self.match_mask) == self.value

    def fits_pattern(self, opcode: int) -> bool:
        """Return True if the encoder can produce this exact opcode from this form."""
        return (opcode & self.mask) == self.value

    def encode(self, values: dict[str, int]) -> Opcode:
        """
        Pack field values into an opcode.

        Raises:
            ValueError: If a value does not fit its field
        """
        word = self.value
        for name, (shift, width) in self.fields.items():
            field_value = values.get(name, 0)
            if not 0 <= field_value < (1 << width):
                raise ValueError(f"{name} out of range: {field_value}")
            word |= field_value << shift
        return Opcode(word)

    def extract(self, opcode: int) -> dict[str, int]:
        """Unpack the field values of an opcode matching this form."""
        return {
            name: (opcode >> shift) & ((1 << width) - 1)
            for name, (shift, width) in self.fields.items()
        }

    def render(self, opcode: int) -> str:
        """Format an opcode matching this form as assembly text."""
        fields = self.extract(opcode)
        if not self.operands:
            return self.mnemonic
        operands = ", ".join(spec.render(fields) for spec in self.operands)
        return f"{self.mnemonic} {operands}"

    def __repr__(self) -> str:
        return f"InstructionForm({self.mnemonic} {self.signature} -> {self.pattern})"


# =============================================================================
# Instruction Table
# =============================================================================
# This is the master table of all CHIP-8 instructions.
# Within one mnemonic the first row whose operand shapes match wins.
# decode_mask widens decoding where a family ignores its low digits:
# 0x0 is told apart by low byte only, 0x5 and 0x9 by leading nibble only.
# =============================================================================

INSTRUCTION_TABLE: tuple[InstructionForm, ...] = (
    # System and flow control
    InstructionForm("CLS", (), "00E0", "Clear the display", decode_mask=0xF0FF),
    InstructionForm("RET", (), "00EE", "Return from subroutine", decode_mask=0xF0FF),
    InstructionForm("JP", (ADDR,), "1nnn", "Jump to nnn"),
    InstructionForm("JP", (V0, ADDR), "Bnnn", "Jump to nnn + V0"),
    InstructionForm("CALL", (ADDR,), "2nnn", "Call subroutine at nnn"),

    # Conditional skips
    InstructionForm("SE", (REG_X, REG_Y), "5xy0", "Skip next if Vx == Vy", decode_mask=0xF000),
    InstructionForm("SE", (REG_X, BYTE), "3xkk", "Skip next if Vx == kk"),
    InstructionForm("SNE", (REG_X, REG_Y), "9xy0", "Skip next if Vx != Vy", decode_mask=0xF000),
    InstructionForm("SNE", (REG_X, BYTE), "4xkk", "Skip next if Vx != kk"),
    InstructionForm("SKP", (REG_X,), "Ex9E", "Skip next if key Vx is pressed"),
    InstructionForm("SKNP", (REG_X,), "ExA1", "Skip next if key Vx is not pressed"),

    # Loads
    InstructionForm("LD", (KW_I, REG_X), "Fx55", "Store V0..Vx at I"),
    InstructionForm("LD", (KW_I, ADDR), "Annn", "Set I = nnn"),
    InstructionForm("LD", (KW_DT, REG_X), "Fx15", "Set delay timer = Vx"),
    InstructionForm("LD", (KW_ST, REG_X), "Fx18", "Set sound timer = Vx"),
    InstructionForm("LD", (KW_F, REG_X), "Fx29", "Set I = sprite for digit Vx"),
    InstructionForm("LD", (KW_B, REG_X), "Fx33", "Store BCD of Vx at I, I+1, I+2"),
    InstructionForm("LD", (REG_X, KW_DT), "Fx07", "Set Vx = delay timer"),
    InstructionForm("LD", (REG_X, KW_K), "Fx0A", "Wait for key, store in Vx"),
    InstructionForm("LD", (REG_X, KW_I), "Fx65", "Read V0..Vx from I"),
    InstructionForm("LD", (REG_X, REG_Y), "8xy0", "Set Vx = Vy"),
    InstructionForm("LD", (REG_X, BYTE), "6xkk", "Set Vx = kk"),

    # Arithmetic and logic
    InstructionForm("ADD", (KW_I, REG_X), "Fx1E", "Set I = I + Vx"),
    InstructionForm("ADD", (REG_X, REG_Y), "8xy4", "Set Vx = Vx + Vy, VF = carry"),
    InstructionForm("ADD", (REG_X, BYTE), "7xkk", "Set Vx = Vx + kk"),
    InstructionForm("OR", (REG_X, REG_Y), "8xy1", "Set Vx = Vx OR Vy"),
    InstructionForm("AND", (REG_X, REG_Y), "8xy2", "Set Vx = Vx AND Vy"),
    InstructionForm("XOR", (REG_X, REG_Y), "8xy3", "Set Vx = Vx XOR Vy"),
    InstructionForm("SUB", (REG_X, REG_Y), "8xy5", "Set Vx = Vx - Vy, VF = NOT borrow"),
    InstructionForm("SHR", (REG_X, REG_Y), "8xy6", "Set Vx = Vx SHR 1"),
    InstructionForm("SHR", (REG_X,), "8x06", "Set Vx = Vx SHR 1", canonical=False),
    InstructionForm("SUBN", (REG_X, REG_Y), "8xy7", "Set Vx = Vy - Vx, VF = NOT borrow"),
    InstructionForm("SHL", (REG_X, REG_Y), "8xyE", "Set Vx = Vx SHL 1"),
    InstructionForm("SHL", (REG_X,), "8x0E", "Set Vx = Vx SHL 1", canonical=False),
    InstructionForm("RND", (REG_X, BYTE), "Cxkk", "Set Vx = random byte AND kk"),

    # Display
    InstructionForm("DRW", (REG_X, REG_Y, NIBBLE), "Dxyn", "Draw n-byte sprite at (Vx, Vy)"),
)


# All valid instruction mnemonics
MNEMONICS: frozenset[str] = frozenset(form.mnemonic for form in INSTRUCTION_TABLE)


# =============================================================================
# Lookup Functions
# =============================================================================

def get_forms(mnemonic: str) -> list[InstructionForm]:
    """
    Get every table row for a mnemonic, in dispatch order.

    Args:
        mnemonic: The instruction mnemonic (case-insensitive)

    Returns:
        List of InstructionForms; empty for unknown mnemonics
    """
    mnemonic = mnemonic.upper()
    return [form for form in INSTRUCTION_TABLE if form.mnemonic == mnemonic]


def get_signatures(mnemonic: str) -> list[str]:
    """Get the accepted operand shapes of a mnemonic, e.g. ['Vx, Vy', 'Vx, kk']."""
    return [form.signature for form in get_forms(mnemonic)]


def is_valid_instruction(mnemonic: str) -> bool:
    """
    Check if a mnemonic is a valid CHIP-8 instruction.

    Args:
        mnemonic: The instruction mnemonic to check

    Returns:
        True if valid, False otherwise
    """
    return mnemonic.upper() in MNEMONICS


def find_form(opcode: int) -> Optional[InstructionForm]:
    """
    Find the canonical form that matches an opcode.

    This is a linear scan of the table; the disassembler keeps its own
    nibble-indexed reverse table for speed.
    """
    for form in INSTRUCTION_TABLE:
        if form.canonical and form.matches_opcode(opcode):
            return form
    return None
