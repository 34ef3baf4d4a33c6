"""
CHIP-8 Instruction Encoder
==========================

Converts one line of CHIP-8 assembly into a 2-byte opcode.

Encoding Process
----------------
1. Split the line into tokens on spaces, tabs and commas.
2. Classify each operand token (register, immediate, keyword, invalid).
3. Pick the first form of the mnemonic whose operand shapes match.
4. Check that every field value fits its width, and pack the opcode.
5. Decode the 4-digit hex text into exactly 2 bytes.

A line whose first token is not a known mnemonic is passed through as
raw opcode text, so hand-written words can sit between instructions:

    CLS
    F090
    LD V0, 10

Example
-------
>>> from chasm.assembler.encoder import encode_line
>>> instr = encode_line("SE V3, V5")
>>> instr.text
'5350'
>>> encode_line("SE V3, 5").text
'3305'
"""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import re

from chasm.errors import MalformedOperandError, UnencodableLineError
from chasm.isa import (
    FIELD_WIDTHS,
    INSTRUCTION_TABLE,
    InstructionForm,
    Opcode,
    Operand,
    classify_operand,
)

logger = logging.getLogger(__name__)

# Tokens are separated by any run of spaces, tabs or commas
_SEPARATORS = re.compile(r"[ \t,]+")

DEFAULT_LOAD_ADDRESS = 0x200


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class EncodedInstruction:
    """
    A successfully encoded source line.

    Attributes:
        line: 1-based source line number
        address: ROM address the instruction will occupy
        opcode: The encoded opcode
        source: The original source line
    """
    line: int
    address: int
    opcode: Opcode
    source: str = ""

    @property
    def text(self) -> str:
        """The opcode as 4 uppercase hex digits."""
        return self.opcode.hex

    @property
    def data(self) -> bytes:
        """The opcode as 2 bytes, high byte first."""
        return self.opcode.to_bytes()

    def __str__(self) -> str:
        return f"${self.address:04X}: {self.text}  {self.source.strip()}"


# =============================================================================
# Tokenizing
# =============================================================================

def tokenize_line(line: str) -> list[str]:
    """
    Split a source line into a keyword and operand tokens.

    Example:
        >>> tokenize_line("DRW V1,V2, 5")
        ['DRW', 'V1', 'V2', '5']
    """
    return [token for token in _SEPARATORS.split(line.strip()) if token]


# =============================================================================
# Encoder
# =============================================================================

class Encoder:
    """
    Table-driven CHIP-8 instruction encoder.

    The encoder indexes the instruction table by mnemonic once, then
    encodes each line independently. It keeps no state between lines.

    Attributes:
        _forms: Maps mnemonic to its forms in dispatch order
    """

    def __init__(self, table: Sequence[InstructionForm] = INSTRUCTION_TABLE):
        self._forms: dict[str, list[InstructionForm]] = {}
        for form in table:
            self._forms.setdefault(form.mnemonic, []).append(form)

    def is_mnemonic(self, token: str) -> bool:
        return token.upper() in self._forms

    def encode_instruction(
        self,
        mnemonic: str,
        operands: Sequence[str],
        line: Optional[int] = None,
        source_line: Optional[str] = None,
    ) -> Opcode:
        """
        Encode a mnemonic and its operand tokens.

        Args:
            mnemonic: Instruction keyword (case-insensitive)
            operands: Operand tokens in source order
            line: Source line number for error messages
            source_line: Source text for error messages

        Returns:
            The encoded Opcode

        Raises:
            MalformedOperandError: If no form accepts the operands, or a
                value does not fit its field
            UnencodableLineError: If the mnemonic is unknown
        """
        name = mnemonic.upper()
        forms = self._forms.get(name)
        if forms is None:
            raise UnencodableLineError(" ".join([mnemonic, *operands]), line, source_line)

        classified = [classify_operand(token) for token in operands]

        for form in forms:
            if form.accepts(classified):
                return self._pack(form, classified, operands, line, source_line)

        raise self._mismatch(name, forms, classified, operands, line, source_line)

    def encode_line(
        self,
        line: str,
        line_number: int = 1,
        address: int = DEFAULT_LOAD_ADDRESS,
    ) -> EncodedInstruction:
        """
        Encode one source line.

        Unknown mnemonics fall through to raw opcode text: the stripped
        line must then be exactly four hex digits.

        Args:
            line: Source line text
            line_number: 1-based line number for error messages
            address: ROM address assigned to the instruction

        Returns:
            EncodedInstruction for the line

        Raises:
            MalformedOperandError: If a known instruction has bad operands
            UnencodableLineError: If the line is not a valid 2-byte opcode
        """
        tokens = tokenize_line(line)
        if not tokens:
            raise UnencodableLineError("", line_number, line)

        mnemonic, operands = tokens[0], tokens[1:]

        if self.is_mnemonic(mnemonic):
            opcode = self.encode_instruction(mnemonic, operands, line_number, line)
        else:
            raw = line.strip()
            try:
                opcode = Opcode.from_hex(raw)
            except ValueError:
                raise UnencodableLineError(raw, line_number, line) from None
            logger.debug(f"line {line_number}: raw opcode {opcode.hex}")

        return EncodedInstruction(
            line=line_number,
            address=address,
            opcode=opcode,
            source=line,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _pack(
        form: InstructionForm,
        classified: list[Operand],
        operands: Sequence[str],
        line: Optional[int],
        source_line: Optional[str],
    ) -> Opcode:
        """Fill the form's fields from the operands, checking widths."""
        values: dict[str, int] = {}
        for spec, operand in zip(form.operands, classified):
            if spec.field is None:
                continue
            limit = (1 << FIELD_WIDTHS[spec.field]) - 1
            if operand.value > limit:
                raise MalformedOperandError(
                    form.mnemonic,
                    operands,
                    offending=operand.text,
                    line=line,
                    source_line=source_line,
                    reason=f"{form.mnemonic} operand '{operand.text}' out of range",
                    hint=f"{spec} must be 0..{limit}",
                )
            values[spec.field] = operand.value
        return form.encode(values)

    @staticmethod
    def _mismatch(
        mnemonic: str,
        forms: list[InstructionForm],
        classified: list[Operand],
        operands: Sequence[str],
        line: Optional[int],
        source_line: Optional[str],
    ) -> MalformedOperandError:
        """
        Build the error for operands that match no form.

        The offending token is the first one that fits none of the forms
        with the same operand count. With no such form the count itself
        is wrong and no single token is blamed.
        """
        hint = f"{mnemonic} accepts: " + " | ".join(
            form.signature or "no operands" for form in forms
        )
        candidates = [form for form in forms if len(form.operands) == len(classified)]

        if not candidates:
            counts = sorted({len(form.operands) for form in forms})
            expected = " or ".join(str(count) for count in counts)
            return MalformedOperandError(
                mnemonic,
                operands,
                line=line,
                source_line=source_line,
                reason=f"{mnemonic} expects {expected} operand(s), got {len(classified)}",
                hint=hint,
            )

        offending = None
        for index, operand in enumerate(classified):
            if not any(form.operands[index].matches(operand) for form in candidates):
                offending = operand.text
                break

        if offending is None:
            # Each token fits some form, but not the same one (e.g. "LD DT, DT")
            offending = classified[-1].text

        return MalformedOperandError(
            mnemonic,
            operands,
            offending=offending,
            line=line,
            source_line=source_line,
            hint=hint,
        )


# =============================================================================
# Convenience Functions
# =============================================================================

_DEFAULT_ENCODER = Encoder()


def encode_instruction(mnemonic: str, operands: Sequence[str], line: Optional[int] = None) -> Opcode:
    """Encode a mnemonic and operand tokens with the default table."""
    return _DEFAULT_ENCODER.encode_instruction(mnemonic, operands, line)


def encode_line(
    line: str,
    line_number: int = 1,
    address: int = DEFAULT_LOAD_ADDRESS,
) -> EncodedInstruction:
    """Encode one source line with the default table."""
    return _DEFAULT_ENCODER.encode_line(line, line_number, address)
