"""
CHIP-8 Disassembler
===================

Disassembles CHIP-8 opcodes into assembly text. This is the inverse of
the assembler's encoder, and is built from the same INSTRUCTION_TABLE.

Decoding
--------
Decoding is total: every 16-bit value produces some text. Opcodes are
dispatched on their leading nibble, then refined by the low byte or low
nibble where a family holds several instructions (0x0, 0x8, 0xE, 0xF).
A value that matches no form comes back as its four hex digits, which
the assembler accepts as a raw opcode:

    0x00E0 -> "CLS"
    0x8AB4 -> "ADD V10, V11"
    0x0123 -> "0123"

Families 0x5 and 0x9 ignore their low nibble, and family 0x0 its
second nibble, so 0x5121 decodes as "SE V1, V2". Such opcodes reassemble
to the canonical word (0x5120).

Sweep
-----
ROMs are mapped at 0x200. The disassembler reads a word at every even
address that still has a following byte in the image. CHIP-8 programs
mix code and sprite data freely, so this linear sweep is best-effort:
sprite bytes decode as whatever instruction they happen to spell.

Usage:
    disasm = Chip8Disassembler()
    for instr in disasm.disassemble(rom):
        print(f"{instr.address:04X}: {instr.text}")
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from chasm.config import ChasmConfig, DEFAULT_CONFIG
from chasm.isa import INSTRUCTION_TABLE, InstructionForm, Opcode

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled CHIP-8 instruction.

    Attributes:
        address: Memory address of the instruction
        opcode: The 16-bit opcode
        text: Assembly text, or four hex digits for unknown opcodes
        form: The matching instruction form (None for unknown opcodes)
    """
    address: int
    opcode: Opcode
    text: str
    form: Optional[InstructionForm] = None

    @property
    def known(self) -> bool:
        return self.form is not None

    @property
    def mnemonic(self) -> str:
        return self.form.mnemonic if self.form else self.opcode.hex

    def __str__(self) -> str:
        """Format as listing line: [ADDRESS]    OPCODE    TEXT"""
        return f"[{self.address}]    {self.opcode.value:04x}    {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:04X}",
            "address_int": self.address,
            "opcode": self.opcode.hex,
            "text": self.text,
            "mnemonic": self.mnemonic,
            "known": self.known,
        }


# =============================================================================
# Decoder
# =============================================================================

class Decoder:
    """
    Opcode to text decoder.

    Builds a reverse lookup table from the instruction table, keyed by
    leading nibble, so each opcode is checked only against its own family.

    Attributes:
        _reverse_table: Maps leading nibble to (mask, value, form) entries
    """

    def __init__(self, table: Sequence[InstructionForm] = INSTRUCTION_TABLE):
        self._reverse_table = self._build_reverse_table(table)

    @staticmethod
    def _build_reverse_table(
        table: Sequence[InstructionForm],
    ) -> Dict[int, List[Tuple[int, int, InstructionForm]]]:
        """
        Build reverse lookup table: leading nibble -> [(mask, value, form)].

        Non-canonical forms (alternate spellings such as "SHR Vx") are
        skipped, so each opcode has exactly one printed form. Masks come
        from InstructionForm.match_mask, so "5121" decodes as "SE V1, V2".
        Within a nibble, forms with more fixed bits are tried first.
        """
        reverse: Dict[int, List[Tuple[int, int, InstructionForm]]] = {}

        for form in table:
            if not form.canonical:
                continue
            nibble = form.value >> 12
            reverse.setdefault(nibble, []).append((form.match_mask, form.value, form))

        for entries in reverse.values():
            entries.sort(key=lambda entry: bin(entry[0]).count("1"), reverse=True)

        return reverse

    def lookup(self, opcode: int) -> Optional[InstructionForm]:
        """Find the form for an opcode, or None if it is not an instruction."""
        for mask, value, form in self._reverse_table.get(opcode >> 12, ()):
            if opcode & mask == value:
                return form
        return None

    def decode(self, opcode: int) -> Tuple[str, Optional[InstructionForm]]:
        """
        Decode one opcode.

        Args:
            opcode: 16-bit opcode value

        Returns:
            Tuple of (text, form); form is None for the hex fallback

        Raises:
            ValueError: If opcode is outside 0..0xFFFF
        """
        word = Opcode(opcode)
        form = self.lookup(word.value)
        if form is None:
            return word.hex, None
        return form.render(word.value), form


_DEFAULT_DECODER = Decoder()


def decode_opcode(opcode: int) -> str:
    """
    Decode a 16-bit opcode to assembly text.

    Example:
        >>> decode_opcode(0x00E0)
        'CLS'
        >>> decode_opcode(0x3305)
        'SE V3, 5'
        >>> decode_opcode(0x0123)
        '0123'
    """
    text, _ = _DEFAULT_DECODER.decode(opcode)
    return text


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Disassembler for CHIP-8 ROM images.

    Attributes:
        config: Toolchain configuration (load address, memory size)
    """

    def __init__(self, config: Optional[ChasmConfig] = None,
                 decoder: Optional[Decoder] = None):
        self.config = config or DEFAULT_CONFIG
        self._decoder = decoder or _DEFAULT_DECODER

    def disassemble_one(self, rom: bytes, offset: int) -> DisassembledInstruction:
        """
        Disassemble the word at a byte offset into the ROM.

        Args:
            rom: ROM image
            offset: Offset of the high byte within rom

        Returns:
            DisassembledInstruction with its load address

        Raises:
            ValueError: If fewer than 2 bytes remain at offset
        """
        if offset < 0 or offset + 1 >= len(rom):
            raise ValueError(f"Offset {offset} leaves no full opcode in {len(rom)} bytes")

        opcode = Opcode.from_bytes(rom[offset], rom[offset + 1])
        text, form = self._decoder.decode(opcode.value)
        return DisassembledInstruction(
            address=self.config.load_address + offset,
            opcode=opcode,
            text=text,
            form=form,
        )

    def disassemble(self, rom: bytes) -> List[DisassembledInstruction]:
        """
        Disassemble a whole ROM image.

        Words are read at every even address from the load address on,
        as long as the following byte is still inside the image. An odd
        trailing byte is ignored.

        Args:
            rom: ROM image, mapped at config.load_address

        Returns:
            List of DisassembledInstruction objects in address order
        """
        start = self.config.load_address
        end = start + len(rom)

        if end > self.config.memory_size:
            logger.warning(
                f"ROM of {len(rom)} bytes extends past ${self.config.memory_size:04X}"
            )

        result = []
        for address in range(start, end):
            if address & 1 == 0 and address + 1 < end:
                instr = self.disassemble_one(rom, address - start)
                logger.debug(f"[{instr.address}] {instr.opcode.hex} {instr.text}")
                result.append(instr)

        unknown = sum(1 for instr in result if not instr.known)
        logger.debug(f"{len(result)} opcodes decoded, {unknown} unknown")
        return result

    def disassemble_to_text(self, rom: bytes) -> str:
        """
        Disassemble and return assembly source text.

        One instruction per line, newline-joined, ready to be written as a
        .chasm file and reassembled.
        """
        return "\n".join(instr.text for instr in self.disassemble(rom))

    def listing(self, rom: bytes) -> str:
        """
        Disassemble and return an address/opcode/instruction table.

        Example output:
            Address  Opcode  Instruction
            [512]    00e0    CLS
            [514]    600a    LD V0, 10
        """
        lines = ["Address  Opcode  Instruction"]
        lines.extend(str(instr) for instr in self.disassemble(rom))
        return "\n".join(lines)
