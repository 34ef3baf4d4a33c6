"""
Unit Tests for the Opcode Decoder
=================================

Test coverage includes:
- Decoding of every instruction family
- Raw hex fallback for unknown opcodes within branched families
- Totality over all 16-bit values
- Loose round trip: decode then re-encode yields the same opcode
"""

import pytest

from chasm.assembler.encoder import encode_line
from chasm.disassembler import Decoder, decode_opcode
from chasm.isa import INSTRUCTION_TABLE


# =============================================================================
# Decoder Tests
# =============================================================================

class TestDecodeFamilies:
    """Tests for decoding each opcode family."""

    @pytest.mark.parametrize("opcode,expected", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1200, "JP 512"),
        (0x2300, "CALL 768"),
        (0x3305, "SE V3, 5"),
        (0x4305, "SNE V3, 5"),
        (0x5350, "SE V3, V5"),
        (0x61FF, "LD V1, 255"),
        (0x7101, "ADD V1, 1"),
        (0x8120, "LD V1, V2"),
        (0x8121, "OR V1, V2"),
        (0x8122, "AND V1, V2"),
        (0x8123, "XOR V1, V2"),
        (0x8124, "ADD V1, V2"),
        (0x8125, "SUB V1, V2"),
        (0x8126, "SHR V1, V2"),
        (0x8127, "SUBN V1, V2"),
        (0x812E, "SHL V1, V2"),
        (0x9350, "SNE V3, V5"),
        (0xA258, "LD I, 600"),
        (0xB210, "JP V0, 528"),
        (0xCC0F, "RND V12, 15"),
        (0xD125, "DRW V1, V2, 5"),
        (0xE49E, "SKP V4"),
        (0xE4A1, "SKNP V4"),
        (0xF107, "LD V1, DT"),
        (0xF10A, "LD V1, K"),
        (0xF115, "LD DT, V1"),
        (0xF118, "LD ST, V1"),
        (0xF11E, "ADD I, V1"),
        (0xF129, "LD F, V1"),
        (0xF133, "LD B, V1"),
        (0xF155, "LD I, V1"),
        (0xF165, "LD V1, I"),
    ])
    def test_family(self, opcode, expected):
        assert decode_opcode(opcode) == expected

    @pytest.mark.parametrize("opcode,expected", [
        (0x0000, "0000"),
        (0x0123, "0123"),
        (0x00E1, "00E1"),
        (0x8AB8, "8AB8"),
        (0x800F, "800F"),
        (0xE000, "E000"),
        (0xE19F, "E19F"),
        (0xF1FF, "F1FF"),
        (0xF000, "F000"),
    ])
    def test_unknown_falls_back_to_hex(self, opcode, expected):
        assert decode_opcode(opcode) == expected

    @pytest.mark.parametrize("opcode,expected", [
        (0x5121, "SE V1, V2"),
        (0x535F, "SE V3, V5"),
        (0x9AB3, "SNE V10, V11"),
        (0x935F, "SNE V3, V5"),
        (0x01E0, "CLS"),
        (0x0FEE, "RET"),
    ])
    def test_ignored_digits_do_not_matter(self, opcode, expected):
        """Families 0x5 and 0x9 ignore the low nibble, family 0x0 the second."""
        assert decode_opcode(opcode) == expected

    @pytest.mark.parametrize("low", range(16))
    def test_every_5xyn_and_9xyn_named(self, low):
        assert decode_opcode(0x5120 | low) == "SE V1, V2"
        assert decode_opcode(0x9120 | low) == "SNE V1, V2"

    def test_registers_printed_in_decimal(self):
        assert decode_opcode(0x8FA4) == "ADD V15, V10"

    def test_decode_returns_form(self):
        decoder = Decoder()
        text, form = decoder.decode(0x00E0)
        assert text == "CLS"
        assert form.pattern == "00E0"
        assert decoder.decode(0x0123) == ("0123", None)

    def test_out_of_range_value(self):
        with pytest.raises(ValueError):
            decode_opcode(0x10000)


class TestDecodeProperties:
    """Properties that hold over the whole opcode space."""

    def test_total(self):
        """Every 16-bit value decodes to a non-empty string."""
        decoder = Decoder()
        for value in range(0x10000):
            text, _ = decoder.decode(value)
            assert isinstance(text, str) and text

    def test_round_trip_encodable_opcodes(self):
        """Every opcode the encoder can produce decodes to text that re-encodes to it."""
        decoder = Decoder()
        for value in range(0x10000):
            text, form = decoder.decode(value)
            if form is not None and not form.fits_pattern(value):
                continue
            assert encode_line(text).opcode.value == value, text

    def test_ignored_digits_reassemble_to_canonical_opcode(self):
        """Words outside the exact pattern reassemble to their canonical form."""
        decoder = Decoder()
        for value in range(0x10000):
            text, form = decoder.decode(value)
            if form is None or form.fits_pattern(value):
                continue
            assert value >> 12 in (0x0, 0x5, 0x9)
            assert decode_opcode(encode_line(text).opcode.value) == text

    @pytest.mark.parametrize("value,canonical", [
        (0x5121, 0x5120),
        (0x9AB3, 0x9AB0),
        (0x0AE0, 0x00E0),
    ])
    def test_canonical_reassembly(self, value, canonical):
        assert encode_line(decode_opcode(value)).opcode.value == canonical

    @pytest.mark.parametrize("x", range(16))
    @pytest.mark.parametrize("y", range(16))
    def test_add_registers_exact(self, x, y):
        opcode = 0x8004 | (x << 8) | (y << 4)
        assert decode_opcode(opcode) == f"ADD V{x}, V{y}"
        assert encode_line(f"ADD V{x}, V{y}").opcode.value == opcode

    def test_fixed_forms(self):
        assert decode_opcode(0x00E0) == "CLS"
        assert decode_opcode(0x00EE) == "RET"

    def test_every_canonical_form_reachable(self):
        """Each canonical table row decodes to its own mnemonic."""
        decoder = Decoder()
        for form in INSTRUCTION_TABLE:
            if not form.canonical:
                continue
            _, found = decoder.decode(form.value)
            assert found is form
