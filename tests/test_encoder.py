"""
Unit Tests for the Instruction Encoder
======================================

Test coverage includes:
- Every opcode family in the instruction table
- Operand-shape disambiguation (SE/SNE/ADD/LD, JP arity)
- Tokenizing on spaces and commas
- Raw opcode pass-through for unknown mnemonics
- Error reporting: malformed operands, field widths, unencodable lines
"""

import pytest

from chasm.assembler.encoder import (
    EncodedInstruction,
    Encoder,
    encode_instruction,
    encode_line,
    tokenize_line,
)
from chasm.errors import CodecError, MalformedOperandError, UnencodableLineError


def encode(line: str) -> str:
    """Encode a line and return its opcode text."""
    return encode_line(line).text


# =============================================================================
# Tokenizer Tests
# =============================================================================

class TestTokenizer:
    """Tests for splitting lines into tokens."""

    def test_spaces_and_commas(self):
        assert tokenize_line("DRW V1, V2, 5") == ["DRW", "V1", "V2", "5"]

    def test_commas_without_spaces(self):
        assert tokenize_line("DRW V1,V2,5") == ["DRW", "V1", "V2", "5"]

    def test_spaces_without_commas(self):
        assert tokenize_line("SUBN V1 V2") == ["SUBN", "V1", "V2"]

    def test_leading_trailing_whitespace(self):
        assert tokenize_line("   CLS  \t") == ["CLS"]

    def test_empty(self):
        assert tokenize_line("") == []
        assert tokenize_line(" , ") == []


# =============================================================================
# Opcode Family Tests
# =============================================================================

class TestOpcodeFamilies:
    """Each row of the encoder table produces its documented pattern."""

    @pytest.mark.parametrize("line,expected", [
        ("CLS", "00E0"),
        ("RET", "00EE"),
        ("JP 512", "1200"),
        ("JP 4095", "1FFF"),
        ("JP 0", "1000"),
        ("JP V0, 528", "B210"),
        ("CALL 768", "2300"),
        ("CALL 10", "200A"),
        ("SE V3, V5", "5350"),
        ("SE V3, 5", "3305"),
        ("SNE V3, V5", "9350"),
        ("SNE V3, 5", "4305"),
        ("SKP V4", "E49E"),
        ("SKNP V4", "E4A1"),
        ("LD I, V2", "F255"),
        ("LD I, 600", "A258"),
        ("LD DT, V1", "F115"),
        ("LD ST, V1", "F118"),
        ("LD F, V1", "F129"),
        ("LD B, V1", "F133"),
        ("LD V1, DT", "F107"),
        ("LD V1, K", "F10A"),
        ("LD V1, I", "F165"),
        ("LD V1, V2", "8120"),
        ("LD V1, 255", "61FF"),
        ("ADD I, V6", "F61E"),
        ("ADD V1, V2", "8124"),
        ("ADD V1, 1", "7101"),
        ("OR V1, V2", "8121"),
        ("AND V1, V2", "8122"),
        ("XOR V1, V2", "8123"),
        ("SUB V1, V2", "8125"),
        ("SHR V1, V2", "8126"),
        ("SUBN V1, V2", "8127"),
        ("SHL V1, V2", "812E"),
        ("RND V12, 15", "CC0F"),
        ("DRW V1, V2, 5", "D125"),
        ("DRW V15, V14, 15", "DFEF"),
    ])
    def test_family(self, line, expected):
        assert encode(line) == expected

    def test_short_shift_forms(self):
        """SHR/SHL with a single register leave y as zero."""
        assert encode("SHR V7") == "8706"
        assert encode("SHL V7") == "870E"

    def test_fixed_forms_ignore_context(self):
        """CLS and RET encode the same wherever they appear."""
        assert encode_line("CLS", line_number=50, address=0x300).text == "00E0"
        assert encode_line("RET", line_number=2, address=0x202).text == "00EE"

    def test_small_values_are_zero_padded(self):
        """Narrow values still fill the full 4-digit opcode."""
        assert encode("JP 15") == "100F"
        assert encode("LD V0, 1") == "6001"

    def test_case_insensitive(self):
        assert encode("ld v1, dt") == "F107"
        assert encode("cls") == "00E0"


# =============================================================================
# Disambiguation Tests
# =============================================================================

class TestDisambiguation:
    """Same keyword, different operand shape, different opcode family."""

    def test_se_register_vs_byte(self):
        assert encode("SE V3, V5") == "5350"
        assert encode("SE V3, 5") == "3305"

    def test_jp_arity(self):
        assert encode("JP 528") == "1210"
        assert encode("JP V0, 528") == "B210"

    @pytest.mark.parametrize("base", ["V0", "v0", "V00", "V000"])
    def test_jp_base_register_by_index(self, base):
        """Any spelling of register 0 selects the Bnnn form."""
        assert encode(f"JP {base}, 512") == "B200"

    def test_ld_first_operand_decides(self):
        assert encode("LD I, V3") == "F355"
        assert encode("LD V3, I") == "F365"

    def test_ld_i_register_vs_address(self):
        assert encode("LD I, V3") == "F355"
        assert encode("LD I, 3") == "A003"

    def test_add_three_forms(self):
        assert encode("ADD I, V3") == "F31E"
        assert encode("ADD V3, V4") == "8344"
        assert encode("ADD V3, 4") == "7304"

    @pytest.mark.parametrize("x", range(16))
    @pytest.mark.parametrize("y", range(16))
    def test_add_registers_all_pairs(self, x, y):
        assert encode_line(f"ADD V{x}, V{y}").opcode.value == 0x8004 | (x << 8) | (y << 4)


# =============================================================================
# Raw Opcode Pass-Through Tests
# =============================================================================

class TestPassThrough:
    """Unknown mnemonics are read as raw opcodes."""

    def test_raw_opcode(self):
        assert encode("00E0") == "00E0"

    def test_raw_opcode_lowercase(self):
        assert encode("f00d") == "F00D"

    def test_raw_opcode_with_whitespace(self):
        assert encode("  1234  ") == "1234"

    @pytest.mark.parametrize("line", ["MOV V1, V2", "123", "12345", "XYZW", "12 34", "NOP"])
    def test_unencodable(self, line):
        with pytest.raises(UnencodableLineError):
            encode_line(line, line_number=9)

    def test_unencodable_is_codec_error(self):
        with pytest.raises(CodecError) as exc_info:
            encode_line("HALT", line_number=4)
        assert exc_info.value.line == 4
        assert "HALT" in str(exc_info.value)

    def test_blank_line_is_unencodable(self):
        with pytest.raises(UnencodableLineError):
            encode_line("   ")


# =============================================================================
# Malformed Operand Tests
# =============================================================================

class TestMalformedOperands:
    """Known mnemonics with operands that fit no form."""

    def test_missing_operand(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line("JP", line_number=2)
        err = exc_info.value
        assert err.mnemonic == "JP"
        assert err.operands == []
        assert err.line == 2
        assert "line 2" in str(err)

    def test_extra_operand(self):
        with pytest.raises(MalformedOperandError):
            encode_line("CLS 5")

    def test_register_required(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line("SKP 5", line_number=7)
        assert exc_info.value.offending == "5"

    def test_offending_token_named(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line("SE X3, 5")
        assert exc_info.value.offending == "X3"
        assert "X3" in str(exc_info.value)

    def test_second_operand_offending(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line("OR V1, 2")
        assert exc_info.value.offending == "2"

    def test_jp_requires_v0_as_base(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line("JP V3, 512")
        assert exc_info.value.offending == "V3"

    def test_ld_keyword_pair(self):
        with pytest.raises(MalformedOperandError):
            encode_line("LD DT, DT")

    def test_hint_lists_forms(self):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line("SE V1")
        assert exc_info.value.hint == "SE accepts: Vx, Vy | Vx, kk"

    def test_drw_needs_three_operands(self):
        with pytest.raises(MalformedOperandError):
            encode_line("DRW V1, V2")


# =============================================================================
# Field Width Tests
# =============================================================================

class TestFieldWidths:
    """Values that do not fit their field are rejected, never wrapped."""

    @pytest.mark.parametrize("line,offending", [
        ("JP 4096", "4096"),
        ("CALL 65535", "65535"),
        ("LD I, 5000", "5000"),
        ("LD V1, 256", "256"),
        ("ADD V1, 300", "300"),
        ("RND V1, 999", "999"),
        ("DRW V1, V2, 16", "16"),
        ("LD V16, 1", "V16"),
        ("SE V1, V99", "V99"),
        ("SKP V20", "V20"),
    ])
    def test_out_of_range(self, line, offending):
        with pytest.raises(MalformedOperandError) as exc_info:
            encode_line(line)
        assert exc_info.value.offending == offending
        assert "out of range" in str(exc_info.value)

    def test_literal_beyond_16_bits_is_not_a_number(self):
        """A literal too large for 16 bits fails the shape match instead."""
        with pytest.raises(MalformedOperandError):
            encode_line("JP 70000")

    def test_boundaries_accepted(self):
        assert encode("LD V15, 255") == "6FFF"
        assert encode("LD I, 4095") == "AFFF"
        assert encode("DRW V0, V0, 15") == "D00F"


# =============================================================================
# Encoded Instruction Tests
# =============================================================================

class TestEncodedInstruction:
    """Tests for the EncodedInstruction record."""

    def test_fields(self):
        instr = encode_line("LD V0, 10", line_number=3, address=0x204)
        assert isinstance(instr, EncodedInstruction)
        assert instr.line == 3
        assert instr.address == 0x204
        assert instr.text == "600A"
        assert instr.data == bytes([0x60, 0x0A])
        assert instr.source == "LD V0, 10"

    def test_str(self):
        instr = encode_line("CLS", address=0x200)
        assert str(instr) == "$0200: 00E0  CLS"

    def test_encode_instruction_function(self):
        assert encode_instruction("ADD", ["V1", "V2"]).value == 0x8124

    def test_encoder_with_custom_table(self):
        """The encoder only knows the forms it is given."""
        from chasm.isa import get_forms
        encoder = Encoder(table=get_forms("CLS"))
        assert encoder.encode_line("CLS").text == "00E0"
        with pytest.raises(UnencodableLineError):
            encoder.encode_line("RET")
