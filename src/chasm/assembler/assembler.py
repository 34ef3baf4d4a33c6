"""
CHIP-8 Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
turning CHIP-8 assembly source into a ROM image. It runs the encoder
over every source line and collects the results.

Assembly is a single pass. There are no labels, so every instruction's
address follows from its position alone: the n-th successfully encoded
instruction lands at load_address + 2 * n.

Lines that fail to encode are dropped and recorded as diagnostics; the
remaining lines still assemble, with no gap left in the output.

Example Usage
-------------
>>> from chasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> code = asm.assemble_string('''
... CLS
... LD V0, 10
... JP 512
... ''')
>>> code.hex()
'00e0600a1200'
>>> asm.write_binary("demo_a.ch8")

Command-Line Usage
------------------
    $ c8asm pong.chasm              # writes pong_a.ch8
    $ c8asm pong.chasm -o pong.ch8 -l pong.lst
"""

from pathlib import Path
from typing import Optional
import logging

from chasm.assembler.encoder import EncodedInstruction, Encoder
from chasm.config import ChasmConfig, DEFAULT_CONFIG
from chasm.errors import CodecError, Diagnostic, ErrorCollector
from chasm.files import write_rom, write_source

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main CHIP-8 assembler class.

    The assembler keeps the results of the most recent run: the encoded
    instructions, in order, and the diagnostics for dropped lines.
    Each call to assemble_string() starts from scratch.

    Attributes:
        config: Toolchain configuration (load address)
    """

    def __init__(self, config: Optional[ChasmConfig] = None,
                 encoder: Optional[Encoder] = None):
        """
        Initialize the assembler.

        Args:
            config: Toolchain configuration (default: DEFAULT_CONFIG)
            encoder: Encoder to use (default: one built from INSTRUCTION_TABLE)
        """
        self.config = config or DEFAULT_CONFIG
        self._encoder = encoder or Encoder()
        self._instructions: list[EncodedInstruction] = []
        self._errors = ErrorCollector()

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source, one instruction per line
            filename: Name used in log messages

        Returns:
            The ROM image: every encoded opcode, high byte first
        """
        self._instructions = []
        self._errors.clear()

        address = self.config.load_address

        for line_number, line in enumerate(source.splitlines(), start=1):
            if not line.strip():
                continue

            try:
                instr = self._encoder.encode_line(line, line_number, address)
            except CodecError as e:
                diagnostic = self._errors.add(e)
                logger.warning(f"{filename}: dropped {diagnostic}")
                continue

            logger.debug(f"{filename}: ${instr.address:04X} {instr.text} <- {line.strip()}")
            self._instructions.append(instr)
            address += 2

        logger.debug(
            f"{filename}: {len(self._instructions)} instructions, "
            f"{self._errors.error_count()} lines dropped"
        )
        return self.get_code()

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to the assembly source file

        Returns:
            The ROM image

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Get the ROM image of the last run."""
        return b"".join(instr.data for instr in self._instructions)

    def get_instructions(self) -> list[EncodedInstruction]:
        """Get the encoded instructions of the last run, in address order."""
        return list(self._instructions)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Each line shows the address, the opcode and the source text.
        Dropped lines are listed at the end.
        """
        lines = ["Address  Opcode  Line  Source"]
        for instr in self._instructions:
            lines.append(
                f"${instr.address:04X}    {instr.text}    {instr.line:>4}  {instr.source.strip()}"
            )
        if self._errors.has_errors():
            lines.append("")
            lines.append("Dropped lines:")
            for diagnostic in self._errors.diagnostics:
                lines.append(f"  {diagnostic}")
        return "\n".join(lines) + "\n"

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the ROM image.

        The file holds the opcodes only: no header, no padding.
        """
        write_rom(filepath, self.get_code())

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        write_source(filepath, self.get_listing().splitlines())

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Return True if the last run dropped any line."""
        return self._errors.has_errors()

    def get_diagnostics(self) -> list[Diagnostic]:
        """Get the (line, reason) records of dropped lines."""
        return list(self._errors.diagnostics)

    def get_errors(self) -> list[CodecError]:
        """Get the exceptions raised for dropped lines."""
        return list(self._errors.errors)

    def get_error_report(self) -> str:
        """Get formatted error report."""
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> bytes:
    """
    Convenience function to assemble source code.

    Bad lines are dropped, as with Assembler.assemble_string().

    Args:
        source: Assembly source code
        filename: Name used in log messages

    Returns:
        The ROM image
    """
    asm = Assembler()
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file

    Returns:
        The ROM image
    """
    asm = Assembler()
    return asm.assemble_file(filepath)
