"""
CHASM Error Hierarchy
=====================

This module defines the exception hierarchy for the CHIP-8 toolchain.
All exceptions inherit from ChasmError, allowing callers to catch all
toolchain errors with a single except clause if desired.

Exception Hierarchy
-------------------
ChasmError (base)
├── CodecError (instruction encoding)
│   ├── MalformedOperandError - operand shape or width not accepted
│   └── UnencodableLineError - line does not reduce to a 4-digit opcode
└── RomError - ROM image cannot be processed

File system failures are not wrapped: FileNotFoundError, PermissionError
and friends propagate unchanged and the CLI maps them to exit codes.

Error messages follow this format:
    line N: error: description
        source line text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class ChasmError(Exception):
    """
    Base exception for all CHASM errors.

        try:
            assembler.assemble_file("pong.chasm")
        except ChasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Codec Exceptions
# =============================================================================

class CodecError(ChasmError):
    """
    Base exception for per-line encoding failures.

    The assembler catches these line by line: the offending line is
    dropped, a Diagnostic is recorded, and assembly continues.

    Attributes:
        message: The error description
        line: 1-based source line number (optional)
        source_line: The source text of the line (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.source_line = source_line
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with line number, source and hint.

        Example output:
            line 7: error: SE does not accept operand 'X3'
                SE X3, 5
            hint: SE accepts: Vx, Vy | Vx, kk
        """
        parts = []

        if self.line is not None:
            parts.append(f"line {self.line}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line.strip()}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class MalformedOperandError(CodecError):
    """
    Operand tokens do not match any form of a known instruction.

    Raised for a missing or extra operand, a token of the wrong kind
    (an immediate where a register is required), or a value that does not
    fit the opcode field it is packed into.

    Example:
        SKP 5       ; Error: SKP needs a register
        LD V3, 300  ; Error: kk is 8 bits
    """

    def __init__(
        self,
        mnemonic: str,
        operands: Sequence[str],
        offending: Optional[str] = None,
        line: Optional[int] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.operands = list(operands)
        self.offending = offending

        if reason is None:
            if offending is not None:
                reason = f"{mnemonic} does not accept operand '{offending}'"
            else:
                shown = ", ".join(self.operands) if self.operands else "no operands"
                reason = f"{mnemonic} does not accept {shown}"

        super().__init__(reason, line=line, source_line=source_line, hint=hint)


class UnencodableLineError(CodecError):
    """
    The line does not produce a valid 4-hex-digit opcode.

    Lines with an unknown mnemonic are passed through as raw opcode text,
    so this is what a typo in the mnemonic ultimately reports.
    """

    def __init__(
        self,
        text: str,
        line: Optional[int] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"cannot encode '{text}' as a 2-byte opcode",
            line=line,
            source_line=source_line,
            hint="unknown mnemonic; raw opcodes must be exactly 4 hex digits",
        )


# =============================================================================
# ROM Exceptions
# =============================================================================

class RomError(ChasmError):
    """
    ROM image cannot be processed.

    Raised when a ROM file is empty. Oversized images are only logged,
    since the disassembly sweep is best-effort anyway.
    """
    pass


# =============================================================================
# Diagnostic Collection for Multiple Error Reporting
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """
    Record of a source line the assembler dropped.

    Attributes:
        line: 1-based source line number
        reason: Human-readable description of the failure
        source: The original line text
    """
    line: int
    reason: str
    source: str = ""

    def __str__(self) -> str:
        return f"line {self.line}: {self.reason}"


class ErrorCollector:
    """
    Collects per-line diagnostics for batch reporting.

    The assembler uses this to continue processing after a bad line,
    collecting every failure before reporting them together. There is no
    limit: every dropped line is recorded and assembly always finishes.

    Example:
        collector = ErrorCollector()
        collector.add(error)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        """Initialize an empty collector."""
        self.errors: list[CodecError] = []
        self.diagnostics: list[Diagnostic] = []

    def add(self, error: CodecError) -> Diagnostic:
        """Record an error and return the matching Diagnostic."""
        diagnostic = Diagnostic(
            line=error.line if error.line is not None else 0,
            reason=error.message,
            source=(error.source_line or "").strip(),
        )
        self.errors.append(error)
        self.diagnostics.append(diagnostic)
        return diagnostic

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """
        Format all errors for display.

        Returns:
            Formatted string with every error and a summary line
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "line" if len(self.errors) == 1 else "lines"
        lines.append(f"{len(self.errors)} {error_word} dropped")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
        self.diagnostics.clear()
