"""
File Handling
=============

Reading and writing the files the toolchain works with, and deriving
output names from input names.

| Direction    | Input              | Output                      |
|--------------|--------------------|-----------------------------|
| assemble     | prog.chasm (UTF-8) | prog_a.ch8 (raw opcodes)    |
| disassemble  | prog.ch8 (raw)     | prog.chasm (UTF-8)          |

The "_a" marker keeps a reassembled ROM from overwriting the original
ROM it was disassembled from.

Missing or unreadable inputs raise the builtin OSError subclasses
(FileNotFoundError, PermissionError); nothing is written in that case.
"""

from pathlib import Path
from typing import Iterable, Optional
import logging

from chasm.config import ChasmConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


# =============================================================================
# Path Derivation
# =============================================================================

def _strip_suffix(name: str, suffix: str) -> str:
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def assembled_rom_path(source_path: str | Path,
                       config: Optional[ChasmConfig] = None) -> Path:
    """
    Derive the ROM path for an assembled source file.

    Example:
        >>> assembled_rom_path("games/pong.chasm")
        PosixPath('games/pong_a.ch8')
    """
    config = config or DEFAULT_CONFIG
    path = Path(source_path)
    stem = _strip_suffix(path.name, config.source_suffix)
    return path.with_name(stem + config.assembled_suffix)


def disassembled_source_path(rom_path: str | Path,
                             config: Optional[ChasmConfig] = None) -> Path:
    """
    Derive the source path for a disassembled ROM.

    Example:
        >>> disassembled_source_path("games/pong.ch8")
        PosixPath('games/pong.chasm')
    """
    config = config or DEFAULT_CONFIG
    path = Path(rom_path)
    stem = _strip_suffix(path.name, config.rom_suffix)
    return path.with_name(stem + config.source_suffix)


# =============================================================================
# Readers and Writers
# =============================================================================

def read_source(path: str | Path) -> str:
    """Read an assembly source file as UTF-8 text."""
    text = Path(path).read_text(encoding="utf-8")
    logger.debug(f"Read {len(text)} characters from {path}")
    return text


def read_rom(path: str | Path) -> bytes:
    """Read a ROM image."""
    data = Path(path).read_bytes()
    logger.info(f"{len(data)} bytes loaded from {path}")
    return data


def write_rom(path: str | Path, data: bytes) -> Path:
    """Write a ROM image and return its path."""
    path = Path(path)
    path.write_bytes(data)
    logger.info(f"Wrote {len(data)} bytes to {path}")
    return path


def write_source(path: str | Path, lines: Iterable[str]) -> Path:
    """
    Write assembly source: one line per instruction, newline-terminated.
    """
    path = Path(path)
    text = "\n".join(lines) + "\n"
    path.write_text(text, encoding="utf-8")
    logger.info(f"Wrote {path}")
    return path
