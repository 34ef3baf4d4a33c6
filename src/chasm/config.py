"""
CHASM Configuration
===================

Toolchain settings: load address, file suffixes and logging level.
Configuration can come from:
- Default values (defined here)
- Environment variables (ChasmConfig.from_env)
- CLI options, which override both

CHIP-8 programs are loaded at 0x200; the first 512 bytes of the 4 KiB
address space belonged to the interpreter on the original machines.
"""

from dataclasses import dataclass
import logging
import os


@dataclass
class ChasmConfig:
    """
    Configuration for assembling and disassembling CHIP-8 programs.

    Attributes:
        load_address: Address of the first ROM byte (default: 0x200)
        memory_size: Size of the CHIP-8 address space (default: 0x1000)
        source_suffix: Extension of assembly source files (default: ".chasm")
        rom_suffix: Extension of ROM images (default: ".ch8")
        assembled_suffix: Suffix for ROMs written by the assembler (default: "_a.ch8")
        log_level: Logging level name used by the CLI tools
    """

    load_address: int = 0x200
    memory_size: int = 0x1000

    source_suffix: str = ".chasm"
    rom_suffix: str = ".ch8"
    assembled_suffix: str = "_a.ch8"

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ChasmConfig":
        """
        Create ChasmConfig from environment variables.

        Environment variables (all optional):
            CHASM_LOAD_ADDRESS: Load address (decimal or 0x-prefixed hex)
            CHASM_LOG_LEVEL: Logging level name (e.g. "DEBUG")

        Returns:
            ChasmConfig with values from environment variables
        """
        config = cls()

        if load_address := os.environ.get("CHASM_LOAD_ADDRESS"):
            try:
                config.load_address = int(load_address, 0)
            except ValueError:
                pass  # Ignore invalid values

        if log_level := os.environ.get("CHASM_LOG_LEVEL"):
            if isinstance(logging.getLevelName(log_level.upper()), int):
                config.log_level = log_level.upper()

        return config

    def log_level_value(self) -> int:
        """Return log_level as a logging module constant."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


DEFAULT_CONFIG = ChasmConfig()
