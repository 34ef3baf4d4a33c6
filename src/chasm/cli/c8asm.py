"""
c8asm - CHIP-8 Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the CHIP-8
assembler.

Usage Examples
--------------
Basic assembly (writes pong_a.ch8):
    $ c8asm pong.chasm

With output file:
    $ c8asm pong.chasm -o pong.ch8

With listing:
    $ c8asm pong.chasm -l pong.lst

Fail instead of dropping bad lines:
    $ c8asm --strict pong.chasm
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chasm import __version__
from chasm.assembler import Assembler
from chasm.cli.errors import ExitCode, handle_cli_exception, setup_logging
from chasm.config import ChasmConfig
from chasm.files import assembled_rom_path, read_source, write_rom


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output ROM file (default: input with .chasm replaced by _a.ch8)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with an error, writing nothing, if any line cannot be encoded",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8asm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    strict: bool,
    verbose: bool,
) -> None:
    """
    Assemble CHIP-8 source code into a ROM image.

    INPUT_FILE is the assembly source file (.chasm) to assemble.

    Lines that cannot be encoded are reported and left out of the ROM;
    the remaining lines still assemble. Use --strict to treat any such
    line as fatal.

    \b
    Examples:
        c8asm pong.chasm              # Outputs pong_a.ch8
        c8asm pong.chasm -o pong.ch8  # Specify output file
        c8asm pong.chasm -l pong.lst  # Also write a listing
    """
    config = ChasmConfig.from_env()
    setup_logging(config, verbose)

    output_file = output if output is not None else assembled_rom_path(input_file, config)

    asm = Assembler(config=config)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        code = asm.assemble_string(read_source(input_file), str(input_file))

        if asm.has_errors():
            click.echo(asm.get_error_report(), err=True)
            if strict:
                sys.exit(ExitCode.BUILD_ERROR)

        write_rom(output_file, code)

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        count = len(asm.get_instructions())
        click.echo(f"File assembled: {output_file} ({count} instructions, {len(code)} bytes)")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
