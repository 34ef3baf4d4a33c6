"""
c8disasm - CHIP-8 Disassembler Command-Line Interface
=====================================================

This module implements the command-line interface for the CHIP-8
disassembler. The output is assembly source that c8asm accepts.

Usage Examples
--------------
Disassemble a ROM (writes pong.chasm):
    $ c8disasm pong.ch8

Output to file:
    $ c8disasm pong.ch8 -o listing.chasm

Also print an address/opcode/instruction table:
    $ c8disasm pong.ch8 --listing
"""

from pathlib import Path
from typing import Optional

import click

from chasm import __version__
from chasm.cli.errors import handle_cli_exception, setup_logging
from chasm.config import ChasmConfig
from chasm.disassembler import Chip8Disassembler
from chasm.errors import RomError
from chasm.files import disassembled_source_path, read_rom, write_source


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
    help="Output source file (default: input with .ch8 replaced by .chasm)",
)
@click.option(
    "--listing",
    is_flag=True,
    help="Print an address/opcode/instruction table to stdout",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="c8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 ROM image into assembly source.

    INPUT_FILE is the ROM (.ch8) to disassemble. It is mapped at address
    0x200, and a word is decoded at every even address. Words that are
    not instructions (sprite data, usually) are written as four hex
    digits, which c8asm reassembles unchanged.

    \b
    Examples:
        c8disasm pong.ch8                 # Outputs pong.chasm
        c8disasm pong.ch8 -o out.chasm    # Specify output file
        c8disasm pong.ch8 --listing       # Show addresses and opcodes
    """
    config = ChasmConfig.from_env()
    setup_logging(config, verbose)

    output_file = output if output is not None else disassembled_source_path(input_file, config)

    try:
        data = read_rom(input_file)
        if len(data) == 0:
            raise RomError(f"{input_file} is empty")

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Load address: ${config.load_address:04X}", err=True)

        disasm = Chip8Disassembler(config=config)
        instructions = disasm.disassemble(data)

        if listing:
            click.echo("Address  Opcode  Instruction")
            for instr in instructions:
                click.echo(str(instr))

        write_source(output_file, [instr.text for instr in instructions])

        click.echo(f"File disassembled: {output_file} ({len(instructions)} instructions)")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Disassembly")


if __name__ == "__main__":
    main()
