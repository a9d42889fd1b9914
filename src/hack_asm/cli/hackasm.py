"""
hackasm - Hack Assembler Command-Line Interface
===============================================

Usage Examples
--------------
Basic assembly (writes Max.hack next to the source):
    $ hackasm Max.asm

With output file:
    $ hackasm Max.asm -o build/Max.hack

With symbol table and listing:
    $ hackasm Max.asm -s Max.sym -l Max.lst

Verbose mode:
    $ hackasm -v Max.asm
"""

import logging
import time
from pathlib import Path
from typing import Optional

import click

from hack_asm import __version__
from hack_asm.assembler import Assembler, AssemblerOptions
from hack_asm.cli.errors import handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


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
    help="Output .hack file (default: input with .hack extension)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the label and variable table",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a listing of address, binary word and source line",
)
@click.option(
    "--max-errors",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Stop reporting after this many errors",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackasm")
def main(
    input_file: Path,
    output: Optional[Path],
    symbols: Optional[Path],
    listing: Optional[Path],
    max_errors: int,
    verbose: bool,
) -> None:
    """
    Assemble Hack assembly source into Hack machine code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        hackasm Max.asm                # Outputs Max.hack
        hackasm Max.asm -o out.hack    # Specify output file
        hackasm Max.asm -s Max.sym     # Also write the symbol table
    """
    setup_logging(verbose)

    asm = Assembler(AssemblerOptions(max_errors=max_errors))
    output_file = output if output is not None else asm.output_path_for(input_file)

    try:
        started = time.perf_counter()
        asm.assemble_file(input_file)

        # Outputs are only written once the whole program assembled
        asm.write_hack(output_file)
        if symbols:
            asm.write_symbols(symbols)
        if listing:
            asm.write_listing(listing)
        elapsed_ms = (time.perf_counter() - started) * 1000

        click.echo(f"Wrote {output_file} in {elapsed_ms:.2f} ms")
        if verbose:
            program = asm.get_program()
            click.echo(
                f"{len(program)} instructions, "
                f"{len(asm.get_symbols())} user symbols"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
