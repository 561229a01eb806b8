"""
code2tap - TAP Builder Command-Line Interface
==============================================

This module implements the ``code2tap`` command. It takes a ZX Spectrum
machine code binary and creates a TAP file with a BASIC loader in front of
it, so the program starts after a plain ``LOAD ""``.

The TAP file is configurable:
- name of the program, shown after LOAD ""
- start address: where the code is loaded (RAMTOP is set just below)
- exec address: the machine code entry point for RANDOMIZE USR
- screen data: an optional SCREEN$ shown while the code loads
- binary code: the machine code itself

Usage Examples
--------------
Basic conversion (writes HELLO.tap):
    $ code2tap HELLO -code hello.bin -start 32768 -exec 32768

With a loading screen and an explicit output file:
    $ code2tap GAME -code game.bin -start 24000 -exec 24000 \\
        -screen title.scr -o game.tap

Hex addresses are accepted as 0x8000 or $8000.
"""

from pathlib import Path
from typing import Optional

import click

from code2tap import __version__
from code2tap.cli.errors import handle_cli_exception, setup_logging
from code2tap.config import TapConfig
from code2tap.tap import create_tap


# =============================================================================
# Address Parameter Type
# =============================================================================

class AddressType(click.ParamType):
    """
    Click parameter type for 16-bit addresses.

    Accepts decimal (32768), C-style hex (0x8000) or assembler hex ($8000).
    """
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to an address."""
        if isinstance(value, int):
            address = value
        else:
            text = value.strip()
            try:
                if text.startswith("$"):
                    address = int(text[1:], 16)
                elif text.lower().startswith("0x"):
                    address = int(text, 16)
                else:
                    address = int(text, 10)
            except ValueError:
                self.fail(f"'{value}' is not a valid address", param, ctx)

        if not 0 <= address <= 0xFFFF:
            self.fail(f"Address {address} is out of range (0..65535)", param, ctx)
        return address


ADDRESS = AddressType()


# =============================================================================
# Main Command
# =============================================================================

@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", prog_name="code2tap")
@click.argument("prg_name")
@click.option(
    "-code", "--code", "code_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="The file containing the machine code binary.",
)
@click.option(
    "-start", "--start", "start_address",
    type=ADDRESS,
    required=True,
    help="The load code start address.",
)
@click.option(
    "-exec", "--exec", "exec_address",
    type=ADDRESS,
    required=True,
    help="The machine code execution start address.",
)
@click.option(
    "-screen", "--screen", "screen_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="The file name of the screen data.",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="The filename for the tap file. If omitted 'prg_name'.tap is used.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(
    prg_name: str,
    code_file: Path,
    start_address: int,
    exec_address: int,
    screen_file: Optional[Path],
    output: Optional[Path],
    verbose: bool,
) -> None:
    """
    Create a ZX Spectrum TAP file with a BASIC loader.

    PRG_NAME is the name of the program, i.e. the name presented while
    loading.

    \b
    Examples:
      code2tap HELLO -code hello.bin -start 32768 -exec 32768
      code2tap GAME -code game.bin -start 0x6000 -exec 0x6000 -screen title.scr
    """
    setup_logging(verbose)

    config = TapConfig(
        program_name=prg_name,
        code_file=code_file,
        load_address=start_address,
        exec_address=exec_address,
        screen_file=screen_file,
        output_path=output,
    )

    try:
        output_path = create_tap(config)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    if verbose:
        click.echo(f"Created {output_path}")
        click.echo(f"  Program:  {prg_name}")
        click.echo(f"  Code:     {code_file} at {start_address}")
        click.echo(f"  Exec:     {exec_address}")
        if screen_file:
            click.echo(f"  Screen:   {screen_file}")
        click.echo(f"  Size:     {output_path.stat().st_size} bytes")
    else:
        click.echo(f"Created {output_path}")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
