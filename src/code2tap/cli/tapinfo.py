"""
tapinfo - TAP Inspection Command-Line Interface
================================================

Commands
--------
- **list**: List the blocks of a TAP file
- **validate**: Check block checksums and header/data pairing

Usage Examples
--------------
List blocks:
    $ tapinfo list HELLO.tap

List blocks and the BASIC loader text:
    $ tapinfo list -v HELLO.tap

Validate a file:
    $ tapinfo validate HELLO.tap
"""

import sys
from pathlib import Path

import click

from code2tap import __version__
from code2tap.basic import decode_listing
from code2tap.cli.errors import ExitCode, handle_cli_exception, setup_logging
from code2tap.tap import CodeHeader, ProgramHeader, TapParser


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", prog_name="tapinfo")
def main() -> None:
    """
    Inspect ZX Spectrum TAP files.

    \b
    Commands:
      list      List blocks of a TAP file
      validate  Validate checksums and block structure
    """
    pass


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "tap_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Also print BASIC program listings",
)
def cmd_list(tap_file: Path, verbose: bool) -> None:
    """
    List the contents of a TAP file.

    \b
    Output format:
      Type      Name        Length  Param    Checksum
      Program   HELLO          104  10       ok
      Bytes     code             3  32768    ok
    """
    setup_logging(verbose)
    try:
        parser = TapParser.from_file(tap_file)

        click.echo(f"{'Type':<9} {'Name':<10} {'Length':>7}  {'Param':<8} Checksum")
        click.echo("-" * 48)

        for entry in parser.iter_entries():
            status = "ok" if entry.is_valid else "BAD"
            header = entry.header

            if isinstance(header, ProgramHeader):
                param = str(header.autostart)
            elif isinstance(header, CodeHeader):
                param = str(header.start_address)
            else:
                param = ""

            if header is None:
                click.echo(f"{'Data':<9} {'':<10} {len(entry.data.payload):>7}  {param:<8} {status}")
            else:
                length = header.get_data_length()
                click.echo(
                    f"{header.get_type_name():<9} {header.get_display_name():<10} "
                    f"{length:>7}  {param:<8} {status}"
                )

            if verbose and isinstance(header, ProgramHeader) and entry.data is not None:
                for line in decode_listing(entry.data.payload):
                    click.echo(f"    {line.to_text()}")

        click.echo("-" * 48)
        click.echo(f"Total: {len(parser.blocks)} blocks, {len(parser.data)} bytes")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "tap_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def cmd_validate(tap_file: Path) -> None:
    """
    Validate a TAP file.

    \b
    Checks:
    - Block framing (length fields)
    - Block checksums
    - Every header followed by a data block of the declared length
    """
    try:
        parser = TapParser.from_file(tap_file)
        problems = parser.verify()
    except Exception as e:
        handle_cli_exception(e)

    if problems:
        click.echo("Validation FAILED:")
        for problem in problems:
            click.echo(f"  ERROR: {problem}")
        sys.exit(ExitCode.BUILD_ERROR)

    click.echo(f"Validation PASSED: {tap_file} ({len(parser.blocks)} blocks)")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
