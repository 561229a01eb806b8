"""
code2tap - Run Configuration
============================

Everything a single conversion needs, gathered in one explicit object.
Configuration comes from:
- The code2tap command line
- Direct construction by library callers
- Environment variables (output directory only)

Environment variables (all optional):
    CODE2TAP_OUTPUT_DIR: Directory for the default output file
        (``<program_name>.tap``) when no output path is given
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

from code2tap.errors import InvalidAddressError, MissingArgumentError


OUTPUT_DIR_ENV = "CODE2TAP_OUTPUT_DIR"

TAP_SUFFIX = ".tap"


@dataclass
class TapConfig:
    """
    Settings for one TAP conversion.

    Attributes:
        program_name: Loader name shown by LOAD "" (truncated to 10 bytes)
        code_file: File holding the raw machine code
        load_address: Address the code is loaded at (CLEAR goes one below)
        exec_address: Address started with RANDOMIZE USR
        screen_file: Optional 6912-byte SCREEN$ image
        output_path: TAP file to write (default: <program_name>.tap)
    """
    program_name: str
    code_file: Optional[Path]
    load_address: Optional[int]
    exec_address: Optional[int]
    screen_file: Optional[Path] = None
    output_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.code_file is not None:
            self.code_file = Path(self.code_file)
        if self.screen_file is not None:
            self.screen_file = Path(self.screen_file)
        if self.output_path is not None:
            self.output_path = Path(self.output_path)

    def validate(self) -> None:
        """
        Check that every required setting is present and in range.

        Raises:
            MissingArgumentError: If a required setting is missing
            InvalidAddressError: If an address does not fit 16 bits
        """
        if not self.program_name:
            raise MissingArgumentError("program name")
        if self.code_file is None:
            raise MissingArgumentError("binary filename")
        if self.load_address is None:
            raise MissingArgumentError("start address")
        if self.exec_address is None:
            raise MissingArgumentError("execution address")

        # CLEAR needs load_address - 1, so 0 cannot be a load address
        if not 1 <= self.load_address <= 0xFFFF:
            raise InvalidAddressError("start address", self.load_address)
        if not 0 <= self.exec_address <= 0xFFFF:
            raise InvalidAddressError("execution address", self.exec_address)

    def resolve_output_path(self) -> Path:
        """
        Get the TAP file path to write.

        Returns:
            output_path if set, otherwise ``<program_name>.tap`` inside
            $CODE2TAP_OUTPUT_DIR (or the current directory)
        """
        if self.output_path is not None:
            return self.output_path

        filename = f"{self.program_name}{TAP_SUFFIX}"
        if output_dir := os.environ.get(OUTPUT_DIR_ENV):
            return Path(output_dir) / filename
        return Path(filename)
