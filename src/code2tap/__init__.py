"""
code2tap - ZX Spectrum TAP Builder
==================================

This package turns a raw Z80 machine code binary (and optionally a SCREEN$
image) into a ZX Spectrum ``.tap`` tape image with a generated BASIC loader.
On the Spectrum the user only needs to type ``LOAD ""``.

The loader that is put on the tape basically consists of:

    LOAD "" CODE 16384      (only with a screen image)
    LOAD "" CODE
    RANDOMIZE USR exec_address

Main Components
---------------
- **basic**: Tokenized BASIC lines and the bootstrap loader program
- **tap**: TAP block framing, header records, container writer and parser
- **config**: The TapConfig run configuration
- **cli**: The ``code2tap`` and ``tapinfo`` command-line tools

Quick Start
-----------
Build an image in memory:
    >>> from code2tap import TapBuilder
    >>> builder = TapBuilder(
    ...     program_name="HELLO",
    ...     code=bytes([0x3E, 0x05, 0xC9]),
    ...     load_address=32768,
    ...     exec_address=32768,
    ... )
    >>> builder.build_to_file("HELLO.tap")

Or use the command-line tool:
    $ code2tap HELLO -code hello.bin -start 32768 -exec 32768
    $ tapinfo list HELLO.tap

Inspired by bin2tap from http://metalbrain.speccy.org/.
"""

__version__ = "1.1.0"
__author__ = "code2tap contributors"

from code2tap.errors import (
    Code2TapError,
    MissingArgumentError,
    FileOpenError,
    InvalidAddressError,
    BasicError,
    LineTooLongError,
    BasicFormatError,
    TapError,
    PayloadTooLargeError,
    TapFormatError,
)
from code2tap.config import TapConfig
from code2tap.basic import (
    TokenizedLine,
    LoaderBuilder,
    encode_line,
    decode_listing,
    build_loader,
)
from code2tap.tap import (
    TapBuilder,
    TapParser,
    frame,
    xor_checksum,
    build_program_header,
    build_code_header,
    write_container,
    create_tap,
)

__all__ = [
    "__version__",
    # Errors
    "Code2TapError",
    "MissingArgumentError",
    "FileOpenError",
    "InvalidAddressError",
    "BasicError",
    "LineTooLongError",
    "BasicFormatError",
    "TapError",
    "PayloadTooLargeError",
    "TapFormatError",
    # Configuration
    "TapConfig",
    # BASIC
    "TokenizedLine",
    "LoaderBuilder",
    "encode_line",
    "decode_listing",
    "build_loader",
    # TAP
    "TapBuilder",
    "TapParser",
    "frame",
    "xor_checksum",
    "build_program_header",
    "build_code_header",
    "write_container",
    "create_tap",
]
