"""
TAP Container Handling
======================

This package writes and reads ZX Spectrum TAP tape images.

Components
----------
- **checksum**: Block framing (length, flag, XOR checksum)
- **records**: 17-byte program and code header records
- **builder**: Container writer and TapBuilder
- **parser**: TAP image reader and verifier

Example
-------
    >>> from code2tap.tap import TapBuilder, TapParser
    >>> data = TapBuilder("HELLO", bytes([0x3E, 0x05, 0xC9]), 32768, 32768).build()
    >>> TapParser(data).verify()
    []
"""

from code2tap.tap.checksum import (
    MAX_PAYLOAD_SIZE,
    FRAME_OVERHEAD,
    xor_checksum,
    pack_block_length,
    frame,
    verify_checksum,
)
from code2tap.tap.records import (
    BlockFlag,
    HeaderType,
    HEADER_SIZE,
    NAME_SIZE,
    CODE_HEADER_PARAM3,
    TapHeader,
    ProgramHeader,
    CodeHeader,
    RawHeader,
    pad_name,
    build_program_header,
    build_code_header,
)
from code2tap.tap.builder import (
    CODE_BLOCK_NAME,
    SCREEN_SIZE,
    TapBuilder,
    write_block,
    write_code,
    write_container,
    write_file_atomic,
    read_input_file,
    create_tap,
)
from code2tap.tap.parser import (
    TapBlock,
    TapEntry,
    TapParser,
    parse_block,
    parse_blocks,
    parse_header,
)

__all__ = [
    # Checksum
    "MAX_PAYLOAD_SIZE",
    "FRAME_OVERHEAD",
    "xor_checksum",
    "pack_block_length",
    "frame",
    "verify_checksum",
    # Records
    "BlockFlag",
    "HeaderType",
    "HEADER_SIZE",
    "NAME_SIZE",
    "CODE_HEADER_PARAM3",
    "TapHeader",
    "ProgramHeader",
    "CodeHeader",
    "RawHeader",
    "pad_name",
    "build_program_header",
    "build_code_header",
    # Builder
    "CODE_BLOCK_NAME",
    "SCREEN_SIZE",
    "TapBuilder",
    "write_block",
    "write_code",
    "write_container",
    "write_file_atomic",
    "read_input_file",
    "create_tap",
    # Parser
    "TapBlock",
    "TapEntry",
    "TapParser",
    "parse_block",
    "parse_blocks",
    "parse_header",
]
