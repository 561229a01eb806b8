"""
TAP Header Records
==================

This module defines the 17-byte header records that precede each data block
on a ZX Spectrum tape.

Header Layout
-------------
    Offset  Size    Description
    ------  ----    -----------
    0       1       Type (0 = BASIC program, 3 = CODE)
    1       10      File name, space padded
    11      2       Parameter 1 (little-endian)
    13      2       Parameter 2 (little-endian)
    15      2       Parameter 3 (little-endian)

Parameters by type, as written by this package:

    Type        Param 1             Param 2             Param 3
    ----        -------             -------             -------
    PROGRAM     listing length      listing length      autostart field
    CODE        payload length      load address        0x8000

The header record is framed like any other block (flag 0x00), which makes
a 21-byte header block on tape.

Reference
---------
- File format documentation: http://www.zx-modules.de/fileformats/tapformat.html
"""

from dataclasses import dataclass
from enum import IntEnum
import struct


# =============================================================================
# Enumeration Types
# =============================================================================

class BlockFlag(IntEnum):
    """Flag byte conventions for TAP blocks."""
    HEADER = 0x00
    DATA = 0xFF


class HeaderType(IntEnum):
    """Header type discriminants used by this package."""
    PROGRAM = 0
    CODE = 3

    @classmethod
    def get_name(cls, type_byte: int) -> str:
        """Get a human-readable name for a header type byte."""
        names = {
            cls.PROGRAM: "Program",
            cls.CODE: "Bytes",
        }
        return names.get(type_byte, f"Unknown ({type_byte})")


# =============================================================================
# Field Helpers
# =============================================================================

HEADER_SIZE = 17
NAME_SIZE = 10

# Third parameter of every CODE header
CODE_HEADER_PARAM3 = 0x8000

_HEADER_STRUCT = struct.Struct("<B10sHHH")


def pad_name(name: str) -> bytes:
    """
    Encode a file name as the 10-byte header name field.

    Short names are padded with spaces, long names are cut at 10 bytes.

    Example:
        >>> pad_name("code")
        b'code      '
    """
    encoded = name.encode("latin-1", errors="replace")
    return encoded[:NAME_SIZE].ljust(NAME_SIZE, b" ")


def _check_word(field_name: str, value: int) -> int:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{field_name} does not fit 16 bits: {value}")
    return value


# =============================================================================
# Header Records
# =============================================================================

@dataclass
class TapHeader:
    """
    Base class for header records.

    Attributes:
        header_type: Type discriminant
        name: File name shown by the ROM while loading
    """
    header_type: int
    name: str

    def to_bytes(self) -> bytes:
        """Serialize the header to its 17-byte record."""
        raise NotImplementedError("Subclasses must implement to_bytes()")

    def get_display_name(self) -> str:
        """Get the name without trailing padding."""
        return self.name.rstrip()

    def get_data_length(self) -> int:
        """Length of the data block this header announces."""
        raise NotImplementedError("Subclasses must implement get_data_length()")

    def get_type_name(self) -> str:
        return HeaderType.get_name(self.header_type)

    @staticmethod
    def from_bytes(data: bytes) -> "TapHeader":
        """
        Decode a 17-byte header record.

        Program and code headers decode to their own classes; any other type
        gives a RawHeader.

        Raises:
            ValueError: If data is not exactly 17 bytes
        """
        if len(data) != HEADER_SIZE:
            raise ValueError(f"Header must be {HEADER_SIZE} bytes, got {len(data)}")

        header_type, raw_name, param1, param2, param3 = _HEADER_STRUCT.unpack(data)
        name = raw_name.decode("latin-1")

        if header_type == HeaderType.PROGRAM:
            return ProgramHeader(
                name=name,
                data_length=param1,
                program_length=param2,
                autostart=param3,
            )
        if header_type == HeaderType.CODE:
            return CodeHeader(
                name=name,
                length=param1,
                start_address=param2,
                param3=param3,
            )
        return RawHeader(header_type=header_type, name=name, params=(param1, param2, param3))


@dataclass
class ProgramHeader(TapHeader):
    """
    Header for a BASIC program block.

    Attributes:
        data_length: Length of program plus variables
        program_length: Length of the program alone
        autostart: Autostart field (see build_program_header)
    """
    header_type: int = HeaderType.PROGRAM
    name: str = ""
    data_length: int = 0
    program_length: int = 0
    autostart: int = 0

    def get_data_length(self) -> int:
        return self.data_length

    def to_bytes(self) -> bytes:
        return _HEADER_STRUCT.pack(
            HeaderType.PROGRAM,
            pad_name(self.name),
            _check_word("Program length", self.data_length),
            _check_word("Program length", self.program_length),
            _check_word("Autostart field", self.autostart),
        )


@dataclass
class CodeHeader(TapHeader):
    """
    Header for a CODE (bytes) block.

    Attributes:
        length: Payload length
        start_address: Address the payload is loaded at
        param3: Unused by the loader, always 0x8000 when written here
    """
    header_type: int = HeaderType.CODE
    name: str = ""
    length: int = 0
    start_address: int = 0
    param3: int = CODE_HEADER_PARAM3

    def get_data_length(self) -> int:
        return self.length

    def to_bytes(self) -> bytes:
        return _HEADER_STRUCT.pack(
            HeaderType.CODE,
            pad_name(self.name),
            _check_word("Code length", self.length),
            _check_word("Load address", self.start_address),
            _check_word("Parameter 3", self.param3),
        )


@dataclass
class RawHeader(TapHeader):
    """A header of a type this package does not write (arrays)."""
    params: tuple[int, int, int] = (0, 0, 0)

    def get_data_length(self) -> int:
        return self.params[0]

    def to_bytes(self) -> bytes:
        return _HEADER_STRUCT.pack(self.header_type, pad_name(self.name), *self.params)


# =============================================================================
# Header Builders
# =============================================================================

def build_program_header(name: str, listing: bytes) -> bytes:
    """
    Build the header record for the BASIC loader.

    Both length parameters are the listing length (the loader has no
    variables area).

    The autostart field is a fixed special case: it is the listing's first
    two bytes (the big-endian number of its first line) written in swapped
    order. This reproduces the established output bit for bit and is not a
    general autostart mechanism.

    Args:
        name: Program name shown by LOAD ""
        listing: The tokenized loader program

    Returns:
        17-byte header record
    """
    if len(listing) < 2:
        raise ValueError("Listing must contain at least one line")

    header = ProgramHeader(
        name=name,
        data_length=len(listing),
        program_length=len(listing),
        autostart=listing[1] | (listing[0] << 8),
    )
    return header.to_bytes()


def build_code_header(name: str, payload_length: int, load_address: int) -> bytes:
    """
    Build the header record for a CODE block.

    Args:
        name: File name (truncated or padded to 10 bytes)
        payload_length: Length of the following data block payload
        load_address: Address the payload is loaded at

    Returns:
        17-byte header record
    """
    header = CodeHeader(name=name, length=payload_length, start_address=load_address)
    return header.to_bytes()
