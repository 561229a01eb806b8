"""
Tokenized BASIC Lines
=====================

This module encodes and decodes single ZX BASIC program lines.

Line Format
-----------
    Offset  Size    Description
    ------  ----    -----------
    0       2       Line number (big-endian)
    2       2       Length of text + ENTER (little-endian)
    4       n       Text (keyword tokens and ASCII)
    4+n     1       ENTER (0x0D)

Note the mixed byte order: the line number is the only big-endian word in
the whole program area.

Reference
---------
- http://www.worldofspectrum.org/ZXBasicManual/zxmanchap24.html
"""

from dataclasses import dataclass
import logging
import struct

from code2tap.basic.tokens import ENTER, detokenize
from code2tap.errors import BasicFormatError, LineTooLongError

logger = logging.getLogger(__name__)


# Size of the historical line staging buffer, including its NUL terminator
LINE_BUFFER_SIZE = 1024

# Largest line number that fits the 16-bit line number field
MAX_LINE_NUMBER = 0xFFFF


@dataclass(frozen=True)
class TokenizedLine:
    """
    One BASIC program line.

    Attributes:
        line_number: Line number (0-65535, 1-9999 by BASIC convention)
        text: Line text without the ENTER terminator
    """
    line_number: int
    text: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.line_number <= MAX_LINE_NUMBER:
            raise ValueError(f"Line number does not fit 16 bits: {self.line_number}")

    @property
    def length(self) -> int:
        """Value of the line's length field (text plus ENTER)."""
        return len(self.text) + 1

    def to_bytes(self) -> bytes:
        """Serialize the line to its in-memory program format."""
        return (
            struct.pack(">H", self.line_number)
            + struct.pack("<H", self.length)
            + self.text
            + bytes([ENTER])
        )

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "TokenizedLine":
        """
        Decode the line starting at ``offset``.

        Raises:
            BasicFormatError: If the line is truncated or not terminated
        """
        if offset + 4 > len(data):
            raise BasicFormatError(f"Truncated line header at offset {offset}")

        line_number = struct.unpack_from(">H", data, offset)[0]
        length = struct.unpack_from("<H", data, offset + 2)[0]
        end = offset + 4 + length
        if length == 0 or end > len(data):
            raise BasicFormatError(
                f"Line {line_number} at offset {offset} declares {length} bytes, "
                f"only {len(data) - offset - 4} available"
            )
        if data[end - 1] != ENTER:
            raise BasicFormatError(f"Line {line_number} is not terminated by ENTER")

        return cls(line_number=line_number, text=bytes(data[offset + 4:end - 1]))

    def get_size(self) -> int:
        """Total encoded size of this line in bytes."""
        return 4 + self.length

    def to_text(self) -> str:
        """Readable listing form, e.g. ``10 CLEAR VAL "32767"``."""
        return f"{self.line_number} {detokenize(self.text)}"


def format_line(line_number: int, template: bytes, *args) -> TokenizedLine:
    """
    Create a line from a template with positional ``%`` substitutions.

    Templates are fixed token strings owned by the loader builder; token
    bytes are not escaped.

    Args:
        line_number: BASIC line number
        template: Line text template, e.g. ``b'\\xfd\\xb0"%d"'``
        *args: Values substituted into the template

    Returns:
        The formatted TokenizedLine

    Raises:
        LineTooLongError: If the text does not fit the staging buffer
    """
    text = template % args if args else template
    if len(text) >= LINE_BUFFER_SIZE:
        raise LineTooLongError(line_number, len(text), LINE_BUFFER_SIZE - 1)
    return TokenizedLine(line_number=line_number, text=bytes(text))


def encode_line(line_number: int, template: bytes, *args) -> bytes:
    """
    Encode one BASIC line straight to bytes.

    Example:
        >>> encode_line(10, b'\\xfd\\xb0"%d"', 32767).hex(" ")
        '00 0a 0a 00 fd b0 22 33 32 37 36 37 22 0d'
    """
    line = format_line(line_number, template, *args)
    logger.debug(f"Line {line.line_number}: {line.length} bytes")
    return line.to_bytes()


def decode_listing(listing: bytes) -> list[TokenizedLine]:
    """
    Split a tokenized listing back into its lines.

    Raises:
        BasicFormatError: If any line is malformed
    """
    lines = []
    offset = 0
    while offset < len(listing):
        line = TokenizedLine.from_bytes(listing, offset)
        lines.append(line)
        offset += line.get_size()
    return lines
