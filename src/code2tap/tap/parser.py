"""
TAP File Parser
===============

This module reads TAP images back into blocks, so that generated files can be
inspected and verified.

Usage
-----
    >>> from code2tap.tap import TapParser
    >>> parser = TapParser.from_file("hello.tap")
    >>> for entry in parser.iter_entries():
    ...     print(entry.header.get_display_name(), len(entry.data.payload))
    >>> problems = parser.verify()

A TAP file is nothing but framed blocks back to back; there is no file header
and no directory. Headers are recognised by their flag byte (0x00) and their
17-byte payload, and are paired with the data block that follows them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union
import logging
import struct

from code2tap.errors import TapFormatError
from code2tap.tap.checksum import xor_checksum
from code2tap.tap.records import HEADER_SIZE, BlockFlag, TapHeader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TapBlock:
    """
    One framed block.

    Attributes:
        offset: Position of the block's length field in the file
        flag: Flag byte
        payload: Block contents between flag and checksum
        checksum: Stored checksum byte
    """
    offset: int
    flag: int
    payload: bytes
    checksum: int

    @property
    def is_valid(self) -> bool:
        """True if the stored checksum matches flag and payload."""
        return xor_checksum(self.flag, self.payload) == self.checksum

    @property
    def is_header(self) -> bool:
        return self.flag == BlockFlag.HEADER and len(self.payload) == HEADER_SIZE

    def get_size(self) -> int:
        """Size of the block on tape, framing included."""
        return len(self.payload) + 4


@dataclass(frozen=True)
class TapEntry:
    """A header block paired with the data block that follows it."""
    header: Optional[TapHeader]
    data: Optional[TapBlock]
    header_block: Optional[TapBlock] = None

    @property
    def is_valid(self) -> bool:
        """True if every block present in the entry has a good checksum."""
        return all(
            block.is_valid for block in (self.header_block, self.data) if block is not None
        )


def parse_block(data: bytes, offset: int = 0) -> TapBlock:
    """
    Parse the block whose length field starts at ``offset``.

    Raises:
        TapFormatError: If the block is truncated or has a zero length
    """
    if offset + 2 > len(data):
        raise TapFormatError(f"Truncated block length at offset {offset}")

    length = struct.unpack_from("<H", data, offset)[0]
    if length == 0:
        raise TapFormatError(f"Zero block length at offset {offset}")

    end = offset + 3 + length
    if end > len(data):
        raise TapFormatError(
            f"Block at offset {offset} declares {length} bytes, "
            f"only {len(data) - offset - 2} available"
        )

    return TapBlock(
        offset=offset,
        flag=data[offset + 2],
        payload=bytes(data[offset + 3:end - 1]),
        checksum=data[end - 1],
    )


def parse_blocks(data: bytes) -> list[TapBlock]:
    """
    Split a TAP image into its blocks.

    Raises:
        TapFormatError: If any block is truncated
    """
    blocks = []
    offset = 0
    while offset < len(data):
        block = parse_block(data, offset)
        blocks.append(block)
        offset += block.get_size()
    logger.debug(f"Parsed {len(blocks)} blocks")
    return blocks


def parse_header(payload: bytes) -> TapHeader:
    """
    Decode a header block payload.

    Raises:
        TapFormatError: If the payload is not a 17-byte header record
    """
    try:
        return TapHeader.from_bytes(payload)
    except ValueError as e:
        raise TapFormatError(str(e)) from e


class TapParser:
    """
    Parses a complete TAP image.

    Attributes:
        data: The raw file contents
        blocks: All blocks in file order
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.blocks = parse_blocks(self.data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "TapParser":
        return cls(data)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "TapParser":
        """
        Read and parse a TAP file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            TapFormatError: If the file is malformed
        """
        return cls(Path(filepath).read_bytes())

    def iter_entries(self) -> Iterator[TapEntry]:
        """
        Pair each header with the data block after it.

        A data block without a preceding header yields an entry with no
        header; a header followed by another header or the end of the file
        yields an entry with no data.
        """
        pending: Optional[TapHeader] = None
        pending_block: Optional[TapBlock] = None
        for block in self.blocks:
            if block.is_header:
                if pending is not None:
                    yield TapEntry(header=pending, data=None, header_block=pending_block)
                pending = parse_header(block.payload)
                pending_block = block
            else:
                yield TapEntry(header=pending, data=block, header_block=pending_block)
                pending = None
                pending_block = None
        if pending is not None:
            yield TapEntry(header=pending, data=None, header_block=pending_block)

    def verify(self) -> list[str]:
        """
        Check checksums and header/data pairing.

        Returns:
            List of problems found (empty if the file is good)
        """
        problems = []
        for index, block in enumerate(self.blocks):
            if not block.is_valid:
                problems.append(
                    f"Block {index} at offset {block.offset}: checksum 0x{block.checksum:02X}, "
                    f"expected 0x{xor_checksum(block.flag, block.payload):02X}"
                )

        for entry in self.iter_entries():
            if entry.header is None:
                problems.append("Data block without a header")
            elif entry.data is None:
                problems.append(f"Header '{entry.header.get_display_name()}' has no data block")
            else:
                declared = entry.header.get_data_length()
                if declared != len(entry.data.payload):
                    problems.append(
                        f"Header '{entry.header.get_display_name()}' declares {declared} bytes, "
                        f"data block holds {len(entry.data.payload)}"
                    )
        return problems
