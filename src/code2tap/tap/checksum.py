"""
TAP Block Framing and Checksum
==============================

Every block in a TAP file is framed as:

    Offset  Size    Description
    ------  ----    -----------
    0       2       Block length = payload length + 1 (little-endian)
    2       1       Flag byte (0x00 header, 0xFF data)
    3       n       Payload
    3+n     1       Checksum

The checksum is the XOR of the flag byte and every payload byte, so XOR-ing
the flag, the payload and the checksum together always gives zero.

A framed block is therefore ``len(payload) + 4`` bytes long.
"""

from functools import reduce
from operator import xor
import struct

from code2tap.errors import PayloadTooLargeError


# Largest payload the 2-byte length field can describe
MAX_PAYLOAD_SIZE = 0xFFFD

# Bytes added around a payload: length word, flag, checksum
FRAME_OVERHEAD = 4


def xor_checksum(flag: int, payload: bytes) -> int:
    """
    Calculate a block checksum.

    Args:
        flag: The block's flag byte
        payload: The block payload

    Returns:
        8-bit checksum value

    Example:
        >>> xor_checksum(0xFF, bytes([0x3E, 0x05, 0xC9]))
        13
    """
    return reduce(xor, payload, flag & 0xFF)


def pack_block_length(payload_length: int) -> bytes:
    """
    Pack the block length field for a payload of the given size.

    Raises:
        PayloadTooLargeError: If the payload cannot be described in 16 bits
    """
    if payload_length > MAX_PAYLOAD_SIZE:
        raise PayloadTooLargeError(payload_length, MAX_PAYLOAD_SIZE)
    return struct.pack("<H", payload_length + 1)


def frame(flag: int, payload: bytes) -> bytes:
    """
    Frame a payload as a complete TAP block.

    Args:
        flag: Flag byte (0x00 for headers, 0xFF for data by convention)
        payload: Block contents

    Returns:
        length + flag + payload + checksum

    Raises:
        PayloadTooLargeError: If the payload exceeds MAX_PAYLOAD_SIZE

    Example:
        >>> frame(0xFF, bytes([0x3E, 0x05, 0xC9])).hex(" ")
        '04 00 ff 3e 05 c9 0d'
    """
    block = bytearray(pack_block_length(len(payload)))
    block.append(flag & 0xFF)
    block.extend(payload)
    block.append(xor_checksum(flag, payload))
    return bytes(block)


def verify_checksum(flag: int, payload: bytes, checksum: int) -> bool:
    """Check a stored checksum against flag and payload."""
    return xor_checksum(flag, payload) == checksum
