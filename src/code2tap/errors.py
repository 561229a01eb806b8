"""
code2tap Error Hierarchy
========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Code2TapError, allowing callers to catch every
conversion error with a single except clause.

Exception Hierarchy
-------------------
Code2TapError (base)
├── MissingArgumentError - a required run setting was not supplied
├── FileOpenError - an input or output path cannot be used
├── InvalidAddressError - an address does not fit in 16 bits
├── BasicError (bootstrap listing)
│   ├── LineTooLongError - a BASIC line exceeds the staging capacity
│   └── BasicFormatError - a tokenized listing cannot be decoded
└── TapError (TAP container)
    ├── PayloadTooLargeError - block payload exceeds the 16-bit length field
    └── TapFormatError - a TAP image is truncated or malformed

Every error is fatal for a single run: the CLI reports the message and exits
with a non-zero status. Nothing is retried.
"""

from pathlib import Path
from typing import Union


# =============================================================================
# Base Exception Class
# =============================================================================

class Code2TapError(Exception):
    """
    Base exception for all code2tap errors.

        try:
            create_tap(config)
        except Code2TapError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Run Setup Exceptions
# =============================================================================

class MissingArgumentError(Code2TapError):
    """
    A required setting (program name, code file, start or exec address)
    was not supplied.
    """

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"No {argument} given")


class FileOpenError(Code2TapError):
    """
    An input file could not be read or the output file could not be written.

    Attributes:
        path: The offending path
        reason: The underlying OS error message
    """

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Couldn't open file '{self.path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidAddressError(Code2TapError):
    """Raised when a load or exec address is outside 0..65535."""

    def __init__(self, name: str, value: int):
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}: {value}")


# =============================================================================
# BASIC Loader Exceptions
# =============================================================================

class BasicError(Code2TapError):
    """Base exception for bootstrap listing errors."""
    pass


class LineTooLongError(BasicError):
    """
    A formatted BASIC line does not fit the line staging buffer.

    The loader lines are short fixed templates, so this only triggers when a
    template is misused (for example an enormous substitution value).
    """

    def __init__(self, line_number: int, length: int, capacity: int):
        self.line_number = line_number
        self.length = length
        self.capacity = capacity
        super().__init__(
            f"BASIC line {line_number} is {length} bytes long, "
            f"staging capacity is {capacity} bytes"
        )


class BasicFormatError(BasicError):
    """A tokenized listing is truncated or a line lacks its terminator."""
    pass


# =============================================================================
# TAP Container Exceptions
# =============================================================================

class TapError(Code2TapError):
    """Base exception for TAP container errors."""
    pass


class PayloadTooLargeError(TapError):
    """
    A block payload is too large for the 2-byte block length field.

    Attributes:
        size: Payload size in bytes
        limit: Largest payload size that can be framed
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Block payload of {size} bytes exceeds the maximum of {limit} bytes"
        )


class TapFormatError(TapError):
    """
    Invalid TAP image.

    Raised when parsing a TAP file whose block framing is truncated or whose
    header blocks do not have the expected size.
    """
    pass
