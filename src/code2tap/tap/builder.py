"""
TAP Container Builder
=====================

This module writes the complete tape image: the BASIC loader followed by the
optional screen image and the machine code.

Container Layout
----------------
    Block   Flag    Contents
    -----   ----    --------
    1       0x00    Program header (loader name, listing length)
    2       0xFF    Loader listing
    3       0x00    Code header "code", 6912, 16384      (screen only)
    4       0xFF    Screen image                          (screen only)
    5       0x00    Code header "code", code length, load address
    6       0xFF    Machine code

Blocks are written strictly in this order; the ROM loads a tape
sequentially and the loader expects the CODE blocks in this order.

Usage
-----
    >>> from code2tap.tap import TapBuilder
    >>> builder = TapBuilder(
    ...     program_name="HELLO",
    ...     code=bytes([0x3E, 0x05, 0xC9]),
    ...     load_address=32768,
    ...     exec_address=32768,
    ... )
    >>> builder.build_to_file("hello.tap")

Or from a run configuration:

    >>> create_tap(TapConfig(program_name="HELLO", code_file=Path("hello.bin"),
    ...                      load_address=32768, exec_address=32768))
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union
import io
import logging
import os
import tempfile

from code2tap.basic.loader import SCREEN_ADDRESS, build_loader
from code2tap.config import TapConfig
from code2tap.errors import FileOpenError, PayloadTooLargeError
from code2tap.tap.checksum import MAX_PAYLOAD_SIZE, frame
from code2tap.tap.records import BlockFlag, build_code_header, build_program_header

logger = logging.getLogger(__name__)


# Name stored in the headers of the screen and code blocks
CODE_BLOCK_NAME = "code"

# Size of a full SCREEN$ image: 6144 bytes bitmap + 768 bytes attributes
SCREEN_SIZE = 6912


# =============================================================================
# Block Writing
# =============================================================================

def write_block(sink: BinaryIO, flag: int, payload: bytes) -> int:
    """
    Frame a payload and write it to the sink.

    Returns:
        Number of bytes written
    """
    block = frame(flag, payload)
    sink.write(block)
    logger.debug(f"Wrote block flag=0x{flag & 0xFF:02X} payload={len(payload)} bytes")
    return len(block)


def write_code(sink: BinaryIO, name: str, data: bytes, load_address: int) -> int:
    """Write a CODE header block followed by its data block."""
    # Reject before the header is built so the error is the same as for framing
    if len(data) > MAX_PAYLOAD_SIZE:
        raise PayloadTooLargeError(len(data), MAX_PAYLOAD_SIZE)

    written = write_block(sink, BlockFlag.HEADER, build_code_header(name, len(data), load_address))
    written += write_block(sink, BlockFlag.DATA, data)
    return written


def write_container(
    sink: BinaryIO,
    program_name: str,
    listing: bytes,
    screen: Optional[bytes],
    code: bytes,
    load_address: int,
) -> int:
    """
    Write the full tape image to a binary stream.

    Args:
        sink: Writable binary stream
        program_name: Name of the loader program
        listing: Tokenized loader listing
        screen: Screen image, or None to omit the screen blocks
        code: Machine code
        load_address: Load address of the machine code

    Returns:
        Number of bytes written

    Raises:
        PayloadTooLargeError: If any block is too large
        OSError: If writing to the sink fails
    """
    written = write_block(sink, BlockFlag.HEADER, build_program_header(program_name, listing))
    written += write_block(sink, BlockFlag.DATA, listing)

    if screen is not None:
        if len(screen) != SCREEN_SIZE:
            logger.warning(
                f"Screen image is {len(screen)} bytes, expected {SCREEN_SIZE}"
            )
        written += write_code(sink, CODE_BLOCK_NAME, screen, SCREEN_ADDRESS)

    written += write_code(sink, CODE_BLOCK_NAME, code, load_address)
    return written


# =============================================================================
# Atomic File Output
# =============================================================================

def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def write_file_atomic(filepath: Union[str, Path], data: bytes) -> int:
    """
    Write data so that the target path never holds a partial file.

    The data goes to a temporary file in the target directory which is then
    renamed over the target. On failure the temporary file is removed.

    Raises:
        FileOpenError: If the file cannot be written
    """
    filepath = Path(filepath)

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
    except OSError as e:
        raise FileOpenError(filepath, e.strerror or str(e)) from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give the file the mode open() would
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, filepath)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise FileOpenError(filepath, e.strerror or str(e)) from e

    return len(data)


# =============================================================================
# TAP Builder
# =============================================================================

@dataclass
class TapBuilder:
    """
    Builds a TAP image with a BASIC loader.

    Attributes:
        program_name: Loader name shown by LOAD ""
        code: Machine code bytes
        load_address: Where the code is loaded
        exec_address: Where execution starts
        screen: Optional SCREEN$ image loaded at 16384
    """
    program_name: str
    code: bytes
    load_address: int
    exec_address: int
    screen: Optional[bytes] = None

    def build_listing(self) -> bytes:
        """Generate the loader listing for this image."""
        return build_loader(
            start_address=self.load_address,
            exec_address=self.exec_address,
            load_screen=self.screen is not None,
        )

    def write(self, sink: BinaryIO) -> int:
        """Write the image to a binary stream."""
        return write_container(
            sink,
            self.program_name,
            self.build_listing(),
            self.screen,
            self.code,
            self.load_address,
        )

    def build(self) -> bytes:
        """
        Build the complete TAP image in memory.

        Raises:
            PayloadTooLargeError: If the code or screen is too large
        """
        buffer = io.BytesIO()
        self.write(buffer)
        data = buffer.getvalue()

        logger.info(
            f"Built TAP '{self.program_name}': {len(data)} bytes, "
            f"code {len(self.code)} bytes at {self.load_address}, "
            f"exec {self.exec_address}"
            + (", with screen" if self.screen is not None else "")
        )
        return data

    def build_to_file(self, filepath: Union[str, Path]) -> int:
        """
        Build the image and write it to disk.

        Nothing is written if building fails, and a failed write leaves no
        file behind under the target name.

        Returns:
            Number of bytes written
        """
        return write_file_atomic(filepath, self.build())


# =============================================================================
# Convenience Functions
# =============================================================================

def read_input_file(filepath: Union[str, Path]) -> bytes:
    """
    Read a whole input file.

    Raises:
        FileOpenError: If the file cannot be read
    """
    filepath = Path(filepath)
    try:
        return filepath.read_bytes()
    except OSError as e:
        raise FileOpenError(filepath, e.strerror or str(e)) from e


def create_tap(config: TapConfig) -> Path:
    """
    Create a TAP file from a run configuration.

    Args:
        config: Program name, input files, addresses and output path

    Returns:
        Path of the written TAP file

    Raises:
        MissingArgumentError: If the configuration is incomplete
        FileOpenError: If an input or the output file cannot be used
        Code2TapError: For any encoding error
    """
    config.validate()

    code = read_input_file(config.code_file)
    screen = read_input_file(config.screen_file) if config.screen_file else None

    builder = TapBuilder(
        program_name=config.program_name,
        code=code,
        load_address=config.load_address,
        exec_address=config.exec_address,
        screen=screen,
    )

    output_path = config.resolve_output_path()
    builder.build_to_file(output_path)
    return output_path
