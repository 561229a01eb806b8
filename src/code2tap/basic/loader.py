"""
BASIC Bootstrap Loader
======================

This module generates the small ZX BASIC program that is saved as the first
file on the tape. After the user types ``LOAD ""`` it runs automatically,
loads the remaining CODE blocks and jumps into the machine code.

Generated Program
-----------------
With a screen image:

    10 CLEAR VAL "32767"
    20 BORDER VAL "0":PAPER VAL "0":INK VAL "7":CLS
    30 POKE VAL "23739",VAL "111"
    40 LOAD "" CODE VAL "16384"
    50 LOAD "" CODE
    60 POKE VAL "23739",VAL "244"
    70 RANDOMIZE USR VAL "32768"

Without a screen image line 40 is left out and the following lines move
down by 10. The program is straight-line; there are no jumps.

The screen line names its address explicitly (``VAL "16384"``) rather than
relying on the address stored in the header; keep it that way.

POKE 23739 changes the low byte of the output routine address of channel
"S" in the channel information area (0x09F4) so that it points at a ``ret``
instruction at 0x096F. This hides the "Bytes: name" messages the ROM prints
while loading. 244 restores the original routine.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional
import logging

from code2tap.basic.line import TokenizedLine, format_line
from code2tap.basic.tokens import Token

logger = logging.getLogger(__name__)


# =============================================================================
# Loader Constants
# =============================================================================

# Address poked to redirect the print routine of the current output channel
OUTPUT_REDIRECT_ADDRESS = 23739

# Low byte of 0x096F, a lone "ret" in ROM
OUTPUT_SUPPRESSED = 111

# Original low byte of the print routine address
OUTPUT_RESTORED = 244

# Start of the display file; a SCREEN$ image is loaded here
SCREEN_ADDRESS = 16384

FIRST_LINE_NUMBER = 10
LINE_NUMBER_STEP = 10

# Colour arguments, written as VAL "n" like every other number
BLACK = Token.VAL.byte + b'"0"'
WHITE = Token.VAL.byte + b'"7"'

# VAL "<number>" template fragment
VAL_NUMBER = Token.VAL.byte + b'"%d"'


# =============================================================================
# Loader Steps
# =============================================================================

def clear_memory(line_number: int, address: int) -> TokenizedLine:
    """CLEAR VAL "address": RAMTOP goes below the machine code."""
    return format_line(line_number, Token.CLEAR.byte + VAL_NUMBER, address)


def set_colors(line_number: int) -> TokenizedLine:
    """BORDER black, PAPER black, INK white, then CLS."""
    return format_line(
        line_number,
        Token.BORDER.byte + BLACK + b":"
        + Token.PAPER.byte + BLACK + b":"
        + Token.INK.byte + WHITE + b":"
        + Token.CLS.byte,
    )


def poke_output_redirect(line_number: int, value: int) -> TokenizedLine:
    """POKE VAL "23739",VAL "value"."""
    return format_line(
        line_number,
        Token.POKE.byte + VAL_NUMBER + b"," + VAL_NUMBER,
        OUTPUT_REDIRECT_ADDRESS,
        value,
    )


def load_next_block(line_number: int, address: Optional[int] = None) -> TokenizedLine:
    """
    LOAD "" CODE, optionally with an explicit address.

    Without an address the ROM uses the one stored in the block header.
    """
    template = Token.LOAD.byte + b'""' + Token.CODE.byte
    if address is None:
        return format_line(line_number, template)
    return format_line(line_number, template + VAL_NUMBER, address)


def launch(line_number: int, address: int) -> TokenizedLine:
    """RANDOMIZE USR VAL "address"."""
    return format_line(
        line_number,
        Token.RANDOMIZE.byte + Token.USR.byte + VAL_NUMBER,
        address,
    )


# =============================================================================
# Loader Builder
# =============================================================================

@dataclass
class LoaderBuilder:
    """
    Accumulates loader lines and numbers them 10, 20, 30, ...

    Example:
        >>> builder = LoaderBuilder()
        >>> builder.add(clear_memory, 32767).add(launch, 32768)
        >>> listing = builder.build()
    """
    first_line: int = FIRST_LINE_NUMBER
    step: int = LINE_NUMBER_STEP
    _lines: list[TokenizedLine] = field(default_factory=list, repr=False)

    @property
    def next_line_number(self) -> int:
        return self.first_line + self.step * len(self._lines)

    def add(self, step_function: Callable[..., TokenizedLine], *args) -> "LoaderBuilder":
        """
        Append the line produced by ``step_function(line_number, *args)``.

        Returns:
            Self for method chaining
        """
        line = step_function(self.next_line_number, *args)
        self._lines.append(line)
        logger.debug(f"Loader line {line.to_text()}")
        return self

    @property
    def lines(self) -> list[TokenizedLine]:
        return list(self._lines)

    def build(self) -> bytes:
        """Concatenate all lines into the program listing."""
        listing = bytearray()
        for line in self._lines:
            listing.extend(line.to_bytes())
        return bytes(listing)


def build_loader(start_address: int, exec_address: int, load_screen: bool = False) -> bytes:
    """
    Build the complete bootstrap listing.

    Args:
        start_address: Load address of the machine code; memory is cleared
            up to one byte below it
        exec_address: Address passed to RANDOMIZE USR
        load_screen: Whether a SCREEN$ block precedes the code block

    Returns:
        The tokenized BASIC program
    """
    builder = LoaderBuilder()
    builder.add(clear_memory, start_address - 1)
    builder.add(set_colors)
    builder.add(poke_output_redirect, OUTPUT_SUPPRESSED)
    if load_screen:
        builder.add(load_next_block, SCREEN_ADDRESS)
    builder.add(load_next_block)
    builder.add(poke_output_redirect, OUTPUT_RESTORED)
    builder.add(launch, exec_address)

    listing = builder.build()
    logger.debug(f"Loader: {len(builder.lines)} lines, {len(listing)} bytes")
    return listing
