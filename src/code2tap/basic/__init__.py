"""
ZX BASIC Loader Generation
==========================

Tokenized BASIC line encoding and the bootstrap loader program.

    >>> from code2tap.basic import build_loader, decode_listing
    >>> listing = build_loader(start_address=32768, exec_address=32768)
    >>> for line in decode_listing(listing):
    ...     print(line.to_text())
    10 CLEAR VAL "32767"
    ...
"""

from code2tap.basic.tokens import (
    Token,
    KEYWORDS,
    ENTER,
    is_token,
    detokenize,
)
from code2tap.basic.line import (
    TokenizedLine,
    LINE_BUFFER_SIZE,
    format_line,
    encode_line,
    decode_listing,
)
from code2tap.basic.loader import (
    LoaderBuilder,
    OUTPUT_REDIRECT_ADDRESS,
    OUTPUT_SUPPRESSED,
    OUTPUT_RESTORED,
    SCREEN_ADDRESS,
    clear_memory,
    set_colors,
    poke_output_redirect,
    load_next_block,
    launch,
    build_loader,
)

__all__ = [
    # Tokens
    "Token",
    "KEYWORDS",
    "ENTER",
    "is_token",
    "detokenize",
    # Lines
    "TokenizedLine",
    "LINE_BUFFER_SIZE",
    "format_line",
    "encode_line",
    "decode_listing",
    # Loader
    "LoaderBuilder",
    "OUTPUT_REDIRECT_ADDRESS",
    "OUTPUT_SUPPRESSED",
    "OUTPUT_RESTORED",
    "SCREEN_ADDRESS",
    "clear_memory",
    "set_colors",
    "poke_output_redirect",
    "load_next_block",
    "launch",
    "build_loader",
]
