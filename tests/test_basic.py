"""
BASIC Loader Unit Tests
=======================

Tests for tokenized line encoding and the bootstrap loader program.

Test Categories
---------------
1. Tokens: keyword values and detokenizing
2. Lines: line encoding, length field, staging capacity
3. Loader steps: one typed function per loader line
4. Loader: complete program, with and without a screen
"""

import pytest

from code2tap.basic import (
    Token,
    ENTER,
    LINE_BUFFER_SIZE,
    TokenizedLine,
    LoaderBuilder,
    detokenize,
    format_line,
    encode_line,
    decode_listing,
    clear_memory,
    set_colors,
    poke_output_redirect,
    load_next_block,
    launch,
    build_loader,
)
from code2tap.errors import BasicFormatError, LineTooLongError


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def hello_listing() -> bytes:
    """Loader for code at 32768 started at 32768, no screen."""
    return build_loader(start_address=32768, exec_address=32768)


@pytest.fixture
def screen_listing() -> bytes:
    """The same loader with a SCREEN$ block."""
    return build_loader(start_address=32768, exec_address=32768, load_screen=True)


# =============================================================================
# Token Tests
# =============================================================================

class TestTokens:
    """Tests for keyword token values."""

    def test_loader_token_values(self):
        """Tokens used by the loader have their ROM values."""
        assert Token.CLEAR == 0xFD
        assert Token.CLS == 0xFB
        assert Token.LOAD == 0xEF
        assert Token.CODE == 0xAF
        assert Token.RANDOMIZE == 0xF9
        assert Token.USR == 0xC0
        assert Token.BORDER == 0xE7
        assert Token.POKE == 0xF4
        assert Token.PAPER == 0xDA
        assert Token.INK == 0xD9
        assert Token.VAL == 0xB0

    def test_token_byte(self):
        assert Token.CLEAR.byte == b"\xfd"

    def test_unused_keywords_only_in_table(self):
        """REM is never emitted, but still detokenizes."""
        assert "REM" not in Token.__members__
        assert detokenize(b"\xea") == "REM"

    def test_detokenize_keywords(self):
        assert detokenize(b'\xfd\xb0"32767"') == 'CLEAR VAL "32767"'

    def test_detokenize_separators(self):
        text = b'\xe7\xb0"0":\xda\xb0"0":\xd9\xb0"7":\xfb'
        assert detokenize(text) == 'BORDER VAL "0":PAPER VAL "0":INK VAL "7":CLS'

    def test_detokenize_comma(self):
        assert detokenize(b'\xf4\xb0"23739",\xb0"111"') == 'POKE VAL "23739",VAL "111"'

    def test_detokenize_control_byte(self):
        assert detokenize(b"A\x0e") == "A\\x0E"


# =============================================================================
# Line Encoding Tests
# =============================================================================

class TestLineEncoding:
    """Tests for encode_line() and TokenizedLine."""

    def test_encode_clear_line(self):
        """Line number big-endian, length little-endian, ENTER at the end."""
        encoded = encode_line(10, Token.CLEAR.byte + Token.VAL.byte + b'"%d"', 32767)
        assert encoded == bytes([
            0x00, 0x0A,                 # line 10, big-endian
            0x0A, 0x00,                 # 9 text bytes + ENTER
            0xFD, 0xB0,                 # CLEAR VAL
            0x22, 0x33, 0x32, 0x37, 0x36, 0x37, 0x22,   # "32767"
            0x0D,
        ])

    def test_length_field_independent_of_line_number(self):
        """Length counts only text and ENTER."""
        low = encode_line(1, b"ABC")
        high = encode_line(9999, b"ABC")
        assert low[2:4] == high[2:4] == bytes([4, 0])
        assert high[0:2] == bytes([0x27, 0x0F])

    def test_multiple_substitutions(self):
        line = format_line(30, b"%d,%d", 23739, 111)
        assert line.text == b"23739,111"
        assert line.length == 10

    def test_template_without_arguments(self):
        line = format_line(20, b"\xfb")
        assert line.to_bytes() == bytes([0x00, 0x14, 0x02, 0x00, 0xFB, ENTER])

    def test_large_line_number_accepted(self):
        """Any 16-bit line number is encoded without range checks."""
        assert encode_line(0xFFFF, b"")[:4] == bytes([0xFF, 0xFF, 0x01, 0x00])

    def test_line_number_overflow(self):
        with pytest.raises(ValueError):
            encode_line(0x10000, b"")

    def test_line_too_long(self):
        """Text that does not fit the staging buffer is rejected."""
        with pytest.raises(LineTooLongError) as exc_info:
            encode_line(10, b"%s", b"A" * LINE_BUFFER_SIZE)
        assert exc_info.value.line_number == 10
        assert exc_info.value.length == LINE_BUFFER_SIZE

    def test_longest_line_fits(self):
        encoded = encode_line(10, b"%s", b"A" * (LINE_BUFFER_SIZE - 1))
        assert len(encoded) == 4 + LINE_BUFFER_SIZE

    def test_from_bytes_roundtrip(self):
        line = TokenizedLine(line_number=40, text=b'\xef""\xaf')
        parsed = TokenizedLine.from_bytes(line.to_bytes())
        assert parsed == line

    def test_from_bytes_missing_enter(self):
        data = bytearray(TokenizedLine(10, b"AB").to_bytes())
        data[-1] = 0x00
        with pytest.raises(BasicFormatError):
            TokenizedLine.from_bytes(bytes(data))

    def test_from_bytes_truncated(self):
        data = TokenizedLine(10, b"ABCDEF").to_bytes()
        with pytest.raises(BasicFormatError):
            TokenizedLine.from_bytes(data[:-2])

    def test_to_text(self):
        line = TokenizedLine(60, b'\xf9\xc0\xb0"32768"')
        assert line.to_text() == '60 RANDOMIZE USR VAL "32768"'


# =============================================================================
# Loader Step Tests
# =============================================================================

class TestLoaderSteps:
    """Tests for the typed loader step functions."""

    def test_clear_memory(self):
        line = clear_memory(10, 32767)
        assert line.line_number == 10
        assert line.text == b'\xfd\xb0"32767"'

    def test_set_colors(self):
        assert set_colors(20).text == b'\xe7\xb0"0":\xda\xb0"0":\xd9\xb0"7":\xfb'

    def test_poke_output_redirect(self):
        assert poke_output_redirect(30, 111).text == b'\xf4\xb0"23739",\xb0"111"'
        assert poke_output_redirect(60, 244).text == b'\xf4\xb0"23739",\xb0"244"'

    def test_load_next_block_without_address(self):
        assert load_next_block(50).text == b'\xef""\xaf'

    def test_load_next_block_with_address(self):
        assert load_next_block(40, 16384).text == b'\xef""\xaf\xb0"16384"'

    def test_launch(self):
        assert launch(70, 32768).text == b'\xf9\xc0\xb0"32768"'


class TestLoaderBuilder:
    """Tests for LoaderBuilder numbering."""

    def test_numbering(self):
        builder = LoaderBuilder()
        builder.add(set_colors).add(load_next_block).add(launch, 1234)
        assert [line.line_number for line in builder.lines] == [10, 20, 30]

    def test_custom_numbering(self):
        builder = LoaderBuilder(first_line=100, step=5)
        builder.add(set_colors).add(set_colors)
        assert [line.line_number for line in builder.lines] == [100, 105]

    def test_build_concatenates(self):
        builder = LoaderBuilder().add(set_colors).add(launch, 40000)
        expected = set_colors(10).to_bytes() + launch(20, 40000).to_bytes()
        assert builder.build() == expected


# =============================================================================
# Loader Program Tests
# =============================================================================

class TestBuildLoader:
    """Tests for the complete bootstrap program."""

    def test_line_texts(self, hello_listing: bytes):
        lines = [line.to_text() for line in decode_listing(hello_listing)]
        assert lines == [
            '10 CLEAR VAL "32767"',
            '20 BORDER VAL "0":PAPER VAL "0":INK VAL "7":CLS',
            '30 POKE VAL "23739",VAL "111"',
            '40 LOAD "" CODE',
            '50 POKE VAL "23739",VAL "244"',
            '60 RANDOMIZE USR VAL "32768"',
        ]

    def test_first_line_bytes(self, hello_listing: bytes):
        assert hello_listing[:14] == encode_line(10, b'\xfd\xb0"%d"', 32767)

    def test_listing_length(self, hello_listing: bytes):
        assert len(hello_listing) == 104

    def test_last_line(self, hello_listing: bytes):
        lines = decode_listing(hello_listing)
        assert lines[-1] == TokenizedLine(60, b'\xf9\xc0\xb0"32768"')
        assert lines[-1].line_number == 10 + 10 * (len(lines) - 1)

    def test_screen_line_inserted(self, screen_listing: bytes):
        lines = decode_listing(screen_listing)
        assert len(lines) == 7
        assert lines[3].to_text() == '40 LOAD "" CODE VAL "16384"'
        assert lines[-1].line_number == 70
        assert len(screen_listing) == 121

    def test_screen_only_changes_one_line(self, hello_listing: bytes, screen_listing: bytes):
        """Without a screen the other lines are unchanged, only renumbered."""
        without = decode_listing(hello_listing)
        with_screen = decode_listing(screen_listing)
        del with_screen[3]

        assert [line.text for line in without] == [line.text for line in with_screen]
        assert [line.line_number for line in without] == [10, 20, 30, 40, 50, 60]
        assert [line.line_number for line in with_screen] == [10, 20, 30, 50, 60, 70]

    def test_exec_differs_from_start(self):
        lines = decode_listing(build_loader(start_address=24000, exec_address=24010))
        assert lines[0].to_text() == '10 CLEAR VAL "23999"'
        assert lines[-1].to_text() == '60 RANDOMIZE USR VAL "24010"'

    def test_decode_truncated_listing(self, hello_listing: bytes):
        with pytest.raises(BasicFormatError):
            decode_listing(hello_listing[:-3])
