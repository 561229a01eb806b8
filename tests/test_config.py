"""
Tests for TapConfig
===================

These tests verify validation of the run configuration and resolution of
the default output path.
"""

from pathlib import Path

import pytest

from code2tap.config import OUTPUT_DIR_ENV, TapConfig
from code2tap.errors import InvalidAddressError, MissingArgumentError


def make_config(**overrides) -> TapConfig:
    settings = dict(
        program_name="HELLO",
        code_file=Path("hello.bin"),
        load_address=32768,
        exec_address=32768,
    )
    settings.update(overrides)
    return TapConfig(**settings)


class TestValidate:
    """Tests for TapConfig.validate()."""

    def test_valid(self):
        make_config().validate()

    @pytest.mark.parametrize("field_name, argument", [
        ("program_name", "program name"),
        ("code_file", "binary filename"),
        ("load_address", "start address"),
        ("exec_address", "execution address"),
    ])
    def test_missing(self, field_name: str, argument: str):
        value = "" if field_name == "program_name" else None
        with pytest.raises(MissingArgumentError, match=argument) as exc_info:
            make_config(**{field_name: value}).validate()
        assert exc_info.value.argument == argument

    def test_load_address_zero(self):
        """CLEAR needs the byte below the load address."""
        with pytest.raises(InvalidAddressError):
            make_config(load_address=0).validate()

    def test_exec_address_out_of_range(self):
        with pytest.raises(InvalidAddressError) as exc_info:
            make_config(exec_address=70000).validate()
        assert exc_info.value.value == 70000

    def test_address_limits(self):
        make_config(load_address=0xFFFF, exec_address=0).validate()

    def test_paths_converted(self):
        config = make_config(code_file="a.bin", screen_file="b.scr", output_path="c.tap")
        assert config.code_file == Path("a.bin")
        assert config.screen_file == Path("b.scr")
        assert config.output_path == Path("c.tap")


class TestResolveOutputPath:
    """Tests for TapConfig.resolve_output_path()."""

    def test_explicit_output(self, monkeypatch):
        monkeypatch.setenv(OUTPUT_DIR_ENV, "/tmp/elsewhere")
        assert make_config(output_path="out.tap").resolve_output_path() == Path("out.tap")

    def test_default_from_name(self, monkeypatch):
        monkeypatch.delenv(OUTPUT_DIR_ENV, raising=False)
        assert make_config().resolve_output_path() == Path("HELLO.tap")

    def test_default_in_output_dir(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv(OUTPUT_DIR_ENV, str(tmp_path))
        assert make_config().resolve_output_path() == tmp_path / "HELLO.tap"
