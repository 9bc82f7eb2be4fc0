from __future__ import annotations

import pytest

from csvrecords.parsing.options import ParseOptions, resolve_options
from csvrecords.parsing.types import OptionsError


def test_defaults() -> None:
    o = ParseOptions()
    assert o.delimiter == ","
    assert o.newline == "auto"
    assert o.header is True
    assert o.skip_empty_lines is True
    assert o.dynamic_typing is False
    assert o.comment_marker is None
    assert o.preview == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"delimiter": ";;"},
        {"delimiter": ""},
        {"quote_char": ","},
        {"escape_char": ","},
        {"preview": -1},
        {"skip_empty_lines": "sometimes"},
        {"comments": ""},
        {"newline": ""},
    ],
)
def test_invalid_options_raise(kwargs: dict) -> None:
    with pytest.raises(OptionsError):
        ParseOptions(**kwargs)


def test_comment_marker_resolution() -> None:
    assert ParseOptions(comments=True).comment_marker == "#"
    assert ParseOptions(comments="//").comment_marker == "//"
    assert ParseOptions(comments=False).comment_marker is None


def test_mappings_are_snapshotted() -> None:
    """Caller edits after construction never reach the options."""
    renames = {"a": "b"}
    o = ParseOptions(rename_headers=renames)
    renames["a"] = "c"
    assert o.rename_headers["a"] == "b"
    with pytest.raises(TypeError):
        o.rename_headers["x"] = "y"  # type: ignore[index]


def test_per_field_dynamic_typing() -> None:
    o = ParseOptions(dynamic_typing={"age": True, 0: True})
    assert o.typing_enabled_for("age") is True
    assert o.typing_enabled_for(0) is True
    assert o.typing_enabled_for("name") is False


def test_resolve_options_merges_overrides() -> None:
    base = ParseOptions(delimiter=";")
    o = resolve_options(base, preview=5)
    assert o.delimiter == ";"
    assert o.preview == 5
    assert base.preview == 0
    assert resolve_options(base) is base


def test_resolve_options_rejects_unknown_keys() -> None:
    with pytest.raises(OptionsError) as e:
        resolve_options(delimeter=";")
    assert "delimeter" in str(e.value)
