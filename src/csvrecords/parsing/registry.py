from __future__ import annotations

from functools import partial
from typing import Any, Callable

from .options import FieldParser, HeaderTransform
from .primitives import (
    parse_bool,
    parse_date,
    parse_float,
    parse_int,
    parse_json,
    snake_case,
    text_lower,
    text_strip,
    text_upper,
)

# named field parsers: each takes the raw string plus the field it is bound to.
_FIELD_PARSERS: dict[str, Callable[..., Any]] = {
    "int": parse_int,
    "float": parse_float,
    "bool": parse_bool,
    "date": parse_date,
    "json": parse_json,
}

_HEADER_TRANSFORMS: dict[str, HeaderTransform] = {
    "lower": text_lower,
    "upper": text_upper,
    "strip": text_strip,
    "snake": snake_case,
}


def field_parser_names() -> list[str]:
    return sorted(_FIELD_PARSERS)


def header_transform_names() -> list[str]:
    return sorted(_HEADER_TRANSFORMS)


def get_field_parser(name: str, *, field: str) -> FieldParser:
    """
    A registry that binds a named parser to one field. The field name ends up in
    the parser's error messages, so a skipped row says which column failed.
    """
    try:
        fn = _FIELD_PARSERS[name]
    except KeyError:
        raise ValueError(f"Unknown field parser: {name} (choose from {field_parser_names()})") from None
    return partial(fn, field=field)


def get_header_transform(name: str) -> HeaderTransform:
    try:
        return _HEADER_TRANSFORMS[name]
    except KeyError:
        raise ValueError(f"Unknown header transform: {name} (choose from {header_transform_names()})") from None
