from __future__ import annotations

import json
import re
import warnings
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateutil_parser
from dateutil.parser import UnknownTimezoneWarning

from .types import UNDEFINED, FieldParseError


# exact-match literal tokens, checked before numbers and dates.
_LITERALS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PREFIXED_INT_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")
_INFINITY_RE = re.compile(r"([+-]?)Infinity")
_HAS_DIGIT_RE = re.compile(r"\d")

# two unrelated defaults: a part that differs between them was not in the string.
_DEFAULT_DATE = datetime(2001, 1, 1)
_ALT_DEFAULT_DATE = datetime(2002, 2, 2)

# sentinel for "did not parse", since `None` is a valid conversion result.
_NO_MATCH = object()


## -- dynamic typing

def parse_number(s: str) -> Any:
    """
    Parse a complete numeric literal, surrounding whitespace ignored.
    Returns `int` for integer literals, `float` otherwise, `_NO_MATCH` if `s` is not a number.
    """
    t = s.strip()
    if not t:
        return _NO_MATCH
    if _INT_RE.fullmatch(t):
        return int(t)
    if _FLOAT_RE.fullmatch(t):
        return float(t)
    if _PREFIXED_INT_RE.fullmatch(t):
        return int(t, 0)
    m = _INFINITY_RE.fullmatch(t)
    if m:
        return float(f"{m.group(1)}inf")
    return _NO_MATCH


def _parse_calendar_date(t: str) -> Any:
    """
    `dateutil` parse that never reads the clock. Missing parts come from fixed
    defaults (a year-less date lands in 2001), and a string with no month at
    all, such as `"10:30"` or `"3 PM"`, is a clock time rather than a date.
    """
    try:
        with warnings.catch_warnings():
            # unknown tz names (`"10 PM JZZ"`) are plain text, not dates
            warnings.simplefilter("error", UnknownTimezoneWarning)
            first = dateutil_parser.parse(t, default=_DEFAULT_DATE)
            second = dateutil_parser.parse(t, default=_ALT_DEFAULT_DATE)
    except (ValueError, OverflowError, UnknownTimezoneWarning):
        return _NO_MATCH
    if first.month != second.month:
        return _NO_MATCH
    return first


def parse_datetime(s: str) -> Any:
    """
    Parse a calendar date/time. Returns `_NO_MATCH` when `s` is not one.

    ISO forms go through `datetime.fromisoformat`, anything else through
    `dateutil` (only if the string carries at least one digit, bare words
    such as month names stay text). Naive results are assumed UTC.
    """
    t = s.strip()
    if not t or not _HAS_DIGIT_RE.search(t):
        return _NO_MATCH
    try:
        dt = datetime.fromisoformat(t.replace("Z", "+00:00"))
    except ValueError:
        dt = _parse_calendar_date(t)
        if dt is _NO_MATCH:
            return _NO_MATCH
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def convert_value(raw: str, *, dynamic_typing: bool = True) -> Any:
    """
    Generic conversion of one raw field. First match wins:
    empty -> `None`, `true`/`false`, `null`/`undefined`, number, date/time, the string itself.
    """
    if not dynamic_typing:
        return raw
    if raw == "":
        return None
    if raw in _LITERALS:
        return _LITERALS[raw]

    num = parse_number(raw)
    if num is not _NO_MATCH:
        return num

    dt = parse_datetime(raw)
    if dt is not _NO_MATCH:
        return dt
    return raw



## -- casing and naming, for header transforms

def text_lower(s: str) -> str:
    """Lower casing transform for a value."""
    return s.lower()
def text_upper(s: str) -> str:
    """Upper casing transform for a value."""
    return s.upper()

def text_strip(s: str) -> str:
    return s.strip()

def snake_case(s: str) -> str:
    """`"Full Name"` -> `"full_name"`. Runs of whitespace become one underscore."""
    return re.sub(r"\s+", "_", s.strip()).lower()



## -- named per-field parsers (raise `FieldParseError`)

def parse_int(v: str, *, field: str) -> int | None:
    """Integer or `None` for an empty cell. `"12.3"` is rejected, not truncated."""
    s = v.strip()
    if s == "":
        return None
    if not _INT_RE.fullmatch(s):
        raise FieldParseError(field, f"invalid int value {v!r}")
    return int(s)


def parse_float(v: str, *, field: str) -> float | None:
    s = v.strip()
    if s == "":
        return None
    num = parse_number(s)
    if num is _NO_MATCH:
        raise FieldParseError(field, f"invalid numeric value {v!r}")
    return float(num)


def parse_bool(v: str, *, field: str) -> bool | None:
    s = v.strip().lower()
    if s == "":
        return None
    # the allowed bool matches
    if s in ("1", "true", "t", "yes", "y"): return True
    if s in ("0", "false", "f", "no", "n"): return False
    raise FieldParseError(field, f"invalid boolean {v!r} (expected 0/1 or true/false)")


def parse_date(v: str, *, field: str) -> datetime | None:
    if v.strip() == "":
        return None
    dt = parse_datetime(v)
    if dt is _NO_MATCH:
        raise FieldParseError(field, f"invalid date value {v!r}")
    return dt


def parse_json(v: str, *, field: str) -> Any:
    try:
        return json.loads(v)
    except json.JSONDecodeError as e:
        raise FieldParseError(field, f"invalid JSON ({e.msg}): {v!r}") from e
