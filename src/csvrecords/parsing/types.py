from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ErrorCode(str, Enum):
    """Typed error classifications reported in `ParseResult.errors`."""
    empty_file = "empty_file"                   # headers expected, no lines at all
    row_parse_failed = "row_parse_failed"       # tokenizing or converting a row raised


class ErrorType(str, Enum):
    no_data = "NoData"
    invalid_row = "InvalidRow"


class CsvRecordsError(Exception):
    """Base exception for this package."""


class OptionsError(CsvRecordsError, ValueError):
    """A `ParseOptions` value is out of range (bad delimiter, negative preview...)."""


class RowShapeError(CsvRecordsError, ValueError):
    """A data row has more fields than the header names."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"too many fields: expected {expected}, got {got}")


class FieldParseError(CsvRecordsError, ValueError):
    """Raised by the named field parsers in `registry` on a bad value."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field          # field name the parser was bound to
        self.detail = detail        # what was wrong with the value
        super().__init__(f"{field}: {detail}")


class _Undefined:
    """Marker for the literal token `undefined`, distinct from `None` (`null`)."""
    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


# A record is keyed by header name when headers are on, positional otherwise.
Record = Union[dict[str, Any], list[Any]]
FieldKey = Union[str, int]


@dataclass(frozen=True, slots=True)
class ParseError:
    """One collected failure. Only produced for empty input or skipped rows."""
    type: ErrorType
    code: ErrorCode
    message: str
    row: int | None = None      # 1-based, counted over data lines (header excluded)

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type.value, "code": self.code.value, "message": self.message}
        if self.row is not None:
            out["row"] = self.row
        return out


@dataclass(frozen=True, slots=True)
class ParseMeta:
    """Summary of a parse run."""
    delimiter: str
    linebreak: str                          # resolved, never "auto"
    truncated: bool = False                 # preview cap stopped the row loop
    fields: tuple[str, ...] | None = None   # header names, headers on only
    rows: int = 0                           # number of records produced

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "delimiter": self.delimiter,
            "linebreak": self.linebreak,
            "truncated": self.truncated,
            "rows": self.rows,
        }
        if self.fields is not None:
            out["fields"] = list(self.fields)
        return out


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Records, collected errors and metadata. Fully materialized."""
    data: tuple[Record, ...]
    errors: tuple[ParseError, ...]
    meta: ParseMeta

    def to_mapping(self) -> dict[str, Any]:
        """Plain containers, ready for `json.dumps(..., default=str)`."""
        return {
            "data": [r if isinstance(r, dict) else list(r) for r in self.data],
            "errors": [e.to_mapping() for e in self.errors],
            "meta": self.meta.to_mapping(),
        }
