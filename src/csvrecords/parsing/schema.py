from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence

from .lines import resolve_linebreak, split_lines
from .options import ParseOptions, ValueTransform, resolve_options
from .primitives import convert_value
from .tokenizer import RowTokenizer
from .types import (
    ErrorCode,
    ErrorType,
    FieldKey,
    ParseError,
    ParseMeta,
    ParseResult,
    Record,
    RowShapeError,
)

logger = logging.getLogger(__name__)


class Conversion(str, Enum):
    """How a field's raw string becomes a value, chosen once per field."""
    override = "override"       # per-field parser, dynamic typing skipped
    dynamic = "dynamic"         # generic type inference
    passthrough = "passthrough" # raw string kept


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Any given field's conversion plan."""
    key: FieldKey                           # header name, or 0-based index without headers
    conversion: Conversion
    parser: Callable[[str], Any] | None     # set for `Conversion.override` only
    transform: ValueTransform               # global value transform, always applied last

    def convert(self, raw: str) -> Any:
        if self.conversion is Conversion.override:
            v = self.parser(raw)
        elif self.conversion is Conversion.dynamic:
            v = convert_value(raw)
        else:
            v = raw
        return self.transform(v, self.key)


def plan_field(key: FieldKey, options: ParseOptions) -> FieldSpec:
    """Pick the conversion for `key`. Overrides only apply to named (header) fields."""
    if isinstance(key, str) and key in options.parsers:
        return FieldSpec(key, Conversion.override, options.parsers[key], options.transform)
    if options.typing_enabled_for(key):
        return FieldSpec(key, Conversion.dynamic, None, options.transform)
    return FieldSpec(key, Conversion.passthrough, None, options.transform)


@dataclass(slots=True)
class RecordMaterializer:
    """
    Turn physical lines into a `ParseResult`.

    Per-parse state (header, field plans) lives here; a fresh instance is
    built for every parse.

    Row failures follow `options.skip_invalid_lines`:
    - `False`: the first exception raised by tokenizing/converting a row propagates,
    - `True`: it becomes a `ParseError` (`row_parse_failed`) and the row is dropped.
    """
    options: ParseOptions
    tokenizer: RowTokenizer = field(init=False)
    header: tuple[str, ...] | None = field(default=None, init=False)
    _plans: list[FieldSpec] = field(default_factory=list, init=False)
    _positional: dict[int, FieldSpec] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        o = self.options
        self.tokenizer = RowTokenizer(o.delimiter, o.quote_char, o.escape_char)

    def read_header(self, line: str) -> tuple[str, ...]:
        """Header names: tokenize, `transform_header`, then `rename_headers`."""
        o = self.options
        names = [o.transform_header(h) for h in self.tokenizer.tokenize(line)]
        names = [o.rename_headers.get(h, h) for h in names]
        self.header = tuple(names)
        self._plans = [plan_field(name, o) for name in names]
        return self.header

    def _positional_plan(self, index: int) -> FieldSpec:
        spec = self._positional.get(index)
        if spec is None:
            spec = self._positional[index] = plan_field(index, self.options)
        return spec

    def materialize(self, line: str) -> Record:
        """Tokenize and convert one (already trimmed) line into a record."""
        raw_row = self.tokenizer.tokenize(line)

        if self.header is None:
            return [self._positional_plan(i).convert(raw) for i, raw in enumerate(raw_row)]

        if len(raw_row) > len(self.header):
            raise RowShapeError(len(self.header), len(raw_row))
        # a short row keeps only the fields it has.
        return {spec.key: spec.convert(raw) for spec, raw in zip(self._plans, raw_row)}

    def _is_skippable(self, line: str) -> bool:
        o = self.options
        if o.skip_empty_lines and not line:
            return True
        marker = o.comment_marker
        if marker is not None and line.startswith(marker):
            return True
        if o.skip_empty_lines == "greedy":
            return all(not f.strip() for f in self.tokenizer.tokenize(line))
        return False

    def run(self, lines: Sequence[str], *, linebreak: str) -> ParseResult:
        o = self.options
        data: list[Record] = []
        errors: list[ParseError] = []
        truncated = False

        if o.header:
            if not lines:
                errors.append(ParseError(
                    type=ErrorType.no_data,
                    code=ErrorCode.empty_file,
                    message="No data found in CSV",
                ))
                logger.debug("empty input, headers expected")
                return ParseResult((), tuple(errors), ParseMeta(o.delimiter, linebreak))
            self.read_header(lines[0])
            logger.debug("header fields: %s", self.header)
            lines = lines[1:]

        for i, raw_line in enumerate(lines):
            if o.preview and len(data) >= o.preview:
                truncated = True
                logger.debug("preview cap %d reached at data line %d", o.preview, i + 1)
                break

            line = raw_line.strip()
            if self._is_skippable(line):
                continue

            try:
                record = self.materialize(line)
            except Exception as e:
                if not o.skip_invalid_lines:
                    raise
                logger.warning("skipping invalid row %d: %s", i + 1, e)
                errors.append(ParseError(
                    type=ErrorType.invalid_row,
                    code=ErrorCode.row_parse_failed,
                    message=str(e) or "Failed to parse row",
                    row=i + 1,
                ))
                continue

            data.append(record)

        meta = ParseMeta(
            delimiter=o.delimiter,
            linebreak=linebreak,
            truncated=truncated,
            fields=self.header,
            rows=len(data),
        )
        return ParseResult(tuple(data), tuple(errors), meta)


def parse(text: str, options: ParseOptions | None = None) -> ParseResult:
    """
    Parse delimited `text` into records. The single core entry point:
    text + resolved options in, fully materialized result out.
    """
    o = options if options is not None else ParseOptions()
    linebreak = resolve_linebreak(text, o.newline)
    logger.debug("linebreak resolved to %r", linebreak)
    lines = split_lines(text, linebreak)
    return RecordMaterializer(o).run(lines, linebreak=linebreak)


def parse_text(text: str, options: ParseOptions | None = None, **overrides: Any) -> ParseResult:
    """`parse` with keyword overrides, e.g. `parse_text(s, delimiter=";", dynamic_typing=True)`."""
    return parse(text, resolve_options(options, **overrides))
