from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from csvrecords.ingest.readers import parse_file
from csvrecords.ingest.summary import ParseSummary
from csvrecords.parsing.options import ParseOptions
from csvrecords.parsing.registry import get_field_parser, get_header_transform
from csvrecords.parsing.types import ParseResult


def _split_pairs(pairs: Sequence[str] | None, *, flag: str) -> dict[str, str]:
    """`["a=b", "c=d"]` -> `{"a": "b", "c": "d"}`. Raise on a pair without `=`."""
    out: dict[str, str] = {}
    for p in pairs or ():
        key, sep, value = p.partition("=")
        if not sep or not key:
            raise ValueError(f"{flag} expects KEY=VALUE, got {p!r}")
        out[key] = value
    return out


def _skip_empty_lines(v: str) -> bool | str:
    if v == "greedy":
        return "greedy"
    return v == "true"


def options_from_args(args: argparse.Namespace) -> ParseOptions:
    """
    Translate CLI flags into one resolved `ParseOptions`.
    `--parser FIELD=NAME` binds a named registry parser to FIELD.
    """
    parsers = {
        field: get_field_parser(name, field=field)
        for field, name in _split_pairs(args.parser, flag="--parser").items()
    }
    kwargs = {}
    if args.header_transform:
        kwargs["transform_header"] = get_header_transform(args.header_transform)

    return ParseOptions(
        delimiter=args.delimiter,
        quote_char=args.quote_char,
        escape_char=args.escape_char,
        newline=args.newline,
        header=not args.no_header,
        skip_empty_lines=_skip_empty_lines(args.skip_empty_lines),
        dynamic_typing=args.dynamic_typing,
        comments=args.comments if args.comments is not None else False,
        skip_invalid_lines=args.skip_invalid_lines,
        preview=args.preview,
        parsers=parsers,
        rename_headers=_split_pairs(args.rename, flag="--rename"),
        encoding=args.encoding,
        **kwargs,
    )


def load_file(input_path: Path, options: ParseOptions) -> tuple[ParseResult, ParseSummary]:
    """
    End-to-end file parsing for the CLI:
      - read `input_path` with the configured encoding,
      - parse into records/errors/meta,
      - summarize counts for the terminal.

    Raises on unreadable files, and on the first bad row unless `skip_invalid_lines` is set.
    """
    result = parse_file(input_path, options)
    return result, ParseSummary.from_result(result, input_path=str(input_path))
