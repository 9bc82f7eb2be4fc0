from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from csvrecords.cli.loader import load_file, options_from_args
from csvrecords.parsing.registry import field_parser_names, header_transform_names
from csvrecords.parsing.types import CsvRecordsError

logger = logging.getLogger(__name__)


def _positive_or_zero(v: str) -> int:
    n = int(v)
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative int, got {v}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="csvrecords")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    # parse cmd
    parse = sub.add_parser("parse", help="Parse a delimited text file into records.")
    parse.add_argument("--input", required=True, help="Path to the input file.")
    parse.add_argument("--delimiter", default=",", help="Field delimiter (one character).")
    parse.add_argument("--quote-char", default='"')
    parse.add_argument("--escape-char", default='"')
    parse.add_argument("--newline", default="auto", help="Line break sequence, or 'auto' to detect.")
    parse.add_argument("--no-header", action="store_true", help="Treat the first line as data.")
    parse.add_argument("--dynamic-typing", action="store_true", help="Infer bool/number/date/null values.")
    parse.add_argument("--skip-empty-lines", default="true", choices=["true", "false", "greedy"])
    parse.add_argument("--comments", nargs="?", const="#", default=None, metavar="MARKER",
                       help="Skip lines starting with MARKER (default '#').")
    parse.add_argument("--skip-invalid-lines", action="store_true",
                       help="Record bad rows as errors instead of aborting.")
    parse.add_argument("--preview", type=_positive_or_zero, default=0, help="Stop after N records (0 = all).")
    parse.add_argument("--rename", action="append", metavar="OLD=NEW", help="Rename a header (repeatable).")
    parse.add_argument("--parser", action="append", metavar="FIELD=NAME",
                       help=f"Per-field parser, NAME one of {field_parser_names()} (repeatable).")
    parse.add_argument("--header-transform", choices=header_transform_names(), default=None)
    parse.add_argument("--encoding", default=None, help="File encoding (default: $CSVRECORDS_ENCODING or utf-8).")
    parse.add_argument("--json", action="store_true", help="Print data/errors/meta as JSON instead of a summary.")
    return p


def main(argv: list[str] | None = None) -> int:
    """
    A CLI for parsing delimited text files.

    ## parse:
    - `--input` as the path to the data,
    - tokenizer flags: `--delimiter`, `--quote-char`, `--escape-char`, `--newline`,
    - record flags: `--no-header`, `--dynamic-typing`, `--parser`, `--rename`, `--header-transform`,
    - filtering: `--skip-empty-lines`, `--comments`, `--preview`,
    - `--skip-invalid-lines` to collect bad rows as errors.

    A results summary prints upon completion, or the full result with `--json`.

    ### Example usage:
    - `csvrecords parse --input data/people.csv --dynamic-typing --header-transform snake`
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.cmd == "parse":
        input_path = Path(args.input)
        try:
            options = options_from_args(args)
            result, summary = load_file(input_path, options)
        except (OSError, UnicodeDecodeError, LookupError, CsvRecordsError, ValueError) as e:
            # bad flags, unknown encoding, unreadable file, or the first bad row without --skip-invalid-lines
            logger.error("parse failed for %s: %s", input_path, e)
            print(f"error: {e}", file=sys.stderr)
            return 1

        if args.json:
            print(json.dumps(result.to_mapping(), default=str, indent=2))
        else:
            print(summary.render_one_line())
        return 0

    return 2
