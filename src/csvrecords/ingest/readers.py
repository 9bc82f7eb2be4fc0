from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from csvrecords.parsing.options import ParseOptions, resolve_options
from csvrecords.parsing.schema import parse
from csvrecords.parsing.types import ParseResult

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


def get_default_encoding() -> str:
    """Encoding for file reads when the caller passes none."""
    # CLI/runtime reads CSVRECORDS_ENCODING first.
    return os.getenv("CSVRECORDS_ENCODING", DEFAULT_ENCODING)


def read_text(path: Path, *, encoding: str | None = None) -> str:
    """
    Read the whole file as decoded text.

    `newline=""` keeps CR/CRLF as written, line breaks are resolved by the parser.
    Raises `OSError` (incl. `FileNotFoundError`) and `UnicodeDecodeError` as-is.
    """
    enc = encoding or get_default_encoding()
    with path.open("r", encoding=enc, newline="") as f:
        text = f.read()
    logger.debug("read %d chars from %s (%s)", len(text), path, enc)
    return text


def parse_file(path: Path | str, options: ParseOptions | None = None, **overrides: Any) -> ParseResult:
    """
    Thin adapter: read `path`, then hand the text to the same `parse` call.
    `options.encoding` picks the file encoding, `None` falls back to the env default.
    """
    o = resolve_options(options, **overrides)
    text = read_text(Path(path), encoding=o.encoding)
    return parse(text, o)
