from __future__ import annotations

AUTO = "auto"

# detection order matters: "\r\n" must win over its own "\n".
_LINEBREAK_PRIORITY = ("\r\n", "\n", "\r")
DEFAULT_LINEBREAK = "\n"


def detect_linebreak(text: str) -> str:
    """First of CRLF, LF, CR found in `text`. LF when none is present."""
    for sep in _LINEBREAK_PRIORITY:
        if sep in text:
            return sep
    return DEFAULT_LINEBREAK


def resolve_linebreak(text: str, newline: str = AUTO) -> str:
    """Explicit `newline` is used verbatim, `"auto"` is detected from `text`."""
    if newline == AUTO:
        return detect_linebreak(text)
    return newline


def split_lines(text: str, linebreak: str) -> list[str]:
    """
    Physical lines of `text`, header line included.

    Empty text has no lines at all (rather than one empty line), so that the
    empty-input check can see it.
    """
    if text == "":
        return []
    return text.split(linebreak)
