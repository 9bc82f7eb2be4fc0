from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class _State(Enum):
    FIELD_START = "field_start"             # unquoted, buffer empty
    UNQUOTED = "unquoted"                   # unquoted, buffer filling
    QUOTED = "quoted"                       # inside a quoted region
    QUOTE_IN_QUOTED = "quote_in_quoted"     # quote seen in a quoted region (quote == escape)
    ESCAPED = "escaped"                     # escape seen (escape != quote)


@dataclass(frozen=True, slots=True)
class RowTokenizer:
    """
    Split one physical line into raw string fields.

    Single forward scan over the line. Rules:
    - a quote at field start opens a quoted region (the quote is not data),
    - the delimiter ends a field unless inside a quoted region,
    - escape followed by quote is a literal quote. With `quote == escape`
      (the default) this is the doubled `""` convention,
    - a quote inside a quoted region that is not an escape closes the region,
      and a delimiter right after that closing quote ends the field as usual
      (`"a",b` gives `["a", "b"]`; the delimiter is not skipped and the next
      field is not merged into the quoted one),
    - any other bare quote toggles quoting and is dropped.

    An unterminated quoted region at end of line is not an error: the buffer is
    pushed as-is. Lines never span a newline.
    """
    delimiter: str = ","
    quote_char: str = '"'
    escape_char: str = '"'

    def tokenize(self, line: str) -> list[str]:
        """Return the ordered raw fields of `line`. An empty line gives `[""]`."""
        delim, quote, escape = self.delimiter, self.quote_char, self.escape_char
        doubled = quote == escape

        fields: list[str] = []
        buf: list[str] = []
        state = _State.FIELD_START
        resume = _State.UNQUOTED     # state to go back to after an escape

        for ch in line:
            if state is _State.ESCAPED:
                if ch == quote:
                    buf.append(ch)
                    state = resume
                    continue
                # not an escape sequence: keep the escape char, reprocess `ch`
                buf.append(escape)
                state = resume

            if state is _State.QUOTE_IN_QUOTED:
                if ch == quote:
                    # `""` inside quotes
                    buf.append(ch)
                    state = _State.QUOTED
                    continue
                # the previous quote closed the region
                state = _State.UNQUOTED

            if state is _State.QUOTED:
                if ch == quote:
                    state = _State.QUOTE_IN_QUOTED if doubled else _State.UNQUOTED
                elif ch == escape:
                    resume = _State.QUOTED
                    state = _State.ESCAPED
                else:
                    buf.append(ch)
                continue

            # unquoted: FIELD_START or UNQUOTED
            if ch == delim:
                fields.append("".join(buf))
                buf = []
                state = _State.FIELD_START
            elif ch == quote:
                # opens at field start, otherwise a stray quote toggles quoting
                state = _State.QUOTED
            elif ch == escape:
                resume = _State.UNQUOTED
                state = _State.ESCAPED
            else:
                buf.append(ch)
                state = _State.UNQUOTED

        if state is _State.ESCAPED:
            buf.append(escape)

        fields.append("".join(buf))
        return fields


def tokenize_row(line: str, *, delimiter: str = ",", quote_char: str = '"', escape_char: str = '"') -> list[str]:
    """Functional shortcut around `RowTokenizer`."""
    return RowTokenizer(delimiter, quote_char, escape_char).tokenize(line)
