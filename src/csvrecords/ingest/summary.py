from __future__ import annotations

from dataclasses import dataclass

from csvrecords.parsing.types import ParseResult


@dataclass(frozen=True)
class ParseSummary:
    """Counts recorded for one parsed input."""
    input_path: str
    rows: int
    errors: int
    truncated: bool
    fields: int | None          # header width, `None` without headers

    @classmethod
    def from_result(cls, result: ParseResult, *, input_path: str) -> "ParseSummary":
        fields = result.meta.fields
        return cls(
            input_path=input_path,
            rows=result.meta.rows,
            errors=len(result.errors),
            truncated=result.meta.truncated,
            fields=None if fields is None else len(fields),
        )

    def render_one_line(self) -> str:
        """How the summary is formatted for the terminal."""
        cols = "-" if self.fields is None else str(self.fields)
        return (
            f"{self.input_path}: rows={self.rows} errors={self.errors} "
            f"fields={cols} truncated={str(self.truncated).lower()}"
        )
