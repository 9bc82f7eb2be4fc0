from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Callable, Literal, Mapping, Union

from .lines import AUTO
from .types import FieldKey, OptionsError

FieldParser = Callable[[str], Any]
HeaderTransform = Callable[[str], str]
ValueTransform = Callable[[Any, FieldKey], Any]

SkipEmptyLines = Union[bool, Literal["greedy"]]
DynamicTyping = Union[bool, Mapping[FieldKey, bool]]

DEFAULT_COMMENT = "#"


def _identity_header(h: str) -> str:
    return h


def _identity_value(v: Any, key: FieldKey) -> Any:
    return v


def _frozen(m: Mapping[Any, Any] | None) -> Mapping[Any, Any]:
    return MappingProxyType(dict(m or {}))


@dataclass(frozen=True)
class ParseOptions:
    """
    Per-parse configuration snapshot. Resolved once, read-only during a parse.

    Mapping-valued options are copied into read-only proxies on construction,
    so later edits to the caller's dicts do not leak into a running parse.
    """
    delimiter: str = ","
    quote_char: str = '"'
    escape_char: str = '"'
    newline: str = AUTO                                 # "auto" or an explicit separator
    header: bool = True
    skip_empty_lines: SkipEmptyLines = True             # True, False or "greedy"
    dynamic_typing: DynamicTyping = False               # bool, or per-field-key flags
    comments: Union[bool, str] = False                  # False, True ("#") or a marker
    skip_invalid_lines: bool = False                    # False aborts on the first bad row
    preview: int = 0                                    # 0 = no cap on records
    parsers: Mapping[str, FieldParser] = field(default_factory=dict)
    rename_headers: Mapping[str, str] = field(default_factory=dict)
    transform_header: HeaderTransform = _identity_header
    transform: ValueTransform = _identity_value
    encoding: str | None = None                         # file adapter only, None = env default

    def __post_init__(self) -> None:
        for name in ("delimiter", "quote_char", "escape_char"):
            v = getattr(self, name)
            if not isinstance(v, str) or len(v) != 1:
                raise OptionsError(f"{name} must be a single character, got {v!r}")
        if self.delimiter in (self.quote_char, self.escape_char):
            raise OptionsError(f"delimiter {self.delimiter!r} must differ from quote_char and escape_char")
        if not isinstance(self.newline, str) or self.newline == "":
            raise OptionsError(f"newline must be 'auto' or a non-empty string, got {self.newline!r}")
        if self.skip_empty_lines not in (True, False, "greedy"):
            raise OptionsError(f"skip_empty_lines must be a bool or 'greedy', got {self.skip_empty_lines!r}")
        if isinstance(self.comments, str) and self.comments == "":
            raise OptionsError("comments marker must be a non-empty string")
        if isinstance(self.preview, bool) or not isinstance(self.preview, int) or self.preview < 0:
            raise OptionsError(f"preview must be a non-negative int, got {self.preview!r}")

        # freeze mappings, frozen dataclass needs object.__setattr__
        object.__setattr__(self, "parsers", _frozen(self.parsers))
        object.__setattr__(self, "rename_headers", _frozen(self.rename_headers))
        if not isinstance(self.dynamic_typing, bool):
            object.__setattr__(self, "dynamic_typing", _frozen(self.dynamic_typing))

    @property
    def comment_marker(self) -> str | None:
        """The resolved comment prefix, or `None` when comments are off."""
        if self.comments is True:
            return DEFAULT_COMMENT
        if not self.comments:
            return None
        return str(self.comments)

    def typing_enabled_for(self, key: FieldKey) -> bool:
        """Whether generic type conversion runs for the field at `key`."""
        if isinstance(self.dynamic_typing, bool):
            return self.dynamic_typing
        return bool(self.dynamic_typing.get(key, False))


_OPTION_NAMES = frozenset(f.name for f in fields(ParseOptions))


def resolve_options(options: ParseOptions | None = None, **overrides: Any) -> ParseOptions:
    """
    Merge caller overrides into `options` (or the defaults).
    Unknown keys raise `OptionsError` rather than being silently ignored.
    """
    unknown = sorted(set(overrides) - _OPTION_NAMES)
    if unknown:
        raise OptionsError(f"unknown parse options: {unknown}")
    base = options if options is not None else ParseOptions()
    if not overrides:
        return base
    return replace(base, **overrides)
