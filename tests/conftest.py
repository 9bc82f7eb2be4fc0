from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture()
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write text to a file under `tmp_path` and return its path."""
    def _write(text: str, *, name: str = "input.csv", encoding: str = "utf-8") -> Path:
        p = tmp_path / name
        # bytes, so the line breaks in `text` reach the file untouched
        p.write_bytes(text.encode(encoding))
        return p
    return _write


@pytest.fixture(autouse=True)       # autoused in every test!
def _clear_encoding_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests never inherit a default encoding from the caller's shell."""
    monkeypatch.delenv("CSVRECORDS_ENCODING", raising=False)
