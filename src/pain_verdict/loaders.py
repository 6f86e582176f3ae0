"""Load records and themes from JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .errors import RecordLoadError
from .models import RawRecord, Theme

_records_adapter = TypeAdapter(list[RawRecord])
_themes_adapter = TypeAdapter(list[Theme])


def _read_json(path: str | Path):
    p = Path(path)
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise RecordLoadError(str(p), "file not found") from e
    except json.JSONDecodeError as e:
        raise RecordLoadError(str(p), f"invalid JSON at line {e.lineno}") from e


def load_records(path: str | Path) -> list[RawRecord]:
    """Load a JSON list of records (or ``{"records": [...]}``)."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("records", [])
    try:
        return _records_adapter.validate_python(data)
    except ValidationError as e:
        raise RecordLoadError(str(path), f"{e.error_count()} invalid record field(s)") from e


def load_themes(path: str | Path) -> list[Theme]:
    """Load a JSON list of themes (or ``{"themes": [...]}``)."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("themes", [])
    try:
        return _themes_adapter.validate_python(data)
    except ValidationError as e:
        raise RecordLoadError(str(path), f"{e.error_count()} invalid theme field(s)") from e
