"""JSON well-formedness check and parsing of stored JSON files."""

from __future__ import annotations

import json
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_json_content(data: str | bytes) -> Any:
    """Parse *data* into plain dicts/lists/scalars.

    Raises ValueError (``json.JSONDecodeError`` or ``UnicodeDecodeError``
    included) when *data* is not standard JSON. ``NaN`` and ``Infinity``
    are refused. Nesting deeper than the decoder can follow also raises
    ValueError.
    """
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError:
        raise ValueError("JSON nesting too deep") from None


def is_valid_json(data: str | bytes) -> bool:
    """True when *data* is well-formed JSON of any top-level type."""
    try:
        parse_json_content(data)
    except ValueError:
        return False
    return True
