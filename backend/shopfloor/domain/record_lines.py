"""Newline-delimited JSON format shared by live collection files and snapshots.

One record per line. Older exports may hold a single JSON array instead;
both shapes are accepted when reading for inspection.
"""

import json
from typing import Any

PARSE_ERROR_FIELD = "_parseError"
DELETED_FIELD = "$$deleted"


def encode_record(record: dict[str, Any]) -> str:
    """Serialise one record as a single line (no trailing newline)."""
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str)


def parse_line(line: str) -> dict[str, Any]:
    """Parse one line, returning a parse-error marker instead of raising."""
    try:
        value = json.loads(line)
    except ValueError:
        return {PARSE_ERROR_FIELD: True, "raw": line}
    if not isinstance(value, dict):
        return {PARSE_ERROR_FIELD: True, "raw": line}
    return value


def split_lines(text: str) -> list[str]:
    """Non-blank lines of a collection file."""
    return [line for line in text.splitlines() if line.strip()]


def parse_collection_text(text: str) -> list[dict[str, Any]]:
    """Parse a whole collection file for display.

    Malformed lines are surfaced in place as ``{"_parseError": true, "raw": ...}``
    so one bad line never hides the rest of the file.
    """
    stripped = text.lstrip()
    if stripped.startswith("["):
        try:
            value = json.loads(stripped)
        except ValueError:
            value = None
        if isinstance(value, list):
            return [
                item if isinstance(item, dict) else {PARSE_ERROR_FIELD: True, "raw": json.dumps(item)}
                for item in value
            ]
    return [parse_line(line) for line in split_lines(text)]
