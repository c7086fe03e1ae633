"""Reading records for `searchquery match`.

Accepted input: a JSON array of objects, a single JSON object, or JSON Lines
(one object per line).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .click_compat import click
from .errors import CLIError

logger = logging.getLogger(__name__)


def read_source(source: str) -> str:
    """Read text from a file path, or from stdin when source is '-'."""
    if source == "-":
        return click.get_text_stream("stdin").read()
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CLIError(f"Records file not found: {path}", exit_code=2, error_type="io_error") from exc
    except OSError as exc:
        raise CLIError(
            f"Cannot read records file {path}: {exc.strerror or exc}",
            exit_code=2,
            error_type="io_error",
        ) from exc


def _parse_json_lines(text: str) -> list[Any]:
    items: list[Any] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            items.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise CLIError(
                f"Invalid JSON on line {lineno}: {exc.msg}",
                exit_code=2,
                error_type="validation_error",
                hint="Provide a JSON array, a JSON object, or one JSON object per line.",
                details={"line": lineno, "column": exc.colno},
            ) from exc
    return items


def parse_records(text: str) -> list[dict[str, Any]]:
    """Parse record text into a list of mappings."""
    if not text.strip():
        return []

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Input is not a single JSON document, trying JSON Lines")
        items = _parse_json_lines(text)
    else:
        items = payload if isinstance(payload, list) else [payload]

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise CLIError(
                f"Record {index} is a {type(item).__name__}, expected a JSON object.",
                exit_code=2,
                error_type="validation_error",
                details={"index": index},
            )
    logger.info(f"Loaded {len(items)} record(s)")
    return items


def load_records(source: str) -> list[dict[str, Any]]:
    return parse_records(read_source(source))
