from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    normalized = (error_type or "").strip()
    mapping = {
        "usage_error": "Usage error",
        "validation_error": "Validation error",
        "io_error": "I/O error",
        "config_error": "Configuration error",
        "internal_error": "Internal error",
    }
    return mapping.get(normalized, "Error")


def _render_error(result: CommandResult, *, settings: RenderSettings) -> None:
    stderr = Console(file=sys.stderr, force_terminal=False)
    error = result.error
    if error is None:
        stderr.print("Error: command failed")
        return
    stderr.print(f"{_error_title(error.type)}: {error.message}", markup=False)
    if settings.quiet:
        return
    if error.hint:
        stderr.print(f"Hint: {error.hint}", markup=False)
    elif error.type == "usage_error":
        stderr.print(f"Hint: run `searchquery {result.command} --help`")
    if error.details and settings.verbosity >= 1:
        stderr.print(Panel.fit(Text(json.dumps(error.details, ensure_ascii=False, indent=2))))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return ", ".join(value)
    return json.dumps(value, ensure_ascii=False)


def _records_table(records: list[dict[str, Any]]) -> Table:
    columns: list[str] = []
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)

    table = Table(show_header=True, header_style="bold")
    for col in columns:
        table.add_column(Text(col), overflow="fold")
    for record in records:
        table.add_row(*[Text(_cell(record.get(col))) for col in columns])
    return table


def _node_label(node: dict[str, Any], *, excluded: bool) -> Text:
    prefix = "NOT " if excluded else ""
    if node.get("type") == "group":
        return Text(f"{prefix}{node.get('mode', 'AND')}", style="bold")
    field = node.get("field")
    where = f"{field}" if field else "any field"
    verb = "equals" if node.get("operator") == "EXACT" else "contains"
    return Text(f"{prefix}{where} {verb} {node.get('term', '')!r}")


def _add_children(tree: Tree, node: dict[str, Any]) -> None:
    for child in node.get("include", []):
        branch = tree.add(_node_label(child, excluded=False))
        _add_children(branch, child)
    for child in node.get("exclude", []):
        branch = tree.add(_node_label(child, excluded=True))
        _add_children(branch, child)


def _query_tree(data: dict[str, Any]) -> Tree:
    root = data["tree"]
    tree = Tree(_node_label(root, excluded=False))
    _add_children(tree, root)
    return tree


def _key_value_table(data: dict[str, Any]) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("key", style="bold")
    table.add_column("value")
    for key, value in data.items():
        table.add_row(Text(str(key)), Text(_cell(value)))
    return table


def render_result(result: CommandResult, *, settings: RenderSettings) -> None:
    if not result.ok:
        _render_error(result, settings=settings)
        return

    console = Console(file=sys.stdout)
    data = result.data
    if not isinstance(data, dict):
        if data is not None:
            console.print(_cell(data), markup=False)
        return

    if "tree" in data:
        console.print(f"Query: {data.get('normalized', '')}", markup=False, highlight=False)
        if data.get("isEmpty"):
            console.print("(empty query, matches everything)")
        else:
            console.print(_query_tree(data))
        return

    if isinstance(data.get("records"), list):
        records = data["records"]
        if records:
            console.print(_records_table(records))
        if not settings.quiet:
            matched = data.get("matched", len(records))
            console.print(f"{matched} of {data.get('total', '?')} records matched")
        return

    console.print(_key_value_table(data))
