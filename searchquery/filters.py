"""
Filter tree for search queries.

A query is a tree of two node kinds: leaf `Filter` conditions like `name:bob`
and `FilterGroup` combinations of other nodes. Groups combine their include
items with AND or OR and always reject records matching any exclude item.

Example:
    from searchquery.filters import Filter, FilterGroup, Mode

    group = FilterGroup()
    group.add(Filter(None, "hello"))
    group.add(Filter("name", "bob", "="))
    group.add(Filter(None, "draft"), exclude=True)

    group.matches({"name": "Bob", "text": "hello there"})  # True
    group.to_string()  # 'hello name=bob -draft'
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Operator(str, Enum):
    """Comparison used by a leaf filter."""

    CONTAINS = ":"
    EXACT = "="


class Mode(str, Enum):
    """How the include items of a group are combined."""

    AND = "AND"
    OR = "OR"


# Terms containing any of these would not survive tokenize() as one literal
_NEEDS_QUOTES = re.compile(r'[\s()~:="]')

# `field:term`, `field=term`, `field:"quoted term"`
_FIELD_FILTER = re.compile(r'(\w+)([:=])(?:"(.*)"|(.+))', re.DOTALL)


def fold(value: str) -> str:
    """Case-normalize a string for comparison."""
    return value.lower()


def _string_values(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


def _lookup(record: Mapping[str, Any], field_name: str) -> Any:
    """
    Get a property from a record, matching the key case-insensitively.

    The exact key wins when present.
    """
    if field_name in record:
        return record[field_name]
    wanted = fold(field_name)
    for key, value in record.items():
        if isinstance(key, str) and fold(key) == wanted:
            return value
    return None


class FilterItem(ABC):
    """Base class for nodes of a filter tree."""

    @abstractmethod
    def matches(self, record: Mapping[str, Any]) -> bool:
        """Evaluate this node against a record."""
        ...

    @abstractmethod
    def to_string(self) -> str:
        """Convert the node back to a query string."""
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Describe the node as JSON-ready data."""
        ...

    def __str__(self) -> str:
        return self.to_string()


@dataclass(eq=False)
class Filter(FilterItem):
    """A single condition like `fieldname:term`."""

    field: str | None
    term: str
    operator: Operator = Operator.CONTAINS

    def __post_init__(self) -> None:
        self.operator = Operator(self.operator)

    @staticmethod
    def parse(raw: str) -> Filter:
        """
        Parse a single filter token like `name:bob`, `name="Bob Jones"` or `"a b"`.

        Tokens that do not look like `field:term` become fieldless terms, so
        this never fails.
        """
        match = _FIELD_FILTER.fullmatch(raw)
        if match:
            name, symbol, quoted, bare = match.groups()
            return Filter(name, quoted if quoted is not None else bare, Operator(symbol))
        if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
            raw = raw[1:-1]
        return Filter(None, raw, Operator.CONTAINS)

    def equals(self, other: Filter) -> bool:
        """Check whether both filters have the same field, term and operator."""
        return (
            self.field == other.field
            and self.term == other.term
            and self.operator == other.operator
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.field, self.term, self.operator))

    def match_value(self, value: str) -> bool:
        """Compare one record value against the term (case-insensitive)."""
        value = fold(value)
        term = fold(self.term)
        if self.operator is Operator.EXACT:
            return value == term
        return term in value

    def candidate_values(self, record: Mapping[str, Any]) -> list[str]:
        """
        Collect the record values this filter is compared against.

        Without a field every string (or list of strings) property is a
        candidate; with a field only that property is.
        """
        if self.field is None:
            values: list[str] = []
            for value in record.values():
                values.extend(v for v in _string_values(value) if v)
            return values
        return _string_values(_lookup(record, self.field))

    def matches(self, record: Mapping[str, Any]) -> bool:
        return any(self.match_value(value) for value in self.candidate_values(record))

    def to_string(self) -> str:
        term = self.term
        if not term or term.startswith("-") or _NEEDS_QUOTES.search(term):
            term = f'"{term}"'
        if self.field is not None:
            return f"{self.field}{self.operator.value}{term}"
        return term

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "filter",
            "field": self.field,
            "term": self.term,
            "operator": self.operator.name,
        }

    def __repr__(self) -> str:
        return f"Filter({self.to_string()!r})"


@dataclass
class FilterGroup(FilterItem):
    """
    A group of filter items combined using AND or OR.

    Each item might be a `Filter` or another `FilterGroup`. Exclude items are
    always combined as "none of them matches", regardless of the mode.
    """

    mode: Mode = Mode.AND
    include: list[FilterItem] = field(default_factory=list)
    exclude: list[FilterItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.mode = Mode(self.mode)

    def add(self, item: FilterItem, exclude: bool = False) -> None:
        """Add a filter or filter group to the include (or exclude) list."""
        if not isinstance(item, FilterItem):
            raise TypeError(f"Expected Filter or FilterGroup, got {type(item).__name__}")
        (self.exclude if exclude else self.include).append(item)

    def add_with_mode(self, item: FilterItem, mode: Mode | str, exclude: bool = False) -> None:
        """
        Add an item and make sure this group uses the given mode.

        When the mode differs, the current include items are moved into a
        subgroup that keeps the old mode, so the existing logic is preserved.
        """
        mode = Mode(mode)
        if not exclude and self.mode is not mode:
            if len(self.include) > 1:
                logger.debug(
                    f"Promoting {len(self.include)} items into a {self.mode.value} subgroup"
                )
                self.include = [FilterGroup(mode=self.mode, include=self.include)]
            self.mode = mode
        self.add(item, exclude)

    def remove(self, filter: Filter, exclude: bool = False) -> None:
        """Remove all filters equal to `filter` from the include (or exclude) list."""
        items = self.exclude if exclude else self.include
        kept = [item for item in items if not (isinstance(item, Filter) and item.equals(filter))]
        if exclude:
            self.exclude = kept
        else:
            self.include = kept

    def has_filter(self, filter: Filter, exclude: bool = False, nested: bool = False) -> bool:
        """
        Check whether an equal filter is present.

        Args:
            filter: The filter to look for (comparing field, term and operator)
            exclude: Search the exclude list instead of the include list
            nested: Also search nested groups (their matching list)
        """
        for item in self.exclude if exclude else self.include:
            if isinstance(item, Filter):
                if item.equals(filter):
                    return True
            elif nested and isinstance(item, FilterGroup):
                if item.has_filter(filter, exclude, nested):
                    return True
        return False

    def is_empty(self) -> bool:
        return not self.include and not self.exclude

    def matches(self, record: Mapping[str, Any]) -> bool:
        if not self.include:
            include_match = True
        elif self.mode is Mode.AND:
            include_match = all(item.matches(record) for item in self.include)
        else:
            include_match = any(item.matches(record) for item in self.include)

        exclude_match = not any(item.matches(record) for item in self.exclude)
        return include_match and exclude_match

    def to_string(self) -> str:
        def _item(item: FilterItem, wrap: bool) -> str:
            if isinstance(item, FilterGroup) and wrap:
                return f"({item.to_string()})"
            return item.to_string()

        joiner = " " if self.mode is Mode.AND else "~"
        includes = joiner.join(_item(item, len(self.include) > 1) for item in self.include)
        excludes = " ".join(f"-{_item(item, True)}" for item in self.exclude)
        return " ".join(part for part in (includes, excludes) if part)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "group",
            "mode": self.mode.value,
            "include": [item.to_dict() for item in self.include],
            "exclude": [item.to_dict() for item in self.exclude],
        }

    def __repr__(self) -> str:
        return f"FilterGroup({self.to_string()!r}, mode={self.mode.value})"


__all__ = [
    "Filter",
    "FilterGroup",
    "FilterItem",
    "Mode",
    "Operator",
    "fold",
]
