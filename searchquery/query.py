"""Search query root object.

Example:
    from searchquery import Filter, Mode, SearchQuery, parse

    query = parse('hello (world~user) -"goodbye"')
    query.matches({"text": "Hello World"})  # True

    # Programmatic construction
    query = SearchQuery()
    query.add(Filter("name", "bob", "="))
    query.add_with_mode(Filter(None, "admin"), Mode.OR)
    str(query)  # 'name=bob~admin'
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from .filters import Filter, FilterGroup, FilterItem, Mode
from .parser import parse_query

R = TypeVar("R", bound=Mapping[str, Any])


class SearchQuery:
    """A parsed (or programmatically built) search query.

    The query owns its root group; all mutation goes through it.
    """

    def __init__(self, query: str | None = None) -> None:
        self.root_group = FilterGroup() if query is None else parse_query(query)

    def is_empty(self) -> bool:
        """True if the root group has neither include nor exclude items."""
        return self.root_group.is_empty()

    def has_query(self) -> bool:
        """True if there is at least one filter."""
        return not self.is_empty()

    def matches(self, record: Mapping[str, Any]) -> bool:
        """Check whether the query matches the given record."""
        return self.root_group.matches(record)

    def filter_records(self, records: Iterable[R]) -> list[R]:
        """Return the matching records, in order."""
        return [record for record in records if self.matches(record)]

    def add(self, item: FilterItem, exclude: bool = False) -> None:
        self.root_group.add(item, exclude)

    def add_with_mode(self, item: FilterItem, mode: Mode | str, exclude: bool = False) -> None:
        self.root_group.add_with_mode(item, mode, exclude)

    def remove(self, filter: Filter, exclude: bool = False) -> None:
        self.root_group.remove(filter, exclude)

    def has_filter(self, filter: Filter, exclude: bool = False, nested: bool = False) -> bool:
        return self.root_group.has_filter(filter, exclude, nested)

    def to_string(self) -> str:
        """Turn the query back into a string which can be parsed again."""
        return self.root_group.to_string()

    def to_dict(self) -> dict[str, Any]:
        return self.root_group.to_dict()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"SearchQuery({self.to_string()!r})"


def parse(query: str) -> SearchQuery:
    """
    Parse a query string into a SearchQuery.

    Never raises on malformed brackets or quotes; the query degrades to a
    best-effort tree instead.

    Examples:
        >>> parse("a b").matches({"text": "a b"})
        True

        >>> parse("a~b").matches({"text": "c"})
        False

        >>> parse('name="bob"').matches({"name": "Bob Jones"})
        False
    """
    return SearchQuery(query)


__all__ = ["SearchQuery", "parse"]
