"""
searchquery: a small boolean search query language.

Parse human-typed queries like `hello (world~user) -draft name="bob"` and
match them against key/value records.
"""

from __future__ import annotations

from .filters import Filter, FilterGroup, FilterItem, Mode, Operator
from .parser import parse_filter, parse_query, parse_tokens, tokenize
from .query import SearchQuery, parse

__version__ = "1.2.0"

__all__ = [
    "Filter",
    "FilterGroup",
    "FilterItem",
    "Mode",
    "Operator",
    "SearchQuery",
    "__version__",
    "parse",
    "parse_filter",
    "parse_query",
    "parse_tokens",
    "tokenize",
]
