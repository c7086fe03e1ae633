"""Tests for query parsing and matching."""

from __future__ import annotations

from typing import Any

import pytest

from searchquery import Filter, FilterGroup, Mode, Operator, parse, parse_query, parse_tokens
from searchquery.parser import MAX_DEPTH

# =============================================================================
# Tree structure
# =============================================================================


def test_parse_tokens_returns_end_index() -> None:
    """The end index is len(tokens) when no ')' closes the level."""
    group, end = parse_tokens(["a", "b"])
    assert end == 2
    assert group.include == [Filter(None, "a"), Filter(None, "b")]


def test_parse_tokens_stops_at_closing_bracket() -> None:
    """A nested call returns the index of its closing ')'."""
    group, end = parse_tokens(["(", "a", "~", "b", ")", "c"], 1)
    assert end == 4
    assert group.mode is Mode.OR
    assert group.include == [Filter(None, "a"), Filter(None, "b")]


def test_parse_implicit_and() -> None:
    """Space-separated terms form an AND group."""
    group = parse_query("a b")
    assert group.mode is Mode.AND
    assert group.include == [Filter(None, "a"), Filter(None, "b")]
    assert group.exclude == []


def test_parse_or_applies_to_whole_group() -> None:
    """One `~` anywhere switches every include item of the group to OR."""
    group = parse_query("a b~c")
    assert group.mode is Mode.OR
    assert group.include == [Filter(None, "a"), Filter(None, "b"), Filter(None, "c")]


def test_parse_nested_group() -> None:
    """Brackets build a nested group with its own mode."""
    group = parse_query("a (b~c)")
    assert group.mode is Mode.AND
    assert group.include[0] == Filter(None, "a")
    inner = group.include[1]
    assert isinstance(inner, FilterGroup)
    assert inner.mode is Mode.OR
    assert inner.include == [Filter(None, "b"), Filter(None, "c")]


def test_parse_deeply_nested() -> None:
    """Groups nest to any depth."""
    group = parse_query("say (hello (world~user))")
    level1 = group.include[1]
    assert isinstance(level1, FilterGroup)
    level2 = level1.include[1]
    assert isinstance(level2, FilterGroup)
    assert level2.mode is Mode.OR


def test_parse_exclusions() -> None:
    """A leading `-` puts the filter on the exclude list."""
    group = parse_query('a -b -"c d" -name=x')
    assert group.include == [Filter(None, "a")]
    assert group.exclude == [
        Filter(None, "b"),
        Filter(None, "c d"),
        Filter("name", "x", Operator.EXACT),
    ]


def test_parse_excluded_group() -> None:
    """`-(...)` excludes a whole subgroup."""
    group = parse_query("a -(b c)")
    assert group.include == [Filter(None, "a")]
    assert len(group.exclude) == 1
    excluded = group.exclude[0]
    assert isinstance(excluded, FilterGroup)
    assert excluded.include == [Filter(None, "b"), Filter(None, "c")]


def test_parse_field_filters() -> None:
    """Field filters keep their field and operator."""
    group = parse_query('name="Bob Jones" title:eng')
    assert group.include == [
        Filter("name", "Bob Jones", Operator.EXACT),
        Filter("title", "eng", Operator.CONTAINS),
    ]


def test_parse_empty_query() -> None:
    """An empty query is an empty root group."""
    query = parse("")
    assert query.is_empty()
    assert not query.has_query()
    assert query.matches({"anything": "at all"})


# =============================================================================
# Malformed input (lenient, never raises)
# =============================================================================


def test_unmatched_closing_bracket_ends_root_group() -> None:
    """A stray ')' at the top level terminates parsing; later tokens are dropped."""
    group = parse_query("a ) b")
    assert group.include == [Filter(None, "a")]


def test_unclosed_bracket_closes_at_end() -> None:
    """A missing ')' closes the group at the end of input."""
    group = parse_query("a (b~c")
    assert len(group.include) == 2
    inner = group.include[1]
    assert isinstance(inner, FilterGroup)
    assert inner.mode is Mode.OR
    assert inner.include == [Filter(None, "b"), Filter(None, "c")]


def test_trailing_or_separator_only_sets_mode() -> None:
    """A trailing `~` switches the mode but adds nothing."""
    group = parse_query("a~")
    assert group.mode is Mode.OR
    assert group.include == [Filter(None, "a")]
    assert parse("a~").matches({"text": "a"})


def test_unbalanced_quote_reads_rest_literally() -> None:
    """An unterminated quote swallows the rest of the query into one term."""
    group = parse_query('a "b (c')
    assert group.include == [Filter(None, "a"), Filter(None, '"b (c')]


def test_empty_brackets() -> None:
    """`()` is an empty group, which matches everything."""
    group = parse_query("a ()")
    assert group.include[1] == FilterGroup()
    assert parse("a ()").matches({"text": "a"})


@pytest.mark.parametrize(
    "query",
    [
        ")",
        "((",
        "~",
        '"',
        "-",
        "a)))(",
        '"(" ) ~ -',
        pytest.param("(" * 2000 + "a", id="deep-unclosed"),
        pytest.param("(" * 400 + "a" + ")" * 400, id="deep-balanced"),
        pytest.param("-(" * 1000 + "a", id="deep-excluded"),
    ],
)
def test_malformed_queries_never_raise(query: str) -> None:
    """Every input string parses to some tree."""
    result = parse(query)
    result.matches({"text": "a"})
    result.to_string()
    result.to_dict()


def test_brackets_past_max_depth_are_literal_terms() -> None:
    """Groups nest up to MAX_DEPTH; a deeper `(` becomes a plain term."""
    group = parse_query("(" * (MAX_DEPTH + 1) + "a")
    for _ in range(MAX_DEPTH):
        assert len(group.include) == 1
        inner = group.include[0]
        assert isinstance(inner, FilterGroup)
        group = inner
    assert group.include == [Filter(None, "("), Filter(None, "a")]


def test_nesting_within_max_depth_is_kept() -> None:
    query = parse("(" * MAX_DEPTH + "a" + ")" * MAX_DEPTH)
    assert query.matches({"text": "a"})
    assert not query.matches({"text": "b"})
    # single-item groups serialize without their brackets
    assert query.to_string() == "a"


# =============================================================================
# Matching behavior
# =============================================================================


@pytest.mark.parametrize(
    ("query", "record", "expected"),
    [
        # AND
        ("a b", {"text": "a b"}, True),
        ("a b", {"text": "a"}, False),
        ("is string", {"text": "This is a string"}, True),
        ("is string", {"text": "This is something differently"}, False),
        # OR
        ("a~b", {"text": "a"}, True),
        ("a~b", {"text": "c"}, False),
        # Quoting
        ('"a b"', {"text": "a b"}, True),
        ('"a b"', {"text": "a x b"}, False),
        ('say "hello world"', {"text": "I would say Hello World"}, True),
        ('say "hello world"', {"text": "I would say Hello from World"}, False),
        # Exclusion
        ("a -b", {"text": "a"}, True),
        ("a -b", {"text": "a b"}, False),
        # Nesting
        ("a (b~c)", {"text": "a c"}, True),
        ("a (b~c)", {"text": "a"}, False),
        # Field scoping and exact match
        ('name="bob"', {"name": "Bob"}, True),
        ('name="bob"', {"name": "Bob Jones"}, False),
        ("name:bob", {"name": "Bob Jones"}, True),
        ("name:bob", {"title": "bob"}, False),
        # Fieldless scans strings and lists of strings
        ("x", {"a": "has x", "b": ["y", "z"]}, True),
        ("x", {"a": "nothing", "b": ["y", "z"]}, False),
    ],
)
def test_matches(query: str, record: dict[str, Any], expected: bool) -> None:
    assert parse(query).matches(record) is expected


class TestCombinedQueries:
    """Longer queries mixing AND, OR, nesting and exclusion."""

    def test_and_combined_with_or(self) -> None:
        query = parse("hello world (i~you)")
        assert query.matches({"text": "I would say Hello World"})
        assert query.matches({"text": "You might say hello world"})
        assert not query.matches({"text": "We don't say hello world"})
        assert not query.matches({"text": "You said hello"})

    def test_nested_brackets(self) -> None:
        query = parse("say (hello (world~user))")
        assert query.matches({"text": "I can say hello world"})
        assert query.matches({"text": "You could also say hello to any user"})
        assert not query.matches({"text": "But you can't say hello to anyone"})

    def test_multiple_exclusions(self) -> None:
        query = parse("say -hello -world")
        assert not query.matches({"text": "I can't say hello to any world"})
        assert not query.matches({"text": "I also can't say hi to any world"})
        assert query.matches({"text": "But I can say hi to you"})

    def test_excluded_phrase(self) -> None:
        query = parse('say -"hello world"')
        assert query.matches({"text": "I can also say hello to some world"})
        assert not query.matches({"text": "But I can't say hello world"})

    def test_exclusions_inside_or_group(self) -> None:
        """Exclusions in an OR group still all have to miss."""
        query = parse("say hello (-world~-user)")
        assert not query.matches({"text": "I can't say hello to the world"})
        assert not query.matches({"text": "I can't say hello to a user"})
        assert query.matches({"text": "I can say hello to you"})

    def test_excluded_group(self) -> None:
        query = parse("report -(draft internal)")
        assert query.matches({"title": "report", "tags": ["draft"]})
        assert not query.matches({"title": "report", "tags": ["draft", "internal"]})

    def test_fields_and_free_text(self) -> None:
        query = parse("status=open (label:bug~label:crash) -assignee:bot")
        assert query.matches({"status": "Open", "label": ["ui", "Bug"], "assignee": "alice"})
        assert not query.matches({"status": "opened", "label": ["bug"], "assignee": "alice"})
        assert not query.matches({"status": "open", "label": ["bug"], "assignee": "dependabot"})


def test_parsing_is_idempotent() -> None:
    """Parsing the same string twice gives equal trees."""
    text = 'a (b~"c d") -e name=f'
    assert parse_query(text) == parse_query(text)


def test_filter_records_keeps_order() -> None:
    records = [{"t": "a1"}, {"t": "b"}, {"t": "a2"}]
    assert parse("a").filter_records(records) == [{"t": "a1"}, {"t": "a2"}]
