"""Tokenizer and recursive descent parser for search query strings.

Grammar (informal):

    query         := term_or_group (sep term_or_group)*
    sep           := '~' | <space>
    term_or_group := leaf | ['-'] '(' query ')'
    leaf          := ['-'] [fieldname (':' | '=')] (quoted_string | bareword)

Space is the implicit AND glue; a `~` anywhere in a group switches the whole
group to OR. The parser is total: malformed input degrades to a best-effort
tree instead of raising.
"""

from __future__ import annotations

import logging

from .filters import Filter, FilterGroup, FilterItem, Mode

logger = logging.getLogger(__name__)

# Characters that end a token outside quotes (all but space are tokens themselves)
STRUCTURAL_CHARS = frozenset("()~ ")

OPEN = "("
CLOSE = ")"
OR_SEPARATOR = "~"
EXCLUDE_PREFIX = "-"

# Deeper brackets are read as literal `(` terms
MAX_DEPTH = 100


def tokenize(query: str) -> list[str]:
    """Split a query string into tokens.

    Double quotes are kept in the token so the filter parser can tell quoted
    phrases apart. Inside quotes, brackets, `~` and spaces are literal; an
    unterminated quote makes the rest of the input literal.

    Examples:
        >>> tokenize('say (hello~"big world")')
        ['say', '(', 'hello', '~', '"big world"', ')']
    """
    tokens: list[str] = []
    buffer: list[str] = []
    in_quotes = False

    def _flush() -> None:
        text = "".join(buffer).strip()
        if text:
            tokens.append(text)
        buffer.clear()

    for ch in query:
        if ch == '"':
            buffer.append(ch)
            in_quotes = not in_quotes
        elif not in_quotes and ch in STRUCTURAL_CHARS:
            _flush()
            if ch != " ":
                tokens.append(ch)
        else:
            buffer.append(ch)

    _flush()
    return tokens


def parse_filter(raw: str) -> Filter:
    """Parse a single leaf token like `name:bob` (see `Filter.parse`)."""
    return Filter.parse(raw)


def _parse_subgroup(tokens: list[str], i: int, depth: int) -> tuple[FilterItem, int]:
    if depth >= MAX_DEPTH:
        logger.debug(f"Nesting deeper than {MAX_DEPTH} levels, reading '(' at token {i} as a term")
        return Filter(None, OPEN), i
    return parse_tokens(tokens, i + 1, depth + 1)


def parse_tokens(
    tokens: list[str], start: int = 0, depth: int = 0
) -> tuple[FilterGroup, int]:
    """Parse tokens (as returned by tokenize()) into a FilterGroup.

    Parsing stops at the first `)` that closes this level, or at the end of
    the tokens.

    Args:
        tokens: The tokens to parse
        start: Index of the first token of this group
        depth: Bracket depth of this group; past MAX_DEPTH a `(` is a literal term

    Returns:
        Tuple of (group, index of the closing `)` or len(tokens))
    """
    group = FilterGroup()
    current_mode = group.mode
    i = start

    while i < len(tokens):
        token = tokens[i]

        if token == OR_SEPARATOR:
            current_mode = Mode.OR
        elif token == OPEN:
            item, i = _parse_subgroup(tokens, i, depth)
            group.add(item)
        elif token == CLOSE:
            group.mode = current_mode
            return group, i
        elif token == EXCLUDE_PREFIX and i + 1 < len(tokens) and tokens[i + 1] == OPEN:
            # `-(...)` excludes a whole subgroup
            item, i = _parse_subgroup(tokens, i + 1, depth)
            group.add(item, exclude=True)
        elif token.startswith(EXCLUDE_PREFIX):
            group.add(parse_filter(token[1:]), exclude=True)
        else:
            group.add(parse_filter(token))

        i += 1

    group.mode = current_mode
    return group, len(tokens)


def parse_query(query: str) -> FilterGroup:
    """Parse a query string into a new root FilterGroup."""
    tokens = tokenize(query)
    group, end = parse_tokens(tokens)
    if end < len(tokens):
        logger.debug(f"Ignoring {len(tokens) - end} token(s) after unmatched ')' in {query!r}")
    logger.debug(f"Parsed {query!r} from {len(tokens)} token(s)")
    return group


__all__ = [
    "MAX_DEPTH",
    "parse_filter",
    "parse_query",
    "parse_tokens",
    "tokenize",
]
