"""Identifier patterns and normalization shared by the DDL parsers."""

import re

from ddl.scanner import split_top_level

# Reusable regex components
QUOTED_IDENTIFIER = r'"[^"]+"|`[^`]+`|\[[^\]]+\]'
BARE_IDENTIFIER = r"[^\s(),.;\"`\[\]]+"
IDENTIFIER = rf"(?:{QUOTED_IDENTIFIER}|{BARE_IDENTIFIER})"
QUALIFIED_NAME = rf"{IDENTIFIER}(?:\s*\.\s*{IDENTIFIER})*"

QUOTE_PAIRS = (('"', '"'), ("`", "`"), ("[", "]"))

_IDENTIFIER_PART = re.compile(IDENTIFIER)


def unquote_identifier(value: str) -> str:
    """Strip one layer of ``"..."``, ```...``` or ``[...]`` quoting."""
    trimmed = value.strip()
    for opening, closing in QUOTE_PAIRS:
        if len(trimmed) >= 2 and trimmed.startswith(opening) and trimmed.endswith(closing):  # noqa: PLR2004
            return trimmed[1:-1]
    return trimmed


def normalize_identifier(value: str) -> str:
    """Unquote and lowercase a column identifier."""
    return unquote_identifier(value).lower()


def normalize_table_name(raw_name: str) -> str:
    """Unquote, lowercase and strip any schema prefix from a table name."""
    parts = _IDENTIFIER_PART.findall(raw_name)
    return normalize_identifier(parts[-1] if parts else raw_name)


def parse_column_list(text: str) -> list[str]:
    """Normalize a comma separated list of column identifiers."""
    return [normalize_identifier(name) for name in split_top_level(text)]
