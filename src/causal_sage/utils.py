"""
Text helpers for relationship strings of the form "subject -->(+) object".
"""
import re
from typing import List, Optional, Tuple

ARROW = "-->"
POSITIVE_SYMBOL = "(+)"
NEGATIVE_SYMBOL = "(-)"

_SYMBOL_PATTERN = re.compile(r"\(\+\)|\(-\)")
_PUNCTUATION_PATTERN = re.compile(r"[!.,;:]")
_LIST_NUMBER_PATTERN = re.compile(r"^\s*\d+\.\s+")
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def normalize_variable(name: str) -> str:
    """Lowercase, trim, strip punctuation and collapse whitespace."""
    normalized = _PUNCTUATION_PATTERN.sub("", str(name).lower())
    return " ".join(normalized.split())


def humanize(name: str) -> str:
    """Turn camelCase and snake_case identifiers into spaced lowercase words."""
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", str(name))
    spaced = spaced.replace("_", " ")
    return " ".join(spaced.lower().split())


def strip_list_number(line: str) -> str:
    """Remove a leading "<n>. " list marker."""
    return _LIST_NUMBER_PATTERN.sub("", line).strip()


def extract_variables(relationship: str) -> Tuple[str, str, str]:
    """
    Split a relationship string into its parts.

    Args:
        relationship: String such as "death rate -->(-) population"

    Returns:
        Tuple of (subject, object, symbol); all empty when there is no arrow
    """
    line = strip_list_number(relationship)
    parts = line.split(ARROW, 1)
    if len(parts) < 2:
        return "", "", ""

    match = _SYMBOL_PATTERN.search(parts[1])
    symbol = match.group() if match else ""
    subject = normalize_variable(parts[0])
    obj = normalize_variable(_SYMBOL_PATTERN.sub("", parts[1]))
    return subject, obj, symbol


def format_relationship(rel, index: Optional[int] = None) -> str:
    """
    Render a relationship as "subject -->(+) object".

    Args:
        rel: Relationship; an unresolved predicate renders as "(+)"
        index: Optional list number, giving "<n>. subject -->(+) object"
    """
    symbol = POSITIVE_SYMBOL if rel.predicate is None else rel.predicate.symbol
    line = f"{rel.subject} {ARROW}{symbol} {rel.object}"
    if index is None:
        return line
    return f"{index}. {line}"


def clean_symbol(symbol: str) -> str:
    """"(+)" -> "+"."""
    return symbol.replace("(", "").replace(")", "")


def xmile_name(display_name: str) -> str:
    return "_".join(display_name.split())


def split_sentences(text: str) -> List[str]:
    """Naive sentence splitter on terminal punctuation."""
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]

