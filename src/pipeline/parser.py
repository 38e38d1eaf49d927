"""Ingredient parser: free text to a bounded, deduplicated ingredient list.

Strategies are tried in order:
1. Structured lines ("- flour", "• sugar", "3. salt")
2. Pattern clauses ("Ingredients: ...", "Contains: ...", "Made with: ...")
3. Canonical fallback list when nothing survives filtering

All functions here are pure; the same text always yields the same list.
"""

import re
from typing import Optional

from src.pipeline.fallbacks import CANONICAL_INGREDIENTS
from src.utils.config import config
from src.utils.logger import logger


DENYLIST = ("image", "photo", "appears", "product", "label")
STOPWORDS = frozenset({"and", "or", "a", "an", "the", "is", "are", "in", "of", "with", "from"})
MIN_INGREDIENT_LENGTH = 3

LIST_MARKER = re.compile(r"^(?:[-•*]|\d+\.)\s+")

CLAUSE_PATTERNS = (
    re.compile(r"\bingredients?[:\s]+(.+?)(?:\bcontains?\b|\bnutrition|\ballergen|\bwarning|\n|$)", re.IGNORECASE),
    re.compile(r"\bcontains?[:\s]+(.+?)(?:\bmay contain\b|\ballergen|\bnutrition|\n|$)", re.IGNORECASE),
    re.compile(r"\bmade with[:\s]+(.+?)(?:\bcontains?\b|\bnutrition|\n|$)", re.IGNORECASE),
)

_ITEM_SEPARATOR = re.compile(r"[,;]")
_TRAILING_PUNCTUATION = " \t.:!?)(*\"'"


def is_denylisted(item: str) -> bool:
    lowered = item.lower()
    return any(word in lowered for word in DENYLIST)


def _is_valid(item: str) -> bool:
    return len(item) >= MIN_INGREDIENT_LENGTH and not is_denylisted(item)


def extract_structured_lines(text: str) -> list[str]:
    """Items from lines starting with -, •, * or a number followed by a dot."""
    items = []
    for line in text.splitlines():
        stripped = line.strip()
        marker = LIST_MARKER.match(stripped)
        if not marker:
            continue
        item = stripped[marker.end():].strip()
        if _is_valid(item):
            items.append(item)
    return items


def _split_clause(clause: str) -> list[str]:
    items = []
    for piece in _ITEM_SEPARATOR.split(clause):
        item = piece.strip().rstrip(_TRAILING_PUNCTUATION).strip()
        if item.lower() in STOPWORDS:
            continue
        if _is_valid(item):
            items.append(item)
    return items


def extract_pattern_clauses(text: str) -> list[str]:
    """Items from the first keyword clause that yields at least one ingredient."""
    for pattern in CLAUSE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        items = _split_clause(match.group(1))
        if items:
            return items
    return []


def deduplicate(items: list[str], case_insensitive: bool = False) -> list[str]:
    """Remove repeats keeping the first-seen spelling and order."""
    seen = set()
    unique = []
    for item in items:
        key = item.lower() if case_insensitive else item
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def parse_ingredients(
    text: Optional[str],
    max_items: Optional[int] = None,
    case_insensitive: Optional[bool] = None,
) -> list[str]:
    """Convert provider text into an ingredient list.

    Args:
        text: Free text from the vision stage (may be empty).
        max_items: Cap on returned items. Default: config.MAX_INGREDIENTS.
        case_insensitive: Dedup policy. Default: config.INGREDIENT_DEDUPE_CASE_INSENSITIVE.

    Returns:
        Non-empty list of at most `max_items` ingredients.
    """
    if max_items is None:
        max_items = config.MAX_INGREDIENTS
    if case_insensitive is None:
        case_insensitive = config.INGREDIENT_DEDUPE_CASE_INSENSITIVE

    text = text or ""
    strategy = "structured"
    items = extract_structured_lines(text)
    if not items:
        strategy = "pattern"
        items = extract_pattern_clauses(text)

    items = deduplicate(items, case_insensitive)[:max_items]
    if not items:
        logger.info("No ingredients recognized in provider text, using canonical list", extra={"stage": "parser"})
        return list(CANONICAL_INGREDIENTS[:max_items])

    logger.debug(f"Parsed {len(items)} ingredients ({strategy})", extra={"stage": "parser"})
    return items
