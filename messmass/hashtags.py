"""
Hashtag filter terms: parsing, normalization and matching against events.

A term is either a plain tag (`vip`) or a category-scoped tag
(`country:hungary`). Plain tags match anywhere on an event; scoped tags only
match inside their category.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from messmass.records import EventDocument

CATEGORY_PATTERN = re.compile(r'^[a-z0-9_-]+$')


class FilterValidationError(ValueError):
    """Raised when a hashtag filter is empty or malformed."""


def parse_hashtag_query(term: str) -> Tuple[Optional[str], str]:
    """
    Split a filter term into (category, tag).

    Args:
        term (str): Raw term, e.g. '#Country:Hungary' or 'vip'.

    Returns:
        Tuple[Optional[str], str]: Lowercase category (None for plain tags) and tag.
    """
    text = term.strip().lstrip('#').strip().lower()
    if ':' in text:
        category, _, tag = text.partition(':')
        category = category.strip()
        tag = tag.strip()
        if category and tag and CATEGORY_PATTERN.match(category):
            return category, tag
    return None, text


def normalize_filter_terms(terms: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize raw filter input into a list of terms.

    Accepts a comma-separated string or an iterable of strings. Terms are
    trimmed, lowercased, stripped of a leading '#', de-duplicated (first
    occurrence wins) and empties dropped.

    Raises:
        FilterValidationError: If no usable term remains.
    """
    if terms is None:
        raw: Iterable[str] = ()
    elif isinstance(terms, str):
        raw = terms.split(',')
    else:
        raw = terms

    normalized: List[str] = []
    for term in raw:
        if term is None:
            continue
        category, tag = parse_hashtag_query(str(term))
        if not tag:
            continue
        value = f"{category}:{tag}" if category else tag
        if value not in normalized:
            normalized.append(value)

    if not normalized:
        raise FilterValidationError("At least one hashtag is required")
    return normalized


def term_matches(term: str, event: EventDocument) -> bool:
    """Check a single normalized term against an event's tags."""
    category, tag = parse_hashtag_query(term)
    if category is not None:
        return tag in event.categorized_hashtags.get(category, ())
    if tag in event.hashtags:
        return True
    return any(tag in tags for tags in event.categorized_hashtags.values())


def matches_all(terms: Sequence[str], event: EventDocument) -> bool:
    """True when every term matches (AND)."""
    return all(term_matches(term, event) for term in terms)


def matches_any(terms: Sequence[str], event: EventDocument) -> bool:
    """True when at least one term matches (OR)."""
    return any(term_matches(term, event) for term in terms)


def expand_event_hashtags(event: EventDocument) -> List[str]:
    """All of an event's hashtags in display form ('tag' and 'category:tag'), without duplicates."""
    expanded: List[str] = list(dict.fromkeys(event.hashtags))
    for category, tags in sorted(event.categorized_hashtags.items()):
        for tag in tags:
            value = f"{category}:{tag}"
            if value not in expanded:
                expanded.append(value)
    return expanded
