"""Quantity extraction for single order lines.

The patterns are tried in order and the first one that matches the whole line
wins.  Explicit multiplier shapes come before the bare leading number so that
``"3x 2 Kişilik Menü"`` is read as three menus and not as a quantity of 3
followed by ``"x 2 Kişilik Menü"``.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Pattern, Tuple

from .models import ParsedLine


LOGGER = logging.getLogger(__name__)

UNIT_WORDS: Tuple[str, ...] = ("adet", "porsiyon", "kilo", "kg")

QuantityMatcher = Callable[[str], Optional[Tuple[int, str]]]


def _leading(pattern: Pattern[str]) -> QuantityMatcher:
    def matcher(line: str) -> Optional[Tuple[int, str]]:
        match = pattern.match(line)
        if not match:
            return None
        return int(match.group(1)), match.group(2)

    return matcher


def _trailing(pattern: Pattern[str], *, require_text: bool = False) -> QuantityMatcher:
    def matcher(line: str) -> Optional[Tuple[int, str]]:
        match = pattern.match(line)
        if not match:
            return None
        rest = match.group(1)
        if require_text and rest.strip().isdigit():
            return None
        return int(match.group(2)), rest

    return matcher


LEADING_MULTIPLIER = re.compile(r"^(\d+)\s*[xX]\s*(.+)$")
LEADING_UNIT = re.compile(r"^(\d+)\s*(?:" + "|".join(UNIT_WORDS) + r")\s+(.+)$", re.IGNORECASE)
TRAILING_MULTIPLIER = re.compile(r"^(.+?)\s*[xX]\s*(\d+)$")
TRAILING_SEPARATOR = re.compile(r"^(.+?)[\s\-:]+(\d+)$")
LEADING_NUMBER = re.compile(r"^(\d+)\s+(.+)$")

QUANTITY_MATCHERS: Tuple[Tuple[str, QuantityMatcher], ...] = (
    ("leading-multiplier", _leading(LEADING_MULTIPLIER)),
    ("leading-unit", _leading(LEADING_UNIT)),
    ("trailing-multiplier", _trailing(TRAILING_MULTIPLIER)),
    ("trailing-separator", _trailing(TRAILING_SEPARATOR, require_text=True)),
    ("leading-number", _leading(LEADING_NUMBER)),
)


def parse_line(line: Optional[str]) -> Optional[ParsedLine]:
    """Split ``line`` into a quantity and the product name that remains.

    Returns ``None`` for blank input.  A pattern yielding a zero quantity is
    skipped so that ``quantity`` is always at least one.
    """

    clean_line = (line or "").strip()
    if not clean_line:
        return None

    for label, matcher in QUANTITY_MATCHERS:
        result = matcher(clean_line)
        if result is None:
            continue
        quantity, rest = result
        rest = rest.strip()
        if quantity < 1 or not rest:
            continue
        LOGGER.debug("Line %r parsed with %s: %s x %r", clean_line, label, quantity, rest)
        return ParsedLine(original=clean_line, quantity=quantity, searched_name=rest)

    return ParsedLine(original=clean_line, quantity=1, searched_name=clean_line)


__all__ = ["QUANTITY_MATCHERS", "UNIT_WORDS", "parse_line"]
