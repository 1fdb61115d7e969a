"""Operations applied by a person reviewing a parsed order."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from .models import MATCH_MANUAL, Alternative, Match, ParsedItem, Product


HIGH_CONFIDENCE = 0.9
MEDIUM_CONFIDENCE = 0.7


def confidence_level(confidence: Optional[float]) -> str:
    if confidence is None:
        return "none"
    if confidence >= HIGH_CONFIDENCE:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


def offers_alternatives(item: ParsedItem) -> bool:
    """Alternatives are shown for review only below the high confidence band."""

    match = item.match
    return bool(match and match.alternatives and match.confidence < HIGH_CONFIDENCE)


def select_alternative(item: ParsedItem, alternative: Alternative) -> ParsedItem:
    """Return a copy of ``item`` resolved to ``alternative`` by hand."""

    match = Match(
        product=alternative.product,
        confidence=alternative.confidence,
        match_type=MATCH_MANUAL,
        alternatives=[],
    )
    return replace(item, match=match, variation=None)


def assign_product(item: ParsedItem, product: Product) -> ParsedItem:
    """Resolve ``item`` to a product picked from the catalog search."""

    return select_alternative(item, Alternative(product=product, confidence=1.0))


def adjust_quantity(item: ParsedItem, delta: int) -> ParsedItem:
    return replace(item, quantity=max(1, item.quantity + delta))


def choose_variation(item: ParsedItem, variation: Optional[str]) -> ParsedItem:
    """Pick one of the matched product's variations (``None`` clears it)."""

    if variation is not None:
        if item.match is None or variation not in item.match.product.variations:
            raise ValueError(f"Unknown variation {variation!r} for line {item.original!r}")
    return replace(item, variation=variation)


def remove_item(items: Sequence[ParsedItem], index: int) -> List[ParsedItem]:
    """Return ``items`` without the line at ``index``, e.g. a line wrongly read as a product."""

    if not 0 <= index < len(items):
        raise IndexError(f"No order line at position {index}")
    return [item for position, item in enumerate(items) if position != index]


__all__ = [
    "HIGH_CONFIDENCE",
    "MEDIUM_CONFIDENCE",
    "confidence_level",
    "offers_alternatives",
    "select_alternative",
    "assign_product",
    "adjust_quantity",
    "choose_variation",
    "remove_item",
]
