"""Matching logic between free-text product names and catalog products."""

from __future__ import annotations

import difflib
import logging
import sys
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import MATCH_EXACT, MATCH_FUZZY, Alternative, Match, Product, SearchableProduct
from .utils import collapse_whitespace, normalize_text


LOGGER = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.4
DEFAULT_DISTANCE = 100
DEFAULT_MIN_MATCH_CHAR_LENGTH = 2
DEFAULT_NAME_WEIGHT = 0.7
DEFAULT_SEARCH_TERMS_WEIGHT = 0.3
DEFAULT_MAX_ALTERNATIVES = 3

EPSILON = sys.float_info.epsilon


def build_searchable(product: Product) -> SearchableProduct:
    normalized_name = collapse_whitespace(normalize_text(product.name))
    terms = [normalized_name, normalize_text(product.category)]
    if product.description:
        terms.append(normalize_text(product.description))
    search_terms = collapse_whitespace(" ".join(term for term in terms if term))
    return SearchableProduct(product=product, normalized_name=normalized_name, search_terms=search_terms)


class FuzzyProductMatcher:
    """Resolve product names typed by customers to products from the catalog.

    The index is built in the constructor and never modified afterwards; a
    changed catalog needs a new matcher instance.

    Scoring works on dissimilarity values in ``[0, 1]`` where ``0`` is a
    perfect hit:

    * each indexed field is searched for the best aligned window of the query;
      the field score is ``1 - ratio`` of that window plus ``offset / distance``
      so that hits far into a long description weigh less
    * a field contributes only when its score is within ``threshold``
    * the record score is the weighted geometric product of the contributing
      field scores; records without any contributing field are dropped
    """

    def __init__(
        self,
        products: Iterable[Product],
        *,
        threshold: float = DEFAULT_THRESHOLD,
        distance: int = DEFAULT_DISTANCE,
        min_match_char_length: int = DEFAULT_MIN_MATCH_CHAR_LENGTH,
        name_weight: float = DEFAULT_NAME_WEIGHT,
        search_terms_weight: float = DEFAULT_SEARCH_TERMS_WEIGHT,
        max_alternatives: int = DEFAULT_MAX_ALTERNATIVES,
    ) -> None:
        self.products: Tuple[Product, ...] = tuple(products)
        self.threshold = threshold
        self.distance = distance
        self.min_match_char_length = min_match_char_length
        total_weight = name_weight + search_terms_weight
        self.weights = (name_weight / total_weight, search_terms_weight / total_weight)
        self.max_alternatives = max_alternatives
        self._build_indexes()

    def _build_indexes(self) -> None:
        searchable: List[SearchableProduct] = []
        exact_index: Dict[str, SearchableProduct] = {}

        for product in self.products:
            entry = build_searchable(product)
            searchable.append(entry)
            if not entry.normalized_name:
                continue
            if entry.normalized_name in exact_index:
                LOGGER.warning(
                    "Duplicate product name %r (ids %s and %s); exact matches resolve to the first",
                    product.name,
                    exact_index[entry.normalized_name].product.id,
                    product.id,
                )
                continue
            exact_index[entry.normalized_name] = entry

        self._searchable: Tuple[SearchableProduct, ...] = tuple(searchable)
        self._exact_index = exact_index
        LOGGER.info("Indexed %s catalog products", len(self._searchable))

    @property
    def searchable(self) -> Sequence[SearchableProduct]:
        return self._searchable

    def match(self, name: Optional[str]) -> Optional[Match]:
        normalized = collapse_whitespace(normalize_text(name))
        if not normalized:
            return None

        exact = self._exact_index.get(normalized)
        if exact is not None:
            LOGGER.debug("Exact match %r -> %s", name, exact.product.id)
            return Match(product=exact.product, confidence=1.0, match_type=MATCH_EXACT)

        ranked = self._rank(normalized)
        if not ranked:
            LOGGER.debug("No catalog candidate for %r", name)
            return None

        best, best_score = ranked[0]
        alternatives = [
            Alternative(product=product, confidence=1.0 - score)
            for product, score in ranked[1 : 1 + self.max_alternatives]
        ]
        LOGGER.debug("Fuzzy match %r -> %s (confidence %.3f)", name, best.id, 1.0 - best_score)
        return Match(product=best, confidence=1.0 - best_score, match_type=MATCH_FUZZY, alternatives=alternatives)

    def search(self, query: Optional[str], limit: int = 10) -> List[Alternative]:
        """Free-text catalog search, best candidates first."""

        normalized = collapse_whitespace(normalize_text(query))
        if len(normalized) < self.min_match_char_length:
            return []
        return [Alternative(product=product, confidence=1.0 - score) for product, score in self._rank(normalized)[:limit]]

    def _rank(self, normalized: str) -> List[Tuple[Product, float]]:
        if len(normalized) < self.min_match_char_length:
            return []

        candidates: List[Tuple[float, int, Product]] = []
        for position, entry in enumerate(self._searchable):
            score = self._record_score(normalized, entry)
            if score is not None:
                candidates.append((score, position, entry.product))

        candidates.sort(key=lambda candidate: (candidate[0], candidate[1]))
        return [(product, score) for score, _, product in candidates]

    def _record_score(self, query: str, entry: SearchableProduct) -> Optional[float]:
        total = 1.0
        matched = False
        for text, weight in zip((entry.normalized_name, entry.search_terms), self.weights):
            score = self._field_score(query, text)
            if score > self.threshold:
                continue
            matched = True
            total *= max(score, EPSILON) ** weight
        if not matched:
            return None
        return min(total, 1.0)

    def _field_score(self, query: str, text: str) -> float:
        if not text:
            return 1.0

        offset = text.find(query)
        if offset >= 0:
            return offset / self.distance

        best = 1.0
        window = len(query)
        seen = set()
        blocks = difflib.SequenceMatcher(None, query, text, autojunk=False).get_matching_blocks()
        for block in blocks:
            if block.size < self.min_match_char_length:
                continue
            start = max(0, block.b - block.a)
            if start in seen:
                continue
            seen.add(start)
            ratio = self._similarity(query, text[start : start + window])
            best = min(best, (1.0 - ratio) + start / self.distance)
        return best

    @staticmethod
    def _similarity(a: str, b: str) -> float:
        if not a or not b:
            return 0.0
        return difflib.SequenceMatcher(None, a, b, autojunk=False).ratio()


__all__ = [
    "DEFAULT_THRESHOLD",
    "DEFAULT_DISTANCE",
    "DEFAULT_MIN_MATCH_CHAR_LENGTH",
    "DEFAULT_NAME_WEIGHT",
    "DEFAULT_SEARCH_TERMS_WEIGHT",
    "DEFAULT_MAX_ALTERNATIVES",
    "FuzzyProductMatcher",
    "build_searchable",
]
