"""High level orchestration of order text parsing."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import Settings
from .catalog import product_by_id, products_by_category
from .classifier import (
    KIND_ADDRESS,
    KIND_BLANK,
    KIND_DATE,
    KIND_NAME,
    KIND_PHONE,
    ClassifierOptions,
    LineClassification,
    classify_line,
)
from .customers import resolve_customer
from .matcher import FuzzyProductMatcher
from .models import Alternative, Customer, ExtractedMetadata, ParsedItem, ParseResult, Product, ProductId
from .parser import CatalogLoader, CustomerLoader


LOGGER = logging.getLogger(__name__)

METADATA_KINDS = (KIND_DATE, KIND_PHONE, KIND_ADDRESS, KIND_NAME)


def split_lines(text: Optional[str]) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


class OrderTextParser:
    """Turns a pasted order message into a :class:`ParseResult`.

    The matcher is injected and only read, so one parser may serve many
    callers.  All per-message state lives inside :meth:`parse`.
    """

    def __init__(self, matcher: FuzzyProductMatcher, *, options: Optional[ClassifierOptions] = None) -> None:
        self.matcher = matcher
        self.options = options or ClassifierOptions()

    def parse(self, text: Optional[str], customers: Iterable[Customer] = ()) -> ParseResult:
        captured: Dict[str, str] = {}
        product_lines: List[LineClassification] = []

        # first pass: metadata, first occurrence of each kind wins
        for line in split_lines(text):
            classification = classify_line(
                line,
                self.matcher,
                allow_name=KIND_NAME not in captured,
                options=self.options,
            )
            kind = classification.kind
            if kind == KIND_BLANK:
                continue
            if kind in METADATA_KINDS:
                if kind in captured:
                    LOGGER.debug("Ignoring extra %s line %r", kind, line)
                else:
                    captured[kind] = classification.value or ""
                continue
            product_lines.append(classification)

        # second pass: one item per product line, input order
        items = [self._to_item(classification) for classification in product_lines]

        metadata = ExtractedMetadata(
            date=captured.get(KIND_DATE),
            phone=captured.get(KIND_PHONE),
            name=captured.get(KIND_NAME),
            address=captured.get(KIND_ADDRESS),
        )
        metadata.matched_customer = resolve_customer(customers, phone=metadata.phone, name=metadata.name)

        LOGGER.debug(
            "Parsed %s items (%s unmatched); customer=%s",
            len(items),
            sum(1 for item in items if item.match is None),
            metadata.matched_customer.id if metadata.matched_customer else None,
        )
        return ParseResult(items=items, metadata=metadata)

    @staticmethod
    def _to_item(classification: LineClassification) -> ParsedItem:
        parsed = classification.parsed
        return ParsedItem(
            original=parsed.original,
            quantity=parsed.quantity,
            searched_name=parsed.searched_name,
            match=classification.match,
        )


def parse_order_text(
    text: Optional[str],
    matcher: FuzzyProductMatcher,
    customers: Iterable[Customer] = (),
    *,
    options: Optional[ClassifierOptions] = None,
) -> ParseResult:
    return OrderTextParser(matcher, options=options).parse(text, customers)


def build_matcher(products: Iterable[Product], settings: Optional[Settings] = None) -> FuzzyProductMatcher:
    if settings is None:
        return FuzzyProductMatcher(products)
    config = settings.matcher
    return FuzzyProductMatcher(
        products,
        threshold=config.threshold,
        distance=config.distance,
        min_match_char_length=config.min_match_char_length,
        name_weight=config.name_weight,
        search_terms_weight=config.search_terms_weight,
        max_alternatives=config.max_alternatives,
    )


class OrderService:
    """Coordinates catalog loading, customer lookup and parsing.

    ``reload_catalog`` builds a complete new parser before swapping it in, so
    a request running concurrently keeps using the previous, unchanged index.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.catalog_loader = CatalogLoader(settings.paths.catalog_file)
        self.customer_loader = CustomerLoader(settings.paths.customers_file) if settings.paths.customers_file else None
        self.options = settings.classifier.to_options()
        self.parser = self._build_parser(self.catalog_loader.to_products())
        self.customers: Sequence[Customer] = self._load_customers()

    def _build_parser(self, products: Iterable[Product]) -> OrderTextParser:
        return OrderTextParser(build_matcher(products, self.settings), options=self.options)

    def _load_customers(self) -> Sequence[Customer]:
        if self.customer_loader is None:
            return ()
        return tuple(self.customer_loader.to_customers())

    @property
    def products(self) -> Sequence[Product]:
        return self.parser.matcher.products

    def reload_catalog(self) -> int:
        parser = self._build_parser(self.catalog_loader.to_products())
        self.parser = parser
        LOGGER.info("Catalog reloaded with %s products", len(parser.matcher.products))
        return len(parser.matcher.products)

    def reload_customers(self) -> int:
        self.customers = self._load_customers()
        return len(self.customers)

    def parse(self, text: str, customers: Optional[Iterable[Customer]] = None) -> ParseResult:
        known = self.customers if customers is None else customers
        return self.parser.parse(text, known)

    def search(self, query: str, limit: Optional[int] = None) -> List[Alternative]:
        return self.parser.matcher.search(query, limit=limit or self.settings.search_limit)

    def product(self, product_id: ProductId) -> Optional[Product]:
        return product_by_id(self.products, product_id)

    def categories(self) -> Dict[str, List[Product]]:
        return products_by_category(self.products)


__all__ = [
    "OrderTextParser",
    "OrderService",
    "parse_order_text",
    "build_matcher",
    "split_lines",
]
