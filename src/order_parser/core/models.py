"""Dataclasses describing the core domain objects used by the order parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Union


MATCH_EXACT = "exact"
MATCH_FUZZY = "fuzzy"
MATCH_MANUAL = "manual"

ProductId = Union[str, int]


@dataclass(frozen=True)
class Product:
    """A sellable catalog entry, owned by the catalog collaborator."""

    id: ProductId
    name: str
    category: str
    price: Decimal
    description: Optional[str] = None
    variations: List[str] = field(default_factory=list, hash=False, compare=False)
    variation_prices: Dict[str, Decimal] = field(default_factory=dict, hash=False, compare=False)

    def price_for(self, variation: Optional[str] = None) -> Decimal:
        if variation and variation in self.variation_prices:
            return self.variation_prices[variation]
        return self.price

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "price": str(self.price),
            "variations": list(self.variations),
            "variation_prices": {key: str(value) for key, value in self.variation_prices.items()},
        }


@dataclass(frozen=True)
class SearchableProduct:
    """Normalized projection of a :class:`Product` used by the matcher index."""

    product: Product
    normalized_name: str
    search_terms: str


@dataclass
class ParsedLine:
    original: str
    quantity: int
    searched_name: str


@dataclass
class Alternative:
    product: Product
    confidence: float

    def to_dict(self) -> dict:
        return {"product": self.product.to_dict(), "confidence": round(self.confidence, 4)}


@dataclass
class Match:
    product: Product
    confidence: float
    match_type: str
    alternatives: List[Alternative] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "product": self.product.to_dict(),
            "confidence": round(self.confidence, 4),
            "match_type": self.match_type,
            "alternatives": [alternative.to_dict() for alternative in self.alternatives],
        }


@dataclass
class ParsedItem:
    """One product-bearing input line; ``match`` is ``None`` when unresolved."""

    original: str
    quantity: int
    searched_name: str
    match: Optional[Match] = None
    variation: Optional[str] = None

    def unit_price(self) -> Optional[Decimal]:
        if self.match is None:
            return None
        return self.match.product.price_for(self.variation)

    def line_total(self) -> Optional[Decimal]:
        price = self.unit_price()
        if price is None:
            return None
        return price * self.quantity

    def to_dict(self) -> dict:
        price = self.unit_price()
        return {
            "original": self.original,
            "quantity": self.quantity,
            "searched_name": self.searched_name,
            "variation": self.variation,
            "unit_price": str(price) if price is not None else None,
            "match": self.match.to_dict() if self.match else None,
        }


@dataclass(frozen=True)
class Customer:
    id: ProductId
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "phone": self.phone, "address": self.address}


@dataclass
class ExtractedMetadata:
    date: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    matched_customer: Optional[Customer] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "phone": self.phone,
            "name": self.name,
            "address": self.address,
            "matched_customer": self.matched_customer.to_dict() if self.matched_customer else None,
        }


@dataclass
class ParseResult:
    items: List[ParsedItem] = field(default_factory=list)
    metadata: ExtractedMetadata = field(default_factory=ExtractedMetadata)

    @property
    def unmatched(self) -> List[ParsedItem]:
        return [item for item in self.items if item.match is None]

    def estimated_total(self) -> Decimal:
        """Sum of line totals over the matched items."""

        total = Decimal("0")
        for item in self.items:
            line_total = item.line_total()
            if line_total is not None:
                total += line_total
        return total

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "metadata": self.metadata.to_dict(),
            "estimated_total": str(self.estimated_total()),
        }


__all__ = [
    "MATCH_EXACT",
    "MATCH_FUZZY",
    "MATCH_MANUAL",
    "Product",
    "SearchableProduct",
    "ParsedLine",
    "Alternative",
    "Match",
    "ParsedItem",
    "Customer",
    "ExtractedMetadata",
    "ParseResult",
]
