"""Loaders for the product catalog and the known-customer list.

Both accept JSON (a list of records, or an object holding one under
``products`` / ``customers``), CSV and Excel files.  Column headers are
sanitised and mapped through an alias table so that exports from the
ordering app (``variationPrices``) and hand-made Turkish sheets (``fiyat``,
``kategori``) load the same way.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .models import Customer, Product
from .utils import load_json, normalize_text


LOGGER = logging.getLogger(__name__)


def _sanitise_column(name: str) -> str:
    return "".join(char if char.isalnum() else "_" for char in normalize_text(name)).strip("_")


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _text(value) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _to_decimal(value) -> Optional[Decimal]:
    if _is_missing(value):
        return None
    try:
        return Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return None


def _to_id(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, str)):
        return value.strip() if isinstance(value, str) else value
    return str(value)


def _parse_variations(value) -> List[str]:
    if _is_missing(value):
        return []
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            value = json.loads(text)
        else:
            return [part.strip() for part in text.split(",") if part.strip()]
    return [str(part).strip() for part in value if str(part).strip()]


def _parse_variation_prices(value) -> Dict[str, Decimal]:
    if _is_missing(value):
        return {}
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("{"):
            value = json.loads(text)
        else:
            value = dict(
                part.split("=", 1) for part in text.split(";") if "=" in part
            )
    prices: Dict[str, Decimal] = {}
    for label, raw in value.items():
        price = _to_decimal(raw)
        if price is not None:
            prices[str(label).strip()] = price
    return prices


class RecordLoader:
    """Read a JSON, CSV or Excel file into a list of dictionaries."""

    COLUMN_MAPPING: Dict[str, str] = {}
    JSON_KEY = "records"

    def __init__(self, path: Path, sheet_name=0) -> None:
        self.path = Path(path)
        self.sheet_name = sheet_name

    def load_records(self) -> List[dict]:
        if not self.path.exists():
            raise FileNotFoundError(f"File not found: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix == ".json":
            data = load_json(self.path)
            if isinstance(data, dict):
                data = data.get(self.JSON_KEY, [])
            if not isinstance(data, list):
                raise ValueError(f"Expected a list of records in {self.path}")
            rows = [row for row in data if isinstance(row, dict)]
        elif suffix == ".csv":
            rows = pd.read_csv(self.path, dtype=str, keep_default_na=False).to_dict(orient="records")
        elif suffix in {".xlsx", ".xlsm"}:
            df = pd.read_excel(self.path, sheet_name=self.sheet_name, engine="openpyxl")
            rows = df.dropna(how="all").to_dict(orient="records")
        else:
            raise ValueError(f"Unsupported file type '{suffix}' for {self.path}")

        return [
            {self.COLUMN_MAPPING.get(_sanitise_column(str(key)), _sanitise_column(str(key))): value for key, value in row.items()}
            for row in rows
        ]


class CatalogLoader(RecordLoader):
    """Helper responsible for reading the product catalog."""

    JSON_KEY = "products"
    COLUMN_MAPPING = {
        "id": "id",
        "sku": "id",
        "code": "id",
        "kod": "id",
        "name": "name",
        "title": "name",
        "urun": "name",
        "urun_adi": "name",
        "category": "category",
        "kategori": "category",
        "description": "description",
        "aciklama": "description",
        "price": "price",
        "fiyat": "price",
        "variations": "variations",
        "varyasyonlar": "variations",
        "variationprices": "variation_prices",
        "variation_prices": "variation_prices",
    }

    def to_products(self) -> List[Product]:
        products: List[Product] = []
        for index, data in enumerate(self.load_records(), start=1):
            product = self._to_product(data, index)
            if product is not None:
                products.append(product)

        LOGGER.info("Loaded %s products from %s", len(products), self.path)
        return products

    def _to_product(self, data: dict, index: int) -> Optional[Product]:
        name = _text(data.get("name"))
        if not name:
            LOGGER.warning("Skipping catalog row %s without a name", index)
            return None

        price = _to_decimal(data.get("price"))
        if price is None or price <= 0:
            LOGGER.warning("Skipping catalog row %s (%s): invalid price %r", index, name, data.get("price"))
            return None

        try:
            variations = _parse_variations(data.get("variations"))
            variation_prices = _parse_variation_prices(data.get("variation_prices"))
        except (ValueError, TypeError, AttributeError):
            LOGGER.warning("Ignoring malformed variations on catalog row %s (%s)", index, name)
            variations, variation_prices = [], {}

        unknown = sorted(set(variation_prices) - set(variations))
        if unknown:
            LOGGER.warning("Dropping prices for unknown variations %s of %s", unknown, name)
            variation_prices = {key: value for key, value in variation_prices.items() if key in variations}

        raw_id = data.get("id")
        product_id = _to_id(raw_id) if not _is_missing(raw_id) else index

        return Product(
            id=product_id,
            name=name,
            category=_text(data.get("category")) or "",
            description=_text(data.get("description")),
            price=price,
            variations=variations,
            variation_prices=variation_prices,
        )


class CustomerLoader(RecordLoader):
    """Helper reading the list of known customers."""

    JSON_KEY = "customers"
    COLUMN_MAPPING = {
        "id": "id",
        "name": "name",
        "ad": "name",
        "ad_soyad": "name",
        "musteri": "name",
        "phone": "phone",
        "telefon": "phone",
        "tel": "phone",
        "address": "address",
        "adres": "address",
    }

    def to_customers(self) -> List[Customer]:
        customers = customers_from_records(self.load_records())
        LOGGER.info("Loaded %s customers from %s", len(customers), self.path)
        return customers


def customers_from_records(records: Iterable[dict]) -> List[Customer]:
    """Build :class:`Customer` objects from plain mappings (files or API payloads)."""

    customers: List[Customer] = []
    for index, record in enumerate(records, start=1):
        name = _text(record.get("name"))
        if not name:
            LOGGER.warning("Skipping customer record %s without a name", index)
            continue
        raw_id = record.get("id")
        customers.append(
            Customer(
                id=_to_id(raw_id) if not _is_missing(raw_id) else index,
                name=name,
                phone=_text(record.get("phone")),
                address=_text(record.get("address")),
            )
        )
    return customers


__all__ = ["CatalogLoader", "CustomerLoader", "RecordLoader", "customers_from_records"]
