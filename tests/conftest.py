from decimal import Decimal
from pathlib import Path

import pytest

from order_parser.core.matcher import FuzzyProductMatcher
from order_parser.core.models import Customer, Product


EXAMPLES = Path(__file__).resolve().parents[1] / "example_docs"


def make_product(product_id, name, category, description=None, price="10.00", variations=None, variation_prices=None):
    return Product(
        id=product_id,
        name=name,
        category=category,
        description=description,
        price=Decimal(price),
        variations=list(variations or []),
        variation_prices={key: Decimal(value) for key, value in (variation_prices or {}).items()},
    )


def build_catalog():
    return [
        make_product(1, "Mercimek Çorbası", "Çorbalar", "Kırmızı mercimek ve havuç", price="6.50"),
        make_product(2, "Ezogelin Çorbası", "Çorbalar", "Mercimek, bulgur ve nane", price="6.50"),
        make_product(3, "Sigara Böreği", "Börekler", "Beyaz peynirli", price="9.00"),
        make_product(4, "Su Böreği", "Börekler", "Peynirli tepsi böreği", price="24.00"),
        make_product(5, "Mantı", "Ana Yemekler", "Yoğurtlu", price="14.00"),
        make_product(
            6,
            "Baklava",
            "Tatlılar",
            "Fıstıklı",
            price="30.00",
            variations=["1 kg", "Yarım kg"],
            variation_prices={"1 kg": "30.00", "Yarım kg": "16.00"},
        ),
    ]


def build_customers():
    return [
        Customer(id="c-1", name="Mesut Yılmaz", phone="+31 6 34316902"),
        Customer(id="c-2", name="Ayşe Demir", phone="0612345678"),
        Customer(id="c-3", name="Jan de Vries"),
    ]


@pytest.fixture
def catalog():
    return build_catalog()


@pytest.fixture
def matcher(catalog):
    return FuzzyProductMatcher(catalog)


@pytest.fixture
def customers():
    return build_customers()
