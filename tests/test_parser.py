import json
from decimal import Decimal

import pandas as pd
import pytest

from order_parser.core.parser import CatalogLoader, CustomerLoader, customers_from_records

from conftest import EXAMPLES


def test_load_example_catalog():
    products = CatalogLoader(EXAMPLES / "products.json").to_products()

    assert len(products) == 10
    mercimek = products[0]
    assert mercimek.id == 1
    assert mercimek.name == "Mercimek Çorbası"
    assert mercimek.category == "Çorbalar"
    assert mercimek.variations == ["500 ml", "1 L"]
    assert mercimek.price_for("1 L") == Decimal("11.0")
    assert mercimek.price_for(None) == Decimal("6.5")


def test_load_plain_json_list(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps([{"id": "A1", "name": "Lahmacun", "category": "Pide", "price": "5.5"}]),
        encoding="utf-8",
    )

    products = CatalogLoader(path).to_products()

    assert [(product.id, product.name, product.price) for product in products] == [("A1", "Lahmacun", Decimal("5.5"))]
    assert products[0].description is None


def test_load_csv_with_turkish_headers(tmp_path, caplog):
    path = tmp_path / "urunler.csv"
    path.write_text(
        "Kod,Ürün Adı,Kategori,Açıklama,Fiyat,Varyasyonlar,variationPrices\n"
        'P1,Ayran,İçecekler,,"8,50","Küçük,Büyük","Küçük=8,50;Büyük=12;Dev=20"\n'
        "P2,Bozuk,İçecekler,,abc,,\n"
        "P3,Bedava,İçecekler,,0,,\n"
        ",,İçecekler,,3,,\n",
        encoding="utf-8",
    )

    with caplog.at_level("WARNING"):
        products = CatalogLoader(path).to_products()

    assert len(products) == 1
    ayran = products[0]
    assert ayran.id == "P1"
    assert ayran.category == "İçecekler"
    assert ayran.description is None
    assert ayran.price == Decimal("8.50")
    assert ayran.variations == ["Küçük", "Büyük"]
    assert ayran.variation_prices == {"Küçük": Decimal("8.50"), "Büyük": Decimal("12")}
    assert "invalid price" in caplog.text
    assert "unknown variations" in caplog.text


def test_load_excel_catalog(tmp_path):
    path = tmp_path / "urunler.xlsx"
    pd.DataFrame(
        [
            {"Kod": "B-1", "Ürün Adı": "Baklava", "Kategori": "Tatlılar", "Açıklama": None, "Fiyat": "30,00",
             "Varyasyonlar": "1 kg,Yarım kg", "variationPrices": "1 kg=30;Yarım kg=16,50"},
            {"Kod": "M-1", "Ürün Adı": "Mantı", "Kategori": "Ana Yemekler", "Açıklama": "Yoğurtlu", "Fiyat": 14.5,
             "Varyasyonlar": None, "variationPrices": None},
            {"Kod": None, "Ürün Adı": None, "Kategori": None, "Açıklama": None, "Fiyat": None,
             "Varyasyonlar": None, "variationPrices": None},
        ]
    ).to_excel(path, index=False, engine="openpyxl")

    products = CatalogLoader(path).to_products()

    assert [product.id for product in products] == ["B-1", "M-1"]
    baklava, manti = products
    assert baklava.price == Decimal("30.00")
    assert baklava.description is None
    assert baklava.price_for("Yarım kg") == Decimal("16.50")
    assert manti.price == Decimal("14.5")
    assert manti.description == "Yoğurtlu"
    assert manti.variations == []


def test_unsupported_and_missing_files(tmp_path):
    path = tmp_path / "catalog.txt"
    path.write_text("Mantı", encoding="utf-8")
    with pytest.raises(ValueError):
        CatalogLoader(path).to_products()
    legacy = tmp_path / "catalog.xls"
    legacy.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64)
    with pytest.raises(ValueError, match="Unsupported file type"):
        CatalogLoader(legacy).to_products()
    with pytest.raises(FileNotFoundError):
        CatalogLoader(tmp_path / "missing.json").to_products()


def test_json_must_hold_a_list(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"products": {"name": "Mantı"}}), encoding="utf-8")
    with pytest.raises(ValueError):
        CatalogLoader(path).to_products()


def test_load_example_customers():
    customers = CustomerLoader(EXAMPLES / "customers.json").to_customers()

    assert [customer.id for customer in customers] == ["c-1", "c-2", "c-3"]
    assert customers[0].phone == "+31 6 34316902"
    assert customers[1].address == "Amstelveen"


def test_load_customers_csv(tmp_path):
    path = tmp_path / "musteriler.csv"
    path.write_text("Ad Soyad,Telefon,Adres\nMesut Yılmaz,0634316902,Nieuw Sloten\n,0611111111,\n", encoding="utf-8")

    customers = CustomerLoader(path).to_customers()

    assert len(customers) == 1
    assert customers[0].id == 1
    assert customers[0].name == "Mesut Yılmaz"
    assert customers[0].phone == "0634316902"


def test_customers_from_records():
    customers = customers_from_records([{"id": 7, "name": " Jan ", "phone": ""}, {"name": None}])
    assert len(customers) == 1
    assert customers[0].id == 7
    assert customers[0].name == "Jan"
    assert customers[0].phone is None
