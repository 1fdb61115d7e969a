from order_parser.core.classifier import (
    KIND_ADDRESS,
    KIND_BLANK,
    KIND_DATE,
    KIND_NAME,
    KIND_PHONE,
    KIND_PRODUCT,
    ClassifierOptions,
    classify_line,
    clean_address,
    is_address_line,
    is_likely_name,
    is_phone_number,
    normalize_phone,
    parse_date,
)
from order_parser.core.models import MATCH_EXACT


def test_parse_date_with_month_names():
    assert parse_date("22 Aralık 2025") == "2025-12-22"
    assert parse_date("1 ŞUBAT 2026") == "2026-02-01"
    assert parse_date("5 March 2024") == "2024-03-05"
    assert parse_date("5 sept 2024") == "2024-09-05"
    assert parse_date("3 mei 2025") == "2025-05-03"
    assert parse_date("Teslimat 1 ocak 2026 saat 12") == "2026-01-01"


def test_parse_date_numeric_formats():
    assert parse_date("22/12/2025") == "2025-12-22"
    assert parse_date("22.12.2025") == "2025-12-22"
    assert parse_date("22-12-2025") == "2025-12-22"
    assert parse_date("2025-12-22") == "2025-12-22"


def test_parse_date_rejects_invalid_values():
    assert parse_date("35/12/2025") is None
    assert parse_date("12/13/2025") is None
    assert parse_date("31 Şubat 2025") is None
    assert parse_date("22 Blabla 2025") is None
    assert parse_date("Mercimek Çorbası") is None


def test_phone_detection():
    assert is_phone_number("0634316902")
    assert is_phone_number("+31 6 3431 6902")
    assert is_phone_number("0031634316902")
    assert is_phone_number("0532 123 45 67")
    assert is_phone_number("(020) 123-4567")
    assert not is_phone_number("12345")
    assert not is_phone_number("Mercimek")


def test_phone_normalization():
    assert normalize_phone("0634316902") == "+31634316902"
    assert normalize_phone("06-34 31 69 02") == "+31634316902"
    assert normalize_phone("+31 6 34316902") == "+31634316902"
    assert normalize_phone("0031634316902") == "+31634316902"
    assert normalize_phone("31634316902") == "+31634316902"
    assert normalize_phone("+90 532 123 45 67") == "+905321234567"
    assert normalize_phone("0532 123 45 67") == "05321234567"


def test_other_international_prefixes_keep_their_digits():
    assert normalize_phone("0090 532 123 45 67") == "00905321234567"
    assert normalize_phone("0044 20 7946 0958") == "00442079460958"


def test_address_detection():
    assert is_address_line("Nieuw Sloten")
    assert is_address_line("Kerkstraat 12")
    assert is_address_line("Adres: Dam 1A")
    assert is_address_line("1012AB Centrum")
    assert not is_address_line("4B")
    assert not is_address_line("2 Mercimek Çorbası")


def test_quantity_markers_are_not_house_numbers():
    assert not is_address_line("3x Sigara Böreği")
    assert not is_address_line("2kg Baklava")
    assert not is_address_line("Mantı x2")


def test_extra_address_keywords():
    options = ClassifierOptions.with_extra_keywords(["Diemen"])
    assert is_address_line("Diemen Zuid", options)
    assert is_address_line("DİEMEN", options)


def test_clean_address_strips_label():
    assert clean_address("Adres: Dam 1A") == "Dam 1A"
    assert clean_address("address : Kerkstraat 5") == "Kerkstraat 5"
    assert clean_address("Nieuw Sloten") == "Nieuw Sloten"


def test_likely_name():
    assert is_likely_name("Mesut")
    assert is_likely_name("Ayşe Nur Demir")
    assert not is_likely_name("Ali Veli Can Cem")
    assert not is_likely_name("Mesut 2")


def test_classify_line_kinds(matcher):
    assert classify_line("", matcher).kind == KIND_BLANK

    date_line = classify_line("22 Aralık 2025", matcher)
    assert (date_line.kind, date_line.value) == (KIND_DATE, "2025-12-22")

    phone_line = classify_line("0634316902", matcher)
    assert (phone_line.kind, phone_line.value) == (KIND_PHONE, "+31634316902")

    address_line = classify_line("Adres: Nieuw Sloten 12", matcher)
    assert (address_line.kind, address_line.value) == (KIND_ADDRESS, "Nieuw Sloten 12")

    name_line = classify_line("Mesut", matcher)
    assert (name_line.kind, name_line.value) == (KIND_NAME, "Mesut")


def test_classify_product_line(matcher):
    product_line = classify_line("2 Mercimek Çorbası", matcher)
    assert product_line.kind == KIND_PRODUCT
    assert product_line.parsed.quantity == 2
    assert product_line.match.match_type == MATCH_EXACT


def test_confident_single_word_is_a_product_not_a_name(matcher):
    line = classify_line("Sigara", matcher)
    assert line.kind == KIND_PRODUCT
    assert line.match.product.name == "Sigara Böreği"
    assert line.match.confidence >= 0.5


def test_name_slot_taken_turns_name_like_lines_into_products(matcher):
    line = classify_line("Mesut", matcher, allow_name=False)
    assert line.kind == KIND_PRODUCT
    assert line.match is None
    assert line.parsed.searched_name == "Mesut"
