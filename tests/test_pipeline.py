from decimal import Decimal

from order_parser.core.models import MATCH_EXACT
from order_parser.core.pipeline import OrderTextParser, parse_order_text, split_lines


ORDER = """22 Aralık 2025
Mesut
0634316902
Nieuw Sloten
2 Mercimek Çorbası
3x Sigara Böreği
"""


def test_split_lines_drops_blank_lines():
    assert split_lines("  a \n\n b\r\n  \n") == ["a", "b"]
    assert split_lines(None) == []


def test_full_order_message(matcher, customers):
    result = parse_order_text(ORDER, matcher, customers)

    metadata = result.metadata
    assert metadata.date == "2025-12-22"
    assert metadata.phone == "+31634316902"
    assert metadata.name == "Mesut"
    assert "Nieuw Sloten" in metadata.address
    assert metadata.matched_customer.id == "c-1"

    assert [item.quantity for item in result.items] == [2, 3]
    assert [item.match.product.name for item in result.items] == ["Mercimek Çorbası", "Sigara Böreği"]
    for item in result.items:
        assert item.match.match_type == MATCH_EXACT
        assert item.match.confidence == 1.0
        assert item.match.alternatives == []

    assert result.estimated_total() == Decimal("40.00")


def test_unknown_product_stays_unmatched(matcher):
    result = parse_order_text("Mesut\n2 Lahmacun\n1 Mantı", matcher)

    assert result.metadata.name == "Mesut"
    assert [item.searched_name for item in result.items] == ["Lahmacun", "Mantı"]
    assert result.items[0].match is None
    assert result.unmatched == [result.items[0]]
    assert result.estimated_total() == Decimal("14.00")


def test_confident_product_is_not_taken_as_name(matcher):
    result = parse_order_text("Sigara\nMesut", matcher)

    assert result.metadata.name == "Mesut"
    assert len(result.items) == 1
    assert result.items[0].match.product.name == "Sigara Böreği"


def test_only_first_line_of_each_kind_is_kept(matcher):
    text = "22 Aralık 2025\n23/12/2025\nMesut\nAhmet\n0634316902\n0612345678\n2 Mantı"
    result = parse_order_text(text, matcher)

    assert result.metadata.date == "2025-12-22"
    assert result.metadata.phone == "+31634316902"
    assert result.metadata.name == "Mesut"
    # once a name is known a second name-like line is kept as a product line
    assert [item.searched_name for item in result.items] == ["Ahmet", "Mantı"]
    assert result.items[0].match is None


def test_customer_resolved_by_name(matcher, customers):
    result = parse_order_text("Ayşe\n1 Baklava", matcher, customers)
    assert result.metadata.matched_customer.id == "c-2"


def test_empty_input(matcher):
    for text in ("", "   \n\n", None):
        result = parse_order_text(text, matcher)
        assert result.items == []
        assert result.metadata.date is None
        assert result.metadata.matched_customer is None


def test_parsing_is_deterministic(matcher, customers):
    parser = OrderTextParser(matcher)
    text = ORDER + "Mercimek Corbazi\nboregi\n"
    assert parser.parse(text, customers).to_dict() == parser.parse(text, customers).to_dict()


def test_to_dict_is_json_ready(matcher):
    payload = parse_order_text(ORDER, matcher).to_dict()

    assert payload["estimated_total"] == "40.00"
    first = payload["items"][0]
    assert first["quantity"] == 2
    assert first["unit_price"] == "6.50"
    assert first["match"]["match_type"] == "exact"
    assert payload["metadata"]["matched_customer"] is None
