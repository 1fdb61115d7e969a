"""Streamlit dashboard used to review a parsed order message.

Run it through ``order-parser ui`` (or ``streamlit run`` on this file with
``-- --config config.yaml``).  Lines the matcher could not resolve, or resolved
with low confidence, can be corrected here by picking an alternative or a
product from the catalog search.
"""

from __future__ import annotations

import argparse
import json
from typing import List, Optional

import pandas as pd
import streamlit as st

from order_parser.config import Settings
from order_parser.core.models import ParsedItem, ParseResult
from order_parser.core.pipeline import OrderService
from order_parser.core.review import (
    adjust_quantity,
    assign_product,
    choose_variation,
    confidence_level,
    offers_alternatives,
    remove_item,
    select_alternative,
)


RESULT_KEY = "parse_result"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config.yaml")
    args, _ = parser.parse_known_args()
    return args


@st.cache_resource(show_spinner=False)
def load_service(config_path: str) -> OrderService:
    return OrderService(Settings.load(config_path))


def items_frame(items: List[ParsedItem]) -> pd.DataFrame:
    rows = []
    for item in items:
        match = item.match
        rows.append(
            {
                "Line": item.original,
                "Quantity": item.quantity,
                "Product": match.product.name if match else "",
                "Variation": item.variation or "",
                "Confidence": round(match.confidence, 2) if match else None,
                "Level": confidence_level(match.confidence if match else None),
                "Type": match.match_type if match else "",
                "Unit price": str(item.unit_price()) if match else "",
            }
        )
    return pd.DataFrame(rows)


def render_metadata(result: ParseResult) -> None:
    metadata = result.metadata
    st.subheader("Customer")
    col_date, col_name, col_phone = st.columns(3)
    col_date.metric("Date", metadata.date or "-")
    col_name.metric("Name", metadata.name or "-")
    col_phone.metric("Phone", metadata.phone or "-")
    st.write(f"Address: {metadata.address or '-'}")
    if metadata.matched_customer:
        st.success(f"Known customer: {metadata.matched_customer.name} (#{metadata.matched_customer.id})")
    elif metadata.name or metadata.phone:
        st.info("No known customer matched; a new customer can be created from these fields.")


def review_item(service: OrderService, items: List[ParsedItem], index: int) -> Optional[List[ParsedItem]]:
    """Render the controls of one line; returns the edited item list when changed."""

    item = items[index]

    def updated(edited: ParsedItem) -> List[ParsedItem]:
        return [edited if position == index else other for position, other in enumerate(items)]

    label = item.match.product.name if item.match else "not found"
    with st.expander(f"{item.quantity} x {item.searched_name} → {label}", expanded=item.match is None):
        col_minus, col_plus, _, col_remove = st.columns([1, 1, 5, 1])
        if col_minus.button("−", key=f"minus-{index}"):
            return updated(adjust_quantity(item, -1))
        if col_plus.button("+", key=f"plus-{index}"):
            return updated(adjust_quantity(item, 1))
        if col_remove.button("Remove", key=f"remove-{index}"):
            return remove_item(items, index)

        if offers_alternatives(item):
            labels = [f"{alt.product.name} ({alt.confidence:.0%})" for alt in item.match.alternatives]
            choice = st.radio("Alternatives", ["(keep)"] + labels, key=f"alt-{index}")
            if choice != "(keep)":
                return updated(select_alternative(item, item.match.alternatives[labels.index(choice)]))

        if item.match and item.match.product.variations:
            options = ["(none)"] + list(item.match.product.variations)
            current = item.variation if item.variation in options else "(none)"
            variation = st.selectbox("Variation", options, index=options.index(current), key=f"var-{index}")
            if variation != current:
                return updated(choose_variation(item, None if variation == "(none)" else variation))

        query = st.text_input("Search the catalog", key=f"search-{index}")
        if query:
            results = service.search(query)
            if not results:
                st.warning("No products found.")
            for position, result in enumerate(results):
                if st.button(f"Use {result.product.name} ({result.confidence:.0%})", key=f"use-{index}-{position}"):
                    return updated(assign_product(item, result.product))
    return None


def main() -> None:
    args = parse_args()
    st.set_page_config(page_title="Order parser", layout="wide")
    st.title("Order message parser")

    service = load_service(args.config)
    st.sidebar.caption(f"Config: {args.config}")
    st.sidebar.write(f"Catalog: {len(service.products)} products")
    if st.sidebar.button("Reload catalog"):
        service.reload_catalog()
        st.sidebar.success("Catalog reloaded.")

    text = st.text_area("Paste the order message", height=220)
    if st.button("Parse") and text.strip():
        st.session_state[RESULT_KEY] = service.parse(text)

    result: Optional[ParseResult] = st.session_state.get(RESULT_KEY)
    if result is None:
        return

    render_metadata(result)

    st.subheader("Items")
    st.dataframe(items_frame(result.items))
    for index in range(len(result.items)):
        edited = review_item(service, result.items, index)
        if edited is not None:
            st.session_state[RESULT_KEY] = ParseResult(items=edited, metadata=result.metadata)
            st.rerun()

    st.metric("Estimated total", str(result.estimated_total()))
    unmatched = len(result.unmatched)
    if unmatched:
        st.warning(f"{unmatched} line(s) still need a product.")
    st.download_button(
        "Download JSON",
        data=json.dumps(result.to_dict(), ensure_ascii=False, indent=2),
        file_name="order.json",
        mime="application/json",
    )


if __name__ == "__main__":  # pragma: no cover
    main()
