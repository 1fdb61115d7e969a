"""Lookup of an existing customer from the metadata found in a message."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import Customer
from .utils import collapse_whitespace, digits_only, normalize_text


LOGGER = logging.getLogger(__name__)

PHONE_SUFFIX_LENGTH = 9


def phones_match(first: Optional[str], second: Optional[str]) -> bool:
    """Compare two phone numbers on their trailing digits.

    Country code prefixes differ between stored and typed numbers, so the
    comparison checks whether the last nine digits of either number end the
    other one.  Numbers without digits never match.
    """

    a = digits_only(first)
    b = digits_only(second)
    if not a or not b:
        return False
    return b.endswith(a[-PHONE_SUFFIX_LENGTH:]) or a.endswith(b[-PHONE_SUFFIX_LENGTH:])


def names_match(first: Optional[str], second: Optional[str]) -> bool:
    a = collapse_whitespace(normalize_text(first))
    b = collapse_whitespace(normalize_text(second))
    if not a or not b:
        return False
    return a == b or a in b or b in a


def resolve_customer(
    customers: Iterable[Customer],
    *,
    phone: Optional[str] = None,
    name: Optional[str] = None,
) -> Optional[Customer]:
    """Return the first known customer matching ``phone``, else ``name``."""

    candidates = list(customers)
    if not candidates:
        return None

    if phone:
        for customer in candidates:
            if phones_match(phone, customer.phone):
                LOGGER.debug("Customer %s matched by phone %s", customer.id, phone)
                return customer

    if name:
        for customer in candidates:
            if names_match(name, customer.name):
                LOGGER.debug("Customer %s matched by name %r", customer.id, name)
                return customer

    return None


__all__ = ["PHONE_SUFFIX_LENGTH", "phones_match", "names_match", "resolve_customer"]
