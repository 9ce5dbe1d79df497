"""Tests for money helpers and log sanitizing"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from techmart.logging import sanitize_id_for_logging
from techmart.services.models import Product
from techmart.services.money import format_money, parse_price, round_money, to_decimal


@pytest.mark.parametrize("value,expected", [
    (None, Decimal("0")),
    ("19.99", Decimal("19.99")),
    (0.1, Decimal("0.1")),
    (5, Decimal("5")),
    ("abc", Decimal("0")),
])
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected


def test_round_money_half_up():
    assert round_money("240.025") == Decimal("240.03")
    assert round_money("0.004") == Decimal("0.00")


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(10) == "$10.00"
    assert format_money("0.005") == "$0.01"


@pytest.mark.parametrize("value,expected", [
    ("19.99", Decimal("19.99")),
    (1199.99, Decimal("1199.99")),
    (0, Decimal("0")),
])
def test_parse_price(value, expected):
    assert parse_price(value) == expected


@pytest.mark.parametrize("value", [None, "not-a-price", "", "-1", "NaN", "Infinity", True, [10]])
def test_parse_price_rejects(value):
    with pytest.raises(ValueError):
        parse_price(value)


def test_product_rejects_unparseable_price():
    """A corrupt catalog row must not price the product at $0."""
    with pytest.raises(ValidationError):
        Product(id=1, sell_price="not-a-price", quantity=5)


def test_product_rejects_negative_price():
    with pytest.raises(ValidationError):
        Product(id=1, sell_price=-5, quantity=5)


@pytest.mark.parametrize("value,expected", [
    (None, "N/A"),
    ("", "N/A"),
    (42, "42"),
    ("123456789abc", "12345678"),
])
def test_sanitize_id_for_logging(value, expected):
    assert sanitize_id_for_logging(value) == expected
