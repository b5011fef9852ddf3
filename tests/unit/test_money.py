"""Unit tests for Indian-locale money and weight formatting."""

from decimal import Decimal

from app.utils.money import format_amount, format_inr, format_weight, group_indian, to_decimal


def test_group_indian():
    assert group_indian("999") == "999"
    assert group_indian("1000") == "1,000"
    assert group_indian("123456") == "1,23,456"
    assert group_indian("12345678") == "1,23,45,678"


def test_format_inr():
    assert format_inr(Decimal("123456.5")) == "₹1,23,456.50"
    assert format_inr(7000) == "₹7,000.00"
    assert format_inr(None) == "₹0.00"
    assert format_inr("-2500") == "-₹2,500.00"


def test_format_amount_rounds_to_paise():
    assert format_amount("10.005") == "10.01"
    assert format_amount(0.1) == "0.10"


def test_format_weight():
    assert format_weight(Decimal("12")) == "12"
    assert format_weight(Decimal("12.50")) == "12.5"
    assert format_weight("1500.25") == "1,500.25"
    assert format_weight(0) == "—"
    assert format_weight(None) == "—"


def test_to_decimal_tolerates_garbage():
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal(2.5) == Decimal("2.5")
