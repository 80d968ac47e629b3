import pytest

from spendwise import formatting
from spendwise.formatting import format_currency


@pytest.fixture(autouse=True)
def _rupee(monkeypatch):
    monkeypatch.setattr(formatting, 'CURRENCY_SYMBOL', '₹')


def test_whole_amounts_drop_decimals():
    assert format_currency(4500) == '₹4,500'
    assert format_currency(200.0) == '₹200'
    assert format_currency(0) == '₹0'


def test_fractional_amounts_show_two_digits():
    assert format_currency(99.5) == '₹99.50'
    assert format_currency(1234.567) == '₹1,234.57'


def test_negative_and_unsigned():
    assert format_currency(-100) == '-₹100'
    assert format_currency(12.5, include_sign=False) == '12.50'
