from datetime import date
from decimal import Decimal

import pytest

from models.daily_balances import VendorDailyBalance
from models.vendors import Vendor, VendorCategory
from utils import sqlalchemy_to_dict
from utils.formatting import format_indian_currency, to_money


@pytest.mark.parametrize("raw, expected", [
    (None, Decimal("0.00")),
    (0, Decimal("0.00")),
    (10.005, Decimal("10.01")),
    (Decimal("24.73975"), Decimal("24.74")),
    (Decimal("-0.125"), Decimal("-0.13")),
])
def test_to_money(raw, expected):
    assert to_money(raw) == expected


@pytest.mark.parametrize("amount, expected", [
    (Decimal("0"), "₹ 0.00"),
    (Decimal("999.5"), "₹ 999.50"),
    (Decimal("1000"), "₹ 1,000.00"),
    (Decimal("1234567.8"), "₹ 12,34,567.80"),
    (Decimal("-250000"), "₹ -2,50,000.00"),
])
def test_format_indian_currency(amount, expected):
    assert format_indian_currency(amount) == expected


def test_sqlalchemy_to_dict_is_json_friendly():
    vendor = Vendor(id=3, name="Ramesh", category=VendorCategory.KABADIWALA)

    values = sqlalchemy_to_dict(vendor)

    assert values["name"] == "Ramesh"
    assert values["category"] == "KABADIWALA"
    assert sqlalchemy_to_dict(None) is None


def test_sqlalchemy_to_dict_handles_dates():
    snapshot = VendorDailyBalance(vendor_id=1, balance_date=date(2025, 1, 10), current_balance=Decimal("12.50"))

    values = sqlalchemy_to_dict(snapshot)

    assert values["balance_date"] == "2025-01-10"
    assert values["current_balance"] == "12.50"
