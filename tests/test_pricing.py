from dataclasses import dataclass
from decimal import Decimal

import pytest

from invoice_ma.errors import ValidationError
from invoice_ma.services.pricing import compute_totals, line_net, money


@dataclass
class Line:
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal


def _lines():
    return [
        Line(Decimal("2"), Decimal("100"), Decimal("20")),
        Line(Decimal("1"), Decimal("50"), Decimal("0")),
    ]


def test_totals_with_tax():
    totals = compute_totals(_lines(), tax_exempt=False)

    assert totals.sub_total == Decimal("250.00")
    assert totals.tax_amount == Decimal("40.00")
    assert totals.total == Decimal("290.00")


def test_tax_exempt_account_pays_no_tax():
    totals = compute_totals(_lines(), tax_exempt=True)

    assert totals.sub_total == Decimal("250.00")
    assert totals.tax_amount == Decimal("0.00")
    assert totals.total == Decimal("250.00")


def test_total_is_sum_of_rounded_parts():
    lines = [
        Line(Decimal("3"), Decimal("0.335"), Decimal("20")),
        Line(Decimal("1"), Decimal("0.005"), Decimal("7")),
    ]

    totals = compute_totals(lines, tax_exempt=False)

    assert totals.sub_total == Decimal("1.01")
    assert totals.tax_amount == Decimal("0.20")
    assert totals.total == totals.sub_total + totals.tax_amount


def test_rounding_happens_once_at_output():
    # Three lines of 0.005 round to 0.02 together, not 0.03 line by line.
    lines = [Line(Decimal("1"), Decimal("0.005"), Decimal("0")) for _ in range(3)]

    totals = compute_totals(lines, tax_exempt=False)

    assert totals.sub_total == Decimal("0.02")


def test_money_rounds_half_up():
    assert money(Decimal("2.345")) == Decimal("2.35")
    assert money("0.125") == Decimal("0.13")


def test_line_net_accepts_plain_numbers():
    assert line_net(Line(2, "12.50", 0)) == Decimal("25.00")


def test_empty_invoice_rejected():
    with pytest.raises(ValidationError):
        compute_totals([], tax_exempt=False)


@pytest.mark.parametrize(
    "line, message",
    [
        (Line(Decimal("-1"), Decimal("10"), Decimal("20")), "quantity"),
        (Line(Decimal("1"), Decimal("-10"), Decimal("20")), "unit price"),
        (Line(Decimal("1"), Decimal("10"), Decimal("101")), "tax rate"),
        (Line(Decimal("1"), Decimal("10"), Decimal("-5")), "tax rate"),
    ],
)
def test_invalid_lines_rejected(line, message):
    with pytest.raises(ValidationError) as excinfo:
        compute_totals([line], tax_exempt=False)

    assert message in excinfo.value.message
    assert excinfo.value.message.startswith("Item 1")
