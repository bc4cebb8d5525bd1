"""Invoice line, tax and total computation.

Amounts accumulate at full Decimal precision and are rounded half-up to
cents only when the totals are produced, so per-line rounding never
compounds. ``total`` is the sum of the two rounded figures, which keeps
``total == sub_total + tax_amount`` exact.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Protocol

from ..errors import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class PricedLine(Protocol):
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    sub_total: Decimal
    tax_amount: Decimal
    total: Decimal


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid amount: {value!r}.") from exc


def money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_net(line: PricedLine) -> Decimal:
    return to_decimal(line.quantity) * to_decimal(line.unit_price)


def line_tax(line: PricedLine) -> Decimal:
    return line_net(line) * to_decimal(line.tax_rate) / HUNDRED


def validate_line(line: PricedLine, position: int = 0) -> None:
    label = f"Item {position + 1}"
    if to_decimal(line.quantity) < 0:
        raise ValidationError(f"{label}: quantity cannot be negative.")
    if to_decimal(line.unit_price) < 0:
        raise ValidationError(f"{label}: unit price cannot be negative.")
    rate = to_decimal(line.tax_rate)
    if rate < 0 or rate > HUNDRED:
        raise ValidationError(f"{label}: tax rate must be between 0 and 100.")


def compute_totals(items: Iterable[PricedLine], tax_exempt: bool) -> InvoiceTotals:
    lines = list(items)
    if not lines:
        raise ValidationError("An invoice requires at least one item.")

    sub_total = Decimal("0")
    tax_amount = Decimal("0")
    for position, line in enumerate(lines):
        validate_line(line, position)
        sub_total += line_net(line)
        if not tax_exempt:
            tax_amount += line_tax(line)

    sub_total = money(sub_total)
    tax_amount = money(tax_amount)
    return InvoiceTotals(
        sub_total=sub_total,
        tax_amount=tax_amount,
        total=sub_total + tax_amount,
    )
