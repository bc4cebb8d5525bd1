"""Summary figures over invoice collections.

Everything here is a pure fold over invoices the caller has already loaded:
nothing reads or writes the database. Money folds take an optional
``convert(amount, currency)`` callable to normalise mixed-currency
collections; without it amounts are summed as stored.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from ..errors import ValidationError
from ..models import (
    UNPAID_STATUSES,
    AutoEntrepreneurTypeEnum,
    BusinessTypeEnum,
    Invoice,
    InvoiceStatusEnum,
)
from ..models.base import today as _today
from .pricing import line_net, money

Converter = Callable[[Decimal, str], Decimal]

DEFAULT_SERVICE_LABEL = "Service"

# Annual turnover ceilings for the auto-entrepreneur status, in MAD.
AUTO_ENTREPRENEUR_REVENUE_CAPS = {
    AutoEntrepreneurTypeEnum.SERVICES: Decimal("200000"),
    AutoEntrepreneurTypeEnum.COMMERCIAL: Decimal("500000"),
    AutoEntrepreneurTypeEnum.INDUSTRIAL: Decimal("500000"),
    AutoEntrepreneurTypeEnum.ARTISANAL: Decimal("500000"),
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range used by the TVA views."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError("Date range invalid.")

    def __contains__(self, value: date | None) -> bool:
        return value is not None and self.start <= value <= self.end


@dataclass(frozen=True)
class RankedEntry:
    key: object
    total: Decimal


def _amount(value, currency, convert: Converter | None) -> Decimal:
    amount = Decimal(str(value or 0))
    if convert is None:
        return amount
    return convert(amount, _currency_code(currency))


def _currency_code(currency) -> str:
    return currency.value if hasattr(currency, "value") else str(currency)


def _status(inv: Invoice) -> InvoiceStatusEnum:
    return InvoiceStatusEnum(inv.status)


def _paid(invoices: Iterable[Invoice]) -> list[Invoice]:
    return [inv for inv in invoices if _status(inv) == InvoiceStatusEnum.PAID]


def invoiced_tax(
    invoices: Iterable[Invoice],
    period: DateRange,
    convert: Converter | None = None,
) -> Decimal:
    return money(
        sum(
            (
                _amount(inv.tax_amount, inv.currency, convert)
                for inv in invoices
                if inv.issue_date in period
            ),
            Decimal("0"),
        )
    )


def collected_tax(
    invoices: Iterable[Invoice],
    period: DateRange,
    convert: Converter | None = None,
) -> Decimal:
    return money(
        sum(
            (
                _amount(inv.tax_amount, inv.currency, convert)
                for inv in invoices
                if inv.payment_date in period
            ),
            Decimal("0"),
        )
    )


def cash_flow_forecast(
    invoices: Iterable[Invoice],
    days: int,
    today: date | None = None,
    convert: Converter | None = None,
) -> list[tuple[date, Decimal]]:
    """Expected income per day for ``days`` days, index 0 being today."""
    if days < 0:
        raise ValidationError("Forecast length cannot be negative.")
    start = today or _today()
    daily = {start + timedelta(days=offset): Decimal("0") for offset in range(days)}
    for inv in invoices:
        if _status(inv) not in UNPAID_STATUSES:
            continue
        if inv.due_date in daily:
            daily[inv.due_date] += _amount(inv.total, inv.currency, convert)
    return [(day, money(total)) for day, total in daily.items()]


def _rank(totals: dict, n: int) -> list[RankedEntry]:
    if n < 0:
        raise ValidationError("Ranking size cannot be negative.")
    # sorted() is stable, so equal totals keep first-encountered order.
    ranked = sorted(totals.items(), key=lambda entry: entry[1], reverse=True)
    return [RankedEntry(key=key, total=money(total)) for key, total in ranked[:n]]


def top_clients_by_revenue(
    invoices: Iterable[Invoice], n: int, convert: Converter | None = None
) -> list[RankedEntry]:
    totals: dict[int, Decimal] = {}
    for inv in _paid(invoices):
        totals[inv.client_id] = totals.get(inv.client_id, Decimal("0")) + _amount(
            inv.total, inv.currency, convert
        )
    return _rank(totals, n)


def top_services_by_revenue(
    invoices: Iterable[Invoice], n: int, convert: Converter | None = None
) -> list[RankedEntry]:
    totals: dict[str, Decimal] = {}
    for inv in _paid(invoices):
        for item in inv.items:
            label = (item.description or "").strip() or DEFAULT_SERVICE_LABEL
            totals[label] = totals.get(label, Decimal("0")) + _amount(
                line_net(item), inv.currency, convert
            )
    return _rank(totals, n)


def _payment_delays(invoices: Iterable[Invoice]) -> dict[int, list[int]]:
    delays: dict[int, list[int]] = {}
    for inv in _paid(invoices):
        if inv.payment_date is None:
            continue
        delays.setdefault(inv.client_id, []).append(
            (inv.payment_date - inv.due_date).days
        )
    return delays


def average_payment_delay(
    invoices: Iterable[Invoice], client_id: int
) -> float | None:
    """Mean days between due date and payment; negative means paid early."""
    delays = _payment_delays(invoices).get(client_id)
    if not delays:
        return None
    return sum(delays) / len(delays)


def client_payment_habits(invoices: Iterable[Invoice]) -> dict[int, int]:
    return {
        client_id: round(sum(delays) / len(delays))
        for client_id, delays in _payment_delays(invoices).items()
    }


def sales_report(invoices: Iterable[Invoice], period: DateRange) -> list[dict]:
    return [
        {
            "invoice_number": inv.invoice_number,
            "issue_date": inv.issue_date,
            "client_name": inv.client.name,
            "client_ice": inv.client.ice,
            "sub_total": inv.sub_total,
            "tax_amount": inv.tax_amount,
            "total": inv.total,
            "currency": _currency_code(inv.currency),
        }
        for inv in invoices
        if inv.issue_date in period
    ]


def collections_report(invoices: Iterable[Invoice], period: DateRange) -> list[dict]:
    return [
        {
            "invoice_number": inv.invoice_number,
            "payment_date": inv.payment_date,
            "client_name": inv.client.name,
            "client_ice": inv.client.ice,
            "total": inv.total,
            "tax_amount": inv.tax_amount,
            "currency": _currency_code(inv.currency),
        }
        for inv in invoices
        if inv.payment_date in period
    ]


def dashboard_summary(
    invoices: Sequence[Invoice],
    business_type: BusinessTypeEnum,
    auto_entrepreneur_type: AutoEntrepreneurTypeEnum | None = None,
    today: date | None = None,
    convert: Converter | None = None,
) -> dict:
    paid = _paid(invoices)
    summary = {
        "invoice_count": len(invoices),
        "paid_count": len(paid),
        "unpaid_count": sum(1 for inv in invoices if _status(inv) in UNPAID_STATUSES),
        "paid_revenue": money(
            sum((_amount(inv.total, inv.currency, convert) for inv in paid), Decimal("0"))
        ),
        "revenue_cap": None,
    }
    if BusinessTypeEnum(business_type) != BusinessTypeEnum.AUTO_ENTREPRENEUR:
        return summary

    year = (today or _today()).year
    annual = money(
        sum(
            (
                _amount(inv.total, inv.currency, convert)
                for inv in paid
                if inv.issue_date.year == year
            ),
            Decimal("0"),
        )
    )
    cap = AUTO_ENTREPRENEUR_REVENUE_CAPS[
        AutoEntrepreneurTypeEnum(
            auto_entrepreneur_type or AutoEntrepreneurTypeEnum.SERVICES
        )
    ]
    summary["revenue_cap"] = {
        "year": year,
        "annual_revenue": annual,
        "cap": cap,
        "percentage": min(annual / cap * 100, Decimal("100")).quantize(Decimal("0.1")),
    }
    return summary


def previous_quarter(today: date | None = None) -> DateRange:
    """The full calendar quarter before the one containing ``today``."""
    current = today or _today()
    quarter_start = date(current.year, (current.month - 1) // 3 * 3 + 1, 1)
    end = quarter_start - timedelta(days=1)
    start = date(end.year, (end.month - 1) // 3 * 3 + 1, 1)
    return DateRange(start=start, end=end)
