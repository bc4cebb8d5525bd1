from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class SalesRow(BaseModel):
    invoice_number: str
    issue_date: date
    client_name: str
    client_ice: str | None
    sub_total: Decimal
    tax_amount: Decimal
    total: Decimal
    currency: str


class CollectionRow(BaseModel):
    invoice_number: str
    payment_date: date
    client_name: str
    client_ice: str | None
    total: Decimal
    tax_amount: Decimal
    currency: str


class TvaReport(BaseModel):
    start: date
    end: date
    currency: str | None
    invoiced_tax: Decimal
    collected_tax: Decimal
    sales: list[SalesRow]
    collections: list[CollectionRow]


class CashFlowDay(BaseModel):
    day: date
    total: Decimal


class CashFlowForecast(BaseModel):
    days: int
    currency: str | None
    total: Decimal
    entries: list[CashFlowDay]


class RankedClient(BaseModel):
    client_id: int
    name: str
    total: Decimal


class RankedService(BaseModel):
    description: str
    total: Decimal


class PaymentHabit(BaseModel):
    client_id: int
    name: str
    average_delay_days: int


class Performance(BaseModel):
    currency: str | None
    top_clients: list[RankedClient]
    top_services: list[RankedService]
    payment_habits: list[PaymentHabit]


class RevenueCap(BaseModel):
    year: int
    annual_revenue: Decimal
    cap: Decimal
    percentage: Decimal


class DashboardSummary(BaseModel):
    invoice_count: int
    paid_count: int
    unpaid_count: int
    paid_revenue: Decimal
    revenue_cap: RevenueCap | None


class ExchangeRate(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal
