from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_account
from ..models import Account, CurrencyEnum
from ..schemas import (
    CashFlowDay,
    CashFlowForecast,
    CollectionRow,
    DashboardSummary,
    ExchangeRate,
    PaymentHabit,
    Performance,
    RankedClient,
    RankedService,
    SalesRow,
    TvaReport,
)
from ..services import exchange_rates, reporting
from ..services import clients as clients_service
from ..services import invoices as invoices_service
from ..services.pricing import money

router = APIRouter()


def _converter(currency: CurrencyEnum | None):
    if currency is None:
        return None
    return exchange_rates.converter_to(
        exchange_rates.get_exchange_rate_source(), currency.value
    )


@router.get("/reports/tva", response_model=TvaReport)
def tva_report(
    start: date | None = None,
    end: date | None = None,
    currency: CurrencyEnum | None = None,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> TvaReport:
    default_period = reporting.previous_quarter()
    period = reporting.DateRange(
        start=start or default_period.start, end=end or default_period.end
    )
    invoices = invoices_service.account_invoices(db, account)
    convert = _converter(currency)
    return TvaReport(
        start=period.start,
        end=period.end,
        currency=currency.value if currency else None,
        invoiced_tax=reporting.invoiced_tax(invoices, period, convert),
        collected_tax=reporting.collected_tax(invoices, period, convert),
        sales=[SalesRow(**row) for row in reporting.sales_report(invoices, period)],
        collections=[
            CollectionRow(**row)
            for row in reporting.collections_report(invoices, period)
        ],
    )


@router.get("/reports/cash-flow", response_model=CashFlowForecast)
def cash_flow(
    days: int = Query(30, ge=1, le=366),
    currency: CurrencyEnum | None = None,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> CashFlowForecast:
    invoices = invoices_service.account_invoices(db, account)
    entries = reporting.cash_flow_forecast(invoices, days, convert=_converter(currency))
    return CashFlowForecast(
        days=days,
        currency=currency.value if currency else None,
        total=money(sum(total for _, total in entries)),
        entries=[CashFlowDay(day=day, total=total) for day, total in entries],
    )


@router.get("/reports/performance", response_model=Performance)
def performance(
    limit: int = Query(5, ge=1, le=50),
    currency: CurrencyEnum | None = None,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> Performance:
    invoices = invoices_service.account_invoices(db, account)
    names = {
        client.id: client.name
        for client in clients_service.list_clients(db, account)
    }
    convert = _converter(currency)
    return Performance(
        currency=currency.value if currency else None,
        top_clients=[
            RankedClient(
                client_id=entry.key,
                name=names.get(entry.key, ""),
                total=entry.total,
            )
            for entry in reporting.top_clients_by_revenue(invoices, limit, convert)
        ],
        top_services=[
            RankedService(description=entry.key, total=entry.total)
            for entry in reporting.top_services_by_revenue(invoices, limit, convert)
        ],
        payment_habits=[
            PaymentHabit(
                client_id=client_id,
                name=names.get(client_id, ""),
                average_delay_days=delay,
            )
            for client_id, delay in reporting.client_payment_habits(invoices).items()
        ],
    )


@router.get("/reports/dashboard", response_model=DashboardSummary)
def dashboard(
    account: Account = Depends(get_current_account), db: Session = Depends(get_db)
) -> DashboardSummary:
    invoices = invoices_service.account_invoices(db, account)
    company = account.company_settings
    return DashboardSummary(
        **reporting.dashboard_summary(
            invoices,
            account.business_type,
            company.auto_entrepreneur_type if company else None,
        )
    )


@router.get("/exchange-rate", response_model=ExchangeRate)
def exchange_rate(
    from_currency: CurrencyEnum = Query(..., alias="from"),
    to_currency: CurrencyEnum = Query(..., alias="to"),
) -> ExchangeRate:
    source = exchange_rates.get_exchange_rate_source()
    return ExchangeRate(
        from_currency=from_currency.value,
        to_currency=to_currency.value,
        rate=source.rate(from_currency.value, to_currency.value),
    )
