from datetime import timedelta
from decimal import Decimal

from invoice_ma.models import BusinessTypeEnum
from invoice_ma.models.base import today


def _headers(account):
    return {"X-Account-Id": str(account.id)}


def _create(client, account, customer, number, **fields):
    payload = {
        "client_id": customer.id,
        "invoice_number": number,
        "issue_date": today().isoformat(),
        "due_date": today().isoformat(),
        "status": "sent",
        "items": [
            {
                "description": "Consulting",
                "quantity": "1",
                "unit_price": "250",
                "tax_rate": "20",
            }
        ],
    }
    payload.update(fields)
    response = client.post("/api/invoices", json=payload, headers=_headers(account))
    assert response.status_code == 201
    return response.json()


def test_cash_flow_endpoint(client, make_account, make_client):
    account = make_account()
    customer = make_client(account)
    _create(
        client,
        account,
        customer,
        "CF-1",
        due_date=(today() + timedelta(days=2)).isoformat(),
    )

    response = client.get(
        "/api/reports/cash-flow", params={"days": 5}, headers=_headers(account)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["days"] == 5
    assert len(body["entries"]) == 5
    assert Decimal(body["entries"][2]["total"]) == Decimal("300")
    assert Decimal(body["total"]) == Decimal("300")


def test_cash_flow_rejects_out_of_range_days(client, make_account):
    account = make_account()

    response = client.get(
        "/api/reports/cash-flow", params={"days": 0}, headers=_headers(account)
    )

    assert response.status_code == 422


def test_tva_report(client, make_account, make_client):
    account = make_account()
    customer = make_client(account)
    start = today() - timedelta(days=10)
    end = today() + timedelta(days=10)
    _create(client, account, customer, "T-1")
    _create(
        client,
        account,
        customer,
        "T-2",
        status="paid",
        payment_date=today().isoformat(),
    )

    response = client.get(
        "/api/reports/tva",
        params={"start": start.isoformat(), "end": end.isoformat()},
        headers=_headers(account),
    )

    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["invoiced_tax"]) == Decimal("100")
    assert Decimal(body["collected_tax"]) == Decimal("50")
    assert [row["invoice_number"] for row in body["sales"]] == ["T-1", "T-2"]
    assert [row["invoice_number"] for row in body["collections"]] == ["T-2"]


def test_tva_report_rejects_inverted_range(client, make_account):
    account = make_account()

    response = client.get(
        "/api/reports/tva",
        params={"start": "2026-03-31", "end": "2026-01-01"},
        headers=_headers(account),
    )

    assert response.status_code == 422
    assert response.json()["message"] == "Date range invalid."


def test_performance_report(client, make_account, make_client):
    account = make_account()
    atlas = make_client(account, name="Atlas")
    rif = make_client(account, name="Rif")
    _create(client, account, atlas, "P-1", status="paid")
    _create(
        client,
        account,
        rif,
        "P-2",
        status="paid",
        items=[
            {
                "description": "Design",
                "quantity": "2",
                "unit_price": "400",
                "tax_rate": "20",
            }
        ],
    )

    response = client.get("/api/reports/performance", headers=_headers(account))

    assert response.status_code == 200
    body = response.json()
    assert [row["name"] for row in body["top_clients"]] == ["Rif", "Atlas"]
    assert [row["description"] for row in body["top_services"]] == [
        "Design",
        "Consulting",
    ]
    assert {row["name"] for row in body["payment_habits"]} == {"Atlas", "Rif"}


def test_dashboard_for_auto_entrepreneur(client, make_account, make_client):
    account = make_account(business_type=BusinessTypeEnum.AUTO_ENTREPRENEUR)
    customer = make_client(account)
    _create(client, account, customer, "D-1", status="paid")
    _create(client, account, customer, "D-2")

    response = client.get("/api/reports/dashboard", headers=_headers(account))

    assert response.status_code == 200
    body = response.json()
    assert body["paid_count"] == 1
    assert body["unpaid_count"] == 1
    assert Decimal(body["paid_revenue"]) == Decimal("250")
    assert Decimal(body["revenue_cap"]["cap"]) == Decimal("200000")


def test_exchange_rate_endpoint(client):
    response = client.get("/api/exchange-rate", params={"from": "EUR", "to": "MAD"})

    assert response.status_code == 200
    assert Decimal(response.json()["rate"]) == Decimal("10.95")


def test_exchange_rate_unknown_currency(client):
    response = client.get("/api/exchange-rate", params={"from": "GBP", "to": "MAD"})

    assert response.status_code == 422
