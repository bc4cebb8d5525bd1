import threading
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import update

from invoice_ma.errors import EditConflict
from invoice_ma.models import Account, Invoice
from invoice_ma.schemas import InvoiceWrite
from invoice_ma.services import invoices as invoices_service


def _payload(customer_id, number="INV-2026-001", notes=None):
    return InvoiceWrite(
        client_id=customer_id,
        invoice_number=number,
        issue_date=date(2026, 3, 1),
        due_date=date(2026, 3, 31),
        status="sent",
        notes=notes,
        items=[{"description": "Consulting", "quantity": "1", "unit_price": "100"}],
    )


def _hold_after_reads(monkeypatch, parties):
    """Make each thread wait in compute_totals until every thread has read."""
    barrier = threading.Barrier(parties, timeout=10)
    waited = set()
    real = invoices_service.compute_totals

    def compute_totals(items, tax_exempt):
        ident = threading.get_ident()
        if ident not in waited:
            waited.add(ident)
            barrier.wait()
        return real(items, tax_exempt)

    monkeypatch.setattr(invoices_service, "compute_totals", compute_totals)


def _run_threads(SessionLocal, account_id, actions):
    results = []

    def worker(action):
        with SessionLocal() as db:
            account = db.get(Account, account_id)
            try:
                action(db, account)
            except EditConflict:
                results.append("EditConflict")
            except Exception as exc:
                results.append(type(exc).__name__)
            else:
                results.append("ok")

    threads = [threading.Thread(target=worker, args=(action,)) for action in actions]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return sorted(results)


def _state(SessionLocal, account_id):
    with SessionLocal() as db:
        credits = db.get(Account, account_id).credits
        invoices = db.query(Invoice).order_by(Invoice.id).all()
        return credits, [invoice.edit_count for invoice in invoices]


def test_concurrent_creates_spend_the_last_credit_once(
    monkeypatch, SessionLocal, make_account, make_client
):
    account = make_account(credits=1)
    customer_id = make_client(account).id
    account_id = account.id
    _hold_after_reads(monkeypatch, 2)

    results = _run_threads(
        SessionLocal,
        account_id,
        [
            lambda db, acc: invoices_service.create_invoice(
                db, acc, _payload(customer_id, "C-1")
            ),
            lambda db, acc: invoices_service.create_invoice(
                db, acc, _payload(customer_id, "C-2")
            ),
        ],
    )

    assert results == ["InsufficientCredits", "ok"]
    credits, edit_counts = _state(SessionLocal, account_id)
    assert credits == 0
    assert len(edit_counts) == 1


def test_concurrent_edits_each_count_once(
    monkeypatch, SessionLocal, db_session, make_account, make_client
):
    account = make_account(credits=5)
    customer_id = make_client(account).id
    account_id = account.id
    invoice_id = invoices_service.create_invoice(
        db_session, account, _payload(customer_id)
    ).id
    _hold_after_reads(monkeypatch, 2)

    results = _run_threads(
        SessionLocal,
        account_id,
        [
            lambda db, acc: invoices_service.update_invoice(
                db, acc, invoice_id, _payload(customer_id, notes="edit a")
            ),
            lambda db, acc: invoices_service.update_invoice(
                db, acc, invoice_id, _payload(customer_id, notes="edit b")
            ),
        ],
    )

    assert results == ["ok", "ok"]
    credits, edit_counts = _state(SessionLocal, account_id)
    # One free first edit, one charged second edit.
    assert edit_counts == [2]
    assert credits == 3


def test_update_rereads_edit_count_changed_underneath(
    monkeypatch, SessionLocal, db_session, make_account, make_client
):
    account = make_account(credits=5)
    customer_id = make_client(account).id
    invoice_id = invoices_service.create_invoice(
        db_session, account, _payload(customer_id)
    ).id
    real = invoices_service.compute_totals
    calls = []

    def compute_totals(items, tax_exempt):
        if not calls:
            with SessionLocal() as other:
                other.execute(
                    update(Invoice)
                    .where(Invoice.id == invoice_id)
                    .values(edit_count=1)
                )
                other.commit()
        calls.append(1)
        return real(items, tax_exempt)

    monkeypatch.setattr(invoices_service, "compute_totals", compute_totals)

    invoice = invoices_service.update_invoice(
        db_session, account, invoice_id, _payload(customer_id, notes="retried")
    )

    assert len(calls) == 2
    assert invoice.edit_count == 2
    assert invoice.notes == "retried"
    assert _state(SessionLocal, account.id) == (3, [2])


def test_update_gives_up_after_repeated_conflicts(
    monkeypatch, SessionLocal, db_session, make_account, make_client
):
    account = make_account(credits=5)
    customer_id = make_client(account).id
    invoice_id = invoices_service.create_invoice(
        db_session, account, _payload(customer_id)
    ).id
    real = invoices_service.compute_totals

    def compute_totals(items, tax_exempt):
        with SessionLocal() as other:
            other.execute(
                update(Invoice)
                .where(Invoice.id == invoice_id)
                .values(edit_count=Invoice.edit_count + 1)
            )
            other.commit()
        return real(items, tax_exempt)

    monkeypatch.setattr(invoices_service, "compute_totals", compute_totals)

    with pytest.raises(EditConflict):
        invoices_service.update_invoice(
            db_session, account, invoice_id, _payload(customer_id, notes="lost")
        )

    credits, edit_counts = _state(SessionLocal, account.id)
    assert credits == 4
    assert edit_counts == [invoices_service.EDIT_ATTEMPTS]
    with SessionLocal() as check:
        assert check.get(Invoice, invoice_id).notes is None
        assert check.get(Invoice, invoice_id).total == Decimal("100.00")
