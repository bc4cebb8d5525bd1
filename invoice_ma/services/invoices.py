"""Invoice persistence around the pricing calculator and the credit gate.

Each public write function is one unit of work: it either commits every
change (invoice, items, edit count, credit balance) or rolls all of them
back before the error propagates.
"""

import logging
from datetime import date

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..errors import DuplicateInvoiceNumber, EditConflict, InvoiceMaError, NotFound
from ..models import Account, Client, Invoice, InvoiceItem, InvoiceStatusEnum
from ..models.base import today as _today
from ..schemas import InvoiceWrite
from .billing import charge_credit, decide
from .pricing import InvoiceTotals, compute_totals, money

logger = logging.getLogger(__name__)

YEAR_PLACEHOLDER = "{YEAR}"
EDIT_ATTEMPTS = 3


def _invoice_query(account_id: int):
    return (
        select(Invoice)
        .where(Invoice.account_id == account_id)
        .options(selectinload(Invoice.items), selectinload(Invoice.client))
    )


def list_invoices(
    db: Session,
    account: Account,
    q: str | None = None,
    status: InvoiceStatusEnum | None = None,
) -> list[Invoice]:
    query = _invoice_query(account.id).order_by(
        Invoice.issue_date.desc(), Invoice.id.desc()
    )
    if status:
        query = query.where(Invoice.status == status)
    if q:
        like = f"%{q}%"
        query = query.join(Client, Invoice.client_id == Client.id).where(
            or_(Invoice.invoice_number.ilike(like), Client.name.ilike(like))
        )
    return list(db.scalars(query))


def get_invoice(db: Session, account: Account, invoice_id: int) -> Invoice:
    invoice = db.scalars(
        _invoice_query(account.id).where(Invoice.id == invoice_id)
    ).one_or_none()
    if invoice is None:
        raise NotFound("Invoice not found.")
    return invoice


def _lock_account(db: Session, account_id: int) -> Account:
    account = db.execute(
        select(Account)
        .where(Account.id == account_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if account is None:
        raise NotFound("User not found.")
    return account


def _lock_invoice(db: Session, account_id: int, invoice_id: int) -> Invoice:
    invoice = db.execute(
        select(Invoice)
        .where(Invoice.id == invoice_id, Invoice.account_id == account_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if invoice is None:
        raise NotFound("Invoice not found.")
    return invoice


def _owned_client(db: Session, account_id: int, client_id: int) -> Client:
    client = db.execute(
        select(Client).where(Client.id == client_id, Client.account_id == account_id)
    ).scalar_one_or_none()
    if client is None:
        raise NotFound("Client not found.")
    return client


def _ensure_unique_number(
    db: Session, account_id: int, invoice_number: str, exclude_id: int | None = None
) -> None:
    query = select(Invoice.id).where(
        Invoice.account_id == account_id, Invoice.invoice_number == invoice_number
    )
    if exclude_id is not None:
        query = query.where(Invoice.id != exclude_id)
    if db.execute(query).first():
        raise DuplicateInvoiceNumber()


def _warn_on_submitted_totals(payload: InvoiceWrite, totals: InvoiceTotals) -> None:
    submitted = {
        "sub_total": payload.sub_total,
        "tax_amount": payload.tax_amount,
        "total": payload.total,
    }
    for field, value in submitted.items():
        if value is None:
            continue
        computed = getattr(totals, field)
        if money(value) != computed:
            logger.warning(
                "Ignoring submitted %s=%s for invoice %s; recomputed %s",
                field,
                value,
                payload.invoice_number,
                computed,
            )


def _claim_edit(db: Session, invoice_id: int, seen: int, new_edit_count: int) -> None:
    # Only the request that read the current edit_count may advance it.
    result = db.execute(
        update(Invoice)
        .where(Invoice.id == invoice_id, Invoice.edit_count == seen)
        .values(edit_count=new_edit_count)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise EditConflict()


def _build_items(payload: InvoiceWrite) -> list[InvoiceItem]:
    return [
        InvoiceItem(
            position=position,
            description=item.description.strip(),
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
        )
        for position, item in enumerate(payload.items)
    ]


def _apply_payload(
    invoice: Invoice, payload: InvoiceWrite, totals: InvoiceTotals
) -> None:
    invoice.client_id = payload.client_id
    invoice.invoice_number = payload.invoice_number.strip()
    invoice.issue_date = payload.issue_date
    invoice.due_date = payload.due_date
    invoice.status = payload.status
    invoice.currency = payload.currency
    invoice.notes = payload.notes
    invoice.sub_total = totals.sub_total
    invoice.tax_amount = totals.tax_amount
    invoice.total = totals.total
    invoice.payment_date = payload.payment_date
    if payload.status == InvoiceStatusEnum.PAID and payload.payment_date is None:
        invoice.payment_date = _today()
    invoice.items = _build_items(payload)


def _run_write(db: Session, action: str, operation):
    try:
        result = operation()
        db.commit()
    except InvoiceMaError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.info("%s rejected by a uniqueness constraint: %s", action, exc.orig)
        raise DuplicateInvoiceNumber() from exc
    except Exception:
        db.rollback()
        logger.exception("%s failed", action)
        raise
    return result


def create_invoice(db: Session, account: Account, payload: InvoiceWrite) -> Invoice:
    def operation() -> Invoice:
        locked = _lock_account(db, account.id)
        decision = decide(locked.credits, 0, is_create=True)
        _owned_client(db, locked.id, payload.client_id)
        _ensure_unique_number(db, locked.id, payload.invoice_number.strip())

        totals = compute_totals(payload.items, locked.is_tax_exempt)
        _warn_on_submitted_totals(payload, totals)

        invoice = Invoice(account_id=locked.id, edit_count=decision.new_edit_count)
        _apply_payload(invoice, payload, totals)
        db.add(invoice)
        db.flush()
        if decision.charge:
            charge_credit(db, locked.id)
        return invoice

    invoice = _run_write(db, "Invoice creation", operation)
    return get_invoice(db, account, invoice.id)


def update_invoice(
    db: Session, account: Account, invoice_id: int, payload: InvoiceWrite
) -> Invoice:
    def operation() -> Invoice:
        locked = _lock_account(db, account.id)
        invoice = _lock_invoice(db, locked.id, invoice_id)
        decision = decide(locked.credits, invoice.edit_count, is_create=False)
        _owned_client(db, locked.id, payload.client_id)
        _ensure_unique_number(
            db, locked.id, payload.invoice_number.strip(), exclude_id=invoice.id
        )

        totals = compute_totals(payload.items, locked.is_tax_exempt)
        _warn_on_submitted_totals(payload, totals)

        _claim_edit(db, invoice.id, invoice.edit_count, decision.new_edit_count)
        _apply_payload(invoice, payload, totals)
        db.flush()
        if decision.charge:
            charge_credit(db, locked.id)
        return invoice

    for attempt in range(1, EDIT_ATTEMPTS + 1):
        try:
            invoice = _run_write(db, "Invoice update", operation)
            break
        except EditConflict:
            if attempt == EDIT_ATTEMPTS:
                raise
            logger.info(
                "Invoice %s changed during update; retrying (attempt %s)",
                invoice_id,
                attempt + 1,
            )
    return get_invoice(db, account, invoice.id)


def delete_invoice(db: Session, account: Account, invoice_id: int) -> None:
    invoice = get_invoice(db, account, invoice_id)
    db.delete(invoice)
    db.commit()


def mark_paid(
    db: Session, account: Account, invoice_id: int, payment_date: date | None = None
) -> Invoice:
    """Record payment without counting as an edit or consuming a credit.

    An already recorded payment date is kept unless a new one is given.
    """
    invoice = get_invoice(db, account, invoice_id)
    invoice.status = InvoiceStatusEnum.PAID
    invoice.payment_date = payment_date or invoice.payment_date or _today()
    db.commit()
    return get_invoice(db, account, invoice_id)


def mark_overdue(db: Session, account: Account, today: date | None = None) -> int:
    """Flag sent invoices whose due date has passed. Returns how many changed."""
    result = db.execute(
        update(Invoice)
        .where(
            Invoice.account_id == account.id,
            Invoice.status == InvoiceStatusEnum.SENT,
            Invoice.due_date < (today or _today()),
        )
        .values(status=InvoiceStatusEnum.OVERDUE)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


def next_invoice_number(db: Session, account: Account, today: date | None = None) -> str:
    template = "INV-{YEAR}-"
    if account.company_settings is not None:
        template = account.company_settings.invoice_number_prefix or template
    prefix = template.replace(YEAR_PLACEHOLDER, str((today or _today()).year))

    numbers = db.scalars(
        select(Invoice.invoice_number).where(
            Invoice.account_id == account.id,
            Invoice.invoice_number.startswith(prefix, autoescape=True),
        )
    )
    last = 0
    for number in numbers:
        suffix = number[len(prefix):]
        if suffix.isdigit():
            last = max(last, int(suffix))
    return f"{prefix}{last + 1:03d}"


def account_invoices(db: Session, account: Account) -> list[Invoice]:
    query = _invoice_query(account.id).order_by(Invoice.issue_date, Invoice.id)
    return list(db.scalars(query))
