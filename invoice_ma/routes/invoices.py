from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_account
from ..models import Account, InvoiceStatusEnum
from ..schemas import (
    InvoiceRead,
    InvoiceWrite,
    MarkPaid,
    NextInvoiceNumber,
    OverdueResult,
)
from ..services import invoices as invoices_service

router = APIRouter()


@router.get("/invoices", response_model=list[InvoiceRead])
def invoices_list(
    q: str | None = None,
    status: InvoiceStatusEnum | None = None,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> list[InvoiceRead]:
    return invoices_service.list_invoices(db, account, q=q, status=status)


@router.get("/invoices/next-number", response_model=NextInvoiceNumber)
def invoices_next_number(
    account: Account = Depends(get_current_account), db: Session = Depends(get_db)
) -> NextInvoiceNumber:
    return NextInvoiceNumber(
        invoice_number=invoices_service.next_invoice_number(db, account)
    )


@router.post("/invoices/mark-overdue", response_model=OverdueResult)
def invoices_mark_overdue(
    account: Account = Depends(get_current_account), db: Session = Depends(get_db)
) -> OverdueResult:
    return OverdueResult(updated=invoices_service.mark_overdue(db, account))


@router.post("/invoices", response_model=InvoiceRead, status_code=201)
def invoices_create(
    payload: InvoiceWrite,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    return invoices_service.create_invoice(db, account, payload)


@router.get("/invoices/{invoice_id}", response_model=InvoiceRead)
def invoices_detail(
    invoice_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    return invoices_service.get_invoice(db, account, invoice_id)


@router.put("/invoices/{invoice_id}", response_model=InvoiceRead)
def invoices_update(
    invoice_id: int,
    payload: InvoiceWrite,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    return invoices_service.update_invoice(db, account, invoice_id, payload)


@router.post("/invoices/{invoice_id}/paid", response_model=InvoiceRead)
def invoices_mark_paid(
    invoice_id: int,
    payload: MarkPaid | None = None,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> InvoiceRead:
    payment_date = payload.payment_date if payload else None
    return invoices_service.mark_paid(db, account, invoice_id, payment_date)


@router.delete("/invoices/{invoice_id}", status_code=204)
def invoices_delete(
    invoice_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> Response:
    invoices_service.delete_invoice(db, account, invoice_id)
    return Response(status_code=204)
