from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_account
from ..models import Account
from ..schemas import ClientRead, ClientWrite, CompanySettingsRead, InvoiceRead
from ..services import clients as clients_service

router = APIRouter()


class ClientPortal(BaseModel):
    client: ClientRead
    invoices: list[InvoiceRead]
    settings: CompanySettingsRead | None


@router.get("/clients", response_model=list[ClientRead])
def clients_list(
    q: str | None = None,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> list[ClientRead]:
    return clients_service.list_clients(db, account, q)


@router.post("/clients", response_model=ClientRead, status_code=201)
def clients_create(
    payload: ClientWrite,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> ClientRead:
    return clients_service.create_client(db, account, payload)


@router.get("/clients/{client_id}", response_model=ClientRead)
def clients_detail(
    client_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> ClientRead:
    return clients_service.get_client(db, account, client_id)


@router.put("/clients/{client_id}", response_model=ClientRead)
def clients_update(
    client_id: int,
    payload: ClientWrite,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> ClientRead:
    return clients_service.update_client(db, account, client_id, payload)


@router.delete("/clients/{client_id}", status_code=204)
def clients_delete(
    client_id: int,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> Response:
    clients_service.delete_client(db, account, client_id)
    return Response(status_code=204)


@router.get("/clients/{client_id}/portal", response_model=ClientPortal)
def clients_portal(client_id: int, db: Session = Depends(get_db)) -> ClientPortal:
    client, invoices, owner = clients_service.portal_data(db, client_id)
    return ClientPortal(
        client=ClientRead.model_validate(client),
        invoices=[InvoiceRead.model_validate(invoice) for invoice in invoices],
        settings=(
            CompanySettingsRead.model_validate(owner.company_settings)
            if owner and owner.company_settings
            else None
        ),
    )
