from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_current_account
from ..models import Account
from ..schemas import (
    AccountCreate,
    AccountRead,
    ClientRead,
    CompanySettingsRead,
    CompanySettingsUpdate,
    InitialData,
    InvoiceRead,
    ProfileUpdate,
)
from ..services import accounts as accounts_service
from ..services import clients as clients_service
from ..services import invoices as invoices_service

router = APIRouter()


def _company_settings(account: Account) -> CompanySettingsRead | None:
    if account.company_settings is None:
        return None
    return CompanySettingsRead.model_validate(account.company_settings)


@router.post("/accounts", response_model=AccountRead, status_code=201)
def register(payload: AccountCreate, db: Session = Depends(get_db)) -> AccountRead:
    return accounts_service.register_account(db, payload)


@router.get("/data/initial", response_model=InitialData)
def initial_data(
    account: Account = Depends(get_current_account), db: Session = Depends(get_db)
) -> InitialData:
    return InitialData(
        account=AccountRead.model_validate(account),
        settings=_company_settings(account),
        invoices=[
            InvoiceRead.model_validate(invoice)
            for invoice in invoices_service.list_invoices(db, account)
        ],
        clients=[
            ClientRead.model_validate(client)
            for client in clients_service.list_clients(db, account)
        ],
    )


@router.patch("/user/profile", response_model=AccountRead)
def update_profile(
    payload: ProfileUpdate,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> AccountRead:
    return accounts_service.update_profile(db, account, payload)


@router.patch("/settings", response_model=CompanySettingsRead)
def update_settings(
    payload: CompanySettingsUpdate,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> CompanySettingsRead:
    return accounts_service.update_company_settings(db, account, payload)
