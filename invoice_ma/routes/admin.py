from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_admin
from ..schemas import (
    AdminUser,
    CompanySettingsRead,
    CompanySettingsUpdate,
    CreditBalance,
    CreditTopUp,
)
from ..services import accounts as accounts_service
from ..services import settings_store

router = APIRouter(dependencies=[Depends(require_admin)])


class AdminData(BaseModel):
    users: list[AdminUser]
    settings: dict[str, dict[str, Any]]


@router.get("/data", response_model=AdminData)
def admin_data(db: Session = Depends(get_db)) -> AdminData:
    return AdminData(
        users=[
            AdminUser.model_validate(account)
            for account in accounts_service.list_accounts(db)
        ],
        settings=settings_store.get_all_settings(db),
    )


@router.get("/settings/{key}")
def admin_setting(key: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    return settings_store.get_setting(db, key)


@router.put("/settings/{key}")
def admin_update_setting(
    key: str,
    value: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    return settings_store.set_setting(db, key, value)


@router.post("/users/{account_id}/credits", response_model=CreditBalance)
def admin_add_credits(
    account_id: int, payload: CreditTopUp, db: Session = Depends(get_db)
) -> CreditBalance:
    return CreditBalance(
        credits=accounts_service.add_credits(db, account_id, payload.amount)
    )


@router.post("/users/{account_id}/settings", response_model=CompanySettingsRead)
def admin_update_user_settings(
    account_id: int, payload: CompanySettingsUpdate, db: Session = Depends(get_db)
) -> CompanySettingsRead:
    account = accounts_service.get_account(db, account_id)
    return accounts_service.update_company_settings(db, account, payload)
