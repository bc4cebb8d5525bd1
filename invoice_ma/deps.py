from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .db import get_db
from .errors import Forbidden
from .models import Account
from .services.accounts import get_account, is_admin


def get_current_account(
    x_account_id: int = Header(...), db: Session = Depends(get_db)
) -> Account:
    return get_account(db, x_account_id)


def require_admin(account: Account = Depends(get_current_account)) -> Account:
    if not is_admin(account):
        raise Forbidden("Admin access required.")
    return account
