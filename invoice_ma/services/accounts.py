import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..config import settings
from ..errors import InvoiceMaError, NotFound
from ..models import Account, CompanySettings
from ..schemas import AccountCreate, CompanySettingsUpdate, ProfileUpdate
from .settings_store import general_settings

logger = logging.getLogger(__name__)

DEFAULT_NOTES = "Merci pour votre confiance."
REQUIRED_COMPANY_FIELDS = {
    "name",
    "default_tax_rate",
    "default_currency",
    "business_type",
    "invoice_number_prefix",
}


class RegistrationClosed(InvoiceMaError):
    status_code = 403
    default_message = "Registration is currently disabled."


class AccountExists(InvoiceMaError):
    status_code = 409
    default_message = "User already exists."


def get_account(db: Session, account_id: int) -> Account:
    account = db.get(Account, account_id)
    if account is None:
        raise NotFound("User not found.")
    return account


def is_admin(account: Account) -> bool:
    return account.email.lower() == settings.admin_email.lower()


def register_account(db: Session, payload: AccountCreate) -> Account:
    general = general_settings(db)
    if not general.registration.allow_registration:
        raise RegistrationClosed()

    email = payload.email.strip().lower()
    exists = db.execute(
        select(Account.id).where(func.lower(Account.email) == email)
    ).first()
    if exists:
        raise AccountExists()

    account = Account(
        name=payload.name.strip(),
        email=email,
        phone=payload.phone.strip(),
        credits=general.registration.initial_credits,
    )
    account.company_settings = CompanySettings(
        name=payload.company_name.strip(),
        email=email,
        phone=payload.phone.strip(),
        default_tax_rate=general.default_invoice.tax_rate,
        default_currency=general.default_invoice.currency,
        default_notes=DEFAULT_NOTES,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    logger.info(
        "Registered account %s with %s initial credits", account.id, account.credits
    )
    return account


def update_profile(db: Session, account: Account, payload: ProfileUpdate) -> Account:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(account, field, value)
    db.commit()
    db.refresh(account)
    return account


def update_company_settings(
    db: Session, account: Account, payload: CompanySettingsUpdate
) -> CompanySettings:
    company = account.company_settings
    if company is None:
        company = CompanySettings(name=account.name, email=account.email)
        account.company_settings = company
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_COMPANY_FIELDS:
            continue
        setattr(company, field, value)
    db.commit()
    db.refresh(company)
    return company


def add_credits(db: Session, account_id: int, amount: int) -> int:
    result = db.execute(
        update(Account)
        .where(Account.id == account_id)
        .values(credits=Account.credits + amount)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise NotFound("User not found.")
    db.commit()
    credits = db.execute(
        select(Account.credits).where(Account.id == account_id)
    ).scalar_one()
    logger.info("Added %s credits to account %s (balance %s)", amount, account_id, credits)
    return credits


def list_accounts(db: Session) -> list[Account]:
    return list(db.scalars(select(Account).order_by(Account.id)))
