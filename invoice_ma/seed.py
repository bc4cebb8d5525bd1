from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

from .config import settings
from .db import SessionLocal
from .models import (
    Account,
    BusinessTypeEnum,
    CompanySettings,
    CurrencyEnum,
    GlobalSetting,
)
from .services.settings_store import SETTING_MODELS, default_setting

ADMIN_CREDITS = 999999


def seed_admin() -> int:
    with SessionLocal() as session:
        exists = session.execute(
            select(Account).where(Account.email == settings.admin_email)
        ).scalar_one_or_none()
        if exists:
            return 0
        admin = Account(
            name="Administrator",
            email=settings.admin_email,
            phone="+212 600 000 000",
            credits=ADMIN_CREDITS,
        )
        admin.company_settings = CompanySettings(
            name="Invoice.ma Administration",
            email=settings.admin_email,
            phone="+212 600 000 000",
            address="Casablanca, Morocco",
            default_tax_rate=Decimal("20.00"),
            default_currency=CurrencyEnum.MAD,
            business_type=BusinessTypeEnum.COMPANY,
            invoice_number_prefix="ADM-{YEAR}-",
            default_notes="Administration Invoice",
        )
        session.add(admin)
        session.commit()
    return 1


def seed_global_settings() -> int:
    created = 0
    with SessionLocal() as session:
        for key in SETTING_MODELS:
            if session.get(GlobalSetting, key) is not None:
                continue
            session.add(GlobalSetting(key=key, value=default_setting(key)))
            created += 1
        if created:
            session.commit()
    return created


def main() -> None:
    print(f"Seeded admin accounts: {seed_admin()}")
    print(f"Seeded global settings: {seed_global_settings()}")


if __name__ == "__main__":
    main()
