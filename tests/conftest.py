from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from invoice_ma.config import settings
from invoice_ma.db import get_db
from invoice_ma.main import app
from invoice_ma.models import (
    Account,
    BusinessTypeEnum,
    Base,
    Client,
    CompanySettings,
    CurrencyEnum,
)


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def SessionLocal(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(SessionLocal):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionLocal):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_account(db_session):
    def _make(
        credits=5,
        email="owner@example.ma",
        business_type=BusinessTypeEnum.COMPANY,
        prefix="INV-{YEAR}-",
    ):
        account = Account(
            name="Owner", email=email, phone="+212 600 000 001", credits=credits
        )
        account.company_settings = CompanySettings(
            name="Atlas SARL",
            email=email,
            default_tax_rate=Decimal("20"),
            default_currency=CurrencyEnum.MAD,
            business_type=business_type,
            invoice_number_prefix=prefix,
        )
        db_session.add(account)
        db_session.commit()
        return account

    return _make


@pytest.fixture()
def make_client(db_session):
    def _make(account, name="Client A", ice="001234567000089"):
        customer = Client(account_id=account.id, name=name, ice=ice)
        db_session.add(customer)
        db_session.commit()
        return customer

    return _make


@pytest.fixture()
def admin_account(make_account):
    return make_account(credits=999999, email=settings.admin_email)
