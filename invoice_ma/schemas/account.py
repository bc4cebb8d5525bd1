from decimal import Decimal

from pydantic import BaseModel, Field

from ..models import AutoEntrepreneurTypeEnum, BusinessTypeEnum, CurrencyEnum
from .client import ClientRead
from .invoice import InvoiceRead


class AccountCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    company_name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=20)
    email: str = Field(min_length=3, max_length=255)


class AccountRead(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None
    credits: int

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=20)


class CompanySettingsRead(BaseModel):
    name: str
    email: str | None
    phone: str | None
    address: str | None
    ice: str | None
    iff: str | None
    rc: str | None
    default_tax_rate: Decimal
    default_currency: CurrencyEnum
    business_type: BusinessTypeEnum
    auto_entrepreneur_type: AutoEntrepreneurTypeEnum | None
    invoice_number_prefix: str
    default_notes: str | None

    model_config = {"from_attributes": True}


class CompanySettingsUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    ice: str | None = Field(default=None, max_length=50)
    iff: str | None = Field(default=None, max_length=50)
    rc: str | None = Field(default=None, max_length=100)
    default_tax_rate: Decimal | None = Field(default=None, ge=0, le=100)
    default_currency: CurrencyEnum | None = None
    business_type: BusinessTypeEnum | None = None
    auto_entrepreneur_type: AutoEntrepreneurTypeEnum | None = None
    invoice_number_prefix: str | None = Field(default=None, max_length=50)
    default_notes: str | None = None


class CreditTopUp(BaseModel):
    amount: int = Field(ge=1)


class CreditBalance(BaseModel):
    credits: int


class InitialData(BaseModel):
    account: AccountRead
    settings: CompanySettingsRead | None
    invoices: list[InvoiceRead]
    clients: list[ClientRead]


class AdminUser(AccountRead):
    company_settings: CompanySettingsRead | None = None
