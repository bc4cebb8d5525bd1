from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AliasChoices, BaseModel, Field, StringConstraints

from ..models import CurrencyEnum, InvoiceStatusEnum
from .client import ClientRead


class InvoiceItemWrite(BaseModel):
    description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0, validation_alias=AliasChoices("unit_price", "price"))
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class InvoiceWrite(BaseModel):
    client_id: int
    invoice_number: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
    ]
    issue_date: date
    due_date: date
    status: InvoiceStatusEnum = InvoiceStatusEnum.DRAFT
    currency: CurrencyEnum = CurrencyEnum.MAD
    notes: str | None = None
    payment_date: date | None = None
    items: list[InvoiceItemWrite] = Field(min_length=1)
    # Accepted for compatibility with older clients; the server recomputes them.
    sub_total: Decimal | None = None
    tax_amount: Decimal | None = None
    total: Decimal | None = None


class MarkPaid(BaseModel):
    payment_date: date | None = None


class InvoiceItemRead(BaseModel):
    id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal

    model_config = {"from_attributes": True}


class InvoiceRead(BaseModel):
    id: int
    invoice_number: str
    client_id: int
    customer: ClientRead = Field(validation_alias=AliasChoices("customer", "client"))
    items: list[InvoiceItemRead]
    issue_date: date
    due_date: date
    status: InvoiceStatusEnum
    currency: CurrencyEnum
    notes: str | None
    sub_total: Decimal
    tax_amount: Decimal
    total: Decimal
    edit_count: int
    payment_date: date | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class NextInvoiceNumber(BaseModel):
    invoice_number: str


class OverdueResult(BaseModel):
    updated: int
