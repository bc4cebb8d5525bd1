from .account import (
    Account,
    AutoEntrepreneurTypeEnum,
    BusinessTypeEnum,
    CompanySettings,
    CurrencyEnum,
)
from .base import Base
from .client import Client
from .global_setting import GlobalSetting
from .invoice import UNPAID_STATUSES, Invoice, InvoiceStatusEnum
from .invoice_item import InvoiceItem

__all__ = [
    "Base",
    "Account",
    "CompanySettings",
    "CurrencyEnum",
    "BusinessTypeEnum",
    "AutoEntrepreneurTypeEnum",
    "Client",
    "GlobalSetting",
    "Invoice",
    "InvoiceStatusEnum",
    "UNPAID_STATUSES",
    "InvoiceItem",
]
