from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow


class CurrencyEnum(str, Enum):
    MAD = "MAD"
    EUR = "EUR"
    USD = "USD"


class BusinessTypeEnum(str, Enum):
    COMPANY = "company"
    AUTO_ENTREPRENEUR = "auto-entrepreneur"


class AutoEntrepreneurTypeEnum(str, Enum):
    SERVICES = "services"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    ARTISANAL = "artisanal"


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("credits >= 0", name="ck_accounts_credits"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20))
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    company_settings: Mapped["CompanySettings"] = relationship(
        back_populates="account",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def business_type(self) -> BusinessTypeEnum:
        if self.company_settings is None:
            return BusinessTypeEnum.COMPANY
        return BusinessTypeEnum(self.company_settings.business_type)

    @property
    def is_tax_exempt(self) -> bool:
        return self.business_type == BusinessTypeEnum.AUTO_ENTREPRENEUR


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(Text)
    ice: Mapped[str | None] = mapped_column(String(50))
    iff: Mapped[str | None] = mapped_column(String(50))
    rc: Mapped[str | None] = mapped_column(String(100))
    default_tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("20.00")
    )
    default_currency: Mapped[CurrencyEnum] = mapped_column(
        SAEnum(CurrencyEnum, native_enum=False, create_constraint=False),
        nullable=False,
        default=CurrencyEnum.MAD,
    )
    business_type: Mapped[BusinessTypeEnum] = mapped_column(
        SAEnum(
            BusinessTypeEnum,
            native_enum=False,
            create_constraint=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=BusinessTypeEnum.COMPANY,
    )
    auto_entrepreneur_type: Mapped[AutoEntrepreneurTypeEnum | None] = mapped_column(
        SAEnum(
            AutoEntrepreneurTypeEnum,
            native_enum=False,
            create_constraint=False,
            values_callable=lambda members: [member.value for member in members],
        )
    )
    invoice_number_prefix: Mapped[str] = mapped_column(
        String(50), nullable=False, default="INV-{YEAR}-"
    )
    default_notes: Mapped[str | None] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )

    account: Mapped[Account] = relationship(back_populates="company_settings")
