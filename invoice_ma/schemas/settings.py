from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import CurrencyEnum


class SettingsBlob(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ThemeSettings(SettingsBlob):
    primary_color: str = "#4f46e5"
    logo: str = ""
    favicon: str = ""
    color_mode: Literal["light", "dark", "system"] = "system"
    font_family: Literal["Poppins", "Inter", "Roboto", "Cairo"] = "Poppins"
    border_radius: Literal["none", "sm", "md", "lg"] = "lg"
    layout_density: Literal["comfortable", "compact"] = "comfortable"


class GlobalNotification(SettingsBlob):
    id: str = "default-notification"
    message: str = ""
    is_active: bool = False


class RegistrationSettings(SettingsBlob):
    allow_registration: bool = True
    initial_credits: int = Field(default=5, ge=0)


class DefaultInvoiceSettings(SettingsBlob):
    currency: CurrencyEnum = CurrencyEnum.MAD
    tax_rate: Decimal = Field(default=Decimal("20"), ge=0, le=100)


class MailSettings(SettingsBlob):
    host: str = "smtp.example.com"
    port: int = 587
    user: str = "user@example.com"
    password: str = Field(default="", alias="pass")
    encryption: Literal["none", "ssl", "tls"] = "tls"


class AdminGeneralSettings(SettingsBlob):
    registration: RegistrationSettings = Field(default_factory=RegistrationSettings)
    default_invoice: DefaultInvoiceSettings = Field(
        default_factory=DefaultInvoiceSettings
    )
    mail: MailSettings = Field(default_factory=MailSettings)
