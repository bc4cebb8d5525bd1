from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./invoice_ma.db"
    admin_email: str = "admin@invoice.ma"
    debug: bool = False
    log_level: str = "INFO"
    eur_mad_rate: Decimal = Decimal("10.95")
    usd_mad_rate: Decimal = Decimal("9.85")

    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
