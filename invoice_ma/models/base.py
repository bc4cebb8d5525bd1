from datetime import date, datetime, timezone

from sqlalchemy import Numeric
from sqlalchemy.orm import DeclarativeBase

Money = Numeric(12, 2)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utcnow().date()


class Base(DeclarativeBase):
    pass
