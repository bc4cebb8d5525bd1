from abc import ABC, abstractmethod
from decimal import Decimal

from ..config import settings
from ..errors import ValidationError
from ..models import CurrencyEnum


class ExchangeRateSource(ABC):
    @abstractmethod
    def rate(self, from_currency: str, to_currency: str) -> Decimal:
        raise NotImplementedError

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        return amount * self.rate(from_currency, to_currency)


class StaticExchangeRateSource(ExchangeRateSource):
    """Fixed table of rates; pairs it does not know convert at 1."""

    def __init__(self, rates: dict[tuple[str, str], Decimal]) -> None:
        self._rates = dict(rates)

    def rate(self, from_currency: str, to_currency: str) -> Decimal:
        from_code = _currency_code(from_currency)
        to_code = _currency_code(to_currency)
        if from_code == to_code:
            return Decimal("1")
        return self._rates.get((from_code, to_code), Decimal("1"))


def _currency_code(value) -> str:
    code = value.value if hasattr(value, "value") else str(value).upper()
    try:
        return CurrencyEnum(code).value
    except ValueError as exc:
        raise ValidationError(f"Unsupported currency: {value}.") from exc


def _with_inverses(rates: dict[tuple[str, str], Decimal]) -> dict[tuple[str, str], Decimal]:
    table = dict(rates)
    for (from_code, to_code), value in rates.items():
        table.setdefault((to_code, from_code), Decimal("1") / value)
    return table


def get_exchange_rate_source() -> ExchangeRateSource:
    return StaticExchangeRateSource(
        _with_inverses(
            {
                ("EUR", "MAD"): settings.eur_mad_rate,
                ("USD", "MAD"): settings.usd_mad_rate,
            }
        )
    )


def converter_to(source: ExchangeRateSource, target: str):
    """Build a reporting converter that expresses amounts in ``target``."""
    target_code = _currency_code(target)

    def convert(amount: Decimal, currency: str) -> Decimal:
        return source.convert(amount, currency, target_code)

    return convert
