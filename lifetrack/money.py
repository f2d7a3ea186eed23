import logging
from dataclasses import dataclass

from lifetrack.domain import DEFAULT_EUR_RATE, EUR, RON
from lifetrack.errors import CurrencyMismatchError

logger = logging.getLogger(__name__)

CURRENCIES = (EUR, RON)


@dataclass(frozen=True)
class Money:
    """An amount tagged with its currency.

    Adding or subtracting two amounts of different currencies raises
    CurrencyMismatchError; go through `convert` first.
    """

    amount: float
    currency: str

    def _check(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def __add__(self, other: "Money") -> "Money":
        self._check(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check(other)
        return Money(self.amount - other.amount, self.currency)


def eur(amount: float) -> Money:
    return Money(amount, EUR)


def ron(amount: float) -> Money:
    return Money(amount, RON)


def effective_rate(eur_rate: float) -> float:
    if eur_rate and eur_rate > 0:
        return eur_rate
    logger.warning("EUR/RON rate %r is not usable, falling back to %s", eur_rate, DEFAULT_EUR_RATE)
    return DEFAULT_EUR_RATE


def convert(value: Money, currency: str, eur_rate: float) -> Money:
    """Convert between EUR and RON; `eur_rate` is RON per 1 EUR."""
    if currency not in CURRENCIES:
        raise ValueError(f"Unsupported currency {currency!r}")
    if value.currency == currency:
        return value
    rate = effective_rate(eur_rate)
    if value.currency == EUR:
        return Money(value.amount * rate, RON)
    return Money(value.amount / rate, EUR)


def total(values, currency: str) -> Money:
    acc = Money(0.0, currency)
    for v in values:
        acc = acc + v
    return acc
