"""Net worth composition across the EUR and RON sides of the data.

Investments are valued in EUR; savings and the emergency fund are RON.
Every component is converted to the requested currency with the configured
EUR/RON rate before anything is added up.
"""
from dataclasses import dataclass
from typing import Iterable

from lifetrack.domain import RON, AppData, Deposit
from lifetrack.filters import in_month
from lifetrack.ledger import emergency_balance, total_savings
from lifetrack.money import Money, convert, eur, ron, total
from lifetrack.valuation import portfolio_valuation


@dataclass(frozen=True)
class NetWorth:
    currency: str
    investments: Money
    savings: Money
    emergency: Money
    total: Money


def net_worth(data: AppData, currency: str = RON) -> NetWorth:
    rate = data.settings.eur_rate
    investments = convert(
        eur(portfolio_valuation(data.assets, data.deposits, data.snapshots).current_value), currency, rate
    )
    savings = convert(ron(total_savings(data.savings_buckets, data.savings_transactions)), currency, rate)
    emergency = convert(ron(emergency_balance(data.emergency_transactions)), currency, rate)
    return NetWorth(
        currency=currency,
        investments=investments,
        savings=savings,
        emergency=emergency,
        total=total((investments, savings, emergency), currency),
    )


def money_status(deposits: Iterable[Deposit], year: int, month0: int) -> str:
    return "good" if any(map(in_month(year, month0), deposits)) else "neutral"
