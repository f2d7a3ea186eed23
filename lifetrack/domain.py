from dataclasses import dataclass, field
from typing import Optional, Tuple

EUR = "EUR"
RON = "RON"

LEDGER_TYPES = ("Add", "Withdraw")
HEALTH_TYPES = ("Weight", "Steps", "Calories")

ADD = "Add"
WITHDRAW = "Withdraw"
WEIGHT = "Weight"
STEPS = "Steps"
CALORIES = "Calories"

DEFAULT_EUR_RATE = 4.97

DEFAULT_CATEGORIES = (
    "Groceries",
    "Eating Out",
    "Car",
    "Transport",
    "Rent / Mortgage",
    "Utilities",
    "Health & Pharmacy",
    "Insurance",
    "Subscriptions",
    "Shopping",
    "Kids",
    "Gifts & Giving",
    "Travel",
    "Personal",
    "Education",
    "Charity",
    "Other",
)


@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    type: str        # ETF | Stock | Crypto
    notes: str = ""


@dataclass(frozen=True)
class Deposit:
    id: str
    asset_id: str
    date: str        # YYYY-MM-DD
    amount: float    # EUR, negative = withdrawal
    note: str = ""


@dataclass(frozen=True)
class Snapshot:
    id: str
    asset_id: str
    date: str
    price: float     # EUR value of the whole position, not per unit
    created_at: Optional[int] = None  # epoch millis, tie-break for same date


@dataclass(frozen=True)
class Trade:
    id: str
    asset_id: str
    date: str
    type: str        # Buy | Sell
    units: float
    price: float
    fees: Optional[float] = None
    notes: str = ""


@dataclass(frozen=True)
class Expense:
    id: str
    amount: float    # RON, always positive
    date: str
    category: str
    merchant: str
    payment_method: str = ""
    notes: str = ""


@dataclass(frozen=True)
class SavingsBucket:
    id: str
    name: str
    target: Optional[float] = None


@dataclass(frozen=True)
class SavingsTransaction:
    id: str
    bucket_id: str
    amount: float    # RON
    date: str
    type: str        # Add | Withdraw
    notes: str = ""


@dataclass(frozen=True)
class EmergencyTransaction:
    id: str
    amount: float    # RON
    date: str
    type: str
    notes: str = ""


@dataclass(frozen=True)
class HealthLog:
    id: str
    date: str
    type: str        # Weight | Steps | Calories
    value: float


@dataclass(frozen=True)
class Settings:
    height_cm: float = 0
    eur_rate: float = DEFAULT_EUR_RATE  # RON per 1 EUR
    eur_rate_date: str = ""
    expense_categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    emergency_target: float = 0
    target_weight: Optional[float] = None
    target_date: Optional[str] = None
    step_target: Optional[float] = 10000
    calorie_target: Optional[float] = 2000


@dataclass(frozen=True)
class AppData:
    """Full dataset snapshot handed to the engine.

    Every collection is a tuple so the whole aggregate stays hashable and a
    mutation always means building a new instance.
    """

    assets: Tuple[Asset, ...] = ()
    trades: Tuple[Trade, ...] = ()
    deposits: Tuple[Deposit, ...] = ()
    snapshots: Tuple[Snapshot, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    savings_buckets: Tuple[SavingsBucket, ...] = ()
    savings_transactions: Tuple[SavingsTransaction, ...] = ()
    emergency_transactions: Tuple[EmergencyTransaction, ...] = ()
    health_logs: Tuple[HealthLog, ...] = ()
    settings: Settings = field(default_factory=Settings)


# collection name -> record type, in persisted document order
COLLECTIONS = {
    "assets": Asset,
    "trades": Trade,
    "deposits": Deposit,
    "snapshots": Snapshot,
    "expenses": Expense,
    "savings_buckets": SavingsBucket,
    "savings_transactions": SavingsTransaction,
    "emergency_transactions": EmergencyTransaction,
    "health_logs": HealthLog,
}
