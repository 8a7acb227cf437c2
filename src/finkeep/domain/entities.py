"""Domain model entities for finkeep.

These are pure data classes representing business concepts, independent of
database schema. Services and engines exchange these objects; only the
database layer knows about ORM rows.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountGroup(str, Enum):
    """Account classification that decides balance sign rules."""

    PREPAID = "PREPAID"
    POSTPAID = "POSTPAID"
    LOAN = "LOAN"
    INVESTMENT = "INVESTMENT"


class TransactionType(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    def flipped(self) -> "TransactionType":
        """Return the opposite direction."""
        if self is TransactionType.DEBIT:
            return TransactionType.CREDIT
        return TransactionType.DEBIT


class CategoryType(str, Enum):
    GENERAL = "GENERAL"
    INVESTMENT = "INVESTMENT"


class InvestmentAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    DIVIDEND = "DIVIDEND"
    BONUS = "BONUS"
    SPLIT = "SPLIT"


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


class PatternStatus(str, Enum):
    """Derived status of a recurring pattern. Never stored."""

    UPCOMING = "UPCOMING"
    OVERDUE = "OVERDUE"
    PAID = "PAID"


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    owner_id: str
    name: str
    account_group: AccountGroup
    current_balance: Decimal
    balance_updated_at: datetime
    manual_balance_updated_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity, addressed externally by its numeric code."""

    id: int
    number: int
    name: str
    category_type: CategoryType
    created_at: datetime


@dataclass(frozen=True)
class MerchantAlias:
    """Per-user display name for a payee or asset."""

    id: int
    owner_id: str
    name: str
    category_id: int
    asset_symbol: Optional[str]
    logo_url: Optional[str]
    usage_count: int
    last_used_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    owner_id: str
    account_id: int
    category_id: int
    transaction_type: TransactionType
    amount: Decimal
    transaction_datetime: datetime
    created_at: datetime
    alias_id: Optional[int] = None
    description: Optional[str] = None
    location: Optional[str] = None
    payment_method: Optional[str] = None
    is_investment: bool = False
    asset_symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    investment_action: Optional[InvestmentAction] = None
    investment_holding_id: Optional[int] = None
    cost_basis_price: Optional[Decimal] = None
    is_transfer: bool = False
    linked_transaction_id: Optional[int] = None
    is_recurring: bool = False
    recurring_pattern_id: Optional[int] = None

    @property
    def has_holding_inputs(self) -> bool:
        """True when the transaction carries everything the holdings need."""
        return (
            self.is_investment
            and self.asset_symbol is not None
            and self.quantity is not None
            and self.price_per_unit is not None
            and self.investment_action is not None
        )


@dataclass(frozen=True)
class InvestmentHolding:
    """Aggregated position in one asset for one user.

    There is no market value here: current value is derived elsewhere.
    """

    id: int
    owner_id: str
    account_id: int
    category_id: int
    asset_symbol: str
    total_quantity: Decimal
    average_buy_price: Decimal
    total_invested_amount: Decimal
    realized_gain_loss: Decimal
    created_at: datetime


@dataclass(frozen=True)
class RecurringPattern:
    """Recurring-payment template plus bookkeeping of its linked transactions."""

    id: int
    owner_id: str
    account_id: int
    category_id: int
    alias_id: Optional[int]
    amount: Decimal
    transaction_type: TransactionType
    frequency: Frequency
    start_date: datetime
    next_due_date: datetime
    generated_count: int
    created_at: datetime
    last_generated_date: Optional[datetime] = None
    custom_frequency_days: Optional[int] = None
    description: Optional[str] = None
    location: Optional[str] = None
    payment_method: Optional[str] = None
    is_active: bool = True
    is_paused: bool = False
