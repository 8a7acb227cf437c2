"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from finkeep.domain.entities import (
    Account,
    AccountGroup,
    Category,
    CategoryType,
    MerchantAlias,
    Transaction,
    InvestmentHolding,
    RecurringPattern,
)


class Database(ABC):
    """Abstract database interface for finkeep.

    Write methods commit immediately when called on their own. Inside
    ``unit_of_work()`` they only flush, and the whole block commits or rolls
    back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Open an all-or-nothing unit of work.

        Commits on normal exit, rolls back and re-raises on any exception.
        Nested calls join the outermost unit of work.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        owner_id: str,
        name: str,
        account_group: AccountGroup,
        current_balance: Decimal,
        balance_as_of: datetime,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int, for_update: bool = False) -> Optional[Account]:
        """Get account by ID, optionally locking the row for the unit of work."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: str) -> list[Account]:
        """List accounts of one owner."""
        pass

    @abstractmethod
    def update_account_balance(
        self,
        account_id: int,
        current_balance: Decimal,
        balance_updated_at: datetime,
        manual_balance_updated_at: Optional[datetime] = None,
    ) -> None:
        """Store a new balance. Moves the manual checkpoint when given."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, number: int, name: str, category_type: CategoryType) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_number(self, number: int) -> Optional[Category]:
        """Get category by its stable numeric code."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by number."""
        pass

    # Merchant alias operations
    @abstractmethod
    def create_alias(
        self,
        owner_id: str,
        name: str,
        category_id: int,
        asset_symbol: Optional[str],
        logo_url: Optional[str],
        used_at: datetime,
    ) -> int:
        """Create an alias with a usage count of one. Returns alias ID."""
        pass

    @abstractmethod
    def get_alias(self, alias_id: int) -> Optional[MerchantAlias]:
        """Get alias by ID."""
        pass

    @abstractmethod
    def get_alias_by_name(self, owner_id: str, name: str) -> Optional[MerchantAlias]:
        """Get an owner's alias by exact name."""
        pass

    @abstractmethod
    def list_aliases(self, owner_id: str) -> list[MerchantAlias]:
        """List aliases of one owner."""
        pass

    @abstractmethod
    def update_alias(self, alias_id: int, changes: dict[str, Any]) -> None:
        """Update alias columns (usage_count, last_used_at, name, logo_url, asset_symbol)."""
        pass

    @abstractmethod
    def delete_alias(self, alias_id: int) -> None:
        """Delete an alias."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, fields: dict[str, Any]) -> int:
        """Insert a transaction row. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> None:
        """Update transaction columns."""
        pass

    @abstractmethod
    def delete_transactions(self, transaction_ids: list[int]) -> None:
        """Delete transactions together. Missing IDs are ignored."""
        pass

    @abstractmethod
    def latest_transaction_datetime(
        self, account_id: int, not_before: datetime, exclude_ids: tuple[int, ...] = ()
    ) -> Optional[datetime]:
        """Latest transaction date on an account at or after ``not_before``.

        Transactions in ``exclude_ids`` are ignored. Returns None when none remain.
        """
        pass

    @abstractmethod
    def list_pattern_transactions(self, owner_id: str, pattern_id: int) -> list[Transaction]:
        """List transactions linked to a pattern, oldest first."""
        pass

    # Investment holding operations
    @abstractmethod
    def get_holding(self, owner_id: str, asset_symbol: str, for_update: bool = False) -> Optional[InvestmentHolding]:
        """Get an owner's holding in one asset."""
        pass

    @abstractmethod
    def list_holdings(self, owner_id: str) -> list[InvestmentHolding]:
        """List holdings of one owner."""
        pass

    @abstractmethod
    def create_holding(
        self,
        owner_id: str,
        account_id: int,
        category_id: int,
        asset_symbol: str,
        total_quantity: Decimal,
        average_buy_price: Decimal,
        total_invested_amount: Decimal,
        realized_gain_loss: Decimal,
    ) -> int:
        """Create a holding. Returns holding ID."""
        pass

    @abstractmethod
    def update_holding(
        self,
        holding_id: int,
        total_quantity: Decimal,
        average_buy_price: Decimal,
        total_invested_amount: Decimal,
        realized_gain_loss: Decimal,
    ) -> None:
        """Store new aggregate values for a holding."""
        pass

    @abstractmethod
    def delete_holding(self, holding_id: int) -> None:
        """Delete a holding."""
        pass

    # Recurring pattern operations
    @abstractmethod
    def create_pattern(self, fields: dict[str, Any]) -> int:
        """Insert a recurring pattern. Returns pattern ID."""
        pass

    @abstractmethod
    def get_pattern(self, pattern_id: int) -> Optional[RecurringPattern]:
        """Get pattern by ID."""
        pass

    @abstractmethod
    def find_active_pattern(
        self, owner_id: str, category_id: int, alias_id: Optional[int]
    ) -> Optional[RecurringPattern]:
        """Find the active pattern for (owner, category, alias).

        A missing alias matches patterns whose alias is also missing.
        """
        pass

    @abstractmethod
    def list_patterns(self, owner_id: str) -> list[RecurringPattern]:
        """List patterns of one owner."""
        pass

    @abstractmethod
    def update_pattern(self, pattern_id: int, changes: dict[str, Any]) -> None:
        """Update pattern columns."""
        pass

    @abstractmethod
    def delete_pattern(self, pattern_id: int) -> None:
        """Delete a pattern."""
        pass
