"""SQLAlchemy models for finkeep database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    Text,
    Enum,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from finkeep.domain.entities import (
    AccountGroup,
    CategoryType,
    Frequency,
    InvestmentAction,
    TransactionType,
)
from finkeep.utils.date_parser import utcnow

Base = declarative_base()


class Account(Base):
    """Account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_group = Column(Enum(AccountGroup, name="account_group"), nullable=False)
    current_balance = Column(Numeric(15, 2), default=0, nullable=False)
    balance_updated_at = Column(DateTime, default=utcnow, nullable=False)
    manual_balance_updated_at = Column(DateTime, default=utcnow, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_account_owner_name"),)

    # Relationships
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete-orphan")


class Category(Base):
    """Category model, addressed externally by its stable number."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    number = Column(Integer, unique=True, nullable=False)
    name = Column(String, unique=True, nullable=False)
    category_type = Column(Enum(CategoryType, name="category_type"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class MerchantAlias(Base):
    """Per-user payee/asset display name with usage tracking."""

    __tablename__ = "merchant_aliases"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    asset_symbol = Column(String, nullable=True)
    logo_url = Column(String, nullable=True)
    usage_count = Column(Integer, default=0, nullable=False)
    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_alias_owner_name"),)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    alias_id = Column(Integer, ForeignKey("merchant_aliases.id"), nullable=True)
    transaction_type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    transaction_datetime = Column(DateTime, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)

    # Investment specific fields
    is_investment = Column(Boolean, default=False, nullable=False)
    asset_symbol = Column(String, nullable=True)
    quantity = Column(Numeric(15, 6), nullable=True)
    price_per_unit = Column(Numeric(15, 4), nullable=True)
    investment_action = Column(Enum(InvestmentAction, name="investment_action"), nullable=True)
    investment_holding_id = Column(
        Integer, ForeignKey("investment_holdings.id", ondelete="SET NULL"), nullable=True
    )
    cost_basis_price = Column(Numeric(15, 4), nullable=True)

    # Transfer
    is_transfer = Column(Boolean, default=False, nullable=False)
    linked_transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True)

    # Recurring
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_pattern_id = Column(
        Integer, ForeignKey("recurring_patterns.id", ondelete="SET NULL"), nullable=True
    )

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_owner_datetime", "owner_id", "transaction_datetime"),
        Index("ix_transactions_pattern", "recurring_pattern_id"),
    )

    # Relationships
    account = relationship("Account", back_populates="transactions")


class InvestmentHolding(Base):
    """Weighted-average-cost position in one asset."""

    __tablename__ = "investment_holdings"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    asset_symbol = Column(String, nullable=False)
    total_quantity = Column(Numeric(15, 6), nullable=False)
    average_buy_price = Column(Numeric(15, 4), nullable=False)
    total_invested_amount = Column(Numeric(15, 2), nullable=False)
    realized_gain_loss = Column(Numeric(15, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "asset_symbol", name="uq_holding_owner_asset"),)


class RecurringPattern(Base):
    """Recurring-payment template."""

    __tablename__ = "recurring_patterns"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    alias_id = Column(Integer, ForeignKey("merchant_aliases.id"), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    transaction_type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    frequency = Column(Enum(Frequency, name="recurring_frequency"), nullable=False)
    custom_frequency_days = Column(Integer, nullable=True)
    start_date = Column(DateTime, nullable=False)
    next_due_date = Column(DateTime, nullable=False)
    last_generated_date = Column(DateTime, nullable=True)
    generated_count = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_paused = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (Index("ix_patterns_owner_category_alias", "owner_id", "category_id", "alias_id"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
