"""Mapper functions to convert SQLAlchemy models into domain entities.

Decimal columns are re-quantized on the way out: SQLite stores NUMERIC as
floating point, so the fixed precision is restored here rather than trusted
from the driver.
"""

from finkeep.domain import entities as domain
from finkeep.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    MerchantAlias as ORMMerchantAlias,
    Transaction as ORMTransaction,
    InvestmentHolding as ORMInvestmentHolding,
    RecurringPattern as ORMRecurringPattern,
)
from finkeep.utils.precision import (
    quantize_amount,
    quantize_price,
    quantize_quantity,
    optional_price,
    optional_quantity,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner_id=orm_account.owner_id,
        name=orm_account.name,
        account_group=domain.AccountGroup(orm_account.account_group),
        current_balance=quantize_amount(orm_account.current_balance),
        balance_updated_at=orm_account.balance_updated_at,
        manual_balance_updated_at=orm_account.manual_balance_updated_at,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        number=orm_category.number,
        name=orm_category.name,
        category_type=domain.CategoryType(orm_category.category_type),
        created_at=orm_category.created_at,
    )


def alias_to_domain(orm_alias: ORMMerchantAlias) -> domain.MerchantAlias:
    """Convert SQLAlchemy MerchantAlias model to domain MerchantAlias entity."""
    return domain.MerchantAlias(
        id=orm_alias.id,
        owner_id=orm_alias.owner_id,
        name=orm_alias.name,
        category_id=orm_alias.category_id,
        asset_symbol=orm_alias.asset_symbol,
        logo_url=orm_alias.logo_url,
        usage_count=orm_alias.usage_count,
        last_used_at=orm_alias.last_used_at,
        created_at=orm_alias.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    action = orm_transaction.investment_action
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        account_id=orm_transaction.account_id,
        category_id=orm_transaction.category_id,
        alias_id=orm_transaction.alias_id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        amount=quantize_amount(orm_transaction.amount),
        transaction_datetime=orm_transaction.transaction_datetime,
        description=orm_transaction.description,
        location=orm_transaction.location,
        payment_method=orm_transaction.payment_method,
        is_investment=orm_transaction.is_investment,
        asset_symbol=orm_transaction.asset_symbol,
        quantity=optional_quantity(orm_transaction.quantity),
        price_per_unit=optional_price(orm_transaction.price_per_unit),
        investment_action=domain.InvestmentAction(action) if action is not None else None,
        investment_holding_id=orm_transaction.investment_holding_id,
        cost_basis_price=optional_price(orm_transaction.cost_basis_price),
        is_transfer=orm_transaction.is_transfer,
        linked_transaction_id=orm_transaction.linked_transaction_id,
        is_recurring=orm_transaction.is_recurring,
        recurring_pattern_id=orm_transaction.recurring_pattern_id,
        created_at=orm_transaction.created_at,
    )


def holding_to_domain(orm_holding: ORMInvestmentHolding) -> domain.InvestmentHolding:
    """Convert SQLAlchemy InvestmentHolding model to domain entity."""
    return domain.InvestmentHolding(
        id=orm_holding.id,
        owner_id=orm_holding.owner_id,
        account_id=orm_holding.account_id,
        category_id=orm_holding.category_id,
        asset_symbol=orm_holding.asset_symbol,
        total_quantity=quantize_quantity(orm_holding.total_quantity),
        average_buy_price=quantize_price(orm_holding.average_buy_price),
        total_invested_amount=quantize_amount(orm_holding.total_invested_amount),
        realized_gain_loss=quantize_amount(orm_holding.realized_gain_loss),
        created_at=orm_holding.created_at,
    )


def pattern_to_domain(orm_pattern: ORMRecurringPattern) -> domain.RecurringPattern:
    """Convert SQLAlchemy RecurringPattern model to domain entity."""
    return domain.RecurringPattern(
        id=orm_pattern.id,
        owner_id=orm_pattern.owner_id,
        account_id=orm_pattern.account_id,
        category_id=orm_pattern.category_id,
        alias_id=orm_pattern.alias_id,
        amount=quantize_amount(orm_pattern.amount),
        transaction_type=domain.TransactionType(orm_pattern.transaction_type),
        frequency=domain.Frequency(orm_pattern.frequency),
        custom_frequency_days=orm_pattern.custom_frequency_days,
        start_date=orm_pattern.start_date,
        next_due_date=orm_pattern.next_due_date,
        last_generated_date=orm_pattern.last_generated_date,
        generated_count=orm_pattern.generated_count,
        description=orm_pattern.description,
        location=orm_pattern.location,
        payment_method=orm_pattern.payment_method,
        is_active=orm_pattern.is_active,
        is_paused=orm_pattern.is_paused,
        created_at=orm_pattern.created_at,
    )
