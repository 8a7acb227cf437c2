"""Transaction domain service.

Every create, update and delete runs as an ordered list of stages over one
``MutationContext`` inside a single unit of work. The first stage to raise
aborts the whole mutation and nothing it did is kept.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Union

from finkeep.database.base import Database
from finkeep.domain.alias import MerchantAliasRegistry, normalize_alias_name
from finkeep.domain.balance import BalanceEngine
from finkeep.domain.category import CategoryService
from finkeep.domain.effects import EffectLedger, MutationContext
from finkeep.domain.entities import (
    AccountGroup,
    CategoryType,
    Frequency,
    InvestmentAction,
    Transaction as TransactionEntity,
    TransactionType,
)
from finkeep.domain.errors import ForbiddenError, ValidationError, immutable_field, transaction_access_denied
from finkeep.domain.holdings import HoldingsAggregator
from finkeep.domain.ownership import OwnershipGuard
from finkeep.domain.recurring import RecurringPatternEngine, next_due_date, parse_frequency, validate_custom_days
from finkeep.domain.transfer import TransferPairing
from finkeep.logging_setup import get_logger
from finkeep.services.location import LocationClient
from finkeep.utils.date_parser import to_naive_utc, utcnow
from finkeep.utils.precision import ZERO, quantize_amount, quantize_price, quantize_quantity

logger = get_logger(__name__)


class _Unset:
    """Marker for a patch field the caller did not touch."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _to_decimal(value: Union[Decimal, int, str], name: str) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {name}: {value}")


def _positive(value: Union[Decimal, int, str, None], name: str) -> Decimal:
    if value is None:
        raise ValidationError(f"{name.capitalize()} is required")
    number = _to_decimal(value, name)
    if number <= ZERO:
        raise ValidationError(f"{name.capitalize()} must be positive")
    return number


def _transaction_type(value: Union[TransactionType, str]) -> TransactionType:
    try:
        return TransactionType(str(value.value if isinstance(value, TransactionType) else value).upper())
    except ValueError:
        raise ValidationError(f"Unknown transaction type: {value}")


def _investment_action(value: Union[InvestmentAction, str]) -> InvestmentAction:
    try:
        return InvestmentAction(str(value.value if isinstance(value, InvestmentAction) else value).upper())
    except ValueError:
        raise ValidationError(f"Unknown investment action: {value}")


def _asset_symbol(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().upper()
    return value or None


@dataclass
class TransactionInput:
    """Everything needed to record a new transaction.

    Setting ``other_account_id`` makes the transaction a transfer. Setting
    ``investment_action`` makes it update the owner's holding in
    ``asset_symbol``.
    """

    account_id: int
    category_number: int
    transaction_type: Union[TransactionType, str]
    amount: Union[Decimal, int, str]
    transaction_datetime: Optional[datetime] = None
    description: Optional[str] = None
    alias_name: Optional[str] = None
    alias_logo_url: Optional[str] = None
    payment_method: Optional[str] = None
    location: Optional[str] = None
    other_account_id: Optional[int] = None
    is_recurring: bool = False
    recurring_frequency: Optional[Union[Frequency, str]] = None
    custom_frequency_days: Optional[int] = None
    asset_symbol: Optional[str] = None
    quantity: Optional[Union[Decimal, int, str]] = None
    price_per_unit: Optional[Union[Decimal, int, str]] = None
    investment_action: Optional[Union[InvestmentAction, str]] = None

    @property
    def is_transfer(self) -> bool:
        return self.other_account_id is not None

    def validated(self) -> "TransactionInput":
        """Return a normalized copy, or raise ``ValidationError``."""
        changes: dict[str, Any] = {
            "amount": quantize_amount(_positive(self.amount, "amount")),
            "transaction_type": _transaction_type(self.transaction_type),
            "transaction_datetime": (
                to_naive_utc(self.transaction_datetime) if self.transaction_datetime is not None else utcnow()
            ),
            "alias_name": normalize_alias_name(self.alias_name),
            "asset_symbol": _asset_symbol(self.asset_symbol),
        }

        if self.is_transfer and self.other_account_id == self.account_id:
            raise ValidationError("A transfer needs two different accounts")

        if self.is_recurring:
            if self.recurring_frequency is None:
                raise ValidationError("A recurring transaction needs a frequency")
            frequency = parse_frequency(self.recurring_frequency)
            changes["recurring_frequency"] = frequency
            if frequency is Frequency.CUSTOM:
                validate_custom_days(self.custom_frequency_days)
            else:
                changes["custom_frequency_days"] = None

        if self.investment_action is not None:
            if self.is_transfer:
                raise ValidationError("A transfer cannot carry an investment action")
            changes["investment_action"] = _investment_action(self.investment_action)
            if changes["asset_symbol"] is None:
                raise ValidationError("Investment transactions need an asset symbol")
            changes["quantity"] = quantize_quantity(_positive(self.quantity, "quantity"))
            changes["price_per_unit"] = quantize_price(_positive(self.price_per_unit, "price"))
        else:
            if self.quantity is not None:
                changes["quantity"] = quantize_quantity(_positive(self.quantity, "quantity"))
            if self.price_per_unit is not None:
                changes["price_per_unit"] = quantize_price(_positive(self.price_per_unit, "price"))

        return replace(self, **changes)


@dataclass
class TransactionPatch:
    """Allowed edits to an existing transaction.

    Fields left as ``UNSET`` are not touched. ``amount``,
    ``transaction_datetime``, ``transaction_type``, ``price_per_unit`` and
    ``investment_action`` cannot change after creation; they are accepted
    here only when equal to the stored value.
    """

    description: Any = UNSET
    category_number: Any = UNSET
    alias_name: Any = UNSET
    alias_logo_url: Any = UNSET
    payment_method: Any = UNSET
    account_id: Any = UNSET
    other_account_id: Any = UNSET
    is_recurring: Any = UNSET
    recurring_frequency: Any = UNSET
    custom_frequency_days: Any = UNSET
    asset_symbol: Any = UNSET
    quantity: Any = UNSET
    amount: Any = UNSET
    transaction_datetime: Any = UNSET
    transaction_type: Any = UNSET
    price_per_unit: Any = UNSET
    investment_action: Any = UNSET

    def provided(self) -> dict[str, Any]:
        """Fields the caller set."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


@dataclass(frozen=True)
class DeleteResult:
    success: bool
    transaction_id: int


_IMMUTABLE_CHECKS: dict[str, Callable[[Any], Any]] = {
    "amount": lambda v: quantize_amount(_to_decimal(v, "amount")),
    "transaction_datetime": lambda v: to_naive_utc(v),
    "transaction_type": _transaction_type,
    "price_per_unit": lambda v: None if v is None else quantize_price(_to_decimal(v, "price")),
    "investment_action": lambda v: None if v is None else _investment_action(v),
}


Stage = Callable[[MutationContext, Any], None]


class TransactionService:
    """Create, update and delete transactions with all their side effects.

    Account balances, holdings, recurring patterns, transfer legs and alias
    usage are kept consistent with the transaction log.
    """

    def __init__(self, db: Database, location_client: Optional[LocationClient] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            location_client: Optional lookup used to tag new transactions
                that were given no location
        """
        self.db = db
        self.location_client = location_client
        self.guard = OwnershipGuard(db)
        self.categories = CategoryService(db)
        self.aliases = MerchantAliasRegistry(db)
        self.balance = BalanceEngine(db)
        self.holdings = HoldingsAggregator(db)
        self.recurring = RecurringPatternEngine(db)
        self.transfers = TransferPairing(self.balance)
        self.last_ledger: Optional[EffectLedger] = None

        self.create_stages: list[Stage] = [
            self._verify_accounts,
            self._resolve_category,
            self._acquire_alias,
            self._insert_row,
            self._apply_balance,
            self._pair_transfer,
            self._apply_holdings,
            self._link_recurring,
        ]
        self.update_stages: list[Stage] = [
            self._reject_immutable_edits,
            self._change_category,
            self._change_alias,
            self._copy_cosmetic_fields,
            self._move_account,
            self._update_transfer,
            self._update_holdings,
            self._unlink_recurring_for_update,
            self._write_row,
            self._relink_recurring,
            self._release_replaced_alias,
        ]
        self.delete_stages: list[Stage] = [
            self._reverse_holdings,
            self._reverse_balance,
            self._cascade_transfer,
            self._unlink_recurring,
            self._delete_rows,
            self._release_alias,
        ]

    def _run(self, ctx: MutationContext, stages: list[Stage], arg: Any) -> None:
        with self.db.unit_of_work():
            for stage in stages:
                stage(ctx, arg)
        self.last_ledger = ctx.ledger

    def _reload(self, ctx: MutationContext) -> TransactionEntity:
        ctx.transaction = self.db.get_transaction(ctx.transaction.id)
        return ctx.transaction

    # Public operations

    def create_transaction(self, owner_id: str, data: TransactionInput) -> TransactionEntity:
        """Record a new transaction and apply its effects.

        Raises:
            UnauthenticatedError: If no owner is given
            ValidationError: If the input is malformed
            ForbiddenError: If an account is not the owner's
            NotFoundError: If the category number is unknown
            ConflictError: If a SELL exceeds the holding
        """
        owner_id = self.guard.require_identity(owner_id)
        data = data.validated()
        if data.location is None and self.location_client is not None:
            data = replace(data, location=self.location_client.fetch_location())

        ctx = MutationContext(db=self.db, owner_id=owner_id)
        self._run(ctx, self.create_stages, data)
        logger.info("Created transaction %s: %s", ctx.transaction.id, ctx.ledger.summary())
        return self.get_transaction(owner_id, ctx.transaction.id)

    def update_transaction(
        self, owner_id: str, transaction_id: int, patch: TransactionPatch
    ) -> TransactionEntity:
        """Apply allowed edits to a transaction.

        Raises:
            ValidationError: If an immutable field would change
            ForbiddenError: If the transaction is not the owner's
        """
        owner_id = self.guard.require_identity(owner_id)
        ctx = MutationContext(db=self.db, owner_id=owner_id)

        def load(ctx: MutationContext, _patch: TransactionPatch) -> None:
            ctx.transaction = self.guard.verify_transaction(owner_id, transaction_id)
            ctx.original = ctx.transaction
            ctx.account = self.db.get_account(ctx.transaction.account_id)

        self._run(ctx, [load, *self.update_stages], patch)
        logger.info("Updated transaction %s: %s", transaction_id, ctx.ledger.summary())
        return self.get_transaction(owner_id, transaction_id)

    def delete_transaction(self, owner_id: str, transaction_id: int) -> DeleteResult:
        """Delete a transaction, its transfer counter leg and their effects.

        Deleting a transaction that no longer exists succeeds.
        """
        owner_id = self.guard.require_identity(owner_id)
        ctx = MutationContext(db=self.db, owner_id=owner_id)
        with self.db.unit_of_work():
            transaction = self.db.get_transaction(transaction_id)
            if transaction is None:
                logger.info("Transaction %s already deleted", transaction_id)
                return DeleteResult(success=True, transaction_id=transaction_id)
            if transaction.owner_id != owner_id:
                raise ForbiddenError(transaction_access_denied(transaction_id))
            ctx.transaction = transaction
            for stage in self.delete_stages:
                stage(ctx, None)
        self.last_ledger = ctx.ledger
        logger.info("Deleted transaction %s: %s", transaction_id, ctx.ledger.summary())
        return DeleteResult(success=True, transaction_id=transaction_id)

    def get_transaction(self, owner_id: str, transaction_id: int) -> TransactionEntity:
        owner_id = self.guard.require_identity(owner_id)
        return self.guard.verify_transaction(owner_id, transaction_id)

    # Create stages

    def _verify_accounts(self, ctx: MutationContext, data: TransactionInput) -> None:
        ctx.account = self.guard.verify_account(ctx.owner_id, data.account_id, for_update=True)
        if data.is_transfer:
            ctx.counter_account = self.guard.verify_account(ctx.owner_id, data.other_account_id, for_update=True)

    def _resolve_category(self, ctx: MutationContext, data: TransactionInput) -> None:
        ctx.category = self.categories.resolve(data.category_number)

    def _acquire_alias(self, ctx: MutationContext, data: TransactionInput) -> None:
        alias_id, effect = self.aliases.acquire(
            ctx.owner_id, data.alias_name, ctx.category.id, data.asset_symbol, data.alias_logo_url
        )
        ctx.values["alias_id"] = alias_id
        ctx.ledger.record(effect)

    def _insert_row(self, ctx: MutationContext, data: TransactionInput) -> None:
        is_investment = (
            data.investment_action is not None
            or ctx.category.category_type is CategoryType.INVESTMENT
            or ctx.account.account_group is AccountGroup.INVESTMENT
            or (ctx.counter_account is not None and ctx.counter_account.account_group is AccountGroup.INVESTMENT)
        )
        transaction_id = self.db.create_transaction(
            {
                "owner_id": ctx.owner_id,
                "account_id": data.account_id,
                "category_id": ctx.category.id,
                "alias_id": ctx.values.get("alias_id"),
                "transaction_type": data.transaction_type,
                "amount": data.amount,
                "transaction_datetime": data.transaction_datetime,
                "description": data.description,
                "location": data.location,
                "payment_method": data.payment_method,
                "is_investment": is_investment,
                "asset_symbol": data.asset_symbol,
                "quantity": data.quantity,
                "price_per_unit": data.price_per_unit,
                "investment_action": data.investment_action,
                "is_transfer": data.is_transfer,
            }
        )
        ctx.transaction = self.db.get_transaction(transaction_id)

    def _apply_balance(self, ctx: MutationContext, data: TransactionInput) -> None:
        txn = ctx.transaction
        ctx.ledger.record(
            self.balance.apply(txn.account_id, txn.amount, txn.transaction_type, txn.transaction_datetime)
        )

    def _pair_transfer(self, ctx: MutationContext, data: TransactionInput) -> None:
        if not data.is_transfer:
            return
        self.transfers.create_pair(ctx, ctx.transaction, data.other_account_id)
        self._reload(ctx)

    def _apply_holdings(self, ctx: MutationContext, data: TransactionInput) -> None:
        txn = ctx.transaction
        if not txn.has_holding_inputs:
            return
        ctx.ledger.record(
            self.holdings.apply(
                ctx.owner_id,
                txn.asset_symbol,
                txn.investment_action,
                txn.quantity,
                txn.price_per_unit,
                txn.amount,
                account_id=txn.account_id,
                category_id=txn.category_id,
                transaction_id=txn.id,
            )
        )
        self._reload(ctx)

    def _link_recurring(self, ctx: MutationContext, data: TransactionInput) -> None:
        if not data.is_recurring:
            return
        ctx.ledger.record(
            self.recurring.link_or_create(
                ctx.owner_id, ctx.transaction, data.recurring_frequency, data.custom_frequency_days
            )
        )
        self._reload(ctx)

    # Update stages

    def _reject_immutable_edits(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.transaction
        for name, normalize in _IMMUTABLE_CHECKS.items():
            if not patch.is_set(name):
                continue
            if normalize(getattr(patch, name)) != getattr(txn, name):
                raise ValidationError(immutable_field(name))

        if patch.is_set("other_account_id") and not txn.is_transfer:
            raise ValidationError("Only transfers have a counter account")
        if (patch.is_set("asset_symbol") or patch.is_set("quantity")) and not txn.has_holding_inputs:
            raise ValidationError("Asset and quantity can only change on investment transactions")

    def _change_category(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        if not patch.is_set("category_number"):
            ctx.category = self.db.get_category(ctx.transaction.category_id)
            return
        ctx.category = self.categories.resolve(patch.category_number)
        if ctx.category.id != ctx.transaction.category_id:
            ctx.values["category_id"] = ctx.category.id

    def _change_alias(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.transaction
        if not patch.is_set("alias_name") and not patch.is_set("alias_logo_url"):
            return

        if patch.is_set("alias_name"):
            name = patch.alias_name
        else:
            current = self.db.get_alias(txn.alias_id) if txn.alias_id is not None else None
            name = current.name if current is not None else None
        logo_url = patch.alias_logo_url if patch.is_set("alias_logo_url") else None
        asset_symbol = patch.asset_symbol if patch.is_set("asset_symbol") else txn.asset_symbol

        alias_id, effect = self.aliases.reassign(
            ctx.owner_id, txn.alias_id, name, ctx.category.id, _asset_symbol(asset_symbol), logo_url
        )
        ctx.ledger.record(effect)
        if alias_id != txn.alias_id:
            ctx.values["alias_id"] = alias_id

    def _copy_cosmetic_fields(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        for name in ("description", "payment_method"):
            if patch.is_set(name) and getattr(patch, name) != getattr(ctx.transaction, name):
                ctx.values[name] = getattr(patch, name)

    def _move_account(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.transaction
        if not patch.is_set("account_id") or patch.account_id == txn.account_id:
            return
        new_account = self.guard.verify_account(ctx.owner_id, patch.account_id, for_update=True)
        if txn.is_transfer:
            leg = self.transfers.linked_leg(ctx, txn)
            counter_id = patch.other_account_id if patch.is_set("other_account_id") else (leg.account_id if leg else None)
            if counter_id == new_account.id:
                raise ValidationError("A transfer needs two different accounts")

        ctx.ledger.record(
            self.balance.apply(
                txn.account_id,
                txn.amount,
                txn.transaction_type,
                txn.transaction_datetime,
                reverse=True,
                transaction_id=txn.id,
            )
        )
        ctx.ledger.record(
            self.balance.apply(new_account.id, txn.amount, txn.transaction_type, txn.transaction_datetime)
        )
        ctx.account = new_account
        ctx.values["account_id"] = new_account.id

    def _update_transfer(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.transaction
        if not txn.is_transfer:
            return
        if patch.is_set("other_account_id"):
            account_id = ctx.values.get("account_id", txn.account_id)
            if patch.other_account_id == account_id:
                raise ValidationError("A transfer needs two different accounts")
            ctx.counter_account = self.guard.verify_account(ctx.owner_id, patch.other_account_id, for_update=True)
            self.transfers.move_counter_leg(ctx, txn, patch.other_account_id)
        self.transfers.mirror_fields(ctx, txn, ctx.values)

    def _update_holdings(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.transaction
        if not txn.has_holding_inputs:
            return
        new_symbol = _asset_symbol(patch.asset_symbol) if patch.is_set("asset_symbol") else txn.asset_symbol
        if new_symbol is None:
            raise ValidationError("Investment transactions need an asset symbol")
        new_quantity = (
            quantize_quantity(_positive(patch.quantity, "quantity")) if patch.is_set("quantity") else txn.quantity
        )
        if new_symbol == txn.asset_symbol and new_quantity == txn.quantity:
            return

        ctx.ledger.record(
            self.holdings.apply(
                ctx.owner_id,
                txn.asset_symbol,
                txn.investment_action,
                txn.quantity,
                txn.price_per_unit,
                txn.amount,
                reverse=True,
                account_id=txn.account_id,
                category_id=txn.category_id,
                cost_basis_price=txn.cost_basis_price,
            )
        )
        ctx.ledger.record(
            self.holdings.apply(
                ctx.owner_id,
                new_symbol,
                txn.investment_action,
                new_quantity,
                txn.price_per_unit,
                txn.amount,
                account_id=ctx.values.get("account_id", txn.account_id),
                category_id=ctx.values.get("category_id", txn.category_id),
                transaction_id=txn.id,
            )
        )
        ctx.values["asset_symbol"] = new_symbol
        ctx.values["quantity"] = new_quantity

    def _wants_recurring(self, ctx: MutationContext, patch: TransactionPatch) -> bool:
        if patch.is_set("is_recurring"):
            return bool(patch.is_recurring)
        return ctx.original.is_recurring

    def _regrouped(self, ctx: MutationContext) -> bool:
        return "category_id" in ctx.values or "alias_id" in ctx.values

    def _unlink_recurring_for_update(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.original
        if txn.recurring_pattern_id is None:
            return
        if self._wants_recurring(ctx, patch) and not self._regrouped(ctx):
            self._change_frequency(ctx, patch)
            return
        if self._wants_recurring(ctx, patch):
            # Keep the schedule so the transaction can join its new group
            pattern = self.db.get_pattern(txn.recurring_pattern_id)
            if pattern is not None:
                ctx.schedule = (pattern.frequency, pattern.custom_frequency_days)
        ctx.ledger.record(self.recurring.unlink(ctx.owner_id, txn))

    def _change_frequency(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        if not patch.is_set("recurring_frequency"):
            return
        pattern = self.db.get_pattern(ctx.original.recurring_pattern_id)
        frequency = parse_frequency(patch.recurring_frequency)
        custom_days = patch.custom_frequency_days if patch.is_set("custom_frequency_days") else None
        if frequency is Frequency.CUSTOM:
            validate_custom_days(custom_days)
        else:
            custom_days = None
        if pattern is None or (pattern.frequency is frequency and pattern.custom_frequency_days == custom_days):
            return
        cursor = pattern.last_generated_date or pattern.start_date
        self.db.update_pattern(
            pattern.id,
            {
                "frequency": frequency,
                "custom_frequency_days": custom_days,
                "next_due_date": next_due_date(pattern.start_date, frequency, cursor, custom_days),
            },
        )

    def _write_row(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        if ctx.values:
            self.db.update_transaction(ctx.transaction.id, ctx.values)
        self._reload(ctx)

    def _relink_recurring(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        txn = ctx.transaction
        if not self._wants_recurring(ctx, patch) or txn.recurring_pattern_id is not None:
            return
        frequency, custom_days = ctx.schedule or (None, None)
        if patch.is_set("recurring_frequency"):
            frequency = patch.recurring_frequency
        if patch.is_set("custom_frequency_days"):
            custom_days = patch.custom_frequency_days
        if frequency is None:
            raise ValidationError("A recurring transaction needs a frequency")
        ctx.ledger.record(self.recurring.link_or_create(ctx.owner_id, txn, frequency, custom_days))
        self._reload(ctx)

    def _release_replaced_alias(self, ctx: MutationContext, patch: TransactionPatch) -> None:
        # Runs last so no row still points at the old alias when it is deleted
        if "alias_id" in ctx.values:
            ctx.ledger.record(self.aliases.release(ctx.original.alias_id))

    # Delete stages

    def _reverse_holdings(self, ctx: MutationContext, _: None) -> None:
        txn = ctx.transaction
        if not txn.has_holding_inputs:
            return
        ctx.ledger.record(
            self.holdings.apply(
                ctx.owner_id,
                txn.asset_symbol,
                txn.investment_action,
                txn.quantity,
                txn.price_per_unit,
                txn.amount,
                reverse=True,
                account_id=txn.account_id,
                category_id=txn.category_id,
                cost_basis_price=txn.cost_basis_price,
            )
        )

    def _reverse_balance(self, ctx: MutationContext, _: None) -> None:
        txn = ctx.transaction
        ctx.ledger.record(
            self.balance.apply(
                txn.account_id,
                txn.amount,
                txn.transaction_type,
                txn.transaction_datetime,
                reverse=True,
                transaction_id=txn.id,
            )
        )

    def _cascade_transfer(self, ctx: MutationContext, _: None) -> None:
        if ctx.transaction.is_transfer:
            self.transfers.remove_pair(ctx, ctx.transaction)

    def _unlink_recurring(self, ctx: MutationContext, _: None) -> None:
        for txn in (ctx.transaction, ctx.linked):
            if txn is not None and txn.recurring_pattern_id is not None:
                ctx.ledger.record(self.recurring.unlink(ctx.owner_id, txn))

    def _delete_rows(self, ctx: MutationContext, _: None) -> None:
        ids = [ctx.transaction.id]
        if ctx.linked is not None:
            ids.append(ctx.linked.id)
        self.db.delete_transactions(ids)

    def _release_alias(self, ctx: MutationContext, _: None) -> None:
        ctx.ledger.record(self.aliases.release(ctx.transaction.alias_id))
