"""Typed records of the side effects a transaction mutation produced.

Engines return one record per change they make. The command processor
collects them in an ``EffectLedger`` for the mutation, which is logged when
the unit of work commits and handed back to tests for inspection.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union, TYPE_CHECKING

from finkeep.domain.entities import InvestmentAction

if TYPE_CHECKING:
    from finkeep.database.base import Database
    from finkeep.domain.entities import Account, Category, Transaction


class PatternChange(str, Enum):
    CREATED = "CREATED"
    LINKED = "LINKED"
    UNLINKED = "UNLINKED"
    RETIRED = "RETIRED"


class AliasChange(str, Enum):
    CREATED = "CREATED"
    USED = "USED"
    RELEASED = "RELEASED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class BalanceDelta:
    """One balance adjustment on one account.

    ``skipped`` is set when the transaction predates the account's manual
    balance checkpoint and the balance was left untouched.
    """

    account_id: int
    change: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    previous_updated_at: datetime
    effective_at: datetime
    reverse: bool = False
    skipped: bool = False


@dataclass(frozen=True)
class HoldingDelta:
    holding_id: Optional[int]
    asset_symbol: str
    action: InvestmentAction
    reverse: bool
    quantity_change: Decimal
    invested_change: Decimal
    realized_change: Decimal
    created: bool = False
    removed: bool = False


@dataclass(frozen=True)
class PatternDelta:
    pattern_id: int
    transaction_id: int
    kind: PatternChange


@dataclass(frozen=True)
class AliasDelta:
    alias_id: int
    name: str
    kind: AliasChange


Effect = Union[BalanceDelta, HoldingDelta, PatternDelta, AliasDelta]


@dataclass
class EffectLedger:
    """Ordered effects of one mutation."""

    effects: list[Effect] = field(default_factory=list)

    def record(self, effect: Optional[Effect]) -> None:
        if effect is not None:
            self.effects.append(effect)

    def balance_deltas(self) -> list[BalanceDelta]:
        return [e for e in self.effects if isinstance(e, BalanceDelta)]

    def holding_deltas(self) -> list[HoldingDelta]:
        return [e for e in self.effects if isinstance(e, HoldingDelta)]

    def pattern_deltas(self) -> list[PatternDelta]:
        return [e for e in self.effects if isinstance(e, PatternDelta)]

    def alias_deltas(self) -> list[AliasDelta]:
        return [e for e in self.effects if isinstance(e, AliasDelta)]

    def summary(self) -> str:
        """Compact one-line description for the commit log."""
        if not self.effects:
            return "no effects"
        parts = []
        for delta in self.balance_deltas():
            if delta.skipped:
                parts.append(f"balance[{delta.account_id}] skipped")
            else:
                parts.append(f"balance[{delta.account_id}] {delta.change:+}")
        for delta in self.holding_deltas():
            verb = "reverse " if delta.reverse else ""
            parts.append(f"holding[{delta.asset_symbol}] {verb}{delta.action.value} {delta.quantity_change:+}")
        for delta in self.pattern_deltas():
            parts.append(f"pattern[{delta.pattern_id}] {delta.kind.value.lower()}")
        for delta in self.alias_deltas():
            parts.append(f"alias[{delta.name}] {delta.kind.value.lower()}")
        return ", ".join(parts)


@dataclass
class MutationContext:
    """State shared by the stages of one create, update or delete.

    Stages read and replace ``transaction`` and ``linked`` as they go and
    record every change they make in ``ledger``.
    """

    db: "Database"
    owner_id: str
    ledger: EffectLedger = field(default_factory=EffectLedger)
    transaction: Optional["Transaction"] = None
    linked: Optional["Transaction"] = None
    account: Optional["Account"] = None
    counter_account: Optional["Account"] = None
    category: Optional["Category"] = None
    # Transaction state before an update began
    original: Optional["Transaction"] = None
    # Pending column values for the transaction row
    values: dict[str, Any] = field(default_factory=dict)
    # (frequency, custom days) carried over when a recurring transaction moves pattern
    schedule: Optional[tuple[Any, Optional[int]]] = None
