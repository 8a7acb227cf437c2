"""Domain layer for finkeep application."""

from importlib import import_module

_EXPORTS = {
    "TransactionService": "finkeep.domain.transaction",
    "TransactionInput": "finkeep.domain.transaction",
    "TransactionPatch": "finkeep.domain.transaction",
    "DeleteResult": "finkeep.domain.transaction",
    "UNSET": "finkeep.domain.transaction",
    "CategoryService": "finkeep.domain.category",
    "AccountService": "finkeep.domain.account",
    "MerchantAliasRegistry": "finkeep.domain.alias",
    "HoldingsAggregator": "finkeep.domain.holdings",
    "RecurringPatternEngine": "finkeep.domain.recurring",
}

__all__ = list(_EXPORTS)


# Services are loaded lazily: finkeep.database imports the entity modules of
# this package, so importing the services here would be circular
def __getattr__(name):
    if name in _EXPORTS:
        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
