"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Every subclass carries a stable ``kind`` so callers can map failures to
    their own surface (exit codes, API error codes) without parsing messages.
    """

    kind = "DOMAIN"


class UnauthenticatedError(DomainError):
    """No caller identity was supplied."""

    kind = "UNAUTHENTICATED"


class ForbiddenError(DomainError):
    """Caller identity does not own the referenced resource."""

    kind = "FORBIDDEN"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = "VALIDATION"


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    kind = "NOT_FOUND"


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = "CONFLICT"


class HoldingNotFoundError(ConflictError):
    """A SELL referenced an asset that has never been bought."""


class InsufficientQuantityError(ConflictError):
    """A SELL exceeded the quantity currently held."""


def not_authenticated() -> str:
    """Return message for a missing caller identity."""
    return "Not authenticated"


def account_access_denied(account_id: int) -> str:
    """Return message for an account the caller cannot use."""
    return f"Account {account_id} not found or access denied"


def transaction_access_denied(transaction_id: int) -> str:
    """Return message for a transaction the caller cannot use."""
    return f"Transaction {transaction_id} not found or access denied"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_number_not_found(number: int) -> str:
    """Return message for missing category by numeric code."""
    return f"Category {number} not found"


def pattern_not_found(pattern_id: int) -> str:
    """Return message for missing recurring pattern."""
    return f"Recurring pattern {pattern_id} not found"


def alias_not_found(alias_id: int) -> str:
    """Return message for missing merchant alias."""
    return f"Alias {alias_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def duplicate_category_number(number: int) -> str:
    """Return message for duplicate category code."""
    return f"Category with number {number} already exists"


def duplicate_alias_name(name: str) -> str:
    """Return message for duplicate alias name."""
    return f"Alias '{name}' already exists"


def immutable_field(field_name: str) -> str:
    """Return message for an attempt to edit an immutable transaction field."""
    return (
        f"Field '{field_name}' cannot be changed after creation. "
        "Delete the transaction and create it again instead."
    )


def holding_not_found(asset_symbol: str) -> str:
    """Return message for a SELL without a prior BUY."""
    return f"Cannot sell {asset_symbol}: asset is not in holdings"


def insufficient_quantity(asset_symbol: str, requested: Decimal, available: Decimal) -> str:
    """Return message for a SELL larger than the held quantity."""
    return (
        f"Cannot sell {requested} {asset_symbol}: "
        f"only {available} available"
    )
