"""Merchant and asset alias registry."""

from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.effects import AliasChange, AliasDelta
from finkeep.domain.entities import MerchantAlias
from finkeep.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    alias_not_found,
    duplicate_alias_name,
)
from finkeep.logging_setup import get_logger
from finkeep.utils.date_parser import utcnow

logger = get_logger(__name__)


def normalize_alias_name(name: Optional[str]) -> Optional[str]:
    """Strip whitespace; blank names mean no alias."""
    if name is None:
        return None
    name = name.strip()
    return name or None


class MerchantAliasRegistry:
    """Per-user display names for payees and assets, with usage counting.

    Every transaction referencing an alias holds one usage. An alias whose
    last usage is released is deleted.
    """

    def __init__(self, db: Database):
        self.db = db

    def acquire(
        self,
        owner_id: str,
        name: Optional[str],
        category_id: int,
        asset_symbol: Optional[str] = None,
        logo_url: Optional[str] = None,
    ) -> tuple[Optional[int], Optional[AliasDelta]]:
        """Take one usage of the alias called ``name``, creating it if needed.

        Returns:
            Tuple of (alias ID, effect). Both are None for a blank name.
        """
        name = normalize_alias_name(name)
        if name is None:
            return None, None

        now = utcnow()
        existing = self.db.get_alias_by_name(owner_id, name)
        if existing is not None:
            changes: dict = {"usage_count": existing.usage_count + 1, "last_used_at": now}
            if logo_url and logo_url != existing.logo_url:
                changes["logo_url"] = logo_url
            if asset_symbol and existing.asset_symbol is None:
                changes["asset_symbol"] = asset_symbol
            self.db.update_alias(existing.id, changes)
            logger.debug("Alias %r used (count %d)", name, existing.usage_count + 1)
            return existing.id, AliasDelta(existing.id, name, AliasChange.USED)

        alias_id = self.db.create_alias(
            owner_id=owner_id,
            name=name,
            category_id=category_id,
            asset_symbol=asset_symbol,
            logo_url=logo_url,
            used_at=now,
        )
        logger.debug("Alias %r created", name)
        return alias_id, AliasDelta(alias_id, name, AliasChange.CREATED)

    def release(self, alias_id: Optional[int]) -> Optional[AliasDelta]:
        """Drop one usage; delete the alias when it was the last one."""
        if alias_id is None:
            return None
        alias = self.db.get_alias(alias_id)
        if alias is None:
            return None
        if alias.usage_count <= 1:
            self.db.delete_alias(alias_id)
            logger.debug("Alias %r deleted", alias.name)
            return AliasDelta(alias_id, alias.name, AliasChange.DELETED)
        self.db.update_alias(alias_id, {"usage_count": alias.usage_count - 1})
        return AliasDelta(alias_id, alias.name, AliasChange.RELEASED)

    def reassign(
        self,
        owner_id: str,
        old_alias_id: Optional[int],
        new_name: Optional[str],
        category_id: int,
        asset_symbol: Optional[str] = None,
        logo_url: Optional[str] = None,
    ) -> tuple[Optional[int], Optional[AliasDelta]]:
        """Point a transaction at the alias called ``new_name``.

        Keeping the same alias only refreshes ``last_used_at``. Otherwise one
        usage of the new alias is acquired and the caller must ``release``
        ``old_alias_id`` once no row references it any more.

        Returns:
            Tuple of (alias ID, effect of the acquire or None)
        """
        name = normalize_alias_name(new_name)
        if old_alias_id is not None and name is not None:
            current = self.db.get_alias(old_alias_id)
            if current is not None and current.name == name:
                changes: dict = {"last_used_at": utcnow()}
                if logo_url and logo_url != current.logo_url:
                    changes["logo_url"] = logo_url
                self.db.update_alias(old_alias_id, changes)
                return old_alias_id, None

        return self.acquire(owner_id, name, category_id, asset_symbol, logo_url)

    def rename(self, owner_id: str, alias_id: int, name: str) -> MerchantAlias:
        """Rename an alias the caller owns."""
        alias = self._get_owned(owner_id, alias_id)
        new_name = normalize_alias_name(name)
        if new_name is None:
            raise ValidationError("Alias name cannot be empty")
        if new_name == alias.name:
            return alias
        if self.db.get_alias_by_name(owner_id, new_name) is not None:
            raise ConflictError(duplicate_alias_name(new_name))
        self.db.update_alias(alias_id, {"name": new_name})
        return self._get_owned(owner_id, alias_id)

    def list_aliases(self, owner_id: str) -> list[MerchantAlias]:
        """List aliases, most used first."""
        return self.db.list_aliases(owner_id)

    def _get_owned(self, owner_id: str, alias_id: int) -> MerchantAlias:
        alias = self.db.get_alias(alias_id)
        if alias is None or alias.owner_id != owner_id:
            raise NotFoundError(alias_not_found(alias_id))
        return alias
