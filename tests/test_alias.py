"""Tests for MerchantAliasRegistry."""

import pytest

from conftest import OTHER_OWNER, OWNER
from finkeep.domain.alias import MerchantAliasRegistry, normalize_alias_name
from finkeep.domain.effects import AliasChange
from finkeep.domain.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def registry(temp_db):
    return MerchantAliasRegistry(temp_db)


@pytest.mark.parametrize(
    "raw,expected",
    [(None, None), ("", None), ("   ", None), (" Corner Shop ", "Corner Shop")],
)
def test_normalize_alias_name(raw, expected):
    assert normalize_alias_name(raw) == expected


class TestAcquireRelease:
    """Usage counting across acquire and release."""

    def test_blank_name_means_no_alias(self, registry, categories):
        assert registry.acquire(OWNER, "  ", categories[100].id) == (None, None)

    def test_acquire_creates_then_reuses(self, temp_db, registry, categories):
        alias_id, created = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        same_id, used = registry.acquire(OWNER, "Corner Shop", categories[100].id)

        assert same_id == alias_id
        assert created.kind is AliasChange.CREATED
        assert used.kind is AliasChange.USED
        alias = temp_db.get_alias(alias_id)
        assert alias.usage_count == 2
        assert alias.last_used_at is not None

    def test_names_are_per_owner(self, registry, categories):
        mine, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        theirs, _ = registry.acquire(OTHER_OWNER, "Corner Shop", categories[100].id)
        assert mine != theirs

    def test_acquire_fills_symbol_and_logo(self, temp_db, registry, categories):
        alias_id, _ = registry.acquire(OWNER, "Acme", categories[900].id)
        registry.acquire(OWNER, "Acme", categories[900].id, asset_symbol="ACME", logo_url="https://logo.example/acme.png")

        alias = temp_db.get_alias(alias_id)
        assert alias.asset_symbol == "ACME"
        assert alias.logo_url == "https://logo.example/acme.png"

    def test_release_decrements_then_deletes(self, temp_db, registry, categories):
        alias_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        registry.acquire(OWNER, "Corner Shop", categories[100].id)

        released = registry.release(alias_id)
        assert released.kind is AliasChange.RELEASED
        assert temp_db.get_alias(alias_id).usage_count == 1

        deleted = registry.release(alias_id)
        assert deleted.kind is AliasChange.DELETED
        assert temp_db.get_alias(alias_id) is None

    def test_release_missing_is_noop(self, registry):
        assert registry.release(None) is None
        assert registry.release(12345) is None


class TestReassign:
    def test_same_name_only_touches(self, temp_db, registry, categories):
        alias_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)

        new_id, effect = registry.reassign(OWNER, alias_id, "Corner Shop", categories[100].id)

        assert new_id == alias_id
        assert effect is None
        assert temp_db.get_alias(alias_id).usage_count == 1

    def test_new_name_acquires_without_releasing(self, temp_db, registry, categories):
        """The old alias stays until the caller releases it."""
        old_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)

        new_id, effect = registry.reassign(OWNER, old_id, "Market", categories[100].id)

        assert new_id != old_id
        assert effect.kind is AliasChange.CREATED
        assert temp_db.get_alias(old_id).usage_count == 1

    def test_clearing_returns_none(self, registry, categories):
        old_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        assert registry.reassign(OWNER, old_id, None, categories[100].id) == (None, None)


class TestRename:
    def test_rename(self, registry, categories):
        alias_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        renamed = registry.rename(OWNER, alias_id, "The Corner Shop")
        assert renamed.name == "The Corner Shop"

    def test_rename_to_taken_name(self, registry, categories):
        alias_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        registry.acquire(OWNER, "Market", categories[100].id)
        with pytest.raises(ConflictError):
            registry.rename(OWNER, alias_id, "Market")

    def test_rename_to_blank(self, registry, categories):
        alias_id, _ = registry.acquire(OWNER, "Corner Shop", categories[100].id)
        with pytest.raises(ValidationError):
            registry.rename(OWNER, alias_id, " ")

    def test_rename_other_owners_alias(self, registry, categories):
        alias_id, _ = registry.acquire(OTHER_OWNER, "Corner Shop", categories[100].id)
        with pytest.raises(NotFoundError):
            registry.rename(OWNER, alias_id, "Mine now")


def test_list_aliases_most_used_first(registry, categories):
    registry.acquire(OWNER, "Bakery", categories[100].id)
    for _ in range(3):
        registry.acquire(OWNER, "Market", categories[100].id)
    registry.acquire(OTHER_OWNER, "Elsewhere", categories[100].id)

    names = [alias.name for alias in registry.list_aliases(OWNER)]

    assert names == ["Market", "Bakery"]
