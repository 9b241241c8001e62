"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from adapters.sqlite_store import SqliteInventoryStore
from core.credentials import LoadedAccounts
from core.domain.models import Provider, ProviderAccount
from core.services.inventory_cache import InventoryCache
from fakes import account


@pytest.fixture
def store(tmp_path):
    store = SqliteInventoryStore(tmp_path / "domain_list.db")
    yield store
    store.close()


@pytest.fixture
def accounts() -> dict[Provider, list[ProviderAccount]]:
    return {
        Provider.OVH: [account(Provider.OVH, "1", "billing-1")],
        Provider.CLOUDFLARE: [account(Provider.CLOUDFLARE, "ops@example.com")],
        Provider.GODADDY: [account(Provider.GODADDY, "gd-1", "gd-real")],
        Provider.DONDOMINIO: [account(Provider.DONDOMINIO, "dd-1", "dd-user")],
    }


@pytest.fixture
def cache(store, accounts) -> InventoryCache:
    return InventoryCache(store, lambda provider: LoadedAccounts(accounts.get(provider, [])))
