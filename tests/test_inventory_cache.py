"""Tests for the inventory cache refresh/lookup protocol."""

import asyncio
from collections import Counter

import pytest

from adapters.providers import DonDominioGateway
from adapters.sqlite_store import SqliteInventoryStore
from core.config import AppSettings
from core.credentials import LoadedAccounts, load_accounts
from core.domain.errors import CredentialsError, StorageError
from core.domain.models import DomainRecord, Provider, ProviderAccount
from core.services.inventory_cache import InventoryCache
from fakes import BlockingGateway, FakeGateway, account


def _all_gateways(overrides=None):
    gateways = {
        Provider.OVH: FakeGateway(Provider.OVH, ["example.com", "alfaexploit.com"]),
        Provider.CLOUDFLARE: FakeGateway(Provider.CLOUDFLARE, ["example.com", "cf-only.net"]),
        Provider.GODADDY: FakeGateway(Provider.GODADDY, ["gd-only.org"]),
        Provider.DONDOMINIO: FakeGateway(Provider.DONDOMINIO, ["dd-only.es"]),
    }
    gateways.update(overrides or {})
    return gateways


def _snapshot(store, domains):
    return Counter(record for domain in domains for record in store.query_exact(domain))


class TestLookup:
    @pytest.mark.asyncio
    async def test_hit_and_miss(self, store):
        store.create_schema()
        store.insert_many([DomainRecord(account_id="1", real_id="1", provider=Provider.OVH, domain="example.com")])
        cache = InventoryCache(store, lambda provider: LoadedAccounts())

        found = await cache.lookup("example.com")
        assert len(found) == 1
        assert found[0].provider is Provider.OVH
        assert await cache.lookup("nonexistent.com") == []

    @pytest.mark.asyncio
    async def test_no_normalization(self, cache):
        await cache.refresh({Provider.OVH: FakeGateway(Provider.OVH, ["Example.com"])})
        assert await cache.lookup("example.com") == []
        assert await cache.lookup("Example.com.") == []
        assert len(await cache.lookup("Example.com")) == 1

    @pytest.mark.asyncio
    async def test_same_domain_under_several_providers(self, cache):
        await cache.refresh(_all_gateways())
        records = await cache.lookup("example.com")
        assert {r.provider for r in records} == {Provider.OVH, Provider.CLOUDFLARE}


class TestRefresh:
    @pytest.mark.asyncio
    async def test_all_providers_succeed(self, cache, store):
        outcome = await cache.refresh(_all_gateways())

        assert outcome.ok
        assert outcome.populated
        assert outcome.total_records == 6 == store.count()
        assert cache.is_populated()
        ovh = (await cache.lookup("alfaexploit.com"))[0]
        assert (ovh.account_id, ovh.real_id) == ("1", "billing-1")

    @pytest.mark.asyncio
    async def test_one_provider_fails(self, cache):
        gateways = _all_gateways({Provider.CLOUDFLARE: FakeGateway(Provider.CLOUDFLARE, fail=True)})

        outcome = await cache.refresh(gateways)

        assert not outcome.ok
        assert outcome.failed_providers == [Provider.CLOUDFLARE]
        assert cache.is_populated()
        assert outcome.total_records == 4
        assert await cache.lookup("cf-only.net") == []
        assert [r.provider for r in await cache.lookup("example.com")] == [Provider.OVH]
        for provider in (Provider.OVH, Provider.GODADDY, Provider.DONDOMINIO):
            assert gateways[provider].calls

    @pytest.mark.asyncio
    async def test_failed_account_does_not_stop_the_provider(self, store):
        accounts = {Provider.GODADDY: [account(Provider.GODADDY, "a"), account(Provider.GODADDY, "b")]}
        cache = InventoryCache(store, lambda provider: LoadedAccounts(accounts.get(provider, [])))
        gateway = FakeGateway(Provider.GODADDY, {"a": ["a.com"], "b": ["b.com"]}, fail={"a"})

        outcome = await cache.refresh({Provider.GODADDY: gateway})

        report = outcome.reports[0]
        assert gateway.calls == ["a", "b"]
        assert not report.ok
        assert report.accounts == 2
        assert report.records == 1
        assert await cache.lookup("b.com")

    @pytest.mark.asyncio
    async def test_credentials_error_skips_provider(self, store):
        def loader(provider):
            if provider is Provider.OVH:
                raise CredentialsError("File does not exist: configs/ovh.list", provider="ovh")
            return LoadedAccounts([account(provider)])

        cache = InventoryCache(store, loader)
        ovh = FakeGateway(Provider.OVH, ["ovh.com"])
        outcome = await cache.refresh(
            {Provider.OVH: ovh, Provider.GODADDY: FakeGateway(Provider.GODADDY, ["gd.com"])}
        )

        assert ovh.calls == []
        assert outcome.failed_providers == [Provider.OVH]
        assert "File does not exist" in outcome.reports[0].errors[0]
        assert outcome.populated

    @pytest.mark.asyncio
    async def test_empty_domain_names_are_skipped(self, cache, store):
        await cache.refresh({Provider.OVH: FakeGateway(Provider.OVH, ["", "ok.com"])})
        assert store.count() == 1

    @pytest.mark.asyncio
    async def test_refresh_is_idempotent(self, cache, store):
        domains = ["example.com", "alfaexploit.com", "cf-only.net", "gd-only.org", "dd-only.es"]

        await cache.refresh(_all_gateways())
        first = _snapshot(store, domains)
        await cache.refresh(_all_gateways())
        second = _snapshot(store, domains)

        assert first == second
        assert store.count() == 6

    @pytest.mark.asyncio
    async def test_sequential_mode_matches_parallel(self, store, accounts):
        cache = InventoryCache(store, lambda provider: LoadedAccounts(accounts[provider]), parallel=False)
        outcome = await cache.refresh(_all_gateways())
        assert [r.provider for r in outcome.reports] == list(_all_gateways())
        assert outcome.total_records == 6

    @pytest.mark.asyncio
    async def test_everything_fails(self, cache):
        gateways = {p: FakeGateway(p, fail=True) for p in Provider}
        outcome = await cache.refresh(gateways)
        assert not outcome.populated
        assert set(outcome.failed_providers) == set(Provider)
        assert not cache.is_populated()

    @pytest.mark.asyncio
    async def test_storage_error_is_fatal(self, accounts):
        class BrokenStore(SqliteInventoryStore):
            def wipe(self):
                raise StorageError("disk full")

        cache = InventoryCache(BrokenStore(":memory:"), lambda provider: LoadedAccounts(accounts[provider]))
        with pytest.raises(StorageError):
            await cache.refresh(_all_gateways())
        assert not cache.refreshing

    @pytest.mark.asyncio
    async def test_storage_error_cancels_other_providers(self, accounts):
        class FailingInsertStore(SqliteInventoryStore):
            def insert_many(self, records):
                records = list(records)
                if records and records[0].provider is Provider.OVH:
                    raise StorageError("disk full")
                return super().insert_many(records)

        store = FailingInsertStore(":memory:")
        cache = InventoryCache(store, lambda provider: LoadedAccounts(accounts[provider]))
        slow = BlockingGateway(Provider.CLOUDFLARE, ["cf-only.net"])

        with pytest.raises(StorageError):
            await cache.refresh({Provider.OVH: FakeGateway(Provider.OVH, ["example.com"]), Provider.CLOUDFLARE: slow})

        slow.gate.set()
        await asyncio.sleep(0.01)
        assert slow.calls == []
        assert store.count() == 0
        assert not cache.refreshing

    @pytest.mark.asyncio
    async def test_bad_proxy_only_fails_dondominio(self, store):
        dondominio = ProviderAccount(
            provider=Provider.DONDOMINIO, account_id="dd-1", real_id="dd-user", secrets={"password": "pw"}
        )
        accounts = {Provider.OVH: [account(Provider.OVH)], Provider.DONDOMINIO: [dondominio]}
        cache = InventoryCache(store, lambda provider: LoadedAccounts(accounts[provider]))
        settings = AppSettings(dondominio_endpoint="https://dd.test", socks5_proxy=None)
        gateways = {
            Provider.OVH: FakeGateway(Provider.OVH, ["example.com"]),
            Provider.DONDOMINIO: DonDominioGateway(settings, proxy="ftp://127.0.0.1:1080"),
        }

        outcome = await cache.refresh(gateways)

        assert outcome.populated
        assert outcome.failed_providers == [Provider.DONDOMINIO]
        assert "invalid HTTP client configuration" in outcome.reports[1].errors[0]
        assert await cache.lookup("example.com")

    @pytest.mark.asyncio
    async def test_malformed_credentials_line_keeps_valid_accounts(self, store, tmp_path):
        path = tmp_path / "godaddy.list"
        path.write_text("gd-1:k:s:gd-real\ngd-2:k\n", encoding="utf-8")
        cache = InventoryCache(store, lambda provider: load_accounts(provider, path))
        gateway = FakeGateway(Provider.GODADDY, ["gd.org"])

        outcome = await cache.refresh({Provider.GODADDY: gateway})

        report = outcome.reports[0]
        assert gateway.calls == ["gd-1"]
        assert report.accounts == 1
        assert report.records == 1
        assert not report.ok
        assert "line 2" in report.errors[0]
        assert [r.real_id for r in await cache.lookup("gd.org")] == ["gd-real"]

    @pytest.mark.asyncio
    async def test_lookups_wait_for_refresh(self, cache):
        gateway = BlockingGateway(Provider.OVH, ["example.com"])
        refresh = asyncio.create_task(cache.refresh({Provider.OVH: gateway}))
        await gateway.started.wait()
        assert cache.refreshing

        lookup = asyncio.create_task(cache.lookup("example.com"))
        await asyncio.sleep(0.01)
        assert not lookup.done()

        gateway.gate.set()
        await refresh
        assert [r.domain for r in await lookup] == ["example.com"]


class TestEnsurePopulated:
    @pytest.mark.asyncio
    async def test_missing_cache_triggers_refresh(self, cache, store):
        assert not store.exists()
        outcome = await cache.ensure_populated(_all_gateways())
        assert outcome is not None and outcome.populated

    @pytest.mark.asyncio
    async def test_populated_cache_is_reused(self, cache):
        await cache.refresh(_all_gateways())
        gateways = _all_gateways()
        assert await cache.ensure_populated(gateways) is None
        assert all(not g.calls for g in gateways.values())

    @pytest.mark.asyncio
    async def test_empty_cache_triggers_refresh(self, cache, store):
        store.create_schema()
        assert store.exists()
        outcome = await cache.ensure_populated(_all_gateways())
        assert outcome is not None

    @pytest.mark.asyncio
    async def test_force(self, cache):
        await cache.refresh(_all_gateways())
        gateways = _all_gateways()
        outcome = await cache.ensure_populated(gateways, force=True)
        assert outcome is not None
        assert gateways[Provider.OVH].calls == ["1"]
