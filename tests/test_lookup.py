import pytest

from core.domain.models import DomainRecord, LookupStatus, Provider
from core.services.lookup import LookupOrchestrator
from fakes import FakeGateway, FakeResolver


class RecordingCache:
    def __init__(self, records=None):
        self.records = records or {}
        self.calls = []

    async def lookup(self, domain):
        self.calls.append(domain)
        return list(self.records.get(domain, []))


def _record(domain):
    return DomainRecord(account_id="1", real_id="billing-1", provider=Provider.OVH, domain=domain)


@pytest.mark.asyncio
async def test_cache_hit_skips_live_lookups():
    cache = RecordingCache({"example.com": [_record("example.com")]})
    resolver = FakeResolver()

    outcome = await LookupOrchestrator(cache, resolver).lookup("example.com")

    assert outcome.status is LookupStatus.FOUND
    assert [r.real_id for r in outcome.records] == ["billing-1"]
    assert outcome.fallback is None
    assert resolver.calls == []


@pytest.mark.asyncio
async def test_cache_miss_falls_back_once():
    cache = RecordingCache()
    resolver = FakeResolver()

    outcome = await LookupOrchestrator(cache, resolver).lookup("unknown.org")

    assert outcome.status is LookupStatus.NOT_FOUND
    assert outcome.records == []
    assert outcome.fallback is not None and outcome.fallback.nameservers == ["ns1.example.net"]
    assert resolver.calls == ["unknown.org"]


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["-bad.com", "bad..com", "example.", "example.1com", "exa mple.com"])
async def test_invalid_query_touches_nothing(query):
    cache = RecordingCache()
    resolver = FakeResolver()

    outcome = await LookupOrchestrator(cache, resolver).lookup(query)

    assert outcome.status is LookupStatus.REJECTED
    assert outcome.rejection
    assert cache.calls == [] and resolver.calls == []


@pytest.mark.asyncio
async def test_rejection_carries_kind():
    outcome = await LookupOrchestrator(RecordingCache(), FakeResolver()).lookup("example.1com")
    assert outcome.rejection_kind == "tld_starts_with_digit"


@pytest.mark.asyncio
async def test_query_length_limit():
    cache = RecordingCache()
    orchestrator = LookupOrchestrator(cache, FakeResolver(), max_query_length=20)

    outcome = await orchestrator.lookup("a" * 16 + ".com")

    assert outcome.status is LookupStatus.REJECTED
    assert outcome.rejection == "Query length is 20, must be shorter than 20"
    assert cache.calls == []
    assert (await orchestrator.lookup("a" * 15 + ".com")).status is LookupStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_against_refreshed_cache(cache):
    await cache.refresh({Provider.OVH: FakeGateway(Provider.OVH, ["alfaexploit.com"])})
    resolver = FakeResolver()
    orchestrator = LookupOrchestrator(cache, resolver)

    assert (await orchestrator.lookup("alfaexploit.com")).status is LookupStatus.FOUND
    assert (await orchestrator.lookup("other.com")).status is LookupStatus.NOT_FOUND
    assert resolver.calls == ["other.com"]
