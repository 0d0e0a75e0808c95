"""Tests for drug-name lookup and its endpoint."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from neurostack.api.app import create_app
from neurostack.services.cache import InMemoryCache
from neurostack.services.drugs import DrugLookupService
from tests.conftest import FakeRxTermsClient


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_suggest_prefers_display_names() -> None:
    service = DrugLookupService(client=FakeRxTermsClient(), cache=InMemoryCache())

    result = asyncio.run(service.suggest("advil"))

    assert result.suggestions == ["Advil (Oral Pill)", "Advil PM (Oral Pill)"]
    assert result.total_count == 2


def test_suggest_falls_back_to_terms_and_caps_results() -> None:
    names = [f"Drug {index}" for index in range(15)]
    client = FakeRxTermsClient(payload=[15, names, None, None])
    service = DrugLookupService(client=client, cache=InMemoryCache())

    result = asyncio.run(service.suggest("drug"))

    assert result.suggestions == names[:10]
    assert result.total_count == 15


def test_suggest_caches_per_lowercase_query() -> None:
    clock = _Clock()
    client = FakeRxTermsClient()
    service = DrugLookupService(client=client, cache=InMemoryCache(clock=clock))

    asyncio.run(service.suggest("Advil"))
    asyncio.run(service.suggest("advil"))
    assert client.calls == ["Advil"]

    clock.now = 3600
    asyncio.run(service.suggest("advil"))
    assert client.calls == ["Advil", "advil"]


def test_suggest_rejects_short_queries() -> None:
    client = FakeRxTermsClient()
    service = DrugLookupService(client=client, cache=InMemoryCache())

    with pytest.raises(ValueError):
        asyncio.run(service.suggest("a"))
    assert client.calls == []


def test_rxterms_endpoint_sets_cache_headers(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/rxterms", params={"q": "advil"})

    assert response.status_code == 200
    assert response.json() == {
        "suggestions": ["Advil (Oral Pill)", "Advil PM (Oral Pill)"],
        "totalCount": 2,
    }
    assert (
        response.headers["cache-control"]
        == "public, s-maxage=3600, stale-while-revalidate=86400"
    )


def test_rxterms_endpoint_short_query_is_400(container, rxterms_client) -> None:
    client = TestClient(create_app(container))

    assert client.get("/api/rxterms", params={"q": "a"}).status_code == 400
    assert client.get("/api/rxterms").status_code == 400
    assert rxterms_client.calls == []


def test_rxterms_endpoint_upstream_failure_is_500(container, rxterms_client) -> None:
    rxterms_client.error = httpx.ConnectError("unreachable")
    client = TestClient(create_app(container))

    response = client.get("/api/rxterms", params={"q": "advil"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to fetch drug suggestions"
