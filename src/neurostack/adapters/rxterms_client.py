"""Client for the NLM RxTerms drug-name search API."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class RxTermsClient(Protocol):
    """Interface for RxTerms lookups."""

    async def search(self, terms: str) -> list[object]:
        """Search drug names and return the raw API array."""


@dataclass
class HttpxRxTermsClient(RxTermsClient):
    """HTTPX-backed RxTerms client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxRxTermsClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def search(self, terms: str) -> list[object]:
        """Search RxTerms, asking for the DISPLAY_NAME extra field."""
        response = await self.http_client.get(
            f"{self.base_url}/search",
            params={"terms": terms, "ef": "DISPLAY_NAME"},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
