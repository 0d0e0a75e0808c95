"""HTTP client for the server-side logs endpoint."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class LogsApiClient(Protocol):
    """Interface for the logs endpoint that stamps ownership server-side."""

    async def create_log(
        self, access_token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """Insert a log row and return it."""

    async def update_log(
        self, access_token: str, log_id: str, patch: dict[str, object]
    ) -> dict[str, object]:
        """Update a log row owned by the caller and return it."""

    async def close(self) -> None:
        """Release the connection pool."""


@dataclass
class HttpxLogsApiClient(LogsApiClient):
    """HTTPX-backed logs endpoint client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str) -> "HttpxLogsApiClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def create_log(
        self, access_token: str, payload: dict[str, object]
    ) -> dict[str, object]:
        """POST a new log."""
        response = await self.http_client.post(
            f"{self.base_url}/api/logs",
            headers=_auth_headers(access_token),
            json=payload,
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def update_log(
        self, access_token: str, log_id: str, patch: dict[str, object]
    ) -> dict[str, object]:
        """PATCH an existing log."""
        body = dict(patch)
        body["id"] = log_id
        response = await self.http_client.patch(
            f"{self.base_url}/api/logs",
            headers=_auth_headers(access_token),
            json=body,
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
