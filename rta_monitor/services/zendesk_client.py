import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from rta_monitor.config import Settings

logger = logging.getLogger(__name__)


class TransportUnavailableError(RuntimeError):
    """Raised when there is no client binding to issue API requests with."""


@dataclass
class SearchPage:
    items: list[dict[str, Any]] = field(default_factory=list)
    next_page: str | None = None


class ZendeskClient:
    """Thin async wrapper around the Zendesk REST endpoints the dashboard reads.

    All methods raise ``httpx.HTTPError`` on transport or status failures and
    ``ValueError`` when a body is not a JSON object; callers decide how much of
    that to tolerate.
    """

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            auth=(f"{email}/token", api_token),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ZendeskClient | None":
        """Build a client from settings, or None when credentials are missing."""
        if not settings.zendesk_configured:
            return None
        return cls(
            base_url=f"https://{settings.zendesk_subdomain}.zendesk.com",
            email=settings.zendesk_email,
            api_token=settings.zendesk_api_token,
            timeout=settings.zendesk_timeout_seconds,
        )

    async def request(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._http.get(url, params=params)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from {url}, got {type(data).__name__}")
        return data

    async def search_tickets(
        self, query: str, *, per_page: int = 100, cursor: str | None = None
    ) -> SearchPage:
        """Fetch one page of search results.

        ``cursor`` is the absolute ``next_page`` URL of the previous page; it
        already carries the query, so the query is only sent on the first call.
        """
        if cursor:
            data = await self.request(cursor)
        else:
            data = await self.request(
                "/api/v2/search.json", params={"query": query, "per_page": per_page}
            )
        return SearchPage(items=data.get("results") or [], next_page=data.get("next_page"))

    async def list_groups(self, *, per_page: int = 100) -> list[dict[str, Any]]:
        data = await self.request("/api/v2/groups.json", params={"per_page": per_page})
        return data.get("groups") or []

    async def list_agent_availabilities(self) -> list[dict[str, Any]]:
        data = await self.request("/api/v2/agent_availabilities")
        return data.get("data") or []

    async def aclose(self) -> None:
        await self._http.aclose()
