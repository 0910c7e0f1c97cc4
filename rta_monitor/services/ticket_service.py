import logging
from collections.abc import Collection
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from rta_monitor.models.ticket import Ticket
from rta_monitor.services.zendesk_client import ZendeskClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 50


@dataclass
class TicketFetchResult:
    tickets: list[Ticket] = field(default_factory=list)
    pages: int = 0
    is_capped: bool = False
    failed: bool = False


def build_search_query(target_group_ids: Collection[int] | None = None) -> str:
    """Search expression for every new, open and pending ticket, oldest first."""
    parts = ["type:ticket", "status<=pending"]
    if target_group_ids:
        parts.extend(f"group_id:{group_id}" for group_id in sorted(target_group_ids))
    parts.append("sort:created_at_asc")
    return " ".join(parts)


def _parse_tickets(items: list[dict]) -> list[Ticket]:
    tickets = []
    for raw in items:
        try:
            tickets.append(Ticket.model_validate(raw))
        except ValidationError:
            ticket_id = raw.get("id") if isinstance(raw, dict) else None
            logger.warning("Skipping malformed ticket record (id=%s)", ticket_id)
    return tickets


async def fetch_tickets(
    client: ZendeskClient,
    query: str,
    *,
    per_page: int = 100,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> TicketFetchResult:
    """Follow the search cursor until it runs out or ``max_pages`` is reached.

    Pages are requested one at a time since each cursor comes from the previous
    response. A failed page ends the walk and the tickets gathered so far are
    returned; the failure is logged, not raised.
    """
    result = TicketFetchResult()
    cursor: str | None = None

    while result.pages < max_pages:
        try:
            page = await client.search_tickets(query, per_page=per_page, cursor=cursor)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Ticket page %d failed, keeping %d tickets fetched so far: %s",
                result.pages + 1,
                len(result.tickets),
                exc,
            )
            result.failed = True
            return result

        result.tickets.extend(_parse_tickets(page.items))
        result.pages += 1
        cursor = page.next_page
        if not cursor:
            return result

    result.is_capped = True
    logger.warning(
        "Ticket search capped at %d pages (%d tickets); counts may be incomplete",
        max_pages,
        len(result.tickets),
    )
    return result
