from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from rta_monitor.main import create_app
from rta_monitor.models.ticket import Ticket
from rta_monitor.schemas.dashboard import GroupMetric
from rta_monitor.services import metrics_service
from rta_monitor.services.dashboard_state import DashboardState
from rta_monitor.services.zendesk_client import SearchPage

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def ticket_payload(
    ticket_id: int,
    status: str,
    *,
    group_id: int | None,
    channel: str = "email",
    assignee_id: int | None = None,
    wait: int = 0,
    handle: int = 0,
) -> dict:
    """Raw search result for a ticket created ``wait`` and updated ``handle`` minutes before NOW."""
    return {
        "id": ticket_id,
        "subject": f"Ticket {ticket_id}",
        "status": status,
        "assignee_id": assignee_id,
        "group_id": group_id,
        "created_at": (NOW - timedelta(minutes=wait)).isoformat(),
        "updated_at": (NOW - timedelta(minutes=handle)).isoformat(),
        "via": {"channel": channel},
    }


def make_ticket(ticket_id: int, status: str, **kwargs) -> Ticket:
    return Ticket.model_validate(ticket_payload(ticket_id, status, **kwargs))


def make_seed(*groups: tuple[int, str]) -> dict[int, GroupMetric]:
    return {group_id: GroupMetric(id=group_id, name=name) for group_id, name in groups}


class FakeZendeskClient:
    """In-memory stand-in for ZendeskClient.

    ``pages`` are served in order, one per search call; an exception in the
    list is raised instead of returning that page.
    """

    def __init__(self, groups=None, pages=None, agents=None, groups_error=None, agents_error=None):
        self.groups = groups or []
        self.pages = pages or []
        self.agents = agents or []
        self.groups_error = groups_error
        self.agents_error = agents_error
        self.search_calls: list[tuple[str, str | None]] = []
        self.closed = False

    async def search_tickets(self, query, *, per_page=100, cursor=None):
        self.search_calls.append((query, cursor))
        page = self.pages[len(self.search_calls) - 1]
        if isinstance(page, Exception):
            raise page
        return page

    async def list_groups(self, *, per_page=100):
        if self.groups_error:
            raise self.groups_error
        return self.groups

    async def list_agent_availabilities(self):
        if self.agents_error:
            raise self.agents_error
        return self.agents

    async def aclose(self):
        self.closed = True


def search_pages(*batches: list[dict]) -> list[SearchPage]:
    """Chain result batches into pages linked by next_page cursors."""
    pages = []
    for index, items in enumerate(batches):
        has_next = index < len(batches) - 1
        next_page = f"https://example.zendesk.com/api/v2/search.json?page={index + 2}" if has_next else None
        pages.append(SearchPage(items=items, next_page=next_page))
    return pages


def http_error(message: str = "boom") -> httpx.HTTPError:
    return httpx.ConnectError(message)


@pytest.fixture
def fake_client() -> FakeZendeskClient:
    """A client with two groups and one page of tickets."""
    return FakeZendeskClient(
        groups=[{"id": 5, "name": "Billing"}, {"id": 7, "name": "Accounts"}],
        pages=search_pages([
            ticket_payload(1, "new", group_id=5, channel="chat", wait=31),
            ticket_payload(2, "open", group_id=7, handle=10),
            ticket_payload(3, "open", group_id=7, handle=25),
            ticket_payload(4, "pending", group_id=5),
        ]),
        agents=[
            {"attributes": {"agent_status": {"id": "online"}}},
            {"attributes": {"agent_status": {"id": "away"}}},
            {"attributes": {"agent_status": {"id": "offline"}}},
        ],
    )


@pytest.fixture
def dashboard_state(fake_client: FakeZendeskClient) -> DashboardState:
    async def load():
        return await metrics_service.compute_metrics(fake_client, now=NOW)

    return DashboardState(fake_client, loader=load)


@pytest.fixture
async def client(dashboard_state: DashboardState) -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client wired to the FastAPI app with a fake Zendesk client."""
    app = create_app(dashboard_state)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
