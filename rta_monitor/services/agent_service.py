import logging

import httpx

from rta_monitor.schemas.dashboard import AgentStatus
from rta_monitor.services.zendesk_client import ZendeskClient

logger = logging.getLogger(__name__)

OFFLINE_STATUS = "offline"
ONLINE_STATUS = "online"


def _status_of(entry: dict) -> str:
    attributes = entry.get("attributes") or {}
    status = attributes.get("agent_status") or {}
    return str(status.get("id") or status.get("name") or OFFLINE_STATUS).lower()


async def get_agent_status(client: ZendeskClient) -> AgentStatus:
    """Count online and working (any non-offline status) agents.

    Best effort: any failure is logged and reported as zero agents.
    """
    try:
        entries = await client.list_agent_availabilities()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Agent status unavailable: %s", exc)
        return AgentStatus()

    statuses = [_status_of(entry) for entry in entries if isinstance(entry, dict)]
    return AgentStatus(
        online=sum(1 for s in statuses if s == ONLINE_STATUS),
        working=sum(1 for s in statuses if s != OFFLINE_STATUS),
    )
