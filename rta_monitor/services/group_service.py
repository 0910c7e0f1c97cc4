import logging
from collections.abc import Collection

import httpx
from pydantic import ValidationError

from rta_monitor.models.group import Group
from rta_monitor.schemas.dashboard import GroupMetric
from rta_monitor.services.zendesk_client import ZendeskClient

logger = logging.getLogger(__name__)


async def list_groups(client: ZendeskClient, *, per_page: int = 100) -> list[Group]:
    """List groups from the API. Malformed records are skipped."""
    groups: list[Group] = []
    for raw in await client.list_groups(per_page=per_page):
        try:
            groups.append(Group.model_validate(raw))
        except ValidationError:
            logger.warning("Skipping malformed group record: %r", raw)
    return groups


async def load_group_metrics(
    client: ZendeskClient,
    target_group_ids: Collection[int] | None = None,
    *,
    per_page: int = 100,
) -> dict[int, GroupMetric]:
    """Seed a zeroed GroupMetric per known group, keyed by group id.

    When ``target_group_ids`` is non-empty only those groups are seeded.
    A failed listing yields an empty mapping; every ticket is then dropped as
    belonging to an unknown group.
    """
    try:
        groups = await list_groups(client, per_page=per_page)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Group listing failed, continuing with no groups: %s", exc)
        return {}

    targets = set(target_group_ids) if target_group_ids else None
    return {
        group.id: GroupMetric(id=group.id, name=group.name)
        for group in groups
        if targets is None or group.id in targets
    }
