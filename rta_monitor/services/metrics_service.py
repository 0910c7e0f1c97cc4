import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from rta_monitor.config import Thresholds, settings
from rta_monitor.models.base import ChannelClass, TicketStatus
from rta_monitor.models.ticket import Ticket
from rta_monitor.schemas.dashboard import (
    AgentStatus,
    DashboardMetrics,
    GroupMetric,
    LongestRecord,
)
from rta_monitor.services import agent_service, group_service, ticket_service
from rta_monitor.services.channel_service import classify_channel
from rta_monitor.services.zendesk_client import TransportUnavailableError, ZendeskClient

logger = logging.getLogger(__name__)

NO_GROUP_ID = 0


def elapsed_minutes(now: datetime, since: datetime) -> int:
    """Whole minutes elapsed between ``since`` and ``now``, never negative."""
    total = (now - since).total_seconds()
    return max(0, int(total // 60))


@dataclass
class _Record:
    time: int = 0
    ticket_id: int | None = None
    position: int | None = None

    def offer(self, time: int, ticket_id: int, position: int) -> None:
        # Strictly greater: the first ticket to reach a maximum keeps it
        if time > self.time:
            self.time = time
            self.ticket_id = ticket_id
            self.position = position

    def freeze(self) -> LongestRecord:
        return LongestRecord(time=self.time, ticket_id=self.ticket_id, position=self.position)

    @classmethod
    def thaw(cls, record: LongestRecord) -> "_Record":
        return cls(time=record.time, ticket_id=record.ticket_id, position=record.position)


@dataclass
class _GroupAccumulator:
    id: int
    name: str
    longest_email_wait: int = 0
    longest_msg_wait: int = 0
    longest_email_aht: int = 0
    longest_msg_aht: int = 0
    new_email: int = 0
    new_msg: int = 0
    open_email: int = 0
    open_msg: int = 0
    pending_tickets: int = 0
    breached_wait: int = 0
    breached_aht: int = 0
    total_breached: int = 0
    longest_wait: _Record = field(default_factory=_Record)
    longest_handle: _Record = field(default_factory=_Record)

    @classmethod
    def from_metric(cls, metric: GroupMetric) -> "_GroupAccumulator":
        values = metric.model_dump(exclude={"longest_wait", "longest_handle"})
        return cls(
            **values,
            longest_wait=_Record.thaw(metric.longest_wait),
            longest_handle=_Record.thaw(metric.longest_handle),
        )

    def freeze(self) -> GroupMetric:
        return GroupMetric(
            id=self.id,
            name=self.name,
            longest_email_wait=self.longest_email_wait,
            longest_msg_wait=self.longest_msg_wait,
            longest_email_aht=self.longest_email_aht,
            longest_msg_aht=self.longest_msg_aht,
            new_email=self.new_email,
            new_msg=self.new_msg,
            open_email=self.open_email,
            open_msg=self.open_msg,
            pending_tickets=self.pending_tickets,
            breached_wait=self.breached_wait,
            breached_aht=self.breached_aht,
            total_breached=self.total_breached,
            longest_wait=self.longest_wait.freeze(),
            longest_handle=self.longest_handle.freeze(),
        )


@dataclass
class _Totals:
    longest_wait: _Record = field(default_factory=_Record)
    longest_handle: _Record = field(default_factory=_Record)
    total_new: int = 0
    total_open: int = 0
    breached_wait_count: int = 0
    breached_handle_count: int = 0


@dataclass(frozen=True)
class _Observation:
    ticket: Ticket
    position: int
    channel: ChannelClass
    wait_minutes: int
    handle_minutes: int


def _fold_new(totals: _Totals, group: _GroupAccumulator, obs: _Observation, thresholds: Thresholds) -> None:
    totals.total_new += 1
    if obs.channel is ChannelClass.messaging:
        group.new_msg += 1
    else:
        group.new_email += 1

    # Wait time only runs while nobody has picked the ticket up
    if obs.ticket.assignee_id is not None:
        return

    wait = obs.wait_minutes
    totals.longest_wait.offer(wait, obs.ticket.id, obs.position)
    group.longest_wait.offer(wait, obs.ticket.id, obs.position)
    if obs.channel is ChannelClass.messaging:
        group.longest_msg_wait = max(group.longest_msg_wait, wait)
    else:
        group.longest_email_wait = max(group.longest_email_wait, wait)

    if wait > thresholds.wait_time_breach:
        group.breached_wait += 1
        group.total_breached += 1
        totals.breached_wait_count += 1


def _fold_open(totals: _Totals, group: _GroupAccumulator, obs: _Observation, thresholds: Thresholds) -> None:
    totals.total_open += 1
    handle = obs.handle_minutes
    totals.longest_handle.offer(handle, obs.ticket.id, obs.position)
    group.longest_handle.offer(handle, obs.ticket.id, obs.position)
    if obs.channel is ChannelClass.messaging:
        group.open_msg += 1
        group.longest_msg_aht = max(group.longest_msg_aht, handle)
    else:
        group.open_email += 1
        group.longest_email_aht = max(group.longest_email_aht, handle)

    if handle > thresholds.handle_time_breach:
        group.breached_aht += 1
        group.total_breached += 1
        totals.breached_handle_count += 1


def _fold_pending(totals: _Totals, group: _GroupAccumulator, obs: _Observation, thresholds: Thresholds) -> None:
    group.pending_tickets += 1


_FoldHandler = Callable[[_Totals, _GroupAccumulator, _Observation, Thresholds], None]

# Statuses missing from this table (hold, solved, closed, ...) are ignored
STATUS_HANDLERS: dict[TicketStatus, _FoldHandler] = {
    TicketStatus.new: _fold_new,
    TicketStatus.open: _fold_open,
    TicketStatus.pending: _fold_pending,
}


def aggregate_metrics(
    seed: Mapping[int, GroupMetric],
    tickets: Iterable[Ticket],
    *,
    now: datetime,
    thresholds: Thresholds = Thresholds(),
    is_capped: bool = False,
    agents: AgentStatus | None = None,
) -> DashboardMetrics:
    """Fold tickets into per-group and global metrics in a single pass.

    ``seed`` maps group id to its starting (normally zeroed) metric and fixes
    the group order of the result. Tickets whose group is not in ``seed`` are
    dropped without touching any counter. The accumulators live only for the
    duration of this call; the returned snapshot is frozen.
    """
    groups = {group_id: _GroupAccumulator.from_metric(metric) for group_id, metric in seed.items()}
    totals = _Totals()
    dropped = 0

    for position, ticket in enumerate(tickets):
        group = groups.get(ticket.group_id or NO_GROUP_ID)
        if group is None:
            dropped += 1
            continue

        try:
            ticket_status = TicketStatus(ticket.status)
        except ValueError:
            continue
        handler = STATUS_HANDLERS.get(ticket_status)
        if handler is None:
            continue

        obs = _Observation(
            ticket=ticket,
            position=position,
            channel=classify_channel(ticket.channel, thresholds.messaging_channels),
            wait_minutes=elapsed_minutes(now, ticket.created_at),
            handle_minutes=elapsed_minutes(now, ticket.updated_at),
        )
        handler(totals, group, obs, thresholds)

    if dropped:
        logger.debug("Dropped %d tickets with unknown group references", dropped)

    return DashboardMetrics(
        longest_wait=totals.longest_wait.freeze(),
        longest_handle=totals.longest_handle.freeze(),
        total_new=totals.total_new,
        total_open=totals.total_open,
        breached_wait_count=totals.breached_wait_count,
        breached_handle_count=totals.breached_handle_count,
        groups=[group.freeze() for group in groups.values()],
        is_capped=is_capped,
        agents=agents or AgentStatus(),
        generated_at=now,
    )


async def compute_metrics(
    client: ZendeskClient | None,
    target_group_ids: Collection[int] | None = None,
    *,
    thresholds: Thresholds | None = None,
    now: datetime | None = None,
) -> DashboardMetrics:
    """Run one full refresh cycle: groups, tickets, agent status, then the fold.

    Raises TransportUnavailableError if there is no client. Every other
    failure degrades the result instead of raising.
    """
    if client is None:
        raise TransportUnavailableError("Zendesk client is not configured")

    seed = await group_service.load_group_metrics(
        client, target_group_ids, per_page=settings.group_page_size
    )
    query = ticket_service.build_search_query(target_group_ids)
    fetched = await ticket_service.fetch_tickets(
        client,
        query,
        per_page=settings.ticket_page_size,
        max_pages=settings.max_ticket_pages,
    )
    agents = await agent_service.get_agent_status(client)

    metrics = aggregate_metrics(
        seed,
        fetched.tickets,
        now=now or datetime.now(timezone.utc),
        thresholds=thresholds or settings.thresholds,
        is_capped=fetched.is_capped,
        agents=agents,
    )
    logger.info(
        "Metrics computed: %d groups, %d tickets over %d pages (capped=%s, partial=%s)",
        len(metrics.groups),
        len(fetched.tickets),
        fetched.pages,
        fetched.is_capped,
        fetched.failed,
    )
    return metrics
