import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from rta_monitor.schemas.dashboard import DashboardMetrics
from rta_monitor.services import metrics_service
from rta_monitor.services.zendesk_client import ZendeskClient

logger = logging.getLogger(__name__)

MetricsLoader = Callable[[], Awaitable[DashboardMetrics]]


class DashboardState:
    """Holds the latest metrics snapshot shared between requests.

    The snapshot is only ever replaced whole, by ``refresh``. Concurrent
    forced refreshes are not cancelled: whichever finishes last wins.
    """

    def __init__(self, client: ZendeskClient | None = None, loader: MetricsLoader | None = None):
        self.client = client
        self._loader = loader or self._compute
        self._in_flight = 0
        self.metrics: DashboardMetrics | None = None
        self.last_updated: datetime | None = None

    async def _compute(self) -> DashboardMetrics:
        return await metrics_service.compute_metrics(self.client)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    async def refresh(self, *, force: bool = False) -> DashboardMetrics | None:
        """Run one refresh cycle and publish its snapshot.

        Without ``force`` the call is skipped (returns None) while another
        cycle is running. Errors from the loader propagate and leave the
        current snapshot in place.
        """
        if self.loading and not force:
            logger.debug("Refresh skipped, a cycle is already running")
            return None

        self._in_flight += 1
        try:
            metrics = await self._loader()
        finally:
            self._in_flight -= 1

        self.metrics = metrics
        self.last_updated = datetime.now(timezone.utc)
        return metrics
