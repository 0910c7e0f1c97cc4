import asyncio
import logging

from rta_monitor.config import settings
from rta_monitor.services.dashboard_state import DashboardState

logger = logging.getLogger(__name__)


async def refresh_metrics_periodically(state: DashboardState, interval: float | None = None):
    """Recompute the dashboard snapshot every ``interval`` seconds (60 by default)."""
    interval = interval if interval is not None else settings.refresh_interval_seconds
    while True:
        try:
            metrics = await state.refresh()
            if metrics is not None:
                logger.info(
                    "Dashboard refreshed: %d new, %d open, %d wait breaches, %d handle breaches",
                    metrics.total_new,
                    metrics.total_open,
                    metrics.breached_wait_count,
                    metrics.breached_handle_count,
                )
        except Exception:
            logger.exception("Dashboard refresh failed")
        await asyncio.sleep(interval)
