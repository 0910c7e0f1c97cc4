from fastapi import HTTPException, Request, status

from rta_monitor.schemas.dashboard import DashboardMetrics
from rta_monitor.services.dashboard_state import DashboardState


def get_dashboard_state(request: Request) -> DashboardState:
    return request.app.state.dashboard


def require_metrics(request: Request) -> DashboardMetrics:
    """Current snapshot, or 503 if the first refresh has not completed yet."""
    metrics = get_dashboard_state(request).metrics
    if metrics is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Metrics are not available yet",
        )
    return metrics
