from fastapi import APIRouter, Depends, HTTPException, Query, status

from rta_monitor.api.dependencies import get_dashboard_state, require_metrics
from rta_monitor.models.base import SortDirection
from rta_monitor.schemas.dashboard import DashboardMetrics, GroupOption, SortColumn, SortConfig
from rta_monitor.services import projection_service, sort_service
from rta_monitor.services.dashboard_state import DashboardState
from rta_monitor.services.zendesk_client import TransportUnavailableError

router = APIRouter()


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(
    group_ids: list[int] | None = Query(None),
    select_none: bool = Query(False),
    sort: SortColumn | None = Query(None),
    direction: SortDirection = Query(SortDirection.desc),
    metrics: DashboardMetrics = Depends(require_metrics),
):
    """Dashboard totals for the selected groups.

    Without ``group_ids`` every group is selected; ``select_none=true`` selects
    no group at all and takes precedence over ``group_ids``.
    """
    if select_none:
        selected: list[int] = []
    else:
        selected = group_ids if group_ids else [g.id for g in metrics.groups]
    projected = projection_service.project(metrics, selected)

    config = SortConfig(column=sort, direction=direction) if sort else None
    return projected.model_copy(
        update={"groups": sort_service.sort_groups(projected.groups, config)}
    )


@router.post("/refresh", response_model=DashboardMetrics)
async def refresh_metrics(state: DashboardState = Depends(get_dashboard_state)):
    """Recompute the snapshot now, even if a scheduled refresh is running."""
    try:
        return await state.refresh(force=True)
    except TransportUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        )


@router.get("/groups", response_model=list[GroupOption])
async def list_groups(
    search: str = Query(""),
    metrics: DashboardMetrics = Depends(require_metrics),
):
    """Groups in the current snapshot, filtered by name and ordered alphabetically."""
    needle = search.casefold()
    groups = [g for g in metrics.groups if needle in g.name.casefold()]
    groups.sort(key=lambda g: sort_service.collation_key(g.name))
    return [GroupOption(id=g.id, name=g.name) for g in groups]
