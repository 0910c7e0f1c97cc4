from collections.abc import Collection, Iterable

from rta_monitor.schemas.dashboard import DashboardMetrics, GroupMetric, LongestRecord


def _longest(records: Iterable[LongestRecord]) -> LongestRecord:
    """Largest record; on equal times the one fetched first wins."""
    best = LongestRecord()
    for record in records:
        if record.time > best.time:
            best = record
        elif (
            record.time == best.time
            and record.position is not None
            and (best.position is None or record.position < best.position)
        ):
            best = record
    return best


def project(aggregate: DashboardMetrics, selected_ids: Collection[int]) -> DashboardMetrics:
    """Restrict the dashboard totals to the selected groups.

    Totals are rebuilt from the groups' finalized fields only. The longest
    wait/handle attribution is recomputed inside the selection, so the ticket
    it names always belongs to a selected group. Projecting over every group
    gives back a value equal to ``aggregate``.
    """
    selected = set(selected_ids)
    groups: list[GroupMetric] = [g for g in aggregate.groups if g.id in selected]

    return aggregate.model_copy(
        update={
            "groups": groups,
            "total_new": sum(g.new_email + g.new_msg for g in groups),
            "total_open": sum(g.open_email + g.open_msg for g in groups),
            "breached_wait_count": sum(g.breached_wait for g in groups),
            "breached_handle_count": sum(g.breached_aht for g in groups),
            "longest_wait": _longest(g.longest_wait for g in groups),
            "longest_handle": _longest(g.longest_handle for g in groups),
        }
    )
