from collections.abc import Sequence

from pyuca import Collator

from rta_monitor.models.base import SortDirection
from rta_monitor.schemas.dashboard import GroupMetric, SortColumn, SortConfig

STRING_COLUMNS = frozenset({SortColumn.name})

_collator = Collator()


def _longest_time(group: GroupMetric) -> int:
    return max(
        group.longest_email_wait,
        group.longest_msg_wait,
        group.longest_email_aht,
        group.longest_msg_aht,
    )


def _default_key(group: GroupMetric) -> tuple[int, int]:
    return group.total_breached, _longest_time(group)


def collation_key(value: str) -> tuple[int, ...]:
    """Unicode Collation Algorithm key, so accented names sort with their base letter."""
    return _collator.sort_key(value.casefold())


def sort_groups(groups: Sequence[GroupMetric], config: SortConfig | None = None) -> list[GroupMetric]:
    """Order groups for display. Never mutates ``groups``.

    Without a config: most breaches first, then the longest wait/handle time.
    Python's sort is stable (also with ``reverse=True``), so groups with equal
    keys keep their input order.
    """
    if config is None:
        return sorted(groups, key=_default_key, reverse=True)

    column = config.column.value
    is_string = config.column in STRING_COLUMNS

    def key(group: GroupMetric):
        value = getattr(group, column)
        return collation_key(value) if is_string else value

    return sorted(groups, key=key, reverse=config.direction is SortDirection.desc)
