import pytest

from rta_monitor.models.base import SortDirection
from rta_monitor.schemas.dashboard import GroupMetric, SortColumn, SortConfig
from rta_monitor.services.sort_service import collation_key, sort_groups


def _group(group_id: int, name: str, **fields) -> GroupMetric:
    return GroupMetric(id=group_id, name=name, **fields)


GROUPS = [
    _group(1, "billing", total_breached=1, longest_email_wait=10),
    _group(2, "Accounts", total_breached=3, new_email=4),
    _group(3, "escalations", total_breached=1, longest_msg_aht=45),
    _group(4, "Zeta", total_breached=0, new_email=4),
    _group(5, "Éclair", total_breached=1, longest_email_wait=10),
]


def _ids(groups):
    return [g.id for g in groups]


def test_default_order_breaches_then_longest_time():
    assert _ids(sort_groups(GROUPS)) == [2, 3, 1, 5, 4]


def test_default_order_is_stable_for_equal_keys():
    """Groups 1 and 5 tie on both keys and keep their input order."""
    reordered = [GROUPS[4], GROUPS[0]]

    assert _ids(sort_groups(reordered)) == [5, 1]
    assert _ids(sort_groups(list(reversed(reordered)))) == [1, 5]


@pytest.mark.parametrize("config", [
    None,
    SortConfig(column=SortColumn.new_email, direction=SortDirection.desc),
    SortConfig(column=SortColumn.name, direction=SortDirection.asc),
])
def test_sorting_is_idempotent(config):
    once = sort_groups(GROUPS, config)

    assert sort_groups(once, config) == once


def test_numeric_column_descending_keeps_ties_in_input_order():
    config = SortConfig(column=SortColumn.new_email, direction=SortDirection.desc)

    assert _ids(sort_groups(GROUPS, config))[:2] == [2, 4]


def test_numeric_column_ascending():
    config = SortConfig(column=SortColumn.total_breached, direction=SortDirection.asc)

    assert _ids(sort_groups(GROUPS, config)) == [4, 1, 3, 5, 2]


def test_name_column_ignores_case():
    config = SortConfig(column=SortColumn.name, direction=SortDirection.asc)

    names = [g.name for g in sort_groups(GROUPS[:4], config)]

    assert names == ["Accounts", "billing", "escalations", "Zeta"]


def test_name_column_descending():
    config = SortConfig(column=SortColumn.name, direction=SortDirection.desc)

    names = [g.name for g in sort_groups(GROUPS[:4], config)]

    assert names == ["Zeta", "escalations", "billing", "Accounts"]


def test_accented_names_sort_with_their_base_letter():
    """É sorts as E, not after Z as a raw code point comparison would."""
    groups = [_group(4, "Zeta"), _group(5, "Éclair"), _group(1, "billing"), _group(3, "escalations")]

    ascending = sort_groups(groups, SortConfig(column=SortColumn.name, direction=SortDirection.asc))
    descending = sort_groups(groups, SortConfig(column=SortColumn.name, direction=SortDirection.desc))

    assert [g.name for g in ascending] == ["billing", "Éclair", "escalations", "Zeta"]
    assert [g.name for g in descending] == ["Zeta", "escalations", "Éclair", "billing"]


def test_collation_key_does_not_depend_on_process_locale(monkeypatch):
    monkeypatch.setattr("locale.strxfrm", lambda value: "")

    assert collation_key("Éclair") < collation_key("Zeta")
    assert collation_key("billing") < collation_key("Éclair")


def test_input_is_not_mutated():
    groups = list(GROUPS)

    sort_groups(groups)

    assert groups == GROUPS
