"""Build the filtered, grouped and sorted results list projection.

build_projection is a pure function of the row store, the filter membership and the view
settings: the same inputs always give the same groups, group order and row order.
"""

import locale
import logging
from collections.abc import Callable, Iterable
from functools import cmp_to_key

from results_list.schemas.projection import FilterState, ResultsListData, ResultsListGroup, SortBy
from results_list.schemas.rows import FILE_COLUMN_KEYS, CellValue, Row
from results_list.services.row_store import RowStore
from results_list.services.view_settings import ViewSettings

logger = logging.getLogger(__name__)


def grouping_key(row: Row, group_by: str) -> str | int | None:
    """
    Key rows are bucketed by: the group-by cell's display value.

    File columns show only a short name, which collides across directories, so they group by
    the full path in the tooltip (falling back to the display value when there is none).
    """
    cell = row.cell(group_by)
    if group_by in FILE_COLUMN_KEYS and cell.tooltip is not None:
        return cell.tooltip
    return cell.value


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compare_text(a: str, b: str) -> int:
    """
    Locale-aware comparison, ignoring case first and using it only to break ties.

    strcoll rejects strings with embedded NUL characters; those compare by code point instead.
    """
    try:
        folded = locale.strcoll(a.casefold(), b.casefold())
        if folded:
            return folded
        return locale.strcoll(a, b)
    except ValueError:
        return _compare_code_points(a.casefold(), b.casefold()) or _compare_code_points(a, b)


def _compare_code_points(a: str, b: str) -> int:
    return (a > b) - (a < b)


def compare_values(a: CellValue, b: CellValue) -> int:
    """
    Three-way comparison of two cells of the same column.

    Missing display values sort first. Positions compare by line then column, severities by
    rank, numbers numerically, and anything else as locale-aware text.
    """
    if a.value is None or b.value is None:
        if a.value is None and b.value is None:
            return 0
        return -1 if a.value is None else 1
    if a.kind == "position" and b.kind == "position":
        line = a.pos.line - b.pos.line
        return line if line else a.pos.character - b.pos.character
    if a.kind == "severity" and b.kind == "severity":
        return a.severity_order - b.severity_order
    if _is_number(a.value) and _is_number(b.value):
        return (a.value > b.value) - (a.value < b.value)
    return _compare_text(str(a.value), str(b.value))


def sort_rows(rows: Iterable[Row], sort_by: SortBy | None) -> list[Row]:
    """
    Sort rows by one column. Descending swaps the operands rather than negating the result,
    so equal rows keep their encounter order in both directions. No sort keeps rows as given.
    """
    if sort_by is None:
        return list(rows)
    column = sort_by.column
    compare: Callable[[Row, Row], int]
    if sort_by.ascending:
        compare = lambda x, y: compare_values(x.cell(column), y.cell(column))  # noqa: E731
    else:
        compare = lambda x, y: compare_values(y.cell(column), x.cell(column))  # noqa: E731
    return sorted(rows, key=cmp_to_key(compare))


def group_rows(rows: Iterable[Row], group_by: str) -> list[ResultsListGroup]:
    """
    Bucket rows by grouping key; each group is labelled by its first row.
    Largest group first, ties in encounter order.
    """
    groups: dict[str | int | None, ResultsListGroup] = {}
    for row in rows:
        key = grouping_key(row, group_by)
        group = groups.get(key)
        if group is None:
            cell = row.cell(group_by)
            groups[key] = ResultsListGroup(text=cell.value, tooltip=cell.tooltip, rows=[row])
        else:
            group.rows.append(row)
    return sorted(groups.values(), key=lambda g: -len(g.rows))


def build_projection(
    store: RowStore,
    membership: Iterable[str],
    view: ViewSettings,
    filter_state: FilterState,
) -> ResultsListData:
    """Assemble the projection of the member rows under the current view settings."""
    member_rows = [row for row in (store.get(row_id) for row_id in membership) if row is not None]
    groups = group_rows(member_rows, view.group_by)
    for group in groups:
        group.rows = sort_rows(group.rows, view.sort_by)

    data = ResultsListData(
        columns={key: column.model_copy() for key, column in view.columns.items()},
        filter_state=filter_state,
        group_by=view.group_by,
        sort_by=view.sort_by,
        result_count=store.size(),
        groups=groups,
    )
    logger.debug(
        "Projection built",
        extra={
            "result_count": data.result_count,
            "visible_row_count": len(member_rows),
            "group_count": len(groups),
        },
    )
    return data
