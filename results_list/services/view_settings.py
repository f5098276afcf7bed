"""View settings: column visibility, group-by and sort-by, reconciled against the settings source.

Reconciliation only detects and records drift; callers decide whether to rebuild the projection.
Malformed persisted values fall back to safe defaults instead of raising:

- hidden columns that are not a list count as none hidden; unknown keys are ignored
- an unknown group-by key falls back to the configured default
- a sort-by without a valid column disables sorting (rows keep encounter order)
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from results_list.schemas.projection import ColumnDescriptor, SortBy
from results_list.schemas.rows import COLUMN_KEYS, ColumnKey
from results_list.services.interfaces import (
    CONFIG_GROUP_BY,
    CONFIG_HIDE_COLUMNS,
    CONFIG_SORT_BY,
    SettingsSource,
)

logger = logging.getLogger(__name__)

# Column key -> (title, description), in display order.
COLUMN_DEFINITIONS: dict[str, tuple[str, str]] = {
    "message": ("Message", "Result message"),
    "resultFile": ("File", "Result file location"),
    "resultStartPos": ("Position", "Results position in the file"),
    "ruleId": ("Rule Id", "Rule Id"),
    "ruleName": ("Rule Name", "Rule Name"),
    "runId": ("Run Id", "Run Id generated based on order in the Sarif file"),
    "resultId": ("Result Id", "Result Id generated based on order in the run"),
    "sarifFile": ("Sarif File", "Sarif file the result data is from"),
    "severityLevel": ("Severity", "Severity Level"),
}


def initial_columns() -> dict[str, ColumnDescriptor]:
    """Fresh descriptors for every column, all visible."""
    return {
        key: ColumnDescriptor(title=title, description=description, hide=False)
        for key, (title, description) in COLUMN_DEFINITIONS.items()
    }


def coerce_hidden_columns(raw: Any) -> list[str]:
    """Persisted hidden-columns value -> known column keys, first occurrence kept."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple, set, frozenset)):
        logger.warning("Ignoring malformed %s setting: %r", CONFIG_HIDE_COLUMNS, raw)
        return []
    hidden: list[str] = []
    for key in raw:
        if key not in COLUMN_KEYS:
            logger.warning("Ignoring unknown column %r in %s", key, CONFIG_HIDE_COLUMNS)
            continue
        if key not in hidden:
            hidden.append(key)
    return hidden


def coerce_group_by(raw: Any, default: str) -> str:
    """Persisted group-by value -> a known column key, or default."""
    if isinstance(raw, str) and raw in COLUMN_KEYS:
        return raw
    logger.warning("Malformed %s setting %r; grouping by %s", CONFIG_GROUP_BY, raw, default)
    return default


def coerce_sort_by(raw: Any) -> SortBy | None:
    """Persisted sort-by value -> SortBy, or None when it does not name a known column."""
    if raw is None:
        return None
    try:
        return SortBy.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            "Malformed %s setting %r; rows will not be sorted (%d validation errors)",
            CONFIG_SORT_BY,
            raw,
            e.error_count(),
        )
        return None


class ViewSettingsSnapshot(BaseModel):
    """The three persisted view settings, already coerced to valid values."""

    hidden_columns: list[str] = Field(default_factory=list)
    group_by: ColumnKey
    sort_by: SortBy | None = None

    @classmethod
    def from_source(cls, source: SettingsSource, default_group_by: str) -> "ViewSettingsSnapshot":
        return cls(
            hidden_columns=coerce_hidden_columns(source.get(CONFIG_HIDE_COLUMNS)),
            group_by=coerce_group_by(source.get(CONFIG_GROUP_BY), default_group_by),
            sort_by=coerce_sort_by(source.get(CONFIG_SORT_BY)),
        )


class SettingsChange(BaseModel):
    """Which facets changed during one reconciliation."""

    columns: bool = False
    group_by: bool = False
    sort_by: bool = False

    @property
    def any(self) -> bool:
        return self.columns or self.group_by or self.sort_by


class ViewSettings:
    """Column descriptors, group-by key and sort state currently applied to the projection."""

    def __init__(
        self,
        group_by: str,
        sort_by: SortBy | None = None,
        hidden_columns: Iterable[str] = (),
    ) -> None:
        self._columns = initial_columns()
        self._group_by = group_by
        self._sort_by = sort_by
        self.reconcile_columns(hidden_columns)

    @classmethod
    def from_snapshot(cls, snapshot: ViewSettingsSnapshot) -> "ViewSettings":
        return cls(
            group_by=snapshot.group_by,
            sort_by=snapshot.sort_by,
            hidden_columns=snapshot.hidden_columns,
        )

    @property
    def columns(self) -> dict[str, ColumnDescriptor]:
        return self._columns

    @property
    def group_by(self) -> str:
        return self._group_by

    @property
    def sort_by(self) -> SortBy | None:
        return self._sort_by

    def hidden_columns(self) -> list[str]:
        return [key for key, column in self._columns.items() if column.hide]

    def reconcile_columns(self, hidden_columns: Iterable[str]) -> bool:
        """Set each column's hide flag from hidden_columns. Returns True if any flag changed."""
        hidden = set(hidden_columns)
        changed = False
        for key, column in self._columns.items():
            should_hide = key in hidden
            if column.hide != should_hide:
                column.hide = should_hide
                changed = True
        return changed

    def reconcile_group_by(self, group_by: str) -> bool:
        if group_by == self._group_by:
            return False
        self._group_by = group_by
        return True

    def reconcile_sort_by(self, sort_by: SortBy | None) -> bool:
        if sort_by == self._sort_by:
            return False
        self._sort_by = sort_by
        return True

    def reconcile(self, snapshot: ViewSettingsSnapshot) -> SettingsChange:
        """Apply a snapshot facet by facet. Never rebuilds anything itself."""
        change = SettingsChange(
            columns=self.reconcile_columns(snapshot.hidden_columns),
            group_by=self.reconcile_group_by(snapshot.group_by),
            sort_by=self.reconcile_sort_by(snapshot.sort_by),
        )
        if change.any:
            logger.debug(
                "View settings changed",
                extra={
                    "columns_changed": change.columns,
                    "group_by_changed": change.group_by,
                    "sort_by_changed": change.sort_by,
                },
            )
        return change
