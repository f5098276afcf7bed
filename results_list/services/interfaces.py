"""Structural contracts for the collaborators the results list engine talks to."""

from collections.abc import Awaitable
from typing import Any, Protocol

from results_list.schemas.projection import ResultsListData
from results_list.schemas.sarif import ResultLocation, RunInfo, SourceRange

# Keys of the persisted view settings.
CONFIG_HIDE_COLUMNS = "resultsListHideColumns"
CONFIG_GROUP_BY = "resultsListGroupBy"
CONFIG_SORT_BY = "resultsListSortBy"


class SettingsSource(Protocol):
    """Read/write access to the persisted view settings."""

    def get(self, key: str) -> Any: ...

    def update(self, key: str, value: Any) -> None: ...


class ResultsListSink(Protocol):
    """Receives every projection the engine pushes."""

    def set_results_list_data(self, data: ResultsListData) -> None: ...


class ResultLocator(Protocol):
    """Resolves the source location assigned to a result, or None when it has none."""

    def get_result_location(self, result_id: int | str, run_id: int | str) -> ResultLocation | None: ...


class EditorRevealer(Protocol):
    """Opens a document and reveals a range in it; may fail (e.g. the user declines to locate a moved file)."""

    def reveal_location(self, uri: str, range: SourceRange) -> Awaitable[None]: ...


class RunInfoProvider(Protocol):
    """Looks up per-run metadata for the row builder."""

    def get_run_info(self, run_id: int | str) -> RunInfo | None: ...
