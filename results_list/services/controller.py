"""Results list controller: feeds rows into the store, handles UI messages, and pushes projections.

The controller is the single owner of the row store, the filter engine and the view settings;
every public method runs to completion before the next one starts. The host constructs it,
registers on_external_settings_changed with its settings notifications, and calls
post_projection once after each result batch.
"""

import asyncio
import concurrent.futures
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from results_list.core.config import get_settings
from results_list.schemas.messages import (
    MSG_COLUMN_TOGGLED,
    MSG_FILTER_APPLIED,
    MSG_FILTER_CASE_TOGGLED,
    MSG_GROUP_CHANGED,
    MSG_RESULT_SELECTED,
    MSG_SORT_CHANGED,
    ResultsListMessage,
    RowIdentity,
)
from results_list.schemas.projection import ResultsListData, SortBy
from results_list.schemas.rows import COLUMN_KEYS, Row
from results_list.schemas.sarif import ResultInfo, ResultLocation, RunInfo
from results_list.services.filtering import FilterEngine
from results_list.services.interfaces import (
    CONFIG_GROUP_BY,
    CONFIG_HIDE_COLUMNS,
    CONFIG_SORT_BY,
    EditorRevealer,
    ResultLocator,
    ResultsListSink,
    RunInfoProvider,
    SettingsSource,
)
from results_list.services.projection import build_projection
from results_list.services.row_builder import UnknownRunError, build_rows, result_row_id
from results_list.services.row_store import RowStore
from results_list.services.view_settings import (
    SettingsChange,
    ViewSettings,
    ViewSettingsSnapshot,
    coerce_hidden_columns,
    coerce_sort_by,
)

if TYPE_CHECKING:
    from results_list.core.config import Settings

logger = logging.getLogger(__name__)

VIEW_SETTING_KEYS = frozenset({CONFIG_HIDE_COLUMNS, CONFIG_GROUP_BY, CONFIG_SORT_BY})


class RunInfoUnavailableError(Exception):
    """Raised when results are fed without a run-info provider to build rows from."""


class ResultsListController:
    """Owns the results list state and keeps the projection consistent with it."""

    def __init__(
        self,
        settings_source: SettingsSource,
        sink: ResultsListSink,
        result_locator: ResultLocator | None = None,
        editor: EditorRevealer | None = None,
        run_info_provider: RunInfoProvider | None = None,
        settings: "Settings | None" = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._source = settings_source
        self._sink = sink
        self._locator = result_locator
        self._editor = editor
        self._run_info_provider = run_info_provider

        self._store = RowStore()
        self._filter = FilterEngine()
        self._view = ViewSettings.from_snapshot(self._read_snapshot())
        self._reveal_tasks: set[asyncio.Task[None]] = set()
        self._reveal_executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._reveal_futures: set[concurrent.futures.Future[None]] = set()

    @property
    def store(self) -> RowStore:
        return self._store

    @property
    def filter_engine(self) -> FilterEngine:
        return self._filter

    @property
    def view_settings(self) -> ViewSettings:
        return self._view

    def _read_snapshot(self) -> ViewSettingsSnapshot:
        return ViewSettingsSnapshot.from_source(self._source, self._settings.RESULTS_LIST_GROUP_BY)

    # Result feed

    def apply_result_batch(self, rows: Iterable[Row], is_removal: bool = False) -> None:
        """
        Add, update, or (with is_removal) delete a batch of rows.

        Upserted rows are tested against the current filter one by one. The projection is not
        rebuilt here; call post_projection once the batch is in.
        """
        batch = list(rows)
        if is_removal:
            self._remove_ids(row.row_id for row in batch)
            return
        for row in batch:
            row_id = row.row_id
            self._store.upsert(row_id, row)
            self._filter.evaluate(row_id, row)
        logger.debug(
            "Result batch upserted",
            extra={"batch_size": len(batch), "row_count": self._store.size()},
        )

    def apply_result_infos(self, results: Iterable[ResultInfo], is_removal: bool = False) -> None:
        """
        Feed parsed SARIF results. Rows are built with the run-info provider's metadata.

        Raises RunInfoUnavailableError or UnknownRunError before touching the store when rows
        cannot be built for every result in the batch.
        """
        batch = list(results)
        if is_removal:
            self._remove_ids(result_row_id(result) for result in batch)
            return
        if self._run_info_provider is None:
            raise RunInfoUnavailableError("A run-info provider is required to build rows from results.")
        runs: dict[str, RunInfo] = {}
        for result in batch:
            key = str(result.run_id)
            if key not in runs:
                run = self._run_info_provider.get_run_info(result.run_id)
                if run is None:
                    raise UnknownRunError(result.run_id)
                runs[key] = run
        rows = build_rows(batch, runs, self._settings.NO_LOCATION_TEXT)
        self.apply_result_batch(rows)

    def _remove_ids(self, row_ids: Iterable[str]) -> None:
        removed = 0
        for row_id in list(row_ids):
            if self._store.remove(row_id):
                removed += 1
            self._filter.discard(row_id)
        logger.debug(
            "Result batch removed",
            extra={"removed_count": removed, "row_count": self._store.size()},
        )

    # UI messages

    def handle_user_action(self, message: ResultsListMessage | dict[str, Any]) -> None:
        """
        Handle a message from the results list UI.

        Column, group and sort changes are written to the settings source and come back through
        on_external_settings_changed. Filter changes apply immediately and push a projection.
        Selecting a row reveals its location and never changes engine state.
        """
        try:
            msg = (
                message
                if isinstance(message, ResultsListMessage)
                else ResultsListMessage.model_validate(message)
            )
        except ValidationError as e:
            logger.warning("Ignoring malformed results list message: %s", e.errors())
            return

        if msg.type == MSG_COLUMN_TOGGLED:
            self._toggle_column(msg.data)
        elif msg.type == MSG_FILTER_APPLIED:
            self._apply_filter_text(msg.data)
        elif msg.type == MSG_FILTER_CASE_TOGGLED:
            self._filter.toggle_case_match()
            self._filter.recompute(self._store)
            self.post_projection()
        elif msg.type == MSG_GROUP_CHANGED:
            if self._is_column_key(msg.data, msg.type):
                self._source.update(CONFIG_GROUP_BY, msg.data)
        elif msg.type == MSG_RESULT_SELECTED:
            self._select_result(msg.data)
        elif msg.type == MSG_SORT_CHANGED:
            self._change_sort(msg.data)

    @staticmethod
    def _is_column_key(value: Any, message_type: str) -> bool:
        if isinstance(value, str) and value in COLUMN_KEYS:
            return True
        logger.warning("Ignoring %s with unknown column %r", message_type, value)
        return False

    def _toggle_column(self, column: Any) -> None:
        if not self._is_column_key(column, MSG_COLUMN_TOGGLED):
            return
        hidden = coerce_hidden_columns(self._source.get(CONFIG_HIDE_COLUMNS))
        if column in hidden:
            hidden.remove(column)
        else:
            hidden.append(column)
        self._source.update(CONFIG_HIDE_COLUMNS, hidden)

    def _apply_filter_text(self, text: Any) -> None:
        if not isinstance(text, str):
            logger.warning("Ignoring %s with non-text payload %r", MSG_FILTER_APPLIED, text)
            return
        if self._filter.set_text(text):
            self._filter.recompute(self._store)
            self.post_projection()

    def _change_sort(self, column: Any) -> None:
        """Same column flips the direction; a new column starts ascending."""
        if not self._is_column_key(column, MSG_SORT_CHANGED):
            return
        current = coerce_sort_by(self._source.get(CONFIG_SORT_BY))
        if current is not None and current.column == column:
            sort_by = SortBy(column=column, ascending=not current.ascending)
        else:
            sort_by = SortBy(column=column, ascending=True)
        self._source.update(CONFIG_SORT_BY, sort_by.model_dump())

    def _select_result(
        self, data: Any
    ) -> "asyncio.Task[None] | concurrent.futures.Future[None] | None":
        try:
            if isinstance(data, (str, bytes)):
                identity = RowIdentity.model_validate_json(data)
            else:
                identity = RowIdentity.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring %s with malformed payload: %s", MSG_RESULT_SELECTED, e.errors())
            return None

        if identity.row_id not in self._store:
            logger.info("Selected result %s is no longer in the results list", identity.row_id)
            return None
        editor = self._editor
        if self._locator is None or editor is None:
            logger.debug("No locator or editor registered; ignoring selection of %s", identity.row_id)
            return None
        try:
            location = self._locator.get_result_location(identity.result_id, identity.run_id)
        except Exception as e:
            logger.warning("Failed to resolve location of result %s: %s", identity.row_id, e)
            return None
        if location is None:
            logger.info("Result %s has no location to reveal", identity.row_id)
            return None
        return self._schedule_reveal(editor, location)

    def _schedule_reveal(
        self, editor: EditorRevealer, location: ResultLocation
    ) -> "asyncio.Task[None] | concurrent.futures.Future[None]":
        """
        Start the reveal without waiting for it: as a task on the running loop, or on a
        background worker thread with its own loop when the caller has none.
        """
        coro = self._reveal(editor, location)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._reveal_executor is None:
                self._reveal_executor = concurrent.futures.ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="results-list-reveal"
                )
            future = self._reveal_executor.submit(asyncio.run, coro)
            self._reveal_futures.add(future)
            future.add_done_callback(self._reveal_futures.discard)
            return future
        task = loop.create_task(coro)
        self._reveal_tasks.add(task)
        task.add_done_callback(self._reveal_tasks.discard)
        return task

    @staticmethod
    async def _reveal(editor: EditorRevealer, location: ResultLocation) -> None:
        try:
            await editor.reveal_location(location.uri, location.range)
        except Exception as e:
            # The user may have declined to locate a moved file; there is nothing to select.
            logger.info("Could not reveal %s: %s", location.uri, e)

    async def wait_for_reveals(self) -> None:
        """Wait for reveal tasks scheduled so far on the running loop."""
        if self._reveal_tasks:
            await asyncio.gather(*list(self._reveal_tasks))

    def join_reveals(self, timeout: float | None = None) -> bool:
        """Block until reveals started off-loop finish. Returns False on timeout."""
        _, not_done = concurrent.futures.wait(list(self._reveal_futures), timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Stop the reveal worker thread once pending reveals finish."""
        if self._reveal_executor is not None:
            self._reveal_executor.shutdown(wait=True)
            self._reveal_executor = None

    # Settings and projection

    def on_external_settings_changed(self, key: str | None = None) -> bool:
        """
        Reconcile view settings with the settings source; push a projection if anything changed.

        key, when given, is the setting that changed; changes to unrelated keys are ignored.
        Returns True when the view settings changed.
        """
        if key is not None and key not in VIEW_SETTING_KEYS:
            return False
        change: SettingsChange = self._view.reconcile(self._read_snapshot())
        if change.any:
            self.post_projection()
        return change.any

    def current_projection(self) -> ResultsListData:
        return build_projection(self._store, self._filter.membership(), self._view, self._filter.state())

    def post_projection(self) -> ResultsListData:
        """Build the projection and push it to the sink."""
        data = self.current_projection()
        self._sink.set_results_list_data(data)
        return data
