"""Filter engine: compile the filter text into a row matcher and track which rows pass it."""

import logging
import re
from collections.abc import Callable, Iterator

from results_list.schemas.projection import FilterState
from results_list.schemas.rows import FILTER_COLUMN_KEYS, Row
from results_list.services.row_store import RowStore

logger = logging.getLogger(__name__)

RowMatcher = Callable[[Row], bool]


class InvalidFilterPatternError(Exception):
    """Raised when the filter text is not a valid regular expression."""

    def __init__(self, pattern: str, message: str, cause: Exception | None = None) -> None:
        self.pattern = pattern
        self.message = message
        self.cause = cause
        super().__init__(f"Invalid filter pattern {pattern!r}: {message}")


def _match_all(row: Row) -> bool:
    return True


def _match_none(row: Row) -> bool:
    return False


def _filtered_display_values(row: Row) -> Iterator[str]:
    """Display strings of the filtered columns, in filter order; empty cells are skipped."""
    for key in FILTER_COLUMN_KEYS:
        value = row.cell(key).value
        if value is not None:
            yield str(value)


def compile_filter(text: str, case_sensitive: bool = False) -> RowMatcher:
    """
    Compile filter text into a matcher. Empty text matches every row.

    A row matches when any filtered column's display value contains a match for the pattern.
    Raises InvalidFilterPatternError when text is not a valid regular expression.
    """
    if not text:
        return _match_all
    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        regex = re.compile(text, flags)
    except re.error as e:
        raise InvalidFilterPatternError(text, str(e), cause=e) from e

    def matches(row: Row) -> bool:
        return any(regex.search(value) for value in _filtered_display_values(row))

    return matches


class FilterEngine:
    """
    Current filter text and case setting, the compiled matcher, and the membership set.

    Membership holds the ids of stored rows that pass the matcher, in the order they were
    admitted. An invalid pattern is recorded as the filter error and no rows pass until the
    text or case setting changes.
    """

    def __init__(self, text: str = "", case_match: bool = False) -> None:
        self._text = text.strip()
        self._case_match = case_match
        self._error: str | None = None
        self._matcher: RowMatcher = _match_all
        self._members: dict[str, None] = {}
        self._compile()

    @property
    def text(self) -> str:
        return self._text

    @property
    def case_match(self) -> bool:
        return self._case_match

    @property
    def error(self) -> str | None:
        return self._error

    def state(self) -> FilterState:
        return FilterState(text=self._text, case_match=self._case_match, error=self._error)

    def _compile(self) -> None:
        try:
            self._matcher = compile_filter(self._text, self._case_match)
            self._error = None
        except InvalidFilterPatternError as e:
            logger.warning("Invalid filter pattern %r (%s); no rows will pass", e.pattern, e.message)
            self._matcher = _match_none
            self._error = e.message

    def set_text(self, text: str) -> bool:
        """Set the filter text (trimmed) and recompile. Returns False when the text is unchanged."""
        trimmed = (text or "").strip()
        if trimmed == self._text:
            return False
        self._text = trimmed
        self._compile()
        return True

    def set_case_match(self, case_match: bool) -> bool:
        """Set case sensitivity and recompile. Returns False when unchanged."""
        if case_match == self._case_match:
            return False
        self._case_match = case_match
        self._compile()
        return True

    def toggle_case_match(self) -> bool:
        """Flip case sensitivity and recompile. Returns the new setting."""
        self.set_case_match(not self._case_match)
        return self._case_match

    def evaluate(self, row_id: str, row: Row) -> bool:
        """Admit or evict one row against the current matcher. Returns whether it passes."""
        if self._matcher(row):
            self._members.setdefault(row_id, None)
            return True
        self._members.pop(row_id, None)
        return False

    def discard(self, row_id: str) -> bool:
        """Remove exactly this id from the membership. Returns True if it was a member."""
        if row_id not in self._members:
            return False
        del self._members[row_id]
        return True

    def recompute(self, store: RowStore) -> int:
        """Rebuild membership by testing every stored row once. Returns the member count."""
        self._members = {row_id: None for row_id, row in store.items() if self._matcher(row)}
        logger.debug(
            "Filter membership recomputed",
            extra={"row_count": store.size(), "member_count": len(self._members)},
        )
        return len(self._members)

    def membership(self) -> list[str]:
        return list(self._members)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._members

    def __len__(self) -> int:
        return len(self._members)
