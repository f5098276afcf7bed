"""Row store: the canonical results list rows keyed by row id."""

from collections.abc import Iterator

from results_list.schemas.rows import Row


class RowStore:
    """
    Insertion-ordered table of rows. Replacing a row keeps its position.

    All operations are total over the key space; nothing here raises.
    """

    def __init__(self) -> None:
        self._rows: dict[str, Row] = {}

    def upsert(self, row_id: str, row: Row) -> None:
        self._rows[row_id] = row

    def remove(self, row_id: str) -> bool:
        """Delete the row if present. Returns True when a row was removed."""
        return self._rows.pop(row_id, None) is not None

    def get(self, row_id: str) -> Row | None:
        return self._rows.get(row_id)

    def size(self) -> int:
        return len(self._rows)

    def items(self) -> Iterator[tuple[str, Row]]:
        return iter(self._rows.items())

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._rows

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)
