"""Unit tests for results_list.services.projection: grouping, group order, row sorting, counts."""

import unittest

from results_list.schemas.projection import FilterState, SortBy
from results_list.schemas.rows import PlainValue, Position, PositionValue, Row, SeverityValue
from results_list.services.projection import (
    build_projection,
    compare_values,
    group_rows,
    grouping_key,
    sort_rows,
)
from results_list.services.row_store import RowStore
from results_list.services.view_settings import ViewSettings


def _row(
    result_id: int,
    run_id: int = 1,
    rule_id: str | None = "R1",
    rule_name: str | None = "rule",
    severity: str = "warning",
    file_name: str = "a.c",
    file_path: str | None = "/src/a.c",
    line: int = 0,
    character: int = 0,
    message: str = "message",
) -> Row:
    """Build a Row for projection tests."""
    return Row(
        run_id=PlainValue(value=run_id),
        result_id=PlainValue(value=result_id),
        message=PlainValue(value=message),
        rule_id=PlainValue(value=rule_id),
        rule_name=PlainValue(value=rule_name),
        severity_level=SeverityValue.from_level(severity),
        result_file=PlainValue(value=file_name, tooltip=file_path),
        sarif_file=PlainValue(value="scan.sarif", tooltip="/logs/scan.sarif"),
        result_start_pos=PositionValue.from_position(Position(line=line, character=character)),
    )


def _store(*rows: Row) -> RowStore:
    store = RowStore()
    for row in rows:
        store.upsert(row.row_id, row)
    return store


def _project(store: RowStore, group_by: str = "resultFile", sort_by: SortBy | None = None, membership=None):
    view = ViewSettings(group_by=group_by, sort_by=sort_by)
    members = list(store) if membership is None else membership
    return build_projection(store, members, view, FilterState())


class TestGroupingKey(unittest.TestCase):
    """File columns group by full path; other columns by display value."""

    def test_file_column_uses_tooltip(self) -> None:
        row = _row(1, file_name="a.c", file_path="/x/a.c")
        self.assertEqual(grouping_key(row, "resultFile"), "/x/a.c")
        self.assertEqual(grouping_key(row, "sarifFile"), "/logs/scan.sarif")

    def test_file_column_without_tooltip_uses_display(self) -> None:
        row = _row(1, file_name="No Location", file_path=None)
        self.assertEqual(grouping_key(row, "resultFile"), "No Location")

    def test_other_columns_use_display(self) -> None:
        row = _row(1, rule_id="R9")
        self.assertEqual(grouping_key(row, "ruleId"), "R9")


class TestGrouping(unittest.TestCase):
    """Groups: same short name in different directories stay apart; largest group first."""

    def test_same_short_name_different_paths_split(self) -> None:
        store = _store(_row(1, file_path="/x/a.c"), _row(2, file_path="/y/a.c"))
        data = _project(store, group_by="resultFile")
        self.assertEqual(len(data.groups), 2)
        self.assertEqual({g.tooltip for g in data.groups}, {"/x/a.c", "/y/a.c"})
        self.assertEqual([g.text for g in data.groups], ["a.c", "a.c"])

    def test_groups_ordered_by_descending_size(self) -> None:
        rows = []
        sizes = {"A": 3, "B": 1, "C": 5}
        result_id = 0
        for rule, size in sizes.items():
            for _ in range(size):
                result_id += 1
                rows.append(_row(result_id, rule_id=rule))
        data = _project(_store(*rows), group_by="ruleId")
        self.assertEqual([g.text for g in data.groups], ["C", "A", "B"])
        self.assertEqual([len(g.rows) for g in data.groups], [5, 3, 1])

    def test_equal_sized_groups_keep_encounter_order(self) -> None:
        rows = [_row(1, rule_id="Z"), _row(2, rule_id="A"), _row(3, rule_id="M")]
        groups = group_rows(rows, "ruleId")
        self.assertEqual([g.text for g in groups], ["Z", "A", "M"])

    def test_group_label_from_first_row(self) -> None:
        rows = [_row(1, rule_id="R1", rule_name="first"), _row(2, rule_id="R1", rule_name="second")]
        groups = group_rows(rows, "ruleId")
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].rows[0].rule_name.value, "first")


class TestCompareValues(unittest.TestCase):
    """Comparator dispatch: missing, position, severity, number, text."""

    def test_missing_sorts_first(self) -> None:
        self.assertLess(compare_values(PlainValue(), PlainValue(value="a")), 0)
        self.assertGreater(compare_values(PlainValue(value="a"), PlainValue()), 0)
        self.assertEqual(compare_values(PlainValue(), PlainValue()), 0)

    def test_positions_by_line_then_column(self) -> None:
        a = PositionValue.from_position(Position(line=1, character=9))
        b = PositionValue.from_position(Position(line=2, character=0))
        c = PositionValue.from_position(Position(line=1, character=4))
        self.assertLess(compare_values(a, b), 0)
        self.assertGreater(compare_values(a, c), 0)

    def test_severity_by_rank_not_text(self) -> None:
        error, note = SeverityValue.from_level("error"), SeverityValue.from_level("note")
        self.assertLess(compare_values(error, note), 0)
        # "error" < "note" as text too, so also check a pair where text order disagrees.
        warning = SeverityValue.from_level("warning")
        self.assertLess(compare_values(warning, note), 0)

    def test_numbers_numerically(self) -> None:
        self.assertLess(compare_values(PlainValue(value=9), PlainValue(value=10)), 0)

    def test_text(self) -> None:
        self.assertLess(compare_values(PlainValue(value="alpha"), PlainValue(value="beta")), 0)
        self.assertEqual(compare_values(PlainValue(value="same"), PlainValue(value="same")), 0)


class TestSortRows(unittest.TestCase):
    """Row order within a group follows the sort column and direction."""

    def test_position_direction_toggle_reverses(self) -> None:
        # Displayed (2, 9) and (2, 5): same line, different column.
        later = _row(1, line=1, character=8)
        earlier = _row(2, line=1, character=4)
        ascending = sort_rows([later, earlier], SortBy(column="resultStartPos", ascending=True))
        self.assertEqual([r.result_start_pos.value for r in ascending], ["(2, 5)", "(2, 9)"])
        descending = sort_rows([later, earlier], SortBy(column="resultStartPos", ascending=False))
        self.assertEqual(descending, list(reversed(ascending)))

    def test_severity_sorted_by_rank(self) -> None:
        rows = [_row(1, severity="note"), _row(2, severity="error"), _row(3, severity="warning")]
        ordered = sort_rows(rows, SortBy(column="severityLevel"))
        self.assertEqual([r.severity_level.value for r in ordered], ["error", "warning", "note"])

    def test_numeric_column(self) -> None:
        rows = [_row(1, run_id=10), _row(2, run_id=9)]
        ordered = sort_rows(rows, SortBy(column="runId"))
        self.assertEqual([r.run_id.value for r in ordered], [9, 10])

    def test_missing_values_first(self) -> None:
        rows = [_row(1, rule_name="beta"), _row(2, rule_name=None), _row(3, rule_name="alpha")]
        ordered = sort_rows(rows, SortBy(column="ruleName"))
        self.assertEqual([r.rule_name.value for r in ordered], [None, "alpha", "beta"])

    def test_ties_keep_encounter_order_in_both_directions(self) -> None:
        rows = [_row(1, rule_id="R1"), _row(2, rule_id="R1"), _row(3, rule_id="R1")]
        for ascending in (True, False):
            with self.subTest(ascending=ascending):
                ordered = sort_rows(rows, SortBy(column="ruleId", ascending=ascending))
                self.assertEqual([r.row_id for r in ordered], ["1_1", "1_2", "1_3"])

    def test_text_with_nul_character_sorts(self) -> None:
        rows = [_row(1, message="ok"), _row(2, message="bad\x00byte"), _row(3, message="Bad\x00byte")]
        ordered = sort_rows(rows, SortBy(column="message"))
        self.assertEqual([r.message.value for r in ordered], ["Bad\x00byte", "bad\x00byte", "ok"])
        data = _project(_store(*rows), sort_by=SortBy(column="message", ascending=False))
        self.assertEqual([r.message.value for r in data.groups[0].rows], ["ok", "bad\x00byte", "Bad\x00byte"])

    def test_no_sort_keeps_order(self) -> None:
        rows = [_row(2), _row(1)]
        self.assertEqual(sort_rows(rows, None), rows)


class TestBuildProjection(unittest.TestCase):
    """Projection counts, copying, and determinism."""

    def test_result_count_is_total_rows_not_filtered(self) -> None:
        store = _store(_row(1), _row(2), _row(3))
        data = _project(store, membership=["1_2"])
        self.assertEqual(data.result_count, 3)
        self.assertEqual(data.visible_row_count, 1)

    def test_missing_member_ids_are_skipped(self) -> None:
        store = _store(_row(1))
        data = _project(store, membership=["1_1", "9_9"])
        self.assertEqual(data.visible_row_count, 1)

    def test_identical_inputs_identical_output(self) -> None:
        store = _store(
            _row(1, rule_id="B", line=3),
            _row(2, rule_id="A", line=1),
            _row(3, rule_id="B", line=2),
        )
        view = ViewSettings(group_by="ruleId", sort_by=SortBy(column="resultStartPos"))
        first = build_projection(store, list(store), view, FilterState())
        second = build_projection(store, list(store), view, FilterState())
        self.assertEqual(first.model_dump(), second.model_dump())

    def test_columns_are_copied(self) -> None:
        store = _store(_row(1))
        view = ViewSettings(group_by="resultFile")
        data = build_projection(store, list(store), view, FilterState())
        view.reconcile_columns(["message"])
        self.assertFalse(data.columns["message"].hide)

    def test_view_state_in_output(self) -> None:
        store = _store(_row(1))
        sort_by = SortBy(column="message", ascending=False)
        view = ViewSettings(group_by="ruleId", sort_by=sort_by, hidden_columns=["runId"])
        data = build_projection(store, list(store), view, FilterState(text="R", case_match=True))
        self.assertEqual(data.group_by, "ruleId")
        self.assertEqual(data.sort_by, sort_by)
        self.assertEqual(data.filter_state.text, "R")
        self.assertTrue(data.columns["runId"].hide)

    def test_camel_case_dump_for_ui(self) -> None:
        data = _project(_store(_row(1)))
        dumped = data.model_dump(by_alias=True)
        self.assertIn("resultCount", dumped)
        self.assertIn("resultStartPos", dumped["groups"][0]["rows"][0])


if __name__ == "__main__":
    unittest.main()
