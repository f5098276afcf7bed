"""Convert parsed SARIF results into results list rows."""

from collections.abc import Iterable

from results_list.schemas.rows import (
    PlainValue,
    Position,
    PositionValue,
    Row,
    SeverityValue,
    row_id_for,
)
from results_list.schemas.sarif import ResultInfo, RunInfo

DEFAULT_NO_LOCATION_TEXT = "No Location"


class UnknownRunError(Exception):
    """Raised when a result references a run the run-info provider does not know."""

    def __init__(self, run_id: int | str) -> None:
        self.run_id = run_id
        super().__init__(f"No run info for run {run_id!r}")


def build_row(
    result: ResultInfo,
    run: RunInfo,
    no_location_text: str = DEFAULT_NO_LOCATION_TEXT,
) -> Row:
    """
    Build the row for one result.

    The SARIF file cell shows the log's short name with the full path as tooltip. The first
    location fills the file (short name, full path) and position cells; a result without a
    location shows no_location_text and position (0, 0).
    """
    if result.locations:
        location = result.locations[0]
        result_file = PlainValue(value=location.file_name, tooltip=location.uri)
        start_pos = PositionValue.from_position(location.range.start)
    else:
        result_file = PlainValue(value=no_location_text)
        start_pos = PositionValue(value="(0, 0)", pos=Position())

    return Row(
        message=PlainValue(value=result.message),
        result_id=PlainValue(value=result.id),
        rule_id=PlainValue(value=result.rule_id),
        rule_name=PlainValue(value=result.rule_name),
        run_id=PlainValue(value=result.run_id),
        sarif_file=PlainValue(value=run.sarif_file_name, tooltip=run.sarif_file_full_path),
        severity_level=SeverityValue.from_level(result.severity_level),
        result_file=result_file,
        result_start_pos=start_pos,
    )


def build_rows(
    results: Iterable[ResultInfo],
    runs: dict[str, RunInfo],
    no_location_text: str = DEFAULT_NO_LOCATION_TEXT,
) -> list[Row]:
    """
    Build rows for a batch of results. runs maps str(run id) -> RunInfo.

    Raises UnknownRunError before returning anything if a result's run is missing.
    """
    rows: list[Row] = []
    for result in results:
        run = runs.get(str(result.run_id))
        if run is None:
            raise UnknownRunError(result.run_id)
        rows.append(build_row(result, run, no_location_text))
    return rows


def result_row_id(result: ResultInfo) -> str:
    """Row id of the row built from result."""
    return row_id_for(result.run_id, result.id)
