"""Pydantic schemas for results list rows: column keys, tagged cell values, and the row record."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Column keys as used by the UI contract and the persisted settings.
ColumnKey = Literal[
    "message",
    "resultFile",
    "resultStartPos",
    "ruleId",
    "ruleName",
    "runId",
    "resultId",
    "sarifFile",
    "severityLevel",
]

COLUMN_KEYS: tuple[str, ...] = (
    "message",
    "resultFile",
    "resultStartPos",
    "ruleId",
    "ruleName",
    "runId",
    "resultId",
    "sarifFile",
    "severityLevel",
)

# Columns that display a file's short name; the tooltip holds the full path.
FILE_COLUMN_KEYS: frozenset[str] = frozenset({"sarifFile", "resultFile"})

# Columns tested by the filter, in order.
FILTER_COLUMN_KEYS: tuple[str, ...] = (
    "message",
    "ruleId",
    "ruleName",
    "severityLevel",
    "resultFile",
    "sarifFile",
)

# Rank used when sorting by severity (lower index sorts first when ascending).
SEVERITY_ORDER: dict[str, int] = {
    "error": 0,
    "warning": 1,
    "note": 2,
    "open": 3,
    "pass": 4,
    "notApplicable": 5,
}

# Levels outside the table sort after every known level.
UNKNOWN_SEVERITY_ORDER = len(SEVERITY_ORDER)

CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(BaseModel):
    """Zero-based line/character position in a source file."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(default=0, ge=0, description="Zero-based line number.")
    character: int = Field(default=0, ge=0, description="Zero-based column number.")


class PlainValue(BaseModel):
    """Cell holding a display value and an optional tooltip."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    kind: Literal["plain"] = "plain"
    value: str | int | None = Field(
        default=None,
        description="Display value; numbers sort numerically, None sorts before everything.",
    )
    tooltip: str | None = Field(
        default=None,
        description="Hover text; for file columns this is the full path.",
    )


class PositionValue(BaseModel):
    """Cell showing a 1-based (line, column) pair and carrying the raw 0-based position."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    kind: Literal["position"] = "position"
    value: str | None = Field(default="(0, 0)", description="Formatted 1-based position.")
    tooltip: str | None = None
    pos: Position = Field(default_factory=Position, description="Raw position used for sorting.")

    @classmethod
    def from_position(cls, pos: Position) -> "PositionValue":
        """Build a cell from a 0-based position, formatting it 1-based."""
        return cls(value=f"({pos.line + 1}, {pos.character + 1})", pos=pos)


class SeverityValue(BaseModel):
    """Cell showing a SARIF level and carrying its rank."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    kind: Literal["severity"] = "severity"
    value: str | None = Field(default=None, description="SARIF level as displayed.")
    tooltip: str | None = None
    severity_order: int = Field(
        default=UNKNOWN_SEVERITY_ORDER,
        ge=0,
        description="Rank from SEVERITY_ORDER; compared instead of the display string.",
    )

    @classmethod
    def from_level(cls, level: str | None) -> "SeverityValue":
        """Build a cell for a SARIF level, ranking unknown levels last."""
        order = SEVERITY_ORDER.get(level, UNKNOWN_SEVERITY_ORDER) if level else UNKNOWN_SEVERITY_ORDER
        return cls(value=level, severity_order=order)


CellValue = Annotated[
    Union[PlainValue, PositionValue, SeverityValue],
    Field(discriminator="kind"),
]


class Row(BaseModel):
    """One analysis result rendered as a results list record."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    message: PlainValue = Field(default_factory=PlainValue)
    result_file: PlainValue = Field(default_factory=PlainValue)
    result_start_pos: PositionValue = Field(default_factory=PositionValue)
    rule_id: PlainValue = Field(default_factory=PlainValue)
    rule_name: PlainValue = Field(default_factory=PlainValue)
    run_id: PlainValue = Field(default_factory=PlainValue)
    result_id: PlainValue = Field(default_factory=PlainValue)
    sarif_file: PlainValue = Field(default_factory=PlainValue)
    severity_level: SeverityValue = Field(default_factory=SeverityValue)

    @property
    def row_id(self) -> str:
        """Composite identity: run id and result id joined by an underscore."""
        return row_id_for(self.run_id.value, self.result_id.value)

    def cell(self, key: str) -> CellValue:
        """Return the cell for a column key (e.g. "ruleId"). Raises KeyError for unknown keys."""
        return getattr(self, _FIELD_BY_COLUMN_KEY[key])


def row_id_for(run_id: str | int | None, result_id: str | int | None) -> str:
    """Build the store key for a result within a run."""
    return f"{run_id}_{result_id}"


_FIELD_BY_COLUMN_KEY: dict[str, str] = {to_camel(name): name for name in Row.model_fields}
