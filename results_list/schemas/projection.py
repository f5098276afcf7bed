"""Pydantic schemas for the view state and the projection pushed to the results list UI."""

from pydantic import BaseModel, ConfigDict, Field

from results_list.schemas.rows import CAMEL_CONFIG, ColumnKey, Row


class ColumnDescriptor(BaseModel):
    """Static metadata for one column; only hide changes at runtime."""

    model_config = CAMEL_CONFIG

    title: str = Field(..., min_length=1, description="Column header text.")
    description: str = Field(default="", description="Header tooltip.")
    hide: bool = Field(default=False, description="True when the column is hidden by settings.")


class SortBy(BaseModel):
    """Active sort: one column and a direction."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    column: ColumnKey = Field(..., description="Column key to sort rows by.")
    ascending: bool = Field(default=True, description="False reverses the row order.")


class FilterState(BaseModel):
    """Transient filter settings; not persisted."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    text: str = Field(default="", description="Regular expression; empty matches every row.")
    case_match: bool = Field(default=False, description="True for case-sensitive matching.")
    error: str | None = Field(
        default=None,
        description="Compile error for an invalid pattern; no rows pass while set.",
    )


class ResultsListGroup(BaseModel):
    """Rows sharing one grouping key, labelled by the first row's display value."""

    model_config = CAMEL_CONFIG

    text: str | int | None = Field(default=None, description="Group label (short display value).")
    tooltip: str | None = Field(default=None, description="Group tooltip (full path for file columns).")
    rows: list[Row] = Field(default_factory=list)


class ResultsListData(BaseModel):
    """Filtered, grouped and sorted view of the results list."""

    model_config = CAMEL_CONFIG

    columns: dict[str, ColumnDescriptor] = Field(..., description="Column key -> descriptor.")
    filter_state: FilterState = Field(default_factory=FilterState)
    group_by: ColumnKey = Field(..., description="Column key rows are grouped by.")
    sort_by: SortBy | None = Field(
        default=None,
        description="Active sort; None leaves rows in encounter order.",
    )
    result_count: int = Field(
        ...,
        ge=0,
        description="Total rows in the store, regardless of the filter.",
    )
    groups: list[ResultsListGroup] = Field(default_factory=list)

    @property
    def visible_row_count(self) -> int:
        """Number of rows that passed the filter."""
        return sum(len(g.rows) for g in self.groups)
