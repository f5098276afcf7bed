"""Pydantic schemas for rows, view state, UI messages, and the result feed."""

from results_list.schemas.messages import ResultsListMessage, RowIdentity
from results_list.schemas.projection import (
    ColumnDescriptor,
    FilterState,
    ResultsListData,
    ResultsListGroup,
    SortBy,
)
from results_list.schemas.rows import (
    COLUMN_KEYS,
    CellValue,
    ColumnKey,
    PlainValue,
    Position,
    PositionValue,
    Row,
    SeverityValue,
)
from results_list.schemas.sarif import ResultInfo, ResultLocation, RunInfo, SourceRange

__all__ = [
    "COLUMN_KEYS",
    "CellValue",
    "ColumnDescriptor",
    "ColumnKey",
    "FilterState",
    "PlainValue",
    "Position",
    "PositionValue",
    "ResultInfo",
    "ResultLocation",
    "ResultsListData",
    "ResultsListGroup",
    "ResultsListMessage",
    "Row",
    "RowIdentity",
    "RunInfo",
    "SeverityValue",
    "SortBy",
    "SourceRange",
]
