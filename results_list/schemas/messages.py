"""Pydantic schemas for messages posted by the results list UI."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from results_list.schemas.rows import CAMEL_CONFIG, row_id_for

MSG_COLUMN_TOGGLED = "ResultsListColumnToggled"
MSG_FILTER_APPLIED = "ResultsListFilterApplied"
MSG_FILTER_CASE_TOGGLED = "ResultsListFilterCaseToggled"
MSG_GROUP_CHANGED = "ResultsListGroupChanged"
MSG_RESULT_SELECTED = "ResultsListResultSelected"
MSG_SORT_CHANGED = "ResultsListSortChanged"

MessageType = Literal[
    "ResultsListColumnToggled",
    "ResultsListFilterApplied",
    "ResultsListFilterCaseToggled",
    "ResultsListGroupChanged",
    "ResultsListResultSelected",
    "ResultsListSortChanged",
]


class ResultsListMessage(BaseModel):
    """UI intent: a message type and its payload (column key, filter text, or row identity JSON)."""

    type: MessageType
    data: Any = None


class RowIdentity(BaseModel):
    """Payload of a row selection."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    result_id: int | str = Field(..., description="Result id within its run.")
    run_id: int | str = Field(..., description="Run id the result belongs to.")

    @property
    def row_id(self) -> str:
        return row_id_for(self.run_id, self.result_id)
