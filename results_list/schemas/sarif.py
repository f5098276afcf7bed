"""Pydantic schemas for the upstream result feed: parsed SARIF results, runs, and locations."""

from pydantic import BaseModel, ConfigDict, Field

from results_list.schemas.rows import CAMEL_CONFIG, Position


class SourceRange(BaseModel):
    """Range in a source file (0-based, end exclusive)."""

    model_config = ConfigDict(frozen=True)

    start: Position = Field(default_factory=Position)
    end: Position = Field(default_factory=Position)


class ResultLocation(BaseModel):
    """A result's location: the file URI, its short name, and the range within it."""

    model_config = ConfigDict(frozen=True, **CAMEL_CONFIG)

    uri: str = Field(..., min_length=1, description="Full path or URI of the file.")
    file_name: str = Field(..., description="Short file name shown in the list.")
    range: SourceRange = Field(default_factory=SourceRange)


class ResultInfo(BaseModel):
    """One parsed SARIF result as delivered by the result feed."""

    model_config = CAMEL_CONFIG

    id: int | str = Field(..., description="Result id, unique within its run.")
    run_id: int | str = Field(..., description="Id of the run the result belongs to.")
    message: str | None = Field(default=None, description="Result message text.")
    rule_id: str | None = Field(default=None)
    rule_name: str | None = Field(default=None)
    severity_level: str | None = Field(
        default=None,
        description="SARIF level: error, warning, note, open, pass, or notApplicable.",
    )
    locations: list[ResultLocation] = Field(
        default_factory=list,
        description="Result locations; the first one is shown in the list.",
    )


class RunInfo(BaseModel):
    """Per-run metadata: the SARIF log the run was read from."""

    model_config = CAMEL_CONFIG

    id: int | str
    sarif_file_name: str = Field(..., description="Short name of the SARIF log.")
    sarif_file_full_path: str = Field(..., description="Full path of the SARIF log.")
