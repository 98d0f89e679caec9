"""Read options: the parameter set a pipeline step passes to a conversion."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_RANGE = "A1:A1"
DEFAULT_DATE_HEADER = "yyyy-MM-dd"
DEFAULT_DATE_BODY = "yyyy-MM-dd HH:mm:ss.SSS"


class ReadOptions(BaseModel):
    """Parameters of one range conversion.

    Property names used by the pipeline processor (``sheet_index``,
    ``FormatoFechaHeader``, ``FormatoFechaBody``) and their camelCase
    spellings are accepted as aliases so properties files can be reused.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    path: str
    range: str = DEFAULT_RANGE
    sheet_index: int = Field(
        default=0,
        validation_alias=AliasChoices("sheet_index", "sheetIndex"),
    )
    headers: bool = True
    format_date_header: str = Field(
        default=DEFAULT_DATE_HEADER,
        validation_alias=AliasChoices("format_date_header", "formatDateHeader", "FormatoFechaHeader"),
    )
    format_date_body: str = Field(
        default=DEFAULT_DATE_BODY,
        validation_alias=AliasChoices("format_date_body", "formatDateBody", "FormatoFechaBody"),
    )

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        # Not trimmed: file names may start or end with spaces.
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("sheet_index")
    @classmethod
    def validate_sheet_index(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"sheet index must be zero or positive, got {v}")
        return v

    @field_validator("format_date_header", "format_date_body")
    @classmethod
    def validate_date_pattern(cls, v: str) -> str:
        from xlsxjson.convert.dates import DatePattern, DatePatternError

        if not v:
            raise ValueError("must not be empty")
        try:
            DatePattern.compile(v)
        except DatePatternError as e:
            raise ValueError(str(e)) from e
        return v
