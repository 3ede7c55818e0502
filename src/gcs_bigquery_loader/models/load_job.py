"""
Load job options and result structures.

LoadOptions describes how a delimited file in Cloud Storage is ingested by a
BigQuery load job. The result dataclasses replace the tuple results the
Google clients hand back with explicit ``{value, job_id}`` structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CSV_EXTENSION = ".csv"
TSV_EXTENSION = ".tsv"
ALLOWED_EXTENSIONS = (CSV_EXTENSION, TSV_EXTENSION)

DELIMITERS = {
    CSV_EXTENSION: ",",
    TSV_EXTENSION: "\t",
}


class WriteDisposition(str, Enum):
    WRITE_APPEND = "WRITE_APPEND"
    WRITE_TRUNCATE = "WRITE_TRUNCATE"


class LoadOptions(BaseModel):
    """Options of a single BigQuery load job."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_format: str = Field("CSV", alias="sourceFormat")
    skip_leading_rows: int = Field(1, alias="skipLeadingRows", ge=0)
    autodetect: bool = True
    field_delimiter: str = Field(",", alias="fieldDelimiter")
    write_disposition: WriteDisposition = Field(
        WriteDisposition.WRITE_APPEND,
        alias="writeDisposition"
    )

    @field_validator('field_delimiter')
    @classmethod
    def validate_field_delimiter(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError('Field delimiter must be a single character')
        return v

    @classmethod
    def for_extension(cls, extension: str, **overrides: Any) -> "LoadOptions":
        """
        Build load options for a .csv or .tsv file.

        Raises:
            KeyError: If the extension is not a supported delimited format
        """
        return cls(field_delimiter=DELIMITERS[extension], **overrides)


class LoadPath(str, Enum):
    """Which branch of the load pipeline was taken."""
    NEW_TABLE = "NEW_TABLE"
    DIRECT_LOAD = "DIRECT_LOAD"
    MERGE_PATH = "MERGE_PATH"


@dataclass
class JobResult:
    """Result of a warehouse job."""
    job_id: str
    value: Any = None


@dataclass
class TranscodeReport:
    """Values that could not be coerced to their column type, per column."""
    rows_processed: int = 0
    passthrough_counts: Dict[str, int] = field(default_factory=dict)

    def record_passthrough(self, column_name: str) -> None:
        self.passthrough_counts[column_name] = self.passthrough_counts.get(column_name, 0) + 1

    @property
    def total_passthrough(self) -> int:
        return sum(self.passthrough_counts.values())


@dataclass
class TranscodeResult:
    """Outcome of transcoding a raw file into a coerced object."""
    object_name: str
    row_count: int
    report: TranscodeReport


@dataclass
class LoadResult:
    """Outcome of a load_to_bigquery call."""
    dataset_id: str
    table_id: str
    path: LoadPath
    load_job_id: Optional[str] = None
    merge_job_id: Optional[str] = None
    staging_table_id: Optional[str] = None
    transcoded_object: Optional[str] = None
    transcode_report: Optional[TranscodeReport] = None


@dataclass
class QueryResult:
    """
    Result of run_query: either rows or the error raised by the warehouse.

    Failures are returned rather than raised, so callers must check ``ok``.
    """
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, rows: List[Dict[str, Any]]) -> "QueryResult":
        return cls(rows=rows)

    @classmethod
    def failure(cls, error: BaseException) -> "QueryResult":
        return cls(error=error)
