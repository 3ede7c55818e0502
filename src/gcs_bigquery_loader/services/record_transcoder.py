"""
Type-coercing transcoder for delimited files.

Raw CSV/TSV text is parsed into records, each record is coerced against the
destination table schema, and the typed records are written back out as
delimited text ready for a staging load.

The parser is deliberately naive: lines are split on the delimiter without
honouring quoted fields, matching the files the loader has always accepted.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..clients import ObjectStore
from ..database.merge_operations import build_merge_query
from ..models import ColumnType, Schema, TranscodeReport, TranscodeResult

logger = logging.getLogger(__name__)

Record = Dict[str, str]
TypedRecord = Dict[str, Any]

QUOTE = '"'
TRANSCODED_PREFIX = "transcoded/"

_NUMERIC_RE = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$')
_LEADING_INT_RE = re.compile(r'^\s*([+-]?\d+)')


def _split_lines(raw_text: str) -> List[str]:
    lines = [line.rstrip("\r") for line in raw_text.split("\n")]
    # a final newline leaves one empty piece behind
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_header(raw_text: str, delimiter: str) -> List[str]:
    """Column names from the first line, with quote characters stripped."""
    lines = _split_lines(raw_text)
    if not lines:
        return []
    return [name.replace(QUOTE, "") for name in lines[0].split(delimiter)]


def parse_delimited(raw_text: str, delimiter: str) -> List[Record]:
    """
    Parse delimited text into records keyed by the header row.

    Quote characters are stripped from header names only. Rows shorter than
    the header produce records without the trailing columns; extra fields
    are dropped. Empty lines between rows are records too; only the empty
    line left by a final newline is ignored.
    """
    lines = _split_lines(raw_text)
    if not lines:
        return []

    header = parse_header(lines[0], delimiter)
    return [dict(zip(header, line.split(delimiter))) for line in lines[1:]]


def coerce_integer(value: str) -> Any:
    """'' stays '', non-numeric text passes through, numbers truncate to int."""
    if value == "":
        return value
    if not _NUMERIC_RE.match(value):
        return value
    match = _LEADING_INT_RE.match(value)
    if match is None:
        # e.g. ".5": numeric but without integer digits
        return value
    return int(match.group(1), 10)


def coerce_boolean(value: str) -> Any:
    if value == "":
        return value
    return value.lower() == "true"


def coerce_record(
    record: Record,
    schema: Schema,
    report: Optional[TranscodeReport] = None,
) -> TypedRecord:
    """
    Apply the schema's column types to a record.

    Columns missing from the schema pass through unchanged and schema
    columns missing from the record are not added. Values that cannot be
    coerced are kept as-is and counted in ``report`` when one is given.
    """
    types = {column.name: column.type for column in schema}
    typed: TypedRecord = {}

    for name, value in record.items():
        column_type = types.get(name)
        if column_type == ColumnType.STRING:
            typed[name] = str(value)
        elif column_type == ColumnType.INTEGER:
            typed[name] = coerce_integer(value)
        elif column_type == ColumnType.BOOLEAN:
            typed[name] = coerce_boolean(value)
        else:
            typed[name] = value

        if (
            report is not None
            and column_type == ColumnType.INTEGER
            and isinstance(typed[name], str)
            and typed[name] != ""
        ):
            report.record_passthrough(name)

    return typed


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote_field(text: str, delimiter: str) -> str:
    if delimiter in text or "\n" in text or "\r" in text:
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def serialize_delimited(
    records: Sequence[TypedRecord],
    delimiter: str,
    header: Optional[Sequence[str]] = None,
) -> str:
    """
    Serialize records to delimited text.

    The header is taken from the first record's keys; later records are
    written in that column order with missing values left empty. ``header``
    is only used when there are no records, so an empty extract still keeps
    its column names.
    """
    if not records:
        if not header:
            return ""
        return delimiter.join(_quote_field(name, delimiter) for name in header)

    header = list(records[0].keys())
    lines = [delimiter.join(_quote_field(name, delimiter) for name in header)]
    for record in records:
        lines.append(delimiter.join(
            _quote_field(_format_value(record.get(name, "")), delimiter)
            for name in header
        ))
    return "\n".join(lines)


def transcoded_object_name(file_name: str) -> str:
    return f"{TRANSCODED_PREFIX}{file_name}"


class RecordTranscoder:
    """
    Fetches a raw object, coerces it against a schema and stores the result.
    """

    def __init__(self, object_store: ObjectStore):
        self.object_store = object_store

    def transcode_text(
        self,
        raw_text: str,
        schema: Schema,
        delimiter: str,
    ) -> Tuple[str, int, TranscodeReport]:
        """
        Coerce delimited text against a schema.

        Returns:
            (transcoded text, row count, TranscodeReport)
        """
        report = TranscodeReport()
        records = parse_delimited(raw_text, delimiter)
        typed_records = [coerce_record(record, schema, report) for record in records]
        report.rows_processed = len(typed_records)
        text = serialize_delimited(typed_records, delimiter, header=parse_header(raw_text, delimiter))
        return text, len(typed_records), report

    def transcode(
        self,
        bucket_name: str,
        file_name: str,
        schema: Schema,
        delimiter: str,
    ) -> TranscodeResult:
        """
        Download ``file_name``, coerce it and save it as a new object.

        Args:
            bucket_name: Bucket holding the raw object
            file_name: Raw object name
            schema: Destination table schema
            delimiter: Field delimiter of the raw object

        Returns:
            TranscodeResult naming the saved object
        """
        raw_bytes = self.object_store.download(bucket_name, file_name)
        raw_text = raw_bytes.decode("utf-8-sig")

        text, row_count, report = self.transcode_text(raw_text, schema, delimiter)

        object_name = transcoded_object_name(file_name)
        self.object_store.save(bucket_name, object_name, text)
        logger.info(f"Transcoded {row_count} rows from {file_name} to {object_name}.")

        if report.total_passthrough:
            logger.warning(
                f"{report.total_passthrough} values in {file_name} could not be coerced "
                f"and were kept as text: {report.passthrough_counts}"
            )

        return TranscodeResult(object_name=object_name, row_count=row_count, report=report)

    # Merge SQL is part of the transcoder's surface
    build_merge_query = staticmethod(build_merge_query)
