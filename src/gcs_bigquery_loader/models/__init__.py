"""
Models for the Cloud Storage to BigQuery loader.

This module provides the pydantic models and result structures shared by the
transfer controller, the record transcoder and the cloud clients.

Model Types:
- SchemaColumn / ColumnType: destination table columns and their coercion type
- LoadOptions: BigQuery load job configuration for delimited files
- JobResult, QueryResult, LoadResult: explicit results of warehouse operations
- TranscodeResult / TranscodeReport: outcome of coercing a raw file
"""

from .schema import ColumnType, SchemaColumn, Schema, schema_from_fields, column_names
from .load_job import (
    ALLOWED_EXTENSIONS,
    DELIMITERS,
    JobResult,
    LoadOptions,
    LoadPath,
    LoadResult,
    QueryResult,
    TranscodeReport,
    TranscodeResult,
    WriteDisposition,
)

__all__ = [
    'ColumnType',
    'SchemaColumn',
    'Schema',
    'schema_from_fields',
    'column_names',
    'ALLOWED_EXTENSIONS',
    'DELIMITERS',
    'JobResult',
    'LoadOptions',
    'LoadPath',
    'LoadResult',
    'QueryResult',
    'TranscodeReport',
    'TranscodeResult',
    'WriteDisposition',
]
