"""
Services module for the Cloud Storage to BigQuery loader.

This module provides the transfer controller that orchestrates uploads and
loads, and the record transcoder that coerces files to a table schema.
"""

from .record_transcoder import (
    RecordTranscoder,
    parse_delimited,
    parse_header,
    coerce_record,
    serialize_delimited,
)
from .transfer_controller import TransferController, validate_file_type

__all__ = [
    'RecordTranscoder',
    'parse_delimited',
    'parse_header',
    'coerce_record',
    'serialize_delimited',
    'TransferController',
    'validate_file_type',
]
