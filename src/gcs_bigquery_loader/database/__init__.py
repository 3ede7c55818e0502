"""
Database module for schema-aware BigQuery loads.

This module provides staging table management and the merge of staged rows
into destination tables.
"""

from .staging_tables import StagingTableManager, StagingTableConfig
from .merge_operations import (
    MergeManager,
    MergeResult,
    build_merge_query,
)

__all__ = [
    'StagingTableManager',
    'StagingTableConfig',
    'MergeManager',
    'MergeResult',
    'build_merge_query',
]
