"""
Merge of staged rows into a destination table.

The merge is insert-only: staged rows with no identical destination row
(every column compared as STRING) are inserted, matched rows are left as
they are.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..clients import Warehouse

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Result of a merge query job."""
    dataset_id: str
    table_id: str
    staging_table_id: str
    job_id: str
    rows_inserted: Optional[int] = None


def build_on_clause(columns: Sequence[str]) -> str:
    """String-cast equality over every column, joined by AND."""
    return " AND ".join(
        f"CAST(T.{column} AS STRING) = CAST(S.{column} AS STRING)"
        for column in columns
    )


def build_merge_query(
    dataset_id: str,
    table_id: str,
    temp_table_id: str,
    schema_columns: Sequence[str],
) -> str:
    """
    Build the MERGE statement from a staging table into its destination.

    Args:
        dataset_id: Dataset of both tables
        table_id: Destination table
        temp_table_id: Staging table
        schema_columns: Destination column names, in schema order

    Returns:
        MERGE SQL text

    Raises:
        ValueError: If no columns are given
    """
    if not schema_columns:
        raise ValueError("Cannot build a merge query without schema columns")

    return (
        f"MERGE `{dataset_id}.{table_id}` T\n"
        f"USING `{dataset_id}.{temp_table_id}` S\n"
        f"ON {build_on_clause(schema_columns)}\n"
        f"WHEN NOT MATCHED THEN\n"
        f"  INSERT ROW"
    )


class MergeManager:
    """Runs merge queries against the warehouse."""

    def __init__(self, warehouse: Warehouse):
        self.warehouse = warehouse

    def merge(
        self,
        dataset_id: str,
        table_id: str,
        staging_table_id: str,
        schema_columns: List[str],
        location: Optional[str] = None,
    ) -> MergeResult:
        """
        Merge the staging table into the destination table.

        Errors from the query job propagate unchanged.
        """
        sql = build_merge_query(dataset_id, table_id, staging_table_id, schema_columns)
        logger.debug(f"Executing MERGE into {dataset_id}.{table_id}:\n{sql}")

        try:
            job = self.warehouse.create_query_job(sql, location)
        except Exception as e:
            logger.error(f"MERGE into {dataset_id}.{table_id} failed: {e}")
            raise

        logger.info(f"Merge job {job.job_id} completed.")
        return MergeResult(
            dataset_id=dataset_id,
            table_id=table_id,
            staging_table_id=staging_table_id,
            job_id=job.job_id,
            rows_inserted=job.value,
        )
