"""
Staging table management for schema-aware loads.

Rows bound for a destination table that already has a schema are first
loaded into an ephemeral ``{table_id}_temp`` table in the same dataset,
merged from there, and the staging table is dropped afterwards.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from ..clients import ObjectStore, Warehouse
from ..models import JobResult, LoadOptions, WriteDisposition

logger = logging.getLogger(__name__)

STAGING_SUFFIX = "_temp"


@dataclass(frozen=True)
class StagingTableConfig:
    """Where the staging table for a destination table lives."""
    dataset_id: str
    table_id: str
    suffix: str = STAGING_SUFFIX

    @property
    def staging_table_id(self) -> str:
        return f"{self.table_id}{self.suffix}"


class StagingTableManager:
    """
    Manages the lifecycle of staging tables.

    A staging table is created if absent, truncated by its load job, read by
    the merge query and deleted.
    """

    def __init__(self, warehouse: Warehouse):
        """
        Initialize staging table manager.

        Args:
            warehouse: Warehouse client the staging tables live in
        """
        self.warehouse = warehouse

    def create_staging_table(self, config: StagingTableConfig) -> str:
        """
        Create the staging table unless it already exists.

        Returns:
            The staging table id
        """
        staging_table_id = config.staging_table_id
        self.warehouse.create_table(config.dataset_id, staging_table_id, exists_ok=True)
        logger.info(f"Staging table {config.dataset_id}.{staging_table_id} ready.")
        return staging_table_id

    def load_staging_table(
        self,
        config: StagingTableConfig,
        bucket_name: str,
        object_name: str,
        field_delimiter: str,
    ) -> JobResult:
        """
        Load a transcoded object into the staging table, replacing its rows.

        Args:
            config: Staging table location
            bucket_name: Bucket holding the transcoded object
            object_name: Transcoded object name
            field_delimiter: Delimiter of the transcoded object

        Returns:
            JobResult of the load job
        """
        options = LoadOptions(
            field_delimiter=field_delimiter,
            write_disposition=WriteDisposition.WRITE_TRUNCATE,
        )
        job = self.warehouse.load_file(
            config.dataset_id,
            config.staging_table_id,
            ObjectStore.uri(bucket_name, object_name),
            options,
        )
        logger.info(f"Job {job.job_id} completed.")
        return job

    def drop_staging_table(self, config: StagingTableConfig) -> bool:
        """
        Drop the staging table.

        Failures are logged and reported through the return value so that
        cleanup never masks the error that triggered it.

        Returns:
            True if the table was dropped
        """
        try:
            self.warehouse.delete_table(config.dataset_id, config.staging_table_id)
            logger.info(f"Dropped staging table {config.dataset_id}.{config.staging_table_id}")
            return True
        except Exception as e:
            logger.warning(f"Failed to drop staging table {config.dataset_id}.{config.staging_table_id}: {e}")
            return False

    @contextmanager
    def staging_table(self, config: StagingTableConfig) -> Iterator[str]:
        """Context manager that creates a staging table and always drops it."""
        staging_table_id = self.create_staging_table(config)
        try:
            yield staging_table_id
        finally:
            self.drop_staging_table(config)
