"""
Upload-then-load orchestration for delimited files.

A local .csv/.tsv file is uploaded to Cloud Storage and loaded into a
BigQuery table. Depending on the destination table the load takes one of
three paths:

- NEW_TABLE: the table does not exist; it is created and loaded directly.
- DIRECT_LOAD: the table exists without a schema; it is loaded directly.
- MERGE_PATH: the table has a schema; the file is coerced to the schema,
  loaded into a staging table and merged into the destination.

Every step waits for the previous one; nothing is retried.
"""

import logging
from pathlib import Path
from typing import Optional

from ..clients import ObjectStore, Warehouse
from ..database import MergeManager, StagingTableConfig, StagingTableManager
from ..exceptions import InvalidFileTypeError, UploadFailure
from ..models import (
    ALLOWED_EXTENSIONS,
    LoadOptions,
    LoadPath,
    LoadResult,
    QueryResult,
    Schema,
    column_names,
)
from .record_transcoder import RecordTranscoder

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


def file_extension(file_path: str) -> str:
    return Path(file_path).suffix


def validate_file_type(file_path: str) -> str:
    """
    Return the file's extension if it is a supported delimited format.

    Raises:
        InvalidFileTypeError: If the extension is not .csv or .tsv
    """
    extension = file_extension(file_path)
    if extension not in ALLOWED_EXTENSIONS:
        raise InvalidFileTypeError(file_path)
    return extension


class TransferController:
    """
    Moves delimited files from local disk to Cloud Storage and into BigQuery.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        warehouse: Warehouse,
        location: Optional[str] = None,
    ):
        """
        Initialize transfer controller.

        Args:
            object_store: Cloud Storage client
            warehouse: BigQuery client
            location: Query job location; resolved from the dataset when None
        """
        self.object_store = object_store
        self.warehouse = warehouse
        self.location = location
        self.transcoder = RecordTranscoder(object_store)
        self.staging_tables = StagingTableManager(warehouse)
        self.merges = MergeManager(warehouse)

    def upload_raw(self, file_path: str, bucket_name: str) -> str:
        """
        Upload a local file to a bucket.

        Args:
            file_path: Local .csv or .tsv file
            bucket_name: Destination bucket, created if it does not exist

        Returns:
            Name of the uploaded object

        Raises:
            InvalidFileTypeError: If the file is not .csv or .tsv
            UploadFailure: If the upload is rejected
        """
        validate_file_type(file_path)
        self._ensure_bucket(bucket_name)

        try:
            object_name = self.object_store.upload(
                bucket_name,
                file_path,
                gzip=True,
                cache_control=CACHE_CONTROL,
            )
        except Exception as e:
            logger.error(f"Failed to upload {file_path} to {bucket_name}. {e}")
            raise UploadFailure(file_path, bucket_name, e) from e

        logger.info(f"{file_path} uploaded to {bucket_name}.")
        return object_name

    def _ensure_bucket(self, bucket_name: str) -> None:
        # A failed check must not block the upload attempt
        try:
            if not self.object_store.bucket_exists(bucket_name):
                self.object_store.create_bucket(bucket_name)
        except Exception as e:
            logger.warning(f"Could not verify bucket {bucket_name}, attempting upload anyway: {e}")

    def load(
        self,
        dataset_id: str,
        table_id: str,
        bucket_name: str,
        file_path: str,
    ) -> LoadResult:
        """
        Upload a file and load it into a BigQuery table.

        Args:
            dataset_id: BigQuery dataset
            table_id: Destination table
            bucket_name: Cloud Storage bucket used for the upload
            file_path: Local .csv or .tsv file

        Returns:
            LoadResult describing the path taken and the jobs run
        """
        extension = validate_file_type(file_path)
        object_name = self.upload_raw(file_path, bucket_name)
        options = LoadOptions.for_extension(extension)

        if not self.warehouse.table_exists(dataset_id, table_id):
            self.warehouse.create_table(dataset_id, table_id)
            logger.info(f"Table {table_id} created.")
            return self._load_direct(dataset_id, table_id, bucket_name, object_name, options, LoadPath.NEW_TABLE)

        schema = self.warehouse.get_table_schema(dataset_id, table_id)
        if not schema:
            return self._load_direct(dataset_id, table_id, bucket_name, object_name, options, LoadPath.DIRECT_LOAD)

        return self._load_with_merge(dataset_id, table_id, bucket_name, object_name, options, schema)

    def _load_direct(
        self,
        dataset_id: str,
        table_id: str,
        bucket_name: str,
        object_name: str,
        options: LoadOptions,
        path: LoadPath,
    ) -> LoadResult:
        job = self.warehouse.load_file(
            dataset_id,
            table_id,
            ObjectStore.uri(bucket_name, object_name),
            options,
        )
        logger.info(f"Job {job.job_id} completed.")
        return LoadResult(
            dataset_id=dataset_id,
            table_id=table_id,
            path=path,
            load_job_id=job.job_id,
        )

    def _load_with_merge(
        self,
        dataset_id: str,
        table_id: str,
        bucket_name: str,
        object_name: str,
        options: LoadOptions,
        schema: Schema,
    ) -> LoadResult:
        transcoded = self.transcoder.transcode(
            bucket_name,
            object_name,
            schema,
            options.field_delimiter,
        )

        if transcoded.row_count == 0:
            logger.info(f"{object_name} has no rows, nothing to merge into {table_id}.")
            return LoadResult(
                dataset_id=dataset_id,
                table_id=table_id,
                path=LoadPath.MERGE_PATH,
                transcoded_object=transcoded.object_name,
                transcode_report=transcoded.report,
            )

        staging = StagingTableConfig(dataset_id=dataset_id, table_id=table_id)
        with self.staging_tables.staging_table(staging) as staging_table_id:
            job = self.staging_tables.load_staging_table(
                staging,
                bucket_name,
                transcoded.object_name,
                options.field_delimiter,
            )
            merge = self.merges.merge(
                dataset_id,
                table_id,
                staging_table_id,
                column_names(schema),
                location=self._query_location(dataset_id),
            )

        return LoadResult(
            dataset_id=dataset_id,
            table_id=table_id,
            path=LoadPath.MERGE_PATH,
            load_job_id=job.job_id,
            merge_job_id=merge.job_id,
            staging_table_id=staging_table_id,
            transcoded_object=transcoded.object_name,
            transcode_report=transcoded.report,
        )

    def _query_location(self, dataset_id: str) -> Optional[str]:
        if self.location:
            return self.location
        return self.warehouse.get_location(dataset_id)

    def run_query(self, sql: str) -> QueryResult:
        """
        Run a SQL query.

        Failures are returned inside the QueryResult instead of being raised;
        check ``result.ok``.
        """
        try:
            rows = self.warehouse.query(sql)
        except Exception as e:
            logger.error(f"Query failed: {e}")
            return QueryResult.failure(e)
        return QueryResult.success(rows)
