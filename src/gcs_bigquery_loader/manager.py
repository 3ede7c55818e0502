"""
Public entry point for moving delimited files into BigQuery.
"""

import logging
from typing import Optional

from .clients import BigQueryWarehouse, GCSObjectStore, ObjectStore, Warehouse
from .models import LoadResult, QueryResult
from .services import TransferController

logger = logging.getLogger(__name__)


class GoogleCloudManager:
    """
    Manager for Google Cloud Storage uploads and BigQuery loads.

    Both Google clients are built from the same service account key file.
    Pre-built ObjectStore / Warehouse implementations may be passed instead,
    which is how tests substitute fakes.
    """

    def __init__(
        self,
        key_filename: Optional[str] = None,
        project: Optional[str] = None,
        location: Optional[str] = None,
        object_store: Optional[ObjectStore] = None,
        warehouse: Optional[Warehouse] = None,
    ):
        """
        Initialize the manager.

        Args:
            key_filename: Path to the service account key file; Application
                Default Credentials are used when omitted
            project: GCP project override
            location: BigQuery location for merge queries
            object_store: Object store to use instead of Cloud Storage
            warehouse: Warehouse to use instead of BigQuery
        """
        self.key_filename = key_filename
        self.object_store = object_store or GCSObjectStore(key_filename=key_filename, project=project)
        self.warehouse = warehouse or BigQueryWarehouse(key_filename=key_filename, project=project)
        self.controller = TransferController(self.object_store, self.warehouse, location=location)

    def upload_to_gcs(self, file_path: str, bucket_name: str) -> str:
        """
        Upload a .csv or .tsv file to a Cloud Storage bucket.

        Returns:
            Name of the uploaded object

        Raises:
            InvalidFileTypeError: If the file is not .csv or .tsv
            UploadFailure: If the upload is rejected
        """
        return self.controller.upload_raw(file_path, bucket_name)

    def load_to_bigquery(
        self,
        dataset_id: str,
        table_id: str,
        bucket_name: str,
        file_path: str,
    ) -> LoadResult:
        """
        Upload a file to Cloud Storage, then load it into a BigQuery table.

        Existing tables with a schema receive the rows through a staging
        table merge; other tables are loaded directly.
        """
        return self.controller.load(dataset_id, table_id, bucket_name, file_path)

    def run_query(self, sql: str) -> QueryResult:
        """Run a SQL query; errors are returned in the result, not raised."""
        return self.controller.run_query(sql)
