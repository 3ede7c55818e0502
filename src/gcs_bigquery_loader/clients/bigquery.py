"""
BigQuery implementation of the warehouse.
"""

import logging
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import NotFound
from google.cloud import bigquery

from ..models import JobResult, LoadOptions, Schema, schema_from_fields
from .base import Warehouse

logger = logging.getLogger(__name__)


class BigQueryWarehouse(Warehouse):
    """Warehouse backed by a google.cloud.bigquery.Client."""

    def __init__(
        self,
        client: Optional[bigquery.Client] = None,
        key_filename: Optional[str] = None,
        project: Optional[str] = None,
    ):
        if client is None:
            if key_filename:
                client = bigquery.Client.from_service_account_json(key_filename, project=project)
            else:
                client = bigquery.Client(project=project)
        self.client = client

    @staticmethod
    def table_ref(dataset_id: str, table_id: str) -> str:
        return f"{dataset_id}.{table_id}"

    def table_exists(self, dataset_id: str, table_id: str) -> bool:
        try:
            self.client.get_table(self.table_ref(dataset_id, table_id))
            return True
        except NotFound:
            return False

    def create_table(self, dataset_id: str, table_id: str, exists_ok: bool = False) -> None:
        table = bigquery.Table(self._full_table_id(dataset_id, table_id))
        self.client.create_table(table, exists_ok=exists_ok)

    def get_table_schema(self, dataset_id: str, table_id: str) -> Schema:
        table = self.client.get_table(self.table_ref(dataset_id, table_id))
        return schema_from_fields(table.schema)

    def get_location(self, dataset_id: str) -> Optional[str]:
        return self.client.get_dataset(dataset_id).location

    def load_file(
        self,
        dataset_id: str,
        table_id: str,
        source_uri: str,
        options: LoadOptions,
    ) -> JobResult:
        job_config = bigquery.LoadJobConfig(
            source_format=options.source_format,
            skip_leading_rows=options.skip_leading_rows,
            autodetect=options.autodetect,
            field_delimiter=options.field_delimiter,
            write_disposition=options.write_disposition.value,
        )
        job = self.client.load_table_from_uri(
            source_uri,
            self.table_ref(dataset_id, table_id),
            job_config=job_config,
        )
        job.result()
        return JobResult(job_id=job.job_id, value=job.output_rows)

    def create_query_job(self, sql: str, location: Optional[str] = None) -> JobResult:
        job = self.client.query(sql, location=location)
        job.result()
        return JobResult(job_id=job.job_id, value=job.num_dml_affected_rows)

    def delete_table(self, dataset_id: str, table_id: str) -> None:
        self.client.delete_table(self.table_ref(dataset_id, table_id), not_found_ok=True)

    def query(self, sql: str) -> List[Dict[str, Any]]:
        rows = self.client.query(sql).result()
        return [dict(row.items()) for row in rows]

    def _full_table_id(self, dataset_id: str, table_id: str) -> str:
        # bigquery.Table requires a project-qualified id
        if dataset_id.count(".") == 1:
            return self.table_ref(dataset_id, table_id)
        return f"{self.client.project}.{dataset_id}.{table_id}"
