from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import JobResult, LoadOptions, Schema


class ObjectStore(ABC):
    """Object storage operations used by the loader."""

    @abstractmethod
    def bucket_exists(self, bucket_name: str) -> bool:
        ...

    @abstractmethod
    def create_bucket(self, bucket_name: str) -> Any:
        ...

    @abstractmethod
    def upload(
        self,
        bucket_name: str,
        file_path: str,
        gzip: bool = True,
        cache_control: Optional[str] = None,
    ) -> str:
        """
        Upload a local file.

        Args:
            bucket_name: Destination bucket
            file_path: Local file; the object is named after its base name
            gzip: Compress the payload and store it with gzip content encoding
            cache_control: Cache-Control metadata for the object

        Returns:
            Name of the created object
        """
        ...

    @abstractmethod
    def download(self, bucket_name: str, file_name: str) -> bytes:
        """Return the (decompressed) bytes of an object."""
        ...

    @abstractmethod
    def save(self, bucket_name: str, file_name: str, text: str) -> None:
        ...

    @staticmethod
    def uri(bucket_name: str, file_name: str) -> str:
        return f"gs://{bucket_name}/{file_name}"


class Warehouse(ABC):
    """Data warehouse operations used by the loader."""

    @abstractmethod
    def table_exists(self, dataset_id: str, table_id: str) -> bool:
        ...

    @abstractmethod
    def create_table(self, dataset_id: str, table_id: str, exists_ok: bool = False) -> None:
        ...

    @abstractmethod
    def get_table_schema(self, dataset_id: str, table_id: str) -> Schema:
        """Return the table schema; empty when the table has none."""
        ...

    @abstractmethod
    def get_location(self, dataset_id: str) -> Optional[str]:
        ...

    @abstractmethod
    def load_file(
        self,
        dataset_id: str,
        table_id: str,
        source_uri: str,
        options: LoadOptions,
    ) -> JobResult:
        """Run a load job from a Cloud Storage URI and wait for it."""
        ...

    @abstractmethod
    def create_query_job(self, sql: str, location: Optional[str] = None) -> JobResult:
        """Run a query job and wait for it."""
        ...

    @abstractmethod
    def delete_table(self, dataset_id: str, table_id: str) -> None:
        ...

    @abstractmethod
    def query(self, sql: str) -> List[Dict[str, Any]]:
        ...
