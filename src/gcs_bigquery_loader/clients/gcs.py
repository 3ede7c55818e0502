"""
Google Cloud Storage implementation of the object store.
"""

import logging
from gzip import compress, decompress
from pathlib import Path
from typing import Optional

from google.cloud import storage

from .base import ObjectStore

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"

CONTENT_TYPES = {
    ".csv": "text/csv",
    ".tsv": "text/tab-separated-values",
}


def _content_type(file_name: str) -> str:
    return CONTENT_TYPES.get(Path(file_name).suffix.lower(), "text/plain")


class GCSObjectStore(ObjectStore):
    """Object store backed by a google.cloud.storage.Client."""

    def __init__(
        self,
        client: Optional[storage.Client] = None,
        key_filename: Optional[str] = None,
        project: Optional[str] = None,
    ):
        if client is None:
            if key_filename:
                client = storage.Client.from_service_account_json(key_filename, project=project)
            else:
                client = storage.Client(project=project)
        self.client = client

    def bucket_exists(self, bucket_name: str) -> bool:
        return self.client.bucket(bucket_name).exists()

    def create_bucket(self, bucket_name: str) -> storage.Bucket:
        bucket = self.client.create_bucket(bucket_name)
        logger.info(f"Bucket {bucket_name} created.")
        return bucket

    def upload(
        self,
        bucket_name: str,
        file_path: str,
        gzip: bool = True,
        cache_control: Optional[str] = None,
    ) -> str:
        object_name = Path(file_path).name
        blob = self.client.bucket(bucket_name).blob(object_name)

        if cache_control:
            blob.cache_control = cache_control

        data = Path(file_path).read_bytes()
        if gzip:
            blob.content_encoding = "gzip"
            data = compress(data)

        blob.upload_from_string(data, content_type=_content_type(object_name))
        logger.debug(f"Uploaded {len(data)} bytes to gs://{bucket_name}/{object_name}")
        return object_name

    def download(self, bucket_name: str, file_name: str) -> bytes:
        data = self.client.bucket(bucket_name).blob(file_name).download_as_bytes()
        # Objects uploaded with gzip encoding may come back still compressed
        if data[:2] == GZIP_MAGIC:
            data = decompress(data)
        return data

    def save(self, bucket_name: str, file_name: str, text: str) -> None:
        blob = self.client.bucket(bucket_name).blob(file_name)
        blob.upload_from_string(text, content_type=_content_type(file_name))
        logger.debug(f"Saved {len(text)} characters to gs://{bucket_name}/{file_name}")
