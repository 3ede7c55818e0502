"""
Exceptions raised by the Cloud Storage to BigQuery loader.
"""

from typing import Optional


class TransferError(Exception):
    """Base class for loader errors."""


class InvalidFileTypeError(TransferError):
    """Raised when a file is not a .csv or .tsv file."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__('Invalid file type. Only .csv and .tsv files are allowed.')


class TransportFailure(TransferError):
    """An object store or warehouse call was rejected."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class UploadFailure(TransportFailure):
    """Uploading a file to Cloud Storage failed."""

    def __init__(self, file_path: str, bucket_name: str, cause: Optional[BaseException] = None):
        self.file_path = file_path
        self.bucket_name = bucket_name
        super().__init__(f"Failed to upload {file_path} to {bucket_name}.", cause)
