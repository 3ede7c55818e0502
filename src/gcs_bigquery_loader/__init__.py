"""
Load CSV/TSV files from local disk into BigQuery through Cloud Storage.
"""

from .exceptions import InvalidFileTypeError, TransferError, TransportFailure, UploadFailure
from .manager import GoogleCloudManager
from .models import LoadPath, LoadResult, QueryResult

__version__ = "0.1.0"

__all__ = [
    'GoogleCloudManager',
    'LoadPath',
    'LoadResult',
    'QueryResult',
    'TransferError',
    'InvalidFileTypeError',
    'TransportFailure',
    'UploadFailure',
]
