"""
Cloud client boundary for the loader.

The transfer controller only talks to the ObjectStore and Warehouse
interfaces; the Google implementations wrap google-cloud-storage and
google-cloud-bigquery.
"""

from .base import ObjectStore, Warehouse
from .gcs import GCSObjectStore
from .bigquery import BigQueryWarehouse

__all__ = [
    'ObjectStore',
    'Warehouse',
    'GCSObjectStore',
    'BigQueryWarehouse',
]
