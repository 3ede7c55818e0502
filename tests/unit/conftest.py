from gzip import decompress
from pathlib import Path

import pytest

from gcs_bigquery_loader.clients import ObjectStore, Warehouse
from gcs_bigquery_loader.models import JobResult, SchemaColumn


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


class FakeObjectStore(ObjectStore):
    """In-memory object store recording every call."""

    def __init__(self, buckets=None):
        self.buckets = set(buckets or [])
        self.objects = {}
        self.calls = []
        self.upload_error = None
        self.exists_error = None

    def bucket_exists(self, bucket_name):
        self.calls.append(("bucket_exists", bucket_name))
        if self.exists_error:
            raise self.exists_error
        return bucket_name in self.buckets

    def create_bucket(self, bucket_name):
        self.calls.append(("create_bucket", bucket_name))
        self.buckets.add(bucket_name)
        return bucket_name

    def upload(self, bucket_name, file_path, gzip=True, cache_control=None):
        self.calls.append(("upload", bucket_name, file_path, gzip, cache_control))
        if self.upload_error:
            raise self.upload_error
        object_name = Path(file_path).name
        self.objects[(bucket_name, object_name)] = Path(file_path).read_bytes()
        return object_name

    def download(self, bucket_name, file_name):
        self.calls.append(("download", bucket_name, file_name))
        data = self.objects[(bucket_name, file_name)]
        if data[:2] == b"\x1f\x8b":
            data = decompress(data)
        return data

    def save(self, bucket_name, file_name, text):
        self.calls.append(("save", bucket_name, file_name))
        self.objects[(bucket_name, file_name)] = text.encode("utf-8")

    def text(self, bucket_name, file_name):
        return self.objects[(bucket_name, file_name)].decode("utf-8")


class FakeWarehouse(Warehouse):
    """In-memory warehouse recording every call."""

    def __init__(self, tables=None, location="US"):
        # table id ("dataset.table") -> tuple of SchemaColumn
        self.tables = dict(tables or {})
        self.location = location
        self.calls = []
        self.queries = []
        self.query_error = None
        self.merge_error = None
        self.load_error = None
        self.query_rows = []
        self._job_counter = 0

    def _next_job(self, prefix):
        self._job_counter += 1
        return f"{prefix}-{self._job_counter}"

    def table_exists(self, dataset_id, table_id):
        self.calls.append(("table_exists", dataset_id, table_id))
        return f"{dataset_id}.{table_id}" in self.tables

    def create_table(self, dataset_id, table_id, exists_ok=False):
        self.calls.append(("create_table", dataset_id, table_id, exists_ok))
        key = f"{dataset_id}.{table_id}"
        if key in self.tables and not exists_ok:
            raise RuntimeError(f"Already exists: {key}")
        self.tables.setdefault(key, ())

    def get_table_schema(self, dataset_id, table_id):
        self.calls.append(("get_table_schema", dataset_id, table_id))
        return self.tables[f"{dataset_id}.{table_id}"]

    def get_location(self, dataset_id):
        self.calls.append(("get_location", dataset_id))
        return self.location

    def load_file(self, dataset_id, table_id, source_uri, options):
        self.calls.append(("load_file", dataset_id, table_id, source_uri, options))
        if self.load_error:
            raise self.load_error
        return JobResult(job_id=self._next_job("load"), value=0)

    def create_query_job(self, sql, location=None):
        self.calls.append(("create_query_job", sql, location))
        if self.merge_error:
            raise self.merge_error
        return JobResult(job_id=self._next_job("query"), value=0)

    def delete_table(self, dataset_id, table_id):
        self.calls.append(("delete_table", dataset_id, table_id))
        self.tables.pop(f"{dataset_id}.{table_id}", None)

    def query(self, sql):
        self.queries.append(sql)
        if self.query_error:
            raise self.query_error
        return self.query_rows

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def object_store():
    return FakeObjectStore(buckets=["ua-uploads"])


@pytest.fixture
def warehouse():
    return FakeWarehouse()


@pytest.fixture
def typed_schema():
    return (
        SchemaColumn(name="id", field_type="INTEGER"),
        SchemaColumn(name="active", field_type="BOOLEAN"),
        SchemaColumn(name="name", field_type="STRING"),
    )


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "file.csv"
    path.write_text('"id","active","name"\n5,TRUE,x\n,false,y\n7,,z')
    return path


@pytest.fixture
def tsv_file(tmp_path):
    path = tmp_path / "file.tsv"
    path.write_text("id\tactive\tname\n1\ttrue\ta, b")
    return path
