"""
Environment configuration for the loader job.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

REQUIRED_ENV_VARS = ['STORAGE_BUCKET', 'BIGQUERY_DATASET', 'BIGQUERY_TABLE', 'SOURCE_FILE']


@dataclass
class ProcessorConfig:
    """Settings of a single load run."""
    bucket_name: Optional[str]
    dataset_id: Optional[str]
    table_id: Optional[str]
    source_file: Optional[str]
    key_filename: Optional[str] = None
    project_id: Optional[str] = None
    location: Optional[str] = None
    log_level: str = "INFO"
    missing: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        """Read configuration from environment variables."""
        return cls(
            bucket_name=os.getenv('STORAGE_BUCKET'),
            dataset_id=os.getenv('BIGQUERY_DATASET'),
            table_id=os.getenv('BIGQUERY_TABLE'),
            source_file=os.getenv('SOURCE_FILE'),
            key_filename=os.getenv('GOOGLE_APPLICATION_CREDENTIALS'),
            project_id=os.getenv('GCP_PROJECT'),
            location=os.getenv('BIGQUERY_LOCATION'),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            missing=[var for var in REQUIRED_ENV_VARS if not os.getenv(var)],
        )

    @property
    def valid(self) -> bool:
        return not self.missing
