#!/usr/bin/env python3
"""
Cloud Run Job that loads one delimited file into BigQuery
"""

import logging
import sys
from typing import Optional

from ..config import ProcessorConfig
from ..exceptions import TransferError
from ..manager import GoogleCloudManager

logger = logging.getLogger(__name__)


class TransferProcessor:
    """Runs a single upload-and-load from environment configuration"""

    def __init__(self, config: ProcessorConfig, manager: Optional[GoogleCloudManager] = None):
        self.config = config
        self.manager = manager or GoogleCloudManager(
            key_filename=config.key_filename,
            project=config.project_id,
            location=config.location,
        )

    def run(self):
        """Main entry point for the Cloud Run Job"""
        try:
            logger.info(
                f"Loading {self.config.source_file} into "
                f"{self.config.dataset_id}.{self.config.table_id} via gs://{self.config.bucket_name}"
            )

            result = self.manager.load_to_bigquery(
                self.config.dataset_id,
                self.config.table_id,
                self.config.bucket_name,
                self.config.source_file,
            )

            logger.info(f"Load finished: path={result.path.value}, load_job={result.load_job_id}, "
                        f"merge_job={result.merge_job_id}")
            if result.transcode_report is not None:
                logger.info(f"Transcoded rows: {result.transcode_report.rows_processed}")
            return 0

        except TransferError as e:
            logger.error(f"Transfer failed: {e}")
            return 1
        except Exception as e:
            logger.error(f"Fatal error in transfer processor: {str(e)}")
            return 1


def main():
    """Main entry point for the Cloud Run Job"""
    config = ProcessorConfig.from_env()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))

    if not config.valid:
        logger.error(f"Missing required environment variables: {config.missing}")
        sys.exit(1)

    sys.exit(TransferProcessor(config).run())


if __name__ == "__main__":
    main()
