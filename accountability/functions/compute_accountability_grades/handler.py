#!/usr/bin/env python3
"""
Lambda handler for computing member accountability grades.

Reads the upstream JSON snapshots from S3, grades every member and writes
agg_member_accountability/latest.parquet plus a trading-summary JSON
document under the output prefix.
"""

import json
import logging
import time
from typing import Dict, Any

from accountability.lib import config
from accountability.lib.batch import (
    AGGREGATE_KEY,
    TRADING_SUMMARY_KEY,
    load_snapshots,
    run_grading,
    scorecards_to_dataframe,
    trading_summary_document,
)
from accountability.lib.s3_utils import read_json_from_s3, write_json_to_s3, write_parquet_to_s3

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for computing accountability grades.

    Args:
        event: Event data with optional 'bucket_name', 'as_of_year',
            'input_prefix', 'output_prefix'
        context: Lambda context

    Returns:
        Dict with status, members_graded, files_written
    """
    started = time.monotonic()
    try:
        logger.info("=" * 80)
        logger.info("Lambda: compute_accountability_grades")
        logger.info("=" * 80)
        logger.info(f"Event: {json.dumps(event)}")

        bucket_name = event.get('bucket_name') or config.get_bucket_name()
        input_prefix = event.get('input_prefix') or config.get_input_prefix()
        output_prefix = event.get('output_prefix') or config.get_output_prefix()
        as_of_year = event.get('as_of_year')

        # Step 1: Load snapshots
        snapshots = load_snapshots(
            lambda filename: read_json_from_s3(bucket_name, f"{input_prefix}/{filename}")
        )

        # Step 2: Grade members
        scorecards = run_grading(
            snapshots,
            weights=config.get_grade_weights(),
            as_of_year=as_of_year,
            max_workers=config.get_max_workers(),
        )

        # Step 3: Write to gold layer
        df = scorecards_to_dataframe(scorecards, snapshots.get('members'))
        files_written = []
        if df.empty:
            logger.warning("Empty dataframe - no aggregate written")
        else:
            parquet = write_parquet_to_s3(df, bucket_name, f"{output_prefix}/{AGGREGATE_KEY}")
            files_written.append(parquet['s3_key'])

        summary = write_json_to_s3(
            trading_summary_document(scorecards), bucket_name, f"{output_prefix}/{TRADING_SUMMARY_KEY}"
        )
        files_written.append(summary['s3_key'])

        logger.info("✅ accountability grades computation complete!")

        return {
            'statusCode': 200,
            'status': 'success',
            'aggregate': 'member_accountability',
            'members_graded': len(scorecards),
            'files_written': files_written,
            'execution_time_ms': int((time.monotonic() - started) * 1000),
        }

    except Exception as e:
        logger.error(f"❌ Error computing accountability grades: {str(e)}", exc_info=True)
        return {
            'statusCode': 500,
            'status': 'error',
            'aggregate': 'member_accountability',
            'error': str(e),
            'error_type': type(e).__name__
        }
