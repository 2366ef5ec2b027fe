"""S3 utility functions for the accountability batch jobs."""

import json
import logging
from io import BytesIO
from typing import Any, Dict

import boto3
import pandas as pd
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Configure boto3 with retries and timeouts optimized for Lambda
BOTO_CONFIG = Config(
    retries={"max_attempts": 3, "mode": "adaptive"},
    read_timeout=300,
    connect_timeout=10,
)

# Initialize S3 client (reused across invocations in Lambda)
s3_client = None


def get_s3_client():
    """Get or create S3 client with optimal configuration.

    Returns:
        boto3 S3 client
    """
    global s3_client
    if s3_client is None:
        s3_client = boto3.client("s3", config=BOTO_CONFIG)
    return s3_client


def read_json_from_s3(bucket: str, s3_key: str, default: Any = None) -> Any:
    """Read and parse a JSON snapshot.

    Args:
        bucket: S3 bucket name
        s3_key: S3 object key
        default: Returned when the object does not exist

    Returns:
        Parsed JSON, or `default` for a missing key

    Raises:
        ClientError: For any S3 error other than a missing key
    """
    s3 = get_s3_client()
    try:
        response = s3.get_object(Bucket=bucket, Key=s3_key)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
            logger.warning(f"Snapshot not found: {build_s3_uri(bucket, s3_key)}")
            return default
        logger.error(f"Failed to read {build_s3_uri(bucket, s3_key)}: {e}")
        raise

    data = json.loads(response["Body"].read())
    logger.info(f"Loaded {build_s3_uri(bucket, s3_key)}")
    return data


def write_json_to_s3(data: Any, bucket: str, s3_key: str) -> Dict[str, Any]:
    """Write a JSON document.

    Returns:
        Dict with upload details (s3_key, bucket, size_bytes)
    """
    body = json.dumps(data, indent=2, default=str).encode("utf-8")
    s3 = get_s3_client()
    try:
        s3.put_object(Bucket=bucket, Key=s3_key, Body=body, ContentType="application/json")
    except ClientError as e:
        logger.error(f"Failed to upload JSON to {build_s3_uri(bucket, s3_key)}: {e}")
        raise

    logger.info(f"Uploaded {len(body)} bytes to {build_s3_uri(bucket, s3_key)}")
    return {"s3_key": s3_key, "bucket": bucket, "size_bytes": len(body)}


def write_parquet_to_s3(df: pd.DataFrame, bucket: str, s3_key: str) -> Dict[str, Any]:
    """Write a DataFrame as snappy-compressed Parquet.

    Returns:
        Dict with upload details (s3_key, bucket, size_bytes, record_count)
    """
    buffer = BytesIO()
    df.to_parquet(buffer, engine="pyarrow", compression="snappy", index=False)
    body = buffer.getvalue()

    s3 = get_s3_client()
    try:
        s3.put_object(Bucket=bucket, Key=s3_key, Body=body, ContentType="application/octet-stream")
    except ClientError as e:
        logger.error(f"Failed to upload Parquet to {build_s3_uri(bucket, s3_key)}: {e}")
        raise

    logger.info(f"Uploaded {len(df)} records to {build_s3_uri(bucket, s3_key)}")
    return {"s3_key": s3_key, "bucket": bucket, "size_bytes": len(body), "record_count": len(df)}


def build_s3_uri(bucket: str, key: str) -> str:
    """Build S3 URI from bucket and key.

    Args:
        bucket: S3 bucket name
        key: S3 object key

    Returns:
        S3 URI (s3://bucket/key)
    """
    return f"s3://{bucket}/{key}"
