"""
Tests for the S3 helpers used by the batch jobs.
"""

import json
from io import BytesIO

import pandas as pd
import pytest
from botocore.exceptions import ClientError

from accountability.lib.s3_utils import (
    build_s3_uri,
    read_json_from_s3,
    write_json_to_s3,
    write_parquet_to_s3,
)
from conftest import upload_json_to_s3


def test_build_s3_uri():
    assert build_s3_uri('bucket', 'a/b.json') == 's3://bucket/a/b.json'


def test_read_json(s3_client):
    upload_json_to_s3(s3_client, 'test-bucket', 'inputs/members.json', [{'bioguide_id': 'A000001'}])

    assert read_json_from_s3('test-bucket', 'inputs/members.json') == [{'bioguide_id': 'A000001'}]


def test_missing_key_returns_default(s3_client):
    assert read_json_from_s3('test-bucket', 'inputs/nope.json') is None
    assert read_json_from_s3('test-bucket', 'inputs/nope.json', default=[]) == []


def test_other_errors_propagate(s3_client):
    with pytest.raises(ClientError):
        read_json_from_s3('no-such-bucket', 'inputs/members.json')


def test_write_json(s3_client):
    result = write_json_to_s3({'members': {}}, 'test-bucket', 'out/summary.json')

    assert result['s3_key'] == 'out/summary.json'
    assert result['size_bytes'] > 0

    body = s3_client.get_object(Bucket='test-bucket', Key='out/summary.json')['Body'].read()
    assert json.loads(body) == {'members': {}}


def test_write_parquet(s3_client):
    df = pd.DataFrame([{'bioguide_id': 'A000001', 'overall_score': 91.5}])

    result = write_parquet_to_s3(df, 'test-bucket', 'out/latest.parquet')

    assert result['record_count'] == 1
    body = s3_client.get_object(Bucket='test-bucket', Key='out/latest.parquet')['Body'].read()
    assert pd.read_parquet(BytesIO(body)).to_dict('records') == [{'bioguide_id': 'A000001', 'overall_score': 91.5}]
