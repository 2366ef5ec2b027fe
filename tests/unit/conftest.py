"""
Shared pytest fixtures for accountability scoring tests.
"""

import json
import os
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

from accountability.lib import s3_utils
from accountability.lib.scoring.models import KeyVote, StockTrade


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'
    os.environ['S3_BUCKET_NAME'] = 'test-bucket'


@pytest.fixture
def s3_client(aws_credentials, monkeypatch):
    """Create mock S3 client."""
    with mock_aws():
        # Force s3_utils to build its cached client inside the mock
        monkeypatch.setattr(s3_utils, 's3_client', None)
        s3 = boto3.client('s3', region_name='us-east-1')
        s3.create_bucket(Bucket='test-bucket')
        yield s3


@pytest.fixture
def mock_lambda_context():
    """Mock Lambda context object."""
    context = MagicMock()
    context.get_remaining_time_in_millis.return_value = 300000  # 5 minutes
    context.function_name = 'test-function'
    context.function_version = '$LATEST'
    context.invoked_function_arn = 'arn:aws:lambda:us-east-1:123456789012:function:test'
    context.memory_limit_in_mb = 512
    context.aws_request_id = 'test-request-id'
    return context


@pytest.fixture
def make_trade():
    """Factory for StockTrade models with sensible defaults."""

    def _make(ticker='AAPL', traded='2024-01-10', filed_after_days=10, transaction='Purchase',
              size=1000, excess_return=0.0):
        traded_date = datetime.strptime(traded, '%Y-%m-%d')
        filed_date = traded_date + timedelta(days=filed_after_days) if filed_after_days is not None else None
        return StockTrade(
            ticker=ticker,
            traded_date=traded_date,
            filed_date=filed_date,
            transaction=transaction,
            trade_size_usd=size,
            excess_return=excess_return,
        )

    return _make


@pytest.fixture
def healthcare_votes():
    """Two Healthcare key votes and one Immigration key vote for official A000001."""
    return [
        KeyVote(
            id='hc-1',
            category='Healthcare',
            public_benefit='positive',
            votes={'A000001': 'Yea', 'B000002': 'Nay'},
        ),
        KeyVote(
            id='hc-2',
            category='Healthcare',
            public_benefit='negative',
            votes={'A000001': 'Nay', 'B000002': 'Not Voting'},
        ),
        KeyVote(
            id='imm-1',
            category='Immigration',
            public_benefit='positive',
            votes={'A000001': 'Nay'},
        ),
    ]


def upload_json_to_s3(s3_client, bucket: str, key: str, data):
    """Helper to upload JSON data to S3."""
    s3_client.put_object(
        Bucket=bucket,
        Key=key,
        Body=json.dumps(data).encode('utf-8')
    )
