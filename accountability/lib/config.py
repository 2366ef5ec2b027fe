"""Environment-driven settings for the batch grading jobs.

Values come from the process environment, with a local .env file loaded
first (python-dotenv). The scoring engine itself never reads these; the
Lambda handler and the CLI resolve them and pass them in explicitly.

Environment:
    GRADE_VOTING_WEIGHT, GRADE_DONOR_WEIGHT, GRADE_STOCK_WEIGHT,
    GRADE_DISCLOSURE_WEIGHT   Multi-factor weights (default 0.25 each)
    S3_BUCKET_NAME            Data lake bucket
    ACCOUNTABILITY_INPUT_PREFIX / ACCOUNTABILITY_OUTPUT_PREFIX
    GRADING_MAX_WORKERS       Thread pool size for grade_members
"""

import logging
import math
import os
from typing import Dict, Optional

from dotenv import load_dotenv

from accountability.lib.scoring.exceptions import WeightConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BUCKET = 'congress-disclosures-standardized'
DEFAULT_INPUT_PREFIX = 'gold/accountability/inputs'
DEFAULT_OUTPUT_PREFIX = 'gold/house/accountability/aggregates'

WEIGHT_ENV_VARS = {
    'voting_weight': 'GRADE_VOTING_WEIGHT',
    'donor_weight': 'GRADE_DONOR_WEIGHT',
    'stock_weight': 'GRADE_STOCK_WEIGHT',
    'disclosure_weight': 'GRADE_DISCLOSURE_WEIGHT',
}


def get_bucket_name() -> str:
    return os.environ.get('S3_BUCKET_NAME', DEFAULT_BUCKET)


def get_input_prefix() -> str:
    return os.environ.get('ACCOUNTABILITY_INPUT_PREFIX', DEFAULT_INPUT_PREFIX).rstrip('/')


def get_output_prefix() -> str:
    return os.environ.get('ACCOUNTABILITY_OUTPUT_PREFIX', DEFAULT_OUTPUT_PREFIX).rstrip('/')


def get_max_workers() -> Optional[int]:
    """Thread pool size, or None to let the executor decide."""
    value = os.environ.get('GRADING_MAX_WORKERS')
    if not value:
        return None
    try:
        workers = int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer GRADING_MAX_WORKERS={value!r}")
        return None
    return workers if workers > 0 else None


def get_grade_weights() -> Dict[str, float]:
    """
    Grade weights set in the environment.

    Only variables that are set are returned, so the result is a partial
    override merged over the defaults by the grader (which also checks the
    sum).

    Raises:
        WeightConfigurationError: If a weight variable is not a number
    """
    weights: Dict[str, float] = {}
    for field, env_var in WEIGHT_ENV_VARS.items():
        raw = os.environ.get(env_var)
        if raw is None or raw.strip() == '':
            continue
        try:
            value = float(raw)
        except ValueError as e:
            raise WeightConfigurationError(f"{env_var} must be a number, got {raw!r}") from e
        if not math.isfinite(value):
            raise WeightConfigurationError(f"{env_var} must be a finite number, got {raw!r}")
        weights[field] = value

    if weights:
        logger.info(f"Grade weight overrides from environment: {weights}")
    return weights
