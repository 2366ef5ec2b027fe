"""
Unit tests for environment-driven batch settings.
"""

import pytest

from accountability.lib import config
from accountability.lib.scoring.exceptions import WeightConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for var in [
        'S3_BUCKET_NAME',
        'ACCOUNTABILITY_INPUT_PREFIX',
        'ACCOUNTABILITY_OUTPUT_PREFIX',
        'GRADING_MAX_WORKERS',
        *config.WEIGHT_ENV_VARS.values(),
    ]:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    assert config.get_bucket_name() == config.DEFAULT_BUCKET
    assert config.get_input_prefix() == config.DEFAULT_INPUT_PREFIX
    assert config.get_output_prefix() == config.DEFAULT_OUTPUT_PREFIX
    assert config.get_max_workers() is None
    assert config.get_grade_weights() == {}


def test_overrides(clean_env):
    clean_env.setenv('S3_BUCKET_NAME', 'my-bucket')
    clean_env.setenv('ACCOUNTABILITY_INPUT_PREFIX', 'snapshots/')
    clean_env.setenv('ACCOUNTABILITY_OUTPUT_PREFIX', 'gold/out/')

    assert config.get_bucket_name() == 'my-bucket'
    assert config.get_input_prefix() == 'snapshots'
    assert config.get_output_prefix() == 'gold/out'


@pytest.mark.parametrize('value,expected', [
    ('4', 4),
    ('0', None),
    ('-2', None),
    ('lots', None),
    ('', None),
])
def test_max_workers(clean_env, value, expected):
    clean_env.setenv('GRADING_MAX_WORKERS', value)
    assert config.get_max_workers() == expected


class TestGradeWeights:

    def test_only_set_variables_are_returned(self, clean_env):
        clean_env.setenv('GRADE_VOTING_WEIGHT', '0.4')
        clean_env.setenv('GRADE_DONOR_WEIGHT', '0.1')
        clean_env.setenv('GRADE_STOCK_WEIGHT', ' ')

        assert config.get_grade_weights() == {'voting_weight': 0.4, 'donor_weight': 0.1}

    def test_non_numeric_weight(self, clean_env):
        clean_env.setenv('GRADE_DISCLOSURE_WEIGHT', 'quarter')

        with pytest.raises(WeightConfigurationError, match='GRADE_DISCLOSURE_WEIGHT'):
            config.get_grade_weights()

    @pytest.mark.parametrize('raw', ['nan', 'inf', '-Infinity'])
    def test_non_finite_weight(self, clean_env, raw):
        clean_env.setenv('GRADE_VOTING_WEIGHT', raw)

        with pytest.raises(WeightConfigurationError, match='GRADE_VOTING_WEIGHT'):
            config.get_grade_weights()
