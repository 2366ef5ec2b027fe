"""
Unit tests for the legacy equal-weight grader.
"""

import pytest

from accountability.lib.scoring.exceptions import WeightConfigurationError
from accountability.lib.scoring.legacy_grading import (
    PLACEHOLDER_SCORE,
    calculate_disclosure_score,
    calculate_legacy_grade,
    calculate_trading_score,
    calculate_voting_score,
)
from accountability.lib.scoring.models import LetterGrade, MemberData


def test_donor_only_member_gets_placeholders():
    result = calculate_legacy_grade({'pac_percentage': 20, 'large_donor_percentage': 20})

    assert result.breakdown.donor_score == 80.0
    assert result.breakdown.voting_score == PLACEHOLDER_SCORE
    assert result.breakdown.trading_score == PLACEHOLDER_SCORE
    assert result.breakdown.disclosure_score == PLACEHOLDER_SCORE
    # (80 + 70 * 3) / 4
    assert result.overall == 72.5
    assert result.letter == LetterGrade.C

    assert result.explanation.donor == (
        'Moderate reliance on special interests: 20.0% PAC funding, 20.0% large donors.'
    )
    assert result.explanation.voting == 'Voting record data not yet available.'
    assert result.explanation.trading == 'Stock trading data not yet available.'
    assert result.explanation.disclosure == 'Financial disclosure data not yet available.'


def test_full_record():
    result = calculate_legacy_grade({
        'pac_percentage': 5,
        'large_donor_percentage': 5,
        'voting_record': {
            'key_votes_participated': 8,
            'key_votes_total': 10,
            'votes_with_party': 6,
            'votes_against_public_interest': 2,
        },
        'trading_summary': {'total_trades': 0},
        'disclosure_compliance': {'filings_count': 4, 'expected_filings': 4},
    })

    assert result.breakdown.donor_score == 95.0
    # 80 * 0.4 + 75 * 0.1 + 75 * 0.5
    assert result.breakdown.voting_score == 77.0
    assert result.breakdown.trading_score == 100.0
    assert result.breakdown.disclosure_score == 100.0
    assert result.overall == 93.0
    assert result.letter == LetterGrade.A

    assert result.explanation.donor.startswith('Excellent funding transparency')
    assert result.explanation.voting == (
        'Moderate voting accountability: 80.0% participation with 2 votes against public interest.'
    )
    assert result.explanation.trading == 'No stock trades reported - excellent ethics compliance.'
    assert result.explanation.disclosure == 'Excellent disclosure compliance: 4/4 filings completed on time.'


class TestComponents:

    def test_voting_without_key_votes(self):
        data = MemberData.model_validate({'voting_record': {}})
        assert calculate_voting_score(data) == 100.0

    def test_trading_score(self):
        data = MemberData.model_validate({'trading_summary': {
            'total_trades': 4,
            'flagged_trades': 2,
            'flag_rate': 50.0,
            'avg_risk_per_trade': 2.5,
            'overall_suspicion_level': 'medium',
        }})

        # 50 * 0.5 + 50 * 0.3 + 50 * 0.2
        assert calculate_trading_score(data) == pytest.approx(50.0)

        result = calculate_legacy_grade(data)
        assert result.explanation.trading == (
            'Moderate trading concerns: 2/4 trades flagged (50.0%) with medium suspicious activity level.'
        )

    def test_trading_none_level_scores_full(self):
        data = MemberData.model_validate({'trading_summary': {
            'total_trades': 2,
            'overall_suspicion_level': 'none',
        }})
        assert calculate_trading_score(data) == pytest.approx(100.0)

    def test_disclosure_with_gaps(self):
        data = MemberData.model_validate({'disclosure_compliance': {
            'filings_count': 3,
            'expected_filings': 4,
            'late_filings': 1,
            'missing_filings': 1,
        }})

        # 75 * 0.4 + 66.67 * 0.4 - 50 * 0.2
        assert calculate_disclosure_score(data) == pytest.approx(46.667, abs=0.001)

        result = calculate_legacy_grade(data)
        assert result.breakdown.disclosure_score == 46.7
        assert result.explanation.disclosure == (
            'Poor disclosure compliance: 1 missing filings, 1 late out of 4 expected.'
        )


class TestLegacyWeights:

    def test_tight_tolerance(self):
        calculate_legacy_grade({}, weights={'donor': 0.25005})

        with pytest.raises(WeightConfigurationError):
            calculate_legacy_grade({}, weights={'donor': 0.2502})

    def test_nan_weight_raises(self):
        with pytest.raises(WeightConfigurationError):
            calculate_legacy_grade({}, weights={'donor': float('nan')})

    def test_custom_weights(self):
        result = calculate_legacy_grade(
            {'pac_percentage': 0, 'large_donor_percentage': 0},
            weights={'donor': 1.0, 'voting': 0.0, 'trading': 0.0, 'disclosure': 0.0},
        )
        assert result.overall == 100.0
