"""
Unit tests for the multi-factor grade aggregator.
"""

import pytest

from accountability.lib.scoring.exceptions import WeightConfigurationError
from accountability.lib.scoring.grading import (
    calculate_disclosure_score,
    calculate_donor_score,
    calculate_multi_factor_grade,
    calculate_stock_score,
    calculate_voting_score,
    get_letter_grade,
    grade,
    resolve_weights,
)
from accountability.lib.scoring.models import (
    DisclosureFiling,
    FinanceData,
    GradeWeights,
    KeyVote,
    LetterGrade,
    SuspicionLevel,
    TradingSummary,
)

OFFICIAL = 'A000001'


class TestWeights:

    def test_defaults(self):
        weights = resolve_weights()
        assert weights == GradeWeights(voting_weight=0.25, donor_weight=0.25, stock_weight=0.25, disclosure_weight=0.25)

    def test_partial_weights_merge_over_defaults(self):
        weights = resolve_weights({'voting_weight': 0.4, 'donor_weight': 0.1})

        assert weights.voting_weight == 0.4
        assert weights.donor_weight == 0.1
        assert weights.stock_weight == 0.25
        assert weights.disclosure_weight == 0.25

    def test_camel_case_keys(self):
        weights = resolve_weights({'votingWeight': 0.4, 'donorWeight': 0.1})
        assert weights.voting_weight == 0.4

    def test_within_tolerance(self):
        resolve_weights({'voting_weight': 0.2505})

    @pytest.mark.parametrize('weights', [
        {'voting_weight': 0.252},
        {'voting_weight': 0.5},
        {'voting_weight': 0.0, 'donor_weight': 0.0},
    ])
    def test_bad_sum_raises(self, weights):
        with pytest.raises(WeightConfigurationError, match='sum to 1.0'):
            resolve_weights(weights)

    def test_non_numeric_weight_raises(self):
        with pytest.raises(WeightConfigurationError):
            resolve_weights({'voting_weight': 'heavy'})

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf')])
    def test_non_finite_weight_raises(self, value):
        with pytest.raises(WeightConfigurationError):
            resolve_weights({'voting_weight': value})

        with pytest.raises(WeightConfigurationError):
            calculate_multi_factor_grade(OFFICIAL, weights={'voting_weight': value})

    def test_inputs_are_keyword_only(self):
        with pytest.raises(TypeError):
            calculate_multi_factor_grade(OFFICIAL, {'key_votes': []})

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            calculate_multi_factor_grade(OFFICIAL, weights={'stock_weight': 0.9})


class TestFactorScores:

    def test_voting_score(self, healthcare_votes):
        # hc-1 aligned, hc-2 aligned, imm-1 not aligned
        assert calculate_voting_score(OFFICIAL, healthcare_votes) == pytest.approx(200 / 3)
        # Nay on a positive vote, Not Voting skipped
        assert calculate_voting_score('B000002', healthcare_votes) == 0.0

    def test_voting_defaults(self, healthcare_votes):
        assert calculate_voting_score(OFFICIAL, None) == 70.0
        assert calculate_voting_score(OFFICIAL, []) == 70.0
        assert calculate_voting_score('Z999999', healthcare_votes) == 70.0

        present_only = [KeyVote(id='p', public_benefit='positive', votes={OFFICIAL: 'Present'})]
        assert calculate_voting_score(OFFICIAL, present_only) == 70.0

    def test_explicit_polarity_overrides_benefit(self):
        votes = [KeyVote(id='v', public_benefit='negative', pro_public_benefit=True, votes={OFFICIAL: 'Yea'})]
        assert calculate_voting_score(OFFICIAL, votes) == 100.0

    @pytest.mark.parametrize('finance,expected', [
        (None, 70.0),
        (FinanceData(pac_percentage=0, large_donor_percentage=0), 100.0),
        (FinanceData(pac_percentage=30, large_donor_percentage=50), 60.0),
        (FinanceData(pac_percentage=40), 80.0),
        (FinanceData(pac_percentage=150, large_donor_percentage=100), 0.0),
    ])
    def test_donor_score(self, finance, expected):
        assert calculate_donor_score(finance) == pytest.approx(expected)

    def test_stock_score(self):
        summary = TradingSummary(
            total_trades=4,
            flagged_trades=1,
            total_risk_score=2,
            overall_suspicion_level=SuspicionLevel.LOW,
        )
        # 85 - 25 * 0.2 - 0.5 * 4
        assert calculate_stock_score(summary) == pytest.approx(78.0)

    def test_stock_score_recomputes_rates_from_counts(self):
        # flag_rate / avg_risk_per_trade fields are ignored
        summary = TradingSummary(
            total_trades=4,
            flagged_trades=1,
            flag_rate=99.0,
            total_risk_score=2,
            avg_risk_per_trade=9.0,
            overall_suspicion_level=SuspicionLevel.LOW,
        )
        assert calculate_stock_score(summary) == pytest.approx(78.0)

    def test_stock_score_risk_penalty_is_capped(self):
        summary = TradingSummary(
            total_trades=1,
            flagged_trades=0,
            total_risk_score=10,
            overall_suspicion_level=SuspicionLevel.MEDIUM,
        )
        assert calculate_stock_score(summary) == pytest.approx(50.0)

    def test_stock_score_defaults(self):
        assert calculate_stock_score(None) == 100.0
        assert calculate_stock_score(TradingSummary()) == 100.0
        # Missing level uses a base of 100
        assert calculate_stock_score(TradingSummary(total_trades=2)) == 100.0

    def test_stock_score_floors_at_zero(self):
        summary = TradingSummary(
            total_trades=10,
            flagged_trades=10,
            total_risk_score=100,
            overall_suspicion_level=SuspicionLevel.HIGH,
        )
        assert calculate_stock_score(summary) == 0.0

    @pytest.mark.parametrize('years,expected', [
        ([2024], 100.0),
        ([2022], 100.0),
        ([2015, 2021], 55.0),
        ([2010], 0.0),
        ([], 0.0),
    ])
    def test_disclosure_score(self, years, expected):
        filings = [DisclosureFiling(year=year) for year in years]
        assert calculate_disclosure_score(filings, as_of_year=2024) == pytest.approx(expected)

    def test_disclosure_score_none(self):
        assert calculate_disclosure_score(None, as_of_year=2024) == 0.0

    @pytest.mark.parametrize('score,letter', [
        (100, LetterGrade.A),
        (90, LetterGrade.A),
        (89.99, LetterGrade.B),
        (80, LetterGrade.B),
        (70, LetterGrade.C),
        (60, LetterGrade.D),
        (59.9, LetterGrade.F),
        (0, LetterGrade.F),
    ])
    def test_letter_grade(self, score, letter):
        assert get_letter_grade(score) == letter


class TestMultiFactorGrade:

    def test_perfect_record(self):
        votes = [KeyVote(id='v', public_benefit='positive', votes={OFFICIAL: 'Yea'})]

        result = calculate_multi_factor_grade(
            OFFICIAL,
            key_votes=votes,
            finance=FinanceData(pac_percentage=0, large_donor_percentage=0),
            trading=None,
            disclosures=[DisclosureFiling(year=2024)],
            as_of_year=2024,
        )

        assert result.overall == 100.0
        assert result.letter == LetterGrade.A
        assert result.breakdown.voting_score == 100.0
        assert result.official_id == OFFICIAL

    def test_worst_record(self):
        votes = [KeyVote(id='v', public_benefit='positive', votes={OFFICIAL: 'Nay'})]
        trading = TradingSummary(
            total_trades=10,
            flagged_trades=10,
            total_risk_score=100,
            overall_suspicion_level=SuspicionLevel.HIGH,
        )

        result = calculate_multi_factor_grade(
            OFFICIAL,
            key_votes=votes,
            finance=FinanceData(pac_percentage=100, large_donor_percentage=100),
            trading=trading,
            disclosures=[],
            as_of_year=2024,
        )

        assert result.overall == 0.0
        assert result.letter == LetterGrade.F

    def test_no_inputs_uses_defaults(self):
        result = grade(OFFICIAL, as_of_year=2024)

        # (70 + 70 + 100 + 0) / 4
        assert result.overall == 60.0
        assert result.letter == LetterGrade.D
        assert result.breakdown.stock_score == 100.0
        assert result.breakdown.disclosure_score == 0.0

    def test_letter_uses_unrounded_overall(self, healthcare_votes):
        # voting 66.67, donor 93.3, stock 100, disclosure 100 -> 89.99
        result = calculate_multi_factor_grade(
            OFFICIAL,
            key_votes=healthcare_votes,
            finance=FinanceData(pac_percentage=13.4, large_donor_percentage=0),
            disclosures=[DisclosureFiling(year=2024)],
            as_of_year=2024,
        )

        assert result.overall == 90.0
        assert result.letter == LetterGrade.B
        assert result.breakdown.voting_score == 66.7

    def test_custom_weights(self):
        votes = [KeyVote(id='v', public_benefit='positive', votes={OFFICIAL: 'Yea'})]

        result = calculate_multi_factor_grade(
            OFFICIAL,
            key_votes=votes,
            disclosures=[],
            weights={'voting_weight': 0.7, 'donor_weight': 0.1, 'stock_weight': 0.1, 'disclosure_weight': 0.1},
            as_of_year=2024,
        )

        # 100 * 0.7 + 70 * 0.1 + 100 * 0.1 + 0 * 0.1
        assert result.overall == 87.0
        assert result.weights.voting_weight == 0.7

    def test_accepts_raw_dicts(self):
        result = calculate_multi_factor_grade(
            OFFICIAL,
            key_votes=[{'id': 'v', 'publicBenefit': 'positive', 'votes': {OFFICIAL: 'Yea'}}],
            finance={'pac_percentage': 10, 'large_donor_percentage': 10},
            trading={'total_trades': 0},
            disclosures=[{'year': 2023, 'filingDate': '2023-05-15'}],
            as_of_year=2024,
        )

        # (100 + 90 + 100 + 100) / 4
        assert result.overall == 97.5
        assert result.letter == LetterGrade.A


def test_grading_is_repeatable(healthcare_votes):
    kwargs = dict(
        key_votes=healthcare_votes,
        finance={'pac_percentage': 12.5, 'large_donor_percentage': 30},
        trading={'total_trades': 3, 'flagged_trades': 1, 'total_risk_score': 4,
                 'overall_suspicion_level': 'low'},
        disclosures=[{'year': 2023}],
        weights={'voting_weight': 0.4, 'donor_weight': 0.1},
        as_of_year=2024,
    )

    first = calculate_multi_factor_grade(OFFICIAL, **kwargs)
    second = calculate_multi_factor_grade(OFFICIAL, **kwargs)

    assert first.model_dump() == second.model_dump()
