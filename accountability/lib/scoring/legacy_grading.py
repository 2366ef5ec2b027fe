"""
Legacy equal-weight accountability grader.

Kept alongside the multi-factor grader because older call sites only have
donor percentages plus optional aggregate voting, trading and disclosure
records. Any factor whose record is absent scores PLACEHOLDER_SCORE, so a
member with donor data only is graded on donor score plus three neutral
placeholders. Each factor also gets a one-line explanation.
"""

import logging
from typing import Dict, Optional, Union

from accountability.lib.scoring.exceptions import WeightConfigurationError
from accountability.lib.scoring.grading import get_letter_grade
from accountability.lib.scoring.models import (
    GradeExplanation,
    LegacyGradeResult,
    LegacyGradeWeights,
    LegacyScoreBreakdown,
    MemberData,
    SuspicionLevel,
)
from accountability.lib.scoring.rounding import round_tenth, to_fixed

logger = logging.getLogger(__name__)

PLACEHOLDER_SCORE = 70.0
WEIGHT_SUM_TOLERANCE = 0.0001

# Voting component weights
PARTICIPATION_WEIGHT = 0.4
PARTY_LOYALTY_WEIGHT = 0.1
PUBLIC_INTEREST_WEIGHT = 0.5

# Trading component weights
FLAG_SCORE_WEIGHT = 0.5
RISK_SCORE_WEIGHT = 0.3
SUSPICION_SCORE_WEIGHT = 0.2

SUSPICION_SCORES = {
    SuspicionLevel.NONE: 100.0,
    SuspicionLevel.LOW: 80.0,
    SuspicionLevel.MEDIUM: 50.0,
    SuspicionLevel.HIGH: 20.0,
}


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _pct(value: Optional[float]) -> str:
    return f"{to_fixed(value or 0.0, 1):.1f}"


def validate_legacy_weights(weights: LegacyGradeWeights) -> None:
    """
    Raises:
        WeightConfigurationError: If the weights do not sum to 1.0 within 0.0001
    """
    total = weights.total()
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise WeightConfigurationError(f"Weights must sum to 1.0 (got {total:.4f})")


# ============================================================================
# Donor
# ============================================================================


def calculate_donor_score(data: MemberData) -> float:
    pac = data.pac_percentage or 0.0
    large_donor = data.large_donor_percentage or 0.0
    return _clamp(100 - (pac + large_donor) / 2)


def explain_donor_score(data: MemberData, score: float) -> str:
    pac = _pct(data.pac_percentage)
    large_donor = _pct(data.large_donor_percentage)
    if score >= 90:
        return f"Excellent funding transparency with {pac}% from PACs and {large_donor}% from large donors."
    if score >= 70:
        return f"Moderate reliance on special interests: {pac}% PAC funding, {large_donor}% large donors."
    return f"High dependence on special interests: {pac}% from PACs and {large_donor}% from large donors."


# ============================================================================
# Voting
# ============================================================================


def _participation_rate(data: MemberData) -> float:
    record = data.voting_record
    if record.key_votes_total > 0:
        return record.key_votes_participated / record.key_votes_total * 100
    return 100.0


def calculate_voting_score(data: MemberData) -> float:
    """Participation 40%, party loyalty 10%, public-interest alignment 50%."""
    record = data.voting_record
    if record is None:
        return PLACEHOLDER_SCORE

    participated = record.key_votes_participated
    participation_rate = _participation_rate(data)
    if participated > 0:
        loyalty_rate = record.votes_with_party / participated * 100
        public_interest_rate = (1 - record.votes_against_public_interest / participated) * 100
    else:
        loyalty_rate = 100.0
        public_interest_rate = 100.0

    score = (
        participation_rate * PARTICIPATION_WEIGHT
        + loyalty_rate * PARTY_LOYALTY_WEIGHT
        + public_interest_rate * PUBLIC_INTEREST_WEIGHT
    )
    return _clamp(score)


def explain_voting_score(data: MemberData, score: float) -> str:
    record = data.voting_record
    if record is None:
        return 'Voting record data not yet available.'

    participation = _pct(_participation_rate(data))
    against = record.votes_against_public_interest
    if score >= 90:
        return f"Strong voting record: {participation}% participation in key votes with consistent alignment."
    if score >= 70:
        return f"Moderate voting accountability: {participation}% participation with {against} votes against public interest."
    return f"Concerning voting pattern: {participation}% participation with {against} votes benefiting special interests."


# ============================================================================
# Trading
# ============================================================================


def calculate_trading_score(data: MemberData) -> float:
    """Flag score 50%, risk score 30%, suspicion level 20%."""
    summary = data.trading_summary
    if summary is None:
        return PLACEHOLDER_SCORE

    if summary.total_trades == 0:
        return 100.0

    flag_score = 100 - summary.flag_rate
    # avg risk per trade is normally 0-5
    risk_score = max(0.0, 100 - summary.avg_risk_per_trade * 20)
    suspicion_score = SUSPICION_SCORES.get(summary.overall_suspicion_level, PLACEHOLDER_SCORE)

    score = (
        flag_score * FLAG_SCORE_WEIGHT
        + risk_score * RISK_SCORE_WEIGHT
        + suspicion_score * SUSPICION_SCORE_WEIGHT
    )
    return _clamp(score)


def explain_trading_score(data: MemberData, score: float) -> str:
    summary = data.trading_summary
    if summary is None:
        return 'Stock trading data not yet available.'

    if summary.total_trades == 0:
        return 'No stock trades reported - excellent ethics compliance.'

    counts = f"{summary.flagged_trades}/{summary.total_trades} trades flagged ({_pct(summary.flag_rate)}%)"
    level = summary.overall_suspicion_level.value if summary.overall_suspicion_level else 'unknown'
    if score >= 75:
        return f"Low trading concerns: {counts}."
    if score >= 50:
        return f"Moderate trading concerns: {counts} with {level} suspicious activity level."
    return f"Serious trading ethics concerns: {counts} with {level} suspicious activity level."


# ============================================================================
# Disclosure
# ============================================================================


def calculate_disclosure_score(data: MemberData) -> float:
    """Completeness 40% plus timeliness 40%, minus a doubled missing-filing rate at 20%."""
    compliance = data.disclosure_compliance
    if compliance is None:
        return PLACEHOLDER_SCORE

    filed = compliance.filings_count
    expected = compliance.expected_filings
    late = compliance.late_filings
    missing = compliance.missing_filings

    if filed == expected and late == 0 and missing == 0:
        return 100.0

    completeness_rate = filed / expected * 100 if expected > 0 else 100.0
    late_rate = late / filed * 100 if filed > 0 else 0.0
    timeliness_score = 100 - late_rate
    missing_rate = missing / expected * 100 if expected > 0 else 0.0
    missing_penalty = missing_rate * 2

    score = completeness_rate * 0.4 + timeliness_score * 0.4 - missing_penalty * 0.2
    return _clamp(score)


def explain_disclosure_score(data: MemberData, score: float) -> str:
    compliance = data.disclosure_compliance
    if compliance is None:
        return 'Financial disclosure data not yet available.'

    filed = compliance.filings_count
    expected = compliance.expected_filings
    if score >= 90:
        return f"Excellent disclosure compliance: {filed}/{expected} filings completed on time."
    if score >= 70:
        return f"Moderate compliance: {filed}/{expected} filings, {compliance.late_filings} late."
    return (
        f"Poor disclosure compliance: {compliance.missing_filings} missing filings, "
        f"{compliance.late_filings} late out of {expected} expected."
    )


# ============================================================================
# Grade
# ============================================================================


def calculate_legacy_grade(
    member_data: Union[MemberData, Dict],
    weights: Union[LegacyGradeWeights, Dict[str, float], None] = None,
) -> LegacyGradeResult:
    """
    Grade a member with the legacy equal-weight formula.

    Args:
        member_data: MemberData or raw dict
        weights: Optional weights (donor/voting/trading/disclosure)

    Returns:
        LegacyGradeResult with rounded breakdown and explanations

    Raises:
        WeightConfigurationError: If the weights do not sum to 1.0
    """
    if weights is None:
        weights = LegacyGradeWeights()
    elif not isinstance(weights, LegacyGradeWeights):
        try:
            weights = LegacyGradeWeights.model_validate(weights)
        except ValueError as e:
            raise WeightConfigurationError(f"Invalid grade weights: {e}") from e
    validate_legacy_weights(weights)

    data = member_data if isinstance(member_data, MemberData) else MemberData.model_validate(member_data)

    donor_score = calculate_donor_score(data)
    voting_score = calculate_voting_score(data)
    trading_score = calculate_trading_score(data)
    disclosure_score = calculate_disclosure_score(data)

    overall = (
        donor_score * weights.donor
        + voting_score * weights.voting
        + trading_score * weights.trading
        + disclosure_score * weights.disclosure
    )
    logger.debug(f"Legacy grade overall={overall:.2f}")

    return LegacyGradeResult(
        overall=round_tenth(overall),
        letter=get_letter_grade(overall),
        breakdown=LegacyScoreBreakdown(
            donor_score=round_tenth(donor_score),
            voting_score=round_tenth(voting_score),
            trading_score=round_tenth(trading_score),
            disclosure_score=round_tenth(disclosure_score),
        ),
        explanation=GradeExplanation(
            donor=explain_donor_score(data, donor_score),
            voting=explain_voting_score(data, voting_score),
            trading=explain_trading_score(data, trading_score),
            disclosure=explain_disclosure_score(data, disclosure_score),
        ),
    )
