"""
Multi-factor accountability grading.

Four weighted factors, each scored 0-100 (higher is better):

1. Voting record          agreement with the public-benefit side of key votes
2. Donor influence        dependency on PAC and large-donor money
3. Stock trading          trading risk summary
4. Disclosure compliance  presence and recency of financial disclosures

Absent inputs are not errors; each factor has its own default (see the
*_DEFAULT constants). Weights default to 0.25 each and must sum to 1.0.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Union

from accountability.lib.scoring.exceptions import WeightConfigurationError
from accountability.lib.scoring.models import (
    DisclosureFiling,
    FinanceData,
    GradeResult,
    GradeWeights,
    KeyVote,
    LetterGrade,
    ScoreBreakdown,
    SuspicionLevel,
    TradingSummary,
    VotePosition,
)
from accountability.lib.scoring.rounding import round_tenth

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 0.001

# Neutral scores when there is nothing to judge
VOTING_DEFAULT = 70.0
DONOR_DEFAULT = 70.0
# No trading is the cleanest possible record
STOCK_DEFAULT = 100.0
# No disclosures on file is non-compliance
DISCLOSURE_DEFAULT = 0.0

SUSPICION_BASE_SCORES = {
    SuspicionLevel.HIGH: 30.0,
    SuspicionLevel.MEDIUM: 65.0,
    SuspicionLevel.LOW: 85.0,
}
FLAG_RATE_PENALTY = 0.2
RISK_PENALTY_PER_POINT = 4.0
MAX_RISK_PENALTY = 15.0

RECENT_DISCLOSURE_YEARS = 2
DISCLOSURE_DECAY_PER_YEAR = 15.0

LETTER_THRESHOLDS = (
    (90.0, LetterGrade.A),
    (80.0, LetterGrade.B),
    (70.0, LetterGrade.C),
    (60.0, LetterGrade.D),
)

WeightsInput = Union[GradeWeights, Dict[str, float], None]


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def resolve_weights(weights: WeightsInput = None) -> GradeWeights:
    """
    Merge caller weights over the 0.25 defaults and validate the sum.

    Args:
        weights: GradeWeights, a partial dict (snake_case or camelCase keys)
            or None

    Returns:
        Complete GradeWeights

    Raises:
        WeightConfigurationError: If a weight is not numeric or the weights do
            not sum to 1.0 within WEIGHT_SUM_TOLERANCE
    """
    if weights is None:
        resolved = GradeWeights()
    elif isinstance(weights, GradeWeights):
        resolved = weights
    else:
        try:
            resolved = GradeWeights.model_validate(weights)
        except ValueError as e:
            raise WeightConfigurationError(f"Invalid grade weights: {e}") from e

    total = resolved.total()
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise WeightConfigurationError(f"Weights must sum to 1.0, got {total}")

    return resolved


# ============================================================================
# Factor scores
# ============================================================================


def calculate_voting_score(official_id: str, key_votes: Optional[List[KeyVote]] = None) -> float:
    """
    Share of the official's countable key votes cast on the public-benefit side.

    Missing votes, 'Present' and 'Not Voting' are skipped. Returns
    VOTING_DEFAULT when there is nothing to count.
    """
    if not key_votes:
        return VOTING_DEFAULT

    aligned = 0
    counted = 0
    for vote in key_votes:
        member_vote = vote.votes.get(official_id)
        if not member_vote or member_vote in (VotePosition.PRESENT.value, VotePosition.NOT_VOTING.value):
            continue
        counted += 1
        voted_yea = member_vote == VotePosition.YEA.value
        if voted_yea == vote.is_pro_public:
            aligned += 1

    if counted == 0:
        return VOTING_DEFAULT

    return aligned / counted * 100


def calculate_donor_score(finance: Optional[FinanceData] = None) -> float:
    """100 minus the mean of the PAC and large-donor percentages, clamped to 0-100."""
    if finance is None:
        return DONOR_DEFAULT

    pac = finance.pac_percentage if finance.pac_percentage is not None else 0.0
    large_donor = finance.large_donor_percentage if finance.large_donor_percentage is not None else 0.0

    return _clamp(100 - (pac + large_donor) / 2)


def calculate_stock_score(trading: Optional[TradingSummary] = None) -> float:
    """
    Trading score from an official's TradingSummary.

    Starts from a base set by the suspicion level (100 when the level is
    missing), then subtracts 0.2 per flag-rate point and 4 per point of
    average risk per trade (at most 15). No trades scores STOCK_DEFAULT.
    """
    if trading is None or not trading.total_trades:
        return STOCK_DEFAULT

    flag_rate = trading.flagged_trades / trading.total_trades * 100
    avg_risk = trading.total_risk_score / trading.total_trades

    base = SUSPICION_BASE_SCORES.get(trading.overall_suspicion_level, 100.0)
    flag_penalty = flag_rate * FLAG_RATE_PENALTY
    risk_penalty = min(avg_risk * RISK_PENALTY_PER_POINT, MAX_RISK_PENALTY)

    return _clamp(base - flag_penalty - risk_penalty)


def calculate_disclosure_score(
    disclosures: Optional[List[DisclosureFiling]] = None,
    as_of_year: Optional[int] = None,
) -> float:
    """
    Disclosure compliance from filing years.

    Args:
        disclosures: Filings on record
        as_of_year: Reference year (defaults to the current year)

    Returns:
        0 with no filings, 100 with a filing in the last two years, otherwise
        100 minus 15 per year since the latest filing (floored at 0)
    """
    if not disclosures:
        return DISCLOSURE_DEFAULT

    if as_of_year is None:
        as_of_year = datetime.now().year

    if any(d.year >= as_of_year - RECENT_DISCLOSURE_YEARS for d in disclosures):
        return 100.0

    years_since = as_of_year - max(d.year for d in disclosures)
    return max(0.0, 100.0 - years_since * DISCLOSURE_DECAY_PER_YEAR)


def get_letter_grade(score: float) -> LetterGrade:
    """A >= 90, B >= 80, C >= 70, D >= 60, else F."""
    for threshold, letter in LETTER_THRESHOLDS:
        if score >= threshold:
            return letter
    return LetterGrade.F


# ============================================================================
# Aggregate grade
# ============================================================================


def _coerce_list(items, model):
    if items is None:
        return None
    return [item if isinstance(item, model) else model.model_validate(item) for item in items]


def _coerce(item, model):
    if item is None or isinstance(item, model):
        return item
    return model.model_validate(item)


def calculate_multi_factor_grade(
    official_id: str,
    *,
    key_votes: Optional[List[KeyVote]] = None,
    finance: Optional[FinanceData] = None,
    trading: Optional[TradingSummary] = None,
    disclosures: Optional[List[DisclosureFiling]] = None,
    weights: WeightsInput = None,
    as_of_year: Optional[int] = None,
) -> GradeResult:
    """
    Weighted accountability grade for one official.

    Everything after official_id is keyword-only; the per-factor inputs are
    passed individually rather than as one inputs mapping.

    Inputs may be models or raw upstream dicts. The overall score and every
    breakdown value are rounded to one decimal; the letter is taken from the
    unrounded overall.

    Args:
        official_id: Official whose votes are read from each key-vote roster
        key_votes: Key votes with a public-benefit polarity
        finance: PAC / large-donor percentages
        trading: TradingSummary from the trade risk scorer
        disclosures: Financial disclosure filings
        weights: Optional (partial) weights merged over the defaults
        as_of_year: Reference year for disclosure recency

    Returns:
        GradeResult

    Raises:
        WeightConfigurationError: If the weights do not sum to 1.0
    """
    final_weights = resolve_weights(weights)

    voting_score = calculate_voting_score(official_id, _coerce_list(key_votes, KeyVote))
    donor_score = calculate_donor_score(_coerce(finance, FinanceData))
    stock_score = calculate_stock_score(_coerce(trading, TradingSummary))
    disclosure_score = calculate_disclosure_score(_coerce_list(disclosures, DisclosureFiling), as_of_year)

    overall = (
        voting_score * final_weights.voting_weight
        + donor_score * final_weights.donor_weight
        + stock_score * final_weights.stock_weight
        + disclosure_score * final_weights.disclosure_weight
    )

    logger.debug(
        f"Grade for {official_id}: voting={voting_score:.1f} donor={donor_score:.1f} "
        f"stock={stock_score:.1f} disclosure={disclosure_score:.1f} overall={overall:.2f}"
    )

    return GradeResult(
        official_id=official_id,
        overall=round_tenth(overall),
        letter=get_letter_grade(overall),
        breakdown=ScoreBreakdown(
            voting_score=round_tenth(voting_score),
            donor_score=round_tenth(donor_score),
            stock_score=round_tenth(stock_score),
            disclosure_score=round_tenth(disclosure_score),
        ),
        weights=final_weights,
    )


# Short name used by the batch pipeline
grade = calculate_multi_factor_grade
