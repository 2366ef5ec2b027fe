"""
Position-to-vote alignment.

Compares an official's stated positions with how they actually voted on key
votes in the same subject categories. A position's score is the share of its
countable votes that agree with the stance; positions with no countable votes
score None, which is a normal result and not an error.
"""

import logging
from typing import Dict, Iterable, List, Optional

from accountability.lib.scoring.category_resolver import resolve_categories
from accountability.lib.scoring.models import (
    AlignmentResult,
    KeyVote,
    MemberAlignmentSummary,
    Position,
    PublicBenefit,
    VotePosition,
)
from accountability.lib.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)

NON_COUNTING_VOTES = frozenset({VotePosition.NOT_VOTING.value, VotePosition.PRESENT.value})


def is_progressive_stance(stance: str) -> bool:
    lowered = (stance or '').lower()
    return 'supports' in lowered or 'favors' in lowered


def is_conservative_stance(stance: str) -> bool:
    return 'opposes' in (stance or '').lower()


def is_vote_aligned(stance: str, vote_position: str, public_benefit) -> Optional[bool]:
    """
    Does a single vote agree with a stated stance?

    Args:
        stance: Stated stance text ('Strongly Supports', 'Opposes', ...)
        vote_position: 'Yea', 'Nay', 'Not Voting' or 'Present'
        public_benefit: Vote polarity ('positive', 'negative', 'mixed'),
            or a bool for an explicit pro-public flag

    Returns:
        True/False, or None when the vote does not count (not voting,
        present, or a stance with no direction)
    """
    vote_position = getattr(vote_position, 'value', vote_position)
    if vote_position in NON_COUNTING_VOTES:
        return None

    voted_yea = vote_position == VotePosition.YEA.value
    if isinstance(public_benefit, bool):
        bill_is_pro_public = public_benefit
    else:
        bill_is_pro_public = getattr(public_benefit, 'value', public_benefit) == PublicBenefit.POSITIVE.value

    if is_progressive_stance(stance):
        return voted_yea == bill_is_pro_public
    if is_conservative_stance(stance):
        return voted_yea != bill_is_pro_public

    return None


def get_relevant_categories(topic: str) -> List[str]:
    """Vote categories a position topic is compared against."""
    return resolve_categories(topic)


def _mean_rounded(scores: Iterable[int]) -> Optional[int]:
    scores = list(scores)
    if not scores:
        return None
    return round_half_up(sum(scores) / len(scores))


def align_position(position: Position, key_votes: List[KeyVote], official_id: str) -> AlignmentResult:
    """
    Alignment of one position against the official's votes in its categories.

    Args:
        position: Stated position
        key_votes: Key votes with category and polarity set
        official_id: Official whose votes are read from each roster

    Returns:
        AlignmentResult; relevant_votes counts every vote in the relevant
        categories that has an entry for the official
    """
    categories = get_relevant_categories(position.topic)
    relevant = [v for v in key_votes if v.category in categories and v.votes.get(official_id)]

    aligned = 0
    opposed = 0
    for vote in relevant:
        outcome = is_vote_aligned(position.stance, vote.votes[official_id], vote.is_pro_public)
        if outcome is True:
            aligned += 1
        elif outcome is False:
            opposed += 1

    counted = aligned + opposed
    score = round_half_up(aligned / counted * 100) if counted > 0 else None

    return AlignmentResult(
        position=position,
        relevant_votes=len(relevant),
        aligned_votes=aligned,
        opposed_votes=opposed,
        alignment_score=score,
    )


def calculate_member_alignment(
    positions: List[Position],
    key_votes: List[KeyVote],
    official_id: str,
) -> MemberAlignmentSummary:
    """
    Alignment of all of an official's positions with their key votes.

    Overall score is the rounded mean of the non-null position scores. A
    position resolving to several categories contributes its score to each
    of them; categories with no scored position are left out.

    Args:
        positions: The official's stated positions
        key_votes: Key votes with category and polarity set
        official_id: Official id used to look up votes

    Returns:
        MemberAlignmentSummary
    """
    results: List[AlignmentResult] = []
    category_scores_raw: Dict[str, List[int]] = {}

    for position in positions:
        result = align_position(position, key_votes, official_id)
        results.append(result)

        for category in get_relevant_categories(position.topic):
            bucket = category_scores_raw.setdefault(category, [])
            if result.alignment_score is not None:
                bucket.append(result.alignment_score)

    scored = [r.alignment_score for r in results if r.alignment_score is not None]

    category_scores = {
        category: _mean_rounded(scores)
        for category, scores in category_scores_raw.items()
        if scores
    }

    logger.debug(
        f"Alignment for {official_id}: {len(scored)}/{len(results)} positions scored"
    )

    return MemberAlignmentSummary(
        official_id=official_id,
        total_positions=len(positions),
        positions_with_votes=len(scored),
        overall_alignment_score=_mean_rounded(scored),
        category_scores=category_scores,
        results=results,
    )


# Short name used by the batch pipeline
align_member = calculate_member_alignment
