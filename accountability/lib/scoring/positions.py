"""Stance normalization and bill-reference helpers for stated positions.

Position statements arrive as free-text stance labels ("Strongly Favors",
"Opposes", "No opinion on topic", ...) with quotes that may cite bills.
These helpers turn them into the five canonical stances, the 1-5 intensity
scale and a clean list of bill identifiers.
"""

import re
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)

STRONGLY_SUPPORTS = 'Strongly Supports'
SUPPORTS = 'Supports'
NEUTRAL = 'Neutral'
OPPOSES = 'Opposes'
STRONGLY_OPPOSES = 'Strongly Opposes'

STANCE_INTENSITY: Dict[str, int] = {
    STRONGLY_OPPOSES: 1,
    OPPOSES: 2,
    NEUTRAL: 3,
    SUPPORTS: 4,
    STRONGLY_SUPPORTS: 5,
}

# H.R. 123, HR123, S. 456, S456
BILL_NUMBER_PATTERN = re.compile(r"\b([HS]\.?R?\.?\s*\d+)\b", re.IGNORECASE)


def normalize_stance(stance_text: str) -> str:
    """Map a raw stance label onto one of the five canonical stances.

    Matching is case-sensitive on the published labels; anything that is
    not a favor/support/oppose label is Neutral.
    """
    normalized = (stance_text or '').strip()
    if 'Strongly Favors' in normalized or 'Strongly Supports' in normalized:
        return STRONGLY_SUPPORTS
    if 'Favors' in normalized or 'Supports' in normalized:
        return SUPPORTS
    if 'Strongly Opposes' in normalized:
        return STRONGLY_OPPOSES
    if 'Opposes' in normalized:
        return OPPOSES
    return NEUTRAL


def stance_to_intensity(stance: str) -> int:
    """Intensity on the 1-5 scale for a canonical stance (3 if unknown)."""
    return STANCE_INTENSITY.get(stance, 3)


def extract_bill_numbers(text: str) -> List[str]:
    """Extract bill identifiers cited in text.

    Args:
        text: Quote or free text

    Returns:
        Upper-cased identifiers with whitespace removed, first-seen order,
        no duplicates (e.g. ['H.R.1', 'S.2'])
    """
    bills: List[str] = []
    for match in BILL_NUMBER_PATTERN.finditer(text or ''):
        bill = re.sub(r"\s+", '', match.group(1)).upper()
        if bill not in bills:
            bills.append(bill)
    return bills


def dedupe_positions(positions: List) -> List:
    """Keep one position per topic.

    The position with the most quotes plus votes wins; on a tie the first one
    seen is kept. Topics stay in first-seen order.

    Args:
        positions: Position models

    Returns:
        De-duplicated list of positions
    """
    by_topic: Dict[str, object] = {}
    for position in positions:
        existing = by_topic.get(position.topic)
        if existing is None:
            by_topic[position.topic] = position
            continue
        if len(position.quotes) + len(position.votes) > len(existing.quotes) + len(existing.votes):
            by_topic[position.topic] = position

    dropped = len(positions) - len(by_topic)
    if dropped:
        logger.debug(f"Dropped {dropped} duplicate positions")
    return list(by_topic.values())
