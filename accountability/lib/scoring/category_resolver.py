"""
Category resolution for position topics and legislative descriptions.

Maps free text onto the canonical subject categories used by key votes:
- Healthcare
- Immigration
- Climate & Environment
- Economy & Taxes
- National Security
- Voting Rights
- Government Ethics
- Other (fallback)
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Tuple

logger = logging.getLogger(__name__)

OTHER_CATEGORY = 'Other'

# Exact (case-sensitive) topic titles as published by OnTheIssues VoteMatch
TOPIC_TO_CATEGORY: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    # Healthcare
    'Expand ObamaCare': ('Healthcare',),
    'Privatize Social Security': ('Economy & Taxes', 'Healthcare'),

    # Immigration
    'Pathway to citizenship for illegal aliens': ('Immigration',),

    # Environment
    'Fight EPA regulatory over-reach': ('Climate & Environment',),
    'Prioritize green energy': ('Climate & Environment',),

    # Economy
    'Higher taxes on the wealthy': ('Economy & Taxes',),
    'Support & expand free trade': ('Economy & Taxes',),
    'Stimulus better than market-led recovery': ('Economy & Taxes',),
    'Vouchers for school choice': ('Economy & Taxes',),

    # Civil rights & social
    "Abortion is a woman's unrestricted right": ('Healthcare', 'Voting Rights'),
    'Legally require hiring women & minorities': ('Voting Rights', 'Government Ethics'),
    'Comfortable with same-sex marriage': ('Voting Rights',),
    'Make voter registration easier': ('Voting Rights',),

    # Defense & foreign policy
    'Expand the military': ('National Security',),
    'Avoid foreign entanglements': ('National Security',),
    'Support American Exceptionalism': ('National Security',),

    # Other
    'Keep God in the public sphere': (OTHER_CATEGORY,),
    'Absolute right to gun ownership': (OTHER_CATEGORY,),
    'Stricter punishment reduces crime': (OTHER_CATEGORY,),
    'Marijuana is a gateway drug': ('Healthcare', OTHER_CATEGORY),
})

# Keyword fallback, tested in this order; the first bucket with a match wins
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('Healthcare', ('healthcare', 'obamacare', 'medicaid', 'medicare')),
    ('Immigration', ('immigration', 'border', 'citizenship')),
    ('Climate & Environment', ('climate', 'environment', 'epa', 'energy')),
    ('Economy & Taxes', ('tax', 'economy', 'spending', 'trade')),
    ('National Security', ('military', 'defense', 'war', 'security')),
    ('Voting Rights', ('voting', 'rights', 'marriage')),
    ('Government Ethics', ('ethics', 'corruption')),
)

KNOWN_CATEGORIES: Tuple[str, ...] = tuple(category for category, _ in CATEGORY_KEYWORDS) + (OTHER_CATEGORY,)


def resolve_categories(topic: str) -> List[str]:
    """
    Resolve a topic or legislative description to subject categories.

    Args:
        topic: Position topic title or free-text description

    Returns:
        Non-empty list of category labels (['Other'] when nothing matches)
    """
    topic = topic or ''

    direct = TOPIC_TO_CATEGORY.get(topic)
    if direct is not None:
        return list(direct)

    topic_lower = topic.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in topic_lower for keyword in keywords):
            return [category]

    logger.debug(f"No category keywords matched topic '{topic}'")
    return [OTHER_CATEGORY]


def resolve_primary_category(*texts: str) -> str:
    """First category of the first text that resolves to something other than 'Other'."""
    for text in texts:
        if not text:
            continue
        categories = resolve_categories(text)
        if categories[0] != OTHER_CATEGORY:
            return categories[0]
    return OTHER_CATEGORY
