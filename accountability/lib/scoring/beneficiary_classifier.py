"""
Beneficiary classification for legislation, votes and promises.

Scans bill text against an ordered keyword table. Each keyword contributes
one or more (group, impact) pairs; pairs are de-duplicated per call and
rolled up into a public-sentiment label.

Two calling contexts exist:
- legislation summaries leave unmatched text with no beneficiaries and an
  'unknown' sentiment
- key-vote enrichment defaults unmatched text to general_public/mixed and
  reads an absence of signals as 'mixed'
Both go through classify_legislation(); the mode is an explicit argument.
Key-vote enrichment scans the broader KEY_VOTE_PATTERNS table.
"""

import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from accountability.lib.scoring.category_resolver import resolve_primary_category
from accountability.lib.scoring.models import (
    BeneficiaryGroup,
    BeneficiaryImpact,
    ClassificationResult,
    KeyVote,
    Confidence,
    Impact,
    PublicBenefit,
    PublicSentiment,
)

logger = logging.getLogger(__name__)

G = BeneficiaryGroup

# keyword -> ((groups, impact), ...); scanned in insertion order
BENEFIT_PATTERNS: Mapping[str, Tuple[Tuple[Tuple[BeneficiaryGroup, ...], Impact], ...]] = MappingProxyType({
    # Tax-related
    'tax cut': (
        ((G.WEALTHY, G.CORPORATIONS), Impact.BENEFITS),
        ((G.GENERAL_PUBLIC,), Impact.MIXED),
    ),
    'corporate tax': (
        ((G.CORPORATIONS,), Impact.BENEFITS),
        ((G.GENERAL_PUBLIC,), Impact.HARMS),
    ),
    'capital gains': (((G.WEALTHY, G.WALL_STREET), Impact.BENEFITS),),
    'estate tax': (((G.WEALTHY,), Impact.BENEFITS),),
    'child tax credit': (((G.MIDDLE_CLASS, G.WORKING_CLASS, G.LOW_INCOME), Impact.BENEFITS),),
    'earned income': (((G.WORKING_CLASS, G.LOW_INCOME), Impact.BENEFITS),),

    # Healthcare
    'medicare': (((G.SENIORS, G.HEALTHCARE_INDUSTRY), Impact.BENEFITS),),
    'medicaid': (((G.LOW_INCOME,), Impact.BENEFITS),),
    'drug pricing': (
        ((G.CONSUMERS, G.SENIORS), Impact.BENEFITS),
        ((G.HEALTHCARE_INDUSTRY,), Impact.HARMS),
    ),
    'affordable care': (((G.MIDDLE_CLASS, G.WORKING_CLASS), Impact.BENEFITS),),

    # Labor
    'minimum wage': (
        ((G.WORKING_CLASS, G.LOW_INCOME), Impact.BENEFITS),
        ((G.SMALL_BUSINESS,), Impact.MIXED),
    ),
    'union': (
        ((G.WORKERS,), Impact.BENEFITS),
        ((G.CORPORATIONS,), Impact.HARMS),
    ),
    'right to work': (
        ((G.CORPORATIONS,), Impact.BENEFITS),
        ((G.WORKERS,), Impact.HARMS),
    ),
    'overtime': (((G.WORKERS,), Impact.BENEFITS),),

    # Environment
    'climate': (
        ((G.ENVIRONMENT, G.GENERAL_PUBLIC), Impact.BENEFITS),
        ((G.FOSSIL_FUEL_INDUSTRY,), Impact.HARMS),
    ),
    'clean energy': (((G.ENVIRONMENT,), Impact.BENEFITS),),
    'emissions': (
        ((G.ENVIRONMENT,), Impact.BENEFITS),
        ((G.FOSSIL_FUEL_INDUSTRY, G.CORPORATIONS), Impact.HARMS),
    ),
    'drilling': (
        ((G.FOSSIL_FUEL_INDUSTRY,), Impact.BENEFITS),
        ((G.ENVIRONMENT,), Impact.HARMS),
    ),
    'pipeline': (
        ((G.FOSSIL_FUEL_INDUSTRY,), Impact.BENEFITS),
        ((G.ENVIRONMENT,), Impact.HARMS),
    ),

    # Trade
    'tariff': (
        ((G.CONSUMERS,), Impact.HARMS),
        ((G.CORPORATIONS,), Impact.MIXED),
    ),
    'free trade': (
        ((G.CORPORATIONS, G.CONSUMERS), Impact.BENEFITS),
        ((G.WORKERS,), Impact.MIXED),
    ),

    # Immigration
    'border': (((G.IMMIGRANTS,), Impact.HARMS),),
    'daca': (((G.IMMIGRANTS,), Impact.BENEFITS),),
    'visa': (((G.TECH_INDUSTRY, G.IMMIGRANTS), Impact.BENEFITS),),

    # Defense
    'defense spending': (((G.MILITARY_DEFENSE,), Impact.BENEFITS),),
    'military': (((G.MILITARY_DEFENSE, G.VETERANS), Impact.BENEFITS),),
    'veterans': (((G.VETERANS,), Impact.BENEFITS),),

    # Financial
    'wall street': (((G.WALL_STREET,), Impact.BENEFITS),),
    'dodd-frank': (
        ((G.CONSUMERS,), Impact.BENEFITS),
        ((G.WALL_STREET,), Impact.HARMS),
    ),
    'deregulation': (
        ((G.CORPORATIONS, G.WALL_STREET), Impact.BENEFITS),
        ((G.CONSUMERS, G.ENVIRONMENT), Impact.HARMS),
    ),
    'banking': (((G.WALL_STREET,), Impact.BENEFITS),),

    # Education
    'student loan': (((G.STUDENTS,), Impact.BENEFITS),),
    'pell grant': (((G.STUDENTS, G.LOW_INCOME), Impact.BENEFITS),),
    'school choice': (((G.CORPORATIONS,), Impact.BENEFITS),),

    # Social programs
    'social security': (((G.SENIORS,), Impact.BENEFITS),),
    'snap': (((G.LOW_INCOME,), Impact.BENEFITS),),
    'food stamp': (((G.LOW_INCOME,), Impact.BENEFITS),),
    'housing': (((G.LOW_INCOME, G.MIDDLE_CLASS), Impact.BENEFITS),),
})

# Broader single-effect table used when enriching key votes
KEY_VOTE_PATTERNS: Mapping[str, Tuple[Tuple[Tuple[BeneficiaryGroup, ...], Impact], ...]] = MappingProxyType({
    # Tax-related
    'tax cut': (((G.WEALTHY, G.CORPORATIONS), Impact.BENEFITS),),
    'tax relief': (((G.WEALTHY, G.CORPORATIONS), Impact.BENEFITS),),
    'corporate tax': (((G.CORPORATIONS,), Impact.BENEFITS),),
    'capital gains': (((G.WEALTHY, G.WALL_STREET), Impact.BENEFITS),),
    'estate tax': (((G.WEALTHY,), Impact.BENEFITS),),
    'child tax credit': (((G.MIDDLE_CLASS, G.WORKING_CLASS, G.LOW_INCOME), Impact.BENEFITS),),
    'earned income': (((G.WORKING_CLASS, G.LOW_INCOME), Impact.BENEFITS),),

    # Healthcare
    'medicare': (((G.SENIORS,), Impact.BENEFITS),),
    'medicaid': (((G.LOW_INCOME,), Impact.BENEFITS),),
    'drug pricing': (((G.CONSUMERS, G.SENIORS), Impact.BENEFITS),),
    'prescription': (((G.SENIORS, G.CONSUMERS), Impact.BENEFITS),),
    'affordable care': (((G.MIDDLE_CLASS, G.WORKING_CLASS), Impact.BENEFITS),),
    'health care': (((G.GENERAL_PUBLIC,), Impact.BENEFITS),),
    'healthcare': (((G.GENERAL_PUBLIC,), Impact.BENEFITS),),

    # Labor
    'minimum wage': (((G.WORKING_CLASS, G.LOW_INCOME), Impact.BENEFITS),),
    'union': (((G.WORKERS,), Impact.BENEFITS),),
    'worker': (((G.WORKERS,), Impact.BENEFITS),),
    'overtime': (((G.WORKERS,), Impact.BENEFITS),),
    'labor': (((G.WORKERS,), Impact.BENEFITS),),

    # Environment
    'climate': (((G.ENVIRONMENT,), Impact.BENEFITS),),
    'clean energy': (((G.ENVIRONMENT,), Impact.BENEFITS),),
    'emission': (((G.ENVIRONMENT,), Impact.BENEFITS),),
    'renewable': (((G.ENVIRONMENT,), Impact.BENEFITS),),
    'drilling': (((G.FOSSIL_FUEL_INDUSTRY,), Impact.BENEFITS),),
    'pipeline': (((G.FOSSIL_FUEL_INDUSTRY,), Impact.BENEFITS),),
    'oil': (((G.FOSSIL_FUEL_INDUSTRY,), Impact.BENEFITS),),
    'natural gas': (((G.FOSSIL_FUEL_INDUSTRY,), Impact.BENEFITS),),

    # Trade
    'tariff': (((G.CORPORATIONS,), Impact.MIXED),),

    # Immigration
    'border': (((G.IMMIGRANTS,), Impact.HARMS),),
    'immigration': (((G.IMMIGRANTS,), Impact.MIXED),),
    'daca': (((G.IMMIGRANTS,), Impact.BENEFITS),),
    'dreamer': (((G.IMMIGRANTS,), Impact.BENEFITS),),

    # Defense
    'defense': (((G.MILITARY_DEFENSE,), Impact.BENEFITS),),
    'military': (((G.MILITARY_DEFENSE,), Impact.BENEFITS),),
    'veteran': (((G.VETERANS,), Impact.BENEFITS),),
    'ukraine': (((G.MILITARY_DEFENSE,), Impact.BENEFITS),),
    'israel': (((G.MILITARY_DEFENSE,), Impact.BENEFITS),),
    'nato': (((G.MILITARY_DEFENSE,), Impact.BENEFITS),),

    # Financial
    'wall street': (((G.WALL_STREET,), Impact.BENEFITS),),
    'deregulation': (((G.CORPORATIONS, G.WALL_STREET), Impact.BENEFITS),),
    'banking': (((G.WALL_STREET,), Impact.BENEFITS),),
    'crypto': (((G.WALL_STREET,), Impact.BENEFITS),),

    # Education
    'student loan': (((G.STUDENTS,), Impact.BENEFITS),),
    'pell grant': (((G.STUDENTS, G.LOW_INCOME), Impact.BENEFITS),),
    'education': (((G.STUDENTS,), Impact.BENEFITS),),

    # Social programs
    'social security': (((G.SENIORS,), Impact.BENEFITS),),
    'snap': (((G.LOW_INCOME,), Impact.BENEFITS),),
    'food': (((G.LOW_INCOME,), Impact.BENEFITS),),
    'housing': (((G.LOW_INCOME, G.MIDDLE_CLASS), Impact.BENEFITS),),

    # Budget/Spending
    'appropriation': (((G.GENERAL_PUBLIC,), Impact.MIXED),),
    'budget': (((G.GENERAL_PUBLIC,), Impact.MIXED),),
    'spending': (((G.GENERAL_PUBLIC,), Impact.MIXED),),
    'rescind': (((G.GENERAL_PUBLIC,), Impact.MIXED),),
})

PRO_PUBLIC_GROUPS: FrozenSet[BeneficiaryGroup] = frozenset({
    G.MIDDLE_CLASS, G.WORKING_CLASS, G.LOW_INCOME, G.WORKERS, G.CONSUMERS,
    G.ENVIRONMENT, G.GENERAL_PUBLIC, G.SENIORS, G.STUDENTS, G.VETERANS,
    G.IMMIGRANTS,
})

ANTI_PUBLIC_GROUPS: FrozenSet[BeneficiaryGroup] = frozenset({
    G.CORPORATIONS, G.WEALTHY, G.WALL_STREET, G.FOSSIL_FUEL_INDUSTRY,
})

GROUP_LABELS: Mapping[BeneficiaryGroup, str] = MappingProxyType({
    G.CORPORATIONS: 'Corporations',
    G.WEALTHY: 'Wealthy Individuals',
    G.MIDDLE_CLASS: 'Middle Class',
    G.WORKING_CLASS: 'Working Class',
    G.LOW_INCOME: 'Low Income Families',
    G.WORKERS: 'Workers & Unions',
    G.CONSUMERS: 'Consumers',
    G.ENVIRONMENT: 'Environment',
    G.MILITARY_DEFENSE: 'Military & Defense',
    G.HEALTHCARE_INDUSTRY: 'Healthcare Industry',
    G.TECH_INDUSTRY: 'Tech Industry',
    G.FOSSIL_FUEL_INDUSTRY: 'Fossil Fuel Industry',
    G.WALL_STREET: 'Wall Street',
    G.SMALL_BUSINESS: 'Small Business',
    G.FARMERS: 'Farmers',
    G.SENIORS: 'Seniors',
    G.STUDENTS: 'Students',
    G.VETERANS: 'Veterans',
    G.IMMIGRANTS: 'Immigrants',
    G.GENERAL_PUBLIC: 'General Public',
})


def get_group_label(group: BeneficiaryGroup) -> str:
    """Display label for a beneficiary group."""
    return GROUP_LABELS[BeneficiaryGroup(group)]


def match_beneficiaries(text: str, patterns: Optional[Mapping] = None) -> List[BeneficiaryImpact]:
    """
    Scan lower-cased text against a keyword table.

    Args:
        text: Combined legislative text
        patterns: Keyword table (default BENEFIT_PATTERNS)

    Returns:
        BeneficiaryImpacts in table order, unique by (group, impact)
    """
    search_text = (text or '').lower()
    impacts: List[BeneficiaryImpact] = []
    seen = set()

    for pattern, effects in (patterns or BENEFIT_PATTERNS).items():
        if pattern not in search_text:
            continue
        for groups, impact in effects:
            for group in groups:
                key = (group, impact)
                if key in seen:
                    continue
                seen.add(key)
                impacts.append(BeneficiaryImpact(
                    group=group,
                    impact=impact,
                    confidence=Confidence.MEDIUM,
                    reason=f'Contains "{pattern}" language',
                ))

    return impacts


def derive_public_sentiment(
    impacts: List[BeneficiaryImpact],
    no_signal: PublicSentiment = PublicSentiment.UNKNOWN,
) -> PublicSentiment:
    """
    Roll (group, impact) pairs up into a public-sentiment label.

    Pro-public groups benefiting and anti-public groups harmed are positive
    signals; the reverse are negative signals. 'mixed' impacts carry no signal.

    Args:
        impacts: Classifier output
        no_signal: Label returned when there are no signals at all

    Returns:
        positive / negative / mixed, or `no_signal`
    """
    positive = 0
    negative = 0

    for impact in impacts:
        if impact.group in PRO_PUBLIC_GROUPS:
            if impact.impact == Impact.BENEFITS:
                positive += 1
            elif impact.impact == Impact.HARMS:
                negative += 1
        elif impact.group in ANTI_PUBLIC_GROUPS:
            if impact.impact == Impact.BENEFITS:
                negative += 1
            elif impact.impact == Impact.HARMS:
                positive += 1

    if positive > negative:
        return PublicSentiment.POSITIVE
    if negative > positive:
        return PublicSentiment.NEGATIVE
    if positive > 0:
        return PublicSentiment.MIXED
    return PublicSentiment(no_signal)


def classify_legislation(
    identifier: str,
    title: str,
    description: str,
    default_to_general_public: bool = False,
    no_signal_sentiment: Optional[PublicSentiment] = None,
    patterns: Optional[Mapping] = None,
) -> ClassificationResult:
    """
    Classify who is helped or harmed by a piece of legislation.

    Args:
        identifier: Bill, vote or promise identifier
        title: Title text
        description: Description text
        default_to_general_public: Emit a single general_public/mixed entry
            when no keyword matches (vote-enrichment mode)
        no_signal_sentiment: Sentiment when there are no signals; defaults to
            'mixed' in vote-enrichment mode and 'unknown' otherwise
        patterns: Keyword table (default BENEFIT_PATTERNS)

    Returns:
        ClassificationResult with de-duplicated beneficiaries and sentiment
    """
    search_text = f"{identifier or ''} {title or ''} {description or ''}"
    impacts = match_beneficiaries(search_text, patterns)

    if not impacts and default_to_general_public:
        impacts = [BeneficiaryImpact(
            group=G.GENERAL_PUBLIC,
            impact=Impact.MIXED,
            confidence=Confidence.LOW,
            reason='No specific beneficiary language found',
        )]

    if no_signal_sentiment is None:
        no_signal_sentiment = PublicSentiment.MIXED if default_to_general_public else PublicSentiment.UNKNOWN

    sentiment = derive_public_sentiment(impacts, no_signal=no_signal_sentiment)
    logger.debug(f"Classified '{identifier}': {len(impacts)} impacts, sentiment={sentiment.value}")

    return ClassificationResult(
        summary=description or title or '',
        beneficiaries=impacts,
        public_sentiment=sentiment,
    )


def analyze_legislation(identifier: str, title: str, description: str) -> ClassificationResult:
    """Legislation-summary mode: unmatched text stays empty/'unknown'."""
    return classify_legislation(identifier, title, description, default_to_general_public=False)


def analyze_vote_beneficiaries(identifier: str, title: str, description: str) -> ClassificationResult:
    """Key-vote mode: KEY_VOTE_PATTERNS, unmatched text defaults to general_public/mixed."""
    return classify_legislation(
        identifier, title, description,
        default_to_general_public=True,
        patterns=KEY_VOTE_PATTERNS,
    )


def _sentiment_to_benefit(sentiment: PublicSentiment) -> PublicBenefit:
    if sentiment == PublicSentiment.UNKNOWN:
        return PublicBenefit.MIXED
    return PublicBenefit(sentiment.value)


def derive_public_benefit(identifier: str, title: str, description: str) -> PublicBenefit:
    """Public-benefit polarity for a key vote (never 'unknown')."""
    return _sentiment_to_benefit(analyze_vote_beneficiaries(identifier, title, description).public_sentiment)


def analyze_vote_impact(
    voted_yea: bool,
    classification: ClassificationResult,
) -> Dict[str, List[BeneficiaryGroup]]:
    """
    Groups helped and harmed by a single Yea or Nay vote.

    A Yea supports the legislation, so 'benefits' groups are helped and
    'harms' groups are harmed; a Nay reverses both. 'mixed' impacts are
    left out.

    Returns:
        Dict with 'helped_groups' and 'harmed_groups'
    """
    helped: List[BeneficiaryGroup] = []
    harmed: List[BeneficiaryGroup] = []

    for impact in classification.beneficiaries:
        if impact.impact == Impact.BENEFITS:
            (helped if voted_yea else harmed).append(impact.group)
        elif impact.impact == Impact.HARMS:
            (harmed if voted_yea else helped).append(impact.group)

    return {'helped_groups': helped, 'harmed_groups': harmed}


def enrich_key_vote(record) -> KeyVote:
    """
    Fill in the derived fields of a key vote.

    Resolves a missing category from the title/description, derives
    publicBenefit when the record does not carry one and attaches the
    general-public-mode beneficiary list. The input is never modified.

    Args:
        record: KeyVote or raw key-vote dict

    Returns:
        New KeyVote with category, public_benefit and beneficiaries set
    """
    vote = record if isinstance(record, KeyVote) else KeyVote.model_validate(record)

    classification = analyze_vote_beneficiaries(vote.bill or vote.id, vote.title, vote.description)

    updates = {'beneficiaries': classification.beneficiaries}
    if not vote.category:
        updates['category'] = resolve_primary_category(vote.title, vote.description)
    if vote.public_benefit is None:
        updates['public_benefit'] = _sentiment_to_benefit(classification.public_sentiment)

    logger.debug(f"Enriched key vote {vote.id}: category={updates.get('category', vote.category)}")
    return vote.model_copy(update=updates)
