"""
Unit tests for the beneficiary classifier.
"""

import pytest

from accountability.lib.scoring.beneficiary_classifier import (
    ANTI_PUBLIC_GROUPS,
    BENEFIT_PATTERNS,
    KEY_VOTE_PATTERNS,
    PRO_PUBLIC_GROUPS,
    analyze_legislation,
    analyze_vote_beneficiaries,
    analyze_vote_impact,
    classify_legislation,
    derive_public_benefit,
    enrich_key_vote,
    get_group_label,
)
from accountability.lib.scoring.models import (
    BeneficiaryGroup,
    Confidence,
    Impact,
    KeyVote,
    PublicBenefit,
    PublicSentiment,
)


def pairs(result):
    return [(b.group.value, b.impact.value) for b in result.beneficiaries]


class TestClassifyLegislation:

    def test_tax_cut_benefits_wealthy_and_corporations(self):
        result = analyze_legislation('H.R. 1', 'Tax Cuts and Jobs Act', '')

        assert pairs(result) == [
            ('wealthy', 'benefits'),
            ('corporations', 'benefits'),
            ('general_public', 'mixed'),
        ]
        assert result.public_sentiment == PublicSentiment.NEGATIVE
        assert all(b.confidence == Confidence.MEDIUM for b in result.beneficiaries)
        assert result.beneficiaries[0].reason == 'Contains "tax cut" language'

    def test_dedupes_by_group_and_impact_not_keyword(self):
        result = analyze_legislation('S. 10', 'Medicare drug pricing', '')

        # seniors/benefits is declared by both keywords but emitted once;
        # healthcare_industry appears twice with different impacts
        assert pairs(result) == [
            ('seniors', 'benefits'),
            ('healthcare_industry', 'benefits'),
            ('consumers', 'benefits'),
            ('healthcare_industry', 'harms'),
        ]
        assert result.public_sentiment == PublicSentiment.POSITIVE

    def test_no_duplicate_pairs_for_keyword_heavy_text(self):
        text = ' '.join(BENEFIT_PATTERNS)
        result = analyze_legislation('X', text, text)

        keys = pairs(result)
        assert len(keys) == len(set(keys))

    def test_matching_is_case_insensitive(self):
        result = analyze_legislation('H.R. 9', 'CLIMATE ACTION NOW', '')

        assert ('environment', 'benefits') in pairs(result)
        assert result.public_sentiment == PublicSentiment.POSITIVE

    def test_tied_signals_are_mixed(self):
        result = analyze_legislation('S. 3', 'Union right to work act', '')

        assert result.public_sentiment == PublicSentiment.MIXED

    def test_immigrants_are_pro_public(self):
        assert BeneficiaryGroup.IMMIGRANTS in PRO_PUBLIC_GROUPS
        assert analyze_legislation('S. 4', 'DACA protections', '').public_sentiment == PublicSentiment.POSITIVE
        assert analyze_legislation('H.R. 4', 'Border wall funding', '').public_sentiment == PublicSentiment.NEGATIVE

    def test_group_sets_are_disjoint(self):
        assert not PRO_PUBLIC_GROUPS & ANTI_PUBLIC_GROUPS

    def test_summary_prefers_description(self):
        assert analyze_legislation('S. 1', 'Title', 'Longer description').summary == 'Longer description'
        assert analyze_legislation('S. 1', 'Title', '').summary == 'Title'


class TestUnmatchedText:

    def test_leave_empty_mode(self):
        result = analyze_legislation('S. 5', 'Naming a post office', '')

        assert result.beneficiaries == []
        assert result.public_sentiment == PublicSentiment.UNKNOWN

    def test_general_public_mode(self):
        result = analyze_vote_beneficiaries('S. 5', 'Naming a post office', '')

        assert len(result.beneficiaries) == 1
        entry = result.beneficiaries[0]
        assert entry.group == BeneficiaryGroup.GENERAL_PUBLIC
        assert entry.impact == Impact.MIXED
        assert entry.confidence == Confidence.LOW
        assert result.public_sentiment == PublicSentiment.MIXED

    def test_no_signal_sentiment_is_a_parameter(self):
        result = classify_legislation(
            'S. 5', 'Naming a post office', '',
            default_to_general_public=False,
            no_signal_sentiment=PublicSentiment.MIXED,
        )

        assert result.beneficiaries == []
        assert result.public_sentiment == PublicSentiment.MIXED

    def test_none_fields_are_tolerated(self):
        result = classify_legislation(None, None, None)
        assert result.public_sentiment == PublicSentiment.UNKNOWN


class TestVoteImpact:

    @pytest.fixture
    def drug_pricing(self):
        return analyze_legislation('S. 2', 'Drug pricing reform', '')

    def test_yea_helps_beneficiaries(self, drug_pricing):
        impact = analyze_vote_impact(True, drug_pricing)

        assert impact['helped_groups'] == [BeneficiaryGroup.CONSUMERS, BeneficiaryGroup.SENIORS]
        assert impact['harmed_groups'] == [BeneficiaryGroup.HEALTHCARE_INDUSTRY]

    def test_nay_reverses(self, drug_pricing):
        impact = analyze_vote_impact(False, drug_pricing)

        assert impact['helped_groups'] == [BeneficiaryGroup.HEALTHCARE_INDUSTRY]
        assert impact['harmed_groups'] == [BeneficiaryGroup.CONSUMERS, BeneficiaryGroup.SENIORS]

    def test_mixed_impacts_are_ignored(self):
        default = analyze_vote_beneficiaries('S. 5', 'Naming a post office', '')
        impact = analyze_vote_impact(True, default)

        assert impact == {'helped_groups': [], 'harmed_groups': []}


class TestKeyVoteEnrichment:

    def test_derive_public_benefit(self):
        assert derive_public_benefit('S. 5', 'Naming a post office', '') == PublicBenefit.MIXED
        assert derive_public_benefit('S. 4', 'DACA protections', '') == PublicBenefit.POSITIVE
        assert derive_public_benefit('H.R. 1', 'Tax Cuts and Jobs Act', '') == PublicBenefit.NEGATIVE

    def test_fills_missing_category_and_polarity(self):
        record = {
            'id': 'v1',
            'bill': 'H.R. 5',
            'title': 'Lower Medicare drug pricing',
            'votes': {'A000001': 'Yea'},
        }

        vote = enrich_key_vote(record)

        assert vote.category == 'Healthcare'
        assert vote.public_benefit == PublicBenefit.POSITIVE
        assert vote.beneficiaries
        # Input untouched
        assert 'category' not in record
        assert 'beneficiaries' not in record

    def test_keeps_existing_category_and_polarity(self):
        original = KeyVote(
            id='v2',
            title='Medicare expansion',
            category='Economy & Taxes',
            public_benefit='negative',
        )

        vote = enrich_key_vote(original)

        assert vote.category == 'Economy & Taxes'
        assert vote.public_benefit == PublicBenefit.NEGATIVE
        assert original.beneficiaries == []
        assert vote is not original


class TestKeyVoteTable:

    @pytest.mark.parametrize('title,expected', [
        ('Education funding act', PublicBenefit.POSITIVE),
        ('Veteran care act', PublicBenefit.POSITIVE),
        ('Protect the Dreamers act', PublicBenefit.POSITIVE),
        ('Offshore oil leasing', PublicBenefit.NEGATIVE),
        ('Tax relief for families', PublicBenefit.NEGATIVE),
        ('Budget resolution', PublicBenefit.MIXED),
    ])
    def test_derive_public_benefit(self, title, expected):
        assert derive_public_benefit('H.R. 1', title, '') == expected

    def test_table_order_and_dedupe(self):
        result = analyze_vote_beneficiaries('H.R. 3', 'Prescription drug pricing', '')

        # 'drug pricing' precedes 'prescription'; both declare the same pairs
        assert pairs(result) == [('consumers', 'benefits'), ('seniors', 'benefits')]
        assert result.public_sentiment == PublicSentiment.POSITIVE

    def test_mixed_only_match_is_not_the_default_entry(self):
        result = analyze_vote_beneficiaries('S. 8', 'Rescind unobligated funds', '')

        assert pairs(result) == [('general_public', 'mixed')]
        assert result.beneficiaries[0].confidence == Confidence.MEDIUM
        assert result.public_sentiment == PublicSentiment.MIXED

    def test_no_duplicate_pairs_for_keyword_heavy_text(self):
        text = ' '.join(KEY_VOTE_PATTERNS)
        keys = pairs(analyze_vote_beneficiaries('X', text, text))

        assert len(keys) == len(set(keys))

    def test_legislation_mode_keeps_its_own_table(self):
        assert analyze_legislation('H.R. 1', 'Education funding act', '').beneficiaries == []


def test_group_labels():
    assert get_group_label(BeneficiaryGroup.LOW_INCOME) == 'Low Income Families'
    assert get_group_label('workers') == 'Workers & Unions'
    assert all(get_group_label(group) for group in BeneficiaryGroup)


def test_classification_is_repeatable():
    for classify in (analyze_legislation, analyze_vote_beneficiaries):
        first = classify('H.R. 1', 'Tax Cuts and Jobs Act', 'Medicare drug pricing')
        second = classify('H.R. 1', 'Tax Cuts and Jobs Act', 'Medicare drug pricing')
        assert first.model_dump() == second.model_dump()
