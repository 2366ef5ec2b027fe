"""
Accountability scoring engine.

Pure functions over in-memory records:
- resolve_categories: topic/description -> subject categories
- classify_legislation: who is helped or harmed by legislation
- calculate_member_alignment: stated positions vs. key votes
- score_trades: stock-trade risk flags and per-official summary
- calculate_multi_factor_grade / calculate_legacy_grade: letter grades
"""

from accountability.lib.scoring.alignment import calculate_member_alignment, is_vote_aligned
from accountability.lib.scoring.beneficiary_classifier import (
    analyze_legislation,
    analyze_vote_beneficiaries,
    analyze_vote_impact,
    classify_legislation,
    enrich_key_vote,
)
from accountability.lib.scoring.category_resolver import resolve_categories
from accountability.lib.scoring.exceptions import WeightConfigurationError
from accountability.lib.scoring.grading import calculate_multi_factor_grade
from accountability.lib.scoring.legacy_grading import calculate_legacy_grade
from accountability.lib.scoring.pipeline import grade_members, score_member
from accountability.lib.scoring.trade_risk import score_trades

__all__ = [
    'analyze_legislation',
    'analyze_vote_beneficiaries',
    'analyze_vote_impact',
    'calculate_legacy_grade',
    'calculate_member_alignment',
    'calculate_multi_factor_grade',
    'classify_legislation',
    'enrich_key_vote',
    'grade_members',
    'is_vote_aligned',
    'resolve_categories',
    'score_member',
    'score_trades',
    'WeightConfigurationError',
]
