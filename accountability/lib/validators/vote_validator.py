"""
Key Vote Validator.
"""

from typing import Dict, List, Any

from . import Validator

VALID_VOTE_POSITIONS = {'Yea', 'Nay', 'Not Voting', 'Present'}
VALID_PUBLIC_BENEFIT = {'positive', 'negative', 'mixed'}


class VoteValidator(Validator):
    """Checks one key-vote record before enrichment and scoring."""

    def validate(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        issues = []

        vote_id = data.get('id')
        if not vote_id:
            issues.append({
                'code': 'MISSING_VOTE_ID',
                'message': "Key vote has no id",
                'severity': 'error',
                'field': 'id'
            })
        elif not isinstance(vote_id, str):
            issues.append({
                'code': 'INVALID_VOTE_ID',
                'message': f"Key vote id must be a string, got {type(vote_id).__name__}",
                'severity': 'error',
                'field': 'id'
            })

        votes = data.get('votes', {})
        if not isinstance(votes, dict):
            issues.append({
                'code': 'INVALID_VOTE_ROSTER',
                'message': f"Vote roster must be a mapping, got {type(votes).__name__}",
                'severity': 'error',
                'field': 'votes'
            })
            votes = {}

        for official_id, position in votes.items():
            if not isinstance(position, str):
                issues.append({
                    'code': 'INVALID_VOTE_POSITION',
                    'message': f"Vote for {official_id} is not a string: {position}",
                    'severity': 'error',
                    'field': f"votes[{official_id}]"
                })
            elif position not in VALID_VOTE_POSITIONS:
                issues.append({
                    'code': 'UNKNOWN_VOTE_POSITION',
                    'message': f"Unknown vote '{position}' for {official_id}",
                    'severity': 'warning',
                    'field': f"votes[{official_id}]"
                })

        for count_field in ('yea_count', 'nay_count'):
            count = data.get(count_field)
            if count is not None and (not isinstance(count, int) or count < 0):
                issues.append({
                    'code': 'INVALID_VOTE_COUNT',
                    'message': f"Invalid {count_field}: {count}",
                    'severity': 'error',
                    'field': count_field
                })

        public_benefit = data.get('publicBenefit', data.get('public_benefit'))
        if public_benefit is None and data.get('proPublicBenefit', data.get('pro_public_benefit')) is None:
            issues.append({
                'code': 'MISSING_PUBLIC_BENEFIT',
                'message': "Public benefit will be derived from the vote text",
                'severity': 'warning',
                'field': 'publicBenefit'
            })
        elif public_benefit is not None and public_benefit not in VALID_PUBLIC_BENEFIT:
            issues.append({
                'code': 'INVALID_PUBLIC_BENEFIT',
                'message': f"Unknown public benefit: {public_benefit}",
                'severity': 'error',
                'field': 'publicBenefit'
            })

        if not data.get('category'):
            issues.append({
                'code': 'MISSING_CATEGORY',
                'message': "Category will be resolved from the vote text",
                'severity': 'warning',
                'field': 'category'
            })

        return issues
