"""
Shared batch plumbing for the grading jobs.

Turns the upstream JSON snapshots into grade_members() inputs and the
resulting scorecards into the aggregate table and trading-summary document.
Used by the Lambda handler (S3) and the local CLI (filesystem).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from accountability.lib.scoring.models import MemberScorecard
from accountability.lib.scoring.pipeline import grade_members
from accountability.lib.scoring.trade_risk import top_suspicious_traders

logger = logging.getLogger(__name__)

SNAPSHOT_FILES = {
    'members': 'members.json',
    'key_votes': 'key-votes.json',
    'positions': 'positions.json',
    'trades': 'trades-by-member.json',
    'finance': 'finance.json',
    'disclosures': 'disclosures.json',
}

AGGREGATE_KEY = 'agg_member_accountability/latest.parquet'
TRADING_SUMMARY_KEY = 'agg_member_accountability/trading-summaries.json'


def _member_id(member: Dict[str, Any]) -> Optional[str]:
    return member.get('bioguide_id') or member.get('id')


def positions_by_member(raw: Any) -> Dict[str, List]:
    """Accept either {id: [positions]} or [{bioguide_id, positions}]."""
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    return {
        _member_id(entry): entry.get('positions', [])
        for entry in raw
        if _member_id(entry)
    }


def load_snapshots(reader: Callable[[str], Any]) -> Dict[str, Any]:
    """
    Read every snapshot through `reader`.

    Args:
        reader: Callable taking a snapshot file name and returning parsed
            JSON, or None when the snapshot is missing

    Returns:
        Dict keyed like SNAPSHOT_FILES; missing snapshots become empty
    """
    snapshots = {}
    for name, filename in SNAPSHOT_FILES.items():
        data = reader(filename)
        if data is None:
            logger.warning(f"Snapshot {filename} missing, using empty input")
        snapshots[name] = data
    return snapshots


def run_grading(
    snapshots: Dict[str, Any],
    weights=None,
    as_of_year: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, MemberScorecard]:
    """Grade every member listed in the members snapshot."""
    members = snapshots.get('members') or []
    official_ids = [_member_id(m) for m in members if _member_id(m)]

    return grade_members(
        official_ids,
        key_votes=snapshots.get('key_votes') or [],
        positions_by_member=positions_by_member(snapshots.get('positions')),
        trades_by_member=snapshots.get('trades') or {},
        finance_by_member=snapshots.get('finance') or {},
        disclosures_by_member=snapshots.get('disclosures') or {},
        weights=weights,
        as_of_year=as_of_year,
        max_workers=max_workers,
    )


def scorecards_to_dataframe(scorecards: Dict[str, MemberScorecard], members: Optional[List[Dict]] = None) -> pd.DataFrame:
    """One row per member, sorted by official id."""
    lookup = {_member_id(m): m for m in members or [] if _member_id(m)}
    computed_at = datetime.now(timezone.utc).isoformat()

    rows = []
    for official_id in sorted(scorecards):
        card = scorecards[official_id]
        member = lookup.get(official_id, {})
        summary = card.trade_report.summary
        breakdown = card.grade.breakdown
        rows.append({
            'bioguide_id': official_id,
            'full_name': member.get('full_name'),
            'party': member.get('party'),
            'state': member.get('state'),
            'chamber': member.get('chamber'),
            'overall_score': card.grade.overall,
            'letter_grade': card.grade.letter.value,
            'voting_score': breakdown.voting_score,
            'donor_score': breakdown.donor_score,
            'stock_score': breakdown.stock_score,
            'disclosure_score': breakdown.disclosure_score,
            'alignment_score': card.alignment.overall_alignment_score,
            'positions_with_votes': card.alignment.positions_with_votes,
            'total_trades': summary.total_trades,
            'flagged_trades': summary.flagged_trades,
            'total_risk_score': summary.total_risk_score,
            'suspicion_level': summary.overall_suspicion_level.value if summary.overall_suspicion_level else None,
            'computed_at': computed_at,
        })

    df = pd.DataFrame(rows)
    if not df.empty:
        df['alignment_score'] = df['alignment_score'].astype('Int64')
    return df


def trading_summary_document(scorecards: Dict[str, MemberScorecard]) -> Dict[str, Any]:
    """Per-member trading summaries plus the top suspicious traders."""
    summaries = {oid: card.trade_report.summary for oid, card in scorecards.items()}
    top = top_suspicious_traders(summaries)
    return {
        'members': {oid: summary.model_dump(mode='json') for oid, summary in sorted(summaries.items())},
        'top_suspicious_traders': [
            {
                'bioguide_id': oid,
                'total_risk_score': summary.total_risk_score,
                'flagged_trades': summary.flagged_trades,
                'total_trades': summary.total_trades,
            }
            for oid, summary in top
        ],
    }
