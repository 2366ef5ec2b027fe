"""
Per-official scoring pipeline.

Classify -> Align -> Score -> Grade for one official, and a thread-pool map
over many officials. Raw upstream records are validated first; records with
error-severity issues are logged and dropped, as are records the models
reject; records with warnings are kept.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from accountability.lib.scoring.alignment import calculate_member_alignment
from accountability.lib.scoring.beneficiary_classifier import enrich_key_vote
from accountability.lib.scoring.grading import calculate_multi_factor_grade, resolve_weights
from accountability.lib.scoring.models import (
    DisclosureFiling,
    FinanceData,
    KeyVote,
    MemberScorecard,
    Position,
    StockTrade,
)
from accountability.lib.scoring.positions import dedupe_positions
from accountability.lib.scoring.trade_risk import score_trades
from accountability.lib.validators import Validator, has_errors
from accountability.lib.validators.trade_validator import TradeValidator
from accountability.lib.validators.vote_validator import VoteValidator

logger = logging.getLogger(__name__)


def filter_valid_records(records: List[Dict[str, Any]], validator: Validator, label: str) -> List[Dict[str, Any]]:
    """
    Drop records the validator reports errors for.

    Args:
        records: Raw upstream dicts
        validator: Validator to run on each record
        label: Record kind for log messages

    Returns:
        Records with no error-severity issues
    """
    kept = []
    for i, record in enumerate(records or []):
        issues = validator.validate(record)
        if has_errors(issues):
            codes = ', '.join(issue['code'] for issue in issues if issue['severity'] == 'error')
            logger.warning(f"Skipping {label} record {i}: {codes}")
            continue
        for issue in issues:
            logger.debug(f"{label} record {i}: {issue['code']} - {issue['message']}")
        kept.append(record)
    return kept


def parse_records(records: List[Dict[str, Any]], model: Type[BaseModel], label: str) -> List[BaseModel]:
    """Parse raw dicts into `model`, logging and dropping any the model rejects."""
    parsed = []
    for i, record in enumerate(records):
        try:
            parsed.append(model.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Skipping {label} record {i}: {e.error_count()} validation errors")
    return parsed


def prepare_key_votes(raw_votes: List) -> List[KeyVote]:
    """Validate raw key votes and enrich them with category, polarity and beneficiaries."""
    votes = [v for v in raw_votes or [] if isinstance(v, KeyVote)]
    raw = [v for v in raw_votes or [] if not isinstance(v, KeyVote)]
    votes.extend(parse_records(filter_valid_records(raw, VoteValidator(), 'key vote'), KeyVote, 'key vote'))
    return [enrich_key_vote(v) for v in votes]


def prepare_trades(raw_trades: List) -> List[StockTrade]:
    """Validate raw trade dicts and parse them; StockTrade models pass through."""
    raw = [t for t in raw_trades or [] if isinstance(t, dict)]
    models = [t for t in raw_trades or [] if isinstance(t, StockTrade)]
    return models + parse_records(filter_valid_records(raw, TradeValidator(), 'trade'), StockTrade, 'trade')


def prepare_disclosures(raw_disclosures: Optional[List]) -> Optional[List[DisclosureFiling]]:
    """Parse disclosure filings; None (no data) stays None."""
    if raw_disclosures is None:
        return None
    filings = [d for d in raw_disclosures if isinstance(d, DisclosureFiling)]
    raw = [d for d in raw_disclosures if not isinstance(d, DisclosureFiling)]
    return filings + parse_records(raw, DisclosureFiling, 'disclosure')


def prepare_finance(raw_finance, official_id: str = '') -> Optional[FinanceData]:
    """Parse the finance summary; an unparseable one is treated as unavailable."""
    if raw_finance is None or isinstance(raw_finance, FinanceData):
        return raw_finance
    try:
        return FinanceData.model_validate(raw_finance)
    except ValidationError as e:
        logger.warning(f"Ignoring finance data for {official_id}: {e.error_count()} validation errors")
        return None


def prepare_positions(raw_positions: List, official_id: str = '') -> List[Position]:
    """Parse positions, skipping ones with an inconsistent stance/intensity, then de-duplicate by topic."""
    positions: List[Position] = []
    for record in raw_positions or []:
        if isinstance(record, Position):
            positions.append(record)
            continue
        try:
            positions.append(Position.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Skipping position for {official_id}: {e.error_count()} validation errors")
    return dedupe_positions(positions)


def score_member(
    official_id: str,
    positions: Optional[List] = None,
    key_votes: Optional[List[KeyVote]] = None,
    trades: Optional[List] = None,
    finance: Optional[Dict] = None,
    disclosures: Optional[List] = None,
    weights=None,
    as_of_year: Optional[int] = None,
) -> MemberScorecard:
    """
    Build the full scorecard for one official.

    Args:
        official_id: Official id (bioguide id)
        positions: Stated positions (models or raw dicts)
        key_votes: Enriched key votes (see prepare_key_votes)
        trades: Disclosed trades (models or raw dicts)
        finance: Finance summary, or None when unavailable
        disclosures: Disclosure filings, or None when unavailable
        weights: Optional grade weights
        as_of_year: Reference year for disclosure recency

    Returns:
        MemberScorecard
    """
    key_votes = key_votes or []

    alignment = calculate_member_alignment(prepare_positions(positions, official_id), key_votes, official_id)
    trade_report = score_trades(prepare_trades(trades))

    grade = calculate_multi_factor_grade(
        official_id,
        key_votes=key_votes,
        finance=prepare_finance(finance, official_id),
        trading=trade_report.summary,
        disclosures=prepare_disclosures(disclosures),
        weights=weights,
        as_of_year=as_of_year,
    )

    return MemberScorecard(
        official_id=official_id,
        alignment=alignment,
        trade_report=trade_report,
        grade=grade,
    )


def grade_members(
    official_ids: List[str],
    key_votes: Optional[List] = None,
    positions_by_member: Optional[Dict[str, List]] = None,
    trades_by_member: Optional[Dict[str, List]] = None,
    finance_by_member: Optional[Dict[str, Dict]] = None,
    disclosures_by_member: Optional[Dict[str, List]] = None,
    weights=None,
    as_of_year: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, MemberScorecard]:
    """
    Score many officials in parallel.

    Key votes are validated and enriched once and shared read-only by every
    worker. Officials are independent, so completion order is not preserved;
    results are keyed by official id.

    Raises:
        WeightConfigurationError: If the weights do not sum to 1.0 (checked
            before any official is scored)
    """
    weights = resolve_weights(weights)
    enriched_votes = prepare_key_votes(key_votes)
    positions_by_member = positions_by_member or {}
    trades_by_member = trades_by_member or {}
    finance_by_member = finance_by_member or {}
    disclosures_by_member = disclosures_by_member or {}

    logger.info(f"Grading {len(official_ids)} members against {len(enriched_votes)} key votes")

    scorecards: Dict[str, MemberScorecard] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(
                score_member,
                official_id,
                positions=positions_by_member.get(official_id),
                key_votes=enriched_votes,
                trades=trades_by_member.get(official_id),
                finance=finance_by_member.get(official_id),
                disclosures=disclosures_by_member.get(official_id),
                weights=weights,
                as_of_year=as_of_year,
            ): official_id
            for official_id in official_ids
        }

        for future in as_completed(futures):
            official_id = futures[future]
            scorecards[official_id] = future.result()

    logger.info(f"Graded {len(scorecards)} members")
    return scorecards
