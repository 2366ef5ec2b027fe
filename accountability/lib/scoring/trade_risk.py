"""
Stock-trade risk scoring.

Each disclosed trade is checked against five independent heuristics:

1. unusual_return     abs(excess return) > 10% (high above 20%)
2. large_trade        size > $50,000 (high above $100,000)
3. rapid_trading      another trade in the same ticker within 7 days
4. suspicious_timing  sold before a >5% drop / bought before a >5% gain
5. late_disclosure    filed more than 30 days after trading (high past the
                      45-day STOCK Act deadline)

Flags add up to a per-trade risk score (high=3, medium=2, low=1, capped at
10), and an official's trades roll up into a TradingSummary.
"""

import logging
import math
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from accountability.lib.scoring.models import (
    FlagType,
    ScoredTrade,
    Severity,
    StockTrade,
    SuspicionLevel,
    TradeFlag,
    TradeRiskReport,
    TradingSummary,
    TransactionType,
)
from accountability.lib.scoring.rounding import to_fixed

logger = logging.getLogger(__name__)

# Thresholds for suspicious activity
SUSPICIOUS_RETURN_THRESHOLD = 10.0
HIGH_RETURN_THRESHOLD = 20.0
LARGE_TRADE_THRESHOLD = 50000
VERY_LARGE_TRADE_THRESHOLD = 100000
RAPID_TRADING_DAYS = 7
TIMING_RETURN_THRESHOLD = 5.0
LATE_FILING_DAYS = 30
STOCK_ACT_DEADLINE_DAYS = 45

SEVERITY_POINTS = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}
MAX_RISK_SCORE = 10

HIGH_SUSPICION_RISK = 50
MEDIUM_SUSPICION_RISK = 20

SECONDS_PER_DAY = 60 * 60 * 24


def _days_between(later, earlier) -> float:
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


# ============================================================================
# Heuristics
# ============================================================================


def check_unusual_return(trade: StockTrade) -> Optional[TradeFlag]:
    if trade.excess_return is None:
        return None
    magnitude = abs(trade.excess_return)
    if magnitude <= SUSPICIOUS_RETURN_THRESHOLD:
        return None
    direction = 'Gained' if trade.excess_return > 0 else 'Lost'
    return TradeFlag(
        type=FlagType.UNUSUAL_RETURN,
        severity=Severity.HIGH if magnitude > HIGH_RETURN_THRESHOLD else Severity.MEDIUM,
        description=f"{direction} {to_fixed(magnitude, 1):.1f}% excess return",
        return_pct=trade.excess_return,
    )


def check_large_trade(trade: StockTrade) -> Optional[TradeFlag]:
    if trade.trade_size_usd <= LARGE_TRADE_THRESHOLD:
        return None
    return TradeFlag(
        type=FlagType.LARGE_TRADE,
        severity=Severity.HIGH if trade.trade_size_usd > VERY_LARGE_TRADE_THRESHOLD else Severity.MEDIUM,
        description=f"Large {trade.transaction.value.lower()} of ${_format_amount(trade.trade_size_usd)}",
        amount=trade.trade_size_usd,
    )


def check_rapid_trading(index: int, trade: StockTrade, same_ticker: List[Tuple[int, StockTrade]]) -> Optional[TradeFlag]:
    """
    Flag a trade that has at least one other trade in the same ticker within
    RAPID_TRADING_DAYS (inclusive). Direction of the trades is not considered.

    Args:
        index: Position of `trade` in the official's trade list
        trade: Trade being scored
        same_ticker: (index, trade) pairs for every trade in this ticker

    Returns:
        TradeFlag whose trade_count includes the trade itself, or None
    """
    nearby = [
        other for other_index, other in same_ticker
        if other_index != index
        and abs(_days_between(trade.traded_date, other.traded_date)) <= RAPID_TRADING_DAYS
    ]
    if not nearby:
        return None
    count = len(nearby) + 1
    return TradeFlag(
        type=FlagType.RAPID_TRADING,
        severity=Severity.MEDIUM,
        description=f"{count} trades in {trade.ticker} within {RAPID_TRADING_DAYS} days",
        trade_count=count,
    )


def check_suspicious_timing(trade: StockTrade) -> Optional[TradeFlag]:
    if trade.excess_return is None:
        return None
    if trade.transaction == TransactionType.SALE and trade.excess_return < -TIMING_RETURN_THRESHOLD:
        return TradeFlag(
            type=FlagType.SUSPICIOUS_TIMING,
            severity=Severity.HIGH,
            description=f"Sold before {to_fixed(abs(trade.excess_return), 1):.1f}% drop",
            pattern='avoided_loss',
        )
    if trade.transaction == TransactionType.PURCHASE and trade.excess_return > TIMING_RETURN_THRESHOLD:
        return TradeFlag(
            type=FlagType.SUSPICIOUS_TIMING,
            severity=Severity.HIGH,
            description=f"Bought before {to_fixed(trade.excess_return, 1):.1f}% gain",
            pattern='captured_gain',
        )
    return None


def check_late_disclosure(trade: StockTrade) -> Optional[TradeFlag]:
    if trade.filed_date is None:
        return None
    days_to_file = _days_between(trade.filed_date, trade.traded_date)
    if days_to_file <= LATE_FILING_DAYS:
        return None
    whole_days = math.floor(days_to_file)
    return TradeFlag(
        type=FlagType.LATE_DISCLOSURE,
        severity=Severity.HIGH if days_to_file > STOCK_ACT_DEADLINE_DAYS else Severity.MEDIUM,
        description=(
            f"Filed {whole_days} days after trade "
            f"(STOCK Act requires {STOCK_ACT_DEADLINE_DAYS} days)"
        ),
        # Negative between 31 and 45 days
        days_late=whole_days - STOCK_ACT_DEADLINE_DAYS,
    )


def calculate_risk_score(flags: List[TradeFlag]) -> int:
    """Sum of severity points, capped at MAX_RISK_SCORE."""
    score = sum(SEVERITY_POINTS.get(flag.severity, 1) for flag in flags)
    return min(score, MAX_RISK_SCORE)


# ============================================================================
# Per-official scoring
# ============================================================================


def _coerce_trades(trades: List) -> List[StockTrade]:
    return [t if isinstance(t, StockTrade) else StockTrade.model_validate(t) for t in trades]


def suspicion_level(total_risk_score: int) -> SuspicionLevel:
    if total_risk_score > HIGH_SUSPICION_RISK:
        return SuspicionLevel.HIGH
    if total_risk_score > MEDIUM_SUSPICION_RISK:
        return SuspicionLevel.MEDIUM
    return SuspicionLevel.LOW


def summarize_trades(scored: List[ScoredTrade]) -> TradingSummary:
    """
    Roll scored trades up into an official's TradingSummary.

    An empty list gives zero counts, a 0.0 flag rate and a 'low' suspicion
    level. avg_excess_return only covers trades that report a return.
    """
    total = len(scored)
    flagged = sum(1 for s in scored if s.is_flagged)
    total_risk = sum(s.risk_score for s in scored)

    returns = [s.trade.excess_return for s in scored if s.trade.excess_return is not None]
    avg_return = to_fixed(sum(returns) / len(returns), 2) if returns else None

    patterns: Dict[str, int] = {}
    for s in scored:
        for flag in s.flags:
            patterns[flag.type.value] = patterns.get(flag.type.value, 0) + 1

    return TradingSummary(
        total_trades=total,
        flagged_trades=flagged,
        flag_rate=to_fixed(flagged / total * 100, 1) if total else 0.0,
        total_risk_score=total_risk,
        avg_risk_per_trade=to_fixed(total_risk / total, 2) if total else 0.0,
        avg_excess_return=avg_return,
        suspicious_patterns=patterns,
        overall_suspicion_level=suspicion_level(total_risk),
    )


def score_trades(trades: List) -> TradeRiskReport:
    """
    Flag and score one official's trades.

    Args:
        trades: StockTrade models or raw trade dicts, in any order

    Returns:
        TradeRiskReport with one ScoredTrade per input (same order) and the
        official's summary
    """
    trades = _coerce_trades(trades)

    by_ticker: Dict[str, List[Tuple[int, StockTrade]]] = defaultdict(list)
    for index, trade in enumerate(trades):
        by_ticker[trade.ticker].append((index, trade))

    scored: List[ScoredTrade] = []
    for index, trade in enumerate(trades):
        candidates = [
            check_unusual_return(trade),
            check_large_trade(trade),
            check_rapid_trading(index, trade, by_ticker[trade.ticker]),
            check_suspicious_timing(trade),
            check_late_disclosure(trade),
        ]
        flags = [flag for flag in candidates if flag is not None]
        scored.append(ScoredTrade(
            trade=trade,
            flags=flags,
            risk_score=calculate_risk_score(flags) if flags else 0,
        ))

    summary = summarize_trades(scored)
    logger.debug(
        f"Scored {summary.total_trades} trades: {summary.flagged_trades} flagged, "
        f"total risk {summary.total_risk_score}"
    )
    return TradeRiskReport(trades=scored, summary=summary)


# ============================================================================
# Batch helpers
# ============================================================================


def score_trades_by_member(trades_by_member: Dict[str, List]) -> Dict[str, TradeRiskReport]:
    """
    Score every official's trades.

    Args:
        trades_by_member: Official id -> list of trades

    Returns:
        Official id -> TradeRiskReport
    """
    reports: Dict[str, TradeRiskReport] = {}
    total_flagged = 0

    for official_id, trades in trades_by_member.items():
        report = score_trades(trades or [])
        reports[official_id] = report
        total_flagged += report.summary.flagged_trades

    logger.info(f"Analyzed trades for {len(reports)} members, flagged {total_flagged} trades")
    return reports


def top_suspicious_traders(
    summaries: Dict[str, TradingSummary],
    min_risk: int = 10,
    limit: int = 10,
) -> List[Tuple[str, TradingSummary]]:
    """
    Officials with the highest total trading risk.

    Args:
        summaries: Official id -> TradingSummary
        min_risk: Only officials with total risk strictly above this are kept
        limit: Maximum number of officials returned

    Returns:
        (official id, summary) pairs, highest total risk first
    """
    ranked = [
        (official_id, summary) for official_id, summary in summaries.items()
        if summary.total_risk_score > min_risk
    ]
    ranked.sort(key=lambda item: item[1].total_risk_score, reverse=True)
    return ranked[:limit]
