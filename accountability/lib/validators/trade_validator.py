"""
Trade Validator.
"""

from datetime import date, datetime
from typing import Dict, List, Any, Optional

from . import Validator


def _parse_date(value) -> Optional[date]:
    """Parse a YYYY-MM-DD (or ISO timestamp) value; raises ValueError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()


class TradeValidator(Validator):
    """Checks one disclosed stock trade before it is scored."""

    def validate(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        issues = []

        ticker = data.get('ticker')
        if not ticker:
            issues.append({
                'code': 'MISSING_TICKER',
                'message': "Trade has no ticker",
                'severity': 'error',
                'field': 'ticker'
            })
        elif not isinstance(ticker, str):
            issues.append({
                'code': 'INVALID_TICKER',
                'message': f"Ticker must be a string, got {type(ticker).__name__}",
                'severity': 'error',
                'field': 'ticker'
            })

        transaction = data.get('transaction')
        if not isinstance(transaction, str) or not transaction.strip().lower().startswith(('sale', 'purchase')):
            issues.append({
                'code': 'INVALID_TRANSACTION',
                'message': f"Unknown transaction type: {transaction}",
                'severity': 'error',
                'field': 'transaction'
            })

        size_key = 'tradeSizeUsd' if 'tradeSizeUsd' in data else 'trade_size_usd'
        size = data.get(size_key)
        if size_key in data and size is None:
            issues.append({
                'code': 'NULL_TRADE_SIZE',
                'message': "Trade size is null",
                'severity': 'error',
                'field': 'tradeSizeUsd'
            })
        elif size is not None:
            if not isinstance(size, (int, float)) or isinstance(size, bool):
                issues.append({
                    'code': 'INVALID_TRADE_SIZE',
                    'message': f"Non-numeric trade size: {size}",
                    'severity': 'error',
                    'field': 'tradeSizeUsd'
                })
            elif size < 0:
                issues.append({
                    'code': 'NEGATIVE_TRADE_SIZE',
                    'message': f"Negative trade size: {size}",
                    'severity': 'error',
                    'field': 'tradeSizeUsd'
                })

        excess_return = data.get('excessReturn', data.get('excess_return'))
        if excess_return is not None and (not isinstance(excess_return, (int, float)) or isinstance(excess_return, bool)):
            issues.append({
                'code': 'INVALID_EXCESS_RETURN',
                'message': f"Non-numeric excess return: {excess_return}",
                'severity': 'error',
                'field': 'excessReturn'
            })

        traded_raw = data.get('tradedDate', data.get('traded_date'))
        filed_raw = data.get('filedDate', data.get('filed_date'))
        traded = None

        if not traded_raw:
            issues.append({
                'code': 'MISSING_TRADE_DATE',
                'message': "Trade has no traded date",
                'severity': 'error',
                'field': 'tradedDate'
            })
        else:
            try:
                traded = _parse_date(traded_raw)
                if traded > datetime.now().date():
                    issues.append({
                        'code': 'FUTURE_TRADE_DATE',
                        'message': f"Trade date {traded} is in the future",
                        'severity': 'error',
                        'field': 'tradedDate'
                    })
            except ValueError:
                issues.append({
                    'code': 'INVALID_DATE_FORMAT',
                    'message': f"Invalid date format: {traded_raw}",
                    'severity': 'error',
                    'field': 'tradedDate'
                })

        if not filed_raw:
            # Late-disclosure check is skipped for this trade
            issues.append({
                'code': 'MISSING_FILED_DATE',
                'message': "Trade has no filed date",
                'severity': 'warning',
                'field': 'filedDate'
            })
        else:
            try:
                filed = _parse_date(filed_raw)
                if traded and filed < traded:
                    issues.append({
                        'code': 'FILED_BEFORE_TRADE',
                        'message': f"Filed date {filed} is before trade date {traded}",
                        'severity': 'error',
                        'field': 'filedDate'
                    })
            except ValueError:
                issues.append({
                    'code': 'INVALID_DATE_FORMAT',
                    'message': f"Invalid date format: {filed_raw}",
                    'severity': 'error',
                    'field': 'filedDate'
                })

        return issues
