#!/usr/bin/env python3
"""
Compute member accountability grades from local snapshots.

Reads the upstream JSON snapshots (members, key votes, positions, trades,
finance, disclosures) from a directory, grades every member and writes:
- agg_member_accountability/latest.parquet
- agg_member_accountability/trading-summaries.json

Usage:
    compute-accountability-grades --input-dir data/ --output-dir out/ --as-of-year 2025
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from accountability.lib import config
from accountability.lib.batch import (
    AGGREGATE_KEY,
    TRADING_SUMMARY_KEY,
    load_snapshots,
    run_grading,
    scorecards_to_dataframe,
    trading_summary_document,
)
from accountability.lib.scoring.trade_risk import top_suspicious_traders

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def make_file_reader(input_dir: Path):
    """Snapshot reader returning None for missing files."""

    def read(filename: str) -> Any:
        path = input_dir / filename
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    return read


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Compute member accountability grades')
    parser.add_argument('--input-dir', type=Path, default=Path('data'),
                        help='Directory holding the JSON snapshots')
    parser.add_argument('--output-dir', type=Path, default=Path('output'),
                        help='Directory to write the aggregate outputs')
    parser.add_argument('--as-of-year', type=int, default=None,
                        help='Reference year for disclosure recency (default: current year)')
    parser.add_argument('--max-workers', type=int, default=None,
                        help='Thread pool size (default: GRADING_MAX_WORKERS or executor default)')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution."""
    args = parse_args(argv)

    logger.info("=" * 80)
    logger.info("Member Accountability Grades Aggregate")
    logger.info("=" * 80)

    if not args.input_dir.is_dir():
        logger.error(f"Input directory not found: {args.input_dir}")
        return 1

    try:
        snapshots = load_snapshots(make_file_reader(args.input_dir))
        scorecards = run_grading(
            snapshots,
            weights=config.get_grade_weights(),
            as_of_year=args.as_of_year,
            max_workers=args.max_workers or config.get_max_workers(),
        )
    except ValueError as e:
        logger.error(f"Grading failed: {e}")
        return 1

    if not scorecards:
        logger.error("No members graded")
        return 1

    parquet_path = args.output_dir / AGGREGATE_KEY
    parquet_path.parent.mkdir(parents=True, exist_ok=True)
    df = scorecards_to_dataframe(scorecards, snapshots.get('members'))
    df.to_parquet(parquet_path, engine='pyarrow', compression='snappy', index=False)
    logger.info(f"✓ Wrote {len(df)} members to {parquet_path}")

    summary_path = args.output_dir / TRADING_SUMMARY_KEY
    with open(summary_path, 'w', encoding='utf-8') as f:
        json.dump(trading_summary_document(scorecards), f, indent=2)
    logger.info(f"✓ Wrote trading summaries to {summary_path}")

    letter_counts = df['letter_grade'].value_counts().sort_index()
    for letter, count in letter_counts.items():
        logger.info(f"  {letter}: {count}")

    top = top_suspicious_traders({oid: card.trade_report.summary for oid, card in scorecards.items()})
    if top:
        logger.info("Top suspicious traders:")
        for official_id, summary in top:
            logger.info(
                f"  {official_id}: Risk Score {summary.total_risk_score}, "
                f"{summary.flagged_trades}/{summary.total_trades} flagged"
            )

    return 0


if __name__ == '__main__':
    sys.exit(main())
