#!/usr/bin/env python3
"""
Print the weighted-average cost financial summary for a date range.

Reads stock history from the stock_history table and prints the summary
as JSON (camelCase keys, costs as strings).

Usage:
    python3 scripts/wac_summary.py --from 2024-01-01 --to 2024-01-31 [options]

Examples:
    # All suppliers, local SQLite file
    python3 scripts/wac_summary.py --db-url sqlite:///inventory.db \\
        --from 2024-01-01 --to 2024-01-31

    # One supplier, custom valuation config
    python3 scripts/wac_summary.py --from 2024-01-01 --to 2024-03-31 \\
        --supplier ACME --config my_valuation.yaml
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///inventory.db"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Weighted-average cost summary over stock history.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--from",
        dest="from_date",
        required=True,
        type=date.fromisoformat,
        help="First day of the window, inclusive (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--to",
        dest="to_date",
        required=True,
        type=date.fromisoformat,
        help="Last day of the window, inclusive (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--supplier",
        default=None,
        help="Restrict to one supplier (case-insensitive).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Valuation config YAML (default: bundled default set).",
    )
    parser.add_argument(
        "--db-url",
        default=DB_URL,
        help=f"Database URL (default: {DB_URL!r}).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Emit structured logs to stderr.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from inventory_config import get_active_config
    from inventory_kernel.db.engine import get_session, init_engine_from_url
    from inventory_kernel.exceptions import InventoryKernelError
    from inventory_kernel.logging_config import configure_logging
    from inventory_kernel.selectors import StockEventSelector
    from inventory_services import FinancialAnalyticsService

    if args.verbose:
        configure_logging(level=logging.DEBUG)
    else:
        logging.disable(logging.CRITICAL)

    try:
        config = get_active_config(args.config)
    except (OSError, InventoryKernelError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        return 1

    try:
        init_engine_from_url(args.db_url)
    except Exception as e:
        print(f"ERROR: Database init failed: {e}", file=sys.stderr)
        return 1

    session = get_session()
    try:
        service = FinancialAnalyticsService(StockEventSelector(session), config=config)
        summary = service.get_financial_summary_wac(
            args.from_date, args.to_date, supplier_id=args.supplier,
        )
    except InventoryKernelError as e:
        print(f"ERROR [{e.code}]: {e}", file=sys.stderr)
        return 2
    finally:
        session.close()

    print(json.dumps(summary.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
