"""
Print the daily top-N paths report for an access-log export as JSON.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from pathtraffic.core.config import settings
from pathtraffic.core.errors import PathTrafficError
from pathtraffic.core.logging import get_logger, setup_logging
from pathtraffic.services.log_pipeline import aggregate_to_dicts
from pathtraffic.services.orchestrator import build_options, read_lines

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathtraffic",
        description="Aggregate access-log lines into per-day top paths by request count.",
    )
    parser.add_argument("--file", dest="file", required=True, help="Log export path, or '-' for stdin.")
    parser.add_argument("--from", dest="date_from", required=True, help="First UTC day (YYYY-MM-DD).")
    parser.add_argument("--to", dest="date_to", required=True, help="Last UTC day (YYYY-MM-DD).")
    parser.add_argument(
        "--tz",
        dest="tz",
        default=None,
        help=f"Report zone: jst (UTC+9) or ict (UTC+7). Default: {settings.default_tz}.",
    )
    parser.add_argument(
        "--top",
        dest="top",
        default=None,
        help=f"Paths kept per day. Default: {settings.default_top}.",
    )
    parser.add_argument("--log-level", dest="log_level", default=None, help="Override PATHTRAFFIC_LOG_LEVEL.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        options = build_options(args.date_from, args.date_to, tz=args.tz, top=args.top)
        lines = read_lines(args.file)
        result = aggregate_to_dicts(lines, options)
    except PathTrafficError as e:
        print(str(e), file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Aggregation failed: {e}", exc_info=True)
        return 1

    sys.stdout.write(json.dumps(result, indent=2, ensure_ascii=False) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
