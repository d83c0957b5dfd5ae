#!/usr/bin/env python3
"""
scripts/check_cluster_percent_healthy.py — Enumerate a cluster's hosts via the
Livestatus API in every partition and check how many are healthy.

Usage:
    python3 scripts/check_cluster_percent_healthy.py -C web -w 96 -c 90
    check-cluster-percent-healthy --cluster web --warning 96 --critical 90 -v

Exit codes: 0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN.
"""

from __future__ import annotations

import pathlib
import sys

# Add project root to path so config and check modules are importable
_ROOT = pathlib.Path(__file__).parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from scripts.checks import cluster  # noqa: E402
from scripts.checks.cli import CheckArgumentParser, emit, settings_or_exit  # noqa: E402


def build_parser() -> CheckArgumentParser:
    parser = CheckArgumentParser(
        description="Check the percent of healthy hosts in a cluster via Livestatus",
    )
    parser.add_argument("-C", "--cluster", required=True, help="[REQUIRED] The cluster name to check")
    parser.add_argument(
        "-c", "--critical", required=True, type=float, help="[REQUIRED] The critical threshold"
    )
    parser.add_argument(
        "-w", "--warning", required=True, type=float, help="[REQUIRED] The warning threshold"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="report each partition's outcome on stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = settings_or_exit(args.env_file)
    result = cluster.run_check(
        cfg, args.cluster, args.warning, args.critical, verbose=args.verbose
    )
    return emit(result)


if __name__ == "__main__":
    sys.exit(main())
