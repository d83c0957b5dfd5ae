#!/usr/bin/env python3
"""
scripts/set_host_state_by_service_state.py — Set a host's state based on the
worst state of all of its services, as reported by the Livestatus API.

Usage:
    python3 scripts/set_host_state_by_service_state.py -h web-cluster
    set-host-state-by-service-state --hostname web-cluster

Exit codes: 0 OK, 2 CRITICAL (any CRITICAL or WARNING service), 3 UNKNOWN.
"""

from __future__ import annotations

import pathlib
import sys

# Add project root to path so config and check modules are importable
_ROOT = pathlib.Path(__file__).parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from scripts.checks import host  # noqa: E402
from scripts.checks.cli import CheckArgumentParser, emit, settings_or_exit  # noqa: E402


def build_parser() -> CheckArgumentParser:
    parser = CheckArgumentParser(
        description="Set a host's state from the worst state of its services",
    )
    parser.add_argument("-h", "--hostname", required=True, help="[REQUIRED] The hostname to check")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = settings_or_exit(args.env_file)
    return emit(host.run_check(cfg, args.hostname))


if __name__ == "__main__":
    sys.exit(main())
