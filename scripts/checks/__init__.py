"""
scripts/checks — Livestatus-backed monitoring checks.

Each check module exposes a run_check(cfg, ...) function that returns a
single CheckResult. The entry-point scripts print it and exit with its
verdict so the monitoring scheduler can act on the code.

Usage:
    from scripts.checks import CheckResult, Verdict
    from scripts.checks.cluster import run_check as cluster_check
"""

from dataclasses import dataclass
from enum import IntEnum


class Verdict(IntEnum):
    """Monitoring plugin states; the value is the process exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class CheckResult:
    name: str
    verdict: Verdict
    message: str

    @property
    def exit_code(self) -> int:
        return int(self.verdict)

    def __str__(self) -> str:
        return self.message
