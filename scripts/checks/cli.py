"""
scripts/checks/cli.py — Shared command-line plumbing for the check scripts.

Exit code 2 means CRITICAL to the scheduler, so usage and configuration
errors exit UNKNOWN (3) instead of argparse's default. Their status line goes
to stdout like every check result; only the usage hint goes to stderr.
"""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn

from pydantic import ValidationError

from config.settings import Settings, load_settings
from scripts.checks import CheckResult, Verdict


class CheckArgumentParser(argparse.ArgumentParser):
    def __init__(self, **kwargs):
        # -h is taken by --hostname on the host check
        kwargs.setdefault("add_help", False)
        super().__init__(**kwargs)
        self.add_argument("--help", action="help", help="show this help message and exit")
        self.add_argument(
            "--env-file",
            default=".env",
            help="env file with LIVESTATUS_* settings (default: .env; os.environ wins)",
        )

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"UNKNOWN: {self.prog}: {message}")
        self.exit(int(Verdict.UNKNOWN))


def settings_or_exit(env_file: str) -> Settings:
    try:
        return load_settings(env_file)
    except (ValidationError, ValueError) as e:
        print(f"UNKNOWN: invalid Livestatus configuration: {e}")
        sys.exit(int(Verdict.UNKNOWN))


def emit(result: CheckResult) -> int:
    """Print the result for the scheduler and return its exit code."""
    print(result)
    return result.exit_code
