"""
scripts/checks/host.py — Set a host's state from the worst state of its services.

Useful for a cluster's virtual host: its state then signals that the
cluster has one or more service problems.

Nagios maps plugin exit codes to UP or DOWN for host objects, and WARNING
can mean either depending on use_aggressive_host_checking. Services in a
WARNING state therefore exit CRITICAL (host DOWN); the message still says
WARNING so the operator has the real context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from pydantic import BaseModel, ConfigDict, ValidationError

from scripts.checks import CheckResult, Verdict
from scripts.checks import livestatus

if TYPE_CHECKING:
    from config.settings import Settings

CHECK_NAME = "host state by service state"
SERVICE_STATE_COLUMNS = [
    "num_services",
    "num_services_crit",
    "num_services_ok",
    "num_services_unknown",
    "num_services_warn",
]


class ServiceStateSummary(BaseModel):
    """Service counts for one host. The counts are not cross-checked.

    Only the total and OK counts are needed to call a host OK; the others
    may be missing or null until a non-OK rule has to read them.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    num_services: int
    num_services_ok: int
    num_services_crit: int | None = None
    num_services_warn: int | None = None
    num_services_unknown: int | None = None

    @property
    def missing_counts(self) -> list[str]:
        return [
            name
            for name in ("num_services_crit", "num_services_warn", "num_services_unknown")
            if getattr(self, name) is None
        ]


@dataclass(frozen=True)
class ServiceRule:
    applies: Callable[[ServiceStateSummary], bool]
    verdict: Verdict
    describe: Callable[[ServiceStateSummary], str]


def _services_in_state(count: int, state: str) -> str:
    if count > 1:
        return f"There are {count} services in {state} state!"
    return f"There is {count} service in {state} state!"


# First match wins.
SERVICE_RULES: tuple[ServiceRule, ...] = (
    ServiceRule(
        lambda s: s.num_services == s.num_services_ok,
        Verdict.OK,
        lambda s: "All of this host's services are OK.",
    ),
    ServiceRule(
        lambda s: bool(s.missing_counts),
        Verdict.UNKNOWN,
        lambda s: f"Livestatus returned no value for {', '.join(s.missing_counts)}! "
        "Can't determine the state of this host's services.",
    ),
    ServiceRule(
        lambda s: s.num_services_unknown > 0,
        Verdict.UNKNOWN,
        lambda s: _services_in_state(s.num_services_unknown, "an UNKNOWN"),
    ),
    ServiceRule(
        lambda s: s.num_services_crit > 0,
        Verdict.CRITICAL,
        lambda s: _services_in_state(s.num_services_crit, "a CRITICAL"),
    ),
    ServiceRule(
        lambda s: s.num_services_warn > 0,
        Verdict.CRITICAL,  # host DOWN, see module docstring
        lambda s: _services_in_state(s.num_services_warn, "a WARNING"),
    ),
)


def evaluate_services(
    summary: ServiceStateSummary,
    uri: str,
    rules: tuple[ServiceRule, ...] = SERVICE_RULES,
) -> CheckResult:
    for rule in rules:
        if rule.applies(summary):
            return CheckResult(CHECK_NAME, rule.verdict, rule.describe(summary))
    return CheckResult(
        CHECK_NAME,
        Verdict.UNKNOWN,
        "Can't determine the state of this host's services! "
        f"Something is really wrong with this check... Requested {uri}",
    )


def host_uri(cfg: Settings, hostname: str) -> str:
    return livestatus.hosts_uri(cfg.LIVESTATUS_URL, f"name = {hostname}", SERVICE_STATE_COLUMNS)


def run_check(cfg: Settings, hostname: str) -> CheckResult:
    uri = host_uri(cfg, hostname)
    try:
        rows = livestatus.fetch_with(cfg, uri)
    except livestatus.LivestatusError as e:
        return CheckResult(
            CHECK_NAME,
            Verdict.UNKNOWN,
            f"Received no usable response from Livestatus ({e.reason})! "
            f"Can't determine the state of this host's services. Requested {uri}",
        )

    if not rows:
        return CheckResult(
            CHECK_NAME,
            Verdict.UNKNOWN,
            "Received *empty* response from Livestatus! "
            f"Can't determine the state of this host's services. Requested {uri}",
        )

    try:
        summary = ServiceStateSummary.model_validate(rows[0])
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        return CheckResult(
            CHECK_NAME,
            Verdict.UNKNOWN,
            f"Livestatus returned unusable service counts ({missing})! "
            f"Can't determine the state of this host's services. Requested {uri}",
        )

    return evaluate_services(summary, uri)
