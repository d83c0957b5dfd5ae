"""
scripts/checks/cluster.py — Percent-of-healthy-hosts check for a cluster.

Every partition's Livestatus API is asked for the hosts in the
``<cluster>_role`` host group. Partitions are independent: one that fails
or returns no hosts is skipped, and the rest are merged into a single
HealthSnapshot. All thresholds are expressed against the percentage of
HEALTHY hosts so the output reads positively (5% down == 95% healthy).
"""

from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, ValidationError

from scripts.checks import CheckResult, Verdict
from scripts.checks import livestatus

if TYPE_CHECKING:
    from config.settings import Settings

CHECK_NAME = "cluster percent healthy"
HOST_COLUMNS = ["name", "state"]


class NoDataError(ValueError):
    """No hosts were found, so there is nothing to take a percentage of."""


class HostRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    state: int

    @property
    def healthy(self) -> bool:
        return self.state <= 0


@dataclass(frozen=True)
class HealthSnapshot:
    nodes: tuple[str, ...] = ()
    unhealthy_nodes: tuple[str, ...] = ()

    @classmethod
    def from_records(cls, records: list[HostRecord]) -> HealthSnapshot:
        return cls(
            nodes=tuple(r.name for r in records),
            unhealthy_nodes=tuple(r.name for r in records if not r.healthy),
        )

    def merge(self, other: HealthSnapshot) -> HealthSnapshot:
        return HealthSnapshot(
            nodes=self.nodes + other.nodes,
            unhealthy_nodes=self.unhealthy_nodes + other.unhealthy_nodes,
        )

    @property
    def total_count(self) -> int:
        return len(self.nodes)

    @property
    def unhealthy_count(self) -> int:
        return len(self.unhealthy_nodes)

    @property
    def percent_healthy(self) -> float:
        return percent_healthy(self.unhealthy_count, self.total_count)


@dataclass(frozen=True)
class PartitionResult:
    partition: str
    uri: str
    snapshot: HealthSnapshot = HealthSnapshot()
    error: str | None = None

    @property
    def contributed(self) -> bool:
        return self.error is None and self.snapshot.total_count > 0

    def describe(self) -> str:
        if self.error is not None:
            return f"  [WARN] partition {self.partition}: skipped ({self.error})"
        if not self.contributed:
            return f"  [WARN] partition {self.partition}: skipped (no hosts)"
        return (
            f"  [OK] partition {self.partition}: {self.snapshot.total_count} host(s), "
            f"{self.snapshot.unhealthy_count} unhealthy"
        )


def percent_healthy(unhealthy: int, total: int) -> float:
    """100.0 minus the unhealthy fraction, rounded to 2 places BEFORE scaling.

    Rounding the fraction first (not the percent) is the long-standing
    behaviour of this check: 1 of 7 unhealthy is scaled from 0.14, not from
    14.29. Ties round half up (1 of 8 gives 0.13).
    """
    if total == 0:
        raise NoDataError("no hosts found")
    fraction = Decimal(repr(unhealthy / total)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return 100.0 - (float(fraction) * 100)


def evaluate_thresholds(percent: float, warning: float, critical: float) -> Verdict:
    """Lower is worse; a percent equal to a threshold does not breach it."""
    if critical > percent:
        return Verdict.CRITICAL
    if warning > percent:
        return Verdict.WARNING
    return Verdict.OK


def partition_uri(cfg: Settings, cluster: str, partition: str) -> str:
    return livestatus.hosts_uri(
        cfg.partition_url(partition), f"groups >= {cluster}_role", HOST_COLUMNS
    )


def query_partition(cfg: Settings, cluster: str, partition: str) -> PartitionResult:
    uri = partition_uri(cfg, cluster, partition)
    try:
        rows = livestatus.fetch_with(cfg, uri)
        records = [HostRecord.model_validate(row) for row in rows]
    except livestatus.LivestatusError as e:
        return PartitionResult(partition, uri, error=f"{type(e).__name__}: {e.reason}")
    except ValidationError as e:
        return PartitionResult(
            partition, uri, error=f"malformed host record ({e.error_count()} error(s))"
        )
    return PartitionResult(partition, uri, snapshot=HealthSnapshot.from_records(records))


def collect(cfg: Settings, cluster: str) -> list[PartitionResult]:
    """Query every configured partition, returning results in partition order."""
    partitions = cfg.partition_ids
    workers = min(cfg.LIVESTATUS_MAX_WORKERS, len(partitions))
    if workers == 1:
        return [query_partition(cfg, cluster, p) for p in partitions]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(query_partition, cfg, cluster, p) for p in partitions]
        return [future.result() for future in futures]


def aggregate(results: list[PartitionResult]) -> HealthSnapshot:
    snapshot = HealthSnapshot()
    for result in results:
        if result.contributed:
            snapshot = snapshot.merge(result.snapshot)
    return snapshot


def format_report(
    cluster: str,
    snapshot: HealthSnapshot,
    verdict: Verdict,
    warning: float,
    critical: float,
) -> str:
    percent = snapshot.percent_healthy
    prefix = f"The percent of healthy hosts in the '{cluster}' cluster ({percent}%)"
    if verdict == Verdict.OK:
        return (
            f"{prefix} is within threshold (Warning: {warning}% Critical: {critical}%)\n"
            f"NODES: {', '.join(sorted(snapshot.nodes))}"
        )
    if verdict == Verdict.CRITICAL:
        breached = f"critical threshold of {critical}%"
    else:
        breached = f"warning threshold of {warning}%"
    return (
        f"{prefix} is less than the {breached}!\n"
        "Unhealthy hosts:\n" + "\n".join(sorted(snapshot.unhealthy_nodes))
    )


def run_check(
    cfg: Settings,
    cluster: str,
    warning: float,
    critical: float,
    verbose: bool = False,
) -> CheckResult:
    results = collect(cfg, cluster)
    if verbose:
        for result in results:
            print(result.describe(), file=sys.stderr)

    snapshot = aggregate(results)
    try:
        percent = snapshot.percent_healthy
    except NoDataError:
        answered = sum(1 for r in results if r.error is None)
        return CheckResult(
            CHECK_NAME,
            Verdict.UNKNOWN,
            f"No hosts found for the '{cluster}' cluster in any partition "
            f"({answered} of {len(results)} partition(s) answered)! "
            "Can't determine the percent of healthy hosts.",
        )

    verdict = evaluate_thresholds(percent, warning, critical)
    return CheckResult(
        CHECK_NAME, verdict, format_report(cluster, snapshot, verdict, warning, critical)
    )
