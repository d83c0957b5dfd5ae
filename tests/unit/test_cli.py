"""Unit tests for the check entry points (argument handling and exit codes)."""

from __future__ import annotations

import pytest

from scripts import check_cluster_percent_healthy as cluster_cli
from scripts import set_host_state_by_service_state as host_cli
from scripts.checks import livestatus


@pytest.fixture
def env_file(tmp_path, clean_env):
    path = tmp_path / "livestatus.env"
    path.write_text("LIVESTATUS_MAX_WORKERS=1\n", encoding="utf-8")
    return str(path)


def _serve(monkeypatch, rows) -> list[str]:
    seen: list[str] = []

    def fake_fetch(uri, **kwargs):  # noqa: ANN001, ANN003
        seen.append(uri)
        return rows

    monkeypatch.setattr(livestatus, "fetch", fake_fetch)
    return seen


def test_cluster_cli_exit_code_matches_verdict(monkeypatch, capsys, env_file):
    _serve(monkeypatch, [{"name": "web01", "state": 0}, {"name": "web02", "state": 2}])
    code = cluster_cli.main(["-C", "web", "-w", "96", "-c", "90", "--env-file", env_file])
    out = capsys.readouterr().out
    assert code == 2
    assert "critical threshold of 90.0%" in out
    assert out.endswith("Unhealthy hosts:\nweb02\nweb02\nweb02\nweb02\n")


def test_cluster_cli_long_flags(monkeypatch, capsys, env_file):
    _serve(monkeypatch, [{"name": "web01", "state": 0}])
    code = cluster_cli.main(
        ["--cluster", "web", "--warning", "96.5", "--critical", "90", "--env-file", env_file]
    )
    assert code == 0
    assert "(Warning: 96.5% Critical: 90.0%)" in capsys.readouterr().out


def test_cluster_cli_env_file_limits_partitions(monkeypatch, tmp_path, clean_env):
    path = tmp_path / "livestatus.env"
    path.write_text("LIVESTATUS_PARTITIONS=1,3\nLIVESTATUS_MAX_WORKERS=1\n", encoding="utf-8")
    seen = _serve(monkeypatch, [{"name": "web01", "state": 0}])
    cluster_cli.main(["-C", "web", "-w", "96", "-c", "90", "--env-file", str(path)])
    assert [uri.split(".")[0] for uri in seen] == ["https://nagios1", "https://nagios3"]


def test_cluster_cli_missing_threshold_exits_unknown(capsys, env_file):
    with pytest.raises(SystemExit) as exc:
        cluster_cli.main(["-C", "web", "-w", "96", "--env-file", env_file])
    assert exc.value.code == 3
    captured = capsys.readouterr()
    assert captured.out.startswith("UNKNOWN: ")
    assert "--critical" in captured.out
    assert "usage:" in captured.err


def test_cluster_cli_non_numeric_threshold_exits_unknown(env_file):
    with pytest.raises(SystemExit) as exc:
        cluster_cli.main(["-C", "web", "-w", "lots", "-c", "90", "--env-file", env_file])
    assert exc.value.code == 3


def test_invalid_configuration_exits_unknown(tmp_path, capsys, clean_env):
    path = tmp_path / "livestatus.env"
    path.write_text("LIVESTATUS_TIMEOUT_SECONDS=0\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cluster_cli.main(["-C", "web", "-w", "96", "-c", "90", "--env-file", str(path)])
    assert exc.value.code == 3
    captured = capsys.readouterr()
    assert captured.out.startswith("UNKNOWN: invalid Livestatus configuration")
    assert captured.err == ""


def test_host_cli_short_h_is_hostname(monkeypatch, capsys, env_file):
    seen = _serve(
        monkeypatch,
        [
            {
                "num_services": 3,
                "num_services_ok": 3,
                "num_services_crit": 0,
                "num_services_warn": 0,
                "num_services_unknown": 0,
            }
        ],
    )
    code = host_cli.main(["-h", "web-vip", "--env-file", env_file])
    assert code == 0
    assert capsys.readouterr().out == "All of this host's services are OK.\n"
    assert "name%20%3D%20web-vip" in seen[0]


def test_host_cli_empty_response_exits_unknown(monkeypatch, capsys, env_file):
    _serve(monkeypatch, [])
    code = host_cli.main(["--hostname", "ghost", "--env-file", env_file])
    assert code == 3
    assert "*empty*" in capsys.readouterr().out


def test_host_cli_requires_hostname(env_file):
    with pytest.raises(SystemExit) as exc:
        host_cli.main(["--env-file", env_file])
    assert exc.value.code == 3
