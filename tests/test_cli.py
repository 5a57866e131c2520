import json
import logging

import pytest
from typer.testing import CliRunner

import main
from portsweep import scanner as scanner_module
from portsweep import utils

runner = CliRunner()


@pytest.fixture
def fake_probe(monkeypatch, make_probe):
    probe = make_probe(open_ports={9999, 22})
    monkeypatch.setattr(scanner_module, "tcp_connect_probe", probe)
    return probe


def test_scan_prints_sorted_report(fake_probe):
    result = runner.invoke(main.app, ["scan", "127.0.0.1", "-p", "1-10000"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["22: SSH/SCP (open)", "9999: unknown (open)"]
    assert len(fake_probe.calls) == 10000


def test_default_range_is_1_to_1024(fake_probe):
    result = runner.invoke(main.app, ["scan", "127.0.0.1"])

    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["22: SSH/SCP (open)"]
    assert sorted(fake_probe.calls) == list(range(1, 1025))


def test_no_open_ports_prints_nothing(monkeypatch, make_probe):
    monkeypatch.setattr(scanner_module, "tcp_connect_probe", make_probe())
    result = runner.invoke(main.app, ["scan", "127.0.0.1", "-p", "1-50"])

    assert result.exit_code == 0
    assert result.stdout == ""


def test_unresolvable_host_exits_before_scanning(monkeypatch, make_probe, caplog):
    probe = make_probe()
    monkeypatch.setattr(scanner_module, "tcp_connect_probe", probe)

    def fail(target):
        raise ValueError(f"Could not resolve target '{target}'")

    monkeypatch.setattr(utils, "resolve_target", fail)
    with caplog.at_level(logging.ERROR):
        result = runner.invoke(main.app, ["scan", "nope.invalid"])

    assert result.exit_code == 1
    assert result.stdout == ""
    assert not probe.calls
    assert "Could not resolve target 'nope.invalid'" in caplog.text


def test_missing_host_is_usage_error():
    result = runner.invoke(main.app, ["scan"])
    assert result.exit_code != 0


@pytest.mark.parametrize("args", [
    ["-p", "0-10"],
    ["-t", "0"],
    ["-t", "inf"],
    ["-t", "nan"],
    ["-c", "65536"],
    ["-c", "0"],
])
def test_invalid_options_exit_non_zero(fake_probe, args):
    result = runner.invoke(main.app, ["scan", "127.0.0.1", *args])

    assert result.exit_code == 1
    assert not fake_probe.calls


def test_json_output(fake_probe, tmp_path):
    path = tmp_path / "out.json"
    result = runner.invoke(main.app, ["scan", "127.0.0.1", "-p", "20-30", "--output-json", str(path)])

    assert result.exit_code == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert [(d["port"], d["service"]) for d in data] == [(22, "SSH/SCP")]


def test_scan_failure_exits_non_zero(monkeypatch, make_probe, caplog):
    monkeypatch.setattr(scanner_module, "tcp_connect_probe", make_probe(fail_on=5))
    with caplog.at_level(logging.CRITICAL):
        result = runner.invoke(main.app, ["scan", "127.0.0.1", "-p", "1-20"])

    assert result.exit_code == 1
    assert result.stdout == ""
    critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
    assert len(critical) == 1
    assert "port 5" in critical[0].getMessage()


def test_debug_with_verbose_keeps_scanner_debug_lines(fake_probe, caplog):
    caplog.set_level(logging.DEBUG)
    result = runner.invoke(main.app, ["scan", "127.0.0.1", "-p", "20-25", "-v", "--debug"])

    assert result.exit_code == 0
    assert logging.getLogger("portsweep.scanner").getEffectiveLevel() == logging.DEBUG
    assert any(r.name == "portsweep.scanner" and r.levelno == logging.DEBUG for r in caplog.records)
