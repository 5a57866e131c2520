import json

import pytest

from portsweep.output_formatter import format_report, format_result, save_json
from portsweep.scanner import ScanResult
from portsweep.services import SERVICE_TABLE, lookup_service


def test_known_and_unknown_service_lines():
    assert format_result(ScanResult("10.0.0.1", 22, "SSH/SCP")) == "22: SSH/SCP (open)"
    assert format_result(ScanResult("10.0.0.1", 9999)) == "9999: unknown (open)"


def test_report_is_sorted_by_port():
    results = [ScanResult("h", 443, "HTTPS"), ScanResult("h", 22, "SSH/SCP"), ScanResult("h", 8081)]
    assert format_report(results) == [
        "22: SSH/SCP (open)",
        "443: HTTPS (open)",
        "8081: unknown (open)",
    ]


def test_empty_report():
    assert format_report([]) == []


def test_save_json(tmp_path):
    path = tmp_path / "scan.json"
    save_json([ScanResult("10.0.0.1", 22, "SSH/SCP"), ScanResult("10.0.0.1", 9999)], str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == [
        {"host": "10.0.0.1", "port": 22, "service": "SSH/SCP", "status": "open", "protocol": "tcp"},
        {"host": "10.0.0.1", "port": 9999, "service": "unknown", "status": "open", "protocol": "tcp"},
    ]


def test_service_table_lookup():
    assert lookup_service(22) == "SSH/SCP"
    assert lookup_service(80) == "HTTP"
    assert lookup_service(9999) is None


def test_service_table_is_read_only():
    with pytest.raises(TypeError):
        SERVICE_TABLE[9999] = "custom"
