# portsweep/output_formatter.py
import json
import logging
from dataclasses import asdict
from typing import List

from .scanner import ScanResult

logger = logging.getLogger(__name__)


def format_result(result: ScanResult) -> str:
    """Render one open port as '<port>: <service> (open)'."""
    return f"{result.port}: {result.label} ({result.status})"


def format_report(results: List[ScanResult]) -> List[str]:
    """
    Renders scan results as report lines, one per open port, ascending by port.

    An empty result list gives an empty report.
    """
    return [format_result(r) for r in sorted(results, key=lambda r: r.port)]


def save_json(results: List[ScanResult], filename: str):
    """
    Saves scan results to a JSON file.

    Args:
        results: The ScanResult objects returned by Scanner.scan().
        filename: The name of the JSON file to save to.

    Raises:
        OSError: if the file cannot be written.
    """
    payload = [dict(asdict(r), service=r.label) for r in results]
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=4)
    logger.info(f"Results saved to {filename}")
