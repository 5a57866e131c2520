# portsweep/utils.py
import ipaddress
import socket
import logging
from typing import Optional, Union

from .ports import DEFAULT_RANGE, FULL_RANGE, PortRange

logger = logging.getLogger(__name__)


def validate_ip(ip: str) -> bool:
    """Validates if a string is a valid IP address."""
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False


def validate_port(port: Union[int, str]) -> bool:
    """Validates if an integer is a valid port number (1-65535)."""
    try:
        port_num = int(port)
        return 0 < port_num < 65536
    except (ValueError, TypeError):
        return False


def resolve_target(target_str: Optional[str]) -> str:
    """
    Resolves a hostname or IP literal to a single IP address string.

    IP literals are returned unchanged. Hostnames go through getaddrinfo and the
    first IPv4 answer is preferred, falling back to the first answer of any family.

    Raises:
        ValueError: if the target is empty or cannot be resolved.
    """
    target_str = (target_str or "").strip()
    if not target_str:
        raise ValueError("No target specified.")

    if validate_ip(target_str):
        return str(ipaddress.ip_address(target_str))

    try:
        addr_info = socket.getaddrinfo(target_str, None, proto=socket.IPPROTO_TCP)
    except socket.gaierror as e:
        raise ValueError(f"Could not resolve target '{target_str}': {e}") from e

    resolved_ips = [info[4][0] for info in addr_info if validate_ip(info[4][0])]
    if not resolved_ips:
        raise ValueError(f"Hostname '{target_str}' resolved but no valid IP addresses found.")

    ipv4 = [ip for ip in resolved_ips if ipaddress.ip_address(ip).version == 4]
    address = (ipv4 or resolved_ips)[0]
    logger.debug(f"Resolved {target_str} to {address}")
    return address


def parse_port_range(port_str: Optional[str] = None, full: bool = False) -> PortRange:
    """
    Parses a port specification ('80' or '1-1024') into a PortRange.

    Without a specification, returns the full range (1-65535) when ``full`` is set
    and the default range (1-1024) otherwise.

    Raises:
        ValueError: for malformed or out-of-bounds specifications.
    """
    if not port_str:
        return FULL_RANGE if full else DEFAULT_RANGE

    comp = port_str.strip()
    try:
        if '-' in comp:
            start_str, end_str = comp.split('-', 1)
            start, end = int(start_str), int(end_str)
        else:
            start = end = int(comp)
    except ValueError as e:
        raise ValueError(f"Error parsing port specification '{port_str}': {e}") from e

    if not (validate_port(start) and validate_port(end)):
        raise ValueError(f"Invalid port specification '{port_str}'. Ports must be between 1 and 65535.")
    return PortRange(start, end)
