# portsweep/services.py
from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN_SERVICE = "unknown"

# Well-known TCP ports and the services usually found behind them.
# Wrapped in a read-only proxy: workers share it without locking.
SERVICE_TABLE: Mapping[int, str] = MappingProxyType({
    20: "FTP data transfer",
    21: "FTP command control",
    22: "SSH/SCP",
    23: "Telnet",
    25: "SMTP",
    53: "DNS",
    67: "DHCP server",
    68: "DHCP client",
    69: "TFTP",
    80: "HTTP",
    88: "Kerberos",
    110: "POP3",
    119: "NNTP",
    123: "NTP",
    135: "Microsoft RPC",
    137: "NetBIOS name service",
    138: "NetBIOS datagram service",
    139: "NetBIOS session service",
    143: "IMAP",
    161: "SNMP",
    162: "SNMP trap",
    179: "BGP",
    194: "IRC",
    389: "LDAP",
    443: "HTTPS",
    445: "SMB",
    465: "SMTPS",
    514: "Syslog",
    515: "LPD",
    587: "SMTP submission",
    631: "IPP",
    636: "LDAPS",
    873: "rsync",
    993: "IMAPS",
    995: "POP3S",
    1433: "Microsoft SQL Server",
    1521: "Oracle database",
    1723: "PPTP",
    2049: "NFS",
    3306: "MySQL",
    3389: "RDP",
    5432: "PostgreSQL",
    5900: "VNC",
    6379: "Redis",
    8080: "HTTP alternate",
    8443: "HTTPS alternate",
    9200: "Elasticsearch",
    11211: "Memcached",
    27017: "MongoDB",
})


def lookup_service(port: int, table: Mapping[int, str] = SERVICE_TABLE) -> Optional[str]:
    """Return the service name registered for ``port``, or None if the table has no entry."""
    return table.get(port)
