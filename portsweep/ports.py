# portsweep/ports.py
from dataclasses import dataclass
from typing import Iterator

MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class PortRange:
    """Inclusive range of TCP ports, ``start`` through ``end``."""
    start: int
    end: int

    def __post_init__(self):
        if not (MIN_PORT <= self.start <= self.end <= MAX_PORT):
            raise ValueError(
                f"Invalid port range {self.start}-{self.end}. "
                f"Ports must be between {MIN_PORT} and {MAX_PORT}, and start <= end."
            )

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


DEFAULT_RANGE = PortRange(1, 1024)
FULL_RANGE = PortRange(MIN_PORT, MAX_PORT)
