# portsweep/scanner.py
from typing import Awaitable, Callable, List, Mapping, Optional
import asyncio
from dataclasses import dataclass
import logging
import math

from .ports import DEFAULT_RANGE, PortRange
from .services import SERVICE_TABLE, UNKNOWN_SERVICE, lookup_service
from .tcp_connect import DEFAULT_TIMEOUT, tcp_connect_probe

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 100
DEFAULT_QUEUE_SIZE = 100
# The largest possible range holds this many ports
MAX_WORKERS = 65535

# Marks a closed queue. Never a valid port.
_CLOSED = None

ProbeFunc = Callable[[str, int, float], Awaitable[bool]]


@dataclass
class ScanResult:
    host: str
    port: int
    service: Optional[str] = None
    status: str = "open"
    protocol: str = "tcp"

    @property
    def label(self) -> str:
        return self.service or UNKNOWN_SERVICE


class Scanner:
    """
    Concurrent TCP connect scanner.

    A feeder task publishes every port of the range to a bounded work queue,
    a fixed pool of worker tasks probes them, and a collector drains the
    open ports once every worker has finished.
    """
    def __init__(
        self,
        target: str,
        port_range: PortRange = DEFAULT_RANGE,
        timeout: float = DEFAULT_TIMEOUT,
        workers: int = DEFAULT_WORKERS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        probe: Optional[ProbeFunc] = None,
        service_table: Mapping[int, str] = SERVICE_TABLE
    ):
        self.target = target
        self.port_range = port_range
        self.timeout = timeout
        self.workers = workers
        self.queue_size = queue_size
        self.probe = probe or tcp_connect_probe
        self.service_table = service_table

        self._validate_inputs()

    def _validate_inputs(self):
        """Validate scanner inputs. Raises ValueError on the first bad value."""
        if not self.target:
            raise ValueError("No target specified for scanning.")
        if not isinstance(self.port_range, PortRange):
            raise ValueError(f"Expected a PortRange, got {type(self.port_range).__name__}.")
        if not (math.isfinite(self.timeout) and self.timeout > 0):
            raise ValueError("Timeout must be a positive, finite value.")
        if not (0 < self.workers <= MAX_WORKERS):
            raise ValueError(f"Worker count must be between 1 and {MAX_WORKERS}.")
        if self.queue_size <= 0:
            raise ValueError("Queue size must be a positive value.")

    async def _feed_ports(self, work_queue: asyncio.Queue):
        """Publish every port of the range in ascending order, then close the queue."""
        for port in self.port_range:
            await work_queue.put(port)
        # One close marker per worker: each worker consumes exactly one and exits
        for _ in range(self.workers):
            await work_queue.put(_CLOSED)
        logger.debug(f"Feeder published {len(self.port_range)} ports for {self.target}.")

    async def _worker(self, worker_id: int, work_queue: asyncio.Queue, results_queue: asyncio.Queue):
        """Probe ports from the work queue until it is closed."""
        probed = 0
        while True:
            port = await work_queue.get()
            if port is _CLOSED:
                break
            probed += 1
            if await self.probe(self.target, port, self.timeout):
                logger.debug(f"Worker {worker_id}: {self.target}:{port} is open.")
                results_queue.put_nowait(port)
        logger.debug(f"Worker {worker_id} finished after {probed} probes.")

    async def _close_results_when_done(self, workers: List[asyncio.Task], results_queue: asyncio.Queue):
        """Close the results queue once every worker has terminated."""
        await asyncio.gather(*workers)
        results_queue.put_nowait(_CLOSED)

    async def _collect(self, results_queue: asyncio.Queue) -> List[ScanResult]:
        """Drain open ports until the results queue is closed, then sort and annotate them."""
        open_ports: List[int] = []
        while True:
            port = await results_queue.get()
            if port is _CLOSED:
                break
            open_ports.append(port)

        # Arrival order depends on probe latency, never on port order
        open_ports.sort()
        return [
            ScanResult(
                host=self.target,
                port=port,
                service=lookup_service(port, self.service_table)
            )
            for port in open_ports
        ]

    async def scan(self) -> List[ScanResult]:
        """
        Runs the port scan for the configured target and range.
        Returns the open ports as ScanResult objects sorted by port number.
        """
        logger.info(f"Scanning {self.target} ports {self.port_range} ({len(self.port_range)} ports) "
                    f"using {self.workers} workers, {self.timeout}s timeout.")

        work_queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        results_queue: asyncio.Queue = asyncio.Queue()

        feeder = asyncio.create_task(self._feed_ports(work_queue))
        workers = [
            asyncio.create_task(self._worker(i, work_queue, results_queue))
            for i in range(self.workers)
        ]
        closer = asyncio.create_task(self._close_results_when_done(workers, results_queue))
        collector = asyncio.create_task(self._collect(results_queue))
        tasks = [feeder, *workers, closer, collector]

        try:
            await asyncio.gather(feeder, closer, collector)
        except Exception as e:
            logger.critical(f"Scan of {self.target} aborted: {type(e).__name__} - {e}")
            raise
        finally:
            # Nothing may outlive the scan, whichever way it ended
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        results = collector.result()
        logger.info(f"Completed scan of {self.target}. Found {len(results)} open ports.")
        return results

    def run(self) -> List[ScanResult]:
        """Synchronous entry point: runs scan() in a fresh event loop."""
        return asyncio.run(self.scan())
