#!/usr/bin/env python3
import typer
import sys
import logging
from typing import Optional

# Configure basic logging for the main script
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

# Initialize the Typer application
app = typer.Typer()

@app.command()
def scan(
    target: str = typer.Argument(..., help="Target hostname or IP address"),
    full: bool = typer.Option(False, "--full", help="Scan all ports (1-65535) instead of 1-1024"),
    ports: Optional[str] = typer.Option(None, "-p", "--ports", help="Explicit port range (e.g., '80' or '1-1024'), overrides --full"),
    timeout: float = typer.Option(0.25, "-t", "--timeout", help="Connect timeout for each port in seconds"),
    workers: int = typer.Option(100, "-c", "--workers", help="Number of concurrent scan workers"),
    queue_size: int = typer.Option(100, "--queue-size", help="Capacity of the pending-port queue"),
    output_json: Optional[str] = typer.Option(None, "-oJ", "--output-json", help="Also write results to a JSON file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging")
):
    """Scan a host for open TCP ports"""
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose:
        logging.getLogger().setLevel(logging.INFO)
    else:
        logging.getLogger().setLevel(logging.WARNING) # Keep stdout to the report itself

    from portsweep.scanner import Scanner
    from portsweep.output_formatter import format_report, save_json
    from portsweep.utils import parse_port_range, resolve_target

    # Everything the scan needs is checked before the first probe goes out
    try:
        address = resolve_target(target)
        port_range = parse_port_range(ports, full)
        scanner = Scanner(
            target=address,
            port_range=port_range,
            timeout=timeout,
            workers=workers,
            queue_size=queue_size
        )
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        results = scanner.run()
    except Exception:
        # Scanner.scan has already logged the failure
        sys.exit(1)

    for line in format_report(results):
        print(line)

    if output_json:
        try:
            save_json(results, output_json)
        except OSError as e:
            logger.error(f"Error saving JSON to {output_json}: {e}")
            sys.exit(1)

@app.command()
def api(
    host: str = "127.0.0.1",
    port: int = 8000,
    debug: bool = False
):
    """Run the port scanner in API mode"""
    logger.info(f"Starting API server on {host}:{port} (Debug: {debug})...")
    try:
        from api.server import start_api_server
        start_api_server(host, port, debug)
    except ImportError as e:
        logger.error(f"Failed to load API server module: {e}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"An unexpected error occurred during API server startup: {e}")
        sys.exit(1)

if __name__ == "__main__":
    app()
