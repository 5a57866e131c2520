# portsweep/tcp_connect.py
import asyncio
import logging

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 0.25


async def tcp_connect_probe(target_ip: str, port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    Performs a TCP Connect probe on a target port.

    Returns True if the full handshake completes within ``timeout`` seconds.
    Timeouts, refusals and any other transport error all count as not open.
    """
    try:
        # asyncio.open_connection completes the whole handshake through the OS
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(target_ip, port),
            timeout=timeout
        )
    except asyncio.TimeoutError:
        logger.debug(f"TCP Connect probe on {target_ip}:{port} timed out.")
        return False
    except ConnectionRefusedError:
        logger.debug(f"TCP Connect probe on {target_ip}:{port} received connection refused.")
        return False
    except OSError as e:
        logger.debug(f"TCP Connect probe on {target_ip}:{port} encountered OS error: {e}")
        return False
    except Exception as e:
        logger.debug(f"TCP Connect probe on {target_ip}:{port} unexpected error: {e}")
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        # The peer may reset the connection as soon as we hang up
        logger.debug(f"Closing probe connection to {target_ip}:{port} raised: {e}")
    return True
