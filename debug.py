"""Debug file for discovering and monitoring network printers."""

import asyncio
import json
import os
import sys

from loguru import logger

from machine_api.bambu import BambuPrinter, bambu_printers
from machine_api.config import Config
from machine_api.const import DEBUG
from machine_api.exceptions import ConfigurationError, DiscoveryError, MachineApiError
from machine_api.network_printer import DeviceHandle, NetworkPrinters, discover_all

LOG_LEVEL = "DEBUG" if DEBUG else "INFO"
CONFIG_PATH = os.getenv("MACHINE_API_CONFIG", "machine-api.toml")
POLL_INTERVAL = int(os.getenv("POLL_INTERVAL", "5"))

logger.remove()
logger.add(sys.stdout, colorize=DEBUG, level=LOG_LEVEL)


def print_printer_info(handle: DeviceHandle, index: int | None = None) -> None:
    """Print detailed printer information in a copy-paste friendly format."""
    prefix = f"  {index}. " if index is not None else ""

    logger.info("=" * 80)
    logger.info(f"{prefix}Discovered Printer Information:")
    logger.info("=" * 80)
    logger.info(json.dumps(handle.info.to_dict(), indent=2))
    logger.info(f"Connected:        {handle.is_running}")
    if handle.connection_error is not None:
        logger.info(f"Connection error: {handle.connection_error}")
    logger.info("=" * 80)


async def monitor(printers: NetworkPrinters, stop_event: asyncio.Event) -> None:
    """Log every discovered printer and its latest status."""
    seen: set[str] = set()
    while not stop_event.is_set():
        for i, handle in enumerate(printers.list_handles(), start=1):
            key = handle.info.key
            if key not in seen:
                seen.add(key)
                print_printer_info(handle, index=i)

            try:
                status = await handle.client.status()
            except MachineApiError as e:
                logger.debug(f"[{handle.info.hostname}] {e}")
                continue

            report = status.get("print", {})
            has_ams = (
                handle.client.has_ams()
                if isinstance(handle.client, BambuPrinter)
                else None
            )
            logger.info(
                f"[{handle.info.hostname}] {report.get('gcode_state')} "
                f"{report.get('mc_percent', 0)}% | AMS: {has_ams}"
            )

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=POLL_INTERVAL)
        except asyncio.TimeoutError:
            continue


async def main() -> None:
    """Discover the configured printers and monitor them until interrupted."""
    try:
        config = Config.load(CONFIG_PATH)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return

    if config.bambulabs is None:
        logger.warning("⚠️  No Bambu Lab machines configured")
        return

    printers = bambu_printers(config.bambulabs, logger=logger)
    stop_event = asyncio.Event()
    monitor_task = asyncio.create_task(monitor(printers, stop_event))

    logger.info("🔍 Listening for printers, press Ctrl+C to stop")
    try:
        await discover_all([printers], stop_event)
    except DiscoveryError as e:
        logger.error(f"❌ {e}")
    except asyncio.CancelledError:
        logger.info("🛑 Discovery cancelled, cleaning up...")
    finally:
        stop_event.set()
        await monitor_task
        await printers.aclose()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Received interrupt signal")
