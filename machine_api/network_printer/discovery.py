"""
UDP discovery for network printers.

One listener runs per printer family. It binds the family's announcement
port on every interface, parses each datagram, and registers devices that
have a matching machine configuration. Every registered device gets its
own transport connection task which outlives the datagram that created it.
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
from typing import TYPE_CHECKING, Any

from machine_api.const import DEBUG, INADDR_ANY, LOGGER, MAX_DATAGRAM_SIZE
from machine_api.exceptions import (
    AnnouncementRejectedError,
    DiscoveryError,
    MachineApiError,
)

from .announcement import RejectReason, parse_announcement
from .models import DeviceHandle, DeviceInfo
from .registry import DeviceRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .announcement import DeviceAnnouncement
    from .capability import PrinterFamily

# Rejections that are expected from unrelated traffic on the port.
_QUIET_REJECTIONS = frozenset({RejectReason.EMPTY, RejectReason.NOT_A_NOTIFY})


class DiscoveryProtocol(asyncio.DatagramProtocol):
    """UDP protocol handler feeding announcements to a listener."""

    def __init__(self, listener: DiscoveryListener) -> None:
        """Initialize the discovery protocol."""
        self.listener = listener
        self.transport: asyncio.DatagramTransport | None = None

    def connection_made(self, transport: asyncio.DatagramTransport) -> None:
        """Handle UDP transport ready event."""
        self.transport = transport

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        """Handle an incoming announcement."""
        if DEBUG:
            self.listener.logger.debug("Datagram from %s: %r", addr, data)
        self.listener.handle_datagram(data)

    def error_received(self, exc: Exception) -> None:
        """Call when the socket reports a receive error."""
        self.listener.fail(exc)

    def connection_lost(self, exc: Exception | None) -> None:
        """Call when the socket is closed."""
        if exc is not None:
            self.listener.fail(exc)


class DiscoveryListener:
    """
    Discovery loop for a single printer family.

    The listener is either listening or terminated. It only terminates when
    it is stopped, cancelled, or the socket fails; a bad datagram never
    stops it.
    """

    def __init__(
        self,
        family: PrinterFamily,
        registry: DeviceRegistry | None = None,
        logger: Any = LOGGER,
        host: str = INADDR_ANY,
        port: int | None = None,
    ) -> None:
        """
        Initialize a DiscoveryListener.

        Arguments:
            family: The printer family whose announcements are accepted.
            registry: The registry new devices are added to.
            logger: The logger to use.
            host: The local address to bind.
            port: The UDP port to bind, defaults to the family's port.

        """
        self.family = family
        self.registry = registry if registry is not None else DeviceRegistry()
        self.logger = logger
        self.host = host
        self.port = family.discovery_port if port is None else port
        self._failure: asyncio.Future[None] | None = None
        self._connection_tasks: set[asyncio.Task] = set()

    @property
    def connection_tasks(self) -> set[asyncio.Task]:
        """Return the transport connection tasks that are still running."""
        return set(self._connection_tasks)

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """
        Listen for announcements until stopped.

        Arguments:
            stop_event: When set, the listener closes its socket and returns.

        Raises:
            DiscoveryError: If the socket cannot be bound or fails while
                receiving.

        """
        loop = asyncio.get_running_loop()
        failure: asyncio.Future[None] = loop.create_future()
        self._failure = failure
        transport: asyncio.DatagramTransport | None = None
        stop_task: asyncio.Task | None = None

        try:
            try:
                transport, _ = await loop.create_datagram_endpoint(
                    lambda: DiscoveryProtocol(self),
                    local_addr=(self.host, self.port),
                )
            except OSError as e:
                msg = f"Failed to bind discovery socket on UDP port {self.port}: {e}"
                raise DiscoveryError(msg) from e

            self.logger.info(
                "Listening for %s printers on UDP port %d",
                self.family.manufacturer.value,
                self.port,
            )

            waiters: set[asyncio.Future[Any]] = {failure}
            if stop_event is not None:
                stop_task = asyncio.create_task(stop_event.wait())
                waiters.add(stop_task)

            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            self._failure = None
            if transport is not None:
                transport.close()
            if stop_task is not None:
                stop_task.cancel()

        exc = failure.exception() if failure.done() else None
        if exc is not None:
            self.logger.error("Discovery socket failed: %s", exc)
            msg = f"Discovery on UDP port {self.port} stopped: {exc}"
            raise DiscoveryError(msg) from exc

        self.logger.info("Discovery on UDP port %d stopped", self.port)

    def fail(self, exc: BaseException) -> None:
        """Terminate the listener because of a socket error."""
        if self._failure is not None and not self._failure.done():
            self._failure.set_exception(exc)

    def handle_datagram(self, data: bytes) -> DeviceHandle | None:
        """
        Process one received datagram.

        Returns:
            The newly registered device handle, or None if the datagram was
            rejected, the device is already known or it is not configured.

        """
        try:
            announcement = parse_announcement(
                data[:MAX_DATAGRAM_SIZE], self.family.announcement_format, self.logger
            )
        except AnnouncementRejectedError as e:
            if e.reason in _QUIET_REJECTIONS:
                self.logger.debug("Ignoring datagram: %s", e)
            else:
                self.logger.warning("Ignoring announcement: %s", e)
            return None

        return self._register(announcement)

    def _register(self, announcement: DeviceAnnouncement) -> DeviceHandle | None:
        key = str(announcement.address)
        if key in self.registry:
            self.logger.debug("Printer at %s already discovered, skipping", key)
            return None

        config = self.family.get_machine_config(announcement.name)
        if config is None:
            self.logger.warning(
                "No config found for printer %r at %s", announcement.name, key
            )
            return None

        try:
            client = self.family.create_client(announcement, config)
        except MachineApiError:
            self.logger.exception("Failed to create client for printer at %s", key)
            return None

        info = DeviceInfo(
            address=announcement.address,
            manufacturer=self.family.manufacturer,
            hostname=announcement.name,
            port=announcement.port,
            model=self.family.resolve_model(announcement.model_code),
            serial=announcement.serial or "",
        )
        handle = DeviceHandle(
            info=info, client=self.family.create_printer(client, config)
        )

        # Claim the key before connecting so a racing announcement for the
        # same address never opens a second connection.
        if not self.registry.insert_if_absent(key, handle):
            self.logger.debug("Printer at %s registered concurrently, skipping", key)
            return None

        task = asyncio.create_task(client.run(), name=f"connection-{key}")
        handle.connection_task = task
        self._connection_tasks.add(task)
        task.add_done_callback(functools.partial(self._connection_done, handle))

        self.logger.info(
            "Discovered %s (%s) at %s", info.hostname, info.model, key
        )
        return handle

    def _connection_done(self, handle: DeviceHandle, task: asyncio.Task) -> None:
        self._connection_tasks.discard(task)
        key = handle.info.key
        if task.cancelled():
            self.logger.debug("Connection task for %s cancelled", key)
            return

        exc = task.exception()
        if exc is None:
            self.logger.warning("Connection task for %s exited", key)
            return

        handle.connection_error = exc
        self.logger.error(
            "Connection to printer at %s failed: %s", key, exc, exc_info=exc
        )

    async def aclose(self) -> None:
        """Cancel every transport connection task started by this listener."""
        tasks = list(self._connection_tasks)
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task


class NetworkPrinters:
    """Discovered printers of one family and the listener that finds them."""

    def __init__(
        self,
        family: PrinterFamily,
        registry: DeviceRegistry | None = None,
        logger: Any = LOGGER,
        port: int | None = None,
    ) -> None:
        """Initialize the printers of a family with an empty registry."""
        self.registry = registry if registry is not None else DeviceRegistry()
        self.listener = DiscoveryListener(
            family, self.registry, logger=logger, port=port
        )

    async def discover(self, stop_event: asyncio.Event | None = None) -> None:
        """Run discovery until stopped; see :meth:`DiscoveryListener.run`."""
        await self.listener.run(stop_event)

    def list(self) -> list[DeviceInfo]:
        """Return the info of every discovered printer."""
        return self.registry.list()

    def list_handles(self) -> list[DeviceHandle]:
        """Return the handle of every discovered printer."""
        return self.registry.list_handles()

    async def aclose(self) -> None:
        """Close every printer connection."""
        await self.listener.aclose()


async def discover_all(
    printers: Iterable[NetworkPrinters], stop_event: asyncio.Event | None = None
) -> None:
    """
    Run discovery for several printer families concurrently.

    Returns when every listener has stopped. If one listener fails the
    others are cancelled and the failure is raised.
    """
    tasks = [asyncio.create_task(p.discover(stop_event)) for p in printers]
    try:
        await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            task.cancel()
