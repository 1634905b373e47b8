"""Interfaces shared by every printer family."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from machine_api.config import MachineConfig

    from .announcement import AnnouncementFormat, DeviceAnnouncement
    from .models import Manufacturer


class TransportClient(Protocol):
    """Persistent command channel to a single printer."""

    async def run(self) -> None:
        """Maintain the connection until cancelled or failed."""
        ...

    def get_status(self) -> Any | None:
        """Return the most recently received status, if any."""
        ...

    async def publish(self, command: dict[str, Any]) -> dict[str, Any]:
        """Send a command and wait for the printer's acknowledgement."""
        ...

    async def upload_file(self, path: Path) -> None:
        """Upload a local file to the printer."""
        ...


class Slicer(Protocol):
    """Converts a model file into machine instructions."""

    async def slice(self, file: Path) -> Path:
        """Slice a file and return the path of the generated output."""
        ...


class NetworkPrinter(Protocol):
    """Uniform command interface implemented once per printer family."""

    async def status(self) -> dict[str, Any]:
        """Return the latest cached status of the printer."""
        ...

    async def version(self) -> dict[str, Any]:
        """Return the printer's firmware versions."""
        ...

    async def pause(self) -> dict[str, Any]:
        """Pause the current print."""
        ...

    async def resume(self) -> dict[str, Any]:
        """Resume the current print."""
        ...

    async def stop(self) -> dict[str, Any]:
        """Stop the current print."""
        ...

    async def set_led(self, *, on: bool) -> dict[str, Any]:
        """Turn the printer light on or off."""
        ...

    async def accessories(self) -> dict[str, Any]:
        """Return the accessories installed on the printer."""
        ...

    async def slice(self, file: Path) -> Path:
        """Slice a file and return the path to the sliced output."""
        ...

    async def print(self, job_name: str, file: Path) -> dict[str, Any]:
        """Upload a sliced file and start printing it."""
        ...


class PrinterFamily(Protocol):
    """
    Everything discovery needs to know about one printer family.

    A family describes how its printers announce themselves and how to
    build the transport client and printer implementation for a newly
    discovered device.
    """

    manufacturer: Manufacturer
    announcement_format: AnnouncementFormat
    discovery_port: int

    def get_machine_config(self, name: str) -> MachineConfig | None:
        """Return the configuration for a named machine, if one exists."""
        ...

    def resolve_model(self, model_code: str | None) -> str:
        """Return a human readable model name for a vendor model code."""
        ...

    def create_client(
        self, announcement: DeviceAnnouncement, config: MachineConfig
    ) -> TransportClient:
        """Build the transport client for a discovered device."""
        ...

    def create_printer(
        self, client: TransportClient, config: MachineConfig
    ) -> NetworkPrinter:
        """Build the printer implementation wrapping a transport client."""
        ...
