"""Network printer models."""

from __future__ import annotations

import asyncio
import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .capability import NetworkPrinter


class Manufacturer(Enum):
    """
    Represents the manufacturer of a network printer.

    Attributes:
        BAMBU: Bambu Lab printers (A1, P1, X1 families).

    """

    BAMBU = "bambu"


@dataclass(frozen=True)
class DeviceInfo:
    """Identity of a registered network printer."""

    address: ipaddress.IPv4Address | ipaddress.IPv6Address
    manufacturer: Manufacturer
    hostname: str | None = None
    port: int | None = None
    model: str | None = None
    serial: str | None = None

    @property
    def key(self) -> str:
        """Return the registry key for this device."""
        return str(self.address)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON friendly representation of the device."""
        return {
            "hostname": self.hostname,
            "ip": str(self.address),
            "port": self.port,
            "manufacturer": self.manufacturer.value,
            "model": self.model,
            "serial": self.serial,
        }


@dataclass
class DeviceHandle:
    """
    A registered device and the printer client bound to it.

    The client is bound once when the device is registered and never
    replaced. ``connection_task`` is the task maintaining the device's
    transport connection; when it fails the error is kept in
    ``connection_error``.
    """

    info: DeviceInfo
    client: NetworkPrinter
    connection_task: asyncio.Task | None = field(default=None, compare=False)
    connection_error: BaseException | None = field(default=None, compare=False)

    @property
    def is_running(self) -> bool:
        """Return True while the transport connection task is alive."""
        return self.connection_task is not None and not self.connection_task.done()
