"""
Network 3D printer discovery and control.

Printers announce themselves on the local network; each announcement that
matches a configured machine is turned into a registered device with a
uniform command interface (status, pause/resume/stop, lights, slicing and
printing) regardless of the printer family behind it.
"""

from .network_printer import (
    DeviceHandle,
    DeviceInfo,
    DeviceRegistry,
    Manufacturer,
    NetworkPrinters,
    discover_all,
)

__all__ = [
    "DeviceHandle",
    "DeviceInfo",
    "DeviceRegistry",
    "Manufacturer",
    "NetworkPrinters",
    "discover_all",
]
