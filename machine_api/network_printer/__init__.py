"""Manufacturer-agnostic discovery, registry and printer interfaces."""

from .announcement import (
    AnnouncementFormat,
    DeviceAnnouncement,
    RejectReason,
    parse_announcement,
)
from .capability import NetworkPrinter, PrinterFamily, Slicer, TransportClient
from .discovery import DiscoveryListener, NetworkPrinters, discover_all
from .models import DeviceHandle, DeviceInfo, Manufacturer
from .registry import DeviceRegistry

__all__ = [
    "AnnouncementFormat",
    "DeviceAnnouncement",
    "DeviceHandle",
    "DeviceInfo",
    "DeviceRegistry",
    "DiscoveryListener",
    "Manufacturer",
    "NetworkPrinter",
    "NetworkPrinters",
    "PrinterFamily",
    "RejectReason",
    "Slicer",
    "TransportClient",
    "discover_all",
    "parse_announcement",
]
