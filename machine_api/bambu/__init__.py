"""
Bambu Lab printer support.

Bambu Lab printers announce themselves with SSDP-style NOTIFY frames on UDP
port 2021, are controlled over MQTT (TLS, port 8883) and receive files over
implicit FTPS (port 990). All three use the printer's LAN access code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from machine_api.network_printer.discovery import NetworkPrinters
from machine_api.network_printer.models import Manufacturer
from machine_api.slicer.orca import OrcaSlicer

from .client import BambuClient
from .const import BAMBU_ANNOUNCEMENT, DISCOVERY_PORT, LOGGER
from .models import BambuModel, UnknownModel
from .printer import BambuPrinter

if TYPE_CHECKING:
    from machine_api.config import BambuLabsConfig, MachineConfig
    from machine_api.network_printer.announcement import DeviceAnnouncement
    from machine_api.network_printer.capability import TransportClient


class BambuFamily:
    """Discovery and construction rules for Bambu Lab printers."""

    manufacturer = Manufacturer.BAMBU
    announcement_format = BAMBU_ANNOUNCEMENT
    discovery_port = DISCOVERY_PORT

    def __init__(self, config: BambuLabsConfig, logger: Any = LOGGER) -> None:
        """Initialize the family with the configured Bambu Lab machines."""
        self.config = config
        self.logger = logger

    def get_machine_config(self, name: str) -> MachineConfig | None:
        """Return the configuration for a named machine, if one exists."""
        return self.config.get_machine_config(name)

    def resolve_model(self, model_code: str | None) -> str:
        """Return the display name for a vendor model code."""
        return str(BambuModel.from_code(model_code))

    def create_client(
        self, announcement: DeviceAnnouncement, config: MachineConfig
    ) -> BambuClient:
        """Build the MQTT client for a discovered printer."""
        return BambuClient(
            str(announcement.address),
            config.access_code,
            announcement.serial or "",
            logger=self.logger,
        )

    def create_printer(
        self, client: TransportClient, config: MachineConfig
    ) -> BambuPrinter:
        """Build the printer wrapping a connected client."""
        return BambuPrinter(
            client, OrcaSlicer(config.slicer_config, logger=self.logger), self.logger
        )


def bambu_printers(
    config: BambuLabsConfig, logger: Any = LOGGER, port: int | None = None
) -> NetworkPrinters:
    """Return the network printers for the configured Bambu Lab machines."""
    return NetworkPrinters(BambuFamily(config, logger), logger=logger, port=port)


__all__ = [
    "BambuClient",
    "BambuFamily",
    "BambuModel",
    "BambuPrinter",
    "UnknownModel",
    "bambu_printers",
]
