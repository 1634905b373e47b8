"""Custom exceptions for machine_api."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .network_printer.announcement import RejectReason


class MachineApiError(Exception):
    """Base class for other exceptions."""


class AnnouncementRejectedError(MachineApiError):
    """Exception raised when a datagram is not a usable device announcement."""

    def __init__(self, reason: RejectReason, detail: str = "") -> None:
        """Initialize with the rejection reason and a human readable detail."""
        super().__init__(f"{reason.value}: {detail}" if detail else reason.value)
        self.reason = reason
        self.detail = detail


class ConfigurationError(MachineApiError):
    """Exception raised when the machine configuration cannot be loaded."""


class DiscoveryError(MachineApiError):
    """Exception raised when a discovery listener can no longer receive."""


class PrinterConnectionError(MachineApiError):
    """Exception to indicate a connection error with the printer."""


class PrinterNotConnectedError(MachineApiError):
    """Exception to indicate that the printer is not connected."""


class PrinterTimeoutError(MachineApiError):
    """Exception to indicate a timeout waiting for the printer to answer."""


class PrinterCommandError(MachineApiError):
    """Exception raised when a printer command cannot be carried out."""


class SlicerError(MachineApiError):
    """Exception raised when slicing fails."""


class SlicerNotFoundError(SlicerError):
    """Exception raised when no slicer binary is found on the system."""
