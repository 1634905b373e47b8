"""
Device registry.

The registry is the single source of truth for discovered devices. It is
keyed by device address and only ever grows: a second registration for a
known address is ignored.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import DeviceHandle, DeviceInfo


class DeviceRegistry:
    """
    Registry of discovered devices keyed by address.

    All access is serialised through a lock so that discovery completions
    and listers running on other threads see a consistent view.
    """

    def __init__(self) -> None:
        """Initialize an empty device registry."""
        self._devices: dict[str, DeviceHandle] = {}
        self._lock = threading.Lock()

    def insert_if_absent(self, key: str, handle: DeviceHandle) -> bool:
        """
        Register a device unless the key is already taken.

        Arguments:
            key: The device address as a string.
            handle: The device handle to store.

        Returns:
            True if the handle was stored, False if the key already existed.

        """
        with self._lock:
            if key in self._devices:
                return False
            self._devices[key] = handle
            return True

    def __contains__(self, key: object) -> bool:
        """Return True if a device is registered under the key."""
        with self._lock:
            return key in self._devices

    def __len__(self) -> int:
        """Return the number of registered devices."""
        with self._lock:
            return len(self._devices)

    def get(self, key: str) -> DeviceHandle | None:
        """Get a device handle by address."""
        with self._lock:
            return self._devices.get(key)

    def list(self) -> list[DeviceInfo]:
        """Return a snapshot of every registered device's info."""
        with self._lock:
            return [handle.info for handle in self._devices.values()]

    def list_handles(self) -> list[DeviceHandle]:
        """Return a snapshot of every registered device handle."""
        with self._lock:
            return list(self._devices.values())
