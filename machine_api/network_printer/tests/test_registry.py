"""Tests for the DeviceRegistry class."""

import ipaddress
from unittest.mock import Mock

import pytest

from machine_api.network_printer.models import DeviceHandle, DeviceInfo, Manufacturer
from machine_api.network_printer.registry import DeviceRegistry


def _handle(address: str, hostname: str = "Printer") -> DeviceHandle:
    info = DeviceInfo(
        address=ipaddress.ip_address(address),
        manufacturer=Manufacturer.BAMBU,
        hostname=hostname,
        model="Unknown",
        serial="SN",
    )
    return DeviceHandle(info=info, client=Mock())


@pytest.fixture
def registry() -> DeviceRegistry:
    """Create an empty registry for testing."""
    return DeviceRegistry()


class TestDeviceRegistry:
    """Test cases for DeviceRegistry."""

    def test_initialization(self, registry: DeviceRegistry) -> None:
        """Test that a new registry is empty."""
        assert len(registry) == 0
        assert registry.list() == []
        assert registry.list_handles() == []

    def test_insert_new_device(self, registry: DeviceRegistry) -> None:
        """Test that a new device is stored under its key."""
        handle = _handle("10.0.0.5")

        assert registry.insert_if_absent("10.0.0.5", handle)
        assert "10.0.0.5" in registry
        assert registry.get("10.0.0.5") is handle
        assert registry.list() == [handle.info]

    def test_insert_existing_key_is_ignored(self, registry: DeviceRegistry) -> None:
        """Test that the first registration for a key wins."""
        first = _handle("10.0.0.5", "First")
        second = _handle("10.0.0.5", "Second")

        assert registry.insert_if_absent("10.0.0.5", first)
        assert not registry.insert_if_absent("10.0.0.5", second)

        assert len(registry) == 1
        assert registry.get("10.0.0.5") is first

    def test_get_unknown_key(self, registry: DeviceRegistry) -> None:
        """Test that an unknown key returns None."""
        assert registry.get("10.0.0.9") is None
        assert "10.0.0.9" not in registry

    def test_list_is_a_snapshot(self, registry: DeviceRegistry) -> None:
        """Test that listing returns a copy unaffected by later inserts."""
        registry.insert_if_absent("10.0.0.5", _handle("10.0.0.5"))
        snapshot = registry.list()

        registry.insert_if_absent("10.0.0.6", _handle("10.0.0.6"))

        assert len(snapshot) == 1
        assert len(registry.list()) == 2
        assert {info.key for info in registry.list()} == {"10.0.0.5", "10.0.0.6"}

    def test_list_handles(self, registry: DeviceRegistry) -> None:
        """Test that handles keep their bound client."""
        handle = _handle("10.0.0.5")
        registry.insert_if_absent("10.0.0.5", handle)

        (listed,) = registry.list_handles()
        assert listed.client is handle.client
