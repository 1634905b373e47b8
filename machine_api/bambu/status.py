"""Models for the status reports pushed by Bambu Lab printers."""

from __future__ import annotations

from copy import deepcopy
from typing import Any


class AMSTray:
    """Represents a single filament tray in an AMS unit."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """
        Initialize an AMSTray instance.

        Arguments:
            data (dict[str, Any] | None): Tray data from the ``ams.ams[].tray``
                list of a status report. Expected keys: id, tray_type,
                tray_color, tray_sub_brands, nozzle_temp_min, nozzle_temp_max.

        """
        if data is None:
            data = {}

        self.id: str = str(data.get("id", ""))
        self.filament_type: str = data.get("tray_type", "")
        self.brand: str = data.get("tray_sub_brands", "")

        # Colours are reported as RRGGBBAA
        color = data.get("tray_color", "")
        self.filament_color: str = f"#{color[:6]}" if color else ""

        self.min_nozzle_temp: int = int(data.get("nozzle_temp_min", 0) or 0)
        self.max_nozzle_temp: int = int(data.get("nozzle_temp_max", 0) or 0)

    @property
    def is_loaded(self) -> bool:
        """Return True if the tray reports a filament type."""
        return bool(self.filament_type)

    def __repr__(self) -> str:
        """Return a string representation of the AMSTray instance."""
        return (
            f"AMSTray(id={self.id}, color={self.filament_color}, "
            f"type={self.filament_type})"
        )


class AMSUnit:
    """Represents one AMS unit containing up to four trays."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize an AMSUnit from an entry of the ``ams.ams`` list."""
        if data is None:
            data = {}

        self.id: str = str(data.get("id", ""))
        self.humidity: str = str(data.get("humidity", ""))
        self.temperature: float = float(data.get("temp", 0) or 0)
        self.trays: list[AMSTray] = [AMSTray(t) for t in data.get("tray", [])]

    def __repr__(self) -> str:
        """Return a string representation of the AMSUnit instance."""
        return f"AMSUnit(id={self.id}, trays={len(self.trays)})"


class AMSStatus:
    """Represents the ``ams`` section of a status report."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """
        Initialize an AMSStatus instance.

        Arguments:
            data (dict[str, Any] | None): The ``ams`` section. Expected keys:
                ams, ams_exist_bits, tray_exist_bits, tray_now.

        """
        if data is None:
            data = {}

        # Bitmask of connected units as a hex string, "0" when none are
        self.ams_exist_bits: str | None = data.get("ams_exist_bits")
        self.tray_exist_bits: str | None = data.get("tray_exist_bits")
        self.tray_now: str | None = data.get("tray_now")
        self.units: list[AMSUnit] = [AMSUnit(u) for u in data.get("ams", [])]

    def __repr__(self) -> str:
        """Return a string representation of the AMSStatus instance."""
        return (
            f"AMSStatus(ams_exist_bits={self.ams_exist_bits!r}, "
            f"units={len(self.units)})"
        )


class PushStatus:
    """
    Represents the latest ``push_status`` report of a printer.

    Printers may only send the fields that changed since the last report,
    so a PushStatus is built from the merged report and keeps the raw data
    available as :attr:`raw`.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize a PushStatus from the ``print`` section of a report."""
        if data is None:
            data = {}

        self.raw: dict[str, Any] = data
        self.gcode_state: str | None = data.get("gcode_state")
        self.gcode_file: str | None = data.get("gcode_file")
        self.subtask_name: str | None = data.get("subtask_name")
        self.percent: int = int(data.get("mc_percent", 0) or 0)
        self.remaining_time: int = int(data.get("mc_remaining_time", 0) or 0)
        self.layer: int = int(data.get("layer_num", 0) or 0)
        self.total_layers: int = int(data.get("total_layer_num", 0) or 0)
        self.nozzle_temperature: float = float(data.get("nozzle_temper", 0) or 0)
        self.nozzle_target_temperature: float = float(
            data.get("nozzle_target_temper", 0) or 0
        )
        self.bed_temperature: float = float(data.get("bed_temper", 0) or 0)
        self.bed_target_temperature: float = float(
            data.get("bed_target_temper", 0) or 0
        )

        ams = data.get("ams")
        self.ams: AMSStatus | None = AMSStatus(ams) if isinstance(ams, dict) else None

    def to_dict(self) -> dict[str, Any]:
        """Return the report in the shape the printer sent it."""
        return {"print": deepcopy(self.raw)}

    def __repr__(self) -> str:
        """Return a string representation of the PushStatus instance."""
        return (
            f"PushStatus(gcode_state={self.gcode_state!r}, "
            f"percent={self.percent}, ams={self.ams!r})"
        )


def merge_report(cached: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``cached`` with the fields of ``update`` merged in."""
    merged = deepcopy(cached)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_report(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged
