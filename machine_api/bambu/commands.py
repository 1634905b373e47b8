"""
Command payloads for Bambu Lab printers.

Each command is a JSON object with a single top level section (``print``,
``info``, ``system`` or ``pushing``) holding the command name and its
parameters. The transport client adds the ``sequence_id`` used to match the
printer's acknowledgement.
"""

from __future__ import annotations

from typing import Any

from .const import DEFAULT_PLATE_GCODE, PRINTER_FILE_URL

SECTION_INFO = "info"
SECTION_PRINT = "print"
SECTION_PUSHING = "pushing"
SECTION_SYSTEM = "system"

LED_CHAMBER_LIGHT = "chamber_light"


def command_section(command: dict[str, Any]) -> str:
    """Return the top level section name of a command payload."""
    (section,) = command.keys()
    return section


def push_all() -> dict[str, Any]:
    """Ask the printer to push its full status."""
    return {SECTION_PUSHING: {"command": "pushall"}}


def get_version() -> dict[str, Any]:
    """Ask the printer for its module and firmware versions."""
    return {SECTION_INFO: {"command": "get_version"}}


def pause() -> dict[str, Any]:
    """Pause the current print."""
    return {SECTION_PRINT: {"command": "pause"}}


def resume() -> dict[str, Any]:
    """Resume the current print."""
    return {SECTION_PRINT: {"command": "resume"}}


def stop() -> dict[str, Any]:
    """Stop the current print."""
    return {SECTION_PRINT: {"command": "stop"}}


def set_chamber_light(*, on: bool) -> dict[str, Any]:
    """Turn the chamber light on or off."""
    return {
        SECTION_SYSTEM: {
            "command": "ledctrl",
            "led_node": LED_CHAMBER_LIGHT,
            "led_mode": "on" if on else "off",
            "led_on_time": 500,
            "led_off_time": 500,
            "loop_times": 0,
            "interval_time": 0,
        }
    }


def get_accessories() -> dict[str, Any]:
    """Ask the printer for its installed accessories."""
    return {SECTION_SYSTEM: {"command": "get_accessories", "accessory_type": "none"}}


def print_file(job_name: str, filename: str, *, use_ams: bool) -> dict[str, Any]:
    """
    Start printing a sliced project file already uploaded to the printer.

    Arguments:
        job_name: The name shown for the job on the printer.
        filename: The name of the uploaded file on the printer's storage.
        use_ams: Whether filament should be fed from the AMS.

    """
    return {
        SECTION_PRINT: {
            "command": "project_file",
            "param": DEFAULT_PLATE_GCODE,
            "subtask_name": job_name,
            "url": PRINTER_FILE_URL.format(filename=filename),
            "bed_type": "auto",
            "timelapse": False,
            "bed_leveling": True,
            "flow_cali": True,
            "vibration_cali": True,
            "layer_inspect": False,
            "use_ams": use_ams,
            "profile_id": "0",
            "project_id": "0",
            "subtask_id": "0",
            "task_id": "0",
        }
    }
