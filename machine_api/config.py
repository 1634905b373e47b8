"""
Machine configuration.

Maps the name a printer announces on the network to the settings needed
to talk to it. Configuration is read from a TOML file::

    [bambulabs.machines."My X1C"]
    access_code = "12345678"
    slicer_config = "/etc/machine-api/bambu/x1c"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import voluptuous as vol

from .const import (
    CONF_ACCESS_CODE,
    CONF_BAMBULABS,
    CONF_MACHINES,
    CONF_SLICER_CONFIG,
    LOGGER,
)
from .exceptions import ConfigurationError

MACHINE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_ACCESS_CODE): vol.All(vol.Coerce(str), vol.Length(min=1)),
        vol.Required(CONF_SLICER_CONFIG): vol.All(str, vol.Coerce(Path)),
    }
)

BAMBULABS_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_MACHINES, default=dict): {str: MACHINE_SCHEMA},
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_BAMBULABS): BAMBULABS_SCHEMA,
    },
    extra=vol.ALLOW_EXTRA,
)


@dataclass(frozen=True)
class MachineConfig:
    """Settings for a single machine."""

    access_code: str
    slicer_config: Path


@dataclass
class BambuLabsConfig:
    """Settings for the Bambu Lab printers on the network."""

    machines: dict[str, MachineConfig] = field(default_factory=dict)

    def get_machine_config(self, name: str) -> MachineConfig | None:
        """Return the configuration of the machine with the given name."""
        return self.machines.get(name)


@dataclass
class Config:
    """Top level machine_api configuration."""

    bambulabs: BambuLabsConfig | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """
        Build a Config from already parsed data.

        Raises:
            ConfigurationError: If the data does not match the schema.

        """
        try:
            validated = CONFIG_SCHEMA(data)
        except vol.Invalid as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

        bambulabs = None
        if (section := validated.get(CONF_BAMBULABS)) is not None:
            bambulabs = BambuLabsConfig(
                machines={
                    name: MachineConfig(
                        access_code=machine[CONF_ACCESS_CODE],
                        slicer_config=machine[CONF_SLICER_CONFIG],
                    )
                    for name, machine in section[CONF_MACHINES].items()
                }
            )
            LOGGER.debug("Loaded %d Bambu Lab machine(s)", len(bambulabs.machines))

        return cls(bambulabs=bambulabs)

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Load the configuration from a TOML file.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid.

        """
        try:
            with Path(path).open("rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            msg = f"Failed to read configuration file {path}: {e}"
            raise ConfigurationError(msg) from e
        except tomllib.TOMLDecodeError as e:
            msg = f"Failed to parse configuration file {path}: {e}"
            raise ConfigurationError(msg) from e

        return cls.from_dict(data)
