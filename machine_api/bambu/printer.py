"""Bambu Lab implementation of the network printer interface."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from machine_api.exceptions import PrinterCommandError

from . import commands
from .const import LOGGER

if TYPE_CHECKING:
    from machine_api.network_printer.capability import Slicer, TransportClient

    from .status import PushStatus


class BambuPrinter:
    """Routes printer commands to a Bambu Lab transport client."""

    def __init__(
        self, client: TransportClient, slicer: Slicer, logger: Any = LOGGER
    ) -> None:
        """
        Initialize a BambuPrinter.

        Arguments:
            client: The transport client connected to the printer.
            slicer: The slicer used to prepare files for this printer.
            logger: The logger to use.

        """
        self.client = client
        self.slicer = slicer
        self.logger = logger

    def get_status(self) -> PushStatus | None:
        """Get the latest status of the printer."""
        return self.client.get_status()

    def has_ams(self) -> bool:
        """
        Check if the printer has an AMS attached.

        Returns False until a status report with an AMS section arrives, and
        when the report's ``ams_exist_bits`` mask is ``"0"``.
        """
        status = self.get_status()
        if status is None or status.ams is None:
            return False

        ams_exists = status.ams.ams_exist_bits
        if ams_exists is None:
            return False

        return ams_exists != "0"

    async def status(self) -> dict[str, Any]:
        """Get the status of the printer."""
        status = self.get_status()
        if status is None:
            msg = "No status found"
            raise PrinterCommandError(msg)
        return status.to_dict()

    async def version(self) -> dict[str, Any]:
        """Get the version of the printer."""
        return await self.client.publish(commands.get_version())

    async def pause(self) -> dict[str, Any]:
        """Pause the current print."""
        return await self.client.publish(commands.pause())

    async def resume(self) -> dict[str, Any]:
        """Resume the current print."""
        return await self.client.publish(commands.resume())

    async def stop(self) -> dict[str, Any]:
        """Stop the current print."""
        return await self.client.publish(commands.stop())

    async def set_led(self, *, on: bool) -> dict[str, Any]:
        """Set the chamber light on or off."""
        return await self.client.publish(commands.set_chamber_light(on=on))

    async def accessories(self) -> dict[str, Any]:
        """Get the accessories of the printer."""
        return await self.client.publish(commands.get_accessories())

    async def slice(self, file: Path) -> Path:
        """Slice a file and return the path to the sliced file."""
        output = await self.slicer.slice(Path(file))
        self.logger.info("Saved sliced file to %s", output)
        return output

    async def print(self, job_name: str, file: Path) -> dict[str, Any]:
        """
        Upload a sliced file to the printer and start printing it.

        Raises:
            PrinterCommandError: If the path has no file name or the upload
                fails.

        """
        file = Path(file)
        filename = file.name
        if not filename:
            msg = f"No filename: {file}"
            raise PrinterCommandError(msg)

        await self.client.upload_file(file)

        return await self.client.publish(
            commands.print_file(job_name, filename, use_ams=self.has_ams())
        )
