"""
OrcaSlicer integration.

Runs the OrcaSlicer command line headless to slice a model into a 3MF
project using the process, machine and filament profiles stored in a
per-machine configuration directory.
"""

from __future__ import annotations

import asyncio
import shutil
import sys
import tempfile
import uuid
from pathlib import Path
from typing import Any

from machine_api.const import LOGGER
from machine_api.exceptions import SlicerError, SlicerNotFoundError

PROCESS_CONFIG = "process.json"
MACHINE_CONFIG = "machine.json"
FILAMENT_CONFIG = "filament.json"

# Install locations by platform, checked before PATH.
_APP_PATHS: dict[str, str] = {
    "darwin": "/Applications/OrcaSlicer.app/Contents/MacOS/OrcaSlicer",
    "win32": "C:\\Program Files\\OrcaSlicer\\orca-slicer.exe",
    "linux": "/usr/bin/orca-slicer",
}

_PATH_NAMES = ("orca-slicer", "OrcaSlicer", "orcaslicer")


def find_orca_slicer() -> Path:
    """
    Return the path of the OrcaSlicer executable.

    Raises:
        SlicerNotFoundError: If OrcaSlicer is not installed.

    """
    app_path = _APP_PATHS.get(sys.platform)
    if app_path is not None and Path(app_path).exists():
        return Path(app_path)

    for name in _PATH_NAMES:
        if found := shutil.which(name):
            return Path(found)

    msg = "OrcaSlicer not found"
    raise SlicerNotFoundError(msg)


class OrcaSlicer:
    """Slices files with OrcaSlicer using a directory of profiles."""

    def __init__(self, config: Path, logger: Any = LOGGER) -> None:
        """
        Initialize an OrcaSlicer.

        Arguments:
            config: Directory holding process.json, machine.json and
                filament.json.
            logger: The logger to use.

        """
        self.config = Path(config)
        self.logger = logger

    def build_args(self, file: Path, output: Path) -> list[str]:
        """Return the command line arguments to slice ``file`` into ``output``."""
        settings = ";".join(
            [str(self.config / PROCESS_CONFIG), str(self.config / MACHINE_CONFIG)]
        )
        return [
            "--load-settings",
            settings,
            "--load-filaments",
            str(self.config / FILAMENT_CONFIG),
            "--slice",
            "0",
            "--orient",
            "1",
            "--export-3mf",
            str(output),
            str(file),
        ]

    async def slice(self, file: Path) -> Path:
        """
        Slice a file and return the path of the generated 3MF project.

        Raises:
            SlicerError: If the configuration path is not a directory, the
                slicer exits with an error or produces no output.
            SlicerNotFoundError: If OrcaSlicer is not installed.

        """
        if not self.config.is_dir():
            msg = f"Invalid slicer config path: {self.config}, must be a directory"
            raise SlicerError(msg)

        output = Path(tempfile.gettempdir()) / f"{uuid.uuid4()}.3mf"
        args = self.build_args(Path(file), output)
        executable = find_orca_slicer()

        self.logger.debug("Running %s %s", executable, " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                str(executable),
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            msg = f"Failed to execute orca-slicer command: {e}"
            raise SlicerError(msg) from e

        if process.returncode != 0:
            msg = (
                f"OrcaSlicer exited with status {process.returncode}\n"
                f"stdout:\n{stdout.decode(errors='replace')}\n"
                f"stderr:\n{stderr.decode(errors='replace')}"
            )
            raise SlicerError(msg)

        if not output.exists():
            msg = f"OrcaSlicer did not create {output}"
            raise SlicerError(msg)

        return output
