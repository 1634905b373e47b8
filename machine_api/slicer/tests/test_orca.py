"""Tests for the OrcaSlicer integration."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from machine_api.exceptions import SlicerError, SlicerNotFoundError
from machine_api.slicer.orca import OrcaSlicer, find_orca_slicer


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Create a slicer profile directory."""
    config = tmp_path / "x1c"
    config.mkdir()
    for name in ("process.json", "machine.json", "filament.json"):
        (config / name).write_text("{}")
    return config


def _process(returncode: int, stdout: bytes = b"", stderr: bytes = b"") -> Mock:
    process = Mock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    return process


def test_build_args(config_dir: Path) -> None:
    """Test the slicer command line."""
    slicer = OrcaSlicer(config_dir, logger=Mock())

    args = slicer.build_args(Path("model.stl"), Path("out.3mf"))

    assert args == [
        "--load-settings",
        f"{config_dir / 'process.json'};{config_dir / 'machine.json'}",
        "--load-filaments",
        str(config_dir / "filament.json"),
        "--slice",
        "0",
        "--orient",
        "1",
        "--export-3mf",
        "out.3mf",
        "model.stl",
    ]


@pytest.mark.anyio
async def test_slice_requires_config_directory(tmp_path: Path) -> None:
    """Test that a config path that is not a directory fails before running."""
    not_a_dir = tmp_path / "profile.json"
    not_a_dir.write_text("{}")
    slicer = OrcaSlicer(not_a_dir, logger=Mock())

    with (
        patch("asyncio.create_subprocess_exec") as mock_exec,
        pytest.raises(SlicerError, match="must be a directory"),
    ):
        await slicer.slice(Path("model.stl"))

    mock_exec.assert_not_called()


@pytest.mark.anyio
async def test_slice_success(config_dir: Path) -> None:
    """Test that the generated project path is returned."""
    slicer = OrcaSlicer(config_dir, logger=Mock())

    async def run(*args: str, **kwargs: object) -> Mock:  # noqa: ARG001
        output = Path(args[args.index("--export-3mf") + 1])
        output.write_bytes(b"3mf")
        return _process(0)

    with (
        patch(
            "machine_api.slicer.orca.find_orca_slicer",
            return_value=Path("/usr/bin/orca-slicer"),
        ),
        patch("asyncio.create_subprocess_exec", side_effect=run) as mock_exec,
    ):
        output = await slicer.slice(Path("model.stl"))

    try:
        assert output.suffix == ".3mf"
        assert output.exists()
        assert mock_exec.call_args.args[0] == "/usr/bin/orca-slicer"
        assert mock_exec.call_args.args[-1] == "model.stl"
    finally:
        output.unlink()


@pytest.mark.anyio
async def test_slice_nonzero_exit(config_dir: Path) -> None:
    """Test that a failing slicer run raises with its output."""
    slicer = OrcaSlicer(config_dir, logger=Mock())

    with (
        patch(
            "machine_api.slicer.orca.find_orca_slicer",
            return_value=Path("/usr/bin/orca-slicer"),
        ),
        patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(return_value=_process(1, b"", b"bad model")),
        ),
        pytest.raises(SlicerError, match="bad model"),
    ):
        await slicer.slice(Path("model.stl"))


@pytest.mark.anyio
async def test_slice_missing_output(config_dir: Path) -> None:
    """Test that a run without an output file raises."""
    slicer = OrcaSlicer(config_dir, logger=Mock())

    with (
        patch(
            "machine_api.slicer.orca.find_orca_slicer",
            return_value=Path("/usr/bin/orca-slicer"),
        ),
        patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(return_value=_process(0)),
        ),
        pytest.raises(SlicerError, match="did not create"),
    ):
        await slicer.slice(Path("model.stl"))


@pytest.mark.anyio
async def test_slice_exec_failure(config_dir: Path) -> None:
    """Test that an unstartable slicer raises a SlicerError."""
    slicer = OrcaSlicer(config_dir, logger=Mock())

    with (
        patch(
            "machine_api.slicer.orca.find_orca_slicer",
            return_value=Path("/usr/bin/orca-slicer"),
        ),
        patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(side_effect=PermissionError("denied")),
        ),
        pytest.raises(SlicerError, match="Failed to execute"),
    ):
        await slicer.slice(Path("model.stl"))


def test_find_orca_slicer_on_path() -> None:
    """Test that the slicer is found on PATH."""
    with (
        patch("machine_api.slicer.orca._APP_PATHS", {}),
        patch("shutil.which", side_effect=[None, "/opt/bin/OrcaSlicer"]),
    ):
        assert find_orca_slicer() == Path("/opt/bin/OrcaSlicer")


def test_find_orca_slicer_missing() -> None:
    """Test that a missing slicer raises SlicerNotFoundError."""
    with (
        patch("machine_api.slicer.orca._APP_PATHS", {}),
        patch("shutil.which", return_value=None),
        pytest.raises(SlicerNotFoundError),
    ):
        find_orca_slicer()
