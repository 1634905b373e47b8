"""Tests for the BambuPrinter class."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from machine_api.bambu.printer import BambuPrinter
from machine_api.bambu.status import PushStatus
from machine_api.exceptions import PrinterCommandError


@pytest.fixture
def mock_client() -> Mock:
    """Create a mock transport client with no cached status."""
    client = Mock()
    client.get_status.return_value = None
    client.publish = AsyncMock(return_value={"result": "success"})
    client.upload_file = AsyncMock()
    return client


@pytest.fixture
def mock_slicer() -> Mock:
    """Create a mock slicer for testing."""
    slicer = Mock()
    slicer.slice = AsyncMock(return_value=Path("/tmp/out.3mf"))  # noqa: S108
    return slicer


@pytest.fixture
def printer(mock_client: Mock, mock_slicer: Mock) -> BambuPrinter:
    """Create a BambuPrinter for testing."""
    return BambuPrinter(mock_client, mock_slicer, logger=Mock())


class TestHasAms:
    """Test cases for AMS detection."""

    def test_no_status(self, printer: BambuPrinter) -> None:
        """Test that no cached status means no AMS."""
        assert not printer.has_ams()

    def test_no_ams_section(self, printer: BambuPrinter, mock_client: Mock) -> None:
        """Test that a report without an AMS section means no AMS."""
        mock_client.get_status.return_value = PushStatus({"gcode_state": "IDLE"})
        assert not printer.has_ams()

    def test_no_exist_bits(self, printer: BambuPrinter, mock_client: Mock) -> None:
        """Test that an AMS section without the bitmask means no AMS."""
        mock_client.get_status.return_value = PushStatus({"ams": {"ams": []}})
        assert not printer.has_ams()

    def test_exist_bits_zero(self, printer: BambuPrinter, mock_client: Mock) -> None:
        """Test that a "0" bitmask means no AMS."""
        mock_client.get_status.return_value = PushStatus(
            {"ams": {"ams_exist_bits": "0"}}
        )
        assert not printer.has_ams()

    def test_exist_bits_set(self, printer: BambuPrinter, mock_client: Mock) -> None:
        """Test that any other bitmask means an AMS is attached."""
        mock_client.get_status.return_value = PushStatus(
            {"ams": {"ams_exist_bits": "1"}}
        )
        assert printer.has_ams()


class TestCommands:
    """Test cases for command routing."""

    @pytest.mark.anyio
    async def test_status_without_report(self, printer: BambuPrinter) -> None:
        """Test that status fails until a report has arrived."""
        with pytest.raises(PrinterCommandError, match="No status found"):
            await printer.status()

    @pytest.mark.anyio
    async def test_status(self, printer: BambuPrinter, mock_client: Mock) -> None:
        """Test that status returns the cached report."""
        mock_client.get_status.return_value = PushStatus(
            {"gcode_state": "RUNNING", "mc_percent": 42}
        )

        status = await printer.status()

        assert status == {"print": {"gcode_state": "RUNNING", "mc_percent": 42}}
        mock_client.publish.assert_not_called()

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        ("method", "section", "command"),
        [
            ("version", "info", "get_version"),
            ("pause", "print", "pause"),
            ("resume", "print", "resume"),
            ("stop", "print", "stop"),
            ("accessories", "system", "get_accessories"),
        ],
    )
    async def test_command_is_published(
        self,
        printer: BambuPrinter,
        mock_client: Mock,
        method: str,
        section: str,
        command: str,
    ) -> None:
        """Test that each command publishes the matching payload."""
        result = await getattr(printer, method)()

        assert result == {"result": "success"}
        (payload,) = mock_client.publish.await_args.args
        assert payload[section]["command"] == command

    @pytest.mark.anyio
    async def test_set_led(self, printer: BambuPrinter, mock_client: Mock) -> None:
        """Test that set_led controls the chamber light."""
        await printer.set_led(on=False)

        (payload,) = mock_client.publish.await_args.args
        assert payload["system"]["command"] == "ledctrl"
        assert payload["system"]["led_mode"] == "off"

    @pytest.mark.anyio
    async def test_slice(self, printer: BambuPrinter, mock_slicer: Mock) -> None:
        """Test that slicing is delegated to the slicer."""
        output = await printer.slice(Path("model.stl"))

        assert output == Path("/tmp/out.3mf")  # noqa: S108
        mock_slicer.slice.assert_awaited_once_with(Path("model.stl"))


class TestPrint:
    """Test cases for starting a print."""

    @pytest.mark.anyio
    async def test_print_uploads_then_starts(
        self, printer: BambuPrinter, mock_client: Mock
    ) -> None:
        """Test that the file is uploaded and the job started."""
        mock_client.get_status.return_value = PushStatus(
            {"ams": {"ams_exist_bits": "1"}}
        )

        await printer.print("Benchy", Path("/tmp/benchy.3mf"))  # noqa: S108

        mock_client.upload_file.assert_awaited_once_with(
            Path("/tmp/benchy.3mf")  # noqa: S108
        )
        (payload,) = mock_client.publish.await_args.args
        assert payload["print"]["command"] == "project_file"
        assert payload["print"]["subtask_name"] == "Benchy"
        assert payload["print"]["url"] == "file:///sdcard/benchy.3mf"
        assert payload["print"]["use_ams"] is True

    @pytest.mark.anyio
    async def test_print_without_ams(
        self, printer: BambuPrinter, mock_client: Mock
    ) -> None:
        """Test that use_ams is false when no AMS is attached."""
        await printer.print("Benchy", Path("benchy.3mf"))

        (payload,) = mock_client.publish.await_args.args
        assert payload["print"]["use_ams"] is False

    @pytest.mark.anyio
    async def test_print_without_filename(
        self, printer: BambuPrinter, mock_client: Mock
    ) -> None:
        """Test that a path without a file name is refused before uploading."""
        with pytest.raises(PrinterCommandError, match="No filename"):
            await printer.print("Benchy", Path("/"))

        mock_client.upload_file.assert_not_called()
        mock_client.publish.assert_not_called()
