"""
Bambu Lab MQTT client.

Each printer runs its own MQTT broker on port 8883 (TLS). The client
subscribes to the printer's report topic, keeps the latest status report
cached, and matches command acknowledgements to requests by
``sequence_id``.
"""

from __future__ import annotations

import asyncio
import json
import ssl
from typing import TYPE_CHECKING, Any

import aiomqtt

from machine_api.const import DEBUG
from machine_api.exceptions import (
    PrinterCommandError,
    PrinterConnectionError,
    PrinterNotConnectedError,
    PrinterTimeoutError,
)

from . import ftps
from .commands import SECTION_PRINT, command_section, push_all
from .const import (
    COMMAND_TIMEOUT,
    LOGGER,
    MQTT_KEEPALIVE,
    MQTT_PORT,
    MQTT_USERNAME,
    TOPIC_REPORT,
    TOPIC_REQUEST,
)
from .status import PushStatus, merge_report

if TYPE_CHECKING:
    from pathlib import Path

FAILED_RESULTS = frozenset({"fail", "failed"})


class BambuClient:
    """MQTT client for a single Bambu Lab printer."""

    def __init__(
        self,
        ip_address: str,
        access_code: str,
        serial: str,
        logger: Any = LOGGER,
        port: int = MQTT_PORT,
        timeout: float = COMMAND_TIMEOUT,
    ) -> None:
        """
        Initialize a BambuClient.

        Arguments:
            ip_address: The IP address of the printer.
            access_code: The printer's LAN access code.
            serial: The printer's serial number (used in MQTT topics).
            logger: The logger to use.
            port: The MQTT port of the printer.
            timeout: Seconds to wait for a command acknowledgement.

        """
        self.ip_address = ip_address
        self.access_code = access_code
        self.serial = serial
        self.logger = logger
        self.port = port
        self.timeout = timeout

        self.mqtt_client: aiomqtt.Client | None = None
        self._is_connected: bool = False

        # Request/response tracking
        self._response_events: dict[str, asyncio.Event] = {}
        self._response_data: dict[str, dict[str, Any]] = {}
        self._response_lock = asyncio.Lock()
        self._sequence_id = 0

        # Status reports are deltas and must be merged with the cached report
        self._cached_report: dict[str, Any] = {}
        self._status: PushStatus | None = None

    @property
    def is_connected(self) -> bool:
        """Return true if the client is connected to the printer."""
        return self._is_connected and self.mqtt_client is not None

    @property
    def report_topic(self) -> str:
        """Return the topic the printer publishes reports on."""
        return TOPIC_REPORT.format(serial=self.serial)

    @property
    def request_topic(self) -> str:
        """Return the topic the printer accepts commands on."""
        return TOPIC_REQUEST.format(serial=self.serial)

    def _tls_context(self) -> ssl.SSLContext:
        # Printers use self-signed certificates
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    async def run(self) -> None:
        """
        Connect to the printer and process its reports until cancelled.

        Raises:
            PrinterConnectionError: If the connection cannot be established
                or is lost.

        """
        self.logger.info(
            "Connecting to printer %s at %s:%s", self.serial, self.ip_address, self.port
        )
        try:
            async with aiomqtt.Client(
                hostname=self.ip_address,
                port=self.port,
                username=MQTT_USERNAME,
                password=self.access_code,
                keepalive=MQTT_KEEPALIVE,
                tls_context=self._tls_context(),
            ) as client:
                self.mqtt_client = client
                await client.subscribe(self.report_topic)
                self._is_connected = True
                self.logger.info("Connected to printer %s", self.serial)

                await client.publish(self.request_topic, json.dumps(push_all()))

                async for message in client.messages:
                    await self._handle_message(message.payload)
        except aiomqtt.MqttError as e:
            msg = f"MQTT connection to {self.serial} at {self.ip_address} failed: {e}"
            raise PrinterConnectionError(msg) from e
        finally:
            self._is_connected = False
            self.mqtt_client = None
            # Unblock any waiters
            async with self._response_lock:
                for ev in self._response_events.values():
                    ev.set()
            self.logger.info("MQTT connection to printer %s closed", self.serial)

    async def _handle_message(self, payload: Any) -> None:
        """Handle an incoming report."""
        try:
            data = json.loads(payload)
        except (TypeError, UnicodeDecodeError, json.JSONDecodeError):
            self.logger.debug("Invalid JSON in report from %s", self.serial)
            return

        if not isinstance(data, dict):
            return

        if DEBUG:
            self.logger.debug("Report from %s: %s", self.serial, data)

        for section, body in data.items():
            if not isinstance(body, dict):
                continue

            if section == SECTION_PRINT and body.get("command") == "push_status":
                self._cached_report = merge_report(self._cached_report, body)
                self._status = PushStatus(self._cached_report)
                continue

            sequence_id = body.get("sequence_id")
            if sequence_id is None:
                continue

            key = str(sequence_id)
            async with self._response_lock:
                if event := self._response_events.get(key):
                    self._response_data[key] = data
                    event.set()

    def get_status(self) -> PushStatus | None:
        """Return the most recent status report, or None if none arrived yet."""
        return self._status

    async def publish(self, command: dict[str, Any]) -> dict[str, Any]:
        """
        Send a command and wait for the printer's acknowledgement.

        Arguments:
            command: A command payload from :mod:`machine_api.bambu.commands`.

        Returns:
            The acknowledgement reported by the printer.

        Raises:
            PrinterNotConnectedError: If the client is not connected.
            PrinterTimeoutError: If the printer does not answer in time.
            PrinterConnectionError: If publishing fails.
            PrinterCommandError: If the printer reports the command failed.

        """
        if not self.is_connected or self.mqtt_client is None:
            raise PrinterNotConnectedError(f"Printer {self.serial} is not connected")

        self._sequence_id += 1
        sequence_id = str(self._sequence_id)
        section = command_section(command)
        payload = {section: {**command[section], "sequence_id": sequence_id}}
        name = payload[section].get("command")

        event = asyncio.Event()
        async with self._response_lock:
            self._response_events[sequence_id] = event

        self.logger.debug(
            "Sending %s.%s to %s (sequence %s)", section, name, self.serial, sequence_id
        )
        try:
            await self.mqtt_client.publish(
                self.request_topic, json.dumps(payload), qos=1
            )
            try:
                await asyncio.wait_for(event.wait(), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                msg = f"Timeout waiting for {section}.{name} on {self.serial}"
                raise PrinterTimeoutError(msg) from e

            async with self._response_lock:
                response = self._response_data.get(sequence_id)
        except aiomqtt.MqttError as e:
            self._is_connected = False
            msg = f"Failed to send {section}.{name} to {self.serial}: {e}"
            raise PrinterConnectionError(msg) from e
        finally:
            async with self._response_lock:
                self._response_events.pop(sequence_id, None)
                self._response_data.pop(sequence_id, None)

        if response is None:
            msg = f"Connection to {self.serial} closed waiting for {section}.{name}"
            raise PrinterNotConnectedError(msg)

        result = str(response.get(section, {}).get("result", "")).lower()
        if result in FAILED_RESULTS:
            reason = response[section].get("reason", "unknown reason")
            msg = f"Printer {self.serial} rejected {section}.{name}: {reason}"
            raise PrinterCommandError(msg)

        return response

    async def upload_file(self, path: Path) -> None:
        """Upload a local file to the printer's storage."""
        await ftps.upload_file(
            self.ip_address, self.access_code, path, logger=self.logger
        )
