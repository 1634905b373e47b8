"""
Announcement frame parsing.

Printers advertise themselves with an SSDP-like text frame: a fixed
header line followed by ``token: value`` lines. Each printer family
names its tokens differently, so the parser is driven by an
:class:`AnnouncementFormat`.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from enum import Enum
from typing import Any

from machine_api.const import LOGGER
from machine_api.exceptions import AnnouncementRejectedError


class RejectReason(Enum):
    """Why a datagram was not accepted as a device announcement."""

    EMPTY = "empty datagram"
    NOT_A_NOTIFY = "not a notify"
    BAD_ADDRESS = "unparsable address"
    NO_ADDRESS = "no address"
    WRONG_URN = "not our device type"
    NO_NAME = "no name"


@dataclass(frozen=True)
class AnnouncementFormat:
    """Header, namespace and token names used by one printer family."""

    header: str
    urn: str
    location_token: str = "Location"
    urn_token: str = "NT"
    serial_token: str = "USN"
    model_token: str | None = None
    name_token: str | None = None


@dataclass
class DeviceAnnouncement:
    """A single validated announcement received from the network."""

    address: ipaddress.IPv4Address | ipaddress.IPv6Address
    name: str
    urn: str | None = None
    model_code: str | None = None
    serial: str | None = None
    port: int | None = None


def _split_tokens(lines: list[str], logger: Any) -> dict[str, str]:
    tokens: dict[str, str] = {}
    for line in lines:
        token, sep, rest = line.partition(":")
        if not sep:
            logger.debug("Bad token line %s", line)
            continue
        tokens[token.strip()] = rest.strip()
    return tokens


def parse_announcement(
    data: bytes, fmt: AnnouncementFormat, logger: Any = LOGGER
) -> DeviceAnnouncement:
    """
    Parse one received datagram into a validated announcement.

    Arguments:
        data: The raw datagram payload.
        fmt: Header and token names expected from the printer family.
        logger: The logger to use.

    Returns:
        The parsed announcement.

    Raises:
        AnnouncementRejectedError: If the datagram is not a valid
            announcement for this printer family.

    """
    # The frames are plain ASCII. Anything else gets mangled here and is
    # rejected by the checks below.
    payload = data.decode("utf-8", errors="replace")
    lines = [line.strip() for line in payload.splitlines() if line.strip()]

    if not lines:
        raise AnnouncementRejectedError(RejectReason.EMPTY)

    header, *rest = lines
    if header != fmt.header:
        raise AnnouncementRejectedError(RejectReason.NOT_A_NOTIFY, repr(header))

    tokens = _split_tokens(rest, logger)

    name = tokens.get(fmt.name_token) if fmt.name_token else None
    urn = tokens.get(fmt.urn_token)

    location = tokens.get(fmt.location_token)
    if location is None:
        raise AnnouncementRejectedError(
            RejectReason.NO_ADDRESS, f"printer name {name!r} (URN {urn!r})"
        )
    try:
        address = ipaddress.ip_address(location)
    except ValueError as e:
        raise AnnouncementRejectedError(
            RejectReason.BAD_ADDRESS, repr(location)
        ) from e

    if urn != fmt.urn:
        raise AnnouncementRejectedError(
            RejectReason.WRONG_URN, f"URN {urn!r} does not match {fmt.urn}"
        )

    if not name:
        raise AnnouncementRejectedError(
            RejectReason.NO_NAME, f"no name found for printer at {address}"
        )

    return DeviceAnnouncement(
        address=address,
        name=name,
        urn=urn,
        model_code=tokens.get(fmt.model_token) if fmt.model_token else None,
        serial=tokens.get(fmt.serial_token),
    )
