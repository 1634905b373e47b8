"""
File upload to Bambu Lab printers.

Printers expose their storage over FTPS with implicit TLS on port 990. The
username is always ``bblp`` and the password is the LAN access code.
"""

from __future__ import annotations

import ftplib
import socket
import ssl
from pathlib import Path
from typing import Any

import anyio

from machine_api.exceptions import PrinterCommandError

from .const import FTPS_PORT, FTPS_TIMEOUT, FTPS_USERNAME, LOGGER


class ImplicitFTPTLS(ftplib.FTP_TLS):
    """
    FTP_TLS variant that wraps the control socket in TLS on connect.

    Data connections reuse the control channel's TLS session, which the
    printers require.
    """

    def connect(
        self,
        host: str = "",
        port: int = 0,
        timeout: float = -999,
        source_address: Any = None,
    ) -> str:
        """Connect and immediately wrap the socket in TLS."""
        if host:
            self.host = host
        if port:
            self.port = port
        if timeout != -999:  # noqa: PLR2004
            self.timeout = timeout
        if source_address is not None:
            self.source_address = source_address

        self.sock = socket.create_connection(
            (self.host, self.port), self.timeout, source_address=self.source_address
        )
        self.af = self.sock.family
        self.sock = self.context.wrap_socket(self.sock, server_hostname=self.host)
        self.file = self.sock.makefile("r", encoding=self.encoding)
        self.welcome = self.getresp()
        return self.welcome

    def ntransfercmd(self, cmd: str, rest: Any = None) -> tuple[socket.socket, int]:
        """Open a data connection sharing the control channel's TLS session."""
        conn, size = ftplib.FTP.ntransfercmd(self, cmd, rest)
        if self._prot_p:  # type: ignore[attr-defined]
            conn = self.context.wrap_socket(
                conn,
                server_hostname=self.host,
                session=self.sock.session,  # type: ignore[union-attr]
            )
        return conn, size


def _insecure_context() -> ssl.SSLContext:
    # Printers use self-signed certificates
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _store(host: str, access_code: str, path: Path, timeout: float) -> None:
    ftp = ImplicitFTPTLS(context=_insecure_context())
    ftp.connect(host, FTPS_PORT, timeout=timeout)
    try:
        ftp.login(FTPS_USERNAME, access_code)
        ftp.prot_p()
        with path.open("rb") as fh:
            ftp.storbinary(f"STOR {path.name}", fh)
    finally:
        try:
            ftp.quit()
        except (OSError, ftplib.Error):
            ftp.close()


async def upload_file(
    host: str,
    access_code: str,
    path: Path,
    timeout: float = FTPS_TIMEOUT,
    logger: Any = LOGGER,
) -> None:
    """
    Upload a local file to the root of the printer's storage.

    Raises:
        PrinterCommandError: If the file cannot be read or the transfer fails.

    """
    if not path.is_file():
        msg = f"Local file not found: {path}"
        raise PrinterCommandError(msg)

    logger.info("Uploading %s to %s", path.name, host)
    try:
        await anyio.to_thread.run_sync(_store, host, access_code, path, timeout)
    except (OSError, ftplib.Error) as e:
        msg = f"FTPS upload of {path.name} to {host} failed: {e}"
        raise PrinterCommandError(msg) from e
    logger.debug("Uploaded %s to %s", path.name, host)
