import base64
import logging
import socket
import ssl
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import quote, urljoin, urlsplit

import h11

from .logging import get_logger
from .timeouts import Timeout

READ_BUFFER_SIZE = 65536
DEFAULT_MAX_REDIRECTS = 10
REDIRECT_CODES = {301, 302, 303, 307, 308}
_PATH_SAFE = "/%:@!$&'()*+,;=~"

HeaderList = List[Tuple[str, str]]
HeaderCallback = Callable[[str], None]


class TransportError(Exception):
    """Low-level failure while talking to the server."""


@lru_cache(maxsize=2)
def _get_ssl_context(verify: bool = True) -> ssl.SSLContext:
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


@dataclass
class TransferInfo:
    """Metadata about a completed transfer, including the final hop after redirects."""
    url: str
    status_code: int = 0
    reason: str = ""
    http_version: str = "1.1"
    content_type: Optional[str] = None
    header_size: int = 0
    content_length: Optional[int] = None
    redirect_count: int = 0
    total_time: float = 0.0
    error: str = ""


@dataclass
class _RawResponse:
    status_code: int
    reason: str
    http_version: str
    headers: HeaderList
    body: bytes = field(repr=False)

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def header_block(self) -> bytes:
        lines = [f"HTTP/{self.http_version} {self.status_code} {self.reason}".rstrip()]
        lines.extend(f"{name}: {value}" for name, value in self.headers)
        return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")


@dataclass
class _Target:
    scheme: str
    host: str
    port: int
    target: str

    @property
    def host_header(self) -> str:
        default_port = 443 if self.scheme == "https" else 80
        if self.port == default_port:
            return self.host
        return f"{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str) -> "_Target":
        parsed = urlsplit(url)
        if parsed.scheme not in ("http", "https"):
            raise TransportError(f"Unsupported protocol in URL: {url}")
        if not parsed.hostname:
            raise TransportError(f"No host in URL: {url}")
        try:
            port = parsed.port or (443 if parsed.scheme == "https" else 80)
        except ValueError as exc:
            raise TransportError(f"Invalid port in URL: {url}") from exc
        # Characters outside ASCII are sent as UTF-8 percent escapes
        target = quote(parsed.path or "/", safe=_PATH_SAFE)
        if parsed.query:
            target += "?" + quote(parsed.query, safe=_PATH_SAFE + "?")
        return cls(scheme=parsed.scheme, host=parsed.hostname, port=port, target=target)


class Connection:
    """
    Blocking HTTP/1.1 connection built on a plain socket + h11.

    One connection carries exactly one request/response cycle and is closed
    afterwards.
    """

    def __init__(self, target: _Target, timeout: Timeout, verify: bool = True) -> None:
        self.target = target
        self.timeout = timeout
        self.ssl_context = _get_ssl_context(verify) if target.scheme == "https" else None
        self.h11_conn = h11.Connection(h11.CLIENT)
        self.sock: Optional[socket.socket] = None

    def connect(self) -> None:
        sock = socket.create_connection(
            (self.target.host, self.target.port), timeout=self.timeout.connect
        )
        try:
            if self.ssl_context is not None:
                sock = self.ssl_context.wrap_socket(sock, server_hostname=self.target.host)
            sock.settimeout(self.timeout.read)
        except BaseException:
            sock.close()
            raise
        self.sock = sock

    def close(self) -> None:
        if self.sock is None:
            return
        try:
            self.sock.close()
        finally:
            self.sock = None

    def __enter__(self) -> "Connection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _send_event(self, event: h11.Event) -> None:
        data = self.h11_conn.send(event)
        if data:
            self.sock.sendall(data)

    def _read_event(self) -> h11.Event:
        while True:
            event = self.h11_conn.next_event()
            if event is h11.NEED_DATA:
                chunk = self.sock.recv(READ_BUFFER_SIZE)
                self.h11_conn.receive_data(chunk)
                continue
            return event

    def send_request(self, method: str, headers: HeaderList, body: Optional[bytes]) -> _RawResponse:
        self._send_event(
            h11.Request(
                method=method.encode("ascii"),
                target=self.target.target.encode("ascii"),
                headers=[(k.encode("latin-1"), v.encode("latin-1")) for k, v in headers],
            )
        )
        if body:
            self._send_event(h11.Data(data=body))
        self._send_event(h11.EndOfMessage())
        return self._read_response()

    def _read_response(self) -> _RawResponse:
        while True:
            event = self._read_event()
            if isinstance(event, h11.Response):
                break
            if isinstance(event, h11.InformationalResponse):
                continue
            if isinstance(event, h11.ConnectionClosed):
                raise TransportError("Connection closed before response")

        headers = [
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in event.headers.raw_items()
        ]
        body_buffer = bytearray()
        while True:
            data_event = self._read_event()
            if isinstance(data_event, h11.Data):
                body_buffer.extend(data_event.data)
            elif isinstance(data_event, (h11.EndOfMessage, h11.ConnectionClosed)):
                break

        return _RawResponse(
            status_code=event.status_code,
            reason=event.reason.decode("latin-1"),
            http_version=event.http_version.decode("ascii"),
            headers=headers,
            body=bytes(body_buffer),
        )


class Transport:
    """
    Synchronous HTTP transport.

    ``perform`` never raises for network or protocol failures; they are
    reported through :attr:`TransferInfo.error` and an empty payload. The
    returned payload is the final hop's header block followed by its body,
    ``TransferInfo.header_size`` marks where the body starts.
    """

    def __init__(
        self,
        timeout: Optional[Timeout] = None,
        verify: bool = True,
        follow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        auth: Optional[Tuple[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.timeout = Timeout.from_value(timeout)
        self.verify = verify
        self.follow_redirects = follow_redirects
        self.max_redirects = max_redirects
        self.auth = auth
        self.logger = logger or get_logger("transport")

    def perform(
        self,
        method: str,
        url: str,
        headers: Sequence[Tuple[str, str]] = (),
        body: Optional[bytes] = None,
        header_callback: Optional[HeaderCallback] = None,
    ) -> Tuple[TransferInfo, bytes]:
        info = TransferInfo(url=url)
        start_time = time.monotonic()
        try:
            payload = self._perform(info, method.upper(), url, list(headers), body, header_callback)
        except (OSError, UnicodeError, h11.ProtocolError, TransportError) as exc:
            info.error = str(exc) or exc.__class__.__name__
            self.logger.warning("%s %s failed: %s", method.upper(), info.url, info.error)
            payload = b""
        info.total_time = time.monotonic() - start_time
        return info, payload

    def _perform(
        self,
        info: TransferInfo,
        method: str,
        url: str,
        headers: HeaderList,
        body: Optional[bytes],
        header_callback: Optional[HeaderCallback],
    ) -> bytes:
        origin_host = _Target.from_url(url).host
        current_url = url
        while True:
            target = _Target.from_url(current_url)
            info.url = current_url
            hop_headers = self._prepare_headers(headers, target, body, same_origin=target.host == origin_host)
            with Connection(target, self.timeout, verify=self.verify) as conn:
                resp = conn.send_request(method, hop_headers, body)

            header_block = resp.header_block()
            if header_callback is not None:
                for line in header_block.decode("latin-1").split("\r\n")[:-1]:
                    header_callback(line + "\r\n")

            location = resp.header("Location")
            if self.follow_redirects and resp.status_code in REDIRECT_CODES and location:
                if info.redirect_count >= self.max_redirects:
                    raise TransportError(f"Maximum ({self.max_redirects}) redirects followed")
                info.redirect_count += 1
                next_url = urljoin(current_url, location)
                self.logger.debug("Redirect %d: %s -> %s", resp.status_code, current_url, next_url)
                if resp.status_code in (301, 302, 303) and method != "HEAD":
                    method = "GET"
                    body = None
                    headers = [
                        (k, v) for k, v in headers
                        if k.lower() not in ("content-type", "content-length")
                    ]
                current_url = next_url
                continue

            info.status_code = resp.status_code
            info.reason = resp.reason
            info.http_version = resp.http_version
            info.content_type = resp.header("Content-Type")
            info.header_size = len(header_block)
            content_length = resp.header("Content-Length")
            info.content_length = int(content_length) if content_length and content_length.isdigit() else None
            return header_block + resp.body

    def _prepare_headers(
        self,
        headers: HeaderList,
        target: _Target,
        body: Optional[bytes],
        same_origin: bool,
    ) -> HeaderList:
        lower_keys = {k.lower() for k, _ in headers}
        prepared: HeaderList = [("Host", target.host_header)]
        prepared.extend((k, v) for k, v in headers if k.lower() not in ("host", "connection", "content-length"))
        if body is not None:
            prepared.append(("Content-Length", str(len(body))))
        if self.auth and same_origin and "authorization" not in lower_keys:
            username, password = self.auth
            token = base64.b64encode(f"{username}:{password}".encode("latin-1")).decode("ascii")
            prepared.append(("Authorization", f"Basic {token}"))
        prepared.append(("Connection", "close"))
        return prepared


__all__ = ["Connection", "HeaderCallback", "TransferInfo", "Transport", "TransportError"]
