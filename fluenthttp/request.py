import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

from .config import get_defaults
from .cookies import HttpCookie, build_cookie_header
from .errors import HttpRequestException
from .formdata import MultipartEncoder, ensure_boundary, parse_boundary
from .headers import Headers
from .logging import get_logger
from .response import HttpResponse
from .timeouts import Timeout
from .transport import Transport

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
MULTIPART_CONTENT_TYPE = "multipart/form-data"

# Repeated slashes, except the pair following a scheme separator
_DOUBLE_SLASH_REGEX = re.compile(r"([^:])(/{2,})")
_INDEXED_ARRAY_REGEX = re.compile(r"%5B[0-9]+%5D", re.IGNORECASE)


class HttpMethod:
    HEAD = "HEAD"
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    TRACE = "TRACE"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"


def _flatten_params(params: Mapping[str, Any], prefix: Optional[str] = None) -> List[Tuple[str, str]]:
    """Flatten nested values the way PHP-style query builders do: ``a[0]=x``, ``a[k]=y``."""
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix is not None else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(_flatten_params(value, name))
        elif isinstance(value, (list, tuple)):
            pairs.extend(_flatten_params(dict(enumerate(value)), name))
        elif isinstance(value, bool):
            pairs.append((name, "1" if value else "0"))
        else:
            pairs.append((name, str(value)))
    return pairs


def build_query(params: Mapping[str, Any]) -> str:
    return urlencode(_flatten_params(params))


def _is_structured(body: Any) -> bool:
    """Mappings, sequences and plain objects are encoded; scalars are sent as text."""
    if isinstance(body, (Mapping, list, tuple)):
        return True
    return hasattr(body, "__dict__")


def _as_mapping(body: Any) -> Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]:
    if isinstance(body, (Mapping, list, tuple)):
        return body
    return vars(body)


def _as_bytes(body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, bool):
        return b"1" if body else b""
    return str(body).encode("utf-8")


def _form_encode(body: Any) -> bytes:
    fields = _as_mapping(body)
    if not isinstance(fields, Mapping):
        try:
            fields = dict(fields)
        except (TypeError, ValueError) as exc:
            raise ValueError("A form-encoded body needs name/value pairs") from exc
    return build_query(fields).encode("ascii")


def _json_default(value: Any) -> Any:
    if hasattr(value, "__dict__"):
        return vars(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class PreparedRequest:
    """A snapshot of a builder's state, ready to hand to the transport."""
    method: str
    url: str
    headers: Headers
    body: Optional[bytes] = field(default=None, repr=False)
    timeout: Timeout = field(default_factory=Timeout)
    verify: bool = True
    auth: Optional[Tuple[str, str]] = field(default=None, repr=False)


class HttpRequest:
    """
    Fluent HTTP request builder.

    Setters return the builder so calls can be chained; nothing is sent
    until one of the verb methods runs. Each verb snapshots the current
    configuration, so a builder can be reused for several requests.

    Example:
        response = (
            HttpRequest.create("https://api.example.com")
            .accept("application/json")
            .parameter("page", "2")
            .get("users")
        )
        users = response.get_content()
    """

    def __init__(self, base_url: str, logger: Optional[logging.Logger] = None) -> None:
        defaults = get_defaults()
        self._base_url = base_url
        self._headers = Headers(defaults.headers)
        self._parameters: Dict[str, Any] = {}
        self._cookies: Dict[str, str] = {}
        self._timeout: float = defaults.timeout
        self._verify_ssl_certificate = defaults.verify_ssl_certificate
        self._user_agent = defaults.user_agent
        self._username: Optional[str] = None
        self._password = ""
        self.logger = logger or get_logger("request")

    @classmethod
    def create(cls, base_url: str) -> "HttpRequest":
        return cls(base_url)

    def header(self, name: str, value: str) -> "HttpRequest":
        self._headers.add(name, str(value))
        return self

    def headers(self, headers: Mapping[str, str]) -> "HttpRequest":
        for name, value in headers.items():
            self.header(name, value)
        return self

    def content_type(self, content_type: str) -> "HttpRequest":
        """
        Set the Content-Type header. A multipart type without a boundary
        gets a generated one.
        """
        return self.header("Content-Type", ensure_boundary(content_type))

    def accept(self, content_type: str) -> "HttpRequest":
        return self.header("Accept", content_type.strip())

    def authorization(self, scheme: str, value: str) -> "HttpRequest":
        if not scheme:
            raise ValueError("Scheme was null or empty")
        if not value:
            raise ValueError("Value was null or empty")
        return self.header("Authorization", f"{scheme} {value}")

    def parameter(self, name: str, value: Any) -> "HttpRequest":
        self._parameters[name] = value
        return self

    def parameters(self, parameters: Mapping[str, Any]) -> "HttpRequest":
        for name, value in parameters.items():
            self.parameter(name, value)
        return self

    def cookie(self, name: str, value: str) -> "HttpRequest":
        self._cookies[name] = value
        return self

    def cookies(self, cookies: Optional[Mapping[str, Union[str, HttpCookie]]] = None) -> "HttpRequest":
        """
        Add several cookies. Values may be strings or HttpCookie objects,
        so ``response.cookies`` can be passed straight through.
        """
        for name, value in (cookies or {}).items():
            if isinstance(value, HttpCookie):
                value = value.value
            self.cookie(name, value)
        return self

    def basic_authentication(self, username: str, password: str = "") -> "HttpRequest":
        self._username = username
        self._password = password
        return self

    def timeout(self, timeout: float) -> "HttpRequest":
        Timeout.from_value(timeout)
        self._timeout = float(timeout)
        return self

    def verify_ssl_certificate(self, verify_ssl_certificate: bool) -> "HttpRequest":
        """
        Toggle TLS certificate verification. Only disable this for debugging.
        """
        self._verify_ssl_certificate = bool(verify_ssl_certificate)
        return self

    def get(self, path: str = "") -> HttpResponse:
        return self._request(path, HttpMethod.GET)

    def put(self, path: str, body: Any) -> HttpResponse:
        return self._request(path, HttpMethod.PUT, body)

    def post(self, path: str, body: Any) -> HttpResponse:
        return self._request(path, HttpMethod.POST, body)

    def delete(self, path: str, body: Any = None) -> HttpResponse:
        return self._request(path, HttpMethod.DELETE, body)

    def build_url(self, path: str = "") -> str:
        url = self._base_url
        if path:
            url += "/" + path
        if self._parameters:
            url += "?" + build_query(self._parameters)

        url = _DOUBLE_SLASH_REGEX.sub(r"\1/", url)
        return _INDEXED_ARRAY_REGEX.sub("%5B%5D", url)

    def prepare(self, method: str, path: str = "", body: Any = None) -> PreparedRequest:
        """Snapshot the builder into a PreparedRequest without sending it."""
        headers = self._headers.copy()
        # Body first: it may add a Content-Type header
        content = self._encode_body(body, headers)
        if self._cookies:
            headers.add("Cookie", build_cookie_header(self._cookies))
        if self._user_agent and "User-Agent" not in headers:
            headers.set("User-Agent", self._user_agent)

        auth = (self._username, self._password) if self._username else None
        return PreparedRequest(
            method=method.upper(),
            url=self.build_url(path),
            headers=headers,
            body=content,
            timeout=Timeout.from_value(self._timeout),
            verify=self._verify_ssl_certificate,
            auth=auth,
        )

    def _encode_body(self, body: Any, headers: Headers) -> Optional[bytes]:
        if body is None:
            return None

        content_type = headers.get("Content-Type")
        if not _is_structured(body):
            if content_type is None:
                headers.set("Content-Type", FORM_CONTENT_TYPE)
            return _as_bytes(body)

        if content_type is None:
            headers.set("Content-Type", FORM_CONTENT_TYPE)
            return _form_encode(body)

        lowered = content_type.lower()
        if JSON_CONTENT_TYPE in lowered:
            return json.dumps(body, default=_json_default).encode("utf-8")
        if FORM_CONTENT_TYPE in lowered:
            return _form_encode(body)
        if MULTIPART_CONTENT_TYPE in lowered:
            boundary = parse_boundary(content_type)
            return MultipartEncoder(_as_mapping(body), boundary=boundary).to_bytes()
        raise ValueError(f"Cannot encode a structured body as {content_type!r}")

    def _request(self, path: str, method: str, body: Any = None) -> HttpResponse:
        prepared = self.prepare(method, path, body)
        return self.send(prepared)

    def send(self, prepared: PreparedRequest) -> HttpResponse:
        transport = Transport(
            timeout=prepared.timeout,
            verify=prepared.verify,
            auth=prepared.auth,
        )
        collector = _HeaderCollector()

        self.logger.debug("%s %s", prepared.method, prepared.url)
        info, payload = transport.perform(
            prepared.method,
            prepared.url,
            headers=prepared.headers.items(),
            body=prepared.body,
            header_callback=collector,
        )
        if info.error:
            raise HttpRequestException(info.error)

        self.logger.debug("%s %s -> %d", prepared.method, info.url, info.status_code)
        return HttpResponse(info, collector.headers, payload, info.error)


class _HeaderCollector:
    """
    Header callback that keeps the headers of the last response hop.
    Set-Cookie values from redirect hops are carried forward so cookies set
    along the way still reach the response.
    """

    def __init__(self) -> None:
        self.headers = Headers()

    def __call__(self, line: str) -> None:
        line = line.strip()
        if line.startswith("HTTP/"):
            carried = Headers()
            for value in self.headers.get_list("Set-Cookie"):
                carried.add("Set-Cookie", value)
            self.headers = carried
            return
        if ":" in line:
            name, value = line.split(":", 1)
            self.headers.add(name.strip(), value.strip())


__all__ = ["HttpMethod", "HttpRequest", "PreparedRequest", "build_query"]
