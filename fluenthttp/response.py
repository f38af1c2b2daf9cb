import json
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from xml.etree import ElementTree as ET

from .cookies import HttpCookie
from .errors import HTTPStatusError, ResponseError
from .headers import Headers
from .status import HttpStatus
from .transport import TransferInfo

_CHARSET_REGEX = re.compile(r'charset=([^;,\s]+)', re.IGNORECASE)
_XML_TYPES = ("text/xml", "application/xml")


class HttpResponse:
    """
    The result of an executed :class:`~fluenthttp.request.HttpRequest`.

    Built once from the transport's transfer metadata, the captured headers
    and the raw payload (header block followed by the body), then read-only.
    """

    def __init__(
        self,
        info: TransferInfo,
        headers: Union[Headers, Mapping[str, Sequence[str]], None],
        payload: Optional[bytes],
        error: str = "",
    ) -> None:
        self._url = info.url
        self._status_code = info.status_code
        self._headers = headers if isinstance(headers, Headers) else Headers(headers or {})
        self._cookies = self._process_cookie_headers(self._headers)
        self._error = error or ""

        self._content_type = info.content_type or self._headers.get("Content-Type") or ""
        self._header_size = info.header_size
        if payload is None:
            self._content = b""
            self._content_length = 0
        else:
            self._content = payload[self._header_size:]
            if info.content_length is not None:
                self._content_length = info.content_length
            else:
                self._content_length = len(payload) - self._header_size

        self._text_cache: Optional[str] = None

    @staticmethod
    def _process_cookie_headers(headers: Headers) -> Dict[str, HttpCookie]:
        cookies: Dict[str, HttpCookie] = {}
        for cookie_string in headers.get_list("Set-Cookie"):
            cookie = HttpCookie(cookie_string)
            if cookie.name is not None:
                cookies[cookie.name] = cookie
        return cookies

    @property
    def url(self) -> str:
        """The URL the response was received from, after redirects."""
        return self._url

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason(self) -> Optional[str]:
        """Standard reason phrase for the status code, None when unknown."""
        return HttpStatus.REASON_PHRASES.get(self._status_code)

    @property
    def headers(self) -> Headers:
        return self._headers

    def get_header(self, name: str) -> Optional[List[str]]:
        """All values for ``name`` (case-insensitive), or None when absent."""
        if name not in self._headers:
            return None
        return self._headers.get_list(name)

    @property
    def cookies(self) -> Dict[str, HttpCookie]:
        return dict(self._cookies)

    def get_cookie(self, name: str) -> Optional[HttpCookie]:
        return self._cookies.get(name)

    @property
    def content_type(self) -> str:
        return self._content_type

    @property
    def content_length(self) -> int:
        """Length of the body in bytes."""
        return self._content_length

    @property
    def content_raw(self) -> bytes:
        """The body with the header block stripped."""
        return self._content

    @property
    def error(self) -> str:
        """The transport-level error, empty when the transfer succeeded."""
        return self._error

    @property
    def encoding(self) -> str:
        """Charset from the Content-Type header, utf-8 when absent."""
        match = _CHARSET_REGEX.search(self._content_type)
        if match:
            charset_value = match.group(1).strip('"\'').strip()
            if charset_value:
                return charset_value
        return "utf-8"

    @property
    def text(self) -> str:
        if self._text_cache is None:
            try:
                self._text_cache = self._content.decode(self.encoding)
            except (UnicodeDecodeError, LookupError):
                self._text_cache = self._content.decode("utf-8", errors="replace")
        return self._text_cache

    def json(self) -> Any:
        """
        Decode the body as JSON. An empty body decodes to None.
        Raises ResponseError if the body is not valid JSON.
        """
        text_content = self.text
        if not text_content.strip():
            return None
        try:
            return json.loads(text_content)
        except json.JSONDecodeError as e:
            raise ResponseError(f"Failed to parse JSON: {e}") from e

    def xml(self) -> Optional[ET.Element]:
        """
        Parse the body into an ElementTree element. An empty body gives None.
        Raises ResponseError if the body is not well-formed XML.
        """
        if not self._content.strip():
            return None
        try:
            return ET.fromstring(self._content)
        except ET.ParseError as e:
            raise ResponseError(f"Failed to parse XML: {e}") from e

    def get_content(self) -> Any:
        """
        The body decoded according to its Content-Type: JSON documents as
        Python values, text/xml and application/xml as an Element, anything
        else as text.
        """
        content_type = self._content_type.lower()
        if "application/json" in content_type:
            return self.json()
        if any(xml_type in content_type for xml_type in _XML_TYPES):
            return self.xml()
        return self.text

    @property
    def ok(self) -> bool:
        """True if the transfer succeeded with a 2xx status."""
        return not self._error and HttpStatus.is_successful(self._status_code)

    def is_error(self) -> bool:
        """True if the transport reported an error or the status is 4xx/5xx."""
        return bool(self._error) or HttpStatus.is_error(self._status_code)

    def raise_for_status(self) -> None:
        """Raise HTTPStatusError if the status code is 4xx or 5xx."""
        if HttpStatus.is_error(self._status_code):
            raise HTTPStatusError(self)

    def __repr__(self) -> str:
        return f"<HttpResponse [{self._status_code}] url={self._url!r}>"


__all__ = ["HttpResponse"]
