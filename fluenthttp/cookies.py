import time
from dataclasses import dataclass, field
from email.utils import parsedate_to_datetime
from functools import lru_cache
from typing import Dict, Iterable, Mapping, Optional, Union

_ATTRIBUTES = ("expires", "max-age", "domain", "path", "secure", "httponly", "samesite")


@lru_cache(maxsize=128)
def _parse_date(date_str: str) -> Optional[float]:
    """Parse an HTTP date into a POSIX timestamp, None when unparsable."""
    try:
        dt = parsedate_to_datetime(date_str)
    except (TypeError, ValueError, IndexError):
        return None
    return dt.timestamp() if dt else None


def _parse_max_age(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


@dataclass(init=False)
class HttpCookie:
    """
    A cookie parsed from a single ``Set-Cookie`` header value.

    Attribute names (Expires, Max-Age, Domain, Path, Secure, HttpOnly,
    SameSite) are matched case-insensitively. The first pair that is not an
    attribute is the cookie's name and value; any further unknown pairs are
    kept in ``extensions``.
    """
    name: Optional[str]
    value: str
    expires: Optional[float]
    max_age: Optional[int]
    domain: Optional[str]
    path: str
    secure: bool
    http_only: bool
    same_site: Optional[str]
    extensions: Dict[str, str] = field(repr=False)

    def __init__(self, cookie_string: str) -> None:
        self.name = None
        self.value = ""
        self.expires = None
        self.max_age = None
        self.domain = None
        self.path = "/"
        self.secure = False
        self.http_only = True
        self.same_site = None
        self.extensions = {}
        self._parse(cookie_string)

    def _parse(self, cookie_string: str) -> None:
        for part in cookie_string.split(";"):
            part = part.strip()
            if not part:
                continue
            key, _, value = part.partition("=")
            key = key.strip()
            value = value.strip()
            lowered = key.lower()

            if lowered not in _ATTRIBUTES:
                if self.name is None:
                    self.name = key
                    self.value = _unquote(value)
                else:
                    self.extensions[key] = value
                continue

            if lowered == "expires":
                self.expires = _parse_date(_unquote(value))
            elif lowered == "max-age":
                self.max_age = _parse_max_age(value)
            elif lowered == "domain":
                self.domain = value or None
            elif lowered == "path":
                self.path = value or "/"
            elif lowered == "secure":
                self.secure = True
            elif lowered == "httponly":
                self.http_only = True
            elif lowered == "samesite":
                self.same_site = value or None

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Max-Age of zero or less, or an Expires date in the past."""
        if self.max_age is not None:
            return self.max_age <= 0
        if self.expires is None:
            return False
        return (time.time() if now is None else now) > self.expires

    def to_header(self) -> str:
        """Render as a ``name=value`` pair for a Cookie request header."""
        return f"{self.name}={self.value}"


def build_cookie_header(cookies: Union[Mapping[str, str], Iterable[HttpCookie]]) -> str:
    """Join cookies into a single Cookie header value (``a=1; b=2``)."""
    if isinstance(cookies, Mapping):
        return "; ".join(f"{name}={value}" for name, value in cookies.items())
    return "; ".join(cookie.to_header() for cookie in cookies)


__all__ = ["HttpCookie", "build_cookie_header"]
