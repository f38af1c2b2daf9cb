"""Process-wide defaults applied to every new :class:`~fluenthttp.request.HttpRequest`.

Initial values can be supplied through the environment:

- ``FLUENTHTTP_DEFAULT_TIMEOUT``: timeout in seconds (default 30)
- ``FLUENTHTTP_VERIFY_SSL_CERTIFICATE``: ``0``/``false``/``no``/``off`` disables verification
- ``FLUENTHTTP_USER_AGENT``: value of the User-Agent header sent when none is set
"""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from ._version import __version__
from .timeouts import Timeout

DEFAULT_TIMEOUT = 30.0
DEFAULT_VERIFY_SSL_CERTIFICATE = True

_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in _FALSE_VALUES


@dataclass
class Defaults:
    """Defaults copied into each request builder at creation time."""
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl_certificate: bool = DEFAULT_VERIFY_SSL_CERTIFICATE
    user_agent: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Defaults":
        return cls(
            timeout=_env_float("FLUENTHTTP_DEFAULT_TIMEOUT", DEFAULT_TIMEOUT),
            verify_ssl_certificate=_env_bool(
                "FLUENTHTTP_VERIFY_SSL_CERTIFICATE", DEFAULT_VERIFY_SSL_CERTIFICATE
            ),
            user_agent=os.getenv("FLUENTHTTP_USER_AGENT") or f"fluenthttp/{__version__}",
        )


_defaults = Defaults.from_env()


def get_defaults() -> Defaults:
    return _defaults


def configure(**kwargs: Any) -> Defaults:
    """Update the process-wide defaults in place and return them."""
    known = {f.name for f in fields(Defaults)}
    unknown = set(kwargs) - known
    if unknown:
        raise ValueError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
    if "headers" in kwargs:
        kwargs["headers"] = dict(kwargs["headers"] or {})
    if "timeout" in kwargs:
        kwargs["timeout"] = Timeout.from_value(kwargs["timeout"]).read
    for key, value in kwargs.items():
        setattr(_defaults, key, value)
    return _defaults


def reset() -> Defaults:
    """Restore the defaults read from the environment."""
    global _defaults
    _defaults = Defaults.from_env()
    return _defaults
