from ._version import __version__ as __version__
from .request import HttpRequest, HttpMethod, PreparedRequest
from .response import HttpResponse
from .cookies import HttpCookie
from .status import HttpStatus
from .headers import Headers
from .timeouts import Timeout
from .transport import Transport, TransferInfo
from .config import configure, get_defaults
from .errors import (
    FluentHTTPError,
    HttpRequestException,
    RequestError,
    ResponseError,
    HTTPStatusError,
)

__all__ = [
    "HttpRequest",
    "HttpMethod",
    "PreparedRequest",
    "HttpResponse",
    "HttpCookie",
    "HttpStatus",
    "Headers",
    "Timeout",
    "Transport",
    "TransferInfo",
    "configure",
    "get_defaults",
    "FluentHTTPError",
    "HttpRequestException",
    "RequestError",
    "ResponseError",
    "HTTPStatusError",
    "__version__",
]
