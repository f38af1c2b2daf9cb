from typing import Dict


class HttpStatus:
    """
    HTTP status code constants with range classification and reason phrases.

    The range markers (``INFORMATIONAL``, ``SUCCESSFUL``, ``REDIRECTION``,
    ``CLIENT_ERROR``, ``SERVER_ERROR``) share the value of the first code in
    their range; ``SERVER_ERROR_END`` is the exclusive upper bound.
    """

    # Informational 1xx
    INFORMATIONAL = 100
    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101

    # Successful 2xx
    SUCCESSFUL = 200
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NON_AUTHORITATIVE_INFORMATION = 203
    NO_CONTENT = 204
    RESET_CONTENT = 205
    PARTIAL_CONTENT = 206

    # Redirection 3xx
    REDIRECTION = 300
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    USE_PROXY = 305
    # 306 is reserved
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # Client error 4xx
    CLIENT_ERROR = 400
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    GONE = 410
    LENGTH_REQUIRED = 411
    PRECONDITION_FAILED = 412
    REQUEST_ENTITY_TOO_LARGE = 413
    REQUEST_URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    REQUESTED_RANGE_NOT_SATISFIABLE = 416
    EXPECTATION_FAILED = 417

    # Server error 5xx
    SERVER_ERROR = 500
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505
    SERVER_ERROR_END = 600

    REASON_PHRASES: Dict[int, str] = {
        CONTINUE: "Continue",
        SWITCHING_PROTOCOLS: "Switching Protocols",

        OK: "OK",
        CREATED: "Created",
        ACCEPTED: "Accepted",
        NON_AUTHORITATIVE_INFORMATION: "Non-Authoritative Information",
        NO_CONTENT: "No Content",
        RESET_CONTENT: "Reset Content",
        PARTIAL_CONTENT: "Partial Content",

        MULTIPLE_CHOICES: "Multiple Choices",
        MOVED_PERMANENTLY: "Moved Permanently",
        FOUND: "Found",
        SEE_OTHER: "See Other",
        NOT_MODIFIED: "Not Modified",
        USE_PROXY: "Use Proxy",
        TEMPORARY_REDIRECT: "Temporary Redirect",
        PERMANENT_REDIRECT: "Permanent Redirect",

        BAD_REQUEST: "Bad Request",
        UNAUTHORIZED: "Unauthorized",
        PAYMENT_REQUIRED: "Payment Required",
        FORBIDDEN: "Forbidden",
        NOT_FOUND: "Not Found",
        METHOD_NOT_ALLOWED: "Method Not Allowed",
        NOT_ACCEPTABLE: "Not Acceptable",
        PROXY_AUTHENTICATION_REQUIRED: "Proxy Authentication Required",
        REQUEST_TIMEOUT: "Request Time-out",
        CONFLICT: "Conflict",
        GONE: "Gone",
        LENGTH_REQUIRED: "Length Required",
        PRECONDITION_FAILED: "Precondition Failed",
        REQUEST_ENTITY_TOO_LARGE: "Request Entity Too Large",
        REQUEST_URI_TOO_LONG: "Request-URI Too Long",
        UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
        REQUESTED_RANGE_NOT_SATISFIABLE: "Requested Range Not Satisfiable",
        EXPECTATION_FAILED: "Expectation Failed",

        INTERNAL_SERVER_ERROR: "Internal Server Error",
        NOT_IMPLEMENTED: "Not Implemented",
        BAD_GATEWAY: "Bad Gateway",
        SERVICE_UNAVAILABLE: "Service Unavailable",
        GATEWAY_TIMEOUT: "Gateway Timeout",
        HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
    }

    @staticmethod
    def is_informational(status_code: int) -> bool:
        """True if the code is in the 100-199 range."""
        return HttpStatus.INFORMATIONAL <= status_code < HttpStatus.SUCCESSFUL

    @staticmethod
    def is_successful(status_code: int) -> bool:
        """True if the code is in the 200-299 range."""
        return HttpStatus.SUCCESSFUL <= status_code < HttpStatus.REDIRECTION

    @staticmethod
    def is_redirection(status_code: int) -> bool:
        """True if the code is in the 300-399 range."""
        return HttpStatus.REDIRECTION <= status_code < HttpStatus.CLIENT_ERROR

    @staticmethod
    def is_client_error(status_code: int) -> bool:
        """True if the code is in the 400-499 range."""
        return HttpStatus.CLIENT_ERROR <= status_code < HttpStatus.SERVER_ERROR

    @staticmethod
    def is_server_error(status_code: int) -> bool:
        """True if the code is in the 500-599 range."""
        return HttpStatus.SERVER_ERROR <= status_code < HttpStatus.SERVER_ERROR_END

    @staticmethod
    def is_error(status_code: int) -> bool:
        """True if the code is a client or server error (400-599)."""
        return HttpStatus.CLIENT_ERROR <= status_code < HttpStatus.SERVER_ERROR_END

    @staticmethod
    def get_reason_phrase(status_code: int) -> str:
        """
        Return the reason phrase for a standard status code.
        Raises ValueError for codes not in the table.
        """
        try:
            return HttpStatus.REASON_PHRASES[status_code]
        except KeyError:
            raise ValueError(f"Invalid status code: {status_code}") from None


__all__ = ["HttpStatus"]
