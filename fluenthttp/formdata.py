import re
import time
import uuid
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

FieldsType = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]

_BOUNDARY_REGEX = re.compile(r'boundary=(?:"([^"]+)"|([^\s;,"]+))', re.IGNORECASE)
_REPEATED_SEMICOLONS = re.compile(r"(.)(;{2,})")
_CRLF = b"\r\n"


def generate_boundary() -> str:
    """Time-prefixed unique boundary token."""
    return f"{int(time.time())}{uuid.uuid4().hex}"


def is_multipart(content_type: str) -> bool:
    return "multipart/" in content_type.lower()


def ensure_boundary(content_type: str) -> str:
    """
    Append a generated ``boundary`` parameter to a multipart content type
    that does not declare one. Other content types are returned unchanged.
    """
    content_type = content_type.strip()
    if not is_multipart(content_type) or "boundary" in content_type.lower():
        return content_type
    content_type = f'{content_type}; boundary="{generate_boundary()}"'
    return _REPEATED_SEMICOLONS.sub(r"\1;", content_type)


def parse_boundary(content_type: str) -> str:
    """Extract the boundary from a Content-Type value, quoted or bare."""
    match = _BOUNDARY_REGEX.search(content_type)
    if match:
        return match.group(1) or match.group(2)
    raise ValueError(
        "The provided Content-Type header contained a 'multipart/*' content type "
        "but did not define a boundary."
    )


class MultipartEncoder:
    """
    Builds a multipart/form-data body in memory.

    A field value is rendered as-is when it is a string, bytes or number.
    A mapping with a ``data`` key becomes a part whose content is ``data``,
    with a ``filename`` attribute when one is given and an optional
    ``content_type``. ``None`` and empty-string values are skipped.
    """

    def __init__(self, fields: Optional[FieldsType], boundary: Optional[str] = None) -> None:
        self.boundary = boundary or generate_boundary()
        self._boundary_line = f"--{self.boundary}".encode("ascii") + _CRLF
        self._closing_boundary = f"--{self.boundary}--".encode("ascii")
        self.fields = self._normalize_fields(fields)
        self.content_type = f'multipart/form-data; boundary="{self.boundary}"'

    def to_bytes(self) -> bytes:
        body = bytearray()
        for name, value in self.fields:
            if isinstance(value, Mapping):
                if "data" not in value:
                    raise ValueError(f"Multipart field {name!r} is missing 'data'")
                body += self._boundary_line
                body += self._render_headers(name, value.get("filename"), value.get("content_type"))
                body += self._coerce_bytes(value["data"])
                body += _CRLF
            elif value is None or value == "" or value == b"":
                continue
            else:
                body += self._boundary_line
                body += self._render_headers(name)
                body += self._coerce_bytes(value)
                body += _CRLF
        body += self._closing_boundary
        return bytes(body)

    def _render_headers(
        self,
        name: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> bytes:
        disposition = f'Content-Disposition: form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        lines = [disposition]
        if content_type:
            lines.append(f"Content-Type: {content_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    @staticmethod
    def _normalize_fields(fields: Optional[FieldsType]) -> List[Tuple[str, Any]]:
        if not fields:
            return []
        items: Iterable[Tuple[Any, Any]] = fields.items() if isinstance(fields, Mapping) else fields
        return [(str(name), value) for name, value in items]

    @staticmethod
    def _coerce_bytes(value: Any) -> bytes:
        if value is None:
            return b""
        if isinstance(value, bytes):
            return value
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode("utf-8")
        return str(value).encode("utf-8")


__all__ = ["MultipartEncoder", "ensure_boundary", "generate_boundary", "is_multipart", "parse_boundary"]
