import base64
import json
import threading
from contextlib import contextmanager
from email import policy
from email.parser import BytesParser
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qsl, urlparse

import pytest

from fluenthttp import config


def _parse_multipart(content_type, body):
    message = BytesParser(policy=policy.default).parsebytes(
        b"Content-Type: " + content_type.encode("latin-1") + b"\r\n\r\n" + body
    )
    form, files = {}, {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        payload = part.get_payload(decode=True).decode("utf-8")
        if part.get_filename() is not None:
            files[name] = payload
        else:
            form[name] = payload
    return form, files


class EchoHandler(BaseHTTPRequestHandler):
    """Small stand-in for the httpbin endpoints the client is exercised against."""

    def _send_json(self, payload, status=200, extra_headers=()):
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        for name, value in extra_headers:
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_empty(self, status, extra_headers=()):
        self.send_response(status)
        for name, value in extra_headers:
            self.send_header(name, value)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _full_url(self):
        return f"http://{self.headers['Host']}{self.path}"

    def _request_cookies(self):
        cookies = {}
        for pair in self.headers.get("Cookie", "").split(";"):
            if "=" in pair:
                name, value = pair.split("=", 1)
                cookies[name.strip()] = value.strip()
        return cookies

    def _echo(self):
        parsed = urlparse(self.path)
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        content_type = self.headers.get("Content-Type", "")
        form, files, data = {}, {}, body.decode("utf-8", errors="replace")
        json_body = None
        if "application/json" in content_type:
            json_body = json.loads(body or b"null")
        elif "application/x-www-form-urlencoded" in content_type:
            form = dict(parse_qsl(data, keep_blank_values=True))
        elif "multipart/form-data" in content_type:
            form, files = _parse_multipart(content_type, body)
        self._send_json({
            "url": self._full_url(),
            "method": self.command,
            "args": dict(parse_qsl(parsed.query, keep_blank_values=True)),
            "headers": dict(self.headers.items()),
            "data": data,
            "form": form,
            "files": files,
            "json": json_body,
        })

    def do_GET(self):
        parsed = urlparse(self.path)
        path = parsed.path
        parts = [p for p in path.split("/") if p]

        if path in ("/get", "/headers"):
            self._send_json({
                "url": self._full_url(),
                "args": dict(parse_qsl(parsed.query, keep_blank_values=True)),
                "headers": dict(self.headers.items()),
            })
        elif path == "/cookies":
            self._send_json({"cookies": self._request_cookies()})
        elif path == "/cookies/set":
            cookies = [
                ("Set-Cookie", f"{name}={value}; Path=/")
                for name, value in parse_qsl(parsed.query)
            ]
            self._send_empty(302, [("Location", "/cookies")] + cookies)
        elif path == "/set-cookie-twice":
            self._send_json({}, extra_headers=[
                ("Set-Cookie", "token=first; Path=/"),
                ("Set-Cookie", "token=second; Path=/; Secure"),
            ])
        elif len(parts) == 2 and parts[0] == "redirect":
            remaining = int(parts[1])
            location = "/get" if remaining <= 1 else f"/redirect/{remaining - 1}"
            self._send_empty(302, [("Location", location)])
        elif len(parts) == 2 and parts[0] == "status":
            self._send_empty(int(parts[1]))
        elif path == "/xml":
            body = b'<?xml version="1.0"?><slideshow title="Sample"><slide><title>Intro</title></slide></slideshow>'
            self.send_response(200)
            self.send_header("Content-Type", "application/xml")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        elif path == "/text":
            body = "olá".encode("iso-8859-1")
            self.send_response(200)
            self.send_header("Content-Type", "text/plain; charset=iso-8859-1")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        elif len(parts) == 3 and parts[0] == "basic-auth":
            expected = base64.b64encode(f"{parts[1]}:{parts[2]}".encode()).decode()
            if self.headers.get("Authorization") == f"Basic {expected}":
                self._send_json({"authenticated": True, "user": parts[1]})
            else:
                self._send_empty(401, [("WWW-Authenticate", 'Basic realm="test"')])
        elif parts and parts[0] == "anything":
            self._send_json({"path": self.path})
        else:
            self._send_empty(404)

    def do_POST(self):
        if urlparse(self.path).path == "/redirect-post":
            self.rfile.read(int(self.headers.get("Content-Length") or 0))
            self._send_empty(303, [("Location", "/get")])
            return
        self._echo()

    def do_PUT(self):
        self._echo()

    def do_DELETE(self):
        self._echo()

    def log_message(self, format, *args):  # pragma: no cover
        return


@contextmanager
def run_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    base_url = f"http://127.0.0.1:{server.server_address[1]}"
    try:
        yield base_url
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


@pytest.fixture(scope="module")
def base_url():
    with run_server() as b:
        yield b


@pytest.fixture(autouse=True)
def restore_defaults():
    yield
    config.reset()
