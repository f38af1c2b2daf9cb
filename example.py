"""
Example of using fluenthttp against httpbin.org.
"""

import logging

from fluenthttp import HttpRequest, HttpStatus

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    resp = HttpRequest.create("https://httpbin.org").parameter("page", "1").get("get")
    print(f"Status: {resp.status_code} {HttpStatus.get_reason_phrase(resp.status_code)}")
    print(f"Response: {resp.get_content()}")

    # JSON body
    resp2 = (
        HttpRequest.create("https://httpbin.org")
        .content_type("application/json")
        .post("post", {"test": "data"})
    )
    print(f"POST Status: {resp2.status_code}")
    print(f"POST echoed JSON: {resp2.get_content()['json']}")

    # Multipart upload, boundary is generated
    resp3 = (
        HttpRequest.create("https://httpbin.org")
        .content_type("multipart/form-data")
        .post("post", {"field": "value", "file": {"data": "hello", "filename": "hello.txt"}})
    )
    print(f"Multipart form: {resp3.get_content()['form']}")

    # Cookies set during redirects are kept on the final response
    resp4 = HttpRequest.create("https://httpbin.org").get("cookies/set?k1=v1")
    for name, cookie in resp4.cookies.items():
        print(f"  Cookie: {name}={cookie.value} path={cookie.path}")

    # Error statuses are ordinary responses
    resp5 = HttpRequest.create("https://httpbin.org").get("status/404")
    print(f"404 is error: {resp5.is_error()}")
