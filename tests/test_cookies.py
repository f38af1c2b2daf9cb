import time

from fluenthttp import HttpCookie
from fluenthttp.cookies import build_cookie_header


def test_parse_simple_session_cookie():
    cookie = HttpCookie("session=abc; Path=/; HttpOnly")
    assert cookie.name == "session"
    assert cookie.value == "abc"
    assert cookie.path == "/"
    assert cookie.http_only is True
    assert cookie.secure is False


def test_defaults():
    cookie = HttpCookie("token=xyz")
    assert cookie.path == "/"
    assert cookie.http_only is True
    assert cookie.domain is None
    assert cookie.expires is None
    assert cookie.max_age is None
    assert cookie.same_site is None


def test_attributes_are_case_insensitive():
    cookie = HttpCookie(
        "id=42; DOMAIN=example.com; path=/app; secure; max-age=3600; samesite=Lax; "
        "expires=Wed, 21 Oct 2037 07:28:00 GMT"
    )
    assert cookie.name == "id"
    assert cookie.value == "42"
    assert cookie.domain == "example.com"
    assert cookie.path == "/app"
    assert cookie.secure is True
    assert cookie.max_age == 3600
    assert cookie.same_site == "Lax"
    assert cookie.expires == 2139722880.0


def test_attribute_before_name_value():
    cookie = HttpCookie("Path=/docs; lang=en")
    assert cookie.name == "lang"
    assert cookie.value == "en"
    assert cookie.path == "/docs"


def test_value_may_contain_equals_sign():
    cookie = HttpCookie("data=a=b=c; Path=/")
    assert cookie.name == "data"
    assert cookie.value == "a=b=c"


def test_name_that_contains_attribute_word_is_not_an_attribute():
    cookie = HttpCookie("xpath=1")
    assert cookie.name == "xpath"
    assert cookie.path == "/"


def test_unknown_attributes_are_kept_as_extensions():
    cookie = HttpCookie("a=1; Priority=High")
    assert cookie.name == "a"
    assert cookie.extensions == {"Priority": "High"}


def test_first_unknown_pair_is_the_name_value():
    cookie = HttpCookie("Path=/docs; lang=en; theme=dark; Secure; tz=UTC")
    assert cookie.name == "lang"
    assert cookie.value == "en"
    assert cookie.path == "/docs"
    assert cookie.secure is True
    assert cookie.extensions == {"theme": "dark", "tz": "UTC"}


def test_unparsable_values():
    cookie = HttpCookie("a=1; Expires=not a date; Max-Age=soon")
    assert cookie.expires is None
    assert cookie.max_age is None


def test_expiry():
    assert HttpCookie("a=1; Max-Age=0").is_expired()
    assert not HttpCookie("a=1; Max-Age=60").is_expired()
    assert HttpCookie("a=1; Expires=Thu, 01 Jan 1970 00:00:01 GMT").is_expired()
    assert not HttpCookie("a=1").is_expired(now=time.time())


def test_cookie_header_rendering():
    assert HttpCookie("a=1; Path=/").to_header() == "a=1"
    assert build_cookie_header({"a": "1", "b": "2"}) == "a=1; b=2"
    assert build_cookie_header([HttpCookie("x=9"), HttpCookie("y=8")]) == "x=9; y=8"
