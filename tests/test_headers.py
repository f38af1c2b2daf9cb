from fluenthttp import Headers


def test_multimap_keeps_values_in_order():
    headers = Headers()
    headers.add("Accept", "text/html")
    headers.add("accept", "application/json")
    assert headers.get_list("ACCEPT") == ["text/html", "application/json"]
    assert headers.get("Accept") == "text/html"
    assert headers.items() == [("Accept", "text/html"), ("Accept", "application/json")]


def test_original_case_is_preserved():
    headers = Headers({"X-Custom-Header": "1"})
    headers.add("x-custom-header", "2")
    assert list(headers) == ["X-Custom-Header"]
    assert headers.to_dict() == {"X-Custom-Header": ["1", "2"]}


def test_set_replaces_and_remove_drops():
    headers = Headers([("Content-Type", "text/plain"), ("Content-Type", "text/html")])
    headers.set("content-type", "application/json")
    assert headers["Content-Type"] == ["application/json"]
    headers.remove("CONTENT-TYPE")
    assert "Content-Type" not in headers
    assert headers.get("Content-Type") is None
    assert len(headers) == 0


def test_copy_is_independent():
    headers = Headers({"A": ["1"]})
    clone = headers.copy()
    clone.add("A", "2")
    assert headers.get_list("a") == ["1"]
    assert clone.get_list("a") == ["1", "2"]
