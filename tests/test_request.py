"""Tests for folio.http.request — the request facade."""

import io

import pytest
from conftest import make_request

from folio.errors import BadRequest
from folio.http.request import Request


class TestRequest:
    def test_method_uppercased(self) -> None:
        assert make_request("post").method == "POST"

    def test_header_case_insensitive(self) -> None:
        request = make_request(headers={"X-Token": "abc"})
        assert request.header("x-token") == "abc"
        assert request.header("missing") == ""

    def test_url_includes_query(self) -> None:
        assert make_request(path="/a", query="x=1").url == "/a?x=1"
        assert make_request(path="/a").url == "/a"


class TestCookies:
    def test_all_cookies(self) -> None:
        request = make_request(headers={"Cookie": "a=1; b=hello"})
        assert request.cookies() == {"a": 1, "b": "hello"}

    def test_single_cookie(self) -> None:
        request = make_request(headers={"Cookie": "prefs=%7B%22dark%22%3Atrue%7D"})
        assert request.cookies("prefs") == {"dark": True}
        assert request.cookies("missing") is None

    def test_parsed_once(self) -> None:
        request = make_request(headers={"Cookie": "a=1"})
        assert request.cookies() is request.cookies()


class TestBody:
    def test_json(self) -> None:
        request = make_request("POST", body=b'{"x": 1}', headers={"Content-Type": "application/json"})
        assert request.json() == {"x": 1}
        assert request.form_data() == {"x": 1}

    def test_malformed_json_is_bad_request(self) -> None:
        request = make_request("POST", body=b"{nope")
        with pytest.raises(BadRequest, match="Malformed JSON"):
            request.json()

    def test_urlencoded_form(self) -> None:
        request = make_request(
            "POST",
            body=b"name=Ada&tag=a&tag=b",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        form = request.form()
        assert form["name"] == "Ada"
        assert form.get_list("tag") == ["a", "b"]
        assert request.form_data() == {"name": "Ada", "tag": "a"}

    def test_unsupported_form_type(self) -> None:
        request = make_request("POST", body=b"x", headers={"Content-Type": "text/plain"})
        with pytest.raises(BadRequest, match="Unsupported form content type"):
            request.form()

    def test_empty_body_form_data(self) -> None:
        assert make_request().form_data() == {}


class TestFromEnviron:
    def test_builds_request(self) -> None:
        environ = {
            "REQUEST_METHOD": "POST",
            "PATH_INFO": "/blog/hello",
            "QUERY_STRING": "page=2",
            "CONTENT_TYPE": "application/json",
            "CONTENT_LENGTH": "8",
            "HTTP_X_REQUESTED_WITH": "test",
            "wsgi.input": io.BytesIO(b'{"a": 1}'),
        }
        request = Request.from_environ(environ)
        assert request.method == "POST"
        assert request.path == "/blog/hello"
        assert request.query["page"] == "2"
        assert request.header("X-Requested-With") == "test"
        assert request.content_type == "application/json"
        assert request.json() == {"a": 1}

    def test_defaults(self) -> None:
        request = Request.from_environ({"REQUEST_METHOD": "GET"})
        assert request.path == "/"
        assert request.body() == b""
