"""Tests for folio.http.headers — immutable, case-insensitive Headers."""

import pytest

from folio.http.headers import Headers


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers([("Content-Type", "text/html")])
        assert headers["content-type"] == "text/html"
        assert headers["CONTENT-TYPE"] == "text/html"
        assert "Content-Type" in headers

    def test_first_value_and_list(self) -> None:
        headers = Headers([("Accept", "a"), ("accept", "b")])
        assert headers["Accept"] == "a"
        assert headers.get_list("ACCEPT") == ["a", "b"]
        assert len(headers) == 1

    def test_missing(self) -> None:
        headers = Headers()
        assert headers.get("x-missing") is None
        assert headers.get("x-missing", "d") == "d"
        assert headers.get_list("x-missing") == []
        with pytest.raises(KeyError):
            headers["x-missing"]

    def test_non_string_key_not_contained(self) -> None:
        assert 1 not in Headers([("a", "b")])

    def test_from_mapping(self) -> None:
        assert Headers.from_mapping({"X-Test": "1"})["x-test"] == "1"
        assert len(Headers.from_mapping(None)) == 0


class TestFromEnviron:
    def test_http_keys_and_content_keys(self) -> None:
        headers = Headers.from_environ(
            {
                "HTTP_USER_AGENT": "pytest",
                "HTTP_X_FORWARDED_FOR": "10.0.0.1",
                "CONTENT_TYPE": "application/json",
                "CONTENT_LENGTH": "2",
                "PATH_INFO": "/ignored",
            }
        )
        assert headers["User-Agent"] == "pytest"
        assert headers["X-Forwarded-For"] == "10.0.0.1"
        assert headers["Content-Type"] == "application/json"
        assert headers["Content-Length"] == "2"
        assert "path-info" not in headers

    def test_empty_values_skipped(self) -> None:
        assert "content-type" not in Headers.from_environ({"CONTENT_TYPE": ""})
