"""Tests for folio.routing.resolver — matching and specificity."""

from folio.routing.resolver import (
    RouteTable,
    fingerprinted,
    match_route,
    resolve_route,
    specificity,
    split_path,
)
from folio.routing.route import Route


def _route(pattern: str, **kwargs: object) -> Route:
    return Route.from_pattern(pattern, f"/pages/{pattern or 'index'}", **kwargs)  # type: ignore[arg-type]


class TestSplitPath:
    def test_drops_empty_parts(self) -> None:
        assert split_path("//blog///hello/") == ["blog", "hello"]

    def test_drops_query_string(self) -> None:
        assert split_path("/blog/hello?x=1") == ["blog", "hello"]

    def test_root(self) -> None:
        assert split_path("/") == []


class TestMatchRoute:
    def test_dynamic_binds_value(self) -> None:
        assert match_route(_route("blog/{slug}"), ["blog", "hello"]) == {"slug": "hello"}

    def test_static_is_case_sensitive(self) -> None:
        assert match_route(_route("blog"), ["Blog"]) is None

    def test_count_mismatch(self) -> None:
        assert match_route(_route("blog/{slug}"), ["blog"]) is None
        assert match_route(_route("blog/{slug}"), ["blog", "a", "b"]) is None

    def test_catch_all_binds_list(self) -> None:
        params = match_route(_route("docs/{rest:path}"), ["docs", "a", "b"])
        assert params == {"rest": ["a", "b"]}

    def test_catch_all_matches_zero_segments(self) -> None:
        assert match_route(_route("docs/{rest:path}"), ["docs"]) == {"rest": []}

    def test_root_route(self) -> None:
        assert match_route(_route(""), []) == {}


class TestResolve:
    def test_blog_scenario(self) -> None:
        match = resolve_route("/blog/hello", [_route("blog/{slug}")])
        assert match is not None
        assert match.params == {"slug": "hello"}

    def test_no_match_returns_none(self) -> None:
        assert resolve_route("/nope", [_route("blog/{slug}")]) is None

    def test_static_beats_dynamic(self) -> None:
        dynamic = _route("blog/{slug}")
        static = _route("blog/about")
        match = resolve_route("/blog/about", [dynamic, static])
        assert match is not None
        assert match.route is static
        assert match.params == {}

    def test_dynamic_beats_catch_all(self) -> None:
        catch_all = _route("blog/{rest:path}")
        dynamic = _route("blog/{slug}")
        match = resolve_route("/blog/hello", [catch_all, dynamic])
        assert match is not None
        assert match.route is dynamic

    def test_first_differing_position_decides(self) -> None:
        # static at position 0 outranks dynamic at position 0, whatever follows
        early_static = _route("blog/{a}/{b}")
        late_static = _route("{x}/post/edit")
        match = resolve_route("/blog/post/edit", [late_static, early_static])
        assert match is not None
        assert match.route is early_static

    def test_catch_all_is_last_resort(self) -> None:
        fallback = _route("{rest:path}")
        index = _route("")
        assert resolve_route("/", [fallback, index]).route is index  # type: ignore[union-attr]
        assert resolve_route("/x/y", [fallback, index]).route is fallback  # type: ignore[union-attr]

    def test_ties_go_to_table_order(self) -> None:
        first = _route("{a}")
        second = _route("{b}")
        match = resolve_route("/x", [first, second])
        assert match is not None
        assert match.route is first
        assert match.params == {"a": "x"}

    def test_specificity_key(self) -> None:
        assert specificity(_route("a/{b}/{c:path}")) == (0, 1, 2)


class TestFingerprint:
    def test_inserts_before_extension(self) -> None:
        assert fingerprinted("/css/app.css", "abc123") == "/css/app.abc123.css"

    def test_no_extension(self) -> None:
        assert fingerprinted("assets/logo", "ff") == "assets/logo.ff"

    def test_no_fingerprint(self) -> None:
        assert fingerprinted("app.css", None) == "app.css"

    def test_fingerprinted_request_matches_route(self) -> None:
        route = _route("css/app.css", is_static=True, fingerprint="abc123")
        match = resolve_route("/css/app.abc123.css", [route])
        assert match is not None
        assert match.route is route

    def test_fingerprint_only_applies_to_last_segment(self) -> None:
        route = _route("css/app.css", fingerprint="abc123")
        assert resolve_route("/css.abc123/app.css", [route]) is None


class TestRouteTable:
    def test_resolve_and_len(self) -> None:
        table = RouteTable([_route("a"), _route("b")])
        assert len(table) == 2
        assert table.resolve("/b").route is table[1]  # type: ignore[union-attr]

    def test_iterates_in_order(self) -> None:
        routes = [_route("a"), _route("b")]
        assert list(RouteTable(routes)) == routes
