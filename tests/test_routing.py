"""
RouteDemo: Route Registration Unit Tests
========================================

What:  Tests for pattern translation, group prefixes and the RouteGroup registrar.
How:   Registers routes on bare APIRouters; no HTTP involved.
"""

import pytest
from fastapi import APIRouter

from routedemo.exceptions import RouteDefinitionError
from routedemo.routing import RouteGroup, join_paths, route_shape, translate_pattern, unimplemented


async def _handler():
    return {"ok": True}


class TestTranslatePattern:
    """Colon/star notation → Starlette path syntax."""

    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("/", "/"),
            ("/ping", "/ping"),
            ("/ping/:seg", "/ping/{seg}"),
            ("/p/*segs", "/p/{segs:path}"),
            ("/users/:id/files/*rest", "/users/{id}/files/{rest:path}"),
            ("/a/:first/:second", "/a/{first}/{second}"),
        ],
    )
    def test_valid_patterns(self, pattern, expected):
        assert translate_pattern(pattern) == expected

    def test_missing_leading_slash_rejected(self):
        with pytest.raises(RouteDefinitionError, match="must start with '/'"):
            translate_pattern("ping")

    def test_wildcard_must_be_last(self):
        with pytest.raises(RouteDefinitionError, match="must be the last segment"):
            translate_pattern("/p/*segs/more")

    def test_parameter_must_own_segment(self):
        with pytest.raises(RouteDefinitionError, match="whole segment"):
            translate_pattern("/file:name")

    @pytest.mark.parametrize("pattern", ["/ping/:", "/p/*", "/ping/:1abc", "/ping/:se-g"])
    def test_bad_parameter_names(self, pattern):
        with pytest.raises(RouteDefinitionError, match="Invalid parameter name"):
            translate_pattern(pattern)

    def test_duplicate_parameter_name(self):
        with pytest.raises(RouteDefinitionError, match="appears twice"):
            translate_pattern("/a/:id/b/:id")

    def test_braces_rejected(self):
        with pytest.raises(RouteDefinitionError, match="Braces"):
            translate_pattern("/ping/{seg}")


class TestJoinPaths:

    @pytest.mark.parametrize(
        "prefix, path, expected",
        [
            ("/v1", "/get", "/v1/get"),
            ("/v1/", "/get", "/v1/get"),
            ("/v1", "get", "/v1/get"),
            ("", "/ping", "/ping"),
            ("/v1", "", "/v1"),
            ("", "", "/"),
        ],
    )
    def test_join(self, prefix, path, expected):
        assert join_paths(prefix, path) == expected


class TestRouteGroup:
    """Registration through RouteGroup."""

    def setup_method(self):
        self.router = APIRouter()
        self.routes = RouteGroup(self.router)

    def _paths(self):
        return [(sorted(route.methods), route.path) for route in self.router.routes]

    def test_registers_on_router(self):
        self.routes.get("/ping/:seg", _handler)
        assert self._paths() == [(["GET"], "/ping/{seg}")]

    def test_group_prefixes_routes(self):
        self.routes.group("/v1").get("/get", _handler)
        assert self._paths() == [(["GET"], "/v1/get")]

    def test_nested_groups(self):
        self.routes.group("/api").group("/v2").post("/items/:id", _handler)
        assert self._paths() == [(["POST"], "/api/v2/items/{id}")]

    def test_chaining_returns_group(self):
        self.routes.get("/ping", _handler).get("/pingping", _handler)
        assert [entry.pattern for entry in self.routes.entries] == ["/ping", "/pingping"]

    def test_none_handler_rejected(self):
        with pytest.raises(RouteDefinitionError, match="unimplemented"):
            self.routes.get("/p/*segs", None)
        assert self.router.routes == []

    def test_duplicate_route_rejected(self):
        self.routes.get("/ping", _handler)
        with pytest.raises(RouteDefinitionError, match="already registered"):
            self.routes.get("/ping", _handler)

    def test_duplicate_detected_across_groups(self):
        self.routes.get("/v1/get", _handler)
        with pytest.raises(RouteDefinitionError, match="already registered"):
            self.routes.group("/v1").get("/get", unimplemented)

    def test_same_pattern_different_method_allowed(self):
        self.routes.get("/upload", _handler)
        self.routes.post("/upload", _handler)
        assert len(self.routes.entries) == 2

    def test_invalid_group_prefix_rejected(self):
        with pytest.raises(RouteDefinitionError, match="wildcard"):
            self.routes.group("/p/*rest")

    def test_wildcard_prefix_rejected_when_nested(self):
        with pytest.raises(RouteDefinitionError, match="wildcard"):
            self.routes.group("/v1").group("/files/*rest")

    def test_parameter_group_prefix_allowed(self):
        self.routes.group("/users/:id").get("/files", _handler)
        assert self._paths() == [(["GET"], "/users/{id}/files")]

    def test_renamed_parameter_is_duplicate(self):
        self.routes.get("/ping/:a", _handler)
        with pytest.raises(RouteDefinitionError, match="already registered"):
            self.routes.get("/ping/:b", unimplemented)
        assert len(self.router.routes) == 1

    def test_renamed_wildcard_is_duplicate(self):
        self.routes.get("/p/*segs", unimplemented)
        with pytest.raises(RouteDefinitionError, match="already registered"):
            self.routes.get("/p/*rest", _handler)

    def test_parameter_and_literal_are_distinct(self):
        self.routes.get("/ping/:seg", unimplemented)
        self.routes.get("/ping/x", _handler)
        assert len(self.routes.entries) == 2

    def test_entries_name_handlers(self):
        self.routes.get("/ping", _handler)
        self.routes.get("/ping/:seg", unimplemented)

        first, second = self.routes.entries
        assert first.method == "GET"
        assert first.path == "/ping"
        assert first.handler_name.endswith("_handler")
        assert second.pattern == "/ping/:seg"
        assert second.path == "/ping/{seg}"
        assert second.handler_name == "unimplemented"

    def test_placeholder_hidden_from_schema(self):
        self.routes.get("/ping/:seg", unimplemented)
        route = self.router.routes[0]
        assert route.include_in_schema is False
        assert route.status_code == 501


class TestRouteShape:

    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("/ping", "/ping"),
            ("/ping/:seg", "/ping/:"),
            ("/p/*segs", "/p/*"),
            ("/users/:id/files/*rest", "/users/:/files/*"),
        ],
    )
    def test_names_erased(self, pattern, expected):
        assert route_shape(pattern) == expected

