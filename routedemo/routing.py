"""
RouteDemo: Route Registration Helpers
=====================================

What:  A thin registrar over FastAPI's APIRouter that accepts colon/star
       route patterns, nests prefix groups, and models routes declared
       without behavior as an explicit placeholder.
How:   Patterns are checked and translated to Starlette's path syntax before
       being handed to `APIRouter.add_api_route`. Matching itself stays in
       Starlette.

Pattern Notation:
    /ping           literal segments
    /ping/:seg      named parameter, exactly one segment   → /ping/{seg}
    /p/*segs        wildcard, the remaining path           → /p/{segs:path}

Rules (checked at registration, RouteDefinitionError otherwise):
    - patterns start with "/"
    - ":" and "*" only as the first character of a whole segment
    - parameter names are identifiers and unique within a pattern
    - a wildcard is the last segment
    - one handler per (method, pattern); parameter names do not count
    - a group prefix holds no wildcard
"""

import logging
import re
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Set, Tuple, Union

from fastapi import APIRouter, Request

from routedemo.exceptions import RouteDefinitionError, UnimplementedRouteError

logger = logging.getLogger(__name__)

_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class _Unimplemented:
    """Marker for a route that is declared but has no behavior yet."""

    def __repr__(self) -> str:
        return "unimplemented"


# Pass this instead of a handler to declare a placeholder route
unimplemented = _Unimplemented()

Handler = Union[Callable[..., Any], _Unimplemented]


class RouteEntry(NamedTuple):
    """One registered route, as listed in the startup route table."""

    method: str
    pattern: str
    path: str
    handler_name: str


# ── Pattern Helpers ───────────────────────────────────────────────────────


def translate_pattern(pattern: str) -> str:
    """
    Convert a colon/star route pattern into Starlette path syntax.

    >>> translate_pattern("/ping/:seg")
    '/ping/{seg}'
    >>> translate_pattern("/p/*segs")
    '/p/{segs:path}'
    """
    if not pattern.startswith("/"):
        raise RouteDefinitionError(
            message=f"Route pattern '{pattern}' must start with '/'",
            pattern=pattern,
        )

    segments = pattern.split("/")[1:]
    names: Set[str] = set()
    translated: List[str] = []

    for index, segment in enumerate(segments):
        if "{" in segment or "}" in segment:
            raise RouteDefinitionError(
                message=f"Braces are not allowed in route pattern '{pattern}'",
                pattern=pattern,
            )

        if segment[:1] in (":", "*"):
            kind, name = segment[0], segment[1:]
            if not _PARAM_NAME.match(name):
                raise RouteDefinitionError(
                    message=f"Invalid parameter name '{name}' in route pattern '{pattern}'",
                    pattern=pattern,
                )
            if name in names:
                raise RouteDefinitionError(
                    message=f"Parameter '{name}' appears twice in route pattern '{pattern}'",
                    pattern=pattern,
                )
            names.add(name)

            if kind == "*":
                if index != len(segments) - 1:
                    raise RouteDefinitionError(
                        message=f"Wildcard '*{name}' must be the last segment of '{pattern}'",
                        pattern=pattern,
                    )
                translated.append(f"{{{name}:path}}")
            else:
                translated.append(f"{{{name}}}")
        elif ":" in segment or "*" in segment:
            raise RouteDefinitionError(
                message=(
                    f"Segment '{segment}' in route pattern '{pattern}' mixes literal "
                    f"text with a parameter; parameters must occupy a whole segment"
                ),
                pattern=pattern,
            )
        else:
            translated.append(segment)

    return "/" + "/".join(translated)


def route_shape(pattern: str) -> str:
    """
    Pattern with parameter names erased; two patterns with the same shape
    match the same requests.

    >>> route_shape("/ping/:seg")
    '/ping/:'
    >>> route_shape("/p/*segs")
    '/p/*'
    """
    return "/".join(
        segment[0] if segment[:1] in (":", "*") else segment
        for segment in pattern.split("/")
    )


def join_paths(prefix: str, path: str) -> str:
    """Join a group prefix and a relative pattern with exactly one slash between them."""
    if not path:
        return prefix or "/"
    if not prefix:
        return path
    return prefix.rstrip("/") + "/" + path.lstrip("/")


def _handler_name(handler: Handler) -> str:
    if handler is unimplemented:
        return "unimplemented"
    module = getattr(handler, "__module__", None)
    name = getattr(handler, "__qualname__", None) or repr(handler)
    return f"{module}.{name}" if module else name


def _placeholder_endpoint(method: str, pattern: str) -> Callable[..., Any]:
    """Build the endpoint that answers for a placeholder route."""

    async def placeholder(request: Request) -> None:
        raise UnimplementedRouteError(method=method, pattern=pattern)

    placeholder.__name__ = "unimplemented"
    return placeholder


# ── Registrar ─────────────────────────────────────────────────────────────


class RouteGroup:
    """
    Scoped route registrar.

    The root group wraps an APIRouter with an empty prefix; `group()` returns
    a child that shares the router and the duplicate registry but prefixes
    every pattern it registers.

    Usage:
        routes = RouteGroup(APIRouter())
        routes.get("/ping", ping)
        routes.get("/ping/:seg", unimplemented)
        routes.group("/v1").get("/get", unimplemented)
    """

    def __init__(
        self,
        router: APIRouter,
        prefix: str = "",
        _registry: Optional[Dict[Tuple[str, str], RouteEntry]] = None,
    ):
        if prefix:
            translate_pattern(prefix)
            # A wildcard consumes the rest of the path, leaving nothing to nest under
            if any(segment.startswith("*") for segment in prefix.split("/")):
                raise RouteDefinitionError(
                    message=f"Group prefix '{prefix}' must not contain a wildcard segment",
                    pattern=prefix,
                )
        self.router = router
        self.prefix = prefix
        self._registry: Dict[Tuple[str, str], RouteEntry] = (
            _registry if _registry is not None else {}
        )

    @property
    def entries(self) -> List[RouteEntry]:
        """Every route registered through this group tree, in registration order."""
        return list(self._registry.values())

    def group(self, prefix: str) -> "RouteGroup":
        return RouteGroup(self.router, join_paths(self.prefix, prefix), self._registry)

    def handle(self, method: str, pattern: str, handler: Handler, **route_kwargs: Any) -> "RouteGroup":
        """
        Register `handler` for `method` on `pattern` (relative to this group).

        Returns the group so registrations can be chained.

        Raises:
            RouteDefinitionError: handler is None, pattern is malformed,
                                  or (method, pattern) is already taken.
        """
        method = method.upper()
        full_pattern = join_paths(self.prefix, pattern)

        if handler is None:
            raise RouteDefinitionError(
                message=(
                    f"No handler given for {method} {full_pattern}; "
                    f"pass `unimplemented` to declare a placeholder route"
                ),
                pattern=full_pattern,
            )

        path = translate_pattern(full_pattern)
        key = (method, route_shape(full_pattern))
        if key in self._registry:
            raise RouteDefinitionError(
                message=f"Route {method} {full_pattern} is already registered",
                pattern=full_pattern,
                context={"existing": self._registry[key].handler_name},
            )

        if handler is unimplemented:
            endpoint = _placeholder_endpoint(method, full_pattern)
            route_kwargs.setdefault("status_code", 501)
            route_kwargs.setdefault("include_in_schema", False)
        else:
            endpoint = handler

        self.router.add_api_route(path, endpoint, methods=[method], **route_kwargs)
        entry = RouteEntry(method, full_pattern, path, _handler_name(handler))
        self._registry[key] = entry
        logger.debug("Registered %s %s --> %s", method, full_pattern, entry.handler_name)
        return self

    def get(self, pattern: str, handler: Handler, **route_kwargs: Any) -> "RouteGroup":
        return self.handle("GET", pattern, handler, **route_kwargs)

    def post(self, pattern: str, handler: Handler, **route_kwargs: Any) -> "RouteGroup":
        return self.handle("POST", pattern, handler, **route_kwargs)
