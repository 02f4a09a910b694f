"""
RouteDemo: Hello Service Routes
===============================

What:  Ping handlers and the route table of the hello service.
How:   `register_hello_routes` declares every route on a RouteGroup; routes
       that have no behavior yet are declared with `unimplemented` and
       answer 501.

Variants:
    1: /ping, /p/*segs, /ping/:seg, and /v1/get inside the /v1 group
    2: /ping, /pingping, /p/*segs, /ping/:seg
"""

import logging

from routedemo.routing import RouteGroup, unimplemented
from routedemo.schemas import ErrorResponse, PingResponse

logger = logging.getLogger(__name__)

HELLO_VARIANTS = (1, 2)

_PLACEHOLDER_RESPONSES = {501: {"description": "Route declared without a handler", "model": ErrorResponse}}


async def ping() -> PingResponse:
    """Liveness reply."""
    return PingResponse(message="pong")


async def pingping() -> PingResponse:
    """Second liveness reply, only in variant 2."""
    return PingResponse(message="pongpong")


def register_hello_routes(routes: RouteGroup, variant: int = 1) -> RouteGroup:
    """
    Declare the hello service routes for `variant` on `routes`.

    Raises:
        ValueError: unknown variant
    """
    if variant not in HELLO_VARIANTS:
        raise ValueError(f"Unknown hello variant {variant}; expected one of {HELLO_VARIANTS}")

    routes.get("/ping", ping, response_model=PingResponse, summary="Ping")
    if variant == 2:
        routes.get("/pingping", pingping, response_model=PingResponse, summary="Double ping")

    routes.get("/p/*segs", unimplemented, responses=_PLACEHOLDER_RESPONSES)
    routes.get("/ping/:seg", unimplemented, responses=_PLACEHOLDER_RESPONSES)

    if variant == 1:
        routes.group("/v1").get("/get", unimplemented, responses=_PLACEHOLDER_RESPONSES)

    logger.debug("Hello routes registered for variant %d", variant)
    return routes
