"""
RouteDemo: Request ID Middleware
================================

What:  Tags every request with a correlation ID that appears in the access
       log, in error bodies and in the X-Request-ID response header.
How:   `resolve_request_id` keeps a well-formed client-supplied ID and mints
       a fresh one otherwise; the result goes into `request_id_var` and
       `request.state.request_id` before the rest of the chain runs.
When:  Outermost application middleware, so the logging middleware and the
       exception handlers see the ID.

Accepted client IDs:
    1-64 characters from [A-Za-z0-9._-]
    Anything else (spaces, newlines, over-long values) is replaced, so a
    client cannot forge log lines through the header.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# ID of the request the current task is serving; "" outside a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Eight hex characters, enough to tell concurrent requests apart in a log."""
    return uuid.uuid4().hex[:8]


def resolve_request_id(supplied: Optional[str]) -> str:
    """Return `supplied` if it is a usable ID, otherwise a new one."""
    if supplied and _CLIENT_ID.fullmatch(supplied):
        return supplied
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        request_id_var.set(request_id)

        response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
