# Middleware package init
"""
RouteDemo: Middleware Package
=============================

What:  Cross-cutting concerns applied to every request of both services.

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the logging middleware and the exception
    handlers can read the ID from `request_id_var`. On the way back the
    logging middleware records status and duration, and the request ID
    middleware adds the X-Request-ID header.
"""
