"""
RouteDemo: Console Entry Points
===============================

What:  `routedemo-hello` and `routedemo-upload`, one per service, no flags.
How:   Runs uvicorn on settings.host / settings.port. If the address cannot
       be bound uvicorn logs the error and exits with status 1.
"""

import uvicorn

from routedemo.config import settings


def _serve(target: str) -> None:
    uvicorn.run(
        target,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def run_hello() -> None:
    _serve("routedemo.main:hello_app")


def run_upload() -> None:
    _serve("routedemo.main:upload_app")
