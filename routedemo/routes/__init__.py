# Routes package init
"""
RouteDemo: API Routes Package
=============================

What:  HTTP route handlers for both services.

Route Inventory:
    - hello.py:   GET  /ping               (both variants)
                  GET  /pingping           (variant 2)
                  GET  /p/*segs            (placeholder, 501)
                  GET  /ping/:seg          (placeholder, 501)
                  GET  /v1/get             (variant 1, placeholder, 501)
    - upload.py:  POST /upload             (single multipart file)

Routes stay thin: they pull data out of the request, call a service or
return a fixed body, and leave error formatting to the global handlers.
"""
