"""
RouteDemo: Application Package Initializer
==========================================

What: Two small demonstration services built on FastAPI.
Who:  Imported by uvicorn (via routedemo.main), pytest, and the console scripts.

Layout:

    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← ping, placeholder and upload handlers
    ├─────────────────────────────────────┤
    │   Routing helpers (routing.py)      │  ← pattern translation, groups, placeholders
    ├─────────────────────────────────────┤
    │   Services (upload_service.py)      │  ← extraction, filename checks, atomic save
    └─────────────────────────────────────┘

    hello service:   GET /ping, /pingping, /p/*segs, /ping/:seg, /v1/get
    upload service:  POST /upload
"""

__version__ = "1.0.0"
