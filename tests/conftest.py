"""
RouteDemo: Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the test suite.
How:   Apps are built through the factories with per-test upload directories
       and driven in-process through HTTPX's ASGITransport.

Fixtures:
    upload_dir:       Fresh temporary directory for each test
    hello_client:     AsyncClient for the hello service, variant 1
    hello_v2_client:  AsyncClient for the hello service, variant 2
    upload_client:    AsyncClient for the upload service writing into upload_dir
"""

import os
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Keep test output quiet and away from the real /tmp
os.environ["LOG_LEVEL"] = "WARNING"

from routedemo.main import create_hello_app, create_upload_app  # noqa: E402


@asynccontextmanager
async def _client_for(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def upload_dir(tmp_path):
    """A fresh upload directory (pytest cleans it up)."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest_asyncio.fixture
async def hello_client():
    async with _client_for(create_hello_app(variant=1)) as client:
        yield client


@pytest_asyncio.fixture
async def hello_v2_client():
    async with _client_for(create_hello_app(variant=2)) as client:
        yield client


@pytest_asyncio.fixture
async def upload_client(upload_dir):
    """
    AsyncClient for an upload app storing into `upload_dir`.

    Usage:
        async def test_upload(upload_client, upload_dir):
            response = await upload_client.post("/upload", files={"file": ("a.txt", b"hi")})
            assert (upload_dir / "a.txt").read_bytes() == b"hi"
    """
    async with _client_for(create_upload_app(upload_dir=str(upload_dir))) as client:
        yield client
