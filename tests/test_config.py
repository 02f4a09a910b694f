"""
RouteDemo: Settings Tests
=========================

What:  Environment overrides and validation of the Settings model.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from routedemo.config import Settings


def test_defaults(monkeypatch):
    for name in ("HOST", "PORT", "LOG_LEVEL", "HELLO_VARIANT", "UPLOAD_DIR", "MAX_UPLOAD_SIZE"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.hello_variant == 1
    assert settings.upload_dir == "/tmp"
    assert settings.max_upload_size is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("HELLO_VARIANT", "2")
    monkeypatch.setenv("upload_dir", "/srv/uploads")
    settings = Settings(_env_file=None)

    assert settings.port == 9000
    assert settings.hello_variant == 2
    assert settings.upload_dir == "/srv/uploads"


def test_log_level_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert Settings(_env_file=None).log_level == "DEBUG"


@pytest.mark.parametrize(
    "name, value",
    [("LOG_LEVEL", "verbose"), ("HELLO_VARIANT", "3"), ("PORT", "0"), ("MAX_UPLOAD_SIZE", "0")],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None)


def test_upload_limit_opt_in(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_SIZE", "1048576")
    assert Settings(_env_file=None).max_upload_size == 1048576
