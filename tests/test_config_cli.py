"""Tests for environment configuration and the server CLI."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from propr import server_cli
from propr.config import Settings
from propr.logging_config import configure_logging
from propr.models.enums import SimulationMode


def test_defaults(monkeypatch):
    for var in ("PORT", "CLIENT_KEY", "SIMULATE", "DELAY_MS", "HTTP_ONLY"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 31001
    assert settings.client_key == "test-client-key"
    assert settings.simulate == SimulationMode.SUCCESS
    assert settings.delay_ms == 6000
    assert settings.http_only is False
    assert settings.scheme == "https"
    assert settings.cert_file.name == "localhost-cert.pem"
    assert settings.key_file.name == "localhost-key.pem"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "4000")
    monkeypatch.setenv("CLIENT_KEY", "s3cret")
    monkeypatch.setenv("SIMULATE", "fail")
    monkeypatch.setenv("DELAY_MS", "100")
    monkeypatch.setenv("HTTP_ONLY", "true")
    settings = Settings(_env_file=None)
    assert settings.port == 4000
    assert settings.client_key == "s3cret"
    assert settings.simulate == SimulationMode.FAIL
    assert settings.delay_ms == 100
    assert settings.http_only is True
    assert settings.scheme == "http"


@pytest.mark.parametrize("var, value", [("SIMULATE", "maybe"), ("DELAY_MS", "-1")])
def test_invalid_environment_rejected(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.fixture
def fake_run(monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr("propr.logging_config.configure_logging", lambda **kwargs: None)
    return calls


def test_cli_http_only(fake_run, monkeypatch, tmp_path):
    monkeypatch.setenv("CERT_DIR", str(tmp_path))
    server_cli.main(["--http-only", "--port", "4100", "--simulate", "fail", "--delay-ms", "10"])

    (app, kwargs), = fake_run
    assert kwargs["port"] == 4100
    assert "ssl_certfile" not in kwargs
    assert app.state.settings.simulate == SimulationMode.FAIL
    assert app.state.executor.delay_ms == 10
    assert not any(tmp_path.iterdir())


def test_cli_tls_generates_certificate(fake_run, monkeypatch, tmp_path):
    monkeypatch.setenv("CERT_DIR", str(tmp_path))
    monkeypatch.delenv("HTTP_ONLY", raising=False)
    server_cli.main([])

    (_, kwargs), = fake_run
    assert kwargs["ssl_certfile"] == str(tmp_path / "localhost-cert.pem")
    assert kwargs["ssl_keyfile"] == str(tmp_path / "localhost-key.pem")
    assert (tmp_path / "localhost-cert.pem").exists()


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    access = logging.getLogger("uvicorn.access")
    saved_access_level = access.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    access.setLevel(saved_access_level)
    structlog.reset_defaults()


def test_configure_logging_json(restore_logging):
    configure_logging(log_level="debug", json_output=True)

    root = restore_logging
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
    assert logging.getLogger("uvicorn.error").propagate is True


def test_configure_logging_unknown_level_defaults_to_info(restore_logging):
    configure_logging(log_level="chatty")
    assert restore_logging.level == logging.INFO
