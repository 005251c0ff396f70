"""Tests for the application entry point."""

from src import main
from src.core.config import settings


def test_run_serves_app_with_configured_address(monkeypatch) -> None:
    calls: list[tuple[tuple, dict]] = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    monkeypatch.setattr(settings, "host", "0.0.0.0")
    monkeypatch.setattr(settings, "port", 9001)
    monkeypatch.setattr(settings, "environment", "production")

    main.run()

    assert calls == [
        (
            ("src.main:app",),
            {"host": "0.0.0.0", "port": 9001, "reload": False, "log_config": None},
        )
    ]
