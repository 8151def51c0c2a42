from __future__ import annotations

import logging
from pathlib import Path

import pytest

from sitebuilder import logging_setup
from sitebuilder.settings import Settings, _env_bool


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("yes", True), (" On ", True), ("0", False), ("off", False), ("maybe", True)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("SITEBUILDER_TEST_FLAG", raw)

    assert _env_bool("SITEBUILDER_TEST_FLAG", True) is expected


def test_env_bool_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SITEBUILDER_TEST_FLAG", raising=False)

    assert _env_bool("SITEBUILDER_TEST_FLAG") is False


def test_settings_paths_live_under_data_dir() -> None:
    settings = Settings()

    assert settings.log_path.parent == settings.data_dir


def test_configure_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    logger = logging.getLogger("sitebuilder")
    handlers_before = list(logger.handlers)
    monkeypatch.setattr(logging_setup, "_configured", False)

    try:
        logging_setup.configure_logging("DEBUG", log_path=tmp_path / "logs" / "sb.log")
        logging_setup.configure_logging("WARNING", log_path=tmp_path / "logs" / "sb.log")

        added = [h for h in logger.handlers if h not in handlers_before]
        assert len(added) == 2
        assert logger.level == logging.WARNING
        assert (tmp_path / "logs" / "sb.log").exists()
    finally:
        for handler in logger.handlers[:]:
            if handler not in handlers_before:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(logging.NOTSET)
