# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from pyofdmcap.config.log_config import LoggerConfigurator
from pyofdmcap.config.system_config_settings import SystemConfigSettings
from pyofdmcap.lib.types import FileNameStr
from pyofdmcap.startup.startup import StartUp


def _is_configured(handler: logging.Handler) -> bool:
    # LogCaptureHandler subclasses StreamHandler, so match the exact type
    return isinstance(handler, logging.FileHandler) or type(handler) is logging.StreamHandler


@pytest.fixture()
def root_handlers() -> Iterator[None]:
    """Detach the file and console handlers a test adds to the root logger."""
    root = logging.getLogger()
    before = [h for h in root.handlers if _is_configured(h)]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if _is_configured(handler) and handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _new_handlers(before: list[logging.Handler]) -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if h not in before]


def test_file_logging_writes_banner(tmp_path: Path, root_handlers: None) -> None:
    before = list(logging.getLogger().handlers)
    log_dir = tmp_path / "logs"

    configurator = LoggerConfigurator(log_dir, FileNameStr("run.log"), level="debug")
    logging.getLogger("SubcarrierAccountant").debug("budget computed")
    for handler in _new_handlers(before):
        handler.flush()

    text = configurator.log_file.read_text(encoding="utf-8")
    assert configurator.log_file == log_dir / "run.log"
    assert "==== PyOfdmCap Capacity Run Starting ====" in text
    assert "[DEBUG] SubcarrierAccountant: budget computed" in text


def test_rotation_and_console(tmp_path: Path, root_handlers: None) -> None:
    before = list(logging.getLogger().handlers)

    LoggerConfigurator(tmp_path, FileNameStr("run.log"), to_console=True, rotate=True)

    added = _new_handlers(before)
    assert any(isinstance(h, RotatingFileHandler) for h in added)
    assert any(type(h) is logging.StreamHandler for h in added)


def test_unknown_level_defaults_to_info(tmp_path: Path, root_handlers: None) -> None:
    configurator = LoggerConfigurator(tmp_path, FileNameStr("run.log"), level="chatty")

    assert configurator.level == logging.INFO


def test_startup_uses_configured_log_location(monkeypatch: pytest.MonkeyPatch,
                                              tmp_path: Path,
                                              root_handlers: None) -> None:
    log_dir = tmp_path / "var"
    monkeypatch.setattr(SystemConfigSettings, "log_dir", classmethod(lambda cls: str(log_dir)))
    monkeypatch.setattr(SystemConfigSettings, "log_filename", classmethod(lambda cls: "calc.log"))
    monkeypatch.setattr(SystemConfigSettings, "log_level", classmethod(lambda cls: "WARNING"))

    configurator = StartUp.initialize()

    assert configurator.log_file == log_dir / "calc.log"
    assert configurator.level == logging.WARNING
    assert configurator.rotate is True

    overridden = StartUp.initialize(log_level="debug")
    assert overridden.level == logging.DEBUG


def test_startup_logs_configuration_path(monkeypatch: pytest.MonkeyPatch,
                                         tmp_path: Path,
                                         caplog: pytest.LogCaptureFixture,
                                         root_handlers: None) -> None:
    monkeypatch.setattr(SystemConfigSettings, "log_dir", classmethod(lambda cls: str(tmp_path)))
    monkeypatch.setattr(SystemConfigSettings, "get_config_path", classmethod(lambda cls: "/etc/pyofdmcap/system.json"))

    with caplog.at_level(logging.INFO, logger="StartUp"):
        StartUp.initialize(log_level="info")

    assert "Using configuration /etc/pyofdmcap/system.json" in caplog.text
