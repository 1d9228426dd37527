# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pyofdmcap.lib.types import FileNameStr, PathLike


class LoggerConfigurator:
    """
    Attach file (and optionally stderr) handlers to the root logger.

    Log records are diagnostics only; the capacity report itself is written
    by :class:`pyofdmcap.report.capacity_report.CapacityReport`.

    Args:
        log_dir: Directory for the log file, created if missing.
        log_filename: File name inside ``log_dir``.
        level: Level name; unknown names mean INFO.
        to_console: Mirror records to stderr.
        rotate: Rotate at 1 MiB keeping 3 backups.
    """

    LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    MAX_BYTES = 1024 * 1024
    BACKUP_COUNT = 3

    def __init__(self,
                 log_dir: PathLike,
                 log_filename: FileNameStr,
                 level: str = 'INFO', to_console: bool = False, rotate: bool = False
    ) -> None:
        self.log_dir = Path(log_dir)
        self.log_filename = log_filename
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.to_console = to_console
        self.rotate = rotate

        self.__setup()

    @property
    def log_file(self) -> Path:
        return self.log_dir / self.log_filename

    def _file_handler(self) -> logging.Handler:
        if self.rotate:
            return RotatingFileHandler(self.log_file, maxBytes=self.MAX_BYTES,
                                       backupCount=self.BACKUP_COUNT, encoding="utf-8")
        return logging.FileHandler(self.log_file, encoding="utf-8")

    def __setup(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        formatter = logging.Formatter(self.LOG_FORMAT)
        handlers = [self._file_handler()]
        if self.to_console:
            handlers.append(logging.StreamHandler(sys.stderr))

        root = logging.getLogger()
        root.setLevel(self.level)
        for handler in handlers:
            handler.setFormatter(formatter)
            root.addHandler(handler)

        # Separates runs that share one log file
        root.info("==== PyOfdmCap Capacity Run Starting ====")
