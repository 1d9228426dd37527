# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging

from pyofdmcap.config.log_config import LoggerConfigurator
from pyofdmcap.config.system_config_settings import SystemConfigSettings


class StartUp:
    """
    Prepares a calculator run: log directory and logging handlers.
    """

    @classmethod
    def initialize(cls, log_level: str | None = None, to_console: bool = False) -> LoggerConfigurator:
        """
        Initialize the system configuration settings and set up logging.
        This method should be called once at the start of a run.

        Args:
            log_level: Overrides the configured log level when given.
            to_console: Mirror log records to stderr.
        """
        SystemConfigSettings.initialize_directories()

        configurator = LoggerConfigurator(SystemConfigSettings.log_dir(),
                                          SystemConfigSettings.log_filename(),
                                          log_level or SystemConfigSettings.log_level(),
                                          to_console=to_console,
                                          rotate=True)

        logging.getLogger(cls.__name__).info("Using configuration %s", SystemConfigSettings.get_config_path())
        return configurator
