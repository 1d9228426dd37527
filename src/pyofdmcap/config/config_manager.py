# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, TypeVar

T = TypeVar("T")


class ConfigManager:
    """
    Read-only view of the calculator's JSON configuration.

    The file is chosen in this order: the ``config_path`` argument, the
    ``PYOFDMCAP_CONFIG`` environment variable, then ``settings/system.json``
    shipped inside the package.

    Raises:
        FileNotFoundError: If the chosen file does not exist.
        ValueError: If the file is not valid JSON.
    """

    ENV_CONFIG_PATH = "PYOFDMCAP_CONFIG"
    DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "settings" / "system.json"

    def __init__(self, config_path: str | None = None) -> None:
        self._config_path = config_path or os.environ.get(self.ENV_CONFIG_PATH) or str(self.DEFAULT_CONFIG)
        self._config_data: dict[str, Any] = {}
        self._load()

    def get_config_path(self) -> str:
        return self._config_path

    def _load(self) -> None:
        path = Path(self._config_path).resolve()
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {self._config_path}")
        try:
            self._config_data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Config file {self._config_path} is not valid JSON: {e}") from e

    def get(self, *keys: str, fallback: T | None = None) -> T | None:
        """
        Look up a nested value.

        Example:
            config.get("OfdmPhy", "Fec", "codeword_size")

        Returns ``fallback`` as soon as a key is missing or the path runs into
        a non-object value.
        """
        node: Any = self._config_data
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return fallback
            node = node[key]
        return node
