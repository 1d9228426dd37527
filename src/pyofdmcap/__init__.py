# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pyofdmcap.version import __version__

__all__ = ["__version__"]
