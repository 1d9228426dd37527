# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations


class OfdmCapacityError(ValueError):
    """Base error for a capacity calculation that cannot produce a result."""


class InvalidChannelConfigError(OfdmCapacityError):
    """Raised when the declared channel cannot carry data (negative or empty subcarrier budget, bad ranges)."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid channel configuration: {reason}")
        self.reason = reason


class ManualInputError(OfdmCapacityError):
    """Raised when an operator-entered value is not a number."""

    def __init__(self, parameter: str, raw: str) -> None:
        super().__init__(f"invalid value for {parameter}: {raw!r} is not a number")
        self.parameter = parameter
        self.raw = raw
