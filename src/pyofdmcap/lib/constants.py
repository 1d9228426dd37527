# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from typing import Final, cast

from pyofdmcap.lib.types import BitsPerSymbol, ExitCode, SampleRateMHz, SpacingKHz

KHZ: Final[int] = 1_000
MHZ: Final[int] = 1_000_000

# ────────────────────────────────────────────────────────────────────────────────
# DOCSIS 3.1 downstream OFDM (CM-SP-PHYv3.1)
# ────────────────────────────────────────────────────────────────────────────────
DEFAULT_SAMPLING_RATE_MHZ: Final[SampleRateMHz] = cast(SampleRateMHz, 204.8)

SUBCARRIER_SPACING_50KHZ: Final[SpacingKHz] = cast(SpacingKHz, 50)

# PLC width in subcarriers, keyed by spacing; any other spacing uses the 25 kHz width
PLC_SUBCARRIERS_50KHZ: Final[int] = 8
PLC_SUBCARRIERS_DEFAULT: Final[int] = 16

CONTINUOUS_PILOT_MIN: Final[int]         = 8
CONTINUOUS_PILOT_MAX: Final[int]         = 120
CONTINUOUS_PILOT_RESERVE: Final[int]     = 8
CONTINUOUS_PILOT_SPECTRUM_DIVISOR: Final[int] = 190

SCATTERED_PILOT_PERIOD: Final[int]       = 128

MIN_MODULATION_ORDER: Final[BitsPerSymbol] = cast(BitsPerSymbol, 4)     # 16-QAM
MAX_MODULATION_ORDER: Final[BitsPerSymbol] = cast(BitsPerSymbol, 14)    # 16384-QAM

EXIT_SUCCESS: Final[ExitCode]            = cast(ExitCode, 0)
EXIT_INPUT_ERROR: Final[ExitCode]        = cast(ExitCode, 2)
EXIT_CONFIG_ERROR: Final[ExitCode]       = cast(ExitCode, 3)

__all__ = [
    "KHZ", "MHZ",
    "DEFAULT_SAMPLING_RATE_MHZ",
    "SUBCARRIER_SPACING_50KHZ",
    "PLC_SUBCARRIERS_50KHZ", "PLC_SUBCARRIERS_DEFAULT",
    "CONTINUOUS_PILOT_MIN", "CONTINUOUS_PILOT_MAX", "CONTINUOUS_PILOT_RESERVE",
    "CONTINUOUS_PILOT_SPECTRUM_DIVISOR",
    "SCATTERED_PILOT_PERIOD",
    "MIN_MODULATION_ORDER", "MAX_MODULATION_ORDER",
    "EXIT_SUCCESS", "EXIT_INPUT_ERROR", "EXIT_CONFIG_ERROR",
]
