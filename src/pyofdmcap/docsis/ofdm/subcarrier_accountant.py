# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import math
from typing import cast

from pyofdmcap.docsis.ofdm.exceptions import InvalidChannelConfigError
from pyofdmcap.docsis.ofdm.models import (
    ChannelConfig,
    OfdmPhyConstants,
    SubcarrierBudget,
    SymbolTiming,
)
from pyofdmcap.lib.constants import (
    CONTINUOUS_PILOT_MAX,
    CONTINUOUS_PILOT_MIN,
    CONTINUOUS_PILOT_RESERVE,
    CONTINUOUS_PILOT_SPECTRUM_DIVISOR,
    KHZ,
    MAX_MODULATION_ORDER,
    MIN_MODULATION_ORDER,
    PLC_SUBCARRIERS_50KHZ,
    PLC_SUBCARRIERS_DEFAULT,
    SCATTERED_PILOT_PERIOD,
    SUBCARRIER_SPACING_50KHZ,
)
from pyofdmcap.lib.types import (
    FrequencyMHz,
    Microseconds,
    Percent,
    SpacingKHz,
    SubcarrierCount,
)


class SubcarrierAccountant:
    """
    DOCSIS 3.1 downstream subcarrier accounting.

    Converts a declared :class:`ChannelConfig` into the OFDM symbol timing and
    the number of subcarriers left for user data once guard band, excluded
    band, PLC and pilots are taken out.

    Rounding follows CM-SP-PHYv3.1: the modulated subcarrier count is kept
    fractional, pilot counts are rounded up.
    """

    logger = logging.getLogger("SubcarrierAccountant")

    @classmethod
    def compute_budget(cls, config: ChannelConfig,
                       constants: OfdmPhyConstants) -> tuple[SymbolTiming, SubcarrierBudget]:
        """
        Compute symbol timing and subcarrier budget for one OFDM channel.

        Raises:
            InvalidChannelConfigError: If the channel ranges are invalid or the
                resulting channel has no data-bearing subcarriers.
        """
        cls.validate(config)

        timing = cls.symbol_timing(config)

        spacing = config.subcarrier_spacing_khz
        upper_band_edge = config.lower_band_edge_mhz + config.occupied_spectrum_mhz

        modulated = cls.modulated_subcarriers(config)
        plc = cls.plc_subcarriers(spacing)
        continuous = cls.continuous_pilots(constants.pilot_density, config.occupied_spectrum_mhz)
        scattered = cls.scattered_pilots(modulated, plc)

        effective = modulated - (constants.excluded_subcarriers
                                 + plc * constants.num_fft_blocks
                                 + continuous
                                 + scattered)

        cls.logger.debug(
            "Subcarriers: modulated=%s excluded=%d plc=%d continuous=%d scattered=%d effective=%s",
            modulated, constants.excluded_subcarriers, plc, continuous, scattered, effective,
        )

        if effective <= 0:
            raise InvalidChannelConfigError(
                f"no data-bearing subcarriers remain (effective={effective:g}, modulated={modulated:g})")

        budget = SubcarrierBudget(
            upper_band_edge_mhz   = cast(FrequencyMHz, upper_band_edge),
            modulated_subcarriers = modulated,
            excluded_subcarriers  = constants.excluded_subcarriers,
            plc_subcarriers       = plc,
            num_fft_blocks        = constants.num_fft_blocks,
            continuous_pilots     = continuous,
            scattered_pilots      = scattered,
            effective_subcarriers = cast(SubcarrierCount, effective),
        )

        return timing, budget

    @classmethod
    def validate(cls, config: ChannelConfig) -> None:
        """Reject channel declarations that cannot describe a usable OFDM channel."""
        if config.subcarrier_spacing_khz <= 0:
            raise InvalidChannelConfigError(
                f"subcarrier spacing must be positive, got {config.subcarrier_spacing_khz} kHz")

        if config.sampling_rate_mhz <= 0:
            raise InvalidChannelConfigError(
                f"sampling rate must be positive, got {config.sampling_rate_mhz} MHz")

        if config.cyclic_prefix_samples < 0:
            raise InvalidChannelConfigError(
                f"cyclic prefix must not be negative, got {config.cyclic_prefix_samples} samples")

        if config.guard_band_mhz < 0 or config.excluded_band_mhz < 0:
            raise InvalidChannelConfigError(
                f"guard band ({config.guard_band_mhz} MHz) and excluded band "
                f"({config.excluded_band_mhz} MHz) must not be negative")

        if config.occupied_spectrum_mhz <= config.guard_band_mhz + config.excluded_band_mhz:
            raise InvalidChannelConfigError(
                f"occupied spectrum ({config.occupied_spectrum_mhz} MHz) must exceed guard band + "
                f"excluded band ({config.guard_band_mhz + config.excluded_band_mhz} MHz)")

        if not MIN_MODULATION_ORDER <= config.modulation_order <= MAX_MODULATION_ORDER:
            raise InvalidChannelConfigError(
                f"modulation order must be within {MIN_MODULATION_ORDER}-{MAX_MODULATION_ORDER} "
                f"bits/symbol, got {config.modulation_order}")

    @staticmethod
    def symbol_timing(config: ChannelConfig) -> SymbolTiming:
        spacing = config.subcarrier_spacing_khz
        num_fft_points = config.sampling_rate_mhz * KHZ / spacing

        symbol_period = KHZ / spacing
        cyclic_prefix = config.cyclic_prefix_samples / config.sampling_rate_mhz
        actual_symbol_period = symbol_period + cyclic_prefix

        return SymbolTiming(
            num_fft_points            = num_fft_points,
            symbol_period_usec        = cast(Microseconds, symbol_period),
            cyclic_prefix_usec        = cast(Microseconds, cyclic_prefix),
            actual_symbol_period_usec = cast(Microseconds, actual_symbol_period),
            symbol_efficiency_pct     = cast(Percent, 100 * symbol_period / actual_symbol_period),
        )

    @staticmethod
    def modulated_subcarriers(config: ChannelConfig) -> SubcarrierCount:
        usable_mhz = config.occupied_spectrum_mhz - config.guard_band_mhz - config.excluded_band_mhz
        return cast(SubcarrierCount, usable_mhz * KHZ / config.subcarrier_spacing_khz)

    @staticmethod
    def plc_subcarriers(spacing: SpacingKHz) -> int:
        # DOCSIS 3.1 PHY two-entry table, not proportional to spacing
        if spacing == SUBCARRIER_SPACING_50KHZ:
            return PLC_SUBCARRIERS_50KHZ
        return PLC_SUBCARRIERS_DEFAULT

    @staticmethod
    def continuous_pilots(pilot_density: float, occupied_spectrum_mhz: float) -> int:
        raw = math.ceil(pilot_density * occupied_spectrum_mhz / CONTINUOUS_PILOT_SPECTRUM_DIVISOR)
        return min(max(CONTINUOUS_PILOT_MIN, raw), CONTINUOUS_PILOT_MAX) + CONTINUOUS_PILOT_RESERVE

    @staticmethod
    def scattered_pilots(modulated: float, plc: int) -> int:
        return math.ceil((modulated - plc) / SCATTERED_PILOT_PERIOD)
