# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyofdmcap.lib.constants import DEFAULT_SAMPLING_RATE_MHZ
from pyofdmcap.lib.types import (
    BandwidthMHz,
    BitsPerSymbol,
    CyclicPrefixSamples,
    FrequencyMHz,
    Gbps,
    Microseconds,
    ModulationOrder,
    Percent,
    SampleRateMHz,
    SpacingKHz,
    SubcarrierCount,
)


class FecLayout(BaseModel):
    """
    LDPC codeword geometry of a DOCSIS 3.1 downstream profile.

    The values are profile constants supplied by configuration; nothing in the
    calculator derives them.
    """
    model_config = ConfigDict(frozen=True)

    codeword_size: int  = Field(16200, description="LDPC codeword size (bits)")
    info_bits:     int  = Field(14216, description="Information bits per full codeword")
    parity_bits:   int  = Field(1800,  description="LDPC parity bits")
    bch_bits:      int  = Field(168,   description="BCH parity bits")
    header_bits:   int  = Field(16,    description="Codeword header bits")

    @field_validator("codeword_size", "info_bits")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Values must be >= 1.")
        return v

    @field_validator("parity_bits", "bch_bits", "header_bits")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Values must be >= 0.")
        return v

    @property
    def shortened_overhead_bits(self) -> int:
        """Bits a shortened codeword must cover before it carries any data."""
        return self.parity_bits - self.bch_bits - self.header_bits


class OfdmPhyConstants(BaseModel):
    """
    Fixed PHY constants used by the subcarrier accounting and codeword packing.

    The sampling rate is part of :class:`ChannelConfig`, not of this record.
    """
    model_config = ConfigDict(frozen=True)

    num_fft_blocks:          int           = Field(1,     description="Number of FFT blocks carrying a PLC")
    pilot_density:           float         = Field(48,    description="Continuous pilot density factor")
    excluded_subcarriers:    int           = Field(20,    description="Excluded subcarrier count")
    ncp_modulation_order:    BitsPerSymbol = Field(6,     description="NCP modulation order (bits/symbol)")
    ncp_bits_per_mb:         int           = Field(48,    description="NCP bits per message block")
    num_symbols_per_profile: float         = Field(1,     description="OFDM symbols spanned by a profile")
    fec:                     FecLayout     = Field(default_factory=FecLayout)

    @field_validator("pilot_density", "num_symbols_per_profile")
    @classmethod
    def _positive_float(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Values must be > 0.")
        return v

    @field_validator("num_fft_blocks", "ncp_modulation_order", "ncp_bits_per_mb")
    @classmethod
    def _positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Values must be >= 1.")
        return v

    @field_validator("excluded_subcarriers")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Values must be >= 0.")
        return v


class ChannelConfig(BaseModel):
    """
    Declared configuration of one downstream OFDM channel.

    Range checks are left to the subcarrier accountant so that an invalid
    channel is reported as an invalid channel configuration.
    """
    model_config = ConfigDict(frozen=True)

    occupied_spectrum_mhz:  BandwidthMHz        = Field(..., description="Occupied spectrum (MHz)")
    lower_band_edge_mhz:    FrequencyMHz        = Field(0.0, description="Lower band edge (MHz)")
    modulation_order:       ModulationOrder     = Field(..., description="Average modulation order (bits/symbol)")
    guard_band_mhz:         BandwidthMHz        = Field(..., description="Guard band width (MHz)")
    excluded_band_mhz:      BandwidthMHz        = Field(..., description="Excluded band width (MHz)")
    subcarrier_spacing_khz: SpacingKHz          = Field(..., description="Subcarrier spacing (kHz)")
    cyclic_prefix_samples:  CyclicPrefixSamples = Field(..., description="Cyclic prefix length (samples)")
    sampling_rate_mhz:      SampleRateMHz       = Field(DEFAULT_SAMPLING_RATE_MHZ, description="Sampling rate (MHz)")


class SymbolTiming(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_fft_points:            float        = Field(..., description="FFT size implied by spacing (informational)")
    symbol_period_usec:        Microseconds = Field(..., description="Nominal symbol period (us)")
    cyclic_prefix_usec:        Microseconds = Field(..., description="Cyclic prefix duration (us)")
    actual_symbol_period_usec: Microseconds = Field(..., description="Symbol period including cyclic prefix (us)")
    symbol_efficiency_pct:     Percent      = Field(..., description="Nominal / actual symbol period (%)")


class SubcarrierBudget(BaseModel):
    model_config = ConfigDict(frozen=True)

    upper_band_edge_mhz:   FrequencyMHz    = Field(..., description="Lower band edge + occupied spectrum (MHz)")
    modulated_subcarriers: SubcarrierCount = Field(..., description="Subcarriers inside the usable spectrum")
    excluded_subcarriers:  int             = Field(..., description="Excluded subcarriers")
    plc_subcarriers:       int             = Field(..., description="PLC subcarriers per FFT block")
    num_fft_blocks:        int             = Field(..., description="FFT blocks carrying a PLC")
    continuous_pilots:     int             = Field(..., description="Continuous pilots including the fixed reserve")
    scattered_pilots:      int             = Field(..., description="Scattered pilots")
    effective_subcarriers: SubcarrierCount = Field(..., description="Data-bearing subcarriers")


class CapacityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_data_bits_in_subcarriers: float = Field(..., description="Raw bits carried by the data subcarriers")
    num_full_codewords:           int   = Field(..., description="Full LDPC codewords per frame")
    num_ncp_mbs:                  int   = Field(..., description="NCP message blocks per frame")
    shortened_codeword_data_bits: float = Field(..., description="Data bits in the shortened codeword")
    total_data_bits:              float = Field(..., description="Data bits per frame")
    rate_gbps:                    Gbps  = Field(..., description="Whole-channel data rate (Gbps)")
    phy_efficiency:               float = Field(..., description="PHY spectral efficiency (bits/s/Hz)")


class CapacityEstimate(BaseModel):
    """
    Terminal record of one calculation: the channel and every derived stage.
    """
    model_config = ConfigDict(frozen=True)

    channel:  ChannelConfig
    timing:   SymbolTiming
    budget:   SubcarrierBudget
    capacity: CapacityResult
