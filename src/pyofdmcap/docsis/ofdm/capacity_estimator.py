# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import math
from typing import cast

from pyofdmcap.docsis.ofdm.models import (
    CapacityEstimate,
    CapacityResult,
    ChannelConfig,
    OfdmPhyConstants,
    SubcarrierBudget,
    SymbolTiming,
)
from pyofdmcap.docsis.ofdm.subcarrier_accountant import SubcarrierAccountant
from pyofdmcap.lib.constants import KHZ
from pyofdmcap.lib.types import Gbps, ModulationOrder


class CapacityEstimator:
    """
    Packs the data subcarriers of one OFDM frame into LDPC codewords.

    Each frame carries a number of full codewords plus one shortened codeword
    built from whatever is left once the NCP message blocks are reserved. The
    shortened codeword only contributes data when the remainder covers its
    parity, BCH and header overhead.

    Inputs are not validated here; :class:`SubcarrierAccountant` rejects
    channels that cannot carry data.
    """

    logger = logging.getLogger("CapacityEstimator")

    @classmethod
    def compute_capacity(cls,
                         timing: SymbolTiming,
                         budget: SubcarrierBudget,
                         modulation_order: ModulationOrder,
                         occupied_spectrum_mhz: float,
                         constants: OfdmPhyConstants) -> CapacityResult:
        fec = constants.fec
        num_symbols = constants.num_symbols_per_profile
        effective = budget.effective_subcarriers

        subcarriers_per_ncp_mb = constants.ncp_bits_per_mb / constants.ncp_modulation_order

        num_bits_in_data_subcarriers = effective * modulation_order
        if num_symbols > 1:
            num_bits_in_data_subcarriers *= num_symbols

        num_full_codewords = math.floor(num_bits_in_data_subcarriers / fec.codeword_size)
        num_ncp_mbs = num_full_codewords + math.ceil(num_symbols)

        estimate_shortened_cw_size = (
            ((num_symbols * effective) - (num_ncp_mbs + 1) * subcarriers_per_ncp_mb) * modulation_order
            - fec.codeword_size * num_full_codewords
        )
        shortened_cw_data = max(0, estimate_shortened_cw_size - fec.shortened_overhead_bits)

        total_data_bits = num_full_codewords * fec.info_bits + shortened_cw_data

        rate_gbps = total_data_bits / (timing.actual_symbol_period_usec * num_symbols * KHZ)
        phy_efficiency = rate_gbps * KHZ / occupied_spectrum_mhz

        cls.logger.debug(
            "Codewords: full=%d ncp_mbs=%d shortened_estimate=%s shortened_data=%s total_bits=%s rate=%.6f Gbps",
            num_full_codewords, num_ncp_mbs, estimate_shortened_cw_size, shortened_cw_data,
            total_data_bits, rate_gbps,
        )

        return CapacityResult(
            num_data_bits_in_subcarriers = num_bits_in_data_subcarriers,
            num_full_codewords           = num_full_codewords,
            num_ncp_mbs                  = num_ncp_mbs,
            shortened_codeword_data_bits = shortened_cw_data,
            total_data_bits              = total_data_bits,
            rate_gbps                    = cast(Gbps, rate_gbps),
            phy_efficiency               = phy_efficiency,
        )


def estimate_capacity(config: ChannelConfig, constants: OfdmPhyConstants) -> CapacityEstimate:
    """
    Run the subcarrier accounting and codeword packing for one channel.

    Raises:
        InvalidChannelConfigError: If the channel cannot carry data.
    """
    timing, budget = SubcarrierAccountant.compute_budget(config, constants)
    capacity = CapacityEstimator.compute_capacity(
        timing,
        budget,
        config.modulation_order,
        config.occupied_spectrum_mhz,
        constants,
    )
    return CapacityEstimate(channel=config, timing=timing, budget=budget, capacity=capacity)
