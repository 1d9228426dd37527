# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import TextIO

from pyofdmcap.docsis.ofdm.models import CapacityEstimate
from pyofdmcap.resolver.parameter_resolver import ParameterSource, ResolvedParameter


class CapacityReport:
    """
    Operator-facing rendering of a capacity estimate.

    The default report lists where every input came from, the subcarrier
    breakdown and the whole-channel rate. ``verbose`` adds symbol timing, the
    codeword packing and PHY efficiency.
    """

    SOURCE_LABELS: dict[ParameterSource, str] = {
        ParameterSource.SNMP:     "auto-resolved via SNMP",
        ParameterSource.MANUAL:   "manual entry",
        ParameterSource.ARGUMENT: "command line",
    }

    def __init__(self,
                 estimate: CapacityEstimate,
                 parameters: Sequence[ResolvedParameter] = (),
                 verbose: bool = False) -> None:
        self._estimate = estimate
        self._parameters = list(parameters)
        self._verbose = verbose

    def parameter_lines(self) -> list[str]:
        lines = []
        for p in self._parameters:
            unit = f" {p.unit}" if p.unit else ""
            lines.append(f"{p.name}: {p.value:g}{unit} ({self.SOURCE_LABELS[p.source]})")
        return lines

    def lines(self) -> list[str]:
        timing = self._estimate.timing
        budget = self._estimate.budget
        capacity = self._estimate.capacity

        lines = self.parameter_lines()

        if self._verbose:
            lines += [
                f"Upper band edge: {budget.upper_band_edge_mhz:g} MHz",
                f"FFT size: {timing.num_fft_points:g}",
                f"Symbol period: {timing.symbol_period_usec:g} us",
                f"Cyclic prefix: {timing.cyclic_prefix_usec:g} us",
                f"Actual symbol period: {timing.actual_symbol_period_usec:g} us",
                f"Symbol efficiency: {timing.symbol_efficiency_pct:.2f} %",
            ]

        lines += [
            f"Modulated subcarriers: {budget.modulated_subcarriers:g}",
            f"Excluded subcarriers: {budget.excluded_subcarriers}",
            f"PLC subcarriers: {budget.plc_subcarriers}",
            f"Continuous pilots: {budget.continuous_pilots}",
            f"Scattered pilots: {budget.scattered_pilots}",
        ]

        if self._verbose:
            lines += [
                f"Effective subcarriers: {budget.effective_subcarriers:g}",
                f"Full codewords: {capacity.num_full_codewords}",
                f"NCP message blocks: {capacity.num_ncp_mbs}",
                f"Shortened codeword data bits: {capacity.shortened_codeword_data_bits:g}",
                f"Total data bits per frame: {capacity.total_data_bits:g}",
                f"PHY efficiency: {capacity.phy_efficiency:.4f} bits/s/Hz",
            ]

        lines.append(f"Whole channel rate: {capacity.rate_gbps:.4f} Gbps")
        return lines

    def to_json(self, indent: int = 2) -> str:
        payload = {
            "parameters": [p.model_dump(mode="json") for p in self._parameters],
            "estimate": self._estimate.model_dump(mode="json"),
        }
        return json.dumps(payload, indent=indent)

    def emit(self, as_json: bool = False, stream: TextIO | None = None) -> None:
        out = stream if stream is not None else sys.stdout
        if as_json:
            print(self.to_json(), file=out)
            return
        for line in self.lines():
            print(line, file=out)
