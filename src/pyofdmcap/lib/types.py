# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import NewType

ExitCode = NewType("ExitCode", int)

# Enum String Type
class StringEnum(str, Enum):
    """Py3.10-compatible StrEnum shim."""
    pass

# ────────────────────────────────────────────────────────────────────────────────
# Paths / filesystem
# ────────────────────────────────────────────────────────────────────────────────
PathLike    = str | Path
FileNameStr = NewType("FileNameStr", str)

# ────────────────────────────────────────────────────────────────────────────────
# Unit-tagged NewTypes (scalars only; runtime = underlying type)
# ────────────────────────────────────────────────────────────────────────────────
# RF / PHY units
FrequencyMHz    = NewType("FrequencyMHz", float)
BandwidthMHz    = NewType("BandwidthMHz", float)
SpacingKHz      = NewType("SpacingKHz", float)
SampleRateMHz   = NewType("SampleRateMHz", float)
CyclicPrefixSamples = NewType("CyclicPrefixSamples", float)

Microseconds    = NewType("Microseconds", float)
Percent         = NewType("Percent", float)
Gbps            = NewType("Gbps", float)

BitsPerSymbol   = NewType("BitsPerSymbol", int)
ModulationOrder = NewType("ModulationOrder", float)  # average bits/symbol across a profile
SubcarrierCount = NewType("SubcarrierCount", float)

# SNMP identifiers
SnmpIndex       = NewType("SnmpIndex", int)

# Network addressing (store as plain strings; validate elsewhere)
SnmpReadCommunity  = NewType("SnmpReadCommunity", str)
InetAddressStr  = NewType("InetAddressStr", str)        # 192.168.0.1 | 2001:db8::1

# ────────────────────────────────────────────────────────────────────────────────
# Explicit public surface
# ────────────────────────────────────────────────────────────────────────────────
__all__ = [
    "ExitCode",
    "StringEnum",
    "PathLike", "FileNameStr",
    # unit-tagged scalars
    "FrequencyMHz", "BandwidthMHz", "SpacingKHz", "SampleRateMHz",
    "CyclicPrefixSamples", "Microseconds", "Percent", "Gbps",
    "BitsPerSymbol", "ModulationOrder", "SubcarrierCount",
    # SNMP
    "SnmpIndex", "SnmpReadCommunity", "InetAddressStr",
]
