# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

# DOCS-IF31-MIB docsIf31CmDsOfdmChanTable (docsIf31MibObjects.9), columns used by the
# capacity calculator. Symbolic names resolve through Snmp_v2c.resolve_oid().

from __future__ import annotations

from typing import Final

DOCS_IF31_CM_DS_OFDM_CHAN_ENTRY: Final[str] = "1.3.6.1.4.1.4491.2.1.28.1.9.1"

COMPILED_OIDS: Final[dict[str, str]] = {
    "docsIf31CmDsOfdmChanEntry":                    DOCS_IF31_CM_DS_OFDM_CHAN_ENTRY,
    "docsIf31CmDsOfdmChanChannelId":                f"{DOCS_IF31_CM_DS_OFDM_CHAN_ENTRY}.1",
    "docsIf31CmDsOfdmChanSubcarrierZeroFreq":       f"{DOCS_IF31_CM_DS_OFDM_CHAN_ENTRY}.3",
    "docsIf31CmDsOfdmChanSubcarrierSpacing":        f"{DOCS_IF31_CM_DS_OFDM_CHAN_ENTRY}.7",
    "docsIf31CmDsOfdmChanCyclicPrefix":             f"{DOCS_IF31_CM_DS_OFDM_CHAN_ENTRY}.8",
}
