# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field
from pysnmp.error import PySnmpError

from pyofdmcap.docsis.ofdm.exceptions import ManualInputError
from pyofdmcap.lib.types import SnmpIndex, StringEnum
from pyofdmcap.snmp.snmp_v2c import Snmp_v2c

PromptFn = Callable[[str], str]


class ParameterSource(StringEnum):
    SNMP     = "snmp"
    MANUAL   = "manual"
    ARGUMENT = "argument"


class ResolvedParameter(BaseModel):
    """
    One physical-layer input together with where its value came from.
    """
    model_config = ConfigDict(frozen=True)

    name:   str             = Field(..., description="Operator-facing parameter name")
    value:  float           = Field(..., description="Value in the working unit")
    unit:   str             = Field("", description="Working unit (MHz, kHz, samples, ...)")
    source: ParameterSource = Field(..., description="How the value was obtained")


class ParameterQuery(Protocol):
    """Remote lookup of a raw parameter value; None means not available."""

    async def fetch(self, query_key: str) -> str | None: ...


class SnmpParameterQuery:
    """
    Reads docsIf31CmDsOfdmChanTable columns from a cable modem.

    Any transport or protocol failure is reported as "not available" so the
    caller can fall back to manual entry.

    Args:
        snmp: Connected SNMPv2c client.
        ofdm_index: Table row to read. ``None`` or ``0`` walks
            ``docsIf31CmDsOfdmChanChannelId`` and uses the first row.
    """

    DISCOVERY_OID = "docsIf31CmDsOfdmChanChannelId"

    def __init__(self, snmp: Snmp_v2c, ofdm_index: SnmpIndex | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._snmp = snmp
        self._ofdm_index: SnmpIndex | None = ofdm_index or None
        self._discovered = self._ofdm_index is not None

    @property
    def ofdm_index(self) -> SnmpIndex | None:
        return self._ofdm_index

    async def discover_index(self) -> SnmpIndex | None:
        """Return the first downstream OFDM channel row reported by the modem."""
        try:
            rows = await self._snmp.walk(self.DISCOVERY_OID)
        except (OSError, RuntimeError, PySnmpError) as e:
            self.logger.warning(f"OFDM channel discovery failed on {self._snmp.host}: {e}")
            return None

        if not rows:
            self.logger.warning(f"No downstream OFDM channels reported by {self._snmp.host}")
            return None

        indices = Snmp_v2c.extract_last_oid_index(rows)
        if not indices:
            return None

        self.logger.info(f"Discovered OFDM channel indices {indices} on {self._snmp.host}; using {indices[0]}")
        return indices[0]

    async def fetch(self, query_key: str) -> str | None:
        if not self._discovered:
            self._ofdm_index = await self.discover_index()
            self._discovered = True

        if self._ofdm_index is None:
            return None

        oid = f"{query_key}.{self._ofdm_index}"
        try:
            result = await self._snmp.get(oid)
        except (OSError, RuntimeError, PySnmpError) as e:
            self.logger.warning(f"SNMP GET {oid} failed on {self._snmp.host}: {e}")
            return None

        value = Snmp_v2c.get_result_value(result)
        if Snmp_v2c.is_no_such_value(value):
            self.logger.warning(f"SNMP GET {oid} returned no value ({value!r})")
            return None

        return value


class ParameterResolver:
    """
    Obtains physical-layer inputs for one calculator run.

    Resolution order for queried parameters:

    1. a value supplied up front (command line override),
    2. the remote query, divided by ``conversion_factor``,
    3. interactive entry in the display unit, used as entered.

    Every resolved parameter is kept in :attr:`resolved` in request order so the
    report can state its source.
    """

    def __init__(self,
                 query: ParameterQuery | None = None,
                 prompt: PromptFn = input,
                 overrides: Mapping[str, float] | None = None) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self._query = query
        self._prompt = prompt
        self._overrides: dict[str, float] = dict(overrides or {})
        self._resolved: list[ResolvedParameter] = []

    @property
    def resolved(self) -> list[ResolvedParameter]:
        return list(self._resolved)

    async def resolve(self,
                      name: str,
                      unit_example: str,
                      query_key: str,
                      conversion_factor: float = 1,
                      unit: str = "") -> ResolvedParameter:
        """
        Resolve a parameter that the device can report.

        Raises:
            ManualInputError: If the fallback manual entry is not a number.
        """
        overridden = self._from_override(name, unit)
        if overridden is not None:
            return overridden

        raw = await self._query.fetch(query_key) if self._query is not None else None
        value = self._to_float(raw)

        if value is None:
            if raw is not None:
                self.logger.warning(f"{name}: non-numeric value {raw!r} from {query_key}")
            self.logger.info(f"{name}: not available from device, requesting manual entry")
            return self.prompt_value(name, unit_example, unit)

        return self._record(name, value / conversion_factor, unit, ParameterSource.SNMP)

    def prompt_value(self, name: str, unit_example: str, unit: str = "") -> ResolvedParameter:
        """
        Ask the operator for a value that is never queried.

        Raises:
            ManualInputError: If the entry is not a number.
        """
        overridden = self._from_override(name, unit)
        if overridden is not None:
            return overridden

        raw = self._prompt(f"Enter {name} (e.g. {unit_example}): ")
        value = self._to_float(raw)
        if value is None:
            raise ManualInputError(name, raw)

        return self._record(name, value, unit, ParameterSource.MANUAL)

    def _from_override(self, name: str, unit: str) -> ResolvedParameter | None:
        if name not in self._overrides:
            return None
        return self._record(name, float(self._overrides[name]), unit, ParameterSource.ARGUMENT)

    def _record(self, name: str, value: float, unit: str, source: ParameterSource) -> ResolvedParameter:
        param = ResolvedParameter(name=name, value=value, unit=unit, source=source)
        self.logger.info(f"{name} = {value:g} {unit} ({source.value})")
        self._resolved.append(param)
        return param

    @staticmethod
    def _to_float(raw: str | None) -> float | None:
        if raw is None:
            return None
        try:
            value = float(raw.strip())
        except ValueError:
            return None
        return value if math.isfinite(value) else None
