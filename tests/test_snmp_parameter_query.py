# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging

import pytest
from pysnmp.error import PySnmpError

from pyofdmcap.resolver.parameter_resolver import SnmpParameterQuery
from pyofdmcap.snmp.snmp_v2c import Snmp_v2c

CHANNEL_ID_OID = "1.3.6.1.4.1.4491.2.1.28.1.9.1.1"


class FakeSnmp:
    """Stands in for Snmp_v2c; get() returns the raw value string."""

    host = "192.168.100.1"

    def __init__(self,
                 values: dict[str, str] | None = None,
                 rows: list[tuple[str, str]] | None = None,
                 get_error: Exception | None = None,
                 walk_error: Exception | None = None) -> None:
        self._values = values or {}
        self._rows = rows
        self._get_error = get_error
        self._walk_error = walk_error
        self.get_oids: list[str] = []
        self.walk_oids: list[str] = []

    async def get(self, oid: str) -> str | None:
        self.get_oids.append(oid)
        if self._get_error is not None:
            raise self._get_error
        return self._values.get(oid)

    async def walk(self, oid: str) -> list[tuple[str, str]] | None:
        self.walk_oids.append(oid)
        if self._walk_error is not None:
            raise self._walk_error
        return self._rows


@pytest.fixture(autouse=True)
def _raw_get_result(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Snmp_v2c, "get_result_value", staticmethod(lambda result: result))


@pytest.mark.asyncio
async def test_fetch_uses_configured_index() -> None:
    snmp = FakeSnmp({"docsIf31CmDsOfdmChanCyclicPrefix.3": "512"})
    query = SnmpParameterQuery(snmp, ofdm_index=3)  # type: ignore[arg-type]

    value = await query.fetch("docsIf31CmDsOfdmChanCyclicPrefix")

    assert value == "512"
    assert snmp.get_oids == ["docsIf31CmDsOfdmChanCyclicPrefix.3"]
    assert snmp.walk_oids == []


@pytest.mark.asyncio
async def test_index_zero_discovers_first_channel_once() -> None:
    snmp = FakeSnmp(
        values={
            "docsIf31CmDsOfdmChanCyclicPrefix.48": "512",
            "docsIf31CmDsOfdmChanSubcarrierSpacing.48": "50",
        },
        rows=[(f"{CHANNEL_ID_OID}.48", "193"), (f"{CHANNEL_ID_OID}.49", "194")],
    )
    query = SnmpParameterQuery(snmp, ofdm_index=0)  # type: ignore[arg-type]

    cp = await query.fetch("docsIf31CmDsOfdmChanCyclicPrefix")
    spacing = await query.fetch("docsIf31CmDsOfdmChanSubcarrierSpacing")

    assert (cp, spacing) == ("512", "50")
    assert query.ofdm_index == 48
    assert snmp.walk_oids == ["docsIf31CmDsOfdmChanChannelId"]


@pytest.mark.asyncio
async def test_no_ofdm_channel_reports_not_available(caplog: pytest.LogCaptureFixture) -> None:
    snmp = FakeSnmp(rows=None)
    query = SnmpParameterQuery(snmp)  # type: ignore[arg-type]

    with caplog.at_level(logging.WARNING, logger="SnmpParameterQuery"):
        value = await query.fetch("docsIf31CmDsOfdmChanCyclicPrefix")

    assert value is None
    assert snmp.get_oids == []
    assert "No downstream OFDM channels" in caplog.text


@pytest.mark.asyncio
async def test_discovery_failure_reports_not_available() -> None:
    snmp = FakeSnmp(walk_error=PySnmpError("no route"))
    query = SnmpParameterQuery(snmp)  # type: ignore[arg-type]

    assert await query.fetch("docsIf31CmDsOfdmChanCyclicPrefix") is None
    assert await query.fetch("docsIf31CmDsOfdmChanSubcarrierSpacing") is None
    assert len(snmp.walk_oids) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "No Such Instance currently exists at this OID",
        "No Such Object currently exists at this OID",
    ],
)
async def test_no_such_value_reports_not_available(raw: str | None) -> None:
    values = {} if raw is None else {"docsIf31CmDsOfdmChanCyclicPrefix.3": raw}
    snmp = FakeSnmp(values)
    query = SnmpParameterQuery(snmp, ofdm_index=3)  # type: ignore[arg-type]

    assert await query.fetch("docsIf31CmDsOfdmChanCyclicPrefix") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [RuntimeError("timeout"), OSError("unreachable"), PySnmpError("bad")])
async def test_transport_failure_reports_not_available(error: Exception,
                                                       caplog: pytest.LogCaptureFixture) -> None:
    snmp = FakeSnmp(get_error=error)
    query = SnmpParameterQuery(snmp, ofdm_index=3)  # type: ignore[arg-type]

    with caplog.at_level(logging.WARNING, logger="SnmpParameterQuery"):
        value = await query.fetch("docsIf31CmDsOfdmChanSubcarrierZeroFreq")

    assert value is None
    assert "SNMP GET docsIf31CmDsOfdmChanSubcarrierZeroFreq.3 failed" in caplog.text
