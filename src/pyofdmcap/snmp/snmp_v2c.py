# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
import re

from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    ObjectIdentity,
    ObjectType,
    SnmpEngine,
    UdpTransportTarget,
    get_cmd,
    walk_cmd,
)
from pysnmp.proto.rfc1902 import Integer32, OctetString

from pyofdmcap.config.system_config_settings import SystemConfigSettings
from pyofdmcap.lib.inet import Inet
from pyofdmcap.lib.types import SnmpIndex, SnmpReadCommunity
from pyofdmcap.snmp.compiled_oids import COMPILED_OIDS

SnmpOid = str | tuple[str, ...]


class Snmp_v2c:
    """
    Read-only SNMPv2c access to a cable modem.

    Only GET and WALK are needed to read docsIf31CmDsOfdmChanTable, so there is
    no write community and no SET. OIDs may be given numerically or by the
    DOCS-IF31-MIB column name with an optional ``.index`` suffix.

    Example:
        >>> snmp = Snmp_v2c(Inet('192.168.100.1'), community='public')
        >>> await snmp.get('docsIf31CmDsOfdmChanCyclicPrefix.3')
        >>> await snmp.walk('docsIf31CmDsOfdmChanChannelId')
        >>> snmp.close()
    """

    SNMP_PORT = 161

    # pysnmp text for the noSuchObject / noSuchInstance / endOfMibView varbind values
    NO_SUCH_MARKERS: tuple[str, ...] = (
        "No Such Instance",
        "No Such Object",
        "No more variables left in this MIB View",
    )

    def __init__(
        self,
        host: Inet,
        community: str | None = None,
        port: int = SNMP_PORT,
        timeout: int = SystemConfigSettings.snmp_timeout(),
        retries: int = SystemConfigSettings.snmp_retries(),
    ) -> None:
        """
        Args:
            host: Cable modem management address.
            community: Read community; the configured one is used when empty.
            port: Agent UDP port.
            timeout: Per-request timeout in seconds.
            retries: Retransmissions per request.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._host = host.inet
        self._port = port
        self._read_community: SnmpReadCommunity = (
            SnmpReadCommunity(str(community)) if community else SystemConfigSettings.snmp_read_community()
        )
        self._timeout = timeout
        self._retries = retries
        self._snmp_engine = SnmpEngine()

    @property
    def host(self) -> str:
        return self._host

    async def get(self, oid: SnmpOid,
                  timeout: float | None = None,
                  retries: int | None = None) -> list[ObjectType] | None:
        """
        Read a single OID.

        Agent or transport errors are logged and yield the (usually empty)
        varbind list, so a caller only has to check the value.

        Args:
            oid: Numeric or symbolic OID.
            timeout: Seconds, overriding the client timeout for this request.
            retries: Overrides the client retry count for this request.
        """
        numeric_oid = Snmp_v2c.resolve_oid(oid)
        self.logger.debug(f"GET {numeric_oid} from {self._host}")

        transport = await self._transport(timeout, retries)
        errorIndication, errorStatus, errorIndex, varBinds = await get_cmd(
            self._snmp_engine,
            CommunityData(self._read_community, mpModel=1),
            transport,
            ContextData(),
            ObjectType(self._to_object_identity(numeric_oid)),
        )

        try:
            self._raise_on_snmp_error(errorIndication, errorStatus, errorIndex)
        except RuntimeError as e:
            self.logger.error(f"Failed GET for OID {numeric_oid}: {e}")

        return varBinds

    async def walk(self, oid: SnmpOid) -> list[ObjectType] | None:
        """
        Collect every varbind below ``oid``.

        Returns:
            The varbinds inside the subtree, or None when there are none or the
            first request fails.
        """
        numeric_oid = Snmp_v2c.resolve_oid(oid)
        self.logger.debug(f"WALK {numeric_oid} on {self._host}")

        root = self._to_object_identity(numeric_oid)
        rows: list[ObjectType] = []

        responses = walk_cmd(
            self._snmp_engine,
            CommunityData(self._read_community, mpModel=1),
            await self._transport(),
            ContextData(),
            ObjectType(root),
        )

        async for errorIndication, errorStatus, errorIndex, varBinds in responses:
            try:
                self._raise_on_snmp_error(errorIndication, errorStatus, errorIndex)
            except RuntimeError as e:
                self.logger.error(f"Failed WALK of {numeric_oid}: {e}")
                break

            for varBind in varBinds or ():
                if not self._is_oid_in_subtree(str(varBind[0]), str(root)):
                    self.logger.debug(f"WALK of {numeric_oid} left subtree after {len(rows)} rows")
                    return rows or None
                rows.append(varBind)

        return rows or None

    def close(self) -> None:
        """Release the SNMP engine's transport dispatcher."""
        self._snmp_engine.close_dispatcher()

    @staticmethod
    def resolve_oid(oid: SnmpOid) -> str:
        """
        Translate a DOCS-IF31-MIB column name into its numeric OID.

        Examples:
            'docsIf31CmDsOfdmChanCyclicPrefix'   -> '1.3.6.1.4.1.4491.2.1.28.1.9.1.8'
            'docsIf31CmDsOfdmChanCyclicPrefix.3' -> '1.3.6.1.4.1.4491.2.1.28.1.9.1.8.3'
            '1.3.6.1.2.1.1.1.0'                  -> unchanged

        Names that are not compiled in are returned as given.
        """
        text = ".".join(str(part) for part in oid) if isinstance(oid, tuple) else oid

        if Snmp_v2c.is_numeric_oid(text):
            return text

        name, dot, index = text.partition(".")
        numeric = COMPILED_OIDS.get(name)
        if numeric is None:
            return text
        return f"{numeric}{dot}{index}"

    @staticmethod
    def is_numeric_oid(oid: str) -> bool:
        """True for dotted-decimal OIDs, with or without a leading dot."""
        return re.fullmatch(r"\.?\d+(\.\d+)+", oid) is not None

    @staticmethod
    def get_result_value(result: ObjectType | list[ObjectType] | tuple[ObjectType, ...] | None) -> str | None:
        """
        Text of the first value in a GET result, or None if there is no value.
        """
        if isinstance(result, (list, tuple)):
            result = result[0] if result else None

        if not isinstance(result, ObjectType):
            return None

        value = result[1]
        return value.prettyPrint() if isinstance(value, OctetString) else str(value)

    @staticmethod
    def is_no_such_value(value: str | None) -> bool:
        """True when a GET answered with an SNMP exception value instead of data."""
        if value is None or not value.strip():
            return True
        return any(marker in value for marker in Snmp_v2c.NO_SUCH_MARKERS)

    @staticmethod
    def extract_last_oid_index(rows: list[ObjectType]) -> list[SnmpIndex]:
        """Table indices of walked rows, in walk order."""
        indices = (Snmp_v2c.get_oid_index(str(row[0])) for row in rows)
        return [index for index in indices if index is not None]

    @staticmethod
    def get_oid_index(oid: str) -> SnmpIndex | None:
        """Last sub-identifier of ``oid``, or None if it is not an integer."""
        last = oid.strip().rsplit(".", 1)[-1]
        try:
            return SnmpIndex(int(last))
        except ValueError:
            logging.getLogger("Snmp_v2c").error(f"OID '{oid}' does not end in a table index")
            return None

    ###################
    # Private Methods #
    ###################

    async def _transport(self, timeout: float | None = None, retries: int | None = None) -> UdpTransportTarget:
        # UdpTransportTarget timeout is in seconds
        return await UdpTransportTarget.create(
            (self._host, self._port),
            timeout=float(self._timeout if timeout is None else timeout),
            retries=int(self._retries if retries is None else retries),
        )

    def _to_object_identity(self, oid: str) -> ObjectIdentity:
        return ObjectIdentity(oid)

    def _raise_on_snmp_error(self,
                             errorIndication: Exception | str | None,
                             errorStatus: object | None,
                             errorIndex: Integer32 | int | None) -> None:
        """Raise RuntimeError for an engine-level or agent-reported failure."""
        if errorIndication:
            raise RuntimeError(f"SNMP operation failed: {errorIndication}")
        if errorStatus:
            pretty = getattr(errorStatus, "prettyPrint", None)
            status_text = pretty() if callable(pretty) else str(errorStatus)
            raise RuntimeError(f"SNMP error {status_text} at index {errorIndex}")

    @staticmethod
    def _is_oid_in_subtree(oid: str, root: str) -> bool:
        oid_parts = oid.strip(".").split(".")
        root_parts = root.strip(".").split(".")
        return oid_parts[:len(root_parts)] == root_parts
