# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

from pyofdmcap.lib.inet_utils import InetGenerate
from pyofdmcap.lib.types import InetAddressStr


class Inet:
    """
    Validated IP address of the SNMP agent (cable modem) being queried.

    Raises:
        ValueError: If the IP address is invalid.
    """

    def __init__(self, inet: InetAddressStr) -> None:
        self._version = InetGenerate.get_inet_version(inet)
        self._inet = inet

    @property
    def inet(self) -> str:
        """Returns the stored IP address."""
        return self._inet

    @property
    def version(self) -> str:
        """'IPv4' or 'IPv6'."""
        return self._version

    def __str__(self) -> str:
        return self._inet
