# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import ipaddress

from pyofdmcap.lib.types import InetAddressStr


class InetGenerate:
    """
    Helpers for validating the SNMP target address handed in on the command line.
    """

    @staticmethod
    def get_inet_version(inet: InetAddressStr) -> str:
        """
        Get the IP version of the provided IP address.

        Returns:
            str: The IP version ('IPv4' or 'IPv6').

        Raises:
            ValueError: If the provided IP address is invalid.
        """
        try:
            ip_obj = ipaddress.ip_address(inet)
            return "IPv4" if ip_obj.version == 4 else "IPv6"
        except ValueError:
            raise ValueError(f"Invalid IP address: {inet}") from None
