# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar, cast

from pydantic import ValidationError

from pyofdmcap.config.config_manager import ConfigManager
from pyofdmcap.docsis.ofdm.models import FecLayout, OfdmPhyConstants
from pyofdmcap.lib.constants import DEFAULT_SAMPLING_RATE_MHZ
from pyofdmcap.lib.types import (
    BitsPerSymbol,
    FileNameStr,
    InetAddressStr,
    SampleRateMHz,
    SnmpIndex,
    SnmpReadCommunity,
)

T = TypeVar("T")


class SystemConfigSettings:
    """
    Typed access to system.json.

    Every accessor falls back to a built-in default, and logs why, when a value is
    missing or malformed, so a damaged file never stops a capacity run.
    """
    _cfg        = ConfigManager()
    _logger     = logging.getLogger("SystemConfigSettings")

    _DEFAULT_IP_ADDRESS: InetAddressStr     = cast(InetAddressStr, "192.168.100.1")
    _DEFAULT_OFDM_INDEX: int                = 0
    _DEFAULT_SNMP_RETRIES: int              = 3
    _DEFAULT_SNMP_TIMEOUT: int              = 2
    _DEFAULT_SNMP_READ_COMMUNITY: str       = "public"
    _DEFAULT_LOG_LEVEL: str                 = "INFO"
    _DEFAULT_LOG_DIR: str                   = "logs"
    _DEFAULT_LOG_FILENAME: str              = "pyofdmcap.log"

    _PHY_DEFAULTS                           = OfdmPhyConstants()

    _BOOL_TEXT: dict[str, bool] = {
        "1": True, "true": True, "yes": True, "on": True,
        "0": False, "false": False, "no": False, "off": False,
    }

    @classmethod
    def _config_path(cls, *path: str) -> str:
        """Return dotted path for logging."""
        return ".".join(path)

    @classmethod
    def _fallback(cls, problem: str, default: T, path: tuple[str, ...], value: object = None) -> T:
        dotted = cls._config_path(*path)
        if value is None:
            cls._logger.error("%s configuration value for '%s'; using default %r", problem, dotted, default)
        else:
            cls._logger.error("%s configuration value for '%s': %r; using default %r",
                              problem, dotted, value, default)
        return default

    @classmethod
    def _get_str(cls, default: str, *path: str) -> str:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", default, path)
        if value == "":
            return cls._fallback("Empty", default, path)
        if not isinstance(value, str):
            cls._logger.error("Non-string configuration value for '%s': %r; using it as text",
                              cls._config_path(*path), value)
            return str(value)
        return value

    @classmethod
    def _get_int(cls, default: int, *path: str) -> int:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", default, path)
        # bool is an int subclass; true/false is never a count
        if isinstance(value, bool):
            return cls._fallback("Invalid integer", default, path, value)
        try:
            return int(value)
        except (TypeError, ValueError):
            return cls._fallback("Invalid integer", default, path, value)

    @classmethod
    def _get_float(cls, default: float, *path: str) -> float:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", default, path)
        if isinstance(value, bool):
            return cls._fallback("Invalid numeric", default, path, value)
        try:
            return float(value)
        except (TypeError, ValueError):
            return cls._fallback("Invalid numeric", default, path, value)

    @classmethod
    def _get_bool(cls, default: bool, *path: str) -> bool:
        value = cls._cfg.get(*path)
        if value is None:
            return cls._fallback("Missing", default, path)
        if isinstance(value, bool):
            return value

        flag = cls._BOOL_TEXT.get(str(value).strip().lower())
        if flag is None:
            return cls._fallback("Invalid boolean", default, path, value)
        return flag

    @classmethod
    def get_config_path(cls) -> str:
        return cls._cfg.get_config_path()

    @classmethod
    def use_config_file(cls, config_path: str) -> None:
        """
        Switch to a different configuration file for the rest of the run.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid JSON.
        """
        cls._cfg = ConfigManager(config_path=config_path)

    # SNMP v2 settings
    @classmethod
    def snmp_enable(cls) -> bool:
        return cls._get_bool(True, "SNMP", "version", "2c", "enable")

    @classmethod
    def snmp_retries(cls) -> int:
        return cls._get_int(cls._DEFAULT_SNMP_RETRIES, "SNMP", "version", "2c", "retries")

    @classmethod
    def snmp_read_community(cls) -> SnmpReadCommunity:
        return cast(
            SnmpReadCommunity,
            cls._get_str(cls._DEFAULT_SNMP_READ_COMMUNITY, "SNMP", "version", "2c", "read_community"),
        )

    # SNMP general settings
    @classmethod
    def snmp_timeout(cls) -> int:
        return cls._get_int(cls._DEFAULT_SNMP_TIMEOUT, "SNMP", "timeout")

    @classmethod
    def target_ip_address(cls) -> InetAddressStr:
        return cast(
            InetAddressStr,
            cls._get_str(cls._DEFAULT_IP_ADDRESS, "SNMP", "target", "ip_address"),
        )

    @classmethod
    def target_ofdm_index(cls) -> SnmpIndex:
        """Row of docsIf31CmDsOfdmChanTable to query; 0 means discover it."""
        return cast(SnmpIndex, cls._get_int(cls._DEFAULT_OFDM_INDEX, "SNMP", "target", "ofdm_index"))

    # OFDM PHY constants
    @classmethod
    def fec_layout(cls) -> FecLayout:
        d = cls._PHY_DEFAULTS.fec
        try:
            return FecLayout(
                codeword_size = cls._get_int(d.codeword_size, "OfdmPhy", "Fec", "codeword_size"),
                info_bits     = cls._get_int(d.info_bits, "OfdmPhy", "Fec", "info_bits"),
                parity_bits   = cls._get_int(d.parity_bits, "OfdmPhy", "Fec", "parity_bits"),
                bch_bits      = cls._get_int(d.bch_bits, "OfdmPhy", "Fec", "bch_bits"),
                header_bits   = cls._get_int(d.header_bits, "OfdmPhy", "Fec", "header_bits"),
            )
        except ValidationError as exc:
            cls._logger.error(
                "Invalid configuration for '%s': %s; using defaults",
                cls._config_path("OfdmPhy", "Fec"),
                exc,
            )
            return d

    @classmethod
    def sampling_rate_mhz(cls) -> SampleRateMHz:
        return cast(
            SampleRateMHz,
            cls._get_float(DEFAULT_SAMPLING_RATE_MHZ, "OfdmPhy", "sampling_rate_mhz"),
        )

    @classmethod
    def ofdm_phy_constants(cls) -> OfdmPhyConstants:
        d = cls._PHY_DEFAULTS
        try:
            return OfdmPhyConstants(
                num_fft_blocks          = cls._get_int(d.num_fft_blocks, "OfdmPhy", "num_fft_blocks"),
                pilot_density           = cls._get_float(d.pilot_density, "OfdmPhy", "pilot_density"),
                excluded_subcarriers    = cls._get_int(d.excluded_subcarriers, "OfdmPhy", "excluded_subcarriers"),
                ncp_modulation_order    = cast(BitsPerSymbol, cls._get_int(d.ncp_modulation_order,
                                                                           "OfdmPhy", "ncp_modulation_order")),
                ncp_bits_per_mb         = cls._get_int(d.ncp_bits_per_mb, "OfdmPhy", "ncp_bits_per_mb"),
                num_symbols_per_profile = cls._get_float(d.num_symbols_per_profile,
                                                         "OfdmPhy", "num_symbols_per_profile"),
                fec                     = cls.fec_layout(),
            )
        except ValidationError as exc:
            cls._logger.error(
                "Invalid configuration for '%s': %s; using defaults",
                cls._config_path("OfdmPhy"),
                exc,
            )
            return d

    # Logging
    @classmethod
    def log_level(cls) -> str:
        return cls._get_str(cls._DEFAULT_LOG_LEVEL, "logging", "log_level")

    @classmethod
    def log_dir(cls) -> str:
        return cls._get_str(cls._DEFAULT_LOG_DIR, "logging", "log_dir")

    @classmethod
    def log_filename(cls) -> FileNameStr:
        return cast(FileNameStr, cls._get_str(cls._DEFAULT_LOG_FILENAME, "logging", "log_filename"))

    @classmethod
    def initialize_directories(cls) -> None:
        """
        Create necessary directories if they do not exist.
        """
        Path(cls.log_dir()).mkdir(parents=True, exist_ok=True)
