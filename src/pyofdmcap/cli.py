#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pyofdmcap.config.system_config_settings import SystemConfigSettings
from pyofdmcap.docsis.ofdm.capacity_estimator import estimate_capacity
from pyofdmcap.docsis.ofdm.exceptions import InvalidChannelConfigError, ManualInputError
from pyofdmcap.docsis.ofdm.models import ChannelConfig
from pyofdmcap.lib.constants import EXIT_CONFIG_ERROR, EXIT_INPUT_ERROR, EXIT_SUCCESS, MHZ
from pyofdmcap.lib.inet import Inet
from pyofdmcap.lib.types import ExitCode, InetAddressStr, SnmpIndex
from pyofdmcap.report.capacity_report import CapacityReport
from pyofdmcap.resolver.parameter_resolver import ParameterResolver, SnmpParameterQuery
from pyofdmcap.snmp.snmp_v2c import Snmp_v2c
from pyofdmcap.startup.startup import StartUp
from pyofdmcap.version import __version__

CYCLIC_PREFIX       = "cyclic prefix"
SUBCARRIER_SPACING  = "subcarrier spacing"
LOWER_BAND_EDGE     = "lower band edge"
OCCUPIED_SPECTRUM   = "occupied spectrum"
MODULATION_ORDER    = "average modulation order"
GUARD_BAND          = "guard band"
EXCLUDED_BAND       = "excluded band"

# argparse dest -> parameter name
OVERRIDE_ARGS: dict[str, str] = {
    "cyclic_prefix":      CYCLIC_PREFIX,
    "subcarrier_spacing": SUBCARRIER_SPACING,
    "lower_band_edge":    LOWER_BAND_EDGE,
    "occupied_spectrum":  OCCUPIED_SPECTRUM,
    "modulation_order":   MODULATION_ORDER,
    "guard_band":         GUARD_BAND,
    "excluded_band":      EXCLUDED_BAND,
}

logger = logging.getLogger("pyofdmcap")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyofdmcap",
        description="Estimate the downstream capacity of a DOCSIS 3.1 OFDM channel.",
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{__version__}",
        help="Show PyOfdmCap version and exit.",
    )

    parser.add_argument("--inet", "-i", default=None,
                        help="IP address of the cable modem (default: SNMP.target.ip_address)")
    parser.add_argument("--community", "-c", default=None,
                        help="SNMP read community (default: SNMP.version.2c.read_community)")
    parser.add_argument("--ofdm-index", type=int, default=None,
                        help="docsIf31CmDsOfdmChanTable row to query; 0 discovers it (default: SNMP.target.ofdm_index)")
    parser.add_argument("--no-snmp", action="store_true",
                        help="Do not query the modem; every value is entered manually or given on the command line.")
    parser.add_argument("--config", default=None, help="Path to an alternate system.json")

    values = parser.add_argument_group("channel parameters (skip the query and the prompt)")
    values.add_argument("--cyclic-prefix", type=float, help="Cyclic prefix (samples)")
    values.add_argument("--subcarrier-spacing", type=float, help="Subcarrier spacing (kHz)")
    values.add_argument("--lower-band-edge", type=float, help="Lower band edge (MHz)")
    values.add_argument("--occupied-spectrum", type=float, help="Occupied spectrum (MHz)")
    values.add_argument("--modulation-order", type=float, help="Average modulation order (bits/symbol, 4-14)")
    values.add_argument("--guard-band", type=float, help="Guard band (MHz)")
    values.add_argument("--excluded-band", type=float, help="Excluded band (MHz)")

    parser.add_argument("--verbose", action="store_true", help="Include timing and codeword details in the report.")
    parser.add_argument("--json", action="store_true", help="Emit the report as JSON.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level (default: logging.log_level).",
    )
    parser.add_argument("--log-console", action="store_true", help="Mirror log records to stderr.")

    return parser


async def collect_channel_config(resolver: ParameterResolver) -> ChannelConfig:
    """Resolve every channel input in operator order and build the channel record."""
    cyclic_prefix = await resolver.resolve(CYCLIC_PREFIX, "512 samples",
                                           "docsIf31CmDsOfdmChanCyclicPrefix", unit="samples")
    spacing = await resolver.resolve(SUBCARRIER_SPACING, "50 kHz",
                                     "docsIf31CmDsOfdmChanSubcarrierSpacing", unit="kHz")
    lower_edge = await resolver.resolve(LOWER_BAND_EDGE, "690 MHz",
                                        "docsIf31CmDsOfdmChanSubcarrierZeroFreq",
                                        conversion_factor=MHZ, unit="MHz")

    occupied = resolver.prompt_value(OCCUPIED_SPECTRUM, "96 MHz", unit="MHz")
    modulation = resolver.prompt_value(MODULATION_ORDER, "10 bits/symbol, 4-14", unit="bits/symbol")
    guard = resolver.prompt_value(GUARD_BAND, "2 MHz", unit="MHz")
    excluded = resolver.prompt_value(EXCLUDED_BAND, "2 MHz", unit="MHz")

    return ChannelConfig(
        occupied_spectrum_mhz  = occupied.value,
        lower_band_edge_mhz    = lower_edge.value,
        modulation_order       = modulation.value,
        guard_band_mhz         = guard.value,
        excluded_band_mhz      = excluded.value,
        subcarrier_spacing_khz = spacing.value,
        cyclic_prefix_samples  = cyclic_prefix.value,
        sampling_rate_mhz      = SystemConfigSettings.sampling_rate_mhz(),
    )


def _open_snmp(args: argparse.Namespace) -> Snmp_v2c | None:
    if args.no_snmp or not SystemConfigSettings.snmp_enable():
        logger.info("SNMP disabled; all channel parameters come from the operator")
        return None

    inet = Inet(InetAddressStr(args.inet or SystemConfigSettings.target_ip_address()))
    logger.info(f"Querying OFDM channel parameters from {inet} ({inet.version})")
    return Snmp_v2c(
        host      = inet,
        community = args.community,
        timeout   = SystemConfigSettings.snmp_timeout(),
        retries   = SystemConfigSettings.snmp_retries(),
    )


async def run(args: argparse.Namespace) -> ExitCode:
    overrides = {
        name: getattr(args, dest)
        for dest, name in OVERRIDE_ARGS.items()
        if getattr(args, dest) is not None
    }

    try:
        snmp = _open_snmp(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    ofdm_index = args.ofdm_index if args.ofdm_index is not None else SystemConfigSettings.target_ofdm_index()
    query = SnmpParameterQuery(snmp, SnmpIndex(ofdm_index)) if snmp is not None else None
    resolver = ParameterResolver(query=query, overrides=overrides)

    try:
        channel = await collect_channel_config(resolver)
    except ManualInputError as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except EOFError:
        logger.error("Input closed before all channel parameters were entered")
        print("error: input closed before all channel parameters were entered", file=sys.stderr)
        return EXIT_INPUT_ERROR
    finally:
        if snmp is not None:
            snmp.close()

    try:
        estimate = estimate_capacity(channel, SystemConfigSettings.ofdm_phy_constants())
    except InvalidChannelConfigError as e:
        logger.error(str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger.info(f"Whole channel rate {estimate.capacity.rate_gbps:.6f} Gbps")
    CapacityReport(estimate, resolver.resolved, verbose=args.verbose).emit(as_json=args.json)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> ExitCode:
    args = build_parser().parse_args(argv)

    if args.config:
        try:
            SystemConfigSettings.use_config_file(args.config)
        except (FileNotFoundError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR

    StartUp.initialize(log_level=args.log_level, to_console=args.log_console)

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
