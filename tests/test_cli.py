# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Maurice Garcia

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

import pyofdmcap.cli as cli_module
from pyofdmcap.config.system_config_settings import SystemConfigSettings
from pyofdmcap.lib.constants import EXIT_CONFIG_ERROR, EXIT_INPUT_ERROR, EXIT_SUCCESS
from pyofdmcap.snmp.snmp_v2c import Snmp_v2c

CHANNEL_ID_OID = "1.3.6.1.4.1.4491.2.1.28.1.9.1.1"

ALL_VALUES = [
    "--cyclic-prefix", "512",
    "--subcarrier-spacing", "50",
    "--lower-band-edge", "690",
    "--occupied-spectrum", "96",
    "--modulation-order", "10",
    "--guard-band", "2",
    "--excluded-band", "2",
]


class FakeSnmp:
    """Replaces Snmp_v2c in the CLI; get() answers with raw value strings."""

    instances: list[FakeSnmp] = []

    def __init__(self, host: object, community: str | None = None,
                 timeout: int = 2, retries: int = 3) -> None:
        self.host = str(host)
        self.community = community
        self.closed = False
        FakeSnmp.instances.append(self)

    async def walk(self, oid: str) -> list[tuple[str, str]]:
        return [(f"{CHANNEL_ID_OID}.48", "193")]

    async def get(self, oid: str) -> str | None:
        return {
            "docsIf31CmDsOfdmChanCyclicPrefix.48": "512",
            "docsIf31CmDsOfdmChanSubcarrierSpacing.48": "50",
            "docsIf31CmDsOfdmChanSubcarrierZeroFreq.48": "690000000",
        }.get(oid)

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module.StartUp, "initialize", lambda **_kwargs: None)
    monkeypatch.setattr(SystemConfigSettings, "_cfg", SystemConfigSettings._cfg)
    FakeSnmp.instances = []


def test_all_values_on_command_line(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli_module.main(["--no-snmp", *ALL_VALUES])

    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "cyclic prefix: 512 samples (command line)" in out
    assert "Modulated subcarriers: 1840" in out
    assert "Continuous pilots: 33" in out
    assert "Scattered pilots: 15" in out
    assert out.splitlines()[-1] == "Whole channel rate: 0.6318 Gbps"


def test_json_output(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli_module.main(["--no-snmp", "--json", *ALL_VALUES])

    payload = json.loads(capsys.readouterr().out)
    assert code == EXIT_SUCCESS
    assert payload["estimate"]["capacity"]["total_data_bits"] == pytest.approx(14216)
    assert len(payload["parameters"]) == 7


def test_manual_entry_from_stdin(monkeypatch: pytest.MonkeyPatch,
                                 capsys: pytest.CaptureFixture[str]) -> None:
    args = [a for a in ALL_VALUES]
    idx = args.index("--occupied-spectrum")
    del args[idx:idx + 2]
    monkeypatch.setattr("sys.stdin", io.StringIO("96\n"))

    code = cli_module.main(["--no-snmp", *args])

    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "Enter occupied spectrum (e.g. 96 MHz): " in out
    assert "occupied spectrum: 96 MHz (manual entry)" in out


def test_malformed_manual_entry_exits_with_input_error(monkeypatch: pytest.MonkeyPatch,
                                                       capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("abc\n"))

    code = cli_module.main(["--no-snmp", "--cyclic-prefix", "512",
                            "--subcarrier-spacing", "50", "--lower-band-edge", "690"])

    assert code == EXIT_INPUT_ERROR
    assert "invalid value for occupied spectrum: 'abc'" in capsys.readouterr().err


def test_closed_input_exits_with_input_error(monkeypatch: pytest.MonkeyPatch,
                                             capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    code = cli_module.main(["--no-snmp"])

    assert code == EXIT_INPUT_ERROR
    assert "input closed" in capsys.readouterr().err


def test_invalid_channel_exits_with_config_error(capsys: pytest.CaptureFixture[str]) -> None:
    args = [a for a in ALL_VALUES]
    args[args.index("--occupied-spectrum") + 1] = "3"

    code = cli_module.main(["--no-snmp", *args])

    captured = capsys.readouterr()
    assert code == EXIT_CONFIG_ERROR
    assert "invalid channel configuration" in captured.err
    assert "Whole channel rate" not in captured.out


def test_missing_config_file_exits_with_config_error(tmp_path: Path,
                                                     capsys: pytest.CaptureFixture[str]) -> None:
    code = cli_module.main(["--config", str(tmp_path / "absent.json"), "--no-snmp", *ALL_VALUES])

    assert code == EXIT_CONFIG_ERROR
    assert "Config file not found" in capsys.readouterr().err


def test_unparseable_config_file_exits_with_config_error(tmp_path: Path,
                                                        capsys: pytest.CaptureFixture[str]) -> None:
    cfg_path = tmp_path / "bad.json"
    cfg_path.write_text("{ not json", encoding="utf-8")

    code = cli_module.main(["--config", str(cfg_path), "--no-snmp", *ALL_VALUES])

    captured = capsys.readouterr()
    assert code == EXIT_CONFIG_ERROR
    assert f"error: Config file {cfg_path} is not valid JSON" in captured.err
    assert captured.out == ""


def test_configured_sampling_rate_sets_cyclic_prefix_duration(tmp_path: Path,
                                                               capsys: pytest.CaptureFixture[str]) -> None:
    cfg_path = tmp_path / "system.json"
    cfg_path.write_text(json.dumps({"OfdmPhy": {"sampling_rate_mhz": 102.4}}), encoding="utf-8")

    code = cli_module.main(["--config", str(cfg_path), "--no-snmp", "--json", *ALL_VALUES])

    estimate = json.loads(capsys.readouterr().out)["estimate"]
    assert code == EXIT_SUCCESS
    assert estimate["channel"]["sampling_rate_mhz"] == pytest.approx(102.4)
    # 512 samples at 102.4 MHz
    assert estimate["timing"]["cyclic_prefix_usec"] == pytest.approx(5.0)
    assert estimate["timing"]["num_fft_points"] == pytest.approx(2048)


def test_snmp_values_are_resolved_and_reported(monkeypatch: pytest.MonkeyPatch,
                                               capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli_module, "Snmp_v2c", FakeSnmp)
    monkeypatch.setattr(Snmp_v2c, "get_result_value", staticmethod(lambda result: result))

    code = cli_module.main(["--inet", "192.168.100.10", "--community", "private",
                            "--occupied-spectrum", "96", "--modulation-order", "10",
                            "--guard-band", "2", "--excluded-band", "2"])

    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "cyclic prefix: 512 samples (auto-resolved via SNMP)" in out
    assert "subcarrier spacing: 50 kHz (auto-resolved via SNMP)" in out
    assert "lower band edge: 690 MHz (auto-resolved via SNMP)" in out
    assert out.splitlines()[-1] == "Whole channel rate: 0.6318 Gbps"

    snmp = FakeSnmp.instances[0]
    assert snmp.host == "192.168.100.10"
    assert snmp.community == "private"
    assert snmp.closed is True


def test_invalid_inet_exits_with_input_error(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli_module.main(["--inet", "cable-modem", *ALL_VALUES])

    assert code == EXIT_INPUT_ERROR
    assert "Invalid IP address" in capsys.readouterr().err


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli_module.main(["--version"])

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.strip() == cli_module.__version__
