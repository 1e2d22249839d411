from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
import yaml

from pass_cli_installer.advisory import ADVISORY
from pass_cli_installer.install_config import load_install_config
from pass_cli_installer.logging_utils import ConsoleFormatter
from pass_cli_installer.main import main


def test_advisory_is_printed_verbatim(capsys) -> None:
    assert main(["advisory"]) == 0
    assert capsys.readouterr().out == ADVISORY
    assert "~/.pass-cli/" in ADVISORY


def test_verify_catalog_on_bundled_manifest(capsys) -> None:
    assert main(["verify-catalog"]) == 0
    assert "catalog ok" in capsys.readouterr().out


def test_resolve_unsupported_platform_exits_nonzero(capsys) -> None:
    assert main(["resolve", "--os", "windows", "--arch", "amd64"]) == 1
    assert "unsupported platform windows/amd64" in capsys.readouterr().err


def test_resolve_prints_artifact(capsys) -> None:
    assert main(["resolve", "--os", "linux", "--arch", "arm64"]) == 0
    out = capsys.readouterr().out
    assert "pass-cli_1.0.0_linux_arm64.tar.gz" in out


def test_install_then_test_round_trip(tmp_path, capsys, make_release, write_catalog) -> None:
    catalog = write_catalog(make_release())
    prefix = tmp_path / "prefix"
    log = tmp_path / "logs" / "install.log"
    common = ["--catalog", str(catalog), "--prefix", str(prefix), "--log", str(log)]

    assert main(["install", "--os", "linux", "--arch", "amd64", *common]) == 0
    out = capsys.readouterr().out
    assert "Installed pass-cli 1.0.0" in out
    assert "Initialize your vault" in out

    assert main(["test", *common]) == 0
    out = capsys.readouterr().out
    assert "ok   version" in out
    assert "ok   init" in out


def test_install_with_placeholder_checksum_fails_closed(capsys, tmp_path) -> None:
    code = main(["install", "--os", "linux", "--arch", "amd64", "--prefix", str(tmp_path / "p"), "--log", str(tmp_path / "x.log")])
    assert code == 1
    assert "step 20_fetch_artifact failed" in capsys.readouterr().err
    assert not (tmp_path / "p").exists()


def test_install_config_defaults_and_overrides(tmp_path: Path) -> None:
    assert load_install_config(None).prefix == "~/.local"

    p = tmp_path / "install.yaml"
    p.write_text(yaml.safe_dump({"paths": {"prefix": "/opt/pass"}, "shells": ["zsh"], "timeout_s": 5}), encoding="utf-8")
    cfg = load_install_config(str(p))
    assert cfg.prefix == "/opt/pass"
    assert cfg.shells == ["zsh"]
    assert cfg.timeout_s == 5.0
    assert cfg.dry_run is False


def test_missing_artifact_reports_failing_step(tmp_path, capsys, make_release, write_catalog) -> None:
    catalog = write_catalog(make_release())
    code = main(
        [
            "install", "--os", "linux", "--arch", "arm64",
            "--catalog", str(catalog), "--prefix", str(tmp_path / "p"), "--log", str(tmp_path / "x.log"),
        ]
    )
    assert code == 1
    err = capsys.readouterr().err
    assert "error: step 20_fetch_artifact failed" in err
    assert "missing-linux-arm64.tar.gz" in err


def test_missing_catalog_is_reported_not_raised(tmp_path, capsys) -> None:
    code = main(["install", "--catalog", str(tmp_path / "nope.yaml"), "--prefix", str(tmp_path / "p"), "--log", str(tmp_path / "x.log")])
    assert code == 1
    assert "nope.yaml" in capsys.readouterr().err


def test_unknown_shell_in_config_is_rejected(tmp_path, capsys) -> None:
    cfg = tmp_path / "install.yaml"
    cfg.write_text(yaml.safe_dump({"shells": ["zsh", "powershell"]}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_install_config(str(cfg))

    assert main(["install", "--config", str(cfg), "--prefix", str(tmp_path / "p"), "--log", str(tmp_path / "x.log")]) == 1
    assert "powershell" in capsys.readouterr().err
    assert not (tmp_path / "p").exists()


def test_console_log_lines_carry_no_traceback() -> None:
    try:
        raise FileNotFoundError("artifact gone")
    except FileNotFoundError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "step failed", None, sys.exc_info())

    full = logging.Formatter().format(record)
    line = ConsoleFormatter().format(record)
    assert "Traceback" in full
    assert "Traceback" not in line
    assert line.endswith("step failed")
