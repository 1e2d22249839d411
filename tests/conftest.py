from __future__ import annotations

import hashlib
import io
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import pytest
import yaml

FAKE_PASS_CLI = """\
#!/bin/sh
case "$1" in
  version)
    echo "pass-cli version {version}"
    ;;
  --help)
    echo "Pass-CLI: A secure CLI password manager"
    ;;
  init)
    read pw
    read confirm
    {init_body}
    ;;
  completion)
    case "$2" in
      bash|zsh|fish) echo "# $2 completion for pass-cli" ;;
      *) echo "unknown shell $2" >&2; exit 1 ;;
    esac
    ;;
  *)
    exit 2
    ;;
esac
"""

GOOD_INIT = 'mkdir -p "$HOME/.pass-cli" && touch "$HOME/.pass-cli/vault.enc"'


def fake_binary_script(version: str = "1.0.0", init_body: str = GOOD_INIT) -> str:
    return FAKE_PASS_CLI.format(version=version, init_body=init_body)


@dataclass(frozen=True)
class Release:
    archive: Path
    sha256: str


def _add_bytes(tar: tarfile.TarFile, name: str, data: bytes, mode: int) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(data)
    info.mode = mode
    tar.addfile(info, io.BytesIO(data))


@pytest.fixture
def make_release(tmp_path: Path) -> Callable[..., Release]:
    def _make(
        *,
        version: str = "1.0.0",
        script: Optional[str] = None,
        docs: bool = True,
        name: str = "pass-cli_1.0.0_linux_amd64.tar.gz",
    ) -> Release:
        releases = tmp_path / "releases"
        releases.mkdir(exist_ok=True)
        archive = releases / name
        with tarfile.open(archive, "w:gz") as tar:
            body = (script if script is not None else fake_binary_script(version)).encode("utf-8")
            _add_bytes(tar, "pass-cli", body, 0o755)
            if docs:
                _add_bytes(tar, "README.md", b"# pass-cli\n", 0o644)
                _add_bytes(tar, "LICENSE", b"MIT License\n", 0o644)
        return Release(archive=archive, sha256=hashlib.sha256(archive.read_bytes()).hexdigest())

    return _make


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[..., Path]:
    """Write a catalog whose linux/amd64 entry points at ``release``."""

    def _write(release: Release, *, sha256: Optional[str] = None, version: str = "1.0.0") -> Path:
        artifacts = [
            {"os": "linux", "arch": "amd64", "url": release.archive.as_uri(), "sha256": sha256 or release.sha256},
            {"os": "linux", "arch": "arm64", "url": str(tmp_path / "missing-linux-arm64.tar.gz"), "sha256": "0" * 64},
            {"os": "macos", "arch": "amd64", "url": str(tmp_path / "missing-darwin-amd64.tar.gz"), "sha256": "0" * 64},
            {"os": "macos", "arch": "arm64", "url": str(tmp_path / "missing-darwin-arm64.tar.gz"), "sha256": "0" * 64},
        ]
        raw = {
            "name": "pass-cli",
            "version": version,
            "description": "Secure CLI password manager",
            "artifacts": artifacts,
            "completions": ["bash", "zsh", "fish"],
            "docs": ["README.md", "LICENSE"],
        }
        p = tmp_path / "catalog.yaml"
        p.write_text(yaml.safe_dump(raw, sort_keys=False), encoding="utf-8")
        return p

    return _write
