from __future__ import annotations

import logging
import platform
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def normalize_os(system: str) -> str:
    s = system.strip().lower()
    return {
        "darwin": "macos",
        "macos": "macos",
        "osx": "macos",
        "linux": "linux",
    }.get(s, s)


def normalize_arch(machine: str) -> str:
    m = machine.strip().lower()
    return {
        "x86_64": "amd64",
        "amd64": "amd64",
        "x64": "amd64",
        "intel": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "arm": "arm64",
    }.get(m, m)


def detect_platform(
    *,
    operating_system: Optional[str] = None,
    architecture: Optional[str] = None,
) -> Tuple[str, str]:
    """Return the normalized (os, arch) pair for this host.

    Explicit values win over detection; both are normalized either way so
    ``Darwin/x86_64`` and ``macos/amd64`` land on the same catalog key.
    """

    os_raw = operating_system or platform.system()
    arch_raw = architecture or platform.machine()
    pair = (normalize_os(os_raw), normalize_arch(arch_raw))
    logger.info("Platform: %s/%s (reported %s/%s)", pair[0], pair[1], os_raw, arch_raw)
    return pair
