from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .install_target import COMPLETION_PATHS

DEFAULT_PREFIX = "~/.local"


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def prefix(self) -> str:
        return str(((self.raw.get("paths") or {}).get("prefix")) or DEFAULT_PREFIX)

    @property
    def log_path(self) -> Optional[str]:
        p = (self.raw.get("paths") or {}).get("log")
        return str(p) if p else None

    @property
    def catalog_path(self) -> Optional[str]:
        p = self.raw.get("catalog")
        return str(p) if p else None

    @property
    def shells(self) -> Optional[List[str]]:
        # None means "whatever the catalog declares".
        shells = self.raw.get("shells")
        if shells is None:
            return None
        return [str(s) for s in shells]

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def timeout_s(self) -> Optional[float]:
        t = self.raw.get("timeout_s")
        return float(t) if t is not None else None


def load_install_config(path: Optional[str]) -> InstallConfig:
    if not path:
        return InstallConfig()

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("install config must be YAML")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("install config must contain a mapping/object")

    cfg = InstallConfig(raw=raw)
    unknown = [s for s in (cfg.shells or []) if s not in COMPLETION_PATHS]
    if unknown:
        raise ValueError(f"install config names unsupported shells: {unknown} (supported: {sorted(COMPLETION_PATHS)})")

    return cfg
