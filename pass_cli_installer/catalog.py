from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from .errors import CatalogError, UnsupportedPlatformError
from .install_target import COMPLETION_PATHS
from .lib.platform_detect import normalize_arch, normalize_os

logger = logging.getLogger(__name__)

SUPPORTED_OS = ("macos", "linux")
SUPPORTED_ARCH = ("amd64", "arm64")

# Release tarballs use Go's GOOS names.
_ARTIFACT_OS_TOKEN = {"macos": "darwin", "linux": "linux"}

DEFAULT_MANIFEST = Path(__file__).resolve().parent / "manifests" / "pass-cli.yaml"

PlatformKey = Tuple[str, str]


@dataclass(frozen=True)
class ReleaseArtifact:
    name: str
    version: str
    operating_system: str
    architecture: str
    url: str
    sha256: str

    @property
    def key(self) -> PlatformKey:
        return (self.operating_system, self.architecture)

    @property
    def filename(self) -> str:
        return artifact_filename(self.name, self.version, self.operating_system, self.architecture)


def artifact_filename(name: str, version: str, operating_system: str, architecture: str) -> str:
    os_token = _ARTIFACT_OS_TOKEN.get(operating_system, operating_system)
    return f"{name}_{version}_{os_token}_{architecture}.tar.gz"


@dataclass(frozen=True)
class ArtifactCatalog:
    """Release metadata for one version, keyed by (os, arch)."""

    raw: Dict[str, Any]
    artifacts: Dict[PlatformKey, ReleaseArtifact]

    @property
    def name(self) -> str:
        return str(self.raw.get("name") or "pass-cli")

    @property
    def version(self) -> str:
        return str(self.raw.get("version") or "")

    @property
    def description(self) -> str:
        return str(self.raw.get("description") or "")

    @property
    def completions(self) -> List[str]:
        return [str(s) for s in (self.raw.get("completions") or [])]

    @property
    def docs(self) -> List[str]:
        return [str(d) for d in (self.raw.get("docs") or [])]

    def supported_platforms(self) -> List[PlatformKey]:
        return sorted(self.artifacts)

    def resolve(self, operating_system: str, architecture: str) -> ReleaseArtifact:
        key = (normalize_os(operating_system), normalize_arch(architecture))
        try:
            artifact = self.artifacts[key]
        except KeyError:
            raise UnsupportedPlatformError(key[0], key[1], self.supported_platforms()) from None
        logger.info("Resolved %s/%s -> %s", key[0], key[1], artifact.url)
        return artifact

    def __iter__(self) -> Iterator[ReleaseArtifact]:
        return iter(self.artifacts[k] for k in self.supported_platforms())


def _build_artifact(entry: Dict[str, Any], *, name: str, version: str, url_template: Optional[str]) -> ReleaseArtifact:
    os_name = normalize_os(str(entry.get("os") or ""))
    arch = normalize_arch(str(entry.get("arch") or ""))
    if not os_name or not arch:
        raise CatalogError(f"Artifact entry needs os and arch: {entry}")

    url = entry.get("url")
    if not url:
        if not url_template:
            raise CatalogError(f"No url or url_template for {os_name}/{arch}")
        url = url_template.format(
            name=name,
            version=version,
            os=_ARTIFACT_OS_TOKEN.get(os_name, os_name),
            arch=arch,
            filename=artifact_filename(name, version, os_name, arch),
        )

    return ReleaseArtifact(
        name=name,
        version=version,
        operating_system=os_name,
        architecture=arch,
        url=str(url),
        sha256=str(entry.get("sha256") or "").strip().lower(),
    )


def catalog_from_dict(raw: Dict[str, Any]) -> ArtifactCatalog:
    name = str(raw.get("name") or "pass-cli")
    version = str(raw.get("version") or "")
    if not version:
        raise CatalogError("Catalog must declare a version")

    unknown = [str(s) for s in (raw.get("completions") or []) if str(s) not in COMPLETION_PATHS]
    if unknown:
        raise CatalogError(f"Catalog names unsupported completion shells: {unknown}")

    artifacts: Dict[PlatformKey, ReleaseArtifact] = {}
    for entry in raw.get("artifacts") or []:
        if not isinstance(entry, dict):
            raise CatalogError(f"Artifact entry must be a mapping: {entry!r}")
        a = _build_artifact(entry, name=name, version=version, url_template=raw.get("url_template"))
        if a.key in artifacts:
            raise CatalogError(f"Duplicate artifact for {a.key[0]}/{a.key[1]}")
        artifacts[a.key] = a

    return ArtifactCatalog(raw=raw, artifacts=artifacts)


def load_catalog(path: str | Path | None = None) -> ArtifactCatalog:
    """Load a catalog manifest (YAML)."""

    p = Path(path) if path else DEFAULT_MANIFEST
    if not p.exists():
        raise FileNotFoundError(str(p))

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog must be a mapping/dict: {p}")

    catalog = catalog_from_dict(raw)
    logger.info("Loaded catalog %s %s (%d artifacts) from %s", catalog.name, catalog.version, len(catalog.artifacts), p)
    return catalog


def check_catalog(catalog: ArtifactCatalog) -> List[str]:
    """Return the problems that keep the catalog from being total and injective."""

    problems: List[str] = []
    for os_name in SUPPORTED_OS:
        for arch in SUPPORTED_ARCH:
            if (os_name, arch) not in catalog.artifacts:
                problems.append(f"missing artifact for {os_name}/{arch}")

    seen: Dict[str, PlatformKey] = {}
    for a in catalog:
        other = seen.get(a.url)
        if other is not None:
            problems.append(f"{a.key[0]}/{a.key[1]} shares its url with {other[0]}/{other[1]}")
        else:
            seen[a.url] = a.key
    return problems
