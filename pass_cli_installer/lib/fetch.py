from __future__ import annotations

import hashlib
import logging
import re
import shutil
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import unquote, urlparse

import httpx

from ..catalog import ReleaseArtifact
from ..errors import IntegrityError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = httpx.Timeout(connect=10.0, read=120.0, write=30.0, pool=10.0)
CHUNK_SIZE = 1024 * 1024

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")


def is_sha256_hex(value: str) -> bool:
    return bool(_SHA256_RE.match((value or "").strip().lower()))


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def require_declared_checksum(artifact: ReleaseArtifact) -> None:
    """Fail closed on unset or placeholder checksums."""

    if not is_sha256_hex(artifact.sha256):
        raise IntegrityError(
            f"No usable sha256 declared for {artifact.filename} ({artifact.sha256 or 'unset'!r}); refusing to install",
            expected=artifact.sha256 or None,
        )


def _local_source(url: str) -> Optional[Path]:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme in {"http", "https"}:
        return None
    # Plain paths (and Windows drive letters parsed as a scheme).
    return Path(url)


def _download_http(url: str, dest: Path, *, client: Optional[httpx.Client]) -> str:
    h = hashlib.sha256()
    http_client = client or httpx.Client(timeout=REQUEST_TIMEOUT, follow_redirects=True)
    try:
        with http_client.stream("GET", url) as response:
            response.raise_for_status()
            with dest.open("wb") as f:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    h.update(chunk)
                    f.write(chunk)
    finally:
        if client is None:
            http_client.close()
    return h.hexdigest()


def download(url: str, dest: Path, *, client: Optional[httpx.Client] = None) -> str:
    """Copy ``url`` to ``dest`` and return the sha256 of the bytes written.

    Transport failures propagate unchanged.
    """

    logger.info("Downloading %s", url)
    src = _local_source(url)
    if src is None:
        return _download_http(url, dest, client=client)

    shutil.copyfile(src, dest)
    return sha256_file(dest)


def extract_archive(archive: Path, dest: Path) -> None:
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(path=dest, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise IntegrityError(f"Verified archive {archive.name} could not be extracted: {e}") from e


@contextmanager
def fetch_artifact(
    artifact: ReleaseArtifact,
    *,
    client: Optional[httpx.Client] = None,
) -> Iterator[Path]:
    """Download, verify and extract an artifact; yield the payload directory.

    Everything lives in a temporary directory that is removed when the
    context exits, whether or not the body raised.
    """

    require_declared_checksum(artifact)

    with tempfile.TemporaryDirectory(prefix=f"{artifact.name}-fetch-") as tmp:
        work = Path(tmp)
        archive = work / artifact.filename
        actual = download(artifact.url, archive, client=client)

        expected = artifact.sha256.lower()
        if actual != expected:
            raise IntegrityError(
                f"Checksum mismatch for {artifact.filename}: expected {expected}, got {actual}",
                expected=expected,
                actual=actual,
            )
        logger.info("Verified sha256 %s for %s", actual, artifact.filename)

        payload = work / "payload"
        extract_archive(archive, payload)
        yield payload
