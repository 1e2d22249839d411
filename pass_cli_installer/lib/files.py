from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from ..errors import FilesystemError

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def find_in_payload(payload: Path, name: str) -> Optional[Path]:
    """Find ``name`` at the payload root, or else anywhere below it."""

    direct = payload / name
    if direct.is_file():
        return direct
    for item in sorted(payload.rglob(name)):
        if item.is_file():
            return item
    return None


def _atomic_copy(src: Path, dest: Path, mode: int) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{dest.name}.", dir=str(dest.parent))
    os.close(fd)
    try:
        shutil.copyfile(src, tmp)
        os.chmod(tmp, mode)
        os.replace(tmp, dest)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def install_executable(src: Path, dest: Path, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would install %s -> %s", str(src), str(dest))
        return
    try:
        _atomic_copy(src, dest, EXECUTABLE_MODE)
    except OSError as e:
        raise FilesystemError(f"Cannot install binary to {dest}: {e}") from e
    logger.info("Installed %s", str(dest))


def install_file(src: Path, dest: Path, *, mode: int = 0o644, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would copy %s -> %s", str(src), str(dest))
        return
    try:
        _atomic_copy(src, dest, mode)
    except OSError as e:
        raise FilesystemError(f"Cannot write {dest}: {e}") from e


def write_text(dest: Path, content: str, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would write %s (%d bytes)", str(dest), len(content.encode("utf-8")))
        return
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot write {dest}: {e}") from e
