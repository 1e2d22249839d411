from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import FilesystemError
from ..lib.files import find_in_payload, install_executable
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallBinaryStep:
    step_id = "30_install_binary"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        payload = Path(state["payload"])
        name = ctx.target.name

        src = find_in_payload(payload, name)
        if src is None:
            raise FilesystemError(f"Artifact does not contain a {name} binary")

        install_executable(src, ctx.target.binary_path, dry_run=ctx.dry_run)
        state.setdefault("installed", {})["binary"] = str(ctx.target.binary_path)
        return state
