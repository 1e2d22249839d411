from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..lib.files import install_file
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallDocsStep:
    step_id = "50_install_docs"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        payload = Path(state["payload"])
        installed = state.setdefault("installed", {}).setdefault("docs", [])

        for doc in ctx.catalog.docs:
            src = payload / doc
            if not src.is_file():
                logger.info("No %s in artifact; skipping", doc)
                continue
            dest = ctx.target.docs_dir / doc
            install_file(src, dest, dry_run=ctx.dry_run)
            installed.append(str(dest))

        return state
