from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict

from ..lib.platform_detect import detect_platform
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class ResolvePlatformStep:
    step_id = "10_resolve_platform"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        os_name, arch = detect_platform(
            operating_system=ctx.operating_system,
            architecture=ctx.architecture,
        )
        artifact = ctx.catalog.resolve(os_name, arch)
        state["platform"] = {"os": os_name, "arch": arch}
        state["artifact"] = asdict(artifact)
        ctx.artifact = artifact
        return state
