from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.fetch import fetch_artifact
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class FetchArtifactStep:
    step_id = "20_fetch_artifact"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        artifact = ctx.artifact
        if artifact is None:
            raise RuntimeError("artifact not resolved")

        # The payload stays on disk until the install context closes.
        payload = ctx.resources.enter_context(fetch_artifact(artifact, client=ctx.client))
        state["payload"] = str(payload)
        return state
