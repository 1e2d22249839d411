from __future__ import annotations

from typing import Any, Dict

from ..advisory import render_advisory
from ..pipeline import InstallCtx


class PostInstallAdvisoryStep:
    step_id = "90_post_install_advisory"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        state["advisory"] = render_advisory()
        return state
