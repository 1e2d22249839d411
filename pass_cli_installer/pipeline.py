from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx

from .catalog import ArtifactCatalog, ReleaseArtifact
from .install_target import InstallTarget

logger = logging.getLogger(__name__)


@dataclass
class InstallCtx:
    catalog: ArtifactCatalog
    target: InstallTarget
    resources: ExitStack
    operating_system: Optional[str] = None
    architecture: Optional[str] = None
    shells: Optional[List[str]] = None
    dry_run: bool = False
    timeout_s: Optional[float] = None
    client: Optional[httpx.Client] = field(default=None, repr=False)
    artifact: Optional[ReleaseArtifact] = None

    @property
    def completion_shells(self) -> List[str]:
        return list(self.shells) if self.shells is not None else self.catalog.completions


class Step(Protocol):
    """A single pipeline step."""

    step_id: str

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
) -> PipelineResult:
    """Run steps in order, stopping at the first fatal error.

    Steps record non-fatal problems in ``state["warnings"]`` themselves.
    Any exception a step raises is re-raised unchanged, tagged with the step
    id and recorded under ``state["errors"]``.
    """

    ran: List[str] = []
    state.setdefault("warnings", [])

    for step in steps:
        state["current_step"] = step.step_id
        logger.info("Running step %s", step.step_id)
        try:
            state = step.run(ctx, state)
        except Exception as e:
            e.step = step.step_id
            state.setdefault("errors", []).append({"step": step.step_id, "error": str(e)})
            logger.error("Step %s failed: %s", step.step_id, e)
            raise
        ran.append(step.step_id)

    state["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran)
