from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import CommandFailedError, FilesystemError, SubprocessError
from ..lib.command import run_cmd
from ..lib.files import write_text
from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class GenerateCompletionsStep:
    """Ask the installed binary for its completion scripts.

    Failures here leave the binary installed; each one becomes a warning.
    """

    step_id = "40_generate_completions"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        written = state.setdefault("installed", {}).setdefault("completions", [])
        warnings = state.setdefault("warnings", [])
        binary = ctx.target.binary_path

        for shell in ctx.completion_shells:
            try:
                dest = ctx.target.completion_path(shell)
            except ValueError as e:
                logger.warning("%s", e)
                warnings.append(f"{shell} completion: {e}")
                continue

            try:
                r = run_cmd(
                    [str(binary), "completion", shell],
                    timeout_s=ctx.timeout_s,
                    dry_run=ctx.dry_run,
                )
            except CommandFailedError as e:
                logger.warning("%s completion exited %d: %s", shell, e.returncode, e.stderr.strip())
                warnings.append(f"{shell} completion: exited {e.returncode}")
                continue
            except SubprocessError as e:
                logger.warning("%s completion could not run: %s", shell, e)
                warnings.append(f"{shell} completion: {e}")
                continue

            try:
                write_text(dest, r.stdout, dry_run=ctx.dry_run)
            except FilesystemError as e:
                logger.warning("%s completion not written: %s", shell, e)
                warnings.append(f"{shell} completion: {e}")
                continue
            written.append(str(dest))

        return state
