from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import CommandFailedError, SubprocessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return self.stdout + self.stderr


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    timeout_s: float | None = None,
    inherit_env: bool = True,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr; the pipes are closed before returning on every path.
    - ``env`` is layered over a copy of the current environment, never into it.
      With ``inherit_env=False`` the child gets exactly ``env``.
    - Output is decoded as UTF-8 with undecodable bytes replaced.
    - Launch/capture failures raise SubprocessError; a non-zero exit raises
      CommandFailedError only when ``check`` is set.
    - dry_run logs but does not execute.
    """

    argv_list = [str(a) for a in argv]
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    child_env = dict(os.environ, **(env or {})) if inherit_env else dict(env or {})

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            encoding="utf-8",
            errors="replace",
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=child_env,
            timeout=timeout_s,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise SubprocessError(f"Could not run {_fmt_argv(argv_list)}: {e}", argv=argv_list) from e

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    if check and p.returncode != 0:
        raise CommandFailedError(
            f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{p.stderr}",
            argv=argv_list,
            returncode=p.returncode,
            stderr=p.stderr,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
