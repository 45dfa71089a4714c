from __future__ import annotations

import logging
import shutil
from typing import Mapping, Sequence

from .command import privileged, run_cmd

logger = logging.getLogger(__name__)


def which(name: str) -> str | None:
    return shutil.which(name)


def chsh(shell_path: str, user: str, *, use_sudo: bool = True, dry_run: bool = False) -> None:
    run_cmd(privileged(["chsh", "-s", shell_path, user], use_sudo=use_sudo), dry_run=dry_run)


def run_script(
    script: str,
    args: Sequence[str] = (),
    *,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> None:
    """Run a downloaded POSIX shell script with sh."""

    run_cmd(["sh", script, *args], env=env, dry_run=dry_run)
