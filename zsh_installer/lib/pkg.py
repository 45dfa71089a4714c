from __future__ import annotations

import logging
from typing import Sequence

from .command import privileged, run_cmd

logger = logging.getLogger(__name__)


def dnf_upgrade(*, use_sudo: bool = True, dry_run: bool = False) -> None:
    run_cmd(privileged(["dnf", "upgrade", "-y", "--refresh"], use_sudo=use_sudo), dry_run=dry_run)


def dnf_install(
    packages: Sequence[str],
    *,
    use_sudo: bool = True,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    run_cmd(
        privileged(["dnf", "install", "-y", *packages], use_sudo=use_sudo),
        dry_run=dry_run,
    )
