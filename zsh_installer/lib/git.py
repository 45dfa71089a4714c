from __future__ import annotations

import logging
from pathlib import Path

from .command import run_cmd

logger = logging.getLogger(__name__)


def clone_or_pull(url: str, dest: str, *, depth: int | None = None, dry_run: bool = False) -> str:
    """Clone url into dest, or update the existing checkout in place.

    Returns "updated" or "cloned".
    """

    d = Path(dest)
    if d.is_dir():
        logger.info("%s already present, updating", d.name)
        run_cmd(["git", "-C", str(d), "pull"], dry_run=dry_run)
        return "updated"

    argv = ["git", "clone"]
    if depth:
        argv.append(f"--depth={depth}")
    argv += [url, str(d)]
    if not dry_run:
        d.parent.mkdir(parents=True, exist_ok=True)
    run_cmd(argv, dry_run=dry_run)
    return "cloned"
