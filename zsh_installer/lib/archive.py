from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import List, Sequence

from ..errors import ArchiveError
from .command import privileged, run_cmd

logger = logging.getLogger(__name__)


def download(url: str, dest: str, *, dry_run: bool = False) -> None:
    run_cmd(["curl", "-fsSL", "-o", dest, url], dry_run=dry_run)


def _stage_members(archive: str, staging: Path, patterns: Sequence[str]) -> List[str]:
    staged: List[str] = []
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                name = PurePosixPath(info.filename).name
                if info.is_dir() or not any(fnmatch(name, p) for p in patterns):
                    continue
                target = staging / name
                with zf.open(info) as src, target.open("wb") as out:
                    shutil.copyfileobj(src, out)
                if str(target) not in staged:
                    staged.append(str(target))
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f"Cannot extract {archive}: {e}") from e
    return staged


def unzip_members(
    archive: str,
    dest: str,
    patterns: Sequence[str],
    *,
    use_sudo: bool = True,
    dry_run: bool = False,
) -> List[str]:
    """Extract only the members matching patterns (flattened) into dest.

    Members are staged in a temporary directory first; dest is created only
    once at least one member matched. Returns the installed file names.
    """

    if dry_run:
        logger.info("Would extract %s from %s into %s", " ".join(patterns), archive, dest)
        return []

    with tempfile.TemporaryDirectory(prefix="zsh-installer-unzip-") as tmp:
        staged = _stage_members(archive, Path(tmp), patterns)
        if not staged:
            raise ArchiveError(f"No member of {archive} matches {' '.join(patterns)}")

        logger.info("Installing %d file(s) into %s", len(staged), dest)
        run_cmd(privileged(["mkdir", "-p", dest], use_sudo=use_sudo))
        run_cmd(privileged(["cp", "-f", *staged, dest], use_sudo=use_sudo))
        return [Path(s).name for s in staged]


def refresh_font_cache(*, use_sudo: bool = True, dry_run: bool = False) -> None:
    run_cmd(privileged(["fc-cache", "-f"], use_sudo=use_sudo), dry_run=dry_run)
