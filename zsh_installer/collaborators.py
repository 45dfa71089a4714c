from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

from .lib import archive, git, pkg, shell

logger = logging.getLogger(__name__)


class Collaborator(Protocol):
    """External capabilities the steps depend on.

    Every method either succeeds or raises (CommandError for real commands).
    """

    def upgrade(self) -> None:
        ...

    def install(self, names: Sequence[str]) -> None:
        ...

    def download(self, url: str, dest: str) -> None:
        ...

    def extract_archive(self, archive_path: str, dest: str, patterns: Sequence[str]) -> None:
        ...

    def refresh_font_cache(self) -> None:
        ...

    def fetch_repo(self, url: str, dest: str, *, depth: Optional[int] = None) -> str:
        ...

    def run_remote_script(
        self, url: str, args: Sequence[str] = (), env: Optional[Mapping[str, str]] = None
    ) -> None:
        ...

    def which(self, name: str) -> Optional[str]:
        ...

    def change_shell(self, shell_path: str, user: str) -> None:
        ...


class SystemCollaborator:
    """Collaborator backed by dnf, curl, git and chsh."""

    def __init__(self, *, use_sudo: bool = True, dry_run: bool = False) -> None:
        self.use_sudo = use_sudo
        self.dry_run = dry_run

    def upgrade(self) -> None:
        pkg.dnf_upgrade(use_sudo=self.use_sudo, dry_run=self.dry_run)

    def install(self, names: Sequence[str]) -> None:
        pkg.dnf_install(names, use_sudo=self.use_sudo, dry_run=self.dry_run)

    def download(self, url: str, dest: str) -> None:
        archive.download(url, dest, dry_run=self.dry_run)

    def extract_archive(self, archive_path: str, dest: str, patterns: Sequence[str]) -> None:
        archive.unzip_members(
            archive_path, dest, patterns, use_sudo=self.use_sudo, dry_run=self.dry_run
        )

    def refresh_font_cache(self) -> None:
        archive.refresh_font_cache(use_sudo=self.use_sudo, dry_run=self.dry_run)

    def fetch_repo(self, url: str, dest: str, *, depth: Optional[int] = None) -> str:
        return git.clone_or_pull(url, dest, depth=depth, dry_run=self.dry_run)

    def run_remote_script(
        self, url: str, args: Sequence[str] = (), env: Optional[Mapping[str, str]] = None
    ) -> None:
        with tempfile.TemporaryDirectory(prefix="zsh-installer-") as tmp:
            script = str(Path(tmp) / "install.sh")
            archive.download(url, script, dry_run=self.dry_run)
            shell.run_script(script, args, env=env, dry_run=self.dry_run)

    def which(self, name: str) -> Optional[str]:
        return shell.which(name)

    def change_shell(self, shell_path: str, user: str) -> None:
        shell.chsh(shell_path, user, use_sudo=self.use_sudo, dry_run=self.dry_run)
