from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pytest

from zsh_installer.errors import CommandError
from zsh_installer.install_config import load_install_config
from zsh_installer.lib.env import Environment
from zsh_installer.pipeline import InstallCtx

OMZ_TEMPLATE = """\
export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="robbyrussell"
plugins=(git)
source $ZSH/oh-my-zsh.sh
"""


class FakeCollaborator:
    """Records every call; simulates the side effects the steps check for."""

    def __init__(
        self,
        *,
        zshrc_template: Optional[str] = OMZ_TEMPLATE,
        zsh_path: Optional[str] = "/usr/bin/zsh",
        fail: Sequence[str] = (),
    ) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.zshrc_template = zshrc_template
        self.zsh_path = zsh_path
        self.fail = set(fail)

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.fail:
            raise CommandError([name], 1, "simulated failure")

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def upgrade(self) -> None:
        self._record("upgrade")

    def install(self, names: Sequence[str]) -> None:
        self._record("install", list(names))

    def download(self, url: str, dest: str) -> None:
        self._record("download", url, dest)
        Path(dest).write_bytes(b"zip")

    def extract_archive(self, archive_path: str, dest: str, patterns: Sequence[str]) -> None:
        self._record("extract_archive", archive_path, dest, list(patterns))
        Path(dest).mkdir(parents=True, exist_ok=True)

    def refresh_font_cache(self) -> None:
        self._record("refresh_font_cache")

    def fetch_repo(self, url: str, dest: str, *, depth: Optional[int] = None) -> str:
        self._record("fetch_repo", url, dest, depth)
        d = Path(dest)
        if d.is_dir():
            return "updated"
        d.mkdir(parents=True)
        return "cloned"

    def run_remote_script(
        self, url: str, args: Sequence[str] = (), env: Optional[Mapping[str, str]] = None
    ) -> None:
        self._record("run_remote_script", url, list(args), dict(env or {}))
        zsh_dir = Path((env or {})["ZSH"])
        zsh_dir.mkdir(parents=True)
        if self.zshrc_template is not None:
            (zsh_dir.parent / ".zshrc").write_text(self.zshrc_template, encoding="utf-8")

    def which(self, name: str) -> Optional[str]:
        self._record("which", name)
        return self.zsh_path

    def change_shell(self, shell_path: str, user: str) -> None:
        self._record("change_shell", shell_path, user)


@pytest.fixture
def env(tmp_path: Path) -> Environment:
    home = tmp_path / "home"
    cwd = tmp_path / "work"
    home.mkdir()
    cwd.mkdir()
    return Environment(home=home, shell="/bin/bash", user="tester", cwd=cwd)


@pytest.fixture
def make_ctx(env: Environment, tmp_path: Path):
    def _make(
        collaborator: Optional[FakeCollaborator] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> InstallCtx:
        base: Dict[str, Any] = {"font": {"dir": str(tmp_path / "fonts" / "JetBrainsMono")}}
        if overrides:
            base.update(overrides)
        cfg = load_install_config(None, home=env.home, overrides=base)
        return InstallCtx(config=cfg, env=env, collaborator=collaborator or FakeCollaborator())

    return _make
