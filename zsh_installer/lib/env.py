from __future__ import annotations

import getpass
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


@dataclass(frozen=True)
class Environment:
    """Process facts read once at start-up and passed down explicitly."""

    home: Path
    shell: str
    user: str
    cwd: Path

    @classmethod
    def from_os(cls, environ: Optional[Mapping[str, str]] = None) -> "Environment":
        environ = os.environ if environ is None else environ
        return cls(
            home=Path(environ.get("HOME") or Path.home()),
            shell=environ.get("SHELL", ""),
            user=environ.get("USER") or getpass.getuser(),
            cwd=Path.cwd(),
        )


def state_home(env: Environment) -> Path:
    return env.home / ".local" / "state" / "zsh-installer"
