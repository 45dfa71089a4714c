from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

DEFAULTS: Dict[str, Any] = {
    "dry_run": False,
    "use_sudo": True,
    "packages": {
        "upgrade_system": True,
        "names": [
            "zsh",
            "git",
            "curl",
            "wget",
            "fontconfig",
            "util-linux-user",
            "fzf",
            "unzip",
        ],
    },
    "font": {
        "url": "https://github.com/ryanoasis/nerd-fonts/releases/download/v3.2.1/JetBrainsMono.zip",
        "dir": "/usr/local/share/fonts/JetBrainsMonoNerdFont",
        "patterns": ["*.ttf", "*.otf"],
    },
    "oh_my_zsh": {
        "install_url": "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh",
        "dir": "~/.oh-my-zsh",
        "source_anchor": "source $ZSH/oh-my-zsh.sh",
    },
    "theme": {
        "name": "powerlevel10k/powerlevel10k",
        "repo": "https://github.com/romkatv/powerlevel10k.git",
        "p10k_source": "p10k.zsh",
        "p10k_marker": "[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh",
    },
    "autoupdate_line": "export ZSH_CUSTOM_FULL_AUTOUPDATE_INHIBIT_OMZ_UPDATE=true",
    # Order matters: it is written verbatim into plugins=(...).
    "plugins": [
        "git",
        "podman",
        "ssh-agent",
        "toolbox",
        "fzf",
        "zsh-interactive-cd",
        "ohmyzsh-full-autoupdate",
        "zsh-autosuggestions",
        "zsh-syntax-highlighting",
        "you-should-use",
    ],
    "plugin_repos": {
        "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
        "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
        "you-should-use": "https://github.com/MichaelAquilina/zsh-you-should-use",
        "ohmyzsh-full-autoupdate": "https://github.com/Pilaton/OhMyZsh-full-autoupdate.git",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any]
    home: Path

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    def _path(self, value: str) -> Path:
        if value == "~" or value.startswith("~/"):
            return self.home / value[2:]
        return Path(value)

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def use_sudo(self) -> bool:
        return bool(self.raw.get("use_sudo", True))

    @property
    def upgrade_system(self) -> bool:
        return bool(self._section("packages").get("upgrade_system", True))

    @property
    def packages(self) -> List[str]:
        return [str(p) for p in self._section("packages").get("names") or []]

    @property
    def font_url(self) -> str:
        return str(self._section("font").get("url") or DEFAULTS["font"]["url"])

    @property
    def font_dir(self) -> Path:
        return self._path(str(self._section("font").get("dir") or DEFAULTS["font"]["dir"]))

    @property
    def font_patterns(self) -> List[str]:
        return [str(p) for p in self._section("font").get("patterns") or DEFAULTS["font"]["patterns"]]

    @property
    def omz_install_url(self) -> str:
        return str(self._section("oh_my_zsh").get("install_url") or DEFAULTS["oh_my_zsh"]["install_url"])

    @property
    def framework_dir(self) -> Path:
        return self._path(str(self._section("oh_my_zsh").get("dir") or DEFAULTS["oh_my_zsh"]["dir"]))

    @property
    def source_anchor(self) -> str:
        return str(
            self._section("oh_my_zsh").get("source_anchor") or DEFAULTS["oh_my_zsh"]["source_anchor"]
        )

    @property
    def theme(self) -> str:
        return str(self._section("theme").get("name") or DEFAULTS["theme"]["name"])

    @property
    def theme_repo(self) -> str:
        return str(self._section("theme").get("repo") or DEFAULTS["theme"]["repo"])

    @property
    def p10k_source(self) -> str:
        return str(self._section("theme").get("p10k_source") or DEFAULTS["theme"]["p10k_source"])

    @property
    def p10k_marker(self) -> str:
        return str(self._section("theme").get("p10k_marker") or DEFAULTS["theme"]["p10k_marker"])

    @property
    def autoupdate_line(self) -> str:
        return str(self.raw.get("autoupdate_line") or DEFAULTS["autoupdate_line"])

    @property
    def plugins(self) -> List[str]:
        return [str(p) for p in self.raw.get("plugins") or []]

    @property
    def plugin_repos(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self.raw.get("plugin_repos") or {}).items()}


def _validate(raw: Dict[str, Any]) -> None:
    for section in ("packages", "font", "oh_my_zsh", "theme"):
        if not isinstance(raw.get(section) or {}, dict):
            raise ConfigError(f"{section} must be a mapping")
    if not isinstance(raw.get("plugins"), list):
        raise ConfigError("plugins must be a list")
    if not isinstance((raw.get("packages") or {}).get("names") or [], list):
        raise ConfigError("packages.names must be a list")
    if not isinstance(raw.get("plugin_repos") or {}, dict):
        raise ConfigError("plugin_repos must be a mapping of name -> url")


def load_install_config(
    path: Optional[str],
    *,
    home: Path,
    overrides: Optional[Dict[str, Any]] = None,
) -> InstallConfig:
    """Build the config from defaults, an optional YAML file and overrides."""

    raw = copy.deepcopy(DEFAULTS)

    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"install config not found: {path}")
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ConfigError("install config must be YAML")

        try:
            loaded = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path} is not valid YAML: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path} must contain a mapping/object")
        raw = _deep_merge(raw, loaded)

    if overrides:
        raw = _deep_merge(raw, overrides)

    _validate(raw)
    return InstallConfig(raw=raw, home=home)
