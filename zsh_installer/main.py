from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .collaborators import Collaborator, SystemCollaborator
from .errors import ConfigError, InstallerError
from .install_config import load_install_config
from .lib.env import Environment, state_home
from .logging_utils import configure_logging
from .pipeline import InstallCtx, run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    ChangeShellStep,
    ConfigureAutoupdateStep,
    ConfigurePluginsStep,
    InstallDependenciesStep,
    InstallFontStep,
    InstallOhMyZshStep,
    InstallP10kConfigStep,
    InstallPluginsStep,
    InstallThemeStep,
    SummaryStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        InstallDependenciesStep(),
        InstallFontStep(),
        InstallOhMyZshStep(),
        InstallThemeStep(),
        ConfigureAutoupdateStep(),
        InstallPluginsStep(),
        ConfigurePluginsStep(),
        ChangeShellStep(),
        InstallP10kConfigStep(),
        SummaryStep(),
    ]


def run(
    *,
    env: Optional[Environment] = None,
    config_path: Optional[str] = None,
    state_path: Optional[str] = None,
    log_path: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    resume: bool = False,
    dry_run: bool = False,
    collaborator: Optional[Collaborator] = None,
) -> Dict[str, Any]:
    """Run the installer pipeline, persisting state for resume."""

    env = env or Environment.from_os()
    state_path = state_path or str(state_home(env) / "state.json")
    log_path = log_path or str(state_home(env) / "install.log")

    actual_log_path = configure_logging(log_path=log_path)

    overrides = {"dry_run": True} if dry_run else None
    try:
        cfg = load_install_config(config_path, home=env.home, overrides=overrides)
    except ConfigError as e:
        logger.error("Invalid install config: %s", e)
        raise

    state = ensure_defaults(load_state(state_path))
    state["execution"].setdefault("paths", {})["log_path"] = actual_log_path

    ctx = InstallCtx(
        config=cfg,
        env=env,
        collaborator=collaborator
        or SystemCollaborator(use_sudo=cfg.use_sudo, dry_run=cfg.dry_run),
    )

    try:
        result = run_pipeline(
            ctx=ctx,
            state=state,
            steps=build_steps(),
            start_at=start_at,
            stop_after=stop_after,
            resume=resume,
        )
        state = result.state
        state["execution"]["summary"] = {
            "ran_steps": result.ran_steps,
            "skipped_steps": result.skipped_steps,
        }
        return state
    except Exception as e:
        logger.exception("Installer failed")
        state["execution"]["errors"].append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        if not cfg.dry_run:
            save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="zsh-installer",
        description="Set up zsh with Oh My Zsh, Powerlevel10k and plugins on Fedora.",
    )
    p.add_argument("--config", default=None, help="YAML file overriding the built-in defaults")
    p.add_argument("--state", default=None, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=None, help="Path to installer log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_install_theme)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--resume", action="store_true", help="Skip steps already marked completed")
    p.add_argument("--dry-run", action="store_true", help="Log commands and edits without running them")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            resume=args.resume,
            dry_run=args.dry_run,
        )
    except InstallerError:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
