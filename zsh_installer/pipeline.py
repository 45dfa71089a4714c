from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .collaborators import Collaborator
from .errors import ConfigError, PreconditionError
from .install_config import InstallConfig
from .lib.env import Environment
from .state_store import is_step_completed, mark_step_completed, unmark_step_completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallCtx:
    config: InstallConfig
    env: Environment
    collaborator: Collaborator

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    @property
    def zshrc_path(self) -> Path:
        return self.env.home / ".zshrc"

    @property
    def custom_dir(self) -> Path:
        return self.config.framework_dir / "custom"

    @property
    def themes_dir(self) -> Path:
        return self.custom_dir / "themes"

    @property
    def plugins_dir(self) -> Path:
        return self.custom_dir / "plugins"

    @property
    def p10k_target(self) -> Path:
        return self.env.home / ".p10k.zsh"

    def require_zshrc(self) -> bool:
        """True if the config file exists; raises unless this is a dry run."""

        if self.zshrc_path.is_file():
            return True
        if self.dry_run:
            return False
        raise PreconditionError(f"{self.zshrc_path} does not exist; install Oh My Zsh first")


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    skipped_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallCtx,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    resume: bool = False,
) -> PipelineResult:
    """Run steps in order; the first exception stops the run.

    With resume=True, steps recorded as completed in state are skipped. A
    step that records a warning is not marked completed.
    """

    ids = [s.step_id for s in steps]
    for wanted in (start_at, stop_after):
        if wanted is not None and wanted not in ids:
            raise ConfigError(f"Unknown step id: {wanted}")

    ran: List[str] = []
    skipped: List[str] = []

    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        state.setdefault("execution", {})["current_step"] = step.step_id

        if resume and is_step_completed(state, step.step_id):
            logger.info("Skipping step %s (already completed)", step.step_id)
            skipped.append(step.step_id)
        else:
            logger.info("Running step %s", step.step_id)
            seen = len(state.setdefault("execution", {}).setdefault("warnings", []))
            state = step.run(ctx, state)
            new = state["execution"].get("warnings", [])[seen:]
            if any(w.get("step") == step.step_id for w in new):
                # Soft failure: keep the step eligible for --resume.
                logger.warning(
                    "Step %s finished with warnings; it will run again on resume", step.step_id
                )
                unmark_step_completed(state, step.step_id)
            else:
                mark_step_completed(state, step.step_id)
            ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    return PipelineResult(state=state, ran_steps=ran, skipped_steps=skipped)
