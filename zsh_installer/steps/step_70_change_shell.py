from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import CommandError, PreconditionError
from ..pipeline import InstallCtx
from ..state_store import record_decision, record_warning

logger = logging.getLogger(__name__)


class ChangeShellStep:
    step_id = "70_change_shell"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        zsh_path = ctx.collaborator.which("zsh")
        if not zsh_path:
            if ctx.dry_run:
                logger.info("Would change the default shell to zsh once it is installed")
                return state
            raise PreconditionError("zsh not found on PATH")

        if ctx.env.shell == zsh_path:
            logger.info("Zsh is already your default shell")
            record_decision(state, "shell", "unchanged")
            return state

        logger.info("Changing default shell to %s", zsh_path)
        try:
            ctx.collaborator.change_shell(zsh_path, ctx.env.user)
        except CommandError as e:
            logger.error(
                "Could not change default shell (%s). Try manually with: sudo chsh -s %s %s",
                e.returncode,
                zsh_path,
                ctx.env.user,
            )
            record_warning(state, self.step_id, "chsh failed")
            record_decision(state, "shell", "change_failed")
            return state

        logger.warning("Log out and back in for the shell change to take effect")
        record_decision(state, "shell", zsh_path)
        return state
