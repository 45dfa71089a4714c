from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import PreconditionError
from ..pipeline import InstallCtx
from ..state_store import record_decision

logger = logging.getLogger(__name__)

# Keep the upstream installer from changing the shell or starting zsh.
UNATTENDED_ENV = {"CHSH": "no", "RUNZSH": "no"}


class InstallOhMyZshStep:
    step_id = "30_install_oh_my_zsh"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        framework_dir = ctx.config.framework_dir

        if framework_dir.is_dir():
            logger.info("Oh My Zsh already installed in %s", framework_dir)
            record_decision(state, "oh_my_zsh", "present")
        else:
            logger.info("Installing Oh My Zsh into %s", framework_dir)
            ctx.collaborator.run_remote_script(
                ctx.config.omz_install_url,
                ["--unattended"],
                env=dict(UNATTENDED_ENV, ZSH=str(framework_dir)),
            )
            record_decision(state, "oh_my_zsh", "installed")

        if not ctx.zshrc_path.is_file() and not ctx.dry_run:
            raise PreconditionError(
                f"{ctx.zshrc_path} was not created by the Oh My Zsh installer"
            )
        return state
