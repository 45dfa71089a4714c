from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import InstallCtx
from ..state_store import record_decision, record_warning
from ..zshrc import ZshrcFile, has_theme_line, theme_rule

logger = logging.getLogger(__name__)


class InstallThemeStep:
    step_id = "40_install_theme"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        theme_dir = ctx.themes_dir / "powerlevel10k"
        has_zshrc = ctx.require_zshrc()

        logger.info("Installing Powerlevel10k theme into %s", theme_dir)
        action = ctx.collaborator.fetch_repo(cfg.theme_repo, str(theme_dir), depth=1)
        record_decision(state, "theme_repo", action)

        zshrc = ZshrcFile(ctx.zshrc_path)
        if not has_zshrc:
            logger.info("Would set ZSH_THEME in %s", zshrc.path)
            return state

        if not has_theme_line(zshrc.read()):
            logger.warning("No ZSH_THEME line in %s; theme not set", zshrc.path)
            record_warning(state, self.step_id, "ZSH_THEME line missing")
            return state

        zshrc.apply(theme_rule(cfg.theme), dry_run=ctx.dry_run)
        return state
