from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import InstallCtx
from ..zshrc import ZshrcFile, has_plugins_line, plugins_rule, render_plugins_line

logger = logging.getLogger(__name__)


class ConfigurePluginsStep:
    step_id = "60_configure_plugins"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        zshrc = ZshrcFile(ctx.zshrc_path)
        if not ctx.require_zshrc():
            logger.info("Would write %s to %s", render_plugins_line(cfg.plugins), zshrc.path)
            return state

        had_line = has_plugins_line(zshrc.read())
        zshrc.apply(plugins_rule(cfg.plugins, cfg.source_anchor), dry_run=ctx.dry_run)
        if not had_line:
            logger.warning("'plugins=(...)' line not found, added to %s", zshrc.path)
        return state
