from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import InstallCtx
from ..zshrc import ZshrcFile, insert_before_rule

logger = logging.getLogger(__name__)


class ConfigureAutoupdateStep:
    """Stop ohmyzsh-full-autoupdate from updating the Oh My Zsh core.

    The export has to be seen before Oh My Zsh loads its plugins.
    """

    step_id = "45_configure_autoupdate"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        zshrc = ZshrcFile(ctx.zshrc_path)
        if not ctx.require_zshrc():
            logger.info("Would add %r to %s", cfg.autoupdate_line, zshrc.path)
            return state

        rule = insert_before_rule(
            "autoupdate",
            cfg.autoupdate_line,
            cfg.source_anchor,
            fallback_after=f'ZSH_THEME="{cfg.theme}"',
        )
        zshrc.apply(rule, dry_run=ctx.dry_run)
        return state
