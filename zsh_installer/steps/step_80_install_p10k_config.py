from __future__ import annotations

import logging
import shutil
from typing import Any, Dict

from ..pipeline import InstallCtx
from ..state_store import record_decision, record_warning
from ..zshrc import ZshrcFile, append_once_rule

logger = logging.getLogger(__name__)


class InstallP10kConfigStep:
    step_id = "80_install_p10k_config"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        target = ctx.p10k_target
        source = ctx.env.cwd / cfg.p10k_source
        has_zshrc = ctx.require_zshrc()

        if target.exists():
            logger.info("%s already exists, leaving it in place", target)
            record_decision(state, "p10k_config", "present")
        elif source.is_file():
            logger.info("Moving %s to %s", source, target)
            if not ctx.dry_run:
                shutil.move(str(source), str(target))
            record_decision(state, "p10k_config", "moved")
        else:
            logger.warning("%s not found; run `p10k configure` to create %s", source, target)
            record_warning(state, self.step_id, f"{source} missing")
            record_decision(state, "p10k_config", "missing")

        rule = append_once_rule("p10k-source", cfg.p10k_marker)
        if has_zshrc:
            ZshrcFile(ctx.zshrc_path).apply(rule, dry_run=ctx.dry_run)
        else:
            logger.info("Would append %r to %s", cfg.p10k_marker, ctx.zshrc_path)
        return state
