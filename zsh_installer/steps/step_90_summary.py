from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)

NEXT_STEPS = (
    "Configure your terminal to use the 'JetBrainsMono Nerd Font'.",
    "Open a new terminal, or log out and back in.",
    "The Powerlevel10k wizard runs on first start; run `p10k configure` if it does not.",
    "If something looks wrong, check {zshrc} for {autoupdate}.",
)


class SummaryStep:
    step_id = "90_summary"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        decisions = (state.get("execution") or {}).get("decisions") or {}
        logger.info("Installation complete (decisions: %s)", decisions)
        logger.info("Next steps:")
        for n, line in enumerate(NEXT_STEPS, 1):
            logger.info(
                "%d. %s",
                n,
                line.format(zshrc=ctx.zshrc_path, autoupdate=ctx.config.autoupdate_line),
            )
        return state
