from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    step_id = "10_install_dependencies"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        packages = cfg.packages

        if cfg.upgrade_system:
            logger.info("Upgrading system packages")
            ctx.collaborator.upgrade()

        logger.info("Installing system dependencies (%s)", ", ".join(packages))
        ctx.collaborator.install(packages)

        state.setdefault("execution", {}).setdefault("plan", {})["packages"] = packages
        return state
