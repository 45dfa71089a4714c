from __future__ import annotations

import logging
from typing import Any, Dict

from ..pipeline import InstallCtx

logger = logging.getLogger(__name__)


class InstallPluginsStep:
    step_id = "50_install_plugins"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        plugins_dir = ctx.plugins_dir
        if not ctx.dry_run:
            plugins_dir.mkdir(parents=True, exist_ok=True)

        fetched: Dict[str, str] = {}
        for name, url in ctx.config.plugin_repos.items():
            logger.info("Installing plugin %s", name)
            fetched[name] = ctx.collaborator.fetch_repo(url, str(plugins_dir / name))

        state.setdefault("execution", {}).setdefault("decisions", {})["plugin_repos"] = fetched
        return state
