from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..errors import CommandError
from ..pipeline import InstallCtx
from ..state_store import record_decision, record_warning

logger = logging.getLogger(__name__)


class InstallFontStep:
    step_id = "20_install_font"

    def run(self, ctx: InstallCtx, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = ctx.config
        font_dir = cfg.font_dir

        if font_dir.is_dir():
            logger.info("Nerd Font already installed in %s", font_dir)
            record_decision(state, "font", "present")
            return state

        with tempfile.TemporaryDirectory(prefix="zsh-installer-font-") as tmp:
            archive = str(Path(tmp) / Path(cfg.font_url).name)
            logger.info("Downloading font from %s", cfg.font_url)
            try:
                ctx.collaborator.download(cfg.font_url, archive)
            except CommandError as e:
                # Nothing later depends on the font.
                logger.error("Could not download the font, check the URL or your connection: %s", e)
                record_warning(state, self.step_id, f"font download failed: {cfg.font_url}")
                record_decision(state, "font", "download_failed")
                return state

            logger.info("Extracting font to %s", font_dir)
            ctx.collaborator.extract_archive(archive, str(font_dir), cfg.font_patterns)

        logger.info("Updating font cache")
        ctx.collaborator.refresh_font_cache()
        record_decision(state, "font", "installed")
        return state
