"""Idempotent edits to a zsh configuration file.

The file is treated as opaque lines. Each edit is a pure function
``text -> text`` and applying it twice gives the same result as applying it
once, so the installer can be re-run safely.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)

PLUGINS_PREFIX = "plugins=("

_THEME_RE = re.compile(r'^ZSH_THEME=".*"', re.MULTILINE)


def _find(lines: Sequence[str], needle: str) -> Optional[int]:
    for i, ln in enumerate(lines):
        if needle in ln:
            return i
    return None


def _cr(text: str) -> str:
    # Lines are split on "\n" only, so a CRLF file keeps "\r" on each line.
    # New lines get the same ending.
    return "\r" if "\r\n" in text else ""


def _split(text: str) -> List[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _join(lines: Sequence[str]) -> str:
    return "\n".join(lines) + "\n" if lines else ""


def set_theme(text: str, theme: str) -> str:
    """Replace the value of every ``ZSH_THEME="..."`` line.

    Leaves the text untouched when no such line exists.
    """

    return _THEME_RE.sub(lambda _m: f'ZSH_THEME="{theme}"', text)


def has_theme_line(text: str) -> bool:
    return _THEME_RE.search(text) is not None


def insert_before_anchor(
    text: str,
    line: str,
    anchor: str,
    *,
    fallback_after: Optional[str] = None,
) -> str:
    """Insert line before the first line containing anchor, once.

    Without the anchor the line goes after the first line containing
    fallback_after, and without that it becomes the first line.
    """

    if line in text:
        return text

    line += _cr(text)
    lines = _split(text)
    idx = _find(lines, anchor)
    if idx is not None:
        lines.insert(idx, line)
        return _join(lines)

    idx = _find(lines, fallback_after) if fallback_after else None
    if idx is not None:
        lines.insert(idx + 1, line)
    else:
        lines.insert(0, line)
    return _join(lines)


def render_plugins_line(plugins: Iterable[str]) -> str:
    return f"{PLUGINS_PREFIX}{' '.join(plugins)})"


def _plugins_block_end(lines: Sequence[str], start: int) -> int:
    # plugins=( may span several lines; it ends at the first closing paren.
    for i in range(start, len(lines)):
        if ")" in lines[i]:
            return i
    return start


def set_plugins(text: str, plugins: Sequence[str], anchor: str) -> str:
    """Make the file hold exactly one ``plugins=(...)`` line for plugins.

    An existing definition is overwritten (never merged) and any later
    definitions are dropped. With no definition, the line goes before the
    first line containing anchor, or at the end of the file.
    """

    rendered = render_plugins_line(plugins) + _cr(text)
    lines = _split(text)
    out: List[str] = []
    replaced = False

    i = 0
    while i < len(lines):
        if lines[i].startswith(PLUGINS_PREFIX):
            if not replaced:
                out.append(rendered)
                replaced = True
            i = _plugins_block_end(lines, i) + 1
            continue
        out.append(lines[i])
        i += 1

    if not replaced:
        idx = _find(out, anchor)
        if idx is not None:
            out.insert(idx, rendered)
        else:
            out.append(rendered)

    return _join(out)


def has_plugins_line(text: str) -> bool:
    return any(ln.startswith(PLUGINS_PREFIX) for ln in _split(text))


def append_once(text: str, line: str) -> str:
    """Append line at the end unless it is already present."""

    if line in text:
        return text
    eol = _cr(text) + "\n"
    if text and not text.endswith("\n"):
        text += eol
    return f"{text}{line}{eol}"


@dataclass(frozen=True)
class Rule:
    name: str
    transform: Callable[[str], str]

    def __call__(self, text: str) -> str:
        return self.transform(text)


def theme_rule(theme: str) -> Rule:
    return Rule("theme", partial(set_theme, theme=theme))


def insert_before_rule(
    name: str, line: str, anchor: str, *, fallback_after: Optional[str] = None
) -> Rule:
    return Rule(
        name,
        partial(insert_before_anchor, line=line, anchor=anchor, fallback_after=fallback_after),
    )


def plugins_rule(plugins: Sequence[str], anchor: str) -> Rule:
    return Rule("plugins", partial(set_plugins, plugins=list(plugins), anchor=anchor))


def append_once_rule(name: str, line: str) -> Rule:
    return Rule(name, partial(append_once, line=line))


def standard_rules(
    *,
    theme: str,
    plugins: Sequence[str],
    autoupdate_line: str,
    source_anchor: str,
    marker: str,
) -> List[Rule]:
    """The full edit sequence in the order the installer applies it."""

    return [
        theme_rule(theme),
        insert_before_rule(
            "autoupdate",
            autoupdate_line,
            source_anchor,
            fallback_after=f'ZSH_THEME="{theme}"',
        ),
        plugins_rule(plugins, source_anchor),
        append_once_rule("p10k-source", marker),
    ]


def apply_rules(text: str, rules: Iterable[Rule]) -> str:
    for rule in rules:
        text = rule(text)
    return text


class ZshrcFile:
    """Read-modify-write access to the config file, one rule at a time."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        with self.path.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()

    def apply(self, rule: Rule, *, dry_run: bool = False) -> bool:
        """Apply rule and write the result back. Returns True if it changed."""

        old = self.read()
        new = rule(old)
        if new == old:
            logger.info("%s: %s already up to date", self.path, rule.name)
            return False
        if dry_run:
            logger.info("Would update %s (%s)", self.path, rule.name)
            return True
        with self.path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(new)
        logger.info("Updated %s (%s)", self.path, rule.name)
        return True
