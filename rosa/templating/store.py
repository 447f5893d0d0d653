"""Chat reply templates with mustache-style ``{{ variable }}`` substitution.

Templates live in ``chat/`` next to this module and are rendered as plain
text (no HTML escaping) over a flat view-data mapping.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jinja2

_TEMPLATES_DIR = Path(__file__).parent / "chat"


class TemplateStore:
    def __init__(self, templates_dir: Path | None = None) -> None:
        self._dir = templates_dir or _TEMPLATES_DIR
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self._dir)),
            autoescape=False,
        )

    async def load(self, template_name: str) -> str:
        """Raw template text; raises ``jinja2.TemplateNotFound`` if missing."""
        source, _, _ = await asyncio.to_thread(self._env.loader.get_source, self._env, template_name)
        return source

    async def render(self, template_name: str, view: Mapping[str, Any] | None = None) -> str:
        template = await asyncio.to_thread(self._env.get_template, template_name)
        return template.render(**(view or {})).strip()
