"""Jinja2 template rendering for generated project files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``stackwright/scaffolder/templates/`` directory and renders them with the
stack context.  Rendered content is fully built in memory and written with
one write call, so a file is either absent or complete.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from stackwright.config import Config
from stackwright.stack.models import Auth, Backend, Database, StackSelection
from stackwright.utils import sanitize_name


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    Templates are ``.j2`` files under a configurable template directory,
    rendered with a context dictionary built by :func:`build_context`.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"node/express/app.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def has(self, template_path: str) -> bool:
        """Return ``True`` if *template_path* exists under the template root."""
        return (self.template_dir / template_path).is_file()

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*."""
        content = self.render(template_path, context)
        return await write_text(output_path, content)


async def write_text(output_path: str | Path, content: str) -> Path:
    """Write already-rendered *content* to *output_path* off the event loop."""
    out = Path(output_path)
    await asyncio.to_thread(_write_file, out, content)
    return out


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

def build_context(config: Config, selection: StackSelection) -> dict[str, Any]:
    """Build the template context for *selection*."""
    backend = selection.backend
    database = selection.database

    if backend.is_node:
        install_command, start_command = "npm install", "npm start"
    elif backend is Backend.FLASK:
        install_command, start_command = "pip install -r requirements.txt", "python app.py"
    else:
        install_command = "pip install -r requirements.txt"
        start_command = "python manage.py runserver"

    return {
        "project_name": config.project_name,
        "project_slug": sanitize_name(config.project_name),
        "frontend": selection.frontend.value,
        "backend": backend.value,
        "database": database.value,
        "auth": selection.auth.value,
        "is_node": backend.is_node,
        "is_express": backend is Backend.EXPRESS,
        "is_fastify": backend is Backend.FASTIFY,
        "is_flask": backend is Backend.FLASK,
        "is_django": backend is Backend.DJANGO,
        "is_mongodb": database is Database.MONGODB,
        "is_firestore": database is Database.FIRESTORE,
        "is_sql": database in (Database.POSTGRESQL, Database.MYSQL),
        "uses_jwt": selection.auth is Auth.JWT,
        "uses_firebase_auth": selection.auth is Auth.FIREBASE,
        "install_command": install_command,
        "start_command": start_command,
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
