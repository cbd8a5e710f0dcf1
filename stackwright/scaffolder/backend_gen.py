"""Backend generation sub-sequences.

Each backend family (Node, Flask, Django) has its own ordered sequence of
package-manager invocations and rendered files.  All process invocations go
through the shared :class:`~stackwright.runner.CommandRunner`, so a failed
install can be skipped or escalated like any other command.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from stackwright.config import Config
from stackwright.runner import CommandRunner
from stackwright.stack.models import Backend, StackSelection
from stackwright.utils import console

from .strategies import (
    BACKEND_STRATEGIES,
    DATABASE_STRATEGIES,
    BackendFamily,
    dependencies,
)
from .templates import TemplateRenderer, build_context, write_text


class BackendGenerator:
    """Base class for backend generators.

    Subclasses implement :meth:`generate`, which runs inside the already
    existing ``server/`` directory.
    """

    def __init__(
        self,
        config: Config,
        selection: StackSelection,
        runner: CommandRunner,
        renderer: TemplateRenderer,
    ) -> None:
        self.config = config
        self.selection = selection
        self.runner = runner
        self.renderer = renderer
        self.server_path = config.server_path

    @property
    def packages(self) -> list[str]:
        s = self.selection
        return dependencies(s.backend, s.database, s.auth)

    def context(self) -> dict[str, Any]:
        return build_context(self.config, self.selection)

    async def generate(self) -> None:
        raise NotImplementedError

    async def _render(self, template: str, relative_path: str, ctx: dict[str, Any]) -> Path:
        return await self.renderer.render_to_file(template, self.server_path / relative_path, ctx)


# ---------------------------------------------------------------------------
# Node (Express / Fastify)
# ---------------------------------------------------------------------------


class NodeBackendGenerator(BackendGenerator):
    """``npm init``, dependency install, folder skeleton and source files."""

    SUBDIRECTORIES = ("config", "models", "routes", "middleware")

    async def generate(self) -> None:
        npm = self.config.npm
        await self.runner.run([npm, "init", "-y"], self.server_path)

        console.print("      Installing dependencies...")
        await self.runner.run([npm, "install", *self.packages], self.server_path)

        await asyncio.to_thread(self._create_skeleton)

        ctx = self.context()
        db_template = DATABASE_STRATEGIES[self.selection.database].node_template
        await self._render(db_template, "config/db.js", ctx)

        if self.selection.backend is Backend.EXPRESS:
            await self._render("node/express/server.js.j2", "server.js", ctx)
            await self._render("node/express/app.js.j2", "app.js", ctx)
            await self._render("node/express/auth_route.js.j2", "routes/auth.js", ctx)
            await self._render("node/express/auth_middleware.js.j2", "middleware/auth.js", ctx)
        else:
            await self._render("node/fastify/server.js.j2", "server.js", ctx)
            await self._render("node/fastify/auth_route.js.j2", "routes/auth.js", ctx)

    def _create_skeleton(self) -> None:
        for name in self.SUBDIRECTORIES:
            (self.server_path / name).mkdir(exist_ok=True)


# ---------------------------------------------------------------------------
# Python (Flask / Django)
# ---------------------------------------------------------------------------


class PythonBackendGenerator(BackendGenerator):
    """Shared virtualenv and requirements handling for Python backends."""

    @property
    def pip(self) -> str:
        return str(self.server_path / self.config.venv_pip)

    @property
    def python(self) -> str:
        return str(self.server_path / self.config.venv_python)

    async def create_venv(self) -> bool:
        return await self.runner.run(
            [self.config.python_executable, "-m", "venv", "venv"], self.server_path
        )

    async def install_requirements(self) -> bool:
        return await self.runner.run([self.pip, "install", *self.packages], self.server_path)

    async def write_requirements(self) -> Path:
        content = "".join(f"{package}\n" for package in self.packages)
        return await write_text(self.server_path / "requirements.txt", content)


class FlaskBackendGenerator(PythonBackendGenerator):
    async def generate(self) -> None:
        await self.create_venv()
        console.print("      Installing Python dependencies...")
        await self.install_requirements()
        await self.write_requirements()

        ctx = self.context()
        await self._render("flask/app.py.j2", "app.py", ctx)
        if ctx["uses_jwt"]:
            await self._render("flask/auth.py.j2", "auth.py", ctx)


class DjangoBackendGenerator(PythonBackendGenerator):
    async def generate(self) -> None:
        await self.create_venv()
        console.print("      Installing Django dependencies...")
        await self.install_requirements()
        await self.runner.run(
            [self.python, "-m", "django", "startproject", "config", "."], self.server_path
        )
        await self.write_requirements()
        await self._render("django/README.md.j2", "README.md", self.context())


GENERATORS: dict[BackendFamily, type[BackendGenerator]] = {
    BackendFamily.NODE: NodeBackendGenerator,
    BackendFamily.FLASK: FlaskBackendGenerator,
    BackendFamily.DJANGO: DjangoBackendGenerator,
}


def backend_generator(
    config: Config,
    selection: StackSelection,
    runner: CommandRunner,
    renderer: TemplateRenderer,
) -> BackendGenerator:
    """Return the generator for the selected backend's family."""
    family = BACKEND_STRATEGIES[selection.backend].family
    return GENERATORS[family](config, selection, runner, renderer)
