"""Main scaffolding orchestrator.

Runs the five generation steps for a validated ``StackSelection`` as a
single transaction:

1. create the project root with ``client/`` and ``server/``;
2. write the ``.env`` file;
3. scaffold the frontend inside ``client/``;
4. generate the backend inside ``server/``;
5. write the top-level ``README.md``.

Any exception escaping a step deletes the whole project root before the
error is re-raised as :class:`GenerationError`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Optional

from stackwright.config import Config
from stackwright.runner import CommandRunner, SkippedCommand
from stackwright.stack.models import ProjectSecrets, StackSelection
from stackwright.transaction import TransactionContext, workspace_transaction
from stackwright.utils import console, print_step

from .backend_gen import backend_generator
from .env_gen import EnvGenerator
from .strategies import frontend_command, require_template
from .templates import TemplateRenderer, build_context


class GenerationError(Exception):
    """Raised when a generation step fails irrecoverably."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"{step}: {message}")


@dataclass
class GenerationStep:
    """One unit of orchestrated work."""

    label: str
    working_directory: Path
    action: Callable[[], Awaitable[object]]


@dataclass
class GenerationResult:
    project_root: Path
    selection: StackSelection
    skipped: list[SkippedCommand] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped


class ProjectGenerator:
    """Builds a project workspace for one stack selection.

    Attributes:
        config: Run configuration (project name, output directory, tools).
        selection: The validated stack.
        secrets: Values for the ``.env`` file.
        runner: Executes every external command.
        context: Shared with the SIGINT handler; marked active right before
            the workspace is created.
    """

    def __init__(
        self,
        config: Config,
        selection: StackSelection,
        secrets: ProjectSecrets,
        runner: Optional[CommandRunner] = None,
        context: Optional[TransactionContext] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.config = config
        self.selection = selection
        self.secrets = secrets
        self.runner = runner or CommandRunner(timeout=config.command_timeout)
        self.context = context or TransactionContext()
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def steps(self) -> list[GenerationStep]:
        """Return the generation steps in execution order."""
        root = self.config.project_root
        return [
            GenerationStep("Creating project directory", root.parent, self._create_workspace),
            GenerationStep("Configuring environment", root, self._write_env),
            GenerationStep(
                f"Setting up Frontend ({self.selection.frontend.value})",
                self.config.client_path,
                self._generate_frontend,
            ),
            GenerationStep(
                f"Setting up Backend ({self.selection.backend.value})",
                self.config.server_path,
                self._generate_backend,
            ),
            GenerationStep("Generating README.md", root, self._write_readme),
        ]

    async def generate(self) -> GenerationResult:
        """Run every step; roll back the workspace on any failure.

        Raises:
            TemplateResolutionError: Before anything is created, if the
                backend/database pair has no strategy.
            GenerationError: After rollback, if any step failed.
        """
        require_template(self.selection.backend, self.selection.database)

        root = self.config.project_root
        if root.exists():
            raise GenerationError("Creating project directory", f"{root} already exists")

        steps = self.steps()
        with workspace_transaction(self.context, root):
            for index, step in enumerate(steps, 1):
                print_step(index, len(steps), step.label)
                try:
                    await step.action()
                except Exception as exc:
                    raise GenerationError(step.label, str(exc)) from exc

        return GenerationResult(
            project_root=root,
            selection=self.selection,
            skipped=list(self.runner.skipped),
        )

    # -- Steps -------------------------------------------------------------

    async def _create_workspace(self) -> None:
        def _mkdirs() -> None:
            self.config.project_root.mkdir()
            self.config.client_path.mkdir()
            self.config.server_path.mkdir()

        await asyncio.to_thread(_mkdirs)

    async def _write_env(self) -> None:
        await EnvGenerator(self.selection, self.secrets).generate(self.config.env_path)

    async def _generate_frontend(self) -> bool:
        command = frontend_command(self.selection.frontend, self.config)
        return await self.runner.run(command, self.config.client_path)

    async def _generate_backend(self) -> None:
        generator = backend_generator(self.config, self.selection, self.runner, self.renderer)
        await generator.generate()

    async def _write_readme(self) -> None:
        context = build_context(self.config, self.selection)
        await self.renderer.render_to_file("README.md.j2", self.config.readme_path, context)
        console.print("      README.md written.")
