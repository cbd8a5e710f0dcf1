"""Shared pytest fixtures for the stackwright test suite.

Provides reusable fixtures for:
- A ``Config`` rooted in a temporary directory
- Common stack selections and their secrets
- A scripted prompter that replays canned answers
- Mocked command execution
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console

from stackwright.config import Config
from stackwright.prompts import Prompter, TextValidator, required
from stackwright.stack.models import (
    Auth,
    Backend,
    Database,
    Frontend,
    ProjectSecrets,
    StackSelection,
)


# ---------------------------------------------------------------------------
# Config & workspace
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config that generates ``demo-app`` under a temporary directory."""
    return Config(
        project_name="demo-app",
        output_dir=tmp_path,
        python_executable="python3",
        windows=False,
    )


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------

@pytest.fixture
def mern_selection() -> StackSelection:
    """React + Node/Express + MongoDB + JWT."""
    return StackSelection(
        frontend=Frontend.REACT,
        backend=Backend.EXPRESS,
        database=Database.MONGODB,
        auth=Auth.JWT,
    )


@pytest.fixture
def mern_secrets(mern_selection: StackSelection) -> ProjectSecrets:
    return ProjectSecrets.for_selection(
        mern_selection,
        db_connection="mongodb://localhost:27017/demo",
        jwt_secret="s3cret",
    )


@pytest.fixture
def flask_selection() -> StackSelection:
    """Vue + Flask + PostgreSQL + JWT."""
    return StackSelection(
        frontend=Frontend.VUE,
        backend=Backend.FLASK,
        database=Database.POSTGRESQL,
        auth=Auth.JWT,
    )


@pytest.fixture
def flask_secrets(flask_selection: StackSelection) -> ProjectSecrets:
    return ProjectSecrets.for_selection(
        flask_selection,
        db_connection="postgresql://localhost:5432/demo",
        jwt_secret="s3cret",
    )


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

class ScriptedPrompter(Prompter):
    """Prompter that replays *answers* in order.

    ``select`` answers are option values (or ``None`` to cancel); ``text``
    answers rejected by the validator are recorded in ``rejected`` and the
    next answer is used, as a user retyping would.
    """

    def __init__(self, answers: Sequence[Any]) -> None:
        super().__init__(console=Console(file=io.StringIO()))
        self.answers = list(answers)
        self.asked: list[str] = []
        self.rejected: list[str] = []

    def _next(self, message: str) -> Any:
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self.answers.pop(0)

    def select(self, message, options, labels=None):
        self.asked.append(message)
        answer = self._next(message)
        if answer is not None:
            assert answer in options, f"{answer!r} is not an option for {message!r}"
        return answer

    def text(self, message: str, validate: TextValidator = required, password: bool = False) -> Optional[str]:
        self.asked.append(message)
        while True:
            answer = self._next(message)
            if answer is None or validate(answer) is True:
                return answer
            self.rejected.append(answer)


@pytest.fixture
def scripted_prompter() -> Callable[[Sequence[Any]], ScriptedPrompter]:
    """Factory for :class:`ScriptedPrompter`.

    Usage:
        def test_flow(scripted_prompter):
            prompter = scripted_prompter([Frontend.REACT, Backend.FLASK])
    """
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch the runner's ``run_command`` so every command succeeds.

    Set ``side_effect`` on the yielded mock to fail selected commands.
    """
    with patch(
        "stackwright.runner.run_command", new=AsyncMock(return_value=(0, "", ""))
    ) as mocked:
        yield mocked


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


def command_fails(predicate: Callable[[list[str]], bool], returncode: int = 1):
    """Build a ``run_command`` side effect failing commands matching *predicate*."""

    async def _side_effect(cmd, cwd=None, timeout=None, **kwargs):
        if predicate(cmd):
            return (returncode, "", "boom")
        return (0, "", "")

    return _side_effect


@pytest.fixture
def failing_command():
    """Expose :func:`command_fails` to tests."""
    return command_fails
