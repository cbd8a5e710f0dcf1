"""``.env`` file generation.

The environment is assembled as an ordered mapping from the selection and
the user's secrets, rendered to ``KEY=VALUE`` lines, and written once.
"""

from __future__ import annotations

from pathlib import Path

from stackwright.stack.models import Database, ProjectSecrets, StackSelection

from .templates import write_text


def build_environment(selection: StackSelection, secrets: ProjectSecrets) -> dict[str, str]:
    """Return the environment variables for the generated project.

    Keys are only emitted for values the user supplied:
    ``JWT_SECRET``, ``DB_CONNECTION_STRING`` (plus ``MONGO_URI`` for
    MongoDB) and ``FIREBASE_PROJECT_ID``.
    """
    env: dict[str, str] = {}
    if secrets.jwt_secret:
        env["JWT_SECRET"] = secrets.jwt_secret
    if secrets.db_connection:
        env["DB_CONNECTION_STRING"] = secrets.db_connection
        if selection.database is Database.MONGODB:
            env["MONGO_URI"] = secrets.db_connection
    if secrets.firebase_project:
        env["FIREBASE_PROJECT_ID"] = secrets.firebase_project
    return env


def render_env(values: dict[str, str]) -> str:
    """Render *values* as newline-terminated ``KEY=VALUE`` lines."""
    return "".join(f"{key}={value}\n" for key, value in values.items())


class EnvGenerator:
    """Writes the project's ``.env`` file."""

    def __init__(self, selection: StackSelection, secrets: ProjectSecrets) -> None:
        self.selection = selection
        self.secrets = secrets

    async def generate(self, path: Path) -> Path:
        content = render_env(build_environment(self.selection, self.secrets))
        return await write_text(path, content)
