"""stackwright configuration.

Centralised, typed configuration for a generation run.  Settings use a
Pydantic v2 model so they are validated at construction time and can be
overridden from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class Config(BaseModel):
    """Global stackwright configuration.

    Holds the tool locations and derived workspace paths used by the
    generator.  Instances are created once by the CLI entry point and then
    passed through the rest of the system.
    """

    project_name: str = Field(default="")
    output_dir: Path = Field(default=Path("."))
    python_executable: str = Field(
        default=sys.executable or "python",
        description="Interpreter used to create backend virtual environments",
    )
    npm: str = Field(default="npm")
    npx: str = Field(default="npx")
    command_timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-command timeout in seconds; None waits forever"
    )
    windows: bool = Field(default_factory=lambda: sys.platform == "win32")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_root(self) -> Path:
        """The workspace root, ``<output_dir>/<project_name>``."""
        return self.output_dir / self.project_name

    @property
    def client_path(self) -> Path:
        """Frontend subdirectory."""
        return self.project_root / "client"

    @property
    def server_path(self) -> Path:
        """Backend subdirectory."""
        return self.project_root / "server"

    @property
    def env_path(self) -> Path:
        return self.project_root / ".env"

    @property
    def readme_path(self) -> Path:
        return self.project_root / "README.md"

    # ------------------------------------------------------------------
    # Virtual environment tools (relative to the server directory)
    # ------------------------------------------------------------------

    @property
    def venv_pip(self) -> str:
        """Path of ``pip`` inside the backend's ``venv``."""
        return "venv\\Scripts\\pip" if self.windows else "venv/bin/pip"

    @property
    def venv_python(self) -> str:
        """Path of ``python`` inside the backend's ``venv``."""
        return "venv\\Scripts\\python" if self.windows else "venv/bin/python"

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STACKWRIGHT_OUTPUT_DIR, STACKWRIGHT_PYTHON, STACKWRIGHT_NPM,
            STACKWRIGHT_NPX, STACKWRIGHT_COMMAND_TIMEOUT.

        Keyword arguments take precedence over the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STACKWRIGHT_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["STACKWRIGHT_OUTPUT_DIR"])
        if os.environ.get("STACKWRIGHT_PYTHON"):
            kwargs["python_executable"] = os.environ["STACKWRIGHT_PYTHON"]
        if os.environ.get("STACKWRIGHT_NPM"):
            kwargs["npm"] = os.environ["STACKWRIGHT_NPM"]
        if os.environ.get("STACKWRIGHT_NPX"):
            kwargs["npx"] = os.environ["STACKWRIGHT_NPX"]
        if os.environ.get("STACKWRIGHT_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = float(os.environ["STACKWRIGHT_COMMAND_TIMEOUT"])

        kwargs.update(overrides)
        return cls(**kwargs)
