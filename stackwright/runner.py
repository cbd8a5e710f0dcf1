"""External command execution with interactive failure recovery.

Every package-manager, scaffolding-tool and interpreter invocation made
during generation goes through :class:`CommandRunner`.  A failing command
does not raise straight away: the user chooses to skip the step and carry
on, or to abort the whole generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from stackwright.prompts import Prompter
from stackwright.utils import console, format_command, print_error, run_command

CONTINUE = "continue"
ABORT = "abort"

_RECOVERY_OPTIONS = [CONTINUE, ABORT]
_RECOVERY_LABELS = ["Continue (skip this step)", "Abort project creation"]


class CommandAbortedError(Exception):
    """Raised when the user aborts after a command failure."""

    def __init__(self, command: str, returncode: Optional[int] = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"User aborted after command failure: {command}")


@dataclass
class SkippedCommand:
    """A failed command the user chose to skip."""

    command: str
    cwd: Path
    returncode: Optional[int] = None
    error: str = ""


@dataclass
class CommandRunner:
    """Runs commands with inherited stdio and asks what to do on failure.

    Attributes:
        prompter: Used for the continue/abort question.
        timeout: Optional per-command timeout in seconds.
        skipped: Commands that failed and were skipped, in order.
    """

    prompter: Prompter = field(default_factory=Prompter)
    timeout: Optional[float] = None
    skipped: list[SkippedCommand] = field(default_factory=list)

    async def run(self, command: list[str] | str, cwd: str | Path) -> bool:
        """Run *command* in *cwd*.

        Returns:
            ``True`` if the command succeeded, ``False`` if it failed and
            the user chose to continue.

        Raises:
            CommandAbortedError: If it failed and the user chose to abort
                (or closed the prompt).
        """
        printable = format_command(command)
        console.print(f"  [dim]$ {printable}[/dim]")

        returncode: Optional[int]
        try:
            returncode, _, stderr = await run_command(command, cwd=cwd, timeout=self.timeout)
            error = stderr
        except OSError as exc:
            returncode, error = None, str(exc)

        if returncode == 0:
            return True

        print_error(f"Command failed: {printable}")
        if error:
            console.print(f"  [dim]{error}[/dim]")

        action = self.prompter.select(
            "Installation failed. How would you like to proceed?",
            _RECOVERY_OPTIONS,
            labels=_RECOVERY_LABELS,
        )
        if action != CONTINUE:
            raise CommandAbortedError(printable, returncode)

        self.skipped.append(
            SkippedCommand(command=printable, cwd=Path(cwd), returncode=returncode, error=error)
        )
        return False
