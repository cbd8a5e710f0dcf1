"""Workspace transaction and cancellation handling.

A generation run owns exactly one workspace directory.  The
:class:`TransactionContext` records whether that run is in flight and where
the workspace lives; it is shared by the generator and by the SIGINT
handler so either path can remove a partially built project.
"""

from __future__ import annotations

import shutil
import signal
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

from stackwright.utils import console, print_error, print_warning, remove_tree


@dataclass
class TransactionContext:
    """In-flight state of the current generation run.

    ``active`` is set immediately before the workspace is created and is
    never cleared on success; process exit supersedes it.
    """

    active: bool = False
    workspace_path: Optional[Path] = None

    def begin(self, workspace_path: Path) -> None:
        self.workspace_path = Path(workspace_path)
        self.active = True


def rollback(workspace_path: Optional[Path]) -> bool:
    """Delete the whole workspace.

    Safe to call when the workspace does not exist, and safe to call twice.

    Returns:
        ``True`` if nothing is left on disk, ``False`` if deletion failed.
    """
    if workspace_path is None:
        return True
    return remove_tree(workspace_path)


@contextmanager
def workspace_transaction(
    context: TransactionContext, workspace_path: Path
) -> Iterator[TransactionContext]:
    """Scope a generation run; any exception rolls the workspace back.

    On an ``Exception`` the failure is reported, the workspace is deleted,
    the outcome of the deletion is reported, and the exception propagates.
    A ``KeyboardInterrupt`` deletes the workspace without the error report.
    """
    context.begin(workspace_path)
    try:
        yield context
    except Exception as exc:
        print_error(f"\nFatal error during generation: {exc}")
        console.print("Rolling back changes...")
        if rollback(workspace_path):
            console.print("Project creation failed. All changes reverted.")
        else:
            print_warning(f"Failed to clean up {workspace_path}. Remove it manually.")
        raise
    except KeyboardInterrupt:
        rollback(workspace_path)
        raise


# ---------------------------------------------------------------------------
# SIGINT
# ---------------------------------------------------------------------------


def make_interrupt_handler(context: TransactionContext) -> Callable[[int, object], None]:
    """Build a SIGINT handler bound to *context*."""

    def _handler(signum: int, frame: object) -> None:
        console.print("\n\n[bold red]Project creation cancelled by user.[/bold red]")
        path = context.workspace_path
        if context.active and path is not None and path.exists():
            console.print("Cleaning up partial files...")
            shutil.rmtree(path, ignore_errors=True)
        sys.exit(1)

    return _handler


def install_interrupt_handler(context: TransactionContext) -> Callable[[int, object], None]:
    """Install the SIGINT handler for *context*; call once at process start."""
    handler = make_interrupt_handler(context)
    signal.signal(signal.SIGINT, handler)
    return handler
