"""stackwright command line entry point.

Walks the user through naming the project, choosing one value per stack
dimension (re-prompting only the dimension that conflicts), entering the
secrets the stack needs, and then generates the project.

Usage::

    stackwright my-app
    python -m stackwright my-app
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional, Sequence, TypeVar

from rich.panel import Panel

from stackwright.config import Config
from stackwright.prompts import Prompter
from stackwright.runner import CommandRunner
from stackwright.scaffolder import (
    GenerationError,
    GenerationResult,
    ProjectGenerator,
    TemplateResolutionError,
    require_template,
)
from stackwright.stack.models import (
    Auth,
    Backend,
    Database,
    Dimension,
    Frontend,
    ProjectSecrets,
    StackSelection,
    Violation,
    connection_string_error,
    needs_connection_string,
    needs_firebase_project,
    needs_jwt_secret,
)
from stackwright.stack.validator import validate, violations_for
from stackwright.transaction import TransactionContext, install_interrupt_handler
from stackwright.utils import (
    console,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    remove_tree,
)

OVERWRITE = "overwrite"
RENAME = "rename"
EXIT = "exit"


class Cancelled(Exception):
    """A prompt was closed; the run stops without generating anything."""

    def __init__(self, exit_code: int = 1) -> None:
        self.exit_code = exit_code
        super().__init__(f"cancelled (exit {exit_code})")


T = TypeVar("T")


def _require(value: Optional[T]) -> T:
    if value is None:
        raise Cancelled()
    return value


# ---------------------------------------------------------------------------
# Project name & folder collisions
# ---------------------------------------------------------------------------


def ask_project_name(prompter: Prompter, name: Optional[str]) -> str:
    if name and name.strip():
        return name.strip()
    return _require(prompter.text("What is your project name?"))


def resolve_collision(prompter: Prompter, config: Config) -> Config:
    """Make sure the project root does not exist before generation starts."""
    if not config.project_root.exists():
        return config

    print_warning(f"\nFolder '{config.project_name}' already exists.")
    action = prompter.select(
        "Choose an action:",
        [OVERWRITE, RENAME, EXIT],
        labels=["Overwrite (delete existing)", "Enter a new name", "Exit"],
    )
    if action is None or action == EXIT:
        raise Cancelled(exit_code=0)

    if action == RENAME:

        def _available(value: str):
            if not value.strip():
                return "Required"
            if (config.output_dir / value.strip()).exists():
                return "Folder still exists!"
            return True

        new_name = prompter.text("Enter new project name:", validate=_available)
        if new_name is None:
            raise Cancelled(exit_code=0)
        return config.model_copy(update={"project_name": new_name})

    if not remove_tree(config.project_root):
        print_error("Could not remove directory. Check permissions.")
        raise Cancelled()
    console.print("Existing directory removed.")
    return config


# ---------------------------------------------------------------------------
# Stack selection
# ---------------------------------------------------------------------------


def _report(title: str, violations: list[Violation]) -> None:
    print_error(f"\n{title}")
    for violation in violations:
        console.print(f"  [red]- {violation.message}[/red]")


def choose_stack(prompter: Prompter) -> StackSelection:
    """Prompt for the four dimensions, validating as each one is picked."""
    frontend = _require(prompter.select("Select frontend framework", list(Frontend)))
    backend = _require(prompter.select("Select backend framework", list(Backend)))

    while True:
        database = _require(prompter.select("Select database", list(Database)))
        conflicts = violations_for(validate(backend, database), Dimension.DATABASE)
        if not conflicts:
            break
        _report("Invalid Backend + Database Combination:", conflicts)

    while True:
        auth = _require(prompter.select("Select authentication method", list(Auth)))
        conflicts = validate(backend, database, auth)
        if not conflicts:
            break
        _report("Invalid Stack Configuration:", conflicts)

    return StackSelection(frontend=frontend, backend=backend, database=database, auth=auth)


def collect_secrets(prompter: Prompter, selection: StackSelection) -> ProjectSecrets:
    """Ask for the values the selected stack needs in its ``.env``."""
    values: dict[str, str] = {}

    if needs_connection_string(selection.database):

        def _connection(value: str):
            return connection_string_error(selection.database, value) or True

        values["db_connection"] = _require(
            prompter.text("Enter database connection string:", validate=_connection)
        )
    if needs_firebase_project(selection):
        values["firebase_project"] = _require(prompter.text("Enter Firebase Project ID:"))
    if needs_jwt_secret(selection):
        values["jwt_secret"] = _require(
            prompter.text("Enter JWT secret key:", password=True)
        )

    return ProjectSecrets.for_selection(selection, **values)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def print_confirmation(selection: StackSelection) -> None:
    print_header("Stack Configuration Confirmed")
    print_summary_table(
        {
            "Frontend": selection.frontend.value,
            "Backend": selection.backend.value,
            "Database": selection.database.value,
            "Auth": selection.auth.value,
        },
        title="Selected stack",
    )


def print_final_summary(config: Config, result: GenerationResult) -> None:
    lines = [
        f"Project : {config.project_name}",
        f"Stack   : {result.selection.describe()}",
        "",
        "Next steps:",
        " - Read README.md",
        " - Configure .env",
        " - Run frontend & backend",
    ]
    if result.skipped:
        lines += ["", "[yellow]Skipped commands (run them manually):[/yellow]"]
        lines += [f" - {s.command}  [dim]({s.cwd})[/dim]" for s in result.skipped]
    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]Project Ready![/bold]",
            border_style="bright_green" if result.complete else "yellow",
        )
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run(
    project_name: Optional[str],
    prompter: Optional[Prompter] = None,
    context: Optional[TransactionContext] = None,
    config: Optional[Config] = None,
) -> int:
    """Run the interactive flow and return the process exit code."""
    prompter = prompter or Prompter()
    context = context or TransactionContext()
    config = config or Config.from_env()

    try:
        name = ask_project_name(prompter, project_name)
        config = resolve_collision(prompter, config.model_copy(update={"project_name": name}))

        console.print(f"\n[bold]Initializing project: {config.project_name}[/bold]\n")
        selection = choose_stack(prompter)
        secrets = collect_secrets(prompter, selection)
    except Cancelled as exc:
        return exc.exit_code

    try:
        require_template(selection.backend, selection.database)
    except TemplateResolutionError as exc:
        print_error(f"Critical Error: {exc}")
        return 1

    print_confirmation(selection)

    runner = CommandRunner(prompter=prompter, timeout=config.command_timeout)
    generator = ProjectGenerator(config, selection, secrets, runner=runner, context=context)
    try:
        result = asyncio.run(generator.generate())
    except GenerationError as exc:
        if not context.active:
            print_error(str(exc))
        return 1

    print_final_summary(config, result)
    print_success("Done.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``stackwright`` / ``python -m stackwright``."""
    parser = argparse.ArgumentParser(
        prog="stackwright",
        description="Scaffold a frontend + backend + database + auth project",
    )
    parser.add_argument("project_name", nargs="?", help="Project folder to create")
    args = parser.parse_args(argv)

    context = TransactionContext()
    install_interrupt_handler(context)
    sys.exit(run(args.project_name, context=context))


if __name__ == "__main__":
    main()
