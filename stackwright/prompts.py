"""Interactive prompts.

Thin wrapper around :mod:`rich.prompt` offering the two interactions the
tool needs: pick one entry of a numbered list and enter validated free
text.  Both return ``None`` when input is closed (EOF), which callers treat
as "abort immediately".
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar, Union

from rich.console import Console
from rich.prompt import Prompt

from stackwright.utils import console as default_console

T = TypeVar("T")

# A validator returns True when the value is acceptable, or an error message.
TextValidator = Callable[[str], Union[bool, str]]


def required(value: str) -> Union[bool, str]:
    """Validator rejecting blank input."""
    return True if value.strip() else "Required"


class Prompter:
    """Blocking console prompts."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or default_console

    def select(
        self,
        message: str,
        options: Sequence[T],
        labels: Optional[Sequence[str]] = None,
    ) -> Optional[T]:
        """Ask the user to pick one of *options* by number.

        Args:
            message: Question shown above the list.
            options: Values to choose from.
            labels: Display labels, defaulting to ``str(option)`` (or the
                enum value for enum members).
        """
        if labels is None:
            labels = [str(getattr(o, "value", o)) for o in options]
        self.console.print(f"[bold]? {message}[/bold]")
        for i, label in enumerate(labels, 1):
            self.console.print(f"  {i}) {label}")
        try:
            answer = Prompt.ask(
                "  Enter number",
                choices=[str(i) for i in range(1, len(options) + 1)],
                show_choices=False,
                console=self.console,
            )
        except EOFError:
            return None
        return options[int(answer) - 1]

    def text(
        self,
        message: str,
        validate: TextValidator = required,
        password: bool = False,
    ) -> Optional[str]:
        """Ask for free text until *validate* accepts it."""
        while True:
            try:
                answer = Prompt.ask(f"? {message}", password=password, console=self.console)
            except EOFError:
                return None
            answer = answer.strip()
            verdict = validate(answer)
            if verdict is True:
                return answer
            problem = verdict if isinstance(verdict, str) else "Invalid value"
            self.console.print(f"[red]  {problem}[/red]")
