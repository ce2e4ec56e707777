"""Interactive branch selection and confirmation."""

import re
from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from gitbatch.models import BranchRecord, CommitInfo

NO_COMMIT_INFO = "[no commit info]"


def format_branch_label(index: int, record: BranchRecord, commit: Optional[CommitInfo]) -> str:
    """Build the display label for a branch choice.

    Example: ``l 003 *feature-a  [1a2b3c4 - Add login (2024-05-01-12:00:00) <Jane>]``
    """
    marker = "*" if record.is_current else " "
    label = f"{record.origin.value} {index:03d} {marker}{record.name}"
    if commit is None:
        return f"{label}  {NO_COMMIT_INFO}"
    return f"{label}  [{commit.hash} - {commit.subject} ({commit.author_date}) <{commit.author}>]"


def parse_selection(answer: str, count: int) -> list[int]:
    """Turn ``"1,3-5"`` or ``"all"`` into sorted zero-based indices.

    Raises:
        ValueError: If a token is not a number or range within 1..count
    """
    answer = answer.strip().lower()
    if not answer:
        return []
    if answer in ("all", "*"):
        return list(range(count))

    # "1 - 3" means the range 1-3
    answer = re.sub(r"\s*-\s*", "-", answer)
    indices: set[int] = set()
    for token in answer.replace(" ", ",").split(","):
        if not token:
            continue
        start, sep, end = token.partition("-")
        first = int(start)
        last = int(end) if sep else first
        if first > last or first < 1 or last > count:
            raise ValueError(f"Selection out of range: {token}")
        indices.update(range(first - 1, last))
    return sorted(indices)


class SelectionFlow(Protocol):
    """Presents branches to a person and asks for a go/no-go."""

    def select(self, prompt: str, choices: Sequence[tuple[str, BranchRecord]]) -> list[BranchRecord]: ...

    def confirm(self, summary: str) -> bool: ...


class ConsoleSelectionFlow:
    """Selection flow backed by rich prompts."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def select(self, prompt: str, choices: Sequence[tuple[str, BranchRecord]]) -> list[BranchRecord]:
        """Show the numbered choices and read which ones to keep."""
        table = Table(show_header=False, show_edge=False, box=None, pad_edge=False)
        table.add_column("Branch", overflow="fold")
        for label, record in choices:
            style = "green" if record.is_current else ("red" if not record.is_local else None)
            table.add_row(escape(label), style=style)
        self.console.print(table)

        while True:
            answer = Prompt.ask(
                f"{prompt} [dim](e.g. 1,3-5, all, or empty for none)[/dim]",
                console=self.console,
                default="",
                show_default=False,
            )
            try:
                indices = parse_selection(answer, len(choices))
            except ValueError as err:
                self.console.print(f"[red]Invalid selection:[/red] {escape(str(err))}")
                continue
            return [choices[index][1] for index in indices]

    def confirm(self, summary: str) -> bool:
        """Ask for confirmation, defaulting to no."""
        self.console.print(f"[yellow]{escape(summary)}[/yellow]")
        return Confirm.ask("Proceed?", console=self.console, default=False)
