"""Command line interface for git-batch."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from gitbatch.annotator import CommitAnnotator
from gitbatch.config import DEFAULT_MAX_WORKERS, Settings
from gitbatch.deletion import DeletionOrchestrator
from gitbatch.git import GitError, GitExecutor
from gitbatch.inventory import BranchInventory
from gitbatch.models import DEFAULT_REMOTE, BranchFilter, BranchRecord, DeletionResult
from gitbatch.selection import ConsoleSelectionFlow, SelectionFlow, format_branch_label

app = typer.Typer(help="Batch delete git branches")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def get_selection_flow() -> SelectionFlow:
    """Get the interactive selection flow."""
    return ConsoleSelectionFlow(console)


def resolve_filter(remote: bool, local: bool) -> BranchFilter:
    """Map the --remote/--local flags to a branch filter."""
    if remote and local:
        raise typer.BadParameter("--remote and --local cannot be used together")
    if remote:
        return BranchFilter.REMOTE_ONLY
    if local:
        return BranchFilter.LOCAL_ONLY
    return BranchFilter.ALL


def print_result(result: DeletionResult) -> None:
    """Show which branches were deleted and which failed."""
    if result.succeeded:
        table = Table(
            title=f"Successfully deleted {len(result.succeeded)} branch(es)",
            show_header=True,
            header_style="bold",
            title_style="bold green",
            show_edge=True,
        )
        table.add_column("Branch", style="cyan", no_wrap=True)
        table.add_column("Where", style="magenta", justify="center")
        for record in result.succeeded:
            table.add_row(record.name, "local" if record.is_local else record.remote)
        console.print()
        console.print(table)

    if result.failed:
        console.print(
            f"\n[yellow]Deleted {len(result.succeeded)}, failed {len(result.failed)}. "
            "Branches that could not be deleted:[/yellow]"
        )
        for record in result.failed:
            console.print(f"  [yellow]• {escape(record.ref)}[/yellow]")
    elif not result.succeeded:
        console.print("\n[yellow]No branches were deleted[/yellow]")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Batch delete git branches."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def branches(
    repo_path: Annotated[Path, typer.Argument(help="Path to git repository")] = Path("."),
    remote: bool = typer.Option(False, "--remote", "-r", help="Only remote branches"),
    local: bool = typer.Option(False, "--local", "-l", help="Only local branches"),
    remote_name: str = typer.Option(DEFAULT_REMOTE, "--remote-name", envvar="GIT_BATCH_REMOTE", help="Remote to list and delete from"),
    workers: int = typer.Option(DEFAULT_MAX_WORKERS, "--workers", min=1, envvar="GIT_BATCH_WORKERS", help="Parallel deletions"),
    timeout: Optional[float] = typer.Option(None, "--timeout", min=0.1, envvar="GIT_BATCH_TIMEOUT", help="Kill git commands after this many seconds"),
    strict: bool = typer.Option(False, "--strict", help="Exit with an error if any deletion failed"),
) -> None:
    """Select branches interactively and delete them."""
    branch_filter = resolve_filter(remote, local)
    try:
        settings = Settings.create(remote_name=remote_name, max_workers=workers, command_timeout=timeout)
    except ValueError as err:
        raise typer.BadParameter(str(err)) from err

    executor = GitExecutor(timeout=settings.command_timeout)
    inventory = BranchInventory(executor, settings)
    annotator = CommitAnnotator(executor)
    orchestrator = DeletionOrchestrator(executor, settings)
    flow = get_selection_flow()

    try:
        inventory.require_repository(repo_path)
        with console.status("Fetching branches..."):
            records = inventory.list_branches(repo_path, branch_filter)
            choices: list[tuple[str, BranchRecord]] = [
                (format_branch_label(index, record, annotator.get_commit_info(repo_path, record.qualified_ref)), record)
                for index, record in enumerate(records, start=1)
            ]
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    if not choices:
        console.print("[yellow]No branches found to delete[/yellow]")
        return

    selected = flow.select("Select branches to delete", choices)
    if not selected:
        console.print("[yellow]No branches selected[/yellow]")
        return

    summary = "About to delete the following branches:\n" + "\n".join(
        f"  • {record.name}" if record.is_local else f"  • {record.remote_ref} (remote)" for record in selected
    )
    if not flow.confirm(summary):
        console.print("\n[yellow]Operation cancelled[/yellow]")
        return

    try:
        with console.status("Deleting branches..."):
            result = orchestrator.delete_branches(repo_path, selected)
    except GitError as err:
        print(f"[red]Error:[/red] {escape(str(err))}")
        raise typer.Exit(code=1) from err

    print_result(result)
    if strict and result.has_failures:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
