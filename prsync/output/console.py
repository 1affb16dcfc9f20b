# prsync Console Output
# Rich-based console output for sync results and plans

from collections.abc import Mapping

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from prsync.config.schema import FileMapping, RepositoryRef
from prsync.sync.engine import MappingResult, SyncResult


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def print_plan(self, mappings: Mapping[str, FileMapping], source: RepositoryRef | None = None) -> None:
        """
        Print the files, branches and repositories each mapping will touch.

        Args:
            mappings: Dict of mapping name to mapping.
            source: Source repository, when known.
        """
        if not mappings:
            self._console.print("[dim]No mappings to display[/dim]")
            return

        title = f"Mappings from {source.full_name}" if source else "Mappings"
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Mapping", style="cyan")
        table.add_column("Source")
        table.add_column("Destination")
        table.add_column("Base", style="dim")
        table.add_column("Sync branch")
        table.add_column("Strategy", style="dim")

        for name, mapping in mappings.items():
            table.add_row(
                name,
                mapping.source_file_path,
                f"{mapping.dest_repo}:{mapping.dest_file_path}",
                mapping.dest_branch,
                mapping.base_branch_name,
                mapping.existing_branch_strategy.value,
            )

        self._console.print(table)

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print per-mapping results and a summary panel.

        Args:
            result: Sync result to display.
        """
        self._console.print()

        for mapping_result in result.results:
            self._print_mapping_result(mapping_result)

        self._console.print()

        failed = len(result.failed)
        body = (
            f"Mappings: {len(result.succeeded)}/{result.total} synced, {failed} failed\n"
            f"Pull requests: {result.pull_requests_created} created"
        )
        if result.success:
            self._console.print(Panel(f"[green]Sync completed[/green]\n{body}", title="Summary", border_style="green"))
        else:
            self._console.print(
                Panel(f"[red]Sync completed with errors[/red]\n{body}", title="Summary", border_style="red")
            )

    def _print_mapping_result(self, result: MappingResult) -> None:
        """Print result for a single mapping."""
        mapping = result.mapping
        target = f"{mapping.dest_repo}:{mapping.dest_file_path}"

        if not result.success:
            self._console.print(f"[red]✗[/red] [bold]{escape(result.name)}[/bold] → {target}")
            self._console.print(f"    [red]{result.error_kind}[/red]: {escape(result.error_message or '')}")
            return

        pr = result.pull_request
        verb = "opened" if result.pull_request_created else "already open"
        pr_text = f"PR #{pr.number} {verb}" if pr else "no PR"
        self._console.print(f"[green]✓[/green] [bold]{escape(result.name)}[/bold] → {target} - {pr_text}")

        if self.verbose:
            action = "created" if result.file_created else "updated"
            base = f"base {result.base_branch}"
            if result.base_fallback:
                base += f", {mapping.dest_branch} missing"
            self._console.print(f"    [dim]{action} on {result.working_branch} ({base})[/dim]")
            if pr and pr.html_url:
                self._console.print(f"    [dim]{pr.html_url}[/dim]")


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
