"""Console reporter using Rich library for formatted CLI output.

Provides:
- Provider headers
- One line per signed URL, with the cross-check verdict when available
- Final summary table across all providers
"""

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from s3presign.models import CheckStatus, ProviderResult, SignedUrlResult
from s3presign.reporters.base import Reporter

CHECK_LABELS = {
    CheckStatus.MATCH: "[green]MATCH[/green]",
    CheckStatus.MISMATCH: "[red]MISMATCH[/red]",
    CheckStatus.SKIPPED: "[dim]-[/dim]",
    CheckStatus.ERROR: "[yellow]ERROR[/yellow]",
}


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Args:
        quiet: If True, suppress per-URL output (only show summary)
    """

    def __init__(self, quiet: bool = False):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = Console(legacy_windows=True)
        self.quiet = quiet

    def on_provider_start(self, provider_name: str) -> None:
        """Displays a header with the provider name."""
        if self.quiet:
            return
        self.console.print()
        self.console.print(
            Rule(f"[bold cyan]Signing: {provider_name}[/bold cyan]", style="cyan", characters="-")
        )

    def on_url_signed(self, provider_name: str, result: SignedUrlResult) -> None:
        """Displays the URL, or the reason it was rejected."""
        if self.quiet:
            return

        if result.url is None:
            self.console.print(f"  [red][REJECTED][/red]: {result.object_key}")
        else:
            self.console.print(f"  [green][SIGNED][/green]: {result.object_key}")
            # soft_wrap keeps the URL on one line so it can be copied
            self.console.print(result.url, soft_wrap=True, highlight=False, markup=False)

        if result.check != CheckStatus.SKIPPED:
            self.console.print(f"     botocore: {CHECK_LABELS[result.check]}")

        if result.error_message:
            self.console.print(f"     [dim]{result.error_message}[/dim]")

    def on_provider_complete(self, result: ProviderResult) -> None:
        """Displays provider-level errors."""
        if result.error_message:
            self.console.print(
                f"{result.provider_name}: [bold yellow]ERROR[/bold yellow]"
            )
            self.console.print(f"   [dim red]{result.error_message}[/dim red]")

    def on_run_complete(self, results: dict[str, ProviderResult]) -> None:
        """Displays a summary table of every signed URL."""
        if not results:
            self.console.print("[yellow]No results to display.[/yellow]")
            return

        self.console.print()
        self.console.print(
            Rule("[bold]Presigned URL Summary[/bold]", style="magenta", characters="-")
        )

        table = Table(
            title="",
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )

        table.add_column("Provider", style="cyan", no_wrap=True)
        table.add_column("Key", no_wrap=True)
        table.add_column("Method", justify="center", no_wrap=True)
        table.add_column("Expires", justify="center", no_wrap=True)
        table.add_column("Status", justify="center", no_wrap=True)
        table.add_column("botocore", justify="center", no_wrap=True)

        for provider_result in results.values():
            if provider_result.error_message and not provider_result.urls:
                table.add_row(
                    provider_result.provider_name, "-", "-", "-",
                    "[yellow]ERROR[/yellow]", CHECK_LABELS[CheckStatus.SKIPPED],
                )
                continue

            for url_result in provider_result.urls:
                status = "[green]SIGNED[/green]" if url_result.url else "[red]REJECTED[/red]"
                table.add_row(
                    provider_result.provider_name,
                    url_result.object_key,
                    url_result.http_method,
                    url_result.expires_at,
                    status,
                    CHECK_LABELS[url_result.check],
                )

        self.console.print(table)
        self.console.print()
