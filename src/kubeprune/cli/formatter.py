# src/kubeprune/cli/formatter.py
import difflib
from typing import Iterable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kubeprune.core.engine import DocumentReport
from kubeprune.core.models import Resource

# Diagnostics go to stderr so stdout stays a clean manifest stream
console = Console(stderr=True)


class KubeFormatter:
    """
    Renders diffs, per-document reports and resource tables.
    """

    def __init__(self, target: Optional[Console] = None):
        self.console = target or console

    def display_diff(self, original_text: str, cleaned_text: str, file_name: str):
        """
        Renders a colorized unified diff between the original and cleaned manifest.
        """
        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            cleaned_text.splitlines(),
            fromfile=f"Original: {file_name}",
            tofile="Cleaned",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]No fields to prune in {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Pruned: {file_name}", border_style="green"))

    def print_document_table(self, file_name: str, reports: List[DocumentReport]):
        table = Table(title=f"KubePrune Report: {file_name}", show_header=True, header_style="bold magenta")
        table.add_column("#", justify="right")
        table.add_column("Kind")
        table.add_column("Name", style="cyan")
        table.add_column("Status")

        for r in reports:
            color = {"CLEANED": "green", "UNCHANGED": "white"}.get(r.status, "red")
            table.add_row(str(r.index), f"{r.api_version} {r.kind}", r.name,
                          f"[{color}]{r.status}[/{color}]")

        self.console.print(table)

    def print_errors(self, reports: Iterable[DocumentReport]):
        for r in reports:
            if r.error:
                self.console.print(f"[bold red]Error in document {r.index}:[/bold red] {r.error}")

    def print_resources(self, resources: Iterable[Resource]) -> Table:
        table = Table(title="Registered API Resources", header_style="bold magenta")
        table.add_column("API Version", style="cyan")
        table.add_column("Kind")
        table.add_column("Name")
        table.add_column("Namespaced", justify="center")
        table.add_column("Schema", justify="center")

        for resource in resources:
            table.add_row(
                resource.api_version, resource.kind, resource.name,
                "yes" if resource.namespaced else "no",
                "[green]yes[/green]" if resource.schema is not None else "[red]no[/red]",
            )

        self.console.print(table)
        return table
