"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Tables and panels are reused by several commands.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from deploy_to.core.domain.models import DeployableEntry, ServerRecord


def print_banner(console: Console) -> None:
    """Print the welcome banner (interactive commands only, never with script output)."""

    title = Text("deploy-to", style="bold cyan")
    subtitle = Text("Changed files • Deployment scripts", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_servers_table(servers: Sequence[ServerRecord]) -> Table:
    table = Table(title="Deployment targets")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Aliases", style="white")
    table.add_column("Host", style="magenta")
    table.add_column("Remote root", style="green")
    for server in servers:
        table.add_row(
            escape(server.name),
            escape(", ".join(server.aliases or [])),
            escape(server.host or "-"),
            escape(server.remote_root or "-"),
        )
    return table


def build_changes_table(entries: Sequence[DeployableEntry], *, title: str = "Changed files") -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Local", style="white")
    table.add_column("Remote dir", style="green")
    for index, entry in enumerate(entries, start=1):
        table.add_row(str(index), escape(entry.local), escape(entry.remote or "./"))
    return table


def build_summary_panel(*, server: ServerRecord, count: int, since: str, destination: str) -> Panel:
    body = Text()
    body.append("Server: ", style="bold")
    body.append(f"{server.name}\n")
    body.append("Files: ", style="bold")
    body.append(f"{count}\n")
    body.append("Since: ", style="bold")
    body.append(f"{since}\n")
    body.append("Script: ", style="bold")
    body.append(destination)
    return Panel(body, title=Text("Deployment script", style="bold yellow"), border_style="yellow")
