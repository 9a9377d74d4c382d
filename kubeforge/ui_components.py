"""
KubeForge - UI Components & Branding
Standardized headers, panels, and UI elements
"""

from rich.console import Console
from rich.panel import Panel

BRAND_COLOR = "cyan"

PREFIX = "[bold color(214)]kubeforge[/bold color(214)] [dim]›[/dim]"


def show_header(
    title: str,
    subtitle: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized KubeForge command header.

    Args:
        title: Main title (e.g., "Install Kubernetes")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Install Kubernetes",
            details={"Cloud Provider": "aws", "Linux Distribution": "ubuntu"}
        )
    """
    if console is None:
        console = Console()

    console.print(f" {PREFIX} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f" {PREFIX} [dim]{subtitle}[/dim]")

    if details:
        for key, value in details.items():
            console.print(f" {PREFIX} {key}: [cyan]{value}[/cyan]")

    console.print()


def show_info_panel(title: str, body: str, console: Console = None):
    """Display informational text in a bordered panel."""
    if console is None:
        console = Console()

    console.print()
    console.print(
        Panel(
            body,
            title=f"[bold]{title}[/bold]",
            title_align="left",
            border_style=BRAND_COLOR,
            padding=(1, 2),
        )
    )
