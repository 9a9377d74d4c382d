"""KubeForge - Providers command"""

import rich_click as click
from rich.console import Console
from rich.table import Table

from kubeforge.core.config_loader import default_distribution, default_user
from kubeforge.models.target import DISTRIBUTION_FAMILIES, ProviderKind
from kubeforge.providers import PROVIDERS


@click.command(name="providers")
def providers():
    """
    List supported cloud providers and distributions

    Shows the default distribution, the SSH user used when --user and
    --distro are omitted, and the user for --distro ubuntu.
    """
    console = Console()

    table = Table(title="Supported Providers", title_justify="left", padding=(0, 1))
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Default Distro")
    table.add_column("Default User")
    table.add_column("Ubuntu User")
    table.add_column("kubeadm Options", style="dim")

    for kind in ProviderKind:
        distro = default_distribution(kind)
        options = PROVIDERS[kind](None, None).kubeadm_options() or "(none)"
        table.add_row(
            kind.value,
            distro,
            default_user(kind, ""),
            default_user(kind, "ubuntu"),
            options,
        )

    console.print(table)

    families = ", ".join(f"{name} ({family.value})" for name, family in DISTRIBUTION_FAMILIES.items())
    console.print(f"\n[dim]Distributions:[/dim] {families}\n")
