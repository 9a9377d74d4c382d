"""
Metadata Command

Show what the cloud and the host report about a VM, without changing it.
"""

import rich_click as click
from rich.table import Table

from kubeforge.base import BaseCommand
from kubeforge.providers import get_provider
from kubeforge.services import RemoteSession

from .install import ConnectionOptions
from .options import connection_options


class MetadataCommand(BaseCommand):
    """Collect provider metadata over SSH (best-effort, read-only)."""

    def __init__(self, options: ConnectionOptions, verbose: bool = False, json_output: bool = False):
        super().__init__(verbose=verbose, json_output=json_output)
        self.options = options

    def execute(self) -> None:
        """Execute metadata command."""
        config = self.options.load()
        target, profile = config.target, config.profile

        self.show_header(
            title="Instance Metadata",
            details={"Host": target.address, "Cloud Provider": profile.provider.value},
        )

        logger = self.init_logger(target.host, "metadata")

        with RemoteSession.open(target, logger=logger) as session:
            provider = get_provider(session, profile, logger=logger)
            metadata = provider.collect_metadata()
            has_kubectl = session.command_exists("kubectl")

        if self.json_output:
            self.output_json(
                {
                    "host": target.host,
                    "provider": profile.provider.value,
                    "distribution": profile.distribution,
                    "kubectl_installed": has_kubectl,
                    "metadata": metadata,
                }
            )
            return

        if not metadata:
            self.print_warning("No metadata could be collected")
            self.show_log_path()
            return

        table = Table(title=f"{provider.display_name} metadata", title_justify="left", padding=(0, 1))
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")
        for key, value in metadata.items():
            table.add_row(key, value)

        self.console.print(table)
        self.print_dim(f"kubectl installed: {'yes' if has_kubectl else 'no'}")
        self.show_log_path()


@click.command(name="metadata")
@connection_options
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def metadata(host, port, user, key, password, provider, distro, config_file, verbose, json_output):
    """
    Show cloud and host metadata for a VM

    Queries the provider metadata service and basic host facts. Queries that
    fail are skipped.

    Examples:
        kubeforge metadata --host 203.0.113.10 --key ~/.ssh/id_rsa --provider gcp
        kubeforge metadata --config node.yml --json
    """
    options = ConnectionOptions(
        host=host,
        port=port,
        user=user,
        key=key,
        password=password,
        provider=provider,
        distro=distro,
        config_file=config_file,
    )
    cmd = MetadataCommand(options, verbose=verbose, json_output=json_output)
    cmd.run()
