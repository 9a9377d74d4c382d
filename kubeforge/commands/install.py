"""
Install Command

Provision a remote VM into a single-node Kubernetes cluster.
"""

from dataclasses import dataclass
from typing import Optional

import rich_click as click

from kubeforge.base import BaseCommand
from kubeforge.core.config_loader import InstallConfig, load_install_config
from kubeforge.models.results import DiagnosticKind, PipelineResult
from kubeforge.models.ssh import ConnectionTarget
from kubeforge.services import ProvisioningPipeline, RemoteSession
from kubeforge.ui_components import show_info_panel

from .options import connection_options


@dataclass
class ConnectionOptions:
    """Raw connection options from the command line."""

    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    key: Optional[str] = None
    password: Optional[str] = None
    provider: Optional[str] = None
    distro: Optional[str] = None
    config_file: Optional[str] = None

    def load(self) -> InstallConfig:
        """Validate options (merged over the config file, if any)."""
        return load_install_config(
            self.config_file,
            host=self.host,
            port=self.port,
            user=self.user,
            key=self.key,
            password=self.password,
            provider=self.provider,
            distro=self.distro,
        )


class InstallCommand(BaseCommand):
    """
    Install Kubernetes on a remote host.

    Features:
    - One SSH session for the whole install, always closed on exit
    - Stage-by-stage progress with fail-fast abort
    - Provider-specific follow-up information
    """

    def __init__(self, options: ConnectionOptions, verbose: bool = False):
        super().__init__(verbose=verbose)
        self.options = options

    def execute(self) -> None:
        """Execute install command."""
        config = self.options.load()
        target, profile = config.target, config.profile

        self.show_header(
            title="Kubernetes Cloud Installer",
            details={
                "Host": target.address,
                "User": target.user,
                "Cloud Provider": profile.provider.value,
                "Linux Distribution": profile.distribution,
            },
        )

        logger = self.init_logger(target.host, "install")

        with RemoteSession.open(target, logger=logger) as session:
            logger.success("Connected to remote host successfully")

            pipeline = ProvisioningPipeline.create(session, profile, logger=logger)
            result = pipeline.run()

        if result.failed_stage is not None:
            # Already reported by the pipeline
            self.show_log_path()
            raise SystemExit(1)

        self._show_summary(target, pipeline, result)

    def _show_summary(
        self, target: ConnectionTarget, pipeline: ProvisioningPipeline, result: PipelineResult
    ) -> None:
        warnings = [
            d for d in result.diagnostics if d.kind != DiagnosticKind.INFO
        ]

        show_info_panel(
            f"{pipeline.provider.display_name} Cloud Provider Information",
            pipeline.provider.describe_integration(),
            console=self.console,
        )

        if result.join_command:
            self.console.print(
                "\n[bold]Use the following command to join other nodes to the cluster:[/bold]"
            )
            self.console.print(f"  {result.join_command}", style="cyan", markup=False, highlight=False)

        if warnings:
            self.console.print(f"\n[yellow]Completed with {len(warnings)} warning(s):[/yellow]")
            for diagnostic in warnings:
                self.print_warning(str(diagnostic))

        ssh_hint = f"ssh {target.connection_string}"
        if target.uses_key:
            ssh_hint = f"ssh -i {target.key_path} {target.connection_string}"
        if target.port != 22:
            ssh_hint += f" -p {target.port}"

        self.console.print()
        self.print_success("Kubernetes installation completed successfully!")
        self.console.print("\n[bold]To access your Kubernetes cluster:[/bold]")
        self.console.print(f"  1. SSH into your VM:    [cyan]{ssh_hint}[/cyan]")
        self.console.print("  2. Check nodes status:  [cyan]kubectl get nodes[/cyan]")
        self.console.print(
            "  3. Deploy an application example: [cyan]kubectl create deployment nginx --image=nginx[/cyan]"
        )
        self.console.print(
            "  4. Expose the deployment: [cyan]kubectl expose deployment nginx --port=80 --type=NodePort[/cyan]"
        )
        self.show_log_path()


@click.command(name="install")
@connection_options
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
def install(host, port, user, key, password, provider, distro, config_file, verbose):
    """
    Install Kubernetes on a remote VM

    Connects over SSH and runs, in order: prerequisites, container runtime,
    Kubernetes components, cluster init and cloud provider integration.
    Stops at the first failing stage.

    Examples:
        # Ubuntu on AWS with a key
        kubeforge install --host 203.0.113.10 --key ~/.ssh/id_rsa --provider aws --distro ubuntu

        # Azure VM with a password
        kubeforge install --host 203.0.113.20 --password s3cret --provider azure

        # Options from a file
        kubeforge install --config node.yml
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
    cmd = InstallCommand(options, verbose=verbose)
    cmd.run()
