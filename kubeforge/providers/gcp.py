"""GCP cloud provider integration."""

from typing import List

from kubeforge.constants import CLOUD_CONF_PATH, GCP_COMPUTE_SCOPE, GCP_METADATA_URL
from kubeforge.exceptions import IntegrationError
from kubeforge.models.results import Diagnostic, DiagnosticKind
from kubeforge.models.target import ProviderKind

from .base import BaseProvider


def _metadata(path: str) -> str:
    return f"curl -s -H 'Metadata-Flavor: Google' {GCP_METADATA_URL}/{path}"


class GCPProvider(BaseProvider):
    """Compute Engine VMs, using the in-tree GCE cloud provider."""

    kind = ProviderKind.GCP
    display_name = "GCP"

    metadata_queries = [
        ("instance-id", _metadata("instance/id")),
        ("instance-name", _metadata("instance/name")),
        ("zone", _metadata("instance/zone") + " | cut -d/ -f4"),
        ("machine-type", _metadata("instance/machine-type") + " | cut -d/ -f4"),
        ("project-id", _metadata("project/project-id")),
        (
            "external-ip",
            _metadata("instance/network-interfaces/0/access-configs/0/external-ip"),
        ),
    ]

    def configure_integration(self) -> List[Diagnostic]:
        diagnostics = []

        scopes = self.session.execute_capturing_both(
            _metadata("instance/service-accounts/default/scopes")
        )
        if not scopes.is_success:
            diagnostics.append(
                self._note(
                    Diagnostic(
                        DiagnosticKind.INTEGRATION_WARNING,
                        "Unable to verify service account scopes. "
                        "Cloud provider integration may not work correctly.",
                    )
                )
            )
        elif GCP_COMPUTE_SCOPE not in scopes.stdout:
            diagnostics.append(
                self._note(
                    Diagnostic(
                        DiagnosticKind.INTEGRATION_WARNING,
                        "VM service account may not have compute scope. "
                        "Cloud provider integration may not work correctly.",
                        hint="Ensure the VM's service account has the compute.networkUser role",
                    )
                )
            )

        project = self.session.execute_capturing_both(_metadata("project/project-id"))
        project_id = project.stdout.strip()
        if not project.is_success or not project_id:
            raise IntegrationError(
                self.display_name,
                "failed to get GCP project ID",
                context=str(project.error) if project.error else "empty response",
            )

        self._install_cloud_config(
            CLOUD_CONF_PATH,
            f"[global]\nproject-id = {project_id}\nnode-tags = k8s-node\nnode-instance-prefix = k8s",
            secret_name="gcp-cloud-provider",
        )
        return diagnostics

    def kubeadm_options(self) -> str:
        return f"--cloud-provider=gce --cloud-config={CLOUD_CONF_PATH}"

    def hostname_command(self) -> str:
        return (
            f"sudo hostnamectl set-hostname $({_metadata('instance/hostname')} "
            "| cut -d. -f1) || true"
        )

    def describe_integration(self) -> str:
        return "\n".join(
            [
                "For GCP cloud provider integration:",
                "1. Ensure your VM instance has the following OAuth scopes:",
                "   - compute-rw",
                "   - storage-ro",
                "2. The service account associated with the VM should have:",
                "   - Compute Admin role",
                "   - Network Admin role",
                "3. For load balancers, ensure your network is properly configured with:",
                "   - Proper firewall rules for health checks (TCP:10256)",
                "4. For more information, visit:",
                "   https://kubernetes.io/docs/concepts/cluster-administration/cloud-providers/#gce",
            ]
        )
