"""Oracle Cloud support (no native Kubernetes cloud provider)."""

from typing import List

from kubeforge.constants import OCI_CONF_PATH
from kubeforge.models.results import Diagnostic, DiagnosticKind
from kubeforge.models.target import ProviderKind

from .base import BaseProvider

OCI_CCM_URL = "https://github.com/oracle/oci-cloud-controller-manager"


class OracleProvider(BaseProvider):
    """Oracle Cloud instances. Writes a placeholder config only."""

    kind = ProviderKind.ORACLE
    display_name = "Oracle Cloud"

    # No metadata service is queried; plain system queries instead
    metadata_queries = [
        (
            "ip-addr",
            "ip addr show | grep 'inet ' | grep -v '127.0.0.1' | awk '{print $2}' | cut -d/ -f1",
        ),
        (
            "os-version",
            "cat /etc/os-release | grep PRETTY_NAME | cut -d= -f2 | tr -d '\"'",
        ),
    ]

    def configure_integration(self) -> List[Diagnostic]:
        diagnostic = self._note(
            Diagnostic(
                DiagnosticKind.INFO,
                "Oracle Cloud doesn't have a native Kubernetes cloud provider integration",
                hint=f"install the Oracle Cloud Controller Manager: {OCI_CCM_URL}",
            )
        )

        self._install_cloud_config(
            OCI_CONF_PATH,
            "# Oracle Cloud configuration\n"
            f"# See {OCI_CCM_URL} for more information",
        )
        return [diagnostic]

    def kubeadm_options(self) -> str:
        return ""

    def hostname_command(self) -> str:
        return "sudo hostnamectl set-hostname $(hostname) || true"

    def describe_integration(self) -> str:
        return "\n".join(
            [
                "For Oracle Cloud integration:",
                "1. Oracle Cloud doesn't have a native Kubernetes cloud provider.",
                "2. For load balancer and volume provisioning support:",
                f"   - Install the Oracle Cloud Controller Manager from: {OCI_CCM_URL}",
                "   - Follow the instructions to create a configuration file with the required OCI credentials",
                "3. To set up cloud storage:",
                f"   - Install the Oracle Cloud Storage Provisioner: {OCI_CCM_URL}/blob/master/docs/volume-provisioner.md",
                "4. For networking, ensure your security lists allow:",
                "   - Pod-to-Pod communication",
                "   - NodePort services (30000-32767)",
                "   - Control plane communication (6443, 10250-10252)",
            ]
        )
