"""Azure cloud provider integration."""

import json
from typing import List

from kubeforge.constants import (
    AZURE_JSON_PATH,
    AZURE_METADATA_API_VERSION,
    AZURE_METADATA_URL,
)
from kubeforge.models.results import Diagnostic, DiagnosticKind
from kubeforge.models.target import ProviderKind

from .base import BaseProvider


def _metadata(path: str) -> str:
    url = f"{AZURE_METADATA_URL}/instance/{path}?api-version={AZURE_METADATA_API_VERSION}&format=text"
    return f"curl -s -H Metadata:true '{url}'"


class AzureProvider(BaseProvider):
    """Azure VMs, using managed identity and instance metadata."""

    kind = ProviderKind.AZURE
    display_name = "Azure"

    metadata_queries = [
        ("vm-name", _metadata("compute/name")),
        ("resource-group", _metadata("compute/resourceGroupName")),
        ("subscription-id", _metadata("compute/subscriptionId")),
        ("location", _metadata("compute/location")),
        ("vm-size", _metadata("compute/vmSize")),
        (
            "public-ipv4",
            _metadata("network/interface/0/ipv4/ipAddress/0/publicIpAddress"),
        ),
    ]

    REQUIRED_METADATA = ("subscription-id", "resource-group", "location")

    def configure_integration(self) -> List[Diagnostic]:
        diagnostics = []
        metadata = self.collect_metadata()

        missing = [key for key in self.REQUIRED_METADATA if not metadata.get(key)]
        if missing:
            diagnostics.append(
                self._note(
                    Diagnostic(
                        DiagnosticKind.INTEGRATION_WARNING,
                        "Azure metadata incomplete. "
                        "Cloud provider integration may not work correctly.",
                        hint=f"missing: {', '.join(missing)}",
                    )
                )
            )

        cloud_config = {
            "cloud": "AzurePublicCloud",
            "tenantId": "",
            "subscriptionId": metadata.get("subscription-id", ""),
            "resourceGroup": metadata.get("resource-group", ""),
            "location": metadata.get("location", ""),
            "useManagedIdentityExtension": True,
            "useInstanceMetadata": True,
        }
        self._install_cloud_config(
            AZURE_JSON_PATH,
            json.dumps(cloud_config, indent=2),
            secret_name="azure-cloud-provider",
        )
        return diagnostics

    def kubeadm_options(self) -> str:
        return f"--cloud-provider=azure --cloud-config={AZURE_JSON_PATH}"

    def hostname_command(self) -> str:
        return f"sudo hostnamectl set-hostname $({_metadata('compute/name')}) || true"

    def describe_integration(self) -> str:
        return "\n".join(
            [
                "For Azure cloud provider integration:",
                "1. Ensure your VM has a Managed Identity with:",
                "   - Contributor role on the resource group",
                "   - Network Contributor role (for load balancer configuration)",
                "2. For load balancers, ensure your network is properly configured with:",
                "   - Network security group allowing load balancer health checks",
                "   - Firewall rules allowing port 10256 for health checks",
                "3. For multi-node clusters, all VMs should be in the same resource group",
                "4. For more information, visit:",
                "   https://kubernetes.io/docs/concepts/cluster-administration/cloud-providers/#azure",
            ]
        )
