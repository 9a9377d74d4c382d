"""AWS cloud provider integration."""

from typing import List

from kubeforge.constants import AWS_METADATA_URL, CLOUD_CONF_PATH
from kubeforge.models.results import Diagnostic, DiagnosticKind
from kubeforge.models.target import ProviderKind

from .base import BaseProvider


def _metadata(path: str) -> str:
    return f"curl -s {AWS_METADATA_URL}/{path}"


class AWSProvider(BaseProvider):
    """EC2 instances, using the in-tree AWS cloud provider."""

    kind = ProviderKind.AWS
    display_name = "AWS"

    metadata_queries = [
        ("instance-id", _metadata("instance-id")),
        ("instance-type", _metadata("instance-type")),
        ("availability-zone", _metadata("placement/availability-zone")),
        ("region", _metadata("placement/availability-zone") + " | sed 's/[a-z]$//'"),
        ("local-hostname", _metadata("local-hostname")),
        ("public-ipv4", _metadata("public-ipv4")),
    ]

    def configure_integration(self) -> List[Diagnostic]:
        diagnostics = []

        iam = self.session.execute_capturing_both(
            _metadata("iam/security-credentials/")
        )
        if not iam.is_success or not iam.stdout.strip():
            diagnostics.append(
                self._note(
                    Diagnostic(
                        DiagnosticKind.INTEGRATION_WARNING,
                        "No IAM role found for this instance. "
                        "Cloud provider integration may not work correctly.",
                        hint="Attach an IAM role with EC2 permissions to this instance",
                    )
                )
            )

        self._install_cloud_config(
            CLOUD_CONF_PATH,
            "[global]\nKubernetesClusterID=kubernetes",
            secret_name="aws-cloud-provider",
        )
        return diagnostics

    def kubeadm_options(self) -> str:
        return f"--cloud-provider=aws --cloud-config={CLOUD_CONF_PATH}"

    def hostname_command(self) -> str:
        return f"sudo hostnamectl set-hostname $({_metadata('local-hostname')}) || true"

    def describe_integration(self) -> str:
        return "\n".join(
            [
                "For AWS cloud provider integration:",
                "1. Ensure your EC2 instance has an IAM role with the following permissions:",
                "   - AmazonEC2FullAccess",
                "   - AmazonRoute53FullAccess (if using Route53 for DNS)",
                "2. Tag your AWS resources with the following tags:",
                "   - KubernetesCluster=<your-cluster-name>",
                "3. For load balancers, add the following tags to your subnets:",
                "   - kubernetes.io/cluster/<your-cluster-name>=shared",
                "4. For more information, visit:",
                "   https://kubernetes.io/docs/concepts/cluster-administration/cloud-providers/#aws",
            ]
        )
