"""
Base Provider Class

Abstract base for all cloud provider integrations.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from kubeforge.exceptions import CommandError, IntegrationError
from kubeforge.models.results import Diagnostic, DiagnosticKind, MetadataMap, describe_failure
from kubeforge.models.target import ProviderKind, TargetProfile
from kubeforge.services.batch_runner import CommandBatchRunner

# Queried on every provider, keyed by the command itself
COMMON_METADATA_COMMANDS = [
    "hostname",
    "uname -a",
    "lscpu | grep '^CPU(s):'",
    "free -m | grep '^Mem:'",
]


class BaseProvider(ABC):
    """
    Abstract cloud provider strategy.

    Provides:
    - Best-effort metadata collection
    - Cloud config file installation
    - Warning collection for unmet integration preconditions
    """

    kind: ProviderKind
    display_name: str = ""

    # (metadata key, shell command)
    metadata_queries: List[Tuple[str, str]] = []

    def __init__(self, session, profile: TargetProfile, logger=None):
        self.session = session
        self.profile = profile
        self.logger = logger

    def collect_metadata(self) -> MetadataMap:
        """
        Collect provider and host metadata.

        Never raises: a failing or empty query leaves its key out.

        Returns:
            Mapping of metadata key to value
        """
        metadata: MetadataMap = {}

        for key, command in self.metadata_queries:
            self._collect_key(metadata, key, command)

        for command in COMMON_METADATA_COMMANDS:
            self._collect_key(metadata, command, command)

        return metadata

    def _collect_key(self, metadata: MetadataMap, key: str, command: str) -> None:
        result = self.session.execute_capturing_both(command)
        value = result.stdout.strip() if result.is_success else ""

        if value:
            metadata[key] = value
            return

        self._note(
            Diagnostic(
                DiagnosticKind.METADATA_GAP,
                f"Failed to get {self.display_name} metadata '{key}'",
                hint=describe_failure(result.error),
            )
        )

    def _note(self, diagnostic: Diagnostic) -> Diagnostic:
        """Log a recoverable diagnostic."""
        if self.logger:
            if diagnostic.kind == DiagnosticKind.METADATA_GAP:
                self.logger.log(str(diagnostic), "WARNING")
            elif diagnostic.kind == DiagnosticKind.INFO:
                self.logger.log(str(diagnostic))
            else:
                self.logger.warning(str(diagnostic))
        return diagnostic

    def _install_cloud_config(self, path: str, content: str, secret_name: str = None) -> None:
        """
        Write a cloud config file, restrict it, and register it as a kube-system secret.

        Secret creation is allowed to fail; the control plane may not be ready yet.

        Raises:
            IntegrationError: If the file cannot be written or restricted
        """
        commands = [
            f"cat <<EOF | sudo tee {path}\n{content}\nEOF",
            f"sudo chmod 600 {path}",
        ]
        if secret_name:
            commands.append(
                f"kubectl -n kube-system create secret generic {secret_name} "
                f"--from-file={path} || true"
            )

        try:
            CommandBatchRunner(self.session).run_all(commands)
        except CommandError as e:
            raise IntegrationError(
                self.display_name, f"failed to install {path}", context=e.message
            ) from e

    @abstractmethod
    def configure_integration(self) -> List[Diagnostic]:
        """
        Set up the Kubernetes cloud provider integration.

        Returns:
            Warnings for unmet preconditions

        Raises:
            IntegrationError: If a required step fails
        """

    @abstractmethod
    def kubeadm_options(self) -> str:
        """Extra flags for ``kubeadm init``; empty when there is no native integration."""

    @abstractmethod
    def hostname_command(self) -> str:
        """Command that aligns the node hostname with the cloud's view of it."""

    @abstractmethod
    def describe_integration(self) -> str:
        """Human-facing notes on finishing the integration."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.profile!r})"
