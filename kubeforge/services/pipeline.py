"""Ordered provisioning stages that turn a bare VM into a Kubernetes node."""

import time
from typing import Callable, List, Optional, Tuple

from kubeforge.core import catalogs
from kubeforge.exceptions import KubeForgeError, StageError
from kubeforge.models.results import (
    Diagnostic,
    DiagnosticKind,
    PipelineResult,
    StageResult,
    describe_failure,
)
from kubeforge.models.target import TargetProfile
from kubeforge.services.batch_runner import CommandBatchRunner

StageFn = Callable[[], List[Diagnostic]]


class ProvisioningPipeline:
    """
    Runs the five provisioning stages in order over a single RemoteSession.

    A stage runs only if the previous one succeeded. The first failure ends
    the run; nothing is retried and nothing is rolled back.
    """

    PREREQUISITES = "Prerequisites"
    CONTAINER_RUNTIME = "ContainerRuntime"
    KUBERNETES_COMPONENTS = "KubernetesComponents"
    CLUSTER_INIT = "ClusterInit"
    CLOUD_INTEGRATION = "CloudIntegration"

    STAGE_TITLES = {
        PREREQUISITES: "Installing prerequisites",
        CONTAINER_RUNTIME: "Installing container runtime",
        KUBERNETES_COMPONENTS: "Installing Kubernetes components",
        CLUSTER_INIT: "Initializing Kubernetes cluster",
        CLOUD_INTEGRATION: "Configuring cloud provider integration",
    }

    def __init__(self, session, profile: TargetProfile, provider, logger=None):
        """
        Initialize pipeline.

        Args:
            session: Open RemoteSession
            profile: Target profile selecting the command catalogs
            provider: Provider strategy for the profile
            logger: Optional InstallLogger
        """
        self.session = session
        self.profile = profile
        self.provider = provider
        self.logger = logger
        self.runner = CommandBatchRunner(session)
        self.join_command: Optional[str] = None

    @classmethod
    def create(cls, session, profile: TargetProfile, logger=None) -> "ProvisioningPipeline":
        """Build a pipeline with the provider strategy selected from the profile."""
        from kubeforge.providers import get_provider

        provider = get_provider(session, profile, logger=logger)
        return cls(session, profile, provider, logger=logger)

    def stages(self) -> List[Tuple[str, StageFn]]:
        return [
            (self.PREREQUISITES, self.install_prerequisites),
            (self.CONTAINER_RUNTIME, self.install_container_runtime),
            (self.KUBERNETES_COMPONENTS, self.install_kubernetes_components),
            (self.CLUSTER_INIT, self.initialize_cluster),
            (self.CLOUD_INTEGRATION, self.configure_cloud_integration),
        ]

    # Command selection

    def prerequisite_commands(self) -> List[str]:
        return catalogs.prerequisite_commands(self.profile) + [
            self.provider.hostname_command()
        ]

    def container_runtime_commands(self) -> List[str]:
        return catalogs.container_runtime_commands(self.profile)

    def kubernetes_commands(self) -> List[str]:
        return catalogs.kubernetes_commands(self.profile)

    def init_command(self) -> str:
        return catalogs.kubeadm_init_command(self.provider.kubeadm_options())

    # Stages

    def install_prerequisites(self) -> List[Diagnostic]:
        self.runner.run_all(self.prerequisite_commands())
        return []

    def install_container_runtime(self) -> List[Diagnostic]:
        self.runner.run_all(self.container_runtime_commands())
        return []

    def install_kubernetes_components(self) -> List[Diagnostic]:
        self.runner.run_all(self.kubernetes_commands())
        return []

    def initialize_cluster(self) -> List[Diagnostic]:
        self.session.execute(self.init_command())
        self.runner.run_all(catalogs.POST_INIT_COMMANDS)

        # Only needed to add more nodes later
        join = self.session.execute_capturing_both(catalogs.JOIN_TOKEN_COMMAND)
        if join.is_success and join.stdout.strip():
            self.join_command = join.stdout.strip()
            return []

        diagnostic = Diagnostic(
            DiagnosticKind.JOIN_TOKEN,
            "Could not create join command",
            hint=describe_failure(join.error),
        )
        if self.logger:
            self.logger.warning(str(diagnostic))
        return [diagnostic]

    def configure_cloud_integration(self) -> List[Diagnostic]:
        return self.provider.configure_integration()

    # Orchestration

    def run(self) -> PipelineResult:
        """
        Run all stages in order, stopping at the first failure.

        Returns:
            PipelineResult; ``failed_stage`` is set when the run aborted
        """
        result = PipelineResult()

        for name, stage in self.stages():
            title = self.STAGE_TITLES[name]
            if self.logger:
                self.logger.step(title)

            start_time = time.time()
            try:
                diagnostics = stage()
            except KubeForgeError as e:
                result.results.append(
                    StageResult(
                        stage_name=name,
                        succeeded=False,
                        error=e,
                        duration_seconds=time.time() - start_time,
                    )
                )
                if self.logger:
                    self.logger.log_error(f"{title} failed", context=str(e))
                return result

            result.results.append(
                StageResult(
                    stage_name=name,
                    succeeded=True,
                    output=self.join_command if name == self.CLUSTER_INIT else None,
                    diagnostics=diagnostics,
                    duration_seconds=time.time() - start_time,
                )
            )
            if self.logger:
                self.logger.success(f"{title} completed successfully")

        result.join_command = self.join_command
        return result

    def run_or_raise(self) -> PipelineResult:
        """
        Run all stages; raise on the first failure.

        Raises:
            StageError: Carrying the failed stage name and the originating error
        """
        result = self.run()
        failed = result.failed_stage
        if failed is not None:
            raise StageError(failed.stage_name, failed.error) from failed.error
        return result
