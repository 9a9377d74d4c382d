"""Tests for the provisioning pipeline."""

import socket
from unittest.mock import Mock

import pytest

from kubeforge.exceptions import CommandError, IntegrationError, StageError
from kubeforge.models.results import DiagnosticKind
from kubeforge.models.target import ProviderKind, TargetProfile
from kubeforge.providers import AWSProvider
from kubeforge.services.pipeline import ProvisioningPipeline

ALL_STAGES = [
    "Prerequisites",
    "ContainerRuntime",
    "KubernetesComponents",
    "ClusterInit",
    "CloudIntegration",
]

JOIN = "kubeadm join 10.0.0.5:6443 --token abc.def --discovery-token-ca-cert-hash sha256:01"


@pytest.fixture
def healthy_outputs():
    return {
        "token create": JOIN + "\n",
        "iam/security-credentials/": "node-role",
    }


class TestRun:
    """Test ProvisioningPipeline.run."""

    def test_all_stages_in_order(self, fake_session, ubuntu_aws, healthy_outputs):
        session = fake_session(outputs=healthy_outputs)

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.succeeded
        assert result.stage_names == ALL_STAGES
        assert result.failed_stage is None
        assert result.join_command == JOIN
        assert result.diagnostics == []

    def test_commands_follow_stage_order(self, fake_session, ubuntu_aws, healthy_outputs):
        session = fake_session(outputs=healthy_outputs)

        ProvisioningPipeline.create(session, ubuntu_aws).run()

        def first(text):
            return next(i for i, c in enumerate(session.commands) if text in c)

        assert (
            first("swapoff")
            < first("containerd.io")
            < first("kubelet kubeadm kubectl")
            < first("kubeadm init")
            < first("kube-flannel")
            < first("token create")
            < first("sudo tee /etc/kubernetes/cloud.conf")
        )

    def test_init_uses_provider_options(self, fake_session, ubuntu_aws):
        session = fake_session()

        ProvisioningPipeline.create(session, ubuntu_aws).run()

        [init] = session.commands_containing("kubeadm init")
        assert init.endswith("--cloud-provider=aws --cloud-config=/etc/kubernetes/cloud.conf")

    def test_oracle_init_has_no_cloud_flags(self, fake_session):
        profile = TargetProfile(provider=ProviderKind.ORACLE, distribution="oracle")
        session = fake_session()

        ProvisioningPipeline.create(session, profile).run()

        assert session.commands_containing("kubeadm init") == [
            "sudo kubeadm init --pod-network-cidr=10.244.0.0/16"
        ]

    def test_runtime_failure_stops_before_kubernetes(self, fake_session, ubuntu_aws):
        session = fake_session(failures={"containerd.io": 100})

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert not result.succeeded
        assert result.stage_names == ALL_STAGES[:2]
        assert result.failed_stage.stage_name == "ContainerRuntime"
        assert isinstance(result.failed_stage.error, CommandError)
        assert result.failed_stage.error.exit_status == 100
        assert not session.commands_containing("kubelet")

    def test_prerequisite_failure_is_first_stage(self, fake_session, ubuntu_aws):
        session = fake_session(failures={"modprobe overlay": 1})

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.stage_names == ["Prerequisites"]
        assert result.failed_stage.error.index == 3

    def test_init_failure_skips_post_init(self, fake_session, ubuntu_aws):
        session = fake_session(failures={"kubeadm init": 1})

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.failed_stage.stage_name == "ClusterInit"
        assert not session.commands_containing("kube-flannel")
        assert not session.commands_containing("token create")

    def test_dropped_connection_aborts(self, fake_session, ubuntu_aws):
        session = fake_session(dropped=["apt-mark hold"])

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.failed_stage.stage_name == "KubernetesComponents"
        assert result.failed_stage.error.exit_status is None

    def test_join_token_failure_is_not_fatal(self, fake_session, ubuntu_aws):
        session = fake_session(
            failures={"token create": 1},
            outputs={"iam/security-credentials/": "node-role"},
        )

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.succeeded
        assert result.join_command is None
        assert [d.kind for d in result.diagnostics] == [DiagnosticKind.JOIN_TOKEN]

    @pytest.mark.parametrize("error", [OSError(), socket.timeout(), OSError("Socket is closed\nmore")])
    def test_join_token_transport_error_is_not_fatal(self, fake_session, ubuntu_aws, error):
        session = fake_session(
            errors={"token create": error},
            outputs={"iam/security-credentials/": "node-role"},
        )

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.succeeded
        [diagnostic] = result.diagnostics
        assert diagnostic.kind == DiagnosticKind.JOIN_TOKEN
        assert diagnostic.hint
        assert "\n" not in diagnostic.hint

    def test_integration_failure_aborts_last_stage(self, fake_session, ubuntu_aws):
        session = fake_session(failures={"chmod 600": 1})

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.stage_names == ALL_STAGES
        assert result.failed_stage.stage_name == "CloudIntegration"
        assert isinstance(result.failed_stage.error, IntegrationError)

    def test_integration_warnings_reported(self, fake_session, ubuntu_aws):
        session = fake_session(outputs={"token create": JOIN})

        result = ProvisioningPipeline.create(session, ubuntu_aws).run()

        assert result.succeeded
        [warning] = result.diagnostics
        assert warning.kind == DiagnosticKind.INTEGRATION_WARNING

    def test_progress_logged(self, fake_session, ubuntu_aws, healthy_outputs):
        logger = Mock()
        session = fake_session(outputs=healthy_outputs)

        ProvisioningPipeline.create(session, ubuntu_aws, logger=logger).run()

        assert logger.step.call_count == 5
        assert logger.success.call_count == 5
        logger.log_error.assert_not_called()

    def test_failure_logged(self, fake_session, ubuntu_aws):
        logger = Mock()
        session = fake_session(failures={"containerd.io": 100})

        ProvisioningPipeline.create(session, ubuntu_aws, logger=logger).run()

        logger.log_error.assert_called_once()
        assert "container runtime" in logger.log_error.call_args.args[0]


class TestRunOrRaise:
    """Test ProvisioningPipeline.run_or_raise."""

    def test_raises_stage_error(self, fake_session, ubuntu_aws):
        session = fake_session(failures={"containerd.io": 100})

        with pytest.raises(StageError) as exc_info:
            ProvisioningPipeline.create(session, ubuntu_aws).run_or_raise()

        assert exc_info.value.stage_name == "ContainerRuntime"
        assert isinstance(exc_info.value.cause, CommandError)

    def test_returns_result_on_success(self, fake_session, ubuntu_aws, healthy_outputs):
        session = fake_session(outputs=healthy_outputs)

        result = ProvisioningPipeline.create(session, ubuntu_aws).run_or_raise()

        assert result.succeeded


def test_create_selects_provider(fake_session, ubuntu_aws):
    pipeline = ProvisioningPipeline.create(fake_session(), ubuntu_aws)

    assert isinstance(pipeline.provider, AWSProvider)
