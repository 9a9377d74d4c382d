"""Tests for cloud provider strategies."""

from unittest.mock import Mock

import pytest

from kubeforge.constants import AZURE_JSON_PATH, CLOUD_CONF_PATH, GCP_COMPUTE_SCOPE, OCI_CONF_PATH
from kubeforge.exceptions import IntegrationError
from kubeforge.models.results import DiagnosticKind
from kubeforge.models.target import ProviderKind, TargetProfile
from kubeforge.providers import (
    COMMON_METADATA_COMMANDS,
    PROVIDERS,
    AWSProvider,
    AzureProvider,
    GCPProvider,
    OracleProvider,
    get_provider,
)


def make_provider(cls, session, distribution="ubuntu", logger=None):
    profile = TargetProfile(provider=cls.kind, distribution=distribution)
    return cls(session, profile, logger=logger)


class TestRegistry:
    """Test provider selection."""

    @pytest.mark.parametrize(
        "kind,cls",
        [
            (ProviderKind.AWS, AWSProvider),
            (ProviderKind.GCP, GCPProvider),
            (ProviderKind.AZURE, AzureProvider),
            (ProviderKind.ORACLE, OracleProvider),
        ],
    )
    def test_get_provider(self, fake_session, kind, cls):
        profile = TargetProfile(provider=kind, distribution="ubuntu")

        provider = get_provider(fake_session(), profile)

        assert type(provider) is cls
        assert provider.profile == profile

    def test_every_kind_registered(self):
        assert set(PROVIDERS) == set(ProviderKind)

    def test_only_oracle_has_no_kubeadm_options(self):
        options = {kind: cls(None, None).kubeadm_options() for kind, cls in PROVIDERS.items()}

        assert options[ProviderKind.ORACLE] == ""
        assert all(options[kind] for kind in options if kind != ProviderKind.ORACLE)

    def test_integration_descriptions_are_distinct(self):
        descriptions = [cls(None, None).describe_integration() for cls in PROVIDERS.values()]

        assert all(descriptions)
        assert len(set(descriptions)) == len(descriptions)


class TestCollectMetadata:
    """Test best-effort metadata collection."""

    @pytest.mark.parametrize("cls", list(PROVIDERS.values()))
    def test_all_queries_failing_yields_empty_map(self, fake_session, cls):
        session = fake_session(dropped=[""])

        metadata = make_provider(cls, session).collect_metadata()

        assert metadata == {}
        assert len(session.commands) == len(cls.metadata_queries) + len(COMMON_METADATA_COMMANDS)

    def test_partial_failure_keeps_successful_keys(self, fake_session):
        session = fake_session(
            outputs={"meta-data/instance-id": "i-0abc\n", "uname -a": "Linux node 6.1\n"},
            failures={"instance-type": 22},
        )

        metadata = make_provider(AWSProvider, session).collect_metadata()

        assert metadata["instance-id"] == "i-0abc"
        assert metadata["uname -a"] == "Linux node 6.1"
        assert "instance-type" not in metadata

    def test_empty_values_are_omitted(self, fake_session):
        session = fake_session(outputs={"instance/name": "   \n"})

        metadata = make_provider(GCPProvider, session).collect_metadata()

        assert "instance-name" not in metadata

    def test_gaps_are_logged_as_warnings(self, fake_session):
        logger = Mock()
        session = fake_session(dropped=["os-release"])

        make_provider(OracleProvider, session, logger=logger).collect_metadata()

        warnings = [c for c in logger.log.call_args_list if c.args[1:] == ("WARNING",)]
        assert any("os-version" in c.args[0] for c in warnings)

    def test_blank_transport_error_still_recorded_as_gap(self, fake_session):
        logger = Mock()
        session = fake_session(errors={"os-release": OSError()})

        metadata = make_provider(OracleProvider, session, logger=logger).collect_metadata()

        assert "os-version" not in metadata
        messages = [c.args[0] for c in logger.log.call_args_list]
        assert any("os-version" in m and "(OSError)" in m for m in messages)


class TestAWSProvider:
    """Test AWS integration."""

    def test_iam_role_present(self, fake_session):
        session = fake_session(outputs={"iam/security-credentials/": "node-role"})

        diagnostics = make_provider(AWSProvider, session).configure_integration()

        assert diagnostics == []
        assert session.commands_containing(f"sudo chmod 600 {CLOUD_CONF_PATH}")
        assert session.commands_containing("create secret generic aws-cloud-provider")

    def test_missing_iam_role_is_warning(self, fake_session):
        session = fake_session()

        diagnostics = make_provider(AWSProvider, session).configure_integration()

        assert [d.kind for d in diagnostics] == [DiagnosticKind.INTEGRATION_WARNING]
        assert "IAM role" in diagnostics[0].message
        # Configuration still written
        assert session.commands_containing(f"sudo tee {CLOUD_CONF_PATH}")

    def test_chmod_failure_raises(self, fake_session):
        session = fake_session(
            outputs={"iam/security-credentials/": "node-role"},
            failures={"chmod 600": 1},
        )

        with pytest.raises(IntegrationError) as exc_info:
            make_provider(AWSProvider, session).configure_integration()

        assert exc_info.value.provider == "AWS"
        assert not session.commands_containing("create secret")

    def test_secret_creation_may_fail(self, fake_session):
        session = fake_session(outputs={"iam/security-credentials/": "node-role"})

        make_provider(AWSProvider, session).configure_integration()

        assert session.commands_containing("create secret")[0].endswith("|| true")


class TestGCPProvider:
    """Test GCP integration."""

    def test_full_integration(self, fake_session):
        session = fake_session(
            outputs={"scopes": f"{GCP_COMPUTE_SCOPE}\n", "project/project-id": "my-proj\n"}
        )

        diagnostics = make_provider(GCPProvider, session, "debian").configure_integration()

        assert diagnostics == []
        [config] = session.commands_containing(f"sudo tee {CLOUD_CONF_PATH}")
        assert "project-id = my-proj" in config

    def test_missing_compute_scope_is_warning(self, fake_session):
        session = fake_session(
            outputs={"scopes": "https://www.googleapis.com/auth/devstorage.read_only", "project/project-id": "p"}
        )

        diagnostics = make_provider(GCPProvider, session).configure_integration()

        assert [d.kind for d in diagnostics] == [DiagnosticKind.INTEGRATION_WARNING]
        assert "compute scope" in diagnostics[0].message

    def test_unverifiable_scopes_is_warning(self, fake_session):
        session = fake_session(failures={"scopes": 7}, outputs={"project/project-id": "p"})

        diagnostics = make_provider(GCPProvider, session).configure_integration()

        assert len(diagnostics) == 1

    def test_missing_project_id_raises(self, fake_session):
        session = fake_session(outputs={"scopes": GCP_COMPUTE_SCOPE})

        with pytest.raises(IntegrationError) as exc_info:
            make_provider(GCPProvider, session).configure_integration()

        assert "project ID" in str(exc_info.value)
        assert not session.commands_containing("sudo tee")


class TestAzureProvider:
    """Test Azure integration."""

    def test_complete_metadata(self, fake_session):
        session = fake_session(
            outputs={
                "subscriptionId": "sub-1",
                "resourceGroupName": "rg-k8s",
                "compute/location": "westeurope",
            }
        )

        diagnostics = make_provider(AzureProvider, session).configure_integration()

        assert diagnostics == []
        [config] = session.commands_containing(f"sudo tee {AZURE_JSON_PATH}")
        assert '"subscriptionId": "sub-1"' in config
        assert '"resourceGroup": "rg-k8s"' in config
        assert '"useManagedIdentityExtension": true' in config

    def test_incomplete_metadata_is_warning(self, fake_session):
        session = fake_session(outputs={"subscriptionId": "sub-1"})

        diagnostics = make_provider(AzureProvider, session).configure_integration()

        assert len(diagnostics) == 1
        assert diagnostics[0].hint == "missing: resource-group, location"
        assert session.commands_containing("create secret generic azure-cloud-provider")

    def test_metadata_requests_send_header(self, fake_session):
        session = fake_session()

        make_provider(AzureProvider, session).collect_metadata()

        assert all("Metadata:true" in c for c in session.commands_containing("169.254.169.254"))


class TestOracleProvider:
    """Test Oracle Cloud placeholder integration."""

    def test_informational_only(self, fake_session):
        session = fake_session()

        diagnostics = make_provider(OracleProvider, session, "oracle").configure_integration()

        assert [d.kind for d in diagnostics] == [DiagnosticKind.INFO]
        assert session.commands_containing(f"sudo tee {OCI_CONF_PATH}")
        assert not session.commands_containing("create secret")

    def test_placeholder_write_failure_raises(self, fake_session):
        session = fake_session(failures={"oci.conf": 1})

        with pytest.raises(IntegrationError):
            make_provider(OracleProvider, session, "oracle").configure_integration()
