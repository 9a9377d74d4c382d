"""
KubeForge Cloud Providers

One strategy per cloud, selected once from the target profile.
"""

from typing import Dict, Type

from kubeforge.models.target import ProviderKind, TargetProfile

from .aws import AWSProvider
from .azure import AzureProvider
from .base import COMMON_METADATA_COMMANDS, BaseProvider
from .gcp import GCPProvider
from .oracle import OracleProvider

PROVIDERS: Dict[ProviderKind, Type[BaseProvider]] = {
    ProviderKind.AWS: AWSProvider,
    ProviderKind.GCP: GCPProvider,
    ProviderKind.AZURE: AzureProvider,
    ProviderKind.ORACLE: OracleProvider,
}


def get_provider(session, profile: TargetProfile, logger=None) -> BaseProvider:
    """
    Instantiate the provider strategy for a profile.

    Args:
        session: RemoteSession commands are sent through
        profile: Validated target profile
        logger: Optional InstallLogger

    Returns:
        Provider strategy instance
    """
    return PROVIDERS[profile.provider](session, profile, logger=logger)


__all__ = [
    "AWSProvider",
    "AzureProvider",
    "BaseProvider",
    "COMMON_METADATA_COMMANDS",
    "GCPProvider",
    "OracleProvider",
    "PROVIDERS",
    "get_provider",
]
