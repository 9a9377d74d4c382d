"""
Target Profile Models

What kind of machine is being provisioned: cloud provider and Linux distribution.
"""

from dataclasses import dataclass
from enum import Enum


class ProviderKind(Enum):
    """Supported cloud providers."""

    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"
    ORACLE = "oracle"


class DistributionFamily(Enum):
    """Package-management family of a Linux distribution."""

    DEBIAN = "debian"
    RHEL = "rhel"


DISTRIBUTION_FAMILIES = {
    "ubuntu": DistributionFamily.DEBIAN,
    "debian": DistributionFamily.DEBIAN,
    "centos": DistributionFamily.RHEL,
    "rhel": DistributionFamily.RHEL,
    "amazon": DistributionFamily.RHEL,
    "oracle": DistributionFamily.RHEL,
}


@dataclass(frozen=True)
class TargetProfile:
    """Provider and distribution of the target host."""

    provider: ProviderKind
    distribution: str

    def __post_init__(self):
        if self.distribution not in DISTRIBUTION_FAMILIES:
            raise ValueError(f"Unsupported distribution: {self.distribution}")

    @property
    def family(self) -> DistributionFamily:
        """Get the distribution family (drives package manager selection)."""
        return DISTRIBUTION_FAMILIES[self.distribution]

    @property
    def is_debian_based(self) -> bool:
        return self.family == DistributionFamily.DEBIAN

    @property
    def is_rhel_based(self) -> bool:
        return self.family == DistributionFamily.RHEL

    def __repr__(self) -> str:
        return f"TargetProfile(provider={self.provider.value}, distribution={self.distribution})"
