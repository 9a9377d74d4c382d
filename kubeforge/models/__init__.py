"""
KubeForge Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .results import (
    CommandOutput,
    Diagnostic,
    DiagnosticKind,
    MetadataMap,
    PipelineResult,
    StageResult,
)
from .ssh import ConnectionTarget
from .target import (
    DISTRIBUTION_FAMILIES,
    DistributionFamily,
    ProviderKind,
    TargetProfile,
)

__all__ = [
    # Results
    "CommandOutput",
    "Diagnostic",
    "DiagnosticKind",
    "MetadataMap",
    "PipelineResult",
    "StageResult",
    # SSH
    "ConnectionTarget",
    # Target
    "DISTRIBUTION_FAMILIES",
    "DistributionFamily",
    "ProviderKind",
    "TargetProfile",
]
