"""
KubeForge Services Layer

Remote execution and provisioning orchestration.
"""

from .batch_runner import CommandBatchRunner
from .pipeline import ProvisioningPipeline
from .ssh_service import RemoteSession

__all__ = [
    "CommandBatchRunner",
    "ProvisioningPipeline",
    "RemoteSession",
]
