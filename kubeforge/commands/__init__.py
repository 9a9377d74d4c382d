"""KubeForge CLI commands."""

from .install import install
from .metadata import metadata
from .providers import providers

__all__ = [
    "install",
    "metadata",
    "providers",
]
