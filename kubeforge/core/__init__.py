"""Configuration and command catalogs."""

from .config_loader import InstallConfig, build_install_config, load_install_config

__all__ = [
    "InstallConfig",
    "build_install_config",
    "load_install_config",
]
