"""Configuration loading for KubeForge installs"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from kubeforge.constants import DEFAULT_PROVIDER, DEFAULT_SSH_PORT
from kubeforge.exceptions import ConfigurationError
from kubeforge.models.ssh import ConnectionTarget
from kubeforge.models.target import DISTRIBUTION_FAMILIES, ProviderKind, TargetProfile


DEFAULT_DISTRIBUTIONS = {
    ProviderKind.AWS: "amazon",
    ProviderKind.GCP: "debian",
    ProviderKind.AZURE: "ubuntu",
    ProviderKind.ORACLE: "oracle",
}

# (user on ubuntu, user on anything else)
DEFAULT_USERS = {
    ProviderKind.AWS: ("ubuntu", "ec2-user"),
    ProviderKind.GCP: ("ubuntu", "google_user"),
    ProviderKind.AZURE: ("azureuser", "adminuser"),
    ProviderKind.ORACLE: ("ubuntu", "opc"),
}

CONFIG_KEYS = {"host", "port", "user", "key", "password", "provider", "distro"}


@dataclass(frozen=True)
class InstallConfig:
    """Validated connection target and target profile."""

    target: ConnectionTarget
    profile: TargetProfile


def default_user(provider: ProviderKind, distribution: str) -> str:
    """Get the default SSH user for a provider image."""
    ubuntu_user, other_user = DEFAULT_USERS[provider]
    return ubuntu_user if distribution == "ubuntu" else other_user


def default_distribution(provider: ProviderKind) -> str:
    """Get the default distribution for a provider."""
    return DEFAULT_DISTRIBUTIONS[provider]


def parse_provider(value: str) -> ProviderKind:
    """
    Parse provider name.

    Raises:
        ConfigurationError: If provider is unknown
    """
    try:
        return ProviderKind((value or "").strip().lower())
    except ValueError:
        valid = ", ".join(p.value for p in ProviderKind)
        raise ConfigurationError(
            f"Invalid cloud provider '{value}'", context=f"Use one of: {valid}"
        )


def parse_distribution(value: str) -> str:
    """
    Parse distribution name.

    Raises:
        ConfigurationError: If distribution is unknown
    """
    distribution = (value or "").strip().lower()
    if distribution not in DISTRIBUTION_FAMILIES:
        valid = ", ".join(DISTRIBUTION_FAMILIES)
        raise ConfigurationError(
            f"Invalid distribution '{value}'", context=f"Use one of: {valid}"
        )
    return distribution


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load install options from a YAML file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or has unknown keys
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}", context=str(e))

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid config file {path}: expected a mapping of options"
        )

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in {path}: {', '.join(sorted(unknown))}",
            context=f"Allowed keys: {', '.join(sorted(CONFIG_KEYS))}",
        )

    return data


def build_install_config(
    host: Optional[str],
    port: Any = None,
    user: Optional[str] = None,
    key: Optional[str] = None,
    password: Optional[str] = None,
    provider: Optional[str] = None,
    distro: Optional[str] = None,
) -> InstallConfig:
    """
    Validate raw options and apply defaults.

    Args:
        host: Remote host IP or hostname
        port: SSH port
        user: SSH user (defaults per provider/distribution)
        key: Private key path (takes precedence over password)
        password: SSH password
        provider: aws, gcp, azure or oracle
        distro: ubuntu, debian, centos, rhel, amazon or oracle

    Returns:
        InstallConfig

    Raises:
        ConfigurationError: If options are invalid
    """
    if not host:
        raise ConfigurationError("Host IP address is required")

    if not key and not password:
        raise ConfigurationError("Either private key or password is required")

    try:
        port_number = int(port) if port not in (None, "") else DEFAULT_SSH_PORT
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid SSH port '{port}'")
    if not 0 < port_number < 65536:
        raise ConfigurationError(f"Invalid SSH port '{port}'")

    provider_kind = parse_provider(provider or DEFAULT_PROVIDER)
    requested_distribution = parse_distribution(distro) if distro else ""
    distribution = requested_distribution or default_distribution(provider_kind)

    target = ConnectionTarget(
        host=host,
        port=port_number,
        # Default user follows the requested distro, not the provider default
        user=user or default_user(provider_kind, requested_distribution),
        key_path=str(key) if key else None,
        # Exactly one credential form; key wins
        password=None if key else password,
    )
    profile = TargetProfile(provider=provider_kind, distribution=distribution)

    return InstallConfig(target=target, profile=profile)


def load_install_config(config_file: Optional[Path] = None, **options) -> InstallConfig:
    """
    Build install configuration from an optional YAML file and explicit options.

    Explicit options (non-None) override values from the file.
    """
    merged: Dict[str, Any] = {}
    if config_file:
        merged.update(load_config_file(config_file))

    merged.update({k: v for k, v in options.items() if v is not None})

    return build_install_config(
        host=merged.get("host"),
        port=merged.get("port"),
        user=merged.get("user"),
        key=merged.get("key"),
        password=merged.get("password"),
        provider=merged.get("provider"),
        distro=merged.get("distro"),
    )
