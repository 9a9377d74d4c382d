"""
SSH Connection Models

Dataclass models for SSH operations.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from kubeforge.constants import DEFAULT_SSH_PORT


@dataclass(frozen=True)
class ConnectionTarget:
    """Connection details for the host being provisioned.

    At most one credential form: ``key_path`` or ``password``. A target with
    neither is rejected when the session is opened.
    """

    host: str
    user: str
    port: int = DEFAULT_SSH_PORT
    key_path: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        if self.key_path and self.password:
            raise ValueError("Use either a private key or a password, not both")

    @property
    def key_path_expanded(self) -> Optional[Path]:
        """Get expanded key path (resolves ~)."""
        if self.key_path:
            return Path(self.key_path).expanduser()
        return None

    @property
    def uses_key(self) -> bool:
        """Key-based auth takes precedence over password auth."""
        return bool(self.key_path)

    @property
    def has_credential(self) -> bool:
        """Check whether any credential form is present."""
        return bool(self.key_path) or bool(self.password)

    @property
    def connection_string(self) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.user}@{self.host}"

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def __repr__(self) -> str:
        # Never leak the password into logs
        auth = f"key={self.key_path}" if self.uses_key else "auth=password"
        return f"ConnectionTarget(host={self.host}, port={self.port}, user={self.user}, {auth})"
