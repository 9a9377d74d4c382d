"""
KubeForge Exception Hierarchy

Clean exception hierarchy for consistent error handling across the installer.
"""

from typing import Optional


class KubeForgeError(Exception):
    """Base exception for all KubeForge errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(KubeForgeError):
    """Raised when configuration is invalid or missing."""

    pass


class SSHError(KubeForgeError):
    """Raised when SSH operations fail."""

    pass


class SSHConnectionError(SSHError):
    """Raised when the SSH channel cannot be established."""

    def __init__(self, host: str, reason: str):
        self.host = host
        self.reason = reason
        super().__init__(f"Cannot connect to {host}", context=reason)


class CommandError(SSHError):
    """Raised when a remote command fails or the channel drops mid-command."""

    def __init__(
        self,
        command: str,
        exit_status: Optional[int] = None,
        stderr: str = "",
        index: Optional[int] = None,
    ):
        self.command = command
        self.exit_status = exit_status
        self.stderr = stderr
        self.index = index

        if exit_status is None:
            message = "Command failed: connection lost"
        else:
            message = f"Command failed with exit code {exit_status}"
        if index is not None:
            message += f" (command #{index})"

        context = f"Command: {command}"
        if stderr:
            context += f"\nError output: {stderr.strip()}"
        super().__init__(message, context)

    def with_index(self, index: int) -> "CommandError":
        """Return a copy of this error tagged with its position in a batch."""
        return CommandError(self.command, self.exit_status, self.stderr, index)


class IntegrationError(KubeForgeError):
    """Raised when a required cloud integration step fails."""

    def __init__(self, provider: str, message: str, context: Optional[str] = None):
        self.provider = provider
        super().__init__(f"{provider}: {message}", context)


class StageError(KubeForgeError):
    """Raised when a provisioning stage fails and the pipeline aborts."""

    def __init__(self, stage_name: str, cause: Exception):
        self.stage_name = stage_name
        self.cause = cause
        super().__init__(f"Stage '{stage_name}' failed", context=str(cause))
