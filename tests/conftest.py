"""Shared fixtures for KubeForge tests."""

from typing import Dict, Iterable, List, Optional

import pytest

from kubeforge.exceptions import CommandError
from kubeforge.models.results import CommandOutput
from kubeforge.models.target import ProviderKind, TargetProfile


class FakeSession:
    """In-memory stand-in for RemoteSession.

    Commands containing a key of ``failures`` exit with that status;
    commands containing a pattern from ``dropped`` lose the connection.
    ``outputs`` maps a pattern to the stdout returned for matching commands;
    ``errors`` maps a pattern to the transport exception reported for it.
    """

    def __init__(
        self,
        failures: Optional[Dict[str, int]] = None,
        outputs: Optional[Dict[str, str]] = None,
        dropped: Iterable[str] = (),
        errors: Optional[Dict[str, Exception]] = None,
    ):
        self.failures = failures or {}
        self.outputs = outputs or {}
        self.dropped = list(dropped)
        self.errors = errors or {}
        self.commands: List[str] = []
        self.close_calls = 0

    @staticmethod
    def _match(mapping, command):
        for pattern, value in mapping.items():
            if pattern in command:
                return value
        return None

    def execute_capturing_both(self, command: str, timeout=None) -> CommandOutput:
        self.commands.append(command)

        if any(pattern in command for pattern in self.dropped):
            return CommandOutput(command=command, error=OSError("Socket is closed"))

        error = self._match(self.errors, command)
        if error is not None:
            return CommandOutput(command=command, error=error)

        status = self._match(self.failures, command)
        if status is not None:
            return CommandOutput(
                command=command,
                stderr="boom",
                exit_status=status,
                error=CommandError(command, status, "boom"),
            )

        return CommandOutput(
            command=command,
            stdout=self._match(self.outputs, command) or "",
            exit_status=0,
        )

    def execute(self, command: str, timeout=None) -> str:
        result = self.execute_capturing_both(command)
        if isinstance(result.error, CommandError):
            raise result.error
        if result.error is not None:
            raise CommandError(command, None, str(result.error))
        return result.stdout

    def command_exists(self, name: str) -> bool:
        return self.execute_capturing_both(f"command -v {name}").is_success

    def close(self) -> None:
        self.close_calls += 1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def commands_containing(self, text: str) -> List[str]:
        return [c for c in self.commands if text in c]


ALL_DISTRIBUTIONS = ["ubuntu", "debian", "centos", "rhel", "amazon", "oracle"]


@pytest.fixture
def fake_session():
    """Factory for FakeSession instances."""

    def _make(**kwargs) -> FakeSession:
        return FakeSession(**kwargs)

    return _make


@pytest.fixture
def ubuntu_aws() -> TargetProfile:
    return TargetProfile(provider=ProviderKind.AWS, distribution="ubuntu")


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    """Send InstallLogger files to a temp dir."""
    path = tmp_path / "logs"
    monkeypatch.setenv("KUBEFORGE_LOG_DIR", str(path))
    return path
