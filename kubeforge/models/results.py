"""
Result Models

Dataclass models for command outputs, stage outcomes and recoverable diagnostics.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


MetadataMap = Dict[str, str]


def describe_failure(error: Optional[Exception]) -> str:
    """One-line, never empty description of a failed command's error."""
    if error is None:
        return "empty response"
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__


class DiagnosticKind(Enum):
    """Kind of a recoverable diagnostic."""

    INTEGRATION_WARNING = "integration_warning"
    METADATA_GAP = "metadata_gap"
    JOIN_TOKEN = "join_token"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem: logged and reported, never raised."""

    kind: DiagnosticKind
    message: str
    hint: Optional[str] = None

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


@dataclass
class CommandOutput:
    """Result of a remote command that never raises to the caller."""

    command: str
    stdout: str = ""
    stderr: str = ""
    exit_status: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        """Check if command ran and exited with status 0."""
        return self.error is None and self.exit_status == 0

    @property
    def is_transport_failure(self) -> bool:
        """Check if the command never completed (no exit status received)."""
        return self.error is not None and self.exit_status is None

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"CommandOutput(exit_status={self.exit_status}, command='{self.command[:50]}')"


@dataclass
class StageResult:
    """Outcome of one provisioning stage."""

    stage_name: str
    succeeded: bool
    output: Optional[str] = None
    error: Optional[Exception] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    duration_seconds: float = 0.0

    def __repr__(self) -> str:
        status = "ok" if self.succeeded else "failed"
        return f"StageResult(stage={self.stage_name}, {status}, duration={self.duration_seconds:.2f}s)"


@dataclass
class PipelineResult:
    """Terminal state of a pipeline run."""

    results: List[StageResult] = field(default_factory=list)
    join_command: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """All stages ran and succeeded."""
        return bool(self.results) and all(r.succeeded for r in self.results)

    @property
    def failed_stage(self) -> Optional[StageResult]:
        """The stage the pipeline aborted at, if any."""
        for result in self.results:
            if not result.succeeded:
                return result
        return None

    @property
    def stage_names(self) -> List[str]:
        return [r.stage_name for r in self.results]

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [d for r in self.results for d in r.diagnostics]
