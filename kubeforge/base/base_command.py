"""
Base Command Class

Abstract base for all KubeForge CLI commands.
Provides common functionality and structure.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from rich.console import Console

from kubeforge.exceptions import KubeForgeError
from kubeforge.logger import InstallLogger
from kubeforge.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling
    - JSON output support
    """

    def __init__(self, verbose: bool = False, json_output: bool = False):
        self.verbose = verbose
        self.json_output = json_output
        self.console = Console()
        self.logger: Optional[InstallLogger] = None

    def init_logger(self, target_name: str, command_name: str) -> Optional[InstallLogger]:
        """
        Initialize command logger (skip in JSON mode).

        Args:
            target_name: Host the command operates on
            command_name: Command name

        Returns:
            InstallLogger instance or None if JSON mode
        """
        if self.json_output:
            return None
        self.logger = InstallLogger(
            target_name,
            command_name,
            verbose=self.verbose,
            log_dir=os.environ.get("KUBEFORGE_LOG_DIR"),
        )
        return self.logger

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON mode)."""
        if not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_warning(self, message: str) -> None:
        """Print warning message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def show_log_path(self) -> None:
        if self.logger and not self.json_output:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self.show_log_path()
            raise SystemExit(130)
        except SystemExit:
            raise
        except KubeForgeError as e:
            if self.json_output:
                self.output_json({"error": e.message, "context": e.context}, exit_code=1)
            if self.logger:
                self.logger.log_error(e.message, context=e.context)
            else:
                self.console.print(f"\n[bold red]✗ Error:[/bold red] {e.message}")
                if e.context:
                    self.console.print(f"  [color(208)]{e.context}[/color(208)]")
            self.show_log_path()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self.show_log_path()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()
