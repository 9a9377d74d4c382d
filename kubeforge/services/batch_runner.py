"""Sequential, fail-fast execution of command batches."""

from typing import Sequence

from kubeforge.exceptions import CommandError


class CommandBatchRunner:
    """Runs an ordered list of commands against a RemoteSession.

    Stops at the first failing command. Commands already applied are not
    rolled back.
    """

    def __init__(self, session):
        self.session = session

    def run_all(self, commands: Sequence[str]) -> None:
        """
        Execute commands strictly in order.

        Args:
            commands: Ordered shell commands

        Raises:
            CommandError: For the first failing command, tagged with its 1-based index
        """
        for index, command in enumerate(commands, start=1):
            try:
                self.session.execute(command)
            except CommandError as e:
                raise e.with_index(index) from e
