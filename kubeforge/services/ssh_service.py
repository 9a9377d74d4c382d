"""SSH session for executing commands on the host being provisioned."""

import shlex
import socket
import time
from pathlib import Path
from typing import Optional, Tuple

import paramiko

from kubeforge.constants import SSH_CONNECTION_TIMEOUT
from kubeforge.exceptions import CommandError, SSHConnectionError, SSHError
from kubeforge.models.results import CommandOutput
from kubeforge.models.ssh import ConnectionTarget

READ_CHUNK_SIZE = 32 * 1024
POLL_INTERVAL = 0.05


def _connect(client: paramiko.SSHClient, target: ConnectionTarget, connect_kwargs: dict) -> None:
    """Connect the client, mapping transport failures to SSHConnectionError."""
    try:
        client.connect(**connect_kwargs)
    except paramiko.AuthenticationException as e:
        raise SSHConnectionError(target.host, f"authentication failed: {e}") from e
    except paramiko.SSHException as e:
        raise SSHConnectionError(target.host, f"SSH handshake failed: {e}") from e
    except OSError as e:
        # DNS failures, refused connections and timeouts all land here
        raise SSHConnectionError(target.host, f"failed to connect to host: {e}") from e


def _read_streams(channel: paramiko.Channel, timeout: Optional[float] = None) -> Tuple[bytes, bytes]:
    """
    Drain stdout and stderr together until the command exits.

    Reading one stream to EOF first can stall the remote side once the other
    stream fills the channel window.

    Raises:
        socket.timeout: If ``timeout`` elapses before the command exits
    """
    out, err = [], []
    deadline = time.monotonic() + timeout if timeout is not None else None

    while True:
        idle = True
        if channel.recv_ready():
            out.append(channel.recv(READ_CHUNK_SIZE))
            idle = False
        if channel.recv_stderr_ready():
            err.append(channel.recv_stderr(READ_CHUNK_SIZE))
            idle = False

        if idle:
            # Output arrives before the exit status, so nothing is left to read
            if channel.exit_status_ready():
                break
            if deadline is not None and time.monotonic() > deadline:
                raise socket.timeout(f"command did not finish within {timeout}s")
            time.sleep(POLL_INTERVAL)

    return b"".join(out), b"".join(err)


class RemoteSession:
    """
    One authenticated SSH connection to the target host.

    Every command runs on its own exec channel, so shell state (cwd, exported
    variables) does not carry over between calls. Not safe for concurrent use.
    """

    def __init__(self, target: ConnectionTarget, client: paramiko.SSHClient, logger=None):
        """
        Initialize session around an already connected client.

        Args:
            target: Connection target the client was opened for
            client: Connected paramiko client
            logger: Optional InstallLogger; commands are echoed to it before they run
        """
        self.target = target
        self.logger = logger
        self._client: Optional[paramiko.SSHClient] = client

    @classmethod
    def open(
        cls,
        target: ConnectionTarget,
        logger=None,
        timeout: float = SSH_CONNECTION_TIMEOUT,
    ) -> "RemoteSession":
        """
        Establish the SSH connection.

        Key auth is used when a key path is set, password auth otherwise.

        Args:
            target: Connection target
            logger: Optional InstallLogger
            timeout: Connection, banner and auth timeout in seconds

        Returns:
            Connected RemoteSession

        Raises:
            SSHConnectionError: If no credential is set or the transport cannot be established
        """
        if not target.has_credential:
            raise SSHConnectionError(
                target.host, "either private key or password is required"
            )

        connect_kwargs = {
            "hostname": target.host,
            "port": target.port,
            "username": target.user,
            "timeout": timeout,
            "banner_timeout": timeout,
            "auth_timeout": timeout,
            "look_for_keys": False,
            "allow_agent": False,
        }
        if target.uses_key:
            key_path = target.key_path_expanded
            if not key_path.is_file():
                raise SSHConnectionError(
                    target.host, f"unable to read private key: {key_path}"
                )
            connect_kwargs["key_filename"] = str(key_path)
        else:
            connect_kwargs["password"] = target.password

        if logger:
            logger.log(f"Connecting to {target.connection_string}:{target.port}")

        client = paramiko.SSHClient()
        # Freshly provisioned cloud VMs are never in known_hosts
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            _connect(client, target, connect_kwargs)
        except BaseException:
            client.close()
            raise

        return cls(target, client, logger=logger)

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def _log_command(self, command: str) -> None:
        if self.logger:
            self.logger.log_command(command)

    def execute_capturing_both(
        self, command: str, timeout: Optional[float] = None
    ) -> CommandOutput:
        """
        Execute command and capture stdout and stderr without raising.

        ``error`` on the result is None on success, a CommandError for a
        non-zero exit, or the transport exception when the command never
        completed.

        Args:
            command: Shell command to run
            timeout: Optional channel timeout in seconds (unset by default)

        Returns:
            CommandOutput with execution details
        """
        self._log_command(command)

        if self._client is None:
            return CommandOutput(command=command, error=SSHError("Session is closed"))

        try:
            stdin, stdout, _stderr = self._client.exec_command(command, timeout=timeout)
            stdin.close()
            raw_out, raw_err = _read_streams(stdout.channel, timeout)
            exit_status = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            return CommandOutput(command=command, error=e)

        out = raw_out.decode("utf-8", errors="replace")
        err = raw_err.decode("utf-8", errors="replace")

        if self.logger:
            self.logger.log_output(out, "stdout")
            self.logger.log_output(err, "stderr")

        # paramiko reports -1 when the channel closed without an exit status
        if exit_status == -1:
            return CommandOutput(
                command=command,
                stdout=out,
                stderr=err,
                error=SSHError("Channel closed before command completed"),
            )

        error = None
        if exit_status != 0:
            error = CommandError(command, exit_status, err)

        return CommandOutput(
            command=command,
            stdout=out,
            stderr=err,
            exit_status=exit_status,
            error=error,
        )

    def execute(self, command: str, timeout: Optional[float] = None) -> str:
        """
        Execute command on the remote host.

        Args:
            command: Shell command to run
            timeout: Optional channel timeout in seconds (unset by default)

        Returns:
            Captured stdout

        Raises:
            CommandError: If the command exits non-zero or the channel drops
        """
        result = self.execute_capturing_both(command, timeout=timeout)

        if isinstance(result.error, CommandError):
            raise result.error
        if result.error is not None:
            raise CommandError(command, None, str(result.error)) from result.error

        return result.stdout

    def upload_file(self, local_path: str, remote_path: str) -> None:
        """
        Upload a local file by streaming it into ``cat`` on the remote host.

        Args:
            local_path: Local file path
            remote_path: Destination path on the remote host

        Raises:
            CommandError: If the remote write fails
        """
        content = Path(local_path).expanduser().read_bytes()
        command = f"cat > {shlex.quote(remote_path)}"
        self._log_command(command)

        if self._client is None:
            raise CommandError(command, None, "Session is closed")

        try:
            stdin, stdout, stderr = self._client.exec_command(command)
            stdin.write(content)
            stdin.channel.shutdown_write()
            exit_status = stdout.channel.recv_exit_status()
            err = stderr.read().decode("utf-8", errors="replace")
        except (paramiko.SSHException, OSError) as e:
            raise CommandError(command, None, str(e)) from e

        if exit_status != 0:
            raise CommandError(command, None if exit_status == -1 else exit_status, err)

    def command_exists(self, name: str) -> bool:
        """Check if a command is available on the remote host."""
        return self.execute_capturing_both(f"command -v {shlex.quote(name)}").is_success

    def remote_hostname(self) -> str:
        """Get the hostname of the remote host."""
        return self.execute("hostname").strip()

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        if self.logger:
            self.logger.log(f"Closed connection to {self.target.host}", "DEBUG")

    def __enter__(self) -> "RemoteSession":
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"RemoteSession({self.target.connection_string}, {state})"
