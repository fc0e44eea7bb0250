"""SSH Infrastructure Module

Provides authenticated SSH sessions, the directory-aware command executor
and the connection registry.

Usage:
    from remote_shell.infrastructures.ssh import (
        SSHSession, CommandExecutor, ConnectionRegistry
    )

    session = SSHSession.open("10.0.0.5", 22)
    session.authenticate_password("deploy", "secret")

    registry = ConnectionRegistry()
    await registry.insert("deploy@10.0.0.5:22", session)

    executor = CommandExecutor()
    result = await registry.run(
        "deploy@10.0.0.5:22", lambda s: executor.execute(s, "cd /var/log")
    )
"""

from remote_shell.infrastructures.ssh.connection_id import ConnectionIdStrategy
from remote_shell.infrastructures.ssh.implements.command_executor import CommandExecutor
from remote_shell.infrastructures.ssh.implements.ssh_session import SSHSession
from remote_shell.infrastructures.ssh.interfaces.ssh_session import SSHSessionInterface
from remote_shell.infrastructures.ssh.models.connection import SSHConnectionConfig, SSHCredential
from remote_shell.infrastructures.ssh.models.ssh_result import CommandResult, DISPATCH_FAILED_EXIT_STATUS
from remote_shell.infrastructures.ssh.registry import ConnectionRegistry

__all__ = [
    "ConnectionIdStrategy",
    "CommandExecutor",
    "SSHSession",
    "SSHSessionInterface",
    "SSHConnectionConfig",
    "SSHCredential",
    "CommandResult",
    "DISPATCH_FAILED_EXIT_STATUS",
    "ConnectionRegistry",
]
