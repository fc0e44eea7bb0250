import pytest

from remote_shell.core.exceptions import SSHCommandTimeoutException
from remote_shell.infrastructures.ssh import (
    CommandExecutor,
    SSHSession,
    DISPATCH_FAILED_EXIT_STATUS,
)
from conftest import FakeTransport


@pytest.fixture
def executor():
    return CommandExecutor(pty_term="xterm")


class TestDirectoryChangeDetection:

    @pytest.mark.parametrize("command", ["cd", "cd /tmp", "  cd /tmp  ", "cd ..", " cd"])
    def test_directory_change(self, command):
        assert CommandExecutor.is_directory_change_command(command)

    @pytest.mark.parametrize("command", ["ls", "cdx /tmp", "echo cd /tmp", "pwd && cd /tmp", "cd\t/tmp"])
    def test_not_directory_change(self, command):
        assert not CommandExecutor.is_directory_change_command(command)


class TestBuildCommandLine:

    def test_cd_appends_pwd(self, executor):
        assert executor.build_command_line("cd /var/log", "/home/tester") == "cd /var/log && pwd"

    def test_cd_argument_is_trimmed(self, executor):
        assert executor.build_command_line("   cd    /tmp   ", "") == "cd /tmp && pwd"

    def test_bare_cd(self, executor):
        assert executor.build_command_line("cd", "/tmp") == "cd  && pwd"

    def test_ordinary_command_runs_in_tracked_directory(self, executor):
        assert executor.build_command_line("ls -al", "/var/log") == "cd '/var/log' && ls -al"

    def test_empty_directory_leaves_command_unchanged(self, executor):
        line = executor.build_command_line("ls -al", "")
        assert line == "ls -al"
        assert "cd ''" not in line

    def test_strict_quoting_escapes_single_quote(self):
        executor = CommandExecutor(strict_quoting=True)
        line = executor.build_command_line("ls", "/srv/it's here")
        assert line == "cd '/srv/it'\"'\"'s here' && ls"

    def test_literal_quoting_is_default(self, executor):
        assert executor.build_command_line("ls", "/srv/it's") == "cd '/srv/it's' && ls"


class TestExecute:

    def test_successful_cd_updates_directory_and_hides_pwd(self, executor, make_session):
        session = make_session()

        result = executor.execute(session, "cd /tmp")

        assert result.success
        assert result.exit_status == 0
        assert result.stdout == ""
        assert result.current_directory == "/tmp"
        assert session.current_directory == "/tmp"

    def test_directory_persists_to_next_command(self, executor, make_session, remote):
        session = make_session()
        executor.execute(session, "cd /tmp")

        result = executor.execute(session, "pwd")

        assert result.stdout.strip() == "/tmp"
        assert result.current_directory == "/tmp"
        assert remote.command_lines[-1] == "cd '/tmp' && pwd"

    def test_failed_cd_keeps_directory(self, executor, make_session):
        session = make_session()
        before = session.current_directory

        result = executor.execute(session, "cd /nonexistent")

        assert not result.success
        assert result.exit_status == 1
        assert "No such file or directory" in result.stderr
        assert result.current_directory == before
        assert session.current_directory == before

    def test_bare_cd_goes_to_login_directory(self, executor, make_session):
        session = make_session()
        executor.execute(session, "cd /var/log")

        result = executor.execute(session, "cd")

        assert result.success
        assert session.current_directory == "/home/tester"

    def test_relative_cd_resolves_from_login_directory(self, executor, make_session):
        session = make_session()
        executor.execute(session, "cd /var/log")

        executor.execute(session, "cd ..")

        assert session.current_directory == "/home"

    def test_non_zero_exit_is_a_normal_result(self, executor, make_session):
        session = make_session()

        result = executor.execute(session, "false")

        assert result.exit_status == 1
        assert result.success is False
        assert result.current_directory == "/home/tester"

    def test_channel_error_reports_dispatch_failure(self, executor, make_session):
        session = make_session()

        result = executor.execute(session, "boom")

        assert result.exit_status == DISPATCH_FAILED_EXIT_STATUS
        assert not result.success
        assert result.stderr.startswith("Command execution failed:")
        assert result.current_directory == "/home/tester"

    def test_session_usable_after_failure(self, executor, make_session):
        session = make_session()
        executor.execute(session, "boom")

        result = executor.execute(session, "echo still here")

        assert result.success
        assert result.stdout.strip() == "still here"

    def test_closed_transport_reports_dispatch_failure(self, executor, make_session):
        session = make_session()
        session.close()

        result = executor.execute(session, "ls")

        assert result.exit_status == DISPATCH_FAILED_EXIT_STATUS

    def test_requests_pty_and_closes_channel(self, remote):
        transport = FakeTransport(remote)
        session = SSHSession(transport, "example.com")
        session.authenticate_password("tester", "secret")

        CommandExecutor(pty_term="vt220").execute(session, "echo hi")

        channel = transport.channels[-1]
        assert channel.pty_term == "vt220"
        assert channel.closed

    def test_unprobed_session_runs_command_unmodified(self, executor, remote):
        session = SSHSession(FakeTransport(remote), "example.com")
        assert session.current_directory == ""

        result = executor.execute(session, "echo hi")

        assert remote.command_lines == ["echo hi"]
        assert result.stdout.strip() == "hi"
        assert result.current_directory == ""

    def test_read_timeout_raises_distinct_error(self, remote):
        transport = FakeTransport(remote)
        session = SSHSession(transport, "example.com")
        session.authenticate_password("tester", "secret")

        with pytest.raises(SSHCommandTimeoutException) as exc_info:
            CommandExecutor(timeout=0.5).execute(session, "hang")

        assert exc_info.value.http_status == 504
        assert exc_info.value.context["command"] == "hang"
        assert transport.channels[-1].closed
        assert session.current_directory == "/home/tester"

    def test_exit_status_wait_is_bounded(self, remote):
        transport = FakeTransport(remote)
        session = SSHSession(transport, "example.com")
        session.authenticate_password("tester", "secret")

        with pytest.raises(SSHCommandTimeoutException):
            CommandExecutor(timeout=0.05).execute(session, "linger")

        assert transport.channels[-1].closed

    def test_session_usable_after_timeout(self, make_session):
        session = make_session()
        executor = CommandExecutor(timeout=0.05)
        with pytest.raises(SSHCommandTimeoutException):
            executor.execute(session, "hang")

        result = executor.execute(session, "echo back")

        assert result.stdout.strip() == "back"

    def test_timeout_is_applied_to_channel(self, remote):
        transport = FakeTransport(remote)
        session = SSHSession(transport, "example.com")
        session.authenticate_password("tester", "secret")

        CommandExecutor(timeout=3.0).execute(session, "pwd")

        assert transport.channels[-1].timeout == 3.0
