import io
import os
import posixpath
import re
import socket
import tempfile
import threading
import time

# settings 는 import 시점에 로드되므로 패키지 import 전에 환경변수 지정
os.environ.setdefault("REMOTE_SHELL_ENV", "test")
os.environ.setdefault("REMOTE_SHELL_LOG_DIR", tempfile.mkdtemp(prefix="remote-shell-logs-"))

import paramiko
import pytest

from remote_shell.core.exceptions import SSHConnectionException, ErrorCode
from remote_shell.infrastructures.ssh import SSHSession

_CD_PREFIX = re.compile(r"^cd (.*?) && (.*)$", re.DOTALL)


class FakeRemote:
    """
    원격 서버 흉내

    - 채널마다 로그인 디렉토리(home)에서 시작
    - ``cd <dir> && <rest>`` 형태만 해석
    - 지원 명령: pwd, echo, false, slow, block (release 대기), boom (채널 오류),
      hang (stdout 읽기 타임아웃), linger (종료 상태 미수신)
    """

    def __init__(self, home="/home/tester", directories=None, password="secret"):
        self.home = home
        self.directories = set(directories or {"/", "/tmp", "/var", "/var/log", "/home", home})
        self.password = password
        self.command_lines = []
        self.release = threading.Event()
        self.active = 0
        self.max_active = 0
        self._counter_lock = threading.Lock()

    def handle(self, command_line):
        self.command_lines.append(command_line)
        with self._counter_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            return self._dispatch(command_line, self.home)
        finally:
            with self._counter_lock:
                self.active -= 1

    def _dispatch(self, command_line, cwd):
        match = _CD_PREFIX.match(command_line)
        if match:
            target = match.group(1).strip()
            if len(target) >= 2 and target[0] == target[-1] == "'":
                target = target[1:-1]
            target = posixpath.normpath(posixpath.join(cwd, target)) if target else self.home
            if target not in self.directories:
                return "", f"cd: {match.group(1)}: No such file or directory\n", 1
            return self._dispatch(match.group(2), target)

        command = command_line.strip()
        if command == "pwd":
            return cwd + "\n", "", 0
        if command.startswith("echo "):
            return command[5:] + "\n", "", 0
        if command == "false":
            return "", "", 1
        if command == "slow":
            time.sleep(0.05)
            return "done\n", "", 0
        if command == "block":
            self.release.wait(timeout=5)
            return "released\n", "", 0
        if command == "hang":
            # 출력이 끝나지 않음
            return None, "", None
        if command == "linger":
            # 출력은 끝났지만 종료 상태가 오지 않음
            return "partial\n", "", None
        if command == "boom":
            raise paramiko.SSHException("Channel closed.")
        return "", f"sh: {command}: command not found\n", 127


class _TimeoutReader:
    def read(self):
        raise socket.timeout("timed out")


class FakeChannel:
    def __init__(self, remote):
        self._remote = remote
        self.status_event = threading.Event()
        self.command = None
        self.pty_term = None
        self.timeout = None
        self.closed = False
        self._result = ("", "", -1)

    def settimeout(self, timeout):
        self.timeout = timeout

    def get_pty(self, term="vt100", **kwargs):
        self.pty_term = term

    def exec_command(self, command):
        self.command = command
        self._result = self._remote.handle(command)
        if self._result[2] is not None:
            self.status_event.set()

    def makefile(self, mode="r"):
        if self._result[0] is None:
            return _TimeoutReader()
        return io.BytesIO(self._result[0].encode("utf-8"))

    def makefile_stderr(self, mode="r"):
        return io.BytesIO(self._result[1].encode("utf-8"))

    def recv_exit_status(self):
        return self._result[2]

    def close(self):
        self.closed = True


class FakeTransport:
    def __init__(self, remote):
        self.remote = remote
        self.active = True
        self.authenticated = False
        self.close_calls = 0
        self.channels = []
        self.auth_keys = []

    def auth_password(self, username, password):
        if password != self.remote.password:
            raise paramiko.AuthenticationException("Authentication failed.")
        self.authenticated = True
        return []

    def auth_publickey(self, username, key):
        self.auth_keys.append(key)
        self.authenticated = True
        return []

    def is_authenticated(self):
        return self.authenticated

    def is_active(self):
        return self.active

    def open_session(self):
        channel = FakeChannel(self.remote)
        self.channels.append(channel)
        return channel

    def close(self):
        self.active = False
        self.close_calls += 1


@pytest.fixture
def remote():
    remote = FakeRemote()
    yield remote
    remote.release.set()


@pytest.fixture
def make_session(remote):
    """비밀번호 인증까지 끝난 SSHSession 생성"""

    def _make(host="example.com", port=22, username="tester", fake_remote=None):
        transport = FakeTransport(fake_remote or remote)
        session = SSHSession(transport, host, port)
        session.authenticate_password(username, (fake_remote or remote).password)
        return session

    return _make


@pytest.fixture
def session_factory(remote):
    """ShellService 용 세션 팩토리. 'unreachable' 호스트는 연결 실패"""
    transports = []

    def _factory(host, port, timeout=None):
        if host.startswith("unreachable"):
            raise SSHConnectionException(
                host=host,
                port=port,
                error_code=ErrorCode.SSH_CONNECTION_REFUSED,
                detail="Failed to establish TCP connection: [Errno 111] Connection refused",
            )
        transport = FakeTransport(remote)
        transports.append(transport)
        return SSHSession(transport, host, port)

    _factory.transports = transports
    return _factory
