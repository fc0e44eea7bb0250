"""작업 디렉토리를 유지하는 명령 실행기

exec 채널은 매번 원격 기본 디렉토리에서 시작하므로,
모든 명령 앞에 추적 중인 디렉토리로의 cd 를 붙여 셸 상태를 흉내낸다.

재작성 규칙:
    cd <arg>          ->  cd <arg> && pwd            (성공 시 pwd 결과로 디렉토리 갱신)
    <cmd> (dir 있음)  ->  cd '<dir>' && <cmd>
    <cmd> (dir 없음)  ->  <cmd>

cd 인자와 추적 디렉토리는 escape 없이 그대로 삽입된다. 작은따옴표가 포함된
디렉토리는 strict_quoting=True 일 때만 안전하게 처리된다.
"""

import shlex
import socket
import time
from typing import Optional, Tuple

import paramiko

from remote_shell.core.config import settings
from remote_shell.core.logger import logger
from remote_shell.core.exceptions import SSHConnectionException, SSHCommandTimeoutException
from remote_shell.infrastructures.ssh.interfaces.ssh_session import SSHSessionInterface
from remote_shell.infrastructures.ssh.models.ssh_result import CommandResult
from remote_shell.infrastructures.ssh.utils.ssh_utils import decode_output


class CommandExecutor:
    """SSH 세션 위에서 작업 디렉토리를 추적하며 명령 실행"""

    def __init__(
        self,
        pty_term: str = "xterm",
        strict_quoting: bool = False,
        timeout: Optional[float] = None
    ):
        self.pty_term = pty_term
        self.strict_quoting = strict_quoting
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "CommandExecutor":
        return cls(
            pty_term=settings.SSH_PTY_TERM,
            strict_quoting=settings.SSH_STRICT_QUOTING,
            timeout=settings.SSH_COMMAND_TIMEOUT,
        )

    @staticmethod
    def is_directory_change_command(command: str) -> bool:
        trimmed = command.strip()
        return trimmed == "cd" or trimmed.startswith("cd ")

    def build_command_line(self, command: str, current_directory: str) -> str:
        """원격에 실제로 전달할 명령 문자열 생성"""
        if self.is_directory_change_command(command):
            argument = command.strip()[2:].strip()
            return f"cd {argument} && pwd"

        if not current_directory:
            return command

        if self.strict_quoting:
            return f"cd {shlex.quote(current_directory)} && {command}"
        return f"cd '{current_directory}' && {command}"

    def execute(self, session: SSHSessionInterface, command: str) -> CommandResult:
        """
        명령 실행 및 작업 디렉토리 갱신

        원격 명령의 실패(0 이 아닌 종료 코드, 채널 I/O 오류)는 예외가 아닌
        success=False 결과로 반환된다.

        Args:
            session: 인증된 SSH 세션
            command: 사용자가 입력한 명령

        Returns:
            CommandResult: 실행 결과와 실행 후 작업 디렉토리

        Raises:
            SSHCommandTimeoutException: timeout 이 설정되어 있고 초과한 경우
        """
        is_cd_command = self.is_directory_change_command(command)
        command_line = self.build_command_line(command, session.current_directory)

        try:
            stdout, stderr, exit_status = self._run(session, command_line)
        except socket.timeout as e:
            logger.error(f"[SSH] 명령 타임아웃 ({self.timeout}s): {command}")
            raise SSHCommandTimeoutException(
                command=command,
                timeout_seconds=self.timeout,
                original_exception=e
            )
        except (paramiko.SSHException, SSHConnectionException, OSError, EOFError) as e:
            logger.error(f"[SSH] 명령 실행 실패: {command} - {e}")
            return CommandResult.dispatch_failed(str(e), session.current_directory)

        if is_cd_command and exit_status == 0:
            session.current_directory = stdout.strip()
            logger.debug(f"[SSH] 작업 디렉토리 변경: {session.current_directory}")
            # pwd 출력은 내부 구현용이므로 호출자에게 노출하지 않음
            stdout = ""

        return CommandResult(
            stdout=stdout,
            stderr=stderr,
            exit_status=exit_status,
            current_directory=session.current_directory,
        )

    def _run(self, session: SSHSessionInterface, command_line: str) -> Tuple[str, str, int]:
        start_time = time.perf_counter()
        channel = session.open_channel()
        try:
            if self.timeout is not None:
                channel.settimeout(self.timeout)

            channel.get_pty(term=self.pty_term)
            logger.debug(f"[SSH] 명령 실행 중: {command_line}")
            channel.exec_command(command_line)

            # settimeout 은 stdout/stderr 읽기에만 적용됨
            stdout = decode_output(channel.makefile("rb").read())
            stderr = decode_output(channel.makefile_stderr("rb").read())
            exit_status = self._wait_exit_status(channel)
        finally:
            channel.close()

        executed_time = time.perf_counter() - start_time
        if exit_status == 0:
            logger.info(f"[SSH] 명령 완료: exit_status={exit_status}, executed_time={executed_time:.5f}s")
        else:
            logger.warning(f"[SSH] 명령 완료: exit_status={exit_status}, executed_time={executed_time:.5f}s")

        return stdout, stderr, exit_status

    def _wait_exit_status(self, channel: paramiko.Channel) -> int:
        # recv_exit_status() 는 채널 타임아웃을 무시하므로 status_event 로 직접 대기
        if self.timeout is not None and not channel.status_event.wait(self.timeout):
            raise socket.timeout("timed out waiting for exit status")
        return channel.recv_exit_status()
