"""SSH 세션 구현체

하나의 TCP 소켓 위에 paramiko Transport 하나를 두고,
인증 이후 추적 중인 작업 디렉토리를 함께 보관한다.
"""

import socket
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import paramiko

from remote_shell.core.config import settings
from remote_shell.core.logger import logger
from remote_shell.core.exceptions import (
    SSHConnectionException,
    SSHHandshakeException,
    SSHAuthException,
    SSHCommandException,
    ErrorCode,
)
from remote_shell.infrastructures.ssh.interfaces.ssh_session import SSHSessionInterface
from remote_shell.infrastructures.ssh.utils.ssh_utils import decode_output

# 개인키 파일 로드 시 시도할 키 타입 (순서대로)
_KEY_CLASSES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


class SSHSession(SSHSessionInterface):
    """SSH 세션 구현체 Using Paramiko Transport"""

    def __init__(self, transport: paramiko.Transport, host: str, port: int = 22):
        self._transport = transport
        self._host = host
        self._port = port
        self._username: Optional[str] = None
        self.current_directory: str = ""  # 인증 후 pwd 로 채워짐
        self.connected_at = datetime.now()

    @classmethod
    def open(cls, host: str, port: int = 22, timeout: Optional[float] = None) -> "SSHSession":
        """
        IPv4 주소 해석, TCP 연결, SSH 핸드셰이크 수행

        Args:
            host: SSH 서버 호스트
            port: SSH 포트 (기본값: 22)
            timeout: 연결 타임아웃 (초)

        Returns:
            핸드셰이크가 완료된 (미인증) SSHSession

        Raises:
            SSHConnectionException: 주소 해석 또는 TCP 연결 실패 시
            SSHHandshakeException: 핸드셰이크 실패 시
        """
        timeout = timeout or settings.SSH_CONNECT_TIMEOUT
        address = cls._resolve_ipv4(host, port)

        try:
            logger.info(f"[SSH] {host}:{port} ({address[0]})에 연결 중")
            sock = socket.create_connection(address, timeout=timeout)
        except socket.timeout as e:
            logger.error(f"[SSH] {host}:{port} 연결 타임아웃")
            raise SSHConnectionException(
                host=host,
                port=port,
                error_code=ErrorCode.SSH_CONNECTION_TIMEOUT,
                detail=f"Failed to establish TCP connection: timed out after {timeout}s",
                original_exception=e
            )
        except OSError as e:
            logger.error(f"[SSH] {host}:{port} 연결 중 소켓 에러: {e}")
            raise SSHConnectionException(
                host=host,
                port=port,
                error_code=ErrorCode.SSH_CONNECTION_REFUSED,
                detail=f"Failed to establish TCP connection: {e}",
                original_exception=e
            )

        transport = None
        try:
            transport = paramiko.Transport(sock)
            transport.start_client(timeout=timeout)
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"[SSH] {host} 핸드셰이크 실패: {e}")
            if transport is not None:
                transport.close()
            else:
                sock.close()
            raise SSHHandshakeException(
                host=host,
                detail=str(e) or type(e).__name__,
                original_exception=e
            )

        if settings.SSH_KEEPALIVE_INTERVAL > 0:
            transport.set_keepalive(settings.SSH_KEEPALIVE_INTERVAL)

        logger.info(f"[SSH] {host}에 대한 SSH 핸드셰이크 완료")
        return cls(transport, host, port)

    @staticmethod
    def _resolve_ipv4(host: str, port: int) -> Tuple[str, int]:
        try:
            infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError, ValueError) as e:
            # UnicodeError: IDNA 인코딩 불가 호스트명 (빈 레이블, 63자 초과 레이블)
            logger.error(f"[SSH] {host} 주소 해석 실패: {e}")
            raise SSHConnectionException(
                host=host,
                port=port,
                error_code=ErrorCode.SSH_RESOLUTION_FAILED,
                detail=str(e),
                original_exception=e
            )

        if not infos:
            raise SSHConnectionException(
                host=host,
                port=port,
                error_code=ErrorCode.SSH_RESOLUTION_FAILED,
                detail=f"No IPv4 address for {host}"
            )
        return infos[0][4][0], infos[0][4][1]

    def authenticate_password(self, username: str, password: str) -> None:
        try:
            self._transport.auth_password(username, password)
        except paramiko.AuthenticationException as e:
            logger.error(f"[SSH] {username} 비밀번호 인증 실패")
            raise SSHAuthException(
                username=username,
                detail="Password authentication failed",
                original_exception=e
            )
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"[SSH] {username} 비밀번호 인증 에러: {e}")
            raise SSHAuthException(
                username=username,
                detail=f"Password authentication error: {e}",
                original_exception=e
            )

        self._on_authenticated(username, "password")

    def authenticate_key(self, username: str, private_key_path: str, passphrase: Optional[str] = None) -> None:
        key = self._load_private_key(private_key_path, passphrase)

        try:
            self._transport.auth_publickey(username, key)
        except paramiko.AuthenticationException as e:
            logger.error(f"[SSH] {username} 키 인증 실패")
            raise SSHAuthException(
                username=username,
                detail="Key authentication failed",
                original_exception=e
            )
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"[SSH] {username} 키 인증 에러: {e}")
            raise SSHAuthException(
                username=username,
                detail=f"Key authentication error: {e}",
                original_exception=e
            )

        self._on_authenticated(username, "publickey")

    @staticmethod
    def _load_private_key(path: str, passphrase: Optional[str]) -> paramiko.PKey:
        for key_class in _KEY_CLASSES:
            try:
                return key_class.from_private_key_file(path, password=passphrase)
            except paramiko.PasswordRequiredException as e:
                raise SSHAuthException(
                    error_code=ErrorCode.SSH_KEY_ERROR,
                    detail="Private key is encrypted and no passphrase was provided",
                    original_exception=e
                )
            except OSError as e:
                raise SSHAuthException(
                    error_code=ErrorCode.SSH_KEY_ERROR,
                    detail=f"Cannot read private key '{path}': {e.strerror or e}",
                    original_exception=e
                )
            except (paramiko.SSHException, ValueError):
                continue

        raise SSHAuthException(
            error_code=ErrorCode.SSH_KEY_ERROR,
            detail=f"Unable to load private key '{path}' (unsupported format or wrong passphrase)"
        )

    def _on_authenticated(self, username: str, method: str) -> None:
        if not self._transport.is_authenticated():
            raise SSHAuthException(username=username, detail=f"Server did not accept {method} authentication")

        self._username = username
        logger.info(f"[SSH] {self._host}에 {username}로 인증 성공 ({method})")

        # 인증 직후 초기 작업 디렉토리 조회
        self.update_current_directory()

    def update_current_directory(self) -> None:
        """원격에서 pwd 를 실행해 current_directory 갱신

        Raises:
            SSHCommandException: pwd 실행 실패 시
        """
        try:
            channel = self.open_channel()
            try:
                channel.exec_command("pwd")
                stdout = channel.makefile("rb").read()
                channel.recv_exit_status()
            finally:
                channel.close()
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"[SSH] 작업 디렉토리 조회 실패: {e}")
            raise SSHCommandException(
                command="pwd",
                detail=f"Failed to read initial working directory: {e}",
                original_exception=e
            )

        self.current_directory = decode_output(stdout).strip()
        logger.debug(f"[SSH] 작업 디렉토리: {self.current_directory}")

    def open_channel(self) -> paramiko.Channel:
        if not self.is_active():
            raise SSHConnectionException(
                host=self._host,
                port=self._port,
                error_code=ErrorCode.SSH_NOT_CONNECTED,
                detail="SSH transport is not active"
            )
        return self._transport.open_session()

    def is_active(self) -> bool:
        return self._transport is not None and self._transport.is_active()

    def close(self) -> None:
        if self._transport is None:
            return
        try:
            self._transport.close()
            logger.info(f"[SSH] {self._host}:{self._port}로부터 연결 해제됨")
        finally:
            self._transport = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def username(self) -> Optional[str]:
        return self._username

    def get_connection_info(self) -> Dict[str, Any]:
        return {
            "host": self._host,
            "port": self._port,
            "username": self._username,
            "current_directory": self.current_directory,
            "transport_active": self.is_active(),
            "connected_at": self.connected_at.isoformat(timespec="seconds"),
        }
