"""
Shell Service
원격 셸 연결/명령 실행 비즈니스 로직 레이어
"""

from typing import Callable, List, Optional

from remote_shell.core.config import settings
from remote_shell.core.logger import logger
from remote_shell.core.exceptions import (
    SSHException,
    SSHConfigException,
    SSHSessionNotFoundException,
)
from remote_shell.domains.shell.schemas.shell_schemas import (
    ConnectResponse,
    ConnectionInfoResponse,
)
from remote_shell.infrastructures.ssh import (
    CommandExecutor,
    CommandResult,
    ConnectionIdStrategy,
    ConnectionRegistry,
    SSHConnectionConfig,
    SSHSession,
    SSHSessionInterface,
)
from remote_shell.infrastructures.ssh.utils.ssh_utils import run_in_executor

SessionFactory = Callable[[str, int, Optional[float]], SSHSessionInterface]


class ShellService:
    """원격 셸 서비스

    연결 생성, 명령 실행, 디렉토리 조회, 연결 해제, 목록 조회를 제공.
    모든 세션은 레지스트리가 소유하며 호출자는 식별자만 보관한다.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        executor: Optional[CommandExecutor] = None,
        id_strategy: Optional[ConnectionIdStrategy] = None,
        session_factory: Optional[SessionFactory] = None,
    ):
        """
        Args:
            registry: 연결 레지스트리 (의존성 주입)
            executor: 명령 실행기 (기본값: settings 기반)
            id_strategy: 식별자 생성 전략 (기본값: settings 기반)
            session_factory: (host, port, timeout) -> 핸드셰이크 완료된 세션
        """
        self.registry = registry
        self.executor = executor or CommandExecutor.from_settings()
        self.id_strategy = id_strategy or ConnectionIdStrategy(unique=settings.SSH_UNIQUE_CONNECTION_IDS)
        self.session_factory = session_factory or SSHSession.open

    async def connect(self, config: SSHConnectionConfig) -> ConnectResponse:
        """
        SSH 연결 및 인증 후 레지스트리에 등록

        전송/인증 오류는 예외가 아닌 success=False 응답으로 반환한다.

        Args:
            config: 연결 설정

        Returns:
            ConnectResponse
        """
        try:
            config.validate_auth_method()
        except SSHConfigException as e:
            logger.warning(f"[SHELL] 연결 설정 오류 {config!r}: {e.detail}")
            return ConnectResponse(success=False, message=e.detail)

        try:
            session = await run_in_executor(
                self.session_factory, config.host, config.port, settings.SSH_CONNECT_TIMEOUT
            )
        except SSHException as e:
            return ConnectResponse(
                success=False,
                message=f"Failed to create SSH connection: {e}",
            )

        try:
            await run_in_executor(self._authenticate, session, config)
        except SSHException as e:
            await run_in_executor(session.close)
            return ConnectResponse(
                success=False,
                message=f"Authentication failed: {e}",
            )

        connection_id = self.id_strategy.make(config.username, config.host, config.port)
        try:
            await self.registry.insert(connection_id, session)
        except Exception:
            await run_in_executor(session.close)
            raise

        logger.info(f"[SHELL] {connection_id} 연결됨 (cwd={session.current_directory})")
        return ConnectResponse(
            success=True,
            message="Successfully connected and authenticated",
            connection_id=connection_id,
        )

    @staticmethod
    def _authenticate(session: SSHSessionInterface, config: SSHConnectionConfig) -> None:
        if config.uses_key:
            session.authenticate_key(config.username, config.private_key_path, config.passphrase)
        else:
            session.authenticate_password(config.username, config.password)

    async def execute(self, connection_id: str, command: str) -> CommandResult:
        """
        명령 실행

        Raises:
            SSHSessionNotFoundException: 등록되지 않은 식별자
        """
        result = await self.registry.run(
            connection_id, lambda session: self.executor.execute(session, command)
        )
        logger.info(
            f"[SHELL] {connection_id} 명령 실행 완료: exit_status={result.exit_status}, "
            f"cwd={result.current_directory}"
        )
        return result

    async def get_directory(self, connection_id: str) -> str:
        """
        현재 작업 디렉토리 조회

        Raises:
            SSHSessionNotFoundException: 등록되지 않은 식별자
        """
        session = await self.registry.get(connection_id)
        if session is None:
            raise SSHSessionNotFoundException(connection_id)
        return session.current_directory

    async def get_connection_info(self, connection_id: str) -> ConnectionInfoResponse:
        session = await self.registry.get(connection_id)
        if session is None:
            raise SSHSessionNotFoundException(connection_id)
        return ConnectionInfoResponse(connection_id=connection_id, **session.get_connection_info())

    async def disconnect(self, connection_id: str) -> bool:
        """연결 해제. 존재했고 제거되었으면 True"""
        removed = await self.registry.remove(connection_id)
        if not removed:
            logger.info(f"[SHELL] {connection_id} 연결 해제 요청: 등록되지 않은 연결")
        return removed

    async def list_connections(self) -> List[str]:
        return await self.registry.list_ids()
