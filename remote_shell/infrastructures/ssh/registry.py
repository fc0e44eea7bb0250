"""Connection registry

연결 식별자 -> SSH 세션 매핑. 애플리케이션 단위로 하나 생성되어
의존성 주입으로 전달된다 (app.state.registry).

락 구조:
- 맵 락 하나: 삽입/삭제/조회 동안만 보유 (네트워크 왕복 중에는 보유하지 않음)
- 엔트리 락: 같은 연결에 대한 명령을 직렬화 (current_directory 읽기/갱신 보호)

서로 다른 연결의 명령은 동시에 진행될 수 있다.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TypeVar

from remote_shell.core.logger import logger
from remote_shell.core.exceptions import SSHSessionNotFoundException, RegistryLockException
from remote_shell.infrastructures.ssh.interfaces.ssh_session import SSHSessionInterface
from remote_shell.infrastructures.ssh.utils.ssh_utils import run_in_executor

T = TypeVar("T")


@dataclass
class RegistryEntry:
    session: SSHSessionInterface
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    closed: bool = False


class ConnectionRegistry:
    """연결 레지스트리"""

    def __init__(self, lock_timeout: Optional[float] = None):
        """
        Args:
            lock_timeout: 락 획득 최대 대기 시간 (초). None 이면 무제한 대기
        """
        self._entries: Dict[str, RegistryEntry] = {}
        self._lock = asyncio.Lock()
        self._lock_timeout = lock_timeout

    @asynccontextmanager
    async def _acquire(self, lock: asyncio.Lock, connection_id: Optional[str] = None):
        if self._lock_timeout is None:
            await lock.acquire()
        else:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self._lock_timeout)
            except asyncio.TimeoutError as e:
                logger.error(f"[REGISTRY] 락 획득 타임아웃 ({self._lock_timeout}s): {connection_id}")
                raise RegistryLockException(
                    connection_id=connection_id,
                    timeout_seconds=self._lock_timeout,
                    original_exception=e
                )
        try:
            yield
        finally:
            lock.release()

    async def insert(self, connection_id: str, session: SSHSessionInterface) -> None:
        """세션 등록. 같은 식별자의 기존 세션은 종료 후 교체"""
        async with self._acquire(self._lock, connection_id):
            displaced = self._entries.get(connection_id)
            self._entries[connection_id] = RegistryEntry(session=session)
            total = len(self._entries)

        if displaced is not None:
            logger.warning(f"[REGISTRY] {connection_id} 기존 세션을 종료하고 교체함")
            await self._dispose(displaced)

        logger.info(f"[REGISTRY] {connection_id} 등록됨. 활성 연결 수: {total}")

    async def run(self, connection_id: str, func: Callable[[SSHSessionInterface], T]) -> T:
        """
        세션을 찾아 엔트리 락을 보유한 채 func(session) 을 워커 스레드에서 실행

        Raises:
            SSHSessionNotFoundException: 등록되지 않은 식별자
            RegistryLockException: 락 획득 타임아웃
        """
        async with self._acquire(self._lock, connection_id):
            entry = self._entries.get(connection_id)

        if entry is None:
            raise SSHSessionNotFoundException(connection_id)

        async with self._acquire(entry.lock, connection_id):
            # 대기 중에 제거된 경우
            if entry.closed:
                raise SSHSessionNotFoundException(connection_id)
            return await run_in_executor(func, entry.session)

    async def get(self, connection_id: str) -> Optional[SSHSessionInterface]:
        """읽기 전용 조회"""
        async with self._acquire(self._lock, connection_id):
            entry = self._entries.get(connection_id)
        return entry.session if entry is not None else None

    async def remove(self, connection_id: str) -> bool:
        """세션 제거 및 종료. 존재했으면 True"""
        async with self._acquire(self._lock, connection_id):
            entry = self._entries.pop(connection_id, None)
            total = len(self._entries)

        if entry is None:
            return False

        await self._dispose(entry)
        logger.info(f"[REGISTRY] {connection_id} 제거됨. 활성 연결 수: {total}")
        return True

    async def list_ids(self) -> List[str]:
        async with self._acquire(self._lock):
            return list(self._entries.keys())

    async def close_all(self) -> None:
        """모든 세션 종료 (애플리케이션 종료 시)"""
        async with self._acquire(self._lock):
            entries = list(self._entries.items())
            self._entries.clear()

        for connection_id, entry in entries:
            try:
                await self._dispose(entry)
            except Exception as e:
                logger.error(f"[REGISTRY] {connection_id} 종료 중 에러: {e}")

        if entries:
            logger.info(f"[REGISTRY] {len(entries)}개 연결 종료됨")

    async def _dispose(self, entry: RegistryEntry) -> None:
        # 진행 중인 명령이 끝난 뒤 transport 종료
        async with entry.lock:
            entry.closed = True
            await run_in_executor(entry.session.close)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._entries
