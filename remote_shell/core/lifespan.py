"""
Application Lifespan Management
애플리케이션 라이프사이클 관리
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI

from remote_shell.core.config import settings
from remote_shell.core.logger import logger
from remote_shell.domains.shell.services.shell_service import ShellService
from remote_shell.infrastructures.ssh import ConnectionRegistry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 라이프사이클 관리

    - Startup: 연결 레지스트리 및 셸 서비스 생성
    - Shutdown: 남아 있는 모든 SSH 세션 종료
    """
    # ============ Startup ============
    logger.info("애플리케이션 시작 중...")

    registry = ConnectionRegistry(lock_timeout=settings.REGISTRY_LOCK_TIMEOUT)
    app.state.registry = registry
    app.state.shell_service = ShellService(registry)
    logger.info("연결 레지스트리 초기화 완료")

    yield

    # ============ Shutdown ============
    logger.info("애플리케이션 종료 중...")

    try:
        await registry.close_all()
        logger.info("모든 SSH 연결 종료됨")
    except Exception as e:
        logger.error(f"SSH 연결 종료 실패: {e}", exc_info=True)
