from fastapi import Request

from remote_shell.domains.shell.services.shell_service import ShellService
from remote_shell.infrastructures.ssh import ConnectionRegistry


def get_registry(request: Request) -> ConnectionRegistry:
    """애플리케이션 단위 연결 레지스트리 제공 (lifespan 에서 생성)"""
    return request.app.state.registry


def get_shell_service(request: Request) -> ShellService:
    """셸 서비스 인스턴스 제공"""
    return request.app.state.shell_service
