"""
SSH Session REST API Router
원격 셸 연결/명령 실행 REST API 엔드포인트

연결 식별자에는 '@' 와 ':' 가 포함되므로 클라이언트는 경로에 넣을 때 URL 인코딩해야 함.
"""

from fastapi import APIRouter, Depends, Path

from remote_shell.core.logger import logger
from remote_shell.core.exceptions import SSHSessionNotFoundException
from remote_shell.domains.shell.schemas.shell_schemas import (
    ConnectRequest,
    ConnectResponse,
    CommandResultResponse,
    ConnectionInfoResponse,
    ConnectionListResponse,
    DirectoryResponse,
    DisconnectResponse,
    ExecuteCommandRequest,
)
from remote_shell.domains.shell.services.shell_service import ShellService
from remote_shell.api.dependencies import get_shell_service

router = APIRouter(prefix="/ssh", tags=["SSH"])


@router.post("/connections", response_model=ConnectResponse)
async def connect(
    request_body: ConnectRequest,
    service: ShellService = Depends(get_shell_service),
):
    """
    SSH 연결 생성

    - password 또는 private_key_path 중 하나로 인증
    - 연결/인증 실패도 200 응답에 success=false 로 반환
    """
    response = await service.connect(request_body)

    if response.success:
        logger.info(f"[SSH-API] Connected {response.connection_id}")
    else:
        logger.warning(f"[SSH-API] Connect to {request_body.host}:{request_body.port} failed: {response.message}")

    return response


@router.get("/connections", response_model=ConnectionListResponse)
async def list_connections(
    service: ShellService = Depends(get_shell_service),
):
    """활성 연결 목록 조회"""
    connection_ids = await service.list_connections()
    return ConnectionListResponse(total=len(connection_ids), connection_ids=connection_ids)


@router.get("/connections/{connection_id}", response_model=ConnectionInfoResponse)
async def get_connection(
    connection_id: str = Path(..., description="연결 식별자"),
    service: ShellService = Depends(get_shell_service),
):
    """단일 연결 상세 정보 조회"""
    return await service.get_connection_info(connection_id)


@router.post("/connections/{connection_id}/commands", response_model=CommandResultResponse)
async def execute_command(
    request_body: ExecuteCommandRequest,
    connection_id: str = Path(..., description="연결 식별자"),
    service: ShellService = Depends(get_shell_service),
):
    """
    명령 실행

    - cd 명령은 세션의 작업 디렉토리를 갱신 (stdout 은 비어 있음)
    - 원격 명령 실패는 success=false 결과로 반환 (HTTP 200)
    - 등록되지 않은 식별자는 404
    """
    try:
        return await service.execute(connection_id, request_body.command)
    except SSHSessionNotFoundException:
        logger.warning(f"[SSH-API] Execute on unknown connection: {connection_id}")
        raise


@router.get("/connections/{connection_id}/directory", response_model=DirectoryResponse)
async def get_current_directory(
    connection_id: str = Path(..., description="연결 식별자"),
    service: ShellService = Depends(get_shell_service),
):
    """현재 작업 디렉토리 조회"""
    current_directory = await service.get_directory(connection_id)
    return DirectoryResponse(connection_id=connection_id, current_directory=current_directory)


@router.delete("/connections/{connection_id}", response_model=DisconnectResponse)
async def disconnect(
    connection_id: str = Path(..., description="연결 식별자"),
    service: ShellService = Depends(get_shell_service),
):
    """
    연결 해제

    - 존재했던 연결이면 success=true, 이미 없으면 success=false
    """
    removed = await service.disconnect(connection_id)
    logger.info(f"[SSH-API] Disconnect {connection_id}: removed={removed}")
    return DisconnectResponse(success=removed, connection_id=connection_id)
