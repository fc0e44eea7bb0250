"""
Shell Schemas
원격 셸 API 요청/응답 스키마 (Pydantic)
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from remote_shell.infrastructures.ssh.models.connection import SSHConnectionConfig
from remote_shell.infrastructures.ssh.models.ssh_result import CommandResult

# 연결 요청 바디는 SSH 연결 설정 모델을 그대로 사용
ConnectRequest = SSHConnectionConfig
CommandResultResponse = CommandResult


class ConnectResponse(BaseModel):
    """연결 응답 (실패도 success=False 로 표현)"""

    success: bool
    message: str
    connection_id: Optional[str] = None


class ExecuteCommandRequest(BaseModel):
    """명령 실행 요청"""

    command: str = Field(..., min_length=1, description="실행할 명령")

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        """공백만 있는 명령 거부"""
        if not v.strip():
            raise ValueError("command must not be blank")
        return v


class DirectoryResponse(BaseModel):
    """작업 디렉토리 응답"""

    connection_id: str
    current_directory: str


class DisconnectResponse(BaseModel):
    """연결 해제 응답. success 는 '존재했고 제거됨' 을 의미"""

    success: bool
    connection_id: str


class ConnectionListResponse(BaseModel):
    """활성 연결 목록 응답"""

    total: int = Field(..., description="활성 연결 개수")
    connection_ids: List[str] = Field(..., description="연결 식별자 목록")


class ConnectionInfoResponse(BaseModel):
    """단일 연결 상세 정보"""

    connection_id: str
    host: str
    port: int
    username: Optional[str] = None
    current_directory: str
    transport_active: bool
    connected_at: str  # ISO 8601 format


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str
    connections: int
