from typing import Optional
from pydantic import BaseModel, Field, field_validator

from remote_shell.core.exceptions import SSHConfigException


class SSHCredential(BaseModel):
    """SSH 연결에 필요한 자격 증명 정보를 담는 모델"""
    host: str = Field(..., min_length=1, description="SSH 서버 호스트")
    port: int = Field(22, ge=1, le=65535, description="SSH 포트")
    username: str = Field(..., min_length=1, description="SSH 사용자명")
    password: Optional[str] = Field(None, description="비밀번호 인증 시 사용")
    private_key_path: Optional[str] = Field(None, description="키 인증 시 개인키 파일 경로")
    passphrase: Optional[str] = Field(None, description="개인키 passphrase")

    @field_validator("host", "username")
    @classmethod
    def strip_value(cls, v: str) -> str:
        """양쪽 공백 제거"""
        return v.strip()


class SSHConnectionConfig(SSHCredential):
    """SSH 연결 설정 정보를 담는 모델

    password 와 private_key_path 중 정확히 하나만 지정되어야 함.
    검증은 네트워크 접속 전에 validate_auth_method() 로 수행.
    """

    def validate_auth_method(self) -> None:
        """인증 방식 검증

        Raises:
            SSHConfigException: 인증 수단이 없거나 둘 다 지정된 경우
        """
        has_password = self.password is not None
        has_key = bool(self.private_key_path)

        if not has_password and not has_key:
            raise SSHConfigException(
                detail="No authentication method provided (password or private_key_path required)"
            )
        if has_password and has_key:
            raise SSHConfigException(
                detail="Only one authentication method may be provided (password or private_key_path)"
            )

    @property
    def uses_key(self) -> bool:
        return bool(self.private_key_path)

    def __repr__(self) -> str:
        auth = "key" if self.uses_key else "password"
        return f"SSHConnectionConfig({self.username}@{self.host}:{self.port}, auth={auth})"
