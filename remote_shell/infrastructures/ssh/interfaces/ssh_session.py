from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import paramiko


class SSHSessionInterface(ABC):
    """인증된 SSH 세션 인터페이스

    구현체는 작업 디렉토리(current_directory)를 보관하며,
    명령마다 새 채널을 열어 실행할 수 있어야 함
    """

    current_directory: str

    @abstractmethod
    def authenticate_password(self, username: str, password: str) -> None:
        """비밀번호 인증 후 초기 작업 디렉토리 조회

        Raises:
            SSHAuthException: 인증 실패 시
        """
        pass

    @abstractmethod
    def authenticate_key(self, username: str, private_key_path: str, passphrase: Optional[str] = None) -> None:
        """개인키 인증 후 초기 작업 디렉토리 조회

        Raises:
            SSHAuthException: 키 로드 또는 인증 실패 시
        """
        pass

    @abstractmethod
    def open_channel(self) -> paramiko.Channel:
        """명령 실행용 새 채널 열기

        Raises:
            SSHConnectionException: 세션이 닫혀 있는 경우
        """
        pass

    @abstractmethod
    def is_active(self) -> bool:
        """Transport 활성 여부"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Transport 종료. 여러 번 호출해도 안전해야 함"""
        pass

    @abstractmethod
    def get_connection_info(self) -> Dict[str, Any]:
        """현재 연결 정보 조회"""
        pass
