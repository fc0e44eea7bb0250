from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List, Optional
from pydantic import Field


class Settings(BaseSettings):
    # 프로젝트 루트 디렉토리 설정
    BASE_DIR: Path = Path(__file__).parent.parent.parent

    # 환경 설정
    ENV: str = Field("development", pattern="^(development|staging|production|test)$")

    # 기본 애플리케이션 설정
    APP_NAME: str = "Remote Shell API Server"
    APP_DESC: str = "Directory-aware remote shell sessions over SSH"
    APP_VERSION: str = "0.1.0"
    DOCS_URL: Optional[str] = "/docs"
    DEBUG: bool = True
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # 로깅 설정
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s() - %(message)s"
    LOG_DIR: str = "logs"
    LOG_FILE: str = "remote_shell.log"
    LOG_MAX_BYTES: int = 1024 * 1024
    LOG_BACKUP_COUNT: int = 5
    LOG_TO_CONSOLE: bool = False

    # CORS 허용 오리진
    CORS_ORIGINS: List[str] = ["*"]

    # SSH 연결 설정
    SSH_CONNECT_TIMEOUT: float = Field(10.0, gt=0)
    SSH_KEEPALIVE_INTERVAL: int = Field(0, ge=0)  # 0 = disabled
    SSH_PTY_TERM: str = "xterm"

    # None 이면 원격 명령은 타임아웃 없이 완료될 때까지 대기
    SSH_COMMAND_TIMEOUT: Optional[float] = Field(None, gt=0)

    # 추적 중인 디렉토리를 shlex.quote 로 인용 (기본값: 그대로 '...' 로 감쌈)
    SSH_STRICT_QUOTING: bool = False

    # 같은 user@host:port 로 재연결 시 새 식별자 발급 여부
    SSH_UNIQUE_CONNECTION_IDS: bool = False

    # 레지스트리 락 획득 대기 시간 (None = 무제한)
    REGISTRY_LOCK_TIMEOUT: Optional[float] = Field(None, gt=0)

    # 환경별 설정값 조정
    def configure_for_environment(self):
        if self.ENV == "production":
            self.DEBUG = False
            self.DOCS_URL = None
        elif self.ENV == "development":
            self.DEBUG = True
            self.LOG_LEVEL = "DEBUG"
            self.LOG_TO_CONSOLE = True

    @property
    def LOG_PATH(self) -> Path:
        """로그 파일 전체 경로"""
        log_dir = Path(self.LOG_DIR)
        if not log_dir.is_absolute():
            log_dir = self.BASE_DIR / log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir / self.LOG_FILE

    # 환경변수 파일 설정
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix='REMOTE_SHELL_',
        extra='ignore'
    )


settings = Settings()
settings.configure_for_environment()
