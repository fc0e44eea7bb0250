from pydantic import BaseModel, computed_field

# 명령을 원격에 전달하지 못한 경우의 exit status (실제 원격 종료 코드와 구분)
DISPATCH_FAILED_EXIT_STATUS = -1


class CommandResult(BaseModel):
    """SSH 커맨드 실행 결과 모델 클래스"""
    stdout: str
    stderr: str
    exit_status: int
    current_directory: str  # 명령 실행 후의 세션 작업 디렉토리

    @computed_field
    @property
    def success(self) -> bool:
        return self.exit_status == 0

    @classmethod
    def dispatch_failed(cls, reason: str, current_directory: str) -> "CommandResult":
        """채널 오류 등으로 명령을 실행하지 못했을 때의 결과"""
        return cls(
            stdout="",
            stderr=f"Command execution failed: {reason}",
            exit_status=DISPATCH_FAILED_EXIT_STATUS,
            current_directory=current_directory,
        )

    def __str__(self) -> str:
        """String representation of command result."""
        status = "Success" if self.success else f"Failed (exit status: {self.exit_status})"
        return f"{status} in {self.current_directory or '<unknown>'}\nstdout: {self.stdout}"
