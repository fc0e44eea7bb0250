"""커스텀 예외 클래스 정의

예외 계층도:
    BaseAppException
    |-- SSHException (SSH 예외)
    |   |-- SSHConfigException
    |   |-- SSHConnectionException
    |   |-- SSHHandshakeException
    |   |-- SSHAuthException
    |   |-- SSHCommandException
    |   +-- SSHCommandTimeoutException
    +-- RegistryException (연결 레지스트리 예외)
        |-- SSHSessionNotFoundException
        +-- RegistryLockException
"""

from typing import Optional, Dict, Any
from remote_shell.core.exceptions.error_codes import ErrorCode, get_error_category, ErrorCategory


class BaseAppException(Exception):
    """Base application exception. All custom exceptions inherit from this."""

    def __init__(
        self,
        error_code: ErrorCode,
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.error_code = error_code
        self.detail = detail
        self.context = context or {}
        self.original_exception = original_exception

        message = error_code.message
        if detail:
            message = f"{message}: {detail}"

        super().__init__(message)

    @property
    def code(self) -> int:
        return self.error_code.code

    @property
    def http_status(self) -> int:
        return self.error_code.http_status

    @property
    def category(self) -> ErrorCategory:
        return get_error_category(self.code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for client response"""
        result = {
            "error_code": self.code,
            "message": self.error_code.message,
            "category": self.category.value,
        }
        if self.detail:
            result["detail"] = self.detail
        return result

    def to_log_dict(self) -> Dict[str, Any]:
        """Convert to logging dictionary with more information"""
        log_data = self.to_dict()
        if self.context:
            log_data["context"] = self.context
        if self.original_exception:
            log_data["original_error"] = {
                "type": type(self.original_exception).__name__,
                "message": str(self.original_exception),
            }
        return log_data

    def __str__(self) -> str:
        return f"[{self.code}] {self.error_code.message}" + (
            f": {self.detail}" if self.detail else ""
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code}, "
            f"message='{self.error_code.message}', "
            f"detail='{self.detail}'"
            f")"
        )


# SSH Exceptions (2XXX)
class SSHException(BaseAppException):
    """SSH related base exception"""
    pass


class SSHConfigException(SSHException):
    """Invalid connection configuration (rejected before any network attempt)"""
    def __init__(
        self,
        detail: Optional[str] = None,
        field: Optional[str] = None,
        **kwargs
    ):
        context = {}
        if field:
            context["field"] = field
        super().__init__(ErrorCode.SSH_CONFIG_ERROR, detail=detail, context=context, **kwargs)


class SSHConnectionException(SSHException):
    """SSH connection exception (resolution, TCP connect)"""
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        detail: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.SSH_CONNECTION_FAILED,
        **kwargs
    ):
        context = {}
        if host:
            context["host"] = host
        if port:
            context["port"] = port
        super().__init__(error_code, detail=detail, context=context, **kwargs)


class SSHHandshakeException(SSHException):
    """SSH transport negotiation failed"""
    def __init__(
        self,
        host: Optional[str] = None,
        detail: Optional[str] = None,
        **kwargs
    ):
        context = {}
        if host:
            context["host"] = host
        super().__init__(ErrorCode.SSH_HANDSHAKE_FAILED, detail=detail, context=context, **kwargs)


class SSHAuthException(SSHException):
    """SSH authentication exception"""
    def __init__(
        self,
        username: Optional[str] = None,
        detail: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.SSH_AUTH_FAILED,
        **kwargs
    ):
        context = {}
        if username:
            context["username"] = username
        super().__init__(error_code, detail=detail, context=context, **kwargs)


class SSHCommandException(SSHException):
    """SSH command execution exception"""
    def __init__(
        self,
        command: Optional[str] = None,
        detail: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.SSH_COMMAND_FAILED,
        **kwargs
    ):
        context = {}
        if command:
            context["command"] = command
        super().__init__(error_code, detail=detail, context=context, **kwargs)


class SSHCommandTimeoutException(SSHException):
    """Remote command exceeded the configured timeout"""
    def __init__(
        self,
        command: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        **kwargs
    ):
        detail = f"Command timed out after {timeout_seconds}s" if timeout_seconds else None
        context = {}
        if command:
            context["command"] = command
        if timeout_seconds:
            context["timeout_seconds"] = timeout_seconds
        super().__init__(ErrorCode.SSH_COMMAND_TIMEOUT, detail=detail, context=context, **kwargs)


# Registry Exceptions (3XXX)
class RegistryException(BaseAppException):
    """Connection registry base exception"""
    pass


class SSHSessionNotFoundException(RegistryException):
    """No live session registered under the connection ID"""
    def __init__(self, connection_id: str, **kwargs):
        super().__init__(
            ErrorCode.SSH_SESSION_NOT_FOUND,
            detail=f"Unknown connection ID: {connection_id}",
            context={"connection_id": connection_id},
            **kwargs
        )


class RegistryLockException(RegistryException):
    """Registry lock could not be acquired"""
    def __init__(
        self,
        connection_id: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        **kwargs
    ):
        detail = f"Lock not acquired within {timeout_seconds}s" if timeout_seconds else None
        context = {}
        if connection_id:
            context["connection_id"] = connection_id
        if timeout_seconds:
            context["timeout_seconds"] = timeout_seconds
        super().__init__(ErrorCode.REGISTRY_LOCK_ERROR, detail=detail, context=context, **kwargs)
