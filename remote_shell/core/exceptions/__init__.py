"""Exception handling package for the application

This package provides:
- Error codes (error_codes.py)
- Custom exception classes (base.py)
- FastAPI exception handlers (handlers.py)
"""

# Error codes
from remote_shell.core.exceptions.error_codes import (
    ErrorCode,
    ErrorCategory,
    get_error_category,
)

# Base exceptions
from remote_shell.core.exceptions.base import (
    BaseAppException,
    SSHException,
    SSHConfigException,
    SSHConnectionException,
    SSHHandshakeException,
    SSHAuthException,
    SSHCommandException,
    SSHCommandTimeoutException,
    RegistryException,
    SSHSessionNotFoundException,
    RegistryLockException,
)

# FastAPI handlers
from remote_shell.core.exceptions.handlers import (
    register_exception_handlers,
    error_response,
)

__all__ = [
    # Error codes
    "ErrorCode",
    "ErrorCategory",
    "get_error_category",
    # Base exceptions
    "BaseAppException",
    "SSHException",
    "SSHConfigException",
    "SSHConnectionException",
    "SSHHandshakeException",
    "SSHAuthException",
    "SSHCommandException",
    "SSHCommandTimeoutException",
    "RegistryException",
    "SSHSessionNotFoundException",
    "RegistryLockException",
    # FastAPI handlers
    "register_exception_handlers",
    "error_response",
]
