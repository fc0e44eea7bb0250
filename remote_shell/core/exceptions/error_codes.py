"""Error code system

Error code structure (5 digits):
- 1st digit: Category (1=General, 2=SSH, 3=Registry)
- 2nd-3rd digits: Sub-category
- 4th-5th digits: Specific error

Example: 20001 = SSH(2) Connection(00) Timeout(01)
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Error categories"""
    GENERAL = "1"
    SSH = "2"
    REGISTRY = "3"


class ErrorCode(Enum):
    """Error code definitions. Each code is (code, message, http_status) tuple."""

    # 1XXX: General Errors
    INTERNAL_SERVER_ERROR = (10000, "Internal server error", 500)
    SERVICE_UNAVAILABLE = (10001, "Service temporarily unavailable", 503)

    VALIDATION_ERROR = (12000, "Validation failed", 422)
    INVALID_REQUEST = (12001, "Invalid request", 400)

    RESOURCE_NOT_FOUND = (13000, "Resource not found", 404)

    # 2XXX: SSH Errors
    SSH_CONNECTION_FAILED = (20000, "SSH connection failed", 503)
    SSH_CONNECTION_TIMEOUT = (20001, "SSH connection timeout", 504)
    SSH_CONNECTION_REFUSED = (20002, "SSH connection refused", 503)
    SSH_RESOLUTION_FAILED = (20003, "Failed to resolve IPv4 address", 502)
    SSH_NOT_CONNECTED = (20004, "Not connected to SSH", 400)
    SSH_HANDSHAKE_FAILED = (20005, "SSH handshake failed", 502)

    SSH_AUTH_FAILED = (21000, "SSH authentication failed", 401)
    SSH_KEY_ERROR = (21003, "SSH key error", 400)

    SSH_COMMAND_FAILED = (22000, "SSH command execution failed", 500)
    SSH_COMMAND_TIMEOUT = (22001, "SSH command timeout", 504)

    SSH_CONFIG_ERROR = (23000, "SSH configuration error", 400)

    # 3XXX: Registry Errors
    SSH_SESSION_NOT_FOUND = (30000, "Connection not found. Please connect first.", 404)
    REGISTRY_LOCK_ERROR = (31000, "Connection registry is unavailable", 503)

    @property
    def code(self) -> int:
        """Return error code"""
        return self.value[0]

    @property
    def message(self) -> str:
        """Return error message"""
        return self.value[1]

    @property
    def http_status(self) -> int:
        """Return HTTP status code"""
        return self.value[2]


ERROR_CATEGORY_MAP = {
    ErrorCategory.GENERAL: range(10000, 20000),
    ErrorCategory.SSH: range(20000, 30000),
    ErrorCategory.REGISTRY: range(30000, 40000),
}


def get_error_category(error_code: int) -> ErrorCategory:
    """Get category from error code"""
    for category, code_range in ERROR_CATEGORY_MAP.items():
        if error_code in code_range:
            return category
    return ErrorCategory.GENERAL
