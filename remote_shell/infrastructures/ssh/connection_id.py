"""Connection identifier strategy

식별자는 호출자에게 불투명한 값이며 파싱 대상이 아님.
"""

import uuid


class ConnectionIdStrategy:
    """(username, host, port) 로부터 연결 식별자 생성

    unique=False: ``username@host:port`` (같은 대상 재연결 시 기존 엔트리 교체)
    unique=True:  ``username@host:port-<8 hex>`` (연결마다 새 식별자)
    """

    def __init__(self, unique: bool = False):
        self.unique = unique

    def make(self, username: str, host: str, port: int) -> str:
        base = f"{username}@{host}:{port}"
        if self.unique:
            return f"{base}-{uuid.uuid4().hex[:8]}"
        return base
