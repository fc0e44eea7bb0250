from typing import List
from fastapi.middleware import Middleware
from fastapi.middleware.cors import CORSMiddleware

from remote_shell.core.config import settings
from .request_context import RequestContextMiddleware, REQUEST_ID_HEADER


def setup_middlewares() -> List[Middleware]:
    # 순서: CORS 가 가장 바깥, 요청 ID 부여는 그 안쪽
    return [
        Middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            # 와일드카드 오리진에는 자격 증명 허용 불가
            allow_credentials="*" not in settings.CORS_ORIGINS,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        ),
        Middleware(RequestContextMiddleware),
    ]


__all__ = [
    'setup_middlewares',
    'RequestContextMiddleware'
]
