from fastapi import FastAPI

from remote_shell.core.config import settings
from remote_shell.core.lifespan import lifespan
from remote_shell.middlewares import setup_middlewares
from remote_shell.api import setup_routers
from remote_shell.core.exceptions import register_exception_handlers


def create_app() -> FastAPI:
    _app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESC,
        version=settings.APP_VERSION,
        docs_url=settings.DOCS_URL,
        middleware=setup_middlewares(),
        lifespan=lifespan,  # 라이프사이클 추가
    )

    # 전역 예외 핸들러 등록
    register_exception_handlers(_app)

    setup_routers(_app)
    return _app


app = create_app()
