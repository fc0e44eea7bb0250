from fastapi import Depends, FastAPI
from fastapi.responses import RedirectResponse

from remote_shell.api.dependencies import get_registry
from remote_shell.api.v1.router import api_router
from remote_shell.core.config import settings
from remote_shell.domains.shell.schemas.shell_schemas import HealthResponse
from remote_shell.infrastructures.ssh import ConnectionRegistry


def setup_routers(app: FastAPI) -> None:
    app.include_router(api_router)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health(registry: ConnectionRegistry = Depends(get_registry)):
        return HealthResponse(status="ok", connections=len(registry))

    if settings.DOCS_URL:
        # ROOT routing: docs로 redirect
        @app.get("/", include_in_schema=False)
        async def index():
            return RedirectResponse(settings.DOCS_URL)


__all__ = [
    'setup_routers'
]
