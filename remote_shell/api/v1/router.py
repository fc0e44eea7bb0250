from fastapi import APIRouter
from .routers.ssh import router as ssh_router

# API Endpoint 라우터 통합 관리
api_router = APIRouter(prefix="/api/v1")
api_router.include_router(ssh_router, tags=["SSH"])
