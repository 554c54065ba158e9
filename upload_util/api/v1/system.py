"""
系统API
"""
from fastapi import APIRouter, Request

from upload_util.config import settings

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """健康检查端点"""
    client = getattr(request.app.state, "storage_client", None)
    return {
        "status": "healthy" if client is not None else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "storage": client.provider if client is not None else None,
    }
