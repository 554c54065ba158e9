"""
FastAPI应用主入口
集成中间件系统和异常处理
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from upload_util.api.v1 import system_router, upload_router
from upload_util.config import settings
from upload_util.core.client_factory import create_client
from upload_util.core.middleware import (
    ExceptionHandlerMiddleware,
    RequestIDMiddleware,
    RequestTimingMiddleware,
    SecurityHeadersMiddleware,
)
from upload_util.models.upload_config import load_upload_config
from upload_util.services.storage import BaseStorageClient
from upload_util.utils.logger import get_logger, setup_logging

# 设置日志
setup_logging(log_level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL, log_dir=settings.LOG_DIR)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("application_starting", version=settings.APP_VERSION)

    # 配置错误在启动期直接抛出，服务不启动
    if getattr(app.state, "storage_client", None) is None:
        config = load_upload_config(settings.UPLOAD_CONFIG_PATH)
        app.state.storage_client = create_client(config)

    yield

    logger.info("application_shutting_down")


def create_app(storage_client: Optional[BaseStorageClient] = None) -> FastAPI:
    """
    创建FastAPI应用

    Args:
        storage_client: 存储客户端（可选，默认启动时按 UPLOAD_CONFIG_PATH 创建）
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="统一的多后端文件上传服务",
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.storage_client = storage_client

    # ===== 中间件配置 =====
    # 后添加的先执行
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url=f"{settings.API_V1_PREFIX}/system/health")

    app.include_router(
        upload_router,
        prefix=f"{settings.API_V1_PREFIX}/upload",
        tags=["Upload"],
    )
    app.include_router(
        system_router,
        prefix=f"{settings.API_V1_PREFIX}/system",
        tags=["System"],
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "upload_util.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
