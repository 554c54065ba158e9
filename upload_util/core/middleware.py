"""
中间件系统
包含异常处理、请求追踪、日志记录等中间件
"""
import time
import traceback
import uuid
from typing import Callable

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from upload_util.config import settings
from upload_util.core.exceptions import (
    ConfigurationError,
    FileValidationError,
    StorageError,
    UploadCancelledError,
    UploadUtilException,
    UrlError,
)
from upload_util.models.responses import ErrorDetail, ErrorResponse, ValidationErrorResponse
from upload_util.utils.logger import get_logger

logger = get_logger(__name__)


def error_code(exc: Exception) -> str:
    """异常类名转错误代码，如 FileTooLargeError -> FILETOOLARGE"""
    return exc.__class__.__name__.upper().replace("ERROR", "")


def status_code_for_exception(exc: UploadUtilException) -> int:
    """根据异常类型返回对应的HTTP状态码"""
    # 400 Bad Request
    if isinstance(exc, (FileValidationError, ConfigurationError, UrlError)):
        return status.HTTP_400_BAD_REQUEST

    # 408 Request Timeout
    if isinstance(exc, UploadCancelledError):
        return status.HTTP_408_REQUEST_TIMEOUT

    # 502 Bad Gateway
    if isinstance(exc, StorageError):
        return status.HTTP_502_BAD_GATEWAY

    return status.HTTP_500_INTERNAL_SERVER_ERROR


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    请求ID中间件
    为每个请求生成唯一ID，用于日志追踪和调试
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """为请求分配ID并写入响应头"""
        # 优先沿用调用方传入的请求ID
        request_id = request.headers.get("X-Request-ID", f"req_{uuid.uuid4().hex[:12]}")
        request.state.request_id = request_id

        # 请求进入
        logger.info(
            "request_started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)

        # 回写请求ID，便于客户端关联日志
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    请求计时中间件
    记录每个请求的处理时间
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """统计处理耗时"""
        start_time = time.time()

        response = await call_next(request)

        # 耗时写入响应头
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        # 请求完成
        logger.info(
            "request_completed",
            request_id=getattr(request.state, "request_id", "unknown"),
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time=f"{process_time:.4f}s",
        )
        return response


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """
    全局异常处理中间件
    捕获并处理所有未处理的异常，返回统一的错误响应
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """捕获下游异常并转换为统一错误响应"""
        try:
            return await call_next(request)

        # 上传业务异常（校验、配置、存储、取消）
        except UploadUtilException as exc:
            return await self._handle_upload_exception(request, exc)

        # 请求参数校验失败
        except RequestValidationError as exc:
            return await self._handle_validation_exception(request, exc)

        # 路由主动抛出的HTTP异常
        except StarletteHTTPException as exc:
            return await self._handle_http_exception(request, exc)

        # 兜底：未预期的异常
        except Exception as exc:
            return await self._handle_unexpected_exception(request, exc)

    async def _handle_upload_exception(
        self, request: Request, exc: UploadUtilException
    ) -> JSONResponse:
        """处理上传业务异常"""
        request_id = getattr(request.state, "request_id", "unknown")
        # 按异常类型映射HTTP状态码
        status_code = status_code_for_exception(exc)

        logger.warning(
            "upload_util_exception",
            request_id=request_id,
            exception_type=exc.__class__.__name__,
            message=exc.message,
            recoverable=exc.recoverable,
            cause=str(exc.__cause__) if exc.__cause__ else None,
            path=request.url.path,
        )

        # 调试模式附带堆栈
        error_response = ErrorResponse(
            error=ErrorDetail(
                code=error_code(exc),
                message=exc.message,
                detail=traceback.format_exc() if settings.DEBUG else None,
            ),
            path=str(request.url.path),
            method=request.method,
            request_id=request_id,
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json"),
        )

    async def _handle_validation_exception(
        self, request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """处理请求验证异常"""
        request_id = getattr(request.state, "request_id", "unknown")

        logger.warning(
            "validation_error",
            request_id=request_id,
            path=request.url.path,
            errors=exc.errors(),
        )

        # 每个字段错误单独返回
        errors = [
            ErrorDetail(
                code="VALIDATION_ERROR",
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
            )
            for error in exc.errors()
        ]

        validation_response = ValidationErrorResponse(
            errors=errors,
            path=str(request.url.path),
            request_id=request_id,
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=validation_response.model_dump(mode="json"),
        )

    async def _handle_http_exception(
        self, request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """处理HTTP异常"""
        request_id = getattr(request.state, "request_id", "unknown")

        logger.warning(
            "http_exception",
            request_id=request_id,
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.url.path,
        )

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=f"HTTP_{exc.status_code}",
                message=exc.detail or "请求失败",
            ),
            path=str(request.url.path),
            method=request.method,
            request_id=request_id,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=error_response.model_dump(mode="json"),
        )

    async def _handle_unexpected_exception(
        self, request: Request, exc: Exception
    ) -> JSONResponse:
        """处理未预期的异常"""
        request_id = getattr(request.state, "request_id", "unknown")

        # 完整堆栈只进日志，生产环境不返回给客户端
        logger.error(
            "unexpected_exception",
            request_id=request_id,
            exception_type=exc.__class__.__name__,
            exception_message=str(exc),
            traceback=traceback.format_exc(),
            path=request.url.path,
        )

        error_response = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="服务器内部错误" if not settings.DEBUG else str(exc),
                detail=traceback.format_exc() if settings.DEBUG else None,
            ),
            path=str(request.url.path),
            method=request.method,
            request_id=request_id,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response.model_dump(mode="json"),
        )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    安全响应头中间件
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """追加安全相关响应头"""
        response = await call_next(request)

        # 禁止MIME嗅探和页面嵌入
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        # 非调试环境启用HSTS
        if not settings.DEBUG:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response
