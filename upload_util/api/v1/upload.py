"""
文件上传API - Controller层
仅处理HTTP请求/响应，上传逻辑委托给存储客户端和批量上传服务
"""
import asyncio
from typing import BinaryIO, List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from upload_util.api.deps import get_storage_client
from upload_util.config import settings
from upload_util.core.middleware import error_code
from upload_util.models.responses import (
    DeleteRequest,
    GetURLResponse,
    MultiUploadResponse,
    SuccessResponse,
    UploadErrorItem,
    UploadResponse,
)
from upload_util.models.upload import FileInput
from upload_util.services.batch_upload import BatchUploader
from upload_util.services.storage import BaseStorageClient
from upload_util.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _stream_size(stream: BinaryIO) -> int:
    """通过 seek 获取已接收文件的大小"""
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(0)
    return size


def _to_file_input(file: UploadFile) -> FileInput:
    return FileInput(
        stream=file.file,
        filename=file.filename or "",
        size=_stream_size(file.file),
    )


@router.post("/file", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    client: BaseStorageClient = Depends(get_storage_client),
):
    """
    上传单个文件

    Returns:
        访问地址、对象键、大小、MIME类型
    """
    file_input = _to_file_input(file)
    descriptor = await asyncio.to_thread(client.upload, file_input)

    return UploadResponse(
        url=descriptor.url,
        key=descriptor.key,
        size=descriptor.size,
        mime_type=descriptor.mime_type,
        filename=file_input.filename,
    )


@router.post("/files", response_model=MultiUploadResponse)
async def upload_files(
    files: List[UploadFile] = File(...),
    client: BaseStorageClient = Depends(get_storage_client),
):
    """
    上传多个文件

    单个文件失败不影响其他文件，失败原因在 errors 中逐个返回。
    """
    if len(files) > settings.BATCH_MAX_FILES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"单次最多上传 {settings.BATCH_MAX_FILES} 个文件",
        )

    inputs = [_to_file_input(file) for file in files]
    uploader = BatchUploader(client, concurrency=settings.BATCH_CONCURRENCY)
    report = await asyncio.to_thread(uploader.run, inputs)

    results = [
        UploadResponse(
            url=o.descriptor.url,
            key=o.descriptor.key,
            size=o.descriptor.size,
            mime_type=o.descriptor.mime_type,
            filename=o.filename,
        )
        for o in report.succeeded
    ]
    errors = [
        UploadErrorItem(
            filename=o.filename,
            code=error_code(o.error),
            message=getattr(o.error, "message", str(o.error)),
        )
        for o in report.failed
    ]

    logger.info("multi_upload_completed", success_count=len(results), error_count=len(errors))

    return MultiUploadResponse(
        success_count=len(results),
        error_count=len(errors),
        results=results,
        errors=errors,
    )


@router.get("/url", response_model=GetURLResponse)
async def get_file_url(
    key: str = Query(default="", description="对象键"),
    client: BaseStorageClient = Depends(get_storage_client),
):
    """根据对象键获取访问地址"""
    if not key:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="key 不能为空")

    return GetURLResponse(url=client.get_url(key), key=key)


@router.delete("/file", response_model=SuccessResponse)
async def delete_file(
    request: DeleteRequest,
    client: BaseStorageClient = Depends(get_storage_client),
):
    """删除文件"""
    await asyncio.to_thread(client.delete, request.key)

    return SuccessResponse(data={"key": request.key}, message="删除成功")
