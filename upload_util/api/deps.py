"""
路由依赖
"""
from fastapi import HTTPException, Request, status

from upload_util.services.storage import BaseStorageClient


def get_storage_client(request: Request) -> BaseStorageClient:
    """获取应用启动时创建的存储客户端"""
    client = getattr(request.app.state, "storage_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="存储服务未初始化",
        )
    return client
