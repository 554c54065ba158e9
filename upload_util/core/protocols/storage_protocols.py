"""
存储服务抽象接口 (SOLID: 依赖倒置原则)
"""
from typing import BinaryIO, Optional, Protocol

from upload_util.core.cancellation import CancelToken
from upload_util.models.upload import FileInput, UploadDescriptor


class IObjectTransport(Protocol):
    """后端传输层：只提供上传对象和删除对象两种能力"""

    def put_object(self, key: str, stream: BinaryIO, size: int, content_type: str) -> Optional[int]:
        """
        写入对象（已存在则覆盖）

        Args:
            key: 对象键
            stream: 可读字节流
            size: 字节数
            content_type: MIME类型

        Returns:
            实际写入的字节数，传输层无法得知时返回 None
        """
        ...

    def delete_object(self, key: str) -> None:
        """删除对象，失败时抛出原始异常"""
        ...


class IStorageClient(Protocol):
    """统一存储客户端接口 (支持本地/OSS/COS/OBS/S3/MinIO)"""

    def upload(self, file: FileInput, cancel_token: Optional[CancelToken] = None) -> UploadDescriptor:
        """校验、命名并上传文件，返回结果描述"""
        ...

    def delete(self, key: str) -> None:
        """删除对象"""
        ...

    def get_url(self, key: str) -> str:
        """获取对象访问URL（不做网络请求）"""
        ...
