"""
存储客户端基类
统一上传流程：校验 -> 命名 -> 拼接对象键 -> 写入后端 -> 解析URL
各后端只需提供传输层（put/delete）和配置块，URL解析按配置块类型分派
"""
from abc import ABC, abstractmethod
from typing import Optional

from upload_util.core.cancellation import CancellableReader, CancelToken
from upload_util.core.exceptions import (
    BackendDeleteFailedError,
    BackendWriteFailedError,
    ConfigurationError,
    UploadCancelledError,
)
from upload_util.core.protocols import IObjectTransport
from upload_util.models.upload import FileInput, UploadDescriptor
from upload_util.models.upload_config import BackendPayload, UploadSettings
from upload_util.services.naming import (
    build_object_key,
    generate_object_name,
    get_mime_type,
    validate_file,
)
from upload_util.services.url_resolver import resolve_url, split_endpoint
from upload_util.utils.logger import get_logger

logger = get_logger(__name__)


def endpoint_url(endpoint: str, use_ssl: bool) -> str:
    """为不带协议头的 endpoint 补齐协议（与访问URL使用同一协议）"""
    protocol, host = split_endpoint(endpoint, use_ssl)
    return f"{protocol}://{host}"


class BaseStorageClient(ABC):
    """
    存储客户端基类

    构造后只读，可被多个线程并发调用；传输层内部的连接池等同步由SDK负责。
    """

    provider: str = ""
    display_name: str = ""

    def __init__(
        self,
        config: BackendPayload,
        settings: UploadSettings,
        transport: Optional[IObjectTransport] = None,
    ):
        """
        初始化存储客户端

        Args:
            config: 后端配置块
            settings: 上传策略
            transport: 传输层（可选，默认按配置创建SDK客户端）

        Raises:
            ConfigurationError: SDK客户端创建失败
        """
        self.config = config
        self.settings = settings

        if transport is None:
            try:
                transport = self._create_transport()
            except ConfigurationError:
                raise
            except Exception as e:
                logger.error("storage_client_init_failed", provider=self.provider, error=str(e))
                raise ConfigurationError(f"{self.display_name}客户端初始化失败: {str(e)}") from e
        self.transport = transport

        logger.info(
            "storage_client_initialized",
            provider=self.provider,
            bucket=getattr(config, "bucket", None),
            path_prefix=self.path_prefix or None,
        )

    @abstractmethod
    def _create_transport(self) -> IObjectTransport:
        """根据配置创建后端传输层"""
        raise NotImplementedError

    @property
    def path_prefix(self) -> str:
        return getattr(self.config, "path_prefix", "") or ""

    def object_key_for(self, file: FileInput) -> str:
        """按命名策略和路径前缀生成对象键"""
        name = generate_object_name(file, self.settings)
        return build_object_key(name, self.path_prefix)

    def upload(self, file: FileInput, cancel_token: Optional[CancelToken] = None) -> UploadDescriptor:
        """
        上传文件

        Args:
            file: 待上传文件
            cancel_token: 取消信号（可选）

        Returns:
            UploadDescriptor: 上传结果

        Raises:
            FileValidationError: 校验失败（不会发起网络请求）
            BackendWriteFailedError: 后端写入失败
            UploadCancelledError: 已取消
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        validate_file(file, self.settings)

        key = self.object_key_for(file)
        mime_type = get_mime_type(key)

        stream = file.stream
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
            stream = CancellableReader(stream, cancel_token)

        logger.info(
            "upload_started",
            provider=self.provider,
            filename=file.filename,
            key=key,
            size=file.size,
        )

        try:
            written = self.transport.put_object(key, stream, file.size, mime_type)
        except UploadCancelledError:
            logger.warning("upload_cancelled", provider=self.provider, key=key)
            raise
        except Exception as e:
            if cancel_token is not None and cancel_token.cancelled:
                logger.warning("upload_cancelled", provider=self.provider, key=key)
                raise UploadCancelledError() from e
            logger.error("upload_failed", provider=self.provider, key=key, error=str(e))
            raise BackendWriteFailedError(f"上传到{self.display_name}失败: {str(e)}") from e

        descriptor = UploadDescriptor(
            url=self.get_url(key),
            key=key,
            size=written if written is not None else file.size,
            mime_type=mime_type,
        )

        logger.info(
            "upload_success",
            provider=self.provider,
            key=key,
            size=descriptor.size,
        )
        return descriptor

    def delete(self, key: str) -> None:
        """
        删除对象

        对象不存在是否报错取决于后端：本地存储会报错，S3类接口通常视为成功。

        Raises:
            BackendDeleteFailedError: 后端返回错误
        """
        try:
            self.transport.delete_object(key)
        except Exception as e:
            logger.error("delete_failed", provider=self.provider, key=key, error=str(e))
            raise BackendDeleteFailedError(f"从{self.display_name}删除失败: {str(e)}") from e

        logger.info("delete_success", provider=self.provider, key=key)

    def get_url(self, key: str) -> str:
        """获取访问URL（纯计算，不发起网络请求）"""
        return resolve_url(self.config, key)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} provider={self.provider}>"
