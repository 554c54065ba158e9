"""
存储客户端工厂

根据配置中的判别字段（type，以及 type=oss 时的 provider）构造唯一的存储客户端。
工厂本身不持有状态，同一份配置每次调用都会得到新的客户端实例。
"""
from typing import Optional

from upload_util.core.exceptions import UnsupportedProviderError, UnsupportedTypeError
from upload_util.core.protocols import IObjectTransport
from upload_util.models.upload_config import OSSProvider, StorageType, UploadConfig
from upload_util.services.storage import (
    AliyunOSSClient,
    AWSS3Client,
    BaseStorageClient,
    HuaweiOBSClient,
    LocalStorageClient,
    MinIOStorageClient,
    QCloudCOSClient,
    TencentCOSClient,
)
from upload_util.utils.logger import get_logger

logger = get_logger(__name__)

# OSS 服务商 -> 客户端类
OSS_CLIENTS = {
    OSSProvider.ALIYUN: AliyunOSSClient,
    OSSProvider.TENCENT: TencentCOSClient,
    OSSProvider.HUAWEI: HuaweiOBSClient,
    OSSProvider.AWS: AWSS3Client,
    OSSProvider.QCLOUD: QCloudCOSClient,
}


def _client_class(config: UploadConfig):
    storage_type = config.upload.type
    if storage_type == StorageType.LOCAL:
        return LocalStorageClient
    if storage_type == StorageType.MINIO:
        return MinIOStorageClient
    if storage_type == StorageType.OSS:
        provider = config.upload.oss.provider
        client_class = OSS_CLIENTS.get(provider)
        if client_class is None:
            raise UnsupportedProviderError(str(provider))
        return client_class
    raise UnsupportedTypeError(str(storage_type))


def create_client(
    config: UploadConfig,
    transport: Optional[IObjectTransport] = None,
) -> BaseStorageClient:
    """
    创建存储客户端

    Args:
        config: 上传配置
        transport: 传输层（可选，测试时注入替身，默认按配置创建SDK客户端）

    Returns:
        选中后端的存储客户端

    Raises:
        UnsupportedTypeError: 未知存储类型
        UnsupportedProviderError: 未知OSS服务商
        MissingPayloadError: 选中后端的配置块缺失
        ConfigurationError: 必填字段缺失或SDK客户端创建失败
    """
    config.validate_backend()
    backend, payload = config.backend_payload()
    client_class = _client_class(config)

    client = client_class(payload, config.upload_settings, transport=transport)

    logger.info(
        "storage_client_created",
        type=config.upload.type.value,
        backend=backend,
        client=client_class.__name__,
    )
    return client
