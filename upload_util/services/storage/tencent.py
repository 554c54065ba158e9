"""
腾讯云COS存储
COS 兼容 S3 协议，通过 boto3 访问 cos.{region}.myqcloud.com
"""
from upload_util.models.upload_config import TencentCOSConfig
from upload_util.services.storage.base import BaseStorageClient
from upload_util.services.storage.s3 import S3Transport


class TencentCOSClient(BaseStorageClient):
    """腾讯云COS客户端"""

    provider = "tencent"
    display_name = "腾讯云COS"

    def _create_transport(self) -> S3Transport:
        config: TencentCOSConfig = self.config
        protocol = "https" if config.use_ssl else "http"
        return S3Transport(
            bucket=config.bucket,
            access_key_id=config.secret_id,
            secret_access_key=config.secret_key,
            region=config.region,
            endpoint=f"{protocol}://cos.{config.region}.myqcloud.com",
            addressing_style="virtual",
        )
