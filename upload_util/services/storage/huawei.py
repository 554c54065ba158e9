"""
华为云OBS存储
OBS 兼容 S3 协议，通过 boto3 访问配置的 endpoint
"""
from upload_util.models.upload_config import HuaweiOBSConfig
from upload_util.services.storage.base import BaseStorageClient, endpoint_url
from upload_util.services.storage.s3 import S3Transport


class HuaweiOBSClient(BaseStorageClient):
    """华为云OBS客户端"""

    provider = "huawei"
    display_name = "华为云OBS"

    def _create_transport(self) -> S3Transport:
        config: HuaweiOBSConfig = self.config
        return S3Transport(
            bucket=config.bucket,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            region=config.region,
            endpoint=endpoint_url(config.endpoint, config.use_ssl),
            addressing_style="virtual",
        )
