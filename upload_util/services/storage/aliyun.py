"""
阿里云OSS存储
基于 oss2 SDK 的上传、删除
"""
from typing import BinaryIO, Optional

import oss2

from upload_util.models.upload_config import AliyunOSSConfig
from upload_util.services.storage.base import BaseStorageClient, endpoint_url


class OSSTransport:
    """oss2.Bucket 封装"""

    def __init__(self, config: AliyunOSSConfig):
        """
        初始化OSS Bucket

        Args:
            config: 阿里云OSS配置
        """
        auth = oss2.Auth(config.access_key_id, config.access_key_secret)
        self.bucket = oss2.Bucket(
            auth,
            endpoint_url(config.endpoint, config.use_ssl),
            config.bucket
        )

    def put_object(self, key: str, stream: BinaryIO, size: int, content_type: str) -> Optional[int]:
        self.bucket.put_object(
            key,
            stream,
            headers={
                "Content-Type": content_type,
                "Content-Length": str(size),
            }
        )
        return None

    def delete_object(self, key: str) -> None:
        self.bucket.delete_object(key)


class AliyunOSSClient(BaseStorageClient):
    """阿里云OSS客户端"""

    provider = "aliyun"
    display_name = "阿里云OSS"

    def _create_transport(self) -> OSSTransport:
        return OSSTransport(self.config)
