"""
MinIO存储
"""
from typing import BinaryIO, Optional

from minio import Minio

from upload_util.models.upload_config import MinioConfig
from upload_util.services.storage.base import BaseStorageClient
from upload_util.services.url_resolver import split_endpoint


class MinIOTransport:
    """minio.Minio 客户端封装"""

    def __init__(self, config: MinioConfig):
        self.bucket = config.bucket
        protocol, host = split_endpoint(config.endpoint, config.use_ssl)
        self.secure = protocol == "https"
        self.client = Minio(
            host,
            access_key=config.access_key,
            secret_key=config.secret_key,
            secure=self.secure,
            region=config.region or None,
        )

    def put_object(self, key: str, stream: BinaryIO, size: int, content_type: str) -> Optional[int]:
        self.client.put_object(
            bucket_name=self.bucket,
            object_name=key,
            data=stream,
            length=size,
            content_type=content_type,
        )
        return size

    def delete_object(self, key: str) -> None:
        self.client.remove_object(bucket_name=self.bucket, object_name=key)


class MinIOStorageClient(BaseStorageClient):
    """MinIO客户端"""

    provider = "minio"
    display_name = "MinIO"

    def _create_transport(self) -> MinIOTransport:
        return MinIOTransport(self.config)
