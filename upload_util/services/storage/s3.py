"""
S3协议存储
boto3 客户端封装，AWS S3 以及兼容 S3 协议的其他云存储共用
"""
from typing import BinaryIO, Optional

import boto3
from botocore.config import Config as BotoConfig

from upload_util.models.upload_config import AWSS3Config, QCloudCOSConfig
from upload_util.services.storage.base import BaseStorageClient, endpoint_url


class S3Transport:
    """boto3 S3 客户端封装（客户端线程安全，构造时创建一次）"""

    def __init__(
        self,
        bucket: str,
        access_key_id: str,
        secret_access_key: str,
        region: Optional[str] = None,
        endpoint: Optional[str] = None,
        addressing_style: str = "auto",
    ):
        """
        Args:
            bucket: 桶名
            access_key_id: 访问密钥ID
            secret_access_key: 访问密钥
            region: 区域
            endpoint: 完整的 endpoint URL（None 使用 AWS 官方地址）
            addressing_style: virtual / path / auto
        """
        self.bucket = bucket
        session = boto3.session.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region or None,
        )
        self.client = session.client(
            "s3",
            endpoint_url=endpoint or None,
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": addressing_style},
            ),
        )

    def put_object(self, key: str, stream: BinaryIO, size: int, content_type: str) -> Optional[int]:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=stream,
            ContentLength=size,
            ContentType=content_type,
        )
        return None

    def delete_object(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)


class AWSS3Client(BaseStorageClient):
    """AWS S3 客户端（自定义 endpoint 时使用路径风格）"""

    provider = "aws"
    display_name = "AWS S3"

    def _create_transport(self) -> S3Transport:
        config: AWSS3Config = self.config
        if config.endpoint:
            return S3Transport(
                bucket=config.bucket,
                access_key_id=config.access_key_id,
                secret_access_key=config.secret_access_key,
                region=config.region,
                endpoint=endpoint_url(config.endpoint, config.use_ssl),
                addressing_style="path",
            )
        return S3Transport(
            bucket=config.bucket,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            region=config.region,
        )


class QCloudCOSClient(BaseStorageClient):
    """兼容 S3 协议的其他云存储客户端"""

    provider = "qcloud"
    display_name = "S3兼容存储"

    def _create_transport(self) -> S3Transport:
        config: QCloudCOSConfig = self.config
        return S3Transport(
            bucket=config.bucket,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            region=config.region,
            endpoint=endpoint_url(config.endpoint, config.use_ssl),
            addressing_style="path",
        )
