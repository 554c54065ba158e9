"""
存储后端实现
"""
from upload_util.services.storage.base import BaseStorageClient
from upload_util.services.storage.local import LocalStorageClient
from upload_util.services.storage.aliyun import AliyunOSSClient
from upload_util.services.storage.tencent import TencentCOSClient
from upload_util.services.storage.huawei import HuaweiOBSClient
from upload_util.services.storage.s3 import AWSS3Client, QCloudCOSClient
from upload_util.services.storage.minio import MinIOStorageClient

__all__ = [
    "BaseStorageClient",
    "LocalStorageClient",
    "AliyunOSSClient",
    "TencentCOSClient",
    "HuaweiOBSClient",
    "AWSS3Client",
    "QCloudCOSClient",
    "MinIOStorageClient",
]
