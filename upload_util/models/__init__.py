"""
数据模型模块
Pydantic 模型定义
"""
from .upload_config import (
    StorageType,
    OSSProvider,
    FilenameStrategy,
    UploadSettings,
    LocalConfig,
    AliyunOSSConfig,
    TencentCOSConfig,
    HuaweiOBSConfig,
    AWSS3Config,
    QCloudCOSConfig,
    MinioConfig,
    OSSConfig,
    UploadProvider,
    UploadConfig,
    ConfigBuilder,
    load_upload_config,
)
from .upload import (
    FileInput,
    FileSource,
    UploadDescriptor,
    BatchOutcome,
    BatchReport,
)
from .responses import (
    ErrorDetail,
    SuccessResponse,
    ErrorResponse,
    ValidationErrorResponse,
    UploadResponse,
)

__all__ = [
    "StorageType",
    "OSSProvider",
    "FilenameStrategy",
    "UploadSettings",
    "LocalConfig",
    "AliyunOSSConfig",
    "TencentCOSConfig",
    "HuaweiOBSConfig",
    "AWSS3Config",
    "QCloudCOSConfig",
    "MinioConfig",
    "OSSConfig",
    "UploadProvider",
    "UploadConfig",
    "ConfigBuilder",
    "load_upload_config",
    "FileInput",
    "FileSource",
    "UploadDescriptor",
    "BatchOutcome",
    "BatchReport",
    "ErrorDetail",
    "SuccessResponse",
    "ErrorResponse",
    "ValidationErrorResponse",
    "UploadResponse",
]
