"""
存储后端配置模型
描述唯一激活的存储后端以及共享的上传策略（大小/扩展名限制、命名策略）

YAML 文档结构:
    upload:
      type: local | oss | minio
      local: {path, url-prefix}
      oss:   {provider: aliyun|tencent|huawei|aws|qcloud, <provider>: {...}}
      minio: {endpoint, access-key, secret-key, bucket, use-ssl, ...}
    upload-settings:
      max-file-size / allowed-extensions / filename-strategy / keep-original-name
"""
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from upload_util.core.exceptions import (
    ConfigurationError,
    MissingPayloadError,
    UnsupportedProviderError,
    UnsupportedTypeError,
    UrlError,
)
from upload_util.utils.logger import get_logger

logger = get_logger(__name__)


class StorageType(str, Enum):
    """存储类型"""
    LOCAL = "local"
    OSS = "oss"
    MINIO = "minio"


class OSSProvider(str, Enum):
    """对象存储服务商"""
    ALIYUN = "aliyun"
    TENCENT = "tencent"
    HUAWEI = "huawei"
    AWS = "aws"
    QCLOUD = "qcloud"


class FilenameStrategy(str, Enum):
    """文件命名策略"""
    ORIGINAL = "original"
    UUID = "uuid"
    TIMESTAMP = "timestamp"


class _ConfigModel(BaseModel):
    """配置模型基类：不可变，YAML 使用短横线键名"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class UploadSettings(_ConfigModel):
    """共享上传策略"""

    max_file_size: int = Field(default=100, gt=0, alias="max-file-size", description="最大文件大小（MB）")
    allowed_extensions: Tuple[str, ...] = Field(
        default=(),
        alias="allowed-extensions",
        description="允许的扩展名（带点，空表示不限制）"
    )
    filename_strategy: FilenameStrategy = Field(
        default=FilenameStrategy.UUID,
        alias="filename-strategy",
        description="命名策略: original/uuid/timestamp"
    )
    keep_original_name: bool = Field(default=False, alias="keep-original-name")

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v):
        """统一为小写并补齐前导点"""
        if v is None:
            return ()
        if isinstance(v, str):
            v = [item for item in v.split(",")]
        normalized = []
        for ext in v:
            ext = str(ext).strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        return tuple(normalized)

    @field_validator("filename_strategy", mode="before")
    @classmethod
    def fallback_strategy(cls, v):
        """未知策略回退为 uuid（约定行为，不报错）"""
        if isinstance(v, FilenameStrategy):
            return v
        value = str(v).strip().lower() if v is not None else ""
        if value not in {s.value for s in FilenameStrategy}:
            logger.warning("unknown_filename_strategy", strategy=v, fallback="uuid")
            return FilenameStrategy.UUID
        return value

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size * 1024 * 1024


class LocalConfig(_ConfigModel):
    """本地文件系统"""

    path: str = ""
    url_prefix: str = Field(default="", alias="url-prefix")


class AliyunOSSConfig(_ConfigModel):
    """阿里云 OSS"""

    endpoint: str = ""
    access_key_id: str = Field(default="", alias="access-key-id")
    access_key_secret: str = Field(default="", alias="access-key-secret")
    bucket: str = ""
    domain: str = ""
    path_prefix: str = Field(default="", alias="path-prefix")
    use_ssl: bool = Field(default=True, alias="use-ssl")


class TencentCOSConfig(_ConfigModel):
    """腾讯云 COS"""

    region: str = ""
    secret_id: str = Field(default="", alias="secret-id")
    secret_key: str = Field(default="", alias="secret-key")
    bucket: str = ""
    domain: str = ""
    path_prefix: str = Field(default="", alias="path-prefix")
    use_ssl: bool = Field(default=True, alias="use-ssl")


class HuaweiOBSConfig(_ConfigModel):
    """华为云 OBS"""

    endpoint: str = ""
    access_key_id: str = Field(default="", alias="access-key-id")
    secret_access_key: str = Field(default="", alias="secret-access-key")
    bucket: str = ""
    region: str = ""
    domain: str = ""
    path_prefix: str = Field(default="", alias="path-prefix")
    use_ssl: bool = Field(default=True, alias="use-ssl")


class AWSS3Config(_ConfigModel):
    """AWS S3（endpoint 为空时使用官方虚拟主机域名）"""

    region: str = ""
    access_key_id: str = Field(default="", alias="access-key-id")
    secret_access_key: str = Field(default="", alias="secret-access-key")
    bucket: str = ""
    endpoint: str = ""
    domain: str = ""
    path_prefix: str = Field(default="", alias="path-prefix")
    use_ssl: bool = Field(default=True, alias="use-ssl")


class QCloudCOSConfig(_ConfigModel):
    """其他兼容 S3 协议的云存储（endpoint 必填）"""

    region: str = ""
    access_key_id: str = Field(default="", alias="access-key-id")
    secret_access_key: str = Field(default="", alias="secret-access-key")
    bucket: str = ""
    endpoint: str = ""
    domain: str = ""
    path_prefix: str = Field(default="", alias="path-prefix")
    use_ssl: bool = Field(default=True, alias="use-ssl")


class MinioConfig(_ConfigModel):
    """MinIO"""

    endpoint: str = ""
    access_key: str = Field(default="", alias="access-key")
    secret_key: str = Field(default="", alias="secret-key")
    bucket: str = ""
    domain: str = ""
    path_prefix: str = Field(default="", alias="path-prefix")
    use_ssl: bool = Field(default=False, alias="use-ssl")
    region: str = ""


BackendPayload = Union[
    LocalConfig,
    AliyunOSSConfig,
    TencentCOSConfig,
    HuaweiOBSConfig,
    AWSS3Config,
    QCloudCOSConfig,
    MinioConfig,
]

# 各后端必填字段（属性名）
REQUIRED_FIELDS = {
    LocalConfig: ("path",),
    AliyunOSSConfig: ("endpoint", "access_key_id", "access_key_secret", "bucket"),
    TencentCOSConfig: ("region", "secret_id", "secret_key", "bucket"),
    HuaweiOBSConfig: ("endpoint", "access_key_id", "secret_access_key", "bucket"),
    AWSS3Config: ("region", "access_key_id", "secret_access_key", "bucket"),
    QCloudCOSConfig: ("region", "access_key_id", "secret_access_key", "bucket", "endpoint"),
    MinioConfig: ("endpoint", "access_key", "secret_key", "bucket"),
}


def parse_storage_type(value: Any) -> StorageType:
    """解析存储类型，未知值抛出 UnsupportedTypeError"""
    if isinstance(value, StorageType):
        return value
    try:
        return StorageType(str(value).strip().lower())
    except ValueError:
        raise UnsupportedTypeError(str(value))


def parse_provider(value: Any) -> OSSProvider:
    """解析OSS服务商，未知值抛出 UnsupportedProviderError"""
    if isinstance(value, OSSProvider):
        return value
    try:
        return OSSProvider(str(value).strip().lower())
    except ValueError:
        raise UnsupportedProviderError(str(value))


class OSSConfig(_ConfigModel):
    """对象存储配置：provider 判别 + 各服务商配置块"""

    provider: OSSProvider
    aliyun: Optional[AliyunOSSConfig] = None
    tencent: Optional[TencentCOSConfig] = None
    huawei: Optional[HuaweiOBSConfig] = None
    aws: Optional[AWSS3Config] = None
    qcloud: Optional[QCloudCOSConfig] = None

    @field_validator("provider", mode="before")
    @classmethod
    def check_provider(cls, v):
        return parse_provider(v)

    def payload(self) -> Optional[BackendPayload]:
        """当前 provider 对应的配置块"""
        return getattr(self, self.provider.value)


class UploadProvider(_ConfigModel):
    """存储后端选择"""

    type: StorageType
    local: Optional[LocalConfig] = None
    oss: Optional[OSSConfig] = None
    minio: Optional[MinioConfig] = None

    @field_validator("type", mode="before")
    @classmethod
    def check_type(cls, v):
        return parse_storage_type(v)


class UploadConfig(_ConfigModel):
    """完整上传配置（进程内加载一次，不可变）"""

    upload: UploadProvider
    upload_settings: UploadSettings = Field(default_factory=UploadSettings, alias="upload-settings")

    def backend_payload(self) -> Tuple[str, BackendPayload]:
        """
        返回 (后端名称, 配置块)

        Raises:
            MissingPayloadError: 判别字段指向的配置块缺失
        """
        storage_type = self.upload.type
        if storage_type == StorageType.LOCAL:
            if self.upload.local is None:
                raise MissingPayloadError("local")
            return "local", self.upload.local
        if storage_type == StorageType.MINIO:
            if self.upload.minio is None:
                raise MissingPayloadError("minio")
            return "minio", self.upload.minio
        if storage_type == StorageType.OSS:
            if self.upload.oss is None:
                raise MissingPayloadError("oss")
            payload = self.upload.oss.payload()
            if payload is None:
                raise MissingPayloadError(f"oss.{self.upload.oss.provider.value}")
            return self.upload.oss.provider.value, payload
        raise UnsupportedTypeError(str(storage_type))

    def validate_backend(self) -> "UploadConfig":
        """
        校验当前选中后端的配置块存在且必填字段完整

        Returns:
            自身（便于链式调用）

        Raises:
            MissingPayloadError: 配置块缺失
            ConfigurationError: 必填字段为空
        """
        backend, payload = self.backend_payload()
        for field_name in REQUIRED_FIELDS[type(payload)]:
            if not str(getattr(payload, field_name) or "").strip():
                field = type(payload).model_fields[field_name]
                raise ConfigurationError(f"{backend} 配置缺少必填字段: {field.alias or field_name}")
        return self

    def current_oss_provider(self) -> Tuple[BackendPayload, str]:
        """
        获取当前 OSS 服务商的配置块

        Raises:
            UrlError: 当前配置未使用 OSS
        """
        if self.upload.type != StorageType.OSS or self.upload.oss is None:
            raise UrlError("当前未使用 OSS 上传")
        payload = self.upload.oss.payload()
        if payload is None:
            raise UrlError(f"OSS 服务商 {self.upload.oss.provider.value} 未配置")
        return payload, self.upload.oss.provider.value

    def with_provider(self, provider: Union[str, OSSProvider]) -> "UploadConfig":
        """
        切换 OSS 服务商，返回新的配置对象（不修改当前配置）
        """
        if self.upload.oss is None:
            raise MissingPayloadError("oss")
        new_oss = self.upload.oss.model_copy(update={"provider": parse_provider(provider)})
        new_upload = self.upload.model_copy(update={"type": StorageType.OSS, "oss": new_oss})
        return self.model_copy(update={"upload": new_upload})


def load_upload_config(path: Union[str, Path]) -> UploadConfig:
    """
    从YAML文件加载上传配置，并在加载时完成后端校验

    Args:
        path: 配置文件路径

    Returns:
        UploadConfig实例

    Raises:
        ConfigurationError: 文件不存在、YAML无效或配置不完整
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise ConfigurationError(f"配置文件不存在: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as fp:
            payload = yaml.safe_load(fp) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"配置文件解析失败: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigurationError("配置文件格式错误: 顶层必须是映射")

    try:
        config = UploadConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"配置无效: {exc}") from exc

    config.validate_backend()
    logger.info(
        "upload_config_loaded",
        path=str(config_path),
        type=config.upload.type.value,
        provider=config.upload.oss.provider.value if config.upload.oss else None,
    )
    return config


class ConfigBuilder:
    """
    配置构建器

    示例:
        config = (
            ConfigBuilder()
            .with_minio("localhost:9000", "minioadmin", "minioadmin", "uploads")
            .with_path_prefix("images")
            .build()
        )
    """

    def __init__(self):
        self._upload: dict = {}
        self._path_prefix: Optional[str] = None
        self._settings: dict = {
            "max_file_size": 100,
            "allowed_extensions": [".jpg", ".jpeg", ".png", ".pdf"],
            "filename_strategy": FilenameStrategy.UUID,
            "keep_original_name": False,
        }

    def _with_oss(self, provider: OSSProvider, payload: BaseModel) -> "ConfigBuilder":
        self._upload = {
            "type": StorageType.OSS,
            "oss": {"provider": provider, provider.value: payload},
        }
        return self

    def with_local(self, path: str, url_prefix: str = "") -> "ConfigBuilder":
        """配置本地存储"""
        self._upload = {"type": StorageType.LOCAL, "local": LocalConfig(path=path, url_prefix=url_prefix)}
        return self

    def with_aliyun_oss(self, endpoint: str, access_key_id: str, access_key_secret: str, bucket: str) -> "ConfigBuilder":
        """配置阿里云 OSS"""
        return self._with_oss(OSSProvider.ALIYUN, AliyunOSSConfig(
            endpoint=endpoint,
            access_key_id=access_key_id,
            access_key_secret=access_key_secret,
            bucket=bucket,
            use_ssl=True,
        ))

    def with_tencent_cos(self, region: str, secret_id: str, secret_key: str, bucket: str) -> "ConfigBuilder":
        """配置腾讯云 COS"""
        return self._with_oss(OSSProvider.TENCENT, TencentCOSConfig(
            region=region,
            secret_id=secret_id,
            secret_key=secret_key,
            bucket=bucket,
            use_ssl=True,
        ))

    def with_huawei_obs(self, endpoint: str, access_key_id: str, secret_access_key: str, bucket: str) -> "ConfigBuilder":
        """配置华为云 OBS"""
        return self._with_oss(OSSProvider.HUAWEI, HuaweiOBSConfig(
            endpoint=endpoint,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            bucket=bucket,
            use_ssl=True,
        ))

    def with_aws_s3(self, region: str, access_key_id: str, secret_access_key: str, bucket: str,
                    endpoint: str = "") -> "ConfigBuilder":
        """配置 AWS S3"""
        return self._with_oss(OSSProvider.AWS, AWSS3Config(
            region=region,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            bucket=bucket,
            endpoint=endpoint,
            use_ssl=True,
        ))

    def with_qcloud_cos(self, endpoint: str, region: str, access_key_id: str, secret_access_key: str,
                        bucket: str) -> "ConfigBuilder":
        """配置兼容 S3 协议的其他云存储"""
        return self._with_oss(OSSProvider.QCLOUD, QCloudCOSConfig(
            endpoint=endpoint,
            region=region,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            bucket=bucket,
            use_ssl=True,
        ))

    def with_minio(self, endpoint: str, access_key: str, secret_key: str, bucket: str) -> "ConfigBuilder":
        """配置 MinIO"""
        self._upload = {
            "type": StorageType.MINIO,
            "minio": MinioConfig(
                endpoint=endpoint,
                access_key=access_key,
                secret_key=secret_key,
                bucket=bucket,
                use_ssl=False,
            ),
        }
        return self

    def with_path_prefix(self, prefix: str) -> "ConfigBuilder":
        """设置路径前缀（本地存储忽略）"""
        self._path_prefix = prefix
        return self

    def with_max_file_size(self, size_mb: int) -> "ConfigBuilder":
        """设置最大文件大小 (MB)"""
        self._settings["max_file_size"] = size_mb
        return self

    def with_allowed_extensions(self, extensions) -> "ConfigBuilder":
        """设置允许的文件扩展名"""
        self._settings["allowed_extensions"] = list(extensions)
        return self

    def with_filename_strategy(self, strategy: Union[str, FilenameStrategy]) -> "ConfigBuilder":
        """设置文件命名策略"""
        self._settings["filename_strategy"] = strategy
        return self

    def with_keep_original_name(self, keep: bool = True) -> "ConfigBuilder":
        """设置是否保留原始文件名"""
        self._settings["keep_original_name"] = keep
        return self

    def _apply_path_prefix(self, upload: dict) -> dict:
        if self._path_prefix is None:
            return upload
        if "minio" in upload:
            upload["minio"] = upload["minio"].model_copy(update={"path_prefix": self._path_prefix})
        if "oss" in upload:
            oss = dict(upload["oss"])
            key = oss["provider"].value
            oss[key] = oss[key].model_copy(update={"path_prefix": self._path_prefix})
            upload["oss"] = oss
        return upload

    def build(self) -> UploadConfig:
        """构建配置"""
        if not self._upload:
            raise ConfigurationError("未配置存储后端")
        upload = self._apply_path_prefix(dict(self._upload))
        try:
            return UploadConfig(
                upload=UploadProvider(**upload),
                upload_settings=UploadSettings(**self._settings),
            )
        except ValidationError as exc:
            raise ConfigurationError(f"配置无效: {exc}") from exc
