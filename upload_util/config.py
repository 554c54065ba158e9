"""
配置管理模块
使用pydantic-settings进行环境变量管理和验证

存储后端本身的配置（YAML文档）见 upload_util.models.upload_config
"""
from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== 应用基础配置 =====
    APP_NAME: str = "Upload-Util"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # ===== 日志配置 =====
    LOG_LEVEL: str = Field(default="INFO", description="日志级别")
    LOG_DIR: Optional[str] = Field(default="logs", description="日志目录，为空则只输出到标准输出")

    # ===== 存储配置 =====
    UPLOAD_CONFIG_PATH: str = Field(
        default="config.yaml",
        description="存储后端YAML配置文件路径"
    )

    # ===== 批量上传配置 =====
    BATCH_CONCURRENCY: int = Field(
        default=3,
        ge=1,
        le=64,
        description="批量上传并发数"
    )
    BATCH_MAX_FILES: int = Field(
        default=50,
        ge=1,
        description="单次多文件上传请求允许的最大文件数"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """验证日志级别"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator("LOG_DIR", mode="before")
    @classmethod
    def empty_log_dir_to_none(cls, v):
        """空字符串视为不写日志文件"""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    获取配置单例
    使用lru_cache确保配置只加载一次
    """
    return Settings()


# 便捷访问
settings = get_settings()
