"""
上传配置加载、校验与构建测试
"""
import textwrap

import pytest

from upload_util.core.exceptions import (
    ConfigurationError,
    MissingPayloadError,
    UnsupportedProviderError,
    UnsupportedTypeError,
    UrlError,
)
from upload_util.models.upload_config import (
    AliyunOSSConfig,
    ConfigBuilder,
    FilenameStrategy,
    MinioConfig,
    OSSProvider,
    StorageType,
    TencentCOSConfig,
    load_upload_config,
)

OSS_YAML = """
upload:
  type: oss
  oss:
    provider: aliyun
    aliyun:
      endpoint: oss-cn-hangzhou.aliyuncs.com
      access-key-id: id
      access-key-secret: secret
      bucket: demo
      path-prefix: uploads
    tencent:
      region: ap-guangzhou
      secret-id: sid
      secret-key: skey
      bucket: demo-1250000000
upload-settings:
  max-file-size: 5
  allowed-extensions: [".JPG", "png"]
  filename-strategy: timestamp
  keep-original-name: true
"""


def write_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_load_oss_config(tmp_path):
    config = load_upload_config(write_config(tmp_path, OSS_YAML))

    assert config.upload.type == StorageType.OSS
    assert config.upload.oss.provider == OSSProvider.ALIYUN
    backend, payload = config.backend_payload()
    assert backend == "aliyun"
    assert isinstance(payload, AliyunOSSConfig)
    assert payload.path_prefix == "uploads"
    assert payload.use_ssl is True

    settings = config.upload_settings
    assert settings.max_file_size == 5
    assert settings.allowed_extensions == (".jpg", ".png")
    assert settings.filename_strategy == FilenameStrategy.TIMESTAMP
    assert settings.keep_original_name is True


def test_settings_defaults(tmp_path):
    path = write_config(tmp_path, """
        upload:
          type: local
          local:
            path: ./uploads
    """)
    settings = load_upload_config(path).upload_settings
    assert settings.max_file_size == 100
    assert settings.allowed_extensions == ()
    assert settings.filename_strategy == FilenameStrategy.UUID
    assert settings.keep_original_name is False


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_upload_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigurationError):
        load_upload_config(write_config(tmp_path, "upload: [unclosed"))


def test_non_mapping_document(tmp_path):
    with pytest.raises(ConfigurationError):
        load_upload_config(write_config(tmp_path, "- a\n- b\n"))


def test_unknown_type_rejected_at_load(tmp_path):
    path = write_config(tmp_path, """
        upload:
          type: ftp
    """)
    with pytest.raises(UnsupportedTypeError):
        load_upload_config(path)


def test_unknown_provider_rejected_at_load(tmp_path):
    path = write_config(tmp_path, """
        upload:
          type: oss
          oss:
            provider: gcs
    """)
    with pytest.raises(UnsupportedProviderError):
        load_upload_config(path)


def test_selected_payload_missing(tmp_path):
    path = write_config(tmp_path, """
        upload:
          type: oss
          oss:
            provider: aliyun
            tencent:
              region: ap-guangzhou
    """)
    with pytest.raises(MissingPayloadError) as exc_info:
        load_upload_config(path)
    assert exc_info.value.backend == "oss.aliyun"


def test_required_field_missing(tmp_path):
    path = write_config(tmp_path, """
        upload:
          type: minio
          minio:
            endpoint: localhost:9000
            access-key: a
            bucket: b
    """)
    with pytest.raises(ConfigurationError, match="secret-key"):
        load_upload_config(path)


def test_max_file_size_must_be_positive(tmp_path):
    path = write_config(tmp_path, """
        upload:
          type: local
          local:
            path: ./uploads
        upload-settings:
          max-file-size: 0
    """)
    with pytest.raises(ConfigurationError):
        load_upload_config(path)


def test_with_provider_returns_new_config(tmp_path):
    config = load_upload_config(write_config(tmp_path, OSS_YAML))
    switched = config.with_provider("tencent")

    assert switched is not config
    assert config.upload.oss.provider == OSSProvider.ALIYUN
    assert switched.upload.oss.provider == OSSProvider.TENCENT
    payload, provider = switched.current_oss_provider()
    assert provider == "tencent"
    assert isinstance(payload, TencentCOSConfig)


def test_with_unknown_provider(tmp_path):
    config = load_upload_config(write_config(tmp_path, OSS_YAML))
    with pytest.raises(UnsupportedProviderError):
        config.with_provider("gcs")


def test_current_oss_provider_requires_oss(local_config):
    with pytest.raises(UrlError):
        local_config.current_oss_provider()


def test_config_is_immutable(local_config):
    with pytest.raises(Exception):
        local_config.upload.local.path = "/elsewhere"


def test_builder_minio(minio_config):
    backend, payload = minio_config.backend_payload()
    assert backend == "minio"
    assert isinstance(payload, MinioConfig)
    assert payload.path_prefix == "images"
    assert payload.use_ssl is False
    assert minio_config.upload_settings.allowed_extensions == (".txt", ".png")


def test_builder_defaults():
    config = ConfigBuilder().with_aliyun_oss("oss-cn-hangzhou.aliyuncs.com", "id", "secret", "demo").build()
    settings = config.upload_settings
    assert settings.max_file_size == 100
    assert settings.allowed_extensions == (".jpg", ".jpeg", ".png", ".pdf")
    assert settings.filename_strategy == FilenameStrategy.UUID
    assert config.upload.oss.aliyun.use_ssl is True


def test_builder_path_prefix_applies_to_selected_provider():
    config = (
        ConfigBuilder()
        .with_path_prefix("docs")
        .with_tencent_cos("ap-guangzhou", "sid", "skey", "demo")
        .build()
    )
    assert config.upload.oss.tencent.path_prefix == "docs"


def test_builder_without_backend():
    with pytest.raises(ConfigurationError):
        ConfigBuilder().build()


@pytest.mark.parametrize("size_mb", [0, -5])
def test_builder_rejects_invalid_settings(size_mb):
    builder = ConfigBuilder().with_local("./uploads").with_max_file_size(size_mb)
    with pytest.raises(ConfigurationError):
        builder.build()
