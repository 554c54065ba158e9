"""
异常层级测试
"""
from upload_util.core.exceptions import (
    BackendDeleteFailedError,
    BackendWriteFailedError,
    ConfigurationError,
    ExtensionNotAllowedError,
    FileTooLargeError,
    FileValidationError,
    MissingPayloadError,
    StorageError,
    UnsupportedProviderError,
    UnsupportedTypeError,
    UploadCancelledError,
    UploadUtilException,
    UrlError,
)


def test_base_exception():
    error = UploadUtilException("boom")
    assert str(error) == "boom"
    assert error.message == "boom"
    assert error.recoverable is False


def test_configuration_errors():
    for error in (UnsupportedTypeError("ftp"), UnsupportedProviderError("gcs"), MissingPayloadError("oss.aliyun")):
        assert isinstance(error, ConfigurationError)
        assert error.recoverable is False
    assert UnsupportedTypeError("ftp").storage_type == "ftp"
    assert UnsupportedProviderError("gcs").provider == "gcs"
    assert "oss.aliyun" in MissingPayloadError("oss.aliyun").message


def test_validation_errors():
    too_large = FileTooLargeError(200, 100)
    assert isinstance(too_large, FileValidationError)
    assert too_large.size == 200 and too_large.max_size == 100

    ext = ExtensionNotAllowedError(".exe")
    assert isinstance(ext, FileValidationError)
    assert ext.extension == ".exe"


def test_storage_errors_are_recoverable():
    for cls in (BackendWriteFailedError, BackendDeleteFailedError):
        error = cls("failed")
        assert isinstance(error, StorageError)
        assert error.recoverable is True


def test_cancelled_and_url_errors():
    assert UploadCancelledError().message == "上传已取消"
    assert UploadCancelledError().recoverable is True
    assert not isinstance(UrlError("x"), ConfigurationError)
