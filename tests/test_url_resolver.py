"""
访问URL解析测试
"""
import pytest

from upload_util.core.exceptions import UrlError
from upload_util.models.upload_config import (
    AliyunOSSConfig,
    AWSS3Config,
    HuaweiOBSConfig,
    LocalConfig,
    MinioConfig,
    QCloudCOSConfig,
    TencentCOSConfig,
)
from upload_util.services.url_resolver import build_bucket_url, resolve_url, split_endpoint


def test_local_without_prefix():
    assert resolve_url(LocalConfig(path="/tmp/x"), "test.txt") == "file://test.txt"


def test_local_with_prefix():
    config = LocalConfig(path="/tmp/x", url_prefix="http://localhost:8000/files/")
    assert resolve_url(config, "a/b.png") == "http://localhost:8000/files/a/b.png"


def test_aliyun_virtual_host():
    config = AliyunOSSConfig(endpoint="oss-cn-hangzhou.aliyuncs.com", bucket="demo")
    assert resolve_url(config, "k.png") == "https://demo.oss-cn-hangzhou.aliyuncs.com/k.png"


def test_aliyun_endpoint_with_scheme_and_bucket():
    assert build_bucket_url("demo", "https://demo.example.com/", "k", False) == "https://demo.example.com/k"


def test_bucket_name_inside_endpoint_keeps_host_label():
    config = AliyunOSSConfig(endpoint="oss-cn-hangzhou.aliyuncs.com", bucket="aliyun")
    assert resolve_url(config, "k.png") == "https://aliyun.oss-cn-hangzhou.aliyuncs.com/k.png"

    for bucket in ("oss", "hangzhou", "cn"):
        url = build_bucket_url(bucket, "oss-cn-hangzhou.aliyuncs.com", "k", True)
        assert url == f"https://{bucket}.oss-cn-hangzhou.aliyuncs.com/k"


def test_custom_domain_wins():
    config = AliyunOSSConfig(endpoint="oss-cn-hangzhou.aliyuncs.com", bucket="demo", domain="https://cdn.example.com/")
    assert resolve_url(config, "k.png") == "https://cdn.example.com/k.png"


def test_tencent():
    config = TencentCOSConfig(region="ap-guangzhou", bucket="demo-1250000000")
    assert resolve_url(config, "k") == "https://demo-1250000000.cos.ap-guangzhou.myqcloud.com/k"


def test_huawei():
    config = HuaweiOBSConfig(endpoint="obs.cn-north-4.myhuaweicloud.com", bucket="demo", use_ssl=False)
    assert resolve_url(config, "k") == "http://demo.obs.cn-north-4.myhuaweicloud.com/k"


def test_aws_official_and_custom_endpoint():
    official = AWSS3Config(region="us-east-1", bucket="demo")
    assert resolve_url(official, "k") == "https://demo.s3.us-east-1.amazonaws.com/k"

    custom = AWSS3Config(region="us-east-1", bucket="demo", endpoint="http://s3.local:9000")
    assert resolve_url(custom, "k") == "http://s3.local:9000/demo/k"


def test_explicit_endpoint_scheme_wins_over_use_ssl():
    assert resolve_url(HuaweiOBSConfig(endpoint="http://obs.local", bucket="demo"), "k") == "http://demo.obs.local/k"
    assert resolve_url(QCloudCOSConfig(endpoint="http://cos.local/", bucket="demo"), "k") == "http://cos.local/k"
    minio = MinioConfig(endpoint="https://minio.example.com", bucket="uploads")
    assert resolve_url(minio, "a.png") == "https://minio.example.com/uploads/a.png"


def test_split_endpoint():
    assert split_endpoint("http://s3.local:9000/", True) == ("http", "s3.local:9000")
    assert split_endpoint("s3.local:9000", True) == ("https", "s3.local:9000")
    assert split_endpoint("s3.local:9000", False) == ("http", "s3.local:9000")


def test_qcloud():
    config = QCloudCOSConfig(endpoint="demo.cos.ap-guangzhou.myqcloud.com", bucket="demo")
    assert resolve_url(config, "k") == "https://demo.cos.ap-guangzhou.myqcloud.com/k"


def test_minio_path_style():
    config = MinioConfig(endpoint="localhost:9000", bucket="uploads")
    assert resolve_url(config, "images/a.png") == "http://localhost:9000/uploads/images/a.png"


def test_unknown_payload_type():
    with pytest.raises(UrlError):
        resolve_url(object(), "k")
