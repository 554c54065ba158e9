"""
访问URL解析
每种后端一个纯函数：根据 bucket/endpoint/domain 配置和对象键计算外部可访问地址，不做网络请求
"""
from typing import Callable, Dict, Type

from upload_util.core.exceptions import UrlError
from upload_util.models.upload_config import (
    AliyunOSSConfig,
    AWSS3Config,
    BackendPayload,
    HuaweiOBSConfig,
    LocalConfig,
    MinioConfig,
    QCloudCOSConfig,
    TencentCOSConfig,
)


def _protocol(use_ssl: bool) -> str:
    return "https" if use_ssl else "http"


def split_endpoint(endpoint: str, use_ssl: bool):
    """
    拆分 endpoint 为 (协议, 主机)

    endpoint 自带协议头时以其为准（与传输层一致），否则按 use_ssl 选择。
    """
    for scheme in ("https", "http"):
        prefix = f"{scheme}://"
        if endpoint.startswith(prefix):
            return scheme, endpoint[len(prefix):].rstrip("/")
    return _protocol(use_ssl), endpoint.rstrip("/")


def join_domain(domain: str, key: str) -> str:
    """自定义域名: {domain}/{key}"""
    return f"{domain.rstrip('/')}/{key}"


def build_bucket_url(bucket: str, endpoint: str, key: str, use_ssl: bool) -> str:
    """
    虚拟主机风格URL

    endpoint 的首个主机标签已是 bucket（如 bucket 专属域名）时不再重复拼接。
    """
    protocol, host = split_endpoint(endpoint, use_ssl)
    if bucket and (host == bucket or host.startswith(f"{bucket}.")):
        return f"{protocol}://{host}/{key}"
    return f"{protocol}://{bucket}.{host}/{key}"


def resolve_local_url(config: LocalConfig, key: str) -> str:
    """本地存储：未配置 url_prefix 时返回 file:// 伪地址"""
    if config.url_prefix:
        return join_domain(config.url_prefix, key)
    return f"file://{key}"


def resolve_aliyun_url(config: AliyunOSSConfig, key: str) -> str:
    if config.domain:
        return join_domain(config.domain, key)
    return build_bucket_url(config.bucket, config.endpoint, key, config.use_ssl)


def resolve_tencent_url(config: TencentCOSConfig, key: str) -> str:
    if config.domain:
        return join_domain(config.domain, key)
    return f"{_protocol(config.use_ssl)}://{config.bucket}.cos.{config.region}.myqcloud.com/{key}"


def resolve_huawei_url(config: HuaweiOBSConfig, key: str) -> str:
    if config.domain:
        return join_domain(config.domain, key)
    protocol, host = split_endpoint(config.endpoint, config.use_ssl)
    return f"{protocol}://{config.bucket}.{host}/{key}"


def resolve_aws_url(config: AWSS3Config, key: str) -> str:
    """自定义 endpoint 使用路径风格，否则使用官方虚拟主机域名"""
    if config.domain:
        return join_domain(config.domain, key)
    if config.endpoint:
        protocol, host = split_endpoint(config.endpoint, config.use_ssl)
        return f"{protocol}://{host}/{config.bucket}/{key}"
    return f"{_protocol(config.use_ssl)}://{config.bucket}.s3.{config.region}.amazonaws.com/{key}"


def resolve_qcloud_url(config: QCloudCOSConfig, key: str) -> str:
    """endpoint 即 bucket 访问域名"""
    if config.domain:
        return join_domain(config.domain, key)
    protocol, host = split_endpoint(config.endpoint, config.use_ssl)
    return f"{protocol}://{host}/{key}"


def resolve_minio_url(config: MinioConfig, key: str) -> str:
    """路径风格: {proto}://{endpoint}/{bucket}/{key}"""
    if config.domain:
        return join_domain(config.domain, key)
    protocol, host = split_endpoint(config.endpoint, config.use_ssl)
    return f"{protocol}://{host}/{config.bucket}/{key}"


URL_RESOLVERS: Dict[Type, Callable[..., str]] = {
    LocalConfig: resolve_local_url,
    AliyunOSSConfig: resolve_aliyun_url,
    TencentCOSConfig: resolve_tencent_url,
    HuaweiOBSConfig: resolve_huawei_url,
    AWSS3Config: resolve_aws_url,
    QCloudCOSConfig: resolve_qcloud_url,
    MinioConfig: resolve_minio_url,
}


def resolve_url(config: BackendPayload, key: str) -> str:
    """
    按配置块类型分派到对应后端的URL解析函数

    Raises:
        UrlError: 配置块类型没有对应的解析函数
    """
    resolver = URL_RESOLVERS.get(type(config))
    if resolver is None:
        raise UrlError(f"无法解析URL: 未知的后端配置 {type(config).__name__}")
    return resolver(config, key)
