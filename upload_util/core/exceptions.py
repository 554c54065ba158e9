"""
自定义异常类
"""


class UploadUtilException(Exception):
    """基础异常类"""

    def __init__(self, message: str, recoverable: bool = False):
        self.message = message
        self.recoverable = recoverable
        super().__init__(self.message)


class ConfigurationError(UploadUtilException):
    """配置错误（启动期致命，不重试）"""
    pass


class UnsupportedTypeError(ConfigurationError):
    """不支持的存储类型"""

    def __init__(self, storage_type: str):
        self.storage_type = storage_type
        super().__init__(f"不支持的存储类型: {storage_type}")


class UnsupportedProviderError(ConfigurationError):
    """不支持的OSS服务商"""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"不支持的OSS服务商: {provider}")


class MissingPayloadError(ConfigurationError):
    """判别字段指向的后端配置块缺失"""

    def __init__(self, backend: str):
        self.backend = backend
        super().__init__(f"缺少 {backend} 配置块")


class FileValidationError(UploadUtilException):
    """文件校验失败（在任何网络调用之前拒绝）"""
    pass


class FileTooLargeError(FileValidationError):
    """文件过大"""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"文件大小 {size} 超过允许的最大值 {max_size}")


class ExtensionNotAllowedError(FileValidationError):
    """文件扩展名不被允许"""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"不允许的文件扩展名: {extension or '(无)'}")


class StorageError(UploadUtilException):
    """存储异常"""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message, recoverable=recoverable)


class BackendWriteFailedError(StorageError):
    """后端写入失败"""
    pass


class BackendDeleteFailedError(StorageError):
    """后端删除失败（包括对象不存在）"""
    pass


class UrlError(UploadUtilException):
    """URL解析异常（判别字段不匹配）"""
    pass


class UploadCancelledError(UploadUtilException):
    """上传被取消（显式取消或超过截止时间）"""

    def __init__(self, message: str = "上传已取消"):
        super().__init__(message, recoverable=True)
