"""
领域抽象接口汇总导出 (SOLID: 依赖倒置原则)
所有服务依赖这些抽象，而不是具体实现
"""
from upload_util.core.protocols.storage_protocols import IObjectTransport, IStorageClient

__all__ = [
    "IObjectTransport",
    "IStorageClient",
]
