"""
取消信号
调用方可显式取消，也可设置截止时间；上传在开始前、写入后端前以及每次读取数据块时检查
"""
import threading
import time
from typing import BinaryIO, Optional

from upload_util.core.exceptions import UploadCancelledError


class CancelToken:
    """线程安全的取消信号（显式取消 + 可选截止时间）"""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: 超时秒数，None 表示不设截止时间
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._reason = "上传已取消"

    def cancel(self, reason: str = "上传已取消") -> None:
        """显式取消"""
        self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = "上传超时已取消"
            self._event.set()
            return True
        return False

    def remaining(self) -> Optional[float]:
        """距截止时间的剩余秒数，未设置截止时间时返回 None"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """已取消则抛出 UploadCancelledError"""
        if self.cancelled:
            raise UploadCancelledError(self._reason)


class CancellableReader:
    """
    可取消的读取包装

    传输层按块读取数据时检查取消信号，使正在进行的上传能及时中止。
    其余属性（seek/tell 等）透传给原始流。
    """

    def __init__(self, stream: BinaryIO, token: CancelToken):
        self._stream = stream
        self._token = token

    def read(self, size: int = -1) -> bytes:
        self._token.raise_if_cancelled()
        return self._stream.read(size)

    def __getattr__(self, name):
        return getattr(self._stream, name)
