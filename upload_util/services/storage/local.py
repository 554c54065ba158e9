"""
本地文件系统存储
"""
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

from upload_util.core.exceptions import ConfigurationError
from upload_util.models.upload_config import LocalConfig, UploadSettings
from upload_util.services.storage.base import BaseStorageClient

CHUNK_SIZE = 1024 * 1024


def expand_home(path: str) -> Path:
    """展开开头的 ~/ 为用户主目录"""
    if path.startswith("~/"):
        return Path.home() / path[2:]
    return Path(path)


class LocalFileTransport:
    """本地文件读写（每次调用都重新展开 ~/）"""

    def __init__(self, path: str):
        self.path = path

    @property
    def root(self) -> Path:
        return expand_home(self.path)

    def _target(self, key: str) -> Path:
        root = self.root.resolve()
        target = (root / key).resolve()
        if root != target and root not in target.parents:
            raise ValueError(f"对象键超出存储目录: {key}")
        return target

    def put_object(self, key: str, stream: BinaryIO, size: int, content_type: str) -> Optional[int]:
        target = self._target(key)
        target.parent.mkdir(parents=True, exist_ok=True)

        # 写入临时文件后原子替换，同名对象以最后一次写入为准
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
        written = 0
        try:
            with os.fdopen(fd, "wb") as dst:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    dst.write(chunk)
                    written += len(chunk)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        return written

    def delete_object(self, key: str) -> None:
        os.remove(self._target(key))


class LocalStorageClient(BaseStorageClient):
    """本地文件系统存储客户端（对象键不带路径前缀）"""

    provider = "local"
    display_name = "本地存储"

    def __init__(self, config: LocalConfig, settings: UploadSettings, transport=None):
        if not config.path:
            raise ConfigurationError("本地存储路径不能为空")
        root = expand_home(config.path)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"创建上传目录失败: {root}: {e}") from e
        super().__init__(config, settings, transport)

    def _create_transport(self) -> LocalFileTransport:
        return LocalFileTransport(self.config.path)
