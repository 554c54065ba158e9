"""
共享测试夹具：内存传输层与本地配置
"""
import io
import os
import threading

# 测试时不写日志文件
os.environ.setdefault("LOG_DIR", "")

import pytest

from upload_util.models.upload import FileInput
from upload_util.models.upload_config import ConfigBuilder


class FakeTransport:
    """内存对象存储，记录每次写入和删除"""

    def __init__(self, fail_with=None, chunk_size=4, on_chunk=None):
        self.objects = {}
        self.deleted = []
        self.fail_with = fail_with
        self.chunk_size = chunk_size
        self.on_chunk = on_chunk
        self.calls = 0
        self._lock = threading.Lock()

    def put_object(self, key, stream, size, content_type):
        with self._lock:
            self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        data = b""
        while True:
            chunk = stream.read(self.chunk_size)
            if not chunk:
                break
            data += chunk
            if self.on_chunk is not None:
                self.on_chunk(data)
        with self._lock:
            self.objects[key] = (data, content_type)
        return None

    def delete_object(self, key):
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            if key not in self.objects:
                raise KeyError(key)
            del self.objects[key]
            self.deleted.append(key)


def make_file(content: bytes = b"0123456789", filename: str = "test.txt") -> FileInput:
    return FileInput(stream=io.BytesIO(content), filename=filename, size=len(content))


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def local_config(tmp_path):
    return (
        ConfigBuilder()
        .with_local(str(tmp_path))
        .with_allowed_extensions([])
        .with_filename_strategy("original")
        .build()
    )


@pytest.fixture
def minio_config():
    return (
        ConfigBuilder()
        .with_minio("localhost:9000", "minioadmin", "minioadmin", "uploads")
        .with_path_prefix("images")
        .with_allowed_extensions([".txt", ".png"])
        .with_filename_strategy("original")
        .build()
    )
