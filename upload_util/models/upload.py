"""
上传相关数据模型
"""
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class FileInput:
    """
    调用方提供的待上传文件

    stream 为已打开的可读字节流，核心逻辑只负责把它转交给后端传输层，
    不会检查文件内容。
    """

    stream: BinaryIO
    filename: str
    size: int


# 延迟打开的文件：由领取任务的工作线程调用，返回 FileInput
FileOpener = Callable[[], FileInput]


@dataclass
class FileSource:
    """批量上传中的单个文件来源（延迟打开，用完由管道负责关闭）"""

    filename: str
    opener: FileOpener
    size: Optional[int] = None


BatchItem = Union[FileInput, FileSource]


class UploadDescriptor(BaseModel):
    """上传成功后的结果描述"""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="外部可访问地址")
    key: str = Field(..., description="后端对象键（含路径前缀）")
    size: int = Field(..., ge=0, description="文件大小（字节）")
    mime_type: str = Field(..., description="MIME类型")


@dataclass
class BatchOutcome:
    """批量上传中单个文件的结果"""

    filename: str
    descriptor: Optional[UploadDescriptor] = None
    error: Optional[Exception] = None
    duration: float = 0.0
    worker_id: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.descriptor is not None


@dataclass
class BatchReport:
    """批量上传汇总"""

    outcomes: List[BatchOutcome] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> List[BatchOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[BatchOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def uploaded_size(self) -> int:
        return sum(o.descriptor.size for o in self.succeeded)

    @property
    def success_rate(self) -> float:
        if not self.outcomes:
            return 0.0
        return len(self.succeeded) / len(self.outcomes)

    @property
    def average_duration(self) -> float:
        """成功文件的平均耗时（秒）"""
        succeeded = self.succeeded
        if not succeeded:
            return 0.0
        return sum(o.duration for o in succeeded) / len(succeeded)
