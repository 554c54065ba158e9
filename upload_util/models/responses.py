"""
统一响应模型
定义标准的API响应格式
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """错误详情"""

    code: str = Field(..., description="错误代码")
    message: str = Field(..., description="错误消息")
    field: Optional[str] = Field(None, description="错误字段（验证错误）")
    detail: Optional[Any] = Field(None, description="详细信息（仅开发环境）")


class SuccessResponse(BaseModel):
    """成功响应"""

    success: bool = Field(default=True, description="请求是否成功")
    data: Any = Field(None, description="响应数据")
    message: Optional[str] = Field(None, description="消息")
    timestamp: datetime = Field(default_factory=datetime.now, description="响应时间")
    request_id: Optional[str] = Field(None, description="请求ID")


class ErrorResponse(BaseModel):
    """错误响应"""

    success: bool = Field(default=False, description="请求是否成功")
    error: ErrorDetail = Field(..., description="错误详情")
    path: Optional[str] = Field(None, description="请求路径")
    method: Optional[str] = Field(None, description="HTTP方法")
    timestamp: datetime = Field(default_factory=datetime.now, description="响应时间")
    request_id: Optional[str] = Field(None, description="请求ID")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": {
                    "code": "FILETOOLARGE",
                    "message": "文件大小 209715200 超过允许的最大值 104857600",
                    "field": None,
                    "detail": None
                },
                "path": "/api/v1/upload/file",
                "method": "POST",
                "timestamp": "2024-01-01T10:00:00",
                "request_id": "req_xyz789"
            }
        }
    )


class ValidationErrorResponse(BaseModel):
    """请求参数验证错误响应"""

    success: bool = Field(default=False, description="请求是否成功")
    error: str = Field(default="VALIDATION_ERROR", description="错误类型")
    message: str = Field(default="请求参数验证失败", description="错误消息")
    errors: List[ErrorDetail] = Field(..., description="验证错误列表")
    path: Optional[str] = Field(None, description="请求路径")
    timestamp: datetime = Field(default_factory=datetime.now, description="响应时间")
    request_id: Optional[str] = Field(None, description="请求ID")


class UploadResponse(BaseModel):
    """单文件上传结果"""

    url: str = Field(..., description="访问地址")
    key: str = Field(..., description="对象键")
    size: int = Field(..., description="文件大小（字节）")
    mime_type: str = Field(..., description="MIME类型")
    filename: str = Field(..., description="原始文件名")


class UploadErrorItem(BaseModel):
    """多文件上传中单个文件的错误"""

    filename: str
    code: str
    message: str


class MultiUploadResponse(BaseModel):
    """多文件上传结果"""

    success_count: int = Field(..., description="成功数量")
    error_count: int = Field(..., description="失败数量")
    results: List[UploadResponse] = Field(default_factory=list)
    errors: List[UploadErrorItem] = Field(default_factory=list)


class DeleteRequest(BaseModel):
    """删除文件请求"""

    key: str = Field(..., min_length=1, description="对象键")


class GetURLResponse(BaseModel):
    """获取访问地址结果"""

    url: str
    key: str
