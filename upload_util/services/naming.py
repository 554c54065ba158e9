"""
上传前校验与对象命名
纯函数：文件校验、对象名生成、对象键拼接、MIME类型查表
"""
import time
import uuid

from upload_util.core.exceptions import ExtensionNotAllowedError, FileTooLargeError
from upload_util.models.upload import FileInput
from upload_util.models.upload_config import FilenameStrategy, UploadSettings

DEFAULT_MIME_TYPE = "application/octet-stream"

# 扩展名 -> MIME类型（小写扩展名，含点）
MIME_TYPES = {
    # 图片
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".heic": "image/heic",
    # 文档
    ".pdf": "application/pdf",
    ".txt": "text/plain; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
    ".csv": "text/csv; charset=utf-8",
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".json": "application/json",
    ".xml": "text/xml; charset=utf-8",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # 音视频
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
    # 压缩包
    ".zip": "application/zip",
    ".gz": "application/gzip",
    ".tar": "application/x-tar",
    ".7z": "application/x-7z-compressed",
    ".rar": "application/vnd.rar",
}


def split_extension(filename: str):
    """
    拆分文件名与扩展名（扩展名从最后一个点开始，含点）

    目录部分会被丢弃，".env" 这类文件名整体视为扩展名。

    Returns:
        (不含扩展名的文件名, 扩展名)
    """
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot < 0:
        return base, ""
    return base[:dot], base[dot:]


def validate_file(file: FileInput, settings: UploadSettings) -> None:
    """
    校验文件大小和扩展名（短路：只报告第一个失败项）

    Args:
        file: 待上传文件
        settings: 上传策略

    Raises:
        FileTooLargeError: 文件超过 max_file_size
        ExtensionNotAllowedError: 扩展名不在允许列表中
    """
    max_size = settings.max_file_size_bytes
    if file.size > max_size:
        raise FileTooLargeError(file.size, max_size)

    if settings.allowed_extensions:
        _, ext = split_extension(file.filename)
        ext = ext.lower()
        if ext not in settings.allowed_extensions:
            raise ExtensionNotAllowedError(ext)


def generate_object_name(file: FileInput, settings: UploadSettings) -> str:
    """
    根据命名策略生成对象名

    - original: 原文件名（确定性）
    - uuid: 随机UUID
    - timestamp: 当前Unix秒
    keep_original_name 为真且策略不是 original 时，结果为 "{原名}_{策略名}"。
    """
    name_without_ext, extension = split_extension(file.filename)

    strategy = settings.filename_strategy
    if strategy == FilenameStrategy.ORIGINAL:
        new_name = name_without_ext
    elif strategy == FilenameStrategy.TIMESTAMP:
        new_name = str(int(time.time()))
    else:
        new_name = str(uuid.uuid4())

    if settings.keep_original_name and strategy != FilenameStrategy.ORIGINAL:
        new_name = f"{name_without_ext}_{new_name}"

    return f"{new_name}{extension}"


def build_object_key(name: str, path_prefix: str = "") -> str:
    """
    拼接路径前缀与对象名，合并重复的分隔符

    示例:
        build_object_key("a.png", "")        -> "a.png"
        build_object_key("a.png", "uploads") -> "uploads/a.png"
        build_object_key("a.png", "/x//y/")  -> "x/y/a.png"
    """
    if not path_prefix:
        return name
    parts = [part for part in f"{path_prefix}/{name}".split("/") if part]
    return "/".join(parts)


def get_mime_type(filename: str) -> str:
    """按扩展名查表获取MIME类型，未知扩展名返回 application/octet-stream"""
    _, ext = split_extension(filename)
    return MIME_TYPES.get(ext.lower(), DEFAULT_MIME_TYPE)
