"""
单文件命令行工具：上传、删除、获取访问地址

示例:
    upload-cli --file ./image.png -v
    upload-cli --op delete --key uploads/abc123.jpg
    upload-cli --op geturl --key uploads/abc123.jpg
"""
import argparse
import os
import sys
from typing import List, Optional

from rich.console import Console

from upload_util.cli.batch import EXIT_CONFIG_ERROR, EXIT_FAILED, EXIT_OK, format_file_size
from upload_util.config import settings
from upload_util.core.client_factory import create_client
from upload_util.core.exceptions import ConfigurationError, UploadUtilException
from upload_util.models.upload import FileInput, UploadDescriptor
from upload_util.models.upload_config import load_upload_config
from upload_util.services.storage import BaseStorageClient
from upload_util.utils.logger import setup_logging

console = Console()

OPERATIONS = ("upload", "delete", "geturl")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upload-cli",
        description="上传、删除文件或获取文件访问地址",
    )
    parser.add_argument("--config", default=settings.UPLOAD_CONFIG_PATH, help="配置文件路径")
    parser.add_argument("--op", choices=OPERATIONS, default="upload", help="操作类型")
    parser.add_argument("--file", dest="file_path", default="", help="要上传的文件路径")
    parser.add_argument("--key", default="", help="文件键名（用于删除和获取URL）")
    parser.add_argument("-v", dest="verbose", action="store_true", help="详细输出")
    parser.add_argument("--version", action="version",
                        version=f"Upload Util CLI {settings.APP_VERSION}")
    return parser


def upload_file(client: BaseStorageClient, path: str, verbose: bool = False) -> UploadDescriptor:
    """
    上传本地文件

    Raises:
        FileNotFoundError: 文件不存在
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"文件不存在: {path}")

    size = os.path.getsize(path)
    filename = os.path.basename(path)
    if verbose:
        console.print(f"⏳ 正在上传: {filename} ({format_file_size(size)})")

    with open(path, "rb") as stream:
        return client.upload(FileInput(stream=stream, filename=filename, size=size))


def print_upload_result(descriptor: UploadDescriptor, verbose: bool) -> None:
    console.print("✅ 上传成功!", style="green")
    console.print(f"🔗 URL: {descriptor.url}", markup=False, soft_wrap=True)
    console.print(f"🔑 Key: {descriptor.key}", markup=False, soft_wrap=True)
    if verbose:
        console.print(f"📏 Size: {format_file_size(descriptor.size)}")
        console.print(f"📄 Type: {descriptor.mime_type}", markup=False)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # 按操作校验参数
    if args.op == "upload" and not args.file_path:
        parser.error("upload 操作需要指定 --file")
    if args.op in ("delete", "geturl") and not args.key:
        parser.error(f"{args.op} 操作需要指定 --key")

    setup_logging(log_level="DEBUG" if args.verbose else "WARNING", log_dir=None)

    try:
        config = load_upload_config(args.config)
        client = create_client(config)
    except ConfigurationError as e:
        console.print(f"❌ 配置错误: {e.message}", style="bold red")
        return EXIT_CONFIG_ERROR

    try:
        if args.op == "upload":
            descriptor = upload_file(client, args.file_path, args.verbose)
            print_upload_result(descriptor, args.verbose)

        elif args.op == "delete":
            client.delete(args.key)
            console.print(f"✅ 删除成功: {args.key}", markup=False)

        else:
            url = client.get_url(args.key)
            if args.verbose:
                console.print(f"🔗 文件键名: {args.key}", markup=False, soft_wrap=True)
                console.print(f"🔗 访问URL: {url}", markup=False, soft_wrap=True)
            else:
                console.print(url, markup=False, highlight=False, soft_wrap=True)

    except FileNotFoundError as e:
        console.print(f"❌ {e}", style="bold red", markup=False)
        return EXIT_FAILED
    except UploadUtilException as e:
        console.print(f"❌ {args.op} 失败: {e.message}", style="bold red", markup=False)
        return EXIT_FAILED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
