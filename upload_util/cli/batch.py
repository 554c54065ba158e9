"""
批量上传命令行工具

示例:
    upload-batch --dir ./images --pattern "*.jpg" -r -c 5
    python -m upload_util.cli.batch --dir ./docs --dry-run
"""
import argparse
import fnmatch
import os
import sys
import time
from functools import partial
from typing import List, Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from upload_util.config import settings
from upload_util.core.cancellation import CancelToken
from upload_util.core.client_factory import create_client
from upload_util.core.exceptions import ConfigurationError
from upload_util.models.upload import BatchReport, FileInput, FileSource
from upload_util.models.upload_config import load_upload_config
from upload_util.services.batch_upload import BatchUploader
from upload_util.utils.logger import setup_logging

console = Console()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def format_file_size(size: int) -> str:
    """格式化文件大小"""
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024

    if size >= gb:
        return f"{size / gb:.2f} GB"
    if size >= mb:
        return f"{size / mb:.2f} MB"
    if size >= kb:
        return f"{size / kb:.2f} KB"
    return f"{size} bytes"


def find_files(directory: str, pattern: str = "*", recursive: bool = False) -> List[str]:
    """
    查找目录下文件名匹配 pattern 的文件

    Args:
        directory: 目录
        pattern: 文件名通配符，如 *.jpg
        recursive: 是否递归子目录

    Returns:
        排序后的文件路径列表
    """
    files = []
    if recursive:
        for root, _, names in os.walk(directory):
            for name in names:
                if fnmatch.fnmatch(name, pattern):
                    files.append(os.path.join(root, name))
    else:
        for entry in os.scandir(directory):
            if entry.is_file() and fnmatch.fnmatch(entry.name, pattern):
                files.append(os.path.join(directory, entry.name))
    return sorted(files)


def open_local_file(path: str) -> FileInput:
    return FileInput(
        stream=open(path, "rb"),
        filename=os.path.basename(path),
        size=os.path.getsize(path),
    )


def build_sources(paths: List[str]) -> List[FileSource]:
    """为每个文件创建延迟打开的来源，由工作线程打开"""
    return [
        FileSource(
            filename=os.path.basename(path),
            opener=partial(open_local_file, path),
            size=os.path.getsize(path),
        )
        for path in paths
    ]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upload-batch",
        description="批量上传目录中的文件到配置的存储后端",
    )
    parser.add_argument("--config", default=settings.UPLOAD_CONFIG_PATH, help="配置文件路径")
    parser.add_argument("--dir", required=True, dest="directory", help="要上传的目录路径")
    parser.add_argument("--pattern", default="*", help="文件匹配模式 (支持 *.jpg, *.png 等)")
    parser.add_argument("-r", dest="recursive", action="store_true", help="递归遍历子目录")
    parser.add_argument("-c", dest="concurrency", type=int, default=settings.BATCH_CONCURRENCY,
                        help="并发上传数量")
    parser.add_argument("--dry-run", action="store_true", help="试运行，只显示将要上传的文件")
    parser.add_argument("-v", dest="verbose", action="store_true", help="详细输出")
    parser.add_argument("--timeout", type=float, default=None, help="整批上传超时秒数")
    parser.add_argument("--version", action="version",
                        version=f"Upload Util Batch Uploader {settings.APP_VERSION}")
    return parser


def print_report(report: BatchReport, total_size: int) -> None:
    """打印上传结果表格和统计信息"""
    table = Table(title="上传结果")
    table.add_column("文件", style="cyan")
    table.add_column("状态")
    table.add_column("URL / 错误")
    table.add_column("耗时", justify="right")

    for outcome in sorted(report.outcomes, key=lambda o: o.filename):
        if outcome.succeeded:
            table.add_row(outcome.filename, "[green]成功[/green]", outcome.descriptor.url,
                          f"{outcome.duration:.2f}s")
        else:
            table.add_row(outcome.filename, "[red]失败[/red]", str(outcome.error),
                          f"{outcome.duration:.2f}s")
    console.print(table)

    console.print("\n📈 统计信息:", style="bold")
    console.print(f"   总文件数: {report.total}")
    console.print(f"   成功上传: {len(report.succeeded)}")
    console.print(f"   失败数量: {len(report.failed)}")
    console.print(f"   总大小: {format_file_size(total_size)}")
    console.print(f"   上传大小: {format_file_size(report.uploaded_size)}")
    console.print(f"   总耗时: {report.elapsed:.2f} 秒")
    if report.succeeded:
        console.print(f"   平均耗时: {report.average_duration:.2f} 秒/文件")
        if report.elapsed > 0:
            speed = int(report.uploaded_size / report.elapsed)
            console.print(f"   上传速度: {format_file_size(speed)}/秒")

    style = "green" if not report.failed else "yellow"
    console.print(f"\n   成功率: {report.success_rate * 100:.1f}%", style=style)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level="DEBUG" if args.verbose else "WARNING", log_dir=None)

    if not os.path.isdir(args.directory):
        console.print(f"❌ 目录不存在: {args.directory}", style="bold red")
        return EXIT_CONFIG_ERROR

    paths = find_files(args.directory, args.pattern, args.recursive)
    console.print(f"📁 目录: {args.directory}")
    console.print(f"🔍 模式: {args.pattern}")
    if not paths:
        console.print("📄 没有找到匹配的文件")
        return EXIT_OK
    console.print(f"📄 找到 {len(paths)} 个文件")

    sources = build_sources(paths)
    total_size = sum(source.size or 0 for source in sources)

    if args.dry_run:
        console.print("\n🔍 试运行模式 - 将要上传的文件:", style="yellow")
        for i, source in enumerate(sources, 1):
            console.print(f"  {i}. {paths[i - 1]} ({format_file_size(source.size or 0)})")
        return EXIT_OK

    try:
        config = load_upload_config(args.config)
        client = create_client(config)
        cancel_token = CancelToken(timeout=args.timeout) if args.timeout else None
        uploader = BatchUploader(client, concurrency=args.concurrency, cancel_token=cancel_token)
    except ConfigurationError as e:
        console.print(f"❌ 配置错误: {e.message}", style="bold red")
        return EXIT_CONFIG_ERROR
    except ValueError as e:
        console.print(f"❌ 参数错误: {e}", style="bold red")
        return EXIT_CONFIG_ERROR

    console.print(f"\n🚀 开始批量上传 (并发: {args.concurrency})...\n")

    start_time = time.time()
    outcomes = []
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("上传中", total=len(sources))
        for outcome in uploader.iter_outcomes(sources):
            outcomes.append(outcome)
            progress.advance(task)
            if args.verbose:
                if outcome.succeeded:
                    progress.console.print(
                        f"[Worker {outcome.worker_id}] ✅ 完成: {outcome.filename} -> {outcome.descriptor.url}"
                    )
                else:
                    progress.console.print(
                        f"[Worker {outcome.worker_id}] ❌ 失败: {outcome.filename} - {outcome.error}"
                    )

    report = BatchReport(outcomes=outcomes, elapsed=time.time() - start_time)
    print_report(report, total_size)

    return EXIT_FAILED if report.failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
