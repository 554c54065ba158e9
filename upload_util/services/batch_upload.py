"""
批量上传服务
固定数量的工作线程共享同一个存储客户端，从任务队列中领取文件依次上传。
单个文件失败只记录在该文件的结果中，不影响其他文件。
"""
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, List, Optional

from upload_util.core.cancellation import CancelToken
from upload_util.core.exceptions import ConfigurationError
from upload_util.core.protocols import IStorageClient
from upload_util.models.upload import BatchItem, BatchOutcome, BatchReport, FileSource
from upload_util.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, BatchOutcome], None]

# 等待结果时检查工作线程状态的间隔（秒）
_POLL_INTERVAL = 0.1


class BatchProgress:
    """已完成文件计数（加锁，保证不丢失、不重复计数）"""

    def __init__(self, total: int):
        self.total = total
        self._completed = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._completed += 1
            return self._completed

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed


class BatchUploader:
    """
    批量上传器

    示例:
        uploader = BatchUploader(client, concurrency=4)
        for outcome in uploader.iter_outcomes(files):
            print(outcome.filename, outcome.succeeded)
    """

    def __init__(
        self,
        client: IStorageClient,
        concurrency: int = 3,
        cancel_token: Optional[CancelToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            client: 存储客户端（各工作线程共享）
            concurrency: 工作线程数，即同时进行的上传数上限
            cancel_token: 取消信号（可选）
            on_progress: 每完成一个文件回调一次 (已完成数, 总数, 结果)

        Raises:
            ValueError: concurrency 小于 1
            ConfigurationError: 存储客户端不可用
        """
        if concurrency < 1:
            raise ValueError(f"concurrency 必须大于等于 1，当前为 {concurrency}")
        if client is None:
            raise ConfigurationError("存储客户端不可用")

        self.client = client
        self.concurrency = concurrency
        self.cancel_token = cancel_token
        self.on_progress = on_progress

    def _upload_one(self, item: BatchItem, worker_id: int) -> BatchOutcome:
        """上传单个文件，任何错误都记录到结果中"""
        start_time = time.time()
        opened = None
        try:
            if self.cancel_token is not None:
                self.cancel_token.raise_if_cancelled()

            if isinstance(item, FileSource):
                opened = item.opener()
                file = opened
            else:
                file = item

            descriptor = self.client.upload(file, cancel_token=self.cancel_token)
            return BatchOutcome(
                filename=item.filename,
                descriptor=descriptor,
                duration=time.time() - start_time,
                worker_id=worker_id,
            )
        except Exception as e:
            return BatchOutcome(
                filename=item.filename,
                error=e,
                duration=time.time() - start_time,
                worker_id=worker_id,
            )
        finally:
            # 延迟打开的文件由管道负责关闭，关闭失败不影响该文件的结果
            if opened is not None:
                try:
                    opened.stream.close()
                except OSError as e:
                    logger.warning("batch_stream_close_failed", filename=item.filename, error=str(e))

    def _worker(
        self,
        worker_id: int,
        tasks: "queue.Queue[BatchItem]",
        results: "queue.Queue[BatchOutcome]",
        progress: BatchProgress,
        stop: threading.Event,
    ) -> None:
        while not stop.is_set():
            try:
                item = tasks.get_nowait()
            except queue.Empty:
                return

            outcome = self._upload_one(item, worker_id)
            completed = progress.increment()
            results.put(outcome)

            logger.debug(
                "batch_progress",
                worker_id=worker_id,
                filename=outcome.filename,
                success=outcome.succeeded,
                completed=completed,
                total=progress.total,
            )
            if self.on_progress is not None:
                self.on_progress(completed, progress.total, outcome)

    def iter_outcomes(self, files: Iterable[BatchItem]) -> Iterator[BatchOutcome]:
        """
        执行批量上传，按完成顺序逐个产出结果

        结果数量与输入文件数相同；不同文件之间的结果顺序不作保证。
        提前停止迭代时，尚未领取的文件不再上传。
        """
        items: List[BatchItem] = list(files)
        total = len(items)
        if total == 0:
            return

        tasks: "queue.Queue[BatchItem]" = queue.Queue()
        for item in items:
            tasks.put(item)
        results: "queue.Queue[BatchOutcome]" = queue.Queue()
        progress = BatchProgress(total)
        stop = threading.Event()

        workers = min(self.concurrency, total)
        logger.info("batch_started", total=total, concurrency=workers)

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="upload-worker")
        try:
            futures = [
                executor.submit(self._worker, worker_id, tasks, results, progress, stop)
                for worker_id in range(workers)
            ]

            received = 0
            while received < total:
                try:
                    outcome = results.get(timeout=_POLL_INTERVAL)
                except queue.Empty:
                    if all(f.done() for f in futures) and results.empty():
                        # 工作线程异常退出（如进度回调抛错），把异常抛给调用方
                        for future in futures:
                            future.result()
                        break
                    continue
                received += 1
                yield outcome

            for future in futures:
                future.result()
        finally:
            stop.set()
            executor.shutdown(wait=True)

    def run(self, files: Iterable[BatchItem]) -> BatchReport:
        """
        执行批量上传并汇总结果

        Returns:
            BatchReport: 每个文件恰好一条结果
        """
        start_time = time.time()
        outcomes = list(self.iter_outcomes(files))
        report = BatchReport(outcomes=outcomes, elapsed=time.time() - start_time)

        logger.info(
            "batch_completed",
            total=report.total,
            succeeded=len(report.succeeded),
            failed=len(report.failed),
            uploaded_size=report.uploaded_size,
            elapsed=f"{report.elapsed:.2f}s",
        )
        return report
