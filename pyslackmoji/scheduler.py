# -----------------------------------------------------------------------------
# bounded worker pool for image downloads
# -----------------------------------------------------------------------------
from __future__ import annotations

import queue
import threading
from typing import Iterable, List

from pyslackmoji.core.logger import Logger
from pyslackmoji.emoji import AbstractEmoji, DownloadTask, EmojiRegular
from pyslackmoji.fetcher import FetchStatus, ImageFetcher

DEFAULT_CONCURRENCY = 15


class DownloadSummary:
    def __init__(self):
        self._lock = threading.Lock()
        self.saved = 0
        self.exists = 0
        self.bytes_saved = 0
        self.failed: List[str] = []

    @property
    def total(self) -> int:
        return self.saved + self.exists + len(self.failed)

    def add_success(self, status: FetchStatus, size: int):
        with self._lock:
            if status is FetchStatus.SAVED:
                self.saved += 1
                self.bytes_saved += size
            else:
                self.exists += 1

    def add_failure(self, name: str):
        with self._lock:
            self.failed.append(name)


class DownloadScheduler:
    """
    Runs :meth:`ImageFetcher.fetch_one` for every direct emoji on a fixed
    pool of worker threads.

    The caller is the producer: it feeds a bounded queue, then puts one stop
    sentinel per worker and joins all of them, so :meth:`run_all` returns only
    after every task was processed. A failing task is logged and counted; it
    does not affect other tasks or workers.
    """

    _STOP = None

    def __init__(self, fetcher: ImageFetcher, concurrency: int = DEFAULT_CONCURRENCY,
                 logger: Logger|None = None):
        if concurrency < 1:
            raise ValueError(f'Concurrency should be a positive number, got {concurrency}')
        self._fetcher = fetcher
        self._concurrency = concurrency
        self._logger = logger or Logger.get_instance()

    @property
    def concurrency(self) -> int:
        return self._concurrency

    def run_all(self, entries: Iterable[AbstractEmoji], target_dir: str) -> DownloadSummary:
        tasks = [e.as_task() for e in entries if isinstance(e, EmojiRegular)]
        summary = DownloadSummary()
        if not tasks:
            self._logger.info('Received empty download list')
            return summary

        worker_num = min(self._concurrency, len(tasks))
        self._logger.info(f'Downloading starts for {len(tasks):n} emojis ({worker_num} workers)')

        task_queue: queue.Queue[DownloadTask|None] = queue.Queue(maxsize=self._concurrency)
        workers = [
            threading.Thread(target=self._work, args=(task_queue, target_dir, summary),
                             name=f'worker-{idx}', daemon=True)
            for idx in range(worker_num)
        ]
        for worker in workers:
            worker.start()

        for task in tasks:
            task_queue.put(task)
        for _ in workers:
            task_queue.put(self._STOP)

        for worker in workers:
            worker.join()

        self._logger.info(f'Downloading done: {summary.saved:n} saved, {summary.exists:n} existed, '
                          f'{len(summary.failed):n} failed')
        return summary

    def _work(self, task_queue: queue.Queue, target_dir: str, summary: DownloadSummary):
        while True:
            task = task_queue.get()
            if task is self._STOP:
                return
            try:
                result = self._fetcher.fetch_one(task.name, task.url, target_dir)
            except Exception as e:
                self._logger.error(f'failed {task.name}: {e!s}')
                summary.add_failure(task.name)
                continue
            summary.add_success(result.status, result.size)
