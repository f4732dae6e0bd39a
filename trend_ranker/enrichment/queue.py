"""
Background enrichment queue

翻譯請求在背景 thread 執行，不阻塞建置；結果只寫入快取，供下一次建置使用。
失敗只會出現在 log 中。
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Dict, Optional
import logging

from trend_ranker.enrichment.cache import TranslationCache
from trend_ranker.enrichment.translator import Translator

logger = logging.getLogger(__name__)


class EnrichmentQueue:
    """每個快取 key 同時最多一個進行中的翻譯工作"""

    def __init__(self, translator: Translator, cache: TranslationCache, max_workers: int = 2):
        self.translator = translator
        self.cache = cache
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="enrich")
        self._inflight: Dict[str, Future] = {}
        self._lock = threading.Lock()
        self.stats = {'submitted': 0, 'completed': 0, 'failed': 0}

    def submit(self, name: str, text: str) -> Optional[Future]:
        """
        排入一個翻譯工作 (立即返回)

        Returns:
            Future，或 None (已有同名工作在進行)
        """
        key = TranslationCache.key(name)
        with self._lock:
            if key in self._inflight:
                return None
            future = self._executor.submit(self._run, name, text)
            self._inflight[key] = future
            self.stats['submitted'] += 1
        future.add_done_callback(lambda _: self._forget(key))
        return future

    def _forget(self, key: str) -> None:
        with self._lock:
            self._inflight.pop(key, None)

    def _run(self, name: str, text: str) -> Optional[str]:
        try:
            translated = self.translator.translate(text)
        except Exception as e:
            logger.error(f"Enrichment job for {name} crashed: {e}", exc_info=True)
            translated = None

        if translated:
            self.cache.set(name, translated)
            with self._lock:
                self.stats['completed'] += 1
            logger.info(f"[translated] {name}: {translated}")
        else:
            with self._lock:
                self.stats['failed'] += 1
        return translated

    def pending(self) -> int:
        with self._lock:
            return len(self._inflight)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        等待目前所有工作完成

        Returns:
            True 表示全部完成；False 表示逾時仍有工作未完成
        """
        with self._lock:
            futures = list(self._inflight.values())
        if not futures:
            return True
        done, not_done = wait(futures, timeout=timeout)
        if not_done:
            logger.warning(f"{len(not_done)} enrichment jobs still running after {timeout}s")
        return not not_done

    def shutdown(self, wait_for_jobs: bool = False) -> None:
        self._executor.shutdown(wait=wait_for_jobs, cancel_futures=not wait_for_jobs)
