"""
Ranking Builder

載入翻譯快取 -> 每個時間窗: 讀 snapshot、聚合、解析摘要 -> 寫回快取 -> 寫出排行榜。
"""

from datetime import datetime
from typing import Optional
import logging

from trend_ranker.config import RankingConfig
from trend_ranker.enrichment.queue import EnrichmentQueue
from trend_ranker.enrichment.translator import Translator
from trend_ranker.models import Aggregate, RankingItem, RankingPayload
from trend_ranker.processing.aggregate import aggregate_snapshots
from trend_ranker.processing.curated import CuratedSummaryIndex
from trend_ranker.processing.resolver import SummaryResolver
from trend_ranker.storage.file_store import FileStore
from trend_ranker.storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class RankingBuilder:
    """一次呼叫 build() 即一次完整建置；快取只在建置邊界載入與寫出"""

    def __init__(
        self,
        config: RankingConfig,
        snapshot_store: SnapshotStore,
        file_store: FileStore,
        curated: Optional[CuratedSummaryIndex] = None,
        translator: Optional[Translator] = None
    ):
        self.config = config
        self.snapshot_store = snapshot_store
        self.file_store = file_store
        self.curated = curated or CuratedSummaryIndex()
        self.translator = translator
        self.enrichment: Optional[EnrichmentQueue] = None
        self._cache = None
        self._built = False

    @classmethod
    def from_config(
        cls,
        config: RankingConfig,
        curated: Optional[CuratedSummaryIndex] = None
    ) -> "RankingBuilder":
        patterns = config.file_patterns
        snapshot_store = SnapshotStore(
            config.data_dir,
            prefix=patterns.trending_prefix,
            ext=patterns.trending_ext,
            tz_name=config.run_timezone
        )
        file_store = FileStore(
            config.data_dir,
            cache_file=patterns.translation_cache_file,
            payload_file=patterns.ranking_data_file,
            payload_var=patterns.ranking_data_var
        )
        return cls(config, snapshot_store, file_store, curated, Translator.from_config(config))

    def build(self, now: Optional[datetime] = None) -> RankingPayload:
        """
        執行一次建置

        Args:
            now: 時間窗基準時間 (預設為現在)

        Returns:
            RankingPayload (也已寫入 ranking_data.js)

        Raises:
            PersistenceError: 快取或輸出檔寫入失敗
        """
        self._built = False
        cache = self.file_store.load_translation_cache()
        self._cache = cache

        if self.translator is not None:
            self.enrichment = EnrichmentQueue(
                self.translator, cache, max_workers=self.config.translation.max_workers
            )

        resolver = SummaryResolver(cache, self.curated, self.config.resolver, self.enrichment)

        windows = {}
        for window_id, days in self.config.windows.items():
            snapshots = self.snapshot_store.load_window(days, now)
            ranked = aggregate_snapshots(snapshots, self.config.max_items)
            windows[window_id] = [self.enrich_item(agg, resolver) for agg in ranked]
            logger.info(f"Window {window_id} ({days}d): {len(windows[window_id])} items")

        payload = RankingPayload(windows=windows)

        self.file_store.save_translation_cache(cache)
        self.file_store.save_ranking_payload(payload)
        self._built = True

        if self.enrichment is not None:
            if self.config.translation.drain_on_build:
                self.drain_enrichment(self.config.translation.drain_timeout_seconds)
            else:
                logger.info(f"{self.enrichment.pending()} enrichment jobs left running in background")

        return payload

    @staticmethod
    def enrich_item(agg: Aggregate, resolver: SummaryResolver) -> RankingItem:
        """附上列表摘要與詳細摘要"""
        return RankingItem(
            **agg.model_dump(),
            chinese_desc=resolver.resolve_display(agg.name, agg.description),
            detailed_desc=resolver.resolve_detail(agg.name, agg.description),
        )

    def drain_enrichment(self, timeout: Optional[float] = None) -> bool:
        """
        等待背景翻譯完成後再寫一次快取 (排行榜輸出不重寫)

        Returns:
            True 表示所有工作都已完成
        """
        if self.enrichment is None or self._cache is None:
            return True

        finished = self.enrichment.drain(timeout)
        self.file_store.save_translation_cache(self._cache)
        logger.info(f"Enrichment drained: {self.enrichment.stats}")
        return finished

    def close(self, timeout: Optional[float] = None) -> None:
        """
        結束背景翻譯：等待進行中的工作 (有上限) 後再寫一次快取，讓下一次建置能用到結果

        Args:
            timeout: 等待上限秒數 (預設為 translation.drain_timeout_seconds)
        """
        if self.enrichment is None:
            return

        if timeout is None:
            timeout = self.config.translation.drain_timeout_seconds
        try:
            if self._built:
                self.drain_enrichment(timeout)
        finally:
            self.enrichment.shutdown(wait_for_jobs=False)
            self.enrichment = None
