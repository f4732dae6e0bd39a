"""
Summary Resolver

為每個 repository 決定顯示用摘要，優先序 (先命中者勝出):

1. 人工摘要 (curated index，完整名稱 -> 短名稱)，不寫入快取
2. 翻譯快取
3. 關鍵字替換 (描述長度 < keyword_max_length 且有變化)，寫入快取
4. 加上標記前綴 (描述長度 > fallback_min_length)，寫入快取
5. 背景翻譯 (若有設定)，結果只供下一次建置使用
6. 原始描述，或預設文字
"""

from typing import Optional
import logging

from trend_ranker.config import ResolverConfig
from trend_ranker.enrichment.cache import TranslationCache
from trend_ranker.enrichment.queue import EnrichmentQueue
from trend_ranker.processing.curated import CuratedSummaryIndex
from trend_ranker.processing.keywords import substitute_keywords

logger = logging.getLogger(__name__)


class SummaryResolver:
    """Curated -> cache -> keyword -> marker -> background enrichment -> raw"""

    def __init__(
        self,
        cache: TranslationCache,
        curated: Optional[CuratedSummaryIndex] = None,
        config: Optional[ResolverConfig] = None,
        enrichment: Optional[EnrichmentQueue] = None
    ):
        self.cache = cache
        self.curated = curated or CuratedSummaryIndex()
        self.config = config or ResolverConfig()
        self.enrichment = enrichment

    def resolve_display(self, name: str, raw_description: str) -> str:
        """列表顯示用的短摘要"""
        resolved = self._resolve_chain(name, raw_description)
        if resolved is not None:
            return resolved

        self._dispatch(name, raw_description)
        return self._raw(raw_description)

    def resolve_detail(self, name: str, raw_description: str) -> str:
        """
        懸浮視窗用的摘要

        與 resolve_display 相同的解析鏈；若結果只是原文，再看一次快取
        (可能有先前背景翻譯的結果)，仍沒有就排入背景翻譯並回傳原文。
        """
        resolved = self._resolve_chain(name, raw_description)
        if resolved is not None and resolved != raw_description:
            return resolved

        if raw_description:
            cached = self.cache.get(name)
            if cached:
                return cached
            self._dispatch(name, raw_description)

        return self._raw(raw_description)

    def _resolve_chain(self, name: str, raw_description: str) -> Optional[str]:
        curated = self.curated.lookup(name)
        if curated:
            return curated

        cached = self.cache.get(name)
        if cached:
            if raw_description and cached == self._marked(raw_description):
                # 先前只留下標記文字，再試一次背景翻譯
                self._dispatch(name, raw_description)
            return cached

        if not raw_description:
            return None

        if len(raw_description) < self.config.keyword_max_length:
            substituted = substitute_keywords(raw_description)
            if substituted != raw_description:
                self.cache.set(name, substituted)
                return substituted

        if len(raw_description) > self.config.fallback_min_length:
            marked = self._marked(raw_description)
            self.cache.set(name, marked)
            # 暫時值，背景翻譯成功後會覆蓋
            self._dispatch(name, raw_description)
            return marked

        return None

    def _marked(self, raw_description: str) -> str:
        return f"{self.config.fallback_marker} {raw_description}"

    def _dispatch(self, name: str, raw_description: str) -> None:
        if self.enrichment is None or not raw_description:
            return
        self.enrichment.submit(name, raw_description)

    def _raw(self, raw_description: str) -> str:
        return raw_description or self.config.placeholder
