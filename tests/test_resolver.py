"""
Tests for the summary resolution chain
"""

import pytest

from trend_ranker.config import ResolverConfig
from trend_ranker.enrichment.cache import TranslationCache
from trend_ranker.processing.curated import CuratedSummaryIndex
from trend_ranker.processing.keywords import substitute_keywords
from trend_ranker.processing.resolver import SummaryResolver


LONG_DESC = "Robust speech recognition via large-scale weak supervision"
SHORT_DESC = "Just a thing"


class RecordingQueue:
    """Stand-in for EnrichmentQueue that records submissions"""

    def __init__(self):
        self.submitted = []

    def submit(self, name, text):
        self.submitted.append((name, text))


def create_resolver(curated=None, cache=None, config=None, enrichment=None) -> SummaryResolver:
    return SummaryResolver(
        cache if cache is not None else TranslationCache(),
        curated=CuratedSummaryIndex(curated or {}),
        config=config,
        enrichment=enrichment,
    )


def test_curated_wins_over_cache_and_keywords():
    """人工摘要優先於快取與關鍵字"""
    cache = TranslationCache({"owner/tool": "快取內容"})
    resolver = create_resolver(curated={"owner/tool": "人工摘要"}, cache=cache)

    assert resolver.resolve_display("owner/tool", "A fast CLI tool") == "人工摘要"
    # 人工摘要不寫入快取
    assert cache.get("owner/tool") == "快取內容"


def test_curated_short_name_match():
    """完整名稱找不到時以短名稱比對 (不分大小寫)"""
    resolver = create_resolver(curated={"Other/Whisper": "语音识别模型"})

    assert resolver.resolve_display("openai/whisper", LONG_DESC) == "语音识别模型"


def test_cache_wins_without_curated():
    """沒有人工摘要時使用快取"""
    cache = TranslationCache({"owner/tool": "快取内容"})
    resolver = create_resolver(cache=cache)

    assert resolver.resolve_display("Owner/Tool", "A fast CLI tool") == "快取内容"


def test_keyword_substitution_cached():
    """短描述命中關鍵字 -> 替換並寫入快取"""
    cache = TranslationCache()
    resolver = create_resolver(cache=cache)

    result = resolver.resolve_display("owner/db", "Simple database")

    assert result == "简单 数据库"
    assert cache.get("owner/db") == "简单 数据库"


def test_marker_fallback_for_long_text():
    """關鍵字不適用且描述夠長 -> 加上標記前綴"""
    cache = TranslationCache()
    resolver = create_resolver(cache=cache, config=ResolverConfig(keyword_max_length=0))

    result = resolver.resolve_display("owner/x", LONG_DESC)

    assert result == f"📝 {LONG_DESC}"
    assert cache.get("owner/x") == result


def test_raw_for_short_text():
    """關鍵字不適用且描述很短 -> 原文，不寫入快取"""
    cache = TranslationCache()
    resolver = create_resolver(cache=cache, config=ResolverConfig(keyword_max_length=0))

    assert resolver.resolve_display("owner/x", SHORT_DESC) == SHORT_DESC
    assert "owner/x" not in cache


def test_long_text_skips_keywords():
    """長度超過門檻時不做關鍵字替換"""
    text = "A framework " + "x" * 100
    resolver = create_resolver()

    assert resolver.resolve_display("owner/x", text) == f"📝 {text}"


def test_placeholder_for_empty_description():
    """沒有描述 -> 預設文字"""
    resolver = create_resolver()

    assert resolver.resolve_display("owner/x", "") == "暂无描述"
    assert resolver.resolve_detail("owner/x", "") == "暂无描述"


def test_detail_uses_resolved_value():
    """詳細摘要沿用解析結果"""
    resolver = create_resolver(curated={"owner/x": "人工摘要"})

    assert resolver.resolve_detail("owner/x", SHORT_DESC) == "人工摘要"


def test_detail_reads_cache_filled_after_display():
    """顯示時只能回原文，之後背景翻譯寫入快取，詳細摘要可以讀到"""
    cache = TranslationCache()
    queue = RecordingQueue()
    resolver = create_resolver(cache=cache, enrichment=queue)

    assert resolver.resolve_display("owner/x", SHORT_DESC) == SHORT_DESC
    cache.set("owner/x", "一个东西")

    assert resolver.resolve_detail("owner/x", SHORT_DESC) == "一个东西"


def test_enrichment_dispatched_for_fallbacks():
    """標記前綴與原文回退都會排入背景翻譯，關鍵字命中則不會"""
    queue = RecordingQueue()
    resolver = create_resolver(enrichment=queue)

    resolver.resolve_display("owner/long", "x" * 120)
    resolver.resolve_display("owner/short", SHORT_DESC)
    resolver.resolve_display("owner/kw", "Simple database")

    names = [name for name, _ in queue.submitted]
    assert "owner/long" in names
    assert "owner/short" in names
    assert "owner/kw" not in names


def test_cached_marker_is_retried():
    """快取中只有標記文字時，再排入一次背景翻譯"""
    text = "x" * 120
    cache = TranslationCache({"owner/x": f"📝 {text}"})
    queue = RecordingQueue()
    resolver = create_resolver(cache=cache, enrichment=queue)

    assert resolver.resolve_display("owner/x", text) == f"📝 {text}"
    assert queue.submitted == [("owner/x", text)]


def test_no_enrichment_when_disabled():
    """未設定翻譯時不排入任何工作，也不報錯"""
    resolver = create_resolver(enrichment=None)

    assert resolver.resolve_detail("owner/x", SHORT_DESC) == SHORT_DESC


def test_substitute_keywords_case_insensitive():
    """關鍵字替換不分大小寫，替換所有出現處"""
    assert substitute_keywords("Docker and DOCKER") == "Docker and Docker"
    assert substitute_keywords("VIDEO video") == "视频 视频"
    assert substitute_keywords("zzz") == "zzz"


@pytest.mark.parametrize("length, substituted", [(99, True), (100, False)])
def test_keyword_threshold_is_exclusive(length, substituted):
    """關鍵字替換只在長度 < 100 時套用"""
    text = "video " + "x" * (length - 6)
    assert len(text) == length
    resolver = create_resolver()

    result = resolver.resolve_display("owner/x", text)

    if substituted:
        assert result == "视频 " + "x" * (length - 6)
    else:
        assert result == f"📝 {text}"


@pytest.mark.parametrize("length, marked", [(20, False), (21, True)])
def test_marker_threshold_is_exclusive(length, marked):
    """標記前綴只在長度 > 20 時套用"""
    text = "x" * length
    cache = TranslationCache()
    resolver = create_resolver(cache=cache)

    result = resolver.resolve_display("owner/x", text)

    if marked:
        assert result == f"📝 {text}"
        assert cache.get("owner/x") == result
    else:
        assert result == text
        assert "owner/x" not in cache
