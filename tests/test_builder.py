"""
Tests for the end-to-end ranking build
"""

import json
import time
from datetime import datetime, timezone

import pytest

from trend_ranker.builder import RankingBuilder
from trend_ranker.config import RankingConfig
from trend_ranker.exceptions import PersistenceError
from trend_ranker.processing.curated import CuratedSummaryIndex


NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class FakeTranslator:
    """Translator stand-in: 固定回傳同一個結果"""

    def __init__(self, result="背景翻译结果"):
        self.result = result
        self.calls = []

    def translate(self, text):
        self.calls.append(text)
        return self.result


def write_snapshot(data_dir, day_key, entries):
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / f"trending_{day_key}.json").write_text(json.dumps(entries), encoding='utf-8')


def create_builder(tmp_path, curated=None, translator=None, **config_overrides) -> RankingBuilder:
    config = RankingConfig(data_dir=str(tmp_path / "data"), **config_overrides)
    builder = RankingBuilder.from_config(config, curated=curated)
    builder.translator = translator
    return builder


@pytest.fixture
def data_dir(tmp_path):
    data_dir = tmp_path / "data"
    write_snapshot(data_dir, "2026-10-17", [
        {"name": "a/x", "stars": "1,200", "description": "Fast database"},
        {"name": "b/y", "stars": "500", "description": "Robust speech recognition via weak supervision"},
    ])
    write_snapshot(data_dir, "2026-10-18", [
        {"name": "a/x", "stars": "1,300", "description": "Fast database"},
    ])
    write_snapshot(data_dir, "2026-09-01", [
        {"name": "old/repo", "stars": "99,999", "description": "Old"},
        {"name": "old/repo2", "stars": "1", "description": "Old"},
    ])
    return data_dir


def test_build_three_windows(tmp_path, data_dir):
    """7/30/90 天排行榜與摘要欄位"""
    builder = create_builder(tmp_path)
    payload = builder.build(now=NOW)

    assert list(payload.windows) == ["week", "month", "quarter"]

    week = payload["week"]
    assert [i.name for i in week] == ["a/x", "b/y"]
    assert week[0].occurrence_count == 2
    assert week[0].stars == "1,300"
    assert week[0].distinct_dates == ["2026-10-18", "2026-10-17"]
    assert week[0].chinese_desc == "快速 数据库"
    assert week[1].chinese_desc.startswith("📝 ")

    assert "old/repo" not in [i.name for i in payload["month"]]
    assert [i.name for i in payload["quarter"]] == ["a/x", "old/repo", "b/y", "old/repo2"]


def test_build_persists_payload_and_cache(tmp_path, data_dir):
    """建置後輸出檔與快取都寫入磁碟"""
    builder = create_builder(tmp_path)
    payload = builder.build(now=NOW)

    assert builder.file_store.read_ranking_payload().to_payload_dict() == payload.to_payload_dict()

    cache = json.loads((data_dir / "translation_cache.json").read_text(encoding='utf-8'))
    assert cache["a/x"] == "快速 数据库"
    assert cache["b/y"].startswith("📝 ")


def test_curated_summary_used_and_not_cached(tmp_path, data_dir):
    """人工摘要優先，且不寫入快取"""
    curated = CuratedSummaryIndex({"b/y": "语音识别"})
    payload = create_builder(tmp_path, curated=curated).build(now=NOW)

    assert payload["week"][1].chinese_desc == "语音识别"
    assert payload["week"][1].detailed_desc == "语音识别"
    cache = json.loads((data_dir / "translation_cache.json").read_text(encoding='utf-8'))
    assert "b/y" not in cache


def test_cache_reused_by_next_build(tmp_path, data_dir):
    """上一次建置留下的快取值會被下一次建置使用"""
    (data_dir / "translation_cache.json").write_text(
        json.dumps({"b/y": "之前的翻译"}, ensure_ascii=False), encoding='utf-8'
    )

    payload = create_builder(tmp_path).build(now=NOW)

    assert payload["week"][1].chinese_desc == "之前的翻译"


def test_missing_data_dir_builds_empty_ranking(tmp_path):
    """沒有 snapshot 目錄也能產生 (空的) 排行榜"""
    builder = create_builder(tmp_path)
    payload = builder.build(now=NOW)

    assert payload.to_payload_dict() == {"week": [], "month": [], "quarter": []}
    assert builder.file_store.payload_path.exists()


def test_background_enrichment_drained(tmp_path, data_dir):
    """drain_on_build 時等待背景翻譯並重寫快取；輸出檔維持建置當下的值"""
    translator = FakeTranslator()
    builder = create_builder(
        tmp_path,
        translator=translator,
        translation={"drain_on_build": True, "drain_timeout_seconds": 5},
    )

    payload = builder.build(now=NOW)
    builder.close()

    # 同一個 repository 在三個時間窗中只翻譯一次
    assert translator.calls.count("Robust speech recognition via weak supervision") == 1
    assert payload["week"][1].chinese_desc.startswith("📝 ")

    cache = json.loads((data_dir / "translation_cache.json").read_text(encoding='utf-8'))
    assert cache["b/y"] == "背景翻译结果"
    written = builder.file_store.read_ranking_payload()
    assert written["week"][1].chinese_desc.startswith("📝 ")


def test_persistence_failure_is_fatal(tmp_path, data_dir):
    """快取寫入失敗 -> 拋出 PersistenceError，不寫輸出檔"""
    (data_dir / "translation_cache.json").mkdir()
    (data_dir / "translation_cache.json" / "keep").write_text("x", encoding='utf-8')
    builder = create_builder(tmp_path)

    with pytest.raises(PersistenceError):
        builder.build(now=NOW)

    assert not builder.file_store.payload_path.exists()


class SlowTranslator(FakeTranslator):
    """背景翻譯比建置本身慢"""

    def translate(self, text):
        time.sleep(1.0)
        return super().translate(text)


def test_close_persists_late_enrichment(tmp_path, data_dir):
    """預設不在 build 內等待；close() 等背景翻譯完成後寫回快取，供下一次建置使用"""
    builder = create_builder(tmp_path, translator=SlowTranslator())

    payload = builder.build(now=NOW)
    assert payload["week"][1].chinese_desc.startswith("📝 ")

    cache = json.loads((data_dir / "translation_cache.json").read_text(encoding='utf-8'))
    assert cache["b/y"].startswith("📝 ")

    builder.close(timeout=10)

    cache = json.loads((data_dir / "translation_cache.json").read_text(encoding='utf-8'))
    assert cache["b/y"] == "背景翻译结果"

    next_payload = create_builder(tmp_path).build(now=NOW)
    assert next_payload["week"][1].chinese_desc == "背景翻译结果"


def test_close_without_build_writes_nothing(tmp_path):
    """尚未建置就 close() 不寫任何檔案"""
    builder = create_builder(tmp_path, translator=FakeTranslator())
    builder.close()

    assert not (tmp_path / "data").exists()
