"""
File-based storage for build outputs

翻譯快取 (translation_cache.json) 與排行榜輸出 (ranking_data.js) 都是整檔覆寫：
先寫到同目錄的暫存檔，再以 os.replace 換上，不會留下寫到一半的檔案。
"""

import os
import json
import tempfile
from pathlib import Path
import logging

from trend_ranker.enrichment.cache import TranslationCache
from trend_ranker.exceptions import PersistenceError
from trend_ranker.models import RankingPayload

logger = logging.getLogger(__name__)


class FileStore:
    """檔案儲存後端"""

    def __init__(
        self,
        base_dir: str = "data",
        cache_file: str = "translation_cache.json",
        payload_file: str = "ranking_data.js",
        payload_var: str = "rankingData"
    ):
        """
        初始化 FileStore

        Args:
            base_dir: 基礎目錄
            cache_file: 翻譯快取檔名
            payload_file: 排行榜輸出檔名
            payload_var: 輸出檔中的變數名稱
        """
        self.base_dir = Path(base_dir)
        self.cache_path = self.base_dir / cache_file
        self.payload_path = self.base_dir / payload_file
        self.payload_var = payload_var

    def load_translation_cache(self) -> TranslationCache:
        """讀取翻譯快取；不存在或損壞時從空快取開始"""
        if not self.cache_path.exists():
            logger.warning(f"Translation cache not found, starting empty: {self.cache_path}")
            return TranslationCache()

        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load translation cache {self.cache_path}: {e}")
            return TranslationCache()

        if not isinstance(data, dict):
            logger.warning(f"Translation cache {self.cache_path} is not a JSON object, starting empty")
            return TranslationCache()

        entries = {k: v for k, v in data.items() if isinstance(v, str)}
        logger.info(f"Loaded translation cache: {len(entries)} entries")
        return TranslationCache(entries)

    def save_translation_cache(self, cache: TranslationCache) -> None:
        """整檔寫入翻譯快取 (pretty-printed)"""
        content = json.dumps(cache.snapshot(), indent=2, ensure_ascii=False)
        self._replace_file(self.cache_path, content)
        logger.info(f"Written translation cache ({len(cache)} entries): {self.cache_path}")

    def save_ranking_payload(self, payload: RankingPayload) -> None:
        """寫入排行榜輸出 (var rankingData = {...};)"""
        payload_json = json.dumps(payload.to_payload_dict(), ensure_ascii=False)
        content = f"var {self.payload_var} = {payload_json};"
        self._replace_file(self.payload_path, content)
        logger.info(f"Written ranking payload: {self.payload_path}")

    def read_ranking_payload(self) -> RankingPayload:
        """讀回排行榜輸出"""
        if not self.payload_path.exists():
            return RankingPayload()

        text = self.payload_path.read_text(encoding='utf-8').strip()
        prefix = f"var {self.payload_var} ="
        if not text.startswith(prefix):
            raise ValueError(f"Unexpected payload format in {self.payload_path}")

        body = text[len(prefix):].strip().rstrip(';')
        return RankingPayload.from_payload_dict(json.loads(body))

    def _replace_file(self, path: Path, content: str) -> None:
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=path.parent, prefix=f".{path.name}.", delete=False
            ) as tmp_file:
                tmp_name = tmp_file.name
                tmp_file.write(content)
            os.replace(tmp_name, path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(str(path), str(e)) from e
