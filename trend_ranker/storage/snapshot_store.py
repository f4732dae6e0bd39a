"""
Snapshot store (read-only)

每天一個 trending_YYYY-MM-DD.json，內容為 entry 陣列。
缺檔、空檔、壞檔都視為「當天沒有資料」，不讓整個讀取失敗。
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional
import logging

from pydantic import ValidationError

from trend_ranker.models import Snapshot, SnapshotEntry
from trend_ranker.utils.time import in_window, parse_day_key

logger = logging.getLogger(__name__)


class SnapshotStore:
    """依時間窗讀取每日 snapshot"""

    def __init__(
        self,
        data_dir: str = "data",
        prefix: str = "trending_",
        ext: str = ".json",
        tz_name: str = "UTC"
    ):
        self.data_dir = Path(data_dir)
        self.prefix = prefix
        self.ext = ext
        self.tz_name = tz_name
        self._pattern = re.compile(
            rf"^{re.escape(prefix)}(\d{{4}}-\d{{2}}-\d{{2}}){re.escape(ext)}$"
        )

    def parse_day_key(self, file_name: str) -> Optional[str]:
        """從檔名取出 day-key；不符合命名規則回傳 None"""
        match = self._pattern.match(file_name)
        return match.group(1) if match else None

    def list_day_files(self) -> List[Path]:
        """列出所有符合命名規則的 snapshot 檔 (依 day-key 由新到舊)"""
        if not self.data_dir.is_dir():
            logger.warning(f"Snapshot directory does not exist: {self.data_dir}")
            return []

        files = [p for p in self.data_dir.iterdir() if p.is_file() and self.parse_day_key(p.name)]
        files.sort(key=lambda p: p.name, reverse=True)
        return files

    def load_window(self, window_days: int, now: Optional[datetime] = None) -> List[Snapshot]:
        """
        讀取 [now - window_days, now] 內的 snapshots

        Args:
            window_days: 時間窗天數 (正整數)
            now: 基準時間 (預設為現在)

        Returns:
            List of Snapshot，依 day-key 由新到舊
        """
        if window_days <= 0:
            raise ValueError(f"window_days must be positive, got {window_days}")

        files = self.list_day_files()
        if not files:
            logger.warning(f"No snapshot files found in {self.data_dir}")
            return []

        snapshots = []
        for file_path in files:
            day_key = self.parse_day_key(file_path.name)
            try:
                day_start = parse_day_key(day_key, self.tz_name)
            except ValueError:
                logger.warning(f"Invalid date in snapshot file name: {file_path.name}")
                continue

            if not in_window(day_start, window_days, now):
                continue

            snapshot = self.read_snapshot(file_path, day_key)
            if snapshot is not None:
                snapshots.append(snapshot)

        logger.info(f"Loaded {len(snapshots)} snapshots for {window_days}-day window")
        return snapshots

    def read_snapshot(self, file_path: Path, day_key: str) -> Optional[Snapshot]:
        """讀取單一檔案；JSON 解析失敗回傳 None，非陣列視為空的一天"""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable snapshot {file_path.name}: {e}")
            return None

        if not isinstance(data, list):
            logger.warning(f"Snapshot {file_path.name} is not a JSON array, treating as empty")
            return Snapshot(day_key=day_key, entries=[])

        entries = []
        for raw in data:
            if not isinstance(raw, dict):
                continue
            try:
                entries.append(SnapshotEntry.model_validate(raw))
            except ValidationError as e:
                logger.debug(f"Skipping invalid entry in {file_path.name}: {e}")

        return Snapshot(day_key=day_key, entries=entries)
