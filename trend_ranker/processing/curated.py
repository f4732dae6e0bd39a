"""
Curated summary index

從最新一天的日報 Markdown 中擷取「一句話概括」，依完整名稱與短名稱 (去掉 owner) 建索引。
擷取規則集中在 CuratedReportParser，改格式時只需換 parser。
"""

import re
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class CuratedReportParser:
    """
    日報格式 v1:

        ### owner/repo
        * **一句话概括**：summary text
    """

    version = 1
    label = "一句话概括"

    def __init__(self, label: Optional[str] = None):
        label = label or self.label
        self._pattern = re.compile(
            r"^###\s+([^\n]+)\n(?:(?!###\s)[^\n]*\n)*?\s*[*-]\s+\*\*" + re.escape(label) + r"\*\*\s*[：:]\s*([^\n]+)",
            re.MULTILINE
        )

    def parse(self, text: str) -> Iterator[Tuple[str, str]]:
        """依序產生 (name, summary)"""
        for match in self._pattern.finditer(text or ""):
            name = match.group(1).strip()
            summary = match.group(2).strip()
            if name and summary:
                yield name, summary


class CuratedSummaryIndex:
    """
    人工摘要索引 (每次建置重建，不持久化)

    Keys: 小寫完整名稱與小寫短名稱。
    """

    def __init__(self, summaries: Optional[Dict[str, str]] = None):
        self._summaries: Dict[str, str] = {}
        for name, summary in (summaries or {}).items():
            self.add(name, summary)

    def __len__(self) -> int:
        return len(self._summaries)

    def add(self, name: str, summary: str) -> None:
        self._summaries[name.lower()] = summary
        short_name = short_name_of(name)
        if short_name != name:
            self._summaries[short_name.lower()] = summary

    def lookup(self, name: str) -> Optional[str]:
        """完整名稱優先，其次短名稱"""
        if not name:
            return None
        summary = self._summaries.get(name.lower())
        if summary is not None:
            return summary
        return self._summaries.get(short_name_of(name).lower())

    @classmethod
    def from_text(cls, text: str, parser: Optional[CuratedReportParser] = None) -> "CuratedSummaryIndex":
        parser = parser or CuratedReportParser()
        index = cls()
        for name, summary in parser.parse(text):
            index.add(name, summary)
        logger.info(f"Curated summaries indexed: {len(index)} keys")
        return index

    @classmethod
    def from_file(cls, file_path: Optional[Path], parser: Optional[CuratedReportParser] = None) -> "CuratedSummaryIndex":
        """讀取日報；檔案不存在或無法讀取時回傳空索引"""
        if file_path is None:
            logger.warning("No curated report available, curated lookups disabled")
            return cls()
        try:
            text = Path(file_path).read_text(encoding='utf-8')
        except OSError as e:
            logger.warning(f"Cannot read curated report {file_path}: {e}")
            return cls()
        return cls.from_text(text, parser)


def short_name_of(name: str) -> str:
    """owner/repo -> repo"""
    return name.split('/')[-1]


def find_latest_report(reports_dir: str, prefix: str = "daily_", ext: str = ".md") -> Optional[Path]:
    """
    找出最新的日報檔 (daily_YYYY-MM-DD.md)

    Returns:
        Path，或 None (目錄不存在 / 沒有日報)
    """
    directory = Path(reports_dir)
    if not directory.is_dir():
        logger.warning(f"Reports directory does not exist: {directory}")
        return None

    pattern = re.compile(rf"^{re.escape(prefix)}\d{{4}}-\d{{2}}-\d{{2}}{re.escape(ext)}$")
    reports = sorted(p for p in directory.iterdir() if p.is_file() and pattern.match(p.name))
    return reports[-1] if reports else None
