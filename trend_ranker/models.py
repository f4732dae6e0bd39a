"""
Core data models for Trend Ranker

Snapshot 為輸入契約，RankingItem / RankingPayload 為輸出契約（頁面模板直接讀取）。
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SnapshotEntry(BaseModel):
    """
    單日 trending 清單中的一筆 (每個 repository 一筆)

    來源檔案格式固定，但欄位可能缺漏；缺漏欄位以空字串補上。
    """
    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="owner/repo，單日內唯一")
    url: str = Field(default="", description="Repository URL")
    description: str = Field(default="", description="原始英文描述")
    stars: str = Field(default="", description="格式化的 star 數 (可含千分位)")
    language: str = Field(default="", description="主要語言")
    rank: Optional[int] = Field(None, description="當日排名")

    @field_validator("name", "url", "description", "stars", "language", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("rank", mode="before")
    @classmethod
    def _coerce_rank(cls, value: Any) -> Optional[int]:
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None


class Snapshot(BaseModel):
    """一天的 snapshot"""
    day_key: str = Field(..., description="YYYY-MM-DD")
    entries: List[SnapshotEntry] = Field(default_factory=list)


class Aggregate(BaseModel):
    """
    跨 snapshot 累積的單一 repository 統計

    occurrence_count 以「讀到的 snapshot 次數」計算，不是相異日期數。
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str = Field(default="", description="第一次出現時的 URL")
    description: str = Field(default="", description="第一次出現時的描述")
    stars: str = Field(default="0", description="最新一天的 star 數")
    occurrence_count: int = Field(default=0, alias="count", description="出現次數")
    distinct_dates: List[str] = Field(default_factory=list, alias="dates", description="出現過的日期 (依讀取順序)")
    stars_day: str = Field(default="", exclude=True, description="stars 欄位所屬的 day-key")


class RankingItem(Aggregate):
    """Top N 中的一筆，附上解析後的摘要"""
    chinese_desc: str = Field(default="", alias="chineseDesc", description="列表顯示用短摘要")
    detailed_desc: str = Field(default="", alias="detailedDesc", description="懸浮視窗用摘要")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RankingPayload(BaseModel):
    """
    一次建置的輸出：時間窗識別字 -> 排序後的 RankingItem
    """
    windows: Dict[str, List[RankingItem]] = Field(default_factory=dict)

    def __getitem__(self, window_id: str) -> List[RankingItem]:
        return self.windows[window_id]

    def to_payload_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """轉換成輸出檔中的 JSON 結構"""
        return {
            window_id: [item.to_payload() for item in items]
            for window_id, items in self.windows.items()
        }

    @classmethod
    def from_payload_dict(cls, data: Dict[str, List[Dict[str, Any]]]) -> "RankingPayload":
        return cls(windows={
            window_id: [RankingItem.model_validate(item) for item in items]
            for window_id, items in data.items()
        })
