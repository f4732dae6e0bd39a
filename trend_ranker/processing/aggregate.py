"""
Ranking Aggregation

將多天的 snapshot 聚合成 repository-level Aggregate，再依出現次數與 star 數排序取 Top N。
"""

import re
from typing import Dict, Iterable, List
import logging

from trend_ranker.models import Aggregate, Snapshot

logger = logging.getLogger(__name__)

_STAR_SEPARATORS = re.compile(r"[,\s_']")
_LEADING_DIGITS = re.compile(r"^\d+")


def parse_star_count(stars: str) -> int:
    """
    將格式化的 star 數轉成整數

    去除千分位等分隔符號後取開頭的數字；無法解析時回傳 0。

    Examples:
        "1,234" -> 1234, "1.2k" -> 1, "" -> 0
    """
    if not stars:
        return 0
    match = _LEADING_DIGITS.match(_STAR_SEPARATORS.sub("", str(stars)))
    return int(match.group(0)) if match else 0


def fold_snapshots(snapshots: Iterable[Snapshot]) -> Dict[str, Aggregate]:
    """
    把 snapshots 折疊成 {name: Aggregate}

    - 每讀到一次就 occurrence_count + 1 (同一天的兩個檔案也各算一次)
    - url / description 保留第一次出現的值
    - stars 以 day-key 最大的那天為準，與讀取順序無關

    Returns:
        dict，保留第一次出現的順序
    """
    aggregates: Dict[str, Aggregate] = {}

    for snapshot in snapshots:
        day_key = snapshot.day_key

        for entry in snapshot.entries:
            if not entry.name:
                continue

            agg = aggregates.get(entry.name)
            if agg is None:
                agg = Aggregate(
                    name=entry.name,
                    url=entry.url,
                    description=entry.description,
                    stars=entry.stars or "0",
                    stars_day=day_key if entry.stars else "",
                )
                aggregates[entry.name] = agg
            elif entry.stars and day_key > agg.stars_day:
                agg.stars = entry.stars
                agg.stars_day = day_key

            agg.occurrence_count += 1
            if day_key not in agg.distinct_dates:
                agg.distinct_dates.append(day_key)

    return aggregates


def rank_aggregates(aggregates: Iterable[Aggregate], top_n: int = 10) -> List[Aggregate]:
    """
    排序並截斷

    排序鍵: occurrence_count 降序 -> star 數降序；其餘維持原順序 (stable sort)。
    """
    ranked = sorted(
        aggregates,
        key=lambda a: (-a.occurrence_count, -parse_star_count(a.stars))
    )
    return ranked[:top_n]


def aggregate_snapshots(snapshots: Iterable[Snapshot], top_n: int = 10) -> List[Aggregate]:
    """
    聚合 snapshots 並回傳 Top N

    Args:
        snapshots: 任意順序的 Snapshot
        top_n: 輸出數量上限 (固定設定值)

    Returns:
        排序後的 Aggregate (最多 top_n 筆)
    """
    snapshots = list(snapshots)
    aggregates = fold_snapshots(snapshots)
    ranked = rank_aggregates(aggregates.values(), top_n)

    logger.info(f"Aggregated {len(snapshots)} snapshots into {len(aggregates)} repositories, " +
                f"keeping top {len(ranked)}")
    return ranked
