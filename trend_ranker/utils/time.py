"""Time utilities for day-keys and rolling windows."""

from datetime import datetime, timezone, timedelta
from typing import Optional
import pytz


DAY_KEY_FORMAT = "%Y-%m-%d"


def utcnow() -> datetime:
    """取得當前 UTC 時間 (tz-aware)"""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    轉換時間為 UTC tz-aware datetime

    Args:
        dt: 輸入時間
        tz_name: 原時區名稱 (若 dt 為 naive)

    Returns:
        UTC tz-aware datetime
    """
    if dt.tzinfo is None:
        if tz_name:
            tz = pytz.timezone(tz_name)
            dt = tz.localize(dt)
        else:
            dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_day_key(day_key: str, tz_name: str = "UTC") -> datetime:
    """
    解析 YYYY-MM-DD 為該日在 tz_name 的零點 (轉為 UTC)

    Raises:
        ValueError: 格式不符或日期不存在
    """
    day = datetime.strptime(day_key, DAY_KEY_FORMAT)
    return to_utc(day, tz_name)


def format_day_key(dt: datetime, tz_name: str = "UTC") -> str:
    """格式化為該時區下的 YYYY-MM-DD"""
    local = to_utc(dt).astimezone(pytz.timezone(tz_name))
    return local.strftime(DAY_KEY_FORMAT)


def window_start(days: int, now: Optional[datetime] = None) -> datetime:
    """
    計算時間窗起點 (now - days)

    Args:
        days: 回溯天數
        now: 基準時間 (預設為現在)

    Returns:
        UTC tz-aware datetime
    """
    if days <= 0:
        raise ValueError(f"Window size must be positive, got {days}")
    now = to_utc(now) if now else utcnow()
    return now - timedelta(days=days)


def in_window(day_start: datetime, days: int, now: Optional[datetime] = None) -> bool:
    """day_start 是否落在 [now - days, now] (含端點)"""
    now = to_utc(now) if now else utcnow()
    return window_start(days, now) <= day_start <= now
