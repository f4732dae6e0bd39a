"""
Configuration schemas using Pydantic

定義排行榜建置所需的完整配置：資料目錄、時間窗、檔名規則、摘要解析與外部翻譯設定。
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
import os

from trend_ranker.exceptions import ConfigurationError


class FilePatternConfig(BaseModel):
    """檔名規則"""
    trending_prefix: str = Field(default="trending_", description="Snapshot 檔名前綴")
    trending_ext: str = Field(default=".json", description="Snapshot 副檔名")
    report_prefix: str = Field(default="daily_", description="日報 Markdown 檔名前綴")
    report_ext: str = Field(default=".md", description="日報副檔名")
    translation_cache_file: str = Field(default="translation_cache.json", description="翻譯快取檔名")
    ranking_data_file: str = Field(default="ranking_data.js", description="排行榜輸出檔名")
    ranking_data_var: str = Field(default="rankingData", description="輸出檔中的變數名稱")


class ResolverConfig(BaseModel):
    """摘要解析鏈參數"""
    keyword_max_length: int = Field(default=100, description="描述長度小於此值才做關鍵字替換")
    fallback_min_length: int = Field(default=20, description="描述長度大於此值才加上標記前綴")
    fallback_marker: str = Field(default="📝", description="回退前綴符號")
    placeholder: str = Field(default="暂无描述", description="無描述時的預設文字")


class TranslationConfig(BaseModel):
    """外部翻譯 (OpenAI-compatible) 設定"""
    enabled: bool = Field(default=False, description="是否啟用外部翻譯")
    api_key_env: str = Field(default="OPENAI_API_KEY", description="API key 環境變數名稱")
    base_url_env: str = Field(default="OPENAI_BASE_URL", description="替代 endpoint 環境變數名稱")
    model: str = Field(default="gpt-3.5-turbo", description="模型名稱")
    timeout_seconds: float = Field(default=10.0, description="單次請求 timeout")
    max_attempts: int = Field(default=2, description="最多嘗試次數")
    max_tokens: int = Field(default=200, description="回應 token 上限")
    temperature: float = Field(default=0.3, description="取樣溫度")
    max_workers: int = Field(default=2, description="背景翻譯 worker 數")
    drain_on_build: bool = Field(default=False, description="建置結束後是否等待背景翻譯完成")
    drain_timeout_seconds: float = Field(default=30.0, description="等待背景翻譯的上限秒數")

    @field_validator("max_attempts", "max_workers")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be >= 1")
        return value


class RankingConfig(BaseModel):
    """完整設定 schema"""
    # 目錄
    data_dir: str = Field(default="data", description="Snapshot、快取與輸出所在目錄")
    reports_dir: str = Field(default="reports", description="日報 Markdown 目錄")

    # 時間
    run_timezone: str = Field(default="UTC", description="解讀 day-key 的時區")

    # 排行榜
    windows: Dict[str, int] = Field(
        default_factory=lambda: {"week": 7, "month": 30, "quarter": 90},
        description="時間窗識別字 -> 天數"
    )
    max_items: int = Field(default=10, description="每個時間窗輸出 Top N")

    file_patterns: FilePatternConfig = Field(default_factory=FilePatternConfig, description="檔名規則")
    resolver: ResolverConfig = Field(default_factory=ResolverConfig, description="摘要解析參數")
    translation: TranslationConfig = Field(default_factory=TranslationConfig, description="外部翻譯設定")

    @field_validator("windows")
    @classmethod
    def _positive_windows(cls, value: Dict[str, int]) -> Dict[str, int]:
        if not value:
            raise ValueError("at least one window is required")
        for window_id, days in value.items():
            if days <= 0:
                raise ValueError(f"window {window_id} must be a positive day count")
        return value

    @field_validator("max_items")
    @classmethod
    def _positive_max_items(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_items must be positive")
        return value

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "RankingConfig":
        """從 YAML 檔案載入設定（讀取失敗屬於致命錯誤）"""
        import yaml
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load config {yaml_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config {yaml_path} must be a mapping, got {type(data).__name__}")
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {yaml_path}: {e}") from e

    def get_api_key(self) -> Optional[str]:
        """取得 API key (從環境變數)"""
        if self.translation.api_key_env:
            return os.environ.get(self.translation.api_key_env) or None
        return None

    def get_base_url(self) -> Optional[str]:
        """取得替代 endpoint (從環境變數)"""
        if self.translation.base_url_env:
            return os.environ.get(self.translation.base_url_env) or None
        return None
