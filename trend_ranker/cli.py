"""
CLI: Command Line Interface for Trend Ranker

支援 init-config、build 和 show 命令。
"""

import click
import logging
from pathlib import Path
from typing import Optional

from trend_ranker.builder import RankingBuilder
from trend_ranker.config import RankingConfig
from trend_ranker.processing.curated import CuratedSummaryIndex, find_latest_report
from trend_ranker.storage.file_store import FileStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


DEFAULT_CONFIG = """# Trend Ranker Configuration
data_dir: "data"
reports_dir: "reports"
run_timezone: "UTC"
max_items: 10
windows:
  week: 7
  month: 30
  quarter: 90
translation:
  enabled: false
  model: "gpt-3.5-turbo"
  api_key_env: "OPENAI_API_KEY"
  base_url_env: "OPENAI_BASE_URL"
"""


@click.group()
def cli():
    """Trending repository leaderboard builder"""
    pass


@cli.command()
@click.option('--out', default='config.example.yaml', help='Output config file path')
def init_config(out: str):
    """產生範本設定檔"""
    example_path = Path(__file__).parent.parent / 'config.example.yaml'

    if example_path.exists() and example_path.resolve() != Path(out).resolve():
        content = example_path.read_text(encoding='utf-8')
    else:
        content = DEFAULT_CONFIG

    with open(out, 'w', encoding='utf-8') as f:
        f.write(content)

    click.echo(f"✓ Config file created: {out}")
    click.echo(f"  Edit this file and run: python -m trend_ranker.cli build --config {out}")


@cli.command()
@click.option('--config', required=True, help='Config YAML file path')
@click.option('--report', default=None, help='Curated report Markdown (default: latest in reports_dir)')
def build(config: str, report: Optional[str]):
    """建置 7/30/90 天排行榜"""
    logger.info(f"Loading config: {config}")
    cfg = RankingConfig.from_yaml(config)

    if report:
        report_path = Path(report)
    else:
        report_path = find_latest_report(
            cfg.reports_dir,
            prefix=cfg.file_patterns.report_prefix,
            ext=cfg.file_patterns.report_ext
        )
    curated = CuratedSummaryIndex.from_file(report_path)

    builder = RankingBuilder.from_config(cfg, curated=curated)
    try:
        payload = builder.build()
    except Exception as e:
        logger.error(f"Build failed: {e}", exc_info=True)
        raise
    finally:
        builder.close()

    click.echo(f"✓ Ranking written to {builder.file_store.payload_path}")
    for window_id, items in payload.windows.items():
        click.echo(f"  {window_id}: {len(items)} items")


@cli.command()
@click.option('--config', required=True, help='Config YAML file path')
@click.option('--window', default='week', help='Window identifier (week|month|quarter)')
def show(config: str, window: str):
    """顯示已輸出的排行榜"""
    cfg = RankingConfig.from_yaml(config)
    patterns = cfg.file_patterns
    store = FileStore(
        cfg.data_dir,
        cache_file=patterns.translation_cache_file,
        payload_file=patterns.ranking_data_file,
        payload_var=patterns.ranking_data_var
    )
    payload = store.read_ranking_payload()

    if window not in payload.windows:
        raise click.ClickException(f"No ranking for window '{window}'")

    for i, item in enumerate(payload[window], 1):
        click.echo(f"{i:>2}. {item.name}  ×{item.occurrence_count}  ★{item.stars}  {item.chinese_desc}")


if __name__ == "__main__":
    cli()
