"""
External translation via an OpenAI-compatible chat completion API

一次請求、固定指令、timeout + 有限次數重試；全部失敗時回傳 None，不拋出例外。
"""

from typing import Any, Optional
import logging

from trend_ranker.config import RankingConfig, TranslationConfig
from trend_ranker.exceptions import ModelUnavailableError, TranslationError

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "你是一个技术翻译助手。请将以下英文技术项目描述翻译成简洁的中文（50字以内），"
    "只保留核心信息，去除冗余词汇。直接返回翻译结果，不要添加任何解释或额外内容。"
)


class Translator:
    """OpenAI chat completion 翻譯器"""

    def __init__(self, config: TranslationConfig, client: Any = None):
        """
        Args:
            config: 翻譯設定
            client: 已建立的 OpenAI client (測試時可注入 fake)
        """
        self.config = config
        self.client = client

    @classmethod
    def from_config(cls, config: RankingConfig) -> Optional["Translator"]:
        """
        依設定建立 Translator；未啟用或沒有 API key 時回傳 None
        """
        if not config.translation.enabled:
            logger.info("External translation disabled")
            return None

        api_key = config.get_api_key()
        if not api_key:
            logger.warning(f"External translation enabled but {config.translation.api_key_env} is not set")
            return None

        from openai import OpenAI

        client_kwargs = {
            'api_key': api_key,
            'timeout': config.translation.timeout_seconds,
            'max_retries': 0,
        }
        base_url = config.get_base_url()
        if base_url:
            client_kwargs['base_url'] = base_url

        return cls(config.translation, client=OpenAI(**client_kwargs))

    def request(self, text: str) -> str:
        """
        發送一次請求

        Raises:
            ModelUnavailableError: 400 / 404 (請求錯誤或模型不存在)
            TranslationError: 其他失敗 (timeout、網路錯誤、空回應)
        """
        import openai

        try:
            response = self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                timeout=self.config.timeout_seconds,
            )
        except (openai.BadRequestError, openai.NotFoundError) as e:
            raise ModelUnavailableError(self.config.model, str(e)) from e
        except openai.OpenAIError as e:
            raise TranslationError(str(e)) from e

        content = ""
        if response.choices and response.choices[0].message:
            content = response.choices[0].message.content or ""
        content = content.strip()
        if not content:
            raise TranslationError("Empty completion response")
        return content

    def translate(self, text: str) -> Optional[str]:
        """
        翻譯文字，最多嘗試 max_attempts 次

        Returns:
            翻譯結果，或 None (全部失敗)
        """
        if not text:
            return None

        max_attempts = self.config.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                return self.request(text)
            except ModelUnavailableError as e:
                logger.warning(f"Translation attempt {attempt}/{max_attempts} failed: {e} " +
                               f"(check the configured model name)")
            except TranslationError as e:
                logger.warning(f"Translation attempt {attempt}/{max_attempts} failed: {e}")

        logger.error(f"Translation failed after {max_attempts} attempts")
        return None
