from dataclasses import dataclass
from typing import Optional
import os
from dotenv import load_dotenv

from vlm_captioner.constants import DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Config:
    openai_api_key: str
    openai_base_url: Optional[str]
    openai_model: Optional[str]
    log_level: str
    caption_timeout: Optional[float]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        api_key = os.getenv("OPENAI_API_KEY", "")
        base_url = os.getenv("OPENAI_BASE_URL") or None
        model = os.getenv("OPENAI_MODEL") or None
        log_level = os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL
        raw_timeout = os.getenv("CAPTION_TIMEOUT") or None

        return cls._validate(
            openai_api_key=api_key,
            openai_base_url=base_url,
            openai_model=model,
            log_level=log_level,
            raw_timeout=raw_timeout,
        )

    @staticmethod
    def _validate(
        openai_api_key: str,
        openai_base_url: Optional[str],
        openai_model: Optional[str],
        log_level: str,
        raw_timeout: Optional[str],
    ) -> "Config":
        # The API key is passed through as-is; an empty key fails at request time.
        match raw_timeout:
            case None:
                timeout = None
            case str() as raw:
                try:
                    timeout = float(raw)
                except ValueError:
                    raise ValueError(f"CAPTION_TIMEOUT must be a number, got {raw!r}") from None
                if timeout <= 0:
                    raise ValueError("CAPTION_TIMEOUT must be positive")

        return Config(
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            openai_model=openai_model,
            log_level=log_level,
            caption_timeout=timeout,
        )
