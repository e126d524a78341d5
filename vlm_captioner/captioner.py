"""Captioner — turns an image file into a caption via one chat-completion call."""
import asyncio
import base64
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from vlm_captioner.constants import (
    DATA_URL_TEMPLATE,
    DEFAULT_MODEL,
    ERR_COMPLETION,
    ERR_FILE_READ,
    ERR_NO_CHOICES,
    MAX_COMPLETION_TOKENS,
    MSG_CAPTIONING,
    PART_IMAGE_URL,
    PART_TEXT,
    ROLE_SYSTEM,
    ROLE_USER,
    SYSTEM_PROMPT,
    USER_PROMPT,
)
from vlm_captioner.errors import CompletionError, FileReadError, NoChoicesError
from vlm_captioner.vision.client import CompletionClient
from vlm_captioner.vision.openai import OpenAICompletionClient
from vlm_captioner.vision.sniff import detect_content_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptionRequest:
    image: bytes
    mime_type: str
    system_prompt: str
    user_prompt: str
    model: str

    @property
    def image_url(self) -> str:
        encoded = base64.standard_b64encode(self.image).decode()
        return DATA_URL_TEMPLATE % (self.mime_type, encoded)

    def to_chat_request(self) -> dict[str, Any]:
        """Keyword arguments for ``chat.completions.create``."""
        return {
            "model": self.model,
            "messages": [
                {"role": ROLE_SYSTEM, "content": self.system_prompt},
                {
                    "role": ROLE_USER,
                    "content": [
                        {"type": PART_TEXT, "text": self.user_prompt},
                        {"type": PART_IMAGE_URL, "image_url": {"url": self.image_url}},
                    ],
                },
            ],
            "max_completion_tokens": MAX_COMPLETION_TOKENS,
        }


class Captioner(ABC):
    @abstractmethod
    async def caption(self, image_path: str | Path, timeout: Optional[float] = None) -> str:
        """Return a caption for the image at ``image_path``. Raises CaptionError on failure."""
        ...


class OpenAICaptioner(Captioner):
    """Captions images with an OpenAI-compatible vision model.

    The returned caption is the model's text as-is; callers trim it.
    """

    def __init__(self, client: CompletionClient, model: str = DEFAULT_MODEL) -> None:
        self._client = client
        self._model = model

    @classmethod
    def configure(
        cls,
        api_key: str,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
    ) -> "OpenAICaptioner":
        return cls(
            OpenAICompletionClient(api_key, base_url=base_url or None),
            model=model or DEFAULT_MODEL,
        )

    @property
    def model(self) -> str:
        return self._model

    async def caption(self, image_path: str | Path, timeout: Optional[float] = None) -> str:
        try:
            image = await asyncio.to_thread(Path(image_path).read_bytes)
        except OSError as e:
            raise FileReadError(ERR_FILE_READ % e) from e
        return await self._caption(image, str(image_path), timeout)

    def _build_request(self, image: bytes) -> CaptionRequest:
        return CaptionRequest(
            image=image,
            mime_type=detect_content_type(image),
            system_prompt=SYSTEM_PROMPT,
            user_prompt=USER_PROMPT,
            model=self._model,
        )

    async def _caption(self, image: bytes, label: str, timeout: Optional[float]) -> str:
        request = self._build_request(image)
        logger.debug(MSG_CAPTIONING, label, request.mime_type, len(image), request.model)

        try:
            response = await self._client.create_chat_completion(
                request.to_chat_request(), timeout=timeout
            )
        except Exception as e:
            raise CompletionError(ERR_COMPLETION % e) from e

        match response.choices:
            case None | []:
                raise NoChoicesError(ERR_NO_CHOICES)
            case [first, *_]:
                return first.message.content or ""
