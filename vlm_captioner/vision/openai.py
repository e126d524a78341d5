"""OpenAICompletionClient — OpenAI chat-completions backend."""
from typing import Any, Optional

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from vlm_captioner.vision.client import CompletionClient


class OpenAICompletionClient(CompletionClient):

    def __init__(self, api_key: str, base_url: Optional[str] = None) -> None:
        self._api_key = api_key
        self._base_url = base_url

    async def create_chat_completion(
        self, request: dict[str, Any], timeout: Optional[float] = None
    ) -> ChatCompletion:
        # timeout=None would disable the SDK's own default, so only pass a real deadline
        options = {"timeout": timeout} if timeout is not None else {}
        # no SDK-side retries: exactly one request per call
        async with AsyncOpenAI(
            api_key=self._api_key, base_url=self._base_url, max_retries=0
        ) as client:
            return await client.chat.completions.create(**request, **options)
