"""CompletionClient — abstract base for chat-completion backends."""
from abc import ABC, abstractmethod
from typing import Any, Optional

from openai.types.chat import ChatCompletion


class CompletionClient(ABC):
    @abstractmethod
    async def create_chat_completion(
        self, request: dict[str, Any], timeout: Optional[float] = None
    ) -> ChatCompletion:
        """Send one chat-completion request and return the response. Raises on failure."""
        ...
