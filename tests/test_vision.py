"""TDD: CompletionClient backend tests written FIRST"""
import httpx
import openai
import pytest
from openai import AsyncOpenAI
from unittest.mock import AsyncMock, MagicMock, patch

from vlm_captioner.vision.client import CompletionClient
from vlm_captioner.vision.openai import OpenAICompletionClient

REQUEST = {
    "model": "test-model",
    "messages": [{"role": "user", "content": "hi"}],
    "max_completion_tokens": 300,
}


def make_openai(create: AsyncMock) -> AsyncMock:
    mock_openai = AsyncMock()
    mock_openai.__aenter__.return_value = mock_openai
    mock_openai.__aexit__.return_value = False
    mock_openai.chat.completions.create = create
    return mock_openai


def test_openai_client_implements_abc():
    assert issubclass(OpenAICompletionClient, CompletionClient)


async def test_openai_client_passes_request_through():
    client = OpenAICompletionClient(api_key="test-key")
    mock_response = MagicMock()
    create = AsyncMock(return_value=mock_response)

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(create)

        result = await client.create_chat_completion(REQUEST)

    assert result is mock_response
    create.assert_called_once_with(**REQUEST)


async def test_openai_client_uses_key_and_base_url():
    client = OpenAICompletionClient(api_key="sk-test", base_url="http://localhost:1234/v1")

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(AsyncMock(return_value=MagicMock()))

        await client.create_chat_completion(REQUEST)

    mock_cls.assert_called_once_with(
        api_key="sk-test", base_url="http://localhost:1234/v1", max_retries=0
    )


async def test_openai_client_default_base_url_is_none():
    client = OpenAICompletionClient(api_key="sk-test")

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(AsyncMock(return_value=MagicMock()))

        await client.create_chat_completion(REQUEST)

    assert mock_cls.call_args.kwargs["base_url"] is None


async def test_openai_client_forwards_timeout_when_given():
    client = OpenAICompletionClient(api_key="test-key")
    create = AsyncMock(return_value=MagicMock())

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(create)

        await client.create_chat_completion(REQUEST, timeout=5.0)

    assert create.call_args.kwargs["timeout"] == 5.0


async def test_openai_client_omits_timeout_by_default():
    client = OpenAICompletionClient(api_key="test-key")
    create = AsyncMock(return_value=MagicMock())

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(create)

        await client.create_chat_completion(REQUEST)

    assert "timeout" not in create.call_args.kwargs


async def test_openai_client_raises_on_api_error():
    client = OpenAICompletionClient(api_key="test-key")

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(AsyncMock(side_effect=RuntimeError("API down")))

        with pytest.raises(RuntimeError, match="API down"):
            await client.create_chat_completion(REQUEST)


async def test_openai_client_disables_sdk_retries():
    client = OpenAICompletionClient(api_key="test-key")

    with patch("vlm_captioner.vision.openai.AsyncOpenAI") as mock_cls:
        mock_cls.return_value = make_openai(AsyncMock(return_value=MagicMock()))

        await client.create_chat_completion(REQUEST)

    assert mock_cls.call_args.kwargs["max_retries"] == 0


async def test_openai_client_sends_one_request_on_server_error():
    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return httpx.Response(500, json={"error": {"message": "boom"}})

    def build(**kwargs):
        transport = httpx.MockTransport(handler)
        return AsyncOpenAI(http_client=httpx.AsyncClient(transport=transport), **kwargs)

    client = OpenAICompletionClient(api_key="sk-test", base_url="http://example.invalid/v1")

    with patch("vlm_captioner.vision.openai.AsyncOpenAI", side_effect=build):
        with pytest.raises(openai.InternalServerError):
            await client.create_chat_completion(REQUEST)

    assert len(sent) == 1
    assert sent[0].url.path == "/v1/chat/completions"
