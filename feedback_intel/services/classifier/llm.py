"""Chat completion capability used by the classifier.

The classifier depends only on the ChatCompletion protocol so tests can
inject a stub; AnthropicChatCompletion is the production implementation.
"""

import logging
from typing import Literal, Protocol, TypedDict

import anthropic

from feedback_intel.config import settings

logger = logging.getLogger(__name__)


class ChatMessage(TypedDict):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatCompletion(Protocol):
    """Run one chat completion and return the response text."""

    async def run(self, model: str, messages: list[ChatMessage]) -> str: ...


class AnthropicChatCompletion:
    """ChatCompletion backed by the Anthropic Messages API.

    System messages are lifted into the ``system`` parameter. The client is
    built lazily and never retries: a transport failure surfaces to the
    caller as an ``anthropic.APIError`` (or subclass).
    """

    def __init__(
        self,
        api_key: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key or settings.anthropic_api_key
        self.max_tokens = max_tokens or settings.llm_max_tokens
        self.timeout = timeout or settings.llm_timeout_seconds
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def run(self, model: str, messages: list[ChatMessage]) -> str:
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        conversation = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]

        kwargs = {"system": system} if system else {}
        response = await self.client.messages.create(
            model=model,
            max_tokens=self.max_tokens,
            messages=conversation,  # type: ignore[arg-type]
            **kwargs,  # type: ignore[arg-type]
        )

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            # Empty text goes through the normal parse-failure paths downstream
            logger.warning(
                f"Model {model} returned no text content (stop_reason={response.stop_reason})"
            )
        return text
