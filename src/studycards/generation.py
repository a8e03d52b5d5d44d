"""Generation services: the model that decides which tool, if any, to call."""

import logging
import os
from typing import Protocol

import anthropic
from anthropic import Anthropic

from .config import DEFAULT_MODEL
from .errors import GenerationServiceUnavailable
from .models import Completion, FunctionCall

logger = logging.getLogger(__name__)


class GenerationService(Protocol):
    """Anything that can run one completion turn with tools attached."""

    def complete(self, prompt: str, tools: list[dict]) -> Completion:
        ...

    def close(self) -> None:
        ...


class AnthropicGenerationService:
    """Claude-backed generation service with tool calling."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        client: Anthropic | None = None,
    ):
        if client is None:
            api_key = os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise ValueError(
                    "ANTHROPIC_API_KEY environment variable not set. "
                    "Get your API key from https://console.anthropic.com/"
                )
            # Failures surface to the caller as-is, never retried
            client = Anthropic(api_key=api_key, max_retries=0)
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def complete(self, prompt: str, tools: list[dict]) -> Completion:
        """Send one user turn and collect text and tool_use blocks."""
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                tools=tools,
            )
        except anthropic.APIError as e:
            logger.error("Generation request failed: %s", e)
            raise GenerationServiceUnavailable(f"Generation service error: {e}") from e

        if hasattr(response, "usage"):
            logger.debug(
                "Completion used %s input / %s output tokens",
                response.usage.input_tokens,
                response.usage.output_tokens,
            )

        text_parts = []
        calls = []
        for block in response.content:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                calls.append(FunctionCall(name=block.name, args=dict(block.input or {})))

        text = "".join(text_parts) if text_parts else None
        return Completion(text=text, function_calls=calls)

    def close(self) -> None:
        self.client.close()
