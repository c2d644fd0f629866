"""OpenAI chat completion and embeddings provider."""

from __future__ import annotations

import logging
import os

import openai
from openai import OpenAI

from llm_client.base import LLMError
from llm_client.usage import UsageTracker

logger = logging.getLogger(__name__)

ENV_OPENAI_API_KEY = "OPENAI_API_KEY"


class OpenAIProvider:
    """Wraps the OpenAI SDK and keeps a running token/cost total per model."""

    def __init__(self, client: OpenAI | None = None, usage: UsageTracker | None = None) -> None:
        if client is None:
            api_key = os.environ.get(ENV_OPENAI_API_KEY)
            if not api_key:
                raise LLMError(f"{ENV_OPENAI_API_KEY} environment variable is not set")
            client = OpenAI(api_key=api_key)

        self.client = client
        self.usage = usage or UsageTracker()

    def chat_completion(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        require_json: bool = False,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        if user_prompt:
            messages.append({"role": "user", "content": user_prompt})

        kwargs = {}
        if require_json:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_tokens,
                **kwargs,
            )
        except openai.OpenAIError as e:
            raise LLMError(f"Failed to call OpenAI API: {e}") from e

        if response.usage is not None:
            self.usage.add(model, response.usage.prompt_tokens, response.usage.completion_tokens)
        logger.debug(
            "OpenAI API chat completion call: model=%s tokens=%s total_cost=%.4f",
            response.model,
            response.usage.total_tokens if response.usage else None,
            self.usage.total_cost(),
        )

        if not response.choices:
            raise LLMError("OpenAI API returned no choices")
        return response.choices[0].message.content or ""

    def create_embeddings(self, model: str, texts: list[str]) -> list[list[float]]:
        try:
            response = self.client.embeddings.create(model=model, input=texts)
        except openai.OpenAIError as e:
            raise LLMError(f"Failed to call OpenAI embeddings API: {e}") from e

        if response.usage is not None:
            self.usage.add(model, response.usage.prompt_tokens, 0)
        logger.debug(
            "OpenAI API embeddings call: model=%s tokens=%s total_cost=%.4f",
            response.model,
            response.usage.total_tokens if response.usage else None,
            self.usage.total_cost(),
        )

        if len(response.data) != len(texts):
            raise LLMError(
                f"Number of embeddings returned ({len(response.data)}) "
                f"does not match number of texts ({len(texts)})"
            )

        return [item.embedding for item in sorted(response.data, key=lambda item: item.index)]

    def total_cost(self) -> float:
        return self.usage.total_cost()
