"""Ollama (local server) chat completion provider.

API documentation:
https://github.com/ollama/ollama/blob/main/docs/api.md#generate-a-chat-completion
"""

from __future__ import annotations

import logging
import os
from typing import Any, Iterable

import requests

from llm_client.base import EmbeddingsNotSupportedError, LLMError

logger = logging.getLogger(__name__)

ENV_OLLAMA_BASE_URL = "OLLAMA_BASE_URL"
DEFAULT_BASE_URL = "http://localhost:11434"

COMPLETION_API = "/api/chat"
KEEP_ALIVE = "5m"

REQUEST_TIMEOUT = 120
LOAD_TIMEOUT = 300


class OllamaProvider:
    """Chat completions against a local Ollama server. Embeddings are not supported."""

    def __init__(
        self,
        models: Iterable[str] = (),
        base_url: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or os.environ.get(ENV_OLLAMA_BASE_URL) or DEFAULT_BASE_URL).rstrip("/")
        self.session = session or requests.Session()

        for model in models:
            self.load_model(model)

    def _post_chat(self, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        try:
            response = self.session.post(f"{self.base_url}{COMPLETION_API}", json=payload, timeout=timeout)
        except requests.RequestException as e:
            raise LLMError(f"Failed to call ollama completion API: {e}") from e

        if response.status_code != 200:
            raise LLMError(f"Ollama request failed with status code {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise LLMError("Failed to parse ollama chat completion response") from e

    def load_model(self, model: str) -> None:
        """Load a model into memory; a chat request without messages only loads it."""
        data = self._post_chat(
            {"model": model, "messages": [], "keep_alive": KEEP_ALIVE},
            timeout=LOAD_TIMEOUT,
        )
        done_reason = data.get("done_reason")
        if done_reason != "load":
            raise LLMError(f"Failed to load model {model}: unexpected done reason {done_reason!r}")

        logger.debug("Ollama model loaded: model=%s", data.get("model", model))

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

        payload: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": False,
            "options": {"temperature": temperature, "num_predict": max_tokens},
            "keep_alive": KEEP_ALIVE,
        }
        # Plain JSON mode; schema-constrained output gave worse results
        if require_json:
            payload["format"] = "json"

        data = self._post_chat(payload, timeout=REQUEST_TIMEOUT)

        logger.debug(
            "Ollama API chat completion call: model=%s prompt_tokens=%s completion_tokens=%s",
            data.get("model"),
            data.get("prompt_eval_count"),
            data.get("eval_count"),
        )

        return (data.get("message") or {}).get("content", "")

    def create_embeddings(self, model: str, texts: list[str]) -> list[list[float]]:
        raise EmbeddingsNotSupportedError("Embeddings are not implemented for the ollama client")

    def total_cost(self) -> float:
        return 0.0
