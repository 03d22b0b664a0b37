"""
Model invoker.

Wraps the chat model and the embeddings client behind three calls:
bounded-time completion, best-effort embedding, and the deterministic
fallback answer used when the model cannot answer.

Dependencies: langchain_core, asyncio, taskdesk.core
System role: Language model adapter for the chat pipeline and embeddings
"""

import asyncio
import logging
from collections.abc import Sequence

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel

from taskdesk.boundary.llm.llm_factory import create_chat_model, create_embeddings
from taskdesk.configs import get_settings
from taskdesk.configs.llm import LLMSettings
from taskdesk.core.bot.bot_schema import AssembledPrompt, ContextChunk, WebResult
from taskdesk.core.bot.fallback import build_fallback_answer
from taskdesk.core.exceptions import ModelUnavailableError
from taskdesk.core.text_normalizer import strip_markup

logger = logging.getLogger(__name__)


def _message_text(content) -> str:
    """Flatten AIMessage content (string or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""


class ModelInvoker:
    """
    Language model adapter.

    Clients not passed in are created from config on first use, so a
    provider that cannot be constructed (e.g. a missing API key) surfaces
    as ModelUnavailableError on the call instead of at wiring time.

    Attributes:
        chat_model: langchain chat model used for completions
        embeddings: langchain embeddings client
        config: LLM settings used to create missing clients
        timeout_seconds: Upper bound on a single completion
        provider: Provider name, reported in errors
    """

    def __init__(
        self,
        chat_model: BaseChatModel | None = None,
        embeddings: Embeddings | None = None,
        timeout_seconds: float = 60.0,
        provider: str = "ollama",
        config: LLMSettings | None = None,
    ) -> None:
        self._chat_model = chat_model
        self._embeddings = embeddings
        self.config = config
        self.timeout_seconds = timeout_seconds
        self.provider = provider

    @classmethod
    def from_settings(cls) -> "ModelInvoker":
        """Build an invoker for the provider configured in LLM_* settings."""
        config = get_settings().llm
        return cls(
            timeout_seconds=config.request_timeout_seconds,
            provider=config.provider,
            config=config,
        )

    @property
    def chat_model(self) -> BaseChatModel:
        if self._chat_model is None:
            self._chat_model = create_chat_model(self.config or get_settings().llm)
        return self._chat_model

    @property
    def embeddings(self) -> Embeddings:
        if self._embeddings is None:
            self._embeddings = create_embeddings(self.config or get_settings().llm)
        return self._embeddings

    async def complete(self, system: str, user_prompt: str) -> str:
        """
        Run one chat completion.

        Args:
            system: System instruction text
            user_prompt: Rendered user prompt

        Returns:
            str: Non-empty model output

        Raises:
            ModelUnavailableError: On transport error, timeout, or empty output
        """
        messages = AssembledPrompt(system=system, user_prompt=user_prompt).to_messages()
        try:
            chat_model = self.chat_model
        except Exception as e:
            logger.warning(f"{__name__}:complete - Chat model unavailable: {type(e).__name__}: {e}")
            raise ModelUnavailableError(
                "Chat model could not be created",
                provider=self.provider,
                details={"error": type(e).__name__},
            ) from e

        try:
            response = await asyncio.wait_for(
                chat_model.ainvoke(messages),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{__name__}:complete - Timed out after {self.timeout_seconds}s"
            )
            raise ModelUnavailableError(
                "Model completion timed out",
                provider=self.provider,
                details={"timeout_seconds": self.timeout_seconds},
            ) from e
        except Exception as e:
            logger.warning(f"{__name__}:complete - {type(e).__name__}: {e}")
            raise ModelUnavailableError(
                "Model completion failed",
                provider=self.provider,
                details={"error": type(e).__name__},
            ) from e

        text = _message_text(getattr(response, "content", None)).strip()
        if not text:
            logger.warning(f"{__name__}:complete - Empty completion")
            raise ModelUnavailableError("Model returned no text", provider=self.provider)
        return text

    async def embed(self, text: str) -> list[float]:
        """
        Embed markup-stripped text.

        Returns:
            list[float]: Embedding vector, empty on blank input or any failure
        """
        cleaned = strip_markup(text)
        if not cleaned:
            return []
        try:
            vector = await self.embeddings.aembed_query(cleaned)
        except Exception as e:
            logger.warning(f"{__name__}:embed - {type(e).__name__}: {e}")
            return []
        if not vector:
            return []
        try:
            return [float(value) for value in vector]
        except (TypeError, ValueError) as e:
            logger.warning(f"{__name__}:embed - Malformed embedding: {e}")
            return []

    def fallback_answer(
        self,
        context: Sequence[ContextChunk],
        web_results: Sequence[WebResult],
    ) -> str:
        """Deterministic summary of the retrieved material."""
        return build_fallback_answer(context, web_results)
