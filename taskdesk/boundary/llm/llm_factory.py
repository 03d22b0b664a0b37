"""
Language model factory.

Builds the langchain chat model and embeddings client for the configured
provider. Ollama is the default local provider; Google Gemini is the hosted
alternative.

Dependencies: langchain_ollama, langchain_google_genai, taskdesk.configs
System role: Provider selection for the model invoker
"""

import logging

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings
from langchain_ollama import ChatOllama, OllamaEmbeddings

from taskdesk.configs.llm import LLMSettings

logger = logging.getLogger(__name__)

OLLAMA = "ollama"
GOOGLE = "google"
SUPPORTED_PROVIDERS = (OLLAMA, GOOGLE)


def create_chat_model(config: LLMSettings) -> BaseChatModel:
    """
    Create the chat completion model for the configured provider.

    Args:
        config: LLM settings

    Returns:
        BaseChatModel: langchain chat model

    Raises:
        ValueError: If the provider is not supported
    """
    provider = config.provider.lower()
    logger.info(f"{__name__}:create_chat_model - provider={provider} model={config.chat_model}")

    if provider == OLLAMA:
        return ChatOllama(
            model=config.chat_model,
            base_url=config.base_url,
            temperature=config.temperature,
            top_p=config.top_p,
            num_ctx=config.num_ctx,
        )
    if provider == GOOGLE:
        return ChatGoogleGenerativeAI(
            model=config.chat_model,
            temperature=config.temperature,
            top_p=config.top_p,
        )
    raise ValueError(f"Unsupported LLM provider: {config.provider}")


def create_embeddings(config: LLMSettings) -> Embeddings:
    """
    Create the embeddings client for the configured provider.

    Args:
        config: LLM settings

    Returns:
        Embeddings: langchain embeddings client

    Raises:
        ValueError: If the provider is not supported
    """
    provider = config.provider.lower()
    if provider == OLLAMA:
        return OllamaEmbeddings(model=config.embedding_model, base_url=config.base_url)
    if provider == GOOGLE:
        return GoogleGenerativeAIEmbeddings(model=config.embedding_model)
    raise ValueError(f"Unsupported LLM provider: {config.provider}")
