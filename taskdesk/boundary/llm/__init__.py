"""
Language model boundary layer.

Exports:
  - ModelInvoker: completion, embedding and fallback answers
  - create_chat_model, create_embeddings: provider factory

Dependencies: langchain_core, langchain_ollama, langchain_google_genai
System role: Language model adapter
"""

from taskdesk.boundary.llm.llm_factory import create_chat_model, create_embeddings
from taskdesk.boundary.llm.model_invoker import ModelInvoker

__all__ = ["ModelInvoker", "create_chat_model", "create_embeddings"]
