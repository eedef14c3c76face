from .base import LLMClient
from .factory import build_llm_client
from .openai_client import OpenAIClient

__all__ = ["LLMClient", "OpenAIClient", "build_llm_client"]
