"""LLM providers used to generate scene code."""

from .provider import (
    AnthropicLLMProvider,
    ClaudeCodeLLMProvider,
    LLMProvider,
    MockLLMProvider,
    OpenAILLMProvider,
    get_llm_provider,
    parse_json_response,
)

__all__ = [
    "AnthropicLLMProvider",
    "ClaudeCodeLLMProvider",
    "LLMProvider",
    "MockLLMProvider",
    "OpenAILLMProvider",
    "get_llm_provider",
    "parse_json_response",
]
