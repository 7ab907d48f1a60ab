"""Tests for LLM providers."""

import subprocess
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from motion_studio.config import Config, LLMConfig
from motion_studio.errors import LLMError
from motion_studio.llm import (
    AnthropicLLMProvider,
    ClaudeCodeLLMProvider,
    MockLLMProvider,
    OpenAILLMProvider,
    get_llm_provider,
    parse_json_response,
)
from motion_studio.scenes.prompts import SCENE_TOOL


class TestParseJsonResponse:
    """Tests for extracting JSON from free text."""

    def test_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_markdown_block(self):
        assert parse_json_response('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_text(self):
        assert parse_json_response('Sure! {"a": {"b": 2}} Hope that helps.') == {"a": {"b": 2}}

    def test_invalid_json(self):
        with pytest.raises(LLMError, match="Failed to parse"):
            parse_json_response("not json at all")

    def test_non_object(self):
        with pytest.raises(LLMError, match="JSON object"):
            parse_json_response("[1, 2, 3]")


class TestGetLLMProvider:
    """Tests for the provider factory."""

    @pytest.mark.parametrize(
        "name, cls",
        [
            ("mock", MockLLMProvider),
            ("anthropic", AnthropicLLMProvider),
            ("openai", OpenAILLMProvider),
            ("claude-code", ClaudeCodeLLMProvider),
        ],
    )
    def test_returns_provider(self, name, cls):
        config = Config()
        config.llm.provider = name
        assert isinstance(get_llm_provider(config), cls)

    def test_unknown_provider(self):
        config = Config()
        config.llm.provider = "unknown"
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_llm_provider(config)


class TestAnthropicLLMProvider:
    """Tests for the Anthropic provider with a mocked client."""

    def test_forces_tool_call(self):
        provider = AnthropicLLMProvider(LLMConfig(model="claude-test"), api_key="test-key")
        client = MagicMock()
        client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="tool_use", input={"component_code": "x", "duration_in_frames": 90})]
        )
        provider._client = client

        result = provider.generate_json("brief", system_prompt="system", schema=SCENE_TOOL)

        assert result == {"component_code": "x", "duration_in_frames": 90}
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["system"] == "system"
        assert kwargs["tool_choice"] == {"type": "tool", "name": "create_remotion_composition"}

    def test_missing_tool_call(self):
        provider = AnthropicLLMProvider(LLMConfig(), api_key="test-key")
        provider._client = MagicMock()
        provider._client.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="I can't do that")]
        )
        with pytest.raises(LLMError, match="did not call the tool"):
            provider.generate_json("brief", schema=SCENE_TOOL)

    def test_api_failure_wrapped(self):
        provider = AnthropicLLMProvider(LLMConfig(), api_key="test-key")
        provider._client = MagicMock()
        provider._client.messages.create.side_effect = RuntimeError("overloaded")
        with pytest.raises(LLMError, match="overloaded"):
            provider.generate("hello")

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(LLMError, match="ANTHROPIC_API_KEY"):
            AnthropicLLMProvider(LLMConfig()).generate("hello")


class TestOpenAILLMProvider:
    """Tests for the OpenAI provider with a mocked client."""

    def test_json_mode(self):
        provider = OpenAILLMProvider(LLMConfig(model="gpt-test"), api_key="test-key")
        client = MagicMock()
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"title": "x"}'))]
        )
        provider._client = client

        assert provider.generate_json("brief", schema=SCENE_TOOL) == {"title": "x"}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "component_code" in kwargs["messages"][-1]["content"]


class TestClaudeCodeLLMProvider:
    """Tests for the headless CLI provider."""

    def test_build_command(self):
        provider = ClaudeCodeLLMProvider(LLMConfig(model="opus"))
        cmd = provider._build_command("hello", "be terse")
        assert cmd[:4] == ["claude", "--print", "-p", "hello"]
        assert cmd[cmd.index("--model") + 1] == "opus"
        assert cmd[cmd.index("--system-prompt") + 1] == "be terse"

    def test_generate_json(self):
        provider = ClaudeCodeLLMProvider(LLMConfig())
        completed = SimpleNamespace(returncode=0, stdout='{"fps": 30}\n', stderr="")
        with patch("motion_studio.llm.provider.subprocess.run", return_value=completed):
            assert provider.generate_json("brief") == {"fps": 30}

    def test_failure(self):
        provider = ClaudeCodeLLMProvider(LLMConfig())
        completed = SimpleNamespace(returncode=1, stdout="", stderr="not logged in")
        with patch("motion_studio.llm.provider.subprocess.run", return_value=completed):
            with pytest.raises(LLMError, match="not logged in"):
                provider.generate("brief")

    def test_timeout(self):
        provider = ClaudeCodeLLMProvider(LLMConfig(), timeout=1)
        with patch(
            "motion_studio.llm.provider.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="claude", timeout=1),
        ):
            with pytest.raises(LLMError, match="timed out"):
                provider.generate("brief")
