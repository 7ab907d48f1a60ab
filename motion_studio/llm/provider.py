"""LLM Provider abstraction and implementations."""

import json
import logging
import os
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..config import Config, LLMConfig
from ..errors import LLMError

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, config: LLMConfig):
        self.config = config

    @abstractmethod
    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        """Generate a response from the LLM.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt

        Returns:
            The generated text response
        """
        pass

    @abstractmethod
    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate a JSON response from the LLM.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt
            schema: Optional tool description
                (``{"name", "description", "input_schema"}``) the response
                must follow

        Returns:
            Parsed JSON response as a dictionary
        """
        pass


def parse_json_response(response: str) -> dict[str, Any]:
    """Parse JSON from a free-text LLM response.

    Handles responses wrapped in markdown code blocks.

    Raises:
        LLMError: If no JSON object can be parsed
    """
    text = response.strip()

    json_block_pattern = r"```(?:json)?\s*([\s\S]*?)```"
    matches = re.findall(json_block_pattern, text)
    if matches:
        text = matches[0].strip()

    json_match = re.search(r"(\{[\s\S]*\})", text)
    if json_match:
        text = json_match.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LLMError(f"Failed to parse JSON response: {e}\nResponse: {response[:500]}")
    if not isinstance(data, dict):
        raise LLMError(f"Expected a JSON object, got {type(data).__name__}")
    return data


MOCK_COMPONENT = """import { AbsoluteFill, useCurrentFrame, interpolate } from 'remotion';

export const MainComposition = () => {
  const frame = useCurrentFrame();
  const opacity = interpolate(frame, [0, 20], [0, 1], { extrapolateRight: 'clamp' });
  return (
    <AbsoluteFill style={{ background: '#0d0d0d', justifyContent: 'center', alignItems: 'center' }}>
      <div style={{ color: '#f0f0f0', fontSize: 96, fontFamily: 'sans-serif', opacity }}>Motion Studio</div>
    </AbsoluteFill>
  );
};
"""


class MockLLMProvider(LLMProvider):
    """Mock LLM provider that returns a fixed scene for testing."""

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        return "This is a mock LLM response for testing purposes."

    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {
            "component_code": MOCK_COMPONENT,
            "duration_in_frames": 150,
            "fps": 30,
            "title": "Mock composition",
        }


class AnthropicLLMProvider(LLMProvider):
    """LLM provider using the Anthropic Messages API.

    Structured output is obtained by forcing a single tool call whose input
    schema is the requested JSON shape.
    """

    def __init__(self, config: LLMConfig, api_key: str | None = None):
        super().__init__(config)
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client = None

    def _get_client(self):
        """Lazy-load the Anthropic client."""
        if self._client is None:
            if not self.api_key:
                raise LLMError("ANTHROPIC_API_KEY not configured")
            import anthropic

            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        message = self._create(prompt, system_prompt)
        return "".join(block.text for block in message.content if block.type == "text")

    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if schema is None:
            return parse_json_response(self.generate(prompt, system_prompt))

        message = self._create(
            prompt,
            system_prompt,
            tools=[schema],
            tool_choice={"type": "tool", "name": schema["name"]},
        )
        tool_use = next((block for block in message.content if block.type == "tool_use"), None)
        if tool_use is None:
            logger.error("[llm] Unexpected response without tool call: %r", message.content)
            raise LLMError("Model did not call the tool. Check API key and model access.")
        return dict(tool_use.input)

    def _create(self, prompt: str, system_prompt: str | None, **kwargs: Any):
        client = self._get_client()
        params: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
            **kwargs,
        }
        if system_prompt:
            params["system"] = system_prompt
        try:
            return client.messages.create(**params)
        except Exception as e:
            raise LLMError(f"Anthropic request failed: {e}") from e


class OpenAILLMProvider(LLMProvider):
    """LLM provider using OpenAI chat completions in JSON mode."""

    def __init__(self, config: LLMConfig, api_key: str | None = None):
        super().__init__(config)
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._client = None

    def _get_client(self):
        """Lazy-init OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise LLMError("OPENAI_API_KEY not configured")
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        return self._complete(prompt, system_prompt)

    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if schema is not None:
            prompt = (
                f"{prompt}\n\nRespond with a JSON object matching this schema:\n"
                f"{json.dumps(schema['input_schema'])}"
            )
        text = self._complete(prompt, system_prompt, response_format={"type": "json_object"})
        return parse_json_response(text)

    def _complete(self, prompt: str, system_prompt: str | None, **kwargs: Any) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        try:
            response = self._get_client().chat.completions.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=messages,
                **kwargs,
            )
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(f"OpenAI request failed: {e}") from e
        return response.choices[0].message.content or ""


class ClaudeCodeLLMProvider(LLMProvider):
    """LLM provider using Claude Code CLI in headless mode."""

    def __init__(
        self,
        config: LLMConfig,
        working_dir: Path | None = None,
        timeout: int = 300,
    ):
        """Initialize the Claude Code provider.

        Args:
            config: LLM configuration
            working_dir: Working directory for the CLI (default: cwd)
            timeout: Command timeout in seconds (default: 300)
        """
        super().__init__(config)
        self.working_dir = working_dir or Path.cwd()
        self.timeout = timeout

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        cmd = self._build_command(prompt, system_prompt)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(self.working_dir),
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise LLMError(f"Claude Code timed out after {self.timeout}s")
        except FileNotFoundError:
            raise LLMError("claude CLI not found on PATH")

        if result.returncode != 0:
            raise LLMError(f"Claude Code failed: {result.stderr}")

        return result.stdout.strip()

    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        json_prompt = f"{prompt}\n\nRespond with valid JSON only. No markdown code blocks."
        if schema is not None:
            json_prompt += f"\nThe JSON must match this schema:\n{json.dumps(schema['input_schema'])}"
        return parse_json_response(self.generate(json_prompt, system_prompt))

    def _build_command(self, prompt: str, system_prompt: str | None = None) -> list[str]:
        cmd = ["claude", "--print", "-p", prompt]

        if self.config.model:
            cmd.extend(["--model", self.config.model])

        if system_prompt:
            cmd.extend(["--system-prompt", system_prompt])

        return cmd


def get_llm_provider(config: Config | None = None) -> LLMProvider:
    """Get the appropriate LLM provider based on configuration.

    Raises:
        ValueError: If provider name is not recognized.
    """
    if config is None:
        from ..config import load_config

        config = load_config()

    provider_name = config.llm.provider.lower()

    if provider_name == "mock":
        return MockLLMProvider(config.llm)
    elif provider_name == "anthropic":
        return AnthropicLLMProvider(config.llm)
    elif provider_name == "openai":
        return OpenAILLMProvider(config.llm)
    elif provider_name == "claude-code":
        return ClaudeCodeLLMProvider(config.llm)
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
