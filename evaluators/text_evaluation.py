"""
Text-evaluation boundary.

Delegated evaluators only see the TextEvaluationService protocol. The default
implementation talks to Claude through langchain.
"""
import asyncio
from typing import Dict, Optional, Protocol

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage

from settings import settings


class EvaluationServiceError(Exception):
    """The text-evaluation service failed, timed out or replied with garbage."""


class TextEvaluationService(Protocol):

    async def complete(self, system: str, user: str, temperature: float) -> str:
        ...


class AnthropicTextEvaluator:
    """One ChatAnthropic client per temperature, created on first use."""

    def __init__(
        self,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.model = model or settings.anthropic_model
        self.max_tokens = max_tokens or settings.max_tokens
        self.timeout_seconds = timeout_seconds or settings.evaluation_timeout_seconds
        self._clients: Dict[float, ChatAnthropic] = {}

    def _client(self, temperature: float) -> ChatAnthropic:
        if temperature not in self._clients:
            self._clients[temperature] = ChatAnthropic(
                model=self.model,
                temperature=temperature,
                max_tokens=self.max_tokens,
            )
        return self._clients[temperature]

    async def complete(self, system: str, user: str, temperature: float) -> str:
        messages = [SystemMessage(content=system), HumanMessage(content=user)]
        try:
            response = await asyncio.wait_for(
                self._client(temperature).ainvoke(messages),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise EvaluationServiceError(
                f"Evaluation timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise EvaluationServiceError(f"Evaluation request failed: {e}") from e

        content = response.content
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        return content
