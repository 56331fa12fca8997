"""
PETICAO4AI Base Agent Class

This module defines the base agent architecture for PETICAO4AI's judgment
analysis agents. Both agents inherit from this base.

ARCHITECTURE:
  - Agents send schema-constrained requests through StructuredCompletionClient
  - The client speaks the OpenAI chat completions API (any compatible endpoint)
  - Agents produce Pydantic models as outputs for type safety
  - Logging and tracing support for auditing each completion call

AGENTS:
  1. Analysis Agent - Derive the AnalysisRecord from the judgment text
  2. Enrichment Agent - Suggest additional seizable assets from the facts
"""

from __future__ import annotations

import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from dotenv import load_dotenv
from openai import AsyncOpenAI, OpenAIError

from shared.errors import AnalysisFailure
from shared.models import AnalysisRequest

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)

# Type variables for agent input/output
InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


@dataclass
class AgentConfig:
    """Configuration for the completion service and agents."""

    # Credential and endpoint
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    # LLM settings
    model: str = "gpt-4o"
    enrichment_model: str = "gpt-4o-mini"
    temperature: float = 0.2  # Low temperature for deterministic analysis
    enrichment_temperature: float = 0.8  # Exploratory asset suggestions
    max_tokens: int = 8192
    timeout: float = 120.0

    # Input precondition
    min_text_length: int = 100

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> AgentConfig:
        """Load configuration from environment variables."""
        return cls(
            api_key=os.getenv("PETICAO4AI_API_KEY") or os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("PETICAO4AI_BASE_URL") or None,
            model=os.getenv("PETICAO4AI_MODEL", "gpt-4o"),
            enrichment_model=os.getenv("PETICAO4AI_ENRICHMENT_MODEL", "gpt-4o-mini"),
            temperature=float(os.getenv("PETICAO4AI_TEMPERATURE", "0.2")),
            enrichment_temperature=float(os.getenv("PETICAO4AI_ENRICHMENT_TEMPERATURE", "0.8")),
            max_tokens=int(os.getenv("PETICAO4AI_MAX_TOKENS", "8192")),
            timeout=float(os.getenv("PETICAO4AI_TIMEOUT", "120")),
            min_text_length=int(os.getenv("PETICAO4AI_MIN_TEXT_LENGTH", "100")),
            log_level=os.getenv("PETICAO4AI_LOG_LEVEL", "INFO"),
        )


@dataclass
class AgentTrace:
    """Trace record of a single agent execution."""

    agent_name: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    input_summary: Optional[str] = None
    output_summary: Optional[str] = None
    llm_calls: list[dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    def duration_ms(self) -> Optional[float]:
        """Get duration in milliseconds."""
        if self.completed_at is None:
            return None
        delta = self.completed_at - self.started_at
        return delta.total_seconds() * 1000


class StructuredCompletionClient:
    """
    Client for schema-constrained completions.

    Performs exactly one chat completion call per request and returns the raw
    text payload. Any transport, timeout or service error is logged and
    re-raised as AnalysisFailure with a fixed user-facing message. No retries.
    """

    def __init__(self, config: Optional[AgentConfig] = None):
        """
        Initialize the completion client.

        Args:
            config: Agent configuration carrying credential and endpoint

        Raises:
            ValueError: If no API key is configured
        """
        self.config = config or AgentConfig.from_env()
        if not self.config.api_key:
            raise ValueError(
                "PETICAO4AI_API_KEY (or OPENAI_API_KEY) environment variable is required. "
                "Please set it before initializing the completion client."
            )
        self._client = AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            max_retries=0,
        )
        self._call_log: list[dict[str, Any]] = []

    def get_call_log(self) -> list[dict[str, Any]]:
        """Get log of all completion calls for tracing."""
        return self._call_log.copy()

    def clear_call_log(self) -> None:
        """Clear the call log."""
        self._call_log = []

    @staticmethod
    def response_format(request: AnalysisRequest) -> dict[str, Any]:
        """Build the json_schema response format for a request."""
        schema = request.schema
        return {
            "type": "json_schema",
            "json_schema": {
                "name": schema.name,
                "schema": schema.to_json_schema(),
                # Strict mode only accepts object roots
                "strict": schema.is_object,
            },
        }

    async def complete(self, request: AnalysisRequest) -> str:
        """
        Send a request to the completion service.

        Args:
            request: Instruction, content, schema and sampling parameters

        Returns:
            Raw text payload (expected to be JSON matching the schema)

        Raises:
            AnalysisFailure: On any service error or an empty response
        """
        model = request.model or self.config.model
        entry: dict[str, Any] = {
            "model": model,
            "schema": request.schema.name,
            "temperature": request.temperature,
            "timestamp": datetime.now().isoformat(),
        }
        self._call_log.append(entry)
        start = time.monotonic()

        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=request.temperature,
                max_tokens=self.config.max_tokens,
                messages=[
                    {"role": "system", "content": request.system_instruction},
                    {"role": "user", "content": request.content},
                ],
                response_format=self.response_format(request),
            )
        except OpenAIError as e:
            entry["error"] = f"{type(e).__name__}: {e}"
            logger.error(f"Completion service error ({model}): {e}")
            raise AnalysisFailure() from e
        finally:
            entry["duration_ms"] = (time.monotonic() - start) * 1000

        if not response.choices or not response.choices[0].message.content:
            entry["error"] = "empty response"
            logger.error(f"Completion service returned an empty response ({model})")
            raise AnalysisFailure()

        content = response.choices[0].message.content.strip()
        entry["response_chars"] = len(content)
        return content


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """
    Base class for PETICAO4AI agents.

    Each agent inherits from this base and implements:
      - `name`: Agent identifier
      - `run()`: Main execution method
      - `_get_system_prompt()`: LLM system prompt for this agent

    The base class provides:
      - Completion access via `self.client`
      - Logging and tracing via `self.trace`
      - Configuration via `self.config`
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        client: Optional[StructuredCompletionClient] = None,
    ):
        """
        Initialize the agent.

        Args:
            config: Agent configuration (uses defaults if not provided)
            client: Completion client (creates new if not provided)
        """
        self.config = config or AgentConfig.from_env()
        self.client = client or StructuredCompletionClient(self.config)
        self._current_trace: Optional[AgentTrace] = None

        # Configure logging for this agent
        self.logger = logging.getLogger(f"peticao4ai.agents.{self.name}")
        self.logger.setLevel(getattr(logging, self.config.log_level))

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent identifier (e.g., 'analysis', 'enrichment')."""
        pass

    @abstractmethod
    async def run(self, input_data: InputT) -> OutputT:
        """
        Execute the agent's main function.

        Args:
            input_data: Input data for this agent

        Returns:
            Output for this agent
        """
        pass

    @abstractmethod
    def _get_system_prompt(self) -> str:
        """Get the system prompt for this agent's LLM calls."""
        pass

    def _start_trace(self, input_summary: Optional[str] = None) -> AgentTrace:
        """Start a new trace for this agent execution."""
        self._current_trace = AgentTrace(
            agent_name=self.name,
            started_at=datetime.now(),
            input_summary=input_summary,
        )
        self.client.clear_call_log()
        self.logger.debug(f"Started trace for {self.name} agent")
        return self._current_trace

    def _complete_trace(
        self,
        output_summary: Optional[str] = None,
        error: Optional[str] = None
    ) -> AgentTrace:
        """Complete the current trace."""
        if self._current_trace is None:
            raise RuntimeError("No active trace to complete")

        self._current_trace.completed_at = datetime.now()
        self._current_trace.output_summary = output_summary
        self._current_trace.llm_calls = self.client.get_call_log()
        self._current_trace.error = error

        duration = self._current_trace.duration_ms()
        self.logger.info(
            f"Completed {self.name} agent in {duration:.1f}ms "
            f"(LLM calls: {len(self._current_trace.llm_calls)})"
        )

        return self._current_trace

    def get_last_trace(self) -> Optional[AgentTrace]:
        """Get the last execution trace."""
        return self._current_trace
