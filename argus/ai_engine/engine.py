"""Enrichment Agent: optional LLM sidecar backed by Vertex AI Gemini.

The agent adds summaries, account extraction, misuse checks and extra search
variations when it is reachable. Availability is probed once, when the agent
is created, and cached. Every call site checks ``is_available`` first, and
every call returns a neutral value on failure.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from argus.config.settings import VertexConfig
from argus.pipeline.models import AccountData
from argus.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)

MAX_AGENT_VARIATIONS = 20


class MisuseAssessment(BaseModel):
    """Agent verdict on whether an account may impersonate the subject."""

    is_misuse: bool = False
    reason: str = ""


class VariationList(BaseModel):
    variations: list[str] = Field(default_factory=list)


@runtime_checkable
class EnrichmentAgent(Protocol):
    @property
    def is_available(self) -> bool: ...

    async def extract_account_data(self, html: str, url: str) -> AccountData | None: ...

    async def detect_identity_misuse(
        self, query: str, account: AccountData, context: str
    ) -> MisuseAssessment: ...

    async def generate_search_variations(self, term: str) -> list[str]: ...

    async def analyze_content_context(self, title: str, snippet: str, text: str) -> str: ...


class NullAgent:
    """Agent used when no model is reachable. Every call is a no-op."""

    @property
    def is_available(self) -> bool:
        return False

    async def extract_account_data(self, html: str, url: str) -> AccountData | None:
        return None

    async def detect_identity_misuse(
        self, query: str, account: AccountData, context: str
    ) -> MisuseAssessment:
        return MisuseAssessment()

    async def generate_search_variations(self, term: str) -> list[str]:
        return []

    async def analyze_content_context(self, title: str, snippet: str, text: str) -> str:
        return ""


class VertexAgent:
    """Enrichment agent client for Vertex AI Gemini.

    Stateless apart from the model handle; the scanner owns all result state.
    """

    def __init__(self, config: VertexConfig) -> None:
        self._config = config
        self._client: Any = None
        self._initialized = False

    async def initialize(self) -> bool:
        """Initialize the Vertex AI client.

        Returns True if initialization succeeds, False otherwise.
        """
        if not self._config.enabled or not self._config.project_id:
            return False

        try:
            import vertexai
            from vertexai.generative_models import GenerativeModel

            vertexai.init(
                project=self._config.project_id,
                location=self._config.location,
            )
            self._client = GenerativeModel(self._config.model)
            self._initialized = True
            return True
        except Exception as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.AGENT_INITIALIZATION_FAILED,
                message=str(exc),
                suppressed=True,
            )
            self._initialized = False
            return False

    @property
    def is_available(self) -> bool:
        return self._initialized and self._client is not None

    async def _generate_json(self, prompt: str, schema: dict[str, Any] | None = None) -> Any:
        from vertexai.generative_models import GenerationConfig

        kwargs: dict[str, Any] = {"response_mime_type": "application/json"}
        if schema is not None:
            kwargs["response_schema"] = schema
        response = await self._client.generate_content_async(
            prompt, generation_config=GenerationConfig(**kwargs)
        )
        return json.loads(response.text)

    def _call_failed(self, operation: str, exc: Exception) -> None:
        emit_structured_error(
            logger,
            code=ErrorCode.AGENT_CALL_FAILED,
            message=str(exc),
            suppressed=True,
            details={"operation": operation},
        )

    async def extract_account_data(self, html: str, url: str) -> AccountData | None:
        if not self.is_available:
            return None

        try:
            prompt = (
                "You are an OSINT analyst. Extract the account profile shown on the "
                "page below.\n\n"
                f"Page URL: {url}\n\n"
                "Return a JSON object with any of these fields that the page shows: "
                "username, display_name, email, bio, location, follower_count, "
                "following_count, avatar_url, is_verified. Use null for fields that "
                "are not present. Return null if the page is not an account profile.\n\n"
                f"HTML:\n{html[: self._config.max_markup_chars]}"
            )
            data = await self._generate_json(prompt)
            if not isinstance(data, dict):
                return None
            fields = {k: v for k, v in data.items() if v is not None}
            if not fields.get("username") and not fields.get("display_name"):
                return None
            fields.setdefault("profile_url", url)
            return AccountData.model_validate(fields)
        except Exception as exc:
            self._call_failed("extract_account_data", exc)
            return None

    async def detect_identity_misuse(
        self, query: str, account: AccountData, context: str
    ) -> MisuseAssessment:
        if not self.is_available:
            return MisuseAssessment()

        try:
            prompt = (
                "You are an identity-protection analyst. Decide whether the account "
                "below may be impersonating or misrepresenting the person searched for.\n\n"
                f"Person searched for: {query}\n"
                f"Account: {account.model_dump_json(exclude_none=True)}\n"
                f"Page context: {context[:2000]}\n\n"
                "Return JSON: {is_misuse: bool, reason: string}. Keep the reason to "
                "one sentence and leave it empty when is_misuse is false."
            )
            data = await self._generate_json(
                prompt,
                {
                    "type": "object",
                    "properties": {
                        "is_misuse": {"type": "boolean"},
                        "reason": {"type": "string"},
                    },
                    "required": ["is_misuse"],
                },
            )
            return MisuseAssessment(**data)
        except Exception as exc:
            self._call_failed("detect_identity_misuse", exc)
            return MisuseAssessment()

    async def generate_search_variations(self, term: str) -> list[str]:
        if not self.is_available:
            return []

        try:
            prompt = (
                "Generate alternative spellings, nicknames, transliterations and "
                f"common username forms for the name '{term}'.\n\n"
                "Return JSON: {variations: [string]}."
            )
            data = await self._generate_json(
                prompt,
                {
                    "type": "object",
                    "properties": {
                        "variations": {"type": "array", "items": {"type": "string"}},
                    },
                    "required": ["variations"],
                },
            )
            variations = VariationList(**data).variations
            return [v.strip() for v in variations if v.strip()][:MAX_AGENT_VARIATIONS]
        except Exception as exc:
            self._call_failed("generate_search_variations", exc)
            return []

    async def analyze_content_context(self, title: str, snippet: str, text: str) -> str:
        if not self.is_available:
            return ""

        try:
            from vertexai.generative_models import GenerationConfig

            prompt = (
                "Summarize in at most three sentences what the page below says about "
                "the person it concerns.\n\n"
                f"Title: {title}\n"
                f"Snippet: {snippet}\n"
                f"Text:\n{text[: self._config.max_markup_chars]}"
            )
            response = await self._client.generate_content_async(
                prompt, generation_config=GenerationConfig(max_output_tokens=256)
            )
            return (response.text or "").strip()
        except Exception as exc:
            self._call_failed("analyze_content_context", exc)
            return ""


async def create_agent(config: VertexConfig | None = None) -> EnrichmentAgent:
    """Probe the Vertex agent once; fall back to ``NullAgent`` when unreachable."""
    config = config or VertexConfig()
    agent = VertexAgent(config)
    if await agent.initialize():
        logger.info("Enrichment agent available", extra={"model": config.model})
        return agent
    return NullAgent()
