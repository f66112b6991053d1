# core/parsers/ai_parser.py
"""Parse scripts through an OpenAI-compatible chat completion endpoint.

This parser is a drop-in replacement for the deterministic pipeline: it returns
the same `UnifiedParseResult`, produced by
[`validate_canonical_result()`](core/parsers/result_validation.py).

Notes:
    - Exactly one request per call. Retry and backoff are the caller's concern.
    - Missing credentials and transport failures raise `LLMServiceError`.
    - A reply without decodable JSON raises `AIResponseFormatError`. Shape
      problems inside valid JSON are repaired with warnings.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

import config
from core.exceptions import AIResponseFormatError, LLMServiceError, create_error_context, handle_llm_error
from core.http_client_service import CompletionHTTPClient, HTTPClientService
from core.parsers.deterministic_parser import compute_source_hash, resolve_project_type
from core.parsers.result_validation import validate_canonical_result
from models.script_models import BlockType, CharacterRole, LoreCategory, ParserSource, ProjectType, UnifiedParseResult
from prompts.prompt_renderer import get_system_prompt, render_prompt
from utils.json_utils import safe_json_loads, truncate_for_log

logger = structlog.get_logger(__name__)

PROMPT_DIR = "script_parser"


class AIScriptParser:
    """Single-call AI parser producing the canonical result.

    Attributes:
        model: Model identifier sent with each request.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
    """

    def __init__(
        self,
        http_client: HTTPClientService | None = None,
        *,
        model: str | None = None,
        api_base: str | None = None,
        api_key: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self._owns_client = http_client is None
        self._http_client = http_client or HTTPClientService()
        self._api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        self._completion_client = CompletionHTTPClient(self._http_client, api_base=api_base, api_key=self._api_key)
        self.model = model or config.AI_PARSER_MODEL
        self.temperature = temperature if temperature is not None else config.AI_PARSER_TEMPERATURE
        self.max_tokens = max_tokens or config.AI_PARSER_MAX_TOKENS

    async def __aenter__(self) -> AIScriptParser:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this parser created it."""
        if self._owns_client:
            await self._http_client.aclose()

    def build_messages(
        self,
        text: str,
        project_type: ProjectType,
        existing_characters: list[str] | None = None,
        canon_locks: list[str] | None = None,
    ) -> list[dict[str, str]]:
        user_prompt = render_prompt(
            f"{PROMPT_DIR}/parse_script.j2",
            {
                "project_type": project_type.value,
                "script_text": text,
                "existing_characters": existing_characters or [],
                "canon_locks": canon_locks or [],
                "block_types": [member.value for member in BlockType],
                "lore_categories": [member.value for member in LoreCategory],
                "roles": [member.value for member in CharacterRole],
            },
        )
        messages = []
        system_prompt = get_system_prompt(PROMPT_DIR)
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return messages

    async def parse(
        self,
        text: str,
        project_type: str | ProjectType | None = None,
        *,
        existing_characters: list[str] | None = None,
        canon_locks: list[str] | None = None,
    ) -> UnifiedParseResult:
        """Parse `text` with one completion request.

        An unknown format selector returns an empty result with a warning and
        makes no request.

        Raises:
            LLMServiceError: No API key is configured, or the request failed.
            AIResponseFormatError: The reply was not a JSON completion envelope,
                or its content contained no decodable JSON.
        """
        started = time.perf_counter()
        effective_type, selector_warnings = resolve_project_type(text, project_type)
        if effective_type is None:
            logger.warning("Unknown format selector; skipping AI parse", selector=str(project_type))
            return UnifiedParseResult(
                source_hash=compute_source_hash(text),
                project_type=ProjectType(config.DEFAULT_PROJECT_TYPE),
                warnings=selector_warnings,
                parser_source=ParserSource.AI,
                ai_model=self.model,
                parse_duration_ms=round((time.perf_counter() - started) * 1000, 3),
            )

        if not self._api_key:
            raise LLMServiceError(
                "AI parsing requires an API key. Set OPENAI_API_KEY or pass api_key.",
                details=create_error_context(model=self.model),
            )

        messages = self.build_messages(text, effective_type, existing_characters, canon_locks)

        logger.info("Requesting AI parse", model=self.model, project_type=effective_type.value, chars=len(text))
        try:
            response = await self._completion_client.get_completion(
                self.model,
                messages,
                self.temperature,
                self.max_tokens,
            )
        except httpx.HTTPError as e:
            raise handle_llm_error("script parse", e, model=self.model) from e
        except ValueError as e:
            # Body of a 2xx reply that is not JSON at all.
            raise AIResponseFormatError(
                "AI endpoint returned a non-JSON body.",
                details=create_error_context(model=self.model, error=str(e)),
            ) from e

        content = self._extract_content(response)
        decoded = safe_json_loads(content)
        if decoded is None:
            raise AIResponseFormatError(
                "AI response is not valid JSON.",
                details=create_error_context(model=self.model, preview=truncate_for_log(content)),
            )

        result = validate_canonical_result(
            decoded,
            project_type=effective_type,
            source_hash=compute_source_hash(text),
            ai_model=self.model,
            parser_source=ParserSource.AI,
        )
        result.parse_duration_ms = round((time.perf_counter() - started) * 1000, 3)
        logger.info(
            "AI parse complete",
            pages=len(result.pages),
            characters=len(result.characters),
            lore=len(result.lore),
            warnings=len(result.warnings),
        )
        return result

    def _extract_content(self, response: Any) -> str:
        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIResponseFormatError(
                "AI response did not contain a completion message.",
                details=create_error_context(model=self.model, preview=truncate_for_log(str(response))),
            ) from e
        if not isinstance(content, str):
            raise AIResponseFormatError(
                "AI completion content was not text.",
                details=create_error_context(model=self.model),
            )
        return content
