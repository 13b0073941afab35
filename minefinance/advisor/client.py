# minefinance/advisor/client.py
"""
Narrow interface to the external text/JSON generation service.

  generate_narrative(prompt)          -> str
  generate_structured(prompt, schema) -> list   (raises ParseError)

Both are coroutines with their own timeout. Nothing in minefinance.finance
depends on this module.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from minefinance.config import LLMSettings
from .parsing import extract_json_array

logger = logging.getLogger(__name__)


class ServiceUnavailable(RuntimeError):
    """No API key configured, so the generative features are off."""


class GenerativeService:
    """Base class; subclasses implement `_complete`."""

    timeout: Optional[float] = None

    async def _complete(self, prompt: str, *, system: Optional[str] = None) -> str:
        raise NotImplementedError

    async def _run(self, prompt: str, *, system: Optional[str] = None) -> str:
        if self.timeout:
            return await asyncio.wait_for(self._complete(prompt, system=system), self.timeout)
        return await self._complete(prompt, system=system)

    async def generate_narrative(self, prompt: str) -> str:
        return await self._run(prompt)

    async def generate_structured(self, prompt: str, schema: Dict[str, Any]) -> List[Any]:
        system = (
            "Respond with JSON only, no prose and no code fences. "
            f"The JSON must match this schema: {json.dumps(schema)}"
        )
        text = await self._run(prompt, system=system)
        return extract_json_array(text)


class OpenAIService(GenerativeService):
    def __init__(self, settings: LLMSettings, client: Any = None):
        if not settings.enabled:
            raise ServiceUnavailable("API key not configured (set OPENAI_API_KEY)")
        if client is None:
            from openai import AsyncOpenAI

            client = AsyncOpenAI(api_key=settings.api_key)
        self._client = client
        self.model = settings.model
        self.timeout = settings.timeout

    async def _complete(self, prompt: str, *, system: Optional[str] = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        logger.debug("requesting completion from %s (%d chars)", self.model, len(prompt))
        resp = await self._client.chat.completions.create(model=self.model, messages=messages)
        return resp.choices[0].message.content or ""
