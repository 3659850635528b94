"""
LLM Service for free-form text generation.

This module wraps the supported LLM providers (OpenAI, Anthropic, local
OpenAI-compatible servers and a mock) behind a single ``generate_text`` call
used by match scoring and the chat assistant.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

import httpx
from anthropic import AsyncAnthropic, RateLimitError as AnthropicRateLimitError
from openai import AsyncOpenAI, RateLimitError as OpenAIRateLimitError

from adventure.core.config import settings
from adventure.db.mongodb import mongodb
from adventure.exceptions import LLMGenerationError, LLMRateLimitError
from adventure.models.llm_cost import LLMCost

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are an advertising analyst who pairs video creators with marketing campaigns."
)


class LLMService:
    """Service for LLM text generation with multiple providers"""

    def __init__(self) -> None:
        self.provider = str(settings.LLM_PROVIDER).lower()
        self.model = str(settings.LLM_MODEL)
        self.api_key = str(settings.LLM_API_KEY)
        self.base_url = settings.LLM_BASE_URL
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.temperature = settings.LLM_TEMPERATURE
        self.timeout = settings.LLM_TIMEOUT_SECONDS

        # A failed call goes straight to the caller's fallback, so SDK retries are off
        self.client: Optional[Any] = None
        if self.provider == "openai":
            self.client = AsyncOpenAI(api_key=self.api_key, max_retries=0, timeout=self.timeout)
        elif self.provider == "anthropic":
            self.client = AsyncAnthropic(api_key=self.api_key, max_retries=0, timeout=self.timeout)
        elif self.provider == "local":
            self.client = None  # Will use httpx directly
        elif self.provider == "mock":
            self.client = None  # Mock implementation

        # LLM pricing (per 1K tokens)
        self.pricing = {
            "gpt-4o": {"input": 0.0025, "output": 0.01},
            "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
            "gpt-4-turbo": {"input": 0.01, "output": 0.03},
            "gpt-3.5-turbo": {"input": 0.001, "output": 0.002},
            "claude-3-5-sonnet-latest": {"input": 0.003, "output": 0.015},
            "claude-3-5-haiku-latest": {"input": 0.0008, "output": 0.004},
        }

    async def generate_text(
        self, prompt: str, purpose: str = "match", system_prompt: str = DEFAULT_SYSTEM_PROMPT
    ) -> str:
        """Send a prompt to the configured provider and return the raw reply.

        Raises LLMRateLimitError on quota/rate limits and LLMGenerationError
        for everything else (network errors, empty replies, unknown provider).
        """
        try:
            llm_result = await self._call_llm(prompt, system_prompt)
        except (OpenAIRateLimitError, AnthropicRateLimitError) as e:
            provider = "openai" if isinstance(e, OpenAIRateLimitError) else "anthropic"
            logger.error("LLM rate limit hit (provider: %s): %s", provider, e)
            raise LLMRateLimitError(str(e), provider=provider, original_error=e) from e
        except LLMGenerationError:
            raise
        except Exception as e:
            logger.error("Error calling LLM provider %s: %s", self.provider, e)
            raise LLMGenerationError(str(e), provider=self.provider, original_error=e) from e

        if not llm_result or not llm_result.get("response"):
            raise LLMGenerationError("Empty response from LLM", provider=self.provider)

        await self._save_llm_cost(purpose, llm_result["cost_info"])
        return llm_result["response"]

    async def _call_llm(self, prompt: str, system_prompt: str) -> Optional[Dict[str, Any]]:
        """Call LLM API based on provider - may raise RateLimitError"""
        if self.provider == "openai":
            return await self._call_openai(prompt, system_prompt)
        if self.provider == "anthropic":
            return await self._call_anthropic(prompt, system_prompt)
        if self.provider == "local":
            return await self._call_local(prompt, system_prompt)
        if self.provider == "mock":
            return await self._call_mock(prompt)
        raise LLMGenerationError(f"Unknown LLM provider: {self.provider}", provider=self.provider)

    async def _call_openai(self, prompt: str, system_prompt: str) -> Optional[Dict[str, Any]]:
        """Call OpenAI API - raises exceptions on errors"""
        if not self.client or not hasattr(self.client, "chat"):
            logger.error("OpenAI client not properly initialized")
            return None

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )

        content = response.choices[0].message.content
        usage = response.usage

        return {
            "response": content,
            "cost_info": self._cost_info(
                usage.prompt_tokens if usage else 0,
                usage.completion_tokens if usage else 0,
            ),
        }

    async def _call_anthropic(self, prompt: str, system_prompt: str) -> Optional[Dict[str, Any]]:
        """Call Anthropic API - raises exceptions on errors"""
        if not self.client or not hasattr(self.client, "messages"):
            logger.error("Anthropic client not properly initialized")
            return None

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": prompt}],
        )

        content = response.content[0].text if response.content else ""
        usage = response.usage

        return {
            "response": content,
            "cost_info": self._cost_info(
                usage.input_tokens if usage else 0,
                usage.output_tokens if usage else 0,
            ),
        }

    async def _call_local(self, prompt: str, system_prompt: str) -> Optional[Dict[str, Any]]:
        """Call local LLM API (Ollama, LM Studio, etc.)"""
        if not self.base_url:
            logger.error("LLM_BASE_URL not configured for local provider")
            return None

        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{self.base_url}/v1/chat/completions",
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    "max_tokens": self.max_tokens,
                    "temperature": self.temperature,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()

        content = data["choices"][0]["message"]["content"]
        usage = data.get("usage") or {}

        cost_info = self._cost_info(usage.get("prompt_tokens", 0), usage.get("completion_tokens", 0))
        cost_info["cost_usd"] = 0.0  # Local models are free
        return {"response": content, "cost_info": cost_info}

    async def _call_mock(self, prompt: str) -> Optional[Dict[str, Any]]:
        """Mock LLM implementation for development without an API key"""
        if "Rate the compatibility" in prompt:
            video_part, _, campaign_part = prompt.partition("CAMPAIGN:")
            video_words = set(re.findall(r"[a-z]{4,}", video_part.lower()))
            campaign_words = set(re.findall(r"[a-z]{4,}", campaign_part.lower()))
            shared = sorted(video_words & campaign_words - {"title", "genre", "tone", "video", "consider"})
            score = min(60 + 5 * len(shared), 95)
            response = json.dumps(
                {
                    "score": score,
                    "reasoning": "Mock analysis. Shared themes: " + (", ".join(shared) if shared else "none"),
                }
            )
        else:
            response = (
                "Mock assistant reply. I can help you compare campaigns and videos "
                "once a real LLM provider is configured."
            )

        # Simulate token usage
        prompt_tokens = int(len(prompt.split()) * 1.3)
        completion_tokens = int(len(response.split()) * 1.3)
        cost_info = self._cost_info(prompt_tokens, completion_tokens)
        cost_info["model_name"] = f"mock-{self.model}"
        return {"response": response, "cost_info": cost_info}

    def _cost_info(self, prompt_tokens: int, completion_tokens: int) -> Dict[str, Any]:
        return {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
            "cost_usd": self._calculate_cost(prompt_tokens, completion_tokens),
            "model_name": self.model,
        }

    def _calculate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Calculate cost based on model pricing"""
        if self.model not in self.pricing:
            return 0.0

        pricing = self.pricing[self.model]
        input_cost = (prompt_tokens / 1000) * pricing["input"]
        output_cost = (completion_tokens / 1000) * pricing["output"]
        return float(input_cost + output_cost)

    async def _save_llm_cost(self, purpose: str, cost_info: Dict[str, Any]) -> None:
        """Save LLM cost information to database"""
        try:
            cost_record = LLMCost(
                purpose=purpose,
                prompt_tokens=cost_info["prompt_tokens"],
                completion_tokens=cost_info["completion_tokens"],
                total_tokens=cost_info["total_tokens"],
                cost_usd=cost_info["cost_usd"],
                model_name=cost_info["model_name"],
            )  # type: ignore

            db = mongodb.get_database()
            await db.llm_costs.insert_one(cost_record.model_dump(exclude={"id"}))

            logger.info("Saved LLM cost: $%.4f for %s call", cost_info["cost_usd"], purpose)

        except Exception as e:
            logger.error("Error saving LLM cost: %s", e)


llm_service = LLMService()
