"""
Scores a single video/campaign pair with the LLM, falling back to the
rule-based scorer whenever the LLM call or its output is unusable.
"""

import asyncio
import json
import logging
import math
import re
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from adventure.core.config import settings
from adventure.models.campaign import CampaignRef
from adventure.models.match import MatchResult
from adventure.models.video import VideoRef
from adventure.services.fallback_scorer import calculate_fallback_score
from adventure.services.llm_service import LLMService, llm_service as default_llm_service

logger = logging.getLogger(__name__)

# Greedy: from the first "{" to the last "}" in the reply
JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

FALLBACK_REASONING = "Automated match based on genre and category compatibility. Score: {score}/100"


def build_match_prompt(video: VideoRef, campaign: CampaignRef) -> str:
    """Create prompt asking the LLM for a compatibility score"""
    return f"""Rate the compatibility (0-100) between this video and this campaign:

VIDEO:
- Title: {video.title}
- Genre: {video.genre}
- Tone: {video.tone}

CAMPAIGN:
- Product: {campaign.product_name}
- Category: {campaign.category}
- Description: {campaign.description or ""}

Consider factors like:
- Genre alignment with product category
- Tone matching with brand image
- Target audience compatibility
- Creative synergy potential

Return ONLY a JSON object with this exact format:
{{
  "score": number,
  "reasoning": "detailed explanation of the match score"
}}"""


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not part of JSON
    raise ValueError(f"Non-standard JSON constant: {name}")


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Pull the JSON object out of a reply that may be wrapped in prose.

    Returns None when there is no brace-delimited block or it does not parse
    to a JSON object.
    """
    if not text:
        return None

    json_match = JSON_OBJECT_PATTERN.search(text)
    if not json_match:
        return None

    try:
        data = json.loads(json_match.group(0), parse_constant=_reject_constant)
    except ValueError as e:
        logger.warning("LLM reply contained malformed JSON: %s", e)
        return None

    return data if isinstance(data, dict) else None


class MatchGenerationService:
    """Produces a MatchResult for every pair, never raising"""

    def __init__(self, llm: Optional[LLMService] = None, timeout: Optional[float] = None):
        self.llm = llm or default_llm_service
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SECONDS

    async def generate(self, video: VideoRef, campaign: CampaignRef) -> MatchResult:
        """Score a video/campaign pair"""
        logger.info(
            "Scoring video '%s' (%s, %s) against campaign '%s' (%s)",
            video.title,
            video.genre,
            video.tone,
            campaign.product_name,
            campaign.category,
        )

        try:
            prompt = build_match_prompt(video, campaign)
            response_text = await asyncio.wait_for(
                self.llm.generate_text(prompt, purpose="match"), timeout=self.timeout
            )
            logger.debug("Raw LLM match reply: %s", response_text)

            data = extract_json_object(response_text)
            if data is None:
                raise ValueError("No valid JSON object found in LLM reply")

            result = self._to_match_result(data)
            logger.info("LLM match score: %s", result.score)
            return result

        except Exception as e:
            # Timeouts, provider errors and unusable replies all end up here
            logger.warning("LLM match scoring failed, using fallback: %s", e or type(e).__name__)
            return self.fallback(video, campaign)

    @staticmethod
    def fallback(video: VideoRef, campaign: CampaignRef) -> MatchResult:
        fallback_score = calculate_fallback_score(video, campaign)
        logger.info("Using fallback score: %s", fallback_score)
        return MatchResult(score=fallback_score, reasoning=FALLBACK_REASONING.format(score=fallback_score))

    @staticmethod
    def _to_match_result(data: Dict[str, Any]) -> MatchResult:
        score = data.get("score")
        # bool is an int subclass but never a meaningful score
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ValueError(f"LLM reply has no numeric score: {score!r}")
        if not math.isfinite(score):
            raise ValueError(f"LLM reply has a non-finite score: {score!r}")

        reasoning = data.get("reasoning")
        try:
            return MatchResult(score=score, reasoning=reasoning if isinstance(reasoning, str) else "")
        except PydanticValidationError as e:
            raise ValueError(f"Invalid match result: {e}") from e


match_generation_service = MatchGenerationService()
