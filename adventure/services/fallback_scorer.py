"""
Rule-based compatibility scoring used when the LLM cannot produce a score.
"""

import logging
from types import MappingProxyType
from typing import Mapping

from adventure.models.campaign import CampaignRef
from adventure.models.video import VideoRef

logger = logging.getLogger(__name__)

BASE_SCORE = 50
TONE_BUSINESS_BONUS = 10

# genre -> campaign category -> bonus
GENRE_CATEGORY_BONUS: Mapping[str, Mapping[str, int]] = MappingProxyType(
    {
        "comedy": MappingProxyType({"entertainment": 20, "food": 15, "lifestyle": 10}),
        "educational": MappingProxyType({"technology": 20, "healthcare": 15, "finance": 10}),
        "lifestyle": MappingProxyType({"fashion": 20, "beauty": 15, "travel": 10}),
        "entertainment": MappingProxyType({"gaming": 20, "music": 15, "sports": 10}),
    }
)


def calculate_fallback_score(video: VideoRef, campaign: CampaignRef) -> int:
    """Score a video/campaign pair from genre, category and tone alone.

    Always returns an int in [0, 100].
    """
    genre = video.genre.lower()
    tone = video.tone.lower()
    category = campaign.category.lower()

    score = BASE_SCORE
    score += GENRE_CATEGORY_BONUS.get(genre, {}).get(category, 0)

    if "professional" in tone and "business" in category:
        score += TONE_BUSINESS_BONUS

    final_score = min(max(score, 0), 100)
    logger.debug("Fallback score for genre=%s category=%s: %s", genre, category, final_score)
    return final_score
