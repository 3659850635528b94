"""
Services module initialization
"""

from adventure.services.match_service import MatchService, match_service


def get_match_service() -> MatchService:
    """Get the global match service instance"""
    return match_service
