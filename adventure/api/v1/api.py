from fastapi import APIRouter

from adventure.api.v1.endpoints import ai, analytics, auth, campaigns, chat, matches, videos

api_router = APIRouter()
api_router.include_router(
    auth.router, prefix="/auth", tags=["auth"]
)
api_router.include_router(
    videos.router, prefix="/videos", tags=["videos"]
)
api_router.include_router(
    campaigns.router, prefix="/campaigns", tags=["campaigns"]
)
api_router.include_router(
    matches.router, prefix="/matches", tags=["matches"]
)
api_router.include_router(
    ai.router, prefix="/ai", tags=["ai"]
)
api_router.include_router(
    analytics.router, prefix="/analytics", tags=["analytics"]
)
api_router.include_router(
    chat.router, prefix="/chat", tags=["chat"]
)
