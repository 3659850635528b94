import logging

from adventure.db.mongodb import mongodb

logger = logging.getLogger(__name__)


async def init_database():
    """Initialize database with collections and indexes"""
    try:
        db = mongodb.get_database()

        # Users
        await db.users.create_index("email", unique=True)

        # Videos and campaigns are listed per owner, newest first
        await db.videos.create_index([("creator_id", 1), ("created_at", -1)])
        await db.campaigns.create_index([("marketer_id", 1), ("created_at", -1)])

        # One match per (video, campaign) pair
        await db.matches.create_index([("video_id", 1), ("campaign_id", 1)], unique=True)
        await db.matches.create_index([("campaign_id", 1), ("status", 1)])
        await db.matches.create_index("created_at")

        # Chat assistant
        await db.chats.create_index([("marketer_id", 1), ("created_at", -1)])
        await db.chat_messages.create_index([("chat_id", 1), ("created_at", 1)])

        await db.llm_costs.create_index("created_at")

        logger.info("Database indexes created successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise
