"""
Centralized status enums for different entities
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role, decides which side of the marketplace a user is on"""
    CREATOR = "creator"             # Uploads videos
    MARKETER = "marketer"           # Runs campaigns


class VideoStatus(str, Enum):
    """Status for an uploaded video"""
    UPLOADED = "uploaded"           # Stored, never matched
    MATCHED = "matched"             # At least one match was generated
    APPROVED = "approved"           # Creator accepted a match


class MatchStatus(str, Enum):
    """Status for a video/campaign match"""
    PENDING = "pending"             # Generated, waiting for the creator
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ChatSender(str, Enum):
    """Author of a chat message"""
    USER = "user"
    AI = "ai"
