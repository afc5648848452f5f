"""SQLAlchemy model package."""
from superfishal.db.models.chat_message import ChatMessage
from superfishal.db.models.generated_content import GeneratedContent
from superfishal.db.models.resource import Resource
from superfishal.db.models.resource_category import ResourceCategory
from superfishal.db.models.user import User

__all__ = [
    "ChatMessage",
    "GeneratedContent",
    "Resource",
    "ResourceCategory",
    "User",
]
