"""In-memory stores standing in for a database.

Handlers reach the stores through ``app.state`` only, so a persistent backend can
replace them without touching any route. Nothing here locks: the stores rely on
the single event loop serving requests one step at a time.
"""
import secrets
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import bcrypt

from core.models import Conversation, Message, User, utcnow

DEMO_PASSWORD = "password123"


def new_conversation_id() -> str:
    return f"conv_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


class UserStore:
    """Fixed user array seeded with a demo account"""

    def __init__(self, seed: Optional[List[User]] = None):
        if seed is None:
            seed = [
                User(
                    id="1",
                    email="demo@chatlingo.com",
                    username="demo_user",
                    first_name="Demo",
                    last_name="User",
                    password_hash=bcrypt.hashpw(DEMO_PASSWORD.encode("utf-8"), bcrypt.gensalt(10)).decode("utf-8"),
                    is_active=True,
                    is_verified=True,
                )
            ]
        self.users: List[User] = list(seed)

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self.users if u.email.lower() == email), None)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self.users if u.email.lower() == email or u.username == username), None)

    def add(self, email: str, username: str, password_hash: str, first_name: str = "", last_name: str = "") -> User:
        user = User(
            id=str(len(self.users) + 1),
            email=email,
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.users.append(user)
        return user


class ConversationStore(ABC):
    """Storage interface for conversation histories"""

    @abstractmethod
    async def create(self, user_id: str, personality: str, conversation_type: Optional[str] = None,
                     essential_category: Optional[str] = None) -> Conversation:
        ...

    @abstractmethod
    async def get(self, conversation_id: str) -> Optional[Conversation]:
        ...

    @abstractmethod
    async def append(self, conversation_id: str, message: Message) -> Conversation:
        """Append a message; raises KeyError for an unknown conversation"""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[Conversation]:
        """Conversations owned by user_id, most recently active first"""

    async def close(self):
        pass


class InMemoryConversationStore(ConversationStore):
    """Process-lifetime map from conversation id to history. No eviction."""

    def __init__(self):
        self.conversations: Dict[str, Conversation] = {}

    async def create(self, user_id, personality, conversation_type=None, essential_category=None):
        conversation = Conversation(
            id=new_conversation_id(),
            user_id=user_id,
            personality=personality,
            conversation_type=conversation_type,
            essential_category=essential_category,
        )
        self.conversations[conversation.id] = conversation
        return conversation

    async def get(self, conversation_id):
        return self.conversations.get(conversation_id)

    async def append(self, conversation_id, message):
        conversation = self.conversations[conversation_id]
        conversation.messages.append(message)
        conversation.last_active_at = utcnow()
        return conversation

    async def list_for_user(self, user_id):
        owned = [c for c in self.conversations.values() if c.user_id == user_id]
        return sorted(owned, key=lambda c: c.last_active_at, reverse=True)
