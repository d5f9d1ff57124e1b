from datetime import datetime, timezone
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from services.personalities import PERSONALITIES


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Accepts camelCase (wire) and snake_case field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Auth Models
class RegisterIn(CamelModel):
    email: EmailStr
    username: str = Field(min_length=1)
    password: str = Field(min_length=8, max_length=72)  # bcrypt input limit
    first_name: str = ""
    last_name: str = ""


class LoginIn(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RefreshIn(CamelModel):
    refresh_token: str = Field(min_length=1)


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    learning_goal: Optional[str] = None


class User(BaseModel):
    id: str
    email: str
    username: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    bio: Optional[str] = None
    learning_goal: Optional[str] = None
    is_active: bool = True
    is_verified: bool = False
    subscription_tier: str = "free"
    created_at: datetime = Field(default_factory=utcnow)
    last_login_at: Optional[datetime] = None

    def public(self) -> dict:
        """User as returned by the API, never carrying the password hash"""
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "bio": self.bio,
            "learningGoal": self.learning_goal,
            "isActive": self.is_active,
            "isVerified": self.is_verified,
            "subscriptionTier": self.subscription_tier,
            "createdAt": self.created_at.isoformat(),
            "lastLoginAt": self.last_login_at.isoformat() if self.last_login_at else None,
        }


# Conversation Models
class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=utcnow)

    def public(self) -> dict:
        return {"role": self.role, "content": self.content, "timestamp": self.timestamp.isoformat()}


class Conversation(BaseModel):
    id: str
    user_id: str
    personality: str
    conversation_type: Optional[str] = None
    essential_category: Optional[str] = None
    messages: List[Message] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utcnow)
    last_active_at: datetime = Field(default_factory=utcnow)


class ConversationCreate(CamelModel):
    conversation_type: str = Field(min_length=1)
    ai_personality: str = "friendly_teacher"
    essential_category: Optional[str] = None
    target_content_ids: List[str] = Field(default_factory=list)
    learning_objectives: List[str] = Field(default_factory=list)

    @field_validator("ai_personality")
    @classmethod
    def known_personality(cls, value):
        if value not in PERSONALITIES:
            raise ValueError("Invalid AI personality")
        return value


class MessageIn(CamelModel):
    message_text: str = Field(min_length=1)
    audio_url: Optional[str] = None
    target_vocabulary: List[str] = Field(default_factory=list)


class AssessmentIn(CamelModel):
    assessment_type: Literal["grammar", "vocabulary", "overall"]
    input_data: Union[str, dict]
    target_content: Optional[str] = None

    @field_validator("input_data")
    @classmethod
    def has_text(cls, value: Any):
        text = value.get("text") if isinstance(value, dict) else value
        if not isinstance(text, str) or not text.strip():
            raise ValueError("Input data must contain text")
        return value

    @property
    def text(self) -> str:
        if isinstance(self.input_data, dict):
            return self.input_data["text"]
        return self.input_data
