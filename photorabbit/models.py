"""
Pydantic models for the PhotoRabbit interview.

Defines persisted interview messages, the wire payload sent to the
interview-chat function, and the project/photo records the interview
reads its context from.

Last Grunted: 10/18/2026
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(str, Enum):
    """Speaker of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


def utc_now() -> datetime:
    """Current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    """
    A role/content pair as submitted to the completion endpoint.

    Example:
        >>> ChatMessage(role="user", content="max is the best boy ever")
    """

    role: MessageRole
    content: str


class InterviewMessage(BaseModel):
    """
    One persisted interview message.

    Messages of a project are totally ordered by ``created_at``. Only
    ``user`` and ``assistant`` roles are ever stored.

    Example:
        >>> message = InterviewMessage(
        ...     id="4f0c...",
        ...     project_id="proj_123",
        ...     role="assistant",
        ...     content="I'd love to hear about Max!",
        ...     created_at="2024-01-01T00:00:01Z",
        ... )
    """

    id: str = Field(..., min_length=1, description="Opaque message identifier")
    project_id: str = Field(..., min_length=1, description="Owning project")
    role: MessageRole = Field(..., description="'user' or 'assistant'")
    content: str = Field(..., description="Message text")
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Creation timestamp, strictly increasing per project",
    )

    @field_validator("role")
    @classmethod
    def validate_role(cls, role: MessageRole) -> MessageRole:
        if role == MessageRole.SYSTEM:
            raise ValueError("Interview messages must be 'user' or 'assistant'")
        return role

    def as_chat_message(self) -> ChatMessage:
        """Strip persistence fields for upstream submission."""
        return ChatMessage(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    """
    Body of a POST to the interview-chat function.

    Field aliases match the camelCase JSON contract; Python code may use
    either spelling.
    """

    messages: list[ChatMessage] = Field(default_factory=list)
    pet_name: str = Field(default="", alias="petName")
    pet_type: str = Field(default="", alias="petType")
    user_message_count: int = Field(default=0, ge=0, alias="userMessageCount")
    photo_captions: Optional[list[str]] = Field(default=None, alias="photoCaptions")
    photo_context_brief: Optional[str] = Field(default=None, alias="photoContextBrief")
    product_type: Optional[str] = Field(default=None, alias="productType")
    mood: Optional[str] = Field(default=None)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        """JSON body with camelCase keys; null optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PhotoAnalysis(BaseModel):
    """
    AI analysis of one uploaded photo.

    Produced by the photo captioning collaborator; unknown keys are kept
    so records round-trip untouched.
    """

    scene_summary: Optional[str] = None
    subject_type: Optional[str] = None
    subject_mood: Optional[str] = None
    notable_details: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class ProjectRecord(BaseModel):
    """A storybook project and the subject it is about."""

    id: str = Field(..., min_length=1)
    pet_name: str = Field(..., min_length=1, description="Subject's name")
    pet_type: str = Field(default="unknown", description="Subject type, e.g. 'dog'")
    mood: Optional[str] = Field(default=None, description="Interview mood id")
    product_type: Optional[str] = Field(default=None, description="e.g. 'storybook'")
    photo_context_brief: Optional[str] = Field(
        default=None,
        description="Per-photo analysis brief prepared by the photo pipeline",
    )
    created_at: datetime = Field(default_factory=utc_now)


class PhotoRecord(BaseModel):
    """An uploaded photo with its caption and analysis."""

    id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    caption: Optional[str] = None
    ai_analysis: Optional[dict[str, Any]] = None
    created_at: datetime = Field(default_factory=utc_now)
