"""
PhotoRabbit interview.

The rabbit interviews a user about the subject of their photos (usually a
pet) one question at a time, then hands the transcript to story
generation. This package holds the chat client that drives a turn, the
stores the transcript lives in, and the pure helpers around it (transcript
windowing, stream decoding, quick replies, photo summary).

Example:
    >>> from photorabbit import InMemoryMessageStore, InterviewChatClient
    >>> store = InMemoryMessageStore()
    >>> async with InterviewChatClient("proj_1", store, chat_url=url) as client:
    ...     result = await client.send_message("max is the best boy ever", [], "Max", "dog")
"""

from .chain_log import ChainEvent, ChainLog, ChainPhase, ChainStatus
from .chat_client import InterviewChatClient, TurnOutcome, TurnResult
from .gateway import GatewayError, GatewaySettings, InterviewGateway
from .models import (
    ChatMessage,
    ChatRequest,
    InterviewMessage,
    MessageRole,
    PhotoAnalysis,
    PhotoRecord,
    ProjectRecord,
)
from .photo_summary import build_photo_summary, collect_photo_captions
from .pubsub import ChatEvent, ChatEventPublisher, ChatEventType, NoticeLevel
from .quick_replies import get_quick_replies
from .seed import autofill_interview
from .store import (
    InMemoryMessageStore,
    InMemoryPhotoStore,
    InMemoryProjectStore,
    JsonFileMessageStore,
    ProjectNotFoundError,
    StoreError,
)
from .stream_decoder import ChatStreamDecoder
from .transcript import window_messages

__version__ = "0.1.0"

__all__ = [
    "ChainEvent",
    "ChainLog",
    "ChainPhase",
    "ChainStatus",
    "ChatEvent",
    "ChatEventPublisher",
    "ChatEventType",
    "ChatMessage",
    "ChatRequest",
    "ChatStreamDecoder",
    "GatewayError",
    "GatewaySettings",
    "InMemoryMessageStore",
    "InMemoryPhotoStore",
    "InMemoryProjectStore",
    "InterviewChatClient",
    "InterviewGateway",
    "InterviewMessage",
    "JsonFileMessageStore",
    "MessageRole",
    "NoticeLevel",
    "PhotoAnalysis",
    "PhotoRecord",
    "ProjectNotFoundError",
    "ProjectRecord",
    "StoreError",
    "TurnOutcome",
    "TurnResult",
    "autofill_interview",
    "build_photo_summary",
    "collect_photo_captions",
    "get_quick_replies",
    "window_messages",
]
