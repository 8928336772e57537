"""
PhotoRabbit Interview Service

Serves the interview-chat function (a streaming proxy to the AI gateway)
and the project, photo and interview data the chat client reads and writes.

Endpoints:
    GET    /health                                  - Health check
    POST   /interview-chat                          - Stream one rabbit reply
    POST   /projects                                - Create project
    GET    /projects/{id}                           - Get project
    DELETE /projects/{id}                           - Delete project and its data
    POST   /projects/{id}/photos                    - Record a photo
    GET    /projects/{id}/photos                    - List photos
    GET    /projects/{id}/photo-summary             - Opening line for the photos
    GET    /projects/{id}/interview                 - Interview messages, oldest first
    POST   /projects/{id}/interview                 - Append messages
    DELETE /projects/{id}/interview                 - Start fresh
    POST   /projects/{id}/interview/autofill        - Load a seed transcript
    GET    /projects/{id}/interview/quick-replies   - Chips for the latest reply

Internal binding: configured by SERVICE_HOST/SERVICE_PORT (default 0.0.0.0:8787)
"""

from __future__ import annotations

import logging
import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, AsyncIterator, Optional, TypedDict

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field, field_validator
from starlette.background import BackgroundTask

from moods import DEFAULT_MOOD_ID, available_moods, load_mood
from photorabbit import __version__
from photorabbit.gateway import (
    DEFAULT_GATEWAY_URL,
    DEFAULT_MAX_COMPLETION_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    GatewayError,
    GatewaySettings,
    InterviewGateway,
)
from photorabbit.models import (
    ChatRequest,
    InterviewMessage,
    MessageRole,
    PhotoRecord,
    ProjectRecord,
    utc_now,
)
from photorabbit.photo_summary import build_photo_summary
from photorabbit.quick_replies import get_quick_replies
from photorabbit.seed import autofill_interview, load_seed
from photorabbit.store import (
    InMemoryMessageStore,
    InMemoryPhotoStore,
    InMemoryProjectStore,
    InvalidProjectIdError,
    JsonFileMessageStore,
    MessageStore,
    PhotoStore,
    ProjectNotFoundError,
    ProjectStore,
    StoreError,
)

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_env_path = Path(__file__).parent / ".env"
load_dotenv(_env_path)

SERVICE_NAME = "PhotoRabbit Interview Service"


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class RuntimeConfig:
    """Runtime config for the interview service."""

    service_host: str
    service_port: int
    data_dir: Optional[Path]
    gateway_url: str
    gateway_api_key: Optional[str]
    model: str
    temperature: float
    max_completion_tokens: int
    gateway_timeout_seconds: float
    cors_origins: tuple[str, ...]


def _parse_number(name: str, default: str, kind: type) -> Any:
    raw = (os.environ.get(name, default) or "").strip()
    if not raw:
        raise RuntimeError(f"{name} resolved to empty value.")
    try:
        return kind(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a {kind.__name__}. Got: {raw}") from exc


def load_runtime_config() -> RuntimeConfig:
    """Load runtime config from environment with strict validation."""
    service_host = (os.environ.get("SERVICE_HOST", "0.0.0.0") or "").strip()
    if not service_host:
        raise RuntimeError("SERVICE_HOST resolved to empty value.")

    service_port = _parse_number("SERVICE_PORT", "8787", int)
    if service_port < 1 or service_port > 65535:
        raise RuntimeError(f"SERVICE_PORT must be in range 1-65535. Got: {service_port}.")

    data_dir_raw = (os.environ.get("DATA_DIR") or "").strip()
    data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else None

    gateway_url = (os.environ.get("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL) or "").strip()
    if not gateway_url:
        raise RuntimeError("AI_GATEWAY_URL resolved to empty value.")

    gateway_api_key = (
        os.environ.get("AI_GATEWAY_API_KEY") or os.environ.get("LOVABLE_API_KEY") or ""
    ).strip() or None

    model = (os.environ.get("AI_MODEL", DEFAULT_MODEL) or "").strip()
    if not model:
        raise RuntimeError("AI_MODEL resolved to empty value.")

    temperature = _parse_number("AI_TEMPERATURE", str(DEFAULT_TEMPERATURE), float)
    if temperature < 0 or temperature > 2:
        raise RuntimeError(f"AI_TEMPERATURE must be in range 0-2. Got: {temperature}.")

    max_completion_tokens = _parse_number(
        "AI_MAX_COMPLETION_TOKENS", str(DEFAULT_MAX_COMPLETION_TOKENS), int
    )
    if max_completion_tokens < 1:
        raise RuntimeError(
            f"AI_MAX_COMPLETION_TOKENS must be positive. Got: {max_completion_tokens}."
        )

    gateway_timeout_seconds = _parse_number("GATEWAY_TIMEOUT_SECONDS", "60", float)
    if gateway_timeout_seconds <= 0:
        raise RuntimeError(
            f"GATEWAY_TIMEOUT_SECONDS must be positive. Got: {gateway_timeout_seconds}."
        )

    cors_raw = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
    cors_origins = tuple(origin.strip() for origin in cors_raw.split(",") if origin.strip())

    return RuntimeConfig(
        service_host=service_host,
        service_port=service_port,
        data_dir=data_dir,
        gateway_url=gateway_url,
        gateway_api_key=gateway_api_key,
        model=model,
        temperature=temperature,
        max_completion_tokens=max_completion_tokens,
        gateway_timeout_seconds=gateway_timeout_seconds,
        cors_origins=cors_origins,
    )


RUNTIME_CONFIG = load_runtime_config()


# =============================================================================
# Request Models
# =============================================================================


class CreateProjectRequest(BaseModel):
    """Request to create a storybook project."""

    id: str | None = Field(default=None, description="Optional project id; generated if omitted")
    pet_name: str = Field(..., min_length=1, description="Subject's name")
    pet_type: str = Field(default="unknown", description="Subject type, e.g. 'dog'")
    mood: str | None = Field(default=None, description="Interview mood id")
    product_type: str | None = Field(default=None, description="e.g. 'storybook'")
    photo_context_brief: str | None = Field(default=None, description="Per-photo analysis brief")


class AddPhotoRequest(BaseModel):
    """Request to record an uploaded photo."""

    caption: str | None = Field(default=None, description="Short AI caption")
    ai_analysis: dict[str, Any] | None = Field(default=None, description="Full AI analysis")


class NewMessage(BaseModel):
    """One message to store. Server-stamped unless ``created_at`` is given."""

    role: MessageRole
    content: str
    id: str | None = None
    created_at: datetime | None = None

    @field_validator("role")
    @classmethod
    def validate_role(cls, role: MessageRole) -> MessageRole:
        if role == MessageRole.SYSTEM:
            raise ValueError("Interview messages must be 'user' or 'assistant'")
        return role


class AppendMessagesRequest(BaseModel):
    """Request to append interview messages, in order."""

    messages: list[NewMessage] = Field(..., min_length=1)


# =============================================================================
# Response Models
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = Field(default=False)
    error: str = Field(..., description="Error description")
    error_code: str | None = Field(default=None, description="Machine-readable error code")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: str = Field(..., description="Current server timestamp")
    gateway_configured: bool = Field(..., description="Whether an AI gateway key is set")
    storage: str = Field(..., description="Interview storage backend: 'json' or 'memory'")
    moods: list[str] = Field(default_factory=list, description="Supported mood ids")


class ProjectDeleteResponse(BaseModel):
    """Response for project deletion."""

    ok: bool = True
    deleted_messages: int = 0
    deleted_photos: int = 0


class PhotoListResponse(BaseModel):
    """Photos of a project, in upload order."""

    project_id: str
    photos: list[PhotoRecord]


class PhotoSummaryResponse(BaseModel):
    """Opening line for a project's photos."""

    project_id: str
    summary: str
    photo_count: int


class InterviewResponse(BaseModel):
    """Interview messages of a project."""

    project_id: str
    messages: list[InterviewMessage]


class InterviewDeleteResponse(BaseModel):
    """Response for clearing an interview."""

    ok: bool = True
    deleted: int


class AutofillResponse(BaseModel):
    """Response for loading a seed transcript."""

    ok: bool = True
    seed: str
    inserted: int


class QuickRepliesResponse(BaseModel):
    """Reply chips for the latest rabbit message."""

    project_id: str
    message_id: str | None = None
    replies: list[str] = Field(default_factory=list)


# =============================================================================
# Application State (Type-safe Lifespan State)
# =============================================================================


class AppState(TypedDict):
    """Type-safe application state managed by lifespan."""

    config: RuntimeConfig
    message_store: MessageStore
    project_store: ProjectStore
    photo_store: PhotoStore
    gateway: InterviewGateway


# =============================================================================
# Custom Exceptions
# =============================================================================


class PhotoRabbitServiceError(Exception):
    """Base exception for interview service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class ProjectMissingError(PhotoRabbitServiceError):
    """Raised when the requested project does not exist."""

    def __init__(self, project_id: str) -> None:
        super().__init__(
            message=f"Project '{project_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="PROJECT_NOT_FOUND",
        )


class ProjectExistsError(PhotoRabbitServiceError):
    """Raised when creating a project whose id is taken."""

    def __init__(self, project_id: str) -> None:
        super().__init__(
            message=f"Project '{project_id}' already exists",
            status_code=status.HTTP_409_CONFLICT,
            error_code="PROJECT_EXISTS",
        )


class InvalidRequestError(PhotoRabbitServiceError):
    """Raised for requests that validate but cannot be served."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INVALID_REQUEST",
        )


class GatewayNotConfiguredError(PhotoRabbitServiceError):
    """Raised when a chat request arrives and no gateway key is set."""

    def __init__(self) -> None:
        super().__init__(
            message="AI gateway API key is not configured",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="GATEWAY_NOT_CONFIGURED",
        )


# =============================================================================
# Dependencies
# =============================================================================


def get_app_state(request: Request) -> AppState:
    """
    Dependency to retrieve application state from request.

    Raises:
        RuntimeError: If state is not properly initialized.
    """
    state = getattr(request, "state", None)
    if state is None:
        raise RuntimeError("Application state not initialized")

    return AppState(
        config=state.config,
        message_store=state.message_store,
        project_store=state.project_store,
        photo_store=state.photo_store,
        gateway=state.gateway,
    )


AppStateDep = Annotated[AppState, Depends(get_app_state)]


async def require_project(state: AppState, project_id: str) -> ProjectRecord:
    """Fetch a project or raise the 404 service error."""
    try:
        return await state["project_store"].get(project_id)
    except ProjectNotFoundError as e:
        raise ProjectMissingError(project_id) from e


def build_gateway_client(config: RuntimeConfig) -> httpx.AsyncClient:
    """HTTP client used for upstream gateway calls."""
    return httpx.AsyncClient(timeout=httpx.Timeout(config.gateway_timeout_seconds))


def build_message_store(config: RuntimeConfig) -> MessageStore:
    """JSON files under DATA_DIR when set, process memory otherwise."""
    if config.data_dir is not None:
        return JsonFileMessageStore(config.data_dir)
    return InMemoryMessageStore()


# =============================================================================
# Exception Handlers
# =============================================================================


async def service_error_handler(request: Request, exc: PhotoRabbitServiceError) -> JSONResponse:
    """Handle PhotoRabbitServiceError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            ok=False,
            error=exc.message,
            error_code=exc.error_code,
        ).model_dump(),
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Handle persistence failures that escaped an endpoint."""
    if isinstance(exc, InvalidProjectIdError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=str(exc), error_code="INVALID_PROJECT_ID").model_dump(),
        )
    if isinstance(exc, ProjectNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(error=str(exc), error_code="PROJECT_NOT_FOUND").model_dump(),
        )
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Storage error", error_code="STORE_ERROR").model_dump(),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            ok=False,
            error="Internal server error",
            error_code="INTERNAL_ERROR",
        ).model_dump(),
    )


# =============================================================================
# FastAPI App Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[dict[str, Any]]:
    """
    Build stores and the gateway client on startup; close the client on shutdown.

    Yields:
        Dictionary of application state to be attached to requests.
    """
    config = RUNTIME_CONFIG
    logger.info("Starting %s", SERVICE_NAME)
    logger.info(
        "Runtime: host=%s port=%d model=%s gateway_configured=%s",
        config.service_host,
        config.service_port,
        config.model,
        bool(config.gateway_api_key),
    )
    if not config.gateway_api_key:
        logger.warning("AI_GATEWAY_API_KEY is not set; /interview-chat will return 500")

    message_store = build_message_store(config)
    logger.info(
        "Interview storage: %s",
        config.data_dir if config.data_dir is not None else "in-memory",
    )

    http_client = build_gateway_client(config)
    gateway = InterviewGateway(
        GatewaySettings(
            url=config.gateway_url,
            api_key=config.gateway_api_key,
            model=config.model,
            temperature=config.temperature,
            max_completion_tokens=config.max_completion_tokens,
        ),
        http_client,
    )

    state = {
        "config": config,
        "message_store": message_store,
        "project_store": InMemoryProjectStore(),
        "photo_store": InMemoryPhotoStore(),
        "gateway": gateway,
    }

    yield state

    logger.info("Shutting down...")
    await http_client.aclose()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=SERVICE_NAME,
    version=__version__,
    description="Rabbit interview chat and the project data it reads and writes",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(RUNTIME_CONFIG.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "apikey", "x-client-info"],
    max_age=3600,
)

app.add_exception_handler(PhotoRabbitServiceError, service_error_handler)
app.add_exception_handler(StoreError, store_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)


# =============================================================================
# Endpoints
# =============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check(state: AppStateDep) -> HealthResponse:
    """Health check endpoint."""
    config = state["config"]
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        gateway_configured=state["gateway"].configured,
        storage="json" if config.data_dir is not None else "memory",
        moods=list(available_moods()),
    )


@app.post("/interview-chat", response_model=None)
async def interview_chat(request: ChatRequest, state: AppStateDep) -> StreamingResponse | JSONResponse:
    """
    Stream one rabbit reply.

    Request body (camelCase):
        {
            "messages": [{"role": "user", "content": "..."}],
            "petName": "Max",
            "petType": "dog",
            "userMessageCount": 3,
            "photoCaptions": ["..."],
            "photoContextBrief": "...",
            "productType": "storybook",
            "mood": "funny"
        }

    Returns:
        The gateway's server-sent event stream, unchanged, or a JSON error:
        429 ``{"error": "Rate limited"}``, 402 ``{"error": "Payment required"}``,
        500 ``{"error": "AI gateway error"}``.
    """
    gateway = state["gateway"]
    if not gateway.configured:
        raise GatewayNotConfiguredError()

    try:
        upstream = await gateway.open_stream(request)
    except GatewayError as e:
        if e.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
            return JSONResponse(status_code=429, content={"error": "Rate limited"})
        if e.status_code == status.HTTP_402_PAYMENT_REQUIRED:
            return JSONResponse(status_code=402, content={"error": "Payment required"})
        return JSONResponse(status_code=500, content={"error": "AI gateway error"})
    except httpx.HTTPError as e:
        logger.error("AI gateway request failed: %s", e)
        return JSONResponse(status_code=500, content={"error": "AI gateway error"})

    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="text/event-stream",
        background=BackgroundTask(upstream.aclose),
    )


@app.post("/projects", response_model=ProjectRecord, status_code=status.HTTP_201_CREATED)
async def create_project(request: CreateProjectRequest, state: AppStateDep) -> ProjectRecord:
    """Create a project. Unknown moods are rejected."""
    mood = None
    if request.mood is not None:
        try:
            mood = load_mood(request.mood).mood_id
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e

    project_id = request.id or f"proj_{uuid.uuid4().hex[:12]}"
    try:
        await state["project_store"].get(project_id)
    except ProjectNotFoundError:
        pass
    else:
        raise ProjectExistsError(project_id)

    project = ProjectRecord(
        id=project_id,
        pet_name=request.pet_name,
        pet_type=request.pet_type,
        mood=mood,
        product_type=request.product_type,
        photo_context_brief=request.photo_context_brief,
    )
    return await state["project_store"].create(project)


@app.get("/projects/{project_id}", response_model=ProjectRecord)
async def get_project(project_id: str, state: AppStateDep) -> ProjectRecord:
    """Fetch a project."""
    return await require_project(state, project_id)


@app.delete("/projects/{project_id}", response_model=ProjectDeleteResponse)
async def delete_project(project_id: str, state: AppStateDep) -> ProjectDeleteResponse:
    """Delete a project with its photos and interview."""
    await require_project(state, project_id)

    deleted_messages = await state["message_store"].delete_project(project_id)
    deleted_photos = await state["photo_store"].delete_project(project_id)
    await state["project_store"].delete(project_id)

    logger.info(
        "Deleted project %s (%d messages, %d photos)",
        project_id,
        deleted_messages,
        deleted_photos,
    )
    return ProjectDeleteResponse(deleted_messages=deleted_messages, deleted_photos=deleted_photos)


@app.post(
    "/projects/{project_id}/photos",
    response_model=PhotoRecord,
    status_code=status.HTTP_201_CREATED,
)
async def add_photo(project_id: str, request: AddPhotoRequest, state: AppStateDep) -> PhotoRecord:
    """Record an uploaded photo's caption and analysis."""
    await require_project(state, project_id)
    photo = PhotoRecord(
        id=str(uuid.uuid4()),
        project_id=project_id,
        caption=request.caption,
        ai_analysis=request.ai_analysis,
    )
    return await state["photo_store"].add(photo)


@app.get("/projects/{project_id}/photos", response_model=PhotoListResponse)
async def list_photos(project_id: str, state: AppStateDep) -> PhotoListResponse:
    """List a project's photos in upload order."""
    await require_project(state, project_id)
    photos = await state["photo_store"].list_photos(project_id)
    return PhotoListResponse(project_id=project_id, photos=photos)


@app.get("/projects/{project_id}/photo-summary", response_model=PhotoSummaryResponse)
async def photo_summary(project_id: str, state: AppStateDep) -> PhotoSummaryResponse:
    """The rabbit's opening line for the analysed photos."""
    await require_project(state, project_id)
    photos = await state["photo_store"].list_photos(project_id)
    summary = build_photo_summary(p.ai_analysis for p in photos)
    return PhotoSummaryResponse(project_id=project_id, summary=summary, photo_count=len(photos))


@app.get("/projects/{project_id}/interview", response_model=InterviewResponse)
async def get_interview(project_id: str, state: AppStateDep) -> InterviewResponse:
    """Interview messages ordered by timestamp."""
    await require_project(state, project_id)
    messages = await state["message_store"].list_messages(project_id)
    return InterviewResponse(project_id=project_id, messages=messages)


@app.post(
    "/projects/{project_id}/interview",
    response_model=InterviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def append_interview(
    project_id: str,
    request: AppendMessagesRequest,
    state: AppStateDep,
) -> InterviewResponse:
    """
    Append messages in request order.

    Messages without ``created_at`` are stamped by the store after every
    existing message; messages with one keep it (seed imports).
    """
    await require_project(state, project_id)
    store = state["message_store"]

    saved: list[InterviewMessage] = []
    for entry in request.messages:
        if entry.created_at is None:
            saved.append(await store.append(project_id, entry.role, entry.content))
            continue
        message = InterviewMessage(
            id=entry.id or str(uuid.uuid4()),
            project_id=project_id,
            role=entry.role,
            content=entry.content,
            created_at=entry.created_at,
        )
        saved.extend(await store.insert_many([message]))

    return InterviewResponse(project_id=project_id, messages=saved)


@app.delete("/projects/{project_id}/interview", response_model=InterviewDeleteResponse)
async def clear_interview(project_id: str, state: AppStateDep) -> InterviewDeleteResponse:
    """Delete every interview message of a project."""
    await require_project(state, project_id)
    deleted = await state["message_store"].delete_project(project_id)
    return InterviewDeleteResponse(deleted=deleted)


@app.post("/projects/{project_id}/interview/autofill", response_model=AutofillResponse)
async def autofill(
    project_id: str,
    state: AppStateDep,
    seed: str = Query(default="max", description="Seed transcript id"),
) -> AutofillResponse:
    """Replace the interview with a seed transcript."""
    await require_project(state, project_id)
    try:
        transcript = load_seed(seed)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e

    inserted = await autofill_interview(
        state["message_store"],
        project_id,
        transcript,
        epoch=utc_now(),
    )
    return AutofillResponse(seed=seed.strip().lower(), inserted=inserted)


@app.get(
    "/projects/{project_id}/interview/quick-replies",
    response_model=QuickRepliesResponse,
)
async def quick_replies(project_id: str, state: AppStateDep) -> QuickRepliesResponse:
    """Chips for the latest assistant message, using the project's mood."""
    project = await require_project(state, project_id)
    messages = await state["message_store"].list_messages(project_id)

    latest = next((m for m in reversed(messages) if m.role == MessageRole.ASSISTANT), None)
    if latest is None:
        return QuickRepliesResponse(project_id=project_id)

    replies = get_quick_replies(
        latest.content,
        pet_name=project.pet_name,
        mood=project.mood or DEFAULT_MOOD_ID,
    )
    return QuickRepliesResponse(project_id=project_id, message_id=latest.id, replies=replies)


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    """Run the service with uvicorn."""
    logger.info("=" * 60)
    logger.info(SERVICE_NAME)
    logger.info("=" * 60)
    logger.info(
        "Binding to: http://%s:%d",
        RUNTIME_CONFIG.service_host,
        RUNTIME_CONFIG.service_port,
    )
    logger.info("Gateway: %s (model %s)", RUNTIME_CONFIG.gateway_url, RUNTIME_CONFIG.model)
    logger.info("Moods: %s", ", ".join(available_moods()))
    logger.info("=" * 60)

    uvicorn.run(
        app,
        host=RUNTIME_CONFIG.service_host,
        port=RUNTIME_CONFIG.service_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
