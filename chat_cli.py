#!/usr/bin/env python3
"""
Terminal chat with the PhotoRabbit interviewer.

Talks to a running interview service: creates or loads a project, prints
the photo-summary opener, then runs chat turns through the same client the
web workspace uses, typing each reply out as it streams and offering the
quick-reply chips afterwards.

Usage:
    # Start the service first:
    uv run python interview_service.py

    # In another terminal, chat interactively:
    uv run python chat_cli.py --name Max --type dog --mood funny

    # Scripted turns against an existing project:
    uv run python chat_cli.py --project proj_123 --message "he loves the pond" --message "every day"
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Final, Optional, Sequence

import httpx

from photorabbit.chat_client import InterviewChatClient
from photorabbit.http_store import HttpMessageStore
from photorabbit.models import ProjectRecord
from photorabbit.pubsub import ChatEvent, ChatEventPublisher, ChatEventType
from photorabbit.quick_replies import OWN_STORY_REPLY, get_quick_replies
from photorabbit.store import StoreError

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger: logging.Logger = logging.getLogger(__name__)


# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS: Final[int] = 0
EXIT_CONNECTION_ERROR: Final[int] = 1
EXIT_SERVICE_UNHEALTHY: Final[int] = 2
EXIT_PROJECT_ERROR: Final[int] = 3
EXIT_INTERRUPTED: Final[int] = 130  # Standard SIGINT exit code


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_SERVICE_URL: Final[str] = "http://127.0.0.1:8787"
DEFAULT_SUBJECT_NAME: Final[str] = "Max"
DEFAULT_SUBJECT_TYPE: Final[str] = "dog"
RABBIT_PREFIX: Final[str] = "🐰 "
PROMPT: Final[str] = "you> "
QUIT_COMMANDS: Final[frozenset[str]] = frozenset({"/quit", "/exit"})


# =============================================================================
# Output
# =============================================================================

async def print_events(queue: asyncio.Queue[ChatEvent]) -> None:
    """Type out streamed replies and notices as they are published."""
    streaming = False
    while True:
        event = await queue.get()
        try:
            if event.event_type == ChatEventType.STREAMING:
                if not streaming:
                    sys.stdout.write(RABBIT_PREFIX)
                    streaming = True
                sys.stdout.write(event.delta or "")
                sys.stdout.flush()
            elif event.event_type == ChatEventType.MESSAGE and event.role == "assistant":
                if streaming:
                    sys.stdout.write("\n")
                    sys.stdout.flush()
                streaming = False
            elif event.event_type == ChatEventType.NOTICE:
                if streaming:
                    sys.stdout.write("\n")
                streaming = False
                print(f"[{event.level.value if event.level else 'info'}] {event.content}", flush=True)
        finally:
            queue.task_done()


def print_chips(chips: Sequence[str]) -> None:
    """Show quick-reply chips as numbered choices."""
    if not chips:
        return
    print("   " + "   ".join(f"[{i}] {chip}" for i, chip in enumerate(chips, 1)), flush=True)


def resolve_input(text: str, chips: Sequence[str]) -> Optional[str]:
    """
    Turn typed input into the message to send.

    A chip number sends that chip's text. The own-story chip sends nothing
    so the user can type their answer.
    """
    text = text.strip()
    if text.isdigit() and 1 <= int(text) <= len(chips):
        chip = chips[int(text) - 1]
        if chip == OWN_STORY_REPLY:
            print("Go ahead, tell it in your own words.", flush=True)
            return None
        return chip
    return text or None


# =============================================================================
# Service Calls
# =============================================================================

async def load_project(
    client: httpx.AsyncClient,
    project_id: Optional[str],
    subject_name: Optional[str],
    subject_type: Optional[str],
    mood: Optional[str],
) -> Optional[ProjectRecord]:
    """
    Fetch an existing project or create one.

    Returns:
        The project, or None if it could not be loaded or created.
    """
    if project_id:
        resp = await client.get(f"/projects/{project_id}")
        if resp.status_code == 200:
            return ProjectRecord.model_validate(resp.json())
        if resp.status_code != 404 or not subject_name:
            logger.error("Failed to load project %s: %d %s", project_id, resp.status_code, resp.text)
            return None

    body = {
        "id": project_id,
        "pet_name": subject_name or DEFAULT_SUBJECT_NAME,
        "pet_type": subject_type or DEFAULT_SUBJECT_TYPE,
        "mood": mood,
        "product_type": "storybook",
    }
    resp = await client.post("/projects", json={k: v for k, v in body.items() if v is not None})
    if resp.status_code != 201:
        logger.error("Failed to create project: %d %s", resp.status_code, resp.text)
        return None

    project = ProjectRecord.model_validate(resp.json())
    logger.info("Created project %s for %s", project.id, project.pet_name)
    return project


async def fetch_photo_context(
    client: httpx.AsyncClient,
    project_id: str,
) -> tuple[Optional[str], list[str]]:
    """Photo-summary opener (None without photos) and the photo captions."""
    summary_resp = await client.get(f"/projects/{project_id}/photo-summary")
    photos_resp = await client.get(f"/projects/{project_id}/photos")
    if summary_resp.status_code != 200 or photos_resp.status_code != 200:
        logger.warning("Photo context unavailable for %s", project_id)
        return None, []

    summary = summary_resp.json()
    captions = [
        photo["caption"]
        for photo in photos_resp.json().get("photos", [])
        if photo.get("caption")
    ]
    opener = summary.get("summary") if summary.get("photo_count") else None
    return opener, captions


# =============================================================================
# Chat Runner
# =============================================================================

async def run_chat(
    service_url: str,
    api_key: Optional[str],
    project_id: Optional[str],
    subject_name: Optional[str],
    subject_type: Optional[str],
    mood: Optional[str],
    autofill: bool,
    clear: bool,
    scripted_messages: Sequence[str],
) -> int:
    """
    Run an interview chat session against the service.

    Returns:
        Exit code indicating success or failure.
    """
    headers = {"Authorization": f"Bearer {api_key}"} if api_key else None

    async with httpx.AsyncClient(base_url=service_url, timeout=60.0) as http:
        logger.info("Checking interview service health...")
        try:
            resp = await http.get("/health")
            if resp.status_code != 200:
                logger.error("Service not healthy: %d", resp.status_code)
                return EXIT_SERVICE_UNHEALTHY
            logger.debug("Service healthy: %s", resp.json())
        except httpx.ConnectError:
            logger.error("Cannot connect to service at %s. Is it running?", service_url)
            logger.error("Start it with: uv run python interview_service.py")
            return EXIT_CONNECTION_ERROR

        project = await load_project(http, project_id, subject_name, subject_type, mood)
        if project is None:
            return EXIT_PROJECT_ERROR

        store = HttpMessageStore(http, headers=headers)
        try:
            if clear:
                removed = await store.delete_project(project.id)
                logger.info("Started fresh: removed %d messages", removed)
            if autofill:
                resp = await http.post(f"/projects/{project.id}/interview/autofill")
                resp.raise_for_status()
                logger.info("Autofilled %s messages", resp.json().get("inserted"))
            prior = await store.list_messages(project.id)
        except (StoreError, httpx.HTTPError) as e:
            logger.error("Failed to prepare interview for %s: %s", project.id, e)
            return EXIT_PROJECT_ERROR

        opener, captions = await fetch_photo_context(http, project.id)
        print("=" * 60)
        print(f"Interview for {project.pet_name} ({project.mood or 'heartfelt'}), project {project.id}")
        print("=" * 60)
        if opener and not prior:
            print(RABBIT_PREFIX + opener, flush=True)
        for message in prior:
            who = RABBIT_PREFIX if message.role.value == "assistant" else PROMPT
            print(f"{who}{message.content}")

        publisher = ChatEventPublisher()
        queue = await publisher.subscribe(replay_history=False)
        printer = asyncio.create_task(print_events(queue))

        chat = InterviewChatClient(
            project.id,
            store,
            chat_url=f"{service_url.rstrip('/')}/interview-chat",
            api_key=api_key,
            http_client=http,
            publisher=publisher,
        )

        chips: list[str] = []
        pending = list(scripted_messages)
        try:
            while True:
                if scripted_messages:
                    if not pending:
                        break
                    text: Optional[str] = pending.pop(0)
                    print(f"{PROMPT}{text}", flush=True)
                else:
                    try:
                        raw = await asyncio.to_thread(input, PROMPT)
                    except EOFError:
                        break
                    if raw.strip().lower() in QUIT_COMMANDS:
                        break
                    text = resolve_input(raw, chips)
                if not text:
                    continue

                try:
                    prior = await store.list_messages(project.id)
                except StoreError as e:
                    logger.error("Failed to load interview: %s", e)
                    return EXIT_PROJECT_ERROR

                result = await chat.send_message(
                    text,
                    prior,
                    project.pet_name,
                    project.pet_type,
                    photo_captions=captions or None,
                    photo_context_brief=project.photo_context_brief,
                    product_type=project.product_type,
                    mood=project.mood,
                )
                await queue.join()

                chips = get_quick_replies(result.content, project.pet_name, project.mood) if result.ok else []
                print_chips(chips)
        finally:
            printer.cancel()
            try:
                await printer
            except asyncio.CancelledError:
                pass
            await publisher.unsubscribe(queue)

    return EXIT_SUCCESS


def main(
    service_url: str | None = None,
    api_key: str | None = None,
    project_id: str | None = None,
    subject_name: str | None = None,
    subject_type: str | None = None,
    mood: str | None = None,
    autofill: bool = False,
    clear: bool = False,
    scripted_messages: Sequence[str] = (),
) -> int:
    """
    Main entry point for the chat CLI.

    Args:
        service_url: Interview service URL (defaults to env var or localhost:8787).
        api_key: Bearer token for the service (defaults to env var).
        project_id: Existing project to continue; created when missing and a name is given.
        subject_name: Subject's name for a new project.
        subject_type: Subject type for a new project.
        mood: Mood id for a new project.
        autofill: Load the seed transcript before chatting.
        clear: Delete the existing interview before chatting.
        scripted_messages: Send these turns instead of prompting.

    Returns:
        Exit code indicating success or failure.
    """
    resolved_url = service_url or os.environ.get("PHOTORABBIT_URL", DEFAULT_SERVICE_URL)
    resolved_key = api_key or os.environ.get("PHOTORABBIT_API_KEY") or None

    logger.info("Target: %s", resolved_url)

    try:
        return asyncio.run(
            run_chat(
                service_url=resolved_url,
                api_key=resolved_key,
                project_id=project_id,
                subject_name=subject_name,
                subject_type=subject_type,
                mood=mood,
                autofill=autofill,
                clear=clear,
                scripted_messages=scripted_messages,
            )
        )
    except KeyboardInterrupt:
        logger.info("\nChat interrupted")
        return EXIT_INTERRUPTED


def cli() -> None:
    """Command-line interface entry point with argument parsing."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Chat with the PhotoRabbit interviewer from the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # New project, interactive
    uv run python chat_cli.py --name Luna --type cat --mood memorial

    # Seeded project, one scripted turn
    uv run python chat_cli.py --project demo --name Max --autofill --message "he loves the pond"

Environment Variables:
    PHOTORABBIT_URL      Interview service URL (default: http://127.0.0.1:8787)
    PHOTORABBIT_API_KEY  Bearer token sent to the service
        """,
    )

    parser.add_argument("--service-url", type=str, default=None, help=f"Service URL (default: {DEFAULT_SERVICE_URL})")
    parser.add_argument("--api-key", type=str, default=None, help="Bearer token for the service")
    parser.add_argument("--project", type=str, default=None, dest="project_id", help="Project id to continue")
    parser.add_argument("--name", type=str, default=None, dest="subject_name", help="Subject's name for a new project")
    parser.add_argument("--type", type=str, default=None, dest="subject_type", help="Subject type, e.g. dog")
    parser.add_argument("--mood", type=str, default=None, help="funny, heartfelt, adventure or memorial")
    parser.add_argument("--autofill", action="store_true", help="Load the seed transcript first")
    parser.add_argument("--clear", action="store_true", help="Delete the existing interview first")
    parser.add_argument(
        "--message",
        action="append",
        default=[],
        dest="messages",
        help="Scripted user turn; repeat for several (interactive when omitted)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(
        main(
            service_url=args.service_url,
            api_key=args.api_key,
            project_id=args.project_id,
            subject_name=args.subject_name,
            subject_type=args.subject_type,
            mood=args.mood,
            autofill=args.autofill,
            clear=args.clear,
            scripted_messages=args.messages,
        )
    )


if __name__ == "__main__":
    cli()
