"""Tutor chat: one request per message, rendered as a transcript."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Literal, Optional

from .config import Settings
from .lesson_generation import LessonGenerationClient, LessonGenerationError
from .navigation import NavigationController
from .progress import ProgressModel, ProgressUpdate
from .telemetry import emit_event

logger = logging.getLogger(__name__)

ChatRole = Literal["user", "assistant", "error"]

TUTOR_PREAMBLE = (
    "You are a friendly, enthusiastic tutor helping someone learn. Be conversational and informal "
    "(like explaining to a friend). Keep responses concise but helpful. Use examples when possible."
)


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ChatReply:
    message: ChatMessage
    update: ProgressUpdate
    error: Optional[LessonGenerationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def ask_about_concept(concept_title: str) -> str:
    return f"Can you explain {concept_title} in more detail with examples?"


class ChatSession:
    def __init__(
        self,
        settings: Settings,
        client: LessonGenerationClient,
        progress: ProgressModel,
        navigation: Optional[NavigationController] = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._progress = progress
        self._navigation = navigation
        self._transcript: List[ChatMessage] = []

    @property
    def transcript(self) -> List[ChatMessage]:
        return list(self._transcript)

    def _context_line(self) -> str:
        if self._navigation is None:
            return ""
        lesson = self._navigation.current_lesson
        section = self._navigation.current_section
        if lesson is None or section is None:
            return ""
        return f'Context: They\'re currently learning about "{section.title}" in the "{lesson.title}" module.'

    def build_prompt(self, question: str) -> str:
        parts = [TUTOR_PREAMBLE, f"Student question: {question}"]
        context = self._context_line()
        if context:
            parts.append(context)
        return "\n\n".join(parts)

    def send(self, text: str) -> Optional[ChatReply]:
        """Send a learner message. Returns ``None`` for blank input.

        A missing credential raises ``ConfigurationError`` before anything is recorded. Upstream
        failures are appended to the transcript as error entries and returned on the reply.
        """
        question = text.strip()
        if not question:
            return None
        self._client.require_api_key()

        self._transcript.append(ChatMessage(role="user", text=question))
        update = self._progress.increment_chat_messages()
        emit_event("chat_message_sent", length=len(question))

        try:
            answer = self._client.complete(
                [{"role": "user", "content": self.build_prompt(question)}],
                max_tokens=self._settings.chat_max_tokens,
            )
        except LessonGenerationError as exc:
            logger.warning("Chat request failed (%s): %s", exc.kind, exc.message)
            message = ChatMessage(
                role="error",
                text=f"❌ Error: {exc.message}\n\nPlease check your API key in Settings (⚙️ button).",
            )
            self._transcript.append(message)
            return ChatReply(message=message, update=update, error=exc)

        message = ChatMessage(role="assistant", text=answer)
        self._transcript.append(message)
        return ChatReply(message=message, update=update)


__all__ = ["ChatMessage", "ChatReply", "ChatSession", "ask_about_concept"]
