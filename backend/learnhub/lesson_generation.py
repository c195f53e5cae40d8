"""Client for model-generated lessons, chat replies and connection checks.

The model is asked for a JSON lesson but is not guaranteed to return only JSON, so the
document is cut out of the reply (first ``{`` to last ``}``) and validated before any
lesson is built. Nothing here touches learner progress; callers persist a lesson only after
``generate_*`` has returned it.
"""

from __future__ import annotations

import base64
import json
import logging
import threading
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from .config import Settings
from .lessons import Concept, Example, Lesson, Quiz, Section, SectionContent
from .telemetry import emit_event

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".txt", ".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png"}
ALLOWED_CONTENT_TYPES = {
    "text/plain",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/jpg",
    "image/png",
}
MIN_CONTENT_CHARS = 50
MAX_CONTENT_CHARS = 8000
PREVIEW_CHARS = 60
CONNECTION_TEST_MAX_TOKENS = 50
MIN_SECTIONS = 2
MAX_SECTIONS = 3
MIN_QUIZ_OPTIONS = 2


class LessonGenerationError(RuntimeError):
    """Base class for failures talking to the model API."""

    kind = "generation"

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(LessonGenerationError):
    kind = "configuration"


class UpstreamAuthenticationError(LessonGenerationError):
    kind = "authentication"


class UpstreamPermissionError(LessonGenerationError):
    kind = "permission"


class RateLimitError(LessonGenerationError):
    kind = "rate_limit"


class QuotaExceededError(LessonGenerationError):
    kind = "quota"


class UpstreamServerError(LessonGenerationError):
    kind = "server"


class InvalidLessonFormatError(LessonGenerationError):
    kind = "invalid_format"


class TransportError(LessonGenerationError):
    kind = "transport"


class UnsupportedInputError(LessonGenerationError):
    kind = "unsupported_input"


_UPSTREAM_ERRORS = {
    "authentication_error": (UpstreamAuthenticationError, "Invalid API key. Please check your settings."),
    "permission_error": (UpstreamPermissionError, "API key lacks required permissions."),
    "rate_limit_error": (RateLimitError, "Rate limit exceeded. Please wait a moment."),
    "insufficient_quota": (QuotaExceededError, "API quota exceeded. Please check your billing."),
}


def error_from_response(status_code: int, body: Any) -> LessonGenerationError:
    """Map a non-success response and its ``{error: {type, message}}`` body to a typed error."""
    fallback = f"API Error ({status_code})"
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return UpstreamServerError(fallback, status_code=status_code)
    error_type = error.get("type")
    if error_type in _UPSTREAM_ERRORS:
        error_cls, message = _UPSTREAM_ERRORS[error_type]
        return error_cls(message, status_code=status_code)
    message = error.get("message") or fallback
    return UpstreamServerError(str(message), status_code=status_code)


# -- response payloads ---------------------------------------------------------


class GeneratedSectionPayload(BaseModel):
    title: str = Field(..., min_length=1)
    icon: Optional[str] = None
    why_care: Optional[str] = Field(None, validation_alias=AliasChoices("whyCare", "why_care"))
    key_points: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("keyPoints", "key_points"),
    )
    real_world_example: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("realWorldExample", "real_world_example"),
    )
    practice_question: Quiz = Field(
        ...,
        validation_alias=AliasChoices("practiceQuestion", "practice_question"),
    )

    @field_validator("practice_question")
    @classmethod
    def _answerable(cls, quiz: Quiz) -> Quiz:
        if len(quiz.options) < MIN_QUIZ_OPTIONS:
            raise ValueError(f"practice question needs at least {MIN_QUIZ_OPTIONS} options")
        return quiz


class GeneratedLessonPayload(BaseModel):
    title: str = Field(..., min_length=1)
    icon: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    sections: List[GeneratedSectionPayload] = Field(..., min_length=MIN_SECTIONS)

    @field_validator("sections")
    @classmethod
    def _cap_sections(cls, sections: List[GeneratedSectionPayload]) -> List[GeneratedSectionPayload]:
        if len(sections) > MAX_SECTIONS:
            logger.info("Generated lesson has %s sections; keeping the first %s", len(sections), MAX_SECTIONS)
        return sections[:MAX_SECTIONS]


def extract_json_document(text: str) -> Dict[str, Any]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise InvalidLessonFormatError("Invalid lesson format from AI")
    try:
        document = json.loads(text[start : end + 1])
    except ValueError as exc:
        raise InvalidLessonFormatError("Invalid lesson format from AI") from exc
    if not isinstance(document, dict):
        raise InvalidLessonFormatError("Invalid lesson format from AI")
    return document


def parse_lesson_payload(text: str) -> GeneratedLessonPayload:
    document = extract_json_document(text)
    try:
        return GeneratedLessonPayload.model_validate(document)
    except ValidationError as exc:
        raise InvalidLessonFormatError("Invalid lesson format from AI") from exc


def _preview(point: str) -> str:
    return f"{point[:PREVIEW_CHARS]}..."


def build_lesson(
    payload: GeneratedLessonPayload,
    *,
    lesson_id: str,
    default_icon: str,
    duration: str,
    difficulty: str,
    example_title: str,
    source_file: Optional[str] = None,
) -> Lesson:
    sections = []
    for index, section in enumerate(payload.sections):
        content = SectionContent(
            why_care=section.why_care,
            concepts=[
                Concept(title=f"Key Point {position}", preview=_preview(point), details=point)
                for position, point in enumerate(section.key_points, start=1)
            ],
            examples=(
                [Example(title=example_title, code="", explanation=section.real_world_example)]
                if section.real_world_example
                else []
            ),
            quiz=section.practice_question,
        )
        sections.append(
            Section(
                id=f"section_{index}",
                title=section.title,
                icon=section.icon or "📝",
                content=content,
            )
        )
    return Lesson(
        id=lesson_id,
        title=payload.title,
        icon=payload.icon or default_icon,
        subtitle=payload.subtitle,
        description=payload.description,
        duration=duration,
        difficulty=difficulty,
        is_dynamic=True,
        source_file=source_file,
        sections=sections,
    )


# -- prompts -------------------------------------------------------------------

_LESSON_FORMAT = """{
  "title": "Topic Title",
  "icon": "relevant emoji",
  "subtitle": "short engaging description",
  "description": "what learner will know after",
  "sections": [
    {
      "title": "Section Name",
      "icon": "emoji",
      "whyCare": "Why this matters in real life (2-3 sentences)",
      "keyPoints": ["Point 1", "Point 2", "Point 3"],
      "realWorldExample": "Concrete example they can relate to",
      "practiceQuestion": {
        "question": "Scenario-based question",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correctIndex": 0,
        "explanation": "Why this answer is correct"
      }
    }
  ]
}"""


def topic_prompt(topic: str) -> str:
    return (
        f'Create an interactive learning lesson about "{topic}".\n\n'
        "You are a friendly, enthusiastic tutor. Structure the lesson as JSON with this EXACT format:\n\n"
        f"{_LESSON_FORMAT}\n\n"
        "Make it:\n- Conversational like explaining to a friend\n- Include 2-3 sections\n"
        "- Use real-world examples people care about\n- Make practice questions interesting scenarios\n"
        "- Be engaging and fun!\n\nReturn ONLY valid JSON, no other text."
    )


def content_prompt(filename: str, text: str, *, from_image: bool = False) -> str:
    truncated = len(text) > MAX_CONTENT_CHARS
    parts = [f'I have this learning content from a file called "{filename}":']
    if from_image:
        parts.append("[Note: This is from an image file, so extract visible text and concepts]")
    if text:
        parts.append(f"Content:\n{text[:MAX_CONTENT_CHARS]}")
    if truncated:
        parts.append("[Content truncated...]")
    parts.append(
        "Create an interactive learning lesson based on this content. "
        "Structure it as JSON with this EXACT format:\n\n"
        f"{_LESSON_FORMAT}\n\n"
        "Make it:\n- Conversational like explaining to a friend\n- Include 2-3 sections based on the content\n"
        "- Extract the most important concepts from the material\n"
        "- Make practice questions test understanding of the content\n- Be engaging and fun!\n\n"
        "Return ONLY valid JSON, no other text."
    )
    return "\n\n".join(parts)


# -- uploads -------------------------------------------------------------------


@dataclass(frozen=True)
class UploadedContent:
    filename: str
    text: str = ""
    image_base64: Optional[str] = None
    media_type: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.image_base64 is not None


def prepare_upload(
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
    *,
    pasted_text: Optional[str] = None,
) -> UploadedContent:
    """Validate an uploaded file and turn it into prompt-ready content.

    PDFs are not parsed server-side; the learner supplies key text via ``pasted_text``.
    Raises ``UnsupportedInputError`` before any network call for disallowed types or files
    without enough readable text.
    """
    suffix = PurePath(filename).suffix.lower()
    if content_type not in ALLOWED_CONTENT_TYPES and suffix not in ALLOWED_EXTENSIONS:
        raise UnsupportedInputError("Unsupported file type. Please upload PDF, TXT, DOC, DOCX, or images.")

    if (content_type or "").startswith("image/") or suffix in {".jpg", ".jpeg", ".png"}:
        media_type = "image/png" if suffix == ".png" or content_type == "image/png" else "image/jpeg"
        if not data:
            raise UnsupportedInputError("The uploaded image is empty.")
        return UploadedContent(
            filename=filename,
            image_base64=base64.b64encode(data).decode("ascii"),
            media_type=media_type,
        )

    if content_type == "application/pdf" or suffix == ".pdf":
        if not pasted_text:
            raise UnsupportedInputError(
                "PDF text can't be extracted automatically. Paste some key text from the PDF to continue."
            )
        text = pasted_text
    else:
        text = data.decode("utf-8", errors="replace")

    if len(text.strip()) < MIN_CONTENT_CHARS:
        raise UnsupportedInputError("Could not extract enough content from file. Try a text-based file.")
    return UploadedContent(filename=filename, text=text)


# -- client --------------------------------------------------------------------


def _response_text(data: Any) -> str:
    blocks = data.get("content") if isinstance(data, dict) else None
    if not isinstance(blocks, list):
        raise UpstreamServerError("Unexpected response from the model API.")
    texts = [
        block["text"]
        for block in blocks
        if isinstance(block, dict) and block.get("type", "text") == "text" and isinstance(block.get("text"), str)
    ]
    if not texts:
        raise UpstreamServerError("Unexpected response from the model API.")
    return "".join(texts)


class LessonGenerationClient:
    def __init__(
        self,
        settings: Settings,
        *,
        api_key_provider: Optional[Callable[[], Optional[str]]] = None,
        client: Optional[httpx.Client] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._api_key_provider = api_key_provider or (lambda: settings.anthropic_api_key)
        self._client = client
        self._clock = clock
        self._id_lock = threading.Lock()
        self._last_stamp = 0

    def has_credential(self) -> bool:
        return bool(self._api_key_provider())

    def require_api_key(self) -> str:
        key = self._api_key_provider()
        if not key:
            raise ConfigurationError("Please set your Claude API key first")
        return key

    def complete(
        self,
        messages: List[Dict[str, Any]],
        *,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> str:
        """Send ``messages`` and return the concatenated text of the reply."""
        key = api_key or self.require_api_key()
        settings = self._settings
        body: Dict[str, Any] = {
            "model": model or settings.default_model,
            "max_tokens": max_tokens or settings.default_max_tokens,
            "messages": messages,
        }
        headers = {"content-type": "application/json", "anthropic-version": settings.anthropic_version}
        if settings.lesson_api_via_proxy:
            body["apiKey"] = key
        else:
            headers["x-api-key"] = key

        local_client = self._client or httpx.Client(timeout=settings.request_timeout_seconds)
        close_client = self._client is None
        try:
            response = local_client.post(settings.resolved_lesson_api_url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Model API request failed: %s", exc)
            raise TransportError("Network error - check your connection") from exc
        finally:
            if close_client:
                local_client.close()

        try:
            data = response.json()
        except ValueError:
            data = None
        if response.is_error:
            error = error_from_response(response.status_code, data)
            logger.warning("Model API returned %s (%s): %s", response.status_code, error.kind, data)
            raise error
        return _response_text(data)

    def _lesson_id(self, prefix: str) -> str:
        # ids stay strictly increasing even when two lessons are built in the same millisecond
        with self._id_lock:
            stamp = max(int(self._clock() * 1000), self._last_stamp + 1)
            self._last_stamp = stamp
        return f"{prefix}_{stamp}"

    def _generate(self, content: Any, *, source: str, build: Callable[[GeneratedLessonPayload], Lesson]) -> Lesson:
        started = time.perf_counter()
        try:
            text = self.complete([{"role": "user", "content": content}])
            lesson = build(parse_lesson_payload(text))
        except LessonGenerationError as exc:
            emit_event("lesson_generation_failed", source=source, kind=exc.kind)
            raise
        emit_event(
            "lesson_generated",
            source=source,
            lesson_id=lesson.id,
            sections=len(lesson.sections),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        return lesson

    def generate_from_topic(self, topic: str) -> Lesson:
        cleaned = topic.strip()
        if not cleaned:
            raise UnsupportedInputError("Please enter a topic to learn about")
        return self._generate(
            topic_prompt(cleaned),
            source="topic",
            build=lambda payload: build_lesson(
                payload,
                lesson_id=self._lesson_id("topic"),
                default_icon="📖",
                duration="Custom",
                difficulty="AI-Generated",
                example_title="Real-World Example",
            ),
        )

    def generate_from_upload(self, upload: UploadedContent) -> Lesson:
        prompt = content_prompt(upload.filename, upload.text, from_image=upload.is_image)
        content: Any = prompt
        if upload.is_image:
            content = [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": upload.media_type, "data": upload.image_base64},
                },
                {"type": "text", "text": prompt},
            ]
        return self._generate(
            content,
            source="file",
            build=lambda payload: build_lesson(
                payload,
                lesson_id=self._lesson_id("file"),
                default_icon="📄",
                duration="From File",
                difficulty="Custom Content",
                example_title="From Your Content",
                source_file=upload.filename,
            ),
        )

    def test_connection(self, api_key: Optional[str] = None) -> str:
        return self.complete(
            [{"role": "user", "content": 'Say "API connection successful!" and nothing else.'}],
            max_tokens=CONNECTION_TEST_MAX_TOKENS,
            api_key=api_key,
        )


__all__ = [
    "ConfigurationError",
    "GeneratedLessonPayload",
    "InvalidLessonFormatError",
    "LessonGenerationClient",
    "LessonGenerationError",
    "QuotaExceededError",
    "RateLimitError",
    "TransportError",
    "UnsupportedInputError",
    "UploadedContent",
    "UpstreamAuthenticationError",
    "UpstreamPermissionError",
    "UpstreamServerError",
    "build_lesson",
    "content_prompt",
    "error_from_response",
    "extract_json_document",
    "parse_lesson_payload",
    "prepare_upload",
    "topic_prompt",
]
