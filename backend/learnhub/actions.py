"""Application context and the declarative event -> action table.

A rendering layer owns one ``AppContext`` and calls ``dispatch(context, event, payload)``
for every user gesture. Handlers never touch a UI toolkit; they return an ``ActionResult``
carrying the notification to show and any data to re-render.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

import httpx

from .catalog import LessonCatalog
from .chat import ChatSession
from .config import Settings, get_settings
from .discovery import SuggestionFeed, TopicSuggestion
from .lesson_generation import LessonGenerationClient, LessonGenerationError, prepare_upload
from .lessons import Lesson
from .navigation import NavigationController, NavigationError, NavigationState
from .progress import MODULE_COMPLETE_XP, QUIZ_CORRECT_XP, ProgressModel, ProgressUpdate
from .storage import KeyValueStore, PreferenceStore, ProgressStore, build_backend

logger = logging.getLogger(__name__)

NotificationLevel = Literal["success", "info", "warning", "error"]
_SETTINGS_HINT_KINDS = {"configuration", "authentication", "permission"}


@dataclass
class ActionResult:
    ok: bool = True
    notification: Optional[str] = None
    level: NotificationLevel = "info"
    data: Dict[str, Any] = field(default_factory=dict)
    suggest_settings: bool = False


@dataclass
class AppContext:
    settings: Settings
    backend: KeyValueStore
    preferences: PreferenceStore
    progress: ProgressModel
    catalog: LessonCatalog
    navigation: NavigationController
    generator: LessonGenerationClient
    chat: ChatSession
    suggestions: SuggestionFeed


def build_context(
    settings: Optional[Settings] = None,
    *,
    backend: Optional[KeyValueStore] = None,
    http_client: Optional[httpx.Client] = None,
    rng: Optional[random.Random] = None,
) -> AppContext:
    settings = settings or get_settings()
    backend = backend if backend is not None else build_backend(settings)
    preferences = PreferenceStore(backend)
    progress = ProgressModel(ProgressStore(backend))
    catalog = LessonCatalog(progress)
    navigation = NavigationController(catalog, progress)
    generator = LessonGenerationClient(
        settings,
        # a key saved in preferences wins over the server-side environment credential
        api_key_provider=lambda: preferences.api_key() or settings.anthropic_api_key,
        client=http_client,
    )
    return AppContext(
        settings=settings,
        backend=backend,
        preferences=preferences,
        progress=progress,
        catalog=catalog,
        navigation=navigation,
        generator=generator,
        chat=ChatSession(settings, generator, progress, navigation),
        suggestions=SuggestionFeed(rng=rng),
    )


# -- helpers -----------------------------------------------------------------


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload or payload[key] is None:
        raise ValueError(f"Missing '{key}' in action payload.")
    return payload[key]


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    # datetime is a date subclass; the stored visit keeps the calendar day only
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


def _as_index(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("'selected_index' must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("'selected_index' must be an integer.") from exc


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ValueError("Upload 'data' must be raw bytes.")


def _state_data(state: NavigationState) -> Dict[str, Any]:
    return {"lesson_id": state.lesson_id, "section_index": state.section_index}


def _progress_data(context: AppContext, update: ProgressUpdate) -> Dict[str, Any]:
    snapshot = context.progress.snapshot()
    notes: List[str] = []
    if update.changed_level:
        notes.append(f"🎉 Level Up! You're now level {snapshot.level}!")
    for achievement in update.unlocked:
        notes.append(f"{achievement.icon} Achievement unlocked: {achievement.name}")
    return {
        "xp": snapshot.xp,
        "level": snapshot.level,
        "streak": snapshot.streak,
        "xp_awarded": update.xp_awarded,
        "unlocked": [achievement.id for achievement in update.unlocked],
        "notes": notes,
    }


def _create_lesson(context: AppContext, generate: Callable[[], Lesson], message: str) -> ActionResult:
    # generation must fully succeed before anything is persisted
    lesson = generate()
    update = context.catalog.add_dynamic_lesson(lesson)
    state = context.navigation.open(lesson.id)
    return ActionResult(
        notification=message,
        level="success",
        data={"lesson": lesson, **_state_data(state), **_progress_data(context, update)},
    )


def _learn(context: AppContext, suggestion: TopicSuggestion) -> ActionResult:
    return _create_lesson(
        context,
        lambda: context.generator.generate_from_topic(suggestion.title),
        "Lesson created! Happy learning! 🎉",
    )


# -- handlers ----------------------------------------------------------------


def open_lesson(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    state = context.navigation.open(_require(payload, "lesson_id"))
    return ActionResult(data=_state_data(state))


def start_learning(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    return ActionResult(data=_state_data(context.navigation.start_learning()))


def next_section(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    update = context.navigation.next()
    return ActionResult(data={**_state_data(context.navigation.state), **_progress_data(context, update)})


def previous_section(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    return ActionResult(data=_state_data(context.navigation.previous()))


def finish_lesson(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    update = context.navigation.finish()
    notification = None
    if update.xp_awarded >= MODULE_COMPLETE_XP:
        notification = f"🎉 Module completed! +{MODULE_COMPLETE_XP} XP"
    return ActionResult(
        notification=notification,
        level="success",
        data={**_state_data(context.navigation.state), **_progress_data(context, update)},
    )


def back_to_home(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    return ActionResult(data=_state_data(context.navigation.back_to_home()))


def submit_quiz(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    outcome = context.navigation.submit_quiz(_as_index(_require(payload, "selected_index")))
    data = {
        "correct": outcome.correct,
        "correct_index": outcome.correct_index,
        "explanation": outcome.explanation,
        **_progress_data(context, outcome.update),
    }
    if outcome.correct:
        return ActionResult(notification=f"✓ Correct answer! +{QUIZ_CORRECT_XP} XP", level="success", data=data)
    return ActionResult(notification="Try reviewing the concepts again", level="info", data=data)


def search_topic(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    topic = str(payload.get("topic") or "")
    return _create_lesson(
        context,
        lambda: context.generator.generate_from_topic(topic),
        "Lesson created! Happy learning! 🎉",
    )


def learn_suggestion(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    topic_id = _require(payload, "topic_id")
    suggestion = context.suggestions.find(topic_id)
    if suggestion is None:
        return ActionResult(ok=False, notification=f"Unknown topic '{topic_id}'", level="error")
    return _learn(context, suggestion)


def learn_random(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    return _learn(context, context.suggestions.random_topic())


def daily_topic(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    suggestion = context.suggestions.daily_topic(_as_date(payload.get("today")))
    result = _learn(context, suggestion)
    result.data["topic_id"] = suggestion.id
    return result


def upload_file(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    filename = str(_require(payload, "filename"))
    # fail before reading the upload, as with every other generation path
    context.generator.require_api_key()
    upload = prepare_upload(
        filename,
        _as_bytes(_require(payload, "data")),
        payload.get("content_type"),
        pasted_text=payload.get("pasted_text"),
    )
    return _create_lesson(
        context,
        lambda: context.generator.generate_from_upload(upload),
        f"Lesson created from {filename}! 🎉",
    )


def send_chat(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    reply = context.chat.send(str(payload.get("message") or ""))
    if reply is None:
        return ActionResult(ok=False)
    data = {"message": reply.message, **_progress_data(context, reply.update)}
    if not reply.ok:
        return ActionResult(
            ok=False,
            notification="Failed to get AI response",
            level="error",
            data=data,
            suggest_settings=reply.error is not None and reply.error.kind in _SETTINGS_HINT_KINDS,
        )
    return ActionResult(data=data)


def toggle_bookmark(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    bookmarked = context.progress.toggle_bookmark(_require(payload, "topic_id"))
    if bookmarked:
        return ActionResult(notification="Bookmarked! 📌", level="success", data={"bookmarked": True})
    return ActionResult(notification="Bookmark removed", level="info", data={"bookmarked": False})


def skip_suggestion(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    context.suggestions.skip(_require(payload, "topic_id"))
    return ActionResult(notification="Topic skipped", level="info")


def save_api_key(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    looks_valid = context.preferences.save_api_key(str(payload.get("api_key") or ""))
    if not looks_valid:
        return ActionResult(notification='API key should start with "sk-ant-"', level="warning")
    return ActionResult(notification="API key saved! 🎉", level="success")


def clear_api_key(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    context.preferences.clear_api_key()
    return ActionResult(notification="API key cleared", level="info")


def check_api_key(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    try:
        context.generator.test_connection(api_key=payload.get("api_key") or None)
    except LessonGenerationError as exc:
        return ActionResult(
            ok=False,
            notification=f"❌ {exc.message}",
            level="error",
            suggest_settings=exc.kind in _SETTINGS_HINT_KINDS,
        )
    return ActionResult(notification="✓ API connection successful!", level="success")


def toggle_dark_mode(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    return ActionResult(data={"dark_mode": context.preferences.toggle_dark_mode()})


def record_visit(context: AppContext, payload: Mapping[str, Any]) -> ActionResult:
    update = context.progress.record_visit(_as_date(payload.get("today")))
    if update.streak_continued:
        return ActionResult(
            notification="🔥 Streak continued! Keep it up!",
            level="success",
            data=_progress_data(context, update),
        )
    return ActionResult(data=_progress_data(context, update))


ActionHandler = Callable[[AppContext, Mapping[str, Any]], ActionResult]

ACTIONS: Dict[str, ActionHandler] = {
    "open_lesson": open_lesson,
    "start_learning": start_learning,
    "next_section": next_section,
    "previous_section": previous_section,
    "finish_lesson": finish_lesson,
    "back_to_home": back_to_home,
    "submit_quiz": submit_quiz,
    "search_topic": search_topic,
    "learn_suggestion": learn_suggestion,
    "learn_random": learn_random,
    "daily_topic": daily_topic,
    "upload_file": upload_file,
    "send_chat": send_chat,
    "toggle_bookmark": toggle_bookmark,
    "skip_suggestion": skip_suggestion,
    "save_api_key": save_api_key,
    "clear_api_key": clear_api_key,
    "test_api_key": check_api_key,
    "toggle_dark_mode": toggle_dark_mode,
    "record_visit": record_visit,
}


def dispatch(context: AppContext, event: str, payload: Optional[Mapping[str, Any]] = None) -> ActionResult:
    """Run the handler registered for ``event``; unknown events raise ``KeyError``."""
    handler = ACTIONS[event]
    try:
        return handler(context, payload or {})
    except LessonGenerationError as exc:
        logger.warning("Action %s failed (%s): %s", event, exc.kind, exc.message)
        return ActionResult(
            ok=False,
            notification=exc.message,
            level="error",
            suggest_settings=exc.kind in _SETTINGS_HINT_KINDS,
        )
    except NavigationError as exc:
        return ActionResult(ok=False, notification=str(exc), level="warning")
    except ValueError as exc:
        return ActionResult(ok=False, notification=str(exc), level="error")


__all__ = [
    "ACTIONS",
    "ActionResult",
    "AppContext",
    "build_context",
    "dispatch",
]
