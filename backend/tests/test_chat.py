from __future__ import annotations

import httpx
import pytest

from conftest import RecordingTransport, anthropic_reply
from learnhub.catalog import LessonCatalog
from learnhub.chat import ChatSession, ask_about_concept
from learnhub.config import Settings
from learnhub.lesson_generation import ConfigurationError, LessonGenerationClient
from learnhub.navigation import NavigationController
from learnhub.progress import ProgressModel


def _session(settings: Settings, transport: RecordingTransport, progress: ProgressModel) -> ChatSession:
    navigation = NavigationController(LessonCatalog(progress), progress)
    client = LessonGenerationClient(settings, client=transport.client())
    return ChatSession(settings, client, progress, navigation)


def test_reply_is_appended_and_counter_incremented(settings: Settings, progress: ProgressModel) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=anthropic_reply("Closures capture scope.")))
    session = _session(settings, transport, progress)

    reply = session.send("  What is a closure? ")

    assert reply.ok
    assert reply.message.text == "Closures capture scope."
    assert [message.role for message in session.transcript] == ["user", "assistant"]
    assert session.transcript[0].text == "What is a closure?"
    assert progress.snapshot().chat_message_count == 1
    assert [achievement.id for achievement in reply.update.unlocked] == ["chat_curious"]
    assert transport.last_json()["max_tokens"] == 1024


def test_prompt_carries_current_lesson_context(settings: Settings, progress: ProgressModel) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=anthropic_reply("ok")))
    navigation = NavigationController(LessonCatalog(progress), progress)
    session = ChatSession(settings, LessonGenerationClient(settings, client=transport.client()), progress, navigation)
    navigation.open("react_intro")

    session.send("Why props?")

    prompt = transport.last_json()["messages"][0]["content"]
    assert "Student question: Why props?" in prompt
    assert '"Components" in the "React Essentials" module' in prompt


def test_blank_message_is_ignored(settings: Settings, progress: ProgressModel) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=anthropic_reply("ok")))
    session = _session(settings, transport, progress)

    assert session.send("   ") is None
    assert session.transcript == []
    assert transport.requests == []
    assert progress.snapshot().chat_message_count == 0


def test_upstream_failure_becomes_error_entry(settings: Settings, progress: ProgressModel) -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(401, json={"error": {"type": "authentication_error"}})
    )
    session = _session(settings, transport, progress)

    reply = session.send("Hello?")

    assert not reply.ok
    assert reply.error.kind == "authentication"
    assert reply.message.role == "error"
    assert reply.message.text.startswith("❌ Error: Invalid API key.")
    assert "Settings (⚙️ button)" in reply.message.text
    assert [message.role for message in session.transcript] == ["user", "error"]


def test_missing_credential_records_nothing(keyless_settings: Settings, progress: ProgressModel) -> None:
    transport = RecordingTransport(lambda request: httpx.Response(200, json=anthropic_reply("ok")))
    session = _session(keyless_settings, transport, progress)

    with pytest.raises(ConfigurationError):
        session.send("Hello?")

    assert session.transcript == []
    assert progress.snapshot().chat_message_count == 0


def test_ask_about_concept_phrasing() -> None:
    assert ask_about_concept("Closures") == "Can you explain Closures in more detail with examples?"


def test_reply_without_text_becomes_error_entry(settings: Settings, progress: ProgressModel) -> None:
    transport = RecordingTransport(
        lambda request: httpx.Response(200, json={"content": [{"type": "text", "text": None}]})
    )
    session = _session(settings, transport, progress)

    reply = session.send("Hello?")

    assert not reply.ok
    assert reply.error.kind == "server"
    assert [message.role for message in session.transcript] == ["user", "error"]
