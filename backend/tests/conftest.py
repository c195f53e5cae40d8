from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from learnhub.config import Settings
from learnhub.progress import ProgressModel
from learnhub.storage import InMemoryKeyValueStore, ProgressStore
from learnhub.telemetry import clear_listeners


def lesson_document(sections: int = 2) -> Dict[str, Any]:
    return {
        "title": "Black Holes",
        "icon": "🕳️",
        "subtitle": "Where gravity wins",
        "description": "You'll know how black holes form and why light can't escape.",
        "sections": [
            {
                "title": f"Part {index + 1}",
                "icon": "🌌",
                "whyCare": "Black holes shape galaxies.",
                "keyPoints": [
                    "Massive stars collapse under their own gravity when fusion stops, forming a singularity.",
                    "The event horizon is the point of no return.",
                ],
                "realWorldExample": "GPS satellites correct for relativistic time effects.",
                "practiceQuestion": {
                    "question": "What is the event horizon?",
                    "options": ["A star", "The point of no return", "A planet", "A comet"],
                    "correctIndex": 1,
                    "explanation": "Nothing escapes once past it.",
                },
            }
            for index in range(sections)
        ],
    }


def anthropic_reply(text: str) -> Dict[str, Any]:
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
    }


class RecordingTransport:
    """Collects outbound requests and answers with a canned handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(ANTHROPIC_API_KEY="sk-ant-test-key")  # type: ignore[call-arg]


@pytest.fixture
def keyless_settings() -> Settings:
    return Settings(ANTHROPIC_API_KEY=None)  # type: ignore[call-arg]


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def progress_store(backend: InMemoryKeyValueStore) -> ProgressStore:
    return ProgressStore(backend)


@pytest.fixture
def progress(progress_store: ProgressStore) -> ProgressModel:
    return ProgressModel(progress_store)


@pytest.fixture(autouse=True)
def _reset_telemetry():
    yield
    clear_listeners()
