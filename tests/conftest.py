import json
import threading
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

import main
import routes

TOPIC = "topic"
RESPOND = "respond"
ANALYZE = "analyze"
SCRIPT = "script"

# Markers that identify which prompt the model was handed
PROMPT_MARKERS = {
    TOPIC: "お題を生成する",
    RESPOND: "ツッコミ担当",
    ANALYZE: "翻訳学の専門家",
    SCRIPT: "漫才台本作家",
}


class BlockedResult:
    """A response whose candidate was blocked; reading .text raises like the real SDK."""

    @property
    def text(self):
        raise ValueError("response has no text")


class FakeGemini:
    """Stands in for genai.GenerativeModel and replays canned texts per prompt kind."""

    def __init__(self):
        self.replies = {TOPIC: [], RESPOND: [], ANALYZE: [], SCRIPT: []}
        self.calls = []
        self.fail = False
        self.blocked = False

    def queue(self, kind, reply):
        self.replies[kind].append(reply if isinstance(reply, str) else json.dumps(reply, ensure_ascii=False))

    def _kind(self, prompt):
        return next(kind for kind, marker in PROMPT_MARKERS.items() if marker in prompt)

    async def generate_content_async(self, prompt, generation_config=None):
        kind = self._kind(prompt)
        self.calls.append({
            "kind": kind,
            "prompt": prompt,
            "generation_config": generation_config,
            "thread": threading.get_ident(),
        })
        if self.fail:
            raise RuntimeError("model unavailable")
        if self.blocked:
            return BlockedResult()
        queued = self.replies[kind]
        text = queued.pop(0) if len(queued) > 1 else (queued[0] if queued else "")
        return SimpleNamespace(text=text)


@pytest.fixture
def fake_model(monkeypatch):
    fake = FakeGemini()
    monkeypatch.setattr(routes, "model", fake)
    monkeypatch.delenv("MURF_AI_API_KEY", raising=False)
    return fake


@pytest.fixture
def client(fake_model):
    return TestClient(main.app)


@pytest.fixture
def reply():
    def make(guess="おにぎり", correct=False):
        return {
            "guess": guess,
            "isCorrect": correct,
            "responseV1": f"ほな{guess}やないかい！",
            "responseV2": f"ほな{guess}と違うかぁ",
        }
    return make
