"""Shared pytest fixtures: a temp-dir asset store, a scripted AI client and the Flask app."""

import io
from pathlib import Path

import pytest
from PIL import Image

import config
from app import create_app
from utils.errors import AdapterError
from utils.storage import LocalAssetStore


def png_bytes(color=(255, 0, 0), size=(4, 4), fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


def comment_payload(text):
    return {
        "output": [
            {"type": "reasoning", "summary": []},
            {"type": "message", "content": [{"type": "output_text", "text": text}]},
        ]
    }


def style_payload(text):
    return {"output": [{"type": "message", "content": [{"type": "output_text", "text": text}]}]}


class FakeAIClient:
    """Stands in for ArkClient; replies are consumed in order, exceptions are raised."""

    def __init__(self, replies=None, default=None):
        self.replies = list(replies or [])
        self.default = default if default is not None else comment_payload("写得很认真")
        self.calls = []

    def call(self, image_ref, instruction):
        self.calls.append((image_ref, instruction))
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def store_root(tmp_path) -> Path:
    return tmp_path


@pytest.fixture
def store(store_root) -> LocalAssetStore:
    s = LocalAssetStore(store_root)
    s.ensure_dirs(config.ASSET_DIRS)
    return s


@pytest.fixture
def put_file(store_root):
    def _put(key, data=None):
        path = store_root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(png_bytes() if data is None else data)
        return path
    return _put


@pytest.fixture
def ai_client() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def app(store, ai_client):
    return create_app(
        overrides={"TESTING": True, "BATCH_DELAY_SECONDS": 0, "AI_API_KEY": "test-key"},
        store=store,
        ai_client=ai_client,
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def adapter_error():
    return AdapterError("502 Bad Gateway", status=502, body="upstream down")
