"""Shared fixtures for the page generation tests."""

import json
from unittest.mock import AsyncMock

import pytest

from pagesmith.models import (
    Attachment,
    ConversationEntry,
    GenerateRequest,
    ModelReply,
    SessionFiles,
)

PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="
JPEG_DATA_URL = "data:image/jpeg;base64,/9j/4AAQSkZJRg=="


@pytest.fixture
def files() -> SessionFiles:
    return SessionFiles(
        html="<!DOCTYPE html>\n<html><body><h1>Hello</h1></body></html>",
        css="h1 { color: red; }",
        js="console.log('hi');",
    )


@pytest.fixture
def make_request(files):
    def factory(**overrides) -> GenerateRequest:
        data = {
            "session_id": "session-1",
            "instructions": "Make the heading blue",
            "conversation": [
                ConversationEntry(role="user", content="Create a landing page"),
                ConversationEntry(role="assistant", content="Created a landing page"),
            ],
            "files": files,
            "attachments": [Attachment(selector="h1", data_url=PNG_DATA_URL)],
            "allow_variants": False,
        }
        data.update(overrides)
        return GenerateRequest(**data)

    return factory


@pytest.fixture
def invoker():
    """Invoker double returning a well-formed JSON reply by default"""
    fake = AsyncMock()
    fake.invoke.return_value = ModelReply(
        text=json.dumps(
            {
                "summary": "Made the heading blue.",
                "files": {
                    "html": "<h1>Hello</h1>",
                    "css": "h1 { color: blue; }",
                    "js": "",
                },
            }
        )
    )
    return fake
