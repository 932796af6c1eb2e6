"""Shared fixtures: sample website data and a scripted completion client."""

import json
from typing import List, Optional

import pytest

from celestial.config import Settings
from celestial.services.completion import CompletionClient, CompletionError
from celestial.services.indexer import KnowledgeBase

WEBSITE_DATA = [
    {
        "title": "Courses Offered",
        "url": "https://college.example/courses",
        "sections": [
            {"heading": "Diploma Programmes", "content": "Diploma in Computer Engineering and Civil Engineering."},
            {"heading": "Duration", "content": "Each programme runs for three years."},
        ],
    },
    {
        "title": "Admissions",
        "url": "https://college.example/admissions",
        "content": "Admission is through the centralised admission process.",
    },
]


class FakeCompletionClient(CompletionClient):
    """Returns a fixed reply (or raises) and records every call."""

    def __init__(self, reply: Optional[str] = "Scripted answer.", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    async def complete(self, system_prompt, user_prompt, *, temperature, max_tokens):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def data_file(tmp_path):
    path = tmp_path / "websiteData.json"
    path.write_text(json.dumps(WEBSITE_DATA), encoding="utf-8")
    return path


@pytest.fixture()
def settings(data_file):
    return Settings(
        api_key="sk-test",
        model="test-model",
        data_path=data_file,
        preload_data=False,
        match_policy="phrase",
        max_context_chunks=8,
        greetings_enabled=True,
        short_circuit_no_match=False,
        assistant_name="Celestial",
        organization_name="Example Polytechnic",
    )


@pytest.fixture()
def knowledge_base(settings):
    return KnowledgeBase(settings.data_path)


@pytest.fixture()
def fake_client():
    return FakeCompletionClient()


@pytest.fixture()
def failing_client():
    return FakeCompletionClient(error=CompletionError("Completion API returned HTTP 502: bad gateway", 502))
