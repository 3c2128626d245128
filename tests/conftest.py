"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides fake remote
services, a recording sleep and sample documents shared by the test modules.
"""

import sys
import json
import asyncio
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from doctranslate.core.documents import DocumentFile
from doctranslate.core.exceptions import ServiceUnavailableError
from doctranslate.core.llm import LLMProvider, LLMResponse
from doctranslate.core.retry import RetryPolicy


def llm_json(**fields) -> str:
    """Serialize a model answer the way providers return it"""
    return json.dumps(fields)


class RecordingSleep:
    """Stand-in for asyncio.sleep that records the requested delays"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)
        # Yield so concurrent runs interleave
        await asyncio.sleep(0)

    @property
    def total(self):
        return sum(self.delays)


class ScriptedOperation:
    """Zero-argument async operation that replays a script of results and errors"""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = 0

    async def __call__(self):
        step = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        if isinstance(step, BaseException):
            raise step
        return step


class FakeProvider(LLMProvider):
    """LLM provider answering from a script of strings or exceptions"""

    service_name = "fake"

    def __init__(self, *responses):
        super().__init__(model="fake-model", timeout=5)
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def queue(self, *responses):
        self.responses.extend(responses)

    async def generate(self, prompt, system_prompt=None, documents=None, json_output=False):
        self.calls.append({
            'prompt': prompt,
            'system_prompt': system_prompt,
            'documents': list(documents or []),
            'json_output': json_output
        })
        if not self.responses:
            raise AssertionError(f"FakeProvider has no scripted response for: {prompt[:80]}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return LLMResponse(content=response)

    async def close(self):
        self.closed = True


class FakeDocumentClient:
    """Document translation client returning scripted bytes or raising scripted errors"""

    service_name = "cloud-translation"

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    async def translate_document(self, content, mime_type, source_language, target_language):
        self.calls.append({
            'content': content,
            'mime_type': mime_type,
            'source_language': source_language,
            'target_language': target_language
        })
        if not self.responses:
            raise AssertionError("FakeDocumentClient has no scripted response")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self):
        self.closed = True


def unavailable(service="fake"):
    return ServiceUnavailableError(f"{service} HTTP 503 Service Unavailable", service=service)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def instant_policy():
    """Three attempts without real waiting"""
    return RetryPolicy(max_attempts=3, initial_delay=0.0, backoff_factor=2.0)


@pytest.fixture
def sample_document():
    return DocumentFile.from_bytes(b"Hello world. This is a short report.", "report.txt")


@pytest.fixture
def sample_text():
    return "Hello world. This is a short report."
