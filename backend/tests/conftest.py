"""
Shared test fixtures and configuration.
"""

import os
import tempfile

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", os.path.join(tempfile.gettempdir(), "accio_test_data"))
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")
os.environ.setdefault("LLM_API_KEY", "")

from accio.core.generation_client import GenerationClient  # noqa: E402
from accio.core.orchestrator import SessionOrchestrator  # noqa: E402
from accio.llm.base import LLMProvider, LLMResponse  # noqa: E402
from accio.storage import LocalStorage, SessionStore  # noqa: E402


BOTH_BLOCKS_REPLY = """Here is your button.

JSX:
```jsx
export default function RedButton() {
  return <button className="red-button">Click me</button>;
}
```

CSS:
```css
.red-button { background: red; }
```

Explanation:
A red button."""


class ScriptedProvider(LLMProvider):
    """LLM provider that replays canned replies and records each call."""

    name = "scripted"

    def __init__(self, replies=None, error=None):
        super().__init__(api_key="test-key", model="test-model")
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def chat_completion(self, messages, temperature=None, max_tokens=None, **kwargs):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.replies.pop(0), model=self.model)

    async def list_models(self):
        if self.error is not None:
            raise self.error
        return [{"id": "test-model"}]


@pytest.fixture
def both_blocks_reply():
    return BOTH_BLOCKS_REPLY


@pytest.fixture
def scripted_provider():
    """Factory: scripted_provider(replies=[...], error=Exception(...))."""
    return ScriptedProvider


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def session_store(storage):
    return SessionStore(storage)


@pytest.fixture
def make_orchestrator(session_store):
    """Build an orchestrator over the shared store with the given provider."""
    def _make(provider, serialize_turns=False):
        return SessionOrchestrator(
            session_store,
            GenerationClient(provider, temperature=0.7, max_tokens=2000),
            max_message_length=2000,
            serialize_turns=serialize_turns,
        )
    return _make
