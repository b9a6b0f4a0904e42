import datetime as dt
import os
import tempfile

# Settings are read once at import time by app.deps
os.environ["DB_PATH"] = os.path.join(tempfile.mkdtemp(), "savings_coach_test.json")
os.environ["LLM_API_KEY"] = ""
os.environ["TELEGRAM_BOT_TOKEN"] = ""

import pytest  # noqa: E402

from app.db.repository import ChatRepository  # noqa: E402
from app.services.chat import ChatService  # noqa: E402

TODAY = dt.date(2024, 1, 15)

COFFEE_REPLY = (
    "Nice, let me log that for you!\n"
    '{"type": "expense", "amount": 12.50, "category": "food", '
    '"description": "coffee", "date": "2024-01-15"}\n'
    "Small treats add up, so keep an eye on them."
)

ADVICE_REPLY = (
    "Great question! Start by tracking every expense, then set a monthly "
    "budget per category and automate a transfer to savings on payday."
)


class ScriptedCompletionClient:
    """Stands in for CompletionClient, replaying canned completions."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


@pytest.fixture
def repo():
    return ChatRepository.in_memory()


@pytest.fixture
def make_service(repo):
    def _make(replies=None, error=None, **kwargs):
        client = ScriptedCompletionClient(replies, error)
        return ChatService(repo, client, clock=lambda: TODAY, **kwargs)

    return _make
