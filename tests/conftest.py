import asyncio
import copy
from unittest.mock import patch

import pytest

from checkout_gate.attributes.store import AttributeStore
from checkout_gate.core.errors import AttributeStoreError
from checkout_gate.store.models import CheckoutSession


class RecordingStore(AttributeStore):
    """In-process attribute store that records every attempted write."""

    def __init__(self, session_id="s1", fail_on=None):
        self.session_id = session_id
        self.fail_on = fail_on
        self.calls = []
        self.values = {}

    async def update_attribute(self, key, value):
        await asyncio.sleep(0)
        self.calls.append((key, value))
        if key == self.fail_on:
            raise AttributeStoreError(key, "rejected")
        self.values[key] = value

    async def get_attributes(self):
        return [{"key": k, "value": v} for k, v in sorted(self.values.items())]


@pytest.fixture
def make_store():
    return RecordingStore


@pytest.fixture
def memory_repo():
    """Replace the Redis session repo used by the orchestrator with a dict."""
    sessions = {}

    def _load(session_id):
        s = sessions.get(session_id)
        return copy.deepcopy(s) if s is not None else CheckoutSession(sessionId=session_id)

    def _save(session):
        sessions[session.sessionId] = copy.deepcopy(session)

    with patch("checkout_gate.core.orchestrator.load_session", side_effect=_load), \
         patch("checkout_gate.core.orchestrator.save_session", side_effect=_save):
        yield sessions
