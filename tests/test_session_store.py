"""Tests for per-session slot state and history persistence."""

import pytest
import redis

from concierge.agents.conversation_state import ConversationPhase, ConversationSlots
from concierge.interfaces import session_store as session_store_module
from concierge.interfaces.session_store import ConversationSessionStore
from concierge.schemas.concierge_schemas import ServiceCategory


class FakeRedis:
    """Dict-backed stand-in for redis.Redis"""

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.data = {}
        self.ttls = {}

    def ping(self):
        return True

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        self.data.pop(key, None)


class UnreachableRedis(FakeRedis):

    def ping(self):
        raise redis.ConnectionError("connection refused")


class TestMemoryBackend:

    def test_unknown_session_is_idle(self, session_store):
        state = session_store.get_state("nope")
        assert state == ConversationSlots()
        assert state.phase == ConversationPhase.IDLE
        assert not session_store.exists("nope")
        assert session_store.backend == "memory"

    def test_state_round_trip(self, session_store):
        state = ConversationSlots().set_service(ServiceCategory.JET).add_info("from", "London").ask_next()
        session_store.save_state("s1", state)

        loaded = session_store.get_state("s1")
        assert loaded == state
        assert loaded.phase == ConversationPhase.COLLECTING_TO
        assert loaded.awaiting_slot == "to"

    def test_history_is_ordered_and_limited(self, session_store):
        for i in range(5):
            session_store.append_message("s1", "user" if i % 2 == 0 else "assistant", f"m{i}")

        assert [m["content"] for m in session_store.get_history("s1")] == ["m0", "m1", "m2", "m3", "m4"]
        assert [m["content"] for m in session_store.get_history("s1", limit=2)] == ["m3", "m4"]
        assert session_store.get_history("other") == []

    def test_current_dialogue_history(self, session_store):
        session_store.append_message("s1", "user", "helicopter from Zurich to Milan for 4 passengers")
        session_store.append_message("s1", "assistant", "Found 1 option")
        session_store.mark_dialogue_start("s1")
        session_store.append_message("s1", "user", "empty legs to Dubai")

        current = session_store.get_history("s1", current_dialogue=True)
        assert [m["content"] for m in current] == ["empty legs to Dubai"]
        assert len(session_store.get_history("s1")) == 3
        assert session_store.get_history("s1", limit=5, current_dialogue=True) == current

    def test_no_mark_means_whole_history(self, session_store):
        session_store.append_message("s1", "user", "hi")
        assert len(session_store.get_history("s1", current_dialogue=True)) == 1

    def test_saving_state_keeps_history(self, session_store):
        session_store.append_message("s1", "user", "I need a jet")
        session_store.save_state("s1", ConversationSlots().set_service(ServiceCategory.JET))
        assert len(session_store.get_history("s1")) == 1
        assert session_store.get_state("s1").current_service == ServiceCategory.JET

    def test_delete_reports_existence(self, session_store):
        session_store.append_message("s1", "user", "hi")
        assert session_store.delete_session("s1") is True
        assert session_store.delete_session("s1") is False
        assert session_store.get_history("s1") == []


class TestRedisBackend:

    def test_uses_redis_with_ttl(self, monkeypatch):
        monkeypatch.setattr(session_store_module.redis, "Redis", FakeRedis)
        store = ConversationSessionStore(ttl_hours=2)

        store.save_state("s1", ConversationSlots().set_service(ServiceCategory.HELICOPTER))

        assert store.backend == "redis"
        assert "concierge:session:s1" in store.redis_client.data
        assert store.redis_client.ttls["concierge:session:s1"] == 7200
        assert store._memory_store == {}
        assert store.get_state("s1").current_service == ServiceCategory.HELICOPTER

        assert store.delete_session("s1") is True
        assert store.redis_client.data == {}

    def test_falls_back_to_memory_when_unreachable(self, monkeypatch):
        monkeypatch.setattr(session_store_module.redis, "Redis", UnreachableRedis)
        store = ConversationSessionStore()

        assert store.backend == "memory"
        store.append_message("s1", "user", "hello")
        assert store.get_history("s1")[0]["content"] == "hello"


@pytest.mark.parametrize("slot", ["from", "to", "passengers"])
def test_awaiting_slot_survives_persistence(session_store, slot):
    state = ConversationSlots(current_service=ServiceCategory.EMPTY_LEG, awaiting_slot=slot)
    session_store.save_state("s1", state)
    assert session_store.get_state("s1").awaiting_slot == slot
