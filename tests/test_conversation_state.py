"""Tests for the slot-filling state machine."""

import dataclasses

import pytest

from concierge.agents.conversation_state import (
    ConversationPhase,
    ConversationSlots,
    SlotQuestion,
)
from concierge.schemas.concierge_schemas import ServiceCategory


class TestPhases:

    def test_idle_without_service(self):
        assert ConversationSlots().phase == ConversationPhase.IDLE

    def test_slots_are_collected_in_fixed_order(self):
        state = ConversationSlots().set_service(ServiceCategory.HELICOPTER)
        assert state.phase == ConversationPhase.COLLECTING_FROM

        state = state.add_info("to", "Milan")
        assert state.phase == ConversationPhase.COLLECTING_FROM
        assert state.next_question() == SlotQuestion("from", "Where will you be departing from?")

        state = state.add_info("from", "Zurich")
        assert state.phase == ConversationPhase.COLLECTING_PASSENGERS
        assert state.next_question().key == "passengers"

        state = state.add_info("passengers", "4")
        assert state.phase == ConversationPhase.COMPLETE
        assert state.is_complete()
        assert state.next_question() == SlotQuestion(None, None)

    def test_set_service_restarts_dialogue(self):
        state = (
            ConversationSlots()
            .set_service(ServiceCategory.JET)
            .add_info("from", "London")
            .ask_next()
        )
        restarted = state.set_service(ServiceCategory.EMPTY_LEG)
        assert restarted.current_service == ServiceCategory.EMPTY_LEG
        assert restarted.collected == {}
        assert restarted.awaiting_slot is None

    def test_reset_returns_idle(self):
        state = ConversationSlots().set_service(ServiceCategory.JET).add_info("from", "London")
        assert state.reset() == ConversationSlots()


class TestTransitions:

    def test_transitions_return_new_instances(self):
        state = ConversationSlots().set_service(ServiceCategory.JET)
        updated = state.add_info("from", "London")
        assert state.get("from") is None
        assert updated.get("from") == "London"

    def test_state_is_frozen(self):
        state = ConversationSlots()
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.awaiting_slot = "from"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_values_are_ignored(self, value):
        state = ConversationSlots().set_service(ServiceCategory.JET).ask_next()
        assert state.add_info("from", value) is state

    def test_answering_the_awaited_slot_clears_it(self):
        state = ConversationSlots().set_service(ServiceCategory.JET).ask_next()
        assert state.awaiting_slot == "from"

        updated = state.add_info("from", "London")
        assert updated.awaiting_slot is None
        assert updated.ask_next().awaiting_slot == "to"

    def test_other_slot_keeps_awaited_slot(self):
        state = ConversationSlots().set_service(ServiceCategory.JET).ask_next()
        assert state.add_info("passengers", "2").awaiting_slot == "from"

    def test_awaiting_slot_is_cleared_once_complete(self):
        state = (
            ConversationSlots()
            .set_service(ServiceCategory.JET)
            .add_info("from", "London")
            .add_info("to", "Nice")
            .ask_next()
        )
        assert state.awaiting_slot == "passengers"
        done = state.add_info("passengers", "2")
        assert done.is_complete()
        assert done.awaiting_slot is None
        assert done.ask_next().awaiting_slot is None


class TestSerialization:

    def test_round_trip(self):
        state = (
            ConversationSlots()
            .set_service(ServiceCategory.EMPTY_LEG)
            .add_info("from", "Nice")
            .ask_next()
        )
        data = state.to_dict()
        assert data == {
            "current_service": "empty_leg",
            "collected": {"from": "Nice"},
            "awaiting_slot": "to",
            "phase": "collecting_to",
        }
        assert ConversationSlots.from_dict(data) == state

    @pytest.mark.parametrize("data", [None, {}])
    def test_from_empty_dict_is_idle(self, data):
        assert ConversationSlots.from_dict(data) == ConversationSlots()
