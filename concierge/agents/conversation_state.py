# agents/conversation_state.py
"""
Slot-filling state for booking dialogues.

ConversationSlots is immutable: every transition returns a new instance,
and the caller threads the returned state into the next message. The three
required slots are always asked for in the same order: from, to, passengers.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

from ..schemas.concierge_schemas import ServiceCategory


REQUIRED_SLOTS = ("from", "to", "passengers")

SLOT_QUESTIONS = {
    "from": "Where will you be departing from?",
    "to": "Where would you like to go?",
    "passengers": "How many passengers will be travelling?",
}


class ConversationPhase(str, Enum):
    IDLE = "idle"
    COLLECTING_FROM = "collecting_from"
    COLLECTING_TO = "collecting_to"
    COLLECTING_PASSENGERS = "collecting_passengers"
    COMPLETE = "complete"


_PHASE_FOR_SLOT = {
    "from": ConversationPhase.COLLECTING_FROM,
    "to": ConversationPhase.COLLECTING_TO,
    "passengers": ConversationPhase.COLLECTING_PASSENGERS,
}


class SlotQuestion(NamedTuple):
    key: Optional[str]
    question: Optional[str]


@dataclass(frozen=True)
class ConversationSlots:
    """Collected booking details for one dialogue"""
    current_service: Optional[ServiceCategory] = None
    collected: Dict[str, str] = field(default_factory=dict)
    awaiting_slot: Optional[str] = None

    @property
    def phase(self) -> ConversationPhase:
        if self.current_service is None:
            return ConversationPhase.IDLE
        missing = self._first_missing()
        if missing is None:
            return ConversationPhase.COMPLETE
        return _PHASE_FOR_SLOT[missing]

    def set_service(self, service: ServiceCategory) -> "ConversationSlots":
        """Start a new dialogue for a service with no slots collected"""
        return ConversationSlots(current_service=service)

    def add_info(self, key: str, value: Any) -> "ConversationSlots":
        """Store a slot value; blank values are ignored"""
        text = "" if value is None else str(value).strip()
        if not text:
            return self
        awaiting = None if key == self.awaiting_slot else self.awaiting_slot
        updated = replace(self, collected={**self.collected, key: text}, awaiting_slot=awaiting)
        if updated.is_complete():
            return replace(updated, awaiting_slot=None)
        return updated

    def next_question(self) -> SlotQuestion:
        missing = self._first_missing()
        if missing is None:
            return SlotQuestion(None, None)
        return SlotQuestion(missing, SLOT_QUESTIONS[missing])

    def ask_next(self) -> "ConversationSlots":
        """Mark the next missing slot as awaited (None once complete)"""
        return replace(self, awaiting_slot=self._first_missing())

    def is_complete(self) -> bool:
        return self._first_missing() is None

    def reset(self) -> "ConversationSlots":
        return ConversationSlots()

    def get(self, key: str) -> Optional[str]:
        return self.collected.get(key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_service": self.current_service.value if self.current_service else None,
            "collected": dict(self.collected),
            "awaiting_slot": self.awaiting_slot,
            "phase": self.phase.value,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ConversationSlots":
        if not data:
            return cls()
        service = data.get("current_service")
        return cls(
            current_service=ServiceCategory(service) if service else None,
            collected=dict(data.get("collected") or {}),
            awaiting_slot=data.get("awaiting_slot"),
        )

    def _first_missing(self) -> Optional[str]:
        for key in REQUIRED_SLOTS:
            if not (self.collected.get(key) or "").strip():
                return key
        return None
