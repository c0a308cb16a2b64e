# agents/concierge_agent.py
"""
Concierge Agent (chat-facing)
Turns one chat message into a reply:

1. handle_message: pure step over (state, message, history) that decides
   whether to ask for a missing detail, search now, or just chat
2. process_message: loads the session, runs the step, executes the plan
   (search once, narrate) and persists the next state and history

Uses:
- Intent Parser for service / route / passenger extraction
- ConversationSlots for the from -> to -> passengers dialogue
- Search Aggregator for the concurrent multi-table search
- Narrator for LLM (or template) replies
"""

import uuid
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from ..config import settings
from ..interfaces.session_store import ConversationSessionStore, get_session_store
from ..llm.intent_parser import IntentParser, SearchFilter, intent_parser
from ..llm.narrator import Narrator, get_narrator
from ..schemas.concierge_schemas import ChatResponse, ResponseType, SearchResultSet, ServiceCategory
from .conversation_state import ConversationSlots
from .search_aggregator import SearchAggregator, get_search_aggregator


# Services that collect from / to / passengers before searching
SLOT_FILLED_SERVICES = (ServiceCategory.EMPTY_LEG, ServiceCategory.HELICOPTER, ServiceCategory.JET)

# Services searched straight from the first message
DIRECT_SEARCH_SERVICES = (ServiceCategory.YACHT, ServiceCategory.CAR, ServiceCategory.ADVENTURE)

SERVICE_INTROS = {
    ServiceCategory.HELICOPTER: "Great, helicopter charter. Note: Helicopter routes are limited to 700km for optimal efficiency.",
    ServiceCategory.EMPTY_LEG: "Perfect choice for value! Empty legs offer 30-50% savings on fixed routes.",
    ServiceCategory.JET: "Excellent, a private jet charter.",
}

SERVICE_NOUNS = {
    ServiceCategory.HELICOPTER: "helicopter",
    ServiceCategory.EMPTY_LEG: "empty legs",
    ServiceCategory.JET: "private jet",
}


class PlanAction(str, Enum):
    ASK = "ask"
    SEARCH = "search"
    CHAT = "chat"


@dataclass
class TurnPlan:
    """What to do with one message"""
    action: PlanAction
    question: Optional[str] = None
    awaiting_slot: Optional[str] = None
    search_filter: Optional[SearchFilter] = None
    query_text: Optional[str] = None


class ConciergeAgent:
    """
    Chat agent for luxury travel searches.

    Usage:
        agent = ConciergeAgent(aggregator, session_store, narrator)
        response = await agent.process_message("helicopter from Zurich to Milan for 4 passengers")
    """

    def __init__(
        self,
        aggregator: SearchAggregator,
        session_store: ConversationSessionStore,
        narrator: Narrator,
        parser: IntentParser = intent_parser,
        history_limit: int = 6,
    ):
        self.aggregator = aggregator
        self.session_store = session_store
        self.narrator = narrator
        self.parser = parser
        self.history_limit = history_limit

    # ============================================
    # Pure step
    # ============================================

    def handle_message(
        self,
        state: ConversationSlots,
        message: str,
        history: Optional[List[Dict[str, Any]]] = None,
        today: Optional[date] = None,
    ) -> Tuple[TurnPlan, ConversationSlots]:
        """
        Decide the next action for a message.

        Args:
            state: Slot state persisted after the previous message
            message: User's chat message
            history: Recent messages, oldest first
            today: Reference date for relative dates

        Returns:
            (plan, next_state) - next_state is what the caller persists
        """
        # 1. Answer to an outstanding question
        if state.current_service is not None and state.awaiting_slot:
            updated = state
            for key, value in self._slot_answers(state, message).items():
                updated = updated.add_info(key, value)
            return self._continue_dialogue(updated, intro=None)

        search_filter = self.parser.extract(message, history, today)
        service = search_filter.service_type

        # 2. Enough detail to search straight away
        if self.parser.is_direct_booking_request(message):
            return self._search_plan(search_filter, message), state.reset()

        # 3. Empty legs asked for as a listing
        if service == ServiceCategory.EMPTY_LEG and self.parser.has_direct_intent(message):
            return self._search_plan(search_filter, message), state.reset()

        # 4. Slot-filling dialogue
        if service in SLOT_FILLED_SERVICES:
            own = self.parser.extract(message, None, today)
            updated = (
                state.set_service(service)
                .add_info("from", own.from_location)
                .add_info("to", own.to_location)
                .add_info("passengers", own.passengers)
            )
            return self._continue_dialogue(updated, intro=SERVICE_INTROS.get(service))

        # 5. Request-style services
        if service in DIRECT_SEARCH_SERVICES:
            return self._search_plan(search_filter, message), state.reset()

        # 6. Free conversation
        return TurnPlan(action=PlanAction.CHAT), state

    def _slot_answers(self, state: ConversationSlots, message: str) -> Dict[str, Optional[str]]:
        """Slot values in an answer to the awaited question"""
        key = state.awaiting_slot
        if key == "passengers":
            count = self.parser.parse_passengers(message)
            return {key: str(count) if count else None}

        origin, destination = self.parser.extract_route(message)
        if key == "from":
            answers = {"from": origin or message.strip().strip(".,!?;:")}
            # "Zurich to Milan" answers the destination too
            if origin and destination and not state.get("to"):
                answers["to"] = destination
            return answers
        return {key: destination or message.strip().strip(".,!?;:")}

    def _continue_dialogue(
        self, state: ConversationSlots, intro: Optional[str]
    ) -> Tuple[TurnPlan, ConversationSlots]:
        if state.is_complete():
            search_filter = SearchFilter(
                service_type=state.current_service,
                from_location=state.get("from"),
                to_location=state.get("to"),
                passengers=self.parser.parse_passengers(state.get("passengers") or ""),
            )
            noun = SERVICE_NOUNS.get(state.current_service, state.current_service.value)
            query_text = (
                f"{noun} from {search_filter.from_location} to {search_filter.to_location} "
                f"for {search_filter.passengers} passengers"
            )
            search_filter.raw_query = query_text
            return self._search_plan(search_filter, query_text), state.reset()

        state = state.ask_next()
        question = state.next_question().question
        text = f"{intro} {question}" if intro else question
        return TurnPlan(action=PlanAction.ASK, question=text, awaiting_slot=state.awaiting_slot), state

    def _search_plan(self, search_filter: SearchFilter, query_text: str) -> TurnPlan:
        return TurnPlan(action=PlanAction.SEARCH, search_filter=search_filter, query_text=query_text)

    # ============================================
    # Session-backed processing
    # ============================================

    async def process_message(
        self,
        message: str,
        session_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ChatResponse:
        """
        Process a user message and generate a response.
        Main entry point for chat.
        """
        session_id = session_id or f"sess_{uuid.uuid4().hex[:12]}"
        state = self.session_store.get_state(session_id)
        history = self.session_store.get_history(session_id, self.history_limit, current_dialogue=True)

        plan, next_state = self.handle_message(state, message, history, today)
        logger.info(
            f"Session {session_id}: {state.phase.value} -> {next_state.phase.value}, action={plan.action.value}"
        )

        self.session_store.append_message(session_id, "user", message)

        if plan.action == PlanAction.ASK:
            response = ChatResponse(
                response=plan.question,
                session_id=session_id,
                type=ResponseType.CLARIFICATION,
                awaiting_slot=plan.awaiting_slot,
            )
        elif plan.action == PlanAction.SEARCH:
            response = await self._run_search(plan, session_id, today)
        else:
            reply = await self.narrator.reply(message, history)
            response = ChatResponse(response=reply, session_id=session_id, type=ResponseType.RESPONSE)

        # The reset state is only persisted once the search has run
        self.session_store.save_state(session_id, next_state)
        self.session_store.append_message(session_id, "assistant", response.response)
        if plan.action == PlanAction.SEARCH:
            # Details of a searched request never carry into the next one
            self.session_store.mark_dialogue_start(session_id)
        return response

    async def _run_search(self, plan: TurnPlan, session_id: str, today: Optional[date]) -> ChatResponse:
        search_filter = plan.search_filter
        results: SearchResultSet = await self.aggregator.search_all(search_filter.to_search_query(), today)

        service = search_filter.service_type
        service = None if service == ServiceCategory.UNKNOWN else service

        if results.is_empty:
            text = await self.narrator.no_results(plan.query_text)
            response_type = ResponseType.NO_RESULTS
        else:
            text = await self.narrator.summarize(plan.query_text, results, service)
            response_type = ResponseType.RESULTS

        return ChatResponse(
            response=text,
            session_id=session_id,
            type=response_type,
            filters=search_filter.to_dict(),
            results=results,
        )

    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """State and history for a session; None when unknown"""
        if not self.session_store.exists(session_id):
            return None
        return {
            "session_id": session_id,
            "state": self.session_store.get_state(session_id).to_dict(),
            "messages": self.session_store.get_history(session_id),
        }

    def clear_session(self, session_id: str) -> bool:
        return self.session_store.delete_session(session_id)


# Singleton instance
_concierge_agent_instance: Optional[ConciergeAgent] = None


def get_concierge_agent() -> ConciergeAgent:
    """Get singleton ConciergeAgent wired to the configured services"""
    global _concierge_agent_instance
    if _concierge_agent_instance is None:
        _concierge_agent_instance = ConciergeAgent(
            aggregator=get_search_aggregator(),
            session_store=get_session_store(),
            narrator=get_narrator(),
            history_limit=settings.HISTORY_LIMIT,
        )
    return _concierge_agent_instance
