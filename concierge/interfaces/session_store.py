# interfaces/session_store.py
"""
Conversation Session Store
Persists the slot-filling state and recent message history per chat session,
so a dialogue survives across HTTP requests.

Redis when reachable (keys expire after SESSION_TTL_HOURS), otherwise an
in-process dict. A stalled dialogue is cleared by that expiry.
"""

import json
from datetime import datetime
from typing import Optional, Dict, Any, List

import redis
from loguru import logger

from ..agents.conversation_state import ConversationSlots
from ..config import settings


class ConversationSessionStore:
    """
    Stores ConversationSlots and chat history for each session_id.

    Usage:
        store = ConversationSessionStore(use_redis=False)
        state = store.get_state("sess_1")
        store.save_state("sess_1", state.set_service(ServiceCategory.JET))
    """

    def __init__(
        self,
        redis_host: str = "localhost",
        redis_port: int = 6379,
        redis_db: int = 0,
        ttl_hours: int = 24,
        use_redis: bool = True,
    ):
        self.ttl_seconds = ttl_hours * 3600
        self.redis_client: Optional[redis.Redis] = None
        self._memory_store: Dict[str, Dict[str, Any]] = {}

        if use_redis:
            try:
                self.redis_client = redis.Redis(
                    host=redis_host,
                    port=redis_port,
                    db=redis_db,
                    decode_responses=True
                )
                self.redis_client.ping()
                logger.info(f"ConversationSessionStore connected to Redis at {redis_host}:{redis_port}")
            except redis.RedisError as e:
                logger.warning(f"Redis connection failed, using in-memory store: {e}")
                self.redis_client = None
        else:
            logger.info("ConversationSessionStore using in-memory store")

    @property
    def backend(self) -> str:
        return "redis" if self.redis_client else "memory"

    def _get_key(self, session_id: str) -> str:
        return f"concierge:session:{session_id}"

    def _load(self, session_id: str) -> Optional[Dict[str, Any]]:
        if self.redis_client:
            try:
                data = self.redis_client.get(self._get_key(session_id))
                if data:
                    return json.loads(data)
            except redis.RedisError as e:
                logger.error(f"Redis get error: {e}")

        return self._memory_store.get(session_id)

    def _save(self, session_id: str, session: Dict[str, Any]):
        session["updated_at"] = datetime.utcnow().isoformat()

        if self.redis_client:
            try:
                self.redis_client.setex(self._get_key(session_id), self.ttl_seconds, json.dumps(session))
                return
            except redis.RedisError as e:
                logger.error(f"Redis save error: {e}")
        self._memory_store[session_id] = session

    def _load_or_new(self, session_id: str) -> Dict[str, Any]:
        return self._load(session_id) or {
            "session_id": session_id,
            "state": ConversationSlots().to_dict(),
            "messages": [],
            "created_at": datetime.utcnow().isoformat(),
        }

    def exists(self, session_id: str) -> bool:
        return self._load(session_id) is not None

    def get_state(self, session_id: str) -> ConversationSlots:
        """Current slot state; IDLE for unknown sessions"""
        session = self._load(session_id)
        if not session:
            return ConversationSlots()
        return ConversationSlots.from_dict(session.get("state"))

    def save_state(self, session_id: str, state: ConversationSlots):
        session = self._load_or_new(session_id)
        session["state"] = state.to_dict()
        self._save(session_id, session)
        logger.debug(f"Saved state for {session_id}: {session['state']['phase']}")

    def append_message(self, session_id: str, role: str, content: str):
        session = self._load_or_new(session_id)
        session["messages"].append({
            "role": role,
            "content": content,
            "timestamp": datetime.utcnow().isoformat()
        })
        self._save(session_id, session)

    def mark_dialogue_start(self, session_id: str):
        """Start a new dialogue after the messages stored so far"""
        session = self._load_or_new(session_id)
        session["dialogue_start"] = len(session["messages"])
        self._save(session_id, session)

    def get_history(
        self,
        session_id: str,
        limit: Optional[int] = None,
        current_dialogue: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Messages oldest first; the last `limit` when given.
        With current_dialogue, only messages after the last mark_dialogue_start.
        """
        session = self._load(session_id)
        if not session:
            return []
        messages = session.get("messages", [])
        if current_dialogue:
            messages = messages[session.get("dialogue_start", 0):]
        if limit:
            return messages[-limit:]
        return list(messages)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session; False when it did not exist"""
        existed = self.exists(session_id)

        if self.redis_client:
            try:
                self.redis_client.delete(self._get_key(session_id))
            except redis.RedisError as e:
                logger.error(f"Redis delete error: {e}")

        self._memory_store.pop(session_id, None)
        logger.info(f"Deleted session: {session_id}")
        return existed


# Singleton instance
_session_store_instance: Optional[ConversationSessionStore] = None


def get_session_store() -> ConversationSessionStore:
    """Get singleton session store built from settings"""
    global _session_store_instance
    if _session_store_instance is None:
        _session_store_instance = ConversationSessionStore(
            redis_host=settings.REDIS_HOST,
            redis_port=settings.REDIS_PORT,
            redis_db=settings.REDIS_DB,
            ttl_hours=settings.SESSION_TTL_HOURS,
            use_redis=settings.REDIS_ENABLED,
        )
    return _session_store_instance
