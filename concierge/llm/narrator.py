# llm/narrator.py
"""
Narrator - conversational text around search results.

Anthropic Claude by default, OpenAI when LLM_PROVIDER=openai. When no API
key is configured, or the provider call fails, a deterministic template is
returned instead, so the chat flow never depends on the LLM being up.
"""

from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI
from loguru import logger

from ..config import settings
from ..schemas.concierge_schemas import SearchResultSet, ServiceCategory, ServiceRecord
from .prompts import (
    SYSTEM_PROMPT,
    SEARCH_SUMMARY_PROMPT,
    NO_RESULTS_PROMPT,
    SUMMARY_FALLBACK,
    NO_RESULTS_FALLBACK,
    CHAT_FALLBACK,
)


CATEGORY_LABELS = {
    ServiceCategory.JET: "Private Jets",
    ServiceCategory.EMPTY_LEG: "Empty Legs",
    ServiceCategory.HELICOPTER: "Helicopters",
    ServiceCategory.YACHT: "Yachts",
    ServiceCategory.CAR: "Luxury Cars",
    ServiceCategory.ADVENTURE: "Adventures",
}

# Appended to the fallback summary when a single category was searched
CATEGORY_CLOSERS = {
    ServiceCategory.EMPTY_LEG: ". These empty legs offer fantastic 30-50% savings",
    ServiceCategory.JET: ". You'll have complete flexibility for your journey",
    ServiceCategory.HELICOPTER: ". Perfect for short transfers and avoiding traffic",
}

RATE_SUFFIX = {"hour": "/hr", "day": "/day", "flight": "", "package": ""}


def format_price(record: ServiceRecord) -> str:
    if record.price is None:
        return ""
    symbol = "$" if record.currency == "USD" else "€" if record.currency == "EUR" else f"{record.currency} "
    suffix = RATE_SUFFIX.get(record.details.get("rate_basis", ""), "")
    return f"{symbol}{record.price:,.0f}{suffix}"


def top_records(result_set: SearchResultSet, per_category: int = 3) -> List[ServiceRecord]:
    """First records of each category, in category order"""
    records: List[ServiceRecord] = []
    for items in result_set.by_category.values():
        records.extend(items[:per_category])
    return records


class Narrator:
    """
    Generates assistant replies for search results and free conversation.

    Usage:
        narrator = Narrator()
        text = await narrator.summarize("jets from London", result_set)
    """

    def __init__(self, provider: Optional[str] = None, client: Any = None):
        self.provider = (provider or settings.LLM_PROVIDER).lower()
        self.client = client

        if self.client is None and settings.has_llm_key(self.provider):
            if self.provider == "anthropic":
                self.client = AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)
                logger.info(f"Narrator: Anthropic ({settings.ANTHROPIC_MODEL})")
            elif self.provider == "openai":
                self.client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
                logger.info(f"Narrator: OpenAI ({settings.OPENAI_MODEL})")

        if self.client is None:
            logger.warning("Narrator: no LLM configured, using template responses")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _complete(self, messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> str:
        """Single completion from the configured provider"""
        max_tokens = max_tokens or settings.LLM_MAX_TOKENS

        if self.provider == "anthropic":
            response = await self.client.messages.create(
                model=settings.ANTHROPIC_MODEL,
                max_tokens=max_tokens,
                temperature=settings.LLM_TEMPERATURE,
                system=SYSTEM_PROMPT,
                messages=messages,
            )
            text = "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
        else:
            response = await self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[{"role": "system", "content": SYSTEM_PROMPT}] + messages,
                max_tokens=max_tokens,
                temperature=settings.LLM_TEMPERATURE,
            )
            text = response.choices[0].message.content or ""

        text = text.strip()
        if not text:
            raise ValueError("empty completion")
        return text

    async def _complete_or(self, fallback: str, messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> str:
        if not self.enabled:
            return fallback
        try:
            return await self._complete(messages, max_tokens)
        except Exception as e:
            logger.error(f"{self.provider} completion failed, using template: {e}")
            return fallback

    async def summarize(
        self,
        user_query: str,
        result_set: SearchResultSet,
        service: Optional[ServiceCategory] = None,
    ) -> str:
        """Short narrative over a non-empty result set"""
        prompt = SEARCH_SUMMARY_PROMPT.format(
            user_query=user_query,
            total_count=result_set.total_count,
            results_overview=self.results_overview(result_set),
        )
        return await self._complete_or(
            self.summary_fallback(result_set, service),
            [{"role": "user", "content": prompt}],
        )

    async def no_results(self, user_query: str) -> str:
        """Custom-request reply when nothing matched"""
        prompt = NO_RESULTS_PROMPT.format(user_query=user_query)
        return await self._complete_or(
            NO_RESULTS_FALLBACK.format(user_query=user_query),
            [{"role": "user", "content": prompt}],
            max_tokens=200,
        )

    async def reply(self, message: str, history: Optional[List[Dict[str, Any]]] = None) -> str:
        """Free conversational reply, with recent history as context"""
        messages = [
            {"role": msg["role"], "content": msg["content"]}
            for msg in (history or [])
            if msg.get("role") in ("user", "assistant") and msg.get("content")
        ]
        # Anthropic requires the conversation to start with a user turn
        while messages and messages[0]["role"] != "user":
            messages.pop(0)
        messages.append({"role": "user", "content": message})
        return await self._complete_or(CHAT_FALLBACK, messages)

    def results_overview(self, result_set: SearchResultSet) -> str:
        lines = []
        for category, items in result_set.by_category.items():
            if not items:
                continue
            lines.append(f"{CATEGORY_LABELS.get(category, category.value)} ({len(items)}):")
            for record in items[:3]:
                price = format_price(record)
                capacity = record.details.get("max_passengers") or record.details.get("available_seats")
                parts = [record.title]
                if record.subtitle:
                    parts.append(record.subtitle)
                if price:
                    parts.append(price)
                if capacity:
                    parts.append(f"{capacity} passengers")
                lines.append("- " + ", ".join(str(p) for p in parts))
        return "\n".join(lines) or "(none)"

    def summary_fallback(self, result_set: SearchResultSet, service: Optional[ServiceCategory] = None) -> str:
        recommendation = ""
        records = top_records(result_set, per_category=1)
        if records:
            top = records[0]
            recommendation = f". I'd especially recommend the {top.title}"
            price = format_price(top)
            if price:
                recommendation += f" at {price}"
            capacity = top.details.get("max_passengers") or top.details.get("available_seats")
            if capacity:
                recommendation += f" ({capacity} passengers)"
            recommendation += " - it's an excellent fit for your requirements"
        if service in CATEGORY_CLOSERS:
            recommendation += CATEGORY_CLOSERS[service]
        return SUMMARY_FALLBACK.format(total_count=result_set.total_count, recommendation=recommendation)


# Singleton instance
_narrator_instance: Optional[Narrator] = None


def get_narrator() -> Narrator:
    """Get singleton Narrator for the configured provider"""
    global _narrator_instance
    if _narrator_instance is None:
        _narrator_instance = Narrator()
    return _narrator_instance
