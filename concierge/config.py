"""
Concierge Service Configuration
Loads settings from environment variables
"""

import os
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment"""

    # Supabase (PostgREST) Configuration
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    SUPABASE_TIMEOUT: float = float(os.getenv("SUPABASE_TIMEOUT", "10"))

    # Seed file for the in-memory store (used when SUPABASE_URL is empty)
    MEMORY_STORE_PATH: Optional[str] = os.getenv("MEMORY_STORE_PATH") or None

    # Search Settings
    SEARCH_RESULT_LIMIT: int = int(os.getenv("SEARCH_RESULT_LIMIT", "10"))

    # LLM Configuration
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "anthropic").lower()
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-3-7-sonnet-20250219")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "400"))
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))

    # Redis Configuration (conversation sessions)
    REDIS_ENABLED: bool = os.getenv("REDIS_ENABLED", "true").lower() == "true"
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "24"))
    HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "6"))

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_ENV: str = os.getenv("API_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS Configuration
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def supabase_rest_url(self) -> str:
        """Get the PostgREST endpoint of the Supabase project"""
        return f"{self.SUPABASE_URL.rstrip('/')}/rest/v1"

    @property
    def llm_enabled(self) -> bool:
        """True when the selected LLM provider has an API key"""
        return self.has_llm_key(self.LLM_PROVIDER)

    def has_llm_key(self, provider: str) -> bool:
        """True when an API key is configured for the given provider"""
        if provider == "anthropic":
            return bool(self.ANTHROPIC_API_KEY)
        if provider == "openai":
            return bool(self.OPENAI_API_KEY) and not self.OPENAI_API_KEY.startswith("sk-your")
        return False


# Global settings instance
settings = Settings()
