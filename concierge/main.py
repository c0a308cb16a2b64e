"""
Concierge Search Service - FastAPI Application
LLM Provider:
- LLM_PROVIDER=anthropic (default): Claude via ANTHROPIC_API_KEY
- LLM_PROVIDER=openai: OpenAI via OPENAI_API_KEY
- No key: template replies
"""

import sys
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from . import __version__
from .agents.concierge_agent import ConciergeAgent, get_concierge_agent
from .api.chat import router as chat_router
from .api.search import router as search_router
from .config import settings
from .schemas.concierge_schemas import HealthResponse


def configure_logging(level: str = settings.LOG_LEVEL):
    """Replace loguru's default sink with one at the configured level"""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    )


# ============================================
# Application Lifespan
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    configure_logging()
    logger.info("=" * 50)
    logger.info("Starting Concierge Search Service")
    logger.info("=" * 50)
    logger.info(f"Environment: {settings.API_ENV}")
    logger.info(f"LLM Provider: {settings.LLM_PROVIDER} ({'enabled' if settings.llm_enabled else 'templates only'})")

    agent = get_concierge_agent()
    logger.info(f"Row store: {agent.aggregator.store.name}")
    logger.info(f"Session store: {agent.session_store.backend}")

    yield

    logger.info("Concierge Service shutdown complete")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Concierge Search Service",
    description="Chat-driven search over private jets, empty legs, helicopters, yachts and luxury cars.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)
app.include_router(search_router)


# ============================================
# REST Endpoints
# ============================================

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Concierge Search Service",
        "version": __version__,
        "status": "running",
        "llm_provider": settings.LLM_PROVIDER,
        "docs": "/docs",
        "endpoints": [
            "/api/concierge/health",
            "/api/concierge/chat",
            "/api/concierge/search",
            "/api/concierge/extract",
            "/api/concierge/tools"
        ]
    }


@app.get("/api/concierge/health", response_model=HealthResponse)
async def health_check(agent: ConciergeAgent = Depends(get_concierge_agent)):
    """Detailed health check"""
    return HealthResponse(
        status="healthy",
        service="concierge-search-service",
        version=__version__,
        components={
            "row_store": agent.aggregator.store.name,
            "session_store": agent.session_store.backend,
            "llm": settings.LLM_PROVIDER if agent.narrator.enabled else "templates",
        },
        timestamp=datetime.utcnow().isoformat()
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "concierge.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development"
    )
