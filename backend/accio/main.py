"""
Accio AI Playground - Main FastAPI Application
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import Settings, settings
from .api import auth_router, chat_router, sessions_router
from .core.generation_client import GenerationClient
from .core.logging_config import setup_logging
from .core.orchestrator import SessionOrchestrator
from .llm.factory import create_llm_provider
from .middleware import RequestLoggingMiddleware
from .storage import LocalStorage, SessionStore, UserStorage

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


def _build_llm_provider(config: Settings):
    """Configured LLM provider, or None when no API key is set."""
    return create_llm_provider(
        provider=config.llm_provider,
        api_key=config.resolved_llm_api_key,
        model=config.llm_model,
        base_url=config.llm_base_url,
        default_temperature=config.llm_temperature,
        default_max_tokens=config.llm_max_tokens,
        timeout=config.llm_timeout,
        referer=config.resolved_llm_referer,
        app_title=config.llm_app_title,
        log_calls=config.log_llm_calls,
    )


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application; components are wired in the lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(config)

        storage = LocalStorage(config.local_storage_path)
        session_store = SessionStore(storage)
        llm_provider = _build_llm_provider(config)
        if llm_provider is not None:
            await llm_provider.start()
        else:
            logger.warning("LLM_API_KEY not set: chat turns will report the AI service as unavailable")

        app.state.session_store = session_store
        app.state.user_storage = UserStorage(storage)
        app.state.llm_provider = llm_provider
        app.state.orchestrator = SessionOrchestrator(
            session_store,
            GenerationClient(
                llm_provider,
                temperature=config.llm_temperature,
                max_tokens=config.llm_max_tokens,
            ),
            max_message_length=config.chat_message_max_length,
            serialize_turns=config.serialize_session_turns,
        )

        logger.info(f"Starting {config.app_name} v{config.app_version}")
        logger.info(f"Storage path: {config.local_storage_path}")
        logger.info(f"LLM provider: {config.llm_provider if llm_provider else 'not configured'}")
        logger.info(f"Serialize session turns: {config.serialize_session_turns}")
        yield

        if llm_provider is not None:
            await llm_provider.aclose()
        logger.info(f"Shutting down {config.app_name}")

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Chat with an AI assistant to generate and refine React components",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added after CORS so it wraps it
    if config.log_api_requests:
        app.add_middleware(RequestLoggingMiddleware)

    app.include_router(auth_router)
    app.include_router(sessions_router)
    app.include_router(chat_router)

    @app.get("/")
    async def root():
        return {
            "app": config.app_name,
            "version": config.app_version,
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "storage": config.storage_type,
            "llm_configured": getattr(app.state, "llm_provider", None) is not None,
            "version": config.app_version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "accio.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
