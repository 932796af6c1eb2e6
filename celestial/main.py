import logging
import logging.config
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from celestial.config import Settings
from celestial.routers.chat import limiter, router as chat_router
from celestial.services.assistant import ChatService
from celestial.services.completion import CompletionClient, OpenAICompatibleClient
from celestial.services.indexer import KnowledgeBase, KnowledgeBaseError

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the website data before serving traffic when preloading is enabled."""
    settings: Settings = app.state.settings
    if not settings.api_key:
        logger.warning("OPENAI_API_KEY is not set; completion requests will fail")
    if settings.preload_data:
        try:
            app.state.knowledge_base.load()
        except KnowledgeBaseError as exc:
            # Requests retry the load and answer 500 until it succeeds.
            logger.error("Website data could not be preloaded: %s", exc)
    yield


def create_app(
    settings: Optional[Settings] = None,
    knowledge_base: Optional[KnowledgeBase] = None,
    completion_client: Optional[CompletionClient] = None,
) -> FastAPI:
    """Build the application, wiring the data handle and completion client."""
    settings = settings or Settings()
    knowledge_base = knowledge_base or KnowledgeBase(settings.data_path)
    completion_client = completion_client or OpenAICompatibleClient(
        api_key=settings.api_key,
        model=settings.model,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )

    app = FastAPI(
        title="Celestial – College Website Assistant",
        description=(
            "Answers questions about the college website by searching the scraped "
            "site content and asking a hosted language model to synthesise an answer."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.knowledge_base = knowledge_base
    app.state.chat_service = ChatService(settings, knowledge_base, completion_client)

    # Rate-limiting state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.warning("HTTP %s for %s: %s", exc.status_code, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception for %s", request.url)
        return JSONResponse(status_code=500, content={"error": "Server error"})

    app.include_router(chat_router)

    @app.get("/", summary="Health check")
    async def root() -> dict:
        kb: KnowledgeBase = app.state.knowledge_base
        return {"status": "ok", "records": len(kb.records()) if kb.loaded else None}

    return app


# Module-level instance used by uvicorn:
#   uvicorn celestial.main:app
app = create_app()
