import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from celestial.models.response import ChatResponse, ErrorResponse
from celestial.services.assistant import ChatService

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

# Non-POST methods are routed here too so the chat handler answers 405.
# OPTIONS is left to the CORS middleware.
_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


@router.api_route(
    "/api/chat",
    methods=_METHODS,
    response_model=None,
    summary="Ask a question about the college website",
    responses={
        200: {"model": ChatResponse},
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
@limiter.limit("20/minute")
async def chat(request: Request, service: ChatService = Depends(get_chat_service)) -> JSONResponse:
    """Answer ``{"question": "..."}`` from the scraped website content.

    The body is read here rather than through a Pydantic parameter so that a
    missing or malformed question yields ``400 {"error": ...}`` instead of a
    framework 422.
    """
    body = None
    if request.method == "POST":
        try:
            body = await request.json()
        except ValueError:
            logger.warning("Chat request body is not valid JSON")

    result = await service.handle(request.method, body)
    return JSONResponse(status_code=result.status, content=result.payload)
