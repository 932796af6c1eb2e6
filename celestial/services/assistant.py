"""Chat orchestration: validate → retrieve → compose → complete.

:meth:`ChatService.handle` never raises.  Every outcome is a
:class:`ChatResult` carrying the HTTP status and the JSON payload, so the
router only has to serialise it.

Status codes
------------
``200``  ``{"answer": ...}`` (including greeting and "nothing found" replies)
``400``  missing, non-string or blank ``question``
``405``  any method other than POST
``500``  website data could not be loaded, or an unexpected failure
``503``  the completion API failed or timed out
"""

import logging
from typing import Any, NamedTuple

from pydantic import ValidationError

from celestial.config import Settings
from celestial.models.request import ChatRequest
from celestial.models.response import ChatResponse, ErrorResponse
from celestial.services.completion import CompletionClient, CompletionError
from celestial.services.composer import compose
from celestial.services.indexer import KnowledgeBase, KnowledgeBaseError
from celestial.services.matcher import match
from celestial.services.prompts import (
    GREETING_REPLY,
    NO_MATCH_REPLY,
    NO_RESPONSE_ANSWER,
    build_system_prompt,
    build_user_prompt,
    is_greeting,
)

logger = logging.getLogger(__name__)


class ChatResult(NamedTuple):
    status: int
    payload: dict


def _answer(text: str) -> ChatResult:
    return ChatResult(200, ChatResponse(answer=text).model_dump())


def _error(status: int, error: str, details: str | None = None) -> ChatResult:
    return ChatResult(status, ErrorResponse(error=error, details=details).model_dump(exclude_none=True))


class ChatService:
    def __init__(
        self,
        settings: Settings,
        knowledge_base: KnowledgeBase,
        completion_client: CompletionClient,
    ) -> None:
        self.settings = settings
        self.knowledge_base = knowledge_base
        self.completion_client = completion_client
        self.system_prompt = build_system_prompt(
            settings.assistant_name, settings.organization_name
        )

    async def handle(self, method: str, body: Any) -> ChatResult:
        """Answer the question in *body* and return the response to send."""
        if method.upper() != "POST":
            logger.warning("Rejected %s request to chat endpoint", method)
            return _error(405, "Method not allowed")

        try:
            request = ChatRequest.model_validate(body)
        except ValidationError:
            logger.warning("Rejected chat request with missing or invalid question")
            return _error(400, "Missing or invalid 'question' in request body.")

        try:
            return await self._respond(request.question)
        except Exception as exc:
            logger.exception("Unhandled error while answering question")
            return _error(500, "Server error", str(exc) or "Unknown error")

    async def _respond(self, question: str) -> ChatResult:
        logger.info("Question received | question_length=%d", len(question))

        if self.settings.greetings_enabled and is_greeting(question):
            logger.info("Greeting detected, skipping retrieval")
            return _answer(
                GREETING_REPLY.format(
                    assistant_name=self.settings.assistant_name,
                    organization_name=self.settings.organization_name,
                )
            )

        try:
            records = self.knowledge_base.records()
        except KnowledgeBaseError as exc:
            logger.error("Error loading website data: %s", exc)
            return _error(500, "Could not parse website data properly.")

        matches = match(records, question, self.settings.match_policy)
        logger.info(
            "Retrieval complete | policy=%s | records=%d | matches=%d",
            self.settings.match_policy,
            len(records),
            len(matches),
        )

        if not matches and self.settings.short_circuit_no_match:
            return _answer(NO_MATCH_REPLY.format(organization_name=self.settings.organization_name))

        context = compose(matches, self.settings.max_context_chunks)

        try:
            text = await self.completion_client.complete(
                self.system_prompt,
                build_user_prompt(context, question),
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
            )
        except CompletionError as exc:
            logger.error("Completion API error: %s", exc)
            return _error(
                503,
                "AI service unavailable",
                str(exc) or "Failed to get response from AI model",
            )

        answer = (text or "").strip() or NO_RESPONSE_ANSWER
        logger.info("Answer ready | answer_length=%d", len(answer))
        return _answer(answer)
