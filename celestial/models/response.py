from typing import Optional

from pydantic import BaseModel


class ChatResponse(BaseModel):
    answer: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
