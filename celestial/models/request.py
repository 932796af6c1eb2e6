from pydantic import BaseModel, StrictStr, field_validator


class ChatRequest(BaseModel):
    question: StrictStr

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be blank")
        return value
