"""Prompt templates and canned replies."""

import re

SYSTEM_PROMPT = """You are {assistant_name}, the official AI assistant of {organization_name}.
Your job is to carefully read and analyze all provided context, not just keyword matches.
- Synthesize relevant information from all sections, combining details and reasoning logically.
- If the data is incomplete or unclear, state this clearly.
- Only answer using the provided context. Do not make up information.
- If the context says "No relevant info found." or does not contain the answer, say that you could not find any related information.
- For every answer, explain your reasoning step by step before providing the final answer."""

USER_PROMPT = """Context:
{context}

Question: {question}

Carefully analyze the context above. Explain your reasoning step by step, and then provide your final answer."""

GREETING_REPLY = (
    "Hello! I'm {assistant_name}, the assistant for {organization_name}. "
    "Ask me anything about admissions, courses, departments, facilities or events."
)

NO_MATCH_REPLY = (
    "Sorry, I couldn't find any information about that on the {organization_name} website. "
    "Try rephrasing your question or using a different keyword."
)

NO_RESPONSE_ANSWER = "No response from AI."

GREETINGS = ("hi", "hello", "hey", "good morning", "good evening")

_GREETING_RE = re.compile(r"\b(?:" + "|".join(re.escape(g) for g in GREETINGS) + r")\b")


def is_greeting(question: str) -> bool:
    """Return True when *question* contains one of :data:`GREETINGS` as a whole word.

    This is narrower than a plain substring test. Word boundaries keep
    questions such as "which hostels ..." from being mistaken for "hi", but
    stretched forms like "hellooo" are not treated as greetings either.
    """
    return _GREETING_RE.search(question.strip().lower()) is not None


def build_system_prompt(assistant_name: str, organization_name: str) -> str:
    return SYSTEM_PROMPT.format(assistant_name=assistant_name, organization_name=organization_name)


def build_user_prompt(context: str, question: str) -> str:
    return USER_PROMPT.format(context=context, question=question)
