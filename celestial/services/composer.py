"""Context composition: renders matched records into the prompt context."""

from typing import List, Sequence

from celestial.models.page import ContentRecord

NO_CONTEXT = "No relevant info found."

DEFAULT_LIMIT = 8


def render_record(record: ContentRecord) -> str:
    """Render one record as ``Title:`` / ``Heading:`` lines followed by its content."""
    parts: List[str] = []
    if record.title:
        parts.append(f"Title: {record.title}")
    if record.heading:
        parts.append(f"Heading: {record.heading}")
    parts.append(record.content)
    return "\n".join(parts)


def compose(matches: Sequence[ContentRecord], limit: int = DEFAULT_LIMIT) -> str:
    """Join the first *limit* matches into one context string.

    This is a plain truncation; matches carry no score.  Returns
    :data:`NO_CONTEXT` when nothing is selected.
    """
    blocks = [render_record(r) for r in list(matches)[: max(limit, 0)]]
    if not blocks:
        return NO_CONTEXT
    return "\n\n".join(blocks)
