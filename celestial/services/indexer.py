"""Content indexing: flattens scraped website pages into searchable records.

The website data file is a JSON array of loosely-shaped page objects.  Each
entry is first classified into one of three page kinds, then flattened:

``SectionedPage``
    ``sections`` is a non-empty list.  One record per section with usable
    text; the page's own ``content`` is ignored.

``FlatPage``
    No usable sections, but a non-blank top-level ``content`` string.  One
    record with an empty heading.

``EmptyPage``
    Anything else.  No records.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from celestial.models.page import (
    ContentRecord,
    EmptyPage,
    FlatPage,
    RawPage,
    Section,
    SectionedPage,
)

logger = logging.getLogger(__name__)


class KnowledgeBaseError(RuntimeError):
    """Raised when the website data file cannot be loaded or flattened."""


def _text(value: Any) -> str:
    """Return *value* when it is a string, otherwise an empty string."""
    return value if isinstance(value, str) else ""


def classify_page(raw: Any) -> RawPage:
    """Validate one raw page entry and return its tagged page kind.

    Missing or mistyped fields never raise; they only narrow the result
    towards :class:`EmptyPage`.
    """
    if not isinstance(raw, dict):
        return EmptyPage()

    title = _text(raw.get("title"))
    url = _text(raw.get("url"))

    sections = raw.get("sections")
    if isinstance(sections, list) and sections:
        return SectionedPage(
            title=title,
            url=url,
            sections=[
                Section(heading=_text(s.get("heading")), content=_text(s.get("content")))
                for s in sections
                if isinstance(s, dict)
            ],
        )

    content = _text(raw.get("content")).strip()
    if content:
        return FlatPage(title=title, url=url, content=content)

    return EmptyPage(title=title, url=url)


def extract(raw_pages: Iterable[Any]) -> List[ContentRecord]:
    """Flatten *raw_pages* into content records, preserving input order.

    Raises:
        TypeError: if *raw_pages* is not iterable.
    """
    records: List[ContentRecord] = []
    for raw in raw_pages:
        page = classify_page(raw)
        if isinstance(page, SectionedPage):
            for section in page.sections:
                content = section.content.strip()
                if content:
                    records.append(
                        ContentRecord(
                            title=page.title,
                            url=page.url,
                            heading=section.heading,
                            content=content,
                        )
                    )
        elif isinstance(page, FlatPage):
            records.append(ContentRecord(title=page.title, url=page.url, content=page.content))
    return records


class KnowledgeBase:
    """Once-initialised, read-only handle on the flattened website data.

    The first successful :meth:`load` caches the records; later calls return
    the cached tuple.  Loading is serialised by a lock so concurrent first
    requests parse the file at most once.  A failed load is not cached.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._records: Optional[Tuple[ContentRecord, ...]] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._records is not None

    def load(self) -> Tuple[ContentRecord, ...]:
        """Parse the data file (once) and return the content records.

        Raises:
            KnowledgeBaseError: if the file is missing, unreadable, not valid
                JSON, or not a JSON array.
        """
        if self._records is not None:
            return self._records

        with self._lock:
            if self._records is None:
                self._records = self._read()
        return self._records

    def records(self) -> Tuple[ContentRecord, ...]:
        return self.load()

    def _read(self) -> Tuple[ContentRecord, ...]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as exc:
            raise KnowledgeBaseError(f"Could not read website data from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise KnowledgeBaseError(
                f"Website data in {self.path} must be a JSON array of pages, "
                f"got {type(data).__name__}."
            )

        try:
            records = tuple(extract(data))
        except TypeError as exc:
            raise KnowledgeBaseError(f"Could not flatten website data: {exc}") from exc

        logger.info("Website data loaded from %s: %d pages, %d records", self.path, len(data), len(records))
        return records
