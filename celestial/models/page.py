from typing import List, Union

from pydantic import BaseModel, ConfigDict


class ContentRecord(BaseModel):
    """One flattened, searchable unit of website text.

    ``content`` is always non-empty and trimmed; the other fields fall back
    to an empty string.
    """

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""
    heading: str = ""
    content: str


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading: str = ""
    content: str = ""


class SectionedPage(BaseModel):
    """A page whose text lives in a non-empty list of sections."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""
    sections: List[Section]


class FlatPage(BaseModel):
    """A page with a single block of top-level content and no sections."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""
    content: str


class EmptyPage(BaseModel):
    """A page that carries nothing searchable."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""


RawPage = Union[SectionedPage, FlatPage, EmptyPage]
