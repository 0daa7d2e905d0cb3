"""Core data types for Folio."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Document(BaseModel):
    """One decoded and validated content file.

    Documents are immutable once built; ``topics`` keep their original casing
    for display but compare case-insensitively.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(min_length=1)
    publish_date: datetime = Field(alias="date")
    description: str = Field(min_length=1)
    topics: tuple[str, ...] = Field(default=(), alias="tags")

    slug: str = Field(min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    body_html: str = ""
    raw_body: str = ""
    source_path: str = ""

    @field_validator("publish_date", mode="before")
    @classmethod
    def _coerce_publish_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return _as_utc(value)
        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=UTC)
        if isinstance(value, str):
            return _as_utc(datetime.fromisoformat(value.strip()))
        return value

    @field_validator("topics", mode="before")
    @classmethod
    def _coerce_topics(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        if isinstance(value, Iterable):
            return tuple(str(topic).strip() for topic in value if str(topic).strip())
        return value

    def has_topic(self, topic: str) -> bool:
        """Return True if the document carries ``topic`` (case-insensitive)."""
        wanted = topic.casefold()
        return any(t.casefold() == wanted for t in self.topics)

    @property
    def formatted_date(self) -> str:
        """Human-readable date, e.g. ``March 15, 2024``."""
        return f"{self.publish_date:%B} {self.publish_date.day}, {self.publish_date.year}"

    @property
    def short_date(self) -> str:
        return self.publish_date.strftime("%Y-%m-%d")


@dataclass(frozen=True, slots=True)
class DocumentCollection:
    """An ordered, immutable sequence of valid Documents."""

    documents: tuple[Document, ...] = ()

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        object.__setattr__(self, "documents", tuple(documents))

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def __getitem__(self, index: int) -> Document:
        return self.documents[index]

    def sorted_by_date(self) -> DocumentCollection:
        """Return the collection newest first; equal dates keep their relative order."""
        # list.sort is stable even with reverse=True
        return DocumentCollection(sorted(self.documents, key=lambda d: d.publish_date, reverse=True))

    def filter_by_topic(self, topic: str) -> DocumentCollection:
        """Return the documents tagged with ``topic``, preserving order."""
        return DocumentCollection(doc for doc in self.documents if doc.has_topic(topic))

    def topics(self) -> list[str]:
        """Return every topic once, compared case-insensitively.

        The casing of the first occurrence is kept for display.
        """
        seen: dict[str, str] = {}
        for doc in self.documents:
            for topic in doc.topics:
                seen.setdefault(topic.casefold(), topic)
        return list(seen.values())


@dataclass(frozen=True, slots=True)
class ScanFailure:
    """One content file that failed to decode or validate."""

    path: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.path}: {self.error}"


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of one scan pass: valid documents and per-file failures."""

    documents: DocumentCollection = field(default_factory=DocumentCollection)
    failures: tuple[ScanFailure, ...] = ()

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


class AssemblyMode(str, Enum):
    RAW = "raw"
    TEMPLATED = "templated"


@dataclass(frozen=True, slots=True)
class ArtifactBundle:
    """Rendered output of one assembly pass.

    The mappings are read-only views; a bundle is replaced wholesale, never
    mutated.
    """

    mode: AssemblyMode
    posts: Mapping[str, bytes] = field(default_factory=dict)
    topics: Mapping[str, bytes] = field(default_factory=dict)
    landing: bytes = b""
    topics_index: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "posts", MappingProxyType(dict(self.posts)))
        object.__setattr__(self, "topics", MappingProxyType(dict(self.topics)))

    @classmethod
    def empty(cls, mode: AssemblyMode = AssemblyMode.RAW) -> ArtifactBundle:
        return cls(mode=mode)
