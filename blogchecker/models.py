"""
BlogChecker Data Models
=======================

Pydantic models for the request-facing types (site descriptors and filtered
entries) and plain dataclasses for parser output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SiteKind(str, Enum):
    """Publishing platforms with a known feed location."""
    HATENABLOG = "hatenablog"
    SPEAKERDECK = "speakerdeck"
    SCRAPBOX = "scrapbox"
    SLIDESHARE = "slideshare"
    OTHER = "other"

    @classmethod
    def coerce(cls, value) -> "SiteKind":
        """Map any value onto a kind, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.OTHER
        return cls.OTHER


class SiteDescriptor(BaseModel):
    """A site to check: its platform kind and public URL."""
    kind: SiteKind = Field(default=SiteKind.OTHER, description="Platform kind selecting the feed rule")
    url: str = Field(..., min_length=1, description="Public site URL")

    model_config = {"frozen": True}

    @field_validator('kind', mode='before')
    @classmethod
    def coerce_kind(cls, v):
        """Unknown kinds fall back to generic discovery."""
        return SiteKind.coerce(v)

    @field_validator('url')
    @classmethod
    def strip_url(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Site URL cannot be empty")
        return v

    def __str__(self) -> str:
        return f"Site({self.kind.value}:{self.url})"


@dataclass(frozen=True)
class FeedEntry:
    """A single feed entry as exposed by the parser."""

    title: str
    url: str
    content: Optional[str] = None
    summary: Optional[str] = None

    @property
    def body(self) -> str:
        """Content if present, else summary, else empty."""
        return self.content or self.summary or ""


@dataclass
class ParsedFeed:
    """Parsed feed document, entries in source order."""

    entries: List[FeedEntry] = field(default_factory=list)
    title: str = ""
    version: str = ""

    def __len__(self) -> int:
        return len(self.entries)


class FilteredEntry(BaseModel):
    """Output projection of an entry that passed the techword threshold."""
    title: str
    url: str

    model_config = {"frozen": True}

    @classmethod
    def from_entry(cls, entry: FeedEntry) -> "FilteredEntry":
        return cls(title=entry.title, url=entry.url)
