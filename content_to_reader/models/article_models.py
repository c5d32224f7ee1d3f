"""Models for extracted articles and their validation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass
class ArticleMetadata:
    """Metadata derived from a page alongside its article HTML."""

    title: str
    url: str
    keywords: List[str] = field(default_factory=list)


@dataclass
class ArticleSnippet:
    """One page's article HTML plus metadata, ready for assembly."""

    html_snippet: str
    metadata: ArticleMetadata


@dataclass
class OrderedSnippet:
    """An extracted snippet tagged with its page's position in the request."""

    snippet: ArticleSnippet
    order: int


class SnippetValidationError(str, Enum):
    """Static validation failures of a single snippet."""

    EMPTY_TITLE = "EMPTY_TITLE"
    INVALID_HTML = "INVALID_HTML"
