"""Models for fetched pages."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class FetchedPage:
    """Raw HTML of one requested URL and its position in the request."""

    url: str
    html: str
    order: int


@dataclass(frozen=True)
class Navigation:
    """Outcome of a single browser navigation."""

    url: str
    status: int
    html: str
    redirected: bool = False


class FetchResult(Mapping[str, FetchedPage]):
    """Read-only mapping of URL to the page fetched for it.

    A URL requested more than once maps to its first position; ``pages``
    keeps one entry per requested position, in request order.
    """

    def __init__(self, pages: List[FetchedPage] | None = None):
        self._pages = sorted(pages or [], key=lambda page: page.order)
        self._by_url: dict[str, FetchedPage] = {}
        for page in self._pages:
            self._by_url.setdefault(page.url, page)

    @property
    def pages(self) -> List[FetchedPage]:
        return list(self._pages)

    def __getitem__(self, url: str) -> FetchedPage:
        return self._by_url[url]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_url)

    def __len__(self) -> int:
        return len(self._by_url)

    def __repr__(self) -> str:
        return f"FetchResult({self._pages!r})"
