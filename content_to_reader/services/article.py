"""Extract article contents out of whole HTML pages.

Three strategies, tried by the caller (explicit selectors) or in order
(automatic mode):

1. Semantic HTML: the page's ``<article>`` element.
2. Heuristic: trafilatura's main-content detection.
3. Explicit selectors from the configuration file.
"""

import copy
from typing import List, Sequence

import logfire
import trafilatura
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from content_to_reader.constants import SNIPPET_SEPARATOR, STRIPPED_AUTO_TAGS
from content_to_reader.errors import ExtractionError
from content_to_reader.models.article_models import ArticleMetadata, ArticleSnippet
from content_to_reader.models.selector_models import ResolvedSelector
from content_to_reader.services.html_validation import check_html


def _strip_tags(root: BeautifulSoup | Tag) -> None:
    """Remove subtrees reader devices can't cope with, in place."""
    for tag in root.find_all(list(STRIPPED_AUTO_TAGS)):
        tag.decompose()


class Article:
    """A single page bound to its URL, ready to have its article extracted."""

    def __init__(self, url: str, html: str, max_html_errors: int | None = None):
        """Parse and validate a page.

        Args:
            url: Address the HTML was fetched from
            html: Raw page HTML
            max_html_errors: Structural errors tolerated by the validity check

        Raises:
            ExtractionError: If the HTML is empty or too broken to render
        """
        if not html or not html.strip():
            raise ExtractionError("You can't build an article off of an empty HTML snippet.")

        report = check_html(html, max_errors=max_html_errors)
        if not report.valid:
            problems = ", ".join(report.fatal + report.structural)
            raise ExtractionError(f"{url} -> Page HTML is invalid ({problems}).")

        self._url = url
        self._html = html
        self._soup = BeautifulSoup(html, "html.parser")

    @property
    def url(self) -> str:
        return self._url

    def from_selectors(self, selectors: Sequence[ResolvedSelector]) -> ArticleSnippet:
        """Build an article out of elements matched by ``selectors``.

        ``first`` selectors take the first matching element, ``all`` selectors
        take every match. Matches are concatenated in selector order.

        Raises:
            ExtractionError: If a selector is malformed or matches nothing
        """
        if not selectors:
            raise ExtractionError(f"{self._url} -> No selectors given.")

        parts: List[str] = []
        for index, selector in enumerate(selectors):
            label = selector.name or str(index)
            try:
                if selector.mode == "first":
                    match = self._soup.select_one(selector.query)
                    elements = [match] if match is not None else []
                else:
                    elements = list(self._soup.select(selector.query))
            except SelectorSyntaxError as e:
                raise ExtractionError(
                    f"{self._url} -> [{label}]: Invalid query {selector.query!r}: {e}"
                ) from e

            if not elements:
                raise ExtractionError(
                    f"{self._url} -> [{label}]: Didn't find any elements matching query."
                )
            parts.append(SNIPPET_SEPARATOR.join(str(element) for element in elements))

        logfire.info(
            "Article extracted with selectors",
            url=self._url,
            selector_count=len(selectors),
        )
        return ArticleSnippet(
            html_snippet=f"<article>{SNIPPET_SEPARATOR.join(parts)}</article>",
            metadata=self.metadata(),
        )

    def from_html(self) -> ArticleSnippet:
        """Find the article automatically.

        Uses the ``<article>`` element when the page has one, trafilatura's
        best guess otherwise. ``<style>`` and ``<svg>`` subtrees are removed
        from the result.

        Raises:
            ExtractionError: If neither strategy finds any content
        """
        semantic = self._soup.find("article")
        if isinstance(semantic, Tag):
            article = copy.copy(semantic)
            strategy = "semantic"
        else:
            article = self._heuristic_article()
            strategy = "heuristic"

        if article is None:
            raise ExtractionError(
                f"{self._url} -> Couldn't find the article automatically. "
                "Use `selectors` for this page in a configuration file."
            )

        _strip_tags(article)
        logfire.info("Article extracted automatically", url=self._url, strategy=strategy)
        return ArticleSnippet(html_snippet=str(article), metadata=self.metadata())

    def metadata(self) -> ArticleMetadata:
        """Title, URL and keywords of the page."""
        title = ""
        if self._soup.title is not None:
            title = self._soup.title.get_text(strip=True)

        keywords: List[str] = []
        meta = self._soup.find("meta", attrs={"name": "keywords"})
        if isinstance(meta, Tag) and meta.get("content"):
            keywords = [k.strip() for k in str(meta["content"]).split(",") if k.strip()]

        return ArticleMetadata(title=title, url=self._url, keywords=keywords)

    def _heuristic_article(self) -> Tag | None:
        """Ask trafilatura for the main content, wrapped in ``<article>``.

        Any failure of the detector counts as "nothing found".
        """
        try:
            extracted = trafilatura.extract(
                self._html,
                url=self._url,
                output_format="html",
                include_links=True,
                include_images=True,
                include_tables=True,
            )
        except Exception as e:
            logfire.warning("Heuristic extraction failed", url=self._url, error=str(e))
            return None

        if not extracted:
            return None

        parsed = BeautifulSoup(extracted, "html.parser")
        body = parsed.body or parsed
        if not body.get_text(strip=True):
            return None

        wrapper = BeautifulSoup("<article></article>", "html.parser")
        article = wrapper.article
        for child in list(body.contents):
            article.append(child.extract())
        return article
