"""Test data and fakes shared by unit and integration tests."""

import asyncio

from content_to_reader.models.article_models import ArticleMetadata, ArticleSnippet
from content_to_reader.models.fetch_models import Navigation

ARTICLE_BLOCK = """<article>
    <h1>Headline</h1>
    <p>First paragraph of the article.</p>
  </article>"""

SEMANTIC_PAGE = f"""<!DOCTYPE html>
<html>
<head>
  <title>Test Page</title>
  <meta name="keywords" content="energy, batteries">
</head>
<body>
  <nav>Menu</nav>
  {ARTICLE_BLOCK}
  <footer>Footer</footer>
</body>
</html>
"""

NO_ARTICLE_PAGE = """<!DOCTYPE html>
<html>
<head><title>Nothing here</title></head>
<body><div></div></body>
</html>
"""

# Four stray end tags: far above the default tolerance
INVALID_FRAGMENT = "<p>Broken</p></div></span></em></section>"


def page_with_article(title: str, body: str = "Body text.") -> str:
    """A minimal valid page whose article is ``body``."""
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{title}</title>"
        "</head><body>"
        f"<article><p>{body}</p></article>"
        "</body></html>"
    )


def make_snippet(url: str, title: str = "Title", html: str = "<article><p>Text</p></article>") -> ArticleSnippet:
    return ArticleSnippet(html_snippet=html, metadata=ArticleMetadata(title=title, url=url))


class FakeBrowserPool:
    """Browser pool returning canned navigations.

    ``outcomes`` maps URL to a ``Navigation`` or an exception to raise;
    ``delays`` lets tests force a completion order.
    """

    def __init__(self, outcomes: dict, delays: dict | None = None):
        self.outcomes = outcomes
        self.delays = delays or {}
        self.calls: list[str] = []
        self.entered = False
        self.exited = False
        self.active = 0
        self.max_active = 0

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True

    async def navigate(self, url: str) -> Navigation:
        self.calls.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            outcome = self.outcomes[url]
        finally:
            self.active -= 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def ok(url: str, html: str, status: int = 200) -> Navigation:
    return Navigation(url=url, status=status, html=html)


