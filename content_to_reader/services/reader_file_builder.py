"""Merge article snippets into a single EPUB.

Snippets are validated first; every problem of every snippet is reported in
one ``ValidationError``. Only then is the book written to a fresh temporary
directory, which is removed again if writing fails.
"""

import asyncio
import html
import shutil
import tempfile
import uuid
from datetime import date
from pathlib import Path
from typing import Callable, List, Sequence

import logfire
from ebooklib import epub

from content_to_reader.constants import (
    EPUB_AUTHOR,
    EPUB_LANGUAGE,
    EPUB_TITLE_PREFIX,
    TEMP_DIR_PREFIX,
)
from content_to_reader.errors import ValidationError
from content_to_reader.models.article_models import ArticleSnippet, SnippetValidationError
from content_to_reader.services.html_validation import is_html_valid
from content_to_reader.services.reader_file import ReaderFile


class ReaderFileBuilder:
    """Turn article snippets into a ``ReaderFile`` pointing at an EPUB."""

    def __init__(
        self,
        max_html_errors: int | None = None,
        title_prefix: str = EPUB_TITLE_PREFIX,
        language: str = EPUB_LANGUAGE,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the builder.

        Args:
            max_html_errors: Structural errors tolerated per snippet
            title_prefix: Book title, followed by the build date
            language: Book and chapter language
            today: Date provider, injectable for tests
        """
        self._max_html_errors = max_html_errors
        self._title_prefix = title_prefix
        self._language = language
        self._today = today

    async def build(self, snippets: Sequence[ArticleSnippet]) -> ReaderFile:
        """Validate ``snippets`` and package them, in order, into an EPUB.

        Args:
            snippets: Each one becomes a chapter titled with its page title

        Returns:
            ReaderFile owning the temporary EPUB; the caller must clean it up

        Raises:
            ValueError: If no snippets are passed
            ValidationError: If any snippet has an empty title or invalid HTML
        """
        if not snippets:
            raise ValueError("No snippets passed")

        errors = await self.validate_articles(snippets)
        if errors:
            logfire.warning("Snippet validation failed", invalid_count=len(errors))
            raise ValidationError(errors)

        temporary_dir = Path(await asyncio.to_thread(tempfile.mkdtemp, prefix=TEMP_DIR_PREFIX))
        try:
            book = self._make_book(snippets)
            path = temporary_dir / f"{uuid.uuid4().hex}.epub"
            await asyncio.to_thread(epub.write_epub, str(path), book, {})
            reader_file = ReaderFile(path, format="epub", temporary_dir=temporary_dir)
        except BaseException:
            await asyncio.to_thread(shutil.rmtree, temporary_dir, True)
            raise

        logfire.info(
            "E-book built",
            chapter_count=len(snippets),
            temporary_path=str(path),
        )
        return reader_file

    def validate_article(self, snippet: ArticleSnippet) -> List[SnippetValidationError]:
        """Return every rule ``snippet`` breaks (empty list when it's fine)."""
        problems: List[SnippetValidationError] = []
        if not snippet.metadata.title or not snippet.metadata.title.strip():
            problems.append(SnippetValidationError.EMPTY_TITLE)
        if not is_html_valid(snippet.html_snippet, max_errors=self._max_html_errors, fragment=True):
            problems.append(SnippetValidationError.INVALID_HTML)
        return problems

    async def validate_articles(self, snippets: Sequence[ArticleSnippet]) -> dict[str, List[str]]:
        """Validate all snippets concurrently.

        Verdicts are keyed by URL, so a URL requested more than once reports
        the union of its snippets' violations on a single line.

        Returns:
            Offending URLs mapped to their violation kinds, in input order
        """
        verdicts = await asyncio.gather(
            *(asyncio.to_thread(self.validate_article, snippet) for snippet in snippets)
        )
        errors: dict[str, List[str]] = {}
        for snippet, problems in zip(snippets, verdicts):
            if not problems:
                continue
            kinds = errors.setdefault(snippet.metadata.url, [])
            kinds.extend(p.value for p in problems if p.value not in kinds)
        return errors

    def title(self) -> str:
        return f"{self._title_prefix} {self._today().isoformat()}"

    def _make_book(self, snippets: Sequence[ArticleSnippet]) -> epub.EpubBook:
        book = epub.EpubBook()
        book.set_identifier(str(uuid.uuid4()))
        book.set_title(self.title())
        book.set_language(self._language)
        book.add_author(EPUB_AUTHOR)

        chapters: List[epub.EpubHtml] = []
        for number, snippet in enumerate(snippets, start=1):
            title = snippet.metadata.title.strip()
            chapter = epub.EpubHtml(
                uid=f"chapter_{number}",
                title=title,
                file_name=f"chapter_{number:03d}.xhtml",
                lang=self._language,
            )
            chapter.content = f"<h1>{html.escape(title)}</h1>\n{snippet.html_snippet}"
            book.add_item(chapter)
            chapters.append(chapter)

        book.toc = tuple(epub.Link(c.file_name, c.title, c.id) for c in chapters)
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())
        book.spine = ["nav", *chapters]
        return book
