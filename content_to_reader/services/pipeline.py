"""End-to-end pipeline: pages in, committed and/or delivered EPUB out."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

import logfire

from content_to_reader.errors import CommitError, ConfigurationError, DeliveryError
from content_to_reader.models.article_models import ArticleSnippet, OrderedSnippet
from content_to_reader.models.config_models import DeviceDeliveryConfig, PageSpec
from content_to_reader.models.fetch_models import FetchedPage
from content_to_reader.services.article import Article
from content_to_reader.services.device_delivery import (
    DeviceDelivery,
    SmtpDeviceDelivery,
    attachment_name,
)
from content_to_reader.services.output_path import sanitize_output_path
from content_to_reader.services.page_fetcher import PageFetcher
from content_to_reader.services.reader_file_builder import ReaderFileBuilder

OnProgress = Callable[[str], None]


@dataclass
class PipelineResult:
    """What a pipeline run produced."""

    article_count: int
    output_path: str | None = None
    delivered: bool = False
    delivery_error: str | None = None


def extract_snippet(
    page: FetchedPage, spec: PageSpec, max_html_errors: int | None = None
) -> OrderedSnippet:
    """Extract one fetched page with its selectors, or automatically without them."""
    article = Article(page.url, page.html, max_html_errors=max_html_errors)
    snippet = article.from_selectors(spec.selectors) if spec.selectors else article.from_html()
    return OrderedSnippet(snippet=snippet, order=page.order)


def sort_snippets(snippets: Iterable[OrderedSnippet]) -> List[ArticleSnippet]:
    """Restore request order so the table of contents follows the configuration."""
    return [item.snippet for item in sorted(snippets, key=lambda item: item.order)]


async def create_reader_file(
    pages: Sequence[PageSpec],
    output: str | None = None,
    to_device: DeviceDeliveryConfig | None = None,
    fetcher: PageFetcher | None = None,
    builder: ReaderFileBuilder | None = None,
    delivery: DeviceDelivery | None = None,
    on_progress: OnProgress | None = None,
    max_html_errors: int | None = None,
) -> PipelineResult:
    """Fetch, extract and assemble ``pages`` into an EPUB, then commit and/or deliver it.

    The temporary EPUB is always cleaned up. When delivery fails after the
    file was saved to ``output``, the saved file is kept and the failure is
    reported in the result instead of raised.

    Args:
        pages: Pages in chapter order
        output: Destination path; must not exist yet
        to_device: Device delivery target
        fetcher: Page fetcher (defaults to PageFetcher)
        builder: E-book builder (defaults to ReaderFileBuilder)
        delivery: Device delivery (defaults to SmtpDeviceDelivery)
        on_progress: Receives human-readable progress messages
        max_html_errors: Structural HTML errors tolerated per page

    Returns:
        PipelineResult

    Raises:
        ConfigurationError: If there are no pages or nowhere to put the e-book
        FetchError, ExtractionError, ValidationError, CommitError: On failure
        DeliveryError: If delivery fails and there's no output file
    """
    progress = on_progress or (lambda message: None)

    if output is None and to_device is None:
        raise ConfigurationError(
            "Couldn't determine output path. Use either -o option or a configuration file."
        )
    if not pages:
        raise ConfigurationError(
            "No pages provided. Use configuration file or pass a single URL as the first argument."
        )
    if output is not None:
        output = sanitize_output_path(output)
        if Path(output).exists():
            raise CommitError(f"Can't save e-book to {output}: file already exists.")

    fetcher = fetcher or PageFetcher()
    builder = builder or ReaderFileBuilder(max_html_errors=max_html_errors)

    with logfire.span("create reader file", page_count=len(pages)):
        progress("Fetching pages...")
        fetched = await fetcher.fetch(
            [page.url for page in pages], on_fetched=lambda url: progress(f"Fetched {url}")
        )

        progress("Parsing pages...")
        extracted = await asyncio.gather(
            *(
                asyncio.to_thread(extract_snippet, page, pages[page.order], max_html_errors)
                for page in fetched.pages
            )
        )
        snippets = sort_snippets(extracted)

        progress("Building EPUB...")
        reader_file = await builder.build(snippets)
        result = PipelineResult(article_count=len(snippets))

        async with reader_file:
            if output is not None:
                progress("Saving on disk...")
                await reader_file.save(output)
                result.output_path = output

            if to_device is not None:
                progress("Sending an email...")
                try:
                    await (delivery or SmtpDeviceDelivery()).deliver(
                        await reader_file.get_bytes(), attachment_name(), to_device
                    )
                    result.delivered = True
                except DeliveryError as e:
                    if result.output_path is None:
                        raise
                    logfire.error("Delivery failed, e-book kept on disk", error=str(e))
                    result.delivery_error = str(e)

            progress("Cleanup...")

    logfire.info(
        "Reader file created",
        article_count=result.article_count,
        output_path=result.output_path,
        delivered=result.delivered,
    )
    return result
