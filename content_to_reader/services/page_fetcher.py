"""Fetch rendered HTML for a list of URLs.

Pages are navigated by a bounded pool of headless browser pages so that
script-rendered content is captured and simple bot filters are passed. A
navigation that went through a redirect chain usually landed on a
verification or consent page; such URLs are refetched afterwards with a
plain HTTP GET.
"""

import asyncio
from contextlib import AbstractAsyncContextManager
from typing import Callable, List, Protocol, Sequence

import httpx
import logfire

from content_to_reader.config import get_settings
from content_to_reader.errors import FetchError
from content_to_reader.models.fetch_models import FetchedPage, FetchResult, Navigation

OnFetched = Callable[[str], None]


class BrowserPool(Protocol):
    """Protocol for navigating URLs with browser automation."""

    async def navigate(self, url: str) -> Navigation:
        """Navigate to URL and capture the rendered HTML.

        Args:
            url: The URL to navigate to

        Returns:
            Navigation with final status, HTML and whether a redirect happened

        Raises:
            Exception: If navigation fails (timeout, DNS, crashed page, ...)
        """
        ...


class PlaywrightBrowserPool:
    """Headless Chromium shared by all navigations of one fetch.

    Use as an async context manager; each ``navigate`` call opens its own page.
    """

    def __init__(
        self,
        timeout: float,
        user_agent: str | None = None,
        headless: bool = True,
    ):
        self._timeout = timeout
        self._user_agent = user_agent
        self._headless = headless
        self._playwright = None
        self._browser = None
        self._context = None

    async def __aenter__(self) -> "PlaywrightBrowserPool":
        # Imported lazily so the rest of the package works without browsers installed
        from playwright.async_api import async_playwright  # noqa: PLC0415

        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self._headless)
            self._context = await self._browser.new_context(user_agent=self._user_agent)
        except BaseException:
            await self.__aexit__(None, None, None)
            raise
        logfire.info("Browser pool started", headless=self._headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def navigate(self, url: str) -> Navigation:
        if self._context is None:
            raise RuntimeError("Browser pool is not started")

        page = await self._context.new_page()
        try:
            response = await page.goto(
                url,
                timeout=int(self._timeout * 1000),
                wait_until="domcontentloaded",
            )
            html = await page.content()
            if response is None:
                # Same-document navigations carry no response
                return Navigation(url=url, status=200, html=html)
            return Navigation(
                url=url,
                status=response.status,
                html=html,
                redirected=response.request.redirected_from is not None,
            )
        finally:
            await page.close()


class PageFetcher:
    """Fetch many pages concurrently, preserving request order."""

    # Headers for the plain HTTP fallback, mimicking a real browser
    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }

    def __init__(
        self,
        concurrency: int | None = None,
        navigation_timeout: float | None = None,
        http_timeout: float | None = None,
        redirect_triggers_fallback: bool | None = None,
        browser_pool_factory: Callable[[], AbstractAsyncContextManager[BrowserPool]]
        | None = None,
        headers: dict[str, str] | None = None,
    ):
        """Initialize the page fetcher.

        Args:
            concurrency: Maximum number of simultaneous navigations
            navigation_timeout: Timeout of a single browser navigation (seconds)
            http_timeout: Timeout of fallback HTTP requests (seconds)
            redirect_triggers_fallback: Refetch redirected navigations with plain HTTP
            browser_pool_factory: Creates the browser pool (defaults to Playwright)
            headers: Headers for fallback requests (defaults to browser-like headers)
        """
        settings = get_settings()
        self._concurrency = concurrency or settings.fetch_concurrency
        self._navigation_timeout = navigation_timeout or settings.browser_page_load_timeout_seconds
        self._http_timeout = http_timeout or settings.http_timeout_seconds
        self._redirect_triggers_fallback = (
            settings.redirect_triggers_fallback
            if redirect_triggers_fallback is None
            else redirect_triggers_fallback
        )
        self._browser_pool_factory = browser_pool_factory or (
            lambda: PlaywrightBrowserPool(
                timeout=self._navigation_timeout,
                user_agent=self.DEFAULT_HEADERS["User-Agent"],
            )
        )
        self._headers = headers or self.DEFAULT_HEADERS.copy()

    async def fetch(self, urls: Sequence[str], on_fetched: OnFetched | None = None) -> FetchResult:
        """Fetch HTML for every URL.

        Each distinct URL is fetched once. Every navigation runs to completion
        before failures are reported, so a single ``FetchError`` lists every
        failing URL.

        Args:
            urls: URLs in the order their articles should appear
            on_fetched: Called with each URL as soon as its HTML is available

        Returns:
            FetchResult whose pages carry their position in ``urls``

        Raises:
            FetchError: If any URL failed in the browser or fallback pass
        """
        if not urls:
            return FetchResult()

        distinct = list(dict.fromkeys(urls))
        logfire.info(
            "Fetching pages",
            url_count=len(urls),
            distinct_count=len(distinct),
            concurrency=self._concurrency,
        )

        html_by_url: dict[str, str] = {}
        failures: dict[str, str] = {}
        deferred: List[str] = []
        semaphore = asyncio.Semaphore(self._concurrency)

        async with self._browser_pool_factory() as pool:

            async def navigate(url: str) -> None:
                async with semaphore:
                    try:
                        navigation = await pool.navigate(url)
                    except Exception as e:
                        failures[url] = str(e) or type(e).__name__
                        logfire.warning("Navigation failed", url=url, error=failures[url])
                        return

                if navigation.redirected and self._redirect_triggers_fallback:
                    logfire.info(
                        "Navigation redirected, deferring to plain HTTP",
                        url=url,
                        status_code=navigation.status,
                    )
                    deferred.append(url)
                    return
                if not 200 <= navigation.status < 300:
                    failures[url] = f"Navigation failed with status code {navigation.status}"
                    logfire.warning("Navigation failed", url=url, status_code=navigation.status)
                    return

                html_by_url[url] = navigation.html
                logfire.info(
                    "Page fetched (browser)",
                    url=url,
                    status_code=navigation.status,
                    content_length=len(navigation.html),
                )
                if on_fetched is not None:
                    on_fetched(url)

            await asyncio.gather(*(navigate(url) for url in distinct))

        if failures:
            raise FetchError({url: failures[url] for url in distinct if url in failures})

        if deferred:
            deferred.sort(key=distinct.index)
            html_by_url.update(await self._fetch_plain(deferred, on_fetched))

        pages = [
            FetchedPage(url=url, html=html_by_url[url], order=order)
            for order, url in enumerate(urls)
        ]
        return FetchResult(pages)

    async def _fetch_plain(
        self, urls: List[str], on_fetched: OnFetched | None
    ) -> dict[str, str]:
        """Fetch deferred URLs with plain HTTP GET, concurrently and without retries."""
        async with httpx.AsyncClient(
            timeout=self._http_timeout,
            follow_redirects=True,
            headers=self._headers,
        ) as client:

            async def get(url: str) -> str:
                response = await client.get(url)
                response.raise_for_status()
                logfire.info(
                    "Page fetched (httpx)",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.text),
                )
                if on_fetched is not None:
                    on_fetched(url)
                return response.text

            results = await asyncio.gather(*(get(url) for url in urls), return_exceptions=True)

        fetched: dict[str, str] = {}
        failures: dict[str, str] = {}
        for url, result in zip(urls, results):
            if isinstance(result, httpx.HTTPError):
                failures[url] = str(result) or type(result).__name__
            elif isinstance(result, BaseException):
                raise result
            else:
                fetched[url] = result
        if failures:
            raise FetchError(failures)
        return fetched
