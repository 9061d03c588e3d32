"""Website content extraction.

Uses BeautifulSoup to turn fetched HTML into an immutable WebsiteContent:
- Title from <title> (falls back to og:title)
- Meta description from <meta name="description"> (falls back to og:description)
- Headings h1-h3 in document order
- Paragraphs and list items from the page body (navigation excluded)
- Call-to-action strings from buttons and button-styled links
- Navigation link labels from <nav>/<header>

ERROR LOGGING REQUIREMENTS:
- Log extraction start/end with URL and timing
- Log fetch failures at WARNING level before raising ContentExtractionError
- Log cache hits at DEBUG level
"""

import re
import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup, Tag

from adsintel.core.logging import get_logger
from adsintel.integrations.crawler import PageFetcher

if TYPE_CHECKING:
    from adsintel.services.content_cache import ContentCache

logger = get_logger(__name__)

MAX_HEADINGS = 50
MAX_PARAGRAPHS = 100
MAX_LIST_ITEMS = 100
MAX_CTA_BUTTONS = 20
MAX_NAVIGATION_LINKS = 30
MIN_PARAGRAPH_LENGTH = 20

# Elements that never carry readable page copy
STRIP_TAGS = ["script", "style", "noscript", "iframe", "svg", "template"]

CTA_CLASS_PATTERN = re.compile(r"\b(btn|button|cta)\b", re.IGNORECASE)


class ContentExtractionError(Exception):
    """Raised when a website cannot be fetched or parsed."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Content extraction failed for {url}: {message}")


@dataclass(frozen=True)
class WebsiteContent:
    """Immutable snapshot of one scraped page."""

    url: str
    title: str | None = None
    description: str | None = None
    headings: tuple[str, ...] = ()
    paragraphs: tuple[str, ...] = ()
    list_items: tuple[str, ...] = ()
    cta_buttons: tuple[str, ...] = ()
    navigation_links: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebsiteContent":
        def _seq(key: str) -> tuple[str, ...]:
            return tuple(str(v) for v in data.get(key) or [] if v)

        return cls(
            url=data.get("url", ""),
            title=data.get("title") or None,
            description=data.get("description") or None,
            headings=_seq("headings"),
            paragraphs=_seq("paragraphs"),
            list_items=_seq("list_items"),
            cta_buttons=_seq("cta_buttons"),
            navigation_links=_seq("navigation_links"),
        )

    def all_text(self) -> str:
        """Concatenate every text field, in a fixed order."""
        parts = [
            self.title or "",
            self.description or "",
            *self.headings,
            *self.paragraphs,
            *self.list_items,
            *self.cta_buttons,
            *self.navigation_links,
        ]
        return " ".join(p for p in parts if p)


def _clean(text: str | None) -> str:
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def _dedupe(values: list[str], limit: int) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = value.lower()
        if not value or key in seen:
            continue
        seen.add(key)
        result.append(value)
        if len(result) >= limit:
            break
    return tuple(result)


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if isinstance(tag, Tag):
        content = tag.get("content")
        if isinstance(content, str) and content.strip():
            return _clean(content)
    return None


def _in_navigation(tag: Tag) -> bool:
    return tag.find_parent(["nav", "header", "footer"]) is not None


def _extract_ctas(soup: BeautifulSoup) -> list[str]:
    ctas: list[str] = []
    for button in soup.find_all("button"):
        ctas.append(_clean(button.get_text(" ")))
    for submit in soup.find_all("input", attrs={"type": "submit"}):
        value = submit.get("value")
        if isinstance(value, str):
            ctas.append(_clean(value))
    for link in soup.find_all("a"):
        classes = link.get("class") or []
        class_str = " ".join(classes) if isinstance(classes, list) else str(classes)
        if CTA_CLASS_PATTERN.search(class_str) or link.get("role") == "button":
            ctas.append(_clean(link.get_text(" ")))
    # Labels over 60 characters are dropped
    return [c for c in ctas if 0 < len(c) <= 60]


def parse_website_content(url: str, html: str) -> WebsiteContent:
    """Parse HTML into a WebsiteContent snapshot."""
    soup = BeautifulSoup(html, "html.parser")
    for tag_name in STRIP_TAGS:
        for element in soup.find_all(tag_name):
            element.decompose()

    title = _clean(soup.title.string) if soup.title and soup.title.string else None
    if not title:
        title = _meta_content(soup, property="og:title")

    description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )

    headings = [_clean(h.get_text(" ")) for h in soup.find_all(["h1", "h2", "h3"])]

    paragraphs = [
        _clean(p.get_text(" "))
        for p in soup.find_all("p")
        if not _in_navigation(p)
    ]
    paragraphs = [p for p in paragraphs if len(p) >= MIN_PARAGRAPH_LENGTH]

    list_items = [
        _clean(li.get_text(" "))
        for li in soup.find_all("li")
        if not _in_navigation(li)
    ]

    navigation: list[str] = []
    for container in soup.find_all(["nav", "header"]):
        for link in container.find_all("a"):
            navigation.append(_clean(link.get_text(" ")))

    return WebsiteContent(
        url=url,
        title=title or None,
        description=description,
        headings=_dedupe(headings, MAX_HEADINGS),
        paragraphs=_dedupe(paragraphs, MAX_PARAGRAPHS),
        list_items=_dedupe(list_items, MAX_LIST_ITEMS),
        cta_buttons=_dedupe(_extract_ctas(soup), MAX_CTA_BUTTONS),
        navigation_links=_dedupe(navigation, MAX_NAVIGATION_LINKS),
    )


class ContentExtractor:
    """Fetches a URL and returns its WebsiteContent.

    Extracted content is cached by URL when a ContentCache is supplied.
    """

    def __init__(
        self,
        fetcher: PageFetcher | None = None,
        cache: "ContentCache | None" = None,
    ) -> None:
        self._fetcher = fetcher or PageFetcher()
        self._cache = cache

    async def extract(self, url: str) -> WebsiteContent:
        """Fetch and parse a website.

        Raises:
            ContentExtractionError: If the page cannot be fetched.
        """
        if self._cache is not None:
            cached = await self._cache.get(url)
            if cached is not None:
                logger.debug("Content cache hit", extra={"target_url": url[:200]})
                return cached

        start_time = time.monotonic()
        logger.info("Extracting website content", extra={"target_url": url[:200]})

        result = await self._fetcher.fetch(url)
        if not result.success or result.html is None:
            logger.warning(
                "Website fetch failed",
                extra={
                    "target_url": url[:200],
                    "status_code": result.status_code,
                    "error": result.error,
                },
            )
            raise ContentExtractionError(
                url, result.error or "empty response", result.status_code
            )

        content = parse_website_content(url, result.html)
        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Website content extracted",
            extra={
                "target_url": url[:200],
                "heading_count": len(content.headings),
                "paragraph_count": len(content.paragraphs),
                "cta_count": len(content.cta_buttons),
                "duration_ms": round(duration_ms, 2),
            },
        )

        if self._cache is not None:
            await self._cache.set(url, content)
        return content
