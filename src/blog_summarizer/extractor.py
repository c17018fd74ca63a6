"""
Pull the readable article body and title out of arbitrary blog HTML.

Content is resolved through an ordered fallback chain:
- CSS selectors, from semantic article containers down to ``body``
- every paragraph long enough to look like prose
- the whole page with navigation chrome removed

The first tier whose cleaned text is long enough wins. Every tier is
post-processed the same way: whitespace collapsed, a minimum length enforced,
and very long bodies truncated.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

from bs4 import BeautifulSoup, Tag
from loguru import logger

from .config import get_settings
from .errors import InsufficientContent

UNTITLED = "Untitled Article"
TRUNCATION_MARKER = "..."

# Tried in order; the first selector whose cleaned text is long enough wins.
DEFAULT_CONTENT_SELECTORS: tuple[str, ...] = (
    # semantic article containers
    "article",
    "[itemprop='articleBody']",
    "[role='article']",
    # common CMS / blogging platform classes
    ".post-content",
    ".entry-content",
    ".article-content",
    ".article-body",
    ".post-body",
    ".blog-post",
    ".story-body",
    ".markdown-body",
    ".prose",
    ".post",
    # generic layout containers
    "#content",
    ".content",
    ".main-content",
    "#main-content",
    ".container",
    # last resort
    "main",
    "[role='main']",
    "body",
)

# Removed from a selected container before its text is read.
NON_CONTENT_TAGS: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "template",
    "nav",
    "header",
    "footer",
    "aside",
    "form",
    "iframe",
    "svg",
    "button",
)

# Removed from the whole page for the last fallback tier.
PAGE_CHROME_TAGS: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "template",
    "nav",
    "header",
    "footer",
    "aside",
)

# Matched against class and id tokens, e.g. "sidebar", "post-comments", "header-ad-slot".
NOISE_PATTERN = re.compile(
    r"(?:^|[-_\s])(?:sidebar|widget|ads?|advert|advertisement|sponsored|promo|"
    r"comments?|disqus|social|share|sharing|related|newsletter|subscribe|"
    r"menu|breadcrumbs?|popup|cookie|banner)(?:$|[-_\s])",
    re.IGNORECASE,
)

# Layout state classes ("has-sidebar", "layout-with-sidebar") mark wrappers
# that usually hold the article itself.
LAYOUT_MODIFIER_PATTERN = re.compile(
    r"^(?:has|with|no|is|layout|page|template)[-_]", re.IGNORECASE
)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExtractionResult:
    title: str
    content: str
    source_url: str
    strategy: str


@dataclass(frozen=True)
class ContentStrategy:
    """One rung of the fallback ladder: a name plus a callable producing text (or None)."""

    name: str
    extract: Callable[[BeautifulSoup], Optional[str]]
    min_chars: int


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _has_noise_marker(tag: Tag) -> bool:
    if not isinstance(tag, Tag) or tag.attrs is None:
        return False
    markers = list(tag.get("class") or [])
    tag_id = tag.get("id")
    if tag_id:
        markers.append(tag_id)
    return any(
        NOISE_PATTERN.search(str(marker)) and not LAYOUT_MODIFIER_PATTERN.match(str(marker))
        for marker in markers
    )


def _strip_nodes(root: Tag, tag_names: Sequence[str], *, noise_markers: bool) -> Tag:
    for node in root.find_all(list(tag_names)):
        if not node.decomposed:
            node.decompose()
    if noise_markers:
        for node in root.find_all(_has_noise_marker):
            if not node.decomposed:
                node.decompose()
    return root


def _element_text(element: Tag) -> str:
    return normalize_whitespace(element.get_text(" ", strip=True))


def _selector_extractor(selector: str) -> Callable[[BeautifulSoup], Optional[str]]:
    def _extract(soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        # Work on a copy so later tiers still see the untouched document.
        container = _strip_nodes(copy.copy(element), NON_CONTENT_TAGS, noise_markers=True)
        return _element_text(container)

    return _extract


def _paragraph_extractor(min_paragraph_chars: int) -> Callable[[BeautifulSoup], Optional[str]]:
    def _extract(soup: BeautifulSoup) -> Optional[str]:
        paragraphs = [_element_text(p) for p in soup.find_all("p")]
        kept = [text for text in paragraphs if len(text) > min_paragraph_chars]
        return " ".join(kept) if kept else None

    return _extract


def _full_page_text(soup: BeautifulSoup) -> Optional[str]:
    if soup.body is None:
        return _element_text(soup)
    return _element_text(_strip_nodes(copy.copy(soup.body), PAGE_CHROME_TAGS, noise_markers=False))


def content_strategies(
    selectors: Sequence[str],
    *,
    min_selector_chars: int,
    min_paragraph_chars: int,
) -> Iterator[ContentStrategy]:
    """Yield the fallback ladder lazily, in priority order."""
    for selector in selectors:
        yield ContentStrategy(f"selector:{selector}", _selector_extractor(selector), min_selector_chars)
    yield ContentStrategy("paragraphs", _paragraph_extractor(min_paragraph_chars), min_selector_chars)
    # Final rung: accepted whatever its length; the minimum is enforced afterwards.
    yield ContentStrategy("full_page", _full_page_text, 0)


def extract_title(soup: BeautifulSoup) -> str:
    """
    First non-empty of: <h1>, <title>, og:title, twitter:title.

    Falls back to "Untitled Article".
    """
    candidates: list[Callable[[], Optional[str]]] = [
        lambda: soup.h1.get_text(" ", strip=True) if soup.h1 else None,
        lambda: soup.title.get_text(" ", strip=True) if soup.title else None,
        lambda: _meta_content(soup, property="og:title"),
        lambda: _meta_content(soup, name="twitter:title")
        or _meta_content(soup, property="twitter:title"),
    ]
    for candidate in candidates:
        text = normalize_whitespace(candidate() or "")
        if text:
            return text
    return UNTITLED


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return content if isinstance(content, str) else None


def finalize_content(text: str, *, min_chars: int, max_chars: int) -> str:
    """Collapse whitespace, enforce the minimum length, and truncate long bodies."""
    cleaned = normalize_whitespace(text)
    if len(cleaned) < min_chars:
        raise InsufficientContent()
    if len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars] + TRUNCATION_MARKER
    return cleaned


def extract(
    html: str,
    url: str,
    *,
    selectors: Optional[Sequence[str]] = None,
) -> ExtractionResult:
    """
    Extract the title and article body from ``html``.

    Raises InsufficientContent when even the full-page fallback yields fewer
    than the configured minimum characters.
    """
    settings = get_settings()
    active_selectors = selectors or settings.content_selectors or DEFAULT_CONTENT_SELECTORS
    soup = BeautifulSoup(html or "", "lxml")
    title = extract_title(soup)

    chosen = "none"
    content = ""
    for strategy in content_strategies(
        active_selectors,
        min_selector_chars=settings.min_selector_chars,
        min_paragraph_chars=settings.min_paragraph_chars,
    ):
        text = strategy.extract(soup) or ""
        if len(text) > strategy.min_chars:
            chosen, content = strategy.name, text
            break
        logger.debug(f"{strategy.name} yielded {len(text)} chars for {url}; trying next")

    try:
        final = finalize_content(
            content,
            min_chars=settings.min_content_chars,
            max_chars=settings.max_content_chars,
        )
    except InsufficientContent:
        logger.warning(f"Insufficient content for {url} ({len(content)} chars via {chosen})")
        raise

    logger.info(f"Extracted {len(final)} chars from {url} via {chosen}")
    return ExtractionResult(title=title, content=final, source_url=url, strategy=chosen)
