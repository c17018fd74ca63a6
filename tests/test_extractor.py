import pytest
from bs4 import BeautifulSoup

from blog_summarizer.errors import InsufficientContent
from blog_summarizer.extractor import (
    UNTITLED,
    extract,
    extract_title,
    finalize_content,
)

BODY = (
    "Modern web development has evolved significantly over the past decade. "
    "With the rise of frameworks like React, Vue, and Angular, developers now have "
    "powerful tools to create dynamic and interactive user interfaces. "
    "Cloud computing and serverless architectures have revolutionized how we deploy "
    "and scale applications. Security considerations have become more important "
    "than ever, with developers needing to understand HTTPS, CORS, and content "
    "security policies."
)


def _page(body: str, head: str = "<title>Dev Blog | Post</title>") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


def test_article_container_wins_and_chrome_is_stripped():
    html = _page(
        "<nav>Home About Contact</nav>"
        "<article>"
        "<h1>Understanding Modern Web Development</h1>"
        "<script>var tracking = 1;</script>"
        f"<p>{BODY}</p>"
        "<div class='share-buttons'>Share on Twitter</div>"
        "<aside>Related reading list</aside>"
        "<div id='comments'>Great post, thanks!</div>"
        "</article>"
        "<footer>Copyright 2024</footer>"
    )

    result = extract(html, "https://example.com/post")

    assert result.title == "Understanding Modern Web Development"
    assert result.strategy == "selector:article"
    assert result.source_url == "https://example.com/post"
    assert "evolved significantly" in result.content
    for noise in ("tracking", "Share on Twitter", "Related reading", "Great post", "Copyright"):
        assert noise not in result.content


def test_cms_class_is_used_when_no_article_element():
    html = _page(f"<div class='sidebar'>Popular posts</div><div class='entry-content'><p>{BODY}</p></div>")

    result = extract(html, "https://example.com/wp")

    assert result.strategy == "selector:.entry-content"
    assert "Popular posts" not in result.content


@pytest.mark.parametrize(
    "wrapper",
    [
        "<div class='content-area has-sidebar'>",
        "<div id='layout-with-sidebar'>",
        "<div class='page-comments-enabled'>",
    ],
)
def test_layout_wrappers_named_after_noise_keep_the_article(wrapper):
    html = _page(
        f"<article>{wrapper}<p>{BODY}</p></div>"
        "<div class='sidebar'>Popular posts</div></article>"
    )

    result = extract(html, "https://example.com/layout")

    assert result.strategy == "selector:article"
    assert "evolved significantly" in result.content
    assert "Popular posts" not in result.content


def test_short_candidate_falls_through_to_next_selector():
    html = _page(
        "<article><p>Read the teaser.</p></article>"
        f"<div class='post-content'><p>{BODY}</p></div>"
    )

    result = extract(html, "https://example.com/teaser")

    assert result.strategy == "selector:.post-content"
    assert result.content.startswith("Modern web development")


def test_rejected_tier_does_not_alter_document_for_later_tiers():
    # The <article> is too short once its noisy child is removed, but the
    # body tier must still see that child's paragraph text.
    html = _page(
        f"<article><div class='related-posts'><p>{BODY}</p></div></article>"
    )

    result = extract(html, "https://example.com/related")

    assert result.strategy in {"selector:body", "paragraphs", "full_page"}
    assert "evolved significantly" in result.content


def test_paragraph_fallback_keeps_only_long_paragraphs():
    long_paragraphs = "".join(
        f"<p>{sentence.strip()}.</p>" for sentence in BODY.split(".") if sentence.strip()
    )
    html = _page(f"<div><p>Tiny line.</p>{long_paragraphs}<p>Also short.</p></div>")

    result = extract(html, "https://example.com/p", selectors=["article"])

    assert result.strategy == "paragraphs"
    assert "Tiny line" not in result.content
    assert "Also short" not in result.content
    assert "serverless architectures" in result.content


def test_full_page_fallback_strips_navigation():
    html = _page(
        "<header>Site header</header><nav>Menu links</nav>"
        f"<div><span>{BODY}</span></div>"
        "<footer>Footer text</footer>"
    )

    result = extract(html, "https://example.com/divs", selectors=["article"])

    assert result.strategy == "full_page"
    assert "Menu links" not in result.content
    assert "Site header" not in result.content
    assert "Footer text" not in result.content


def test_irregular_markup_with_enough_text_still_extracts():
    text = "Plain text with no semantic markup at all, repeated to be long enough. " * 2
    html = f"<html><body><span>{text}</span></body></html>"

    result = extract(html, "https://example.com/irregular")

    assert len(result.content) >= 100
    assert result.content == text.strip()


def test_insufficient_content_raises():
    with pytest.raises(InsufficientContent):
        extract(_page("<p>Too short.</p>"), "https://example.com/short")


def test_empty_document_raises():
    with pytest.raises(InsufficientContent):
        extract("", "https://example.com/empty")


def test_long_content_is_truncated_with_marker():
    html = _page(f"<article><p>{'word ' * 3000}</p></article>")

    result = extract(html, "https://example.com/long")

    assert len(result.content) == 10000 + len("...")
    assert result.content.endswith("...")


def test_whitespace_is_collapsed():
    html = _page(f"<article><p>{BODY.replace(' ', '   ')}</p>\n\n<p>\t{BODY}</p></article>")

    result = extract(html, "https://example.com/ws")

    assert "  " not in result.content
    assert "\n" not in result.content
    assert "\t" not in result.content


def test_content_selectors_setting_overrides_defaults(monkeypatch):
    monkeypatch.setenv("CONTENT_SELECTORS", '["#story"]')
    html = _page(f"<article><p>{BODY}</p></article><div id='story'><p>{BODY} Story copy.</p></div>")

    result = extract(html, "https://example.com/custom")

    assert result.strategy == "selector:#story"
    assert result.content.endswith("Story copy.")


@pytest.mark.parametrize(
    "head, body, expected",
    [
        ("<title>Page Title</title>", "<h1>  Heading \n  Text </h1>", "Heading Text"),
        ("<title> Page   Title </title>", "<h1> </h1>", "Page Title"),
        ('<meta property="og:title" content="OG Title">', "", "OG Title"),
        ('<meta name="twitter:title" content="Tweet Title">', "", "Tweet Title"),
        ("", "<p>No title anywhere.</p>", UNTITLED),
    ],
)
def test_title_resolution_order(head, body, expected):
    soup = BeautifulSoup(_page(body, head=head), "lxml")
    assert extract_title(soup) == expected


def test_finalize_content_boundaries():
    exact = "x" * 100
    assert finalize_content(exact, min_chars=100, max_chars=10000) == exact
    with pytest.raises(InsufficientContent):
        finalize_content("x" * 99, min_chars=100, max_chars=10000)
    assert finalize_content("y" * 150, min_chars=100, max_chars=120) == "y" * 120 + "..."
