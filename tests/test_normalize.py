"""Tests for item normalization."""

from devops_digest.core import Item
from devops_digest.core.normalize import (
    MAX_EXCERPT_LENGTH,
    decode_entities,
    drop_unlinkable,
    is_web_url,
    normalize,
    normalize_excerpt,
    normalize_item,
    normalize_title,
    normalize_url,
)


def _item(**overrides) -> Item:
    fields = dict(
        title="Title",
        url="https://example.com/a",
        excerpt="Excerpt",
        source="Example",
        published_at="2025-11-15T10:00:00+00:00",
    )
    fields.update(overrides)
    return Item(**fields)


def test_normalize_title() -> None:
    """Whitespace, entities and bracketed markers are cleaned up."""
    assert normalize_title("  Hello &amp; World [Sponsored]\n  now ") == "Hello & World now"
    assert normalize_title("[Release] Helm &quot;4&quot; &#039;beta&#039;") == "Helm \"4\" 'beta'"


def test_normalize_excerpt_strips_markup() -> None:
    assert normalize_excerpt("<p>Foo &lt;b&gt;bar&lt;/b&gt;</p>\n\n  baz") == "Foo bar baz"
    assert normalize_excerpt("") == ""


def test_normalize_excerpt_caps_length() -> None:
    excerpt = normalize_excerpt("word " * 200)

    assert len(excerpt) <= MAX_EXCERPT_LENGTH
    assert not excerpt.endswith(" ")


def test_decode_entities_until_stable() -> None:
    assert decode_entities("&amp;lt;tag&amp;gt;") == "<tag>"
    assert decode_entities("a &amp; b") == "a & b"


def test_normalize_url_keeps_query() -> None:
    url = normalize_url("https://example.com/post?id=7&utm_source=rss")

    assert url.startswith("https://example.com/post?")
    assert "id=7" in url
    assert "utm_source=rss" in url


def test_unparsable_date_uses_now(now) -> None:
    item = normalize_item(_item(published_at="not a date"), now)

    assert item.published_at == "2025-11-16T12:00:00+00:00"


def test_rfc822_date_is_converted_to_utc_iso(now) -> None:
    item = normalize_item(_item(published_at="Mon, 15 Jan 2024 00:00:00 -0500"), now)

    assert item.published_at == "2024-01-15T05:00:00+00:00"


def test_normalize_returns_new_items(now) -> None:
    original = _item(title="  spaced  ")
    normalized = normalize([original], now)

    assert original.title == "  spaced  "
    assert normalized[0].title == "spaced"


def test_normalize_is_idempotent(now) -> None:
    """normalize(normalize(x)) == normalize(x)."""
    items = [
        _item(
            title="  [News]  Kubernetes &amp;amp; Helm\n\tupdate [v2] ",
            url="https://Example.com/a b?x=1&utm_source=feed",
            excerpt="<div><p>Deep &lt;i&gt;dive&lt;/i&gt;</p>" + "x" * 700 + "</div>",
            published_at="Tue, 11 Nov 2025 08:30:00 GMT",
        ),
        _item(title="[[nested]] title", excerpt="   ", published_at="garbage"),
        _item(title="Plain", url="not a url", excerpt="a < b > c", published_at=""),
        _item(title="AT&amp[x];T news", excerpt="&am<b>p;lt;tag&am<i>p;gt; body"),
        _item(title="&[sponsored]amp;[ad]amp; [x]", excerpt="&[x]lt;b&gt;"),
    ]

    once = normalize(items, now)
    twice = normalize(once, now)

    assert twice == once


def test_marker_removal_cannot_leave_entities_behind() -> None:
    """Entities spliced together by dropping a marker or tag are decoded too."""
    assert normalize_title("AT&amp[x];T news") == "AT&T news"
    assert normalize_excerpt("&am<b>p;lt;") == "<"


def test_is_web_url() -> None:
    assert is_web_url("https://example.com/a")
    assert is_web_url("http://example.com")
    assert not is_web_url("/blog/relative")
    assert not is_web_url("example.com/a")
    assert not is_web_url("mailto:someone@example.com")


def test_drop_unlinkable(make_item) -> None:
    items = [make_item(url="https://x.com/ok"), make_item(url="/relative/path")]

    assert [item.url for item in drop_unlinkable(items)] == ["https://x.com/ok"]
