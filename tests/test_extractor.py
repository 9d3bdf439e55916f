"""Tests for structural content extraction."""

import pytest

from pagescope.extractor import StructuralExtractor, parse_html

BASE_URL = "https://example.com/blog/post"

SAMPLE_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>  Extraction Test Page  </title>
    <meta charset="utf-8">
    <meta name="description" content="A page used for testing.">
    <meta name="keywords" content="alpha, beta , ,gamma">
    <meta name="author" content="Jane Doe">
    <meta name="robots" content="index, follow">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <meta property="og:title" content="OG Title">
    <meta property="og:description" content="OG Desc">
    <meta name="twitter:card" content="summary">
    <meta name="generator" content="hand">
    <link rel="stylesheet" href="/css/site.css">
    <link rel="stylesheet" href="https://fonts.googleapis.com/css?family=Roboto">
    <link rel="preload" href="/fonts/a.woff2" as="font">
    <link rel="shortcut icon" href="/favicon.ico">
    <style> body { color: red; } </style>
    <script src="/js/app.js" async></script>
    <script>var x = 1;</script>
</head>
<body>
    <!-- navigation comment -->
    <h1 id="top" class="title main">Main Heading</h1>
    <p class="intro">Hello <b>world</b>!</p>
    <p>   </p>
    <h2>Section</h2>
    <p id="second">Second paragraph.</p>
    <img src="/images/logo.png" alt="Logo" width="100" height="50">
    <img src="//cdn.example.org/pic.jpg">
    <img src="/download/file.pdf" alt="Not an image">
    <img alt="no source">
    <img src="data:image/gif;base64,R0lGOD">
    <a href="/about" title="About us">About</a>
    <a href="https://other.org/page" rel="nofollow noopener">Elsewhere</a>
    <a href="">Empty</a>
    <a name="anchor-only">No href</a>
    <a href="javascript:void(0)">Menu</a>
    <a href="mailto:hello@example.com">Mail</a>
    <a href="tel:+15555550100">Call</a>
    <ul><li> One </li><li>Two<ul><li>Nested</li></ul></li></ul>
    <ol><li>First</li></ol>
    <table>
        <tr><th>Name</th><th>Value</th></tr>
        <tr><td> a </td><td>1</td></tr>
        <tr></tr>
        <tr><td>b</td><td>2</td></tr>
    </table>
    <video src="/media/clip.mp4" title="Clip" width="640"></video>
    <video><source src="https://cdn.example.org/movie.webm"></video>
    <iframe src="https://www.youtube.com/embed/abc123" title="YT" width="560" height="315"></iframe>
    <iframe src="https://player.vimeo.com/video/42"></iframe>
    <iframe src="https://maps.google.com/embed"></iframe>
    <script type="application/ld+json">{"@type": "WebPage"}</script>
</body>
</html>
"""


@pytest.fixture
def extractor():
    """Create a StructuralExtractor instance."""
    return StructuralExtractor()


@pytest.fixture
def content(extractor):
    """Extract the sample document."""
    return extractor.extract(SAMPLE_HTML, BASE_URL)


class TestMetaExtraction:
    """Test cases for head metadata."""

    def test_title_is_trimmed(self, content):
        assert content.meta.title == "Extraction Test Page"

    def test_standard_meta_tags(self, content):
        meta = content.meta
        assert meta.description == "A page used for testing."
        assert meta.author == "Jane Doe"
        assert meta.robots == "index, follow"
        assert meta.viewport == "width=device-width, initial-scale=1"
        assert meta.charset == "utf-8"

    def test_keywords_split_and_cleaned(self, content):
        assert content.meta.keywords == ("alpha", "beta", "gamma")

    def test_social_tags_grouped_without_prefix(self, content):
        assert content.meta.og_tags == {"title": "OG Title", "description": "OG Desc"}
        assert content.meta.twitter_tags == {"card": "summary"}

    def test_other_named_meta(self, content):
        assert content.meta.other["generator"] == "hand"

    def test_has_tag(self, content):
        assert content.meta.has_tag("description")
        assert content.meta.has_tag("og:title")
        assert content.meta.has_tag("twitter:card")
        assert not content.meta.has_tag("twitter:site")

    def test_missing_head(self, extractor):
        meta = extractor.extract("<p>No head here</p>", BASE_URL).meta
        assert meta.title == ""
        assert meta.description is None
        assert meta.keywords == ()
        assert meta.viewport is None
        assert meta.favicon is None

    def test_favicon_is_absolute(self, content):
        assert content.meta.favicon == "https://example.com/favicon.ico"

    def test_meta_collections_are_read_only(self, content):
        with pytest.raises(TypeError):
            content.meta.og_tags["title"] = "changed"
        with pytest.raises(AttributeError):
            content.meta.keywords.append("delta")


class TestBodyExtraction:
    """Test cases for body elements."""

    def test_full_text_is_visible_text_only(self, content):
        text = content.full_text
        assert "Main Heading" in text
        assert "Hello world!" in text
        assert "var x" not in text
        assert "color: red" not in text
        assert "WebPage" not in text
        assert "Extraction Test Page" not in text
        assert "navigation comment" not in text
        assert "  " not in text

    def test_full_text_separates_blocks(self, extractor):
        html = "<ul><li>alpha</li><li>beta</li></ul><table><tr><td>one</td><td>two</td></tr></table>"
        assert extractor.extract(html, BASE_URL).full_text == "alpha beta one two"

    def test_full_text_joins_inline_markup(self, extractor):
        html = "<p>Hel<b>lo</b> <i>there</i></p><div>Intro<p>Nested</p>tail</div>"
        assert extractor.extract(html, BASE_URL).full_text == "Hello there Intro Nested tail"

    def test_paragraphs_skip_empty(self, content):
        assert [p.text for p in content.paragraphs] == ["Hello world!", "Second paragraph."]

    def test_paragraph_attributes(self, content):
        first, second = content.paragraphs
        assert first.html == "Hello <b>world</b>!"
        assert first.classes == "intro"
        assert second.id == "second"

    def test_images_are_absolute_and_valid(self, content):
        assert [img.src for img in content.images] == [
            "https://example.com/images/logo.png",
            "https://cdn.example.org/pic.jpg",
            "data:image/gif;base64,R0lGOD",
        ]
        logo = content.images[0]
        assert logo.alt == "Logo"
        assert logo.width == "100"
        assert logo.height == "50"
        assert content.images[1].alt is None

    def test_lazy_image_source(self, extractor):
        html = '<img data-src="/lazy.webp" alt="Lazy">'
        images = extractor.extract(html, BASE_URL).images
        assert len(images) == 1
        assert images[0].src == "https://example.com/lazy.webp"

    def test_links(self, content):
        assert len(content.links) == 2
        about, elsewhere = content.links

        assert about.href == "https://example.com/about"
        assert about.text == "About"
        assert about.title == "About us"
        assert about.is_external is False

        assert elsewhere.href == "https://other.org/page"
        assert elsewhere.rel == "nofollow noopener"
        assert elsewhere.is_external is True

    def test_links_are_absolute(self, content):
        for link in content.links:
            assert link.href.startswith(("http://", "https://"))

    @pytest.mark.parametrize("href", [
        "javascript:void(0)",
        "mailto:hello@example.com",
        "tel:+15555550100",
        "ftp://example.com/file.txt",
    ])
    def test_non_navigational_links_dropped(self, extractor, href):
        html = f'<a href="{href}">Skip</a><a href="/kept">Kept</a>'
        links = extractor.extract(html, BASE_URL).links
        assert [link.href for link in links] == ["https://example.com/kept"]

    def test_headings_in_document_order(self, content):
        assert [(h.level, h.text) for h in content.headings] == [(1, "Main Heading"), (2, "Section")]
        assert content.headings[0].id == "top"
        assert content.headings[0].classes == "title main"

    def test_heading_levels_in_range(self, content):
        assert all(1 <= h.level <= 6 for h in content.headings)

    def test_lists(self, content):
        assert [lst.kind for lst in content.lists] == ["unordered", "unordered", "ordered"]
        outer = content.lists[0]
        assert len(outer.items) == 2
        assert outer.items[0] == "One"
        assert content.lists[1].items == ("Nested",)
        assert content.lists[2].items == ("First",)

    def test_tables(self, content):
        assert len(content.tables) == 1
        table = content.tables[0]
        assert table.headers == ("Name", "Value")
        assert table.rows == (("a", "1"), ("b", "2"))

    def test_videos(self, content):
        assert [v.kind for v in content.videos] == ["video", "video", "youtube", "vimeo"]
        clip, movie, youtube, vimeo = content.videos

        assert clip.src == "https://example.com/media/clip.mp4"
        assert clip.title == "Clip"
        assert clip.width == "640"
        assert movie.src == "https://cdn.example.org/movie.webm"
        assert youtube.src == "https://www.youtube.com/embed/abc123"
        assert youtube.height == "315"
        assert "youtube.com/embed/abc123" in youtube.embed_html
        assert vimeo.title == ""

    def test_scripts(self, content):
        assert len(content.scripts) == 3
        external, inline, ld_json = content.scripts

        assert external.src == "https://example.com/js/app.js"
        assert external.is_async is True
        assert external.defer is False
        assert external.inline_content is None

        assert inline.src is None
        assert inline.inline_content == "var x = 1;"

        assert ld_json.kind == "application/ld+json"
        assert ld_json.inline_content == '{"@type": "WebPage"}'

    def test_stylesheets(self, content):
        assert [s.kind for s in content.stylesheets] == ["external", "external", "inline"]
        assert content.stylesheets[0].href == "https://example.com/css/site.css"
        assert content.stylesheets[2].content == "body { color: red; }"


class TestMalformedInput:
    """Extraction degrades gracefully on bad markup."""

    def test_unclosed_tags(self, extractor):
        html = (
            "<p>Unclosed <b>bold<p>Next</p>"
            "<img src='javascript:alert(1)'>"
            "<a href='http://[broken'>x</a>"
        )
        content = extractor.extract(html, BASE_URL)

        assert len(content.paragraphs) >= 1
        assert content.images == ()
        assert content.links == ()

    def test_empty_document(self, extractor):
        content = extractor.extract("", BASE_URL)
        assert content.full_text == ""
        assert content.paragraphs == ()
        assert content.links == ()

    def test_failing_element_is_skipped(self, extractor):
        """An element whose conversion raises is dropped; the rest survive."""
        results = extractor._collect([1, 2, 4], lambda x: 1 / (x - 2), "number")
        assert results == [-1.0, 0.5]

    def test_accepts_parsed_document(self, extractor):
        soup = parse_html("<h1>Title</h1>")
        content = extractor.extract(soup, BASE_URL)
        assert content.headings[0].text == "Title"
