"""Structural extraction of page content from parsed HTML."""

import logging
from typing import Callable, Iterable, Optional, TypeVar, Union

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    ProcessingInstruction,
    Tag,
)

from pagescope.constants import VIDEO_HOST_MARKERS
from pagescope.models import (
    Heading,
    Image,
    Link,
    ListBlock,
    PageMeta,
    Paragraph,
    Script,
    StructuredContent,
    Stylesheet,
    Table,
    Video,
)
from pagescope.url_utils import (
    is_external,
    is_valid_image_url,
    is_web_url,
    normalize_url,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']

# Text under these tags is never rendered as page content
INVISIBLE_TAGS = ['script', 'style', 'noscript', 'template', 'head', 'title']

NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

# Elements that start a new line of rendered text
BLOCK_TAGS = [
    'address', 'article', 'aside', 'blockquote', 'caption', 'dd', 'div',
    'dl', 'dt', 'figcaption', 'figure', 'footer', 'form', 'h1', 'h2',
    'h3', 'h4', 'h5', 'h6', 'header', 'li', 'main', 'nav', 'ol', 'p',
    'pre', 'section', 'table', 'td', 'th', 'tr', 'ul',
]


def parse_html(html: str) -> BeautifulSoup:
    """Parse raw markup into a queryable tree. Malformed markup never raises."""
    return BeautifulSoup(html or "", "html.parser")


def _text(element: Tag) -> str:
    """Trimmed text of an element with internal whitespace collapsed."""
    return " ".join(element.get_text().split())


def _attr(element: Tag, name: str) -> Optional[str]:
    """Attribute value as a string; multi-valued attributes are space-joined."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value) or None
    return value


class StructuralExtractor:
    """Walks a parsed document and builds the StructuredContent model.

    Each collection is extracted independently. A node that fails to
    convert is logged and skipped; the rest of the document is still
    processed.
    """

    def extract(self, document: Union[str, BeautifulSoup], base_url: str) -> StructuredContent:
        """Extract all structural elements from a document.

        Args:
            document: Raw HTML or an already parsed tree
            base_url: URL the document was fetched from

        Returns:
            StructuredContent for the document
        """
        soup = parse_html(document) if isinstance(document, str) else document

        return StructuredContent(
            meta=self.extract_meta(soup, base_url),
            full_text=self.extract_full_text(soup),
            paragraphs=self.extract_paragraphs(soup),
            images=self.extract_images(soup, base_url),
            links=self.extract_links(soup, base_url),
            headings=self.extract_headings(soup),
            lists=self.extract_lists(soup),
            tables=self.extract_tables(soup),
            videos=self.extract_videos(soup, base_url),
            scripts=self.extract_scripts(soup, base_url),
            stylesheets=self.extract_stylesheets(soup, base_url),
        )

    def _collect(
        self,
        elements: Iterable[Tag],
        builder: Callable[[Tag], Optional[T]],
        kind: str,
    ) -> list[T]:
        """Apply builder to each element, dropping None results and failures."""
        results = []
        for element in elements:
            try:
                item = builder(element)
            except Exception as e:
                logger.debug(f"Skipping malformed {kind} element: {e}")
                continue
            if item is not None:
                results.append(item)
        return results

    def extract_meta(self, soup: BeautifulSoup, base_url: str = "") -> PageMeta:
        """Extract title, standard meta tags, favicon and grouped OG/Twitter tags."""
        values = {}

        title_tag = soup.find('title')
        if title_tag:
            values['title'] = title_tag.get_text().strip()

        for name in ('description', 'author', 'robots', 'viewport'):
            tag = soup.find('meta', attrs={'name': name})
            if tag is not None:
                values[name] = _attr(tag, 'content')

        keywords_tag = soup.find('meta', attrs={'name': 'keywords'})
        if keywords_tag is not None and _attr(keywords_tag, 'content'):
            values['keywords'] = [
                k.strip() for k in _attr(keywords_tag, 'content').split(',') if k.strip()
            ]

        charset_tag = soup.find('meta', charset=True)
        if charset_tag is not None:
            values['charset'] = _attr(charset_tag, 'charset')

        icon_tag = soup.select_one('link[rel~="icon"]')
        if icon_tag is not None:
            values['favicon'] = normalize_url(base_url, _attr(icon_tag, 'href')) or None

        og_tags, twitter_tags, other = {}, {}, {}
        for tag in soup.find_all('meta'):
            try:
                name = _attr(tag, 'name')
                prop = _attr(tag, 'property')
                content = _attr(tag, 'content')

                if prop and prop.startswith('og:'):
                    og_tags[prop[3:]] = content or ""
                elif name and name.startswith('twitter:'):
                    twitter_tags[name[8:]] = content or ""
                elif prop and prop.startswith('twitter:'):
                    twitter_tags[prop[8:]] = content or ""
                elif name and content:
                    other[name] = content
            except Exception as e:
                logger.debug(f"Skipping malformed meta element: {e}")

        return PageMeta(og_tags=og_tags, twitter_tags=twitter_tags, other=other, **values)

    def extract_full_text(self, soup: BeautifulSoup) -> str:
        """Visible body text with whitespace collapsed to single spaces.

        Text nodes in different block elements are separated by a space, so
        adjacent list items or table cells do not run together. Inline markup
        inside one block (``Hel<b>lo</b>``) is joined without a gap.
        """
        root = soup.body or soup
        parts = []
        previous_block = None
        for text in root.find_all(string=True):
            if isinstance(text, NON_TEXT_STRINGS):
                continue
            if text.find_parent(INVISIBLE_TAGS) is not None:
                continue
            block = text.find_parent(BLOCK_TAGS)
            if parts and block is not previous_block:
                parts.append(" ")
            parts.append(str(text))
            previous_block = block
        return " ".join("".join(parts).split())

    def extract_paragraphs(self, soup: BeautifulSoup) -> list[Paragraph]:
        def build(el: Tag) -> Optional[Paragraph]:
            text = _text(el)
            if not text:
                return None
            return Paragraph(
                text=text,
                html=el.decode_contents(),
                classes=_attr(el, 'class'),
                id=_attr(el, 'id'),
            )

        return self._collect(soup.find_all('p'), build, 'paragraph')

    def extract_images(self, soup: BeautifulSoup, base_url: str) -> list[Image]:
        def build(el: Tag) -> Optional[Image]:
            raw_src = _attr(el, 'src') or _attr(el, 'data-src')
            src = normalize_url(base_url, raw_src)
            if not is_valid_image_url(src):
                return None
            return Image(
                src=src,
                alt=_attr(el, 'alt'),
                title=_attr(el, 'title'),
                width=_attr(el, 'width'),
                height=_attr(el, 'height'),
                classes=_attr(el, 'class'),
            )

        return self._collect(soup.find_all('img'), build, 'image')

    def extract_links(self, soup: BeautifulSoup, base_url: str) -> list[Link]:
        def build(el: Tag) -> Optional[Link]:
            href = normalize_url(base_url, _attr(el, 'href'))
            if not is_web_url(href):
                return None
            return Link(
                href=href,
                text=_text(el),
                title=_attr(el, 'title'),
                rel=_attr(el, 'rel'),
                classes=_attr(el, 'class'),
                is_external=is_external(href, base_url),
            )

        return self._collect(soup.find_all('a'), build, 'link')

    def extract_headings(self, soup: BeautifulSoup) -> list[Heading]:
        def build(el: Tag) -> Heading:
            return Heading(
                level=int(el.name[1]),
                text=_text(el),
                id=_attr(el, 'id'),
                classes=_attr(el, 'class'),
            )

        return self._collect(soup.find_all(HEADING_TAGS), build, 'heading')

    def extract_lists(self, soup: BeautifulSoup) -> list[ListBlock]:
        def build(el: Tag) -> ListBlock:
            return ListBlock(
                kind='ordered' if el.name == 'ol' else 'unordered',
                items=[_text(li) for li in el.find_all('li', recursive=False)],
            )

        return self._collect(soup.find_all(['ul', 'ol']), build, 'list')

    def extract_tables(self, soup: BeautifulSoup) -> list[Table]:
        def build(el: Tag) -> Table:
            rows = []
            for tr in el.find_all('tr'):
                cells = tr.find_all('td', recursive=False)
                if cells:
                    rows.append([_text(td) for td in cells])
            return Table(
                headers=[_text(th) for th in el.find_all('th')],
                rows=rows,
            )

        return self._collect(soup.find_all('table'), build, 'table')

    def extract_videos(self, soup: BeautifulSoup, base_url: str) -> list[Video]:
        def build(el: Tag) -> Optional[Video]:
            if el.name == 'video':
                raw_src = _attr(el, 'src')
                if not raw_src:
                    source = el.find('source', src=True)
                    raw_src = _attr(source, 'src') if source else None
                kind = 'video'
            else:
                raw_src = _attr(el, 'src') or ""
                lowered = raw_src.lower()
                kind = next(
                    (k for marker, k in VIDEO_HOST_MARKERS.items() if marker in lowered),
                    None,
                )
                if kind is None:
                    return None

            src = normalize_url(base_url, raw_src)
            if not src:
                return None
            return Video(
                kind=kind,
                src=src,
                title=_attr(el, 'title') or "",
                width=_attr(el, 'width'),
                height=_attr(el, 'height'),
                embed_html=str(el),
            )

        return self._collect(soup.find_all(['video', 'iframe']), build, 'video')

    def extract_scripts(self, soup: BeautifulSoup, base_url: str) -> list[Script]:
        def build(el: Tag) -> Script:
            src = normalize_url(base_url, _attr(el, 'src'))
            inline = el.get_text().strip()
            return Script(
                src=src or None,
                kind=_attr(el, 'type'),
                is_async=el.has_attr('async'),
                defer=el.has_attr('defer'),
                inline_content=inline or None,
            )

        return self._collect(soup.find_all('script'), build, 'script')

    def extract_stylesheets(self, soup: BeautifulSoup, base_url: str) -> list[Stylesheet]:
        def build_external(el: Tag) -> Stylesheet:
            href = normalize_url(base_url, _attr(el, 'href'))
            return Stylesheet(kind='external', href=href or None)

        def build_inline(el: Tag) -> Stylesheet:
            content = el.get_text().strip()
            return Stylesheet(kind='inline', content=content or None)

        external = self._collect(
            soup.select('link[rel~="stylesheet"]'), build_external, 'stylesheet'
        )
        inline = self._collect(soup.find_all('style'), build_inline, 'style')
        return external + inline
