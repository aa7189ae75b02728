"""
Content Cleaner
===============

Strips markup from feed entry titles and bodies before techword matching.

Block-level elements are separated by whitespace so words from adjacent
paragraphs never fuse; inline elements are unwrapped without adding
whitespace so ``Dock<b>er</b>`` still reads ``Docker``.
"""

import re
import html
from typing import Optional

from bs4 import BeautifulSoup, Comment
from bs4.element import CData, ProcessingInstruction, Doctype

from ..utils.logging import get_logger_for_component


class ContentCleaner:
    """HTML to plain text conversion for feed entries."""

    # HTML elements to remove including their content
    NON_CONTENT_ELEMENTS = {
        "script",
        "style",
        "iframe",
        "embed",
        "object",
        "applet",
        "noscript",
        "template",
        "canvas",
        "svg",
        "head",
    }

    # Elements that visually break text
    BLOCK_ELEMENTS = {
        "address", "article", "aside", "blockquote", "br", "dd", "div", "dl",
        "dt", "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5",
        "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
        "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul", "img",
    }

    WHITESPACE_PATTERN = re.compile(r"\s+", re.MULTILINE)
    TAG_PATTERN = re.compile(r"<[^>]+>")
    SCRIPT_STYLE_PATTERN = re.compile(
        r"<(script|style)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL
    )

    def __init__(self, parser: str = "html.parser"):
        """Initialize content cleaner.

        Args:
            parser: BeautifulSoup tree builder (built-in parser by default)
        """
        self.parser = parser
        self.logger = get_logger_for_component("content_cleaner")

    def clean(self, html_content: Optional[str]) -> str:
        """Remove markup and return normalized plain text.

        Args:
            html_content: Text possibly containing HTML

        Returns:
            Plain text with entities decoded and whitespace collapsed
        """
        if not html_content or not html_content.strip():
            return ""

        if "<" not in html_content and "&" not in html_content:
            return self._normalize_text(html_content)

        try:
            soup = BeautifulSoup(html_content, self.parser)

            for element in soup.find_all(self.NON_CONTENT_ELEMENTS):
                # Nested matches go away with their ancestor
                if not element.decomposed:
                    element.decompose()

            for element in soup.find_all(
                string=lambda text: isinstance(
                    text, (Comment, CData, ProcessingInstruction, Doctype)
                )
            ):
                element.extract()

            for element in soup.find_all(self.BLOCK_ELEMENTS):
                element.insert_before(" ")
                element.insert_after(" ")

            # Entities are already decoded by the parser
            text = soup.get_text()
            return self.WHITESPACE_PATTERN.sub(" ", text).strip()

        except Exception as e:
            # html.parser can choke on pathological markup
            self.logger.warning(f"Failed to parse HTML, using fallback: {e}")
            return self._extract_text_fallback(html_content)

    def _normalize_text(self, text: str) -> str:
        text = html.unescape(text)
        return self.WHITESPACE_PATTERN.sub(" ", text).strip()

    def _extract_text_fallback(self, html_content: str) -> str:
        """Regex-based text extraction used when BeautifulSoup fails."""
        content = self.SCRIPT_STYLE_PATTERN.sub(" ", html_content)
        content = self.TAG_PATTERN.sub(" ", content)
        return self._normalize_text(content)


_default_cleaner: Optional[ContentCleaner] = None


def sanitize_text(html_content: Optional[str]) -> str:
    """Quick function to strip markup with a shared cleaner."""
    global _default_cleaner
    if _default_cleaner is None:
        _default_cleaner = ContentCleaner()
    return _default_cleaner.clean(html_content)
