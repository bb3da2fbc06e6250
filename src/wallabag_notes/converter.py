from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .errors import ConversionError


_SKIP_TAGS = {"script", "style", "head", "noscript", "template", "iframe"}
_BLOCK_TAGS = {
    "p", "div", "section", "article", "main", "header", "footer",
    "figure", "figcaption", "aside", "nav", "details", "summary", "dl", "dd", "dt",
}
_HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}


class HtmlToMarkdownConverter(ABC):
    """Turns an article body into Markdown. Implementations are pure."""

    @abstractmethod
    def convert(self, html: str) -> str:
        pass


class BasicHtmlConverter(HtmlToMarkdownConverter):
    """Line breaks, tag stripping and the common entities; nothing else."""

    def convert(self, html: str) -> str:
        text = re.sub(r"<br\s*/?>", "\n", html, flags=re.I)
        text = re.sub(r"</?[^>]+(>|$)", "", text)
        text = text.replace("&nbsp;", " ")
        text = text.replace("&amp;", "&")
        text = text.replace("&lt;", "<")
        text = text.replace("&gt;", ">")
        return text.strip()


class SoupMarkdownConverter(HtmlToMarkdownConverter):
    """Walks the parsed document and renders the common block and inline tags."""

    def __init__(self, parser: str = "lxml"):
        self.parser = parser

    def convert(self, html: str) -> str:
        if not html or not html.strip():
            return ""
        try:
            soup = BeautifulSoup(html, self.parser)
            root = soup.body or soup
            text = self._children(root)
        except Exception as e:
            raise ConversionError(f"Could not convert article HTML: {e}") from e
        text = re.sub(r"[ \t]+\n", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    def _children(self, node: Tag) -> str:
        return "".join(self._node(child) for child in node.children)

    def _node(self, node) -> str:
        if isinstance(node, Comment):
            return ""
        if isinstance(node, NavigableString):
            return re.sub(r"\s+", " ", str(node).replace("\xa0", " "))
        if not isinstance(node, Tag):
            return ""

        name = node.name
        if name in _SKIP_TAGS:
            return ""
        if name == "br":
            return "\n"
        if name == "hr":
            return "\n\n---\n\n"
        if name in _HEADINGS:
            inner = self._children(node).strip()
            return f"\n\n{'#' * _HEADINGS[name]} {inner}\n\n" if inner else ""
        if name in _BLOCK_TAGS:
            inner = self._children(node).strip()
            return f"\n\n{inner}\n\n" if inner else ""
        if name in ("strong", "b"):
            return self._wrap(node, "**")
        if name in ("em", "i"):
            return self._wrap(node, "*")
        if name in ("del", "s", "strike"):
            return self._wrap(node, "~~")
        if name == "code":
            inner = node.get_text()
            return f"`{inner}`" if inner else ""
        if name == "pre":
            code = node.get_text().strip("\n")
            return f"\n\n```\n{code}\n```\n\n"
        if name == "a":
            return self._link(node)
        if name == "img":
            src = node.get("src", "")
            return f"![{node.get('alt', '')}]({src})" if src else ""
        if name in ("ul", "ol"):
            return f"\n\n{self._list(node)}\n\n"
        if name == "li":
            return f"\n- {self._children(node).strip()}\n"
        if name == "blockquote":
            inner = self._children(node).strip()
            quoted = "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
            return f"\n\n{quoted}\n\n"
        if name == "table":
            return f"\n\n{self._table(node)}\n\n"
        return self._children(node)

    def _wrap(self, node: Tag, marker: str) -> str:
        inner = self._children(node)
        if not inner.strip():
            return inner
        # keep surrounding spaces outside the markers
        lead = " " if inner[0].isspace() else ""
        trail = " " if inner[-1].isspace() else ""
        return f"{lead}{marker}{inner.strip()}{marker}{trail}"

    def _link(self, node: Tag) -> str:
        text = self._children(node).strip()
        href = node.get("href", "")
        if not href or href.startswith("#") or href.startswith("javascript:"):
            return text
        return f"[{text or href}]({href})"

    def _list(self, node: Tag) -> str:
        ordered = node.name == "ol"
        lines: List[str] = []
        for index, item in enumerate(node.find_all("li", recursive=False), start=1):
            bullet = f"{index}." if ordered else "-"
            body = re.sub(r"\n{2,}", "\n", self._children(item).strip())
            first, *rest = body.split("\n") if body else [""]
            lines.append(f"{bullet} {first}")
            indent = " " * (len(bullet) + 1)
            lines.extend(f"{indent}{line}" if line else "" for line in rest)
        return "\n".join(lines)

    def _table(self, node: Tag) -> str:
        rows: List[List[str]] = []
        for tr in node.find_all("tr"):
            cells = [
                self._children(cell).strip().replace("\n", " ").replace("|", "\\|")
                for cell in tr.find_all(["th", "td"], recursive=False)
            ]
            if cells:
                rows.append(cells)
        if not rows:
            return ""
        lines = [f"| {' | '.join(cells)} |" for cells in rows]
        lines.insert(1, "|" + " --- |" * len(rows[0]))
        return "\n".join(lines)


def default_converter() -> HtmlToMarkdownConverter:
    return SoupMarkdownConverter()
