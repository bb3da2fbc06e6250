from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from .converter import HtmlToMarkdownConverter, default_converter
from .datamodels import Note, RemoteArticle
from .vault import NoteStore

logger = logging.getLogger("wallabag_notes")

UNSAFE_TITLE_CHARS = re.compile(r'[\\/:*?"<>|]')


def sanitize_title(title: str) -> str:
    return UNSAFE_TITLE_CHARS.sub("-", title)


def note_path(article: RemoteArticle, folder: str) -> str:
    return f"{folder}/{sanitize_title(article.title)}.md"


class NoteReconciler:
    """Writes one note per article, keyed by the sanitized title.

    Two articles whose titles sanitize to the same name share a path; the one
    written last wins.
    """

    def __init__(self, store: NoteStore, converter: Optional[HtmlToMarkdownConverter] = None):
        self.store = store
        self.converter = converter or default_converter()

    def render(self, article: RemoteArticle) -> str:
        tags = ", ".join(label.replace(" ", "-") for label in article.tags)
        body = self.converter.convert(article.content) if article.content else ""
        return (
            "---\n"
            f"url: {article.url}\n"
            f"tags: {tags}\n"
            f"created_at: {article.created_at}\n"
            f"wallabag id: {article.id}\n"
            "---\n"
            "\n"
            f"# {article.title}\n"
            "\n"
            f"{body}\n"
        )

    def build(self, article: RemoteArticle, folder: str) -> Note:
        return Note(path=note_path(article, folder), content=self.render(article))

    def reconcile(self, article: RemoteArticle, folder: str) -> Tuple[Note, str]:
        """Create the note, or overwrite it entirely if one is already there."""
        note = self.build(article, folder)
        if self.store.is_file(note.path):
            self.store.modify(note.path, note.content)
            action = "updated"
        else:
            self.store.create(note.path, note.content)
            action = "created"
        logger.debug("%s %s (wallabag id %s)", action.capitalize(), note.path, article.id)
        return note, action
