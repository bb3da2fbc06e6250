from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import ENTRIES_ENDPOINT, HTTP_TIMEOUT, PER_PAGE
from .datamodels import FetchBatch, RemoteArticle
from .errors import FetchError
from .tokens import TokenStore

logger = logging.getLogger("wallabag_notes")


class ArticleFetcher:
    def __init__(
        self,
        instance_url: str,
        token_store: TokenStore,
        session: requests.Session,
        notify: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time,
        per_page: int = PER_PAGE,
        max_pages: Optional[int] = None,
    ):
        self.instance_url = instance_url.rstrip("/")
        self.token_store = token_store
        self.session = session
        self.notify = notify
        self.clock = clock
        self.per_page = per_page
        self.max_pages = max_pages

    def fetch_since(self, since: int, only_starred: bool) -> FetchBatch:
        """Fetch every entry changed after `since`, following `_links.next`.

        The returned watermark is taken before the first request so entries
        changed while paging are picked up by the next sync.
        """
        watermark = int(self.clock())
        if self.notify:
            self.notify("Fetching wallabag articles...")

        articles: List[RemoteArticle] = []
        page = 1
        while True:
            if self.max_pages is not None and page > self.max_pages:
                raise FetchError(f"Gave up after {self.max_pages} pages")
            data = self._fetch_page(since, page, only_starred)
            items = (data.get("_embedded") or {}).get("items") or []
            articles.extend(RemoteArticle.from_api(item) for item in items)
            logger.debug("Page %d returned %d entries", page, len(items))
            if not (data.get("_links") or {}).get("next"):
                break
            page += 1

        logger.info("Fetched %d entries since %s in %d page(s)", len(articles), since, page)
        return FetchBatch(articles=articles, watermark=watermark, pages=page)

    def _fetch_page(self, since: int, page: int, only_starred: bool) -> Dict[str, Any]:
        url = f"{self.instance_url}{ENTRIES_ENDPOINT}"
        params: Dict[str, Any] = {"since": since, "page": page, "perPage": self.per_page}
        if only_starred:
            params["starred"] = 1
        headers = {"Authorization": f"Bearer {self.token_store.access_token}"}
        try:
            resp = self.session.get(url, params=params, headers=headers, timeout=HTTP_TIMEOUT)
        except requests.RequestException as e:
            raise FetchError(f"Request for page {page} failed: {e}") from e
        if not resp.ok:
            raise FetchError(
                f"Failed to fetch articles (page {page})",
                status_code=resp.status_code,
                body=resp.text,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError(f"Page {page} is not valid JSON: {e}", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise FetchError(f"Page {page} has an unexpected shape", status_code=resp.status_code)
        return data
