from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# --- Data models ---
@dataclass
class Settings:
    # user-visible
    note_folder: str = "Wallabag"
    instance_url: str = "https://app.wallabag.it"
    client_id: str = ""
    client_secret: str = ""
    username: str = ""
    password: str = ""
    only_starred: bool = True
    # hidden
    access_token: str = ""
    refresh_token: str = ""
    token_expiry: float = 0.0
    since: int = 0

    def credentials(self) -> Credentials:
        return Credentials(
            instance_url=self.instance_url.rstrip("/"),
            client_id=self.client_id,
            client_secret=self.client_secret,
            username=self.username,
            password=self.password,
        )


@dataclass(frozen=True)
class Credentials:
    instance_url: str
    client_id: str
    client_secret: str
    username: str
    password: str

    def missing(self) -> List[str]:
        """Names of the fields that are still empty."""
        return [name for name, value in vars(self).items() if not value]


@dataclass(frozen=True)
class TokenState:
    access_token: str
    refresh_token: str
    expires_at: float


@dataclass
class RemoteArticle:
    id: Any
    title: str
    url: str
    created_at: str
    content: str = ""
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> RemoteArticle:
        """Build an article from one `_embedded.items` entry."""
        return cls(
            id=item.get("id"),
            title=item.get("title") or "",
            url=item.get("url") or "",
            created_at=item.get("created_at") or "",
            content=item.get("content") or "",
            tags=[t["label"] for t in item.get("tags") or [] if isinstance(t, dict) and t.get("label")],
        )


@dataclass(frozen=True)
class Note:
    path: str
    content: str


@dataclass
class FetchBatch:
    articles: List[RemoteArticle]
    watermark: int
    pages: int = 0


@dataclass
class SyncResult:
    status: str  # completed, failed, skipped
    articles: int = 0
    created: int = 0
    updated: int = 0
    watermark: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "completed"
