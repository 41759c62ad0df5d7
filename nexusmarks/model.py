from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

LIKE = "like"
DISLIKE = "dislike"
VOTE_TYPES = (LIKE, DISLIKE)

UNCATEGORIZED = "未分类"
ALL_CATEGORIES = "全部"


@dataclass(frozen=True)
class Bookmark:
    id: str
    url: str
    title: str
    description: str = ""
    category: str = UNCATEGORIZED
    tags: List[str] = field(default_factory=list)
    created_at: int = 0  # epoch milliseconds
    likes: int = 0
    dislikes: int = 0
    user_vote: Optional[str] = None  # LIKE | DISLIKE | None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "likes": self.likes,
            "dislikes": self.dislikes,
            "userVote": self.user_vote,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Bookmark":
        """Build a record from its persisted JSON form.

        Raises KeyError/ValueError/TypeError when required fields are missing
        or malformed. Vote fields are expected to be present already; the store
        fills them in for legacy records before calling this.
        """
        if not isinstance(data, dict):
            raise TypeError(f"bookmark record must be an object, got {type(data).__name__}")
        vote = data["userVote"]
        if vote is not None and vote not in VOTE_TYPES:
            raise ValueError(f"invalid userVote: {vote!r}")
        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError("tags must be a list")
        return Bookmark(
            id=str(data["id"]),
            url=str(data["url"]),
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            category=str(data.get("category") or UNCATEGORIZED),
            tags=[str(t) for t in tags],
            created_at=int(data["createdAt"]),
            likes=int(data["likes"]),
            dislikes=int(data["dislikes"]),
            user_vote=vote,
        )


@dataclass(frozen=True)
class NewBookmark:
    """Input of the add operation: everything a user supplies for a record."""

    url: str
    title: str = ""
    description: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
