from __future__ import annotations

from dataclasses import replace
from typing import List

from .model import LIKE, Bookmark

INITIAL_BOOKMARKS: List[Bookmark] = [
    Bookmark(
        id="1",
        url="https://github.com",
        title="GitHub",
        description="全球最大的代码托管平台，开发者必备工具。",
        category="开发工具",
        tags=["代码", "Git", "开源"],
        created_at=1715000000000,
        likes=124,
        dislikes=2,
        user_vote=LIKE,
    ),
    Bookmark(
        id="2",
        url="https://dribbble.com",
        title="Dribbble",
        description="设计师灵感社区，发现顶尖设计作品。",
        category="设计灵感",
        tags=["UI", "UX", "设计"],
        created_at=1715000100000,
        likes=89,
        dislikes=5,
        user_vote=None,
    ),
    Bookmark(
        id="3",
        url="https://developer.mozilla.org",
        title="MDN Web Docs",
        description="Web 开发技术的权威文档资源。",
        category="学习资源",
        tags=["HTML", "CSS", "JS", "文档"],
        created_at=1715000200000,
        likes=256,
        dislikes=0,
        user_vote=LIKE,
    ),
    Bookmark(
        id="4",
        url="https://chatgpt.com",
        title="ChatGPT",
        description="OpenAI 开发的先进 AI 聊天机器人。",
        category="人工智能",
        tags=["AI", "LLM", "助手"],
        created_at=1715000300000,
        likes=999,
        dislikes=12,
        user_vote=None,
    ),
]


def seed_bookmarks() -> List[Bookmark]:
    # Fresh list each call; records are frozen but tag lists are not.
    return [replace(b, tags=list(b.tags)) for b in INITIAL_BOOKMARKS]
