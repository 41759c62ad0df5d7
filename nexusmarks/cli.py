from __future__ import annotations

import argparse
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import Settings, load_settings
from .enrich import Enricher
from .form import AddBookmarkForm, FormError
from .log import LogConfig, get_logger, setup_logging
from .model import ALL_CATEGORIES, DISLIKE, LIKE, Bookmark
from .session import Session
from .store import BookmarkStore
from .theme import THEME_MODES

log = get_logger(__name__)

_VOTE_MARK = {LIKE: "👍", DISLIKE: "👎", None: ""}


def main(argv: List[str] | None = None, *, console: Optional[Console] = None) -> int:
    p = argparse.ArgumentParser(
        prog="nexusmarks",
        description="Personal bookmark manager with local storage and AI-assisted metadata.",
    )
    p.add_argument("-V", "--version", action="version", version=f"nexusmarks {__version__}")
    p.add_argument("--config", default=None, help="YAML config file (optional). Env vars override defaults.")
    p.add_argument("--state-dir", default=None, help="Directory holding the local store (overrides env/config).")
    p.add_argument("--log-level", default=None, help="DEBUG/INFO/WARN/ERROR (overrides env/config).")
    p.add_argument("--no-color", action="store_true", help="Disable colored output.")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List bookmarks, optionally filtered.")
    ls.add_argument("-q", "--query", default="", help="Case-insensitive search over title, description, url and tags.")
    ls.add_argument("-c", "--category", default=ALL_CATEGORIES, help=f"Only this category (default: {ALL_CATEGORIES}).")

    sub.add_parser("categories", help="List categories in first-seen order.")

    add = sub.add_parser("add", help="Add a bookmark.")
    add.add_argument("url", help="Bookmark URL.")
    add.add_argument("--title", default=None)
    add.add_argument("--description", default=None)
    add.add_argument("--category", default=None)
    add.add_argument("--tags", default=None, help="Comma or space separated tags.")
    add.add_argument("--analyze", action="store_true", help="Pre-fill metadata with AI analysis.")

    rm = sub.add_parser("delete", help="Delete a bookmark permanently.")
    rm.add_argument("id")
    rm.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")

    like = sub.add_parser("like", help="Toggle your like on a bookmark.")
    like.add_argument("id")
    dislike = sub.add_parser("dislike", help="Toggle your dislike on a bookmark.")
    dislike.add_argument("id")

    th = sub.add_parser("theme", help="Show or change the display theme.")
    th.add_argument("--cycle", action="store_true", help="system -> light -> dark -> system.")
    th.add_argument("--set", dest="set_mode", choices=THEME_MODES, default=None)

    args = p.parse_args(argv)
    cfg = load_settings(args.config)
    if args.state_dir:
        cfg.state_dir = args.state_dir
    if args.log_level:
        cfg.log_level = args.log_level
    if args.no_color:
        cfg.no_color = True
    setup_logging(LogConfig(level=cfg.log_level, no_color=cfg.no_color))

    out = console or Console(no_color=cfg.no_color)
    session = Session.open(BookmarkStore.at(cfg.state_dir))

    if args.cmd == "list":
        return _cmd_list(args, session, out)
    if args.cmd == "categories":
        for c in session.categories:
            out.print(c, markup=False)
        return 0
    if args.cmd == "add":
        return _cmd_add(args, session, cfg, out)
    if args.cmd == "delete":
        return _cmd_delete(args, session, out)
    if args.cmd in (LIKE, DISLIKE):
        return _cmd_vote(args.id, args.cmd, session, out)
    if args.cmd == "theme":
        return _cmd_theme(args, session, out)
    return 2


def _cmd_list(args, session: Session, out: Console) -> int:
    session.query = args.query
    session.active_category = args.category
    rows = session.visible
    if args.query:
        out.print(f"{len(rows)} 结果", markup=False)
    if not rows:
        out.print("没有找到相关书签", markup=False)
        return 0
    out.print(_bookmark_table(rows))
    return 0


def _bookmark_table(rows: List[Bookmark]) -> Table:
    t = Table(show_lines=False)
    t.add_column("ID", no_wrap=True)
    t.add_column("Title")
    t.add_column("Category")
    t.add_column("Tags")
    t.add_column("URL", overflow="fold")
    t.add_column("👍", justify="right")
    t.add_column("👎", justify="right")
    t.add_column("Vote")
    for b in rows:
        # User-supplied text is shown literally, never parsed as markup.
        t.add_row(
            Text(b.id),
            Text(b.title),
            Text(b.category),
            Text(", ".join(b.tags)),
            Text(b.url),
            str(b.likes),
            str(b.dislikes),
            _VOTE_MARK.get(b.user_vote, ""),
        )
    return t


def _cmd_add(args, session: Session, cfg: Settings, out: Console) -> int:
    form = AddBookmarkForm()
    form.open()
    form.url = args.url

    if args.analyze:
        enricher = Enricher(cfg)
        try:
            if form.start_analysis(enricher) is not None:
                with out.status("分析中..."):
                    form.wait_analysis()
        finally:
            enricher.shutdown()
        notice = form.take_notice()
        if notice:
            out.print(notice, style="yellow", markup=False)

    if args.title is not None:
        form.title = args.title
    if args.description is not None:
        form.description = args.description
    if args.category is not None:
        form.category = args.category
    if args.tags is not None:
        form.tags_text = args.tags

    try:
        data = form.submit()
    except FormError as e:
        log.error("Cannot add bookmark: %s", e)
        return 2
    bm = session.add(data)
    out.print(_bookmark_table([bm]))
    return 0


def _cmd_delete(args, session: Session, out: Console) -> int:
    bm = session.get(args.id)
    if bm is None:
        log.error("No bookmark with id %s", args.id)
        return 1
    if not args.yes and not Confirm.ask(f"确定要删除这个收藏吗？ ({escape(bm.title)})", console=out):
        out.print("Cancelled.", markup=False)
        return 1
    session.delete(bm.id)
    out.print(f"Deleted {bm.id}", markup=False)
    return 0


def _cmd_vote(bookmark_id: str, vote: str, session: Session, out: Console) -> int:
    bm = session.vote(bookmark_id, vote)
    if bm is None:
        log.error("No bookmark with id %s", bookmark_id)
        return 1
    out.print(f"{bm.id}: likes={bm.likes} dislikes={bm.dislikes} vote={bm.user_vote or 'none'}", markup=False)
    return 0


def _cmd_theme(args, session: Session, out: Console) -> int:
    if args.set_mode:
        session.set_theme(args.set_mode)
    elif args.cycle:
        session.cycle_theme()
    out.print(f"theme={session.theme.mode} effective={session.theme.effective}", markup=False)
    return 0
