from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Tuple

from rich.logging import RichHandler

# Client libraries that log every request at INFO; enrichment would drown the CLI output.
NOISY_LOGGERS: Tuple[str, ...] = ("httpx", "httpcore", "openai")

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    no_color: bool = False
    quiet: Tuple[str, ...] = NOISY_LOGGERS


def use_rich(cfg: LogConfig) -> bool:
    if cfg.no_color or os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def setup_logging(cfg: LogConfig) -> None:
    level = getattr(logging, cfg.level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    if use_rich(cfg):
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_time=False, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    handler.setLevel(level)
    root.addHandler(handler)

    # Request chatter only when debugging.
    lib_level = logging.NOTSET if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in cfg.quiet:
        logging.getLogger(name).setLevel(lib_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
