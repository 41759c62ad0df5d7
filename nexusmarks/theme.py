from __future__ import annotations

import os
from typing import Callable, List, Optional

LIGHT = "light"
DARK = "dark"
SYSTEM = "system"
THEME_MODES = (LIGHT, DARK, SYSTEM)

_CYCLE = {SYSTEM: LIGHT, LIGHT: DARK, DARK: SYSTEM}


def next_theme(mode: str) -> str:
    return _CYCLE.get(mode, LIGHT)


def resolve_theme(mode: str, system_is_dark: bool) -> str:
    if mode == SYSTEM:
        return DARK if system_is_dark else LIGHT
    return mode


def detect_system_dark() -> bool:
    """Host light/dark signal.

    NEXUS_SYSTEM_THEME wins when set; otherwise COLORFGBG ("fg;bg") is read as
    a terminal background hint, where bg 0-6 and 8 are dark colours.
    """
    explicit = (os.getenv("NEXUS_SYSTEM_THEME") or "").strip().lower()
    if explicit in (LIGHT, DARK):
        return explicit == DARK
    fgbg = os.getenv("COLORFGBG") or ""
    bg = fgbg.split(";")[-1].strip()
    if bg.isdigit():
        return int(bg) in (0, 1, 2, 3, 4, 5, 6, 8)
    return False


class ThemeController:
    """Tracks the preference and the host signal; reports the effective theme.

    Listeners get the effective theme whenever it changes, either because the
    preference changed or because the host signal flipped while the
    preference is SYSTEM.
    """

    def __init__(self, mode: str = SYSTEM, *, system_is_dark: Optional[bool] = None):
        if mode not in THEME_MODES:
            raise ValueError(f"theme must be one of {THEME_MODES}, got {mode!r}")
        self.mode = mode
        self.system_is_dark = detect_system_dark() if system_is_dark is None else system_is_dark
        self._listeners: List[Callable[[str], None]] = []

    @property
    def effective(self) -> str:
        return resolve_theme(self.mode, self.system_is_dark)

    def subscribe(self, fn: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(fn)

        def _unsubscribe() -> None:
            if fn in self._listeners:
                self._listeners.remove(fn)

        return _unsubscribe

    def set_mode(self, mode: str) -> str:
        if mode not in THEME_MODES:
            raise ValueError(f"theme must be one of {THEME_MODES}, got {mode!r}")
        before = self.effective
        self.mode = mode
        self._notify_if_changed(before)
        return self.effective

    def cycle(self) -> str:
        self.set_mode(next_theme(self.mode))
        return self.mode

    def on_system_change(self, is_dark: bool) -> str:
        before = self.effective
        self.system_is_dark = is_dark
        if self.mode == SYSTEM:
            self._notify_if_changed(before)
        return self.effective

    def _notify_if_changed(self, before: str) -> None:
        after = self.effective
        if after == before:
            return
        for fn in list(self._listeners):
            fn(after)
